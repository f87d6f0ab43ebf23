"""
Materialization of response envelopes into resources and collections.

Given an Envelope and an entity type name the factory produces:

- ``None`` (``NotFound``) for a missing envelope, a soft 404 or an empty body,
- a Collection when the payload carries a ``results`` key, even if empty,
- a single Resource otherwise.

Each record is deep-copied, renamed with the entity's rename table and has its
associations materialized recursively before being wrapped.
"""

import copy
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Type, Union

from etsy_client.api.envelope import Envelope
from etsy_client.resources.base import Resource, registered_type
from etsy_client.resources.collection import Collection
from etsy_client.utils.exceptions import ValidationError
from etsy_client.utils.logger import get_logger


logger = get_logger(__name__)


@dataclass(frozen=True)
class Found:
    """Envelope materialized into a Resource or Collection."""
    value: Union[Resource, Collection]
    uri: Optional[str] = None


@dataclass(frozen=True)
class NotFound:
    """Envelope that carries nothing to materialize (soft 404 or empty body)."""
    uri: Optional[str] = None
    error: Optional[str] = None


Lookup = Union[Found, NotFound]


def _find_key(record: Mapping[str, Any], name: str) -> Optional[str]:
    target = name.lower()
    for key in record:
        if key.lower() == target:
            return key
    return None


class ResourceFactory:
    """Builds resources for one session."""

    def __init__(self, session: Any = None):
        """
        Args:
            session: Client attached to every resource built, so that request
                helpers can re-enter the API
        """
        self.session = session

    def resource_class(self, entity_type: str) -> Type[Resource]:
        """Registered class for ``entity_type``; the generic Resource otherwise."""
        return registered_type(entity_type) or Resource

    def resolve(self, envelope: Optional[Envelope], entity_type: str) -> Lookup:
        """
        Materialize an envelope into an explicit Found / NotFound result.

        Raises:
            ValidationError: If the payload is not a JSON object or array
        """
        if envelope is None:
            return NotFound()
        if envelope.is_soft_error:
            return NotFound(uri=envelope.uri, error=envelope.error)
        if envelope.data is None:
            return NotFound(uri=envelope.uri)

        if envelope.has_results:
            return Found(self.create_collection(envelope, entity_type), envelope.uri)
        if isinstance(envelope.data, list):
            return Found(
                Collection(self.session, entity_type, envelope.uri,
                           self.create_collection_resources(envelope.data, entity_type)),
                envelope.uri
            )
        if isinstance(envelope.data, Mapping):
            return Found(self.create_resource(envelope.data, entity_type), envelope.uri)

        raise ValidationError(
            f"Cannot materialize {entity_type} from {type(envelope.data).__name__} payload",
            field="data",
            value=envelope.data
        )

    def materialize(self, envelope: Optional[Envelope],
                    entity_type: str) -> Optional[Union[Resource, Collection]]:
        """Materialize an envelope; None means not found."""
        result = self.resolve(envelope, entity_type)
        if isinstance(result, NotFound):
            return None
        return result.value

    def create_collection(self, envelope: Envelope, entity_type: str) -> Collection:
        """Collection for a ``results`` payload; ``results: null`` yields an empty one."""
        records = envelope.get("results") or []
        collection = Collection(
            self.session,
            entity_type,
            envelope.uri,
            count=envelope.get("count")
        )
        collection.extend(self.create_collection_resources(records, entity_type))
        logger.debug(f"Materialized {len(collection)} {entity_type} resources from {envelope.uri}")
        return collection

    def create_collection_resources(self, records: List[Any], entity_type: str) -> List[Resource]:
        """Materialize each record independently as ``entity_type``."""
        return [self.create_resource(record, entity_type) for record in records]

    def create_resource(self, record: Mapping[str, Any], entity_type: str) -> Resource:
        """Materialize one record; the input mapping is left untouched."""
        return self._build(copy.deepcopy(dict(record)), entity_type)

    def _build(self, record: Dict[str, Any], entity_type: str) -> Resource:
        resource_class = self.resource_class(entity_type)
        record = self._rename_properties(resource_class, record)
        record = self._link_associations(resource_class, record)
        if resource_class is Resource:
            return Resource(self.session, record, entity_type=entity_type)
        return resource_class(self.session, record)

    @staticmethod
    def _rename_properties(resource_class: Type[Resource], record: Dict[str, Any]) -> Dict[str, Any]:
        for wire_name, canonical_name in resource_class.renames.items():
            key = _find_key(record, wire_name)
            if key is not None:
                record[canonical_name] = record.pop(key)
        return record

    def _link_associations(self, resource_class: Type[Resource],
                           record: Dict[str, Any]) -> Dict[str, Any]:
        for field, associated_type in resource_class.associations.items():
            key = _find_key(record, field)
            if key is None:
                continue
            value = record[key]
            if isinstance(value, list):
                record[key] = [
                    self._build(item, associated_type) if isinstance(item, dict) else item
                    for item in value
                ]
            elif isinstance(value, dict):
                record[key] = self._build(value, associated_type)
        return record

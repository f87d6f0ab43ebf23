"""
Base resource object.

A Resource wraps the property bag of one API record. Field names are matched
case-insensitively because the API is inconsistent about casing: the bag is
keyed by the lower-cased name and a separate casing table remembers the first
spelling seen, which is what ``to_array`` emits.

Subclasses declare:

- ``associations``: field name -> entity type the field materializes as
- ``renames``: wire field name -> canonical field name
- computed fields, via the ``computed_field`` decorator

Every resource holds an explicit reference to its session (the owning
``Etsy`` client), which exposes ``dispatcher`` and ``factory``; request
helpers re-enter the API through it.
"""

import json
from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional, Tuple, Type

from etsy_client.utils.exceptions import ConfigurationError
from etsy_client.utils.logger import get_logger


logger = get_logger(__name__)

_REGISTRY: Dict[str, Type["Resource"]] = {}


def computed_field(*names: str) -> Callable:
    """
    Register a method as the accessor for one or more fields.

    The method is called as ``method(resource, raw_value)`` whenever one of
    the fields is read and present in the bag; its return value replaces the
    raw value. ``to_array`` always serializes the raw value.
    """
    def decorator(func: Callable) -> Callable:
        func.__computed_fields__ = tuple(name.lower() for name in names) or (func.__name__.lower(),)
        return func
    return decorator


def registered_type(entity_type: str) -> Optional[Type["Resource"]]:
    """Return the Resource subclass registered under ``entity_type``."""
    return _REGISTRY.get(entity_type)


def _expand(value: Any) -> Any:
    if isinstance(value, Resource):
        return value.to_array()
    if isinstance(value, (list, tuple)):
        return [_expand(item) for item in value]
    if callable(getattr(type(value), "to_array", None)):
        return value.to_array()
    if isinstance(value, Mapping):
        return dict(value)
    return value


class Resource:
    """Generic materialized API entity."""

    associations: Dict[str, str] = {}
    renames: Dict[str, str] = {}
    _computed: Dict[str, Callable] = {}

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        computed = dict(cls._computed)
        for attribute in cls.__dict__.values():
            for name in getattr(attribute, "__computed_fields__", ()):
                computed[name] = attribute
        cls._computed = computed
        _REGISTRY[cls.__name__] = cls

    def __init__(self, session: Any = None,
                 properties: Optional[Mapping[str, Any]] = None,
                 entity_type: Optional[str] = None):
        """
        Wrap ``properties`` as this resource's bag.

        Args:
            session: Owning client exposing ``dispatcher`` and ``factory``
            properties: Already materialized field values
            entity_type: Type label; defaults to the class name
        """
        self._session = session
        self._entity_type = entity_type or type(self).__name__
        self._properties: Dict[str, Any] = {}
        self._casing: Dict[str, str] = {}
        for key, value in (properties or {}).items():
            self.set(key, value)

    @property
    def entity_type(self) -> str:
        return self._entity_type

    @property
    def session(self) -> Any:
        return self._session

    # Property access

    def get(self, name: str, default: Any = None) -> Any:
        """Read a field case-insensitively, applying any computed accessor."""
        key = name.lower()
        if key not in self._properties:
            return default
        value = self._properties[key]
        accessor = self._computed.get(key)
        if accessor is not None:
            return accessor(self, value)
        return value

    def raw(self, name: str, default: Any = None) -> Any:
        """Read a field case-insensitively without computed accessors."""
        return self._properties.get(name.lower(), default)

    def set(self, name: str, value: Any) -> None:
        """Assign a field, reusing the casing of an existing matching key."""
        key = name.lower()
        if key not in self._casing:
            self._casing[key] = name
        self._properties[key] = value

    def has(self, name: str) -> bool:
        return name.lower() in self._properties

    def keys(self) -> List[str]:
        return [self._casing[key] for key in self._properties]

    def items(self) -> Iterator[Tuple[str, Any]]:
        for key, value in self._properties.items():
            yield self._casing[key], value

    def __getattr__(self, name: str) -> Any:
        # Only reached for names that are not real attributes
        if name.startswith("_"):
            raise AttributeError(name)
        return self.get(name)

    def __setattr__(self, name: str, value: Any) -> None:
        if name.startswith("_"):
            object.__setattr__(self, name, value)
        else:
            self.set(name, value)

    def __getitem__(self, name: str) -> Any:
        return self.get(name)

    def __setitem__(self, name: str, value: Any) -> None:
        self.set(name, value)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.has(name)

    def __repr__(self) -> str:
        return f"<{self.entity_type} {self.to_array()!r}>"

    # Serialization

    def to_array(self) -> Dict[str, Any]:
        """Return the properties as plain nested dicts and lists."""
        return {self._casing[key]: _expand(value) for key, value in self._properties.items()}

    def to_json(self) -> str:
        """Return the properties JSON encoded."""
        return json.dumps(self.to_array(), default=str)

    # Request templates

    def _require_session(self) -> Any:
        if self._session is None:
            raise ConfigurationError(
                f"{self.entity_type} resource is not attached to a client session"
            )
        return self._session

    def request(self, method: str, url: str, entity_type: str,
                params: Optional[Mapping[str, Any]] = None) -> Any:
        """
        Dispatch a call and materialize the response as ``entity_type``.

        Returns:
            Resource, Collection, or None when the API reported not found
        """
        session = self._require_session()
        envelope = session.dispatcher.request(method, url, params)
        return session.factory.materialize(envelope, entity_type)

    def create_request(self, url: str, data: Mapping[str, Any],
                       method: str = "POST") -> "Resource":
        """Perform a create call and refresh this resource's known fields from the result."""
        result = self.request(method, url, self.entity_type, data)
        self._merge_known(result)
        return self

    def update_request(self, url: str, data: Mapping[str, Any],
                       method: str = "PUT") -> "Resource":
        """
        Perform an update call (PUT by default) and refresh this resource in place.

        Only fields already present on this resource are refreshed; fields the
        response adds are ignored. The caller's reference stays valid.
        """
        result = self.request(method, url, self.entity_type, data)
        self._merge_known(result)
        return self

    def delete_request(self, url: str, data: Optional[Mapping[str, Any]] = None) -> bool:
        """
        Perform a DELETE call.

        Returns True when the response carries no error. A resource that never
        existed is reported the same way as one that was deleted whenever the
        API answers 200 for both, and a soft 404 returns False; callers that
        need to tell these apart must look the resource up first.
        """
        session = self._require_session()
        envelope = session.dispatcher.delete(url, data)
        return not envelope.is_soft_error

    def _merge_known(self, result: Any) -> None:
        if not isinstance(result, Resource):
            logger.debug(f"No {self.entity_type} returned, keeping existing fields")
            return
        for key, value in result._properties.items():
            if key in self._properties:
                self._properties[key] = value

    @staticmethod
    def _with_context(result: Any, **fields: Any) -> Any:
        """Backfill contextual ids into a Resource or every item of a Collection."""
        if result is None:
            return None
        if isinstance(result, Resource):
            for name, value in fields.items():
                result.set(name, value)
            return result
        return result.append(fields)

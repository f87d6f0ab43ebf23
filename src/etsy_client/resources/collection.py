"""
Collection of resources returned by paginated ``results`` endpoints.
"""

import json
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Union

from etsy_client.resources.base import Resource
from etsy_client.utils.exceptions import ConfigurationError, ValidationError
from etsy_client.utils.logger import get_logger
from etsy_client.utils.request import get_parameters, with_parameters


logger = get_logger(__name__)


class Collection:
    """
    Ordered sequence of resources of one entity type.

    Keeps the URI it was fetched from so further pages can be requested
    lazily with ``next_page``, ``iter_all`` or ``load_all``. Pagination follows
    the ``limit``/``offset`` parameters of that URI (Etsy defaults to 25).
    """

    DEFAULT_LIMIT = 25

    def __init__(self, session: Any, entity_type: str, uri: Optional[str] = None,
                 data: Optional[Iterable[Resource]] = None,
                 count: Optional[int] = None):
        """
        Initialize collection.

        Args:
            session: Owning client exposing ``dispatcher`` and ``factory``
            entity_type: Entity type of every element
            uri: URI the collection was fetched from
            data: Materialized resources
            count: Total number of results reported by the API
        """
        self._session = session
        self.entity_type = entity_type
        self.uri = uri
        self.count = count
        self.data: List[Resource] = []
        self._context: Dict[str, Any] = {}
        if data:
            self.extend(data)

    def extend(self, resources: Iterable[Resource]) -> None:
        """Add resources, enforcing the collection's entity type."""
        for resource in resources:
            if not isinstance(resource, Resource) or resource.entity_type != self.entity_type:
                raise ValidationError(
                    f"Collection of {self.entity_type} cannot hold {resource!r}",
                    field="data"
                )
            self.data.append(resource)

    def __iter__(self) -> Iterator[Resource]:
        return iter(self.data)

    def __len__(self) -> int:
        return len(self.data)

    def __getitem__(self, index: Union[int, slice]) -> Union[Resource, List[Resource]]:
        return self.data[index]

    def __repr__(self) -> str:
        return f"<Collection {self.entity_type} x{len(self.data)} uri={self.uri!r}>"

    def first(self) -> Optional[Resource]:
        """First element, or None for an empty collection."""
        return self.data[0] if self.data else None

    def append(self, fields: Mapping[str, Any]) -> "Collection":
        """
        Merge ``fields`` into every element, in place.

        Used to backfill identifiers the API omits per item, such as the
        ``shop_id`` of a shop's receipts. Pages fetched later through this
        collection receive the same fields.
        """
        for resource in self.data:
            for name, value in fields.items():
                resource.set(name, value)
        self._context.update(fields)
        return self

    def to_array(self) -> List[Dict[str, Any]]:
        return [resource.to_array() for resource in self.data]

    def to_json(self) -> str:
        return json.dumps(self.to_array(), default=str)

    # Pagination

    @property
    def limit(self) -> int:
        return self._int_parameter("limit", self.DEFAULT_LIMIT)

    @property
    def offset(self) -> int:
        return self._int_parameter("offset", 0)

    @property
    def has_more(self) -> bool:
        """Whether the API has results beyond this page."""
        if not self.data:
            return False
        if self.count is not None:
            return self.offset + len(self.data) < self.count
        return len(self.data) >= self.limit

    def next_page(self) -> Optional["Collection"]:
        """Fetch the page after this one, or None when there is none."""
        if not self.uri or not self.has_more:
            return None
        return self._fetch_page(self.offset + self.limit)

    def previous_page(self) -> Optional["Collection"]:
        """Fetch the page before this one, or None on the first page."""
        if not self.uri or self.offset <= 0:
            return None
        return self._fetch_page(max(0, self.offset - self.limit))

    def iter_all(self) -> Iterator[Resource]:
        """Yield every resource, fetching following pages only as needed."""
        page: Optional[Collection] = self
        while page is not None:
            yield from list(page.data)
            page = page.next_page()

    def load_all(self) -> "Collection":
        """Fetch all following pages and add their resources to this collection."""
        page = self.next_page()
        while page is not None:
            self.extend(page.data)
            page = page.next_page()
        return self

    def _int_parameter(self, name: str, default: int) -> int:
        if not self.uri:
            return default
        value = get_parameters(self.uri).get(name)
        try:
            return int(value) if value not in (None, "") else default
        except ValueError:
            return default

    def _fetch_page(self, offset: int) -> Optional["Collection"]:
        if self._session is None:
            raise ConfigurationError("Collection is not attached to a client session")

        dispatcher = self._session.dispatcher
        uri = with_parameters(self.uri, {"limit": self.limit, "offset": offset})
        logger.debug(f"Fetching {self.entity_type} page at offset {offset}")

        page = self._session.factory.materialize(
            dispatcher.get(dispatcher.to_relative(uri)),
            self.entity_type
        )
        if not isinstance(page, Collection):
            return None
        if self._context:
            page.append(self._context)
        return page

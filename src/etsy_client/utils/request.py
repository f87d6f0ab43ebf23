"""
HTTP request helpers: query-string building and parsing.
"""

from typing import Any, Dict, Mapping, Optional
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit


def _flatten(value: Any) -> Any:
    # Etsy expects array parameters as comma separated values
    if isinstance(value, (list, tuple, set)):
        return ",".join(str(_flatten(item)) for item in value)
    if isinstance(value, bool):
        return "true" if value else "false"
    return value


def prepare_parameters(params: Optional[Mapping[str, Any]]) -> str:
    """
    Serialize parameters into a query string.

    ``None`` values and empty sequences are dropped; sequences become
    comma separated lists and booleans ``true``/``false``.
    """
    if not params:
        return ""

    pairs = []
    for key, value in params.items():
        if value is None:
            continue
        if isinstance(value, (list, tuple, set)) and not value:
            continue
        pairs.append((key, _flatten(value)))
    return urlencode(pairs)


def prepare_form(params: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    """Flatten parameters for a form-encoded body."""
    if not params:
        return {}
    return {
        key: _flatten(value)
        for key, value in params.items()
        if value is not None
    }


def get_parameters(uri: str) -> Dict[str, str]:
    """Return the query parameters of ``uri`` as a dict."""
    return dict(parse_qsl(urlsplit(uri).query, keep_blank_values=True))


def with_parameters(uri: str, params: Mapping[str, Any]) -> str:
    """Return ``uri`` with its query parameters updated by ``params``."""
    parts = urlsplit(uri)
    query = dict(parse_qsl(parts.query, keep_blank_values=True))
    query.update({key: str(value) for key, value in params.items()})
    return urlunsplit((parts.scheme, parts.netloc, parts.path, urlencode(query), parts.fragment))


def append_query(uri: str, params: Optional[Mapping[str, Any]]) -> str:
    """Append serialized ``params`` to ``uri``."""
    query = prepare_parameters(params)
    if not query:
        return uri
    separator = "&" if "?" in uri else "?"
    return f"{uri}{separator}{query}"

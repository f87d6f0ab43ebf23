"""
Normalized response envelope produced by the request dispatcher.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass
class Envelope:
    """
    Result of one dispatched call, stamped with the requested URI.

    A successful call carries the decoded JSON in ``data`` (``None`` for an
    empty body). A soft not-found carries ``error`` and ``status_code`` 404
    instead; hard failures never produce an envelope.
    """

    uri: str
    data: Any = None
    status_code: int = 200
    error: Optional[str] = None
    headers: Dict[str, str] = field(default_factory=dict)

    @property
    def is_soft_error(self) -> bool:
        return self.error is not None

    @property
    def has_results(self) -> bool:
        """True when the payload is a paginated ``results`` listing."""
        return isinstance(self.data, dict) and "results" in self.data

    def get(self, key: str, default: Any = None) -> Any:
        """Read a top-level field of the payload."""
        if isinstance(self.data, dict):
            return self.data.get(key, default)
        return default

    @classmethod
    def not_found(cls, uri: str, error: Optional[str]) -> "Envelope":
        return cls(uri=uri, error=error or "", status_code=404)

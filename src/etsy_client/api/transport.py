"""
HTTP transport used by the OAuth client and the request dispatcher.

The core never talks to ``requests`` directly: it calls an ``HTTPTransport``
supplied by the surrounding application, so calls can be proxied, recorded or
replaced in tests. ``RequestsTransport`` is the default implementation.
"""

import json
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

import requests
from requests.structures import CaseInsensitiveDict

from etsy_client.utils.exceptions import TransportError
from etsy_client.utils.logger import get_logger


logger = get_logger(__name__)

USER_AGENT = "etsy-client/1.0"


@dataclass
class TransportResponse:
    """Status, headers and raw body of an HTTP response."""

    status_code: int
    headers: Mapping[str, str] = field(default_factory=CaseInsensitiveDict)
    body: bytes = b""

    def __post_init__(self):
        if not isinstance(self.headers, CaseInsensitiveDict):
            self.headers = CaseInsensitiveDict(self.headers or {})
        if isinstance(self.body, str):
            self.body = self.body.encode("utf-8")

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    @property
    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace")

    def json(self) -> Any:
        """Decode the body as JSON; an empty body decodes to None."""
        if not self.body.strip():
            return None
        return json.loads(self.text)


class HTTPTransport(ABC):
    """
    Abstract HTTP transport.

    Implementations return a TransportResponse for every HTTP status and raise
    TransportError only when no response could be obtained at all.
    """

    @abstractmethod
    def request(
        self,
        method: str,
        url: str,
        headers: Optional[Dict[str, str]] = None,
        data: Optional[Dict[str, Any]] = None,
        files: Optional[Dict[str, Any]] = None,
        timeout: Optional[float] = None
    ) -> TransportResponse:
        """
        Send one HTTP request.

        Args:
            method: HTTP verb
            url: Absolute URL including any query string
            headers: Request headers
            data: Form fields for a form-encoded body
            files: Multipart file parts
            timeout: Timeout in seconds

        Returns:
            TransportResponse for any HTTP status

        Raises:
            TransportError: If no HTTP response was obtained
        """
        pass

    def close(self) -> None:
        """Release any pooled connections."""
        pass


class RequestsTransport(HTTPTransport):
    """HTTPTransport backed by a ``requests.Session``. No automatic retries."""

    def __init__(self, session: Optional[requests.Session] = None):
        self.session = session or requests.Session()
        self.session.headers.setdefault("User-Agent", USER_AGENT)

    def request(self, method, url, headers=None, data=None, files=None, timeout=None):
        logger.debug(f"Making {method} request to {url}")
        try:
            response = self.session.request(
                method,
                url,
                headers=headers,
                data=data,
                files=files,
                timeout=timeout
            )
        except requests.exceptions.Timeout as e:
            raise TransportError(f"Request timeout after {timeout}s", url=url) from e
        except requests.exceptions.ConnectionError as e:
            raise TransportError(f"Connection failed to {url}", url=url) from e
        except requests.exceptions.RequestException as e:
            raise TransportError(f"Request failed: {e}", url=url) from e

        return TransportResponse(
            status_code=response.status_code,
            headers=response.headers,
            body=response.content
        )

    def close(self) -> None:
        """Close the HTTP session."""
        if self.session:
            self.session.close()
        logger.debug("Closed requests transport")

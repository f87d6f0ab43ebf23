"""
Rate-limit aware request dispatcher for the Etsy Open API v3.

Every endpoint call goes through ``RequestDispatcher.request``. It is the only
place that:

- builds the target URL and attaches the ``x-api-key`` / bearer headers,
- encodes parameters as query string, form body or single-file multipart,
- throttles on the ``X-Remaining-This-Second`` header,
- classifies failures into soft 404 envelopes and raised errors.

Nothing is retried here; every failure surfaces once to the caller.
"""

import os
from contextlib import ExitStack
from threading import RLock
from typing import Any, Dict, Mapping, Optional

from etsy_client.api.envelope import Envelope
from etsy_client.api.transport import HTTPTransport, RequestsTransport, TransportResponse
from etsy_client.utils.config import API_URL, ClientOptions, OptionsLike, build_options
from etsy_client.utils.exceptions import (
    ConfigurationError, RequestError, ValidationError, build_request_error, extract_error
)
from etsy_client.utils.logger import get_logger
from etsy_client.utils.rate_limiting import RateLimiter
from etsy_client.utils.request import append_query, prepare_form


logger = get_logger(__name__)

VALID_METHODS = ("GET", "POST", "PUT", "PATCH", "DELETE")
QUERY_METHODS = ("GET", "DELETE")
FILE_PARAMETER = "image"


class RequestDispatcher:
    """
    Issues API calls through an HTTPTransport and normalizes the results.

    Header and option state may be changed with ``set_api_key`` and
    ``set_config`` while other threads dispatch: the state is guarded by a
    lock and each call works on a snapshot taken when it starts.
    """

    def __init__(self, client_id: str,
                 api_key: Optional[str] = None,
                 transport: Optional[HTTPTransport] = None,
                 config: OptionsLike = None,
                 rate_limiter: Optional[RateLimiter] = None,
                 base_url: str = API_URL):
        """
        Initialize the dispatcher.

        Args:
            client_id: Etsy app keystring, sent as ``x-api-key``
            api_key: OAuth access token, sent as the bearer token
            transport: HTTP transport (defaults to RequestsTransport)
            config: Options such as ``{"404_error": True}``
            rate_limiter: Throttle applied after successful calls
            base_url: API base URL prefixed to relative paths

        Raises:
            ConfigurationError: If ``client_id`` is empty
        """
        if not client_id or not client_id.strip():
            raise ConfigurationError("No client ID found. A valid client ID is required.")

        self.client_id = client_id
        self.base_url = base_url.rstrip('/')
        self.transport = transport or RequestsTransport()
        self.rate_limiter = rate_limiter or RateLimiter()

        self._lock = RLock()
        self._headers: Dict[str, str] = {}
        self._options: ClientOptions = build_options(config)
        if api_key:
            self.set_api_key(api_key)

    def set_api_key(self, api_key: str) -> None:
        """Set the OAuth access token used for bearer authentication."""
        with self._lock:
            self._headers = {
                "x-api-key": self.client_id,
                "Authorization": f"Bearer {api_key}",
            }
        logger.debug("Updated API key headers")

    def set_config(self, config: OptionsLike) -> None:
        """Replace the request options (e.g. ``{"404_error": True}``)."""
        options = build_options(config)
        with self._lock:
            self._options = options
        logger.debug(f"Updated client options: {options.model_dump(by_alias=True)}")

    @property
    def options(self) -> ClientOptions:
        with self._lock:
            return self._options

    @property
    def headers(self) -> Dict[str, str]:
        with self._lock:
            return dict(self._headers)

    def to_relative(self, url: str) -> str:
        """Strip the API base URL so the call is sent with authentication headers."""
        if url.startswith(self.base_url):
            return url[len(self.base_url):] or "/"
        return url

    def request(self, method: str, uri: str,
                params: Optional[Mapping[str, Any]] = None,
                timeout: Optional[float] = None) -> Envelope:
        """
        Dispatch one API call.

        Args:
            method: GET, POST, PUT, PATCH or DELETE (case-insensitive)
            uri: Path relative to the API base URL, or an absolute URL
            params: Query parameters (GET/DELETE) or body fields
            timeout: Per-call timeout; defaults to the configured timeout

        Returns:
            Envelope with decoded data, or a soft not-found envelope

        Raises:
            ValidationError: If the method or URI is invalid
            TransportError: If no HTTP response was obtained
            RequestError: For any non-2xx response other than a soft 404
        """
        if not uri:
            raise ValidationError(
                "No URI specified for this request. All requests require a URI.",
                field="uri"
            )
        verb = (method or "").upper()
        if verb not in VALID_METHODS:
            raise ValidationError(f"{method} is not a valid request method.", field="method", value=method)

        with self._lock:
            headers = dict(self._headers)
            options = self._options

        params = dict(params or {})
        if verb in QUERY_METHODS:
            uri = append_query(uri, params)

        # Headers are only sent to the Etsy API itself
        if uri.startswith("http"):
            url = uri
            headers = {}
        else:
            url = f"{self.base_url}{uri}"
        if timeout is None:
            timeout = options.timeout

        with ExitStack() as stack:
            data = None
            files = None
            if verb not in QUERY_METHODS:
                file_part = params.get(FILE_PARAMETER)
                if file_part:
                    files = {FILE_PARAMETER: self._open_file_part(file_part, stack)}
                else:
                    data = prepare_form(params)

            logger.debug(f"Dispatching {verb} {url}")
            response = self.transport.request(
                verb,
                url,
                headers=headers,
                data=data,
                files=files,
                timeout=timeout
            )

        if not response.ok:
            return self._handle_error_response(response, url, options)

        self.rate_limiter.throttle(response.headers)

        try:
            body = response.json()
        except ValueError as e:
            raise RequestError(
                f"Received HTTP status code [{response.status_code}] with a body that is not valid JSON",
                status_code=response.status_code,
                uri=url,
                response_data=response.text
            ) from e

        return Envelope(
            uri=url,
            data=body,
            status_code=response.status_code,
            headers=dict(response.headers)
        )

    def get(self, uri: str, params: Optional[Mapping[str, Any]] = None, **kwargs) -> Envelope:
        return self.request("GET", uri, params, **kwargs)

    def post(self, uri: str, params: Optional[Mapping[str, Any]] = None, **kwargs) -> Envelope:
        return self.request("POST", uri, params, **kwargs)

    def put(self, uri: str, params: Optional[Mapping[str, Any]] = None, **kwargs) -> Envelope:
        return self.request("PUT", uri, params, **kwargs)

    def patch(self, uri: str, params: Optional[Mapping[str, Any]] = None, **kwargs) -> Envelope:
        return self.request("PATCH", uri, params, **kwargs)

    def delete(self, uri: str, params: Optional[Mapping[str, Any]] = None, **kwargs) -> Envelope:
        return self.request("DELETE", uri, params, **kwargs)

    def _handle_error_response(self, response: TransportResponse, url: str,
                               options: ClientOptions) -> Envelope:
        """Turn a non-2xx response into a soft 404 envelope or raise RequestError."""
        try:
            body = response.json()
        except ValueError:
            body = None

        if response.status_code == 404 and not options.not_found_error:
            logger.info(f"Resource not found: {url}")
            return Envelope.not_found(url, extract_error(body))

        error = build_request_error(response.status_code, body, response.text, uri=url)
        logger.warning(f"Request failed: {error.message}")
        raise error

    @staticmethod
    def _open_file_part(file_part: Any, stack: ExitStack) -> Any:
        """Open a path for upload; file objects, bytes and tuples pass through."""
        if isinstance(file_part, (str, os.PathLike)):
            path = os.fspath(file_part)
            handle = stack.enter_context(open(path, "rb"))
            return (os.path.basename(path), handle)
        return file_part

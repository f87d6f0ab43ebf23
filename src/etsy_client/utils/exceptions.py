"""
Custom exceptions for the Etsy API client.

Defines the error taxonomy shared by the OAuth token flows, the request
dispatcher and the resource layer: configuration and validation problems that
fail before any network call, OAuth and HTTP failures carrying the provider's
status and message, and transport faults where no HTTP response exists.
"""

from typing import Optional, Dict, Any


class EtsyClientError(Exception):
    """Base exception for all Etsy client errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        """
        Initialize exception with message and optional details.

        Args:
            message: Error message
            details: Additional error details
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ConfigurationError(EtsyClientError):
    """Raised when client configuration is invalid or missing."""
    pass


class ValidationError(EtsyClientError):
    """Raised when caller input violates a precondition before dispatch."""

    def __init__(self, message: str, field: Optional[str] = None,
                 value: Optional[Any] = None):
        """
        Initialize validation error.

        Args:
            message: Error message
            field: Name of the offending argument
            value: Invalid value
        """
        details = {}
        if field:
            details["field"] = field
        if value is not None:
            details["value"] = str(value)

        super().__init__(message, details)
        self.field = field
        self.value = value


class TransportError(EtsyClientError):
    """Raised when no HTTP response could be obtained (DNS, connection, TLS, timeout)."""

    def __init__(self, message: str, url: Optional[str] = None):
        details = {"url": url} if url else {}
        super().__init__(message, details)
        self.url = url
        self.response = None


class APIError(EtsyClientError):
    """Base class for errors backed by an HTTP response."""

    def __init__(self, message: str, status_code: Optional[int] = None,
                 response_data: Optional[Any] = None):
        """
        Initialize API error.

        Args:
            message: Error message
            status_code: HTTP status code
            response_data: Decoded (or raw) response body
        """
        details = {}
        if status_code:
            details["status_code"] = status_code

        super().__init__(message, details)
        self.status_code = status_code
        self.response_data = response_data


class OAuthFlowError(APIError):
    """Raised when a token exchange, refresh or legacy exchange is rejected."""

    def __init__(self, message: str, status_code: Optional[int] = None,
                 error: Optional[str] = None,
                 error_description: Optional[str] = None,
                 response_data: Optional[Any] = None):
        """
        Initialize OAuth flow error.

        Args:
            message: Error message
            status_code: HTTP status code of the token endpoint response
            error: Provider error code (e.g. ``invalid_grant``)
            error_description: Provider error description
            response_data: Decoded response body
        """
        super().__init__(message, status_code, response_data)
        self.error = error
        self.error_description = error_description

        if error:
            self.details["error"] = error
        if error_description:
            self.details["error_description"] = error_description


class RequestError(APIError):
    """Raised when an API call returns a non-2xx status that is not a soft 404."""

    def __init__(self, message: str, status_code: Optional[int] = None,
                 error: Optional[str] = None, uri: Optional[str] = None,
                 response_data: Optional[Any] = None):
        """
        Initialize request error.

        Args:
            message: Error message
            status_code: HTTP status code
            error: Provider error string, if the body carried one
            uri: Requested URI
            response_data: Decoded (or raw) response body
        """
        super().__init__(message, status_code, response_data)
        self.error = error
        self.uri = uri

        if uri:
            self.details["uri"] = uri


def extract_error(body: Any) -> Optional[str]:
    """Return the provider ``error`` string from a decoded body, if any."""
    if isinstance(body, dict) and body.get("error"):
        return str(body["error"])
    return None


def build_request_error(status_code: int, body: Any, raw_body: str,
                        uri: Optional[str] = None) -> RequestError:
    """
    Build the RequestError for a failed API call.

    Args:
        status_code: HTTP status code
        body: Decoded JSON body, or None when the body was not JSON
        raw_body: Body text as received
        uri: Requested URI

    Returns:
        RequestError carrying the status and the provider error or raw body.
    """
    error = extract_error(body)
    if error:
        message = f'Received HTTP status code [{status_code}] with error "{error}".'
    else:
        message = f"Received HTTP status code [{status_code}] with body {raw_body}"

    return RequestError(
        message,
        status_code=status_code,
        error=error,
        uri=uri,
        response_data=body if body is not None else raw_body
    )

"""
OAuth2 token management for the Etsy Open API v3.

Implements the authorization-code flow with PKCE, access-token refresh and the
exchange of legacy OAuth 1.0 tokens. The manager is stateless: the PKCE
verifier and the ``state`` nonce must be kept by the caller across the
authorization redirect.
"""

import base64
import hashlib
import secrets
from typing import Any, Dict, Iterable, Optional
from urllib.parse import urlencode

from etsy_client.api.transport import HTTPTransport, RequestsTransport
from etsy_client.oauth import scopes as permission_scopes
from etsy_client.oauth.models import OAuthTokens, PKCEChallenge
from etsy_client.utils.config import CONNECT_URL, TOKEN_URL
from etsy_client.utils.exceptions import ConfigurationError, OAuthFlowError, ValidationError
from etsy_client.utils.logger import get_logger


logger = get_logger(__name__)


def base64url_encode(raw: bytes) -> str:
    """URL-safe base64 without padding."""
    return base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")


class TokenManager:
    """
    Owns the client identifier and the OAuth2 flows.

    Supports:
    1. Authorization URL building (``response_type=code``, S256 PKCE)
    2. PKCE verifier/challenge and nonce generation
    3. Authorization-code, refresh-token and legacy-token exchanges

    Token exchanges are never retried; failures surface as OAuthFlowError, or
    as the untouched TransportError when no HTTP response was received.
    """

    def __init__(self, client_id: str,
                 transport: Optional[HTTPTransport] = None,
                 connect_url: str = CONNECT_URL,
                 token_url: str = TOKEN_URL,
                 timeout: Optional[float] = 30.0):
        """
        Initialize token manager.

        Args:
            client_id: Etsy app keystring
            transport: HTTP transport (defaults to RequestsTransport)
            connect_url: Authorize endpoint
            token_url: Token endpoint
            timeout: Timeout for token endpoint calls

        Raises:
            ConfigurationError: If ``client_id`` is empty or whitespace
        """
        if not client_id or not client_id.strip():
            raise ConfigurationError("No client ID found. A valid client ID is required.")

        self.client_id = client_id
        self.transport = transport or RequestsTransport()
        self.connect_url = connect_url.rstrip('/')
        self.token_url = token_url
        self.timeout = timeout

    def build_authorization_url(self, redirect_uri: str, scopes: Iterable[str],
                                code_challenge: str, nonce: str) -> str:
        """
        Build the URL the user visits to grant access.

        Args:
            redirect_uri: Registered redirect URI
            scopes: Permission scopes to request
            code_challenge: PKCE challenge
            nonce: Anti-CSRF value echoed back as ``state``

        Returns:
            Authorization URL
        """
        params = {
            "response_type": "code",
            "redirect_uri": redirect_uri,
            "scope": permission_scopes.prepare(scopes),
            "client_id": self.client_id,
            "state": nonce,
            "code_challenge": code_challenge,
            "code_challenge_method": "S256",
        }
        return f"{self.connect_url}/?{urlencode(params)}"

    @staticmethod
    def create_nonce(byte_length: int = 12) -> str:
        """Random hex string for the ``state`` parameter."""
        return secrets.token_hex(byte_length)

    @staticmethod
    def generate_pkce_challenge(byte_length: int = 32) -> PKCEChallenge:
        """
        Generate a PKCE verifier and its S256 challenge.

        Args:
            byte_length: Number of random bytes in the verifier

        Returns:
            PKCEChallenge (unpacks as ``verifier, challenge``)
        """
        if byte_length < 32 or byte_length > 96:
            # RFC 7636 verifier length is 43-128 characters
            raise ValidationError("PKCE byte length must be between 32 and 96", field="byte_length",
                                  value=byte_length)

        verifier = base64url_encode(secrets.token_bytes(byte_length))
        challenge = base64url_encode(hashlib.sha256(verifier.encode("ascii")).digest())
        return PKCEChallenge(verifier=verifier, challenge=challenge)

    def exchange_authorization_code(self, redirect_uri: str, code: str,
                                    verifier: str) -> OAuthTokens:
        """Exchange an authorization code (plus PKCE verifier) for tokens."""
        return self._request_tokens({
            "grant_type": "authorization_code",
            "client_id": self.client_id,
            "redirect_uri": redirect_uri,
            "code": code,
            "code_verifier": verifier,
        })

    def refresh_access_token(self, refresh_token: str) -> OAuthTokens:
        """Use a refresh token to obtain a new token pair."""
        return self._request_tokens({
            "grant_type": "refresh_token",
            "client_id": self.client_id,
            "refresh_token": refresh_token,
        })

    def exchange_legacy_token(self, legacy_token: str) -> OAuthTokens:
        """Exchange a legacy OAuth 1.0 token for an OAuth 2.0 token pair."""
        return self._request_tokens({
            "grant_type": "token_exchange",
            "client_id": self.client_id,
            "legacy_token": legacy_token,
        })

    def _request_tokens(self, params: Dict[str, Any]) -> OAuthTokens:
        grant_type = params["grant_type"]
        logger.info(f"Requesting access token ({grant_type})")

        # A TransportError (no HTTP response) propagates unchanged
        response = self.transport.request(
            "POST",
            self.token_url,
            data=params,
            timeout=self.timeout
        )

        try:
            body = response.json()
        except ValueError:
            body = None

        if not response.ok:
            raise self._token_error(response.status_code, body, response.text)

        if not isinstance(body, dict) or not body.get("access_token"):
            raise OAuthFlowError(
                f"Received HTTP status code [{response.status_code}] without an access token "
                f"when requesting access token.",
                status_code=response.status_code,
                response_data=body if body is not None else response.text
            )

        logger.info(f"Access token issued ({grant_type})")
        return OAuthTokens(
            access_token=body["access_token"],
            refresh_token=body.get("refresh_token", ""),
            token_type=body.get("token_type"),
            expires_in=body.get("expires_in")
        )

    @staticmethod
    def _token_error(status_code: int, body: Any, raw_body: str) -> OAuthFlowError:
        error = None
        description = None
        if isinstance(body, dict):
            error = body.get("error")
            description = body.get("error_description")

        message = f"Received HTTP status code [{status_code}]"
        if error:
            message += f' with error "{error}"'
            if description:
                message += f' and message "{description}"'
        else:
            message += f" with body {raw_body}"
        message += " when requesting access token."

        logger.error(message)
        return OAuthFlowError(
            message,
            status_code=status_code,
            error=error,
            error_description=description,
            response_data=body if body is not None else raw_body
        )

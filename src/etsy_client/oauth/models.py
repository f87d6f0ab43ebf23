"""Data models for Etsy OAuth authentication"""

from dataclasses import dataclass, replace
from typing import Iterator, Optional

from etsy_client.utils.exceptions import ConfigurationError, ValidationError


@dataclass(frozen=True)
class PKCEChallenge:
    """PKCE (Proof Key for Code Exchange) pair for the authorization-code flow

    Attributes:
        verifier: Random URL-safe string; keep it until the code exchange
        challenge: URL-safe base64 SHA-256 of the verifier, sent when authorizing
    """
    verifier: str
    challenge: str

    def __iter__(self) -> Iterator[str]:
        return iter((self.verifier, self.challenge))


@dataclass(frozen=True)
class OAuthTokens:
    """Token pair returned by the token endpoint

    Attributes:
        access_token: Bearer token for API calls (``<user id>.<secret>``)
        refresh_token: Token for obtaining the next pair
        token_type: Usually ``Bearer``
        expires_in: Access token lifetime in seconds
    """
    access_token: str
    refresh_token: str
    token_type: Optional[str] = None
    expires_in: Optional[int] = None


@dataclass(frozen=True)
class Credentials:
    """Client identifier plus the current token pair

    Attributes:
        client_id: Etsy app keystring
        api_key: OAuth access token for the installation
        refresh_token: Refresh token matching ``api_key``
    """
    client_id: str
    api_key: str
    refresh_token: Optional[str] = None

    def __post_init__(self):
        if not self.client_id or not self.client_id.strip():
            raise ConfigurationError("No client ID found. A valid client ID is required.")

    @property
    def user_id(self) -> int:
        """Numeric owner id embedded before the first ``.`` of the access token."""
        prefix = (self.api_key or "").split(".")[0]
        if not prefix.isdigit():
            raise ValidationError(
                "API key does not start with a numeric user id",
                field="api_key"
            )
        return int(prefix)

    def with_tokens(self, tokens: OAuthTokens) -> "Credentials":
        """Return new credentials carrying ``tokens``; this instance is unchanged."""
        return replace(self, api_key=tokens.access_token, refresh_token=tokens.refresh_token)

"""
OAuth2 support for the Etsy client.

Provides the PKCE authorization-code flow, token refresh and legacy token
exchange, plus the credential and token data models.
"""

from .models import Credentials, OAuthTokens, PKCEChallenge
from .scopes import ALL_SCOPES
from .token_manager import TokenManager

__all__ = [
    "ALL_SCOPES",
    "Credentials",
    "OAuthTokens",
    "PKCEChallenge",
    "TokenManager",
]

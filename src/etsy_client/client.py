"""
Etsy Open API v3 client.

``Etsy`` is the session every resource and collection holds on to: it owns
the credentials, the OAuth token manager, the request dispatcher and the
resource factory. Nothing is shared between clients; build one per shop
installation.
"""

from typing import Any, Dict, Iterable, List, Mapping, Optional

from etsy_client.api.dispatcher import RequestDispatcher
from etsy_client.api.transport import HTTPTransport, RequestsTransport
from etsy_client.oauth.models import Credentials, OAuthTokens
from etsy_client.oauth.token_manager import TokenManager
from etsy_client.resources import Collection, Resource
from etsy_client.resources.factory import Lookup, ResourceFactory
from etsy_client.utils.config import API_URL, CONNECT_URL, TOKEN_URL, EtsySettings, OptionsLike, get_config
from etsy_client.utils.exceptions import ConfigurationError, ValidationError
from etsy_client.utils.logger import get_logger
from etsy_client.utils.rate_limiting import RateLimiter


logger = get_logger(__name__)

MAX_BATCH_LISTINGS = 100


class Etsy:
    """
    Entry point for the Etsy Open API v3.

    Example:
        >>> etsy = Etsy("keystring", "12345678.access-token")
        >>> shop = etsy.get_shop()
        >>> for listing in shop.get_listings({"state": "active"}).iter_all():
        ...     print(listing.title, listing.price)
    """

    def __init__(self, client_id: str, api_key: str,
                 config: OptionsLike = None,
                 transport: Optional[HTTPTransport] = None,
                 rate_limiter: Optional[RateLimiter] = None,
                 refresh_token: Optional[str] = None,
                 base_url: str = API_URL,
                 connect_url: str = CONNECT_URL,
                 token_url: str = TOKEN_URL):
        """
        Initialize the client.

        Args:
            client_id: Etsy app keystring
            api_key: OAuth access token (``<user id>.<secret>``)
            config: Request options, e.g. ``{"404_error": True}``
            transport: HTTP transport shared by API and token calls
            rate_limiter: Throttle applied after each API call
            refresh_token: Refresh token matching ``api_key``
            base_url: API base URL
            connect_url: OAuth authorize endpoint
            token_url: OAuth token endpoint

        Raises:
            ConfigurationError: If ``client_id`` is empty or an option is invalid
        """
        self.credentials = Credentials(client_id, api_key, refresh_token)
        self.transport = transport or RequestsTransport()
        self.dispatcher = RequestDispatcher(
            client_id,
            api_key,
            transport=self.transport,
            config=config,
            rate_limiter=rate_limiter,
            base_url=base_url
        )
        self.oauth = TokenManager(
            client_id,
            transport=self.transport,
            connect_url=connect_url,
            token_url=token_url,
            timeout=self.dispatcher.options.timeout
        )
        self.factory = ResourceFactory(self)

    @classmethod
    def from_settings(cls, settings: Optional[EtsySettings] = None,
                      transport: Optional[HTTPTransport] = None) -> "Etsy":
        """
        Build a client from ``ETSY_*`` environment settings.

        Raises:
            ConfigurationError: If settings are invalid or no access token is set
        """
        settings = settings or get_config()
        if not settings.api_key:
            raise ConfigurationError("ETSY_API_KEY is required to build a client")

        return cls(
            settings.client_id,
            settings.api_key,
            config=settings.options,
            transport=transport,
            refresh_token=settings.refresh_token,
            base_url=settings.api_url,
            connect_url=settings.connect_url,
            token_url=settings.token_url
        )

    def __enter__(self) -> "Etsy":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def close(self) -> None:
        self.transport.close()

    # Session state

    def set_api_key(self, api_key: str) -> None:
        """Switch to another access token for subsequent calls."""
        self.credentials = Credentials(self.credentials.client_id, api_key, self.credentials.refresh_token)
        self.dispatcher.set_api_key(api_key)

    def set_config(self, config: OptionsLike) -> None:
        self.dispatcher.set_config(config)

    def refresh_tokens(self, refresh_token: Optional[str] = None) -> OAuthTokens:
        """
        Refresh the access token and use the new pair for subsequent calls.

        Args:
            refresh_token: Token to refresh with; defaults to the stored one

        Returns:
            New token pair; persist the refresh token, Etsy rotates it

        Raises:
            ConfigurationError: If no refresh token is available
            OAuthFlowError: If the token endpoint rejects the refresh
        """
        refresh_token = refresh_token or self.credentials.refresh_token
        if not refresh_token:
            raise ConfigurationError("No refresh token available")

        tokens = self.oauth.refresh_access_token(refresh_token)
        self.credentials = self.credentials.with_tokens(tokens)
        self.dispatcher.set_api_key(tokens.access_token)
        logger.info(f"Refreshed access token, expires in {tokens.expires_in}s")
        return tokens

    # Generic access

    def fetch(self, method: str, uri: str, entity_type: str,
              params: Optional[Mapping[str, Any]] = None) -> Lookup:
        """Dispatch a call and return an explicit Found / NotFound result."""
        return self.factory.resolve(self.dispatcher.request(method, uri, params), entity_type)

    def request(self, method: str, uri: str, entity_type: str,
                params: Optional[Mapping[str, Any]] = None) -> Any:
        """Dispatch a call; returns a Resource, a Collection or None when not found."""
        return self.factory.materialize(self.dispatcher.request(method, uri, params), entity_type)

    # Endpoints

    def ping(self) -> Optional[int]:
        """
        Check connectivity and credentials.

        Returns:
            The application id, or None if the API did not return one
        """
        envelope = self.dispatcher.get("/application/openapi-ping")
        return envelope.get("application_id")

    def get_user(self) -> Optional[Resource]:
        """Get the user the access token belongs to."""
        return self.request("GET", f"/application/users/{self.credentials.user_id}", "User")

    def get_shop(self, shop_id: Optional[int] = None) -> Optional[Resource]:
        """
        Get a shop by id, or the current user's shop when no id is given.
        """
        if not shop_id:
            user = self.get_user()
            return user.get_shop() if user is not None else None
        return self.request("GET", f"/application/shops/{shop_id}", "Shop")

    def get_shops(self, keyword: str, params: Optional[Dict[str, Any]] = None) -> Optional[Collection]:
        """
        Search shops by name.

        Raises:
            ValidationError: If the keyword is blank
        """
        if not keyword or not keyword.strip():
            raise ValidationError(
                "You must specify a keyword when searching for Etsy shops.",
                field="keyword",
                value=keyword
            )
        params = dict(params or {})
        params["shop_name"] = keyword
        return self.request("GET", "/application/shops", "Shop", params)

    def get_seller_taxonomy(self) -> Optional[Collection]:
        """Get the full tree of seller taxonomy nodes."""
        return self.request("GET", "/application/seller-taxonomy/nodes", "Taxonomy")

    def get_seller_taxonomy_properties(self, taxonomy_id: int) -> Optional[Collection]:
        return self.request(
            "GET",
            f"/application/seller-taxonomy/nodes/{taxonomy_id}/properties",
            "TaxonomyProperty"
        )

    def get_shipping_profiles(self, shop_id: int) -> Optional[Collection]:
        return self.request("GET", f"/application/shops/{shop_id}/shipping-profiles", "ShippingProfile")

    def get_shipping_carriers(self, iso_code: str) -> Optional[Collection]:
        """Get shipping carriers and mail classes for an origin country."""
        return self.request(
            "GET",
            "/application/shipping-carriers",
            "ShippingCarrier",
            {"origin_country_iso": iso_code}
        )

    def get_listing(self, listing_id: int, includes: Iterable[str] = ()) -> Optional[Resource]:
        """
        Get a single listing.

        Args:
            listing_id: Listing id
            includes: Associations to embed, e.g. ``["Images", "Shop"]``
        """
        return self.request(
            "GET",
            f"/application/listings/{listing_id}",
            "Listing",
            {"includes": list(includes)}
        )

    def get_public_listings(self, params: Optional[Dict[str, Any]] = None) -> Optional[Collection]:
        """Search all active listings; filter with ``{"keywords": ...}``."""
        return self.request("GET", "/application/listings/active", "Listing", params)

    def get_listings(self, listing_ids: List[int], includes: Iterable[str] = ()) -> Optional[Collection]:
        """
        Get up to 100 listings in one batch call.

        Raises:
            ValidationError: If no ids or more than 100 ids are given
        """
        listing_ids = list(listing_ids)
        if not listing_ids or len(listing_ids) > MAX_BATCH_LISTINGS:
            raise ValidationError(
                "Query requires at least one listing ID and cannot exceed "
                f"a maximum of {MAX_BATCH_LISTINGS} listing IDs.",
                field="listing_ids",
                value=len(listing_ids)
            )
        return self.request(
            "GET",
            "/application/listings/batch",
            "Listing",
            {"listing_ids": listing_ids, "includes": list(includes)}
        )

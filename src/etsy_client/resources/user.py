"""
User resources.
"""

from typing import Any, Dict, Optional

from etsy_client.resources.base import Resource


class User(Resource):
    """
    Etsy user. Only the user the access token belongs to can be fetched.

    The API reports the account email as ``primary_email``; it is exposed as
    ``email``.
    """

    renames = {"primary_email": "email"}

    def get_addresses(self, params: Optional[Dict[str, Any]] = None):
        """Get all addresses of this user as a Collection of UserAddress."""
        return self.request("GET", "/application/user/addresses", "UserAddress", params)

    def get_address(self, address_id: int):
        return self.request("GET", f"/application/user/addresses/{address_id}", "UserAddress")

    def get_shops(self, params: Optional[Dict[str, Any]] = None):
        """Get the user's shop. Etsy users own at most one shop."""
        return self.request("GET", f"/application/users/{self.user_id}/shops", "Shop", params)

    def get_shop(self, name: Optional[str] = None):
        """
        Get the user's shop, optionally only when its name matches.

        Args:
            name: Expected shop name; None accepts any shop

        Returns:
            Shop, or None when the user has no shop or the name differs
        """
        shop = self.get_shops()
        if shop is None:
            return None
        if name is not None and shop.shop_name != name:
            return None
        return shop


class UserAddress(Resource):
    pass

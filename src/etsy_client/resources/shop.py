"""
Shop resources.

Most shop sub-resources come back from the API without the owning
``shop_id``; the endpoint methods below backfill it so that follow-up calls
(update, delete) on the returned resources can build their paths.
"""

from typing import Any, Dict, List, Optional

from etsy_client.resources.base import Resource
from etsy_client.utils.exceptions import ValidationError


class Shop(Resource):
    """Etsy shop owned by a user."""

    def _path(self, suffix: str = "") -> str:
        return f"/application/shops/{self.shop_id}{suffix}"

    def update(self, data: Dict[str, Any]) -> "Shop":
        """Update the shop and refresh its known fields in place."""
        return self.update_request(self._path(), data)

    # Sections

    def get_sections(self, params: Optional[Dict[str, Any]] = None):
        return self._with_context(
            self.request("GET", self._path("/sections"), "ShopSection", params),
            shop_id=self.shop_id
        )

    def get_section(self, section_id):
        return self._with_context(
            self.request("GET", self._path(f"/sections/{section_id}"), "ShopSection"),
            shop_id=self.shop_id
        )

    def create_section(self, title: str):
        """
        Create a new shop section.

        Raises:
            ValidationError: If the title is blank
        """
        if not title or not title.strip():
            raise ValidationError("Section title cannot be blank.", field="title", value=title)
        return self._with_context(
            self.request("POST", self._path("/sections"), "ShopSection", {"title": title}),
            shop_id=self.shop_id
        )

    def get_reviews(self, params: Optional[Dict[str, Any]] = None):
        return self.request("GET", self._path("/reviews"), "Review", params)

    # Shipping profiles

    def get_shipping_profiles(self):
        """Get all shipping profiles, with ``shop_id`` set on profiles, destinations and upgrades."""
        profiles = self.request("GET", self._path("/shipping-profiles"), "ShippingProfile")
        for profile in profiles or []:
            self._assign_shop_id(profile)
        return profiles

    def get_shipping_profile(self, shipping_profile_id):
        return self._assign_shop_id(
            self.request("GET", self._path(f"/shipping-profiles/{shipping_profile_id}"), "ShippingProfile")
        )

    def create_shipping_profile(self, data: Dict[str, Any]):
        return self._assign_shop_id(
            self.request("POST", self._path("/shipping-profiles"), "ShippingProfile", data)
        )

    def _assign_shop_id(self, profile: Optional[Resource]) -> Optional[Resource]:
        if profile is None:
            return None
        profile.shop_id = self.shop_id
        children: List[Any] = []
        children.extend(profile.get("shipping_profile_destinations") or [])
        children.extend(profile.get("shipping_profile_upgrades") or [])
        for child in children:
            if isinstance(child, Resource):
                child.shop_id = self.shop_id
        return profile

    # Orders and payments

    def get_receipts(self, params: Optional[Dict[str, Any]] = None):
        return self._with_context(
            self.request("GET", self._path("/receipts"), "Receipt", params),
            shop_id=self.shop_id
        )

    def get_receipt(self, receipt_id):
        return self._with_context(
            self.request("GET", self._path(f"/receipts/{receipt_id}"), "Receipt"),
            shop_id=self.shop_id
        )

    def get_transactions(self, params: Optional[Dict[str, Any]] = None):
        return self.request("GET", self._path("/transactions"), "Transaction", params)

    def get_transaction(self, transaction_id):
        return self.request("GET", self._path(f"/transactions/{transaction_id}"), "Transaction")

    def get_ledger_entries(self, params: Optional[Dict[str, Any]] = None):
        return self._with_context(
            self.request("GET", self._path("/payment-account/ledger-entries"), "LedgerEntry", params),
            shop_id=self.shop_id
        )

    def get_payments(self, payment_ids: Optional[List[int]] = None):
        """Get the payments with the given ids."""
        return self.request(
            "GET",
            self._path("/payments"),
            "Payment",
            {"payment_ids": list(payment_ids or [])}
        )

    # Listings

    def create_listing(self, data: Dict[str, Any]):
        """Create a draft listing in this shop."""
        return self.request("POST", self._path("/listings"), "Listing", data)

    def get_listings(self, params: Optional[Dict[str, Any]] = None):
        """Get the shop's listings. Use for your own shop; see ``get_public_listings`` otherwise."""
        return self.request("GET", self._path("/listings"), "Listing", params)

    def get_public_listings(self, params: Optional[Dict[str, Any]] = None):
        return self.request("GET", self._path("/listings/active"), "Listing", params)

    def get_featured_listings(self, params: Optional[Dict[str, Any]] = None):
        return self.request("GET", self._path("/listings/featured"), "Listing", params)


class ShopSection(Resource):
    pass


class Review(Resource):
    pass


class Transaction(Resource):
    pass


class Payment(Resource):
    pass


class LedgerEntry(Resource):
    pass

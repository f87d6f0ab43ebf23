"""
Receipt resources.
"""

from typing import Any, Dict, Optional

from etsy_client.resources.base import Resource, computed_field
from etsy_client.resources.money import Money


class Receipt(Resource):
    """Shop receipt (order). ``shop_id`` is backfilled by the Shop endpoints."""

    associations = {"shipments": "Shipment"}

    @computed_field(
        "grandtotal", "subtotal", "total_price", "total_shipping_cost",
        "total_tax_cost", "total_vat_cost", "discount_amt", "gift_wrap_price"
    )
    def _money(self, raw):
        return Money.from_wire(raw)

    def _path(self, suffix: str = "") -> str:
        return f"/application/shops/{self.shop_id}/receipts/{self.receipt_id}{suffix}"

    def create_shipment(self, data: Dict[str, Any]) -> "Receipt":
        """
        Submit tracking information and mark the receipt as shipped.

        Args:
            data: ``tracking_code``, ``carrier_name`` and optional notification flags

        Returns:
            This receipt, with its known fields (e.g. ``shipments``,
            ``is_shipped``) refreshed from the response
        """
        return self.create_request(self._path("/tracking"), data)

    def get_transactions(self):
        return self.request("GET", self._path("/transactions"), "Transaction")

    def get_payments(self):
        return self.request("GET", self._path("/payments"), "Payment")

    def get_listings(self, params: Optional[Dict[str, Any]] = None):
        return self.request("GET", self._path("/listings"), "Listing", params)


class Shipment(Resource):
    pass

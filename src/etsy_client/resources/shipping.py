"""
Shipping profile resources.

Destinations and upgrades are nested under a profile; their paths need the
``shop_id`` and ``shipping_profile_id`` the API returns or the Shop
endpoints backfill.
"""

from typing import Any, Dict

from etsy_client.resources.base import Resource, computed_field
from etsy_client.resources.money import Money


class ShippingProfile(Resource):

    associations = {
        "shipping_profile_destinations": "ShippingDestination",
        "shipping_profile_upgrades": "ShippingUpgrade",
    }

    def _path(self, suffix: str = "") -> str:
        return f"/application/shops/{self.shop_id}/shipping-profiles/{self.shipping_profile_id}{suffix}"

    def update(self, data: Dict[str, Any]) -> "ShippingProfile":
        return self.update_request(self._path(), data)

    def delete(self) -> bool:
        return self.delete_request(self._path())

    def create_shipping_destination(self, data: Dict[str, Any]):
        """Create a destination and add it to ``shipping_profile_destinations``."""
        destination = self.request("POST", self._path("/destinations"), "ShippingDestination", data)
        return self._attach("shipping_profile_destinations", destination)

    def create_shipping_upgrade(self, data: Dict[str, Any]):
        """Create an upgrade and add it to ``shipping_profile_upgrades``."""
        upgrade = self.request("POST", self._path("/upgrades"), "ShippingUpgrade", data)
        return self._attach("shipping_profile_upgrades", upgrade)

    def _attach(self, field: str, child: Any) -> Any:
        if child is None:
            return None
        child.shop_id = self.shop_id
        children = self.raw(field)
        if isinstance(children, list):
            children.append(child)
        else:
            self.set(field, [child])
        return child


class ShippingDestination(Resource):

    @computed_field("primary_cost", "secondary_cost")
    def _cost(self, raw):
        return Money.from_wire(raw)

    def _path(self) -> str:
        return (
            f"/application/shops/{self.shop_id}/shipping-profiles/{self.shipping_profile_id}"
            f"/destinations/{self.shipping_profile_destination_id}"
        )

    def update(self, data: Dict[str, Any]) -> "ShippingDestination":
        return self.update_request(self._path(), data)

    def delete(self) -> bool:
        return self.delete_request(self._path())


class ShippingUpgrade(Resource):

    @computed_field("price", "secondary_price")
    def _price(self, raw):
        return Money.from_wire(raw)

    def _path(self) -> str:
        return (
            f"/application/shops/{self.shop_id}/shipping-profiles/{self.shipping_profile_id}"
            f"/upgrades/{self.upgrade_id}"
        )

    def update(self, data: Dict[str, Any]) -> "ShippingUpgrade":
        return self.update_request(self._path(), data)

    def delete(self) -> bool:
        return self.delete_request(self._path())


class ShippingCarrier(Resource):
    pass

"""
Listing resources: listings and their images, files, inventory, properties,
translations and variation images.
"""

from typing import Any, Dict, Optional

from etsy_client.resources.base import Resource, computed_field
from etsy_client.resources.money import Money
from etsy_client.utils.exceptions import ValidationError


def _require_one_of(data: Dict[str, Any], *names: str) -> None:
    if not any(data.get(name) is not None for name in names):
        joined = "' or '".join(names)
        raise ValidationError(
            f"Request requires either '{joined}' parameter.",
            field=names[0]
        )


class Listing(Resource):
    """
    Etsy listing.

    ``includes`` on the listing endpoints embeds the shop, the user, the
    images and the inventory; those are materialized as resources.
    """

    associations = {
        "Shop": "Shop",
        "User": "User",
        "Images": "Image",
        "Inventory": "ListingInventory",
    }

    @computed_field("price")
    def _price(self, raw):
        return Money.from_wire(raw)

    def _shop_path(self, suffix: str = "") -> str:
        return f"/application/shops/{self.shop_id}/listings/{self.listing_id}{suffix}"

    def _listing_path(self, suffix: str = "") -> str:
        return f"/application/listings/{self.listing_id}{suffix}"

    def create(self, data: Dict[str, Any]) -> "Listing":
        """Create this listing as a draft in the shop given by ``shop_id``."""
        return self.create_request(f"/application/shops/{self.shop_id}/listings", data)

    def update(self, data: Dict[str, Any]) -> "Listing":
        """
        Update the listing.

        Args:
            data: Fields to change, e.g. ``{"title": "...", "quantity": 3}``

        Returns:
            This listing with its known fields refreshed from the response
        """
        return self.update_request(self._shop_path(), data)

    def delete(self) -> bool:
        return self.delete_request(self._shop_path())

    # Properties

    def get_listing_properties(self):
        return self._with_context(
            self.request("GET", self._shop_path("/properties"), "ListingProperty"),
            shop_id=self.shop_id,
            listing_id=self.listing_id
        )

    def get_listing_property(self, property_id):
        return self._with_context(
            self.request("GET", self._listing_path(f"/properties/{property_id}"), "ListingProperty"),
            shop_id=self.shop_id,
            listing_id=self.listing_id
        )

    # Files

    def get_files(self):
        return self._with_context(
            self.request("GET", self._shop_path("/files"), "ListingFile"),
            shop_id=self.shop_id
        )

    def get_file(self, listing_file_id):
        return self._with_context(
            self.request("GET", self._shop_path(f"/files/{listing_file_id}"), "ListingFile"),
            shop_id=self.shop_id
        )

    def upload_file(self, data: Dict[str, Any]):
        """
        Upload a digital file, or attach an existing one by ``listing_file_id``.

        Raises:
            ValidationError: If neither ``image`` nor ``listing_file_id`` is given
        """
        _require_one_of(data, "image", "listing_file_id")
        return self._with_context(
            self.request("POST", self._shop_path("/files"), "ListingFile", data),
            shop_id=self.shop_id
        )

    # Images

    def get_images(self):
        return self._with_context(
            self.request("GET", self._shop_path("/images"), "ListingImage"),
            shop_id=self.shop_id
        )

    def get_image(self, listing_image_id):
        return self._with_context(
            self.request("GET", self._shop_path(f"/images/{listing_image_id}"), "ListingImage"),
            shop_id=self.shop_id
        )

    def upload_image(self, data: Dict[str, Any]):
        """
        Upload an image, or re-attach an existing one by ``listing_image_id``.

        ``data["image"]`` may be a path, an open binary file or a
        ``(filename, content)`` tuple.

        Raises:
            ValidationError: If neither ``image`` nor ``listing_image_id`` is given
        """
        _require_one_of(data, "image", "listing_image_id")
        return self._with_context(
            self.request("POST", self._shop_path("/images"), "ListingImage", data),
            shop_id=self.shop_id
        )

    # Inventory

    def get_inventory(self):
        return self._assign_listing_id(
            self.request("GET", self._listing_path("/inventory"), "ListingInventory")
        )

    def update_inventory(self, data: Dict[str, Any]):
        return self._assign_listing_id(
            self.request("PUT", self._listing_path("/inventory"), "ListingInventory", data)
        )

    def _assign_listing_id(self, inventory: Optional[Resource]) -> Optional[Resource]:
        if inventory is None:
            return None
        for product in inventory.get("products") or []:
            if isinstance(product, Resource):
                product.listing_id = self.listing_id
        return inventory

    def get_product(self, product_id):
        return self._with_context(
            self.request("GET", self._listing_path(f"/inventory/products/{product_id}"), "ListingProduct"),
            listing_id=self.listing_id
        )

    # Translations

    def get_translation(self, language: str):
        return self._with_context(
            self.request("GET", self._shop_path(f"/translations/{language}"), "ListingTranslation"),
            shop_id=self.shop_id
        )

    def create_translation(self, language: str, data: Dict[str, Any]):
        return self._with_context(
            self.request("POST", self._shop_path(f"/translations/{language}"), "ListingTranslation", data),
            shop_id=self.shop_id
        )

    # Variation images

    def get_variation_images(self):
        return self.request("GET", self._shop_path("/variation-images"), "ListingVariationImage")

    def update_variation_images(self, data: Dict[str, Any]):
        """
        Replace the listing's variation images.

        Every variation image must be passed, including unchanged ones; the
        call overwrites the full set.
        """
        return self.request("POST", self._shop_path("/variation-images"), "ListingVariationImage", data)


class ListingImage(Resource):

    def delete(self) -> bool:
        return self.delete_request(
            f"/application/shops/{self.shop_id}/listings/{self.listing_id}"
            f"/images/{self.listing_image_id}"
        )


class ListingFile(Resource):

    def delete(self) -> bool:
        return self.delete_request(
            f"/application/shops/{self.shop_id}/listings/{self.listing_id}"
            f"/files/{self.listing_file_id}"
        )


class ListingInventory(Resource):
    associations = {"products": "ListingProduct"}


class Image(Resource):
    """Image embedded in a listing through ``includes=Images``."""


class ListingProperty(Resource):
    pass


class ListingProduct(Resource):
    pass


class ListingTranslation(Resource):
    pass


class ListingVariationImage(Resource):
    pass

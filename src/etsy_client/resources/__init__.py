"""
Resource layer for the Etsy client.

Importing this package registers every entity class with the factory.
"""

from .base import Resource, computed_field
from .collection import Collection
from .money import Money
from .listing import (
    Image,
    Listing,
    ListingFile,
    ListingImage,
    ListingInventory,
    ListingProduct,
    ListingProperty,
    ListingTranslation,
    ListingVariationImage,
)
from .receipt import Receipt, Shipment
from .shipping import ShippingCarrier, ShippingDestination, ShippingProfile, ShippingUpgrade
from .shop import LedgerEntry, Payment, Review, Shop, ShopSection, Transaction
from .taxonomy import Taxonomy, TaxonomyProperty
from .user import User, UserAddress
from .factory import Found, NotFound, ResourceFactory

__all__ = [
    "Collection",
    "Found",
    "Image",
    "LedgerEntry",
    "Listing",
    "ListingFile",
    "ListingImage",
    "ListingInventory",
    "ListingProduct",
    "ListingProperty",
    "ListingTranslation",
    "ListingVariationImage",
    "Money",
    "NotFound",
    "Payment",
    "Receipt",
    "Resource",
    "ResourceFactory",
    "Review",
    "Shipment",
    "ShippingCarrier",
    "ShippingDestination",
    "ShippingProfile",
    "ShippingUpgrade",
    "Shop",
    "ShopSection",
    "Taxonomy",
    "TaxonomyProperty",
    "Transaction",
    "User",
    "UserAddress",
    "computed_field",
]

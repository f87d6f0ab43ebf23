"""
Unit tests for Resource property access, serialization and request templates
"""
import json
from decimal import Decimal

import pytest

from etsy_client.resources import Listing, Money, Resource, Shop
from etsy_client.utils.config import API_URL
from etsy_client.utils.exceptions import ConfigurationError


class TestPropertyAccess:
    """Test case-insensitive property bag"""

    def test_case_insensitive_reads(self):
        resource = Resource(properties={"Shop_Name": "ClayWorks"})

        assert resource.shop_name == "ClayWorks"
        assert resource.SHOP_NAME == "ClayWorks"
        assert resource["shop_name"] == "ClayWorks"
        assert resource.get("Shop_name") == "ClayWorks"
        assert "shop_name" in resource

    def test_absent_field_is_none(self):
        resource = Resource(properties={"a": 1})

        assert resource.missing is None
        assert resource["missing"] is None
        assert resource.get("missing", "fallback") == "fallback"
        assert "missing" not in resource

    def test_private_names_raise(self):
        with pytest.raises(AttributeError):
            Resource()._not_there

    def test_assignment_keeps_existing_casing(self):
        resource = Resource(properties={"Title": "Old"})

        resource.title = "New"
        resource["TITLE"] = "Newer"

        assert resource.to_array() == {"Title": "Newer"}

    def test_assignment_creates_new_key(self):
        resource = Resource(properties={"a": 1})

        resource.shop_id = 9

        assert resource.keys() == ["a", "shop_id"]

    def test_entity_type_defaults_to_class_name(self):
        assert Shop().entity_type == "Shop"
        assert Resource(entity_type="Thing").entity_type == "Thing"


class TestComputedFields:
    """Test computed accessors"""

    def test_price_is_money(self, listing_record):
        listing = Listing(properties=listing_record)

        assert listing.price == Money(1250, 100, "USD")
        assert listing.price.value == Decimal("12.5")
        assert str(listing.price) == "12.5 USD"

    def test_raw_value_serialized(self, listing_record):
        listing = Listing(properties=listing_record)

        assert listing.raw("price") == {"amount": 1250, "divisor": 100, "currency_code": "USD"}
        assert listing.to_array()["price"] == {"amount": 1250, "divisor": 100, "currency_code": "USD"}

    def test_absent_computed_field_is_none(self):
        assert Listing(properties={"listing_id": 1}).price is None

    def test_non_money_value_passes_through(self):
        assert Money.from_wire(12.5) == 12.5
        assert Money.from_wire(None) is None


class TestSerialization:
    """Test to_array / to_json"""

    def test_nested_resources_expanded(self):
        shop = Shop(properties={"shop_id": 1})
        images = [Resource(properties={"id": 1}), Resource(properties={"id": 2})]
        listing = Listing(properties={"listing_id": 5, "Shop": shop, "Images": images, "tags": {"a": 1}})

        data = listing.to_array()

        assert data == {
            "listing_id": 5,
            "Shop": {"shop_id": 1},
            "Images": [{"id": 1}, {"id": 2}],
            "tags": {"a": 1},
        }
        assert data["tags"] is not listing.raw("tags")

    def test_to_json(self):
        listing = Listing(properties={"listing_id": 5, "Shop": Shop(properties={"shop_id": 1})})
        assert json.loads(listing.to_json()) == {"listing_id": 5, "Shop": {"shop_id": 1}}


class TestRequestTemplates:
    """Test update/create/delete helpers"""

    def test_update_refreshes_known_fields_only(self, etsy, fake_transport):
        shop = etsy.factory.create_resource({"shop_id": 77, "title": "Old", "announcement": "Hi"}, "Shop")
        fake_transport.queue(200, {"shop_id": 77, "title": "New", "announcement": "Hi", "sale_message": "Thanks"})

        result = shop.update({"title": "New"})

        assert result is shop
        assert shop.title == "New"
        assert not shop.has("sale_message")
        call = fake_transport.last_call
        assert call["method"] == "PUT"
        assert call["url"] == f"{API_URL}/application/shops/77"
        assert call["data"] == {"title": "New"}

    def test_update_with_empty_response_keeps_fields(self, etsy, fake_transport):
        shop = etsy.factory.create_resource({"shop_id": 77, "title": "Old"}, "Shop")
        fake_transport.queue(200)

        assert shop.update({"title": "New"}) is shop
        assert shop.title == "Old"

    def test_create_posts(self, etsy, fake_transport):
        listing = etsy.factory.create_resource({"shop_id": 77, "listing_id": None, "title": "Mug"}, "Listing")
        fake_transport.queue(201, {"shop_id": 77, "listing_id": 555, "title": "Mug", "state": "draft"})

        listing.create({"title": "Mug", "quantity": 1})

        assert listing.listing_id == 555
        assert not listing.has("state")
        assert fake_transport.last_call["method"] == "POST"
        assert fake_transport.last_call["url"] == f"{API_URL}/application/shops/77/listings"

    def test_delete_success(self, etsy, fake_transport):
        listing = etsy.factory.create_resource({"shop_id": 77, "listing_id": 5}, "Listing")
        fake_transport.queue(204)

        assert listing.delete() is True
        assert fake_transport.last_call["method"] == "DELETE"
        assert fake_transport.last_call["url"] == f"{API_URL}/application/shops/77/listings/5"

    def test_delete_soft_404(self, etsy, fake_transport):
        listing = etsy.factory.create_resource({"shop_id": 77, "listing_id": 5}, "Listing")
        fake_transport.queue(404, {"error": "Listing not found"})

        assert listing.delete() is False

    def test_request_without_session(self):
        with pytest.raises(ConfigurationError):
            Shop(properties={"shop_id": 1}).get_reviews()

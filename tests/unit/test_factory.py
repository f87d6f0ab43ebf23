"""
Unit tests for ResourceFactory materialization
"""
import copy

import pytest

from etsy_client.api.envelope import Envelope
from etsy_client.resources import (
    Collection, Found, Image, Listing, ListingInventory, ListingProduct, NotFound,
    Resource, ResourceFactory, Shop, User
)
from etsy_client.utils.exceptions import ValidationError


class Widget(Resource):
    """Entity with a rename table, registered for these tests"""
    renames = {"old_name": "new_name"}


URI = "https://api.etsy.com/v3/application/test"


@pytest.fixture
def factory():
    return ResourceFactory(session=None)


def envelope(data):
    return Envelope(uri=URI, data=data)


class TestMaterializeShapes:
    """Test envelope to Resource / Collection / None"""

    def test_missing_envelope(self, factory):
        assert factory.materialize(None, "Listing") is None
        assert factory.resolve(None, "Listing") == NotFound()

    def test_soft_error(self, factory):
        soft = Envelope.not_found(URI, "Listing not found")

        assert factory.materialize(soft, "Listing") is None
        assert factory.resolve(soft, "Listing") == NotFound(uri=URI, error="Listing not found")

    def test_empty_body(self, factory):
        assert factory.materialize(envelope(None), "Listing") is None

    def test_single_resource(self, factory):
        result = factory.resolve(envelope({"listing_id": 1}), "Listing")

        assert isinstance(result, Found)
        assert isinstance(result.value, Listing)
        assert result.value.listing_id == 1
        assert result.uri == URI

    def test_empty_results_is_empty_collection(self, factory):
        collection = factory.materialize(envelope({"count": 0, "results": []}), "Listing")

        assert isinstance(collection, Collection)
        assert len(collection) == 0
        assert collection.entity_type == "Listing"

    def test_null_results_is_empty_collection(self, factory):
        collection = factory.materialize(envelope({"results": None}), "Listing")

        assert isinstance(collection, Collection)
        assert len(collection) == 0

    def test_results_collection(self, factory):
        collection = factory.materialize(
            envelope({"count": 12, "results": [{"listing_id": 1}, {"listing_id": 2}]}),
            "Listing"
        )

        assert [listing.listing_id for listing in collection] == [1, 2]
        assert all(isinstance(listing, Listing) for listing in collection)
        assert collection.count == 12
        assert collection.uri == URI

    def test_top_level_array(self, factory):
        collection = factory.materialize(envelope([{"id": 1}, {"id": 2}]), "Taxonomy")

        assert isinstance(collection, Collection)
        assert len(collection) == 2

    def test_scalar_payload_rejected(self, factory):
        with pytest.raises(ValidationError):
            factory.materialize(envelope(42), "Listing")

    def test_unknown_entity_type(self, factory):
        resource = factory.materialize(envelope({"id": 3}), "SomethingNew")

        assert type(resource) is Resource
        assert resource.entity_type == "SomethingNew"
        assert resource.id == 3


class TestRecordMaterialization:
    """Test rename and association handling"""

    def test_idempotent(self, factory, listing_record):
        first = factory.create_resource(listing_record, "Listing")
        second = factory.create_resource(listing_record, "Listing")

        assert first is not second
        assert first.to_array() == second.to_array()

    def test_input_record_not_mutated(self, factory, listing_record):
        original = copy.deepcopy(listing_record)

        factory.create_resource(listing_record, "Listing")

        assert listing_record == original

    def test_rename(self, factory):
        widget = factory.create_resource({"old_name": "x", "size": 2}, "Widget")

        assert isinstance(widget, Widget)
        assert widget.new_name == "x"
        assert not widget.has("old_name")
        assert widget.to_array() == {"size": 2, "new_name": "x"}

    def test_rename_matches_wire_name_case_insensitively(self, factory):
        user = factory.create_resource({"user_id": 5, "Primary_Email": "a@example.com"}, "User")

        assert isinstance(user, User)
        assert user.email == "a@example.com"
        assert not user.has("primary_email")

    def test_list_association(self, factory, listing_record):
        listing = factory.create_resource(listing_record, "Listing")

        images = listing.images
        assert len(images) == 2
        assert all(isinstance(image, Image) for image in images)
        assert images[1].listing_image_id == 2

    def test_object_association(self, factory, listing_record):
        listing = factory.create_resource(listing_record, "Listing")

        assert isinstance(listing.shop, Shop)
        assert listing.shop.shop_name == "ClayWorks"

    def test_nested_associations(self, factory):
        listing = factory.create_resource({
            "listing_id": 1,
            "Inventory": {"products": [{"product_id": 10}, {"product_id": 11}]},
        }, "Listing")

        assert isinstance(listing.inventory, ListingInventory)
        assert [type(p) for p in listing.inventory.products] == [ListingProduct, ListingProduct]

    def test_non_object_association_value_untouched(self, factory):
        listing = factory.create_resource({"listing_id": 1, "Shop": None, "Images": "n/a"}, "Listing")

        assert listing.shop is None
        assert listing.images == "n/a"

    def test_resources_share_session(self):
        session = object()
        factory = ResourceFactory(session)

        listing = factory.create_resource({"listing_id": 1, "Shop": {"shop_id": 2}}, "Listing")

        assert listing.session is session
        assert listing.shop.session is session

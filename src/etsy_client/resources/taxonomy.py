"""
Seller taxonomy resources.
"""

from etsy_client.resources.base import Resource


class Taxonomy(Resource):
    """Seller taxonomy node (listing category); ``children`` nest recursively."""

    associations = {"children": "Taxonomy"}

    def get_properties(self):
        """Get the properties sellers can set for listings in this category."""
        return self.request(
            "GET",
            f"/application/seller-taxonomy/nodes/{self.id}/properties",
            "TaxonomyProperty"
        )


class TaxonomyProperty(Resource):
    pass

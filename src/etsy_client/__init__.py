"""
Etsy Client

A Python client for the Etsy Open API v3: OAuth2 with PKCE, rate-limit aware
request dispatch, and typed resources for shops, listings, receipts and
shipping profiles.
"""

__version__ = "1.0.0"
__author__ = "Etsy Client Team"

from etsy_client.client import Etsy

__all__ = ["Etsy", "__version__"]

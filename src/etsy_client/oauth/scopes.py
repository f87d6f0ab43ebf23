"""
Etsy OAuth permission scopes.
"""

from typing import Iterable, List

from etsy_client.utils.exceptions import ValidationError


ALL_SCOPES = (
    "address_r",
    "address_w",
    "billing_r",
    "cart_r",
    "cart_w",
    "email_r",
    "favorites_r",
    "favorites_w",
    "feedback_r",
    "listings_d",
    "listings_r",
    "listings_w",
    "profile_r",
    "profile_w",
    "recommend_r",
    "recommend_w",
    "shops_r",
    "shops_w",
    "transactions_r",
    "transactions_w",
)


def validate(scopes: Iterable[str]) -> List[str]:
    """Return the scopes as a de-duplicated list, rejecting unknown ones."""
    result = []
    for scope in scopes:
        scope = scope.strip()
        if scope not in ALL_SCOPES:
            raise ValidationError(f"Unknown permission scope: {scope}", field="scopes", value=scope)
        if scope not in result:
            result.append(scope)
    return result


def prepare(scopes: Iterable[str]) -> str:
    """Join scopes into the space separated form the authorize endpoint expects."""
    return " ".join(validate(scopes))

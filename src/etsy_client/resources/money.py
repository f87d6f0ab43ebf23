"""
Money values as returned by the API: ``{"amount", "divisor", "currency_code"}``.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, Mapping, Optional


@dataclass(frozen=True)
class Money:
    """Amount in minor units plus the divisor that scales it to major units."""
    amount: int
    divisor: int = 100
    currency_code: Optional[str] = None

    @property
    def value(self) -> Decimal:
        """Amount in major units, e.g. ``Decimal("12.50")``."""
        if not self.divisor:
            return Decimal(self.amount)
        return Decimal(self.amount) / Decimal(self.divisor)

    @classmethod
    def from_wire(cls, raw: Any) -> Any:
        """
        Build a Money from the wire mapping.

        Values that are not money mappings (None, numbers from older
        endpoints) are returned unchanged.
        """
        if isinstance(raw, Money):
            return raw
        if not isinstance(raw, Mapping) or "amount" not in raw:
            return raw
        return cls(
            amount=int(raw["amount"]),
            divisor=int(raw.get("divisor") or 1),
            currency_code=raw.get("currency_code")
        )

    def to_array(self) -> Dict[str, Any]:
        return {
            "amount": self.amount,
            "divisor": self.divisor,
            "currency_code": self.currency_code,
        }

    def __str__(self) -> str:
        if self.currency_code:
            return f"{self.value} {self.currency_code}"
        return str(self.value)

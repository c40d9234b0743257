"""Investment position model."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal


@dataclass
class InvestmentPosition:
    """An investor's confirmed stake in a property.

    ``ownership_fraction`` is fixed when the investment is confirmed and
    is not recomputed if the property is later revalued.
    """

    position_id: str
    investor_id: str
    property_id: str
    amount_invested: int  # Minor units
    ownership_fraction: Decimal
    confirmed_at: datetime
    exited_at: datetime | None = None  # Soft exit; positions are never deleted

    def is_active(self, as_of: datetime | None = None) -> bool:
        """Whether the position is held at ``as_of`` (default: now)."""
        as_of = as_of or datetime.now()
        if self.confirmed_at > as_of:
            return False
        return self.exited_at is None or self.exited_at > as_of

"""Distribution batch and record models."""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal

from invest_engine.models.investment.enums import DistributionStatus, DistributionType


@dataclass(frozen=True)
class DistributionBatch:
    """A lump distribution for one property. Immutable once created."""

    batch_id: str
    property_id: str
    total_amount: int  # Minor units; negative only for reversing batches
    distribution_type: DistributionType
    distribution_date: date
    created_at: datetime
    reverses_batch_id: str | None = None
    notes: str = ""

    @property
    def is_reversal(self) -> bool:
        return self.reverses_batch_id is not None


@dataclass(frozen=True)
class DistributionRecord:
    """One investor's share of a batch. Never changed after allocation."""

    batch_id: str
    investor_id: str
    position_id: str
    allocated_amount: int  # Minor units
    ownership_fraction: Decimal


@dataclass(frozen=True)
class PayoutStatus:
    """Payout state of one record, tracked apart from the record itself."""

    batch_id: str
    position_id: str
    status: DistributionStatus = DistributionStatus.PENDING
    updated_at: datetime | None = None


@dataclass(frozen=True)
class ScheduledDistribution:
    """One instalment of a periodic distribution schedule."""

    period: int
    distribution_date: date
    amount: int  # Minor units

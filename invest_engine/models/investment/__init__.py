"""Investment domain models."""

from invest_engine.models.investment.category import PropertyCategory, YieldRange
from invest_engine.models.investment.distribution import (
    DistributionBatch,
    DistributionRecord,
    PayoutStatus,
    ScheduledDistribution,
)
from invest_engine.models.investment.enums import (
    DistributionFrequency,
    DistributionStatus,
    DistributionType,
)
from invest_engine.models.investment.position import InvestmentPosition
from invest_engine.models.investment.projection import (
    ExactProjectionPoint,
    ProjectionPoint,
    ROIResult,
)

__all__ = [
    "DistributionBatch",
    "DistributionFrequency",
    "DistributionRecord",
    "DistributionStatus",
    "DistributionType",
    "ExactProjectionPoint",
    "InvestmentPosition",
    "PayoutStatus",
    "ProjectionPoint",
    "PropertyCategory",
    "ROIResult",
    "ScheduledDistribution",
    "YieldRange",
]

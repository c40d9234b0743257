"""Yield modelling, ROI projection and income distribution."""

from invest_engine.economics.distribution import (
    DistributionAllocator,
    apportion,
    split_schedule,
)
from invest_engine.economics.roi import (
    DEFAULT_ASSUMPTIONS,
    EconomicsAssumptions,
    ROICalculator,
)
from invest_engine.economics.yield_model import (
    DEFAULT_CATEGORIES,
    YieldModel,
    appreciated_value,
    gross_rent,
)

__all__ = [
    "DEFAULT_ASSUMPTIONS",
    "DEFAULT_CATEGORIES",
    "DistributionAllocator",
    "EconomicsAssumptions",
    "ROICalculator",
    "YieldModel",
    "apportion",
    "appreciated_value",
    "gross_rent",
    "split_schedule",
]

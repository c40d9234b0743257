"""Enumeration types for investment domain entities."""

from enum import Enum


class DistributionType(str, Enum):
    RENTAL_INCOME = "rental_income"
    CAPITAL_GAIN = "capital_gain"
    EXIT_PROCEEDS = "exit_proceeds"


class DistributionStatus(str, Enum):
    PENDING = "pending"
    PROCESSED = "processed"
    FAILED = "failed"


class DistributionFrequency(str, Enum):
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    SEMI_ANNUAL = "semi_annual"
    ANNUAL = "annual"

    @property
    def periods_per_year(self) -> int:
        return {"monthly": 12, "quarterly": 4, "semi_annual": 2, "annual": 1}[self.value]

    @property
    def months_per_period(self) -> int:
        return 12 // self.periods_per_year

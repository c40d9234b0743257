"""Scenarios for simulating investment economics end to end."""

from invest_engine.scenarios.investment import IncomeDistributionScenario

__all__ = ["IncomeDistributionScenario"]

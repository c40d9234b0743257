"""Investment domain scenarios."""

from invest_engine.scenarios.investment.income_distribution import IncomeDistributionScenario

__all__ = ["IncomeDistributionScenario"]

"""Income distribution scenario over a synthetic investor base."""

from __future__ import annotations

import logging
import random
from datetime import date, datetime, time
from typing import Any

from dateutil.relativedelta import relativedelta

from invest_engine.config import ScenarioConfig
from invest_engine.economics.roi import DEFAULT_ASSUMPTIONS, EconomicsAssumptions, ROICalculator
from invest_engine.economics.yield_model import YieldModel
from invest_engine.generators.investment import PositionGenerator, PropertyListingGenerator
from invest_engine.models.investment import DistributionType
from invest_engine.store.investment import InvestmentLedger

logger = logging.getLogger(__name__)


class IncomeDistributionScenario:
    """Seed a ledger and pay out quarterly rental income.

    This scenario creates:
    - Properties across the yield categories
    - Investors holding positions that sell part of each property
    - One rental income batch per property per period, sized from the
      property's projected year-1 net rent
    """

    def __init__(
        self,
        num_properties: int = 5,
        investors_per_property: int = 20,
        periods: int = 4,
        start_date: date | None = None,
        sold_ratio: float = 0.85,
        seed: int | None = None,
        *,
        config: ScenarioConfig | None = None,
        assumptions: EconomicsAssumptions = DEFAULT_ASSUMPTIONS,
    ) -> None:
        """Initialize the scenario.

        Parameters
        ----------
        num_properties : int
            Number of properties to list.
        investors_per_property : int
            Positions created per property.
        periods : int
            Quarterly distributions to run.
        start_date : date | None
            Date of the first distribution (default: today).
        sold_ratio : float
            Share of each property sold to investors.
        seed : int | None
            Random seed for reproducibility.
        config : ScenarioConfig | None
            Optional scenario configuration. If provided, overrides the
            keyword arguments above.
        assumptions : EconomicsAssumptions
            Assumption set used to size each property's rental income.
        """
        if config is not None:
            num_properties = config.num_properties
            investors_per_property = config.investors_per_property
            periods = config.periods
            start_date = config.start_date
            sold_ratio = config.sold_ratio
        self.config = config

        self.num_properties = num_properties
        self.investors_per_property = investors_per_property
        self.periods = periods
        self.start_date = start_date or date.today()
        self.sold_ratio = sold_ratio
        self.seed = seed

        if seed is not None:
            random.seed(seed)

        self.ledger = InvestmentLedger()
        self.yield_model = YieldModel()
        self.calculator = ROICalculator(assumptions)
        self._listing_gen = PropertyListingGenerator(seed=seed, yield_model=self.yield_model)
        self._position_gen = PositionGenerator(seed=seed)

    def generate(self) -> InvestmentLedger:
        """Generate listings, positions and distributions.

        Returns
        -------
        InvestmentLedger
            Ledger containing all generated data.
        """
        logger.info(
            "Starting income distribution scenario: %d properties, %d investors each, %d periods",
            self.num_properties,
            self.investors_per_property,
            self.periods,
        )

        # Shared pool so some investors hold several properties
        investor_pool = [self._listing_gen.fake.uuid4() for _ in range(self.investors_per_property * 2)]

        # Every position is confirmed before the first distribution
        confirmed_before = datetime.combine(self.start_date, time.min)

        for _ in range(self.num_properties):
            listing = self._listing_gen.generate()
            self.ledger.add_property(listing)
            category = self.yield_model.get(listing.category_id)
            for position in self._position_gen.generate_for_property(
                listing,
                self.investors_per_property,
                sold_ratio=self.sold_ratio,
                investor_ids=investor_pool,
                min_investment=category.min_investment,
                as_of=confirmed_before,
            ):
                self.ledger.add_position(position)

        logger.info("Generated %d positions", len(self.ledger.positions))

        for period in range(self.periods):
            distribution_date = self.start_date + relativedelta(months=3 * period)
            for listing in self.ledger.properties.values():
                amount = self._quarterly_rent(listing.property_value, listing.category_id)
                self.ledger.distribute(
                    listing.property_id,
                    amount,
                    DistributionType.RENTAL_INCOME,
                    distribution_date,
                    notes=f"Q{period + 1} rental income",
                )

        logger.info(
            "Recorded %d batches with %d records",
            len(self.ledger.batches),
            len(self.ledger.records),
        )
        return self.ledger

    def get_distribution_summary(self) -> dict[str, Any]:
        """Summarise distributed totals and check conservation per batch."""
        batch_totals = {
            batch_id: sum(r.allocated_amount for r in self.ledger.get_batch_records(batch_id))
            for batch_id in self.ledger.batches
        }
        conserved = all(
            batch_totals[batch_id] == batch.total_amount for batch_id, batch in self.ledger.batches.items()
        )
        zero_records = sum(1 for r in self.ledger.records if r.allocated_amount == 0)

        return {
            "total_batches": len(self.ledger.batches),
            "total_records": len(self.ledger.records),
            "total_distributed": sum(batch.total_amount for batch in self.ledger.batches.values()),
            "zero_allocations": zero_records,
            "all_batches_conserved": conserved,
            "investors": len({r.investor_id for r in self.ledger.records}),
            "assumptions_version": self.calculator.assumptions.version,
        }

    def _quarterly_rent(self, property_value: int, category_id: str) -> int:
        """Whole property's projected year-1 net rent, split into quarters."""
        result = self.calculator.project_by_id(property_value, property_value, category_id, self.yield_model, 1)
        return max(result.series[0].projected_income // 4, 1)

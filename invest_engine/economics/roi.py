"""Investment ROI projection.

``ROICalculator.project`` derives an investor's share of a property's
rental economics and appreciation over a horizon of whole years:

- year 0 ("current") figures use the uncompounded base yield and costs
- year ``y`` compounds rent by the category's yield growth rate and
  running costs by the assumption set's cost inflation rate
- investor figures are the property figures times the amount invested,
  divided by the property value

Monthly income is derived from the year-1 projected income rather than
the year-0 figure, so "current" monthly and annual figures do not agree
exactly. This matches the platform's published numbers and is kept as is.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal

from invest_engine.economics.money import (
    ENGINE_CONTEXT,
    precise_context,
    require_minor_units,
    to_minor_units,
)
from invest_engine.economics.yield_model import YieldModel
from invest_engine.exceptions import InvalidInputError
from invest_engine.models.investment import (
    ExactProjectionPoint,
    ProjectionPoint,
    PropertyCategory,
    ROIResult,
)

logger = logging.getLogger(__name__)

ROI_PERCENT_QUANTUM = Decimal("0.0001")


@dataclass(frozen=True)
class EconomicsAssumptions:
    """Versioned modelling assumptions applied to every projection.

    A projection records the version it was computed under so historical
    figures stay reproducible after assumptions change.
    """

    version: str
    cost_inflation_rate: Decimal = Decimal("0.03")
    months_per_year: int = 12


DEFAULT_ASSUMPTIONS = EconomicsAssumptions(version="2024.1")


class ROICalculator:
    """Project investor returns for a fractional property investment.

    Parameters
    ----------
    assumptions : EconomicsAssumptions
        Modelling assumptions (cost inflation). Defaults to
        ``DEFAULT_ASSUMPTIONS``.
    """

    def __init__(self, assumptions: EconomicsAssumptions = DEFAULT_ASSUMPTIONS) -> None:
        if assumptions.cost_inflation_rate < 0:
            raise InvalidInputError("cost_inflation_rate must be non-negative")
        if assumptions.months_per_year < 1:
            raise InvalidInputError("months_per_year must be positive")
        self.assumptions = assumptions

    def project(
        self,
        investment_amount: int,
        property_value: int,
        category: PropertyCategory,
        horizon_years: int = 10,
    ) -> ROIResult:
        """Compute current economics and a yearly projection.

        Parameters
        ----------
        investment_amount : int
            Amount invested, in minor units.
        property_value : int
            Property valuation, in minor units.
        category : PropertyCategory
            Yield profile of the property.
        horizon_years : int
            Number of projected years (at least 1).

        Returns
        -------
        ROIResult
            Figures rounded to minor units, with the exact series attached.

        Raises
        ------
        InvalidInputError
            If an amount is non-positive or not an integer, the investment
            exceeds the property value, or the horizon is below one year.
        """
        self._check_inputs(investment_amount, property_value, horizon_years)

        with precise_context():
            value = Decimal(property_value)
            invested = Decimal(investment_amount)
            ownership = invested / value

            gross_rent_0 = value * category.base_rental_yield
            management_fee_0 = gross_rent_0 * category.management_fee_rate
            other_costs_0 = value * category.other_cost_rate
            net_rent_0 = gross_rent_0 - management_fee_0 - other_costs_0
            investor_income_0 = net_rent_0 * invested / value
            roi_percent = investor_income_0 / invested * 100

            exact_series = tuple(
                self._project_year(year, value, invested, gross_rent_0, category)
                for year in range(1, horizon_years + 1)
            )

            monthly_income = exact_series[0].investor_income / self.assumptions.months_per_year

            total_returns: dict[int, int] = {}
            cumulative_income = Decimal(0)
            for point in exact_series:
                cumulative_income += point.investor_income
                total = cumulative_income + (point.investor_equity_value - invested)
                total_returns[point.year] = to_minor_units(total)

        series = tuple(
            ProjectionPoint(
                year=point.year,
                projected_income=to_minor_units(point.investor_income),
                projected_property_value=to_minor_units(point.investor_equity_value),
            )
            for point in exact_series
        )

        logger.debug(
            "Projected %s over %d years: ownership=%s roi=%s%%",
            category.category_id,
            horizon_years,
            ownership,
            roi_percent,
        )

        return ROIResult(
            investment_amount=investment_amount,
            property_value=property_value,
            category_id=category.category_id,
            assumptions_version=self.assumptions.version,
            ownership_fraction=ownership,
            annual_gross_rent=to_minor_units(gross_rent_0),
            annual_management_fee=to_minor_units(management_fee_0),
            annual_other_costs=to_minor_units(other_costs_0),
            annual_net_rent=to_minor_units(net_rent_0),
            investor_annual_income=to_minor_units(investor_income_0),
            monthly_income=to_minor_units(monthly_income),
            roi_percent=roi_percent.quantize(ROI_PERCENT_QUANTUM, context=ENGINE_CONTEXT),
            series=series,
            exact_series=exact_series,
            total_returns=total_returns,
        )

    def project_by_id(
        self,
        investment_amount: int,
        property_value: int,
        category_id: str,
        yield_model: YieldModel,
        horizon_years: int = 10,
    ) -> ROIResult:
        """Resolve ``category_id`` through ``yield_model`` and project.

        Raises ``UnknownCategoryError`` for an unknown id.
        """
        category = yield_model.get(category_id)
        return self.project(investment_amount, property_value, category, horizon_years)

    def compare_categories(
        self,
        investment_amount: int,
        property_value: int,
        yield_model: YieldModel,
        horizon_years: int = 10,
    ) -> dict[str, ROIResult]:
        """Project the same investment under every category of ``yield_model``."""
        return {
            category.category_id: self.project(investment_amount, property_value, category, horizon_years)
            for category in yield_model
        }

    def _project_year(
        self,
        year: int,
        value: Decimal,
        invested: Decimal,
        gross_rent_0: Decimal,
        category: PropertyCategory,
    ) -> ExactProjectionPoint:
        gross_rent = gross_rent_0 * (1 + category.annual_yield_growth_rate) ** year
        management_fee = gross_rent * category.management_fee_rate
        other_costs = value * category.other_cost_rate * (1 + self.assumptions.cost_inflation_rate) ** year
        net_rent = gross_rent - management_fee - other_costs
        appreciated = value * (1 + category.annual_appreciation_rate) ** year

        return ExactProjectionPoint(
            year=year,
            gross_rent=gross_rent,
            management_fee=management_fee,
            other_costs=other_costs,
            net_rent=net_rent,
            investor_income=net_rent * invested / value,
            appreciated_value=appreciated,
            investor_equity_value=appreciated * invested / value,
        )

    def _check_inputs(self, investment_amount: int, property_value: int, horizon_years: int) -> None:
        require_minor_units("investment_amount", investment_amount)
        require_minor_units("property_value", property_value)
        if isinstance(horizon_years, bool) or not isinstance(horizon_years, int):
            raise InvalidInputError(f"horizon_years must be an integer, got {horizon_years!r}")

        problem = None
        if investment_amount <= 0:
            problem = f"investment_amount must be positive, got {investment_amount}"
        elif property_value <= 0:
            problem = f"property_value must be positive, got {property_value}"
        elif investment_amount > property_value:
            problem = f"investment_amount {investment_amount} exceeds property_value {property_value}"
        elif horizon_years < 1:
            problem = f"horizon_years must be at least 1, got {horizon_years}"

        if problem is not None:
            logger.warning("Rejected ROI projection: %s", problem)
            raise InvalidInputError(problem)

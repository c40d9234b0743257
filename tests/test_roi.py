"""Tests for ROI projection."""

from dataclasses import replace
from decimal import ROUND_FLOOR, Decimal, Inexact, localcontext

import pytest

from invest_engine.economics.roi import DEFAULT_ASSUMPTIONS, EconomicsAssumptions, ROICalculator
from invest_engine.economics.yield_model import YieldModel
from invest_engine.exceptions import InvalidInputError, UnknownCategoryError
from invest_engine.models.investment import ProjectionPoint, PropertyCategory


@pytest.fixture
def calculator() -> ROICalculator:
    return ROICalculator()


class TestCurrentYearEconomics:
    """Year-0 figures for a 10% stake in a 1,000.00 commercial property."""

    def test_ownership_fraction(self, calculator: ROICalculator, commercial: PropertyCategory) -> None:
        result = calculator.project(100_00, 1_000_00, commercial, 10)
        assert result.ownership_fraction == Decimal("0.1")

    def test_rent_breakdown(self, calculator: ROICalculator, commercial: PropertyCategory) -> None:
        result = calculator.project(100_00, 1_000_00, commercial, 10)

        assert result.annual_gross_rent == 100_00
        assert result.annual_management_fee == 8_00
        assert result.annual_other_costs == 20_00
        assert result.annual_net_rent == 72_00
        assert result.investor_annual_income == 7_20

    def test_roi_percent_uses_uncompounded_net_rent(
        self, calculator: ROICalculator, commercial: PropertyCategory
    ) -> None:
        result = calculator.project(100_00, 1_000_00, commercial, 10)
        assert result.roi_percent == Decimal("7.2")

    def test_monthly_income_uses_year_one(self, calculator: ROICalculator, commercial: PropertyCategory) -> None:
        result = calculator.project(100_00, 1_000_00, commercial, 10)

        # Year 1 investor income is 8.06; 8.06 / 12 rounds to 0.67
        assert result.series[0].projected_income == 8_06
        assert result.monthly_income == 67
        assert result.monthly_income != round(result.investor_annual_income / 12)

    def test_echoes_inputs(self, calculator: ROICalculator, commercial: PropertyCategory) -> None:
        result = calculator.project(100_00, 1_000_00, commercial, 3)

        assert result.investment_amount == 100_00
        assert result.property_value == 1_000_00
        assert result.category_id == "commercial"
        assert result.assumptions_version == DEFAULT_ASSUMPTIONS.version
        assert result.horizon_years == 3


class TestProjectionSeries:
    """Yearly projection figures."""

    def test_year_one_exact(self, calculator: ROICalculator, commercial: PropertyCategory) -> None:
        point = calculator.project(100_00, 1_000_00, commercial, 1).exact_series[0]

        assert point.gross_rent == Decimal("11000")
        assert point.management_fee == Decimal("880")
        assert point.other_costs == Decimal("2060")
        assert point.net_rent == Decimal("8060")
        assert point.investor_income == Decimal("806")
        assert point.appreciated_value == Decimal("115000")
        assert point.investor_equity_value == Decimal("11500")

    def test_year_two_keeps_precision(self, calculator: ROICalculator, commercial: PropertyCategory) -> None:
        result = calculator.project(100_00, 1_000_00, commercial, 2)
        exact = result.exact_series[1]

        assert exact.other_costs == Decimal("2121.8")
        assert exact.net_rent == Decimal("9010.2")
        assert exact.investor_income == Decimal("901.02")
        assert result.series[1] == ProjectionPoint(year=2, projected_income=901, projected_property_value=13225)

    def test_series_length_and_years(self, calculator: ROICalculator, commercial: PropertyCategory) -> None:
        result = calculator.project(100_00, 1_000_00, commercial, 10)
        assert [p.year for p in result.series] == list(range(1, 11))

    def test_total_returns(self, calculator: ROICalculator, commercial: PropertyCategory) -> None:
        result = calculator.project(100_00, 1_000_00, commercial, 2)

        # 8.06 income + (115.00 - 100.00) equity gain
        assert result.total_return(1) == 23_06
        # 8.06 + 9.0102 income + (132.25 - 100.00) equity gain
        assert result.total_return(2) == 49_32

    def test_total_return_rounds_once(self, calculator: ROICalculator, commercial: PropertyCategory) -> None:
        result = calculator.project(100_00, 1_000_00, commercial, 10)
        exact = result.exact_series
        expected = sum(p.investor_income for p in exact) + exact[-1].investor_equity_value - 100_00

        assert result.total_return(10) == int(expected.quantize(Decimal(1), rounding="ROUND_HALF_UP"))

    def test_five_and_ten_year_returns(self, calculator: ROICalculator, commercial: PropertyCategory) -> None:
        result = calculator.project(100_00, 1_000_00, commercial, 10)

        assert result.total_return_5_year == result.total_return(5)
        assert result.total_return_10_year == result.total_return(10)

    def test_short_horizon_has_no_ten_year_return(
        self, calculator: ROICalculator, commercial: PropertyCategory
    ) -> None:
        result = calculator.project(100_00, 1_000_00, commercial, 3)

        assert result.total_return_5_year is None
        assert result.total_return_10_year is None
        with pytest.raises(KeyError):
            result.total_return(4)

    def test_full_ownership_equity_equals_appreciated_value(
        self, calculator: ROICalculator, commercial: PropertyCategory
    ) -> None:
        result = calculator.project(1_000_00, 1_000_00, commercial, 1)
        point = result.exact_series[0]

        assert result.ownership_fraction == 1
        assert point.investor_equity_value == point.appreciated_value

    def test_non_terminating_ownership(self, calculator: ROICalculator, commercial: PropertyCategory) -> None:
        result = calculator.project(1_00, 3_00, commercial, 1)

        # A third of 3.45 rounds to 1.15
        assert result.series[0].projected_property_value == 1_15


class TestAssumptions:
    """Versioned modelling assumptions."""

    def test_cost_inflation_override(self, commercial: PropertyCategory) -> None:
        calculator = ROICalculator(EconomicsAssumptions(version="flat", cost_inflation_rate=Decimal("0")))
        result = calculator.project(100_00, 1_000_00, commercial, 1)

        assert result.exact_series[0].other_costs == Decimal("2000")
        assert result.assumptions_version == "flat"

    def test_default_cost_inflation(self) -> None:
        assert DEFAULT_ASSUMPTIONS.cost_inflation_rate == Decimal("0.03")

    def test_assumptions_are_frozen(self) -> None:
        with pytest.raises(AttributeError):
            DEFAULT_ASSUMPTIONS.cost_inflation_rate = Decimal("0.05")  # type: ignore[misc]

    def test_negative_inflation_rejected(self) -> None:
        with pytest.raises(InvalidInputError):
            ROICalculator(EconomicsAssumptions(version="bad", cost_inflation_rate=Decimal("-0.01")))


class TestPreconditions:
    """Invalid inputs fail with InvalidInputError and no partial result."""

    def test_amount_above_value(self, calculator: ROICalculator, commercial: PropertyCategory) -> None:
        with pytest.raises(InvalidInputError, match="exceeds"):
            calculator.project(100, 50, commercial, 1)

    @pytest.mark.parametrize(
        ("amount", "value", "horizon"),
        [
            (0, 1_000_00, 1),
            (-100, 1_000_00, 1),
            (100, 0, 1),
            (100, -5, 1),
            (100, 1_000_00, 0),
            (100, 1_000_00, -1),
        ],
    )
    def test_non_positive_inputs(
        self, calculator: ROICalculator, commercial: PropertyCategory, amount: int, value: int, horizon: int
    ) -> None:
        with pytest.raises(InvalidInputError):
            calculator.project(amount, value, commercial, horizon)

    @pytest.mark.parametrize("amount", [100.0, Decimal("100"), "100"])
    def test_non_integer_money_rejected(
        self, calculator: ROICalculator, commercial: PropertyCategory, amount: object
    ) -> None:
        with pytest.raises(InvalidInputError):
            calculator.project(amount, 1_000_00, commercial, 1)  # type: ignore[arg-type]

    def test_non_integer_horizon_rejected(self, calculator: ROICalculator, commercial: PropertyCategory) -> None:
        with pytest.raises(InvalidInputError):
            calculator.project(100, 1_000_00, commercial, 2.5)  # type: ignore[arg-type]


class TestLookupsAndComparison:
    """Category resolution and side-by-side comparison."""

    def test_project_by_id(self, calculator: ROICalculator, yield_model: YieldModel) -> None:
        result = calculator.project_by_id(100_00, 1_000_00, "commercial", yield_model, 5)
        assert result.roi_percent == Decimal("7.2")

    def test_project_by_unknown_id(self, calculator: ROICalculator, yield_model: YieldModel) -> None:
        with pytest.raises(UnknownCategoryError):
            calculator.project_by_id(100_00, 1_000_00, "warehouse", yield_model)

    def test_compare_categories(self, calculator: ROICalculator, yield_model: YieldModel) -> None:
        results = calculator.compare_categories(5_000_00, 1_000_000_00, yield_model, 10)

        assert set(results) == {c.category_id for c in yield_model}
        assert results["hotel"].roi_percent == Decimal("10.2")
        assert results["residential"].roi_percent == Decimal("4.14")
        assert max(results.values(), key=lambda r: r.roi_percent).category_id == "hotel"


class TestDeterminism:
    """Identical inputs give identical results."""

    def test_repeatable(self, calculator: ROICalculator, commercial: PropertyCategory) -> None:
        first = calculator.project(123_45, 9_876_54, commercial, 10)
        second = ROICalculator().project(123_45, 9_876_54, commercial, 10)
        assert first == second

    def test_growth_rate_changes_projection(self, calculator: ROICalculator, commercial: PropertyCategory) -> None:
        faster = replace(commercial, annual_yield_growth_rate=Decimal("0.20"))
        base = calculator.project(100_00, 1_000_00, commercial, 3)
        boosted = calculator.project(100_00, 1_000_00, faster, 3)

        assert boosted.series[2].projected_income > base.series[2].projected_income
        assert boosted.roi_percent == base.roi_percent

    def test_independent_of_caller_precision(self, calculator: ROICalculator, commercial: PropertyCategory) -> None:
        expected = calculator.project(100_000_00, 1_000_000_000_00, commercial, 1)

        with localcontext() as ctx:
            ctx.prec = 6
            result = calculator.project(100_000_00, 1_000_000_000_00, commercial, 1)

        assert result == expected

    def test_independent_of_caller_rounding(self, calculator: ROICalculator, commercial: PropertyCategory) -> None:
        expected = calculator.project(1, 3, commercial, 30)

        with localcontext() as ctx:
            ctx.rounding = ROUND_FLOOR
            ctx.traps[Inexact] = True
            result = calculator.project(1, 3, commercial, 30)

        assert result == expected


class TestExactOwnership:
    """Investor figures stay exact when the ownership share does not terminate."""

    def test_third_share_of_income(self, calculator: ROICalculator, commercial: PropertyCategory) -> None:
        result = calculator.project(1, 3, commercial, 1)
        point = result.exact_series[0]

        # Net rent 0.2418 split three ways
        assert point.investor_income == Decimal("0.0806")
        assert point.investor_equity_value == Decimal("1.15")

    def test_third_share_of_year_zero_income(self, calculator: ROICalculator, commercial: PropertyCategory) -> None:
        result = calculator.project(1_00, 3_00, commercial, 1)

        # Year-0 net rent of 21.6 minor units split three ways
        assert result.investor_annual_income == 7
        assert result.roi_percent == Decimal("7.2")

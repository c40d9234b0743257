"""ROI projection result models."""

from dataclasses import dataclass, field
from decimal import Decimal


@dataclass(frozen=True)
class ProjectionPoint:
    """Investor figures for one projected year, in minor units."""

    year: int
    projected_income: int
    projected_property_value: int


@dataclass(frozen=True)
class ExactProjectionPoint:
    """Unrounded counterpart of ``ProjectionPoint``."""

    year: int
    gross_rent: Decimal
    management_fee: Decimal
    other_costs: Decimal
    net_rent: Decimal
    investor_income: Decimal
    appreciated_value: Decimal
    investor_equity_value: Decimal


@dataclass(frozen=True)
class ROIResult:
    """Current-year economics and projection for one investment.

    Money fields are minor units rounded at the boundary; ``exact_series``
    keeps the full-precision values they were rounded from.
    """

    investment_amount: int
    property_value: int
    category_id: str
    assumptions_version: str
    ownership_fraction: Decimal
    annual_gross_rent: int
    annual_management_fee: int
    annual_other_costs: int
    annual_net_rent: int
    investor_annual_income: int
    monthly_income: int
    roi_percent: Decimal
    series: tuple[ProjectionPoint, ...]
    exact_series: tuple[ExactProjectionPoint, ...] = field(repr=False)
    total_returns: dict[int, int] = field(default_factory=dict)

    @property
    def horizon_years(self) -> int:
        return len(self.series)

    def total_return(self, years: int) -> int:
        """Income over ``years`` plus equity gain at year ``years``."""
        try:
            return self.total_returns[years]
        except KeyError:
            raise KeyError(f"No total return for {years} years (horizon is {self.horizon_years})") from None

    @property
    def total_return_5_year(self) -> int | None:
        return self.total_returns.get(5)

    @property
    def total_return_10_year(self) -> int | None:
        return self.total_returns.get(10)

"""Offering return metrics.

Rates are returned as ``Decimal`` fractions (``Decimal("0.1250")`` for
12.5%) quantized to basis points. Amounts are minor-unit integers.
"""

import logging
from decimal import ROUND_HALF_UP, Decimal
from typing import Sequence

import numpy_financial as npf

from invest_engine.economics.money import (
    ENGINE_CONTEXT,
    precise_context,
    require_minor_units,
    to_minor_units,
    to_rate,
)
from invest_engine.exceptions import InvalidInputError

logger = logging.getLogger(__name__)

BASIS_POINT = Decimal("0.0001")


def _bps(value: Decimal) -> Decimal:
    return value.quantize(BASIS_POINT, rounding=ROUND_HALF_UP, context=ENGINE_CONTEXT)


def _positive_investment(initial_investment: int) -> Decimal:
    require_minor_units("initial_investment", initial_investment)
    if initial_investment <= 0:
        raise InvalidInputError(f"initial_investment must be positive, got {initial_investment}")
    return Decimal(initial_investment)


def irr(cash_flows: Sequence[int]) -> Decimal | None:
    """Internal rate of return of periodic cash flows.

    Returns ``None`` when fewer than two flows are given or no rate
    solves the series.
    """
    if len(cash_flows) < 2:
        return None
    rate = npf.irr([float(cf) for cf in cash_flows])
    if rate is None or rate != rate:  # NaN
        logger.debug("IRR did not converge for %d cash flows", len(cash_flows))
        return None
    return _bps(Decimal(str(rate)))


def property_irr(initial_investment: int, annual_cash_flows: Sequence[int], exit_value: int) -> Decimal | None:
    """IRR of buying at ``initial_investment``, collecting income, then exiting.

    The exit value is received together with the final year's cash flow.
    """
    _positive_investment(initial_investment)
    if not annual_cash_flows:
        raise InvalidInputError("annual_cash_flows must not be empty")
    flows = [-initial_investment, *annual_cash_flows[:-1], annual_cash_flows[-1] + exit_value]
    return irr(flows)


def simple_roi(initial_investment: int, final_value: int) -> Decimal:
    """Total return over the holding period as a fraction of the investment."""
    invested = _positive_investment(initial_investment)
    with precise_context():
        return _bps((Decimal(final_value) - invested) / invested)


def annualized_roi(initial_investment: int, final_value: int, years: int) -> Decimal:
    """Compound annual growth rate from ``initial_investment`` to ``final_value``."""
    invested = _positive_investment(initial_investment)
    if years <= 0:
        raise InvalidInputError(f"years must be positive, got {years}")
    if final_value < 0:
        raise InvalidInputError(f"final_value must be non-negative, got {final_value}")
    with precise_context():
        growth = Decimal(final_value) / invested
        if growth == 0:
            return Decimal("-1.0000")
        return _bps((growth.ln() / years).exp() - 1)


def cash_on_cash(annual_cash_flow: int, initial_investment: int) -> Decimal:
    """Annual pre-tax cash flow over cash invested."""
    invested = _positive_investment(initial_investment)
    with precise_context():
        return _bps(Decimal(annual_cash_flow) / invested)


def equity_multiple(total_returns: int, initial_investment: int) -> Decimal:
    """Total cash returned per unit invested, to two decimals."""
    invested = _positive_investment(initial_investment)
    with precise_context():
        return (Decimal(total_returns) / invested).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def net_rental_yield(gross_yield: object, management_fee_rate: object, other_cost_rate: object) -> Decimal:
    """Rental yield left after management fees and running costs.

    The management fee is charged on gross rent; other costs are a share
    of property value.
    """
    gross = to_rate("gross_yield", gross_yield)
    fee = to_rate("management_fee_rate", management_fee_rate)
    other = to_rate("other_cost_rate", other_cost_rate)
    with precise_context():
        return _bps(gross - gross * fee - other)


def sensitivity(
    initial_investment: int,
    annual_cash_flows: Sequence[int],
    exit_value: int,
    variation: object = Decimal("0.20"),
) -> dict[str, Decimal | None]:
    """Best, base and worst case IRR.

    The best and worst cases scale every cash flow and the exit value up
    or down by ``variation``.
    """
    swing = to_rate("variation", variation)
    if not 0 <= swing <= 1:
        raise InvalidInputError(f"variation must be within [0, 1], got {swing}")

    def scaled(factor: Decimal) -> Decimal | None:
        with precise_context():
            flows = [to_minor_units(Decimal(cf) * factor) for cf in annual_cash_flows]
            exit_scaled = to_minor_units(Decimal(exit_value) * factor)
        return property_irr(initial_investment, flows, exit_scaled)

    with precise_context():
        up, down = 1 + swing, 1 - swing

    return {
        "best_case": scaled(up),
        "base_case": property_irr(initial_investment, annual_cash_flows, exit_value),
        "worst_case": scaled(down),
    }

"""Minor-unit and rate conversions at the engine boundary."""

from decimal import ROUND_HALF_EVEN, ROUND_HALF_UP, Context, Decimal, InvalidOperation, localcontext
from fractions import Fraction

from invest_engine.exceptions import InvalidInputError

# Digits carried by intermediate Decimal arithmetic
PRECISION = 50

# Fixed context for all engine arithmetic, independent of the caller's
ENGINE_CONTEXT = Context(prec=PRECISION, rounding=ROUND_HALF_EVEN)


def precise_context():
    """Decimal context used for every intermediate computation."""
    return localcontext(ENGINE_CONTEXT.copy())


def require_minor_units(name: str, value: object) -> int:
    """Validate an integer minor-unit amount.

    Floats, Decimals and bools are rejected so currency never enters the
    engine as anything but whole minor units.
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidInputError(f"{name} must be an integer amount of minor units, got {value!r}")
    return value


def to_rate(name: str, value: object) -> Decimal:
    """Convert a rate or fraction to an exact ``Decimal``."""
    if isinstance(value, bool):
        raise InvalidInputError(f"{name} must be numeric, got {value!r}")
    if isinstance(value, Decimal):
        rate = value
    elif isinstance(value, int):
        rate = Decimal(value)
    elif isinstance(value, str):
        try:
            rate = Decimal(value)
        except InvalidOperation:
            raise InvalidInputError(f"{name} must be numeric, got {value!r}") from None
    elif isinstance(value, float):
        rate = Decimal(str(value))
    elif isinstance(value, Fraction):
        with precise_context():
            rate = Decimal(value.numerator) / Decimal(value.denominator)
    else:
        raise InvalidInputError(f"{name} must be numeric, got {value!r}")
    if not rate.is_finite():
        raise InvalidInputError(f"{name} must be finite, got {value!r}")
    return rate


def to_fraction(name: str, value: object) -> Fraction:
    """Convert an ownership fraction to an exact ``Fraction``."""
    if isinstance(value, Fraction):
        return value
    return Fraction(to_rate(name, value))


def to_minor_units(value: Decimal) -> int:
    """Round an exact amount to whole minor units (half away from zero)."""
    return int(value.quantize(Decimal(1), rounding=ROUND_HALF_UP, context=ENGINE_CONTEXT))


def from_major(value: str | int | Decimal, minor_unit_digits: int = 2) -> int:
    """Convert a major-unit amount (``"100.50"``) to minor units."""
    amount = Decimal(value).scaleb(minor_unit_digits, context=ENGINE_CONTEXT)
    if amount != amount.to_integral_value():
        raise InvalidInputError(f"{value!r} has more than {minor_unit_digits} decimal places")
    return int(amount)


def to_major(value: int, minor_unit_digits: int = 2) -> Decimal:
    """Convert minor units to a major-unit ``Decimal`` for display."""
    return Decimal(value).scaleb(-minor_unit_digits, context=ENGINE_CONTEXT)

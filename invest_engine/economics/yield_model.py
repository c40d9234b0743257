"""Yield profiles per property category.

The built-in table carries the six categories offered on the platform.
Every category compounds rent growth at 10% and appreciation at 15% a
year; they differ in base yield, fee and running-cost rates.
"""

import logging
from decimal import Decimal
from typing import Iterable, Iterator

from invest_engine.economics.money import precise_context
from invest_engine.exceptions import UnknownCategoryError
from invest_engine.models.investment import PropertyCategory, YieldRange

logger = logging.getLogger(__name__)


def _category(
    category_id: str,
    name: str,
    base_yield: str,
    yield_range: tuple[str, str],
    management_fee: str,
    other_costs: str,
    description: str,
) -> PropertyCategory:
    return PropertyCategory(
        category_id=category_id,
        name=name,
        base_rental_yield=Decimal(base_yield),
        yield_range=YieldRange(min=Decimal(yield_range[0]), max=Decimal(yield_range[1])),
        management_fee_rate=Decimal(management_fee),
        other_cost_rate=Decimal(other_costs),
        annual_yield_growth_rate=Decimal("0.10"),
        annual_appreciation_rate=Decimal("0.15"),
        description=description,
    )


DEFAULT_CATEGORIES: tuple[PropertyCategory, ...] = (
    _category(
        "commercial", "Commercial", "0.10", ("0.08", "0.12"), "0.08", "0.02",
        "Office buildings, retail spaces, and business centers",
    ),
    _category(
        "residential", "Residential", "0.06", ("0.04", "0.08"), "0.06", "0.015",
        "Apartments, villas, and residential complexes",
    ),
    _category(
        "medical", "Medical", "0.125", ("0.10", "0.15"), "0.10", "0.025",
        "Hospitals, clinics, and medical centers",
    ),
    _category(
        "administrative", "Administrative", "0.09", ("0.07", "0.11"), "0.07", "0.02",
        "Government buildings and administrative offices",
    ),
    _category(
        "educational", "Educational", "0.115", ("0.09", "0.14"), "0.09", "0.025",
        "Schools, universities, and training centers",
    ),
    _category(
        "hotel", "Hotel", "0.15", ("0.12", "0.18"), "0.12", "0.03",
        "Hotels, resorts, and hospitality properties",
    ),
)


class YieldModel:
    """Read-only lookup of property category yield profiles.

    Parameters
    ----------
    categories : Iterable[PropertyCategory] | None
        Categories to serve. Defaults to ``DEFAULT_CATEGORIES``. Each is
        validated on construction.
    """

    def __init__(self, categories: Iterable[PropertyCategory] | None = None) -> None:
        table: dict[str, PropertyCategory] = {}
        for category in DEFAULT_CATEGORIES if categories is None else categories:
            category.validate()
            table[category.category_id] = category
        self._categories = table

    def get(self, category_id: str) -> PropertyCategory:
        """Look up a category.

        Raises
        ------
        UnknownCategoryError
            If no profile exists for ``category_id``. Callers must reject
            the operation rather than fall back to another category.
        """
        try:
            return self._categories[category_id]
        except KeyError:
            logger.warning("Unknown property category requested: %r", category_id)
            raise UnknownCategoryError(f"Unknown property category: {category_id!r}") from None

    def categories(self) -> list[PropertyCategory]:
        """All categories in registration order."""
        return list(self._categories.values())

    def __contains__(self, category_id: object) -> bool:
        return category_id in self._categories

    def __iter__(self) -> Iterator[PropertyCategory]:
        return iter(self._categories.values())

    def __len__(self) -> int:
        return len(self._categories)


def gross_rent(property_value: int, category: PropertyCategory, year: int = 0) -> Decimal:
    """Gross annual rent in ``year``, compounding yield growth from year 0."""
    with precise_context():
        base = Decimal(property_value) * category.base_rental_yield
        return base * (1 + category.annual_yield_growth_rate) ** year


def appreciated_value(property_value: int, category: PropertyCategory, year: int) -> Decimal:
    """Property value after ``year`` years of appreciation."""
    with precise_context():
        return Decimal(property_value) * (1 + category.annual_appreciation_rate) ** year

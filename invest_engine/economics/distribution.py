"""Pro-rata income distribution with exact conservation.

A lump amount is split across a property's positions in proportion to
their ownership fractions, normalised by the total owned fraction so that
unsold shares receive nothing and the whole amount reaches investors.
Shares are computed as exact fractions, floored to whole minor units, and
the leftover units are handed out by the largest-remainder method:

1. ``raw_i = total * f_i / sum(f)``
2. ``floor_i = floor(raw_i)``
3. ``R = total - sum(floor_i)``, always fewer than the number of positions
4. the ``R`` positions with the largest ``raw_i - floor_i`` get one more
   unit, ties going to the lower ``(investor_id, position_id)``

Every position gets a record, including zero allocations.
"""

import logging
import math
import uuid
from datetime import date, datetime, time
from fractions import Fraction
from typing import Sequence

from dateutil.relativedelta import relativedelta

from invest_engine.economics.money import require_minor_units, to_fraction
from invest_engine.exceptions import (
    ConservationError,
    InvalidEntityStateError,
    InvalidInputError,
    NothingToDistributeError,
)
from invest_engine.models.investment import (
    DistributionBatch,
    DistributionFrequency,
    DistributionRecord,
    DistributionType,
    InvestmentPosition,
    ScheduledDistribution,
)

logger = logging.getLogger(__name__)


def apportion(total: int, weights: Sequence[Fraction], keys: Sequence[tuple]) -> list[int]:
    """Split ``total`` minor units in proportion to ``weights``.

    Parameters
    ----------
    total : int
        Amount to split. Must be non-negative.
    weights : Sequence[Fraction]
        Non-negative weights with a positive sum.
    keys : Sequence[tuple]
        Tie-break key per weight; lower keys win equal remainders.

    Returns
    -------
    list[int]
        One amount per weight, summing to ``total``.
    """
    weight_sum = sum(weights, Fraction(0))
    raw = [Fraction(total) * w / weight_sum for w in weights]
    floors = [math.floor(r) for r in raw]
    residual = total - sum(floors)

    order = sorted(range(len(raw)), key=lambda i: (-(raw[i] - floors[i]), keys[i]))
    for i in order[:residual]:
        floors[i] += 1

    return floors


class DistributionAllocator:
    """Allocate lump distributions across investment positions.

    The allocator is stateless; whether a batch was already distributed is
    for the persisting caller to decide.
    """

    def allocate(
        self,
        positions: Sequence[InvestmentPosition],
        total_amount: int,
        batch_id: str = "",
    ) -> list[DistributionRecord]:
        """Split ``total_amount`` across ``positions``.

        Parameters
        ----------
        positions : Sequence[InvestmentPosition]
            Ownership snapshot of the property's investors.
        total_amount : int
            Amount to distribute, in minor units.
        batch_id : str
            Batch id stamped on each record.

        Returns
        -------
        list[DistributionRecord]
            One record per position, in input order, summing exactly to
            ``total_amount``.

        Raises
        ------
        NothingToDistributeError
            If ``total_amount`` is not positive, ``positions`` is empty, or
            every ownership fraction is zero.
        InvalidInputError
            If a fraction is outside ``[0, 1]``, fractions sum above 1, or a
            position id repeats.
        ConservationError
            If the allocated amounts fail to sum to ``total_amount``.
        """
        require_minor_units("total_amount", total_amount)
        if total_amount <= 0:
            logger.warning("Rejected distribution of non-positive amount %d", total_amount)
            raise NothingToDistributeError(f"total_amount must be positive, got {total_amount}")
        if not positions:
            logger.warning("Rejected distribution of %d with no positions", total_amount)
            raise NothingToDistributeError("No positions to distribute to")

        fractions = self._ownership_fractions(positions)
        if sum(fractions) == 0:
            raise NothingToDistributeError("All positions have zero ownership")

        keys = [(p.investor_id, p.position_id) for p in positions]
        amounts = apportion(total_amount, fractions, keys)

        allocated = sum(amounts)
        if allocated != total_amount:
            raise ConservationError(f"Allocated {allocated} of {total_amount} across {len(positions)} positions")

        logger.info(
            "Allocated %d across %d positions (owned fraction %s)",
            total_amount,
            len(positions),
            float(sum(fractions)),
        )
        logger.debug("Allocations: %s", dict(zip((p.position_id for p in positions), amounts)))

        return [
            DistributionRecord(
                batch_id=batch_id,
                investor_id=position.investor_id,
                position_id=position.position_id,
                allocated_amount=amount,
                ownership_fraction=position.ownership_fraction,
            )
            for position, amount in zip(positions, amounts)
        ]

    def create_batch(
        self,
        property_id: str,
        positions: Sequence[InvestmentPosition],
        total_amount: int,
        distribution_type: DistributionType | str,
        distribution_date: date,
        notes: str = "",
        batch_id: str | None = None,
        created_at: datetime | None = None,
    ) -> tuple[DistributionBatch, list[DistributionRecord]]:
        """Build a batch and its records for one property.

        Only positions of ``property_id`` held on ``distribution_date`` are
        eligible; the rest are ignored.
        """
        try:
            distribution_type = DistributionType(distribution_type)
        except ValueError:
            raise InvalidInputError(f"Unknown distribution type: {distribution_type!r}") from None

        as_of = datetime.combine(distribution_date, time.max)
        eligible = [p for p in positions if p.property_id == property_id and p.is_active(as_of)]
        if positions and not eligible:
            logger.warning("No positions of property %s held on %s", property_id, distribution_date)

        batch = DistributionBatch(
            batch_id=batch_id or uuid.uuid4().hex,
            property_id=property_id,
            total_amount=total_amount,
            distribution_type=distribution_type,
            distribution_date=distribution_date,
            created_at=created_at or datetime.now(),
            notes=notes,
        )
        records = self.allocate(eligible, total_amount, batch_id=batch.batch_id)
        return batch, records

    def reverse_batch(
        self,
        batch: DistributionBatch,
        records: Sequence[DistributionRecord],
        notes: str = "",
        batch_id: str | None = None,
        created_at: datetime | None = None,
    ) -> tuple[DistributionBatch, list[DistributionRecord]]:
        """Build a batch cancelling ``batch`` by negating each record.

        Raises
        ------
        InvalidEntityStateError
            If ``batch`` is itself a reversal, or ``records`` do not belong
            to ``batch`` or do not sum to its total.
        """
        if batch.is_reversal:
            raise InvalidEntityStateError(f"Batch {batch.batch_id} is a reversal and cannot be reversed")
        if any(r.batch_id != batch.batch_id for r in records):
            raise InvalidEntityStateError(f"Records do not all belong to batch {batch.batch_id}")
        if sum(r.allocated_amount for r in records) != batch.total_amount:
            raise InvalidEntityStateError(f"Records of batch {batch.batch_id} do not sum to its total")

        reversal = DistributionBatch(
            batch_id=batch_id or uuid.uuid4().hex,
            property_id=batch.property_id,
            total_amount=-batch.total_amount,
            distribution_type=batch.distribution_type,
            distribution_date=batch.distribution_date,
            created_at=created_at or datetime.now(),
            reverses_batch_id=batch.batch_id,
            notes=notes,
        )
        reversed_records = [
            DistributionRecord(
                batch_id=reversal.batch_id,
                investor_id=r.investor_id,
                position_id=r.position_id,
                allocated_amount=-r.allocated_amount,
                ownership_fraction=r.ownership_fraction,
            )
            for r in records
        ]
        logger.info("Reversed batch %s (%d records)", batch.batch_id, len(records))
        return reversal, reversed_records

    def _ownership_fractions(self, positions: Sequence[InvestmentPosition]) -> list[Fraction]:
        seen: set[str] = set()
        fractions = []
        for position in positions:
            if position.position_id in seen:
                raise InvalidInputError(f"Duplicate position {position.position_id}")
            seen.add(position.position_id)

            fraction = to_fraction(f"ownership_fraction of {position.position_id}", position.ownership_fraction)
            if not 0 <= fraction <= 1:
                raise InvalidInputError(
                    f"ownership_fraction of {position.position_id} must be within [0, 1], got {fraction}"
                )
            fractions.append(fraction)

        if sum(fractions) > 1:
            raise InvalidInputError(f"Ownership fractions sum to {float(sum(fractions))}, above 1")
        return fractions


def split_schedule(
    annual_amount: int,
    frequency: DistributionFrequency | str,
    start_date: date,
    years: int,
) -> list[ScheduledDistribution]:
    """Split a yearly amount into periodic instalments.

    Each year's instalments sum exactly to ``annual_amount``; leftover
    units go to the earliest instalments of the year.

    Parameters
    ----------
    annual_amount : int
        Amount to distribute per year, in minor units.
    frequency : DistributionFrequency | str
        monthly, quarterly, semi_annual or annual.
    start_date : date
        Date of the first instalment.
    years : int
        Number of years to schedule.
    """
    require_minor_units("annual_amount", annual_amount)
    if annual_amount < 0:
        raise InvalidInputError(f"annual_amount must be non-negative, got {annual_amount}")
    if isinstance(years, bool) or not isinstance(years, int) or years < 1:
        raise InvalidInputError(f"years must be a positive integer, got {years!r}")
    try:
        frequency = DistributionFrequency(frequency)
    except ValueError:
        raise InvalidInputError(f"Unknown distribution frequency: {frequency!r}") from None

    count = frequency.periods_per_year
    per_year = apportion(annual_amount, [Fraction(1)] * count, [(i,) for i in range(count)])

    schedule = []
    for year in range(years):
        for i, amount in enumerate(per_year):
            months = year * 12 + i * frequency.months_per_period
            schedule.append(
                ScheduledDistribution(
                    period=year * count + i + 1,
                    distribution_date=start_date + relativedelta(months=months),
                    amount=amount,
                )
            )
    return schedule

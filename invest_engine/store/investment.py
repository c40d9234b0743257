"""In-memory investment ledger with referential integrity.

Stands in for the persistence collaborator: it snapshots eligible
positions, records allocated batches append-only, and refuses to record
the same distribution twice.
"""

import logging
import uuid
from dataclasses import dataclass, field
from datetime import date, datetime, time
from decimal import Decimal

from invest_engine.economics.distribution import DistributionAllocator
from invest_engine.economics.money import precise_context
from invest_engine.exceptions import (
    DuplicateBatchError,
    EntityNotFoundError,
    InvalidEntityStateError,
    InvalidInputError,
    ReferentialIntegrityError,
)
from invest_engine.models.base import Event
from invest_engine.models.investment import (
    DistributionBatch,
    DistributionRecord,
    DistributionStatus,
    DistributionType,
    InvestmentPosition,
    PayoutStatus,
)

logger = logging.getLogger(__name__)


@dataclass
class PropertyListing:
    """Minimal property reference held by the ledger."""

    property_id: str
    name: str
    category_id: str
    property_value: int  # Minor units
    created_at: datetime | None = None


@dataclass
class InvestmentLedger:
    """In-memory store for positions and distribution batches."""

    properties: dict[str, PropertyListing] = field(default_factory=dict)
    positions: dict[str, InvestmentPosition] = field(default_factory=dict)
    batches: dict[str, DistributionBatch] = field(default_factory=dict)
    records: list[DistributionRecord] = field(default_factory=list)
    events: list[Event] = field(default_factory=list)
    allocator: DistributionAllocator = field(default_factory=DistributionAllocator)

    # Relationship indexes
    _property_positions: dict[str, list[str]] = field(default_factory=dict)
    _investor_positions: dict[str, list[str]] = field(default_factory=dict)
    _property_batches: dict[str, list[str]] = field(default_factory=dict)
    _batch_records: dict[str, list[int]] = field(default_factory=dict)
    _batch_keys: set[tuple[str, DistributionType, date]] = field(default_factory=set)
    _reversed: set[str] = field(default_factory=set)
    _payouts: dict[tuple[str, str], PayoutStatus] = field(default_factory=dict)

    def add_property(self, listing: PropertyListing) -> None:
        """Add a property to the ledger."""
        if listing.created_at is None:
            listing.created_at = datetime.now()
        self.properties[listing.property_id] = listing
        self._property_positions.setdefault(listing.property_id, [])
        self._property_batches.setdefault(listing.property_id, [])

    def add_position(self, position: InvestmentPosition) -> None:
        """Record a confirmed investment position."""
        if position.property_id not in self.properties:
            raise ReferentialIntegrityError(f"Property {position.property_id} not found")
        if position.position_id in self.positions:
            raise InvalidEntityStateError(f"Position {position.position_id} already recorded")

        self.positions[position.position_id] = position
        self._property_positions[position.property_id].append(position.position_id)
        self._investor_positions.setdefault(position.investor_id, []).append(position.position_id)

    def exit_position(self, position_id: str, exited_at: datetime | None = None) -> InvestmentPosition:
        """Soft-exit a position. Positions are never deleted."""
        position = self._get_position(position_id)
        if position.exited_at is not None:
            raise InvalidEntityStateError(f"Position {position_id} already exited at {position.exited_at}")
        position.exited_at = exited_at or datetime.now()
        return position

    # Distribution

    def distribute(
        self,
        property_id: str,
        total_amount: int,
        distribution_type: DistributionType | str,
        distribution_date: date,
        notes: str = "",
    ) -> tuple[DistributionBatch, list[DistributionRecord]]:
        """Allocate a lump amount to a property's investors and record it.

        Raises
        ------
        ReferentialIntegrityError
            If the property is unknown.
        DuplicateBatchError
            If a batch of the same type and date already exists for the
            property and has not been reversed.
        """
        if property_id not in self.properties:
            raise ReferentialIntegrityError(f"Property {property_id} not found")

        try:
            distribution_type = DistributionType(distribution_type)
        except ValueError:
            raise InvalidInputError(f"Unknown distribution type: {distribution_type!r}") from None

        key = (property_id, distribution_type, distribution_date)
        if key in self._batch_keys:
            raise DuplicateBatchError(
                f"{key[1].value} for property {property_id} on {distribution_date} already distributed"
            )

        batch, records = self.allocator.create_batch(
            property_id,
            self.get_property_positions(property_id),
            total_amount,
            distribution_type,
            distribution_date,
            notes=notes,
        )
        self._append_batch(batch, records)
        self._batch_keys.add(key)
        self._emit(
            "distribution_batch.created",
            batch.batch_id,
            {
                "property_id": property_id,
                "total_amount": total_amount,
                "distribution_type": batch.distribution_type.value,
                "records": len(records),
            },
        )
        return batch, records

    def reverse(self, batch_id: str, notes: str = "") -> tuple[DistributionBatch, list[DistributionRecord]]:
        """Cancel a batch by appending a reversing batch."""
        batch = self._get_batch(batch_id)
        if batch_id in self._reversed:
            raise InvalidEntityStateError(f"Batch {batch_id} already reversed")

        reversal, records = self.allocator.reverse_batch(batch, self.get_batch_records(batch_id), notes=notes)
        self._append_batch(reversal, records)
        self._reversed.add(batch_id)
        self._batch_keys.discard((batch.property_id, batch.distribution_type, batch.distribution_date))
        self._emit(
            "distribution_batch.reversed",
            reversal.batch_id,
            {"reverses_batch_id": batch_id, "total_amount": reversal.total_amount},
        )
        return reversal, records

    def mark_processed(self, batch_id: str, position_id: str, processed_at: datetime | None = None) -> PayoutStatus:
        """Mark one record of a batch as paid out."""
        return self._settle(batch_id, position_id, DistributionStatus.PROCESSED, processed_at)

    def mark_failed(self, batch_id: str, position_id: str, failed_at: datetime | None = None) -> PayoutStatus:
        """Mark the payout of one record as failed."""
        return self._settle(batch_id, position_id, DistributionStatus.FAILED, failed_at)

    def get_payout_status(self, batch_id: str, position_id: str) -> PayoutStatus:
        """Current payout state of a record; pending until settled."""
        self._get_record(batch_id, position_id)
        return self._payouts.get((batch_id, position_id), PayoutStatus(batch_id, position_id))

    # Query methods

    def get_property_positions(self, property_id: str, as_of: datetime | None = None) -> list[InvestmentPosition]:
        """Positions of a property, optionally only those held at ``as_of``."""
        position_ids = self._property_positions.get(property_id, [])
        positions = [self.positions[pid] for pid in position_ids]
        if as_of is not None:
            positions = [p for p in positions if p.is_active(as_of)]
        return positions

    def get_investor_positions(self, investor_id: str) -> list[InvestmentPosition]:
        """All positions held or exited by an investor."""
        return [self.positions[pid] for pid in self._investor_positions.get(investor_id, [])]

    def get_batch_records(self, batch_id: str) -> list[DistributionRecord]:
        """Records of a batch."""
        self._get_batch(batch_id)
        return [self.records[i] for i in self._batch_records[batch_id]]

    def get_property_batches(self, property_id: str) -> list[DistributionBatch]:
        """Batches of a property, newest distribution date first."""
        batches = [self.batches[bid] for bid in self._property_batches.get(property_id, [])]
        return sorted(batches, key=lambda b: (b.distribution_date, b.created_at), reverse=True)

    def investor_income_history(self, investor_id: str) -> list[tuple[DistributionBatch, DistributionRecord]]:
        """Every record paid to an investor with its batch, newest first."""
        history = [
            (self.batches[record.batch_id], record)
            for record in self.records
            if record.investor_id == investor_id
        ]
        return sorted(history, key=lambda item: (item[0].distribution_date, item[0].created_at), reverse=True)

    def investor_total_income(self, investor_id: str) -> int:
        """Net amount distributed to an investor, reversals included."""
        return sum(r.allocated_amount for r in self.records if r.investor_id == investor_id)

    def investor_preview(self, property_id: str, as_of: date | None = None) -> dict:
        """Who would receive a distribution of ``property_id`` on ``as_of``."""
        if property_id not in self.properties:
            raise ReferentialIntegrityError(f"Property {property_id} not found")
        as_of_dt = datetime.combine(as_of or date.today(), time.max)
        positions = self.get_property_positions(property_id, as_of=as_of_dt)
        with precise_context():
            total_ownership = sum((p.ownership_fraction for p in positions), Decimal(0))
        return {
            "investors": positions,
            "total_ownership": total_ownership,
            "total_investors": len({p.investor_id for p in positions}),
        }

    def summary(self) -> dict[str, int]:
        """Return summary counts of all entities."""
        return {
            "properties": len(self.properties),
            "positions": len(self.positions),
            "batches": len(self.batches),
            "records": len(self.records),
            "events": len(self.events),
        }

    def _append_batch(self, batch: DistributionBatch, records: list[DistributionRecord]) -> None:
        self.batches[batch.batch_id] = batch
        self._property_batches[batch.property_id].append(batch.batch_id)
        start = len(self.records)
        self.records.extend(records)
        self._batch_records[batch.batch_id] = list(range(start, len(self.records)))

    def _settle(
        self,
        batch_id: str,
        position_id: str,
        status: DistributionStatus,
        at: datetime | None,
    ) -> PayoutStatus:
        record = self._get_record(batch_id, position_id)
        current = self.get_payout_status(batch_id, position_id)
        if current.status != DistributionStatus.PENDING:
            raise InvalidEntityStateError(f"Record for {position_id} in batch {batch_id} is {current.status.value}")

        payout = PayoutStatus(batch_id, position_id, status, at or datetime.now())
        self._payouts[(batch_id, position_id)] = payout
        self._emit(
            f"distribution_record.{status.value}",
            batch_id,
            {"position_id": position_id, "amount": record.allocated_amount},
        )
        return payout

    def _get_record(self, batch_id: str, position_id: str) -> DistributionRecord:
        for record in self.get_batch_records(batch_id):
            if record.position_id == position_id:
                return record
        raise EntityNotFoundError(f"No record for position {position_id} in batch {batch_id}")

    def _get_position(self, position_id: str) -> InvestmentPosition:
        try:
            return self.positions[position_id]
        except KeyError:
            raise EntityNotFoundError(f"Position {position_id} not found") from None

    def _get_batch(self, batch_id: str) -> DistributionBatch:
        try:
            return self.batches[batch_id]
        except KeyError:
            raise EntityNotFoundError(f"Batch {batch_id} not found") from None

    def _emit(self, event_type: str, subject: str, data: dict) -> None:
        event = Event(
            event_id=uuid.uuid4().hex,
            event_type=event_type,
            event_time=datetime.now(),
            source="invest_engine.store.investment",
            subject=subject,
            data=data,
        )
        self.events.append(event)
        logger.info("%s %s", event_type, subject)

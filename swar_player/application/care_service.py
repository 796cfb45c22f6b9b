"""Instrument care tracking on top of the care repository."""

from __future__ import annotations

import uuid
from datetime import date, datetime, timezone
from typing import Callable

from ..domain.care import (
    INSTRUMENT_TYPES,
    CareRecord,
    TuningStatus,
    WarrantyStatus,
    next_tuning_for,
    parse_iso_date,
    tuning_status,
    warranty_expiry_for,
    warranty_status,
)
from ..storage.care_repository import CareRepository


class CareService:
    def __init__(
        self,
        repository: CareRepository,
        logger,
        *,
        id_factory: Callable[[], str] | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.repository = repository
        self.logger = logger
        self._id_factory = id_factory or (lambda: str(uuid.uuid4()))
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def list_instruments(self, owner_id: str) -> list[CareRecord]:
        return self.repository.list_for_owner(_require_owner(owner_id))

    def register_instrument(
        self,
        owner_id: str,
        *,
        instrument_type: str,
        instrument_name: str,
        purchase_date: object,
        purchase_location: str | None = None,
    ) -> CareRecord:
        owner = _require_owner(owner_id)
        kind, name, purchased, location = _validate(
            instrument_type, instrument_name, purchase_date, purchase_location
        )
        record = CareRecord(
            record_id=self._id_factory(),
            owner_id=owner,
            instrument_type=kind,
            instrument_name=name,
            purchase_date=purchased,
            purchase_location=location,
            warranty_expiry=warranty_expiry_for(purchased),
            next_tuning_date=next_tuning_for(purchased),
            created_at=self._clock().isoformat(),
        )
        return self.repository.insert(record)

    def update_instrument(
        self,
        record_id: str,
        owner_id: str,
        *,
        instrument_type: str,
        instrument_name: str,
        purchase_date: object,
        purchase_location: str | None = None,
    ) -> CareRecord:
        owner = _require_owner(owner_id)
        kind, name, purchased, location = _validate(
            instrument_type, instrument_name, purchase_date, purchase_location
        )
        updated = self.repository.update(
            record_id,
            owner,
            {
                "instrument_type": kind,
                "instrument_name": name,
                "purchase_date": purchased,
                "purchase_location": location,
                "warranty_expiry": warranty_expiry_for(purchased),
                "next_tuning_date": next_tuning_for(purchased),
            },
        )
        if not updated:
            raise LookupError(f"Instrument not found: {record_id}")
        record = self.repository.get(record_id, owner)
        if record is None:
            raise LookupError(f"Instrument not found: {record_id}")
        self.logger.info("Care record updated: id=%s owner=%s", record_id, owner)
        return record

    def remove_instrument(self, record_id: str, owner_id: str) -> bool:
        return self.repository.delete(record_id, _require_owner(owner_id)) > 0

    def status_for(self, record: CareRecord, today: date | None = None) -> tuple[WarrantyStatus, TuningStatus]:
        day = today if today is not None else self._clock().date()
        return warranty_status(record, day), tuning_status(record, day)


def _require_owner(owner_id: str) -> str:
    owner = str(owner_id or "").strip()
    if not owner:
        raise ValueError("Sign in to manage your instruments.")
    return owner


def _validate(
    instrument_type: str,
    instrument_name: str,
    purchase_date: object,
    purchase_location: str | None,
) -> tuple[str, str, date, str | None]:
    kind = str(instrument_type or "").strip()
    if kind not in INSTRUMENT_TYPES:
        raise ValueError(f"Unknown instrument type: {kind or '<empty>'}")
    name = str(instrument_name or "").strip()
    if not name:
        raise ValueError("Instrument name is required.")
    purchased = parse_iso_date(purchase_date)
    location = str(purchase_location or "").strip() or None
    return kind, name, purchased, location

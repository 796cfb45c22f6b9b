"""Instrument care records and their derived warranty/tuning dates."""

from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date

INSTRUMENT_TYPES = ("Sitar", "Sarod", "Tabla", "Santoor", "Bansuri", "Harmonium", "Other")

WARRANTY_MONTHS = 12
TUNING_INTERVAL_MONTHS = 6


@dataclass(frozen=True)
class CareRecord:
    record_id: str
    owner_id: str
    instrument_type: str
    instrument_name: str
    purchase_date: date
    warranty_expiry: date
    next_tuning_date: date
    created_at: str
    purchase_location: str | None = None


@dataclass(frozen=True)
class WarrantyStatus:
    is_active: bool
    expiry_date: date


@dataclass(frozen=True)
class TuningStatus:
    is_due: bool
    next_date: date


def add_months(value: date, months: int) -> date:
    """Shift a date by whole months, clamping the day to the target month."""
    month_index = value.month - 1 + months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    day = min(value.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def warranty_expiry_for(purchase_date: date) -> date:
    return add_months(purchase_date, WARRANTY_MONTHS)


def next_tuning_for(purchase_date: date) -> date:
    return add_months(purchase_date, TUNING_INTERVAL_MONTHS)


def parse_iso_date(value: object) -> date:
    if isinstance(value, date):
        return value
    text = str(value or "").strip()
    if not text:
        raise ValueError("Purchase date is required.")
    try:
        return date.fromisoformat(text[:10])
    except ValueError as exc:
        raise ValueError(f"Invalid date: {text}") from exc


def warranty_status(record: CareRecord, today: date) -> WarrantyStatus:
    return WarrantyStatus(is_active=today <= record.warranty_expiry, expiry_date=record.warranty_expiry)


def tuning_status(record: CareRecord, today: date) -> TuningStatus:
    return TuningStatus(is_due=today >= record.next_tuning_date, next_date=record.next_tuning_date)

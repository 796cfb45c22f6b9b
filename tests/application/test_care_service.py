from datetime import date, datetime, timezone
from pathlib import Path

import pytest

from swar_player.application.care_service import CareService
from swar_player.storage.care_repository import CareRepository


class _Logger:
    def __init__(self):
        self.infos = []

    def info(self, message, *args):
        self.infos.append(message % args if args else message)


def _service(tmp_path: Path, logger=None):
    ids = iter(f"rec-{index}" for index in range(1, 100))
    ticks = iter(datetime(2025, 1, 1, 12, minute, tzinfo=timezone.utc) for minute in range(60))
    logger = logger or _Logger()
    repository = CareRepository(str(tmp_path / "data" / "care.sqlite3"), logger)
    return CareService(repository, logger, id_factory=lambda: next(ids), clock=lambda: next(ticks))


def test_register_instrument_derives_care_dates(tmp_path: Path):
    service = _service(tmp_path)

    record = service.register_instrument(
        "user-1",
        instrument_type="Sitar",
        instrument_name="  Hemen sitar ",
        purchase_date="2024-08-31",
        purchase_location="Kolkata",
    )

    assert record.record_id == "rec-1"
    assert record.instrument_name == "Hemen sitar"
    assert record.warranty_expiry == date(2025, 8, 31)
    assert record.next_tuning_date == date(2025, 2, 28)
    assert service.list_instruments("user-1") == [record]


def test_list_instruments_is_newest_first_and_scoped_to_owner(tmp_path: Path):
    service = _service(tmp_path)
    first = service.register_instrument(
        "user-1", instrument_type="Tabla", instrument_name="Pair", purchase_date="2024-01-01"
    )
    second = service.register_instrument(
        "user-1", instrument_type="Bansuri", instrument_name="E bass", purchase_date="2024-02-01"
    )
    service.register_instrument("user-2", instrument_type="Sarod", instrument_name="Other", purchase_date="2024-03-01")

    assert [record.record_id for record in service.list_instruments("user-1")] == [
        second.record_id,
        first.record_id,
    ]


@pytest.mark.parametrize(
    ("kwargs", "message"),
    [
        ({"instrument_type": "Guitar", "instrument_name": "x", "purchase_date": "2024-01-01"}, "Unknown instrument type"),
        ({"instrument_type": "Sitar", "instrument_name": "  ", "purchase_date": "2024-01-01"}, "name is required"),
        ({"instrument_type": "Sitar", "instrument_name": "x", "purchase_date": "01/02/2024"}, "Invalid date"),
        ({"instrument_type": "Sitar", "instrument_name": "x", "purchase_date": ""}, "Purchase date is required"),
    ],
)
def test_register_instrument_validates_input(tmp_path: Path, kwargs, message):
    service = _service(tmp_path)

    with pytest.raises(ValueError, match=message):
        service.register_instrument("user-1", **kwargs)

    assert service.list_instruments("user-1") == []


def test_operations_require_an_owner(tmp_path: Path):
    service = _service(tmp_path)

    with pytest.raises(ValueError, match="Sign in"):
        service.list_instruments("")
    with pytest.raises(ValueError, match="Sign in"):
        service.remove_instrument("rec-1", "  ")


def test_update_instrument_recomputes_dates(tmp_path: Path):
    logger = _Logger()
    service = _service(tmp_path, logger)
    record = service.register_instrument(
        "user-1", instrument_type="Sitar", instrument_name="Old", purchase_date="2024-01-15"
    )

    updated = service.update_instrument(
        record.record_id,
        "user-1",
        instrument_type="Santoor",
        instrument_name="New",
        purchase_date=date(2024, 6, 1),
    )

    assert updated.instrument_type == "Santoor"
    assert updated.warranty_expiry == date(2025, 6, 1)
    assert updated.next_tuning_date == date(2024, 12, 1)
    assert updated.created_at == record.created_at
    assert logger.infos[-1] == "Care record updated: id=rec-1 owner=user-1"


def test_update_instrument_of_other_owner_is_not_found(tmp_path: Path):
    service = _service(tmp_path)
    record = service.register_instrument(
        "user-1", instrument_type="Sitar", instrument_name="Mine", purchase_date="2024-01-15"
    )

    with pytest.raises(LookupError):
        service.update_instrument(
            record.record_id,
            "user-2",
            instrument_type="Sitar",
            instrument_name="Stolen",
            purchase_date="2024-01-15",
        )


def test_remove_instrument_reports_whether_anything_was_deleted(tmp_path: Path):
    service = _service(tmp_path)
    record = service.register_instrument(
        "user-1", instrument_type="Harmonium", instrument_name="Paul & Co", purchase_date="2023-05-05"
    )

    assert service.remove_instrument(record.record_id, "user-2") is False
    assert service.remove_instrument(record.record_id, "user-1") is True
    assert service.remove_instrument(record.record_id, "user-1") is False


def test_status_for_reports_warranty_and_tuning(tmp_path: Path):
    service = _service(tmp_path)
    record = service.register_instrument(
        "user-1", instrument_type="Sarod", instrument_name="Sarod", purchase_date="2024-01-10"
    )

    warranty, tuning = service.status_for(record, today=date(2024, 7, 10))
    assert (warranty.is_active, tuning.is_due) == (True, True)

    warranty, tuning = service.status_for(record, today=date(2025, 1, 11))
    assert warranty.is_active is False
    assert warranty.expiry_date == date(2025, 1, 10)

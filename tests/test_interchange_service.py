from datetime import date
from pathlib import Path

import pytest

from followup_tracker.data.customers_repository import CustomerRepository
from followup_tracker.errors import ContainerReadError
from followup_tracker.models.domain import Customer, FollowUp
from followup_tracker.persistence.filesystem import FileStorage
from followup_tracker.services.interchange import ExportFormat, InterchangeService, detect_format


def _customer(cid: str, promise: date = date(2025, 5, 5)) -> Customer:
    return Customer(
        id=cid,
        name=f"Customer {cid}",
        phone_number="0500000000",
        amount=100.0,
        promise_date=promise,
        created_at=1_700_000_000_000,
        updated_at=1_700_000_000_000,
    )


@pytest.fixture
def service(tmp_path: Path) -> InterchangeService:
    store = CustomerRepository()
    store.import_data(
        [_customer("C1"), _customer("C2")],
        [FollowUp(id="F1", customer_id="C1", notes="called", timestamp=1_700_000_100_000)],
    )
    return InterchangeService(store, FileStorage(root=tmp_path))


@pytest.mark.parametrize("fmt", [ExportFormat.CSV, ExportFormat.XLSX])
def test_export_then_import_into_empty_store(service: InterchangeService, tmp_path: Path, fmt: ExportFormat):
    path = service.export(fmt)

    assert path.parent == tmp_path / "exports"
    assert path.suffix == f".{fmt.value}"
    assert path.name.startswith("followup_export_")

    target = InterchangeService(CustomerRepository(), FileStorage(root=tmp_path))
    summary = target.import_file(path)

    assert (summary.customers, summary.follow_ups) == (2, 1)
    assert target.store.list_customers() == service.store.list_customers()
    assert target.store.list_follow_ups() == service.store.list_follow_ups()


def test_consecutive_exports_do_not_overwrite(service: InterchangeService):
    first = service.export(ExportFormat.CSV)
    second = service.export(ExportFormat.CSV)

    assert first != second
    assert first.exists() and second.exists()


def test_import_upserts_existing_records(service: InterchangeService):
    payload = service.storage.read_bytes(service.export(ExportFormat.CSV))
    service.store.clear_all()
    service.store.insert_customer(_customer("C3"))

    summary = service.import_bytes(payload, "backup.CSV")

    assert summary.customers == 2
    assert [c.id for c in service.store.list_customers()] == ["C1", "C2", "C3"]


def test_detect_format_rejects_unknown_suffix():
    assert detect_format("Data.XLSX") is ExportFormat.XLSX
    with pytest.raises(ContainerReadError):
        detect_format("notes.txt")


def test_import_missing_file_raises_container_error(service: InterchangeService, tmp_path: Path):
    with pytest.raises(ContainerReadError):
        service.import_file(tmp_path / "missing.csv")


def test_corrupt_workbook_leaves_store_untouched(service: InterchangeService):
    before = service.store.list_customers()

    with pytest.raises(ContainerReadError):
        service.import_bytes(b"not a workbook", "broken.xlsx")

    assert service.store.list_customers() == before

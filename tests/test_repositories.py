from dataclasses import replace
from datetime import date
from pathlib import Path

import pytest

from followup_tracker.data.customers_repository import CustomerRepository
from followup_tracker.data.preferences_repository import PreferencesRepository
from followup_tracker.errors import ContainerReadError
from followup_tracker.models.domain import Customer, FollowUp, NotificationTime
from followup_tracker.persistence.filesystem import FileStorage


def _customer(cid: str, name: str, promise: date, amount: float = 10.0) -> Customer:
    return Customer(id=cid, name=name, phone_number=f"05{cid}", amount=amount, promise_date=promise)


def test_customers_ordered_by_promise_date_then_name():
    store = CustomerRepository()
    store.insert_customer(_customer("1", "Zaid", date(2025, 1, 2)))
    store.insert_customer(_customer("2", "Amal", date(2025, 1, 2)))
    store.insert_customer(_customer("3", "Omar", date(2025, 1, 1), amount=99.0))

    assert [c.id for c in store.list_customers()] == ["3", "2", "1"]
    assert [c.id for c in store.list_customers_for_date(date(2025, 1, 2))] == ["2", "1"]
    assert [c.id for c in store.list_customers_by_name()] == ["2", "3", "1"]
    assert store.list_customers_by_amount()[0].id == "3"
    assert [c.id for c in store.search_customers("am")] == ["2"]


def test_update_bumps_updated_timestamp_monotonically():
    store = CustomerRepository()
    original = store.insert_customer(replace(_customer("1", "Amal", date(2025, 1, 1)), updated_at=10**15))

    updated = store.update_customer(replace(original, notes="changed"))

    assert updated.id == original.id
    assert updated.updated_at > original.updated_at
    with pytest.raises(KeyError):
        store.update_customer(_customer("missing", "Nobody", date(2025, 1, 1)))


def test_delete_customer_cascades_follow_ups_but_keeps_orphans():
    store = CustomerRepository()
    store.insert_customer(_customer("1", "Amal", date(2025, 1, 1)))
    store.add_follow_up(FollowUp(id="F1", customer_id="1", timestamp=1))
    store.add_follow_up(FollowUp(id="F2", customer_id="ghost", timestamp=2))

    assert store.delete_customer("1") is True
    assert [f.id for f in store.list_follow_ups()] == ["F2"]
    assert store.delete_customer("1") is False


def test_follow_up_with_next_date_moves_promise_date():
    store = CustomerRepository()
    store.insert_customer(_customer("1", "Amal", date(2025, 1, 1)))

    store.add_follow_up(FollowUp(id="F1", customer_id="1", timestamp=1, next_promise_date=date(2025, 2, 1)))
    store.add_follow_up(FollowUp(id="F2", customer_id="1", timestamp=2))

    assert store.get_customer("1").promise_date == date(2025, 2, 1)
    assert [f.id for f in store.list_follow_ups_for_customer("1")] == ["F2", "F1"]
    assert store.follow_up_counts() == {"1": 2}


def test_snapshot_survives_restart(tmp_path: Path):
    storage = FileStorage(root=tmp_path)
    store = CustomerRepository(storage)
    store.import_data(
        [_customer("1", "Amal", date(2025, 1, 1))],
        [FollowUp(id="F1", customer_id="1", notes="hi", timestamp=5, next_promise_date=date(2025, 1, 9))],
    )

    reloaded = CustomerRepository(FileStorage(root=tmp_path))

    assert reloaded.list_customers() == store.list_customers()
    assert reloaded.list_follow_ups() == store.list_follow_ups()

    reloaded.clear_all()
    assert CustomerRepository(FileStorage(root=tmp_path)).list_customers() == []


def test_preferences_default_to_nine_oclock(tmp_path: Path):
    prefs = PreferencesRepository(FileStorage(root=tmp_path))

    times = prefs.notification_times()

    assert [(t.hour, t.minute, t.is_enabled) for t in times] == [(9, 0, True)]


def test_preferences_add_update_remove_persist(tmp_path: Path):
    prefs = PreferencesRepository(FileStorage(root=tmp_path))
    prefs.set_notification_times([NotificationTime(hour=9, minute=0, id="a")])
    prefs.add_notification_time(NotificationTime(hour=18, minute=30, id="b"))
    prefs.update_notification_time(NotificationTime(hour=19, minute=0, is_enabled=False, id="b"))

    reloaded = PreferencesRepository(FileStorage(root=tmp_path)).notification_times()
    assert [(t.id, t.hour, t.minute, t.is_enabled) for t in reloaded] == [
        ("a", 9, 0, True),
        ("b", 19, 0, False),
    ]

    prefs.remove_notification_time("a")
    assert [t.id for t in prefs.notification_times()] == ["b"]
    with pytest.raises(KeyError):
        prefs.remove_notification_time("a")
    with pytest.raises(KeyError):
        prefs.update_notification_time(NotificationTime(hour=1, minute=1, id="zzz"))


def test_corrupt_preferences_fall_back_to_default(tmp_path: Path):
    (tmp_path / "preferences.json").write_text("{not json", encoding="utf-8")

    times = PreferencesRepository(FileStorage(root=tmp_path)).notification_times()

    assert [(t.hour, t.minute) for t in times] == [(9, 0)]


def test_corrupt_customer_snapshot_is_reported_and_left_in_place(tmp_path: Path, caplog):
    snapshot = tmp_path / "customers.json"
    snapshot.write_text("{not json", encoding="utf-8")

    with pytest.raises(ContainerReadError):
        CustomerRepository(FileStorage(root=tmp_path))

    assert str(snapshot) in caplog.text
    assert snapshot.read_text(encoding="utf-8") == "{not json"


def test_notification_time_validates_range():
    with pytest.raises(ValueError):
        NotificationTime(hour=24, minute=0)
    with pytest.raises(ValueError):
        NotificationTime(hour=0, minute=60)
    assert NotificationTime(hour=7, minute=5).time_string == "07:05"


def test_update_and_delete_follow_up():
    store = CustomerRepository()
    store.add_follow_up(FollowUp(id="F1", customer_id="1", notes="first", timestamp=1))

    store.update_follow_up(FollowUp(id="F1", customer_id="1", notes="edited", timestamp=1))

    assert store.list_follow_ups()[0].notes == "edited"
    assert store.delete_follow_up("F1") is True
    assert store.delete_follow_up("F1") is False
    with pytest.raises(KeyError):
        store.update_follow_up(FollowUp(id="F1", customer_id="1"))

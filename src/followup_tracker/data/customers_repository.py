"""Record store for customers and their follow-up calls."""

from __future__ import annotations

import logging
import threading
from dataclasses import replace
from datetime import date
from pathlib import Path
from typing import Any, Iterable, Optional, Protocol

from ..errors import ContainerReadError
from ..models.domain import Customer, FollowUp, now_millis
from ..persistence.filesystem import FileStorage

logger = logging.getLogger(__name__)

SNAPSHOT_FILE_NAME = "customers.json"


class CustomerStore(Protocol):
    """Read/write calls the interchange and reminder services need from a store."""

    def list_customers(self) -> list[Customer]: ...

    def list_customers_for_date(self, promise_date: date) -> list[Customer]: ...

    def list_follow_ups(self) -> list[FollowUp]: ...

    def import_data(self, customers: Iterable[Customer], follow_ups: Iterable[FollowUp]) -> None: ...

    def clear_all(self) -> None: ...


def customer_to_record(customer: Customer) -> dict[str, Any]:
    return {
        "id": customer.id,
        "name": customer.name,
        "phone_number": customer.phone_number,
        "amount": customer.amount,
        "promise_date": customer.promise_date.isoformat(),
        "notes": customer.notes,
        "name_editable": customer.name_editable,
        "phone_editable": customer.phone_editable,
        "amount_editable": customer.amount_editable,
        "created_at": customer.created_at,
        "updated_at": customer.updated_at,
    }


def customer_from_record(record: dict[str, Any]) -> Customer:
    return Customer(
        id=str(record["id"]),
        name=record.get("name", ""),
        phone_number=record.get("phone_number", ""),
        amount=float(record.get("amount", 0.0)),
        promise_date=date.fromisoformat(record["promise_date"]),
        notes=record.get("notes", ""),
        name_editable=bool(record.get("name_editable", True)),
        phone_editable=bool(record.get("phone_editable", True)),
        amount_editable=bool(record.get("amount_editable", True)),
        created_at=int(record["created_at"]),
        updated_at=int(record["updated_at"]),
    )


def follow_up_to_record(follow_up: FollowUp) -> dict[str, Any]:
    return {
        "id": follow_up.id,
        "customer_id": follow_up.customer_id,
        "notes": follow_up.notes,
        "timestamp": follow_up.timestamp,
        "next_promise_date": follow_up.next_promise_date.isoformat() if follow_up.next_promise_date else None,
    }


def follow_up_from_record(record: dict[str, Any]) -> FollowUp:
    next_date = record.get("next_promise_date")
    return FollowUp(
        id=str(record["id"]),
        customer_id=str(record["customer_id"]),
        notes=record.get("notes", ""),
        timestamp=int(record["timestamp"]),
        next_promise_date=date.fromisoformat(next_date) if next_date else None,
    )


class CustomerRepository:
    """In-process customer/follow-up store with an optional JSON snapshot on disk.

    Follow-ups reference customers by id only; orphans are kept as-is. Deleting
    a customer removes its follow-ups.
    """

    def __init__(self, storage: FileStorage | None = None) -> None:
        self._storage = storage
        self._lock = threading.RLock()
        self._customers: dict[str, Customer] = {}
        self._follow_ups: dict[str, FollowUp] = {}
        if storage is not None:
            self._load_snapshot()

    @property
    def snapshot_path(self) -> Optional[Path]:
        if self._storage is None:
            return None
        return self._storage.root / SNAPSHOT_FILE_NAME

    # Customers

    def list_customers(self) -> list[Customer]:
        """All customers ordered by promise date, then name."""
        with self._lock:
            return sorted(self._customers.values(), key=lambda c: (c.promise_date, c.name))

    def list_customers_for_date(self, promise_date: date) -> list[Customer]:
        with self._lock:
            matches = [c for c in self._customers.values() if c.promise_date == promise_date]
        return sorted(matches, key=lambda c: c.name)

    def list_customers_by_name(self) -> list[Customer]:
        with self._lock:
            return sorted(self._customers.values(), key=lambda c: c.name)

    def list_customers_by_amount(self) -> list[Customer]:
        with self._lock:
            return sorted(self._customers.values(), key=lambda c: c.amount, reverse=True)

    def search_customers(self, query: str) -> list[Customer]:
        needle = query.strip().lower()
        with self._lock:
            return [
                c
                for c in self._customers.values()
                if needle in c.name.lower() or needle in c.phone_number.lower()
            ]

    def get_customer(self, customer_id: str) -> Optional[Customer]:
        with self._lock:
            return self._customers.get(customer_id)

    def insert_customer(self, customer: Customer) -> Customer:
        """Insert or replace a customer by id."""
        with self._lock:
            self._customers[customer.id] = customer
            self._save_snapshot()
        return customer

    def update_customer(self, customer: Customer) -> Customer:
        with self._lock:
            existing = self._customers.get(customer.id)
            if existing is None:
                raise KeyError(f"Customer not found: {customer.id}")
            updated = replace(customer, updated_at=max(now_millis(), existing.updated_at + 1))
            self._customers[customer.id] = updated
            self._save_snapshot()
        return updated

    def delete_customer(self, customer_id: str) -> bool:
        with self._lock:
            removed = self._customers.pop(customer_id, None)
            if removed is None:
                return False
            self._follow_ups = {
                key: value for key, value in self._follow_ups.items() if value.customer_id != customer_id
            }
            self._save_snapshot()
        return True

    # Follow-ups

    def list_follow_ups(self) -> list[FollowUp]:
        with self._lock:
            return sorted(self._follow_ups.values(), key=lambda f: (f.customer_id, f.timestamp))

    def list_follow_ups_for_customer(self, customer_id: str) -> list[FollowUp]:
        """Follow-ups for one customer, newest first."""
        with self._lock:
            matches = [f for f in self._follow_ups.values() if f.customer_id == customer_id]
        return sorted(matches, key=lambda f: f.timestamp, reverse=True)

    def follow_up_counts(self) -> dict[str, int]:
        counts: dict[str, int] = {}
        with self._lock:
            for follow_up in self._follow_ups.values():
                counts[follow_up.customer_id] = counts.get(follow_up.customer_id, 0) + 1
        return counts

    def add_follow_up(self, follow_up: FollowUp) -> FollowUp:
        """Log a call; a next promise date moves the customer's promise date."""
        with self._lock:
            self._follow_ups[follow_up.id] = follow_up
            customer = self._customers.get(follow_up.customer_id)
            if customer is not None and follow_up.next_promise_date is not None:
                self._customers[customer.id] = replace(
                    customer,
                    promise_date=follow_up.next_promise_date,
                    updated_at=max(now_millis(), customer.updated_at + 1),
                )
            self._save_snapshot()
        return follow_up

    def update_follow_up(self, follow_up: FollowUp) -> FollowUp:
        with self._lock:
            if follow_up.id not in self._follow_ups:
                raise KeyError(f"Follow-up not found: {follow_up.id}")
            self._follow_ups[follow_up.id] = follow_up
            self._save_snapshot()
        return follow_up

    def delete_follow_up(self, follow_up_id: str) -> bool:
        with self._lock:
            removed = self._follow_ups.pop(follow_up_id, None)
            if removed is not None:
                self._save_snapshot()
        return removed is not None

    # Bulk

    def import_data(self, customers: Iterable[Customer], follow_ups: Iterable[FollowUp]) -> None:
        """Upsert customers and follow-ups by id."""
        with self._lock:
            for customer in customers:
                self._customers[customer.id] = customer
            for follow_up in follow_ups:
                self._follow_ups[follow_up.id] = follow_up
            self._save_snapshot()

    def clear_all(self) -> None:
        with self._lock:
            self._follow_ups.clear()
            self._customers.clear()
            self._save_snapshot()

    # Snapshot

    def _load_snapshot(self) -> None:
        path = self.snapshot_path
        if path is None or not path.exists():
            return
        # A corrupt snapshot is never replaced by an empty store
        try:
            payload = self._storage.read_json(path)
            customers = [customer_from_record(record) for record in payload.get("customers", [])]
            follow_ups = [follow_up_from_record(record) for record in payload.get("follow_ups", [])]
        except (OSError, ValueError, KeyError, TypeError, AttributeError) as exc:
            logger.error(f"Unreadable customer snapshot at {path}: {exc}")
            raise ContainerReadError(f"Unreadable customer snapshot at {path}: {exc}") from exc
        for customer in customers:
            self._customers[customer.id] = customer
        for follow_up in follow_ups:
            self._follow_ups[follow_up.id] = follow_up
        logger.info(
            f"Loaded {len(self._customers)} customers and {len(self._follow_ups)} follow-ups from {path}"
        )

    def _save_snapshot(self) -> None:
        path = self.snapshot_path
        if path is None:
            return
        self._storage.write_json(
            path,
            {
                "customers": [customer_to_record(c) for c in self._customers.values()],
                "follow_ups": [follow_up_to_record(f) for f in self._follow_ups.values()],
            },
        )

from datetime import date

from followup_tracker.data.customers_repository import CustomerRepository
from followup_tracker.errors import EvaluationError
from followup_tracker.models.domain import Customer
from followup_tracker.services.notifications import LoggingNotifier, ReminderEvaluator

TODAY = date(2025, 4, 15)


def _customer(cid: str, promise: date) -> Customer:
    return Customer(id=cid, name=f"Customer {cid}", phone_number="0500", amount=50.0, promise_date=promise)


def _store(*promises: date) -> CustomerRepository:
    store = CustomerRepository()
    store.import_data([_customer(f"C{idx}", promise) for idx, promise in enumerate(promises)], [])
    return store


def test_alerts_once_with_count_of_customers_due_today():
    notifier = LoggingNotifier()
    store = _store(TODAY, TODAY, TODAY, date(2025, 4, 16), date(2025, 4, 14))
    evaluator = ReminderEvaluator(
        store,
        notifier,
        today=lambda: TODAY,
        title="Calls due",
        message_template="{count} to call",
    )

    outcome = evaluator.run()

    assert outcome.due_count == 3
    assert outcome.alerted is True
    assert [(a.title, a.body) for a in notifier.alerts] == [("Calls due", "3 to call")]


def test_no_alert_when_nobody_is_due():
    notifier = LoggingNotifier()
    evaluator = ReminderEvaluator(_store(date(2025, 4, 16)), notifier, today=lambda: TODAY)

    outcome = evaluator.run()

    assert outcome.due_count == 0
    assert outcome.alerted is False
    assert notifier.alerts == []


def test_store_failure_is_reported_and_not_raised():
    class BrokenStore:
        def list_customers_for_date(self, promise_date):
            raise OSError("database locked")

    reported: list[EvaluationError] = []
    notifier = LoggingNotifier()
    evaluator = ReminderEvaluator(BrokenStore(), notifier, today=lambda: TODAY, error_sink=reported.append)

    outcome = evaluator()

    assert outcome.alerted is False
    assert isinstance(outcome.error, EvaluationError)
    assert reported == [outcome.error]
    assert isinstance(outcome.error.__cause__, OSError)
    assert notifier.alerts == []


def test_notifier_and_sink_failures_do_not_escape():
    class BrokenNotifier:
        def show(self, title, body):
            raise RuntimeError("no display")

    def broken_sink(error):
        raise RuntimeError("sink offline")

    evaluator = ReminderEvaluator(_store(TODAY), BrokenNotifier(), today=lambda: TODAY, error_sink=broken_sink)

    outcome = evaluator.run()

    assert outcome.due_count == 1
    assert outcome.alerted is False
    assert outcome.error is not None


def test_each_fire_reads_current_data():
    notifier = LoggingNotifier()
    store = _store()
    evaluator = ReminderEvaluator(store, notifier, today=lambda: TODAY)

    assert evaluator.run().alerted is False
    store.insert_customer(_customer("late", TODAY))
    assert evaluator.run().due_count == 1
    assert len(notifier.alerts) == 1

"""Unit tests for the pure payment reconciliation."""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from areca.db.models import PaymentStatus
from areca.services.payment_reconciliation import NO_PAYMENT_STATUS, reconcile_payment_status

T0 = datetime(2024, 3, 1, 8, 0, tzinfo=timezone.utc)


def at(minutes: int) -> datetime:
    return T0 + timedelta(minutes=minutes)


@dataclass
class Emp:
    id: str
    name: str


@dataclass
class Rec:
    employee_id: str
    kilograms: float
    created_at: datetime


@dataclass
class Pay:
    employee_id: str
    status: PaymentStatus
    created_at: datetime
    paid_at: datetime | None = None


def test_employee_without_payment_has_everything_pending() -> None:
    employees = [Emp("e1", "Ana")]
    records = [Rec("e1", 10, at(0)), Rec("e1", 5.5, at(10))]

    [summary] = reconcile_payment_status(employees, records, [])

    assert summary.employee_id == "e1"
    assert summary.employee_name == "Ana"
    assert summary.has_payment is False
    assert summary.payment_status == NO_PAYMENT_STATUS
    assert summary.total_kilograms == 15.5
    assert summary.pending_kilograms == 15.5
    assert summary.has_new_records_after_payment is True
    assert summary.last_payment_date is None
    assert summary.paid_at is None


def test_only_records_created_after_paid_at_are_pending() -> None:
    employees = [Emp("e1", "Ana")]
    records = [Rec("e1", 10, at(0)), Rec("e1", 20, at(30)), Rec("e1", 7, at(90))]
    payments = [Pay("e1", PaymentStatus.PAID, created_at=at(60), paid_at=at(60))]

    [summary] = reconcile_payment_status(employees, records, payments)

    assert summary.has_payment is True
    assert summary.payment_status == "PAID"
    assert summary.total_kilograms == 37
    assert summary.pending_kilograms == 7
    assert summary.has_new_records_after_payment is True
    assert summary.last_payment_date == at(60)
    assert summary.paid_at == at(60)


def test_record_created_exactly_at_watermark_is_settled() -> None:
    payments = [Pay("e1", PaymentStatus.PAID, created_at=at(5), paid_at=at(5))]

    [summary] = reconcile_payment_status([Emp("e1", "Ana")], [Rec("e1", 3, at(5))], payments)

    assert summary.pending_kilograms == 0
    assert summary.has_new_records_after_payment is False


def test_latest_payment_is_chosen_by_created_at() -> None:
    records = [Rec("e1", 4, at(10)), Rec("e1", 6, at(50))]
    payments = [
        # settled later but recorded earlier: not the latest
        Pay("e1", PaymentStatus.PAID, created_at=at(20), paid_at=at(100)),
        Pay("e1", PaymentStatus.PAID, created_at=at(40), paid_at=at(40)),
    ]

    [summary] = reconcile_payment_status([Emp("e1", "Ana")], records, payments)

    assert summary.paid_at == at(40)
    assert summary.pending_kilograms == 6


def test_pending_latest_payment_does_not_advance_watermark() -> None:
    records = [Rec("e1", 4, at(10)), Rec("e1", 6, at(50))]
    payments = [
        Pay("e1", PaymentStatus.PAID, created_at=at(20), paid_at=at(20)),
        Pay("e1", PaymentStatus.PENDING, created_at=at(60)),
    ]

    [summary] = reconcile_payment_status([Emp("e1", "Ana")], records, payments)

    assert summary.payment_status == "PENDING"
    assert summary.has_payment is True
    assert summary.paid_at is None
    assert summary.pending_kilograms == 10


def test_employee_without_records_is_reported() -> None:
    [summary] = reconcile_payment_status([Emp("e1", "Ana")], [], [])

    assert summary.total_kilograms == 0
    assert summary.pending_kilograms == 0
    assert summary.has_new_records_after_payment is False


def test_one_summary_per_employee_in_input_order() -> None:
    employees = [Emp("e2", "Bruno"), Emp("e1", "Ana"), Emp("e3", "Caio")]
    records = [Rec("e1", 1, at(0)), Rec("e2", 2, at(0)), Rec("e9", 50, at(0))]

    summaries = reconcile_payment_status(employees, records, [])

    assert [s.employee_id for s in summaries] == ["e2", "e1", "e3"]
    assert [s.total_kilograms for s in summaries] == [2, 1, 0]


def test_pending_never_exceeds_total_and_inputs_are_untouched() -> None:
    employees = [Emp("e1", "Ana"), Emp("e2", "Bruno")]
    records = [Rec("e1", 2, at(i)) for i in range(10)] + [Rec("e2", 1, at(i)) for i in range(5)]
    payments = [Pay("e1", PaymentStatus.PAID, created_at=at(4), paid_at=at(4))]
    snapshot = (list(employees), list(records), list(payments))

    first = reconcile_payment_status(employees, records, payments)
    second = reconcile_payment_status(employees, records, payments)

    assert first == second
    assert (employees, records, payments) == snapshot
    for summary in first:
        assert summary.pending_kilograms <= summary.total_kilograms
    assert first[0].pending_kilograms == 10


def test_accepts_single_pass_iterables() -> None:
    records = iter([Rec("e1", 1, at(0)), Rec("e1", 2, at(1))])
    payments = iter([Pay("e1", PaymentStatus.PAID, created_at=at(0), paid_at=at(0))])

    [summary] = reconcile_payment_status([Emp("e1", "Ana")], records, payments)

    assert summary.pending_kilograms == 2

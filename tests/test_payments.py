"""Unit tests for payment progress aggregation."""

from decimal import Decimal

from app.api.v1.fees.schemas import PaymentRecord
from app.api.v1.fees.service import aggregate_payments
from app.core.enums import StudentFeeStatus


def _payments(*amounts: str, status: str = "paid"):
    return [PaymentRecord(amount_paid=Decimal(a), status=status) for a in amounts]


def test_fully_paid() -> None:
    summary = aggregate_payments(Decimal("10000"), _payments("6000", "4000"))
    assert summary.total_paid == Decimal("10000")
    assert summary.remaining == Decimal("0")
    assert summary.percent_paid == 100
    assert summary.payment_state == StudentFeeStatus.paid


def test_nothing_paid() -> None:
    summary = aggregate_payments(Decimal("10000"), [])
    assert summary.total_paid == Decimal("0")
    assert summary.remaining == Decimal("10000")
    assert summary.percent_paid == 0
    assert summary.payment_state == StudentFeeStatus.unpaid


def test_partially_paid() -> None:
    summary = aggregate_payments(Decimal("10000"), _payments("2500"))
    assert summary.remaining == Decimal("7500")
    assert summary.percent_paid == 25
    assert summary.payment_state == StudentFeeStatus.partial


def test_percent_rounds_half_up() -> None:
    assert aggregate_payments(Decimal("8"), _payments("1")).percent_paid == 13
    assert aggregate_payments(Decimal("3"), _payments("1")).percent_paid == 33
    assert aggregate_payments(Decimal("1000"), _payments("995")).percent_paid == 100


def test_overpayment_clamped() -> None:
    summary = aggregate_payments(Decimal("10000"), _payments("12000"))
    assert summary.remaining == Decimal("0")
    assert summary.percent_paid == 100
    assert summary.payment_state == StudentFeeStatus.paid


def test_aggregation_is_repeatable() -> None:
    payments = _payments("1000", "250.50")
    assert aggregate_payments(Decimal("5000"), payments) == aggregate_payments(Decimal("5000"), payments)


def test_payment_status_not_filtered() -> None:
    """Every payment handed in counts; which ones to pass is the caller's decision."""
    payments = _payments("1000") + _payments("500", status="pending_verification")
    assert aggregate_payments(Decimal("5000"), payments).total_paid == Decimal("1500")


def test_decimal_sums_do_not_drift() -> None:
    summary = aggregate_payments(Decimal("0.3"), _payments("0.1", "0.2"))
    assert summary.remaining == Decimal("0")
    assert summary.payment_state == StudentFeeStatus.paid


def test_zero_fee_counts_as_paid() -> None:
    """Full waiver: nothing is owed, so the fee is paid; percent stays 0."""
    summary = aggregate_payments(Decimal("0"), [])
    assert summary.remaining == Decimal("0")
    assert summary.percent_paid == 0
    assert summary.payment_state == StudentFeeStatus.paid


def test_no_billable_fee() -> None:
    summary = aggregate_payments(None, [])
    assert summary.remaining == Decimal("0")
    assert summary.percent_paid == 0
    assert summary.payment_state == StudentFeeStatus.unpaid
    assert aggregate_payments(None, _payments("100")).payment_state == StudentFeeStatus.partial

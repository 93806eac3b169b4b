"""Fees service: standard vs custom fee reconciliation, payment progress, custom fee guards. Pure functions over snapshots."""

import logging
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Union

from fastapi import status

from app.core.enums import CustomFeeBlockReason, DiscountKind, FeeFrequency, StudentFeeStatus
from app.core.exceptions import ServiceError

from .resolver import resolve_student_class
from .schemas import (
    BreakdownComparisonItem,
    CustomFee,
    CustomFeeUpdateComparison,
    FeeReconciliation,
    FeeStructure,
    PaymentRecord,
    PaymentSummary,
    ReconciliationResult,
    ResolvedClass,
    Student,
)

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


def _to_decimal(val) -> Decimal:
    if val is None:
        return ZERO
    return val if isinstance(val, Decimal) else Decimal(str(val))


# --- Lookups ---
def find_fee_structure(
    fee_structures: Iterable[FeeStructure],
    class_name: Optional[str],
    section: Optional[str],
    academic_year: str,
) -> Optional[FeeStructure]:
    if not class_name or not section:
        return None
    return next(
        (
            fs
            for fs in fee_structures
            if fs.class_name == class_name and fs.section == section and fs.academic_year == academic_year
        ),
        None,
    )


def find_custom_fee(
    custom_fees: Iterable[CustomFee],
    student_id: str,
    academic_year: str,
) -> Optional[CustomFee]:
    student_id = str(student_id)
    return next(
        (cf for cf in custom_fees if str(cf.student_id) == student_id and cf.academic_year == academic_year),
        None,
    )


# --- Fee reconciliation ---
def discount_kind(discount: Optional[Decimal]) -> DiscountKind:
    if discount is None or discount == 0:
        return DiscountKind.NONE
    return DiscountKind.DISCOUNT if discount > 0 else DiscountKind.SURCHARGE


def breakdown_total(breakdown: Mapping[str, Decimal]) -> Decimal:
    return sum((_to_decimal(v) for v in breakdown.values()), ZERO)


def compare_breakdowns(
    standard: Mapping[str, Decimal],
    custom: Mapping[str, Decimal],
) -> List[BreakdownComparisonItem]:
    """Per component: custom - standard. Standard components first, then custom-only ones."""
    keys = list(standard) + [k for k in custom if k not in standard]
    items = []
    for key in keys:
        std = standard.get(key)
        cst = custom.get(key)
        difference = cst - std if std is not None and cst is not None else None
        items.append(
            BreakdownComparisonItem(
                component=key,
                standard_amount=std,
                custom_amount=cst,
                difference=difference,
                same_as_standard=difference is not None and difference == 0,
            )
        )
    return items


def has_billable_standard_fee(standard_fee: Optional[FeeStructure]) -> bool:
    return standard_fee is not None and standard_fee.total_fee is not None and standard_fee.total_fee > 0


def reconcile_fee(
    resolved: ResolvedClass,
    academic_year: str,
    fee_structures: Sequence[FeeStructure],
    custom_fee: Optional[CustomFee] = None,
) -> FeeReconciliation:
    """
    Effective fee and discount for a resolved class/section.

    Not in the academic year -> nothing applies (all null).
    Custom fee present -> effective = custom total, discount = standard total - custom total
    (null when there is no standard total to compare with).
    No custom fee -> effective = standard total, discount = 0.
    The breakdown comparison is only produced when a custom fee exists; otherwise it is empty.
    """
    if not resolved.is_in_academic_year:
        return FeeReconciliation()
    if custom_fee is not None and custom_fee.academic_year != academic_year:
        raise ServiceError(
            f"Custom fee is for {custom_fee.academic_year}, not {academic_year}",
            status.HTTP_400_BAD_REQUEST,
        )

    standard = find_fee_structure(fee_structures, resolved.display_class, resolved.display_section, academic_year)
    if not has_billable_standard_fee(standard):
        logger.info(
            "No billable standard fee for %s-%s in %s",
            resolved.display_class,
            resolved.display_section,
            academic_year,
        )
    standard_total = standard.total_fee if standard is not None else None

    if custom_fee is None:
        return FeeReconciliation(
            standard_fee=standard,
            effective_fee=standard_total,
            discount=ZERO,
            discount_kind=DiscountKind.NONE,
        )

    discount = standard_total - custom_fee.total_fee if standard_total is not None else None
    return FeeReconciliation(
        standard_fee=standard,
        effective_fee=custom_fee.total_fee,
        discount=discount,
        discount_kind=discount_kind(discount),
        breakdown_comparison=compare_breakdowns(standard.breakdown if standard else {}, custom_fee.breakdown),
    )


def compare_custom_fee_update(
    existing: CustomFee,
    new_total_fee: Decimal,
    standard_fee: Optional[Decimal] = None,
) -> CustomFeeUpdateComparison:
    """Old vs new total and discount for an edit. standard_fee defaults to the fee captured at creation."""
    new_total = _to_decimal(new_total_fee)
    if new_total <= 0:
        raise ServiceError("Total fee must be greater than 0", status.HTTP_400_BAD_REQUEST)
    standard = standard_fee if standard_fee is not None else existing.actual_fee
    old_total = existing.total_fee

    old_discount = new_discount = discount_difference = None
    if standard is not None:
        standard = _to_decimal(standard)
        old_discount = standard - old_total
        new_discount = standard - new_total
        discount_difference = new_discount - old_discount

    return CustomFeeUpdateComparison(
        old_total_fee=old_total,
        new_total_fee=new_total,
        total_fee_difference=new_total - old_total,
        old_discount=old_discount,
        new_discount=new_discount,
        discount_difference=discount_difference,
        new_discount_kind=discount_kind(new_discount),
    )


# --- Payments ---
def _percent_paid(total_paid: Decimal, fee: Decimal) -> int:
    if fee <= 0:
        return 0
    pct = (total_paid * 100 / fee).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    return int(min(max(pct, ZERO), Decimal("100")))


def aggregate_payments(
    effective_fee: Optional[Decimal],
    payments: Iterable[PaymentRecord],
) -> PaymentSummary:
    """
    Total paid, remaining balance, percent paid and state against effective_fee.

    Every payment passed in is counted; filtering by payment status is the caller's decision.
    A zero effective fee (full waiver) is paid with percent_paid 0.
    No effective fee at all (nothing billable) leaves the state to what was paid.
    """
    total_paid = sum((_to_decimal(p.amount_paid) for p in payments), ZERO)

    if effective_fee is None:
        return PaymentSummary(
            total_paid=total_paid,
            remaining=ZERO,
            percent_paid=0,
            payment_state=StudentFeeStatus.unpaid if total_paid == 0 else StudentFeeStatus.partial,
        )

    fee = _to_decimal(effective_fee)
    remaining = max(fee - total_paid, ZERO)
    if fee == 0 or remaining == 0:
        state = StudentFeeStatus.paid
    elif total_paid == 0:
        state = StudentFeeStatus.unpaid
    else:
        state = StudentFeeStatus.partial

    return PaymentSummary(
        total_paid=total_paid,
        remaining=remaining,
        percent_paid=_percent_paid(total_paid, fee),
        payment_state=state,
    )


def matches_payment_status(
    result: ReconciliationResult,
    status_filter: Optional[Union[StudentFeeStatus, str]],
) -> bool:
    if not status_filter:
        return True
    try:
        wanted = StudentFeeStatus(status_filter)
    except ValueError:
        raise ServiceError(f"Unknown payment status '{status_filter}'", status.HTTP_400_BAD_REQUEST)
    return result.payment_state == wanted


# --- Facade ---
def reconcile_student(
    student: Student,
    academic_year: str,
    fee_structures: Sequence[FeeStructure],
    custom_fees: Sequence[CustomFee],
    payments: Iterable[PaymentRecord],
    now: Optional[Union[date, datetime]] = None,
) -> ReconciliationResult:
    """Resolve class -> reconcile fee -> aggregate payments for one student and academic year."""
    resolved = resolve_student_class(student, academic_year, now)
    custom = find_custom_fee(custom_fees, student.id, academic_year)
    fee = reconcile_fee(resolved, academic_year, fee_structures, custom)
    summary = aggregate_payments(fee.effective_fee, payments)

    return ReconciliationResult(
        student_id=student.id,
        academic_year=academic_year,
        display_class=resolved.display_class,
        display_section=resolved.display_section,
        is_in_academic_year=resolved.is_in_academic_year,
        standard_fee=fee.standard_fee,
        custom_fee=custom,
        effective_fee=fee.effective_fee,
        discount=fee.discount,
        discount_kind=fee.discount_kind,
        breakdown_comparison=fee.breakdown_comparison,
        total_paid=summary.total_paid,
        remaining=summary.remaining,
        percent_paid=summary.percent_paid,
        payment_state=summary.payment_state,
    )


def reconcile_students(
    students: Iterable[Student],
    academic_year: str,
    fee_structures: Sequence[FeeStructure],
    custom_fees: Sequence[CustomFee],
    payments_by_student: Mapping[str, Sequence[PaymentRecord]],
    status_filter: Optional[Union[StudentFeeStatus, str]] = None,
    now: Optional[Union[date, datetime]] = None,
) -> List[ReconciliationResult]:
    """List view: one result per student, optionally narrowed to a payment state."""
    results = []
    for student in students:
        result = reconcile_student(
            student,
            academic_year,
            fee_structures,
            custom_fees,
            payments_by_student.get(str(student.id), []),
            now,
        )
        if matches_payment_status(result, status_filter):
            results.append(result)
    return results


# --- Custom fee guards ---
def custom_fee_create_block(result: ReconciliationResult) -> Optional[CustomFeeBlockReason]:
    if not result.is_in_academic_year:
        return CustomFeeBlockReason.NOT_IN_ACADEMIC_YEAR
    if not has_billable_standard_fee(result.standard_fee):
        return CustomFeeBlockReason.NO_BILLABLE_STANDARD_FEE
    if result.custom_fee is not None:
        return CustomFeeBlockReason.DUPLICATE_CUSTOM_FEE
    return None


def can_create_custom_fee(result: ReconciliationResult) -> bool:
    return custom_fee_create_block(result) is None


def custom_fee_edit_block(result: ReconciliationResult) -> Optional[CustomFeeBlockReason]:
    if result.custom_fee is None:
        return CustomFeeBlockReason.NO_CUSTOM_FEE
    if result.total_paid > 0:
        return CustomFeeBlockReason.CUSTOM_FEE_LOCKED
    return None


def can_edit_custom_fee(result: ReconciliationResult) -> bool:
    return custom_fee_edit_block(result) is None


_BLOCK_MESSAGES: Dict[CustomFeeBlockReason, str] = {
    CustomFeeBlockReason.NOT_IN_ACADEMIC_YEAR: "Student is not in this academic year yet",
    CustomFeeBlockReason.NO_BILLABLE_STANDARD_FEE: (
        "Standard fee structure must exist and be greater than 0 for this academic year"
    ),
    CustomFeeBlockReason.DUPLICATE_CUSTOM_FEE: "A custom fee already exists for this student and academic year",
}


def draft_custom_fee(
    result: ReconciliationResult,
    total_fee: Optional[Decimal] = None,
    breakdown: Optional[Mapping[str, Decimal]] = None,
    frequency: FeeFrequency = FeeFrequency.ANNUALLY,
    due_date: Optional[date] = None,
    late_fee_per_day: Decimal = ZERO,
    reason: Optional[str] = None,
) -> CustomFee:
    """
    Build (not persist) a custom fee for the student/year in `result`.
    total_fee defaults to the sum of the breakdown; the standard total is captured as actual_fee.
    """
    block = custom_fee_create_block(result)
    if block is not None:
        code = (
            status.HTTP_409_CONFLICT
            if block == CustomFeeBlockReason.DUPLICATE_CUSTOM_FEE
            else status.HTTP_400_BAD_REQUEST
        )
        raise ServiceError(f"Cannot create custom fee. {_BLOCK_MESSAGES[block]}", code)

    cleaned: Dict[str, Decimal] = {}
    for key, amount in (breakdown or {}).items():
        component = (key or "").strip()
        if not component:
            continue
        if component in cleaned:
            raise ServiceError(f"Duplicate breakdown component: {component}", status.HTTP_400_BAD_REQUEST)
        cleaned[component] = _to_decimal(amount)
    breakdown = cleaned
    total = _to_decimal(total_fee) if total_fee is not None else breakdown_total(breakdown)
    if total <= 0:
        raise ServiceError("Please enter a valid total fee amount", status.HTTP_400_BAD_REQUEST)

    return CustomFee(
        student_id=result.student_id,
        academic_year=result.academic_year,
        total_fee=total,
        breakdown=breakdown,
        frequency=frequency,
        due_date=due_date,
        late_fee_per_day=_to_decimal(late_fee_per_day),
        reason=(reason or "").strip() or None,
        display_class=result.display_class,
        display_section=result.display_section,
        actual_fee=result.standard_fee.total_fee,
    )

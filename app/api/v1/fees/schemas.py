"""Fees schemas: read-only input snapshots and computed reconciliation results."""

from datetime import date, datetime
from decimal import Decimal
from typing import Annotated, Dict, List, Optional

from pydantic import BaseModel, Field

from app.api.v1.academic_years.schemas import AcademicYearLabel
from app.core.enums import (
    CustomFeeBlockReason,
    DiscountKind,
    FeeFrequency,
    PromotionType,
    StudentFeeStatus,
)

Amount = Annotated[Decimal, Field(ge=0)]
Breakdown = Dict[str, Amount]


# --- Inputs ---
class PromotionRecord(BaseModel):
    """One promotion event, stamped with the academic year it happened in."""

    academic_year: AcademicYearLabel
    promotion_type: PromotionType
    from_class: Optional[str] = None
    from_section: Optional[str] = None
    to_class: Optional[str] = None
    to_section: Optional[str] = None
    reverted: bool = Field(False, description="True once a 'reverted' record in the same year cancels this promotion")
    reason: Optional[str] = None
    promoted_at: Optional[datetime] = None
    attendance_percentage: Optional[Decimal] = Field(None, ge=0, le=100)

    class Config:
        frozen = True


class Student(BaseModel):
    id: str
    name: Optional[str] = None
    class_name: Optional[str] = Field(None, description="Class as of now")
    section: Optional[str] = Field(None, description="Section as of now")
    promotion_history: List[PromotionRecord] = Field(default_factory=list)

    class Config:
        frozen = True


class FeeStructure(BaseModel):
    """Standard fee for a (class, section, academic year)."""

    id: Optional[str] = None
    class_name: str
    section: str
    academic_year: AcademicYearLabel
    total_fee: Optional[Amount] = None
    breakdown: Breakdown = Field(default_factory=dict)

    class Config:
        frozen = True


class CustomFee(BaseModel):
    """Per-student override of the standard fee for one academic year."""

    id: Optional[str] = None
    student_id: str
    academic_year: AcademicYearLabel
    total_fee: Amount
    breakdown: Breakdown = Field(default_factory=dict)
    frequency: FeeFrequency = FeeFrequency.ANNUALLY
    due_date: Optional[date] = None
    late_fee_per_day: Amount = Decimal("0")
    reason: Optional[str] = None
    display_class: Optional[str] = None
    display_section: Optional[str] = None
    actual_fee: Optional[Amount] = Field(None, description="Standard fee captured when the override was created")

    class Config:
        frozen = True


class PaymentRecord(BaseModel):
    id: Optional[str] = None
    amount_paid: Amount
    status: str = Field("paid", description="paid, pending_verification, ...")
    paid_at: Optional[datetime] = None

    class Config:
        frozen = True


# --- Computed ---
class ResolvedClass(BaseModel):
    display_class: Optional[str] = None
    display_section: Optional[str] = None
    is_in_academic_year: bool

    class Config:
        frozen = True


class BreakdownComparisonItem(BaseModel):
    component: str
    standard_amount: Optional[Decimal] = None
    custom_amount: Optional[Decimal] = None
    difference: Optional[Decimal] = Field(None, description="custom - standard, when both exist")
    same_as_standard: bool = False

    class Config:
        frozen = True


class FeeReconciliation(BaseModel):
    standard_fee: Optional[FeeStructure] = None
    effective_fee: Optional[Decimal] = None
    discount: Optional[Decimal] = Field(None, description="standard - effective; positive means the student saves")
    discount_kind: DiscountKind = DiscountKind.NONE
    breakdown_comparison: List[BreakdownComparisonItem] = Field(default_factory=list)

    class Config:
        frozen = True


class PaymentSummary(BaseModel):
    total_paid: Decimal
    remaining: Decimal
    percent_paid: int = Field(..., ge=0, le=100)
    payment_state: StudentFeeStatus

    class Config:
        frozen = True


class ReconciliationResult(BaseModel):
    student_id: str
    academic_year: str
    display_class: Optional[str] = None
    display_section: Optional[str] = None
    is_in_academic_year: bool
    standard_fee: Optional[FeeStructure] = None
    custom_fee: Optional[CustomFee] = None
    effective_fee: Optional[Decimal] = None
    discount: Optional[Decimal] = None
    discount_kind: DiscountKind = DiscountKind.NONE
    breakdown_comparison: List[BreakdownComparisonItem] = Field(default_factory=list)
    total_paid: Decimal
    remaining: Decimal
    percent_paid: int = Field(..., ge=0, le=100)
    payment_state: StudentFeeStatus

    class Config:
        frozen = True


class CustomFeeUpdateComparison(BaseModel):
    """Old vs new totals when an existing custom fee is edited."""

    old_total_fee: Decimal
    new_total_fee: Decimal
    total_fee_difference: Decimal
    old_discount: Optional[Decimal] = None
    new_discount: Optional[Decimal] = None
    discount_difference: Optional[Decimal] = None
    new_discount_kind: DiscountKind = DiscountKind.NONE

    class Config:
        frozen = True


# --- Requests / responses ---
class ResolveClassRequest(BaseModel):
    student: Student
    academic_year: AcademicYearLabel


class ReconcileRequest(BaseModel):
    """Snapshots fetched by the caller for one student and academic year."""

    student: Student
    academic_year: AcademicYearLabel
    fee_structures: List[FeeStructure] = Field(default_factory=list)
    custom_fees: List[CustomFee] = Field(default_factory=list)
    payments: List[PaymentRecord] = Field(default_factory=list)


class ReconcileResponse(BaseModel):
    result: ReconciliationResult
    can_create_custom_fee: bool
    create_block_reason: Optional[CustomFeeBlockReason] = None
    can_edit_custom_fee: bool
    edit_block_reason: Optional[CustomFeeBlockReason] = None


class BatchReconcileRequest(BaseModel):
    students: List[Student]
    academic_year: AcademicYearLabel
    fee_structures: List[FeeStructure] = Field(default_factory=list)
    custom_fees: List[CustomFee] = Field(default_factory=list)
    payments_by_student: Dict[str, List[PaymentRecord]] = Field(default_factory=dict)
    status_filter: Optional[StudentFeeStatus] = None


class CustomFeeCompareRequest(BaseModel):
    existing: CustomFee
    new_total_fee: Amount
    standard_fee: Optional[Amount] = Field(None, description="Defaults to existing.actual_fee")


class DraftCustomFeeRequest(ReconcileRequest):
    total_fee: Optional[Amount] = Field(None, description="Defaults to the sum of breakdown")
    breakdown: Breakdown = Field(default_factory=dict)
    frequency: FeeFrequency = FeeFrequency.ANNUALLY
    due_date: Optional[date] = None
    late_fee_per_day: Amount = Decimal("0")
    reason: Optional[str] = None

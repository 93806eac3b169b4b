"""Fees router: class resolution, reconciliation, custom fee comparison and drafting."""

from typing import List

from fastapi import APIRouter, HTTPException, status

from app.core.exceptions import ServiceError

from .resolver import resolve_student_class
from .schemas import (
    BatchReconcileRequest,
    CustomFee,
    CustomFeeCompareRequest,
    CustomFeeUpdateComparison,
    DraftCustomFeeRequest,
    ReconcileRequest,
    ReconcileResponse,
    ReconciliationResult,
    ResolveClassRequest,
    ResolvedClass,
)
from . import service

router = APIRouter(prefix="/api/v1/fees", tags=["fees"])


def _reconcile(payload: ReconcileRequest) -> ReconciliationResult:
    return service.reconcile_student(
        payload.student,
        payload.academic_year,
        payload.fee_structures,
        payload.custom_fees,
        payload.payments,
    )


@router.post("/resolve-class", response_model=ResolvedClass)
async def resolve_class(payload: ResolveClassRequest) -> ResolvedClass:
    try:
        return resolve_student_class(payload.student, payload.academic_year)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.post("/reconcile", response_model=ReconcileResponse)
async def reconcile(payload: ReconcileRequest) -> ReconcileResponse:
    """Reconcile one student's fee for an academic year, with custom fee create/edit guards."""
    try:
        result = _reconcile(payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    create_block = service.custom_fee_create_block(result)
    edit_block = service.custom_fee_edit_block(result)
    return ReconcileResponse(
        result=result,
        can_create_custom_fee=create_block is None,
        create_block_reason=create_block,
        can_edit_custom_fee=edit_block is None,
        edit_block_reason=edit_block,
    )


@router.post("/reconcile/batch", response_model=List[ReconciliationResult])
async def reconcile_batch(payload: BatchReconcileRequest) -> List[ReconciliationResult]:
    try:
        return service.reconcile_students(
            payload.students,
            payload.academic_year,
            payload.fee_structures,
            payload.custom_fees,
            payload.payments_by_student,
            status_filter=payload.status_filter,
        )
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.post("/custom-fee/compare", response_model=CustomFeeUpdateComparison)
async def compare_custom_fee(payload: CustomFeeCompareRequest) -> CustomFeeUpdateComparison:
    try:
        return service.compare_custom_fee_update(payload.existing, payload.new_total_fee, payload.standard_fee)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.post("/custom-fee/draft", response_model=CustomFee, status_code=status.HTTP_201_CREATED)
async def draft_custom_fee(payload: DraftCustomFeeRequest) -> CustomFee:
    """Validate and build a custom fee for the caller to persist. Refused when a custom fee cannot be created."""
    try:
        result = _reconcile(payload)
        return service.draft_custom_fee(
            result,
            total_fee=payload.total_fee,
            breakdown=payload.breakdown,
            frequency=payload.frequency,
            due_date=payload.due_date,
            late_fee_per_day=payload.late_fee_per_day,
            reason=payload.reason,
        )
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)

from typing import Optional

from fastapi import APIRouter, HTTPException, Query

from app.core.exceptions import ServiceError

from .schemas import AcademicYearOptionsResponse, AcademicYearResponse
from . import service

router = APIRouter(prefix="/api/v1/academic-years", tags=["academic-years"])


@router.get("/current", response_model=AcademicYearResponse)
async def get_current_academic_year() -> AcademicYearResponse:
    """Academic year containing today."""
    current = service.current_academic_year()
    return AcademicYearResponse.from_label(current, current)


@router.get("/options", response_model=AcademicYearOptionsResponse)
async def list_academic_year_options(
    before: Optional[int] = Query(None, ge=0, description="Years before the current one (default from settings)"),
    after: Optional[int] = Query(None, ge=0, description="Years after the current one (default from settings)"),
) -> AcademicYearOptionsResponse:
    try:
        labels = service.academic_year_options(before, after)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    current = service.current_academic_year()
    return AcademicYearOptionsResponse(
        current=current,
        options=[AcademicYearResponse.from_label(label, current) for label in labels],
    )


@router.get("/{label}/previous", response_model=AcademicYearResponse)
async def get_previous_academic_year(label: str) -> AcademicYearResponse:
    try:
        previous = service.previous_academic_year(label)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return AcademicYearResponse.from_label(previous, service.current_academic_year())


@router.get("/{label}/next", response_model=AcademicYearResponse)
async def get_next_academic_year(label: str) -> AcademicYearResponse:
    try:
        following = service.next_academic_year(label)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return AcademicYearResponse.from_label(following, service.current_academic_year())

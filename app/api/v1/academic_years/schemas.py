from typing import Annotated, List

from pydantic import AfterValidator, BaseModel, Field

from .service import format_academic_year, parse_academic_year


def _validate_label(value: str) -> str:
    parse_academic_year(value)
    return value


# Reusable field type: a validated 'YYYY-YYYY' label with consecutive years.
AcademicYearLabel = Annotated[str, AfterValidator(_validate_label)]


class AcademicYearResponse(BaseModel):
    name: str = Field(..., description="e.g. 2025-2026")
    short_name: str = Field(..., description="e.g. 2025-26")
    start_year: int
    end_year: int
    is_current: bool

    @classmethod
    def from_label(cls, label: str, current: str) -> "AcademicYearResponse":
        start_year, end_year = parse_academic_year(label)
        return cls(
            name=label,
            short_name=format_academic_year(label, short=True),
            start_year=start_year,
            end_year=end_year,
            is_current=label == current,
        )


class AcademicYearOptionsResponse(BaseModel):
    """Selectable academic years around the current one, ascending."""

    current: str
    options: List[AcademicYearResponse]

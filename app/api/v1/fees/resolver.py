"""
Resolve the class/section a student occupied in a given academic year from their promotion history.
Promotions are stamped with the year they happened in but take billing effect the following year,
so both the target year and the year before it are inspected. Reverts take precedence over promotions.
"""

import logging
from datetime import date, datetime, timezone
from typing import Callable, Iterable, Optional, Union

from app.api.v1.academic_years.service import (
    current_academic_year,
    is_future_academic_year,
    next_academic_year,
    previous_academic_year,
)
from app.core.enums import PromotionType

from .schemas import PromotionRecord, ResolvedClass, Student

logger = logging.getLogger(__name__)


def _as_utc(moment: datetime) -> datetime:
    """Naive timestamps are taken as UTC so they order against aware ones."""
    return moment if moment.tzinfo else moment.replace(tzinfo=timezone.utc)


def _pick(
    history: Iterable[PromotionRecord],
    predicate: Callable[[PromotionRecord], bool],
) -> Optional[PromotionRecord]:
    """
    First matching record, latest promoted_at first.
    Records without a timestamp rank below timestamped ones; remaining ties keep list order.
    """
    best: Optional[PromotionRecord] = None
    for rec in history:
        if not predicate(rec):
            continue
        if best is None:
            best = rec
        elif rec.promoted_at is not None and (
            best.promoted_at is None or _as_utc(rec.promoted_at) > _as_utc(best.promoted_at)
        ):
            best = rec
    return best


def _revert_in(year: str) -> Callable[[PromotionRecord], bool]:
    return lambda p: p.academic_year == year and p.promotion_type == PromotionType.REVERTED


def _promotion_in(year: str) -> Callable[[PromotionRecord], bool]:
    return lambda p: (
        p.academic_year == year
        and p.promotion_type == PromotionType.PROMOTED
        and not p.reverted
    )


def resolve_student_class(
    student: Student,
    target_academic_year: str,
    now: Optional[Union[date, datetime]] = None,
) -> ResolvedClass:
    """
    Return the class/section the student held during target_academic_year.

    Evaluated in order, first match wins:
    1. revert stamped in the target year -> its to_class/to_section
    2. non-reverted promotion in the target year -> its from_class/from_section
    3. revert stamped in the previous year -> its to_class/to_section
    4. non-reverted promotion in the previous year -> its to_class/to_section
    5. target year is in the future -> not in the academic year
    6. otherwise -> the student's current class/section
    Raises MalformedYearLabel for a bad target label.
    """
    previous = previous_academic_year(target_academic_year)
    history = student.promotion_history

    rec = _pick(history, _revert_in(target_academic_year))
    if rec:
        logger.debug("student %s %s: revert in target year", student.id, target_academic_year)
        return ResolvedClass(display_class=rec.to_class, display_section=rec.to_section, is_in_academic_year=True)

    rec = _pick(history, _promotion_in(target_academic_year))
    if rec:
        logger.debug("student %s %s: promoted during target year", student.id, target_academic_year)
        return ResolvedClass(display_class=rec.from_class, display_section=rec.from_section, is_in_academic_year=True)

    rec = _pick(history, _revert_in(previous))
    if rec:
        logger.debug("student %s %s: revert in previous year", student.id, target_academic_year)
        return ResolvedClass(display_class=rec.to_class, display_section=rec.to_section, is_in_academic_year=True)

    rec = _pick(history, _promotion_in(previous))
    if rec:
        logger.debug("student %s %s: promoted in previous year", student.id, target_academic_year)
        return ResolvedClass(display_class=rec.to_class, display_section=rec.to_section, is_in_academic_year=True)

    if is_future_academic_year(target_academic_year, now):
        logger.debug("student %s %s: future year without promotion", student.id, target_academic_year)
        return ResolvedClass(display_class=None, display_section=None, is_in_academic_year=False)

    return ResolvedClass(
        display_class=student.class_name,
        display_section=student.section,
        is_in_academic_year=True,
    )


def has_promotion_record(student: Student, academic_year: str) -> bool:
    """Whether any history record (promotion, revert or hold-back) is stamped with academic_year."""
    return any(p.academic_year == academic_year for p in student.promotion_history)


def student_view_academic_year(student: Student, now: Optional[Union[date, datetime]] = None) -> str:
    """
    Academic year a student's own views default to.
    A student promoted (and not reverted) during the current year already looks at the next one.
    """
    current = current_academic_year(now)
    if _pick(student.promotion_history, _promotion_in(current)):
        return next_academic_year(current)
    return current

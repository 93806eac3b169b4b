"""Academic year labels: 'YYYY-YYYY' strings running from the configured start month (June by default)."""

import re
from datetime import date, datetime
from typing import List, Optional, Tuple, Union

from fastapi import status

from app.core.config import settings
from app.core.exceptions import MalformedYearLabel, ServiceError

_LABEL_RE = re.compile(r"([0-9]{4})-([0-9]{4})")


def _label(start_year: int) -> str:
    return f"{start_year}-{start_year + 1}"


def parse_academic_year(label: str) -> Tuple[int, int]:
    """Return (start_year, end_year). Raise MalformedYearLabel unless the years are consecutive."""
    if not isinstance(label, str):
        raise MalformedYearLabel(label)
    match = _LABEL_RE.fullmatch(label)
    if not match:
        raise MalformedYearLabel(label)
    start_year, end_year = int(match.group(1)), int(match.group(2))
    if end_year != start_year + 1:
        raise MalformedYearLabel(label)
    return start_year, end_year


def is_valid_academic_year(label: object) -> bool:
    try:
        parse_academic_year(label)  # type: ignore[arg-type]
    except MalformedYearLabel:
        return False
    return True


def start_year_of(label: str) -> int:
    return parse_academic_year(label)[0]


def current_academic_year(now: Optional[Union[date, datetime]] = None) -> str:
    """
    Academic year containing `now` (defaults to today).

    With the default June start: June-December of 2025 -> '2025-2026',
    January-May of 2026 -> '2025-2026'.
    """
    today = now or date.today()
    if today.month >= settings.academic_year_start_month:
        return _label(today.year)
    return _label(today.year - 1)


def previous_academic_year(label: str) -> str:
    return _label(start_year_of(label) - 1)


def next_academic_year(label: str) -> str:
    return _label(start_year_of(label) + 1)


def is_future_academic_year(label: str, now: Optional[Union[date, datetime]] = None) -> bool:
    """True when the label starts strictly after the current academic year."""
    return start_year_of(label) > start_year_of(current_academic_year(now))


def academic_year_options(
    before: Optional[int] = None,
    after: Optional[int] = None,
    now: Optional[Union[date, datetime]] = None,
) -> List[str]:
    """
    before + after + 1 consecutive labels centred on the current academic year, ascending.
    Display order (usually descending) is left to the caller.
    """
    before = settings.year_options_before if before is None else before
    after = settings.year_options_after if after is None else after
    if before < 0 or after < 0:
        raise ServiceError("before and after must be non-negative", status.HTTP_400_BAD_REQUEST)
    current_start = start_year_of(current_academic_year(now))
    return [_label(y) for y in range(current_start - before, current_start + after + 1)]


def format_academic_year(label: str, short: bool = False) -> str:
    """'2025-2026' -> '2025-26' when short, otherwise unchanged."""
    start_year, end_year = parse_academic_year(label)
    if short:
        return f"{start_year}-{str(end_year)[-2:]}"
    return _label(start_year)

"""Unit tests for academic year label helpers."""

from datetime import date, datetime

import pytest
from pydantic import ValidationError

from app.api.v1.academic_years.service import (
    academic_year_options,
    current_academic_year,
    format_academic_year,
    is_future_academic_year,
    is_valid_academic_year,
    next_academic_year,
    parse_academic_year,
    previous_academic_year,
)
from app.api.v1.fees.schemas import FeeStructure
from app.core.exceptions import MalformedYearLabel, ServiceError


def test_current_year_from_june() -> None:
    """June onwards belongs to the year starting in the same calendar year."""
    assert current_academic_year(date(2025, 6, 1)) == "2025-2026"
    assert current_academic_year(date(2025, 12, 31)) == "2025-2026"


def test_current_year_before_june() -> None:
    """January to May belongs to the year that started the previous calendar year."""
    assert current_academic_year(date(2025, 5, 31)) == "2024-2025"
    assert current_academic_year(datetime(2026, 1, 15, 10, 30)) == "2025-2026"


def test_previous_and_next() -> None:
    assert previous_academic_year("2025-2026") == "2024-2025"
    assert next_academic_year("2025-2026") == "2026-2027"


@pytest.mark.parametrize(
    "label",
    ["2025", "2025-2027", "25-26", "2025-26", "abcd-efgh", "", "2025-2026\n", " 2025-2026", "٢٠٢٤-٢٠٢٥", None],
)
def test_malformed_labels_rejected(label) -> None:
    """Bad labels raise instead of producing nonsense years."""
    with pytest.raises(MalformedYearLabel):
        previous_academic_year(label)
    assert is_valid_academic_year(label) is False


def test_malformed_label_error_shape() -> None:
    with pytest.raises(MalformedYearLabel) as exc:
        parse_academic_year("2025-2030")
    assert isinstance(exc.value, ValueError)
    assert exc.value.status_code == 422
    assert exc.value.label == "2025-2030"


def test_parse_returns_both_years() -> None:
    assert parse_academic_year("2019-2020") == (2019, 2020)
    assert is_valid_academic_year("2019-2020") is True


def test_year_options_window() -> None:
    """before + after + 1 consecutive labels centred on the current year."""
    options = academic_year_options(2, 2, now=date(2025, 7, 1))
    assert options == ["2023-2024", "2024-2025", "2025-2026", "2026-2027", "2027-2028"]
    assert academic_year_options(0, 0, now=date(2025, 7, 1)) == ["2025-2026"]
    assert len(academic_year_options(3, 1, now=date(2025, 7, 1))) == 5


def test_year_options_defaults_from_settings() -> None:
    assert len(academic_year_options(now=date(2025, 7, 1))) == 5


def test_year_options_negative_rejected() -> None:
    with pytest.raises(ServiceError) as exc:
        academic_year_options(-1, 2)
    assert exc.value.status_code == 400


def test_format_short() -> None:
    assert format_academic_year("2025-2026", short=True) == "2025-26"
    assert format_academic_year("2025-2026") == "2025-2026"


def test_future_year() -> None:
    now = date(2025, 7, 1)
    assert is_future_academic_year("2026-2027", now) is True
    assert is_future_academic_year("2025-2026", now) is False
    assert is_future_academic_year("2020-2021", now) is False


def test_records_validate_year_at_boundary() -> None:
    """Records refuse malformed academic years when constructed."""
    with pytest.raises(ValidationError):
        FeeStructure(class_name="6", section="A", academic_year="2025-26", total_fee=100)

from fastapi import status


class ServiceError(Exception):
    """Base exception for service layer errors."""

    def __init__(self, message: str, status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class MalformedYearLabel(ServiceError, ValueError):
    """Academic year label is not two consecutive years, e.g. '2025-2026'."""

    def __init__(self, label: object) -> None:
        super().__init__(
            f"Malformed academic year label: {label!r} (expected 'YYYY-YYYY' with consecutive years)",
            status.HTTP_422_UNPROCESSABLE_ENTITY,
        )
        self.label = label

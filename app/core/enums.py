from enum import Enum


class PromotionType(str, Enum):
    PROMOTED = "promoted"
    REVERTED = "reverted"
    HOLD_BACK = "hold-back"


class FeeFrequency(str, Enum):
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    HALF_YEARLY = "half-yearly"
    ANNUALLY = "annually"


class StudentFeeStatus(str, Enum):
    unpaid = "unpaid"
    partial = "partial"
    paid = "paid"


class DiscountKind(str, Enum):
    DISCOUNT = "discount"
    SURCHARGE = "surcharge"
    NONE = "none"


class CustomFeeBlockReason(str, Enum):
    """Why a custom fee cannot be created or edited for a student/year."""

    NOT_IN_ACADEMIC_YEAR = "NOT_IN_ACADEMIC_YEAR"
    NO_BILLABLE_STANDARD_FEE = "NO_BILLABLE_STANDARD_FEE"
    DUPLICATE_CUSTOM_FEE = "DUPLICATE_CUSTOM_FEE"
    NO_CUSTOM_FEE = "NO_CUSTOM_FEE"
    CUSTOM_FEE_LOCKED = "CUSTOM_FEE_LOCKED"

"""Domain models for weekly loan coverage."""

from loan_coverage.models.commission import (
    CommissionAllocation,
    CommissionInput,
    CommissionReconciliation,
)
from loan_coverage.models.enums import (
    AllocationStatus,
    ChronologyItemType,
    CommissionAdjustment,
    CoverageType,
    LoanStatus,
    PayerProfile,
    PaymentStatus,
    WeekMode,
)
from loan_coverage.models.loan import Loan, Payment
from loan_coverage.models.results import ArrearsResult, ChronologyItem, PartialPaymentResult
from loan_coverage.models.week import WeekBucket

__all__ = [
    "AllocationStatus",
    "ArrearsResult",
    "ChronologyItem",
    "ChronologyItemType",
    "CommissionAdjustment",
    "CommissionAllocation",
    "CommissionInput",
    "CommissionReconciliation",
    "CoverageType",
    "Loan",
    "LoanStatus",
    "PartialPaymentResult",
    "PayerProfile",
    "Payment",
    "PaymentStatus",
    "WeekBucket",
    "WeekMode",
]

"""Weekly loan coverage, arrears and commission reconciliation engine."""

from loan_coverage.engine import (
    build_chronology,
    calculate_arrears,
    calculate_partial_payment,
    condense_missed_weeks,
    reconcile_commissions,
    week_of,
    weeks_between,
)
from loan_coverage.models import Loan, Payment, WeekMode

__version__ = "0.1.0"

__all__ = [
    "Loan",
    "Payment",
    "WeekMode",
    "__version__",
    "build_chronology",
    "calculate_arrears",
    "calculate_partial_payment",
    "condense_missed_weeks",
    "reconcile_commissions",
    "week_of",
    "weeks_between",
]

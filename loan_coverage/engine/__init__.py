"""Weekly coverage, arrears and commission engines."""

from loan_coverage.engine.arrears import (
    calculate_arrears,
    calculate_partial_payment,
    validate_loan,
)
from loan_coverage.engine.calendar import (
    evaluation_end,
    monday_of,
    parse_week_mode,
    week_of,
    weeks_between,
)
from loan_coverage.engine.chronology import (
    build_chronology,
    condense_missed_weeks,
    payment_status,
    summarize_chronology,
)
from loan_coverage.engine.commission import expected_commission, reconcile_commissions

__all__ = [
    "build_chronology",
    "calculate_arrears",
    "calculate_partial_payment",
    "condense_missed_weeks",
    "evaluation_end",
    "expected_commission",
    "monday_of",
    "parse_week_mode",
    "payment_status",
    "reconcile_commissions",
    "summarize_chronology",
    "validate_loan",
    "week_of",
    "weeks_between",
]

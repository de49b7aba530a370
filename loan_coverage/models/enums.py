"""Enumeration types for loan coverage entities and results."""

from enum import Enum


class WeekMode(str, Enum):
    CURRENT = "current"  # only fully elapsed weeks, up to last Sunday
    NEXT = "next"  # up to today, in-progress week not flagged late


class LoanStatus(str, Enum):
    ACTIVE = "ACTIVE"
    FINISHED = "FINISHED"
    CANCELLED = "CANCELLED"
    BAD_DEBT = "BAD_DEBT"


class ChronologyItemType(str, Enum):
    PAYMENT = "PAYMENT"
    NO_PAYMENT = "NO_PAYMENT"


class CoverageType(str, Enum):
    FULL = "FULL"
    PARTIAL = "PARTIAL"
    OVERPAID = "OVERPAID"
    COVERED_BY_SURPLUS = "COVERED_BY_SURPLUS"
    UNCOVERED = "UNCOVERED"


class PaymentStatus(str, Enum):
    PAID = "PAID"
    PARTIAL = "PARTIAL"
    MISSED = "MISSED"
    OVERPAID = "OVERPAID"


class AllocationStatus(str, Enum):
    EXCLUDED = "EXCLUDED"  # never eligible, commission fixed at 0
    UNCHANGED = "UNCHANGED"
    REDUCED = "REDUCED"
    ZEROED = "ZEROED"  # eligible, reduced to 0 by redistribution
    INCREASED = "INCREASED"


class CommissionAdjustment(str, Enum):
    NONE = "NONE"  # nothing eligible and nothing reported
    ZERO = "ZERO"
    EXACT = "EXACT"
    DEFICIT = "DEFICIT"
    SURPLUS = "SURPLUS"


class PayerProfile(str, Enum):
    GOOD = "GOOD"
    OCCASIONAL_LATE = "OCCASIONAL_LATE"
    CHRONIC_LATE = "CHRONIC_LATE"
    DEFAULTER = "DEFAULTER"

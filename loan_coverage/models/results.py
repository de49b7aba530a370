"""Derived results produced by the arrears and chronology engines."""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from loan_coverage.models.enums import ChronologyItemType, CoverageType
from loan_coverage.money import ZERO


@dataclass(frozen=True)
class ArrearsResult:
    """Arrears (VDO) evaluation of one loan at one instant."""

    expected_weekly_payment: Decimal
    weeks_without_payment: int
    arrears_amount: Decimal  # Capped by pending_amount
    partial_payment: Decimal  # Accumulated surplus (abono parcial)
    weeks_requiring_payment: int = 0
    total_expected: Decimal = ZERO
    total_paid_in_period: Decimal = ZERO
    pending_amount: Decimal = ZERO
    evaluation_end: date | None = None

    @property
    def is_current(self) -> bool:
        """True when the loan is up to date (al corriente)."""
        return self.weeks_without_payment == 0


@dataclass(frozen=True)
class PartialPaymentResult:
    """Overpayment collected during the week containing ``now``."""

    expected_weekly_payment: Decimal
    total_paid_in_current_week: Decimal
    partial_payment_amount: Decimal


@dataclass(frozen=True)
class ChronologyItem:
    """One row of a loan's week-by-week payment history."""

    week_index: int
    type: ChronologyItemType
    coverage_type: CoverageType
    date: date
    description: str
    amount: Decimal = ZERO
    weekly_expected: Decimal = ZERO
    weekly_paid: Decimal = ZERO
    surplus_before: Decimal = ZERO
    surplus_after: Decimal = ZERO
    balance_before: Decimal = ZERO
    balance_after: Decimal = ZERO
    payment_id: str | None = None
    payment_number: int = 0  # Position inside the week, 1-based
    payments_in_week: int = 0
    week_count: int = 1  # > 1 only for condensed runs of missed weeks

    @property
    def is_advance(self) -> bool:
        """Payment collected in the grace week, before any obligation."""
        return self.type == ChronologyItemType.PAYMENT and self.week_index == 0

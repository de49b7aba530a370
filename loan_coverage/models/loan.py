"""Loan and payment models for weekly collection."""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal

from loan_coverage.models.enums import LoanStatus
from loan_coverage.money import DEFAULT_QUANTUM, ZERO, quantize, to_decimal


@dataclass(frozen=True)
class Payment:
    """A collected payment (abono). Immutable fact owned by its loan."""

    amount: Decimal
    received_at: datetime | date | None = None
    created_at: datetime | date | None = None
    payment_id: str | None = None
    payment_method: str | None = None  # CASH, MONEY_TRANSFER, ...

    @property
    def timestamp(self) -> datetime | date | None:
        """Moment the payment was received, falling back to record creation."""
        return self.received_at or self.created_at


@dataclass
class Loan:
    """Weekly-collection loan contract."""

    sign_date: datetime | date
    requested_amount: Decimal | None = None
    rate: Decimal = ZERO  # Fraction over the whole term (e.g., 0.40 for 40%)
    week_duration: int | None = None
    expected_weekly_payment: Decimal | None = None
    payments: list[Payment] = field(default_factory=list)
    loan_id: str | None = None
    status: LoanStatus = LoanStatus.ACTIVE
    finished_date: datetime | date | None = None
    bad_debt_date: datetime | date | None = None
    was_renewed: bool = False

    @property
    def total_debt(self) -> Decimal:
        """Principal plus interest; zero when the principal is unknown."""
        principal = to_decimal(self.requested_amount, "requested_amount")
        if principal == ZERO:
            return ZERO
        return principal * (1 + to_decimal(self.rate, "rate"))

    def weekly_payment(self, quantum: Decimal = DEFAULT_QUANTUM) -> Decimal:
        """Contractual weekly installment.

        Uses ``expected_weekly_payment`` when positive, otherwise derives it
        from ``total_debt / week_duration``. Returns zero when there is no
        schedule to derive from.
        """
        direct = to_decimal(self.expected_weekly_payment, "expected_weekly_payment")
        if direct > ZERO:
            return direct

        if self.week_duration and self.total_debt > ZERO:
            return quantize(self.total_debt / self.week_duration, quantum)

        return ZERO

    def total_paid(self) -> Decimal:
        """Sum of every recorded payment, regardless of date."""
        return sum((to_decimal(p.amount) for p in self.payments), ZERO)

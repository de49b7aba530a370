"""Pytest configuration and fixtures."""

from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Callable

import pytest

from loan_coverage.models import CommissionInput, Loan, Payment

# 2024-01-01 is a Monday; loans signed on Wednesday 2024-01-03 have
# week 0 = Jan 1-7, week 1 = Jan 8-14, week 2 = Jan 15-21, ...
SIGN_DATE = date(2024, 1, 3)


@pytest.fixture
def seed() -> int:
    """Fixed seed for reproducible tests."""
    return 42


@pytest.fixture
def sign_date() -> date:
    """Wednesday sign date used across engine tests."""
    return SIGN_DATE


def _payment(amount: str | int, day: date, payment_id: str | None = None) -> Payment:
    return Payment(
        amount=Decimal(str(amount)),
        received_at=datetime(day.year, day.month, day.day, 12, tzinfo=timezone.utc),
        payment_id=payment_id,
    )


@pytest.fixture
def pay() -> Callable[..., Payment]:
    """Factory for a payment received at noon UTC on a given day."""
    return _payment


@pytest.fixture
def make_loan() -> Callable[..., Loan]:
    """Factory for a 3000 loan at 40% over 14 weeks (300 per week)."""

    def _make(*payments: Payment, **overrides) -> Loan:
        values = {
            "loan_id": "loan-test-001",
            "sign_date": SIGN_DATE,
            "requested_amount": Decimal("3000"),
            "rate": Decimal("0.40"),
            "week_duration": 14,
            "payments": list(payments),
        }
        values.update(overrides)
        return Loan(**values)

    return _make


@pytest.fixture
def commission_input() -> Callable[..., CommissionInput]:
    """Factory for commission inputs with a 100 weekly payment and base 10."""

    def _make(
        loan_id: str,
        payment: str | int,
        weekly: str | int = 100,
        base: str | int = 10,
    ) -> CommissionInput:
        return CommissionInput(
            loan_id=loan_id,
            payment_amount=Decimal(str(payment)),
            expected_weekly_payment=Decimal(str(weekly)),
            base_commission_unit=Decimal(str(base)),
        )

    return _make

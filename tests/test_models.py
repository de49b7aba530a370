"""Tests for data models and Decimal helpers."""

from datetime import date, datetime
from decimal import Decimal

import pytest

from loan_coverage.exceptions import InvalidInputError
from loan_coverage.models import (
    AllocationStatus,
    ArrearsResult,
    ChronologyItem,
    ChronologyItemType,
    CommissionAdjustment,
    CommissionAllocation,
    CommissionReconciliation,
    CoverageType,
    Loan,
    LoanStatus,
    Payment,
    WeekMode,
)
from loan_coverage.money import quantize, to_decimal


class TestToDecimal:
    """Tests for amount conversion."""

    def test_conversions(self) -> None:
        """Numeric values convert and None becomes zero."""
        assert to_decimal(None) == Decimal("0")
        assert to_decimal(5) == Decimal("5")
        assert to_decimal(0.1) == Decimal("0.1")
        assert to_decimal(" 12.50 ") == Decimal("12.50")
        assert to_decimal(Decimal("3.3")) == Decimal("3.3")

    @pytest.mark.parametrize("value", [True, "abc", "inf", float("nan"), object()])
    def test_rejected(self, value: object) -> None:
        """Booleans, text and non-finite values are rejected."""
        with pytest.raises(InvalidInputError):
            to_decimal(value, "payment_amount")

    def test_error_names_field(self) -> None:
        """Conversion errors name the field."""
        with pytest.raises(InvalidInputError, match="payment_amount"):
            to_decimal("abc", "payment_amount")

    def test_quantize_half_up(self) -> None:
        """Quantization rounds half up."""
        assert quantize(Decimal("0.005")) == Decimal("0.01")
        assert quantize(Decimal("2.344")) == Decimal("2.34")
        assert quantize(Decimal("7.5"), Decimal("1")) == Decimal("8")


class TestPayment:
    """Tests for Payment model."""

    def test_timestamp_prefers_received_at(self) -> None:
        """The received time wins over the creation time."""
        payment = Payment(
            amount=Decimal("100"),
            received_at=datetime(2024, 1, 9, 10),
            created_at=datetime(2024, 1, 10, 8),
        )

        assert payment.timestamp == datetime(2024, 1, 9, 10)

    def test_timestamp_falls_back_to_created_at(self) -> None:
        """The creation time is used when nothing was received."""
        payment = Payment(amount=Decimal("100"), created_at=date(2024, 1, 10))

        assert payment.timestamp == date(2024, 1, 10)

    def test_immutable(self) -> None:
        """Payments are frozen."""
        payment = Payment(amount=Decimal("100"))

        with pytest.raises(AttributeError):
            payment.amount = Decimal("200")  # type: ignore[misc]


class TestLoan:
    """Tests for Loan model."""

    def test_defaults(self) -> None:
        """A bare loan is active with no payments."""
        loan = Loan(sign_date=date(2024, 1, 3))

        assert loan.status == LoanStatus.ACTIVE
        assert loan.payments == []
        assert loan.was_renewed is False
        assert loan.total_debt == Decimal("0")

    def test_total_debt(self) -> None:
        """Total debt is principal plus interest."""
        loan = Loan(
            sign_date=date(2024, 1, 3),
            requested_amount=Decimal("3000"),
            rate=Decimal("0.40"),
        )

        assert loan.total_debt == Decimal("4200")

    def test_explicit_weekly_payment_wins(self) -> None:
        """An explicit weekly payment overrides the derived one."""
        loan = Loan(
            sign_date=date(2024, 1, 3),
            requested_amount=Decimal("3000"),
            week_duration=10,
            expected_weekly_payment=Decimal("350"),
        )

        assert loan.weekly_payment() == Decimal("350")

    def test_derived_weekly_payment_rounded(self) -> None:
        """Derived weekly payments are rounded to cents."""
        loan = Loan(sign_date=date(2024, 1, 3), requested_amount=Decimal("1000"), week_duration=3)

        assert loan.weekly_payment() == Decimal("333.33")

    def test_no_schedule(self) -> None:
        """Without a schedule there is no weekly payment."""
        loan = Loan(sign_date=date(2024, 1, 3), requested_amount=Decimal("1000"))

        assert loan.weekly_payment() == Decimal("0")

    def test_total_paid(self) -> None:
        """Total paid sums every payment."""
        loan = Loan(
            sign_date=date(2024, 1, 3),
            payments=[Payment(amount=Decimal("100")), Payment(amount="50.5")],
        )

        assert loan.total_paid() == Decimal("150.5")


class TestResults:
    """Tests for result models."""

    def test_arrears_is_current(self) -> None:
        """A loan with no arrears is current."""
        result = ArrearsResult(
            expected_weekly_payment=Decimal("300"),
            weeks_without_payment=0,
            arrears_amount=Decimal("0"),
            partial_payment=Decimal("0"),
        )

        assert result.is_current

    def test_advance_item(self) -> None:
        """Advance items are flagged."""
        item = ChronologyItem(
            week_index=0,
            type=ChronologyItemType.PAYMENT,
            coverage_type=CoverageType.FULL,
            date=date(2024, 1, 4),
            description="Pago anticipado",
        )

        assert item.is_advance
        assert item.week_count == 1

    def test_reconciliation_totals(self) -> None:
        """Reconciliation totals add up the allocations."""
        allocation = CommissionAllocation(
            loan_id="a",
            payment_amount=Decimal("100"),
            expected_weekly_payment=Decimal("100"),
            base_commission_unit=Decimal("10"),
            expected_commission=Decimal("10"),
            final_commission=Decimal("7"),
            status=AllocationStatus.REDUCED,
        )
        result = CommissionReconciliation(
            reported_total=Decimal("7"),
            expected_total=Decimal("10"),
            adjustment=CommissionAdjustment.DEFICIT,
            allocations=[allocation],
        )

        assert allocation.difference == Decimal("-3")
        assert result.final_total == Decimal("7")
        assert result.difference == Decimal("-3")
        assert result.reduced_count == 1
        assert result.by_loan() == {"a": allocation}


class TestEnums:
    """Tests for string-valued enums."""

    def test_values(self) -> None:
        """Enum values serialize to their wire names."""
        assert WeekMode("current") is WeekMode.CURRENT
        assert CoverageType.COVERED_BY_SURPLUS.value == "COVERED_BY_SURPLUS"
        assert len(CoverageType) == 5

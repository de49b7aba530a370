"""Tests for the arrears (VDO) calculator."""

from datetime import date
from decimal import Decimal

import pytest

from loan_coverage.config import EngineConfig
from loan_coverage.engine.arrears import (
    calculate_arrears,
    calculate_partial_payment,
    paid_between,
    validate_loan,
)
from loan_coverage.exceptions import InvalidInputError
from loan_coverage.models import Payment, WeekMode


class TestCalculateArrears:
    """Tests for calculate_arrears."""

    def test_full_coverage(self, make_loan, pay) -> None:
        """Exactly one installment per required week leaves nothing owed."""
        loan = make_loan(
            pay(300, date(2024, 1, 9)),
            pay(300, date(2024, 1, 16)),
            pay(300, date(2024, 1, 23)),
        )

        result = calculate_arrears(loan, date(2024, 1, 29))

        assert result.expected_weekly_payment == Decimal("300")
        assert result.weeks_requiring_payment == 3
        assert result.weeks_without_payment == 0
        assert result.arrears_amount == Decimal("0")
        assert result.partial_payment == Decimal("0")
        assert result.pending_amount == Decimal("3300")
        assert result.evaluation_end == date(2024, 1, 28)
        assert result.is_current

    def test_missed_weeks(self, make_loan) -> None:
        """Weeks without payment accumulate arrears."""
        result = calculate_arrears(make_loan(), date(2024, 1, 29))

        assert result.weeks_without_payment == 3
        assert result.arrears_amount == Decimal("900")
        assert not result.is_current

    def test_partial_payment_rounds_weeks_up(self, make_loan, pay) -> None:
        """A shortfall counts as a whole missed week."""
        loan = make_loan(pay(150, date(2024, 1, 9)))

        result = calculate_arrears(loan, date(2024, 1, 15))

        assert result.weeks_without_payment == 1
        assert result.arrears_amount == Decimal("300")

    def test_catch_up_payment_clears_earlier_weeks(self, make_loan, pay) -> None:
        """Arrears use window totals, so a double payment recovers a missed week."""
        loan = make_loan(pay(600, date(2024, 1, 16)))

        result = calculate_arrears(loan, date(2024, 1, 22))

        assert result.weeks_requiring_payment == 2
        assert result.weeks_without_payment == 0
        assert result.arrears_amount == Decimal("0")

    def test_surplus_accumulates(self, make_loan, pay) -> None:
        """Overpayments carry forward as surplus."""
        loan = make_loan(pay(900, date(2024, 1, 9)))

        result = calculate_arrears(loan, date(2024, 1, 22))

        assert result.total_expected == Decimal("600")
        assert result.partial_payment == Decimal("300")
        assert result.weeks_without_payment == 0

    def test_grace_week_never_requires_payment(self, make_loan) -> None:
        """The sign week has no obligation in either mode."""
        loan = make_loan()

        current = calculate_arrears(loan, date(2024, 1, 5), WeekMode.CURRENT)
        upcoming = calculate_arrears(loan, date(2024, 1, 5), WeekMode.NEXT)

        assert current.weeks_requiring_payment == 0
        assert upcoming.weeks_requiring_payment == 0
        assert current.arrears_amount == upcoming.arrears_amount == Decimal("0")

    def test_grace_week_payment_counts_as_advance(self, make_loan, pay) -> None:
        """A payment in the sign week counts toward later weeks."""
        loan = make_loan(pay(300, date(2024, 1, 4)))

        result = calculate_arrears(loan, date(2024, 1, 15))

        assert result.weeks_requiring_payment == 1
        assert result.weeks_without_payment == 0

    def test_arrears_capped_by_pending_debt(self, make_loan, pay) -> None:
        """Arrears never exceed the remaining debt."""
        loan = make_loan(
            pay(900, date(2024, 1, 9)),
            requested_amount=Decimal("1000"),
            rate=Decimal("0"),
            week_duration=2,
        )

        result = calculate_arrears(loan, date(2024, 2, 5))

        assert result.expected_weekly_payment == Decimal("500")
        assert result.weeks_without_payment == 3
        assert result.pending_amount == Decimal("100")
        assert result.arrears_amount == Decimal("100")

    def test_unknown_principal_has_no_arrears_amount(self, make_loan) -> None:
        """Without a principal there is no arrears amount."""
        loan = make_loan(requested_amount=None, expected_weekly_payment=Decimal("300"))

        result = calculate_arrears(loan, date(2024, 1, 29))

        assert result.weeks_without_payment == 3
        assert result.arrears_amount == Decimal("0")

    def test_no_schedule_means_nothing_owed(self, make_loan) -> None:
        """Loans without a schedule owe nothing weekly."""
        loan = make_loan(requested_amount=None, week_duration=None)

        result = calculate_arrears(loan, date(2024, 3, 1))

        assert result.expected_weekly_payment == Decimal("0")
        assert result.weeks_without_payment == 0
        assert result.arrears_amount == Decimal("0")

    def test_next_mode_counts_this_week_without_requiring_it(self, make_loan, pay) -> None:
        """Next mode counts this week's payments without requiring them."""
        loan = make_loan(pay(300, date(2024, 1, 9)), pay(300, date(2024, 1, 16)))

        upcoming = calculate_arrears(loan, date(2024, 1, 17), WeekMode.NEXT)
        current = calculate_arrears(loan, date(2024, 1, 17), WeekMode.CURRENT)

        assert upcoming.weeks_requiring_payment == 1
        assert upcoming.total_paid_in_period == Decimal("600")
        assert upcoming.partial_payment == Decimal("300")
        assert current.total_paid_in_period == Decimal("300")
        assert current.partial_payment == Decimal("0")

    def test_next_mode_ignores_payments_after_now(self, make_loan, pay) -> None:
        """Payments after now are not counted."""
        loan = make_loan(pay(300, date(2024, 1, 9)), pay(300, date(2024, 1, 19)))

        result = calculate_arrears(loan, date(2024, 1, 17), "next")

        assert result.total_paid_in_period == Decimal("300")

    def test_mode_defaults_to_config(self, make_loan, pay) -> None:
        """The configured week mode applies when none is passed."""
        loan = make_loan(pay(300, date(2024, 1, 16)))
        config = EngineConfig(week_mode=WeekMode.NEXT)

        result = calculate_arrears(loan, date(2024, 1, 17), config=config)

        assert result.evaluation_end == date(2024, 1, 17)

    def test_mode_name_case_insensitive(self, make_loan, pay) -> None:
        """Week modes may be passed by name in any case."""
        loan = make_loan(pay(300, date(2024, 1, 16)))

        result = calculate_arrears(loan, date(2024, 1, 17), "NEXT")

        assert result.evaluation_end == date(2024, 1, 17)

    def test_unknown_mode_rejected(self, make_loan) -> None:
        """An unknown mode name raises InvalidInputError."""
        with pytest.raises(InvalidInputError, match="week mode"):
            calculate_arrears(make_loan(), date(2024, 1, 17), "later")

    def test_float_and_string_amounts(self, make_loan) -> None:
        """Floats and numeric strings are accepted as amounts."""
        loan = make_loan(
            Payment(amount=150.5, received_at=date(2024, 1, 9)),
            Payment(amount="149.50", received_at=date(2024, 1, 10)),
        )

        result = calculate_arrears(loan, date(2024, 1, 15))

        assert result.total_paid_in_period == Decimal("300.00")
        assert result.weeks_without_payment == 0

    def test_idempotent(self, make_loan, pay) -> None:
        """Repeated evaluation gives the same result."""
        loan = make_loan(pay(150, date(2024, 1, 9)), pay(700, date(2024, 1, 24)))

        assert calculate_arrears(loan, date(2024, 2, 5)) == calculate_arrears(
            loan, date(2024, 2, 5)
        )


class TestValidateLoan:
    """Tests for loan validation."""

    def test_negative_payment(self, make_loan, pay) -> None:
        """Negative payment amounts are rejected."""
        with pytest.raises(InvalidInputError, match="negative amount"):
            validate_loan(make_loan(pay(-10, date(2024, 1, 9))))

    def test_payment_before_sign_date(self, make_loan, pay) -> None:
        """Payments dated before signing are rejected."""
        with pytest.raises(InvalidInputError, match="predates sign date"):
            calculate_arrears(make_loan(pay(300, date(2024, 1, 2))), date(2024, 1, 15))

    def test_negative_rate(self, make_loan) -> None:
        """A negative rate is rejected."""
        with pytest.raises(InvalidInputError, match="rate"):
            validate_loan(make_loan(rate=Decimal("-0.1")))

    def test_negative_duration(self, make_loan) -> None:
        """A negative week duration is rejected."""
        with pytest.raises(InvalidInputError, match="week_duration"):
            validate_loan(make_loan(week_duration=-1))

    def test_non_numeric_amount(self, make_loan) -> None:
        """Non-numeric amounts are rejected."""
        loan = make_loan(Payment(amount="abc", received_at=date(2024, 1, 9)))

        with pytest.raises(InvalidInputError):
            calculate_arrears(loan, date(2024, 1, 15))

    def test_undated_payments_are_ignored(self, make_loan) -> None:
        """Payments without a timestamp are skipped."""
        loan = make_loan(Payment(amount=Decimal("300")))

        validate_loan(loan)
        assert paid_between(loan, date(2024, 1, 1), date(2024, 12, 31)) == Decimal("0")


class TestPartialPayment:
    """Tests for the current-week overpayment (abono parcial)."""

    def test_overpayment_this_week(self, make_loan, pay) -> None:
        """Only the excess over this week's installment is reported."""
        loan = make_loan(pay(300, date(2024, 1, 9)), pay(500, date(2024, 1, 16)))

        result = calculate_partial_payment(loan, date(2024, 1, 17))

        assert result.total_paid_in_current_week == Decimal("500")
        assert result.partial_payment_amount == Decimal("200")

    def test_underpayment_is_zero(self, make_loan, pay) -> None:
        """Paying less than the installment reports no overpayment."""
        loan = make_loan(pay(100, date(2024, 1, 16)))

        result = calculate_partial_payment(loan, date(2024, 1, 17))

        assert result.partial_payment_amount == Decimal("0")

    def test_invalid_loan_rejected(self, make_loan, pay) -> None:
        """The current-week overpayment validates the loan like the arrears calculation."""
        loan = make_loan(pay(-50, date(2024, 1, 16)))

        with pytest.raises(InvalidInputError, match="negative amount"):
            calculate_partial_payment(loan, date(2024, 1, 17))

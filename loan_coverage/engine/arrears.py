"""Arrears (VDO, Valor de Deuda Observada) calculation.

Arrears are derived from global totals over the evaluation window rather than
week by week, so a double payment recovers earlier missed weeks. The sign
week is a grace week: its payments count as an advance but it never requires
a payment itself.
"""

import logging
from datetime import date, datetime
from decimal import ROUND_CEILING, Decimal

from loan_coverage.config import EngineConfig
from loan_coverage.engine.calendar import (
    evaluation_end,
    parse_week_mode,
    to_utc_date,
    week_of,
    weeks_between,
)
from loan_coverage.exceptions import InvalidInputError
from loan_coverage.models import ArrearsResult, Loan, PartialPaymentResult, WeekMode
from loan_coverage.money import ZERO, to_decimal

logger = logging.getLogger(__name__)


def validate_loan(loan: Loan) -> None:
    """Reject loans that cannot be evaluated.

    Raises
    ------
    InvalidInputError
        On negative amounts, rate or duration, or a payment dated before the
        sign date.
    """
    for name in ("requested_amount", "rate", "expected_weekly_payment"):
        if to_decimal(getattr(loan, name), name) < ZERO:
            raise InvalidInputError(f"Loan {loan.loan_id or '<unsaved>'}: {name} is negative")

    if loan.week_duration is not None and loan.week_duration < 0:
        raise InvalidInputError(f"Loan {loan.loan_id or '<unsaved>'}: week_duration is negative")

    sign_day = to_utc_date(loan.sign_date)
    for payment in loan.payments:
        if to_decimal(payment.amount) < ZERO:
            raise InvalidInputError(
                f"Loan {loan.loan_id or '<unsaved>'}: payment {payment.payment_id} has negative amount"
            )
        if payment.timestamp is not None and to_utc_date(payment.timestamp) < sign_day:
            raise InvalidInputError(
                f"Loan {loan.loan_id or '<unsaved>'}: payment {payment.payment_id} "
                f"predates sign date {sign_day.isoformat()}"
            )


def paid_between(loan: Loan, start: date, end: date) -> Decimal:
    """Sum payments whose UTC date falls within ``[start, end]``."""
    total = ZERO
    for payment in loan.payments:
        if payment.timestamp is None:
            continue
        if start <= to_utc_date(payment.timestamp) <= end:
            total += to_decimal(payment.amount)
    return total


def calculate_arrears(
    loan: Loan,
    now: datetime | date,
    week_mode: WeekMode | str | None = None,
    config: EngineConfig | None = None,
) -> ArrearsResult:
    """Compute the arrears (VDO) and accumulated surplus of a loan.

    Parameters
    ----------
    loan : Loan
        Loan with its full payment history.
    now : datetime | date
        Evaluation instant, injected by the caller.
    week_mode : WeekMode | str | None
        ``current`` evaluates only fully elapsed weeks; ``next`` evaluates up
        to today, counting this week's payments without flagging it late.
        Defaults to the configured mode.
    config : EngineConfig | None
        Engine settings.

    Returns
    -------
    ArrearsResult
        Weeks without payment, arrears amount capped by the pending debt,
        and the surplus available as forward credit.
    """
    config = config or EngineConfig()
    mode = parse_week_mode(week_mode) if week_mode is not None else config.week_mode
    validate_loan(loan)

    expected = loan.weekly_payment(config.money_quantum)
    cutoff = evaluation_end(now, mode)

    weeks_requiring_payment = 0
    total_paid_in_period = ZERO
    for week in weeks_between(loan.sign_date, cutoff):
        total_paid_in_period += paid_between(loan, week.monday, min(week.sunday, cutoff))
        if week.is_grace or week.sunday > cutoff:
            continue
        weeks_requiring_payment += 1

    total_expected = expected * weeks_requiring_payment
    deficit = max(ZERO, total_expected - total_paid_in_period)

    weeks_without_payment = 0
    if expected > ZERO:
        weeks_without_payment = int((deficit / expected).to_integral_value(rounding=ROUND_CEILING))

    surplus = max(ZERO, total_paid_in_period - total_expected)
    pending_amount = max(ZERO, loan.total_debt - loan.total_paid())
    arrears_amount = min(expected * weeks_without_payment, pending_amount)

    logger.debug(
        "Loan %s arrears at %s (%s): %d/%d weeks without payment, arrears=%s, surplus=%s",
        loan.loan_id,
        cutoff.isoformat(),
        mode.value,
        weeks_without_payment,
        weeks_requiring_payment,
        arrears_amount,
        surplus,
    )

    return ArrearsResult(
        expected_weekly_payment=expected,
        weeks_without_payment=weeks_without_payment,
        arrears_amount=arrears_amount,
        partial_payment=surplus,
        weeks_requiring_payment=weeks_requiring_payment,
        total_expected=total_expected,
        total_paid_in_period=total_paid_in_period,
        pending_amount=pending_amount,
        evaluation_end=cutoff,
    )


def calculate_partial_payment(
    loan: Loan,
    now: datetime | date,
    config: EngineConfig | None = None,
) -> PartialPaymentResult:
    """Overpayment (abono parcial) collected in the week containing ``now``."""
    config = config or EngineConfig()
    validate_loan(loan)

    expected = loan.weekly_payment(config.money_quantum)
    week = week_of(now)

    paid = paid_between(loan, week.monday, week.sunday)
    return PartialPaymentResult(
        expected_weekly_payment=expected,
        total_paid_in_current_week=paid,
        partial_payment_amount=max(ZERO, paid - expected),
    )

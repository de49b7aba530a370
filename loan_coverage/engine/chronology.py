"""Week-by-week payment chronology for loan history views.

The chronology walks the loan's weeks in order carrying two running values:
the surplus available to cover weeks without payment, and the outstanding
balance. Unlike the arrears calculation, a late catch-up payment does not
retroactively clear earlier missed weeks here; it only feeds the surplus used
by later weeks.
"""

import logging
from collections import Counter, defaultdict
from datetime import date, datetime, timedelta
from decimal import ROUND_CEILING, Decimal

from loan_coverage.config import EngineConfig
from loan_coverage.engine.arrears import validate_loan
from loan_coverage.engine.calendar import to_utc_date, to_utc_datetime, week_of, weeks_between
from loan_coverage.models import (
    ChronologyItem,
    ChronologyItemType,
    CoverageType,
    Loan,
    LoanStatus,
    Payment,
    PaymentStatus,
)
from loan_coverage.money import ZERO, to_decimal

logger = logging.getLogger(__name__)

DEFAULT_HISTORY_WEEKS = 12
AMOUNT_PER_HISTORY_WEEK = Decimal("100")


def sorted_payments(loan: Loan) -> list[Payment]:
    """Dated payments ordered by timestamp; ties keep their recorded order."""
    dated = [p for p in loan.payments if p.timestamp is not None]
    return sorted(dated, key=lambda p: to_utc_datetime(p.timestamp))


def classify_payment_week(
    weekly_paid: Decimal,
    weekly_expected: Decimal,
    overpaid_factor: Decimal = Decimal("1.5"),
) -> CoverageType:
    """Coverage of a week that received at least one payment."""
    if weekly_paid < weekly_expected:
        return CoverageType.PARTIAL
    if weekly_paid >= weekly_expected * overpaid_factor and weekly_paid != weekly_expected:
        return CoverageType.OVERPAID
    return CoverageType.FULL


def chronology_horizon(loan: Loan, now: datetime | date) -> date:
    """Last date the chronology should enumerate.

    Finished loans stop at their finished date and bad-debt loans at their
    bad-debt date. Active loans run up to ``now``, but never past
    :func:`max_history_weeks` weeks after signing. The horizon is extended to
    the latest payment so payments after settlement are still listed.
    """
    end = _visibility_limit(loan, to_utc_date(now))

    dated = [to_utc_date(p.timestamp) for p in loan.payments if p.timestamp is not None]
    if dated:
        end = max(end, max(dated))
    return end


def max_history_weeks(loan: Loan) -> int:
    """Weeks an active loan's history may span.

    The contract term (12 weeks when unknown), or one week per 100 lent when
    that is longer.
    """
    term = loan.week_duration or DEFAULT_HISTORY_WEEKS
    principal = to_decimal(loan.requested_amount, "requested_amount")
    by_amount = (principal / AMOUNT_PER_HISTORY_WEEK).to_integral_value(rounding=ROUND_CEILING)
    return max(term, int(by_amount))


def _visibility_limit(loan: Loan, today: date) -> date:
    if loan.status == LoanStatus.FINISHED and loan.finished_date is not None:
        return to_utc_date(loan.finished_date)
    if loan.bad_debt_date is not None:
        return to_utc_date(loan.bad_debt_date)
    history_end = to_utc_date(loan.sign_date) + timedelta(weeks=max_history_weeks(loan))
    return min(today, history_end)


def build_chronology(
    loan: Loan,
    now: datetime | date,
    config: EngineConfig | None = None,
) -> list[ChronologyItem]:
    """Build the ordered payment chronology of a loan.

    Parameters
    ----------
    loan : Loan
        Loan with its full payment history.
    now : datetime | date
        Evaluation instant. Weeks without payment are only reported once
        their Sunday has passed.
    config : EngineConfig | None
        Engine settings (currency quantum, overpaid factor).

    Returns
    -------
    list[ChronologyItem]
        One PAYMENT item per discrete payment and one NO_PAYMENT item per
        visible week without payment, in week order.
    """
    config = config or EngineConfig()
    validate_loan(loan)

    today = to_utc_date(now)
    sign_day = to_utc_date(loan.sign_date)
    expected = loan.weekly_payment(config.money_quantum)
    horizon = chronology_horizon(loan, today)
    limit = _visibility_limit(loan, today)
    show_misses = loan.status != LoanStatus.FINISHED and not loan.was_renewed

    payments_by_week: dict[int, list[Payment]] = defaultdict(list)
    for payment in sorted_payments(loan):
        payments_by_week[week_of(payment.timestamp, anchor=sign_day).index].append(payment)

    surplus = ZERO
    balance = loan.total_debt
    items: list[ChronologyItem] = []

    for week in weeks_between(sign_day, horizon):
        week_payments = payments_by_week.get(week.index, [])
        weekly_paid = sum((to_decimal(p.amount) for p in week_payments), ZERO)
        surplus_before = surplus

        if week.is_grace:
            surplus = max(ZERO, weekly_paid)
            for number, payment in enumerate(week_payments, start=1):
                balance_before = balance
                balance = max(ZERO, balance - to_decimal(payment.amount))
                description = (
                    f"Pago anticipado #{number} ({number}/{len(week_payments)})"
                    if len(week_payments) > 1
                    else "Pago anticipado"
                )
                items.append(
                    _payment_item(
                        payment,
                        week_index=week.index,
                        coverage=CoverageType.FULL,
                        description=description,
                        expected=expected,
                        weekly_paid=weekly_paid,
                        surplus_before=surplus_before,
                        surplus_after=surplus,
                        balance_before=balance_before,
                        balance_after=balance,
                        number=number,
                        count=len(week_payments),
                    )
                )
            continue

        if weekly_paid == ZERO:
            covered = surplus >= expected
            if covered:
                surplus -= expected

            if show_misses and week.sunday < today and week.monday <= limit:
                coverage = CoverageType.COVERED_BY_SURPLUS if covered else CoverageType.UNCOVERED
                items.append(
                    ChronologyItem(
                        week_index=week.index,
                        type=ChronologyItemType.NO_PAYMENT,
                        coverage_type=coverage,
                        date=sign_day + timedelta(weeks=week.index),
                        description="Sin pago (cubierto por sobrepago)" if covered else "Sin pago",
                        weekly_expected=expected,
                        surplus_before=surplus_before,
                        surplus_after=surplus,
                        balance_before=balance,
                        balance_after=balance,
                    )
                )
            continue

        coverage = classify_payment_week(weekly_paid, expected, config.overpaid_factor)
        surplus += max(ZERO, weekly_paid - expected)

        for number, payment in enumerate(week_payments, start=1):
            balance_before = balance
            balance = max(ZERO, balance - to_decimal(payment.amount))
            description = (
                f"Pago #{number} ({number}/{len(week_payments)})"
                if len(week_payments) > 1
                else f"Pago semana {week.index}"
            )
            items.append(
                _payment_item(
                    payment,
                    week_index=week.index,
                    coverage=coverage,
                    description=description,
                    expected=expected,
                    weekly_paid=weekly_paid,
                    surplus_before=surplus_before,
                    surplus_after=surplus,
                    balance_before=balance_before,
                    balance_after=balance,
                    number=number,
                    count=len(week_payments),
                )
            )

    logger.debug(
        "Loan %s chronology through %s: %d items, surplus=%s, balance=%s",
        loan.loan_id,
        horizon.isoformat(),
        len(items),
        surplus,
        balance,
    )
    return items


def _payment_item(
    payment: Payment,
    *,
    week_index: int,
    coverage: CoverageType,
    description: str,
    expected: Decimal,
    weekly_paid: Decimal,
    surplus_before: Decimal,
    surplus_after: Decimal,
    balance_before: Decimal,
    balance_after: Decimal,
    number: int,
    count: int,
) -> ChronologyItem:
    return ChronologyItem(
        week_index=week_index,
        type=ChronologyItemType.PAYMENT,
        coverage_type=coverage,
        date=to_utc_date(payment.timestamp),
        description=description,
        amount=to_decimal(payment.amount),
        weekly_expected=expected,
        weekly_paid=weekly_paid,
        surplus_before=surplus_before,
        surplus_after=surplus_after,
        balance_before=balance_before,
        balance_after=balance_after,
        payment_id=payment.payment_id,
        payment_number=number,
        payments_in_week=count,
    )


def condense_missed_weeks(
    items: list[ChronologyItem],
    threshold: int = 4,
) -> list[ChronologyItem]:
    """Collapse runs of more than ``threshold`` consecutive missed weeks.

    A condensed item spans the run: it starts with the first week's surplus
    and balance, ends with the last week's, and is COVERED_BY_SURPLUS only if
    every week in the run was.
    """
    result: list[ChronologyItem] = []
    run: list[ChronologyItem] = []

    def flush() -> None:
        if len(run) > threshold:
            result.append(_condense(run))
        else:
            result.extend(run)
        run.clear()

    for item in items:
        if item.type != ChronologyItemType.NO_PAYMENT:
            flush()
            result.append(item)
            continue
        if run and item.week_index != run[-1].week_index + run[-1].week_count:
            flush()
        run.append(item)

    flush()
    return result


def _condense(run: list[ChronologyItem]) -> ChronologyItem:
    first, last = run[0], run[-1]
    weeks = sum(item.week_count for item in run)
    all_covered = all(item.coverage_type == CoverageType.COVERED_BY_SURPLUS for item in run)
    coverage = CoverageType.COVERED_BY_SURPLUS if all_covered else CoverageType.UNCOVERED

    return ChronologyItem(
        week_index=first.week_index,
        type=ChronologyItemType.NO_PAYMENT,
        coverage_type=coverage,
        date=first.date,
        description=(
            f"{weeks} semanas sin pago (cubierto por sobrepago)"
            if all_covered
            else f"{weeks} semanas sin pago"
        ),
        weekly_expected=first.weekly_expected,
        surplus_before=first.surplus_before,
        surplus_after=last.surplus_after,
        balance_before=first.balance_before,
        balance_after=last.balance_after,
        week_count=weeks,
    )


def payment_status(item: ChronologyItem) -> PaymentStatus:
    """Collapse an item's coverage into the status shown on history cards."""
    if item.type == ChronologyItemType.NO_PAYMENT:
        if item.coverage_type == CoverageType.COVERED_BY_SURPLUS:
            return PaymentStatus.PAID
        return PaymentStatus.MISSED

    if item.coverage_type == CoverageType.OVERPAID:
        return PaymentStatus.OVERPAID
    if item.coverage_type == CoverageType.PARTIAL:
        return PaymentStatus.PARTIAL
    return PaymentStatus.PAID


def summarize_chronology(items: list[ChronologyItem]) -> dict[CoverageType, int]:
    """Count weeks per coverage type, grace-week advances excluded."""
    counts: Counter[CoverageType] = Counter()
    seen_payment_weeks: set[int] = set()

    for item in items:
        if item.type == ChronologyItemType.NO_PAYMENT:
            counts[item.coverage_type] += item.week_count
        elif not item.is_advance and item.week_index not in seen_payment_weeks:
            seen_payment_weeks.add(item.week_index)
            counts[item.coverage_type] += 1

    return {coverage: counts.get(coverage, 0) for coverage in CoverageType}

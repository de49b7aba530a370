"""Commission reconciliation against a reported ledger total.

The collector's paper ledger reports one aggregate commission for the day.
Per-loan commissions are first estimated from each payment, then forced to
sum exactly to the reported figure:

- deficit: the smallest payments lose their commission first, whole
  commissions before a single partial reduction;
- surplus: the largest payments receive extra whole commission units first,
  with the remainder as one partial addition, in repeated passes.
"""

import logging
from decimal import ROUND_FLOOR, Decimal
from typing import Any, Iterable

from loan_coverage.config import EngineConfig
from loan_coverage.exceptions import (
    InvalidInputError,
    InvalidReportedTotalError,
    UnallocatableCommissionError,
)
from loan_coverage.models import (
    AllocationStatus,
    CommissionAdjustment,
    CommissionAllocation,
    CommissionInput,
    CommissionReconciliation,
)
from loan_coverage.money import ZERO, quantize, to_decimal

logger = logging.getLogger(__name__)


def expected_commission(
    payment_amount: Decimal,
    expected_weekly_payment: Decimal,
    base_commission_unit: Decimal,
) -> Decimal:
    """Commission earned by a payment: one base unit per whole weekly installment."""
    if payment_amount <= ZERO or expected_weekly_payment <= ZERO or base_commission_unit <= ZERO:
        return ZERO
    multiplier = (payment_amount / expected_weekly_payment).to_integral_value(rounding=ROUND_FLOOR)
    if multiplier < 1:
        return ZERO
    return base_commission_unit * multiplier


def parse_reported_total(value: Any, quantum: Decimal = Decimal("0.01")) -> Decimal:
    """Validate a reported commission total.

    Raises
    ------
    InvalidReportedTotalError
        If the value is not a finite, non-negative number, or has more
        precision than the currency quantum.
    """
    if value is None:
        raise InvalidReportedTotalError("reported_total is required")
    try:
        total = to_decimal(value, "reported_total")
    except InvalidInputError as exc:
        raise InvalidReportedTotalError(str(exc)) from exc

    if total < ZERO:
        raise InvalidReportedTotalError(f"reported_total must not be negative, got {total}")
    if total != quantize(total, quantum):
        raise InvalidReportedTotalError(
            f"reported_total {total} is finer than the currency unit {quantum}"
        )
    return quantize(total, quantum)


class _Entry:
    """Mutable working row for one eligible loan."""

    __slots__ = ("source", "base", "expected", "commission")

    def __init__(self, source: CommissionInput, base: Decimal, expected: Decimal) -> None:
        self.source = source
        self.base = base
        self.expected = expected
        self.commission = expected


def reconcile_commissions(
    reported_total: Any,
    loans: Iterable[CommissionInput],
    base_commission_override: Decimal | None = None,
    config: EngineConfig | None = None,
) -> CommissionReconciliation:
    """Distribute a reported commission total across a set of loans.

    Parameters
    ----------
    reported_total : Any
        Authoritative total from the paper ledger. Must be a finite,
        non-negative number.
    loans : Iterable[CommissionInput]
        Loans collected in the period.
    base_commission_override : Decimal | None
        When positive, replaces the base unit of every loan whose own loan
        type pays a commission.
    config : EngineConfig | None
        Engine settings (currency quantum).

    Returns
    -------
    CommissionReconciliation
        Allocations in input order; eligible allocations sum exactly to the
        reported total.

    Raises
    ------
    InvalidReportedTotalError
        If ``reported_total`` is invalid.
    UnallocatableCommissionError
        If ``reported_total`` is positive and no loan is eligible.
    """
    config = config or EngineConfig()
    quantum = config.money_quantum
    total = parse_reported_total(reported_total, quantum)
    override = to_decimal(base_commission_override, "base_commission_override")

    inputs = list(loans)
    eligible: list[_Entry] = []
    entries: dict[int, _Entry] = {}

    for position, loan in enumerate(inputs):
        payment = to_decimal(loan.payment_amount, "payment_amount")
        weekly = to_decimal(loan.expected_weekly_payment, "expected_weekly_payment")
        base = to_decimal(loan.base_commission_unit, "base_commission_unit")
        if payment < ZERO or weekly < ZERO or base < ZERO:
            raise InvalidInputError(f"Loan {loan.loan_id}: commission inputs must not be negative")

        if base > ZERO and override > ZERO:
            base = override
        if base != quantize(base, quantum):
            raise InvalidInputError(
                f"Loan {loan.loan_id}: base_commission_unit {base} is finer than "
                f"the currency unit {quantum}"
            )
        if payment <= ZERO or weekly <= ZERO or base <= ZERO:
            continue

        entry = _Entry(loan, base, quantize(expected_commission(payment, weekly, base), quantum))
        eligible.append(entry)
        entries[position] = entry

    expected_total = sum((e.expected for e in eligible), ZERO)

    if not eligible:
        if total > ZERO:
            raise UnallocatableCommissionError(
                f"No eligible loans to receive reported commission {total}"
            )
        adjustment = CommissionAdjustment.NONE
    elif total == ZERO:
        adjustment = CommissionAdjustment.ZERO
        for entry in eligible:
            entry.commission = ZERO
    elif total == expected_total:
        adjustment = CommissionAdjustment.EXACT
    elif total < expected_total:
        adjustment = CommissionAdjustment.DEFICIT
        _absorb_deficit(eligible, expected_total - total)
    else:
        adjustment = CommissionAdjustment.SURPLUS
        _spread_surplus(eligible, total - expected_total)

    allocations = [
        _allocation(loan, entries.get(position), override) for position, loan in enumerate(inputs)
    ]
    result = CommissionReconciliation(
        reported_total=total,
        expected_total=expected_total,
        adjustment=adjustment,
        allocations=allocations,
    )

    logger.debug(
        "Commission reconciliation %s: reported=%s expected=%s "
        "(%d increased, %d reduced, %d zeroed, %d excluded)",
        adjustment.value,
        total,
        expected_total,
        result.increased_count,
        result.reduced_count,
        result.zeroed_count,
        result.excluded_count,
    )
    return result


def _absorb_deficit(eligible: list[_Entry], deficit: Decimal) -> None:
    """Remove the deficit from the smallest payments first."""
    for entry in sorted(eligible, key=lambda e: to_decimal(e.source.payment_amount)):
        if deficit <= ZERO:
            break
        if entry.commission <= ZERO:
            continue
        if deficit >= entry.commission:
            deficit -= entry.commission
            entry.commission = ZERO
        else:
            entry.commission -= deficit
            deficit = ZERO


def _spread_surplus(eligible: list[_Entry], surplus: Decimal) -> None:
    """Add whole base units to the largest payments first, then the remainder."""
    ordered = sorted(eligible, key=lambda e: to_decimal(e.source.payment_amount), reverse=True)
    while surplus > ZERO:
        for entry in ordered:
            if surplus <= ZERO:
                break
            if surplus >= entry.base:
                entry.commission += entry.base
                surplus -= entry.base
            else:
                entry.commission += surplus
                surplus = ZERO


def _allocation(
    loan: CommissionInput,
    entry: _Entry | None,
    override: Decimal,
) -> CommissionAllocation:
    if entry is None:
        return CommissionAllocation(
            loan_id=loan.loan_id,
            payment_amount=to_decimal(loan.payment_amount),
            expected_weekly_payment=to_decimal(loan.expected_weekly_payment),
            base_commission_unit=to_decimal(loan.base_commission_unit),
            expected_commission=ZERO,
            final_commission=ZERO,
            status=AllocationStatus.EXCLUDED,
        )

    if entry.commission == entry.expected:
        status = AllocationStatus.UNCHANGED
    elif entry.commission == ZERO:
        status = AllocationStatus.ZEROED
    elif entry.commission > entry.expected:
        status = AllocationStatus.INCREASED
    else:
        status = AllocationStatus.REDUCED

    return CommissionAllocation(
        loan_id=loan.loan_id,
        payment_amount=to_decimal(loan.payment_amount),
        expected_weekly_payment=to_decimal(loan.expected_weekly_payment),
        base_commission_unit=entry.base,
        expected_commission=entry.expected,
        final_commission=entry.commission,
        status=status,
    )

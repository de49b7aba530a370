"""Commission reconciliation models."""

from dataclasses import dataclass, field
from decimal import Decimal

from loan_coverage.models.enums import AllocationStatus, CommissionAdjustment
from loan_coverage.money import ZERO


@dataclass(frozen=True)
class CommissionInput:
    """A loan's collection for the period, as seen by the reconciler."""

    loan_id: str
    payment_amount: Decimal
    expected_weekly_payment: Decimal
    base_commission_unit: Decimal  # Commission per standard weekly payment, per loan type


@dataclass(frozen=True)
class CommissionAllocation:
    """Final commission assigned to one loan."""

    loan_id: str
    payment_amount: Decimal
    expected_weekly_payment: Decimal
    base_commission_unit: Decimal
    expected_commission: Decimal
    final_commission: Decimal
    status: AllocationStatus

    @property
    def is_eligible(self) -> bool:
        return self.status != AllocationStatus.EXCLUDED

    @property
    def difference(self) -> Decimal:
        """Final minus expected commission."""
        return self.final_commission - self.expected_commission


@dataclass(frozen=True)
class CommissionReconciliation:
    """Outcome of forcing per-loan commissions to a reported total."""

    reported_total: Decimal
    expected_total: Decimal
    adjustment: CommissionAdjustment
    allocations: list[CommissionAllocation] = field(default_factory=list)

    @property
    def final_total(self) -> Decimal:
        return sum((a.final_commission for a in self.allocations), ZERO)

    @property
    def difference(self) -> Decimal:
        """Reported minus expected total (negative on deficit)."""
        return self.reported_total - self.expected_total

    def _count(self, status: AllocationStatus) -> int:
        return sum(1 for a in self.allocations if a.status == status)

    @property
    def increased_count(self) -> int:
        return self._count(AllocationStatus.INCREASED)

    @property
    def reduced_count(self) -> int:
        return self._count(AllocationStatus.REDUCED)

    @property
    def zeroed_count(self) -> int:
        return self._count(AllocationStatus.ZEROED)

    @property
    def excluded_count(self) -> int:
        return self._count(AllocationStatus.EXCLUDED)

    def by_loan(self) -> dict[str, CommissionAllocation]:
        """Index allocations by loan ID."""
        return {a.loan_id: a for a in self.allocations}

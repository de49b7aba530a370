"""Portfolio scenario: generate a weekly loan book and evaluate every loan."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Any

from loan_coverage.config import CoverageConfig, GeneratorConfig
from loan_coverage.engine.arrears import calculate_arrears, calculate_partial_payment, paid_between
from loan_coverage.engine.calendar import to_utc_date, week_of
from loan_coverage.engine.chronology import build_chronology, summarize_chronology
from loan_coverage.engine.commission import reconcile_commissions
from loan_coverage.generators import LoanGenerator, LoanProduct, PaymentBehavior
from loan_coverage.logging import get_logger
from loan_coverage.models import (
    ArrearsResult,
    ChronologyItem,
    CommissionInput,
    CommissionReconciliation,
    CoverageType,
    Loan,
    PartialPaymentResult,
    PayerProfile,
)
from loan_coverage.money import ZERO

logger = logging.getLogger(__name__)


@dataclass
class LoanEvaluation:
    """Engine outputs for one loan of the portfolio."""

    loan: Loan
    product: LoanProduct
    profile: PayerProfile
    arrears: ArrearsResult
    partial_payment: PartialPaymentResult
    chronology: list[ChronologyItem]
    coverage_summary: dict[CoverageType, int]


@dataclass
class PortfolioReport:
    """Aggregated evaluation of a loan portfolio at one instant."""

    evaluated_at: date
    evaluations: list[LoanEvaluation] = field(default_factory=list)

    @property
    def total_arrears(self) -> Decimal:
        return sum((e.arrears.arrears_amount for e in self.evaluations), ZERO)

    @property
    def total_surplus(self) -> Decimal:
        return sum((e.arrears.partial_payment for e in self.evaluations), ZERO)

    @property
    def loans_in_arrears(self) -> int:
        return sum(1 for e in self.evaluations if not e.arrears.is_current)

    def summary(self) -> dict[str, Any]:
        """Headline figures for reporting."""
        return {
            "evaluated_at": self.evaluated_at,
            "loans": len(self.evaluations),
            "loans_in_arrears": self.loans_in_arrears,
            "total_arrears": self.total_arrears,
            "total_surplus": self.total_surplus,
        }


class PortfolioScenario:
    """Generate a weekly-collection portfolio and run the engines over it.

    This scenario creates:
    - Loans across the available products with random sign dates
    - Weekly payments following good, occasional-late, chronic-late and
      defaulter payer profiles
    - Arrears, current-week partial payment and chronology for every loan
    """

    def __init__(
        self,
        num_loans: int = 100,
        now: datetime | date | None = None,
        seed: int | None = None,
        *,
        config: CoverageConfig | None = None,
    ) -> None:
        """Initialize portfolio scenario.

        Parameters
        ----------
        num_loans : int
            Number of loans to generate.
        now : datetime | date | None
            Evaluation instant (default today).
        seed : int | None
            Random seed for reproducibility.
        config : CoverageConfig | None
            Optional configuration. If provided, overrides num_loans and seed.
        """
        self.config = config or CoverageConfig()
        generator_config: GeneratorConfig = self.config.generator

        if config is not None:
            self.num_loans = generator_config.num_loans
            self.seed = config.seed if config.seed is not None else seed
        else:
            self.num_loans = num_loans
            self.seed = seed

        self.now = to_utc_date(now) if now is not None else date.today()

        if self.seed is not None:
            random.seed(self.seed)

        self._loan_gen = LoanGenerator(seed=self.seed, locale=generator_config.locale)
        self._payment_behavior = PaymentBehavior(seed=self.seed)

    def generate(self) -> PortfolioReport:
        """Generate loans and evaluate them.

        Returns
        -------
        PortfolioReport
            Per-loan evaluations and portfolio totals.
        """
        generator_config = self.config.generator

        logger.info(
            "Starting portfolio scenario: %d loans evaluated at %s",
            self.num_loans,
            self.now.isoformat(),
        )

        report = PortfolioReport(evaluated_at=self.now)
        for loan, product in self._loan_gen.generate_batch(
            self.num_loans,
            reference_date=self.now,
            weeks_of_history=generator_config.weeks_of_history,
        ):
            profile = self._payment_behavior.pick_profile(
                on_time_rate=generator_config.on_time_rate,
                late_rate=generator_config.late_rate,
                default_rate=generator_config.default_rate,
            )
            self._payment_behavior.apply_payment_behavior(loan, profile, self.now)
            report.evaluations.append(self.evaluate(loan, product, profile))

        logger.info(
            "Evaluated %d loans: %d in arrears, total arrears %s",
            len(report.evaluations),
            report.loans_in_arrears,
            report.total_arrears,
        )
        return report

    def evaluate(self, loan: Loan, product: LoanProduct, profile: PayerProfile) -> LoanEvaluation:
        """Run every engine over one loan."""
        engine_config = self.config.engine
        arrears = calculate_arrears(loan, self.now, engine_config.week_mode, engine_config)
        chronology = build_chronology(loan, self.now, engine_config)

        get_logger(__name__, loan.loan_id).debug(
            "%s payer on %s: %d weeks without payment, arrears %s",
            profile.value,
            product.name,
            arrears.weeks_without_payment,
            arrears.arrears_amount,
        )

        return LoanEvaluation(
            loan=loan,
            product=product,
            profile=profile,
            arrears=arrears,
            partial_payment=calculate_partial_payment(loan, self.now, engine_config),
            chronology=chronology,
            coverage_summary=summarize_chronology(chronology),
        )


def collection_inputs(report: PortfolioReport, day: date | None = None) -> list[CommissionInput]:
    """Commission inputs for what each loan paid in the week of ``day``."""
    week = week_of(day or report.evaluated_at)
    inputs = []
    for evaluation in report.evaluations:
        paid = paid_between(evaluation.loan, week.monday, week.sunday)
        inputs.append(
            CommissionInput(
                loan_id=evaluation.loan.loan_id or "",
                payment_amount=paid,
                expected_weekly_payment=evaluation.arrears.expected_weekly_payment,
                base_commission_unit=evaluation.product.commission_unit,
            )
        )
    return inputs


def collection_commissions(
    report: PortfolioReport,
    reported_total: Any,
    day: date | None = None,
) -> CommissionReconciliation:
    """Reconcile a collector's reported commission total for the week of ``day``."""
    return reconcile_commissions(reported_total, collection_inputs(report, day))

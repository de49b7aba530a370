"""Weekly microfinance loan generator."""

import random
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from decimal import Decimal
from typing import Iterator

from loan_coverage.engine.calendar import monday_of
from loan_coverage.generators.base import BaseGenerator
from loan_coverage.models import Loan, LoanStatus, PayerProfile, Payment
from loan_coverage.money import ZERO


@dataclass(frozen=True)
class LoanProduct:
    """Loan type offered by the field network."""

    name: str
    week_duration: int
    rate: Decimal
    commission_unit: Decimal  # Paid to the collector per weekly installment


class LoanGenerator(BaseGenerator):
    """Generate synthetic weekly loans."""

    PRODUCTS = [
        LoanProduct("Credito 14 semanas", 14, Decimal("0.40"), Decimal("8")),
        LoanProduct("Credito 20 semanas", 20, Decimal("0.60"), Decimal("10")),
        LoanProduct("Credito 10 semanas", 10, Decimal("0.00"), Decimal("0")),  # No commission
    ]

    # Requested amounts in steps of 500
    AMOUNT_RANGE = (2, 20)

    def generate(
        self,
        sign_date: date | None = None,
        product: LoanProduct | None = None,
        reference_date: date | None = None,
        weeks_of_history: int = 30,
    ) -> tuple[Loan, LoanProduct]:
        """Generate a loan without payments.

        Parameters
        ----------
        sign_date : date | None
            Sign date. Random date within ``weeks_of_history`` weeks before
            ``reference_date`` when omitted.
        product : LoanProduct | None
            Loan type. Random product when omitted.
        reference_date : date | None
            Date the portfolio is observed at (default today).
        weeks_of_history : int
            How far back a random sign date may go.

        Returns
        -------
        tuple[Loan, LoanProduct]
            Generated loan and the product it was issued under.
        """
        product = product or random.choice(self.PRODUCTS)
        if sign_date is None:
            sign_date = self.date_in_window(reference_date or date.today(), weeks_of_history)

        requested = Decimal(random.randint(*self.AMOUNT_RANGE) * 500)

        loan = Loan(
            loan_id=self.new_id(),
            sign_date=sign_date,
            requested_amount=requested,
            rate=product.rate,
            week_duration=product.week_duration,
            status=LoanStatus.ACTIVE,
        )
        return loan, product

    def generate_batch(self, count: int, **kwargs) -> Iterator[tuple[Loan, LoanProduct]]:
        """Generate multiple loans."""
        for _ in range(count):
            yield self.generate(**kwargs)


class PaymentBehavior:
    """Simulate weekly door-to-door collection behaviour."""

    PAYMENT_METHODS = ["CASH", "CASH", "CASH", "MONEY_TRANSFER"]

    def __init__(self, seed: int | None = None) -> None:
        if seed is not None:
            random.seed(seed)

    def pick_profile(
        self,
        on_time_rate: float = 0.70,
        late_rate: float = 0.20,
        default_rate: float = 0.10,
    ) -> PayerProfile:
        """Draw a payer profile from the configured rates."""
        return random.choices(
            [
                PayerProfile.GOOD,
                PayerProfile.OCCASIONAL_LATE,
                PayerProfile.CHRONIC_LATE,
                PayerProfile.DEFAULTER,
            ],
            weights=[on_time_rate, late_rate * 0.7, late_rate * 0.3, default_rate],
            k=1,
        )[0]

    def apply_payment_behavior(
        self,
        loan: Loan,
        profile: PayerProfile,
        reference_date: date,
    ) -> Loan:
        """Attach weekly payments to a loan according to a payer profile.

        Parameters
        ----------
        loan : Loan
            Loan to collect on. Its existing payments are kept.
        profile : PayerProfile
            Behaviour to simulate.
        reference_date : date
            Current date; no payment is generated after it.

        Returns
        -------
        Loan
            The same loan with payments appended, finished when fully paid.
        """
        expected = loan.weekly_payment()
        debt = loan.total_debt
        paid = loan.total_paid()
        pending_weeks = 0
        stop_after = random.randint(2, 6)

        week_monday = monday_of(loan.sign_date) + timedelta(weeks=1)
        week = 1
        while week_monday <= reference_date and paid < debt:
            amount = ZERO

            if profile == PayerProfile.GOOD:
                amount = expected
            elif profile == PayerProfile.OCCASIONAL_LATE:
                if random.random() < 0.8:
                    amount = expected * (1 + pending_weeks)
                    pending_weeks = 0
                else:
                    pending_weeks += 1
            elif profile == PayerProfile.CHRONIC_LATE:
                # Pays something most weeks, rarely the full installment
                if random.random() < 0.75:
                    amount = (expected * Decimal(random.choice(["0.5", "0.6", "0.8", "1"]))).quantize(
                        Decimal("1")
                    )
            elif week <= stop_after:  # defaulter
                amount = expected

            amount = min(amount, debt - paid)
            if amount > ZERO:
                received = week_monday + timedelta(days=random.randint(0, 5))
                if received <= reference_date:
                    loan.payments.append(self._payment(amount, received, len(loan.payments) + 1))
                    paid += amount

            week_monday += timedelta(weeks=1)
            week += 1

        if paid >= debt > ZERO:
            loan.status = LoanStatus.FINISHED
            loan.finished_date = loan.payments[-1].timestamp

        return loan

    def _payment(self, amount: Decimal, received: date, number: int) -> Payment:
        received_at = datetime.combine(
            received, time(hour=random.randint(8, 18), minute=random.randint(0, 59))
        ).replace(tzinfo=timezone.utc)
        return Payment(
            amount=amount,
            received_at=received_at,
            payment_id=f"pay-{number:03d}-{random.randint(10000, 99999)}",
            payment_method=random.choice(self.PAYMENT_METHODS),
        )

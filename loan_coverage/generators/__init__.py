"""Synthetic portfolio generators."""

from loan_coverage.generators.loan import LoanGenerator, LoanProduct, PaymentBehavior

__all__ = ["LoanGenerator", "LoanProduct", "PaymentBehavior"]

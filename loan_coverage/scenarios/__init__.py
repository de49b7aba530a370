"""Batch evaluation scenarios."""

from loan_coverage.scenarios.portfolio import (
    LoanEvaluation,
    PortfolioReport,
    PortfolioScenario,
    collection_commissions,
    collection_inputs,
)

__all__ = [
    "LoanEvaluation",
    "PortfolioReport",
    "PortfolioScenario",
    "collection_commissions",
    "collection_inputs",
]

"""Custom exception hierarchy for loan-coverage."""


class CoverageEngineError(Exception):
    """Base exception for all loan-coverage errors."""


class InvalidInputError(CoverageEngineError):
    """Raised when a loan, payment or amount is invalid for computation."""


class InvalidReportedTotalError(InvalidInputError):
    """Raised when a reported commission total is negative or not a finite number."""


class UnallocatableCommissionError(CoverageEngineError):
    """Raised when a positive commission total has no eligible loan to land on."""


class ConfigurationError(CoverageEngineError):
    """Raised when configuration is invalid or missing."""

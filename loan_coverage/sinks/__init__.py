"""Output sinks for exporting engine results."""

from loan_coverage.sinks.json_file import JsonFileSink

__all__ = ["JsonFileSink"]

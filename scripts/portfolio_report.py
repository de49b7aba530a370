#!/usr/bin/env python3
"""Generate a synthetic weekly loan portfolio and export engine reports.

Writes one JSON file per report to the output directory:

- ``arrears.json``: VDO evaluation per loan
- ``chronology.json``: condensed week-by-week history per loan
- ``commissions.json``: commission reconciliation for the evaluated week
- ``summary.json``: portfolio totals
"""

import argparse
import logging
from datetime import date

from loan_coverage.config import CoverageConfig
from loan_coverage.engine.chronology import condense_missed_weeks
from loan_coverage.exceptions import CoverageEngineError
from loan_coverage.logging import setup_logging
from loan_coverage.models import WeekMode
from loan_coverage.scenarios import PortfolioScenario, collection_commissions
from loan_coverage.sinks import JsonFileSink
from loan_coverage.sinks.serialization import to_dict

logger = logging.getLogger("loan_coverage.scripts.portfolio_report")


def main() -> None:
    """Main entry point."""
    config = CoverageConfig.from_env()

    parser = argparse.ArgumentParser(
        description="Evaluate arrears, chronology and commissions over a synthetic portfolio"
    )
    parser.add_argument(
        "--loans",
        type=int,
        default=config.generator.num_loans,
        help=f"Number of loans to generate (default: {config.generator.num_loans})",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=config.seed if config.seed is not None else 42,
        help="Random seed for reproducibility (default: 42)",
    )
    parser.add_argument(
        "--now",
        type=date.fromisoformat,
        default=date.today(),
        help="Evaluation date, YYYY-MM-DD (default: today)",
    )
    parser.add_argument(
        "--week-mode",
        type=str,
        choices=[m.value for m in WeekMode],
        default=config.engine.week_mode.value,
        help="current: only closed weeks; next: include this week's payments",
    )
    parser.add_argument(
        "--reported-commission",
        type=str,
        default=None,
        help="Commission total reported by the collector for the evaluated week",
    )
    parser.add_argument(
        "--output-dir",
        type=str,
        default=str(config.output.json_output_dir),
        help="Directory for JSON reports (default: output)",
    )
    parser.add_argument(
        "--pretty",
        action="store_true",
        default=config.output.pretty_json,
        help="Pretty-print JSON output",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=config.log_level,
        help="Log level (default: INFO)",
    )
    args = parser.parse_args()

    setup_logging(level=args.log_level, format_type=config.log_format)

    config.seed = args.seed
    config.generator.num_loans = args.loans
    config.engine.week_mode = WeekMode(args.week_mode)

    scenario = PortfolioScenario(now=args.now, config=config)
    report = scenario.generate()

    sink = JsonFileSink(args.output_dir, pretty=args.pretty)
    sink.write_batch(
        "arrears",
        [{"loan_id": e.loan.loan_id, **to_dict(e.arrears)} for e in report.evaluations],
    )
    sink.write_batch(
        "chronology",
        [
            {
                "loan_id": e.loan.loan_id,
                "items": condense_missed_weeks(e.chronology, config.engine.condense_threshold),
            }
            for e in report.evaluations
        ],
    )

    if args.reported_commission is not None:
        try:
            reconciliation = collection_commissions(report, args.reported_commission)
        except CoverageEngineError as exc:
            logger.error("Commission reconciliation failed: %s", exc)
            raise SystemExit(1) from exc
        else:
            sink.write_batch("commissions", reconciliation.allocations)
            logger.info(
                "Commissions %s: reported %s, expected %s",
                reconciliation.adjustment.value,
                reconciliation.reported_total,
                reconciliation.expected_total,
            )

    sink.write_batch("summary", [report.summary()])
    sink.close()


if __name__ == "__main__":
    main()

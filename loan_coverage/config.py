"""Configuration management for loan-coverage."""

from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from pathlib import Path

from loan_coverage.exceptions import ConfigurationError
from loan_coverage.models.enums import WeekMode


@dataclass
class EngineConfig:
    """Arithmetic and classification settings for the engines."""

    money_quantum: Decimal = Decimal("0.01")
    overpaid_factor: Decimal = Decimal("1.5")
    week_mode: WeekMode = WeekMode.CURRENT
    condense_threshold: int = 4

    def __post_init__(self) -> None:
        if self.money_quantum <= 0:
            raise ConfigurationError(f"money_quantum must be positive, got {self.money_quantum}")
        if self.overpaid_factor < 1:
            raise ConfigurationError(f"overpaid_factor must be >= 1, got {self.overpaid_factor}")
        if self.condense_threshold < 1:
            raise ConfigurationError(
                f"condense_threshold must be >= 1, got {self.condense_threshold}"
            )


@dataclass
class GeneratorConfig:
    """Synthetic portfolio generation settings."""

    num_loans: int = 100
    locale: str = "es_MX"
    weeks_of_history: int = 20
    on_time_rate: float = 0.70
    late_rate: float = 0.20
    default_rate: float = 0.10


@dataclass
class OutputConfig:
    """Output configuration."""

    json_output_dir: Path = field(default_factory=lambda: Path("output"))
    pretty_json: bool = False


@dataclass
class CoverageConfig:
    """Main configuration for loan-coverage."""

    engine: EngineConfig = field(default_factory=EngineConfig)
    generator: GeneratorConfig = field(default_factory=GeneratorConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    seed: int | None = None
    log_level: str = "INFO"
    log_format: str = "standard"

    @classmethod
    def from_env(cls) -> "CoverageConfig":
        """Create config from environment variables."""
        import os

        try:
            engine = EngineConfig(
                money_quantum=Decimal(os.getenv("COVERAGE_MONEY_QUANTUM", "0.01")),
                overpaid_factor=Decimal(os.getenv("COVERAGE_OVERPAID_FACTOR", "1.5")),
                week_mode=WeekMode(os.getenv("COVERAGE_WEEK_MODE", "current").lower()),
                condense_threshold=int(os.getenv("COVERAGE_CONDENSE_THRESHOLD", "4")),
            )
            generator = GeneratorConfig(
                num_loans=int(os.getenv("COVERAGE_NUM_LOANS", "100")),
                locale=os.getenv("COVERAGE_LOCALE", "es_MX"),
                weeks_of_history=int(os.getenv("COVERAGE_WEEKS_OF_HISTORY", "20")),
            )
            seed = int(os.getenv("SEED")) if os.getenv("SEED") else None
        except (ValueError, InvalidOperation) as exc:
            raise ConfigurationError(f"Invalid loan-coverage environment: {exc}") from exc

        output = OutputConfig(
            json_output_dir=Path(os.getenv("OUTPUT_DIR", "output")),
            pretty_json=os.getenv("PRETTY_JSON", "false").lower() == "true",
        )

        return cls(
            engine=engine,
            generator=generator,
            output=output,
            seed=seed,
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_format=os.getenv("LOG_FORMAT", "standard"),
        )

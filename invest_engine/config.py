"""Configuration management for invest-engine."""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import TYPE_CHECKING, Any

from invest_engine.exceptions import ConfigurationError

if TYPE_CHECKING:
    from invest_engine.economics.roi import EconomicsAssumptions


@dataclass
class CurrencyConfig:
    """Currency used at the engine boundary."""

    code: str = "EGP"
    minor_unit_digits: int = 2

    @property
    def minor_units_per_major(self) -> int:
        """Number of minor units in one major unit (100 for cents)."""
        return 10**self.minor_unit_digits


@dataclass
class ProjectionConfig:
    """Assumptions applied to ROI projections."""

    cost_inflation_rate: Decimal = Decimal("0.03")
    assumptions_version: str = "2024.1"

    def to_assumptions(self) -> "EconomicsAssumptions":
        """Build the versioned assumption set used by ``ROICalculator``."""
        from invest_engine.economics.roi import EconomicsAssumptions

        return EconomicsAssumptions(
            version=self.assumptions_version,
            cost_inflation_rate=self.cost_inflation_rate,
        )


@dataclass
class ScenarioConfig:
    """Configuration for scenario execution."""

    name: str
    num_properties: int = 5
    investors_per_property: int = 20
    periods: int = 4
    start_date: date | None = None
    sold_ratio: float = 0.85
    labels: dict[str, Any] = field(default_factory=dict)


@dataclass
class EngineConfig:
    """Main configuration for invest-engine."""

    currency: CurrencyConfig = field(default_factory=CurrencyConfig)
    projection: ProjectionConfig = field(default_factory=ProjectionConfig)
    scenario: ScenarioConfig | None = None
    seed: int | None = None
    log_level: str = "INFO"
    log_format: str = "standard"

    @classmethod
    def from_env(cls) -> "EngineConfig":
        """Create config from environment variables."""
        import os

        currency = CurrencyConfig(
            code=os.getenv("CURRENCY_CODE", "EGP"),
            minor_unit_digits=_parse_int("CURRENCY_MINOR_DIGITS", os.getenv("CURRENCY_MINOR_DIGITS", "2")),
        )

        projection = ProjectionConfig(
            cost_inflation_rate=_parse_decimal(
                "COST_INFLATION_RATE", os.getenv("COST_INFLATION_RATE", "0.03")
            ),
            assumptions_version=os.getenv("ASSUMPTIONS_VERSION", "2024.1"),
        )

        if currency.minor_unit_digits < 0:
            raise ConfigurationError("CURRENCY_MINOR_DIGITS must be non-negative")
        if projection.cost_inflation_rate < 0:
            raise ConfigurationError("COST_INFLATION_RATE must be non-negative")

        seed = os.getenv("SEED")

        return cls(
            currency=currency,
            projection=projection,
            seed=_parse_int("SEED", seed) if seed else None,
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_format=os.getenv("LOG_FORMAT", "standard"),
        )


def _parse_int(name: str, raw: str) -> int:
    try:
        return int(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from exc


def _parse_decimal(name: str, raw: str) -> Decimal:
    try:
        value = Decimal(raw)
    except InvalidOperation as exc:
        raise ConfigurationError(f"{name} must be a decimal number, got {raw!r}") from exc
    if not value.is_finite():
        raise ConfigurationError(f"{name} must be finite, got {raw!r}")
    return value

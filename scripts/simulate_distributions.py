#!/usr/bin/env python3
"""Simulate quarterly income distributions over synthetic investors.

Seeds an in-memory ledger with properties and positions, runs the
distributions, and prints a conservation summary. With ``--output`` the
batches and records are written as JSON for inspection.
"""

import argparse
import json
import logging
import sys
from datetime import date
from pathlib import Path

from invest_engine.config import EngineConfig, ScenarioConfig
from invest_engine.economics.money import to_major
from invest_engine.logging import setup_logging
from invest_engine.scenarios import IncomeDistributionScenario
from invest_engine.serialization import to_dict

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--properties", type=int, default=5, help="Number of properties")
    parser.add_argument("--investors", type=int, default=20, help="Positions per property")
    parser.add_argument("--periods", type=int, default=4, help="Quarterly distributions to run")
    parser.add_argument("--sold-ratio", type=float, default=0.85, help="Share of each property sold")
    parser.add_argument("--start-date", type=date.fromisoformat, default=None, help="First distribution date")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--output", type=Path, default=None, help="Directory for JSON output")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    config = EngineConfig.from_env()
    setup_logging(config.log_level, config.log_format)

    scenario = IncomeDistributionScenario(
        seed=args.seed if args.seed is not None else config.seed,
        config=ScenarioConfig(
            name="income_distribution",
            num_properties=args.properties,
            investors_per_property=args.investors,
            periods=args.periods,
            start_date=args.start_date,
            sold_ratio=args.sold_ratio,
        ),
        assumptions=config.projection.to_assumptions(),
    )
    ledger = scenario.generate()
    summary = scenario.get_distribution_summary()

    currency = config.currency
    for key, value in summary.items():
        if key == "total_distributed":
            value = f"{to_major(value, currency.minor_unit_digits)} {currency.code}"
        print(f"  {key}: {value}")

    if args.output is not None:
        args.output.mkdir(parents=True, exist_ok=True)
        for name, rows in (
            ("batches", list(ledger.batches.values())),
            ("records", ledger.records),
            ("events", ledger.events),
        ):
            with open(args.output / f"{name}.json", "w", encoding="utf-8") as f:
                json.dump([to_dict(row) for row in rows], f, indent=2, ensure_ascii=False)
        logger.info("Wrote JSON output to %s", args.output)

    if not summary["all_batches_conserved"]:
        logger.error("Conservation check failed")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())

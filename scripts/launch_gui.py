#!/usr/bin/env python3
"""Launch the SmartBolt dashboard with mock telemetry."""

from __future__ import annotations

import argparse
import logging

from smartbolt.gui.main_window import run_gui
from smartbolt.io import load_app_settings, setup_logging
from smartbolt.telemetry import MockTelemetryGenerator

logger = logging.getLogger("smartbolt.launcher")


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--settings",
        default=None,
        help="Path to the YAML settings file (default: config/settings.yml).",
    )
    parser.add_argument(
        "--interval",
        type=int,
        default=None,
        help="Snapshot refresh interval in milliseconds (overrides settings).",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Seed for the mock generator, for a reproducible demo.",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Logging level (DEBUG, INFO, WARNING, ...).",
    )
    parser.add_argument(
        "--skip-splash",
        action="store_true",
        help="Go straight to the login screen.",
    )
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    settings = load_app_settings(args.settings)
    if args.interval is not None:
        settings.refresh_interval_ms = args.interval
    if args.seed is not None:
        settings.seed = args.seed
    setup_logging(args.log_level or settings.log_level)

    generator = MockTelemetryGenerator(seed=settings.seed)
    logger.info("Starting SmartBolt dashboard (seed=%s)", settings.seed)
    run_gui(
        generator,
        settings=settings,
        pipeline_factory=generator.new_pipeline,
        skip_splash=args.skip_splash,
    )


if __name__ == "__main__":
    main()

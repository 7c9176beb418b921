#!/usr/bin/env python3
"""
Command line entry point for release packaging and announcements.

Loads release.yml, creates every registered packager and announcer and
runs them through the dispatcher, printing one summary line per target.

Usage:
    release-packaging --config release.yml --output-dir out/packaging --dry-run
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from . import config
from .dispatcher import Dispatcher
from .errors import ConfigurationError
from .model_loader import load_model
from .targets import create_targets, filter_targets

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Package and announce a finished release"
    )
    parser.add_argument("--config", default=config.RELEASE_CONFIG_FILE,
                        help="Path to the release configuration file")
    parser.add_argument("--output-dir", default=config.DEFAULT_OUTPUT_DIR,
                        help="Root directory for generated package files")
    parser.add_argument("--template-dir", default=None,
                        help="Template root overriding the bundled templates")
    parser.add_argument("--dry-run", action="store_true",
                        help="Render everything but do not write files or send messages")
    parser.add_argument("--fail-fast", action="store_true",
                        help="Stop starting new targets after the first failure")
    parser.add_argument("--workers", type=int, default=1,
                        help="Number of targets processed concurrently")
    parser.add_argument("--only", action="append", default=[],
                        help="Only run the named target or tool (repeatable)")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        model = load_model(args.config)
    except ConfigurationError as e:
        logger.error(str(e))
        return 2

    if args.workers < 1:
        logger.error("--workers must be at least 1")
        return 2

    template_dir = Path(args.template_dir) if args.template_dir else None
    targets = filter_targets(
        create_targets(model, Path(args.output_dir), template_dir=template_dir),
        args.only,
    )
    logger.info(
        f"Releasing {model.project.name} {model.project.version} "
        f"to {len(targets)} target(s)"
    )

    dispatcher = Dispatcher(
        dry_run=args.dry_run,
        fail_fast=args.fail_fast,
        max_workers=args.workers,
    )
    summary = dispatcher.run(targets)

    for line in summary.lines():
        print(line)
    if dispatcher.cancelled:
        logger.error("Interrupted; remaining targets were not started")
        return 130
    return summary.exit_code(args.fail_fast)


if __name__ == "__main__":
    sys.exit(main())

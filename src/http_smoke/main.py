from __future__ import annotations

import argparse
import logging
from typing import List, Optional

from http_smoke.config_models import config_to_smoke_config, load_and_validate_config
from http_smoke.core.runner import SuiteRunner
from http_smoke.core.session import SmokeSession
from http_smoke.errors import SmokeError
from http_smoke.utils.logging import setup_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="http-smoke",
        description="Run an HTTP smoke-test suite defined in a YAML file.",
    )
    parser.add_argument("suite", help="Path to the suite YAML file")
    parser.add_argument("--debug", action="store_true", help="Echo requests and full responses to stderr")
    parser.add_argument("--log-config", default="configs/logging.yaml", help="Logging dictConfig YAML")
    return parser


def run_suite(suite_path: str, debug: bool = False) -> int:
    """
    Load a suite file and run it.

    Args:
        suite_path: Path to the YAML suite file.
        debug: Force debug output regardless of the suite setting.

    Returns:
        0 when every check passed, 1 otherwise.
    """
    suite = load_and_validate_config(suite_path)
    config = config_to_smoke_config(suite)
    if debug:
        config.set_debug(True)

    with SmokeSession(config=config) as session:
        return SuiteRunner(session, suite_path).run(suite)


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point for the smoke runner."""
    args = build_parser().parse_args(argv)
    setup_logging(args.log_config, level=logging.DEBUG if args.debug else None)

    try:
        code = run_suite(args.suite, debug=args.debug)
    except (FileNotFoundError, ValueError, SmokeError) as e:
        print(f"Error: {e}")
        raise SystemExit(2)

    raise SystemExit(code)


if __name__ == "__main__":
    main()

"""CLI entry point for giglio.

Usage:
  giglio SCRIPT [SCRIPT ...] [--reps N] [--warmup-reps N]
         [--frontend NAME] [--timer NAME] [--executor NAME]
         [--config PATH] [-v] [--log-file PATH]

Each script is executed with the registration API in its globals::

    module("lists", parameters={"size": [10, 1000]}, setup=make_list)
    time("sort", lambda ctx, reps: ...)
"""

import argparse
import asyncio
import dataclasses
import logging
import runpy
import sys
from pathlib import Path

from giglio.config import CONFIG_FILE, build_config, config_file, load_settings
from giglio.domain.models import Failure, GiglioError
from giglio.frontend import FRONTENDS, SummaryFrontend
from giglio.sequencing.executors import EXECUTORS
from giglio.suite import Suite
from giglio.timers import TIMERS

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURES = 1
EXIT_ERROR = 2


def _setup_logging(verbose: bool, log_file: Path | None) -> None:
    """Send giglio logs to stderr, and to *log_file* when given."""
    log = logging.getLogger("giglio")
    for handler in list(log.handlers):
        log.removeHandler(handler)
        handler.close()
    log.setLevel(logging.DEBUG)

    stream = logging.StreamHandler()
    stream.setLevel(logging.DEBUG if verbose else logging.INFO)
    stream.setFormatter(logging.Formatter("%(message)s"))
    log.addHandler(stream)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(log_file, encoding="utf-8")
        handler.setFormatter(
            logging.Formatter("%(asctime)s %(name)s %(levelname)s %(message)s")
        )
        log.addHandler(handler)


def _count(text: str) -> int:
    value = int(text)
    if value < 0:
        raise argparse.ArgumentTypeError(f"must be >= 0, got {value}")
    return value


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="giglio",
        description="Giglio -- micro-benchmark harness",
    )
    parser.add_argument("scripts", nargs="+", type=Path, help="Benchmark scripts to load")
    parser.add_argument("--reps", type=_count, default=None, help="Repetitions per timed call")
    parser.add_argument(
        "--warmup-reps",
        type=_count,
        default=None,
        help="Repetitions for the warm-up pass (0 disables it)",
    )
    parser.add_argument("--frontend", choices=FRONTENDS, default=None)
    parser.add_argument("--timer", choices=sorted([*TIMERS, "auto"]), default=None)
    parser.add_argument("--executor", choices=sorted(EXECUTORS), default=None)
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help=f"Settings file (default: ./{CONFIG_FILE})",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("--log-file", type=Path, default=None, help="Also write logs here")
    return parser


def _load_scripts(suite: Suite, scripts: list[Path]) -> None:
    for script in scripts:
        if not script.is_file():
            raise GiglioError(f"Benchmark script not found: {script}")
        logger.debug("Loading %s", script)
        runpy.run_path(str(script), init_globals=suite.script_namespace(), run_name="__giglio__")


def main(argv: list[str] | None = None) -> int:
    """Entry point for the `giglio` command. Returns the exit status."""
    args = _build_parser().parse_args(argv)
    _setup_logging(args.verbose, args.log_file)

    try:
        settings = load_settings(args.config or config_file(Path.cwd())).merged(
            frontend=args.frontend,
            timer=args.timer,
            executor=args.executor,
            reps=args.reps,
            warmup_reps=args.warmup_reps,
        )
        config = build_config(settings)
        summary = SummaryFrontend(config.frontend)
        suite = Suite(dataclasses.replace(config, frontend=summary))
        _load_scripts(suite, args.scripts)
        outcome = asyncio.run(suite.run(settings.reps))
    except GiglioError as exc:
        logger.error("giglio: %s", exc)
        return EXIT_ERROR
    except KeyboardInterrupt:
        logger.warning("Interrupted")
        return EXIT_FAILURES

    if isinstance(outcome, Failure):
        logger.error("Run did not complete: %s", outcome.error)
        return EXIT_FAILURES
    logger.debug(
        "%d modules, %d succeeded, %d failed, %d errors",
        summary.modules,
        summary.successes,
        summary.failures,
        summary.errors,
    )
    return EXIT_OK if summary.ok else EXIT_FAILURES


if __name__ == "__main__":
    sys.exit(main())

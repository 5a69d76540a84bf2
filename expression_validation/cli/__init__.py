"""
expr-validate command line interface.

A thin shell over the library: it parses arguments, loads data files and
prints results. No validation logic lives here.

Exit codes:
    0  expression holds (or command succeeded)
    1  validation failure
    2  evaluation or data file error
"""

from __future__ import annotations

from typing import Optional, Sequence

from ..config.config import get_config
from ..rules.errors import EvaluationError
from ..utils.logger import setup_logger
from .argparser import build_parser
from .subcommands import (
    DataFileError,
    handle_check,
    handle_normalize,
    handle_templates,
)
from .utils import console, print_error

EXIT_OK = 0
EXIT_INVALID = 1
EXIT_ERROR = 2

HANDLERS = {
    "normalize": handle_normalize,
    "check": handle_check,
    "templates": handle_templates,
}


def _log_level(args) -> str:
    if args.quiet:
        return "WARNING"
    if args.verbose:
        return "INFO"
    if args.debug:
        return "DEBUG"
    return get_config().log.level


def main(argv: Optional[Sequence[str]] = None) -> int:
    """
    Main entry point.

    Returns:
        Process exit code
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logger(get_config().log.log_dir or None, _log_level(args))

    handler = HANDLERS.get(args.command)
    if handler is None:
        parser.print_help()
        return EXIT_INVALID

    try:
        return handler(args)
    except DataFileError as e:
        print_error("DATA FILE ERROR", str(e))
        return EXIT_ERROR
    except EvaluationError as e:
        print_error(f"EVALUATION ERROR ({e.reason.name})", str(e))
        return EXIT_ERROR


__all__ = [
    "EXIT_OK",
    "EXIT_INVALID",
    "EXIT_ERROR",
    "DataFileError",
    "main",
]

"""
Argument parser setup for the expr-validate CLI.

Defines all subcommands and their arguments:
- normalize: Rewrite an expression into the canonical predicate grammar
- check: Validate a data file of member values against an expression
- templates: List the named expression templates
"""

import argparse


def build_parser() -> argparse.ArgumentParser:
    """
    Build the expr-validate argument parser.

    Supports:
      normalize EXPRESSION [--member NAME]
      check EXPRESSION --data FILE [--member NAME] [--message TEMPLATE] [--json]
      templates [--json]
    """
    parser = argparse.ArgumentParser(
        prog="expr-validate",
        description="Expression validation - check member values against boolean expressions",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  expr-validate normalize "PropertyA != null && !(PropertyB == 0)"
  expr-validate normalize "({0} % 2) != 0" --member Age

  # Data file is a YAML or JSON mapping of member values
  expr-validate check "PropertyA > PropertyB" --data person.yaml
  expr-validate check "{0} != null" --member Name --data person.yaml --json

  expr-validate templates
        """
    )

    # Verbosity: mutually exclusive group (-q / -v / --debug)
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument(
        "-q", "--quiet",
        action="store_true",
        default=False,
        help="Quiet mode: WARNING only"
    )
    verbosity.add_argument(
        "-v", "--verbose",
        action="store_true",
        default=False,
        help="Verbose mode: INFO, including validation failures"
    )
    verbosity.add_argument(
        "--debug",
        action="store_true",
        default=False,
        help="Debug mode: full DEBUG, including evaluation traces"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    _setup_normalize_subcommand(subparsers)
    _setup_check_subcommand(subparsers)
    _setup_templates_subcommand(subparsers)

    return parser


def _setup_normalize_subcommand(subparsers) -> None:
    """Set up the normalize subcommand."""
    normalize_parser = subparsers.add_parser("normalize", help="Print the normalized form of an expression")
    normalize_parser.add_argument("expression", help="Expression to normalize")
    normalize_parser.add_argument("--member", help="Member name substituted for {0}")


def _setup_check_subcommand(subparsers) -> None:
    """Set up the check subcommand."""
    check_parser = subparsers.add_parser("check", help="Validate member values against an expression")
    check_parser.add_argument("expression", help="Expression to evaluate")
    check_parser.add_argument("--data", required=True, help="YAML or JSON file holding a mapping of member values")
    check_parser.add_argument("--member", help="Member under validation (substituted for {0})")
    check_parser.add_argument("--message", help="Failure message template ({0} is the member or type name)")
    check_parser.add_argument("--json", action="store_true", dest="json_output", help="Output results as JSON")


def _setup_templates_subcommand(subparsers) -> None:
    """Set up the templates subcommand."""
    templates_parser = subparsers.add_parser("templates", help="List the named expression templates")
    templates_parser.add_argument("--json", action="store_true", dest="json_output", help="Output results as JSON")


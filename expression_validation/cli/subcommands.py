"""Subcommand handlers for the expr-validate CLI."""

from __future__ import annotations

import json
from pathlib import Path

import yaml
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from ..rules.constants import Templates
from ..rules.normalizer import normalize
from ..validator import validate
from .utils import console


class DataFileError(Exception):
    """A data file is missing, unreadable or not a mapping of member values."""

    def __init__(self, path: str, message: str):
        self.path = path
        super().__init__(f"Invalid data file '{path}': {message}")


class Record(dict):
    """Member values loaded from a data file."""


def load_data_file(path: str) -> Record:
    """
    Load a YAML or JSON mapping of member values.

    Raises:
        DataFileError: File missing, unreadable, not parseable, or not a mapping
    """
    data_path = Path(path)
    if not data_path.is_file():
        raise DataFileError(path, "file not found")

    try:
        with open(data_path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise DataFileError(path, f"cannot parse ({e})") from e
    except (OSError, UnicodeDecodeError) as e:
        raise DataFileError(path, f"cannot read ({e})") from e

    if not isinstance(raw, dict):
        raise DataFileError(path, f"expected a mapping of member values, got {type(raw).__name__}")

    return Record(raw)


def handle_normalize(args) -> int:
    """Handle `normalize` subcommand."""
    print(normalize(args.expression, args.member))
    return 0


def handle_check(args) -> int:
    """Handle `check` subcommand."""
    record = load_data_file(args.data)
    outcome = validate(
        args.expression,
        record,
        member_name=args.member,
        error_message=args.message,
    )

    if args.json_output:
        output = outcome.to_dict()
        output["expression"] = args.expression
        output["data"] = args.data
        print(json.dumps(output, indent=2, default=str))
        return 0 if outcome.success else 1

    if outcome.success:
        console.print(Panel(
            Text(args.expression),
            title="[bold green]VALID[/]",
            border_style="green",
        ))
        return 0

    body = Text(args.expression + "\n")
    body.append(outcome.message or "", style="red")
    console.print(Panel(body, title="[bold red]INVALID[/]", border_style="red"))
    return 1


def handle_templates(args) -> int:
    """Handle `templates` subcommand."""
    templates = Templates.all()

    if args.json_output:
        print(json.dumps(templates, indent=2))
        return 0

    table = Table(title="Expression Templates")
    table.add_column("Name", style="cyan")
    table.add_column("Expression")
    for name, expression in templates.items():
        table.add_row(name, Text(expression))
    console.print(table)
    return 0

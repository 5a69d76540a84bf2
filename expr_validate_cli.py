#!/usr/bin/env python3
"""
expr-validate - Expression Validation CLI

Usage:
  python expr_validate_cli.py normalize "PropertyA != null"
  python expr_validate_cli.py check "PropertyA > PropertyB" --data person.yaml
  python expr_validate_cli.py templates
"""

import sys

from expression_validation.cli import main


if __name__ == "__main__":
    sys.exit(main())

"""
Pytest configuration for expression validation tests.
"""

import pytest

from expression_validation.config.config import reset_config
from expression_validation.utils.logger import setup_logger

CONFIG_ENV_VARS = ("LOG_LEVEL", "LOG_DIR", "EVAL_CASE_SENSITIVE", "EVAL_DEFAULT_MESSAGE")


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Fresh config and a quiet logger for every test."""
    for name in CONFIG_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    reset_config()
    setup_logger(log_level="WARNING")
    yield
    reset_config()

"""
Configuration management for expression validation.
Loads settings from environment variables with sensible defaults.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Default failure message template; {0} is the member or type name
DEFAULT_ERROR_MESSAGE = "The field {0} is invalid."


def _env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


@dataclass
class LogConfig:
    """Logging configuration."""
    level: str = "INFO"
    log_dir: str = ""  # Empty: console only

    def __post_init__(self):
        if self.level.upper() not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Invalid LOG_LEVEL '{self.level}'")
        self.level = self.level.upper()


@dataclass
class EvaluationConfig:
    """
    Expression evaluation settings.

    case_sensitive:
        String comparisons ignore case unless this is set. Identifier
        lookup is unaffected: exact matches win, then a unique
        case-insensitive match.
    default_message:
        Failure message template; {0} is replaced with the member name or,
        for whole-object rules, the candidate's type name.
    """
    case_sensitive: bool = False
    default_message: str = DEFAULT_ERROR_MESSAGE


class Config:
    """
    Central configuration manager.

    Loads configuration from environment variables and provides
    typed access to all settings.
    """

    _instance: Optional['Config'] = None

    def __new__(cls, *args, **kwargs):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self, env_file: str = ".env"):
        if self._initialized:
            return

        # Existing environment variables win over the .env file
        env_path = Path(env_file)
        if env_path.exists():
            load_dotenv(env_path, override=False)

        self.log = self._load_log_config()
        self.evaluation = self._load_evaluation_config()

        self._initialized = True

    def _load_log_config(self) -> LogConfig:
        """Load logging configuration from environment."""
        return LogConfig(
            level=os.getenv("LOG_LEVEL", "INFO"),
            log_dir=os.getenv("LOG_DIR", ""),
        )

    def _load_evaluation_config(self) -> EvaluationConfig:
        """Load evaluation configuration from environment."""
        return EvaluationConfig(
            case_sensitive=_env_bool("EVAL_CASE_SENSITIVE"),
            default_message=os.getenv("EVAL_DEFAULT_MESSAGE", DEFAULT_ERROR_MESSAGE),
        )


def get_config(env_file: str = ".env") -> Config:
    """Get or create the global config instance."""
    return Config(env_file)


def reset_config() -> None:
    """Drop the global config instance so the next get_config() reloads it."""
    Config._instance = None

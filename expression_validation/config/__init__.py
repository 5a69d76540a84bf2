from .config import Config, EvaluationConfig, LogConfig, get_config, reset_config

__all__ = ["Config", "EvaluationConfig", "LogConfig", "get_config", "reset_config"]

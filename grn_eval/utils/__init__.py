"""
Utility functions for the evaluation engine.
"""

from .config import load_config, get_config, validate_config, EvaluationSettings
from .io import read_prediction_file, read_gold_standard_table, write_table, write_text
from .logging import setup_logger, get_logger, log_duration, ProgressLogger

__all__ = [
    "load_config",
    "get_config",
    "validate_config",
    "EvaluationSettings",
    "read_prediction_file",
    "read_gold_standard_table",
    "write_table",
    "write_text",
    "setup_logger",
    "get_logger",
    "log_duration",
    "ProgressLogger",
]

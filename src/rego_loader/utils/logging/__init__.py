"""Logging utilities (JSON lines formatting, logger setup)."""

from rego_loader.utils.logging.logger_setup import JsonLinesFormatter, get_logger, setup_logger

__all__ = [
    "JsonLinesFormatter",
    "get_logger",
    "setup_logger",
]

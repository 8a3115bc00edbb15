"""Utility functions for pages-cleanup."""

from pages_cleanup.utils.logging import configure_logging, get_logger
from pages_cleanup.utils.parsing import (
    days_ago_utc,
    error_message,
    parse_bool,
    parse_int_strict,
    utc_now,
)

__all__ = [
    "configure_logging",
    "get_logger",
    "days_ago_utc",
    "error_message",
    "parse_bool",
    "parse_int_strict",
    "utc_now",
]

"""Utility modules for the estimator."""

from utils.logging_config import configure_logging
from utils.numbers import (
    ZERO,
    clamp,
    format_money,
    format_rate,
    parse_cost_string,
    parse_number,
    quantize,
    round_units,
    to_decimal,
)

__all__ = [
    "configure_logging",
    "ZERO",
    "clamp",
    "format_money",
    "format_rate",
    "parse_cost_string",
    "parse_number",
    "quantize",
    "round_units",
    "to_decimal",
]

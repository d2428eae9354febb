"""Estimator configuration.

This package contains:
- settings: Environment variables and configuration
- limits: Precision and calculation limits
- errors: Custom exceptions and error codes
"""

from config.settings import settings
from config.errors import ErrorCode, EstimatorError
from config.limits import DEFAULT_LIMITS, PRECISION, CalculationLimits

__all__ = [
    "settings",
    "ErrorCode",
    "EstimatorError",
    "DEFAULT_LIMITS",
    "PRECISION",
    "CalculationLimits",
]

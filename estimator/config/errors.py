"""Estimator error handling.

Error codes and exception types for the calculation engine. Engine
operations never let these escape: they are raised by internal helpers and
converted into diagnostics at the nearest component boundary.
"""

from typing import Optional, Dict, Any


# Error Codes
class ErrorCode:
    """Error code constants."""

    # Validation Errors
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_CATEGORIES = "INVALID_CATEGORIES"
    INVALID_CATEGORY = "INVALID_CATEGORY"
    INVALID_ITEM = "INVALID_ITEM"
    INVALID_MEASUREMENT_TYPE = "INVALID_MEASUREMENT_TYPE"
    INVALID_SETTINGS = "INVALID_SETTINGS"
    INVALID_SETTING_VALUE = "INVALID_SETTING_VALUE"
    SETTING_CLAMPED = "SETTING_CLAMPED"

    # Geometry Errors
    INVALID_SURFACE = "INVALID_SURFACE"
    INVALID_SURFACE_QUANTITY = "INVALID_SURFACE_QUANTITY"
    UNKNOWN_MEASUREMENT_TYPE = "UNKNOWN_MEASUREMENT_TYPE"
    NO_VALID_SURFACES = "NO_VALID_SURFACES"
    NEGATIVE_UNITS = "NEGATIVE_UNITS"
    UNITS_EXCEED_LIMIT = "UNITS_EXCEED_LIMIT"
    SURFACE_CALCULATION_ERROR = "SURFACE_CALCULATION_ERROR"
    DIRECT_CALCULATION_ERROR = "DIRECT_CALCULATION_ERROR"

    # Cost Errors
    INVALID_COST_TYPE = "INVALID_COST_TYPE"
    INVALID_COST = "INVALID_COST"
    NEGATIVE_COST = "NEGATIVE_COST"
    COST_EXCEEDS_LIMIT = "COST_EXCEEDS_LIMIT"
    COST_CALCULATION_ERROR = "COST_CALCULATION_ERROR"

    # Aggregation Errors
    ITEM_CALCULATION_ERROR = "ITEM_CALCULATION_ERROR"
    ITEM_CALCULATION_FAILED = "ITEM_CALCULATION_FAILED"
    ITEM_PROCESSING_ERROR = "ITEM_PROCESSING_ERROR"
    CALCULATION_TIMEOUT = "CALCULATION_TIMEOUT"
    TOTALS_CALCULATION_ERROR = "TOTALS_CALCULATION_ERROR"
    BREAKDOWN_CALCULATION_ERROR = "BREAKDOWN_CALCULATION_ERROR"

    # Payment Errors
    INVALID_PAYMENT = "INVALID_PAYMENT"
    INVALID_PAYMENT_AMOUNT = "INVALID_PAYMENT_AMOUNT"
    PAYMENT_PROCESSING_ERROR = "PAYMENT_PROCESSING_ERROR"
    PAYMENT_CALCULATION_ERROR = "PAYMENT_CALCULATION_ERROR"
    TOTALS_HAVE_ERRORS = "TOTALS_HAVE_ERRORS"

    # Generic
    CALCULATION_ERROR = "CALCULATION_ERROR"
    CALCULATION_WARNING = "CALCULATION_WARNING"


class EstimatorError(Exception):
    """Base exception for estimator errors.

    Provides structured error information that maps one-to-one onto a
    diagnostic entry.

    Attributes:
        code: Error code from ErrorCode constants
        message: Human-readable error message
        details: Additional error context
    """

    def __init__(
        self,
        code: str,
        message: str,
        details: Optional[Dict[str, Any]] = None
    ):
        """Initialize EstimatorError.

        Args:
            code: Error code from ErrorCode constants
            message: Human-readable error message
            details: Additional error context
        """
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary.

        Returns:
            Dictionary with code, message, and details.
        """
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details
        }

    def __repr__(self) -> str:
        return f"EstimatorError(code={self.code!r}, message={self.message!r})"


class ValidationError(EstimatorError):
    """Validation-specific error."""

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        details: Optional[Dict] = None,
        code: str = ErrorCode.VALIDATION_ERROR,
    ):
        super().__init__(
            code=code,
            message=message,
            details={**(details or {}), "field": field} if field else details
        )
        self.field = field


class CalculationError(EstimatorError):
    """Arithmetic or aggregation failure inside the engine."""

    def __init__(self, code: str, message: str, details: Optional[Dict] = None):
        super().__init__(code=code, message=message, details=details)

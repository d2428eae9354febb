"""Diagnostics accumulator for the estimator engine.

A Diagnostics instance is owned by whoever starts a logical operation and is
passed explicitly into every component that may report a problem. Components
never clear a collector they did not create, so per-item pricing inside a
rollup cannot wipe what the rollup has already recorded.
"""

from typing import Any, Dict, List

import structlog
from pydantic import BaseModel, Field

from config.errors import ErrorCode, EstimatorError

logger = structlog.get_logger(__name__)


class Diagnostic(BaseModel):
    """A single non-fatal error or warning."""

    message: str = Field(..., description="Human-readable description")
    code: str = Field(..., description="Machine-readable code from ErrorCode")
    context: Dict[str, Any] = Field(
        default_factory=dict,
        description="Structured payload describing where the problem occurred"
    )

    class Config:
        frozen = True

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {"message": self.message, "code": self.code, "context": self.context}


class Diagnostics:
    """Ordered, queryable collector of errors and warnings."""

    def __init__(self) -> None:
        self._errors: List[Diagnostic] = []
        self._warnings: List[Diagnostic] = []

    @classmethod
    def from_entries(cls, errors: List[Diagnostic], warnings: List[Diagnostic]) -> "Diagnostics":
        """Rebuild a collector from the lists carried on a result."""
        diagnostics = cls()
        diagnostics._errors.extend(errors)
        diagnostics._warnings.extend(warnings)
        return diagnostics

    def add_error(
        self,
        message: str,
        code: str = ErrorCode.CALCULATION_ERROR,
        **context: Any
    ) -> Diagnostic:
        """Record an error and return it."""
        entry = Diagnostic(message=message, code=code, context=context)
        self._errors.append(entry)
        logger.debug("diagnostic_error", code=code, message=message)
        return entry

    def add_warning(
        self,
        message: str,
        code: str = ErrorCode.CALCULATION_WARNING,
        **context: Any
    ) -> Diagnostic:
        """Record a warning and return it."""
        entry = Diagnostic(message=message, code=code, context=context)
        self._warnings.append(entry)
        logger.debug("diagnostic_warning", code=code, message=message)
        return entry

    def add_exception(self, error: EstimatorError, as_warning: bool = False) -> Diagnostic:
        """Record an EstimatorError as an error (or warning)."""
        if as_warning:
            return self.add_warning(error.message, error.code, **error.details)
        return self.add_error(error.message, error.code, **error.details)

    @property
    def errors(self) -> List[Diagnostic]:
        return list(self._errors)

    @property
    def warnings(self) -> List[Diagnostic]:
        return list(self._warnings)

    @property
    def has_errors(self) -> bool:
        return bool(self._errors)

    def codes(self) -> List[str]:
        """Codes of all recorded errors, in order."""
        return [entry.code for entry in self._errors]

    def warning_codes(self) -> List[str]:
        """Codes of all recorded warnings, in order."""
        return [entry.code for entry in self._warnings]

    def extend(self, other: "Diagnostics") -> None:
        """Append everything recorded by another collector."""
        self._errors.extend(other._errors)
        self._warnings.extend(other._warnings)

    def clear(self) -> None:
        self._errors.clear()
        self._warnings.clear()

    def to_lists(self) -> Dict[str, List[Dict[str, Any]]]:
        """Errors and warnings as plain dictionaries."""
        return {
            "errors": [entry.to_dict() for entry in self._errors],
            "warnings": [entry.to_dict() for entry in self._warnings],
        }

    def __len__(self) -> int:
        return len(self._errors) + len(self._warnings)

    def __repr__(self) -> str:
        return f"Diagnostics(errors={len(self._errors)}, warnings={len(self._warnings)})"

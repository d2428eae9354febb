"""Work item Pydantic models for the estimator.

This module defines the category tree that the engine prices: categories
hold work items, and a work item is measured either directly or through a
list of surfaces.
"""

from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from utils.numbers import parse_number


# =============================================================================
# ENUMS
# =============================================================================


class MeasurementType(str, Enum):
    """Unit basis for pricing a work item."""

    SQUARE_FOOT = "square-foot"
    SINGLE_SURFACE = "single-surface"
    LINEAR_FOOT = "linear-foot"
    BY_UNIT = "by-unit"


AREA_TYPES = {MeasurementType.SQUARE_FOOT.value, MeasurementType.SINGLE_SURFACE.value}

_MEASUREMENT_ALIASES: Dict[str, str] = {
    "square-foot": MeasurementType.SQUARE_FOOT.value,
    "sqft": MeasurementType.SQUARE_FOOT.value,
    "sq ft": MeasurementType.SQUARE_FOOT.value,
    "square foot": MeasurementType.SQUARE_FOOT.value,
    "square foot (sqft)": MeasurementType.SQUARE_FOOT.value,
    "single-surface": MeasurementType.SINGLE_SURFACE.value,
    "linear-foot": MeasurementType.LINEAR_FOOT.value,
    "linear ft": MeasurementType.LINEAR_FOOT.value,
    "linearft": MeasurementType.LINEAR_FOOT.value,
    "linear foot": MeasurementType.LINEAR_FOOT.value,
    "by-unit": MeasurementType.BY_UNIT.value,
    "by unit": MeasurementType.BY_UNIT.value,
    "unit": MeasurementType.BY_UNIT.value,
    "units": MeasurementType.BY_UNIT.value,
}

UNIT_LABELS: Dict[str, str] = {
    MeasurementType.SQUARE_FOOT.value: "sqft",
    MeasurementType.SINGLE_SURFACE.value: "sqft",
    MeasurementType.LINEAR_FOOT.value: "linear ft",
    MeasurementType.BY_UNIT.value: "units",
}


def normalize_measurement_type(value: Any) -> Optional[str]:
    """Map legacy spellings onto the canonical measurement type values.

    Returns None for an absent type. Unrecognised strings are returned
    lower-cased so the resolver can report them as unknown.
    """
    if value is None:
        return None
    if isinstance(value, MeasurementType):
        return value.value
    text = str(value).strip().lower()
    if not text:
        return None
    return _MEASUREMENT_ALIASES.get(text, text)


def is_known_measurement_type(value: Optional[str]) -> bool:
    return value in UNIT_LABELS


def unit_label(measurement_type: Optional[str]) -> str:
    """Display label for a measurement type ("units" when unknown)."""
    return UNIT_LABELS.get(measurement_type or "", "units")


def _lenient_number(value: Any) -> Optional[Decimal]:
    return parse_number(value)


# =============================================================================
# SURFACE MODEL
# =============================================================================


class Surface(BaseModel):
    """One measurable sub-area, sub-run or sub-count of a work item."""

    name: Optional[str] = Field(default=None, description="Optional surface label")
    sqft: Optional[Decimal] = Field(default=None, description="Area in square feet")
    width: Optional[Decimal] = Field(default=None, description="Width in feet")
    height: Optional[Decimal] = Field(default=None, description="Height in feet")
    linear_ft: Optional[Decimal] = Field(
        default=None,
        alias="linearFt",
        description="Run length in linear feet"
    )
    units: Optional[Decimal] = Field(default=None, description="Discrete unit count")

    class Config:
        populate_by_name = True
        frozen = True

    @field_validator("name", mode="before")
    @classmethod
    def coerce_name(cls, v: Any) -> Any:
        # Scalar labels become text; nested values fail validation
        if isinstance(v, (int, float, Decimal)):
            return str(v)
        return v

    @field_validator("sqft", "width", "height", "linear_ft", "units", mode="before")
    @classmethod
    def coerce_number(cls, v: Any) -> Optional[Decimal]:
        """Read geometry leniently; unparseable input becomes None."""
        return _lenient_number(v)


def _surface_or_none(value: Any) -> Optional[Surface]:
    if isinstance(value, Surface):
        return value
    if not isinstance(value, dict):
        return None
    try:
        return Surface.model_validate(value)
    except ValidationError:
        return None


# =============================================================================
# WORK ITEM MODEL
# =============================================================================


class WorkItem(BaseModel):
    """A billable work item.

    Rates are kept as supplied (number or numeric string) and parsed by the
    cost evaluator, which owns the rate validation diagnostics.
    """

    name: Optional[str] = Field(default=None, description="Display name")
    category: Optional[str] = Field(default=None, description="Work category label")
    type: Optional[str] = Field(default=None, description="Work type label")
    subtype: Optional[str] = Field(default=None, description="Work subtype label")
    description: Optional[str] = Field(default=None, description="Free-form description")

    measurement_type: Optional[str] = Field(
        default=None,
        alias="measurementType",
        description="Canonical measurement type, None when absent"
    )
    surfaces: List[Optional[Surface]] = Field(
        default_factory=list,
        description="Surfaces; None marks an entry that was not a mapping"
    )

    material_cost: Any = Field(
        default=None,
        alias="materialCost",
        description="Material cost per unit (number or numeric string)"
    )
    labor_cost: Any = Field(
        default=None,
        alias="laborCost",
        description="Labor cost per unit (number or numeric string)"
    )

    # Direct-unit geometry, used when no surfaces are given
    sqft: Optional[Decimal] = Field(default=None)
    width: Optional[Decimal] = Field(default=None)
    height: Optional[Decimal] = Field(default=None)
    linear_ft: Optional[Decimal] = Field(default=None, alias="linearFt")
    units: Optional[Decimal] = Field(default=None)

    class Config:
        populate_by_name = True
        frozen = True

    @field_validator("name", "category", "type", "subtype", "description", mode="before")
    @classmethod
    def coerce_label(cls, v: Any) -> Optional[str]:
        if v is None:
            return None
        return str(v)

    @field_validator("measurement_type", mode="before")
    @classmethod
    def normalize_type(cls, v: Any) -> Optional[str]:
        return normalize_measurement_type(v)

    @field_validator("surfaces", mode="before")
    @classmethod
    def keep_surface_positions(cls, v: Any) -> List[Any]:
        """Non-list surfaces become empty; unreadable entries become None."""
        if not isinstance(v, (list, tuple)):
            return []
        return [_surface_or_none(s) for s in v]

    @field_validator("sqft", "width", "height", "linear_ft", "units", mode="before")
    @classmethod
    def coerce_number(cls, v: Any) -> Optional[Decimal]:
        return _lenient_number(v)

    @property
    def display_name(self) -> str:
        return self.name or "Unnamed Item"


# =============================================================================
# CATEGORY MODEL
# =============================================================================


class Category(BaseModel):
    """A named group of work items."""

    name: str = Field(..., min_length=1, description="Category name")
    key: Optional[str] = Field(default=None, description="Stable category key")
    work_items: List[Optional[WorkItem]] = Field(
        default_factory=list,
        alias="workItems",
        description="Work items; None marks an entry that failed validation"
    )

    class Config:
        populate_by_name = True
        frozen = True

    @field_validator("name", "key", mode="before")
    @classmethod
    def coerce_text(cls, v: Any) -> Optional[str]:
        if v is None:
            return None
        return str(v)

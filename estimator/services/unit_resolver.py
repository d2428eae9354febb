"""Unit resolution for work items.

Derives the canonical quantity (square feet, linear feet or a unit count) of
a work item, either by summing its surfaces or from the item's own geometry
fields when it has no surfaces.
"""

from decimal import Decimal
from typing import Optional, Tuple, Union

import structlog

from config.errors import ErrorCode
from config.limits import DEFAULT_LIMITS, PRECISION, CalculationLimits
from models.diagnostics import Diagnostics
from models.results import UnitResult
from models.work_item import (
    AREA_TYPES,
    MeasurementType,
    Surface,
    WorkItem,
    is_known_measurement_type,
    unit_label,
)
from utils.numbers import ZERO, quantize

logger = structlog.get_logger(__name__)

Measurable = Union[WorkItem, Surface]


def infer_measurement_type(source: Measurable) -> Optional[str]:
    """Guess a measurement type from whichever geometry field is positive.

    Priority: area (sqft or width x height), then linear feet, then units.
    """
    if _positive(source.sqft) or (_positive(source.width) and _positive(source.height)):
        return MeasurementType.SQUARE_FOOT.value
    if _positive(source.linear_ft):
        return MeasurementType.LINEAR_FOOT.value
    if _positive(source.units):
        return MeasurementType.BY_UNIT.value
    return None


def _positive(value: Optional[Decimal]) -> bool:
    return value is not None and value > 0


def measure(measurement_type: str, source: Measurable) -> Decimal:
    """Quantity of one surface (or item) for a known measurement type."""
    if measurement_type in AREA_TYPES:
        if _positive(source.sqft):
            return source.sqft
        if _positive(source.width) and _positive(source.height):
            return source.width * source.height
        return ZERO
    if measurement_type == MeasurementType.LINEAR_FOOT.value:
        return source.linear_ft if source.linear_ft is not None else ZERO
    if measurement_type == MeasurementType.BY_UNIT.value:
        # Unit counts are whole; fractional input is truncated.
        return Decimal(int(source.units)) if source.units is not None else ZERO
    raise ValueError(f"Unsupported measurement type: {measurement_type}")


class UnitResolver:
    """Resolves the quantity of a work item."""

    def __init__(self, limits: CalculationLimits = DEFAULT_LIMITS):
        """Initialize UnitResolver.

        Args:
            limits: Calculation limits (max_units is enforced here).
        """
        self.limits = limits

    def resolve(self, item: Optional[WorkItem], diagnostics: Diagnostics) -> UnitResult:
        """Resolve the units of one work item.

        Args:
            item: A validated WorkItem (None for an item that failed validation).
            diagnostics: Caller's collector; everything recorded here is appended.

        Returns:
            UnitResult carrying the diagnostics produced for this item.
        """
        scope = Diagnostics()
        units, label = self._resolve(item, scope)
        diagnostics.extend(scope)
        return UnitResult(
            units=float(units),
            label=label,
            errors=scope.errors,
            warnings=scope.warnings,
        )

    def resolve_quantity(self, item: Optional[WorkItem], scope: Diagnostics) -> Tuple[Decimal, str]:
        """Resolve units as a Decimal for callers that keep computing with it."""
        return self._resolve(item, scope)

    def _resolve(self, item: Optional[WorkItem], scope: Diagnostics) -> Tuple[Decimal, str]:
        if not isinstance(item, WorkItem):
            scope.add_error("Invalid work item", ErrorCode.INVALID_ITEM)
            return ZERO, "units"

        if item.surfaces:
            total, label = self._from_surfaces(item, scope)
        else:
            total, label = self._from_item_fields(item, scope)

        if total < 0:
            scope.add_error(
                "Units cannot be negative",
                ErrorCode.NEGATIVE_UNITS,
                item=item.display_name,
                total_units=str(total)
            )
            total = ZERO

        if total > self.limits.max_units:
            scope.add_error(
                f"Units exceed maximum limit: {total}",
                ErrorCode.UNITS_EXCEED_LIMIT,
                item=item.display_name,
                total_units=str(total),
                max_units=str(self.limits.max_units)
            )
            total = self.limits.max_units

        return quantize(total, PRECISION.area), label

    def _from_surfaces(self, item: WorkItem, scope: Diagnostics) -> Tuple[Decimal, str]:
        label = unit_label(item.measurement_type)
        total = ZERO
        has_valid_surfaces = False

        try:
            for index, surface in enumerate(item.surfaces):
                if surface is None:
                    scope.add_warning(
                        f"Surface {index + 1} is invalid",
                        ErrorCode.INVALID_SURFACE,
                        surface_index=index
                    )
                    continue

                # Surfaces take the item's type; a missing type is not inferred here
                measurement_type = item.measurement_type
                if not is_known_measurement_type(measurement_type):
                    scope.add_warning(
                        f"Unknown measurement type: {measurement_type}",
                        ErrorCode.UNKNOWN_MEASUREMENT_TYPE,
                        measurement_type=measurement_type,
                        surface_index=index
                    )
                    continue

                quantity = measure(measurement_type, surface)
                if quantity <= 0:
                    scope.add_warning(
                        f"Surface {index + 1} has no positive quantity",
                        ErrorCode.INVALID_SURFACE_QUANTITY,
                        surface_index=index
                    )
                    continue

                has_valid_surfaces = True
                total += quantity

            if not has_valid_surfaces:
                scope.add_error(
                    "No valid surfaces found for calculation",
                    ErrorCode.NO_VALID_SURFACES,
                    item=item.display_name,
                    surface_count=len(item.surfaces)
                )
        except Exception as e:
            logger.warning("surface_units_failed", item=item.display_name, error=str(e))
            scope.add_error(
                f"Error calculating surface units: {e}",
                ErrorCode.SURFACE_CALCULATION_ERROR,
                item=item.display_name,
                error=str(e)
            )
            total = ZERO

        return total, label

    def _from_item_fields(self, item: WorkItem, scope: Diagnostics) -> Tuple[Decimal, str]:
        measurement_type = item.measurement_type

        try:
            if measurement_type is None:
                measurement_type = infer_measurement_type(item)
                if measurement_type is None:
                    return ZERO, "units"
            elif not is_known_measurement_type(measurement_type):
                scope.add_warning(
                    f"Unknown measurement type: {measurement_type}",
                    ErrorCode.UNKNOWN_MEASUREMENT_TYPE,
                    measurement_type=measurement_type,
                    item=item.display_name
                )
                return ZERO, "units"

            return measure(measurement_type, item), unit_label(measurement_type)
        except Exception as e:
            logger.warning("direct_units_failed", item=item.display_name, error=str(e))
            scope.add_error(
                f"Error calculating direct units: {e}",
                ErrorCode.DIRECT_CALCULATION_ERROR,
                item=item.display_name,
                error=str(e)
            )
            return ZERO, unit_label(measurement_type)

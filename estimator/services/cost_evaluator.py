"""Cost evaluation for a single work item.

Multiplies resolved units by the item's per-unit material and labor rates.
Full Decimal precision is kept for the multiplication; rounding to currency
precision happens only when the result is formatted.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Optional

import structlog

from config.errors import ErrorCode, ValidationError
from config.limits import DEFAULT_LIMITS, CalculationLimits
from models.diagnostics import Diagnostics
from models.results import CostMetadata, CostResult
from models.work_item import WorkItem
from services.unit_resolver import UnitResolver
from utils.numbers import ZERO, format_money, format_rate, parse_cost_string, parse_number

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class _PricedQuantity:
    units: Decimal
    label: str
    material_rate: Decimal
    labor_rate: Decimal
    measurement_type: Optional[str]


class CostEvaluator:
    """Prices work items. Never raises."""

    def __init__(
        self,
        resolver: Optional[UnitResolver] = None,
        limits: CalculationLimits = DEFAULT_LIMITS
    ):
        """Initialize CostEvaluator.

        Args:
            resolver: UnitResolver to use (built from limits when omitted).
            limits: Calculation limits (max_cost is enforced here).
        """
        self.limits = limits
        self.resolver = resolver or UnitResolver(limits)

    def parse_rate(self, value: Any, field_name: str) -> Decimal:
        """Parse a per-unit rate.

        None and empty strings are 0. Strings are stripped of everything but
        digits, '.' and '-' before parsing.

        Raises:
            ValidationError: If the rate has an unsupported type, is not
                numeric, is negative or exceeds the cost limit.
        """
        if value is None or (isinstance(value, str) and not value.strip()):
            return ZERO

        if isinstance(value, str):
            parsed = parse_cost_string(value)
        elif isinstance(value, (int, float, Decimal)) and not isinstance(value, bool):
            parsed = parse_number(value)
        else:
            raise ValidationError(
                f"Invalid {field_name}: must be a number or string",
                field=field_name,
                code=ErrorCode.INVALID_COST_TYPE,
                details={"value_type": type(value).__name__}
            )

        if parsed is None:
            raise ValidationError(
                f"Invalid {field_name}: must be a valid number",
                field=field_name,
                code=ErrorCode.INVALID_COST,
                details={"value": repr(value)}
            )
        if parsed < 0:
            raise ValidationError(
                f"Invalid {field_name}: cannot be negative",
                field=field_name,
                code=ErrorCode.NEGATIVE_COST,
                details={"value": str(parsed)}
            )
        if parsed > self.limits.max_cost:
            raise ValidationError(
                f"{field_name} exceeds maximum limit",
                field=field_name,
                code=ErrorCode.COST_EXCEEDS_LIMIT,
                details={"value": str(parsed), "max_cost": str(self.limits.max_cost)}
            )
        return parsed

    def price(self, item: Optional[WorkItem], diagnostics: Diagnostics) -> CostResult:
        """Price one work item.

        Args:
            item: A validated WorkItem (None for an item that failed validation).
            diagnostics: Caller's collector; everything recorded here is appended.

        Returns:
            CostResult. Any error yields an all-zero result carrying the error.
        """
        scope = Diagnostics()
        try:
            priced = self._price(item, scope)
            result = self._build_result(priced, scope) if priced is not None else None
        except Exception as e:
            logger.warning("cost_calculation_failed", error=str(e))
            scope.add_error(
                f"Cost calculation error: {e}",
                ErrorCode.COST_CALCULATION_ERROR,
                item=item.display_name if isinstance(item, WorkItem) else None,
                error=str(e)
            )
            result = None

        diagnostics.extend(scope)
        if result is None:
            return CostResult(errors=scope.errors, warnings=scope.warnings)
        return result

    def _price(self, item: Optional[WorkItem], scope: Diagnostics) -> Optional[_PricedQuantity]:
        if not isinstance(item, WorkItem):
            scope.add_error("Invalid work item", ErrorCode.INVALID_ITEM)
            return None

        rates = {}
        for field_name, raw in (("material cost", item.material_cost), ("labor cost", item.labor_cost)):
            try:
                rates[field_name] = self.parse_rate(raw, field_name)
            except ValidationError as e:
                scope.add_exception(e)
                rates[field_name] = None

        if rates["material cost"] is None or rates["labor cost"] is None:
            return None

        units, label = self.resolver.resolve_quantity(item, scope)
        return _PricedQuantity(
            units=units,
            label=label,
            material_rate=rates["material cost"],
            labor_rate=rates["labor cost"],
            measurement_type=item.measurement_type,
        )

    def _build_result(self, priced: _PricedQuantity, scope: Diagnostics) -> CostResult:
        metadata = CostMetadata(
            units=float(priced.units),
            material_cost_per_unit=format_rate(priced.material_rate),
            labor_cost_per_unit=format_rate(priced.labor_rate),
            measurement_type=priced.measurement_type,
        )

        if priced.units == 0:
            return CostResult(
                units=0.0,
                unit_label=priced.label,
                errors=scope.errors,
                warnings=scope.warnings,
                metadata=metadata,
            )

        material = priced.material_rate * priced.units
        labor = priced.labor_rate * priced.units

        return CostResult(
            units=float(priced.units),
            unit_label=priced.label,
            material_cost=format_money(material),
            labor_cost=format_money(labor),
            total_cost=format_money(material + labor),
            errors=scope.errors,
            warnings=scope.warnings,
            metadata=metadata,
        )

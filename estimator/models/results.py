"""Result models returned by the estimator engine.

Every result is built fresh per call and frozen. Monetary fields are
two-decimal strings, per-unit rates four-decimal strings, unit quantities
floats rounded to two decimals. ``to_dict()`` gives the camelCase wire form.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from models.diagnostics import Diagnostic


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class _Result(BaseModel):
    """Shared configuration and serialization for result models."""

    class Config:
        populate_by_name = True
        frozen = True

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a camelCase dictionary for JSON serialization."""
        return self.model_dump(by_alias=True, mode="json")


# =============================================================================
# UNITS AND ITEM COSTS
# =============================================================================


class UnitResult(_Result):
    """Resolved quantity for one work item."""

    units: float = Field(default=0.0, ge=0)
    label: str = Field(default="units")
    errors: List[Diagnostic] = Field(default_factory=list)
    warnings: List[Diagnostic] = Field(default_factory=list)


class CostMetadata(_Result):
    """Per-unit rates and context behind a priced item."""

    units: float = Field(default=0.0, ge=0)
    material_cost_per_unit: str = Field(default="0.0000", alias="materialCostPerUnit")
    labor_cost_per_unit: str = Field(default="0.0000", alias="laborCostPerUnit")
    measurement_type: Optional[str] = Field(default=None, alias="measurementType")
    calculated_at: str = Field(default_factory=_now_iso, alias="calculatedAt")


class CostResult(_Result):
    """Priced work item."""

    units: float = Field(default=0.0, ge=0)
    unit_label: str = Field(default="units", alias="unitLabel")
    material_cost: str = Field(default="0.00", alias="materialCost")
    labor_cost: str = Field(default="0.00", alias="laborCost")
    total_cost: str = Field(default="0.00", alias="totalCost")
    errors: List[Diagnostic] = Field(default_factory=list)
    warnings: List[Diagnostic] = Field(default_factory=list)
    metadata: CostMetadata = Field(default_factory=CostMetadata)


# =============================================================================
# CATEGORY BREAKDOWNS (pre-adjustment)
# =============================================================================


class CategoryBreakdown(_Result):
    """Pre-adjustment rollup of one category."""

    name: str
    key: Optional[str] = None
    material_cost: str = Field(default="0.00", alias="materialCost")
    labor_cost: str = Field(default="0.00", alias="laborCost")
    subtotal: str = Field(default="0.00")
    total_units: float = Field(default=0.0, ge=0, alias="totalUnits")
    item_count: int = Field(default=0, ge=0, alias="itemCount")
    valid_item_count: int = Field(default=0, ge=0, alias="validItemCount")
    has_errors: bool = Field(default=False, alias="hasErrors")
    calculated_at: str = Field(default_factory=_now_iso, alias="calculatedAt")


class BreakdownSummary(_Result):
    total_categories: int = Field(default=0, alias="totalCategories")
    valid_categories: int = Field(default=0, alias="validCategories")
    total_items: int = Field(default=0, alias="totalItems")
    valid_items: int = Field(default=0, alias="validItems")
    calculated_at: str = Field(default_factory=_now_iso, alias="calculatedAt")


class CategoryBreakdownReport(_Result):
    """All category rollups for a project."""

    breakdowns: List[CategoryBreakdown] = Field(default_factory=list)
    errors: List[Diagnostic] = Field(default_factory=list)
    warnings: List[Diagnostic] = Field(default_factory=list)
    summary: BreakdownSummary = Field(default_factory=BreakdownSummary)


# =============================================================================
# PROJECT TOTALS (post-adjustment)
# =============================================================================


class TotalsSummary(_Result):
    total_items: int = Field(default=0, alias="totalItems")
    valid_items: int = Field(default=0, alias="validItems")
    invalid_items: int = Field(default=0, alias="invalidItems")
    total_categories: int = Field(default=0, alias="totalCategories")
    calculated_at: str = Field(default_factory=_now_iso, alias="calculatedAt")


class Totals(_Result):
    """Project totals after the full adjustment chain.

    ``labor_cost`` is the labor after discount; the pre-discount figure is in
    ``labor_cost_before_discount``.
    """

    material_cost: str = Field(default="0.00", alias="materialCost")
    labor_cost: str = Field(default="0.00", alias="laborCost")
    labor_cost_before_discount: str = Field(default="0.00", alias="laborCostBeforeDiscount")
    labor_discount: str = Field(default="0.00", alias="laborDiscount")
    waste_cost: str = Field(default="0.00", alias="wasteCost")
    tax_amount: str = Field(default="0.00", alias="taxAmount")
    markup_amount: str = Field(default="0.00", alias="markupAmount")
    misc_fees_total: str = Field(default="0.00", alias="miscFeesTotal")
    transportation_fee: str = Field(default="0.00", alias="transportationFee")
    subtotal: str = Field(default="0.00")
    total: str = Field(default="0.00")
    total_units: float = Field(default=0.0, ge=0, alias="totalUnits")
    errors: List[Diagnostic] = Field(default_factory=list)
    warnings: List[Diagnostic] = Field(default_factory=list)
    summary: TotalsSummary = Field(default_factory=TotalsSummary)


# =============================================================================
# PAYMENTS
# =============================================================================


class PaymentCounts(_Result):
    total_payments: int = Field(default=0, alias="totalPayments")
    paid_payments: int = Field(default=0, alias="paidPayments")
    overdue_payments: int = Field(default=0, alias="overduePayments")
    calculated_at: str = Field(default_factory=_now_iso, alias="calculatedAt")


class PaymentSummary(_Result):
    """Payment ledger reconciled against the grand total."""

    total_paid: str = Field(default="0.00", alias="totalPaid")
    total_due: str = Field(default="0.00", alias="totalDue")
    overdue_payments: str = Field(default="0.00", alias="overduePayments")
    grand_total: str = Field(default="0.00", alias="grandTotal")
    deposit: str = Field(default="0.00")
    errors: List[Diagnostic] = Field(default_factory=list)
    warnings: List[Diagnostic] = Field(default_factory=list)
    summary: PaymentCounts = Field(default_factory=PaymentCounts)


# =============================================================================
# ENGINE STATUS
# =============================================================================


class CacheStats(_Result):
    hits: int = 0
    misses: int = 0
    hit_rate: str = Field(default="0.00%", alias="hitRate")
    cache_size: int = Field(default=0, alias="cacheSize")


class EngineStatus(_Result):
    is_ready: bool = Field(default=True, alias="isReady")
    error_count: int = Field(default=0, alias="errorCount")
    warning_count: int = Field(default=0, alias="warningCount")
    categories: int = 0
    settings: int = 0
    has_work_type_catalog: bool = Field(default=False, alias="hasWorkTypeCatalog")
    cache: CacheStats = Field(default_factory=CacheStats)
    last_calculation: str = Field(default_factory=_now_iso, alias="lastCalculation")

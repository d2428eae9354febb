"""Aggregation of priced work items.

Two independent passes over the category tree:

- category_breakdowns: pre-adjustment rollup per category
- totals: project-wide sums pushed once through the adjustment chain

Each item is priced with its own Diagnostics. An item whose pricing records
any error is excluded from the sums but still counted, and the parent
collector gets one warning carrying that item's errors.
"""

import time
from decimal import Decimal
from typing import Callable, List, Optional

import structlog

from config.errors import ErrorCode
from config.limits import DEFAULT_LIMITS, PRECISION, CalculationLimits
from models.diagnostics import Diagnostics
from models.project_settings import ProjectSettings
from models.results import (
    BreakdownSummary,
    CategoryBreakdown,
    CategoryBreakdownReport,
    CostResult,
    Totals,
    TotalsSummary,
)
from models.work_item import Category, WorkItem
from services.adjustment_pipeline import adjust
from services.cost_evaluator import CostEvaluator
from utils.numbers import ZERO, format_money, round_units

logger = structlog.get_logger(__name__)


class _Budget:
    """Wall-clock budget for one aggregate pass."""

    def __init__(self, timeout_ms: int, timer: Callable[[], float]):
        self.timeout_ms = timeout_ms
        self.timer = timer
        self.deadline = timer() + timeout_ms / 1000.0 if timeout_ms > 0 else None
        self.expired = False

    def exhausted(self, diagnostics: Diagnostics) -> bool:
        """True once the budget is spent; records the timeout exactly once."""
        if self.expired:
            return True
        if self.deadline is not None and self.timer() > self.deadline:
            self.expired = True
            logger.warning("calculation_timeout", timeout_ms=self.timeout_ms)
            diagnostics.add_error(
                f"Calculation exceeded {self.timeout_ms} ms; remaining items were not priced",
                ErrorCode.CALCULATION_TIMEOUT,
                timeout_ms=self.timeout_ms
            )
        return self.expired


class _Tally:
    """Running sums for a group of items."""

    def __init__(self) -> None:
        self.material = ZERO
        self.labor = ZERO
        self.units = ZERO
        self.item_count = 0
        self.valid_count = 0

    def add(self, result: CostResult) -> None:
        # Sums are built from the rounded per-item figures
        self.valid_count += 1
        self.material += Decimal(result.material_cost)
        self.labor += Decimal(result.labor_cost)
        self.units += Decimal(str(result.units))


def _item_name(item: Optional[WorkItem]) -> str:
    return item.display_name if isinstance(item, WorkItem) else "Unnamed Item"


class AggregationEngine:
    """Rolls priced items up into category breakdowns and project totals."""

    def __init__(
        self,
        evaluator: CostEvaluator,
        timeout_ms: int = 0,
        timer: Callable[[], float] = time.monotonic
    ):
        """Initialize AggregationEngine.

        Args:
            evaluator: Prices individual work items.
            timeout_ms: Wall-clock budget per pass; 0 disables it.
            timer: Monotonic seconds source.
        """
        self.evaluator = evaluator
        self.timeout_ms = timeout_ms
        self.timer = timer

    def category_breakdowns(
        self,
        categories: List[Category],
        diagnostics: Diagnostics
    ) -> CategoryBreakdownReport:
        """Pre-adjustment rollup of every category."""
        budget = _Budget(self.timeout_ms, self.timer)
        breakdowns: List[CategoryBreakdown] = []

        for category in categories:
            tally = _Tally()
            for index, item in enumerate(category.work_items):
                tally.item_count += 1
                if budget.exhausted(diagnostics):
                    continue

                try:
                    child = Diagnostics()
                    result = self.evaluator.price(item, child)
                except Exception as e:
                    logger.error("item_processing_failed", category=category.name, item_index=index, error=str(e))
                    diagnostics.add_error(
                        f"Error calculating item {index + 1} in {category.name}: {e}",
                        ErrorCode.ITEM_PROCESSING_ERROR,
                        category_name=category.name,
                        item_index=index,
                        error=str(e)
                    )
                    continue

                if child.has_errors:
                    diagnostics.add_warning(
                        f"Item {index + 1} in {category.name} has calculation errors",
                        ErrorCode.ITEM_CALCULATION_ERROR,
                        category_name=category.name,
                        item_index=index,
                        item=_item_name(item),
                        errors=[entry.to_dict() for entry in child.errors]
                    )
                    continue

                tally.add(result)

            breakdowns.append(CategoryBreakdown(
                name=category.name,
                key=category.key,
                material_cost=format_money(tally.material),
                labor_cost=format_money(tally.labor),
                subtotal=format_money(tally.material + tally.labor),
                total_units=round_units(tally.units),
                item_count=tally.item_count,
                valid_item_count=tally.valid_count,
                has_errors=tally.valid_count < tally.item_count,
            ))

        summary = BreakdownSummary(
            total_categories=len(categories),
            valid_categories=sum(1 for b in breakdowns if not b.has_errors),
            total_items=sum(b.item_count for b in breakdowns),
            valid_items=sum(b.valid_item_count for b in breakdowns),
        )
        logger.info(
            "category_breakdowns_calculated",
            categories=summary.total_categories,
            items=summary.total_items,
            valid_items=summary.valid_items
        )
        return CategoryBreakdownReport(
            breakdowns=breakdowns,
            errors=diagnostics.errors,
            warnings=diagnostics.warnings,
            summary=summary,
        )

    def totals(
        self,
        categories: List[Category],
        settings: ProjectSettings,
        diagnostics: Diagnostics,
        limits: CalculationLimits = DEFAULT_LIMITS
    ) -> Totals:
        """Project totals after the adjustment chain."""
        budget = _Budget(self.timeout_ms, self.timer)
        tally = _Tally()

        for category in categories:
            for index, item in enumerate(category.work_items):
                tally.item_count += 1
                if budget.exhausted(diagnostics):
                    continue

                try:
                    child = Diagnostics()
                    result = self.evaluator.price(item, child)
                except Exception as e:
                    logger.error("item_processing_failed", category=category.name, item_index=index, error=str(e))
                    diagnostics.add_warning(
                        f"Error processing item: {e}",
                        ErrorCode.ITEM_PROCESSING_ERROR,
                        category_name=category.name,
                        item_index=index,
                        error=str(e)
                    )
                    continue

                if child.has_errors:
                    diagnostics.add_warning(
                        f"Item calculation failed: {_item_name(item)}",
                        ErrorCode.ITEM_CALCULATION_FAILED,
                        category_name=category.name,
                        item_index=index,
                        errors=[entry.to_dict() for entry in child.errors]
                    )
                    continue

                tally.add(result)

        adjustments = adjust(tally.material, tally.labor, settings, limits, diagnostics)

        totals = Totals(
            material_cost=format_money(tally.material),
            labor_cost=format_money(adjustments.adjusted_labor_cost),
            labor_cost_before_discount=format_money(tally.labor),
            labor_discount=format_money(adjustments.labor_discount_amount),
            waste_cost=format_money(adjustments.waste_cost),
            tax_amount=format_money(adjustments.tax_amount),
            markup_amount=format_money(adjustments.markup_amount),
            misc_fees_total=format_money(adjustments.misc_fees_total),
            transportation_fee=format_money(adjustments.transportation_fee),
            subtotal=format_money(adjustments.subtotal),
            total=format_money(adjustments.grand_total),
            total_units=round_units(tally.units, PRECISION.area),
            errors=diagnostics.errors,
            warnings=diagnostics.warnings,
            summary=TotalsSummary(
                total_items=tally.item_count,
                valid_items=tally.valid_count,
                invalid_items=tally.item_count - tally.valid_count,
                total_categories=len(categories),
            ),
        )
        logger.info(
            "totals_calculated",
            total=totals.total,
            items=tally.item_count,
            valid_items=tally.valid_count
        )
        return totals

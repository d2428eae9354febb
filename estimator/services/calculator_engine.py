"""Calculator engine facade.

Validates a project's categories and settings once, then answers pricing
questions about them. Every public operation builds its own Diagnostics and
returns a result carrying them; no exception escapes a public method.
"""

from typing import Any, List, Mapping, Optional, Union

import structlog
from pydantic import ValidationError as PydanticValidationError

from config.errors import ErrorCode
from config.limits import limits_from_settings
from config.settings import settings as app_settings
from models.diagnostics import Diagnostic, Diagnostics
from models.project_settings import EngineOptions, ProjectSettings
from models.results import (
    CacheStats,
    CategoryBreakdownReport,
    CostResult,
    EngineStatus,
    PaymentSummary,
    Totals,
    UnitResult,
)
from models.work_item import Category, WorkItem
from services.aggregation_engine import AggregationEngine
from services.calculation_cache import CalculationCache, fingerprint
from services.cost_evaluator import CostEvaluator
from services.payment_reconciler import Clock, PaymentReconciler
from services.unit_resolver import UnitResolver
from services.work_type_catalog import WorkTypeCatalog
from validators.input_validator import (
    validate_categories,
    validate_settings,
    validate_work_item,
)

logger = structlog.get_logger(__name__)


class CalculatorEngine:
    """Prices a project: items, category rollups, totals and payments.

    Example:
        engine = CalculatorEngine(categories, settings)
        totals = engine.totals()
        payments = engine.payment_details(totals.total)
    """

    def __init__(
        self,
        categories: Any = None,
        settings: Any = None,
        work_type_catalog: Optional[WorkTypeCatalog] = None,
        options: Union[EngineOptions, Mapping[str, Any], None] = None,
        clock: Optional[Clock] = None
    ):
        """Initialize CalculatorEngine.

        Args:
            categories: List of category mappings (or validated Category models).
            settings: Project settings mapping (or a ProjectSettings model).
            work_type_catalog: Optional catalog collaborator; stored, not queried.
            options: EngineOptions or a mapping with snake_case or camelCase keys.
            clock: Source of "now" for overdue payments; defaults to UTC now.
        """
        diagnostics = Diagnostics()
        self._last = diagnostics

        self.options = self._validate_options(options, diagnostics)
        self.limits = limits_from_settings(app_settings)
        self.categories: List[Category] = validate_categories(
            categories, diagnostics, strict=self.options.strict_validation
        )
        self.settings: ProjectSettings = validate_settings(settings, diagnostics)
        self.work_type_catalog = work_type_catalog

        self.resolver = UnitResolver(self.limits)
        self.evaluator = CostEvaluator(self.resolver, self.limits)
        self.aggregator = AggregationEngine(self.evaluator, timeout_ms=self.options.timeout_ms)
        self.reconciler = PaymentReconciler(clock)
        self.cache = CalculationCache(self.options.max_cache_size)

        logger.info(
            "calculator_engine_initialized",
            categories=len(self.categories),
            items=sum(len(c.work_items) for c in self.categories),
            strict=self.options.strict_validation,
            caching=self.options.enable_caching,
            errors=len(diagnostics.errors),
            warnings=len(diagnostics.warnings)
        )

    @staticmethod
    def _validate_options(options: Any, diagnostics: Diagnostics) -> EngineOptions:
        if isinstance(options, EngineOptions):
            return options
        if options is None:
            return EngineOptions()
        if not isinstance(options, Mapping):
            diagnostics.add_error("Engine options must be a mapping; using defaults", ErrorCode.VALIDATION_ERROR)
            return EngineOptions()
        try:
            return EngineOptions.model_validate(dict(options))
        except PydanticValidationError as e:
            diagnostics.add_error(
                "Invalid engine options; using defaults",
                ErrorCode.VALIDATION_ERROR,
                validation_errors=[f"{err['loc']}: {err['msg']}" for err in e.errors()]
            )
            return EngineOptions()

    def _record(self, result: Any) -> Any:
        """Make a result's diagnostics the ones reported by get_errors()."""
        self._last = Diagnostics.from_entries(result.errors, result.warnings)
        return result

    def _validated_item(self, raw: Any, diagnostics: Diagnostics) -> Any:
        # Non-mappings pass through so the resolver reports them as invalid items
        if isinstance(raw, (Mapping, WorkItem)):
            return validate_work_item(raw, diagnostics, strict=self.options.strict_validation)
        return raw

    # =========================================================================
    # ITEM OPERATIONS
    # =========================================================================

    def price_units(self, item: Any) -> UnitResult:
        """Resolve the units of a single work item."""
        diagnostics = Diagnostics()
        try:
            work_item = self._validated_item(item, diagnostics)
            if work_item is None and diagnostics.has_errors:
                result = UnitResult(errors=diagnostics.errors, warnings=diagnostics.warnings)
            else:
                result = self.resolver.resolve(work_item, diagnostics)
        except Exception as e:
            logger.error("price_units_failed", error=str(e))
            diagnostics.add_error(f"Unit calculation error: {e}", ErrorCode.CALCULATION_ERROR, error=str(e))
            result = UnitResult(errors=diagnostics.errors, warnings=diagnostics.warnings)
        return self._record(result)

    def price_item(self, item: Any) -> CostResult:
        """Price a single work item."""
        diagnostics = Diagnostics()
        try:
            work_item = self._validated_item(item, diagnostics)
            if work_item is None and diagnostics.has_errors:
                result = CostResult(errors=diagnostics.errors, warnings=diagnostics.warnings)
            else:
                result = self.evaluator.price(work_item, diagnostics)
        except Exception as e:
            logger.error("price_item_failed", error=str(e))
            diagnostics.add_error(f"Cost calculation error: {e}", ErrorCode.COST_CALCULATION_ERROR, error=str(e))
            result = CostResult(errors=diagnostics.errors, warnings=diagnostics.warnings)
        return self._record(result)

    # =========================================================================
    # AGGREGATE OPERATIONS
    # =========================================================================

    def category_breakdowns(self) -> CategoryBreakdownReport:
        """Pre-adjustment rollup per category."""
        return self._record(self._category_breakdowns())

    def totals(self) -> Totals:
        """Project totals after tax, markup, waste, discount and fees."""
        return self._record(self._totals())

    def payment_details(self, grand_total: Any = None) -> PaymentSummary:
        """Reconcile the payment ledger.

        Args:
            grand_total: Total to reconcile against. When omitted, totals()
                is computed (or taken from the cache) first.
        """
        diagnostics = Diagnostics()
        try:
            if grand_total is None:
                totals = self._totals()
                grand_total = totals.total
                if totals.errors:
                    diagnostics.add_warning(
                        "Grand total was computed with errors",
                        ErrorCode.TOTALS_HAVE_ERRORS,
                        error_count=len(totals.errors)
                    )
            result = self.reconciler.reconcile(
                grand_total,
                self.settings.payments,
                diagnostics,
                legacy_deposit=self.settings.deposit
            )
        except Exception as e:
            logger.error("payment_details_failed", error=str(e))
            diagnostics.add_error(
                f"Payment calculation error: {e}",
                ErrorCode.PAYMENT_CALCULATION_ERROR,
                original_error=str(e)
            )
            result = PaymentSummary(errors=diagnostics.errors, warnings=diagnostics.warnings)
        return self._record(result)

    def _category_breakdowns(self) -> CategoryBreakdownReport:
        key = self._cache_key("breakdowns")
        if key is not None:
            cached = self.cache.get(key)
            if cached is not None:
                return cached

        diagnostics = Diagnostics()
        try:
            result = self.aggregator.category_breakdowns(self.categories, diagnostics)
        except Exception as e:
            logger.error("category_breakdowns_failed", error=str(e))
            diagnostics.add_error(
                f"Breakdown calculation error: {e}",
                ErrorCode.BREAKDOWN_CALCULATION_ERROR,
                error=str(e)
            )
            return CategoryBreakdownReport(errors=diagnostics.errors, warnings=diagnostics.warnings)

        if key is not None and self._cacheable(result):
            self.cache.put(key, result)
        return result

    def _totals(self) -> Totals:
        key = self._cache_key("totals")
        if key is not None:
            cached = self.cache.get(key)
            if cached is not None:
                return cached

        diagnostics = Diagnostics()
        try:
            result = self.aggregator.totals(self.categories, self.settings, diagnostics, self.limits)
        except Exception as e:
            logger.error("totals_failed", error=str(e))
            diagnostics.add_error(
                f"Totals calculation error: {e}",
                ErrorCode.TOTALS_CALCULATION_ERROR,
                error=str(e)
            )
            return Totals(errors=diagnostics.errors, warnings=diagnostics.warnings)

        if key is not None and self._cacheable(result):
            self.cache.put(key, result)
        return result

    @staticmethod
    def _cacheable(result: Any) -> bool:
        # Partial results from a timed-out pass are never cached
        return all(e.code != ErrorCode.CALCULATION_TIMEOUT for e in result.errors)

    def _cache_key(self, operation: str) -> Optional[str]:
        if not self.options.enable_caching:
            return None
        try:
            return fingerprint(operation, self.categories, self.settings)
        except (TypeError, ValueError) as e:
            logger.warning("cache_key_failed", operation=operation, error=str(e))
            return None

    # =========================================================================
    # DIAGNOSTICS AND STATUS
    # =========================================================================

    def get_errors(self) -> List[Diagnostic]:
        """Errors recorded by the most recent operation."""
        return self._last.errors

    def get_warnings(self) -> List[Diagnostic]:
        """Warnings recorded by the most recent operation."""
        return self._last.warnings

    def clear_diagnostics(self) -> None:
        self._last = Diagnostics()

    def clear_cache(self) -> None:
        self.cache.clear()

    def cache_stats(self) -> CacheStats:
        return self.cache.stats()

    def reset(self) -> None:
        """Clear diagnostics and the cache."""
        self.clear_diagnostics()
        self.clear_cache()

    def status(self) -> EngineStatus:
        return EngineStatus(
            is_ready=not self._last.has_errors,
            error_count=len(self._last.errors),
            warning_count=len(self._last.warnings),
            categories=len(self.categories),
            settings=len(self.settings.model_fields_set),
            has_work_type_catalog=self.work_type_catalog is not None,
            cache=self.cache.stats(),
        )

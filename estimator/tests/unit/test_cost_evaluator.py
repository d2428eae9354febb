"""
Unit Tests for CostEvaluator.
"""

from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from config.errors import ErrorCode, ValidationError
from models.work_item import WorkItem
from services.cost_evaluator import CostEvaluator
from tests.fixtures.mock_project_data import (
    get_baseboard_item,
    get_tile_floor_item,
    get_wall_paint_item,
)


def _item(**data) -> WorkItem:
    return WorkItem.model_validate(data)


class TestPricing:
    """Tests for successful pricing."""

    def test_square_foot_item(self, evaluator, diagnostics):
        result = evaluator.price(_item(**get_tile_floor_item()), diagnostics)

        assert result.material_cost == "250.00"
        assert result.labor_cost == "300.00"
        assert result.total_cost == "550.00"
        assert result.units == 100.0
        assert result.unit_label == "sqft"
        assert result.errors == []

    def test_metadata_carries_rates(self, evaluator, diagnostics):
        result = evaluator.price(_item(**get_tile_floor_item()), diagnostics)

        assert result.metadata.material_cost_per_unit == "2.5000"
        assert result.metadata.labor_cost_per_unit == "3.0000"
        assert result.metadata.measurement_type == "square-foot"

    def test_string_rates_are_cleaned(self, evaluator, diagnostics):
        result = evaluator.price(_item(**get_baseboard_item()), diagnostics)

        assert result.material_cost == "50.00"
        assert result.labor_cost == "80.00"
        assert result.unit_label == "linear ft"

    def test_surface_item(self, evaluator, diagnostics):
        result = evaluator.price(_item(**get_wall_paint_item()), diagnostics)

        assert result.units == 176.0
        assert result.material_cost == "88.00"
        assert result.labor_cost == "264.00"
        assert result.total_cost == "352.00"

    def test_missing_rates_are_zero(self, evaluator, diagnostics):
        result = evaluator.price(_item(measurementType="by-unit", units=3, materialCost=None, laborCost=""), diagnostics)

        assert result.total_cost == "0.00"
        assert result.units == 3.0
        assert result.errors == []

    def test_rounding_happens_only_at_output(self, evaluator, diagnostics):
        """0.335 x 3 is priced at full precision, then rounded once."""
        result = evaluator.price(
            _item(measurementType="by-unit", units=3, materialCost="0.335", laborCost=0),
            diagnostics
        )
        assert result.material_cost == "1.01"

    def test_zero_units_keep_rates(self, evaluator, diagnostics):
        result = evaluator.price(_item(measurementType="square-foot", materialCost=4, laborCost=1), diagnostics)

        assert result.units == 0.0
        assert result.total_cost == "0.00"
        assert result.unit_label == "sqft"
        assert result.metadata.material_cost_per_unit == "4.0000"
        assert result.errors == []


class TestRateValidation:
    """Tests for rate parsing failures."""

    @pytest.mark.parametrize("material, code", [
        (-5, ErrorCode.NEGATIVE_COST),
        ("-$5", ErrorCode.NEGATIVE_COST),
        ("abc", ErrorCode.INVALID_COST),
        ([1, 2], ErrorCode.INVALID_COST_TYPE),
        (True, ErrorCode.INVALID_COST_TYPE),
        (20000000, ErrorCode.COST_EXCEEDS_LIMIT),
    ])
    def test_invalid_material_rate(self, evaluator, diagnostics, material, code):
        result = evaluator.price(
            _item(measurementType="square-foot", sqft=10, materialCost=material, laborCost=1),
            diagnostics
        )

        assert result.material_cost == "0.00"
        assert result.labor_cost == "0.00"
        assert result.total_cost == "0.00"
        assert result.units == 0.0
        assert [e.code for e in result.errors] == [code]
        assert result.errors[0].context["field"] == "material cost"

    def test_both_rates_reported(self, evaluator, diagnostics):
        result = evaluator.price(_item(sqft=10, materialCost=-1, laborCost="x"), diagnostics)
        assert [e.code for e in result.errors] == [ErrorCode.NEGATIVE_COST, ErrorCode.INVALID_COST]

    def test_parse_rate_raises(self, evaluator):
        with pytest.raises(ValidationError) as exc_info:
            evaluator.parse_rate(-1, "labor cost")
        assert exc_info.value.code == ErrorCode.NEGATIVE_COST

    def test_parse_rate_accepts_decimal(self, evaluator):
        assert evaluator.parse_rate(Decimal("1.25"), "labor cost") == Decimal("1.25")


class TestFailureHandling:

    def test_invalid_item(self, evaluator, diagnostics):
        result = evaluator.price(None, diagnostics)

        assert result.total_cost == "0.00"
        assert [e.code for e in result.errors] == [ErrorCode.INVALID_ITEM]

    def test_unexpected_exception_is_converted(self, diagnostics):
        resolver = MagicMock()
        resolver.resolve_quantity.side_effect = RuntimeError("boom")
        evaluator = CostEvaluator(resolver)

        result = evaluator.price(_item(sqft=10, materialCost=1, laborCost=1), diagnostics)

        assert result.total_cost == "0.00"
        assert diagnostics.codes() == [ErrorCode.COST_CALCULATION_ERROR]
        assert "boom" in result.errors[0].message

    def test_unit_errors_are_included(self, evaluator, diagnostics):
        result = evaluator.price(
            _item(measurementType="square-foot", surfaces=[{"sqft": 30000}, {"sqft": 30000}], materialCost=1, laborCost=0),
            diagnostics
        )

        assert [e.code for e in result.errors] == [ErrorCode.UNITS_EXCEED_LIMIT]
        assert result.material_cost == "50000.00"

"""
Unit Tests for boundary validation of categories and settings.

Test Coverage:
- Category tree shape errors (non-list, nameless, non-mapping entries)
- Work item placeholders and strict measurement types
- Settings defaults, unparseable numbers and list fields
"""

from decimal import Decimal

from config.errors import ErrorCode
from models.diagnostics import Diagnostics
from models.project_settings import Payment, ProjectSettings
from models.work_item import WorkItem
from validators.input_validator import (
    validate_categories,
    validate_settings,
    validate_work_item,
)
from tests.fixtures.mock_project_data import (
    get_bathroom_categories,
    get_tile_floor_item,
)


# =============================================================================
# Categories
# =============================================================================


class TestValidateCategories:
    """Tests for validate_categories."""

    def test_valid_tree(self):
        diagnostics = Diagnostics()
        categories = validate_categories(get_bathroom_categories(), diagnostics)

        assert [c.name for c in categories] == ["Flooring", "Fixtures"]
        assert len(categories[0].work_items) == 2
        assert all(isinstance(i, WorkItem) for i in categories[0].work_items)
        assert not diagnostics.has_errors

    def test_none_is_empty_without_error(self):
        diagnostics = Diagnostics()
        assert validate_categories(None, diagnostics) == []
        assert len(diagnostics) == 0

    def test_non_list_is_an_error(self):
        diagnostics = Diagnostics()
        assert validate_categories({"name": "Flooring"}, diagnostics) == []
        assert diagnostics.codes() == [ErrorCode.INVALID_CATEGORIES]

    def test_nameless_and_non_mapping_categories_are_dropped(self):
        diagnostics = Diagnostics()
        raw = [{"name": "Kept"}, {"key": "no-name"}, "junk", None, {"name": ""}]

        categories = validate_categories(raw, diagnostics)

        assert [c.name for c in categories] == ["Kept"]
        assert diagnostics.codes() == [ErrorCode.INVALID_CATEGORY] * 4

    def test_invalid_items_are_kept_as_placeholders(self):
        diagnostics = Diagnostics()
        raw = [{"name": "Flooring", "workItems": [get_tile_floor_item(), "junk", None]}]

        categories = validate_categories(raw, diagnostics)

        items = categories[0].work_items
        assert len(items) == 3
        assert isinstance(items[0], WorkItem)
        assert items[1] is None and items[2] is None
        assert diagnostics.codes() == [ErrorCode.INVALID_ITEM, ErrorCode.INVALID_ITEM]
        assert diagnostics.errors[0].context["category_name"] == "Flooring"
        assert diagnostics.errors[0].context["item_index"] == 1

    def test_non_list_work_items_warns(self):
        diagnostics = Diagnostics()
        categories = validate_categories([{"name": "Flooring", "workItems": "tile"}], diagnostics)

        assert categories[0].work_items == []
        assert diagnostics.warning_codes() == [ErrorCode.INVALID_CATEGORY]

    def test_numeric_names_are_coerced(self):
        categories = validate_categories([{"name": 101, "key": 7}], Diagnostics())
        assert categories[0].name == "101"
        assert categories[0].key == "7"


# =============================================================================
# Work items
# =============================================================================


class TestValidateWorkItem:
    """Tests for validate_work_item."""

    def test_aliases_are_normalized(self):
        item = validate_work_item({"measurementType": "Sq Ft", "sqft": "120"}, Diagnostics())
        assert item.measurement_type == "square-foot"
        assert item.sqft == Decimal("120")

    def test_unknown_type_passes_in_lenient_mode(self):
        diagnostics = Diagnostics()
        item = validate_work_item({"measurementType": "cubic-yard"}, diagnostics)

        assert item.measurement_type == "cubic-yard"
        assert not diagnostics.has_errors

    def test_unknown_type_rejected_in_strict_mode(self):
        diagnostics = Diagnostics()
        item = validate_work_item({"measurementType": "cubic-yard"}, diagnostics, strict=True)

        assert item is None
        assert diagnostics.codes() == [ErrorCode.INVALID_MEASUREMENT_TYPE]

    def test_absent_type_is_allowed_in_strict_mode(self):
        item = validate_work_item({"sqft": 10}, Diagnostics(), strict=True)
        assert item is not None
        assert item.measurement_type is None

    def test_non_mapping_surfaces_become_placeholders(self):
        item = validate_work_item({"surfaces": [{"sqft": 10}, 5]}, Diagnostics())
        assert item.surfaces[1] is None

    def test_validated_item_is_returned_as_is(self):
        item = WorkItem(sqft=Decimal("5"))
        assert validate_work_item(item, Diagnostics()) is item


# =============================================================================
# Settings
# =============================================================================


class TestValidateSettings:
    """Tests for validate_settings."""

    def test_missing_settings_use_defaults(self):
        diagnostics = Diagnostics()
        settings = validate_settings(None, diagnostics)

        assert settings == ProjectSettings()
        assert settings.tax_rate == Decimal("0")
        assert settings.payments == []
        assert diagnostics.codes() == [ErrorCode.INVALID_SETTINGS]

    def test_numeric_strings_are_accepted(self):
        diagnostics = Diagnostics()
        settings = validate_settings({"taxRate": "0.08", "markup": 0.15}, diagnostics)

        assert settings.tax_rate == Decimal("0.08")
        assert settings.markup == Decimal("0.15")
        assert len(diagnostics) == 0

    def test_unparseable_number_warns_and_defaults(self):
        diagnostics = Diagnostics()
        settings = validate_settings({"taxRate": "eight percent", "wasteFactor": 0.1}, diagnostics)

        assert settings.tax_rate == Decimal("0")
        assert settings.waste_factor == Decimal("0.1")
        assert diagnostics.warning_codes() == [ErrorCode.INVALID_SETTING_VALUE]
        assert diagnostics.warnings[0].context["setting"] == "taxRate"

    def test_non_list_fields_warn_and_empty(self):
        diagnostics = Diagnostics()
        settings = validate_settings({"miscFees": "lots", "payments": {"amount": 5}}, diagnostics)

        assert settings.misc_fees == []
        assert settings.payments == []
        assert diagnostics.warning_codes() == [ErrorCode.INVALID_SETTING_VALUE] * 2

    def test_malformed_payments_are_placeholders(self):
        settings = validate_settings(
            {"payments": [{"amount": 100, "isPaid": True}, "junk"]},
            Diagnostics()
        )

        assert isinstance(settings.payments[0], Payment)
        assert settings.payments[0].is_paid is True
        assert settings.payments[1] is None

    def test_waste_entries_and_fees(self):
        settings = validate_settings(
            {
                "miscFees": [{"name": "Permit", "amount": "150"}],
                "wasteEntries": [{"surfaceCost": 200, "wasteFactor": 0.1}],
            },
            Diagnostics()
        )

        assert settings.misc_fees[0].amount == Decimal("150")
        assert settings.waste_entries[0].surface_cost == Decimal("200")

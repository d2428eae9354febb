"""Category tree and settings validation.

Raw project data (dicts straight from the persistence layer) is validated once
at the engine boundary into typed models. Malformed shapes never raise: they
are recorded on the caller's Diagnostics and replaced with a safe empty or
default value.

LENIENT MODE (default): unknown measurement types pass through and are
reported by the unit resolver when the item is priced.

STRICT MODE: work items with an unknown measurement type are rejected here.
"""

from typing import Any, Dict, List, Mapping, Optional

from pydantic import ValidationError as PydanticValidationError
import structlog

from config.errors import ErrorCode
from models.diagnostics import Diagnostics
from models.project_settings import ProjectSettings
from models.work_item import Category, WorkItem, is_known_measurement_type
from utils.numbers import parse_number

logger = structlog.get_logger(__name__)

NUMERIC_SETTINGS = {
    "taxRate": "tax_rate",
    "laborDiscount": "labor_discount",
    "wasteFactor": "waste_factor",
    "markup": "markup",
    "transportationFee": "transportation_fee",
    "deposit": "deposit",
}
LIST_SETTINGS = ("miscFees", "payments", "wasteEntries")


def _pydantic_errors(error: PydanticValidationError) -> List[str]:
    return [f"{err['loc']}: {err['msg']}" for err in error.errors()]


def validate_work_item(
    raw: Any,
    diagnostics: Diagnostics,
    strict: bool = False,
    **context: Any
) -> Optional[WorkItem]:
    """Validate one work item.

    Args:
        raw: Work item mapping (or an already-validated WorkItem).
        diagnostics: Collector for validation errors.
        strict: Reject unknown measurement types.
        **context: Extra context (category name, index) for diagnostics.

    Returns:
        The WorkItem, or None when the item cannot be used.
    """
    if isinstance(raw, WorkItem):
        item = raw
    elif not isinstance(raw, Mapping):
        diagnostics.add_error("Invalid work item", ErrorCode.INVALID_ITEM, **context)
        return None
    else:
        try:
            item = WorkItem.model_validate(dict(raw))
        except PydanticValidationError as e:
            diagnostics.add_error(
                "Invalid work item structure",
                ErrorCode.INVALID_ITEM,
                validation_errors=_pydantic_errors(e),
                **context
            )
            return None

    if strict and item.measurement_type is not None and not is_known_measurement_type(item.measurement_type):
        diagnostics.add_error(
            f"Invalid measurement type: {item.measurement_type}",
            ErrorCode.INVALID_MEASUREMENT_TYPE,
            measurement_type=item.measurement_type,
            item=item.display_name,
            **context
        )
        return None

    return item


def validate_categories(
    raw: Any,
    diagnostics: Diagnostics,
    strict: bool = False
) -> List[Category]:
    """Validate the category tree.

    Categories that are not mappings or have no name are dropped. Work items
    that fail validation are kept as None so they still count toward the
    category's item total.
    """
    if raw is None:
        return []
    if not isinstance(raw, (list, tuple)):
        diagnostics.add_error("Categories must be a list", ErrorCode.INVALID_CATEGORIES)
        return []

    categories: List[Category] = []
    for index, entry in enumerate(raw):
        if isinstance(entry, Category):
            categories.append(entry)
            continue
        if not isinstance(entry, Mapping) or not entry.get("name"):
            diagnostics.add_error(
                f"Invalid category at index {index}",
                ErrorCode.INVALID_CATEGORY,
                index=index
            )
            continue

        name = str(entry["name"])
        raw_items = entry.get("workItems")
        if raw_items is None:
            raw_items = []
        elif not isinstance(raw_items, (list, tuple)):
            diagnostics.add_warning(
                f"Work items of {name} must be a list",
                ErrorCode.INVALID_CATEGORY,
                category_name=name,
                index=index
            )
            raw_items = []

        work_items = [
            validate_work_item(
                item, diagnostics, strict=strict,
                category_name=name, item_index=item_index
            )
            for item_index, item in enumerate(raw_items)
        ]
        categories.append(Category(name=name, key=entry.get("key"), work_items=work_items))

    logger.debug(
        "categories_validated",
        categories=len(categories),
        items=sum(len(c.work_items) for c in categories),
        strict=strict
    )
    return categories


def validate_settings(raw: Any, diagnostics: Diagnostics) -> ProjectSettings:
    """Validate project settings.

    Absent or non-mapping settings fall back to defaults entirely. Individual
    numeric fields that cannot be read fall back to 0 with a warning.
    """
    if isinstance(raw, ProjectSettings):
        return raw
    if not isinstance(raw, Mapping):
        diagnostics.add_error("Invalid settings configuration", ErrorCode.INVALID_SETTINGS)
        return ProjectSettings()

    data: Dict[str, Any] = dict(raw)
    for alias, field_name in NUMERIC_SETTINGS.items():
        key = alias if alias in data else field_name
        value = data.get(key)
        if value is None or value == "":
            continue
        if parse_number(value) is None:
            diagnostics.add_warning(
                f"Setting {alias} is not a number; using 0",
                ErrorCode.INVALID_SETTING_VALUE,
                setting=alias,
                value=repr(value)
            )
            data[key] = 0

    for alias in LIST_SETTINGS:
        if alias in data and data[alias] is not None and not isinstance(data[alias], (list, tuple)):
            diagnostics.add_warning(
                f"Setting {alias} must be a list; ignoring it",
                ErrorCode.INVALID_SETTING_VALUE,
                setting=alias
            )
            data[alias] = []
        elif alias in data and data[alias] is None:
            data[alias] = []

    try:
        return ProjectSettings.model_validate(data)
    except PydanticValidationError as e:
        diagnostics.add_error(
            "Invalid settings configuration",
            ErrorCode.INVALID_SETTINGS,
            validation_errors=_pydantic_errors(e)
        )
        return ProjectSettings()

"""Mock project data fixtures for testing.

Provides category trees, settings and payment ledgers in the raw camelCase
shape the engine receives from the persistence layer.
"""

from typing import Any, Dict, List


# =============================================================================
# WORK ITEMS
# =============================================================================

def get_tile_floor_item() -> Dict[str, Any]:
    """100 sqft of tile at 2.50 material / 3.00 labor per sqft."""
    return {
        "name": "Porcelain floor tile",
        "type": "flooring",
        "subtype": "tile",
        "measurementType": "square-foot",
        "sqft": 100,
        "materialCost": 2.50,
        "laborCost": 3.00,
    }


def get_baseboard_item() -> Dict[str, Any]:
    """40 linear ft of baseboard at 1.25 / 2.00."""
    return {
        "name": "Baseboard trim",
        "type": "trim",
        "subtype": "baseboard",
        "measurementType": "linear-foot",
        "linearFt": 40,
        "materialCost": "1.25",
        "laborCost": "$2.00",
    }


def get_vanity_item() -> Dict[str, Any]:
    """One vanity at 450 / 200."""
    return {
        "name": "Vanity install",
        "type": "fixtures",
        "subtype": "vanity",
        "measurementType": "by-unit",
        "units": 1,
        "materialCost": 450,
        "laborCost": 200,
    }


def get_wall_paint_item() -> Dict[str, Any]:
    """Two painted walls given by surfaces: 10x8 and 12x8 (176 sqft)."""
    return {
        "name": "Wall paint",
        "type": "painting",
        "measurementType": "square-foot",
        "surfaces": [
            {"name": "North wall", "width": 10, "height": 8},
            {"name": "East wall", "width": 12, "height": 8},
        ],
        "materialCost": 0.50,
        "laborCost": 1.50,
    }


def get_negative_cost_item() -> Dict[str, Any]:
    return {
        "name": "Bad demo line",
        "measurementType": "square-foot",
        "sqft": 50,
        "materialCost": -5,
        "laborCost": 2,
    }


# =============================================================================
# CATEGORY TREES
# =============================================================================

def get_bathroom_categories() -> List[Dict[str, Any]]:
    """Bathroom remodel: material 750.00, labor 580.00 before adjustments."""
    return [
        {
            "name": "Flooring",
            "key": "flooring",
            "workItems": [get_tile_floor_item(), get_baseboard_item()],
        },
        {
            "name": "Fixtures",
            "key": "fixtures",
            "workItems": [get_vanity_item()],
        },
    ]


def get_categories_with_invalid_item() -> List[Dict[str, Any]]:
    """Flooring holds one good item and one with a negative material cost."""
    return [
        {
            "name": "Flooring",
            "key": "flooring",
            "workItems": [get_tile_floor_item(), get_negative_cost_item()],
        },
    ]


def get_single_item_categories(material: Any = 1000, labor: Any = 500) -> List[Dict[str, Any]]:
    """One by-unit item whose unit rates equal the category totals."""
    return [
        {
            "name": "General",
            "key": "general",
            "workItems": [
                {
                    "name": "Lump sum",
                    "measurementType": "by-unit",
                    "units": 1,
                    "materialCost": material,
                    "laborCost": labor,
                }
            ],
        }
    ]


# =============================================================================
# SETTINGS
# =============================================================================

def get_adjustment_settings() -> Dict[str, Any]:
    """Settings that turn material 1000 / labor 500 into 1895.00."""
    return {
        "taxRate": 0.08,
        "laborDiscount": 0.20,
        "wasteFactor": 0.10,
        "markup": 0.15,
        "transportationFee": 50,
        "miscFees": [],
        "payments": [],
    }


def get_payment_ledger() -> List[Dict[str, Any]]:
    """Paid 895.00, overdue 1200.00 (before 2024-06-01) and one future installment."""
    return [
        {
            "date": "2024-01-10",
            "amount": 895,
            "method": "Deposit",
            "isPaid": True,
            "note": "Signing deposit",
        },
        {
            "date": "2024-03-01T00:00:00Z",
            "amount": "1200.00",
            "method": "Check",
            "isPaid": False,
        },
        {
            "date": "2099-01-01",
            "amount": 0,
            "method": "Check",
            "isPaid": False,
            "note": "Final walkthrough",
        },
    ]


def get_project_document() -> Dict[str, Any]:
    """Whole project file as read by the CLI."""
    settings = get_adjustment_settings()
    settings["payments"] = get_payment_ledger()
    return {
        "categories": get_single_item_categories(),
        "settings": settings,
    }

"""Project-level adjustment chain.

Turns aggregated material and labor costs into a grand total. The order is
fixed:

    1. clamp settings into their allowed ranges
    2. labor discount
    3. waste on material (global factor, or per-surface entries when present)
    4. subtotal = material with waste + discounted labor
    5. tax and markup, both on the same subtotal
    6. miscellaneous fees
    7. grand total = subtotal + markup + tax + fees + transportation

Nothing here is rounded; callers format the amounts they output.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from config.errors import ErrorCode
from config.limits import DEFAULT_LIMITS, CalculationLimits
from models.diagnostics import Diagnostics
from models.project_settings import ProjectSettings
from utils.numbers import ZERO, clamp


@dataclass(frozen=True)
class Adjustments:
    """Every intermediate amount of the adjustment chain."""

    labor_discount_amount: Decimal
    adjusted_labor_cost: Decimal
    waste_cost: Decimal
    material_cost_with_waste: Decimal
    subtotal: Decimal
    tax_amount: Decimal
    markup_amount: Decimal
    misc_fees_total: Decimal
    transportation_fee: Decimal
    grand_total: Decimal


def _clamped(
    name: str,
    value: Decimal,
    low: Decimal,
    high: Optional[Decimal],
    diagnostics: Optional[Diagnostics]
) -> Decimal:
    result = clamp(value, low, high)
    if diagnostics is not None and result != value:
        diagnostics.add_warning(
            f"Setting {name} out of range; using {result}",
            ErrorCode.SETTING_CLAMPED,
            setting=name,
            value=str(value),
            clamped_to=str(result)
        )
    return result


def waste_from_entries(settings: ProjectSettings, limits: CalculationLimits = DEFAULT_LIMITS) -> Decimal:
    """Waste cost summed over per-surface waste entries."""
    total = ZERO
    for entry in settings.waste_entries:
        factor = clamp(entry.waste_factor, ZERO, limits.max_waste_factor)
        total += max(ZERO, entry.surface_cost) * factor
    return total


def adjust(
    material_cost: Decimal,
    labor_cost: Decimal,
    settings: ProjectSettings,
    limits: CalculationLimits = DEFAULT_LIMITS,
    diagnostics: Optional[Diagnostics] = None
) -> Adjustments:
    """Apply the adjustment chain to aggregated costs.

    Args:
        material_cost: Sum of item material costs.
        labor_cost: Sum of item labor costs (before discount).
        settings: Validated project settings.
        limits: Caps for tax, markup, waste and labor discount.
        diagnostics: When given, receives a warning for every clamped setting.

    Returns:
        Adjustments with unrounded Decimal amounts.
    """
    labor_discount = _clamped("laborDiscount", settings.labor_discount, ZERO, limits.max_labor_discount, diagnostics)
    waste_factor = _clamped("wasteFactor", settings.waste_factor, ZERO, limits.max_waste_factor, diagnostics)
    tax_rate = _clamped("taxRate", settings.tax_rate, ZERO, limits.max_tax_rate, diagnostics)
    markup = _clamped("markup", settings.markup, ZERO, limits.max_markup_rate, diagnostics)
    transportation_fee = _clamped("transportationFee", settings.transportation_fee, ZERO, None, diagnostics)

    labor_discount_amount = labor_cost * labor_discount
    adjusted_labor_cost = labor_cost - labor_discount_amount

    # Per-surface entries replace the global factor, never both
    if settings.waste_entries:
        waste_cost = waste_from_entries(settings, limits)
    else:
        waste_cost = material_cost * waste_factor
    material_cost_with_waste = material_cost + waste_cost

    subtotal = material_cost_with_waste + adjusted_labor_cost

    tax_amount = subtotal * tax_rate
    markup_amount = subtotal * markup

    misc_fees_total = sum((max(ZERO, fee.amount) for fee in settings.misc_fees), ZERO)

    grand_total = subtotal + markup_amount + tax_amount + misc_fees_total + transportation_fee

    return Adjustments(
        labor_discount_amount=labor_discount_amount,
        adjusted_labor_cost=adjusted_labor_cost,
        waste_cost=waste_cost,
        material_cost_with_waste=material_cost_with_waste,
        subtotal=subtotal,
        tax_amount=tax_amount,
        markup_amount=markup_amount,
        misc_fees_total=misc_fees_total,
        transportation_fee=transportation_fee,
        grand_total=grand_total,
    )

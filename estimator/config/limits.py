"""Precision and calculation limits for the estimator engine."""

from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class PrecisionConfig:
    """Fraction digits used at each output boundary."""

    currency: int = 2
    area: int = 2
    linear: int = 2
    units: int = 0
    rates: int = 4
    internal: int = 6


@dataclass(frozen=True)
class CalculationLimits:
    """Upper bounds applied to quantities, rates and adjustment settings."""

    max_units: Decimal = Decimal("50000")
    max_cost: Decimal = Decimal("10000000")
    max_tax_rate: Decimal = Decimal("0.25")
    max_markup_rate: Decimal = Decimal("5.0")
    max_waste_factor: Decimal = Decimal("0.50")
    max_labor_discount: Decimal = Decimal("1")


PRECISION = PrecisionConfig()
DEFAULT_LIMITS = CalculationLimits()


def limits_from_settings(app_settings) -> CalculationLimits:
    """Build CalculationLimits from the configured unit/cost maximums.

    Args:
        app_settings: A config.settings.Settings instance.

    Returns:
        CalculationLimits with the configured maximums and default rate caps.
    """
    return CalculationLimits(
        max_units=Decimal(str(app_settings.max_units)),
        max_cost=Decimal(str(app_settings.max_cost)),
    )

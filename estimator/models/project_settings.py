"""Project settings and engine option models.

Settings carry the project-wide adjustments (tax, markup, waste, labor
discount, fees) and the payment ledger. Numeric fields are read leniently:
an unparseable value becomes 0, and the input validator reports it.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Any, List, Optional, Union

from pydantic import BaseModel, Field, field_validator

from config.settings import settings as app_settings
from utils.numbers import ZERO, to_decimal


class MiscFee(BaseModel):
    """A named flat additional charge."""

    name: Optional[str] = Field(default=None, description="Fee label")
    amount: Decimal = Field(default=ZERO, description="Flat fee amount")

    class Config:
        frozen = True

    @field_validator("amount", mode="before")
    @classmethod
    def coerce_amount(cls, v: Any) -> Decimal:
        return to_decimal(v)

    @field_validator("name", mode="before")
    @classmethod
    def coerce_name(cls, v: Any) -> Optional[str]:
        return None if v is None else str(v)


class WasteEntry(BaseModel):
    """Per-surface waste: the material cost of one surface and its waste factor."""

    surface_cost: Decimal = Field(default=ZERO, alias="surfaceCost")
    waste_factor: Decimal = Field(default=ZERO, alias="wasteFactor")

    class Config:
        populate_by_name = True
        frozen = True

    @field_validator("surface_cost", "waste_factor", mode="before")
    @classmethod
    def coerce_number(cls, v: Any) -> Decimal:
        return to_decimal(v)


class Payment(BaseModel):
    """A payment ledger entry.

    ``amount`` is kept as supplied; the payment reconciler parses it and
    reports entries it cannot read.
    """

    amount: Any = Field(default=None, description="Payment amount")
    due_date: Optional[Union[int, float, datetime, date, str]] = Field(
        default=None,
        alias="date",
        description="Due or paid date (ISO string, date, datetime or epoch milliseconds)"
    )
    method: Optional[str] = Field(default=None, description="Payment method, e.g. 'Deposit'")
    type: Optional[str] = Field(default=None, description="Legacy payment type")
    is_paid: bool = Field(default=False, alias="isPaid")
    note: Optional[str] = Field(default=None)

    class Config:
        populate_by_name = True
        frozen = True

    @field_validator("is_paid", mode="before")
    @classmethod
    def coerce_paid(cls, v: Any) -> bool:
        return bool(v)

    @field_validator("method", "type", "note", mode="before")
    @classmethod
    def coerce_text(cls, v: Any) -> Optional[str]:
        if v is None:
            return None
        return str(v)

    @field_validator("due_date", mode="before")
    @classmethod
    def keep_date(cls, v: Any) -> Any:
        if isinstance(v, bool):
            return str(v)
        if v is None or isinstance(v, (int, float, datetime, date, str)):
            return v
        return str(v)

    @property
    def is_deposit(self) -> bool:
        return "deposit" in {(self.method or "").strip().lower(), (self.type or "").strip().lower()}


class ProjectSettings(BaseModel):
    """Project-wide adjustment settings and payment ledger."""

    tax_rate: Decimal = Field(default=ZERO, alias="taxRate")
    labor_discount: Decimal = Field(default=ZERO, alias="laborDiscount")
    waste_factor: Decimal = Field(default=ZERO, alias="wasteFactor")
    markup: Decimal = Field(default=ZERO)
    transportation_fee: Decimal = Field(default=ZERO, alias="transportationFee")
    misc_fees: List[MiscFee] = Field(default_factory=list, alias="miscFees")
    waste_entries: List[WasteEntry] = Field(default_factory=list, alias="wasteEntries")
    payments: List[Optional[Payment]] = Field(
        default_factory=list,
        description="Ledger entries; None marks an entry that was not a mapping"
    )
    deposit: Decimal = Field(
        default=ZERO,
        description="Legacy flat deposit, superseded by a 'Deposit' ledger entry"
    )

    class Config:
        populate_by_name = True
        frozen = True

    @field_validator(
        "tax_rate", "labor_discount", "waste_factor", "markup",
        "transportation_fee", "deposit",
        mode="before"
    )
    @classmethod
    def coerce_number(cls, v: Any) -> Decimal:
        return to_decimal(v)

    @field_validator("payments", mode="before")
    @classmethod
    def keep_payment_positions(cls, v: Any) -> List[Any]:
        if not isinstance(v, (list, tuple)):
            return []
        return [p if isinstance(p, (dict, Payment)) else None for p in v]

    @field_validator("misc_fees", "waste_entries", mode="before")
    @classmethod
    def only_mappings(cls, v: Any) -> List[Any]:
        if not isinstance(v, (list, tuple)):
            return []
        return [entry for entry in v if isinstance(entry, (dict, BaseModel))]


class EngineOptions(BaseModel):
    """Behavioural options for a CalculatorEngine instance."""

    enable_caching: bool = Field(
        default_factory=lambda: app_settings.enable_caching,
        alias="enableCaching",
        description="Memoize totals and breakdowns by input fingerprint"
    )
    strict_validation: bool = Field(
        default_factory=lambda: app_settings.strict_validation,
        alias="strictValidation",
        description="Reject work items with unknown measurement types"
    )
    timeout_ms: int = Field(
        default_factory=lambda: app_settings.timeout_ms,
        alias="timeoutMs",
        ge=0,
        description="Wall-clock budget per aggregate operation (0 disables)"
    )
    max_cache_size: int = Field(
        default_factory=lambda: app_settings.max_cache_size,
        alias="maxCacheSize",
        ge=1,
        description="Maximum number of memoized results"
    )

    class Config:
        populate_by_name = True
        frozen = True

"""Work-type catalog interface.

The catalog classifies an item's category/subtype and knows which measurement
type each subtype is billed by. Pricing never queries it: items arrive with
their measurement type already stamped. The engine only holds a reference so
callers that build items can share one catalog with it.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Mapping, Optional

from models.work_item import normalize_measurement_type


class WorkTypeCatalog(ABC):
    """Lookup of work types by category and subtype."""

    @abstractmethod
    def get_measurement_type(self, category: str, subtype: str) -> Optional[str]:
        """Measurement type billed for a subtype, or None if unknown."""
        ...

    @abstractmethod
    def is_valid_subtype(self, category: str, subtype: str) -> bool:
        ...

    @abstractmethod
    def get_work_type_details(self, category: str, subtype: str) -> Optional[Dict[str, Any]]:
        """Catalog entry for a subtype, or None if unknown."""
        ...


class StaticWorkTypeCatalog(WorkTypeCatalog):
    """In-memory catalog built from a nested mapping.

    Example:
        StaticWorkTypeCatalog({
            "flooring": {"tile": {"measurementType": "square-foot"}},
            "trim": {"baseboard": {"measurementType": "linear-foot"}},
        })
    """

    def __init__(self, entries: Mapping[str, Mapping[str, Mapping[str, Any]]]):
        self._entries = {
            str(category).lower(): {str(subtype).lower(): dict(details) for subtype, details in subtypes.items()}
            for category, subtypes in entries.items()
        }

    def _lookup(self, category: str, subtype: str) -> Optional[Dict[str, Any]]:
        subtypes = self._entries.get((category or "").lower())
        if subtypes is None:
            return None
        return subtypes.get((subtype or "").lower())

    def get_measurement_type(self, category: str, subtype: str) -> Optional[str]:
        details = self._lookup(category, subtype)
        if details is None:
            return None
        return normalize_measurement_type(details.get("measurementType"))

    def is_valid_subtype(self, category: str, subtype: str) -> bool:
        return self._lookup(category, subtype) is not None

    def get_work_type_details(self, category: str, subtype: str) -> Optional[Dict[str, Any]]:
        details = self._lookup(category, subtype)
        return dict(details) if details is not None else None

    def __len__(self) -> int:
        return sum(len(subtypes) for subtypes in self._entries.values())

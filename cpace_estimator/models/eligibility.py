from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

"""Eligibility category enum and per-category eligibility record.

The category set is closed: ten variants fixed for the lifetime of the
process. Each category carries one PaceEligibility record (fraction of cost
that counts toward CPACE financing plus a rationale sentence).
"""

__all__ = [
    "EligibilityCategory",
    "PaceEligibility",
    "Classification",
]


class EligibilityCategory(Enum):
    """CPACE eligibility categories.

    Declaration order is the canonical order used for breakdowns and reports.
    """
    HVAC = "hvac"
    SOLAR_RENEWABLE = "solar_renewable"
    LIGHTING = "lighting"
    BUILDING_ENVELOPE = "building_envelope"
    WATER_EFFICIENCY = "water_efficiency"
    EV_CHARGING = "ev_charging"
    ENERGY_STORAGE = "energy_storage"
    ELECTRICAL = "electrical"
    PLUMBING = "plumbing"
    NOT_ELIGIBLE = "not_eligible"

    @property
    def label(self) -> str:
        return _LABELS[self]


_LABELS = {
    EligibilityCategory.HVAC: "HVAC",
    EligibilityCategory.SOLAR_RENEWABLE: "Solar/Renewable",
    EligibilityCategory.LIGHTING: "Lighting",
    EligibilityCategory.BUILDING_ENVELOPE: "Building Envelope",
    EligibilityCategory.WATER_EFFICIENCY: "Water Efficiency",
    EligibilityCategory.EV_CHARGING: "EV Charging",
    EligibilityCategory.ENERGY_STORAGE: "Energy Storage",
    EligibilityCategory.ELECTRICAL: "Electrical",
    EligibilityCategory.PLUMBING: "Plumbing",
    EligibilityCategory.NOT_ELIGIBLE: "Not Eligible",
}


@dataclass(frozen=True)
class PaceEligibility:
    """Static eligibility record for one category."""
    category: EligibilityCategory
    percentage: float  # fraction in [0, 1]
    description: str  # rationale shown alongside each line item

    def __post_init__(self) -> None:
        if not 0.0 <= self.percentage <= 1.0:
            raise ValueError(f"percentage out of range for {self.category.value}: {self.percentage}")


@dataclass(frozen=True)
class Classification:
    category: EligibilityCategory
    confidence: float

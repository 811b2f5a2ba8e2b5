from __future__ import annotations

from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Mapping

from ..models.config_models import ClassifierSettings
from ..models.eligibility import EligibilityCategory as C
from ..models.eligibility import PaceEligibility

"""CPACE eligibility rule tables.

Three read-only tables drive classification:

- PACE_ELIGIBILITY: category -> eligible fraction + rationale
- CATEGORY_KEYWORDS: category -> substrings that vote for it
- EXCLUSION_RULES: trigger substring -> categories it disqualifies

They are bundled into an immutable ClassifierConfig, which is what the
classifier actually owns. Nothing here is mutated after import, so a single
config can be shared by any number of concurrent analyses.
"""

__all__ = [
    "PACE_ELIGIBILITY",
    "CATEGORY_KEYWORDS",
    "EXCLUSION_RULES",
    "CATEGORY_ORDER",
    "ClassifierConfig",
    "DEFAULT_CONFIG",
]


def _eligibility(category: C, percentage: float, description: str) -> tuple[C, PaceEligibility]:
    return category, PaceEligibility(category, percentage, description)


PACE_ELIGIBILITY: Mapping[C, PaceEligibility] = MappingProxyType(dict([
    _eligibility(C.HVAC, 1.0, "HVAC systems including heating, ventilation, air conditioning, chillers, boilers"),
    _eligibility(C.SOLAR_RENEWABLE, 1.0, "Solar panels, wind turbines, geothermal systems, renewable energy installations"),
    _eligibility(C.LIGHTING, 1.0, "LED lighting, lighting controls, energy-efficient lighting retrofits"),
    _eligibility(C.BUILDING_ENVELOPE, 1.0, "Insulation, windows, roofing, doors, air sealing, building shell improvements"),
    _eligibility(C.WATER_EFFICIENCY, 1.0, "Low-flow fixtures, water recycling systems, efficient irrigation, water heaters"),
    _eligibility(C.EV_CHARGING, 1.0, "Electric vehicle charging stations and infrastructure"),
    _eligibility(C.ENERGY_STORAGE, 1.0, "Battery storage systems, thermal storage"),
    _eligibility(C.ELECTRICAL, 0.5, "General electrical work (partially eligible if supporting energy efficiency)"),
    _eligibility(C.PLUMBING, 0.75, "Plumbing work (eligible if water-efficient fixtures or systems)"),
    _eligibility(C.NOT_ELIGIBLE, 0.0, "Not eligible for PACE financing"),
]))

CATEGORY_KEYWORDS: Mapping[C, tuple[str, ...]] = MappingProxyType({
    C.HVAC: (
        "hvac", "heating", "ventilation", "air conditioning", "ac unit", "a/c",
        "furnace", "boiler", "chiller", "heat pump", "ductwork", "thermostat",
        "vrf", "rtu", "ahu", "air handler", "condenser", "compressor", "cooling tower",
        "mini-split", "minisplit", "package unit", "split system", "mechanical",
    ),
    C.SOLAR_RENEWABLE: (
        "solar", "photovoltaic", "pv system", "pv array", "inverter", "renewable",
        "wind turbine", "geothermal", "ground source",
    ),
    C.LIGHTING: (
        "lighting", "led", "light fixture", "lamp", "luminaire",
        "occupancy sensor", "daylight sensor", "dimmer", "ballast",
    ),
    C.BUILDING_ENVELOPE: (
        "insulation", "window", "glazing", "roofing", "roof membrane", "door",
        "weatherization", "air seal", "envelope", "cladding", "facade",
        "skylight", "curtain wall", "thermal barrier", "r-value", "waterproofing",
    ),
    C.WATER_EFFICIENCY: (
        "low-flow", "water recycl", "water reclaim", "greywater", "rainwater",
        "efficient irrigation", "drip irrigation",
    ),
    C.EV_CHARGING: (
        "ev charging", "electric vehicle charging", "charging station", "evse",
        "level 2 charger", "dc fast charg",
    ),
    C.ENERGY_STORAGE: (
        "battery storage", "energy storage", "powerwall", "backup battery",
        "thermal storage", "ice storage",
    ),
    C.ELECTRICAL: (
        "electrical", "wiring", "electrical panel", "circuit breaker", "transformer",
        "switchgear", "electrical distribution",
    ),
    C.PLUMBING: (
        "plumbing", "domestic water", "sanitary", "sewer", "water pipe",
    ),
    C.NOT_ELIGIBLE: (
        "furniture", "carpet", "paint", "cosmetic", "landscaping", "signage",
        "appliance", "kitchen", "elevator", "escalator", "security", "fire alarm",
        "fire sprinkler", "maintenance", "repair", "cleaning", "demolition",
        "general conditions", "general requirements", "fee", "overhead", "profit",
        "permit", "insurance", "bond", "contingency", "concrete", "masonry",
        "structural steel", "framing", "drywall", "flooring", "tile", "countertop",
        "cabinet", "millwork", "specialties", "equipment", "conveying",
    ),
})

# NOTE: "fire" also suppresses legitimate envelope items such as
# "fire-rated window assembly"; kept as-is, see DESIGN.md.
EXCLUSION_RULES: tuple[tuple[str, frozenset[C]], ...] = (
    ("elevator", frozenset({C.EV_CHARGING})),
    ("conveying", frozenset({C.EV_CHARGING})),
    ("fireproof", frozenset({C.BUILDING_ENVELOPE})),
    ("fire", frozenset({C.BUILDING_ENVELOPE})),
    ("fixture", frozenset({C.BUILDING_ENVELOPE})),
)

# most specific first; not_eligible is the fallback and never scored
CATEGORY_ORDER: tuple[C, ...] = (
    C.EV_CHARGING, C.SOLAR_RENEWABLE, C.ENERGY_STORAGE,
    C.HVAC, C.LIGHTING, C.WATER_EFFICIENCY,
    C.BUILDING_ENVELOPE,
    C.ELECTRICAL, C.PLUMBING,
)


@dataclass(frozen=True)
class ClassifierConfig:
    """Immutable bundle of rule tables + scoring parameters."""
    eligibility: Mapping[C, PaceEligibility] = field(default_factory=lambda: PACE_ELIGIBILITY)
    keywords: Mapping[C, tuple[str, ...]] = field(default_factory=lambda: CATEGORY_KEYWORDS)
    exclusion_rules: tuple[tuple[str, frozenset[C]], ...] = EXCLUSION_RULES
    category_order: tuple[C, ...] = CATEGORY_ORDER
    confidence_scale: float = 30.0
    short_circuit_min_length: int = 6
    short_circuit_confidence: float = 0.9

    def __post_init__(self) -> None:
        missing = [c.value for c in C if c not in self.eligibility]
        if missing:
            raise ValueError(f"eligibility table missing categories: {missing}")
        if C.NOT_ELIGIBLE in self.category_order:
            raise ValueError("not_eligible is the fallback and cannot be scored")
        if self.confidence_scale <= 0:
            raise ValueError("confidence_scale must be positive")

    @classmethod
    def from_settings(cls, settings: ClassifierSettings) -> ClassifierConfig:
        return replace(
            DEFAULT_CONFIG,
            confidence_scale=float(settings.confidence_scale),
            short_circuit_min_length=settings.short_circuit_min_length,
        )


DEFAULT_CONFIG = ClassifierConfig()

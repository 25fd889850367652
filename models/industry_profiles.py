"""
Industry Profile Registry
Static pollution characteristics per industry type, looked up by exact name
"""

import logging
from typing import Dict, Iterator, List, Optional

from models.records import IndustryProfile, Pathway, PersistenceType

logger = logging.getLogger(__name__)

GENERIC_INDUSTRY = "Generic Industrial Zone"

AIR, WATER, SOIL = Pathway.AIR, Pathway.WATER, Pathway.SOIL


def _profile(name, pollutants, risks, persistence, pathways, health, preventive="", multiplier=1.0):
    return IndustryProfile(
        name=name,
        primary_pollutants=tuple(pollutants),
        long_term_risks=tuple(risks),
        persistence_type=persistence,
        main_pathways=tuple(pathways),
        health_focus=health,
        preventive_focus=preventive,
        vulnerability_multiplier=multiplier,
    )


INDUSTRY_PROFILES: List[IndustryProfile] = [
    _profile(
        GENERIC_INDUSTRY,
        ["PM2.5", "PM10", "NOx", "VOCs"],
        ["General Air Quality Degradation", "Urban Heat Island Effect"],
        PersistenceType.SHORT_TO_MEDIUM, [AIR],
        "Respiratory Health", "General emission reduction",
    ),
    _profile(
        "Thermal Power Plant",
        ["PM2.5", "SO2", "NOx"],
        ["Fly ash deposition", "Groundwater contamination", "Acid deposition"],
        PersistenceType.MEDIUM_TO_LONG, [AIR, SOIL, WATER],
        "Respiratory & cardiovascular", "Stack monitoring & ash management",
    ),
    _profile(
        "Cement Manufacturing",
        ["PM10", "PM2.5", "NOx", "SO2"],
        ["Soil alkalization", "Heavy metal accumulation"],
        PersistenceType.MEDIUM, [AIR, SOIL],
        "Respiratory (Silicosis risk)", "Fugitive dust control",
    ),
    _profile(
        "Textile & Dyeing",
        ["VOCs", "Suspended Solids", "Chlorine"],
        ["Water table contamination", "Soil toxicity"],
        PersistenceType.LONG, [WATER, SOIL],
        "Dermatological & internal toxicity", "Effluent treatment & recycling",
    ),
    _profile(
        "Chemical / Petrochemical",
        ["VOCs", "PFAS", "Hazardous effluents"],
        ["Chemical persistence", "Bioaccumulation"],
        PersistenceType.VERY_LONG, [WATER, SOIL, AIR],
        "Chronic toxicity & endocrine disruption", "Leak detection & containment",
    ),
    _profile(
        "Steel & Metallurgy",
        ["PM2.5", "Heavy Metals", "CO", "SO2"],
        ["Heavy metal deposition", "Slag accumulation"],
        PersistenceType.VERY_LONG, [AIR, SOIL],
        "Neurological & respiratory", "Emission capture & waste recycling", 1.15,
    ),
    _profile(
        "Agriculture",
        ["Ammonia", "Pesticides", "Methane"],
        ["Nitrate leaching", "Eutrophication"],
        PersistenceType.MEDIUM, [WATER, SOIL, AIR],
        "Respiratory & waterborne exposure", "Nutrient management & pesticide controls", 1.0,
    ),
    _profile(
        "Fishing",
        ["Marine oil", "Diesel", "Plastic Waste"],
        ["Marine contamination", "Bioaccumulation"],
        PersistenceType.MEDIUM, [WATER],
        "Food chain contamination", "Waste control & spill response", 0.9,
    ),
    _profile(
        "Forestry",
        ["Diesel", "Herbicides"],
        ["Habitat loss", "Soil erosion"],
        PersistenceType.MEDIUM, [SOIL, AIR],
        "Ecosystem health", "Sustainable harvesting and erosion control", 0.85,
    ),
    _profile(
        "Mining",
        ["Mercury", "Lead", "Particulates"],
        ["Heavy metal contamination", "Acid mine drainage"],
        PersistenceType.VERY_LONG, [SOIL, WATER, AIR],
        "Neurological & chronic exposure", "Tailings management & containment", 1.25,
    ),
    _profile(
        "Oil Drilling",
        ["Methane", "VOCs", "Hydrocarbons"],
        ["Hydrocarbon contamination", "Climate contribution"],
        PersistenceType.LONG, [AIR, WATER],
        "Respiratory & long-term toxicity", "Spill prevention & gas reduction", 1.25,
    ),
    _profile(
        "Automobile Manufacturing",
        ["VOCs", "Solvents", "PM2.5"],
        ["VOCs emissions", "Heavy metal residues"],
        PersistenceType.MEDIUM, [AIR, SOIL],
        "Respiratory & dermal exposure", "VOCs capture & paint process controls", 1.05,
    ),
    _profile(
        "Textile Production",
        ["Dyes", "VOCs", "Suspended Solids"],
        ["Water contamination", "Soil toxicity"],
        PersistenceType.LONG, [WATER, SOIL],
        "Dermatological and systemic exposure", "Effluent treatment and process optimization", 1.0,
    ),
    _profile(
        "Construction",
        ["PM10", "PM2.5", "NOx"],
        ["Dust deposition", "Soil disturbance"],
        PersistenceType.SHORT, [AIR, SOIL],
        "Respiratory impacts", "Dust suppression and site controls", 1.0,
    ),
    _profile(
        "Food Processing",
        ["Organic waste", "Odors", "PM"],
        ["Localized contamination", "Effluent loading"],
        PersistenceType.SHORT, [WATER, SOIL],
        "Food safety and water quality", "Wastewater treatment and hygienic controls", 0.9,
    ),
]


class IndustryProfileRegistry:
    """
    Read-only table of industry profiles.

    Lookup is an exact, case-sensitive match on the industry name. Anything
    unrecognized resolves to the generic profile; lookup never raises.
    """

    def __init__(self, profiles: Optional[List[IndustryProfile]] = None):
        profiles = INDUSTRY_PROFILES if profiles is None else profiles
        self._profiles: Dict[str, IndustryProfile] = {p.name: p for p in profiles}
        if GENERIC_INDUSTRY not in self._profiles:
            raise ValueError(f"Registry requires a '{GENERIC_INDUSTRY}' profile")
        self.default = self._profiles[GENERIC_INDUSTRY]

    def lookup(self, name: Optional[str]) -> IndustryProfile:
        if name and name in self._profiles:
            return self._profiles[name]
        if name:
            logger.debug("Unknown industry '%s', using %s", name, GENERIC_INDUSTRY)
        return self.default

    def names(self) -> List[str]:
        return list(self._profiles)

    def __contains__(self, name) -> bool:
        return name in self._profiles

    def __iter__(self) -> Iterator[IndustryProfile]:
        return iter(self._profiles.values())

    def __len__(self) -> int:
        return len(self._profiles)


# Shared registry
registry = IndustryProfileRegistry()


def get_industry_profile(name: Optional[str]) -> IndustryProfile:
    return registry.lookup(name)

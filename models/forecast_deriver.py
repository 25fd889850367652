"""
Qualitative forecast derivation.

Re-applies the scoring rules to the current pollutant snapshot and the weather
trend summary to describe long-term accumulation risk, risk drivers, early
warnings and preventive actions. Nothing here predicts future concentrations.
"""

from typing import List, Optional

from models.records import (
    EarlyWarning,
    ForecastAssessment,
    ForecastOverallRisk,
    IndustryProfile,
    LongTermOutlook,
    LongTermRisk,
    Pathway,
    PersistenceType,
    PollutantReading,
    PreventiveAction,
    RiskDriver,
    TrackedPollutant,
    WeatherTrends,
)
from utils.constants import RISK_HIGH, RISK_LOW, RISK_MODERATE
from utils.helpers import clamp_score, classify_risk_level

DEFAULT_RAW_SCORE = 50
MAX_PREVENTIVE_ACTIONS = 4

PERSISTENT_TYPES = (PersistenceType.LONG, PersistenceType.VERY_LONG)

# profile pollutant -> (measurement key, "High" above this value)
DRIVER_THRESHOLDS = {
    TrackedPollutant.PM25.value: ("pm25", 60),
    TrackedPollutant.PM10.value: ("pm10", 100),
    TrackedPollutant.NOX.value: ("no2", 40),
    TrackedPollutant.SO2.value: ("so2", 40),
}


def _aqi_above(aqi: Optional[int], threshold: int) -> bool:
    return aqi is not None and aqi > threshold


# ==================== Overall ====================

def primary_concern(pollutants: PollutantReading, profile: IndustryProfile) -> str:
    if pollutants.value("pm25") > 150:
        return f"High Particulate Matter ({profile.health_focus})"
    return f"Routine {profile.primary_pollutants[0]} monitoring"


def forecast_overall_risk(
    pollutants: PollutantReading, profile: IndustryProfile, aqi: Optional[int]
) -> ForecastOverallRisk:
    raw = min(100.0, aqi / 3) if aqi is not None else DEFAULT_RAW_SCORE
    multiplier = profile.vulnerability_multiplier
    score = clamp_score(min(100.0, raw * multiplier))

    return ForecastOverallRisk(
        level=classify_risk_level(score),
        score=score,
        raw_score=clamp_score(raw),
        multiplier=multiplier,
        primary_concern=primary_concern(pollutants, profile),
        time_horizon="Short-term focus recommended",
    )


# ==================== Long-Term ====================

def accumulation_level(profile: IndustryProfile, aqi: Optional[int]) -> str:
    persistence = profile.persistence_type
    if persistence == PersistenceType.VERY_LONG:
        return RISK_HIGH
    if persistence in (PersistenceType.LONG, PersistenceType.MEDIUM_TO_LONG):
        return RISK_MODERATE
    if persistence == PersistenceType.MEDIUM and _aqi_above(aqi, 200):
        return RISK_MODERATE
    return RISK_LOW


def long_term_outlook(profile: IndustryProfile, aqi: Optional[int]) -> LongTermOutlook:
    pollutants = ", ".join(profile.primary_pollutants)
    water = profile.has_pathway(Pathway.WATER)
    soil = profile.has_pathway(Pathway.SOIL)

    return LongTermOutlook(
        chemical_accumulation=LongTermRisk(
            level=accumulation_level(profile, aqi),
            description=(
                f"Potential for accumulation of {pollutants} based on "
                f"{profile.persistence_type.value.lower()} persistence type."
            ),
            timeframe="Years to decades",
        ),
        groundwater_risk=LongTermRisk(
            level=RISK_MODERATE if water else RISK_LOW,
            description=(
                "Groundwater contamination risk requires monitoring due to industry effluents."
                if water else "Lower risk pathway for this industry type."
            ),
            timeframe="Decades",
        ),
        soil_contamination=LongTermRisk(
            level=RISK_MODERATE if soil else RISK_LOW,
            description=(
                "Soil loading possible from atmospheric deposition and operations."
                if soil else "Indirect risk via atmospheric deposition."
            ),
            timeframe="Years to decades",
        ),
    )


# ==================== Drivers & Warnings ====================

def driver_severity(pollutant: str, pollutants: PollutantReading) -> str:
    """High/Moderate for measured pollutants, Potential for everything else"""
    threshold = DRIVER_THRESHOLDS.get(pollutant)
    if threshold is None:
        return "Potential"
    key, limit = threshold
    if not pollutants.has(key):
        return "Potential"
    return RISK_HIGH if pollutants.value(key) > limit else RISK_MODERATE


def identify_risk_drivers(pollutants: PollutantReading, profile: IndustryProfile) -> List[RiskDriver]:
    persistence = profile.persistence_type.value
    drivers = [
        RiskDriver(
            factor=pollutant,
            severity=driver_severity(pollutant, pollutants),
            description="Primary pollutant for this sector.",
            persistence=persistence,
        )
        for pollutant in profile.primary_pollutants
    ]

    if profile.persistence_type in PERSISTENT_TYPES:
        pathways = " and ".join(p.value for p in profile.main_pathways)
        drivers.append(RiskDriver(
            factor="Chemical Persistence",
            severity=RISK_HIGH,
            description=(
                f"{profile.primary_pollutants[0]} associated with this industry resist degradation "
                f"and can accumulate in {pathways}."
            ),
            persistence=persistence,
        ))

    return drivers


def generate_early_warnings(
    trends: WeatherTrends, profile: IndustryProfile, aqi: Optional[int]
) -> List[EarlyWarning]:
    """Rule-based warnings; never empty"""
    warnings = []

    if _aqi_above(aqi, 200):
        warnings.append(EarlyWarning(
            type="air_quality",
            severity="attention",
            message="Air quality critically elevated. Immediate reduction in dust-generating activities advised.",
        ))

    if trends.wind_trend == "decreasing" and profile.emits(TrackedPollutant.PM25):
        warnings.append(EarlyWarning(
            type="weather",
            severity="attention",
            message="Dispersion Limited: Stagnant conditions likely to trap industrial emissions.",
        ))

    if profile.persistence_type in PERSISTENT_TYPES:
        warnings.append(EarlyWarning(
            type="accumulation",
            severity="attention",
            message="Long-Term Accumulation Likely: Persistent contaminants require strict containment.",
        ))
    elif _aqi_above(aqi, 150):
        warnings.append(EarlyWarning(
            type="accumulation",
            severity="info",
            message="Persistent Risk Detected: Sustained high levels may lead to environmental loading.",
        ))

    if not warnings:
        warnings.append(EarlyWarning(
            type="status",
            severity="normal",
            message="Conditions within manageable limits.",
        ))

    return warnings


# ==================== Actions ====================

def generate_preventive_actions(profile: IndustryProfile) -> List[PreventiveAction]:
    actions = [
        PreventiveAction(
            priority=1,
            action="Enhanced Environmental Monitoring",
            description=f"Increase monitoring frequency for {', '.join(profile.primary_pollutants)}.",
            timeframe="Immediate",
            scalability="All scales",
        )
    ]

    if profile.preventive_focus:
        actions.append(PreventiveAction(
            priority=2,
            action=profile.preventive_focus,
            description="Implement specific control measures aligned with industry best practices.",
            timeframe="Ongoing",
            scalability="Operational",
        ))

    if profile.has_pathway(Pathway.WATER):
        actions.append(PreventiveAction(
            priority=3,
            action="Effluent & Groundwater Management",
            description="Monitor groundwater near disposal zones and strengthen containment systems.",
            timeframe="Continuous",
            scalability="Site-specific",
        ))

    if profile.persistence_type == PersistenceType.VERY_LONG:
        actions.append(PreventiveAction(
            priority=4,
            action="Review Persistent Waste Handling",
            description="Audit disposal practices for persistent chemicals to prevent long-term bioaccumulation.",
            timeframe="Quarterly",
            scalability="Medium to Large",
        ))
    else:
        actions.append(PreventiveAction(
            priority=4,
            action="Stakeholder Communication",
            description="Inform workforce about current conditions and necessary precautions.",
            timeframe="Daily",
            scalability="All scales",
        ))

    actions.sort(key=lambda a: a.priority)
    return actions[:MAX_PREVENTIVE_ACTIONS]


def derive_forecast(
    pollutants: PollutantReading,
    trends: Optional[WeatherTrends],
    profile: IndustryProfile,
    aqi: Optional[int] = None,
) -> ForecastAssessment:
    """
    Build the qualitative forecast for one industry profile

    Args:
        pollutants: Current pollutant reading
        trends: Weather trend summary (None means all stable)
        profile: Industry profile
        aqi: Current AQI value, when known

    Returns:
        ForecastAssessment
    """
    trends = trends or WeatherTrends()

    return ForecastAssessment(
        overall_risk=forecast_overall_risk(pollutants, profile, aqi),
        long_term=long_term_outlook(profile, aqi),
        risk_drivers=identify_risk_drivers(pollutants, profile),
        early_warnings=generate_early_warnings(trends, profile, aqi),
        preventive_actions=generate_preventive_actions(profile),
        industry_context=profile,
    )

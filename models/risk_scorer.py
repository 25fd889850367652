"""
Current-conditions risk scoring.

Maps a pollutant reading, a weather observation and an industry profile to
four impact sub-scores (human health, ecosystems, environment,
socio-economic) and a weighted overall score. Every function here is total:
readings are already defaulted at the data-source boundary, and every score
is clamped to 0-100 before it is classified.
"""

from typing import List, Optional

from models.records import (
    AQIReading,
    EnvironmentalFactors,
    ImpactScore,
    Impacts,
    IndustryProfile,
    OverallRisk,
    Pathway,
    PollutantReading,
    RiskAssessment,
    TrackedPollutant,
    WeatherSnapshot,
)
from utils.constants import (
    HEALTH_CONCERNS,
    NO_ECOSYSTEM_CONCERNS,
    ROUTINE_MONITORING_CONCERN,
    SOCIO_ECONOMIC_CONCERNS,
    SOCIO_ECONOMIC_DESCRIPTIONS,
    WHO_GUIDELINES,
)
from utils.helpers import clamp_score, classify_aqi, classify_risk_level, get_risk_color

HEALTH_BASE_WEIGHTS = {"pm25": 40, "pm10": 25, "no2": 20, "o3": 15}
INDUSTRY_WEIGHT_BONUS = 10

OVERALL_WEIGHTS = {
    "human_health": 0.35,
    "ecosystems": 0.20,
    "environment": 0.25,
    "socio_economic": 0.20,
}

PRODUCTIVITY_PM25_THRESHOLD = 100
LOW_HUMIDITY_THRESHOLD = 30
VOLATILIZATION_TEMPERATURE = 30


def _ratio(pollutants: PollutantReading, key: str) -> float:
    return pollutants.value(key) / WHO_GUIDELINES[key]


def _impact(score: int, description: str, concerns: List[str], **extra) -> ImpactScore:
    level = classify_risk_level(score)
    return ImpactScore(
        score=score,
        level=level,
        description=description,
        color=get_risk_color(level),
        concerns=concerns,
        **extra,
    )


def dispersion_factor(wind_speed: float) -> float:
    """Stronger wind disperses particulates: >15 km/h 0.7, >8 km/h 0.85, else 1.0"""
    if wind_speed > 15:
        return 0.7
    if wind_speed > 8:
        return 0.85
    return 1.0


# ==================== Impact Dimensions ====================

def score_health(pollutants: PollutantReading, profile: IndustryProfile) -> ImpactScore:
    weights = dict(HEALTH_BASE_WEIGHTS)
    if profile.emits(TrackedPollutant.PM25):
        weights["pm25"] += INDUSTRY_WEIGHT_BONUS
    if profile.emits(TrackedPollutant.NOX):
        weights["no2"] += INDUSTRY_WEIGHT_BONUS

    total_weight = sum(weights.values())
    raw = sum(
        _ratio(pollutants, key) * (weight / total_weight * 100)
        for key, weight in weights.items()
    )
    score = clamp_score(raw)

    pm25 = pollutants.value("pm25")
    pm10 = pollutants.value("pm10")
    primary = TrackedPollutant.PM25.value if pm25 > pm10 * 0.4 else TrackedPollutant.PM10.value

    return _impact(
        score,
        f"{profile.health_focus} risks assessed based on current levels.",
        list(HEALTH_CONCERNS[classify_risk_level(score)]),
        primary_pollutant=primary,
    )


def ecosystem_concerns(pollutants: PollutantReading) -> List[str]:
    concerns = []
    if pollutants.value("so2") > 20:
        concerns.append("Acid deposition potential")
    if pollutants.value("o3") > 60:
        concerns.append("Vegetation ozone damage")
    if pollutants.value("no2") > 30:
        concerns.append("Nitrogen loading in ecosystems")
    return concerns or [NO_ECOSYSTEM_CONCERNS]


def score_ecosystems(pollutants: PollutantReading, weather: WeatherSnapshot, profile: IndustryProfile) -> ImpactScore:
    raw = (
        _ratio(pollutants, "no2") * 30
        + _ratio(pollutants, "so2") * 35
        + _ratio(pollutants, "o3") * 25
    )
    # dry-air stress
    if weather.humidity < LOW_HUMIDITY_THRESHOLD:
        raw += 10

    pathways = ", ".join(p.value for p in profile.main_pathways)
    return _impact(
        clamp_score(raw),
        f"{pathways} pathways analyzed for ecosystem stress.",
        ecosystem_concerns(pollutants),
    )


def score_environment(pollutants: PollutantReading, weather: WeatherSnapshot, profile: IndustryProfile) -> ImpactScore:
    pm25_ratio = _ratio(pollutants, "pm25")
    pm10_ratio = _ratio(pollutants, "pm10")
    factor = dispersion_factor(weather.wind_speed)

    raw = (
        pm25_ratio * 35 * factor
        + pm10_ratio * 30 * factor
        + (10 - min(weather.visibility, 10)) * 3.5
    )

    components = {
        "air": classify_risk_level(clamp_score((pm25_ratio + pm10_ratio) * 25)),
        "water": "Monitoring" if profile.has_pathway(Pathway.WATER) else "Stable",
        "soil": "Attention" if profile.has_pathway(Pathway.SOIL) else "Stable",
    }

    pathways = "/".join(p.value for p in profile.main_pathways)
    return _impact(
        clamp_score(raw),
        f"Risk analysis for {pathways} environments.",
        [],
        components=components,
    )


def score_socio_economic(pollutants: PollutantReading, health: ImpactScore) -> ImpactScore:
    pm25 = pollutants.value("pm25")
    raw = health.score * 0.5 + _ratio(pollutants, "pm25") * 25
    if pm25 > PRODUCTIVITY_PM25_THRESHOLD:
        raw += 15

    score = clamp_score(raw)
    level = classify_risk_level(score)
    return _impact(score, SOCIO_ECONOMIC_DESCRIPTIONS[level], list(SOCIO_ECONOMIC_CONCERNS[level]))


# ==================== Composite ====================

def identify_primary_concerns(
    pollutants: PollutantReading, weather: WeatherSnapshot, profile: IndustryProfile
) -> List[str]:
    """Rule-based concern list; never empty"""
    concerns = []

    if pollutants.value("pm25") > PRODUCTIVITY_PM25_THRESHOLD:
        if profile.emits(TrackedPollutant.PM25):
            concerns.append(
                "High PM2.5 levels combined with combustion-based industry increase respiratory exposure risk."
            )
        else:
            concerns.append("Elevated ambient PM2.5 requires monitoring.")

    if profile.emits(TrackedPollutant.VOCS) and weather.temperature > VOLATILIZATION_TEMPERATURE:
        concerns.append("High temperatures may increase VOC volatilization risk.")

    return concerns or [ROUTINE_MONITORING_CONCERN]


def score_conditions(
    pollutants: PollutantReading,
    weather: WeatherSnapshot,
    profile: IndustryProfile,
    aqi: Optional[AQIReading] = None,
    environmental_factors: Optional[EnvironmentalFactors] = None,
) -> RiskAssessment:
    """
    Score current conditions for one industry profile

    Args:
        pollutants: Normalized pollutant reading
        weather: Current weather observation
        profile: Industry profile the assessment is made for
        aqi: AQI reading from the data source, when one exists
        environmental_factors: Weather-derived dispersion factors to echo back

    Returns:
        RiskAssessment with the four impacts and the overall composite
    """
    health = score_health(pollutants, profile)
    ecosystems = score_ecosystems(pollutants, weather, profile)
    environment = score_environment(pollutants, weather, profile)
    socio_economic = score_socio_economic(pollutants, health)

    overall = clamp_score(
        health.score * OVERALL_WEIGHTS["human_health"]
        + ecosystems.score * OVERALL_WEIGHTS["ecosystems"]
        + environment.score * OVERALL_WEIGHTS["environment"]
        + socio_economic.score * OVERALL_WEIGHTS["socio_economic"]
    )
    level = classify_risk_level(overall)

    if aqi is not None:
        aqi_value, category = aqi.value, aqi.category
    else:
        aqi_value = min(500, overall * 5)
        category = classify_aqi(aqi_value)

    return RiskAssessment(
        overall_risk=OverallRisk(
            score=overall,
            level=level,
            aqi=aqi_value,
            category=category,
            color=get_risk_color(level),
        ),
        impacts=Impacts(
            human_health=health,
            ecosystems=ecosystems,
            environment=environment,
            socio_economic=socio_economic,
        ),
        primary_concerns=identify_primary_concerns(pollutants, weather, profile),
        environmental_factors=environmental_factors,
        industry_context=profile,
    )

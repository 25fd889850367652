"""
Normalized records shared by the data source, the scoring engine and the API.

Provider JSON is converted into these models at the data-source boundary, so
the scorers only ever see validated, defaulted values. All records are frozen
and serialize with camelCase keys (``by_alias=True``).
"""

import math
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class Record(BaseModel):
    """Immutable base record with camelCase aliases"""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json")


def _finite_or_zero(value) -> float:
    if value is None:
        return 0.0
    try:
        value = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(value) or value < 0:
        return 0.0
    return value


# ==================== Enumerations ====================

class PersistenceType(str, Enum):
    SHORT = "Short"
    SHORT_TO_MEDIUM = "Short to Medium"
    MEDIUM = "Medium"
    MEDIUM_TO_LONG = "Medium to Long"
    LONG = "Long"
    VERY_LONG = "Very Long"


class Pathway(str, Enum):
    AIR = "Air"
    WATER = "Water"
    SOIL = "Soil"


class TrackedPollutant(str, Enum):
    """Pollutant identifiers the scorers can match against a measurement"""

    PM25 = "PM2.5"
    PM10 = "PM10"
    NOX = "NOx"
    SO2 = "SO2"
    CO = "CO"
    VOCS = "VOCs"


# ==================== Air Quality ====================

class Measurement(Record):
    value: float
    unit: str = "µg/m³"
    status: Optional[str] = None
    who_guideline: Optional[float] = None
    exceedance: Optional[str] = None

    @field_validator("value", mode="before")
    @classmethod
    def _clean_value(cls, v):
        return _finite_or_zero(v)


class PollutantReading(Record):
    """Pollutant key (pm25, pm10, no2, o3, so2, co) -> Measurement"""

    measurements: Dict[str, Measurement] = Field(default_factory=dict)

    def value(self, key: str) -> float:
        """Measured value for ``key``; missing keys read as zero"""
        measurement = self.measurements.get(key)
        if measurement is None:
            return 0.0
        return measurement.value

    def has(self, key: str) -> bool:
        return key in self.measurements

    def values(self) -> Dict[str, float]:
        return {key: m.value for key, m in self.measurements.items()}

    @classmethod
    def from_values(cls, values: Dict[str, float], units: Optional[Dict[str, str]] = None) -> "PollutantReading":
        """Build a bare reading from plain numbers (tests and the alert surface)"""
        units = units or {}
        return cls(measurements={
            key: Measurement(value=value, unit=units.get(key, "µg/m³"))
            for key, value in values.items()
        })

    def to_dict(self) -> Dict[str, Any]:
        return {key: m.to_dict() for key, m in self.measurements.items()}


class AQIReading(Record):
    value: int = Field(ge=0, le=500)
    category: str
    color: str


class AirQualitySnapshot(Record):
    city: str
    is_demo: bool
    source: str
    timestamp: str
    pollutants: PollutantReading
    aqi: Optional[AQIReading] = None
    summary: str = ""

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["pollutants"] = self.pollutants.to_dict()
        return data


# ==================== Weather ====================

NON_NEGATIVE_WEATHER = ("humidity", "wind_speed", "visibility")


class WeatherSnapshot(Record):
    """Current observation; absent numbers take neutral defaults"""

    temperature: float = 20.0
    feels_like: Optional[float] = None
    humidity: float = 50.0
    wind_speed: float = 10.0
    wind_direction: str = "N"
    visibility: float = 10.0
    pressure: float = 1013.0
    description: str = "Clear"
    clouds: float = 0.0

    @field_validator("temperature", "humidity", "wind_speed", "visibility", "pressure", "clouds", mode="before")
    @classmethod
    def _neutral_default(cls, v, info):
        if v is None:
            return cls.model_fields[info.field_name].default
        try:
            v = float(v)
        except (TypeError, ValueError):
            return cls.model_fields[info.field_name].default
        if not math.isfinite(v):
            return cls.model_fields[info.field_name].default
        if v < 0 and info.field_name in NON_NEGATIVE_WEATHER:
            return cls.model_fields[info.field_name].default
        return v


class EnvironmentalFactors(Record):
    pollutant_dispersion: str = "moderate"
    inversion_risk: str = "low"
    dust_risk: str = "low"
    rain_washout: str = "none"


class WeatherReport(Record):
    city: str
    is_demo: bool
    source: str
    timestamp: str
    current: WeatherSnapshot
    environmental_factors: EnvironmentalFactors


class DailyForecast(Record):
    date: str
    temp_high: float
    temp_low: float
    humidity: float
    wind_speed: float
    rain_chance: float = 0.0
    condition: str = "Clear"


class WeatherTrends(Record):
    temperature_trend: str = "stable"
    humidity_trend: str = "stable"
    wind_trend: str = "stable"
    rain_outlook: str = "low"


class WeatherForecastReport(Record):
    city: str
    is_demo: bool
    source: str
    timestamp: str
    days: Tuple[DailyForecast, ...] = ()
    trends: WeatherTrends = Field(default_factory=WeatherTrends)


# ==================== Industry ====================

class IndustryProfile(Record):
    name: str
    primary_pollutants: Tuple[str, ...]
    long_term_risks: Tuple[str, ...]
    persistence_type: PersistenceType
    main_pathways: Tuple[Pathway, ...]
    health_focus: str
    preventive_focus: str = ""
    vulnerability_multiplier: float = 1.0

    def emits(self, pollutant: TrackedPollutant) -> bool:
        return pollutant.value in self.primary_pollutants

    def has_pathway(self, pathway: Pathway) -> bool:
        return pathway in self.main_pathways


# ==================== Assessments ====================

class ImpactScore(Record):
    score: int = Field(ge=0, le=100)
    level: str
    description: str
    color: str
    concerns: List[str] = Field(default_factory=list)
    primary_pollutant: Optional[str] = None
    components: Optional[Dict[str, str]] = None


class OverallRisk(Record):
    score: int = Field(ge=0, le=100)
    level: str
    aqi: int
    category: str
    color: str


class Impacts(Record):
    human_health: ImpactScore
    ecosystems: ImpactScore
    environment: ImpactScore
    socio_economic: ImpactScore


class RiskAssessment(Record):
    overall_risk: OverallRisk
    impacts: Impacts
    primary_concerns: List[str]
    environmental_factors: Optional[EnvironmentalFactors] = None
    industry_context: IndustryProfile


class ForecastOverallRisk(Record):
    level: str
    score: int = Field(ge=0, le=100)
    raw_score: int = Field(ge=0, le=100)
    multiplier: float
    primary_concern: str
    time_horizon: str


class LongTermRisk(Record):
    level: str
    description: str
    timeframe: str


class LongTermOutlook(Record):
    chemical_accumulation: LongTermRisk
    groundwater_risk: LongTermRisk
    soil_contamination: LongTermRisk


class RiskDriver(Record):
    factor: str
    severity: str
    description: str
    persistence: str


class EarlyWarning(Record):
    type: str
    severity: str
    message: str


class PreventiveAction(Record):
    priority: int
    action: str
    description: str
    timeframe: str
    scalability: str


class ForecastAssessment(Record):
    overall_risk: ForecastOverallRisk
    long_term: LongTermOutlook
    risk_drivers: List[RiskDriver]
    early_warnings: List[EarlyWarning]
    preventive_actions: List[PreventiveAction] = Field(max_length=4)
    industry_context: IndustryProfile


# ==================== Narrative ====================

class ForecastNarrative(Record):
    """Structured AI output for the forecast view"""

    stress_windows: List[Dict[str, Any]] = Field(default_factory=list)
    exposure_breakdown: List[Dict[str, Any]] = Field(default_factory=list)
    behavior_analysis: str = ""
    early_warnings: List[Dict[str, Any]] = Field(default_factory=list)

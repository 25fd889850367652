"""
Data Preprocessing for EcoSphere API
Normalizes provider payloads into the strict records used by the scoring engine
"""

from typing import Dict, List, Optional

import numpy as np
import pandas as pd

from models.records import (
    AirQualitySnapshot,
    AQIReading,
    DailyForecast,
    EnvironmentalFactors,
    Measurement,
    PollutantReading,
    WeatherForecastReport,
    WeatherReport,
    WeatherSnapshot,
    WeatherTrends,
)
from utils.constants import DEMO_AIR_QUALITY, POLLUTANT_KEYS, POLLUTANT_UNITS, WHO_GUIDELINES
from utils.helpers import (
    calculate_aqi_from_pm25,
    classify_aqi,
    format_exceedance,
    get_aqi_color,
    get_pollutant_status,
    summarize_air_quality,
    utc_timestamp,
    wind_direction_from_degrees,
)

MAX_FORECAST_DAYS = 5


# ==================== Air Quality ====================

def build_measurement(key: str, value: float, unit: Optional[str] = None) -> Measurement:
    measurement = Measurement(value=value, unit=unit or POLLUTANT_UNITS.get(key, "µg/m³"))
    return measurement.model_copy(update={
        "status": get_pollutant_status(key, measurement.value),
        "who_guideline": WHO_GUIDELINES.get(key),
        "exceedance": format_exceedance(key, measurement.value),
    })


def build_aqi_reading(pm25: float) -> AQIReading:
    value = calculate_aqi_from_pm25(pm25)
    category = classify_aqi(value)
    return AQIReading(value=value, category=category, color=get_aqi_color(category))


def demo_values(city: str) -> Dict[str, float]:
    return DEMO_AIR_QUALITY.get(city, DEMO_AIR_QUALITY["Delhi"])


def normalize_air_quality(
    measurements: Dict[str, dict],
    city: str,
    source: str,
    is_demo: bool = False,
) -> AirQualitySnapshot:
    """
    Build an AirQualitySnapshot from raw measurements

    Parameters the provider did not report are filled from the city's
    demo values, so every tracked pollutant is always present.

    Args:
        measurements: key -> {"value": ..., "unit": ...}
        city: City name
        source: Provider label
        is_demo: Whether the values are demo data

    Returns:
        AirQualitySnapshot
    """
    fallback = demo_values(city)
    normalized = {}

    for key in POLLUTANT_KEYS:
        raw = measurements.get(key)
        if raw is not None and raw.get("value") is not None:
            normalized[key] = build_measurement(key, raw["value"], raw.get("unit"))
        else:
            normalized[key] = build_measurement(key, fallback[key])

    pm25 = normalized["pm25"].value
    return AirQualitySnapshot(
        city=city,
        is_demo=is_demo,
        source=source,
        timestamp=utc_timestamp(),
        pollutants=PollutantReading(measurements=normalized),
        aqi=build_aqi_reading(pm25),
        summary=summarize_air_quality(pm25),
    )


def sensor_parameters(location: dict) -> Dict[int, dict]:
    """Map sensor id -> parameter info from an OpenAQ v3 location record"""
    return {
        sensor["id"]: sensor.get("parameter") or {}
        for sensor in location.get("sensors", []) or []
        if sensor.get("id") is not None
    }


def parse_openaq_latest(payload: dict, sensors: Optional[Dict[int, dict]] = None) -> Dict[str, dict]:
    """
    Extract {parameter: {value, unit}} from an OpenAQ v3 latest response

    Results carry either an inline parameter or only a sensor id, which is
    resolved through ``sensors``. Names are lower-cased ("pm2.5" -> "pm25").
    """
    sensors = sensors or {}
    measurements = {}
    for result in payload.get("results", []) or []:
        parameter = result.get("parameter") or sensors.get(result.get("sensorsId")) or {}
        name = parameter.get("name")
        value = result.get("value")
        if not name or value is None:
            continue
        measurements[name.lower().replace(".", "")] = {
            "value": value,
            "unit": result.get("unit") or parameter.get("units"),
        }
    return measurements


# ==================== Weather ====================

def calculate_environmental_factors(wind_ms: float, temp: float, humidity: float, rain_1h: float) -> EnvironmentalFactors:
    """
    Dispersion, inversion, dust and washout indicators from a live observation

    Args:
        wind_ms: Wind speed in m/s
        temp: Temperature in °C
        humidity: Relative humidity in %
        rain_1h: Rain volume over the last hour in mm
    """
    if wind_ms > 3:
        dispersion = "good"
    elif wind_ms > 1.5:
        dispersion = "moderate"
    else:
        dispersion = "poor"

    if temp < 10 and wind_ms < 2:
        inversion = "high"
    elif temp < 15:
        inversion = "moderate"
    else:
        inversion = "low"

    if humidity < 40 and wind_ms > 5:
        dust = "high"
    elif humidity < 50:
        dust = "moderate"
    else:
        dust = "low"

    return EnvironmentalFactors(
        pollutant_dispersion=dispersion,
        inversion_risk=inversion,
        dust_risk=dust,
        rain_washout="active" if rain_1h > 0 else "none",
    )


def normalize_current_weather(payload: dict, city: str, source: str = "OpenWeatherMap") -> WeatherReport:
    """Build a WeatherReport from an OpenWeatherMap /weather response"""
    main = payload.get("main") or {}
    wind = payload.get("wind") or {}
    weather = (payload.get("weather") or [{}])[0]
    wind_ms = wind.get("speed") or 0
    visibility_m = payload.get("visibility") or 10000

    current = WeatherSnapshot(
        temperature=_rounded(main.get("temp")),
        feels_like=_rounded(main.get("feels_like")),
        humidity=main.get("humidity"),
        pressure=main.get("pressure"),
        wind_speed=round(wind_ms * 3.6),
        wind_direction=wind_direction_from_degrees(wind.get("deg")),
        visibility=round(visibility_m / 1000),
        description=weather.get("description") or "Clear",
        clouds=(payload.get("clouds") or {}).get("all") or 0,
    )

    factors = calculate_environmental_factors(
        wind_ms,
        main.get("temp") if main.get("temp") is not None else 20,
        main.get("humidity") if main.get("humidity") is not None else 50,
        (payload.get("rain") or {}).get("1h") or 0,
    )

    return WeatherReport(
        city=city,
        is_demo=False,
        source=source,
        timestamp=utc_timestamp(),
        current=current,
        environmental_factors=factors,
    )


def _rounded(value):
    return None if value is None else round(value)


# ==================== Forecast ====================

def aggregate_daily_forecast(items: List[dict], max_days: int = MAX_FORECAST_DAYS) -> List[DailyForecast]:
    """
    Aggregate 3-hourly forecast items into per-day summaries

    Args:
        items: OpenWeatherMap /forecast "list" entries
        max_days: Number of days to keep

    Returns:
        Up to max_days DailyForecast records, in date order
    """
    rows = []
    for item in items:
        main = item.get("main") or {}
        if item.get("dt") is None or main.get("temp") is None:
            continue
        rows.append({
            "timestamp": item["dt"],
            "temp": main["temp"],
            "humidity": main.get("humidity", np.nan),
            "wind": (item.get("wind") or {}).get("speed", 0) * 3.6,
            "rain": (item.get("rain") or {}).get("3h", 0),
            "condition": ((item.get("weather") or [{}])[0]).get("main", "Clear"),
        })

    if not rows:
        return []

    df = pd.DataFrame(rows)
    df["date"] = pd.to_datetime(df["timestamp"], unit="s", utc=True).dt.date

    daily = df.groupby("date", sort=True).agg(
        temp_high=("temp", "max"),
        temp_low=("temp", "min"),
        humidity=("humidity", "mean"),
        wind_speed=("wind", "mean"),
        rain=("rain", "sum"),
        condition=("condition", lambda s: s.value_counts().index[0]),
    ).head(max_days)

    days = []
    for date, row in daily.iterrows():
        humidity = 50 if pd.isna(row["humidity"]) else round(float(row["humidity"]))
        days.append(DailyForecast(
            date=date.isoformat(),
            temp_high=round(float(row["temp_high"])),
            temp_low=round(float(row["temp_low"])),
            humidity=humidity,
            wind_speed=round(float(row["wind_speed"])),
            rain_chance=min(100, round(float(row["rain"]) * 10)) if row["rain"] > 0 else 0,
            condition=str(row["condition"]),
        ))
    return days


def _trend(first: float, last: float, band: float) -> str:
    if last > first + band:
        return "increasing"
    if last < first - band:
        return "decreasing"
    return "stable"


def analyze_trends(days: List[DailyForecast]) -> WeatherTrends:
    """Compare the first and last forecast day"""
    if len(days) < 2:
        return WeatherTrends()

    first, last = days[0], days[-1]
    if any(d.rain_chance > 60 for d in days):
        rain = "likely"
    elif any(d.rain_chance > 30 for d in days):
        rain = "possible"
    else:
        rain = "low"

    return WeatherTrends(
        temperature_trend=_trend(first.temp_high, last.temp_high, 2),
        humidity_trend=_trend(first.humidity, last.humidity, 10),
        wind_trend=_trend(first.wind_speed, last.wind_speed, 5),
        rain_outlook=rain,
    )


def normalize_forecast(payload: dict, city: str, source: str = "OpenWeatherMap") -> WeatherForecastReport:
    days = aggregate_daily_forecast(payload.get("list") or [])
    return WeatherForecastReport(
        city=city,
        is_demo=False,
        source=source,
        timestamp=utc_timestamp(),
        days=tuple(days),
        trends=analyze_trends(days),
    )

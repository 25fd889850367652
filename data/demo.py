"""
Demo Data Generator
Deterministic per-city baselines with a small random variation, used whenever
live providers are unavailable. Every record is tagged is_demo=True.
"""

from datetime import date, timedelta
from typing import Optional

import numpy as np

from data.preprocessor import build_aqi_reading, build_measurement, demo_values
from models.records import (
    AirQualitySnapshot,
    DailyForecast,
    EnvironmentalFactors,
    PollutantReading,
    WeatherForecastReport,
    WeatherReport,
    WeatherSnapshot,
    WeatherTrends,
)
from utils.constants import DEMO_FORECAST_CONDITIONS, DEMO_WEATHER, POLLUTANT_KEYS
from utils.helpers import summarize_air_quality, utc_timestamp

DEMO_SOURCE = "demo"

AIR_VARIATION = 0.10
WEATHER_VARIATION = 0.05


def _rng(rng: Optional[np.random.Generator]) -> np.random.Generator:
    return rng if rng is not None else np.random.default_rng()


def _vary(rng: np.random.Generator, base: float, spread: float) -> float:
    return base * rng.uniform(1 - spread, 1 + spread)


def demo_weather_values(city: str) -> dict:
    return DEMO_WEATHER.get(city, DEMO_WEATHER["Delhi"])


def demo_air_quality(city: str, rng: Optional[np.random.Generator] = None) -> AirQualitySnapshot:
    """
    Demo air quality for a city (unknown cities use Delhi)

    Values vary by ±10% around the baseline. AQI and summary are
    computed from the baseline so they stay stable between calls.
    """
    rng = _rng(rng)
    base = demo_values(city)

    measurements = {}
    for key in POLLUTANT_KEYS:
        value = _vary(rng, base[key], AIR_VARIATION)
        value = round(value, 2) if key == "co" else round(value)
        measurements[key] = build_measurement(key, value)

    return AirQualitySnapshot(
        city=city,
        is_demo=True,
        source=DEMO_SOURCE,
        timestamp=utc_timestamp(),
        pollutants=PollutantReading(measurements=measurements),
        aqi=build_aqi_reading(base["pm25"]),
        summary=summarize_air_quality(base["pm25"]),
    )


def demo_weather(city: str, rng: Optional[np.random.Generator] = None) -> WeatherReport:
    """Demo weather for a city, ±5% variation; factors use the baseline"""
    rng = _rng(rng)
    base = demo_weather_values(city)

    current = WeatherSnapshot(
        temperature=round(_vary(rng, base["temp"], WEATHER_VARIATION)),
        feels_like=round(_vary(rng, base["temp"], WEATHER_VARIATION) * 1.02),
        humidity=round(_vary(rng, base["humidity"], WEATHER_VARIATION)),
        pressure=base["pressure"],
        wind_speed=round(_vary(rng, base["wind_speed"], WEATHER_VARIATION)),
        wind_direction=base["wind_dir"],
        visibility=round(_vary(rng, base["visibility"], WEATHER_VARIATION)),
        description=base["description"],
        clouds=round(rng.uniform(30, 70)),
    )

    factors = EnvironmentalFactors(
        pollutant_dispersion="good" if base["wind_speed"] > 10 else "poor",
        inversion_risk="high" if base["temp"] < 15 else "low",
        dust_risk="moderate" if base["humidity"] < 40 else "low",
        rain_washout="none",
    )

    return WeatherReport(
        city=city,
        is_demo=True,
        source=DEMO_SOURCE,
        timestamp=utc_timestamp(),
        current=current,
        environmental_factors=factors,
    )


def demo_forecast(city: str, rng: Optional[np.random.Generator] = None, days: int = 5) -> WeatherForecastReport:
    """Five demo forecast days; the trend summary is fixed (wind decreasing)"""
    rng = _rng(rng)
    base = demo_weather_values(city)
    today = date.today()

    forecast = []
    for offset in range(days):
        forecast.append(DailyForecast(
            date=(today + timedelta(days=offset)).isoformat(),
            temp_high=round(base["temp"] + 3 + rng.uniform(0, 4)),
            temp_low=round(base["temp"] - 5 - rng.uniform(0, 3)),
            humidity=round(base["humidity"] + rng.uniform(-10, 10)),
            wind_speed=max(0, round(base["wind_speed"] + rng.uniform(-3, 3))),
            rain_chance=round(rng.uniform(0, 40)),
            condition=DEMO_FORECAST_CONDITIONS[int(rng.integers(len(DEMO_FORECAST_CONDITIONS)))],
        ))

    return WeatherForecastReport(
        city=city,
        is_demo=True,
        source=DEMO_SOURCE,
        timestamp=utc_timestamp(),
        days=tuple(forecast),
        trends=WeatherTrends(
            temperature_trend="stable",
            humidity_trend="stable",
            wind_trend="decreasing",
            rain_outlook="low",
        ),
    )

"""
Tests for provider payload normalization and demo data.

Tests cover:
- Air quality: missing parameters filled from demo values, AQI and status per pollutant
- OpenAQ v3 latest parsing with inline parameters and sensor lookups
- Current weather: unit conversion, neutral defaults, environmental factors
- Forecast: 3-hourly items aggregated per day, trend analysis
- Demo data: flagged as demo, stable AQI, unknown cities use Delhi
"""

import numpy as np
import pytest

from data.demo import demo_air_quality, demo_forecast, demo_weather
from data.preprocessor import (
    aggregate_daily_forecast,
    analyze_trends,
    calculate_environmental_factors,
    normalize_air_quality,
    normalize_current_weather,
    normalize_forecast,
    parse_openaq_latest,
    sensor_parameters,
)
from models.records import DailyForecast, WeatherSnapshot

DAY_ONE = 1704067200  # 2024-01-01T00:00:00Z
DAY_TWO = DAY_ONE + 86400


def _item(dt, temp, humidity, wind_ms, condition, rain=None):
    item = {
        "dt": dt,
        "main": {"temp": temp, "humidity": humidity},
        "wind": {"speed": wind_ms},
        "weather": [{"main": condition}],
    }
    if rain is not None:
        item["rain"] = {"3h": rain}
    return item


class TestAirQualityNormalization:
    """Test suite for air quality normalization."""

    def test_missing_parameters_filled_from_demo(self):
        snapshot = normalize_air_quality({"pm25": {"value": 40, "unit": "µg/m³"}}, "Mumbai", source="OpenAQ")

        values = snapshot.pollutants.values()
        assert values["pm25"] == 40
        assert values["pm10"] == 142
        assert set(values) == {"pm25", "pm10", "no2", "o3", "so2", "co"}
        assert snapshot.is_demo is False
        assert snapshot.aqi.value == 67
        assert snapshot.aqi.category == "Satisfactory"

    def test_measurement_status_and_exceedance(self):
        snapshot = normalize_air_quality({"pm25": {"value": 156}}, "Delhi", source="OpenAQ")
        pm25 = snapshot.pollutants.measurements["pm25"]
        assert pm25.status == "hazardous"
        assert pm25.who_guideline == 15.0
        assert pm25.exceedance == "10.4"
        assert snapshot.pollutants.measurements["co"].unit == "mg/m³"

    def test_flat_serialization(self):
        data = normalize_air_quality({}, "Delhi", source="OpenAQ").to_dict()
        assert data["pollutants"]["pm25"]["whoGuideline"] == 15.0
        assert data["isDemo"] is False
        assert data["aqi"]["category"] == "Very Poor"

    def test_parse_openaq_latest_with_sensor_lookup(self):
        location = {
            "id": 8118,
            "sensors": [
                {"id": 1, "parameter": {"name": "pm25", "units": "µg/m³"}},
                {"id": 2, "parameter": {"name": "no2", "units": "ppb"}},
            ],
        }
        payload = {"results": [
            {"sensorsId": 1, "value": 88.0},
            {"sensorsId": 2, "value": 31.5},
            {"sensorsId": 3, "value": 5.0},
            {"parameter": {"name": "PM2.5"}, "value": None},
        ]}

        measurements = parse_openaq_latest(payload, sensor_parameters(location))

        assert measurements == {
            "pm25": {"value": 88.0, "unit": "µg/m³"},
            "no2": {"value": 31.5, "unit": "ppb"},
        }

    def test_parse_openaq_inline_parameter(self):
        payload = {"results": [{"parameter": {"name": "PM2.5", "units": "µg/m³"}, "value": 12, "unit": "µg/m³"}]}
        assert parse_openaq_latest(payload) == {"pm25": {"value": 12, "unit": "µg/m³"}}


class TestWeatherNormalization:
    """Test suite for current weather normalization."""

    def test_units_converted(self):
        payload = {
            "main": {"temp": 25.4, "feels_like": 26.1, "humidity": 35, "pressure": 1009},
            "wind": {"speed": 5, "deg": 315},
            "visibility": 6000,
            "weather": [{"description": "haze"}],
            "clouds": {"all": 40},
        }

        report = normalize_current_weather(payload, "Delhi")

        current = report.current
        assert current.temperature == 25
        assert current.wind_speed == 18
        assert current.wind_direction == "NW"
        assert current.visibility == 6
        assert current.description == "haze"
        assert report.environmental_factors.pollutant_dispersion == "good"
        assert report.environmental_factors.dust_risk == "moderate"
        assert report.environmental_factors.inversion_risk == "low"
        assert report.is_demo is False

    def test_missing_fields_take_neutral_defaults(self):
        report = normalize_current_weather({}, "Pune")
        assert report.current.temperature == 20
        assert report.current.humidity == 50
        assert report.current.visibility == 10
        assert report.current.description == "Clear"

    def test_snapshot_rejects_non_finite(self):
        snapshot = WeatherSnapshot(temperature=float("nan"), humidity="n/a", wind_speed=None)
        assert snapshot.temperature == 20
        assert snapshot.humidity == 50
        assert snapshot.wind_speed == 10

    @pytest.mark.parametrize("wind_ms,temp,humidity,rain,expected", [
        (1.0, 5, 80, 0, ("poor", "high", "low", "none")),
        (2.0, 12, 45, 0.4, ("moderate", "moderate", "moderate", "active")),
        (6.0, 30, 30, 0, ("good", "low", "high", "none")),
    ])
    def test_environmental_factors(self, wind_ms, temp, humidity, rain, expected):
        factors = calculate_environmental_factors(wind_ms, temp, humidity, rain)
        assert (factors.pollutant_dispersion, factors.inversion_risk,
                factors.dust_risk, factors.rain_washout) == expected


class TestForecastAggregation:
    """Test suite for daily forecast aggregation."""

    @pytest.fixture
    def items(self):
        return [
            _item(DAY_ONE, 10, 60, 2, "Clear"),
            _item(DAY_ONE + 10800, 14, 70, 2, "Clear"),
            _item(DAY_TWO, 20, 40, 4, "Rain", rain=3),
            _item(DAY_TWO + 10800, 22, 40, 4, "Rain", rain=2),
        ]

    def test_daily_summary(self, items):
        days = aggregate_daily_forecast(items)

        assert [d.date for d in days] == ["2024-01-01", "2024-01-02"]
        first, second = days
        assert (first.temp_high, first.temp_low, first.humidity, first.wind_speed) == (14, 10, 65, 7)
        assert first.rain_chance == 0
        assert (second.temp_high, second.temp_low, second.humidity, second.wind_speed) == (22, 20, 40, 14)
        assert second.rain_chance == 50
        assert second.condition == "Rain"

    def test_day_limit(self):
        items = [_item(DAY_ONE + i * 86400, 20, 50, 3, "Clear") for i in range(7)]
        assert len(aggregate_daily_forecast(items, max_days=5)) == 5

    def test_items_without_temperature_skipped(self):
        assert aggregate_daily_forecast([{"dt": DAY_ONE, "main": {}}]) == []

    def test_trends(self, items):
        trends = analyze_trends(aggregate_daily_forecast(items))
        assert trends.temperature_trend == "increasing"
        assert trends.humidity_trend == "decreasing"
        assert trends.wind_trend == "increasing"
        assert trends.rain_outlook == "possible"

    def test_single_day_is_stable(self):
        day = DailyForecast(date="2024-01-01", temp_high=30, temp_low=20, humidity=50, wind_speed=10, rain_chance=90)
        trends = analyze_trends([day])
        assert trends.wind_trend == "stable"
        assert trends.rain_outlook == "low"

    def test_normalize_forecast(self, items):
        report = normalize_forecast({"list": items}, "Delhi")
        assert len(report.days) == 2
        assert report.trends.temperature_trend == "increasing"
        assert report.source == "OpenWeatherMap"


class TestDemoData:
    """Test suite for demo data generation."""

    @pytest.fixture
    def rng(self):
        return np.random.default_rng(7)

    def test_demo_air_quality_within_variation(self, rng):
        snapshot = demo_air_quality("Delhi", rng)
        assert snapshot.is_demo is True
        assert snapshot.source == "demo"
        assert 140 <= snapshot.pollutants.value("pm25") <= 172
        assert snapshot.aqi.value == 328

    def test_unknown_city_uses_delhi_baseline(self, rng):
        snapshot = demo_air_quality("Atlantis", rng)
        assert snapshot.city == "Atlantis"
        assert snapshot.aqi.value == 328

    def test_demo_weather(self, rng):
        report = demo_weather("Mumbai", rng)
        assert report.is_demo is True
        assert report.current.wind_direction == "W"
        assert report.environmental_factors.pollutant_dispersion == "good"

    def test_demo_forecast(self, rng):
        report = demo_forecast("Chennai", rng)
        assert report.is_demo is True
        assert len(report.days) == 5
        assert report.trends.wind_trend == "decreasing"
        assert all(d.temp_high > d.temp_low for d in report.days)

"""
Pytest configuration for EcoSphere API tests.

Registers custom markers and provides shared fixtures.
"""

import pytest

from models.industry_profiles import registry
from models.records import PollutantReading, WeatherSnapshot


def pytest_configure(config):
    """Register custom pytest markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )


class FakeClock:
    """Manually advanced clock for cache expiry tests."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


@pytest.fixture
def clock():
    """Fixture providing a manually advanced clock."""
    return FakeClock()


@pytest.fixture
def delhi_pollutants():
    """Fixture providing the Delhi baseline reading."""
    return PollutantReading.from_values({
        "pm25": 156, "pm10": 245, "no2": 62, "o3": 45, "so2": 18, "co": 1.2,
    })


@pytest.fixture
def clean_pollutants():
    """Fixture providing an all-zero reading."""
    return PollutantReading.from_values({
        "pm25": 0, "pm10": 0, "no2": 0, "o3": 0, "so2": 0, "co": 0,
    })


@pytest.fixture
def neutral_weather():
    """Fixture providing a weather observation with every neutral default."""
    return WeatherSnapshot()


@pytest.fixture
def generic_profile():
    return registry.default


@pytest.fixture
def thermal_profile():
    return registry.lookup("Thermal Power Plant")


@pytest.fixture
def chemical_profile():
    return registry.lookup("Chemical / Petrochemical")

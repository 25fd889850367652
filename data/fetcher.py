"""
Environment Data Fetcher
Live air quality (OpenAQ v3) and weather (OpenWeatherMap) for supported cities,
with an ordered fallback chain: live -> last known good -> demo data
"""

import asyncio
import logging
from typing import Callable, Optional

import numpy as np
import requests

from config.settings import settings
from data.demo import demo_air_quality, demo_forecast, demo_weather
from data.preprocessor import (
    normalize_air_quality,
    normalize_current_weather,
    normalize_forecast,
    parse_openaq_latest,
    sensor_parameters,
)
from models.records import AirQualitySnapshot, WeatherForecastReport, WeatherReport
from utils.cache import TTLCache
from utils.helpers import cache_key
from utils.strategies import Strategy, first_success

logger = logging.getLogger(__name__)

OPENAQ_SEARCH_RADIUS_M = 25000


class AirQualityFetcher:
    """Fetcher for current air quality from OpenAQ"""

    def __init__(self, api_key: Optional[str] = None, base_url: Optional[str] = None, timeout: Optional[float] = None):
        self.api_key = settings.OPENAQ_API_KEY if api_key is None else api_key
        self.base_url = base_url or settings.OPENAQ_BASE_URL
        self.timeout = timeout or settings.UPSTREAM_TIMEOUT_SECONDS

    @property
    def available(self) -> bool:
        return bool(self.api_key)

    def _get(self, path: str, params: Optional[dict] = None) -> dict:
        response = requests.get(
            f"{self.base_url}{path}",
            headers={"X-API-Key": self.api_key},
            params=params,
            timeout=self.timeout,
        )
        response.raise_for_status()
        return response.json()

    def fetch_latest(self, city: str) -> Optional[AirQualitySnapshot]:
        """
        Latest measurements from the station nearest to the city

        Args:
            city: City name (unknown cities use the default city's coordinates)

        Returns:
            AirQualitySnapshot, or None when nothing usable was found
        """
        if not self.available:
            return None

        coords = settings.get_city_coords(city)

        try:
            # Step 1: nearest location within the search radius
            locations = self._get("/locations", params={
                "coordinates": f"{coords['lat']},{coords['lon']}",
                "radius": OPENAQ_SEARCH_RADIUS_M,
                "limit": 1,
            })
            results = locations.get("results") or []
            if not results:
                logger.info("OpenAQ: no station within %dm of %s", OPENAQ_SEARCH_RADIUS_M, city)
                return None
            location = results[0]

            # Step 2: latest measurements for that location
            latest = self._get(f"/locations/{location['id']}/latest")
            measurements = parse_openaq_latest(latest, sensor_parameters(location))
            if not measurements:
                logger.info("OpenAQ: station %s reported no measurements", location.get("name"))
                return None

            return normalize_air_quality(measurements, city, source="OpenAQ")

        except requests.exceptions.HTTPError as e:
            if e.response is not None and e.response.status_code == 401:
                logger.warning("✗ OpenAQ authentication failed")
            else:
                logger.warning("✗ OpenAQ error: %s", e)
            return None
        except (requests.exceptions.RequestException, ValueError, KeyError) as e:
            logger.warning("✗ OpenAQ error: %s", e)
            return None


class WeatherFetcher:
    """Fetcher for current weather and 5-day forecast from OpenWeatherMap"""

    def __init__(self, api_key: Optional[str] = None, base_url: Optional[str] = None, timeout: Optional[float] = None):
        self.api_key = settings.OPENWEATHER_API_KEY if api_key is None else api_key
        self.base_url = base_url or settings.OPENWEATHER_BASE_URL
        self.timeout = timeout or settings.UPSTREAM_TIMEOUT_SECONDS

    @property
    def available(self) -> bool:
        return bool(self.api_key)

    def _get(self, path: str, city: str) -> dict:
        coords = settings.get_city_coords(city)
        params = {"lat": coords["lat"], "lon": coords["lon"], "appid": self.api_key, "units": "metric"}
        response = requests.get(f"{self.base_url}{path}", params=params, timeout=self.timeout)
        response.raise_for_status()
        return response.json()

    def fetch_current(self, city: str) -> Optional[WeatherReport]:
        """Fetch current weather from OpenWeatherMap"""
        if not self.available:
            return None
        try:
            return normalize_current_weather(self._get("/weather", city), city)
        except (requests.exceptions.RequestException, ValueError, KeyError) as e:
            logger.warning("✗ OpenWeatherMap error: %s", e)
            return None

    def fetch_forecast(self, city: str) -> Optional[WeatherForecastReport]:
        """Fetch the 3-hourly forecast and aggregate it per day"""
        if not self.available:
            return None
        try:
            report = normalize_forecast(self._get("/forecast", city), city)
        except (requests.exceptions.RequestException, ValueError, KeyError) as e:
            logger.warning("✗ OpenWeatherMap forecast error: %s", e)
            return None
        return report if report.days else None


class EnvironmentDataSource:
    """
    Normalized environment data for the scoring engine.

    Each getter runs an ordered strategy chain: the live provider (bounded by
    the upstream timeout), then the last live result kept in the cache, then
    demo data. The demo strategy cannot fail, so the getters never raise.
    """

    def __init__(
        self,
        cache: Optional[TTLCache] = None,
        air_fetcher: Optional[AirQualityFetcher] = None,
        weather_fetcher: Optional[WeatherFetcher] = None,
        timeout: Optional[float] = None,
        rng: Optional[np.random.Generator] = None,
    ):
        self.cache = cache
        self.air = air_fetcher or AirQualityFetcher()
        self.weather = weather_fetcher or WeatherFetcher()
        self.timeout = timeout or settings.UPSTREAM_TIMEOUT_SECONDS
        self.rng = rng if rng is not None else np.random.default_rng()

        logger.info(
            "Environment data source: OpenAQ %s, OpenWeatherMap %s",
            "✓" if self.air.available else "✗ (demo data)",
            "✓" if self.weather.available else "✗ (demo data)",
        )

    async def get_pollutants(self, city: str) -> AirQualitySnapshot:
        return await self._resolve(
            "air", city, self.air.available, self.air.fetch_latest,
            lambda: demo_air_quality(city, self.rng),
        )

    async def get_weather(self, city: str) -> WeatherReport:
        return await self._resolve(
            "weather", city, self.weather.available, self.weather.fetch_current,
            lambda: demo_weather(city, self.rng),
        )

    async def get_weather_forecast(self, city: str) -> WeatherForecastReport:
        return await self._resolve(
            "weather-forecast", city, self.weather.available, self.weather.fetch_forecast,
            lambda: demo_forecast(city, self.rng),
        )

    async def _resolve(self, kind: str, city: str, live_enabled: bool, live_fetch: Callable, demo: Callable):
        last_good_key = cache_key("lkg", kind, city)

        async def live():
            result = await asyncio.to_thread(live_fetch, city)
            if result is not None and self.cache is not None:
                self.cache.set(last_good_key, result, settings.LAST_KNOWN_GOOD_TTL)
            return result

        async def last_known_good():
            if self.cache is None:
                return None
            return self.cache.get(last_good_key)

        async def demo_data():
            return demo()

        strategies = []
        if live_enabled:
            strategies.append(Strategy("live", live, self.timeout))
            strategies.append(Strategy("last-known-good", last_known_good))
        strategies.append(Strategy("demo", demo_data))

        return await first_success(strategies, label=f"{kind}:{city}")

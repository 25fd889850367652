"""
Request orchestration.

Composes the data source, the scoring engine, the narrative layer and the TTL
cache for each API operation. Upstream legs run concurrently and degrade
independently; AI enrichment runs after scoring and is bounded by its own
timeout, falling back to deterministic text.
"""

import asyncio
import logging
from typing import Any, Callable, Optional, Tuple

from config.settings import settings
from data.fetcher import EnvironmentDataSource
from models.forecast_deriver import derive_forecast
from models.industry_profiles import IndustryProfileRegistry, registry as default_registry
from models.risk_scorer import score_conditions
from services.narrative import NarrativeEnricher, default_forecast_narrative
from utils.cache import TTLCache
from utils.helpers import cache_key, create_success_response
from utils.strategies import Strategy, first_success

logger = logging.getLogger(__name__)


class RequestOrchestrator:
    """Runs the conditions, forecast and alert operations with the cache policy"""

    def __init__(
        self,
        cache: TTLCache,
        data_source: EnvironmentDataSource,
        enricher: NarrativeEnricher,
        registry: Optional[IndustryProfileRegistry] = None,
        ai_timeout: Optional[float] = None,
    ):
        self.cache = cache
        self.data_source = data_source
        self.enricher = enricher
        self.registry = registry or default_registry
        self.ai_timeout = ai_timeout or settings.AI_TIMEOUT_SECONDS

    async def _narrate(self, label: str, call: Callable[[], Any], fallback: Callable[[], Any]) -> Any:
        """Run a blocking enricher call in a worker thread, bounded by the AI timeout"""

        async def model():
            return await asyncio.to_thread(call)

        async def template():
            return fallback()

        return await first_success(
            [Strategy("model", model, self.ai_timeout), Strategy("template", template)],
            label=label,
        )

    # ==================== Current Conditions ====================

    async def current_conditions(self, city: str, industry: str) -> Tuple[dict, bool]:
        """
        Current-conditions payload for a city/industry pair

        Returns:
            (payload, cache_hit)
        """
        key = cache_key("env", city, industry)
        cached = self.cache.get(key)
        if cached is not None:
            return cached, True

        air_quality, weather = await asyncio.gather(
            self.data_source.get_pollutants(city),
            self.data_source.get_weather(city),
        )

        profile = self.registry.lookup(industry)
        assessment = score_conditions(
            air_quality.pollutants,
            weather.current,
            profile,
            aqi=air_quality.aqi,
            environmental_factors=weather.environmental_factors,
        )

        insights = None
        if self.enricher.enabled:
            ai_key = cache_key("ai", "conditions", city, industry, assessment.overall_risk.aqi)
            insights = self.cache.get(ai_key)
            if insights is None:
                insights = await self._narrate(
                    ai_key,
                    lambda: self.enricher.interpret_conditions(assessment, weather, industry, air_quality),
                    lambda: self.enricher.fallback_conditions(assessment, weather, industry),
                )
                self.cache.set(ai_key, insights, settings.CONDITIONS_AI_TTL)

        payload = create_success_response(
            city=city,
            industry=industry,
            data={
                "airQuality": air_quality.to_dict(),
                "weather": weather.to_dict(),
                "riskAnalysis": assessment.to_dict(),
                "aiInsights": insights,
            },
        )
        self.cache.set(key, payload, settings.CONDITIONS_TTL)
        logger.info(
            "Conditions for %s / %s: %s (score %d, AQI %d)",
            city, profile.name, assessment.overall_risk.level,
            assessment.overall_risk.score, assessment.overall_risk.aqi,
        )
        return payload, False

    # ==================== Forecast ====================

    async def forecast(self, city: str, industry: str) -> Tuple[dict, bool]:
        """
        Qualitative forecast payload for a city/industry pair

        Returns:
            (payload, cache_hit)
        """
        key = cache_key("forecast", city, industry)
        cached = self.cache.get(key)
        if cached is not None:
            return cached, True

        air_quality, weather_forecast = await asyncio.gather(
            self.data_source.get_pollutants(city),
            self.data_source.get_weather_forecast(city),
        )

        profile = self.registry.lookup(industry)
        aqi = air_quality.aqi.value if air_quality.aqi else None
        assessment = derive_forecast(air_quality.pollutants, weather_forecast.trends, profile, aqi=aqi)

        insights = None
        if self.enricher.enabled:
            ai_key = cache_key("ai", "forecast", city, industry, assessment.overall_risk.level)
            insights = self.cache.get(ai_key)
            if insights is None:
                narrative = await self._narrate(
                    ai_key,
                    lambda: self.enricher.interpret_forecast(assessment, air_quality, weather_forecast, industry),
                    default_forecast_narrative,
                )
                insights = narrative.to_dict()
                self.cache.set(ai_key, insights, settings.FORECAST_AI_TTL)

        payload = create_success_response(
            city=city,
            industry=industry,
            forecast=assessment.to_dict(),
            weatherForecast=weather_forecast.to_dict(),
            aiInsights=insights,
        )
        self.cache.set(key, payload, settings.FORECAST_TTL)
        logger.info(
            "Forecast for %s / %s: %s (score %d x%.2f)",
            city, profile.name, assessment.overall_risk.level,
            assessment.overall_risk.raw_score, assessment.overall_risk.multiplier,
        )
        return payload, False

    # ==================== Alerts & Interpretation ====================

    async def explain_alert(self, industry: str, aqi: Any, pm25: Any, wind_speed: Any, persistence: Any) -> str:
        """Short alert explanation; always returns text"""
        key = cache_key("ai", "alert", industry, aqi, pm25, wind_speed, persistence)
        cached = self.cache.get(key)
        if cached is not None:
            return cached

        explanation = await self._narrate(
            key,
            lambda: self.enricher.explain_alert(industry, aqi, pm25, wind_speed, persistence),
            lambda: self.enricher.fallback_alert(industry, aqi, pm25, wind_speed, persistence),
        )
        self.cache.set(key, explanation, settings.ALERT_AI_TTL)
        return explanation

    async def interpret(self, kind: str, data: Any) -> str:
        """Free-form interpretation of dashboard data (conditions, forecast, risk)"""
        if not self.enricher.enabled:
            return self.enricher.fallback_interpretation(kind)

        return await self._narrate(
            f"interpret:{kind}",
            lambda: self.enricher.custom_interpretation(kind, data),
            lambda: self.enricher.fallback_interpretation(kind),
        )

"""
Narrative enrichment for risk assessments.

Turns assessments into short natural-language explanations. Supports two modes:
- "mock": deterministic templates (offline, always available)
- "groq": chat completions through the Groq API (requires GROQ_API_KEY)

Every public method returns usable output: when the model call fails or
returns something unusable, the deterministic template is used instead.
"""

import json
import logging
import re
from typing import Any, Optional, Union

from groq import Groq
from pydantic import ValidationError

from config.settings import settings
from models.records import (
    AirQualitySnapshot,
    ForecastAssessment,
    ForecastNarrative,
    RiskAssessment,
    WeatherForecastReport,
    WeatherReport,
)
from utils.constants import DEFAULT_INTERPRETATIONS, STABLE_CONDITIONS_ANALYSIS

logger = logging.getLogger(__name__)

MODES = ("mock", "groq")

SYSTEM_PROMPT = """You are an environmental intelligence assistant.
You explain short-term environmental stress conditions
based on real environmental data, weather behavior,
and known industry emission characteristics.

You do NOT:
- Predict exact pollution values
- Claim industrial causation
- Replace sensors or regulators
- Provide medical or legal advice

You focus on:
- Exposure conditions
- Environmental behavior
- Risk windows
- Preventive awareness

Use calm, educational, non-alarming language."""

FORECAST_FORMAT = """Format the output strictly as valid JSON with the following structure:
{
  "stress_windows": [
    {"level": "Low" | "Moderate" | "High", "condition": "Brief summary", "impact": "Primary impact description",
     "affected_groups": "Who is affected", "duration": "Duration text"}
  ],
  "exposure_breakdown": [
    {"type": "Respiratory Exposure" | "Skin & Eye Irritation" | "Ecosystem Stress" | "Operational Disruption",
     "risk_level": "Low" | "Moderate" | "High", "explanation": "One-line explanation"}
  ],
  "behavior_analysis": "Paragraph explaining weather x pollution interaction",
  "early_warnings": [
    {"severity": "info" | "warning", "message": "Informational alert text"}
  ]
}
Do not include markdown code blocks. Just the JSON."""

MAX_ALERT_SENTENCES = 3

_FENCE = re.compile(r"```(?:json)?", re.IGNORECASE)
_SENTENCE_END = re.compile(r"(?<=[.!?])\s+")


def default_forecast_narrative() -> ForecastNarrative:
    return ForecastNarrative(behavior_analysis=STABLE_CONDITIONS_ANALYSIS)


def parse_forecast_narrative(text: Optional[str]) -> ForecastNarrative:
    """
    Parse the model's JSON forecast narrative

    Markdown fences are stripped first. Anything that is not a JSON object
    matching the narrative structure yields the default narrative.
    """
    if not text:
        return default_forecast_narrative()

    cleaned = _FENCE.sub("", text).strip()
    try:
        data = json.loads(cleaned)
        if not isinstance(data, dict):
            raise ValueError(f"expected a JSON object, got {type(data).__name__}")
        return ForecastNarrative.model_validate(data)
    except (ValueError, ValidationError) as e:
        logger.warning("Forecast narrative parse error: %s (raw: %.200s)", e, cleaned)
        return default_forecast_narrative()


def limit_sentences(text: str, limit: int = MAX_ALERT_SENTENCES) -> str:
    sentences = [s for s in _SENTENCE_END.split(text.strip()) if s]
    return " ".join(sentences[:limit])


def _number_or_na(value: Any, label: str, unit: str = "") -> str:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value != value:
        return f"{label} N/A"
    return f"{label} {value:g}{unit}"


class NarrativeEnricher:
    """
    Natural-language layer over assessments.

    Mode is selected via NARRATIVE_MODE or the constructor. If mode is "groq"
    but no API key is configured, the enricher falls back to mock mode.
    """

    def __init__(self, mode: Optional[str] = None, api_key: Optional[str] = None, model: Optional[str] = None):
        requested = (mode or settings.NARRATIVE_MODE or "mock").lower()
        self.mode = requested if requested in MODES else "mock"
        self.model = model or settings.GROQ_MODEL
        self._client = None

        if self.mode == "groq":
            key = api_key if api_key is not None else settings.GROQ_API_KEY
            if not key:
                logger.warning("NarrativeEnricher: GROQ_API_KEY not set, falling back to mock mode")
                self.mode = "mock"
            else:
                self._client = Groq(api_key=key)

    @property
    def enabled(self) -> bool:
        """True when a language model backs the narrative"""
        return self.mode == "groq" and self._client is not None

    def _complete(self, prompt: str, max_tokens: int = 400, temperature: float = 0.4, system: str = SYSTEM_PROMPT) -> str:
        completion = self._client.chat.completions.create(
            messages=[
                {"role": "system", "content": system},
                {"role": "user", "content": prompt},
            ],
            model=self.model,
            temperature=temperature,
            max_tokens=max_tokens,
        )
        text = completion.choices[0].message.content
        if not text or not text.strip():
            raise ValueError("empty completion")
        return text.strip()

    # ==================== Current Conditions ====================

    def fallback_conditions(self, assessment: RiskAssessment, weather: WeatherReport, industry: str) -> str:
        overall = assessment.overall_risk
        return (
            f"Analysis for {industry}: Current conditions (AQI {overall.aqi}) indicate {overall.level} risk. "
            f"Industry-specific pollutants may experience reduced dispersion due to current weather patterns "
            f"({weather.current.wind_speed:g} km/h winds). Enhanced monitoring is recommended."
        )

    def interpret_conditions(self, assessment: RiskAssessment, weather: WeatherReport, industry: str,
                             air_quality: Optional[AirQualitySnapshot] = None) -> str:
        if not self.enabled:
            return self.fallback_conditions(assessment, weather, industry)

        overall = assessment.overall_risk
        pm25 = air_quality.pollutants.value("pm25") if air_quality else "N/A"
        prompt = (
            f"Location: {weather.city}\n"
            f"Industry Context: {industry}\n\n"
            f"Environmental Inputs:\n"
            f"- AQI: {overall.aqi} ({overall.level})\n"
            f"- PM2.5: {pm25} µg/m³\n"
            f"- Weather: {weather.current.description}, {weather.current.wind_speed:g} km/h wind\n\n"
            f"Explain:\n"
            f"1. Short-term environmental stress conditions\n"
            f"2. How weather affects pollutant behavior\n"
            f"3. Which environmental pathways are most affected\n"
            f"4. Preventive actions suitable for this industry\n\n"
            f"Provide a brief, 3-4 sentence summary interpretation."
        )
        try:
            return self._complete(prompt)
        except Exception as e:
            logger.warning("Conditions interpretation failed, using template: %s", e)
            return self.fallback_conditions(assessment, weather, industry)

    # ==================== Forecast ====================

    def interpret_forecast(self, forecast: ForecastAssessment, air_quality: AirQualitySnapshot,
                           weather: Union[WeatherReport, WeatherForecastReport], industry: str) -> ForecastNarrative:
        if not self.enabled:
            return default_forecast_narrative()

        aqi = air_quality.aqi.value if air_quality.aqi else "N/A"
        if isinstance(weather, WeatherReport):
            current = weather.current
            weather_summary = f"{current.description}, {current.wind_speed:g} km/h, {current.humidity:g}% humidity"
        else:
            trends = weather.trends
            weather_summary = (
                f"temperature {trends.temperature_trend}, humidity {trends.humidity_trend}, "
                f"wind {trends.wind_trend}, rain {trends.rain_outlook}"
            )

        prompt = (
            f"Location: {weather.city}\n"
            f"Industry Context: {industry}\n\n"
            f"Inputs:\n"
            f"- Current AQI: {aqi}\n"
            f"- PM2.5 level: {air_quality.pollutants.value('pm25')}\n"
            f"- Forecast risk level: {forecast.overall_risk.level}\n"
            f"- Weather summary: {weather_summary}\n\n"
            f"Explain:\n"
            f"1. Short-term environmental stress conditions\n"
            f"2. How weather affects pollutant behavior\n"
            f"3. Which exposure types are most relevant\n"
            f"4. Why early awareness matters\n\n"
            f"{FORECAST_FORMAT}"
        )
        try:
            text = self._complete(prompt, max_tokens=900, temperature=0.3)
        except Exception as e:
            logger.warning("Forecast interpretation failed, using default narrative: %s", e)
            return default_forecast_narrative()
        return parse_forecast_narrative(text)

    # ==================== Alerts ====================

    def fallback_alert(self, industry: str, aqi: Any, pm25: Any, wind_speed: Any, persistence: Any) -> str:
        measurements = f"{_number_or_na(aqi, 'AQI')}, {_number_or_na(pm25, 'PM2.5', ' µg/m³')}"
        horizon = "long-term" if str(persistence or "").lower() == "very long" else "short-term"
        return (
            f"This alert was triggered because current measurements ({measurements}) meet predefined "
            f"rule-based thresholds. "
            f"It is considered a {horizon} concern based on the observed conditions and rule-based checks. "
            f"A practical preventive action is to increase monitoring frequency and consider temporary "
            f"emission-reduction or operational adjustments where feasible."
        )

    def explain_alert(self, industry: str, aqi: Any, pm25: Any, wind_speed: Any, persistence: Any) -> str:
        """Explain a triggered alert in at most three sentences"""
        if not self.enabled:
            return self.fallback_alert(industry, aqi, pm25, wind_speed, persistence)

        prompt = (
            f"Context:\n"
            f"- Industry type: {industry}\n"
            f"- AQI: {aqi}\n"
            f"- PM2.5: {pm25}\n"
            f"- Wind speed: {wind_speed}\n"
            f"- Pollutant persistence: {persistence}\n\n"
            f"Explain:\n"
            f"1. Why this alert was triggered\n"
            f"2. Whether it is short-term or long-term\n"
            f"3. One practical preventive action\n\n"
            f"Rules:\n"
            f"- Do NOT predict outcomes\n"
            f"- Do NOT give medical or legal advice\n"
            f"- Use calm, neutral language\n"
            f"- Maximum 3 sentences"
        )
        try:
            text = self._complete(
                prompt, max_tokens=200, temperature=0.3,
                system="You are an environmental decision-support assistant.",
            )
        except Exception as e:
            logger.warning("Alert explanation failed, using template: %s", e)
            return self.fallback_alert(industry, aqi, pm25, wind_speed, persistence)
        return limit_sentences(text)

    # ==================== Custom ====================

    def fallback_interpretation(self, kind: str) -> str:
        return DEFAULT_INTERPRETATIONS.get(kind, "AI interpretation service unavailable.")

    def custom_interpretation(self, kind: str, data: Any) -> str:
        if not self.enabled:
            return self.fallback_interpretation(kind)

        prompt = f"Analyze this specific {kind} context: {json.dumps(data, default=str)}"
        try:
            return self._complete(prompt)
        except Exception as e:
            logger.warning("Custom interpretation failed: %s", e)
            return "Interpretation failed."

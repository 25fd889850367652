"""
Tests for NarrativeEnricher.

Tests cover:
- Mode selection: mock by default, groq without a key falls back to mock
- Mock mode: deterministic templates for every operation
- Groq mode (mocked client): prompts, sentence limit, failure fallbacks
- Forecast narrative parsing: fenced JSON, malformed and mistyped output
"""

import os
from unittest.mock import MagicMock, patch

import pytest

from models.industry_profiles import registry
from models.forecast_deriver import derive_forecast
from models.risk_scorer import score_conditions
from data.demo import demo_air_quality, demo_forecast, demo_weather
from services.narrative import (
    NarrativeEnricher,
    default_forecast_narrative,
    limit_sentences,
    parse_forecast_narrative,
)
from utils.constants import DEFAULT_INTERPRETATIONS, STABLE_CONDITIONS_ANALYSIS


def _completion(text):
    completion = MagicMock()
    completion.choices = [MagicMock(message=MagicMock(content=text))]
    return completion


@pytest.fixture
def conditions():
    """Fixture providing a scored Delhi snapshot."""
    air = demo_air_quality("Delhi")
    weather = demo_weather("Delhi")
    assessment = score_conditions(air.pollutants, weather.current, registry.default, aqi=air.aqi)
    return air, weather, assessment


class TestNarrativeEnricherMockMode:
    """Test suite for NarrativeEnricher in mock mode (deterministic behavior)."""

    @pytest.fixture
    def enricher(self):
        """Fixture providing NarrativeEnricher in mock mode."""
        with patch.dict(os.environ, {"NARRATIVE_MODE": "mock"}, clear=False):
            return NarrativeEnricher(mode="mock")

    # ==================== Mode Selection ====================

    def test_mock_mode_is_not_enabled(self, enricher):
        assert enricher.mode == "mock"
        assert enricher.enabled is False

    def test_groq_without_key_falls_back_to_mock(self):
        enricher = NarrativeEnricher(mode="groq", api_key="")
        assert enricher.mode == "mock"
        assert enricher.enabled is False

    def test_unknown_mode_is_mock(self):
        assert NarrativeEnricher(mode="openai").mode == "mock"

    # ==================== Templates ====================

    def test_conditions_template(self, enricher, conditions):
        air, weather, assessment = conditions
        text = enricher.interpret_conditions(assessment, weather, "Mining", air)
        assert text.startswith("Analysis for Mining: Current conditions (AQI 328) indicate")
        assert "Enhanced monitoring is recommended." in text

    def test_forecast_default_narrative(self, enricher, conditions):
        air, _, _ = conditions
        forecast = derive_forecast(air.pollutants, None, registry.default, aqi=air.aqi.value)
        narrative = enricher.interpret_forecast(forecast, air, demo_forecast("Delhi"), "Generic Industrial Zone")
        assert narrative == default_forecast_narrative()
        assert narrative.behavior_analysis == STABLE_CONDITIONS_ANALYSIS
        assert narrative.stress_windows == []

    def test_alert_template_is_three_sentences(self, enricher):
        text = enricher.explain_alert("Mining", 250, 160.5, 4, "Very Long")
        assert "AQI 250, PM2.5 160.5 µg/m³" in text
        assert "long-term concern" in text
        assert limit_sentences(text) == text
        assert text.count(". ") == 2

    def test_alert_template_with_missing_values(self, enricher):
        text = enricher.explain_alert("Construction", None, None, None, None)
        assert "AQI N/A, PM2.5 N/A" in text
        assert "short-term concern" in text

    @pytest.mark.parametrize("kind", ["conditions", "forecast", "risk"])
    def test_default_interpretations(self, enricher, kind):
        assert enricher.custom_interpretation(kind, {"aqi": 120}) == DEFAULT_INTERPRETATIONS[kind]

    def test_unknown_interpretation_kind(self, enricher):
        assert enricher.custom_interpretation("other", None) == "AI interpretation service unavailable."


class TestNarrativeEnricherGroqMode:
    """Test suite for NarrativeEnricher in groq mode (with mocked API calls)."""

    @pytest.fixture
    def groq_enricher(self):
        """Fixture providing NarrativeEnricher in groq mode with a mocked client."""
        with patch("services.narrative.Groq") as mock_groq:
            mock_client = MagicMock()
            mock_groq.return_value = mock_client
            enricher = NarrativeEnricher(mode="groq", api_key="test_key", model="test-model")
            yield enricher, mock_client

    def test_client_created_with_key(self, groq_enricher):
        enricher, _ = groq_enricher
        assert enricher.enabled is True
        assert enricher.mode == "groq"

    def test_conditions_use_completion(self, groq_enricher, conditions):
        enricher, client = groq_enricher
        air, weather, assessment = conditions
        client.chat.completions.create.return_value = _completion("  Conditions are stable.  ")

        text = enricher.interpret_conditions(assessment, weather, "Mining", air)

        assert text == "Conditions are stable."
        kwargs = client.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == "test-model"
        assert kwargs["messages"][0]["role"] == "system"
        assert "Industry Context: Mining" in kwargs["messages"][1]["content"]

    def test_conditions_api_failure_uses_template(self, groq_enricher, conditions):
        enricher, client = groq_enricher
        air, weather, assessment = conditions
        client.chat.completions.create.side_effect = Exception("API Error")

        text = enricher.interpret_conditions(assessment, weather, "Mining", air)

        assert text == enricher.fallback_conditions(assessment, weather, "Mining")

    def test_empty_completion_uses_template(self, groq_enricher, conditions):
        enricher, client = groq_enricher
        air, weather, assessment = conditions
        client.chat.completions.create.return_value = _completion("   ")
        assert enricher.interpret_conditions(assessment, weather, "Mining", air).startswith("Analysis for Mining")

    def test_alert_limited_to_three_sentences(self, groq_enricher):
        enricher, client = groq_enricher
        client.chat.completions.create.return_value = _completion(
            "One. Two! Three? Four. Five."
        )
        assert enricher.explain_alert("Mining", 250, 160, 4, "Very Long") == "One. Two! Three?"

    def test_forecast_parses_json(self, groq_enricher, conditions):
        enricher, client = groq_enricher
        air, _, _ = conditions
        forecast = derive_forecast(air.pollutants, None, registry.default, aqi=air.aqi.value)
        client.chat.completions.create.return_value = _completion(
            '```json\n{"stress_windows": [{"level": "High", "condition": "Haze"}], '
            '"exposure_breakdown": [], "behavior_analysis": "Stagnant air.", "early_warnings": []}\n```'
        )

        narrative = enricher.interpret_forecast(forecast, air, demo_weather("Delhi"), "Generic Industrial Zone")

        assert narrative.behavior_analysis == "Stagnant air."
        assert narrative.stress_windows == [{"level": "High", "condition": "Haze"}]

    def test_custom_interpretation_failure(self, groq_enricher):
        enricher, client = groq_enricher
        client.chat.completions.create.side_effect = Exception("API Error")
        assert enricher.custom_interpretation("risk", {"score": 70}) == "Interpretation failed."


class TestParseForecastNarrative:
    """Test suite for forecast narrative parsing."""

    def test_plain_json(self):
        narrative = parse_forecast_narrative('{"behavior_analysis": "Calm winds."}')
        assert narrative.behavior_analysis == "Calm winds."
        assert narrative.early_warnings == []

    @pytest.mark.parametrize("text", [
        None,
        "",
        "The air is fine today.",
        '{"behavior_analysis": "unterminated',
        '["not", "an", "object"]',
        '{"stress_windows": "should be a list"}',
    ])
    def test_unusable_output_yields_default(self, text):
        assert parse_forecast_narrative(text) == default_forecast_narrative()

    def test_serializes_with_camel_case(self):
        data = default_forecast_narrative().to_dict()
        assert set(data) == {"stressWindows", "exposureBreakdown", "behaviorAnalysis", "earlyWarnings"}


class TestLimitSentences:
    """Test suite for sentence limiting."""

    def test_short_text_unchanged(self):
        assert limit_sentences("Only one sentence.") == "Only one sentence."

    def test_extra_sentences_dropped(self):
        assert limit_sentences("A. B. C. D.", limit=2) == "A. B."

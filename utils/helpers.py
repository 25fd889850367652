"""
Helper Functions for EcoSphere API
Classifiers, AQI conversion and response envelopes used across the application
"""

import math
from datetime import datetime, timezone
from typing import Optional

from utils.constants import (
    AIR_QUALITY_SUMMARIES,
    AIR_QUALITY_SUMMARY_MAX,
    AQI_CATEGORY_BANDS,
    AQI_CATEGORY_MAX,
    AQI_COLOR_UNKNOWN,
    AQI_COLORS,
    AQI_MAX,
    PM25_AQI_BREAKPOINTS,
    PM25_AQI_SEVERE,
    POLLUTANT_STATUS_BANDS,
    POLLUTANT_STATUS_MAX,
    RISK_COLOR_UNKNOWN,
    RISK_COLORS,
    RISK_HIGH,
    RISK_LEVEL_THRESHOLDS,
    WHO_GUIDELINES,
)

WIND_DIRECTIONS = [
    "N", "NNE", "NE", "ENE", "E", "ESE", "SE", "SSE",
    "S", "SSW", "SW", "WSW", "W", "WNW", "NW", "NNW",
]


def clamp_score(value: float) -> int:
    """
    Round a raw score into the 0-100 range

    Args:
        value: Raw (possibly unbounded) score

    Returns:
        Integer score between 0 and 100 (NaN scores 0, +inf scores 100)
    """
    if value is None or math.isnan(value):
        return 0
    if math.isinf(value):
        return 100 if value > 0 else 0
    return int(max(0, min(100, round(value))))


def classify_risk_level(score: int) -> str:
    """
    Classify a 0-100 score into a risk level

    Every impact dimension and the forecast share this classifier.

    Args:
        score: Integer risk score

    Returns:
        "Low", "Moderate" or "High"
    """
    for upper, level in RISK_LEVEL_THRESHOLDS:
        if score <= upper:
            return level
    return RISK_HIGH


def get_risk_color(level: str) -> str:
    return RISK_COLORS.get(level, RISK_COLOR_UNKNOWN)


def calculate_aqi_from_pm25(pm25: float) -> int:
    """
    Calculate AQI from PM2.5 concentration
    Uses simplified Indian AQI bands

    Args:
        pm25: PM2.5 concentration in μg/m³

    Returns:
        AQI value (0-500)
    """
    if pm25 is None or not math.isfinite(pm25) or pm25 <= 0:
        return 0

    for bp_lo, bp_hi, aqi_lo, aqi_hi in (bp[:4] for bp in PM25_AQI_BREAKPOINTS):
        if pm25 <= bp_hi:
            # Linear interpolation
            aqi = aqi_lo + (pm25 - bp_lo) / (bp_hi - bp_lo) * (aqi_hi - aqi_lo)
            return int(round(aqi))

    severe_lo, severe_span, severe_aqi, _ = PM25_AQI_SEVERE
    aqi = severe_aqi + (pm25 - severe_lo) / severe_span * 100
    return int(min(AQI_MAX, round(aqi)))


def classify_aqi(aqi: Optional[int]) -> str:
    """
    Classify AQI into its category

    Args:
        aqi: Air Quality Index value

    Returns:
        Category string (e.g., "Good", "Very Poor")
    """
    if aqi is None:
        return "Unknown"
    for upper, category in AQI_CATEGORY_BANDS:
        if aqi <= upper:
            return category
    return AQI_CATEGORY_MAX


def get_aqi_color(category: str) -> str:
    return AQI_COLORS.get(category, AQI_COLOR_UNKNOWN)


def get_pollutant_status(key: str, value: float) -> str:
    """
    Status of a single pollutant against its WHO guideline

    Args:
        key: Pollutant key (pm25, pm10, ...)
        value: Measured concentration

    Returns:
        good / moderate / unhealthy / very-unhealthy / hazardous
    """
    guideline = WHO_GUIDELINES.get(key)
    if not guideline:
        return "good"
    ratio = value / guideline
    for upper, status in POLLUTANT_STATUS_BANDS:
        if ratio <= upper:
            return status
    return POLLUTANT_STATUS_MAX


def format_exceedance(key: str, value: float) -> str:
    """Multiple of the WHO guideline, one decimal (e.g. "10.4")"""
    guideline = WHO_GUIDELINES.get(key)
    if not guideline:
        return "0.0"
    return f"{value / guideline:.1f}"


def summarize_air_quality(pm25: float) -> str:
    ratio = pm25 / WHO_GUIDELINES["pm25"]
    for upper, summary in AIR_QUALITY_SUMMARIES:
        if ratio <= upper:
            return summary
    return AIR_QUALITY_SUMMARY_MAX


def wind_direction_from_degrees(degrees: Optional[float]) -> str:
    """Convert a bearing to a 16-point compass direction"""
    if degrees is None:
        return "N"
    index = int(round(degrees / 22.5)) % 16
    return WIND_DIRECTIONS[index]


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


def create_error_response(error: str, message: str = "") -> dict:
    """
    Create standardized error response

    Args:
        error: Short, user-facing error
        message: Underlying exception message

    Returns:
        Error response dict
    """
    return {
        "success": False,
        "error": error,
        "message": message,
        "timestamp": utc_timestamp(),
    }


def create_success_response(**fields) -> dict:
    """
    Create standardized success response

    Args:
        fields: Payload fields merged into the envelope

    Returns:
        Success response dict
    """
    response = {"success": True, "timestamp": utc_timestamp()}
    response.update(fields)
    return response


def cache_key(*parts) -> str:
    """
    Generate cache key from its parts

    Returns:
        Colon-joined key, e.g. "env:Delhi:Mining"
    """
    return ":".join("" if part is None else str(part) for part in parts)

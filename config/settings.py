"""
Configuration Management for EcoSphere API
Loads environment variables and provides centralized settings
"""

import os
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


class Settings:
    """Application settings and configuration"""

    # API Configuration
    API_TITLE = "EcoSphere API"
    API_VERSION = "1.0.0"
    API_DESCRIPTION = "Industry-aware environmental risk scoring and decision support"
    API_HOST = os.getenv("API_HOST", "0.0.0.0")
    API_PORT = int(_env_float("API_PORT", 8000))

    # External API Keys
    OPENAQ_API_KEY = os.getenv("OPENAQ_API_KEY", "")
    OPENWEATHER_API_KEY = os.getenv("OPENWEATHER_API_KEY", "")
    GROQ_API_KEY = os.getenv("GROQ_API_KEY", "")

    # External API URLs
    OPENAQ_BASE_URL = "https://api.openaq.org/v3"
    OPENWEATHER_BASE_URL = "https://api.openweathermap.org/data/2.5"

    # Narrative layer ("mock" is deterministic and offline)
    NARRATIVE_MODE = os.getenv("NARRATIVE_MODE", "mock").lower()
    GROQ_MODEL = os.getenv("GROQ_MODEL", "llama-3.1-8b-instant")

    # Timeouts (seconds) for each independently bounded leg
    UPSTREAM_TIMEOUT_SECONDS = _env_float("UPSTREAM_TIMEOUT_SECONDS", 8.0)
    AI_TIMEOUT_SECONDS = _env_float("AI_TIMEOUT_SECONDS", 15.0)

    # Cache TTLs (seconds)
    CONDITIONS_TTL = 3 * 60
    CONDITIONS_AI_TTL = 10 * 60
    FORECAST_TTL = 5 * 60
    FORECAST_AI_TTL = 20 * 60
    ALERT_AI_TTL = 60 * 60
    LAST_KNOWN_GOOD_TTL = 60 * 60

    # Cache bounds
    CACHE_MAX_ENTRIES = int(_env_float("CACHE_MAX_ENTRIES", 1024))
    CACHE_SWEEP_SECONDS = _env_float("CACHE_SWEEP_SECONDS", 60.0)

    # Request defaults
    DEFAULT_CITY = "Delhi"
    DEFAULT_INDUSTRY = "Generic Industrial Zone"

    # Indian cities served by the dashboard
    CITIES = {
        "Delhi": {"lat": 28.6139, "lon": 77.2090},
        "Mumbai": {"lat": 19.0760, "lon": 72.8777},
        "Bangalore": {"lat": 12.9716, "lon": 77.5946},
        "Chennai": {"lat": 13.0827, "lon": 80.2707},
        "Kolkata": {"lat": 22.5726, "lon": 88.3639},
        "Hyderabad": {"lat": 17.3850, "lon": 78.4867},
        "Pune": {"lat": 18.5204, "lon": 73.8567},
        "Ahmedabad": {"lat": 23.0225, "lon": 72.5714},
        "Jaipur": {"lat": 26.9124, "lon": 75.7873},
        "Lucknow": {"lat": 26.8467, "lon": 80.9462},
    }

    # Logging
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    # CORS Settings (for frontend)
    CORS_ORIGINS = [
        "http://localhost:3000",
        "http://localhost:8080",
        "http://127.0.0.1:3000",
        "http://127.0.0.1:8080",
    ]

    @classmethod
    def get_city_coords(cls, city_name: str):
        """Get coordinates for a city, falling back to the default city"""
        if city_name in cls.CITIES:
            return cls.CITIES[city_name]
        return cls.CITIES[cls.DEFAULT_CITY]

    @classmethod
    def validate_config(cls):
        """Validate configuration and warn about missing keys"""
        warnings = []

        if not cls.OPENAQ_API_KEY:
            warnings.append("OPENAQ_API_KEY not set - will use demo air quality data")

        if not cls.OPENWEATHER_API_KEY:
            warnings.append("OPENWEATHER_API_KEY not set - will use demo weather data")

        if cls.NARRATIVE_MODE == "groq" and not cls.GROQ_API_KEY:
            warnings.append("GROQ_API_KEY not set - narrative layer will use templated text")

        return warnings


# Create singleton instance
settings = Settings()

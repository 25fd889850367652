"""
Constants used throughout the EcoSphere API
Guideline values, AQI bands, risk thresholds, demo data and fixed messages
"""

# ==================== Pollutant Guidelines ====================

# WHO 24-hour guideline values (o3 is the 8-hour value, co is mg/m³)
WHO_GUIDELINES = {
    "pm25": 15.0,
    "pm10": 45.0,
    "no2": 25.0,
    "o3": 100.0,
    "so2": 40.0,
    "co": 4.0,
}

POLLUTANT_KEYS = ("pm25", "pm10", "no2", "o3", "so2", "co")

POLLUTANT_UNITS = {
    "pm25": "µg/m³",
    "pm10": "µg/m³",
    "no2": "µg/m³",
    "o3": "µg/m³",
    "so2": "µg/m³",
    "co": "mg/m³",
}

# Ratio of value / WHO guideline -> status (upper bound inclusive)
POLLUTANT_STATUS_BANDS = [
    (1.0, "good"),
    (2.0, "moderate"),
    (3.0, "unhealthy"),
    (5.0, "very-unhealthy"),
]
POLLUTANT_STATUS_MAX = "hazardous"

# ==================== AQI Bands ====================

# Simplified Indian AQI from PM2.5: (pm_lo, pm_hi, aqi_lo, aqi_hi, category)
PM25_AQI_BREAKPOINTS = [
    (0.0, 30.0, 0, 50, "Good"),
    (30.0, 60.0, 50, 100, "Satisfactory"),
    (60.0, 90.0, 100, 200, "Moderate"),
    (90.0, 120.0, 200, 300, "Poor"),
    (120.0, 250.0, 300, 400, "Very Poor"),
]
PM25_AQI_SEVERE = (250.0, 130.0, 400, "Severe")
AQI_MAX = 500

# AQI value -> category (upper bound inclusive)
AQI_CATEGORY_BANDS = [
    (50, "Good"),
    (100, "Satisfactory"),
    (200, "Moderate"),
    (300, "Poor"),
    (400, "Very Poor"),
]
AQI_CATEGORY_MAX = "Severe"

AQI_COLORS = {
    "Good": "#00e400",
    "Satisfactory": "#92d050",
    "Moderate": "#ffff00",
    "Poor": "#ff7e00",
    "Very Poor": "#ff0000",
    "Severe": "#8f3f97",
}
AQI_COLOR_UNKNOWN = "#808080"

# ==================== Risk Levels ====================

RISK_LOW = "Low"
RISK_MODERATE = "Moderate"
RISK_HIGH = "High"

# score <= bound -> level
RISK_LEVEL_THRESHOLDS = [
    (33, RISK_LOW),
    (66, RISK_MODERATE),
]

RISK_COLORS = {
    RISK_LOW: "#22c55e",
    RISK_MODERATE: "#f59e0b",
    RISK_HIGH: "#ef4444",
}
RISK_COLOR_UNKNOWN = "#6b7280"

# ==================== Impact Messages ====================

HEALTH_CONCERNS = {
    RISK_LOW: ["No significant concerns", "Standard precautions sufficient"],
    RISK_MODERATE: ["Sensitive individuals may be affected", "Respiratory symptoms possible for some"],
    RISK_HIGH: [
        "General population may experience effects",
        "Outdoor activities should be limited",
        "Protective measures recommended",
    ],
}

SOCIO_ECONOMIC_DESCRIPTIONS = {
    RISK_LOW: "Environmental conditions support normal economic activity.",
    RISK_MODERATE: "Some productivity impacts possible. Planning adjustments may be needed.",
    RISK_HIGH: "Significant economic implications. Proactive measures recommended.",
}

SOCIO_ECONOMIC_CONCERNS = {
    RISK_LOW: ["Normal operations", "Standard planning"],
    RISK_MODERATE: ["Minor productivity considerations", "Community health awareness"],
    RISK_HIGH: ["Potential productivity impacts", "Healthcare demand increase", "Regulatory attention possible"],
}

NO_ECOSYSTEM_CONCERNS = "No significant ecosystem concerns"
ROUTINE_MONITORING_CONCERN = "Routine environmental monitoring active."

# ==================== Summary Messages ====================

# PM2.5 / WHO guideline ratio -> summary (upper bound inclusive)
AIR_QUALITY_SUMMARIES = [
    (1.0, "Air quality is within safe limits. Normal outdoor activities are safe."),
    (2.0, "Air quality is moderately elevated. Sensitive individuals should limit prolonged outdoor exposure."),
    (3.0, "Air quality is unhealthy. Consider reducing outdoor activities, especially for sensitive groups."),
    (5.0, "Air quality is very unhealthy. Significant health impacts possible. Limit outdoor exposure."),
]
AIR_QUALITY_SUMMARY_MAX = "Air quality is hazardous. Avoid outdoor activities. Health warnings in effect."

# ==================== Demo Data ====================

DEMO_AIR_QUALITY = {
    "Delhi": {"pm25": 156, "pm10": 245, "no2": 62, "o3": 45, "so2": 18, "co": 1.2},
    "Mumbai": {"pm25": 89, "pm10": 142, "no2": 48, "o3": 52, "so2": 14, "co": 0.9},
    "Bangalore": {"pm25": 67, "pm10": 98, "no2": 35, "o3": 58, "so2": 8, "co": 0.6},
    "Chennai": {"pm25": 72, "pm10": 115, "no2": 42, "o3": 48, "so2": 12, "co": 0.7},
    "Kolkata": {"pm25": 112, "pm10": 178, "no2": 55, "o3": 38, "so2": 22, "co": 1.0},
    "Hyderabad": {"pm25": 78, "pm10": 125, "no2": 38, "o3": 55, "so2": 10, "co": 0.65},
    "Pune": {"pm25": 65, "pm10": 95, "no2": 32, "o3": 48, "so2": 9, "co": 0.55},
    "Ahmedabad": {"pm25": 95, "pm10": 155, "no2": 45, "o3": 42, "so2": 16, "co": 0.85},
    "Jaipur": {"pm25": 88, "pm10": 148, "no2": 40, "o3": 50, "so2": 13, "co": 0.75},
    "Lucknow": {"pm25": 125, "pm10": 195, "no2": 52, "o3": 40, "so2": 19, "co": 0.95},
}

DEMO_WEATHER = {
    "Delhi": {
        "temp": 18, "humidity": 65, "wind_speed": 8, "wind_dir": "NW",
        "pressure": 1015, "visibility": 4, "description": "Hazy",
    },
    "Mumbai": {
        "temp": 28, "humidity": 75, "wind_speed": 12, "wind_dir": "W",
        "pressure": 1012, "visibility": 8, "description": "Partly Cloudy",
    },
    "Bangalore": {
        "temp": 24, "humidity": 55, "wind_speed": 10, "wind_dir": "E",
        "pressure": 1018, "visibility": 10, "description": "Clear",
    },
    "Chennai": {
        "temp": 30, "humidity": 80, "wind_speed": 15, "wind_dir": "SE",
        "pressure": 1010, "visibility": 7, "description": "Humid",
    },
    "Kolkata": {
        "temp": 22, "humidity": 70, "wind_speed": 6, "wind_dir": "S",
        "pressure": 1014, "visibility": 5, "description": "Misty",
    },
}

DEMO_FORECAST_CONDITIONS = ["Clear", "Partly Cloudy", "Cloudy", "Hazy"]

# ==================== Narrative Defaults ====================

DEFAULT_INTERPRETATIONS = {
    "conditions": (
        "Based on the current environmental data, the air quality and weather conditions are being "
        "monitored. Regular assessment helps identify potential risks early."
    ),
    "forecast": (
        "Environmental forecasting combines weather patterns with air quality trends to provide early "
        "warning of potential risks. Proactive monitoring enables better preparedness."
    ),
    "risk": (
        "Risk assessment considers multiple environmental factors including air pollution levels, weather "
        "conditions, and their potential impacts on health and ecosystems."
    ),
}

STABLE_CONDITIONS_ANALYSIS = (
    "Weather patterns are currently stable. Pollutant dispersion is normal for this time of year, "
    "with no immediate critical risk indicators identified."
)

# ==================== API Response Messages ====================

API_MESSAGES = {
    "conditions_failed": "Failed to fetch environmental data",
    "forecast_failed": "Failed to generate forecast",
    "alert_failed": "AI explanation unavailable.",
    "interpret_failed": "Failed to get AI interpretation",
}

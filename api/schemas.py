from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from config.settings import settings


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class AlertExplainRequest(CamelModel):
    industry: str = settings.DEFAULT_INDUSTRY
    aqi: Optional[float] = None
    pm25: Optional[float] = None
    wind_speed: Optional[float] = None
    persistence: Optional[str] = None


class AlertExplainResponse(BaseModel):
    success: bool
    explanation: str


class InterpretRequest(CamelModel):
    type: str = Field(..., min_length=1)
    data: Any = None


class InterpretResponse(BaseModel):
    success: bool
    interpretation: str


class City(BaseModel):
    name: str
    lat: float
    lon: float


class CitiesResponse(BaseModel):
    success: bool
    cities: List[City]


class IndustriesResponse(BaseModel):
    success: bool
    industries: List[Dict[str, Any]]

import logging

from fastapi import APIRouter, Depends, Query, Response
from fastapi.responses import JSONResponse

from api.dependencies import get_orchestrator
from config.settings import settings
from services.orchestrator import RequestOrchestrator
from utils.constants import API_MESSAGES
from utils.helpers import create_error_response

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/api/environmental-data")
async def get_environmental_data(
    response: Response,
    city: str = Query(settings.DEFAULT_CITY),
    industry: str = Query(settings.DEFAULT_INDUSTRY),
    orchestrator: RequestOrchestrator = Depends(get_orchestrator),
):
    """Current air quality, weather and industry-aware risk analysis"""
    try:
        payload, cache_hit = await orchestrator.current_conditions(city or settings.DEFAULT_CITY,
                                                                   industry or settings.DEFAULT_INDUSTRY)
    except Exception as e:
        logger.exception("Error fetching environmental data for %s / %s", city, industry)
        return JSONResponse(status_code=500, content=create_error_response(API_MESSAGES["conditions_failed"], str(e)))

    response.headers["X-Cache"] = "HIT" if cache_hit else "MISS"
    return payload

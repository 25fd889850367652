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


@router.get("/api/forecast")
async def get_forecast(
    response: Response,
    city: str = Query(settings.DEFAULT_CITY),
    industry: str = Query(settings.DEFAULT_INDUSTRY),
    orchestrator: RequestOrchestrator = Depends(get_orchestrator),
):
    """Short- and long-term qualitative risk forecast"""
    try:
        payload, cache_hit = await orchestrator.forecast(city or settings.DEFAULT_CITY,
                                                         industry or settings.DEFAULT_INDUSTRY)
    except Exception as e:
        logger.exception("Error generating forecast for %s / %s", city, industry)
        return JSONResponse(status_code=500, content=create_error_response(API_MESSAGES["forecast_failed"], str(e)))

    response.headers["X-Cache"] = "HIT" if cache_hit else "MISS"
    return payload

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from api.dependencies import get_orchestrator
from api.schemas import AlertExplainRequest, AlertExplainResponse, InterpretRequest, InterpretResponse
from services.orchestrator import RequestOrchestrator
from utils.constants import API_MESSAGES
from utils.helpers import create_error_response

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/api/alert-explain", response_model=AlertExplainResponse)
async def explain_alert(body: AlertExplainRequest, orchestrator: RequestOrchestrator = Depends(get_orchestrator)):
    """Short explanation of a triggered alert (at most three sentences)"""
    try:
        explanation = await orchestrator.explain_alert(
            body.industry, body.aqi, body.pm25, body.wind_speed, body.persistence
        )
    except Exception as e:
        logger.exception("Error explaining alert for %s", body.industry)
        return JSONResponse(status_code=500, content=create_error_response(API_MESSAGES["alert_failed"], str(e)))

    return AlertExplainResponse(success=True, explanation=explanation)


@router.post("/api/ai-interpret", response_model=InterpretResponse)
async def interpret(body: InterpretRequest, orchestrator: RequestOrchestrator = Depends(get_orchestrator)):
    """Interpretation of conditions, forecast or risk data"""
    try:
        interpretation = await orchestrator.interpret(body.type, body.data)
    except Exception as e:
        logger.exception("Error getting AI interpretation for %s", body.type)
        return JSONResponse(status_code=500, content=create_error_response(API_MESSAGES["interpret_failed"], str(e)))

    return InterpretResponse(success=True, interpretation=interpretation)

from fastapi import Request

from services.orchestrator import RequestOrchestrator


def get_orchestrator(request: Request) -> RequestOrchestrator:
    """The orchestrator created in the app lifespan"""
    return request.app.state.orchestrator

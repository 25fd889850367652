import asyncio
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.routes import alerts, environment, forecast, meta
from config.settings import settings
from data.fetcher import EnvironmentDataSource
from services.narrative import NarrativeEnricher
from services.orchestrator import RequestOrchestrator
from utils.cache import TTLCache

logging.basicConfig(level=settings.LOG_LEVEL, format=settings.LOG_FORMAT)
logger = logging.getLogger(__name__)


async def sweep_cache(cache: TTLCache, interval: float):
    """Periodically drop expired cache entries"""
    while True:
        await asyncio.sleep(interval)
        removed = cache.purge_expired()
        stats = cache.stats()
        logger.debug("Cache sweep: %d expired removed, %d live, %d hits / %d misses",
                     removed, stats["entries"], stats["hits"], stats["misses"])


def build_orchestrator(cache: TTLCache) -> RequestOrchestrator:
    return RequestOrchestrator(
        cache=cache,
        data_source=EnvironmentDataSource(cache=cache),
        enricher=NarrativeEnricher(),
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    for warning in settings.validate_config():
        logger.warning(warning)

    cache = TTLCache(max_entries=settings.CACHE_MAX_ENTRIES)
    app.state.cache = cache
    app.state.orchestrator = build_orchestrator(cache)
    sweeper = asyncio.create_task(sweep_cache(cache, settings.CACHE_SWEEP_SECONDS))
    logger.info("%s %s started (narrative mode: %s)",
                settings.API_TITLE, settings.API_VERSION, app.state.orchestrator.enricher.mode)

    try:
        yield
    finally:
        sweeper.cancel()
        try:
            await sweeper
        except asyncio.CancelledError:
            pass
        cache.clear()
        logger.info("%s stopped", settings.API_TITLE)


app = FastAPI(
    title=settings.API_TITLE,
    version=settings.API_VERSION,
    description=settings.API_DESCRIPTION,
    lifespan=lifespan,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(environment.router)
app.include_router(forecast.router)
app.include_router(alerts.router)
app.include_router(meta.router)


@app.get("/")
def root():
    return {
        "success": True,
        "message": settings.API_TITLE,
        "version": settings.API_VERSION,
        "endpoints": {
            "environmentalData": "/api/environmental-data?city={city}&industry={industry}",
            "forecast": "/api/forecast?city={city}&industry={industry}",
            "alertExplain": "/api/alert-explain",
            "aiInterpret": "/api/ai-interpret",
            "cities": "/api/cities",
            "industries": "/api/industries",
            "docs": "/docs",
        },
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.API_HOST, port=settings.API_PORT)

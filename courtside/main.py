import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from courtside.config import settings
from courtside.constants import SUGGESTIONS
from courtside.db import close_pool, create_pool
from courtside.errors import InformationalQuestion, NoPlayerNameFound, PlayerNotFound, UpstreamUnavailable
from courtside.routers import ask, clusters, health, players, standings
from courtside.services.cluster_service import BackendClient
from courtside.services.llm import LLMClient

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.pool = await create_pool(settings)
    app.state.llm = LLMClient.from_settings(settings)
    app.state.backend = BackendClient.from_settings(settings)
    logger.info("Courtside started (season %d)", settings.CURRENT_SEASON)
    yield
    await app.state.backend.close()
    await app.state.llm.close()
    await close_pool(app.state.pool)


app = FastAPI(title="Courtside NBA Stats Assistant", lifespan=lifespan)

app.include_router(health.router)
app.include_router(ask.router, prefix="/api")
app.include_router(clusters.router, prefix="/api")
app.include_router(standings.router, prefix="/api")
app.include_router(players.router, prefix="/api")


@app.exception_handler(InformationalQuestion)
async def informational_handler(request: Request, exc: InformationalQuestion):
    return JSONResponse(status_code=400, content={"error": exc.message, "suggestions": SUGGESTIONS})


@app.exception_handler(NoPlayerNameFound)
async def no_player_name_handler(request: Request, exc: NoPlayerNameFound):
    return JSONResponse(status_code=400, content={"error": exc.message})


@app.exception_handler(PlayerNotFound)
async def player_not_found_handler(request: Request, exc: PlayerNotFound):
    return JSONResponse(status_code=404, content={"error": exc.message, "suggestions": SUGGESTIONS[:3]})


@app.exception_handler(UpstreamUnavailable)
async def upstream_handler(request: Request, exc: UpstreamUnavailable):
    logger.error("Upstream unavailable on %s: %s", request.url.path, exc)
    return JSONResponse(status_code=500, content={"error": exc.message, "details": exc.details})

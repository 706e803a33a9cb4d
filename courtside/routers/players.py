import logging

from fastapi import APIRouter, Depends
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from courtside.config import Settings
from courtside.deps import get_pool, get_settings
from courtside.services.player_service import get_player_info

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/player/{player_name}")
async def player(player_name: str, pool=Depends(get_pool), settings: Settings = Depends(get_settings)):
    try:
        info = await get_player_info(pool, player_name, settings.CURRENT_SEASON)
    except Exception as exc:
        logger.error("Failed to fetch player %s", player_name, exc_info=True)
        return JSONResponse(
            status_code=500,
            content={"error": "Failed to fetch player information.", "details": str(exc) or "Unknown error"},
        )
    if info is None:
        return JSONResponse(status_code=404, content={"error": "Player not found"})
    return jsonable_encoder(info)

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from courtside.deps import get_pool
from courtside.services.standings_service import get_standings

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/standings/{season}")
async def standings(season: str, pool=Depends(get_pool)):
    try:
        season_year = int(season)
    except ValueError:
        return JSONResponse(status_code=400, content={"error": "Invalid season parameter"})

    try:
        tables = await get_standings(pool, season_year)
    except Exception as exc:
        logger.error("Failed to fetch standings for %s", season_year, exc_info=True)
        return JSONResponse(
            status_code=500,
            content={"error": "Failed to fetch standings.", "details": str(exc) or "Unknown error"},
        )
    return {
        conference: [entry.model_dump(by_alias=True) for entry in entries]
        for conference, entries in tables.items()
    }

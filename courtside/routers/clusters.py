from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from courtside.deps import get_backend

router = APIRouter()


@router.get("/clusters")
async def clusters(age: str | None = None, clusterNumber: str | None = None, backend=Depends(get_backend)):
    if not age or not clusterNumber:
        return JSONResponse(
            status_code=400,
            content={"error": "Missing required parameters", "details": "Both age and clusterNumber are required"},
        )
    status, body = await backend.clusters(age, clusterNumber)
    return JSONResponse(status_code=status, content=body)


@router.get("/clusters/player")
async def player_cluster(name: str | None = None, backend=Depends(get_backend)):
    if not name:
        return JSONResponse(
            status_code=400,
            content={"error": "Missing required parameter", "details": "Player name is required"},
        )
    status, body = await backend.player_cluster(name)
    return JSONResponse(status_code=status, content=body)

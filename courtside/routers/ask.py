import logging
from typing import Any

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from courtside.config import Settings
from courtside.deps import get_backend, get_llm, get_pool, get_settings
from courtside.errors import CourtsideError
from courtside.services.ask_service import answer_question

logger = logging.getLogger(__name__)

router = APIRouter()


class AskRequest(BaseModel):
    question: Any = None
    narrate: bool = False


@router.post("/ask")
async def ask(
    req: AskRequest | None = None,
    pool=Depends(get_pool),
    llm=Depends(get_llm),
    backend=Depends(get_backend),
    settings: Settings = Depends(get_settings),
):
    req = req or AskRequest()
    if not req.question or not isinstance(req.question, str):
        return JSONResponse(status_code=400, content={"error": "Question is required and must be a string"})

    try:
        return await answer_question(
            pool, llm, backend, req.question, season=settings.CURRENT_SEASON, narrate=req.narrate
        )
    except CourtsideError:
        raise
    except Exception as exc:
        logger.error("Unhandled error for question: %s", req.question, exc_info=True)
        return JSONResponse(
            status_code=500,
            content={"error": "Failed to process your question. Please try again.", "details": str(exc) or "Unknown error"},
        )

"""Answer endpoint: one explained snippet plus the ranked shortlist."""
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status

from codeanswer.answer.errors import AnswerError, InternalError
from codeanswer.answer.models import AnswerResponse
from codeanswer.answer.service import AnswerService
from codeanswer.core.providers import get_answer_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["answer"])


@router.get(
    "/answer",
    response_model=AnswerResponse,
    status_code=status.HTTP_200_OK,
)
async def answer(
    q: str = Query(..., description="Natural-language question about the code"),
    limit: int = Query(10, ge=0, description="Accepted for compatibility; the shortlist size is fixed"),
    user_id: str = Query(..., description="Caller id, echoed in the selection"),
    service: AnswerService = Depends(get_answer_service),
) -> AnswerResponse:
    try:
        return await service.answer(q, user_id, limit=limit)
    except AnswerError as exc:
        if isinstance(exc, InternalError):
            logger.error("answer failed for user=%s: %s", user_id, exc.message, exc_info=True)
        raise HTTPException(status_code=exc.status_code, detail=exc.to_detail()) from exc

import httpx
from fastapi import APIRouter, Query, status
from feedback_portal.errors import server_error_response
from feedback_portal.logging_config import get_logger
from .schemas import (
    FeedbackCreate,
    FeedbackRecord,
    FeedbackCreateResponse,
    FeedbackListResponse,
    ErrorResponse,
)
from .service import create_feedback, list_feedback

logger = get_logger(__name__)

router = APIRouter(prefix="/feedback", tags=["feedback"])


@router.post(
    "",
    response_model=FeedbackCreateResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def submit_feedback(data: FeedbackCreate):
    """Принять отзыв."""
    try:
        record = await create_feedback(data)
    except httpx.HTTPError:
        logger.exception("Failed to save feedback")
        return server_error_response()
    
    if not record:
        logger.error("Storage returned no row for inserted feedback")
        return server_error_response()
    
    return FeedbackCreateResponse(data=FeedbackRecord.model_validate(record))


@router.get(
    "",
    response_model=FeedbackListResponse,
    responses={500: {"model": ErrorResponse}},
)
async def get_feedback(
    category: str | None = Query(None),
    sort_by: str | None = Query(None, alias="sortBy"),
):
    """Получить все отзывы (фильтр по категории, сортировка field:direction)."""
    try:
        records = await list_feedback(category, sort_by)
    except httpx.HTTPError:
        logger.exception("Failed to fetch feedback")
        return server_error_response()
    
    items = [FeedbackRecord.model_validate(r) for r in records]
    return FeedbackListResponse(count=len(items), data=items)

"""
User Router for VCard Backend.
Fetch-or-create and upsert of a user's record, keyed by the path username.
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends, Request

from app.api.deps.record_deps import get_record_service
from app.api.dto.user_dto import ErrorResponseDTO, SaveUserResponseDTO
from app.api.services.record_service import RecordService
from app.core.exceptions import MissingBodyError, PersistenceError
from app.core.logging import get_logger

logger = get_logger(__name__)

# Create router
router = APIRouter()


@router.get("/user/{username}")
async def get_user(
    username: str,
    service: RecordService = Depends(get_record_service),
) -> Dict[str, Any]:
    """
    Return the user's record, creating a default one on first access.
    """
    record = await service.fetch_or_create(username)
    return record.to_wire()


@router.post(
    "/user/{username}",
    response_model=SaveUserResponseDTO,
    responses={400: {"model": ErrorResponseDTO}, 500: {"model": ErrorResponseDTO}},
)
async def save_user(
    username: str,
    request: Request,
    service: RecordService = Depends(get_record_service),
) -> SaveUserResponseDTO:
    """
    Normalize and store a full or partial record.

    Returns 400 when the body is missing or not a JSON object and 500 when the
    backend does not confirm the write.
    """
    try:
        payload = await request.json()
    except (ValueError, RecursionError):
        raise MissingBodyError()

    if not await service.upsert(username, payload):
        logger.error(f"Failed to save record for {username}")
        raise PersistenceError(username)

    return SaveUserResponseDTO(ok=True)

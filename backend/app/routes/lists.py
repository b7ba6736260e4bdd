"""
MailChimp Sync Backend — List Route Handlers
==============================================

What:  CRUD endpoints for MailChimp lists (audiences):
           GET /lists, POST /lists,
           GET / PATCH / DELETE /lists/{list_id}
Who:   Thin wrappers around ListService.
"""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db_session
from app.schemas.common import ErrorResponse
from app.schemas.mailchimp_list import ListResponse
from app.services.list_service import ListService, get_list_service

router = APIRouter(prefix="/lists", tags=["Lists"])


@router.get(
    "",
    response_model=List[ListResponse],
    responses={404: {"description": "No lists stored", "model": ErrorResponse}},
    summary="List all lists",
)
async def list_lists(
    db: AsyncSession = Depends(get_db_session),
    service: ListService = Depends(get_list_service),
) -> List[ListResponse]:
    return await service.list_lists(db)


@router.post(
    "",
    response_model=ListResponse,
    responses={400: {"description": "Invalid payload or MailChimp refused", "model": ErrorResponse}},
    summary="Create a list on MailChimp and store it",
)
async def create_list(
    payload: Optional[Dict[str, Any]] = Body(default=None),
    db: AsyncSession = Depends(get_db_session),
    service: ListService = Depends(get_list_service),
) -> ListResponse:
    return await service.create_list(db, payload or {})


@router.get(
    "/{list_id}",
    response_model=ListResponse,
    responses={404: {"description": "List not found", "model": ErrorResponse}},
    summary="Get one list",
)
async def get_list(
    list_id: str,
    db: AsyncSession = Depends(get_db_session),
    service: ListService = Depends(get_list_service),
) -> ListResponse:
    return await service.get_list(db, list_id)


@router.patch(
    "/{list_id}",
    response_model=ListResponse,
    responses={
        400: {"description": "Invalid payload or MailChimp refused", "model": ErrorResponse},
        404: {"description": "List not found or not bound to MailChimp", "model": ErrorResponse},
    },
    summary="Partially update a list",
)
async def update_list(
    list_id: str,
    payload: Optional[Dict[str, Any]] = Body(default=None),
    db: AsyncSession = Depends(get_db_session),
    service: ListService = Depends(get_list_service),
) -> ListResponse:
    return await service.update_list(db, list_id, payload or {})


@router.delete(
    "/{list_id}",
    response_model=Dict[str, Any],
    responses={
        400: {"description": "MailChimp refused", "model": ErrorResponse},
        404: {"description": "List not found or not bound to MailChimp", "model": ErrorResponse},
    },
    summary="Delete a list and its members",
)
async def remove_list(
    list_id: str,
    db: AsyncSession = Depends(get_db_session),
    service: ListService = Depends(get_list_service),
) -> Dict[str, Any]:
    return await service.remove_list(db, list_id)

"""
MailChimp Sync Backend — Member Route Handlers
================================================

What:  CRUD endpoints for the members of one list:
           GET    /lists/{list_id}/members
           POST   /lists/{list_id}/members
           GET    /lists/{list_id}/members/{member_id}
           PATCH  /lists/{list_id}/members/{member_id}
           DELETE /lists/{list_id}/members/{member_id}
How:   Parses the JSON body as a plain object and delegates to MemberService;
       refusals surface as MailChimpSyncError and are rendered by the handlers
       registered in app.main.

Request Bodies:
    Bodies are taken as untyped JSON objects on purpose: the service merges
    them through an allow-list and reports every problem in the
    `{"message", "errors"}` shape, which a typed body model would pre-empt
    with FastAPI's own format.
"""

import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db_session
from app.schemas.common import ErrorResponse
from app.schemas.member import MemberResponse
from app.services.member_service import MemberService, get_member_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/lists/{list_id}/members", tags=["Members"])

_NOT_FOUND = {"description": "Unknown list or member, or list not bound to MailChimp", "model": ErrorResponse}
_REFUSED = {"description": "Invalid payload or MailChimp refused the operation", "model": ErrorResponse}


@router.get(
    "",
    response_model=List[MemberResponse],
    responses={404: _NOT_FOUND},
    summary="List the members of a list",
)
async def list_members(
    list_id: str,
    db: AsyncSession = Depends(get_db_session),
    service: MemberService = Depends(get_member_service),
) -> List[MemberResponse]:
    """Answered from the local store only; an empty list is a 404."""
    return await service.list_members(db, list_id)


@router.post(
    "",
    response_model=MemberResponse,
    responses={400: _REFUSED, 404: _NOT_FOUND},
    summary="Subscribe a member to a list",
    description=(
        "Validates the member, rejects an email already present in the list, "
        "creates it on MailChimp and stores it locally with the MailChimp id."
    ),
)
async def create_member(
    list_id: str,
    payload: Optional[Dict[str, Any]] = Body(default=None),
    db: AsyncSession = Depends(get_db_session),
    service: MemberService = Depends(get_member_service),
) -> MemberResponse:
    return await service.create_member(db, list_id, payload or {})


@router.get(
    "/{member_id}",
    response_model=MemberResponse,
    responses={404: _NOT_FOUND},
    summary="Get one member of a list",
)
async def get_member(
    list_id: str,
    member_id: str,
    db: AsyncSession = Depends(get_db_session),
    service: MemberService = Depends(get_member_service),
) -> MemberResponse:
    return await service.get_member(db, list_id, member_id)


@router.patch(
    "/{member_id}",
    response_model=MemberResponse,
    responses={400: _REFUSED, 404: _NOT_FOUND},
    summary="Partially update a member",
    description=(
        "Fields absent from the body keep their stored values. The merged "
        "member is revalidated and pushed to MailChimp before it is stored."
    ),
)
async def update_member(
    list_id: str,
    member_id: str,
    payload: Optional[Dict[str, Any]] = Body(default=None),
    db: AsyncSession = Depends(get_db_session),
    service: MemberService = Depends(get_member_service),
) -> MemberResponse:
    return await service.update_member(db, list_id, member_id, payload or {})


@router.delete(
    "/{member_id}",
    response_model=Dict[str, Any],
    responses={400: _REFUSED, 404: _NOT_FOUND},
    summary="Remove a member from a list",
)
async def remove_member(
    list_id: str,
    member_id: str,
    db: AsyncSession = Depends(get_db_session),
    service: MemberService = Depends(get_member_service),
) -> Dict[str, Any]:
    """Deleted on MailChimp first; the local row survives a remote failure."""
    return await service.remove_member(db, list_id, member_id)

"""lp_member REST API — enrollment and balance reads, all require a bearer token."""

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.lp_common.database import get_db_session
from src.lp_common.response import ApiResponse, success_response
from src.lp_gateway.auth.dependencies import Principal, get_current_principal
from src.lp_gateway.middleware.request_log import request_id_of
from src.lp_member.application.schemas import EnrollRequest
from src.lp_member.application.service import MemberApplicationService

router = APIRouter(prefix="/members", tags=["members"])

_service = MemberApplicationService()


@router.post("", status_code=status.HTTP_201_CREATED)
async def enroll_member(
    body: EnrollRequest,
    principal: Annotated[Principal, Depends(get_current_principal)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    data = await _service.enroll(db, body.user_id, body.tier.value, body.segment)
    resp = success_response(data.model_dump(), message="Member enrolled successfully")
    resp.request_id = request_id_of(request)
    return resp


@router.get("/{member_id}")
async def get_member(
    member_id: uuid.UUID,
    principal: Annotated[Principal, Depends(get_current_principal)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    data = await _service.get_member(db, str(member_id))
    resp = success_response(data.model_dump())
    resp.request_id = request_id_of(request)
    return resp


@router.get("/{member_id}/balance")
async def get_balance(
    member_id: uuid.UUID,
    principal: Annotated[Principal, Depends(get_current_principal)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    data = await _service.get_balance(db, str(member_id))
    resp = success_response(data.model_dump())
    resp.request_id = request_id_of(request)
    return resp

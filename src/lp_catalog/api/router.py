"""lp_catalog REST API — reward catalog."""

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.lp_catalog.application.schemas import CreateRewardRequest
from src.lp_catalog.application.service import CatalogApplicationService
from src.lp_common.database import get_db_session
from src.lp_common.enums import RewardStatus
from src.lp_common.response import ApiResponse, success_response
from src.lp_gateway.auth.dependencies import Principal, get_current_principal
from src.lp_gateway.middleware.request_log import request_id_of

router = APIRouter(prefix="/rewards", tags=["rewards"])

_service = CatalogApplicationService()


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_reward(
    body: CreateRewardRequest,
    principal: Annotated[Principal, Depends(get_current_principal)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    data = await _service.create_reward(
        db,
        name=body.name,
        points_required=body.points_required,
        monetary_value_cents=body.monetary_value_cents,
        stock_quantity=body.stock_quantity,
        status=body.status.value,
        valid_from=body.valid_from,
        valid_until=body.valid_until,
        partner_code=body.partner_code,
    )
    resp = success_response(data.model_dump(), message="Reward created")
    resp.request_id = request_id_of(request)
    return resp


@router.get("")
async def list_rewards(
    principal: Annotated[Principal, Depends(get_current_principal)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
    status_filter: RewardStatus | None = Query(None, alias="status"),
) -> ApiResponse:
    data = await _service.list_rewards(db, status_filter.value if status_filter else None)
    resp = success_response(data.model_dump())
    resp.request_id = request_id_of(request)
    return resp


@router.get("/{reward_id}")
async def get_reward(
    reward_id: uuid.UUID,
    principal: Annotated[Principal, Depends(get_current_principal)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    data = await _service.get_reward(db, str(reward_id))
    resp = success_response(data.model_dump())
    resp.request_id = request_id_of(request)
    return resp

"""lp_redemption REST API."""

from typing import Annotated

from fastapi import APIRouter, Depends, Path, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.lp_common.database import get_db_session
from src.lp_common.response import ApiResponse, success_response
from src.lp_gateway.auth.dependencies import Principal, get_current_principal
from src.lp_gateway.middleware.request_log import request_id_of
from src.lp_redemption.application.schemas import RedeemRequest
from src.lp_redemption.application.service import RedemptionApplicationService

router = APIRouter(prefix="/redemptions", tags=["redemptions"])

_service = RedemptionApplicationService()


@router.post("", status_code=status.HTTP_201_CREATED)
async def redeem(
    body: RedeemRequest,
    principal: Annotated[Principal, Depends(get_current_principal)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    data = await _service.redeem(
        db,
        str(body.member_id),
        str(body.reward_id),
        channel=body.channel,
        idempotency_key=body.idempotency_key,
    )
    resp = success_response(data.model_dump(), message="Redemption completed")
    resp.request_id = request_id_of(request)
    return resp


@router.get("/{redemption_id}")
async def get_redemption(
    principal: Annotated[Principal, Depends(get_current_principal)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
    redemption_id: int = Path(..., ge=1),
) -> ApiResponse:
    data = await _service.get_redemption(db, redemption_id)
    resp = success_response(data.model_dump())
    resp.request_id = request_id_of(request)
    return resp

"""lp_ledger REST API — point transactions and ledger history."""

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.lp_common.database import get_db_session
from src.lp_common.response import ApiResponse, success_response
from src.lp_gateway.auth.dependencies import Principal, get_current_principal
from src.lp_gateway.middleware.request_log import request_id_of
from src.lp_ledger.application.schemas import LedgerEntryItem, PointTransactionRequest
from src.lp_ledger.application.service import LedgerApplicationService
from src.lp_ledger.domain.models import LedgerLinks

router = APIRouter(tags=["ledger"])

_service = LedgerApplicationService()


@router.post("/point-transactions", status_code=status.HTTP_201_CREATED)
async def apply_transaction(
    body: PointTransactionRequest,
    principal: Annotated[Principal, Depends(get_current_principal)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    entry = await _service.apply_transaction(
        db,
        str(body.member_id),
        body.transaction_type,
        body.points,
        description=body.description,
        links=LedgerLinks(
            rule_id=body.rule_id,
            reward_id=str(body.reward_id) if body.reward_id else None,
            reversal_of=body.reversal_of,
        ),
        idempotency_key=body.idempotency_key,
    )
    resp = success_response(
        LedgerEntryItem.from_domain(entry).model_dump(), message="Transaction applied"
    )
    resp.request_id = request_id_of(request)
    return resp


@router.get("/members/{member_id}/ledger")
async def list_ledger(
    member_id: uuid.UUID,
    principal: Annotated[Principal, Depends(get_current_principal)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
    cursor: str | None = Query(None, description="Pagination cursor (opaque Base64)"),
    limit: int = Query(50, ge=1, le=200, description="Items per page"),
) -> ApiResponse:
    data = await _service.list_ledger(db, str(member_id), cursor, limit)
    resp = success_response(data.model_dump())
    resp.request_id = request_id_of(request)
    return resp


@router.get("/members/{member_id}/ledger/verify")
async def verify_ledger(
    member_id: uuid.UUID,
    principal: Annotated[Principal, Depends(get_current_principal)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    data = await _service.verify_ledger(db, str(member_id))
    resp = success_response(data.model_dump())
    resp.request_id = request_id_of(request)
    return resp

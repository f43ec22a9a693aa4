"""
기초잔액 API 라우트

GET    /api/opening-balances            - 기초잔액 목록
POST   /api/opening-balances            - 기초잔액 설정 (중복 시 409)
POST   /api/opening-balances/snapshot   - 일괄 개시
GET    /api/opening-balances/{id}       - 기초잔액 조회
PUT    /api/opening-balances/{id}       - 기초잔액 수정 (차액만 반영)
DELETE /api/opening-balances/{id}       - 기초잔액 삭제 (잔액 역반영)
"""

from typing import Any

from fastapi import APIRouter, Depends, Query

from core.ledger import Ledger
from core.types import PartnerType
from web.dependencies import get_ledger
from web.models.requests import (
    OpeningBalanceCreateRequest,
    OpeningBalanceUpdateRequest,
    OpeningSnapshotRequest,
)
from web.models.responses import ERROR_RESPONSES

router = APIRouter(
    prefix="/api/opening-balances",
    tags=["Opening Balances"],
    responses=ERROR_RESPONSES,
)


@router.get("")
async def list_opening_balances(
    account: str | None = Query(default=None, description="계정 ID 또는 코드"),
    partner_type: PartnerType | None = Query(default=None, alias="partnerType"),
    ledger: Ledger = Depends(get_ledger),
) -> list[dict[str, Any]]:
    """기초잔액 목록"""
    balances = await ledger.openings.list_opening_balances(account, partner_type)
    return [balance.to_dict() for balance in balances]


@router.post("", status_code=201)
async def set_opening_balance(
    request: OpeningBalanceCreateRequest,
    ledger: Ledger = Depends(get_ledger),
) -> dict[str, Any]:
    """기초잔액 설정"""
    balance = await ledger.openings.set_opening_balance(request.to_request())
    return balance.to_dict()


@router.post("/snapshot", status_code=201)
async def load_snapshot(
    request: OpeningSnapshotRequest,
    ledger: Ledger = Depends(get_ledger),
) -> dict[str, Any]:
    """일괄 개시 (차액은 자본 계정으로 조정)"""
    result = await ledger.openings.load_snapshot(request.to_snapshot())
    return result.to_dict()


@router.get("/{opening_id}")
async def get_opening_balance(
    opening_id: str,
    ledger: Ledger = Depends(get_ledger),
) -> dict[str, Any]:
    """기초잔액 조회"""
    balance = await ledger.openings.get_opening_balance(opening_id)
    return balance.to_dict()


@router.put("/{opening_id}")
async def update_opening_balance(
    opening_id: str,
    request: OpeningBalanceUpdateRequest,
    ledger: Ledger = Depends(get_ledger),
) -> dict[str, Any]:
    """기초잔액 수정"""
    balance = await ledger.openings.update_opening_balance(
        opening_id,
        debit_amount=request.debit_amount,
        credit_amount=request.credit_amount,
        balance_amount=request.balance_amount,
        opening_date=request.opening_date,
        description=request.description,
    )
    return balance.to_dict()


@router.delete("/{opening_id}")
async def delete_opening_balance(
    opening_id: str,
    ledger: Ledger = Depends(get_ledger),
) -> dict[str, Any]:
    """기초잔액 삭제"""
    await ledger.openings.delete_opening_balance(opening_id)
    return {"deleted": True, "id": opening_id}

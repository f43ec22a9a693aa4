"""
계정과목 API 라우트

GET    /api/accounts         - 계정 목록
POST   /api/accounts         - 계정 생성
GET    /api/accounts/{ref}   - 계정 조회 (ID 또는 코드)
DELETE /api/accounts/{ref}   - 계정 비활성화
"""

from typing import Any

from fastapi import APIRouter, Depends, Query

from core.ledger import AccountType, Ledger
from web.dependencies import get_ledger
from web.models.requests import AccountCreateRequest
from web.models.responses import ERROR_RESPONSES

router = APIRouter(prefix="/api/accounts", tags=["Accounts"], responses=ERROR_RESPONSES)


@router.get("")
async def list_accounts(
    account_type: AccountType | None = Query(default=None, alias="type"),
    include_inactive: bool = Query(default=False, alias="includeInactive"),
    ledger: Ledger = Depends(get_ledger),
) -> list[dict[str, Any]]:
    """계정 목록 (코드 순)"""
    accounts = await ledger.registry.list_accounts(account_type, include_inactive)
    return [account.to_dict() for account in accounts]


@router.post("", status_code=201)
async def create_account(
    request: AccountCreateRequest,
    ledger: Ledger = Depends(get_ledger),
) -> dict[str, Any]:
    """계정 생성 (코드 중복 시 409)"""
    account = await ledger.registry.create_account(request.to_spec())
    return account.to_dict()


@router.get("/{ref}")
async def get_account(
    ref: str,
    ledger: Ledger = Depends(get_ledger),
) -> dict[str, Any]:
    """계정 조회"""
    account = await ledger.registry.get_account(ref)
    return account.to_dict()


@router.delete("/{ref}")
async def deactivate_account(
    ref: str,
    ledger: Ledger = Depends(get_ledger),
) -> dict[str, Any]:
    """계정 비활성화 (물리 삭제 없음)"""
    account = await ledger.registry.deactivate_account(ref)
    return account.to_dict()

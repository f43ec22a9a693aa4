"""
회계 운영 API 라우트

GET  /api/accounting/position     - 재무상태표 합계 (자산/부채/자본/차이)
POST /api/accounting/auto-balance - Auto-Balancer 실행 (관리자 수동 실행 전용)
POST /api/accounting/events       - 업무 이벤트를 POSTED 분개로 기록
GET  /api/accounting/verify       - 잔액 불변식 검증
"""

from typing import Any

from fastapi import APIRouter, Depends

from core.ledger import Ledger
from web.dependencies import get_ledger
from web.models.requests import BusinessEventRequest
from web.models.responses import ERROR_RESPONSES

router = APIRouter(prefix="/api/accounting", tags=["Accounting"], responses=ERROR_RESPONSES)


@router.get("/position")
async def get_position(ledger: Ledger = Depends(get_ledger)) -> dict[str, Any]:
    """재무상태표 합계 (변경 없음)"""
    position = await ledger.balancer.position()
    return position.to_dict()


@router.post("/auto-balance")
async def auto_balance(ledger: Ledger = Depends(get_ledger)) -> dict[str, Any]:
    """Auto-Balancer 실행

    차이가 0.01 미만이면 변경 없이 현재 합계만 반환.
    """
    result = await ledger.balancer.run()
    return result.to_dict()


@router.post("/events", status_code=201)
async def record_event(
    request: BusinessEventRequest,
    ledger: Ledger = Depends(get_ledger),
) -> dict[str, Any]:
    """업무 이벤트 → POSTED 분개"""
    entry = await ledger.record_event(request.to_event())
    return entry.to_dict()


@router.get("/verify")
async def verify_balances(ledger: Ledger = Depends(get_ledger)) -> dict[str, Any]:
    """잔액 불변식 검증 결과"""
    mismatches = await ledger.projector.verify()
    return {
        "consistent": not mismatches,
        "mismatches": [mismatch.to_dict() for mismatch in mismatches],
    }

"""
분개 API 라우트

GET    /api/journal-entries               - 분개 목록 (페이지)
POST   /api/journal-entries               - 분개 생성 (post=true면 즉시 전기)
GET    /api/journal-entries/{id}          - 분개 조회
PUT    /api/journal-entries/{id}          - DRAFT 분개 수정
DELETE /api/journal-entries/{id}          - DRAFT 분개 삭제
POST   /api/journal-entries/{id}/post     - 전기
POST   /api/journal-entries/{id}/reverse  - 역분개
"""

from datetime import date
from typing import Any

from fastapi import APIRouter, Body, Depends, Query

from core.constants import LedgerDefaults
from core.ledger import EntryFilter, JournalStatus, Ledger
from web.dependencies import get_ledger
from web.models.requests import (
    JournalEntryCreateRequest,
    JournalEntryUpdateRequest,
    ReverseEntryRequest,
)
from web.models.responses import ERROR_RESPONSES

router = APIRouter(
    prefix="/api/journal-entries",
    tags=["Journal Entries"],
    responses=ERROR_RESPONSES,
)


@router.get("")
async def list_entries(
    page: int = Query(default=1, ge=1),
    limit: int | None = Query(default=None, ge=1, le=LedgerDefaults.MAX_PAGE_SIZE),
    start_date: date | None = Query(default=None, alias="startDate"),
    end_date: date | None = Query(default=None, alias="endDate"),
    reference: str | None = Query(default=None),
    status: JournalStatus | None = Query(default=None),
    ledger: Ledger = Depends(get_ledger),
) -> dict[str, Any]:
    """분개 목록 (entry_date DESC, journal_number DESC)

    Returns:
        {entries: [...], pagination: {page, limit, total, totalPages}}
    """
    result = await ledger.journal.list_entries(
        EntryFilter(
            start_date=start_date,
            end_date=end_date,
            reference=reference,
            status=status,
            page=page,
            limit=limit or ledger.config.default_page_size,
        )
    )
    return result.to_dict()


@router.post("", status_code=201)
async def create_entry(
    request: JournalEntryCreateRequest,
    ledger: Ledger = Depends(get_ledger),
) -> dict[str, Any]:
    """분개 생성"""
    entry = await ledger.journal.create_entry(request.to_request(), post=request.post)
    return entry.to_dict()


@router.get("/{entry_id}")
async def get_entry(
    entry_id: str,
    ledger: Ledger = Depends(get_ledger),
) -> dict[str, Any]:
    """분개 조회 (라인 포함)"""
    entry = await ledger.journal.get_entry(entry_id)
    return entry.to_dict()


@router.put("/{entry_id}")
async def update_entry(
    entry_id: str,
    request: JournalEntryUpdateRequest,
    ledger: Ledger = Depends(get_ledger),
) -> dict[str, Any]:
    """DRAFT 분개 수정 (POSTED면 409)"""
    entry = await ledger.journal.update_entry(
        entry_id,
        header=request.to_update(),
        lines=request.to_lines(),
    )
    return entry.to_dict()


@router.delete("/{entry_id}")
async def delete_entry(
    entry_id: str,
    ledger: Ledger = Depends(get_ledger),
) -> dict[str, Any]:
    """DRAFT 분개 삭제 (POSTED면 409)"""
    await ledger.journal.delete_entry(entry_id)
    return {"deleted": True, "id": entry_id}


@router.post("/{entry_id}/post")
async def post_entry(
    entry_id: str,
    ledger: Ledger = Depends(get_ledger),
) -> dict[str, Any]:
    """분개 전기 (이미 전기된 경우 그대로 반환)"""
    entry = await ledger.journal.post_entry(entry_id)
    return entry.to_dict()


@router.post("/{entry_id}/reverse", status_code=201)
async def reverse_entry(
    entry_id: str,
    request: ReverseEntryRequest | None = Body(default=None),
    ledger: Ledger = Depends(get_ledger),
) -> dict[str, Any]:
    """역분개 생성 및 전기"""
    request = request or ReverseEntryRequest()
    entry = await ledger.journal.reverse_entry(
        entry_id,
        entry_date=request.entry_date,
        description=request.description,
    )
    return entry.to_dict()

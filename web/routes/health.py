"""
헬스 체크 엔드포인트

GET /health - 서버 및 DB 상태 확인
"""

import logging
import sqlite3

from fastapi import APIRouter, Depends

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.config.loader import Settings
from web.dependencies import get_app_settings
from web.models.responses import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])

API_VERSION = "1.0.0"


@router.get("/health", response_model=HealthResponse)
async def health_check(
    settings: Settings = Depends(get_app_settings),
) -> HealthResponse:
    """서버 상태 확인

    Returns:
        HealthResponse: status, mode, database, version 정보
    """
    database = "ok"
    try:
        async with SQLiteAdapter(settings.db_path) as db:
            await db.fetchone("SELECT 1")
    except sqlite3.Error as e:
        logger.warning(f"헬스 체크 DB 연결 실패: {e}")
        database = "unavailable"

    return HealthResponse(
        status="ok" if database == "ok" else "degraded",
        mode=settings.mode.value,
        database=database,
        version=API_VERSION,
    )

"""
의존성 주입

FastAPI의 Depends를 사용한 의존성 관리.
"""

from typing import AsyncGenerator

from fastapi import Depends

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.config.loader import Settings, get_settings
from core.ledger import Ledger


def get_app_settings() -> Settings:
    """애플리케이션 설정 반환"""
    return get_settings()


async def get_db_write(
    settings: Settings = Depends(get_app_settings),
) -> AsyncGenerator[SQLiteAdapter, None]:
    """DB 세션 반환 (쓰기 가능)

    요청마다 연결을 열고 응답 후 닫는다.
    쓰기 직렬화는 BEGIN IMMEDIATE 트랜잭션에 맡긴다.
    """
    async with SQLiteAdapter(settings.db_path, readonly=False) as db:
        yield db


async def get_ledger(
    db: SQLiteAdapter = Depends(get_db_write),
    settings: Settings = Depends(get_app_settings),
) -> Ledger:
    """요청 단위 Ledger 반환"""
    return Ledger(db, settings.ledger)

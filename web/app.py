"""
FastAPI 애플리케이션

라우터 등록, 예외 처리 및 앱 설정.
"""

import logging
import sqlite3
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from core.config.loader import get_settings
from core.logging import setup_logging

# 로깅 설정 (콘솔 + 파일)
setup_logging("web")

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.ledger import LedgerError, init_ledger_schema
from web.routes import (
    accounting,
    accounts,
    health,
    journal_entries,
    opening_balances,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """앱 생명주기 관리"""
    settings = get_settings()

    # 시작 시 - DB 스키마 자동 초기화 (기본 계정 포함)
    async with SQLiteAdapter(settings.db_path) as db:
        await init_ledger_schema(db)
    logger.info(f"Web: Ledger 스키마 준비 완료 ({settings.db_path})")

    yield


app = FastAPI(
    title="LedgerEngine API",
    description="복식부기 장부 API (계정과목, 분개, 기초잔액, 재무상태표 균형 보정)",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# CORS 설정 (개발용)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =========================================================================
# 예외 처리 → {"error": message}
# =========================================================================


@app.exception_handler(LedgerError)
async def ledger_error_handler(request: Request, exc: LedgerError) -> JSONResponse:
    """Ledger 예외를 상태 코드와 메시지로 변환"""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} 실패: {exc.message}")
    else:
        logger.info(f"{request.method} {request.url.path} 거부 ({exc.category}): {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """요청 스키마 오류 → 400"""
    details = "; ".join(
        f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
        for error in exc.errors()
    )
    return JSONResponse(status_code=400, content={"error": f"Invalid request: {details}"})


@app.exception_handler(sqlite3.Error)
async def database_error_handler(request: Request, exc: sqlite3.Error) -> JSONResponse:
    """처리되지 않은 DB 오류 → 500"""
    logger.exception(f"{request.method} {request.url.path} DB 오류: {exc}")
    return JSONResponse(status_code=500, content={"error": "Database error"})


# =========================================================================
# API 라우터 등록
# =========================================================================

app.include_router(health.router)
app.include_router(accounts.router)
app.include_router(journal_entries.router)
app.include_router(opening_balances.router)
app.include_router(accounting.router)

"""
복식부기 스키마 초기화

Web/스크립트 시작 시 자동으로 Ledger 테이블과 View 생성.
CREATE IF NOT EXISTS / DROP VIEW IF EXISTS 패턴으로 안전하게 동작.

금액 컬럼은 모두 TEXT (Decimal 문자열). 합계 계산은 Python Decimal로 수행.
"""

import logging
import uuid
from typing import TYPE_CHECKING

from core.ledger.types import INITIAL_ACCOUNTS

if TYPE_CHECKING:
    from adapters.db.sqlite_adapter import SQLiteAdapter

logger = logging.getLogger(__name__)

# 분개 번호 시퀀스 이름
JOURNAL_NUMBER_SEQUENCE = "journal_number"


async def init_ledger_schema(db: "SQLiteAdapter") -> None:
    """Ledger 스키마 초기화 (테이블 + View + 기본 계정)

    이미 존재하는 경우 안전하게 건너뜀 (IF NOT EXISTS).

    Args:
        db: SQLiteAdapter 인스턴스
    """
    async with db.transaction():
        await _create_ledger_tables(db)
        await _create_ledger_views(db)
        await _seed_sequences(db)
        await _insert_initial_accounts(db)
    logger.info("Ledger 스키마 초기화 완료")


async def _create_ledger_tables(db: "SQLiteAdapter") -> None:
    """Ledger 테이블 생성"""

    # account 테이블 (계정과목)
    await db.execute("""
        CREATE TABLE IF NOT EXISTS account (
            account_id       TEXT PRIMARY KEY,
            code             TEXT NOT NULL UNIQUE,
            name             TEXT NOT NULL,
            account_type     TEXT NOT NULL
                CHECK (account_type IN ('ASSET', 'LIABILITY', 'EQUITY', 'REVENUE', 'EXPENSE')),
            subtype          TEXT,
            normal_balance   TEXT NOT NULL CHECK (normal_balance IN ('DEBIT', 'CREDIT')),
            description      TEXT,
            opening_balance  TEXT NOT NULL DEFAULT '0.00',
            current_balance  TEXT NOT NULL DEFAULT '0.00',
            is_active        INTEGER NOT NULL DEFAULT 1,
            created_at       TEXT NOT NULL DEFAULT (datetime('now')),
            updated_at       TEXT NOT NULL DEFAULT (datetime('now'))
        )
    """)

    # journal_entry 테이블 (분개 헤더)
    await db.execute("""
        CREATE TABLE IF NOT EXISTS journal_entry (
            entry_id             TEXT PRIMARY KEY,
            journal_number       TEXT NOT NULL UNIQUE,
            entry_date           TEXT NOT NULL,
            reference_number     TEXT,
            description          TEXT,
            source_document_type TEXT,
            source_document_id   TEXT,
            status               TEXT NOT NULL DEFAULT 'DRAFT'
                CHECK (status IN ('DRAFT', 'POSTED')),
            total_debit          TEXT NOT NULL DEFAULT '0.00',
            total_credit         TEXT NOT NULL DEFAULT '0.00',
            posted_at            TEXT,
            created_at           TEXT NOT NULL DEFAULT (datetime('now')),
            updated_at           TEXT NOT NULL DEFAULT (datetime('now'))
        )
    """)

    # journal_line 테이블 (분개 라인, 헤더 삭제 시 함께 삭제)
    await db.execute("""
        CREATE TABLE IF NOT EXISTS journal_line (
            line_id          TEXT PRIMARY KEY,
            entry_id         TEXT NOT NULL,
            line_number      INTEGER NOT NULL,
            account_id       TEXT NOT NULL,
            debit_amount     TEXT,
            credit_amount    TEXT,
            description      TEXT,
            reference        TEXT,
            FOREIGN KEY (entry_id) REFERENCES journal_entry(entry_id) ON DELETE CASCADE,
            FOREIGN KEY (account_id) REFERENCES account(account_id),
            UNIQUE (entry_id, line_number),
            CHECK ((debit_amount IS NULL) <> (credit_amount IS NULL))
        )
    """)

    # opening_balance 테이블 (기초잔액, 계정/거래처당 1건)
    await db.execute("""
        CREATE TABLE IF NOT EXISTS opening_balance (
            opening_id       TEXT PRIMARY KEY,
            account_id       TEXT NOT NULL,
            partner_type     TEXT,
            partner_id       TEXT,
            partner_name     TEXT,
            debit_amount     TEXT NOT NULL DEFAULT '0.00',
            credit_amount    TEXT NOT NULL DEFAULT '0.00',
            opening_date     TEXT NOT NULL,
            fiscal_year      INTEGER NOT NULL,
            description      TEXT,
            created_at       TEXT NOT NULL DEFAULT (datetime('now')),
            updated_at       TEXT NOT NULL DEFAULT (datetime('now')),
            FOREIGN KEY (account_id) REFERENCES account(account_id)
        )
    """)

    # ledger_sequence 테이블 (분개 번호 채번)
    await db.execute("""
        CREATE TABLE IF NOT EXISTS ledger_sequence (
            name             TEXT PRIMARY KEY,
            value            INTEGER NOT NULL
        )
    """)

    # 인덱스
    await db.execute("""
        CREATE INDEX IF NOT EXISTS ix_journal_entry_date
        ON journal_entry(entry_date DESC, journal_number DESC)
    """)

    await db.execute("""
        CREATE INDEX IF NOT EXISTS ix_journal_entry_source
        ON journal_entry(source_document_type, source_document_id)
    """)

    await db.execute("""
        CREATE INDEX IF NOT EXISTS ix_journal_line_account
        ON journal_line(account_id)
    """)

    await db.execute("""
        CREATE UNIQUE INDEX IF NOT EXISTS ux_opening_balance_target
        ON opening_balance(account_id, COALESCE(partner_type, ''), COALESCE(partner_id, ''))
    """)


async def _create_ledger_views(db: "SQLiteAdapter") -> None:
    """Ledger View 생성 (DROP 후 재생성)"""

    # 계정별 원장 (전기된 라인만)
    await db.execute("DROP VIEW IF EXISTS v_account_ledger")
    await db.execute("""
        CREATE VIEW v_account_ledger AS
        SELECT
            jl.account_id,
            a.code AS account_code,
            a.name AS account_name,
            je.entry_id,
            je.journal_number,
            je.entry_date,
            je.reference_number,
            jl.line_number,
            jl.debit_amount,
            jl.credit_amount,
            COALESCE(jl.description, je.description) AS description
        FROM journal_line jl
        JOIN journal_entry je ON je.entry_id = jl.entry_id
        JOIN account a ON a.account_id = jl.account_id
        WHERE je.status = 'POSTED'
    """)


async def _seed_sequences(db: "SQLiteAdapter") -> None:
    """분개 번호 시퀀스 시드 (기존 분개의 최대 번호에서 시작)"""
    await db.execute(
        """
        INSERT OR IGNORE INTO ledger_sequence (name, value)
        SELECT ?, COALESCE(MAX(CAST(journal_number AS INTEGER)), 0)
        FROM journal_entry
        """,
        (JOURNAL_NUMBER_SEQUENCE,),
    )


async def _insert_initial_accounts(db: "SQLiteAdapter") -> None:
    """기본 계정 생성 (이미 있으면 무시)"""
    for spec in INITIAL_ACCOUNTS:
        await db.execute(
            """
            INSERT OR IGNORE INTO account (
                account_id, code, name, account_type, subtype,
                normal_balance, description
            ) VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
            (
                str(uuid.uuid4()),
                spec.code,
                spec.name,
                spec.account_type.value,
                spec.subtype.value if spec.subtype else None,
                spec.resolved_normal_balance().value,
                spec.description,
            ),
        )

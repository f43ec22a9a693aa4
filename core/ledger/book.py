"""
Ledger 조립

하나의 SQLiteAdapter 위에 레지스트리, 프로젝터, 분개 저장소,
기초잔액 로더, Auto-Balancer, 분개 생성기를 연결한다.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from core.config.loader import LedgerConfig
from core.ledger.balancer import AutoBalancer
from core.ledger.entry_builder import BusinessEvent, JournalEntryBuilder
from core.ledger.models import JournalEntry
from core.ledger.opening import OpeningBalanceLoader
from core.ledger.projector import BalanceProjector
from core.ledger.registry import AccountRegistry
from core.ledger.store import JournalStore

if TYPE_CHECKING:
    from adapters.db.sqlite_adapter import SQLiteAdapter

logger = logging.getLogger(__name__)


class Ledger:
    """복식부기 장부

    Args:
        db: 연결된 SQLiteAdapter
        config: Ledger 설정 (None이면 기본값)

    사용 예시:
    ```python
    async with SQLiteAdapter(db_path) as db:
        await init_ledger_schema(db)
        ledger = Ledger(db)

        entry = await ledger.record_event(BusinessEvent(
            kind=SourceDocumentType.INVOICE,
            document_id="INV-0001",
            amount="12500",
            event_date="2026-03-01",
        ))
        result = await ledger.balancer.run()
    ```
    """

    def __init__(self, db: SQLiteAdapter, config: LedgerConfig | None = None):
        config = config or LedgerConfig()
        self.db = db
        self.config = config

        self.registry = AccountRegistry(db)
        self.projector = BalanceProjector(db, self.registry)
        self.journal = JournalStore(
            db,
            self.registry,
            self.projector,
            tolerance=config.balance_tolerance,
        )
        self.openings = OpeningBalanceLoader(
            db,
            self.registry,
            self.projector,
            owner_equity_code=config.owner_equity_code,
            tolerance=config.balance_tolerance,
        )
        self.balancer = AutoBalancer(
            db,
            self.registry,
            self.journal,
            owner_equity_code=config.owner_equity_code,
            adjustment_account_code=config.adjustment_account_code,
            tolerance=config.balance_tolerance,
        )
        self.builder = JournalEntryBuilder(self.registry)

    async def record_event(self, event: BusinessEvent) -> JournalEntry:
        """업무 이벤트를 POSTED 분개로 기록

        계정 지연 생성과 분개 전기를 한 트랜잭션으로 묶는다.
        """
        async with self.db.transaction():
            request = await self.builder.build(event)
            entry = await self.journal.create_entry(request, post=True)

        logger.info(
            f"업무 이벤트 분개: {event.kind.value} {event.document_id} -> {entry.journal_number}"
        )
        return entry

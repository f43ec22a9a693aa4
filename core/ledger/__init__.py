"""
복식부기 (Double-Entry Bookkeeping) 엔진

계정과목, 분개, 잔액 반영, 기초잔액, 재무상태표 자동 균형 보정.

사용 예시:
```python
from core.ledger import Ledger, EntryRequest, LineInput, init_ledger_schema

await init_ledger_schema(db)
ledger = Ledger(db)

# 분개 생성 + 전기
entry = await ledger.journal.create_entry(
    EntryRequest(
        entry_date="2026-03-01",
        lines=[
            LineInput(account="1010", debit_amount="500"),
            LineInput(account="4000", credit_amount="500"),
        ],
    ),
    post=True,
)

# 잔액 불변식 검증
mismatches = await ledger.projector.verify()
```
"""

from core.ledger.balancer import AutoBalancer, AutoBalanceResult, BalanceSheetPosition
from core.ledger.book import Ledger
from core.ledger.entry_builder import BusinessEvent, JournalEntryBuilder
from core.ledger.errors import (
    AccountNotFoundError,
    ConflictError,
    DuplicateAccountError,
    DuplicateOpeningBalanceError,
    EntryNotFoundError,
    ImmutableEntryError,
    InvalidLineError,
    LedgerError,
    NotFoundError,
    OpeningBalanceNotFoundError,
    PersistenceError,
    UnbalancedEntryError,
    ValidationError,
)
from core.ledger.models import (
    Account,
    EntryFilter,
    EntryPage,
    EntryRequest,
    EntryUpdate,
    JournalEntry,
    JournalLine,
    LineInput,
    OpeningBalance,
    OpeningBalanceRequest,
    PartnerRef,
)
from core.ledger.opening import OpeningBalanceLoader, OpeningItem, OpeningSnapshot, SnapshotResult
from core.ledger.projector import BalanceMismatch, BalanceProjector
from core.ledger.registry import AccountRegistry
from core.ledger.schema import init_ledger_schema
from core.ledger.store import JournalStore
from core.ledger.types import (
    INITIAL_ACCOUNTS,
    NORMAL_BALANCE_BY_TYPE,
    AccountSpec,
    AccountSubtype,
    AccountType,
    JournalStatus,
    NormalBalance,
    PaymentMethod,
    SourceDocumentType,
    StandardAccounts,
)

__all__ = [
    # 핵심 클래스
    "Ledger",
    "AccountRegistry",
    "BalanceProjector",
    "JournalStore",
    "OpeningBalanceLoader",
    "AutoBalancer",
    "JournalEntryBuilder",
    "init_ledger_schema",
    # 모델
    "Account",
    "JournalEntry",
    "JournalLine",
    "OpeningBalance",
    "PartnerRef",
    "EntryRequest",
    "EntryUpdate",
    "EntryFilter",
    "EntryPage",
    "LineInput",
    "OpeningBalanceRequest",
    "OpeningItem",
    "OpeningSnapshot",
    "SnapshotResult",
    "BusinessEvent",
    "BalanceSheetPosition",
    "AutoBalanceResult",
    "BalanceMismatch",
    # Enum
    "AccountType",
    "AccountSubtype",
    "NormalBalance",
    "JournalStatus",
    "SourceDocumentType",
    "PaymentMethod",
    # 상수
    "AccountSpec",
    "StandardAccounts",
    "INITIAL_ACCOUNTS",
    "NORMAL_BALANCE_BY_TYPE",
    # 예외
    "LedgerError",
    "ValidationError",
    "InvalidLineError",
    "UnbalancedEntryError",
    "NotFoundError",
    "AccountNotFoundError",
    "EntryNotFoundError",
    "OpeningBalanceNotFoundError",
    "ConflictError",
    "ImmutableEntryError",
    "DuplicateOpeningBalanceError",
    "DuplicateAccountError",
    "PersistenceError",
]

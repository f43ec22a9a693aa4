"""
Auto-Balancer

재무상태표 항등식 (자산 = 부채 + 자본) 위반을 감지하고
자본 계정에 대한 보정 분개 1건으로 차이를 메운다.

주의: 모든 차이를 자본으로 돌리는 수동 정산 도구.
누락된 매출채권 같은 실제 장부 오류를 가릴 수 있으므로
관리자가 명시적으로 실행할 때만 사용하고 스케줄링하지 않는다.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import TYPE_CHECKING, Any

from core.constants import LedgerDefaults
from core.ledger.models import EntryRequest, JournalEntry, LineInput
from core.ledger.types import AccountType, SourceDocumentType, StandardAccounts
from core.utils.timezone import now_utc

if TYPE_CHECKING:
    from adapters.db.sqlite_adapter import SQLiteAdapter
    from core.ledger.registry import AccountRegistry
    from core.ledger.store import JournalStore

logger = logging.getLogger(__name__)

AUTO_BALANCE_REFERENCE = "AUTO-BALANCE"


@dataclass
class BalanceSheetPosition:
    """재무상태표 합계"""

    assets: Decimal
    liabilities: Decimal
    equity: Decimal

    @property
    def variance(self) -> Decimal:
        """자산 - (부채 + 자본)"""
        return self.assets - (self.liabilities + self.equity)

    def to_dict(self) -> dict[str, Any]:
        return {
            "assets": str(self.assets),
            "liabilities": str(self.liabilities),
            "equity": str(self.equity),
            "variance": str(self.variance),
        }


@dataclass
class AutoBalanceResult:
    """Auto-Balancer 실행 결과"""

    before: BalanceSheetPosition
    after: BalanceSheetPosition
    entry: JournalEntry | None = None
    new_equity_balance: Decimal | None = None
    balancing_type: str | None = None

    @property
    def balanced(self) -> bool:
        """실행 전에 이미 균형 상태였는지 여부"""
        return self.entry is None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            **self.before.to_dict(),
            "already_balanced": self.balanced,
        }
        if self.entry is not None:
            result.update(
                {
                    "variance_corrected": str(self.before.variance),
                    "journal_entry_id": self.entry.entry_id,
                    "journal_number": self.entry.journal_number,
                    "new_equity_balance": str(self.new_equity_balance),
                    "balancing_type": self.balancing_type,
                    "variance_after": str(self.after.variance),
                }
            )
        return result


class AutoBalancer:
    """재무상태표 자동 균형 보정

    variance > 0: 대변 Owner's Equity / 차변 조정 계정
    variance < 0: 차변 Owner's Equity / 대변 조정 계정

    조정 계정은 비용(EXPENSE) 계정이라 항등식 합계에 포함되지 않으므로
    보정 후 variance는 정확히 0이 된다.

    Args:
        db: SQLite 어댑터
        registry: 계정 레지스트리
        store: 분개 저장소 (보정 분개 생성/전기)
        owner_equity_code: 자본 계정 코드
        adjustment_account_code: 보정 상대 계정 코드
        tolerance: 균형 판단 허용 오차
    """

    def __init__(
        self,
        db: SQLiteAdapter,
        registry: AccountRegistry,
        store: JournalStore,
        owner_equity_code: str = LedgerDefaults.OWNER_EQUITY_CODE,
        adjustment_account_code: str = LedgerDefaults.ADJUSTMENT_ACCOUNT_CODE,
        tolerance: Decimal = LedgerDefaults.BALANCE_TOLERANCE,
    ):
        self.db = db
        self.registry = registry
        self.store = store
        self.owner_equity_code = owner_equity_code
        self.adjustment_account_code = adjustment_account_code
        self.tolerance = tolerance

    async def position(self) -> BalanceSheetPosition:
        """현재 재무상태표 합계 (읽기 전용)"""
        totals = await self.registry.totals_by_type()
        return BalanceSheetPosition(
            assets=totals[AccountType.ASSET],
            liabilities=totals[AccountType.LIABILITY],
            equity=totals[AccountType.EQUITY],
        )

    async def run(self) -> AutoBalanceResult:
        """균형 검사 후 필요하면 보정 분개 1건 전기

        합계 조회부터 전기까지 하나의 트랜잭션.
        """
        async with self.db.transaction():
            before = await self.position()
            variance = before.variance

            if abs(variance) < self.tolerance:
                logger.info("재무상태표 균형 상태, 보정 불필요")
                return AutoBalanceResult(before=before, after=before)

            equity = await self.registry.ensure_account(
                self.owner_equity_code, StandardAccounts.OWNER_EQUITY
            )
            adjustment = await self.registry.ensure_account(
                self.adjustment_account_code, StandardAccounts.RECONCILIATION_ADJUSTMENT
            )

            amount = abs(variance)
            increase = variance > 0
            if increase:
                lines = [
                    LineInput(account=equity.account_id, credit_amount=amount),
                    LineInput(account=adjustment.account_id, debit_amount=amount),
                ]
                balancing_type = "Increased Owner Equity"
                description = "Auto-balance: Increase owner equity"
            else:
                lines = [
                    LineInput(account=equity.account_id, debit_amount=amount),
                    LineInput(account=adjustment.account_id, credit_amount=amount),
                ]
                balancing_type = "Decreased Owner Equity"
                description = "Auto-balance: Decrease owner equity"

            entry = await self.store.create_entry(
                EntryRequest(
                    entry_date=now_utc().date(),
                    lines=lines,
                    reference_number=AUTO_BALANCE_REFERENCE,
                    description=description,
                    source_document_type=SourceDocumentType.AUTO_BALANCE,
                ),
                post=True,
            )

            equity = await self.registry.get_account(equity.account_id)
            after = await self.position()

        logger.warning(
            f"Auto-balance 보정 분개 전기: {entry.journal_number} "
            f"variance {variance} -> {after.variance} ({balancing_type})",
            extra={"entry_id": entry.entry_id},
        )
        return AutoBalanceResult(
            before=before,
            after=after,
            entry=entry,
            new_equity_balance=equity.current_balance,
            balancing_type=balancing_type,
        )

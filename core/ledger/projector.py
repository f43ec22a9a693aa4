"""
잔액 프로젝터

전기된 분개 라인과 기초잔액을 계정 잔액에 반영하는 유일한 경로.

불변식:
    current_balance == opening_balance + Σ signed(전기된 라인)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import TYPE_CHECKING, Any

from core.ledger.models import Account, JournalEntry, JournalLine
from core.utils.money import ZERO, from_db

if TYPE_CHECKING:
    from adapters.db.sqlite_adapter import SQLiteAdapter
    from core.ledger.registry import AccountRegistry

logger = logging.getLogger(__name__)


@dataclass
class BalanceMismatch:
    """잔액 불변식 위반 정보"""

    account_id: str
    code: str
    expected: Decimal  # opening_balance + Σ signed(라인)
    actual: Decimal  # 저장된 current_balance

    @property
    def difference(self) -> Decimal:
        return self.actual - self.expected

    def to_dict(self) -> dict[str, Any]:
        return {
            "account_id": self.account_id,
            "code": self.code,
            "expected": str(self.expected),
            "actual": str(self.actual),
            "difference": str(self.difference),
        }


class BalanceProjector:
    """잔액 프로젝터

    Args:
        db: SQLite 어댑터
        registry: 계정 레지스트리 (apply_delta 대상)
    """

    def __init__(self, db: SQLiteAdapter, registry: AccountRegistry):
        self.db = db
        self.registry = registry

    async def project(self, line: JournalLine) -> Decimal:
        """라인 1개를 계정 잔액에 반영

        Returns:
            계정에 적용된 signed_amount

        Raises:
            AccountNotFoundError: 라인의 계정이 없는 경우
        """
        account = await self.registry.get_account(line.account_id)
        signed = account.signed_amount(line.debit_amount, line.credit_amount)
        await self.registry.apply_delta(account.account_id, signed)
        return signed

    async def project_entry(self, entry: JournalEntry) -> None:
        """분개의 모든 라인을 line_number 순서로 반영

        하나라도 실패하면 전체가 롤백된다.
        """
        async with self.db.transaction():
            for line in sorted(entry.lines, key=lambda item: item.line_number):
                await self.project(line)

        logger.debug(
            f"분개 잔액 반영: {entry.journal_number} ({len(entry.lines)} lines)"
        )

    async def apply_opening(
        self,
        account: Account,
        debit_amount: Decimal,
        credit_amount: Decimal,
    ) -> Decimal:
        """기초잔액 반영 (opening_balance와 current_balance 동시 변경)

        수정/삭제 시에는 차액 또는 음수 금액이 들어온다.

        Returns:
            계정에 적용된 signed_amount
        """
        signed = account.signed_amount(debit_amount, credit_amount)
        if signed != 0:
            await self.registry.apply_delta(account.account_id, signed, opening=True)
        return signed

    async def verify(self) -> list[BalanceMismatch]:
        """잔액 불변식 검증

        모든 계정에 대해 opening_balance + 전기된 라인 합계를 다시 계산하여
        current_balance와 다른 계정을 반환한다.
        """
        accounts = await self.registry.list_accounts(include_inactive=True)
        # v_account_ledger는 전기된 라인만 노출
        rows = await self.db.fetchall(
            "SELECT account_id, debit_amount, credit_amount FROM v_account_ledger"
        )

        debit_sums: dict[str, Decimal] = {}
        credit_sums: dict[str, Decimal] = {}
        for row in rows:
            account_id = row["account_id"]
            debit_sums[account_id] = debit_sums.get(account_id, ZERO) + from_db(row["debit_amount"])
            credit_sums[account_id] = credit_sums.get(account_id, ZERO) + from_db(row["credit_amount"])

        mismatches = []
        for account in accounts:
            expected = account.opening_balance + account.signed_amount(
                debit_sums.get(account.account_id, ZERO),
                credit_sums.get(account.account_id, ZERO),
            )
            if expected != account.current_balance:
                mismatches.append(
                    BalanceMismatch(
                        account_id=account.account_id,
                        code=account.code,
                        expected=expected,
                        actual=account.current_balance,
                    )
                )

        if mismatches:
            logger.warning(f"잔액 불변식 위반 계정: {len(mismatches)}개")
        return mismatches

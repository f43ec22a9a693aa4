"""
기초잔액 로더

장부 개시 시점의 계정(및 거래처 보조원장) 잔액을 1회 설정한다.
분개와 별개로 기록되지만 잔액 반영은 BalanceProjector를 거친다.

- 계정(또는 계정+거래처)당 기초잔액 1건
- 수정은 기존 값과의 차액만 반영
- 삭제는 저장된 금액을 역으로 반영한 뒤 레코드 제거
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING, Any

from core.constants import LedgerDefaults
from core.ledger.errors import (
    DuplicateOpeningBalanceError,
    OpeningBalanceNotFoundError,
    ValidationError,
)
from core.ledger.models import Account, OpeningBalance, OpeningBalanceRequest, PartnerRef
from core.ledger.types import NormalBalance, StandardAccounts
from core.types import PartnerType
from core.utils.money import ZERO, to_amount
from core.utils.timezone import now_iso, parse_date

if TYPE_CHECKING:
    from adapters.db.sqlite_adapter import SQLiteAdapter
    from core.ledger.projector import BalanceProjector
    from core.ledger.registry import AccountRegistry

logger = logging.getLogger(__name__)

_OPENING_SELECT = """
    SELECT ob.*, a.code AS account_code, a.name AS account_name
    FROM opening_balance ob
    JOIN account a ON a.account_id = ob.account_id
"""


@dataclass
class OpeningItem:
    """일괄 개시 항목

    amount는 계정 정상잔액 방향 기준 (양수 = 정상잔액 쪽).
    """

    account: str
    amount: Any
    partner: PartnerRef | None = None
    description: str | None = None


@dataclass
class OpeningSnapshot:
    """일괄 개시 스냅샷"""

    opening_date: date | str
    items: list[OpeningItem] = field(default_factory=list)


@dataclass
class SnapshotResult:
    """일괄 개시 결과"""

    balances: list[OpeningBalance]
    total_debit: Decimal
    total_credit: Decimal
    balancing: OpeningBalance | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "balances": [balance.to_dict() for balance in self.balances],
            "total_debit": str(self.total_debit),
            "total_credit": str(self.total_credit),
            "balancing": self.balancing.to_dict() if self.balancing else None,
        }


class OpeningBalanceLoader:
    """기초잔액 로더

    Args:
        db: SQLite 어댑터
        registry: 계정 레지스트리
        projector: 잔액 프로젝터
        owner_equity_code: 일괄 개시 차액을 받을 자본 계정 코드
        tolerance: 일괄 개시 차대 허용 오차
    """

    def __init__(
        self,
        db: SQLiteAdapter,
        registry: AccountRegistry,
        projector: BalanceProjector,
        owner_equity_code: str = LedgerDefaults.OWNER_EQUITY_CODE,
        tolerance: Decimal = LedgerDefaults.BALANCE_TOLERANCE,
    ):
        self.db = db
        self.registry = registry
        self.projector = projector
        self.owner_equity_code = owner_equity_code
        self.tolerance = tolerance

    async def set_opening_balance(self, request: OpeningBalanceRequest) -> OpeningBalance:
        """기초잔액 설정

        Raises:
            ValidationError: 날짜/금액이 잘못된 경우
            AccountNotFoundError: 계정이 없는 경우
            DuplicateOpeningBalanceError: 이미 기초잔액이 있는 경우
        """
        opening_date = self._parse_opening_date(request.opening_date)
        account = await self.registry.get_account(request.account)
        debit, credit = self._resolve_amounts(
            account, request.debit_amount, request.credit_amount, request.balance_amount
        )
        partner = request.partner
        opening_id = str(uuid.uuid4())
        now = now_iso()

        async with self.db.transaction():
            existing = await self._find(account.account_id, partner)
            if existing is not None:
                raise DuplicateOpeningBalanceError(
                    account.code, partner.partner_id if partner else None
                )

            await self.db.execute(
                """
                INSERT INTO opening_balance (
                    opening_id, account_id, partner_type, partner_id, partner_name,
                    debit_amount, credit_amount, opening_date, fiscal_year,
                    description, created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    opening_id,
                    account.account_id,
                    partner.partner_type.value if partner else None,
                    partner.partner_id if partner else None,
                    partner.partner_name if partner else None,
                    str(debit),
                    str(credit),
                    opening_date.isoformat(),
                    opening_date.year,
                    request.description,
                    now,
                    now,
                ),
            )
            await self.projector.apply_opening(account, debit, credit)
            balance = await self.get_opening_balance(opening_id)

        logger.info(
            f"기초잔액 설정: {account.code} Dr {debit} / Cr {credit}"
            + (f" ({partner.partner_type.value} {partner.partner_id})" if partner else ""),
            extra={"opening_id": opening_id},
        )
        return balance

    async def update_opening_balance(
        self,
        opening_id: str,
        debit_amount: Any = None,
        credit_amount: Any = None,
        balance_amount: Any = None,
        opening_date: date | str | None = None,
        description: str | None = None,
    ) -> OpeningBalance:
        """기초잔액 수정 (기존 값과의 차액만 반영)

        금액 인자를 하나도 주지 않으면 금액은 유지된다.

        Raises:
            OpeningBalanceNotFoundError: 레코드가 없는 경우
        """
        new_date = self._parse_opening_date(opening_date) if opening_date else None
        amounts_given = any(
            value not in (None, "") for value in (debit_amount, credit_amount, balance_amount)
        )

        async with self.db.transaction():
            current = await self.get_opening_balance(opening_id)
            account = await self.registry.get_account(current.account_id)

            if amounts_given:
                new_debit, new_credit = self._resolve_amounts(
                    account, debit_amount, credit_amount, balance_amount
                )
            else:
                new_debit, new_credit = current.debit_amount, current.credit_amount

            await self.projector.apply_opening(
                account,
                new_debit - current.debit_amount,
                new_credit - current.credit_amount,
            )

            effective_date = new_date or current.opening_date
            await self.db.execute(
                """
                UPDATE opening_balance
                SET debit_amount = ?, credit_amount = ?, opening_date = ?,
                    fiscal_year = ?, description = ?, updated_at = ?
                WHERE opening_id = ?
                """,
                (
                    str(new_debit),
                    str(new_credit),
                    effective_date.isoformat(),
                    effective_date.year,
                    description if description is not None else current.description,
                    now_iso(),
                    opening_id,
                ),
            )
            balance = await self.get_opening_balance(opening_id)

        logger.info(
            f"기초잔액 수정: {account.code} net {current.net} -> {balance.net}",
            extra={"opening_id": opening_id},
        )
        return balance

    async def delete_opening_balance(self, opening_id: str) -> None:
        """기초잔액 삭제 (잔액 효과 역반영 후 제거)"""
        async with self.db.transaction():
            current = await self.get_opening_balance(opening_id)
            account = await self.registry.get_account(current.account_id)
            await self.projector.apply_opening(
                account, -current.debit_amount, -current.credit_amount
            )
            await self.db.execute(
                "DELETE FROM opening_balance WHERE opening_id = ?",
                (opening_id,),
            )

        logger.info(
            f"기초잔액 삭제: {account.code} net {current.net} 역반영",
            extra={"opening_id": opening_id},
        )

    async def get_opening_balance(self, opening_id: str) -> OpeningBalance:
        row = await self.db.fetchone(
            f"{_OPENING_SELECT} WHERE ob.opening_id = ?",
            (opening_id,),
        )
        if row is None:
            raise OpeningBalanceNotFoundError(opening_id)
        return OpeningBalance.from_row(row)

    async def list_opening_balances(
        self,
        account: str | None = None,
        partner_type: PartnerType | None = None,
    ) -> list[OpeningBalance]:
        """기초잔액 목록 (계정 코드, 거래처 순)"""
        conditions: list[str] = []
        params: list[object] = []
        if account is not None:
            target = await self.registry.get_account(account)
            conditions.append("ob.account_id = ?")
            params.append(target.account_id)
        if partner_type is not None:
            conditions.append("ob.partner_type = ?")
            params.append(partner_type.value)

        where = f"WHERE {' AND '.join(conditions)}" if conditions else ""
        rows = await self.db.fetchall(
            f"{_OPENING_SELECT} {where} ORDER BY a.code, ob.partner_id",
            tuple(params),
        )
        return [OpeningBalance.from_row(row) for row in rows]

    async def load_snapshot(self, snapshot: OpeningSnapshot) -> SnapshotResult:
        """일괄 개시

        모든 항목을 한 트랜잭션에서 설정한다. 차변/대변 합계가 다르면
        자본 계정 기초잔액으로 차액을 맞춘다. 하나라도 실패하면 전체 롤백.
        """
        if not snapshot.items:
            raise ValidationError("Opening snapshot has no items")
        opening_date = self._parse_opening_date(snapshot.opening_date)

        async with self.db.transaction():
            balances = []
            for item in snapshot.items:
                balances.append(
                    await self.set_opening_balance(
                        OpeningBalanceRequest(
                            account=item.account,
                            opening_date=opening_date,
                            balance_amount=item.amount,
                            partner=item.partner,
                            description=item.description,
                        )
                    )
                )

            total_debit = sum((b.debit_amount for b in balances), ZERO)
            total_credit = sum((b.credit_amount for b in balances), ZERO)
            difference = total_debit - total_credit

            balancing = None
            if abs(difference) >= self.tolerance:
                balancing = await self._absorb_difference(difference, opening_date)

        logger.info(
            f"일괄 개시 완료: {len(balances)}건, Dr {total_debit} / Cr {total_credit}, "
            f"자본 조정 {difference}"
        )
        return SnapshotResult(
            balances=balances,
            total_debit=total_debit,
            total_credit=total_credit,
            balancing=balancing,
        )

    async def _absorb_difference(self, difference: Decimal, opening_date: date) -> OpeningBalance:
        """일괄 개시 차액을 자본 계정 기초잔액으로 흡수"""
        equity = await self.registry.ensure_account(
            self.owner_equity_code, StandardAccounts.OWNER_EQUITY
        )
        debit = -difference if difference < 0 else ZERO
        credit = difference if difference > 0 else ZERO

        existing = await self._find(equity.account_id, None)
        if existing is not None:
            return await self.update_opening_balance(
                existing.opening_id,
                debit_amount=existing.debit_amount + debit,
                credit_amount=existing.credit_amount + credit,
            )

        return await self.set_opening_balance(
            OpeningBalanceRequest(
                account=equity.account_id,
                opening_date=opening_date,
                debit_amount=debit,
                credit_amount=credit,
                description="Opening balance equity",
            )
        )

    async def _find(self, account_id: str, partner: PartnerRef | None) -> OpeningBalance | None:
        if partner is None:
            row = await self.db.fetchone(
                f"{_OPENING_SELECT} WHERE ob.account_id = ? AND ob.partner_id IS NULL",
                (account_id,),
            )
        else:
            row = await self.db.fetchone(
                f"{_OPENING_SELECT} WHERE ob.account_id = ? "
                "AND ob.partner_type = ? AND ob.partner_id = ?",
                (account_id, partner.partner_type.value, partner.partner_id),
            )
        return OpeningBalance.from_row(row) if row else None

    @staticmethod
    def _parse_opening_date(value: date | str | None) -> date:
        if value is None or value == "":
            raise ValidationError("opening_date is required")
        try:
            return parse_date(value)
        except ValueError as e:
            raise ValidationError(str(e)) from e

    @staticmethod
    def _resolve_amounts(
        account: Account,
        debit_amount: Any,
        credit_amount: Any,
        balance_amount: Any,
    ) -> tuple[Decimal, Decimal]:
        """입력 금액을 (차변, 대변)으로 정규화

        balance_amount는 정상잔액 방향 기준: 양수면 정상잔액 쪽, 음수면 반대쪽.
        """
        has_sides = debit_amount not in (None, "") or credit_amount not in (None, "")
        try:
            if balance_amount not in (None, ""):
                if has_sides:
                    raise ValidationError(
                        "Provide either debit_amount/credit_amount or balance_amount, not both"
                    )
                amount = to_amount(balance_amount, allow_negative=True)
                on_normal_side = amount >= 0
                is_debit = (account.normal_balance == NormalBalance.DEBIT) == on_normal_side
                debit = abs(amount) if is_debit else ZERO
                credit = ZERO if is_debit else abs(amount)
            else:
                debit = to_amount(debit_amount)
                credit = to_amount(credit_amount)
        except ValueError as e:
            raise ValidationError(str(e)) from e

        if debit == 0 and credit == 0:
            raise ValidationError(
                "Opening balance requires a non-zero debit_amount, credit_amount or balance_amount"
            )
        return debit, credit

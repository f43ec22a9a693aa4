"""
계정과목 레지스트리

계정 분류와 현재 잔액의 원천.
current_balance는 BalanceProjector만 apply_delta()로 변경한다.
"""

from __future__ import annotations

import logging
import uuid
from decimal import Decimal
from typing import TYPE_CHECKING

from core.ledger.errors import AccountNotFoundError, DuplicateAccountError
from core.ledger.models import Account
from core.ledger.types import AccountSpec, AccountType
from core.utils.money import ZERO, from_db
from core.utils.timezone import now_iso

if TYPE_CHECKING:
    from adapters.db.sqlite_adapter import SQLiteAdapter

logger = logging.getLogger(__name__)


class AccountRegistry:
    """계정과목 레지스트리

    Args:
        db: SQLite 어댑터
    """

    def __init__(self, db: SQLiteAdapter):
        self.db = db

    async def get_account(self, code_or_id: str) -> Account:
        """계정 조회 (account_id 우선, 없으면 code)

        Raises:
            AccountNotFoundError: 해당 계정이 없는 경우
        """
        account = await self.find_account(code_or_id)
        if account is None:
            raise AccountNotFoundError(code_or_id)
        return account

    async def find_account(self, code_or_id: str) -> Account | None:
        row = await self.db.fetchone(
            "SELECT * FROM account WHERE account_id = ?",
            (code_or_id,),
        )
        if row is None:
            row = await self.db.fetchone(
                "SELECT * FROM account WHERE code = ?",
                (code_or_id,),
            )
        return Account.from_row(row) if row else None

    async def list_accounts(
        self,
        account_type: AccountType | None = None,
        include_inactive: bool = False,
    ) -> list[Account]:
        """계정 목록 (코드 순)"""
        conditions: list[str] = []
        params: list[object] = []

        if account_type is not None:
            conditions.append("account_type = ?")
            params.append(account_type.value)
        if not include_inactive:
            conditions.append("is_active = 1")

        where = f"WHERE {' AND '.join(conditions)}" if conditions else ""
        rows = await self.db.fetchall(
            f"SELECT * FROM account {where} ORDER BY code",
            tuple(params),
        )
        return [Account.from_row(row) for row in rows]

    async def create_account(self, spec: AccountSpec) -> Account:
        """계정 생성

        Raises:
            DuplicateAccountError: 같은 코드의 계정이 이미 있는 경우
        """
        account_id = str(uuid.uuid4())
        async with self.db.transaction():
            existing = await self.db.fetchone(
                "SELECT account_id FROM account WHERE code = ?",
                (spec.code,),
            )
            if existing is not None:
                raise DuplicateAccountError(spec.code)

            await self.db.execute(
                """
                INSERT INTO account (
                    account_id, code, name, account_type, subtype,
                    normal_balance, description
                ) VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    account_id,
                    spec.code,
                    spec.name,
                    spec.account_type.value,
                    spec.subtype.value if spec.subtype else None,
                    spec.resolved_normal_balance().value,
                    spec.description,
                ),
            )

        logger.info(
            f"계정 생성: {spec.code} {spec.name} ({spec.account_type.value})",
            extra={"account_id": account_id},
        )
        return await self.get_account(account_id)

    async def ensure_account(self, code: str, defaults: AccountSpec) -> Account:
        """계정 조회, 없으면 defaults로 생성

        업무 이벤트가 처음 필요로 하는 계정을 지연 생성할 때 사용.
        defaults.code와 무관하게 인자로 받은 code를 사용한다.
        """
        row = await self.db.fetchone(
            "SELECT * FROM account WHERE code = ?",
            (code,),
        )
        if row is not None:
            return Account.from_row(row)

        spec = defaults if defaults.code == code else AccountSpec(
            code=code,
            name=defaults.name,
            account_type=defaults.account_type,
            subtype=defaults.subtype,
            normal_balance=defaults.normal_balance,
            description=defaults.description,
        )
        return await self.create_account(spec)

    async def deactivate_account(self, code_or_id: str) -> Account:
        """계정 비활성화 (물리 삭제 없음)"""
        account = await self.get_account(code_or_id)
        async with self.db.transaction():
            await self.db.execute(
                "UPDATE account SET is_active = 0, updated_at = ? WHERE account_id = ?",
                (now_iso(), account.account_id),
            )
        logger.info(f"계정 비활성화: {account.code} {account.name}")
        account.is_active = False
        return account

    async def apply_delta(
        self,
        account_id: str,
        signed_amount: Decimal,
        opening: bool = False,
    ) -> Decimal:
        """current_balance에 signed_amount 가산

        부호는 호출자(BalanceProjector)가 정상잔액 방향으로 결정한다.
        검증 없음. 호출자의 트랜잭션 안에서 read-modify-write.

        Args:
            account_id: 계정 ID
            signed_amount: 부호 있는 증감액
            opening: True면 opening_balance도 같은 값만큼 가산

        Returns:
            변경 후 current_balance

        Raises:
            AccountNotFoundError: 계정이 없는 경우
        """
        async with self.db.transaction():
            row = await self.db.fetchone(
                "SELECT opening_balance, current_balance FROM account WHERE account_id = ?",
                (account_id,),
            )
            if row is None:
                raise AccountNotFoundError(account_id)

            new_current = from_db(row["current_balance"]) + signed_amount
            new_opening = from_db(row["opening_balance"])
            if opening:
                new_opening += signed_amount

            await self.db.execute(
                """
                UPDATE account
                SET current_balance = ?, opening_balance = ?, updated_at = ?
                WHERE account_id = ?
                """,
                (str(new_current), str(new_opening), now_iso(), account_id),
            )

        return new_current

    async def totals_by_type(self) -> dict[AccountType, Decimal]:
        """계정 유형별 current_balance 합계 (비활성 계정 포함)"""
        totals = {account_type: ZERO for account_type in AccountType}
        rows = await self.db.fetchall(
            "SELECT account_type, current_balance FROM account"
        )
        for row in rows:
            account_type = AccountType(row["account_type"])
            totals[account_type] += from_db(row["current_balance"])
        return totals

"""AccountRegistry 통합 테스트"""

from decimal import Decimal

import pytest

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.ledger import (
    AccountNotFoundError,
    AccountRegistry,
    AccountSpec,
    AccountType,
    DuplicateAccountError,
    NormalBalance,
    StandardAccounts,
)


class TestInitialAccounts:
    """스키마 초기화 시 기본 계정"""

    @pytest.mark.asyncio
    async def test_initial_accounts_seeded(self, db: SQLiteAdapter) -> None:
        """기본 계정 7개 생성, 잔액 0"""
        registry = AccountRegistry(db)

        accounts = await registry.list_accounts()

        assert [a.code for a in accounts] == ["1010", "1100", "1200", "1330", "2100", "3000", "4000"]
        assert all(a.current_balance == Decimal("0.00") for a in accounts)

    @pytest.mark.asyncio
    async def test_list_by_type(self, db: SQLiteAdapter) -> None:
        """유형 필터"""
        registry = AccountRegistry(db)

        liabilities = await registry.list_accounts(AccountType.LIABILITY)

        assert [a.code for a in liabilities] == ["2100"]


class TestGetAccount:
    """계정 조회"""

    @pytest.mark.asyncio
    async def test_by_code_and_id(self, db: SQLiteAdapter) -> None:
        """코드와 ID 모두로 조회"""
        registry = AccountRegistry(db)

        by_code = await registry.get_account("1010")
        by_id = await registry.get_account(by_code.account_id)

        assert by_code == by_id
        assert by_code.normal_balance == NormalBalance.DEBIT

    @pytest.mark.asyncio
    async def test_not_found(self, db: SQLiteAdapter) -> None:
        registry = AccountRegistry(db)

        with pytest.raises(AccountNotFoundError, match="9999"):
            await registry.get_account("9999")

        assert await registry.find_account("9999") is None


class TestCreateAccount:
    """계정 생성"""

    @pytest.mark.asyncio
    async def test_create(self, db: SQLiteAdapter) -> None:
        """정상잔액 생략 시 유형 기본값"""
        registry = AccountRegistry(db)

        account = await registry.create_account(
            AccountSpec("2500", "Bank Loan", AccountType.LIABILITY)
        )

        assert account.code == "2500"
        assert account.normal_balance == NormalBalance.CREDIT
        assert account.is_active is True

    @pytest.mark.asyncio
    async def test_duplicate_code(self, db: SQLiteAdapter) -> None:
        registry = AccountRegistry(db)

        with pytest.raises(DuplicateAccountError):
            await registry.create_account(StandardAccounts.CASH)


class TestEnsureAccount:
    """계정 지연 생성"""

    @pytest.mark.asyncio
    async def test_returns_existing(self, db: SQLiteAdapter) -> None:
        """이미 있으면 그대로 반환"""
        registry = AccountRegistry(db)
        existing = await registry.get_account("1200")

        account = await registry.ensure_account("1200", StandardAccounts.ACCOUNTS_RECEIVABLE)

        assert account.account_id == existing.account_id

    @pytest.mark.asyncio
    async def test_creates_missing(self, db: SQLiteAdapter) -> None:
        """없으면 defaults로 생성, 두 번째 호출은 같은 계정"""
        registry = AccountRegistry(db)

        first = await registry.ensure_account("6200", StandardAccounts.RENT_EXPENSE)
        second = await registry.ensure_account("6200", StandardAccounts.RENT_EXPENSE)

        assert first.account_id == second.account_id
        assert first.account_type == AccountType.EXPENSE

    @pytest.mark.asyncio
    async def test_code_argument_wins(self, db: SQLiteAdapter) -> None:
        """defaults.code와 다른 코드로 생성"""
        registry = AccountRegistry(db)

        account = await registry.ensure_account("3010", StandardAccounts.OWNER_EQUITY)

        assert account.code == "3010"
        assert account.name == StandardAccounts.OWNER_EQUITY.name


class TestBalances:
    """잔액 변경 / 합계"""

    @pytest.mark.asyncio
    async def test_apply_delta(self, db: SQLiteAdapter) -> None:
        """current_balance만 변경"""
        registry = AccountRegistry(db)
        cash = await registry.get_account("1010")

        new_balance = await registry.apply_delta(cash.account_id, Decimal("250.00"))
        cash = await registry.get_account("1010")

        assert new_balance == Decimal("250.00")
        assert cash.current_balance == Decimal("250.00")
        assert cash.opening_balance == Decimal("0.00")

    @pytest.mark.asyncio
    async def test_apply_delta_opening(self, db: SQLiteAdapter) -> None:
        """opening=True면 기초잔액도 함께 변경"""
        registry = AccountRegistry(db)
        cash = await registry.get_account("1010")

        await registry.apply_delta(cash.account_id, Decimal("100.00"), opening=True)
        cash = await registry.get_account("1010")

        assert cash.opening_balance == Decimal("100.00")
        assert cash.current_balance == Decimal("100.00")

    @pytest.mark.asyncio
    async def test_apply_delta_unknown_account(self, db: SQLiteAdapter) -> None:
        registry = AccountRegistry(db)

        with pytest.raises(AccountNotFoundError):
            await registry.apply_delta("missing", Decimal("1.00"))

    @pytest.mark.asyncio
    async def test_totals_by_type(self, db: SQLiteAdapter) -> None:
        """유형별 합계"""
        registry = AccountRegistry(db)
        cash = await registry.get_account("1010")
        bank = await registry.get_account("1100")
        await registry.apply_delta(cash.account_id, Decimal("100.00"))
        await registry.apply_delta(bank.account_id, Decimal("50.50"))

        totals = await registry.totals_by_type()

        assert totals[AccountType.ASSET] == Decimal("150.50")
        assert totals[AccountType.LIABILITY] == Decimal("0.00")

    @pytest.mark.asyncio
    async def test_deactivate(self, db: SQLiteAdapter) -> None:
        """비활성 계정은 기본 목록에서 제외"""
        registry = AccountRegistry(db)

        await registry.deactivate_account("1330")

        active = [a.code for a in await registry.list_accounts()]
        everything = [a.code for a in await registry.list_accounts(include_inactive=True)]
        assert "1330" not in active
        assert "1330" in everything

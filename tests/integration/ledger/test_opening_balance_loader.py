"""OpeningBalanceLoader 통합 테스트"""

from decimal import Decimal

import pytest

from core.ledger import (
    AccountNotFoundError,
    DuplicateOpeningBalanceError,
    EntryRequest,
    Ledger,
    LineInput,
    OpeningBalanceNotFoundError,
    OpeningBalanceRequest,
    OpeningItem,
    OpeningSnapshot,
    PartnerRef,
    ValidationError,
)
from core.types import PartnerType


def _cash_sale(amount: str) -> EntryRequest:
    return EntryRequest(
        entry_date="2026-02-01",
        lines=[
            LineInput(account="1010", debit_amount=amount),
            LineInput(account="4000", credit_amount=amount),
        ],
    )


class TestSetOpeningBalance:
    """기초잔액 설정"""

    @pytest.mark.asyncio
    async def test_sets_opening_and_current(self, ledger: Ledger) -> None:
        """opening_balance와 current_balance 동시 반영, 분개 없음"""
        balance = await ledger.openings.set_opening_balance(
            OpeningBalanceRequest(account="1010", opening_date="2026-01-01", debit_amount="1500")
        )

        cash = await ledger.registry.get_account("1010")
        assert balance.debit_amount == Decimal("1500.00")
        assert balance.fiscal_year == 2026
        assert cash.opening_balance == Decimal("1500.00")
        assert cash.current_balance == Decimal("1500.00")
        assert (await ledger.journal.list_entries()).total == 0

    @pytest.mark.asyncio
    async def test_balance_amount_on_credit_account(self, ledger: Ledger) -> None:
        """balance_amount는 정상잔액 방향 기준"""
        balance = await ledger.openings.set_opening_balance(
            OpeningBalanceRequest(account="2100", opening_date="2026-01-01", balance_amount="800")
        )

        assert balance.credit_amount == Decimal("800.00")
        assert balance.debit_amount == Decimal("0.00")
        assert (await ledger.registry.get_account("2100")).current_balance == Decimal("800.00")

    @pytest.mark.asyncio
    async def test_negative_balance_amount(self, ledger: Ledger) -> None:
        """음수 balance_amount는 반대쪽 (당좌 차월 등)"""
        balance = await ledger.openings.set_opening_balance(
            OpeningBalanceRequest(account="1100", opening_date="2026-01-01", balance_amount="-200")
        )

        assert balance.credit_amount == Decimal("200.00")
        assert (await ledger.registry.get_account("1100")).current_balance == Decimal("-200.00")

    @pytest.mark.asyncio
    async def test_duplicate_rejected(self, ledger: Ledger) -> None:
        """같은 계정 두 번째 설정은 409"""
        request = OpeningBalanceRequest(
            account="1010", opening_date="2026-01-01", debit_amount="100"
        )
        await ledger.openings.set_opening_balance(request)

        with pytest.raises(DuplicateOpeningBalanceError, match="Use update instead"):
            await ledger.openings.set_opening_balance(request)

        assert (await ledger.registry.get_account("1010")).current_balance == Decimal("100.00")

    @pytest.mark.asyncio
    async def test_partner_sub_ledger(self, ledger: Ledger) -> None:
        """거래처별로 1건씩, 계정 잔액은 합산"""
        for partner_id, amount in (("C-001", "300"), ("C-002", "200")):
            await ledger.openings.set_opening_balance(
                OpeningBalanceRequest(
                    account="1200",
                    opening_date="2026-01-01",
                    debit_amount=amount,
                    partner=PartnerRef(PartnerType.CUSTOMER, partner_id),
                )
            )

        with pytest.raises(DuplicateOpeningBalanceError, match="C-001"):
            await ledger.openings.set_opening_balance(
                OpeningBalanceRequest(
                    account="1200",
                    opening_date="2026-01-01",
                    debit_amount="1",
                    partner=PartnerRef(PartnerType.CUSTOMER, "C-001"),
                )
            )

        listed = await ledger.openings.list_opening_balances(
            account="1200", partner_type=PartnerType.CUSTOMER
        )
        assert [b.partner.partner_id for b in listed] == ["C-001", "C-002"]
        assert (await ledger.registry.get_account("1200")).current_balance == Decimal("500.00")

    @pytest.mark.asyncio
    async def test_both_forms_rejected(self, ledger: Ledger) -> None:
        with pytest.raises(ValidationError, match="not both"):
            await ledger.openings.set_opening_balance(
                OpeningBalanceRequest(
                    account="1010",
                    opening_date="2026-01-01",
                    debit_amount="100",
                    balance_amount="100",
                )
            )

    @pytest.mark.asyncio
    async def test_zero_rejected(self, ledger: Ledger) -> None:
        with pytest.raises(ValidationError, match="non-zero"):
            await ledger.openings.set_opening_balance(
                OpeningBalanceRequest(account="1010", opening_date="2026-01-01")
            )

    @pytest.mark.asyncio
    async def test_missing_date_rejected(self, ledger: Ledger) -> None:
        with pytest.raises(ValidationError, match="opening_date is required"):
            await ledger.openings.set_opening_balance(
                OpeningBalanceRequest(account="1010", opening_date=None, debit_amount="1")
            )

    @pytest.mark.asyncio
    async def test_unknown_account(self, ledger: Ledger) -> None:
        with pytest.raises(AccountNotFoundError):
            await ledger.openings.set_opening_balance(
                OpeningBalanceRequest(account="9999", opening_date="2026-01-01", debit_amount="1")
            )


class TestUpdateDelete:
    """기초잔액 수정 / 삭제"""

    @pytest.mark.asyncio
    async def test_update_applies_difference(self, ledger: Ledger) -> None:
        """차액만 반영: 1500 → 1200이면 -300"""
        balance = await ledger.openings.set_opening_balance(
            OpeningBalanceRequest(account="1010", opening_date="2026-01-01", debit_amount="1500")
        )
        await ledger.journal.create_entry(
            _cash_sale("250"),
            post=True,
        )

        updated = await ledger.openings.update_opening_balance(
            balance.opening_id, debit_amount="1200"
        )

        cash = await ledger.registry.get_account("1010")
        assert updated.debit_amount == Decimal("1200.00")
        assert cash.opening_balance == Decimal("1200.00")
        assert cash.current_balance == Decimal("1450.00")
        assert await ledger.projector.verify() == []

    @pytest.mark.asyncio
    async def test_update_description_only(self, ledger: Ledger) -> None:
        """금액 미지정 시 금액 유지"""
        balance = await ledger.openings.set_opening_balance(
            OpeningBalanceRequest(account="1010", opening_date="2026-01-01", debit_amount="100")
        )

        updated = await ledger.openings.update_opening_balance(
            balance.opening_id, description="Petty cash", opening_date="2025-12-31"
        )

        assert updated.debit_amount == Decimal("100.00")
        assert updated.description == "Petty cash"
        assert updated.fiscal_year == 2025

    @pytest.mark.asyncio
    async def test_delete_reverses_effect(self, ledger: Ledger) -> None:
        balance = await ledger.openings.set_opening_balance(
            OpeningBalanceRequest(account="2100", opening_date="2026-01-01", credit_amount="640")
        )

        await ledger.openings.delete_opening_balance(balance.opening_id)

        payable = await ledger.registry.get_account("2100")
        assert payable.opening_balance == Decimal("0.00")
        assert payable.current_balance == Decimal("0.00")
        with pytest.raises(OpeningBalanceNotFoundError):
            await ledger.openings.get_opening_balance(balance.opening_id)

    @pytest.mark.asyncio
    async def test_update_unknown(self, ledger: Ledger) -> None:
        with pytest.raises(OpeningBalanceNotFoundError):
            await ledger.openings.update_opening_balance("missing", debit_amount="1")


class TestLoadSnapshot:
    """일괄 개시"""

    @pytest.mark.asyncio
    async def test_difference_goes_to_equity(self, ledger: Ledger) -> None:
        """자산 1000, 부채 300 → 자본 700 자동 설정"""
        result = await ledger.openings.load_snapshot(
            OpeningSnapshot(
                opening_date="2026-01-01",
                items=[
                    OpeningItem(account="1010", amount="1000"),
                    OpeningItem(account="2100", amount="300"),
                ],
            )
        )

        equity = await ledger.registry.get_account("3000")
        position = await ledger.balancer.position()
        assert result.total_debit == Decimal("1000.00")
        assert result.total_credit == Decimal("300.00")
        assert result.balancing is not None
        assert result.balancing.credit_amount == Decimal("700.00")
        assert equity.current_balance == Decimal("700.00")
        assert position.variance == Decimal("0.00")

    @pytest.mark.asyncio
    async def test_balanced_snapshot_needs_no_equity(self, ledger: Ledger) -> None:
        result = await ledger.openings.load_snapshot(
            OpeningSnapshot(
                opening_date="2026-01-01",
                items=[
                    OpeningItem(account="1010", amount="500"),
                    OpeningItem(account="3000", amount="500"),
                ],
            )
        )

        assert result.balancing is None
        assert (await ledger.registry.get_account("3000")).current_balance == Decimal("500.00")

    @pytest.mark.asyncio
    async def test_existing_equity_is_adjusted(self, ledger: Ledger) -> None:
        """자본 항목이 있으면 그 기초잔액에 차액을 더함"""
        result = await ledger.openings.load_snapshot(
            OpeningSnapshot(
                opening_date="2026-01-01",
                items=[
                    OpeningItem(account="1010", amount="900"),
                    OpeningItem(account="3000", amount="400"),
                ],
            )
        )

        equity = await ledger.registry.get_account("3000")
        assert result.balancing is not None
        assert equity.current_balance == Decimal("900.00")
        assert len(await ledger.openings.list_opening_balances(account="3000")) == 1

    @pytest.mark.asyncio
    async def test_failure_rolls_back_everything(self, ledger: Ledger) -> None:
        """항목 하나라도 실패하면 전체 롤백"""
        with pytest.raises(AccountNotFoundError):
            await ledger.openings.load_snapshot(
                OpeningSnapshot(
                    opening_date="2026-01-01",
                    items=[
                        OpeningItem(account="1010", amount="1000"),
                        OpeningItem(account="9999", amount="10"),
                    ],
                )
            )

        assert await ledger.openings.list_opening_balances() == []
        assert (await ledger.registry.get_account("1010")).current_balance == Decimal("0.00")

    @pytest.mark.asyncio
    async def test_empty_snapshot(self, ledger: Ledger) -> None:
        with pytest.raises(ValidationError, match="no items"):
            await ledger.openings.load_snapshot(OpeningSnapshot(opening_date="2026-01-01"))


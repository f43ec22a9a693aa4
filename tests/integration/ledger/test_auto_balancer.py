"""AutoBalancer 통합 테스트"""

from decimal import Decimal

import pytest

from core.ledger import (
    JournalStatus,
    Ledger,
    OpeningBalanceRequest,
    SourceDocumentType,
)


async def _open(ledger: Ledger, code: str, amount: str) -> None:
    await ledger.openings.set_opening_balance(
        OpeningBalanceRequest(account=code, opening_date="2026-01-01", balance_amount=amount)
    )


class TestPosition:
    """재무상태표 합계"""

    @pytest.mark.asyncio
    async def test_position_is_read_only(self, ledger: Ledger) -> None:
        await _open(ledger, "1010", "100000")
        await _open(ledger, "2100", "20000")
        await _open(ledger, "3000", "70000")

        position = await ledger.balancer.position()

        assert position.assets == Decimal("100000.00")
        assert position.liabilities == Decimal("20000.00")
        assert position.equity == Decimal("70000.00")
        assert position.variance == Decimal("10000.00")
        assert (await ledger.journal.list_entries()).total == 0


class TestRun:
    """보정 실행"""

    @pytest.mark.asyncio
    async def test_positive_variance_increases_equity(self, ledger: Ledger) -> None:
        """자산 100,000 / 부채 20,000 / 자본 70,000 → 자본 80,000, 보정 분개 1건"""
        await _open(ledger, "1010", "100000")
        await _open(ledger, "2100", "20000")
        await _open(ledger, "3000", "70000")

        result = await ledger.balancer.run()

        page = await ledger.journal.list_entries()
        assert page.total == 1
        assert result.entry is not None
        assert result.entry.status == JournalStatus.POSTED
        assert result.entry.source_document_type == SourceDocumentType.AUTO_BALANCE
        assert result.balancing_type == "Increased Owner Equity"
        assert result.new_equity_balance == Decimal("80000.00")
        assert result.after.variance == Decimal("0.00")

        data = result.to_dict()
        assert data["variance"] == "10000.00"
        assert data["variance_corrected"] == "10000.00"
        assert data["already_balanced"] is False

        equity_line = next(line for line in result.entry.lines if line.account_code == "3000")
        assert equity_line.credit_amount == Decimal("10000.00")

    @pytest.mark.asyncio
    async def test_negative_variance_decreases_equity(self, ledger: Ledger) -> None:
        """자본 과대 → 자본 차변 보정"""
        await _open(ledger, "1010", "50000")
        await _open(ledger, "3000", "65000")

        result = await ledger.balancer.run()

        assert result.balancing_type == "Decreased Owner Equity"
        assert result.new_equity_balance == Decimal("50000.00")
        assert result.after.variance == Decimal("0.00")
        equity_line = next(line for line in result.entry.lines if line.account_code == "3000")
        assert equity_line.debit_amount == Decimal("15000.00")
        # 보정 방향이 부호로 남는다
        assert result.to_dict()["variance_corrected"] == "-15000.00"

    @pytest.mark.asyncio
    async def test_already_balanced(self, ledger: Ledger) -> None:
        """균형 상태면 분개 없이 합계만 반환"""
        await _open(ledger, "1010", "1000")
        await _open(ledger, "3000", "1000")

        result = await ledger.balancer.run()

        assert result.balanced is True
        assert result.entry is None
        assert result.to_dict()["already_balanced"] is True
        assert "journal_number" not in result.to_dict()
        assert (await ledger.journal.list_entries()).total == 0

    @pytest.mark.asyncio
    async def test_invariant_holds_after_run(self, ledger: Ledger) -> None:
        """보정 분개 후에도 잔액 불변식 유지, 두 번째 실행은 변경 없음"""
        await _open(ledger, "1010", "300")

        await ledger.balancer.run()
        second = await ledger.balancer.run()

        assert second.balanced is True
        assert await ledger.projector.verify() == []
        adjustment = await ledger.registry.get_account("6990")
        assert adjustment.current_balance == Decimal("300.00")

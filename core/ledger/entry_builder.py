"""
분개 생성기

업무 이벤트(송장, 입금, 비용, 발주, 공급사 지급, 출자, 인출)를
2라인 복식부기 분개 요청으로 변환
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Awaitable, Callable

from core.ledger.errors import ValidationError
from core.ledger.models import EntryRequest, LineInput
from core.ledger.types import (
    AccountSpec,
    PaymentMethod,
    SourceDocumentType,
    StandardAccounts,
)
from core.utils.money import to_amount

if TYPE_CHECKING:
    from core.ledger.models import Account
    from core.ledger.registry import AccountRegistry

logger = logging.getLogger(__name__)


# 비용 카테고리 → 비용 계정
EXPENSE_CATEGORY_ACCOUNTS: dict[str, AccountSpec] = {
    "office": StandardAccounts.OFFICE_EXPENSE,
    "rent": StandardAccounts.RENT_EXPENSE,
    "utilities": StandardAccounts.UTILITIES_EXPENSE,
    "manufacturing": StandardAccounts.MANUFACTURING_COGS,
    "other": StandardAccounts.OTHER_EXPENSE,
}


@dataclass
class BusinessEvent:
    """분개 대상 업무 이벤트

    Ledger는 document_id를 따라가지 않는다 (약한 참조).
    """

    kind: SourceDocumentType
    document_id: str
    amount: Any
    event_date: date | str
    description: str | None = None
    reference_number: str | None = None
    counterparty: str | None = None  # 고객/공급사 이름 (적요용)
    category: str | None = None  # EXPENSE 전용
    payment_method: PaymentMethod = PaymentMethod.CASH


class JournalEntryBuilder:
    """업무 이벤트를 분개 요청으로 변환

    이벤트 종류별 핸들러가 필요한 계정을 ensure_account()로 지연 생성한다.

    Args:
        registry: 계정 레지스트리
    """

    def __init__(self, registry: AccountRegistry):
        self.registry = registry

    async def build(self, event: BusinessEvent) -> EntryRequest:
        """이벤트에서 분개 요청 생성

        Raises:
            ValidationError: 지원하지 않는 이벤트이거나 금액이 0 이하인 경우
        """
        handlers: dict[SourceDocumentType, Callable[[BusinessEvent, Decimal], Awaitable[EntryRequest]]] = {
            SourceDocumentType.INVOICE: self._from_invoice,
            SourceDocumentType.PAYMENT: self._from_payment,
            SourceDocumentType.EXPENSE: self._from_expense,
            SourceDocumentType.PURCHASE_ORDER: self._from_purchase_order,
            SourceDocumentType.SUPPLIER_PAYMENT: self._from_supplier_payment,
            SourceDocumentType.INVESTMENT: self._from_investment,
            SourceDocumentType.WITHDRAWAL: self._from_withdrawal,
        }

        handler = handlers.get(event.kind)
        if handler is None:
            raise ValidationError(f"Unsupported business event: {event.kind.value}")

        try:
            amount = to_amount(event.amount)
        except ValueError as e:
            raise ValidationError(str(e)) from e
        if amount <= 0:
            raise ValidationError("Business event amount must be positive")

        return await handler(event, amount)

    async def _from_invoice(self, event: BusinessEvent, amount: Decimal) -> EntryRequest:
        """송장 발행 → 차변 매출채권 / 대변 매출"""
        receivable = await self._ensure(StandardAccounts.ACCOUNTS_RECEIVABLE)
        sales = await self._ensure(StandardAccounts.SALES_REVENUE)
        return self._two_line(
            event,
            debit=receivable,
            credit=sales,
            amount=amount,
            default_description=f"Invoice {event.document_id}",
        )

    async def _from_payment(self, event: BusinessEvent, amount: Decimal) -> EntryRequest:
        """고객 입금 → 차변 현금/은행 / 대변 매출채권"""
        cash = await self._cash_account(event.payment_method)
        receivable = await self._ensure(StandardAccounts.ACCOUNTS_RECEIVABLE)
        return self._two_line(
            event,
            debit=cash,
            credit=receivable,
            amount=amount,
            default_description=f"Payment received for {event.document_id}",
        )

    async def _from_expense(self, event: BusinessEvent, amount: Decimal) -> EntryRequest:
        """비용 지출 → 차변 카테고리별 비용 / 대변 현금/은행"""
        category = (event.category or "other").lower()
        spec = EXPENSE_CATEGORY_ACCOUNTS.get(category)
        if spec is None:
            raise ValidationError(
                f"Unknown expense category: {event.category}. "
                f"Expected one of {sorted(EXPENSE_CATEGORY_ACCOUNTS)}"
            )
        expense = await self._ensure(spec)
        cash = await self._cash_account(event.payment_method)
        return self._two_line(
            event,
            debit=expense,
            credit=cash,
            amount=amount,
            default_description=f"Expense {event.document_id} ({category})",
        )

    async def _from_purchase_order(self, event: BusinessEvent, amount: Decimal) -> EntryRequest:
        """발주 입고 → 차변 재고 / 대변 매입채무"""
        inventory = await self._ensure(StandardAccounts.FINISHED_GOODS)
        payable = await self._ensure(StandardAccounts.ACCOUNTS_PAYABLE)
        return self._two_line(
            event,
            debit=inventory,
            credit=payable,
            amount=amount,
            default_description=f"Purchase order {event.document_id}",
        )

    async def _from_supplier_payment(self, event: BusinessEvent, amount: Decimal) -> EntryRequest:
        """공급사 지급 → 차변 매입채무 / 대변 현금/은행"""
        payable = await self._ensure(StandardAccounts.ACCOUNTS_PAYABLE)
        cash = await self._cash_account(event.payment_method)
        return self._two_line(
            event,
            debit=payable,
            credit=cash,
            amount=amount,
            default_description=f"Supplier payment {event.document_id}",
        )

    async def _from_investment(self, event: BusinessEvent, amount: Decimal) -> EntryRequest:
        """출자 → 차변 현금/은행 / 대변 자본"""
        cash = await self._cash_account(event.payment_method)
        equity = await self._ensure(StandardAccounts.OWNER_EQUITY)
        return self._two_line(
            event,
            debit=cash,
            credit=equity,
            amount=amount,
            default_description=f"Owner investment {event.document_id}",
        )

    async def _from_withdrawal(self, event: BusinessEvent, amount: Decimal) -> EntryRequest:
        """인출 → 차변 인출금 / 대변 현금/은행"""
        drawings = await self._ensure(StandardAccounts.OWNER_DRAWINGS)
        cash = await self._cash_account(event.payment_method)
        return self._two_line(
            event,
            debit=drawings,
            credit=cash,
            amount=amount,
            default_description=f"Owner withdrawal {event.document_id}",
        )

    async def _ensure(self, spec: AccountSpec) -> Account:
        return await self.registry.ensure_account(spec.code, spec)

    async def _cash_account(self, method: PaymentMethod) -> Account:
        if method == PaymentMethod.BANK:
            return await self._ensure(StandardAccounts.BANK)
        return await self._ensure(StandardAccounts.CASH)

    @staticmethod
    def _two_line(
        event: BusinessEvent,
        debit: Account,
        credit: Account,
        amount: Decimal,
        default_description: str,
    ) -> EntryRequest:
        description = event.description or default_description
        if event.counterparty:
            description = f"{description} - {event.counterparty}"

        return EntryRequest(
            entry_date=event.event_date,
            reference_number=event.reference_number or event.document_id,
            description=description,
            source_document_type=event.kind,
            source_document_id=event.document_id,
            lines=[
                LineInput(account=debit.account_id, debit_amount=amount, reference=event.document_id),
                LineInput(account=credit.account_id, credit_amount=amount, reference=event.document_id),
            ],
        )

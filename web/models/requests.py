"""
요청 스키마 (Pydantic)

Web API 요청 데이터 검증.
금액은 숫자/문자열 모두 받아 Ledger에서 Decimal로 정규화한다.
"""

from datetime import date
from decimal import Decimal

from pydantic import AliasChoices, BaseModel, Field, field_validator

from core.ledger import (
    AccountSpec,
    AccountSubtype,
    AccountType,
    BusinessEvent,
    EntryRequest,
    EntryUpdate,
    LineInput,
    NormalBalance,
    OpeningBalanceRequest,
    OpeningItem,
    OpeningSnapshot,
    PartnerRef,
    PaymentMethod,
    SourceDocumentType,
)
from core.types import PartnerType

Amount = Decimal | int | str | None

# 시스템이 직접 만드는 분개 유형 (API로 생성 불가)
SYSTEM_SOURCE_TYPES = frozenset({SourceDocumentType.REVERSAL, SourceDocumentType.AUTO_BALANCE})


class AccountCreateRequest(BaseModel):
    """계정 생성 요청"""

    code: str = Field(..., min_length=1, description="계정 코드 (고유)")
    name: str = Field(..., min_length=1, description="계정 이름")
    account_type: AccountType = Field(..., description="계정 유형")
    subtype: AccountSubtype | None = Field(default=None, description="세부 유형 (보고서 그룹핑)")
    normal_balance: NormalBalance | None = Field(
        default=None, description="정상잔액 방향 (생략 시 유형 기본값)"
    )
    description: str | None = Field(default=None, description="설명")

    def to_spec(self) -> AccountSpec:
        return AccountSpec(
            code=self.code,
            name=self.name,
            account_type=self.account_type,
            subtype=self.subtype,
            normal_balance=self.normal_balance,
            description=self.description,
        )


class JournalLineRequest(BaseModel):
    """분개 라인"""

    account_id: str = Field(..., description="계정 ID 또는 계정 코드")
    debit_amount: Amount = Field(default=None, description="차변 금액")
    credit_amount: Amount = Field(default=None, description="대변 금액")
    description: str | None = Field(default=None, description="라인 적요")
    reference: str | None = Field(default=None, description="라인 참조")

    def to_input(self) -> LineInput:
        return LineInput(
            account=self.account_id,
            debit_amount=self.debit_amount,
            credit_amount=self.credit_amount,
            description=self.description,
            reference=self.reference,
        )


class JournalEntryCreateRequest(BaseModel):
    """분개 생성 요청"""

    entry_date: date | None = Field(default=None, description="분개일 (YYYY-MM-DD)")
    reference: str | None = Field(
        default=None,
        validation_alias=AliasChoices("reference", "reference_number"),
        description="업무 문서 참조 번호",
    )
    description: str | None = Field(default=None, description="적요")
    source_document_type: SourceDocumentType | None = Field(default=None, description="원천 문서 유형")
    source_document_id: str | None = Field(default=None, description="원천 문서 ID")
    lines: list[JournalLineRequest] = Field(default_factory=list, description="분개 라인 (2개 이상)")
    post: bool = Field(default=False, description="생성과 동시에 전기")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "entry_date": "2026-03-01",
                    "reference": "INV-0001",
                    "description": "Cash sale",
                    "lines": [
                        {"account_id": "1010", "debit_amount": "500"},
                        {"account_id": "4000", "credit_amount": "500"},
                    ],
                    "post": True,
                }
            ]
        }
    }

    @field_validator("source_document_type")
    @classmethod
    def reject_system_source(cls, v: SourceDocumentType | None) -> SourceDocumentType | None:
        if v in SYSTEM_SOURCE_TYPES:
            raise ValueError(f"source_document_type {v.value} is reserved for system entries")
        return v

    def to_request(self) -> EntryRequest:
        return EntryRequest(
            entry_date=self.entry_date,
            reference_number=self.reference,
            description=self.description,
            source_document_type=self.source_document_type,
            source_document_id=self.source_document_id,
            lines=[line.to_input() for line in self.lines],
        )


class JournalEntryUpdateRequest(BaseModel):
    """DRAFT 분개 수정 요청 (lines를 주면 전체 교체)"""

    entry_date: date | None = Field(default=None, description="분개일")
    reference: str | None = Field(
        default=None,
        validation_alias=AliasChoices("reference", "reference_number"),
        description="참조 번호",
    )
    description: str | None = Field(default=None, description="적요")
    lines: list[JournalLineRequest] | None = Field(default=None, description="교체할 라인 전체")

    def to_update(self) -> EntryUpdate:
        return EntryUpdate(
            entry_date=self.entry_date,
            reference_number=self.reference,
            description=self.description,
        )

    def to_lines(self) -> list[LineInput] | None:
        if self.lines is None:
            return None
        return [line.to_input() for line in self.lines]


class ReverseEntryRequest(BaseModel):
    """역분개 요청"""

    entry_date: date | None = Field(default=None, description="역분개일 (생략 시 오늘)")
    description: str | None = Field(default=None, description="적요")


class PartnerRequest(BaseModel):
    """보조원장 거래처"""

    partner_type: PartnerType = Field(..., description="거래처 유형")
    partner_id: str = Field(..., min_length=1, description="거래처 ID")
    partner_name: str | None = Field(default=None, description="거래처 이름")

    def to_ref(self) -> PartnerRef:
        return PartnerRef(
            partner_type=self.partner_type,
            partner_id=self.partner_id,
            partner_name=self.partner_name,
        )


class OpeningBalanceCreateRequest(BaseModel):
    """기초잔액 설정 요청

    debit_amount/credit_amount 또는 balance_amount (정상잔액 방향 기준) 중 하나.
    """

    account_id: str = Field(..., description="계정 ID 또는 계정 코드")
    opening_date: date | None = Field(default=None, description="개시일")
    debit_amount: Amount = Field(default=None, description="차변 금액")
    credit_amount: Amount = Field(default=None, description="대변 금액")
    balance_amount: Amount = Field(default=None, description="정상잔액 방향 기준 잔액")
    partner: PartnerRequest | None = Field(default=None, description="보조원장 거래처")
    description: str | None = Field(default=None, description="설명")

    def to_request(self) -> OpeningBalanceRequest:
        return OpeningBalanceRequest(
            account=self.account_id,
            opening_date=self.opening_date,
            debit_amount=self.debit_amount,
            credit_amount=self.credit_amount,
            balance_amount=self.balance_amount,
            partner=self.partner.to_ref() if self.partner else None,
            description=self.description,
        )


class OpeningBalanceUpdateRequest(BaseModel):
    """기초잔액 수정 요청 (금액을 주면 양쪽 모두 교체)"""

    debit_amount: Amount = Field(default=None, description="차변 금액")
    credit_amount: Amount = Field(default=None, description="대변 금액")
    balance_amount: Amount = Field(default=None, description="정상잔액 방향 기준 잔액")
    opening_date: date | None = Field(default=None, description="개시일")
    description: str | None = Field(default=None, description="설명")


class OpeningItemRequest(BaseModel):
    """일괄 개시 항목"""

    account_id: str = Field(..., description="계정 ID 또는 계정 코드")
    amount: Amount = Field(..., description="정상잔액 방향 기준 잔액")
    partner: PartnerRequest | None = Field(default=None, description="보조원장 거래처")
    description: str | None = Field(default=None, description="설명")


class OpeningSnapshotRequest(BaseModel):
    """일괄 개시 요청"""

    opening_date: date = Field(..., description="개시일")
    items: list[OpeningItemRequest] = Field(..., description="개시 항목")

    def to_snapshot(self) -> OpeningSnapshot:
        return OpeningSnapshot(
            opening_date=self.opening_date,
            items=[
                OpeningItem(
                    account=item.account_id,
                    amount=item.amount,
                    partner=item.partner.to_ref() if item.partner else None,
                    description=item.description,
                )
                for item in self.items
            ],
        )


class BusinessEventRequest(BaseModel):
    """업무 이벤트 분개 요청"""

    kind: SourceDocumentType = Field(..., description="이벤트 유형 (INVOICE, PAYMENT 등)")
    document_id: str = Field(..., min_length=1, description="업무 문서 ID")
    amount: Amount = Field(..., description="금액")
    event_date: date = Field(..., description="발생일")
    description: str | None = Field(default=None, description="적요")
    reference_number: str | None = Field(default=None, description="참조 번호")
    counterparty: str | None = Field(default=None, description="고객/공급사 이름")
    category: str | None = Field(default=None, description="비용 카테고리 (EXPENSE)")
    payment_method: PaymentMethod = Field(default=PaymentMethod.CASH, description="결제 수단")

    def to_event(self) -> BusinessEvent:
        return BusinessEvent(
            kind=self.kind,
            document_id=self.document_id,
            amount=self.amount,
            event_date=self.event_date,
            description=self.description,
            reference_number=self.reference_number,
            counterparty=self.counterparty,
            category=self.category,
            payment_method=self.payment_method,
        )

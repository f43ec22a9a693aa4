"""
복식부기 데이터 모델

저장된 계정/분개/기초잔액 레코드와 입력 요청 데이터 클래스.
금액은 모두 Decimal(소수점 2자리).
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING, Any

from core.ledger.types import (
    AccountSubtype,
    AccountType,
    JournalStatus,
    NormalBalance,
    SourceDocumentType,
)
from core.types import PartnerType
from core.utils.money import ZERO, from_db

if TYPE_CHECKING:
    import aiosqlite


# =========================================================================
# 저장 레코드
# =========================================================================


@dataclass
class Account:
    """계정과목"""

    account_id: str
    code: str
    name: str
    account_type: AccountType
    normal_balance: NormalBalance
    subtype: AccountSubtype | None = None
    description: str | None = None
    opening_balance: Decimal = ZERO
    current_balance: Decimal = ZERO
    is_active: bool = True

    @classmethod
    def from_row(cls, row: aiosqlite.Row) -> Account:
        return cls(
            account_id=row["account_id"],
            code=row["code"],
            name=row["name"],
            account_type=AccountType(row["account_type"]),
            normal_balance=NormalBalance(row["normal_balance"]),
            subtype=AccountSubtype(row["subtype"]) if row["subtype"] else None,
            description=row["description"],
            opening_balance=from_db(row["opening_balance"]),
            current_balance=from_db(row["current_balance"]),
            is_active=bool(row["is_active"]),
        )

    def signed_amount(self, debit: Decimal, credit: Decimal) -> Decimal:
        """정상잔액 방향 기준 증감액

        DEBIT 계정: 차변 - 대변
        CREDIT 계정: 대변 - 차변
        """
        if self.normal_balance == NormalBalance.DEBIT:
            return debit - credit
        return credit - debit

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.account_id,
            "code": self.code,
            "name": self.name,
            "account_type": self.account_type.value,
            "subtype": self.subtype.value if self.subtype else None,
            "normal_balance": self.normal_balance.value,
            "description": self.description,
            "opening_balance": str(self.opening_balance),
            "current_balance": str(self.current_balance),
            "is_active": self.is_active,
        }


@dataclass
class JournalLine:
    """분개 라인 (저장됨)"""

    line_id: str
    entry_id: str
    line_number: int
    account_id: str
    debit_amount: Decimal = ZERO
    credit_amount: Decimal = ZERO
    description: str | None = None
    reference: str | None = None
    account_code: str | None = None
    account_name: str | None = None

    @classmethod
    def from_row(cls, row: aiosqlite.Row) -> JournalLine:
        return cls(
            line_id=row["line_id"],
            entry_id=row["entry_id"],
            line_number=row["line_number"],
            account_id=row["account_id"],
            debit_amount=from_db(row["debit_amount"]),
            credit_amount=from_db(row["credit_amount"]),
            description=row["description"],
            reference=row["reference"],
            account_code=row["account_code"],
            account_name=row["account_name"],
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.line_id,
            "line_number": self.line_number,
            "account_id": self.account_id,
            "account_code": self.account_code,
            "account_name": self.account_name,
            "debit_amount": str(self.debit_amount) if self.debit_amount else None,
            "credit_amount": str(self.credit_amount) if self.credit_amount else None,
            "description": self.description,
            "reference": self.reference,
        }


@dataclass
class JournalEntry:
    """분개 헤더 + 라인 (저장됨)"""

    entry_id: str
    journal_number: str
    entry_date: date
    status: JournalStatus
    total_debit: Decimal
    total_credit: Decimal
    reference_number: str | None = None
    description: str | None = None
    source_document_type: SourceDocumentType | None = None
    source_document_id: str | None = None
    posted_at: str | None = None
    created_at: str | None = None
    updated_at: str | None = None
    lines: list[JournalLine] = field(default_factory=list)

    @classmethod
    def from_row(cls, row: aiosqlite.Row, lines: list[JournalLine] | None = None) -> JournalEntry:
        source_type = row["source_document_type"]
        return cls(
            entry_id=row["entry_id"],
            journal_number=row["journal_number"],
            entry_date=date.fromisoformat(row["entry_date"]),
            status=JournalStatus(row["status"]),
            total_debit=from_db(row["total_debit"]),
            total_credit=from_db(row["total_credit"]),
            reference_number=row["reference_number"],
            description=row["description"],
            source_document_type=SourceDocumentType(source_type) if source_type else None,
            source_document_id=row["source_document_id"],
            posted_at=row["posted_at"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
            lines=lines or [],
        )

    @property
    def is_posted(self) -> bool:
        return self.status == JournalStatus.POSTED

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.entry_id,
            "journal_number": self.journal_number,
            "entry_date": self.entry_date.isoformat(),
            "reference_number": self.reference_number,
            "description": self.description,
            "source_document_type": (
                self.source_document_type.value if self.source_document_type else None
            ),
            "source_document_id": self.source_document_id,
            "status": self.status.value,
            "total_debit": str(self.total_debit),
            "total_credit": str(self.total_credit),
            "posted_at": self.posted_at,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
            "lines": [line.to_dict() for line in self.lines],
        }


@dataclass(frozen=True)
class PartnerRef:
    """보조원장 거래처 참조 (고객/공급사 등)"""

    partner_type: PartnerType
    partner_id: str
    partner_name: str | None = None


@dataclass
class OpeningBalance:
    """기초잔액 레코드"""

    opening_id: str
    account_id: str
    debit_amount: Decimal
    credit_amount: Decimal
    opening_date: date
    fiscal_year: int
    partner: PartnerRef | None = None
    description: str | None = None
    account_code: str | None = None
    account_name: str | None = None

    @property
    def net(self) -> Decimal:
        """순액 (차변 - 대변)"""
        return self.debit_amount - self.credit_amount

    @classmethod
    def from_row(cls, row: aiosqlite.Row) -> OpeningBalance:
        partner = None
        if row["partner_type"]:
            partner = PartnerRef(
                partner_type=PartnerType(row["partner_type"]),
                partner_id=row["partner_id"],
                partner_name=row["partner_name"],
            )
        return cls(
            opening_id=row["opening_id"],
            account_id=row["account_id"],
            debit_amount=from_db(row["debit_amount"]),
            credit_amount=from_db(row["credit_amount"]),
            opening_date=date.fromisoformat(row["opening_date"]),
            fiscal_year=row["fiscal_year"],
            partner=partner,
            description=row["description"],
            account_code=row["account_code"],
            account_name=row["account_name"],
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.opening_id,
            "account_id": self.account_id,
            "account_code": self.account_code,
            "account_name": self.account_name,
            "partner_type": self.partner.partner_type.value if self.partner else None,
            "partner_id": self.partner.partner_id if self.partner else None,
            "partner_name": self.partner.partner_name if self.partner else None,
            "debit_amount": str(self.debit_amount),
            "credit_amount": str(self.credit_amount),
            "net": str(self.net),
            "opening_date": self.opening_date.isoformat(),
            "fiscal_year": self.fiscal_year,
            "description": self.description,
        }


# =========================================================================
# 입력 요청
# =========================================================================


@dataclass
class LineInput:
    """분개 라인 입력

    account는 account_id 또는 계정 코드.
    금액은 숫자/문자열 모두 허용하며 검증 단계에서 Decimal로 변환된다.
    """

    account: str
    debit_amount: Any = None
    credit_amount: Any = None
    description: str | None = None
    reference: str | None = None


@dataclass
class EntryRequest:
    """분개 생성 요청"""

    entry_date: date | str | None
    lines: list[LineInput]
    reference_number: str | None = None
    description: str | None = None
    source_document_type: SourceDocumentType | None = None
    source_document_id: str | None = None


@dataclass
class EntryUpdate:
    """DRAFT 분개 헤더 수정 (None 필드는 변경하지 않음)"""

    entry_date: date | str | None = None
    reference_number: str | None = None
    description: str | None = None


@dataclass
class EntryFilter:
    """분개 목록 조회 조건"""

    start_date: date | str | None = None
    end_date: date | str | None = None
    reference: str | None = None
    status: JournalStatus | None = None
    page: int = 1
    limit: int = 20


@dataclass
class EntryPage:
    """분개 목록 페이지"""

    entries: list[JournalEntry]
    page: int
    limit: int
    total: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "entries": [entry.to_dict() for entry in self.entries],
            "pagination": {
                "page": self.page,
                "limit": self.limit,
                "total": self.total,
                "totalPages": self.total_pages,
            },
        }


@dataclass
class OpeningBalanceRequest:
    """기초잔액 설정/수정 요청

    debit_amount/credit_amount 대신 balance_amount를 줄 수 있다.
    balance_amount는 계정의 정상잔액 방향 기준 부호 있는 금액
    (양수 = 정상잔액 쪽, 음수 = 반대쪽).
    """

    account: str
    opening_date: date | str | None
    debit_amount: Any = None
    credit_amount: Any = None
    balance_amount: Any = None
    partner: PartnerRef | None = None
    description: str | None = None

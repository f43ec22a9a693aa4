"""
복식부기 타입 정의

계정 유형, 정상잔액 방향, 분개 상태, 원천 문서 유형 등
Ledger 시스템에서 사용하는 Enum과 표준 계정과목 정의
"""

from dataclasses import dataclass
from enum import Enum


class AccountType(str, Enum):
    """계정 유형 (복식부기 5대 계정)

    str을 상속하여 JSON 직렬화 가능.
    """

    ASSET = "ASSET"  # 자산
    LIABILITY = "LIABILITY"  # 부채
    EQUITY = "EQUITY"  # 자본
    REVENUE = "REVENUE"  # 수익
    EXPENSE = "EXPENSE"  # 비용


class NormalBalance(str, Enum):
    """정상잔액 방향 (해당 계정을 증가시키는 쪽)"""

    DEBIT = "DEBIT"  # 차변
    CREDIT = "CREDIT"  # 대변


class AccountSubtype(str, Enum):
    """계정 세부 유형 (재무상태표 그룹핑 전용)"""

    CURRENT_ASSET = "CURRENT_ASSET"
    FIXED_ASSET = "FIXED_ASSET"
    INTANGIBLE_ASSET = "INTANGIBLE_ASSET"
    CURRENT_LIABILITY = "CURRENT_LIABILITY"
    LONG_TERM_LIABILITY = "LONG_TERM_LIABILITY"
    CAPITAL = "CAPITAL"
    DRAWINGS = "DRAWINGS"
    OPERATING_REVENUE = "OPERATING_REVENUE"
    COST_OF_SALES = "COST_OF_SALES"
    OPERATING_EXPENSE = "OPERATING_EXPENSE"
    OTHER = "OTHER"


class JournalStatus(str, Enum):
    """분개 상태"""

    DRAFT = "DRAFT"  # 작성 중 (수정/삭제 가능)
    POSTED = "POSTED"  # 전기 완료 (불변)


class SourceDocumentType(str, Enum):
    """분개 원천 문서 유형

    source_document_id와 함께 업무 문서를 가리키는 약한 참조.
    Ledger는 이 참조를 따라가지 않는다.
    """

    MANUAL = "MANUAL"  # 수기 분개
    INVOICE = "INVOICE"  # 매출 송장
    PAYMENT = "PAYMENT"  # 고객 입금
    EXPENSE = "EXPENSE"  # 비용 지출
    PURCHASE_ORDER = "PURCHASE_ORDER"  # 매입 발주
    SUPPLIER_PAYMENT = "SUPPLIER_PAYMENT"  # 공급사 지급
    INVESTMENT = "INVESTMENT"  # 출자
    WITHDRAWAL = "WITHDRAWAL"  # 인출
    AUTO_BALANCE = "AUTO_BALANCE"  # Auto-Balancer 보정
    REVERSAL = "REVERSAL"  # 역분개


class PaymentMethod(str, Enum):
    """결제 수단 (현금성 계정 선택용)"""

    CASH = "CASH"
    BANK = "BANK"


# 계정 유형별 기본 정상잔액
NORMAL_BALANCE_BY_TYPE: dict[AccountType, NormalBalance] = {
    AccountType.ASSET: NormalBalance.DEBIT,
    AccountType.EXPENSE: NormalBalance.DEBIT,
    AccountType.LIABILITY: NormalBalance.CREDIT,
    AccountType.EQUITY: NormalBalance.CREDIT,
    AccountType.REVENUE: NormalBalance.CREDIT,
}

# 재무상태표 항등식 (자산 = 부채 + 자본) 대상 유형
BALANCE_SHEET_TYPES: tuple[AccountType, ...] = (
    AccountType.ASSET,
    AccountType.LIABILITY,
    AccountType.EQUITY,
)


@dataclass(frozen=True)
class AccountSpec:
    """계정 생성 기본값

    ensure_account()에 넘겨 계정이 없을 때 이 값으로 생성한다.
    normal_balance가 None이면 계정 유형의 기본값을 사용.
    """

    code: str
    name: str
    account_type: AccountType
    subtype: AccountSubtype | None = None
    normal_balance: NormalBalance | None = None
    description: str | None = None

    def resolved_normal_balance(self) -> NormalBalance:
        if self.normal_balance is not None:
            return self.normal_balance
        return NORMAL_BALANCE_BY_TYPE[self.account_type]


class StandardAccounts:
    """표준 계정과목

    업무 이벤트가 처음 필요로 할 때 ensure_account()로 생성된다.
    """

    CASH = AccountSpec(
        "1010", "Cash", AccountType.ASSET, AccountSubtype.CURRENT_ASSET,
        description="Cash on hand",
    )
    BANK = AccountSpec(
        "1100", "Bank", AccountType.ASSET, AccountSubtype.CURRENT_ASSET,
        description="Bank current account",
    )
    ACCOUNTS_RECEIVABLE = AccountSpec(
        "1200", "Accounts Receivable", AccountType.ASSET, AccountSubtype.CURRENT_ASSET,
        description="Money owed by customers",
    )
    FINISHED_GOODS = AccountSpec(
        "1330", "Finished Goods", AccountType.ASSET, AccountSubtype.CURRENT_ASSET,
        description="Finished goods inventory",
    )
    ACCOUNTS_PAYABLE = AccountSpec(
        "2100", "Accounts Payable", AccountType.LIABILITY, AccountSubtype.CURRENT_LIABILITY,
        description="Money owed to suppliers",
    )
    OWNER_EQUITY = AccountSpec(
        "3000", "Owner's Equity", AccountType.EQUITY, AccountSubtype.CAPITAL,
        description="Owner's capital",
    )
    OWNER_DRAWINGS = AccountSpec(
        "3100", "Owner's Drawings", AccountType.EQUITY, AccountSubtype.DRAWINGS,
        normal_balance=NormalBalance.DEBIT,
        description="Withdrawals by the owner",
    )
    SALES_REVENUE = AccountSpec(
        "4000", "Sales Revenue", AccountType.REVENUE, AccountSubtype.OPERATING_REVENUE,
        description="Revenue from sales",
    )
    MANUFACTURING_COGS = AccountSpec(
        "5000", "Cost of Goods Sold", AccountType.EXPENSE, AccountSubtype.COST_OF_SALES,
        description="Manufacturing cost of goods sold",
    )
    OFFICE_EXPENSE = AccountSpec(
        "6100", "Office Expenses", AccountType.EXPENSE, AccountSubtype.OPERATING_EXPENSE,
    )
    RENT_EXPENSE = AccountSpec(
        "6200", "Rent Expense", AccountType.EXPENSE, AccountSubtype.OPERATING_EXPENSE,
    )
    UTILITIES_EXPENSE = AccountSpec(
        "6300", "Utilities Expense", AccountType.EXPENSE, AccountSubtype.OPERATING_EXPENSE,
    )
    OTHER_EXPENSE = AccountSpec(
        "6900", "Other Expenses", AccountType.EXPENSE, AccountSubtype.OPERATING_EXPENSE,
    )
    RECONCILIATION_ADJUSTMENT = AccountSpec(
        "6990", "Balance Reconciliation Adjustment", AccountType.EXPENSE, AccountSubtype.OTHER,
        description="Counter-leg for auto-balance corrections",
    )


# 스키마 초기화 시 미리 생성하는 계정 (INSERT OR IGNORE)
INITIAL_ACCOUNTS: tuple[AccountSpec, ...] = (
    StandardAccounts.CASH,
    StandardAccounts.BANK,
    StandardAccounts.ACCOUNTS_RECEIVABLE,
    StandardAccounts.FINISHED_GOODS,
    StandardAccounts.ACCOUNTS_PAYABLE,
    StandardAccounts.OWNER_EQUITY,
    StandardAccounts.SALES_REVENUE,
)

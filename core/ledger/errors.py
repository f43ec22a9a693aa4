"""
복식부기 예외 정의

모든 Ledger 예외는 LedgerError를 상속하며 HTTP 상태 코드를 함께 가진다.
Web 레이어는 status_code와 메시지만 사용하여 {"error": ...} 응답을 만든다.

분류:
- VALIDATION (400): 필수값 누락, 잘못된 라인, 라인 2개 미만
- UNBALANCED (400): 차변 합계 != 대변 합계
- NOT_FOUND (404): 존재하지 않는 계정/분개/기초잔액
- CONFLICT (409): 기초잔액 중복, 전기된 분개 수정/삭제
- PERSISTENCE (500): 저장소 오류
"""


class LedgerError(Exception):
    """Ledger 예외 기본 클래스"""

    category = "LEDGER"
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(LedgerError):
    """입력 검증 실패 (저장 전 거부)"""

    category = "VALIDATION"
    status_code = 400


class InvalidLineError(ValidationError):
    """차변/대변 중 정확히 하나만 양수여야 하는 규칙 위반"""

    def __init__(self, line_number: int, message: str):
        super().__init__(f"Line {line_number}: {message}")
        self.line_number = line_number


class UnbalancedEntryError(LedgerError):
    """차대 불일치

    호출자가 금액을 고쳐 재시도할 수 있는 유일한 오류.
    """

    category = "UNBALANCED"
    status_code = 400

    def __init__(self, total_debit: object, total_credit: object):
        super().__init__(
            f"Journal entry is not balanced. Debits: {total_debit}, Credits: {total_credit}"
        )
        self.total_debit = total_debit
        self.total_credit = total_credit


class NotFoundError(LedgerError):
    """참조 대상 없음"""

    category = "NOT_FOUND"
    status_code = 404


class AccountNotFoundError(NotFoundError):
    def __init__(self, ref: str):
        super().__init__(f"Account not found: {ref}")
        self.ref = ref


class EntryNotFoundError(NotFoundError):
    def __init__(self, entry_id: str):
        super().__init__(f"Journal entry not found: {entry_id}")
        self.entry_id = entry_id


class OpeningBalanceNotFoundError(NotFoundError):
    def __init__(self, opening_id: str):
        super().__init__(f"Opening balance not found: {opening_id}")
        self.opening_id = opening_id


class ConflictError(LedgerError):
    """현재 상태와 충돌하는 요청"""

    category = "CONFLICT"
    status_code = 409


class ImmutableEntryError(ConflictError):
    """전기(POSTED)된 분개 수정/삭제 시도"""

    def __init__(self, journal_number: str, action: str):
        super().__init__(
            f"Cannot {action} journal entry {journal_number}: entry is POSTED. "
            "Issue a reversing entry instead"
        )
        self.journal_number = journal_number


class DuplicateOpeningBalanceError(ConflictError):
    def __init__(self, account_code: str, partner_id: str | None = None):
        target = f"account {account_code}"
        if partner_id:
            target += f" / partner {partner_id}"
        super().__init__(
            f"Opening balance already exists for {target}. Use update instead"
        )
        self.account_code = account_code
        self.partner_id = partner_id


class DuplicateAccountError(ConflictError):
    def __init__(self, code: str):
        super().__init__(f"Account code already exists: {code}")
        self.code = code


class PersistenceError(LedgerError):
    """저장소 오류 (롤백 후 전달)"""

    category = "PERSISTENCE"
    status_code = 500

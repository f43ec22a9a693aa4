"""
분개 저장소

복식부기 분개 생성/전기/수정/삭제/조회.

- 모든 검증은 쓰기 전에 수행
- 분개 번호 채번 + 헤더 + 라인 (+ 전기 시 잔액 반영)은 하나의 트랜잭션
- POSTED 분개는 수정/삭제 불가 (역분개로만 상쇄)
"""

from __future__ import annotations

import logging
import sqlite3
import uuid
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING, Iterator

from core.constants import LedgerDefaults
from core.ledger.errors import (
    ConflictError,
    EntryNotFoundError,
    ImmutableEntryError,
    InvalidLineError,
    PersistenceError,
    UnbalancedEntryError,
    ValidationError,
)
from core.ledger.models import (
    Account,
    EntryFilter,
    EntryPage,
    EntryRequest,
    EntryUpdate,
    JournalEntry,
    JournalLine,
    LineInput,
)
from core.ledger.schema import JOURNAL_NUMBER_SEQUENCE
from core.ledger.types import JournalStatus, SourceDocumentType
from core.utils.money import ZERO, format_amount, to_amount, to_db
from core.utils.timezone import now_iso, now_utc, parse_date

if TYPE_CHECKING:
    from adapters.db.sqlite_adapter import SQLiteAdapter
    from core.ledger.projector import BalanceProjector
    from core.ledger.registry import AccountRegistry

logger = logging.getLogger(__name__)

MIN_LINES = 2

_LINE_SELECT = """
    SELECT jl.*, a.code AS account_code, a.name AS account_name
    FROM journal_line jl
    JOIN account a ON a.account_id = jl.account_id
"""


@dataclass
class _CheckedLine:
    """검증을 통과한 입력 라인"""

    line_number: int
    account: Account
    debit_amount: Decimal
    credit_amount: Decimal
    description: str | None
    reference: str | None


class JournalStore:
    """분개 저장소

    Args:
        db: SQLite 어댑터
        registry: 계정 레지스트리 (라인 계정 확인)
        projector: 잔액 프로젝터 (전기 시 잔액 반영)
        tolerance: 차대 균형 허용 오차
    """

    def __init__(
        self,
        db: SQLiteAdapter,
        registry: AccountRegistry,
        projector: BalanceProjector,
        tolerance: Decimal = LedgerDefaults.BALANCE_TOLERANCE,
    ):
        self.db = db
        self.registry = registry
        self.projector = projector
        self.tolerance = tolerance

    # =========================================================================
    # 생성 / 전기
    # =========================================================================

    async def create_entry(self, request: EntryRequest, post: bool = False) -> JournalEntry:
        """분개 생성

        Args:
            request: 분개 헤더 + 라인
            post: True면 같은 트랜잭션에서 바로 전기

        Returns:
            라인이 포함된 저장된 분개

        Raises:
            ValidationError: 필수값 누락, 잘못된 라인, 라인 2개 미만
            UnbalancedEntryError: 차변 합계 != 대변 합계
            AccountNotFoundError: 라인의 계정이 없는 경우
            PersistenceError: 저장 실패 (롤백됨)
        """
        entry_date = self._parse_entry_date(request.entry_date)
        checked = await self._check_lines(request.lines)
        total_debit, total_credit = self._totals(checked)

        entry_id = str(uuid.uuid4())
        now = now_iso()

        with self._persistence_guard("create"):
            async with self.db.transaction():
                journal_number = await self._next_journal_number()
                await self.db.execute(
                    """
                    INSERT INTO journal_entry (
                        entry_id, journal_number, entry_date, reference_number,
                        description, source_document_type, source_document_id,
                        status, total_debit, total_credit, created_at, updated_at
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        entry_id,
                        journal_number,
                        entry_date.isoformat(),
                        request.reference_number,
                        request.description,
                        request.source_document_type.value if request.source_document_type else None,
                        request.source_document_id,
                        JournalStatus.DRAFT.value,
                        str(total_debit),
                        str(total_credit),
                        now,
                        now,
                    ),
                )
                await self._insert_lines(entry_id, checked)

                entry = await self.get_entry(entry_id)
                if post:
                    entry = await self._post_loaded(entry)

        logger.info(
            f"분개 생성: {journal_number} ({entry.status.value}) "
            f"Dr {total_debit} / Cr {total_credit}",
            extra={"entry_id": entry_id},
        )
        return entry

    async def post_entry(self, entry_id: str) -> JournalEntry:
        """분개 전기 (DRAFT → POSTED)

        이미 전기된 분개는 잔액을 다시 반영하지 않고 그대로 반환한다.
        저장된 라인으로 차대 균형을 다시 검증한 뒤 반영.

        Raises:
            EntryNotFoundError: 분개가 없는 경우
            UnbalancedEntryError: 저장된 라인이 불균형인 경우
            AccountNotFoundError: 라인의 계정이 없는 경우 (전체 롤백)
        """
        with self._persistence_guard("post"):
            async with self.db.transaction():
                entry = await self.get_entry(entry_id)
                if entry.is_posted:
                    logger.debug(f"이미 전기된 분개: {entry.journal_number}")
                    return entry
                entry = await self._post_loaded(entry)

        logger.info(f"분개 전기: {entry.journal_number}", extra={"entry_id": entry_id})
        return entry

    async def _post_loaded(self, entry: JournalEntry) -> JournalEntry:
        """트랜잭션 안에서 로드된 DRAFT 분개를 전기"""
        total_debit, total_credit = self._verify_stored_lines(entry)

        await self.projector.project_entry(entry)

        posted_at = now_iso()
        cursor = await self.db.execute(
            """
            UPDATE journal_entry
            SET status = ?, posted_at = ?, total_debit = ?, total_credit = ?, updated_at = ?
            WHERE entry_id = ? AND status = ?
            """,
            (
                JournalStatus.POSTED.value,
                posted_at,
                str(total_debit),
                str(total_credit),
                posted_at,
                entry.entry_id,
                JournalStatus.DRAFT.value,
            ),
        )
        if cursor.rowcount != 1:
            raise PersistenceError(
                f"Journal entry {entry.journal_number} changed state while posting"
            )

        entry.status = JournalStatus.POSTED
        entry.posted_at = posted_at
        entry.updated_at = posted_at
        entry.total_debit = total_debit
        entry.total_credit = total_credit
        return entry

    async def reverse_entry(
        self,
        entry_id: str,
        entry_date: date | str | None = None,
        description: str | None = None,
    ) -> JournalEntry:
        """역분개 생성 및 전기

        원 분개의 차변/대변을 바꾼 분개를 만들어 효과를 상쇄한다.

        Raises:
            ConflictError: 원 분개가 DRAFT이거나 이미 역분개된 경우
        """
        async with self.db.transaction():
            original = await self.get_entry(entry_id)
            if not original.is_posted:
                raise ConflictError(
                    f"Journal entry {original.journal_number} is DRAFT; "
                    "edit or delete it instead of reversing"
                )

            existing = [
                entry
                for entry in await self.find_by_source(SourceDocumentType.REVERSAL, entry_id)
                if entry.is_posted
            ]
            if existing:
                raise ConflictError(
                    f"Journal entry {original.journal_number} was already reversed "
                    f"by {existing[0].journal_number}"
                )

            request = EntryRequest(
                entry_date=entry_date or now_utc().date(),
                reference_number=original.journal_number,
                description=description or f"Reversal of {original.journal_number}",
                source_document_type=SourceDocumentType.REVERSAL,
                source_document_id=original.entry_id,
                lines=[
                    LineInput(
                        account=line.account_id,
                        debit_amount=line.credit_amount or None,
                        credit_amount=line.debit_amount or None,
                        description=line.description,
                        reference=line.reference,
                    )
                    for line in original.lines
                ],
            )
            return await self.create_entry(request, post=True)

    # =========================================================================
    # 수정 / 삭제 (DRAFT 전용)
    # =========================================================================

    async def update_entry(
        self,
        entry_id: str,
        header: EntryUpdate | None = None,
        lines: list[LineInput] | None = None,
    ) -> JournalEntry:
        """DRAFT 분개 수정

        lines가 주어지면 라인 전체를 교체하고 생성과 동일하게 재검증한다.

        Raises:
            EntryNotFoundError: 분개가 없는 경우
            ImmutableEntryError: 이미 전기된 경우 (입력과 무관)
        """
        current = await self.get_entry(entry_id)
        if current.is_posted:
            raise ImmutableEntryError(current.journal_number, "update")

        checked = await self._check_lines(lines) if lines is not None else None
        entry_date = (
            self._parse_entry_date(header.entry_date)
            if header is not None and header.entry_date is not None
            else None
        )

        assignments: list[str] = []
        params: list[object] = []
        if entry_date is not None:
            assignments.append("entry_date = ?")
            params.append(entry_date.isoformat())
        if header is not None and header.reference_number is not None:
            assignments.append("reference_number = ?")
            params.append(header.reference_number)
        if header is not None and header.description is not None:
            assignments.append("description = ?")
            params.append(header.description)
        if checked is not None:
            total_debit, total_credit = self._totals(checked)
            assignments.extend(["total_debit = ?", "total_credit = ?"])
            params.extend([str(total_debit), str(total_credit)])

        with self._persistence_guard("update"):
            async with self.db.transaction():
                entry = await self.get_entry(entry_id)
                if entry.is_posted:
                    raise ImmutableEntryError(entry.journal_number, "update")

                assignments.append("updated_at = ?")
                params.append(now_iso())
                await self.db.execute(
                    f"UPDATE journal_entry SET {', '.join(assignments)} WHERE entry_id = ?",
                    (*params, entry_id),
                )

                if checked is not None:
                    await self.db.execute(
                        "DELETE FROM journal_line WHERE entry_id = ?",
                        (entry_id,),
                    )
                    await self._insert_lines(entry_id, checked)

                entry = await self.get_entry(entry_id)

        logger.info(f"분개 수정: {entry.journal_number}", extra={"entry_id": entry_id})
        return entry

    async def delete_entry(self, entry_id: str) -> None:
        """DRAFT 분개 삭제 (라인은 CASCADE)

        Raises:
            EntryNotFoundError: 분개가 없는 경우
            ImmutableEntryError: 이미 전기된 경우
        """
        with self._persistence_guard("delete"):
            async with self.db.transaction():
                entry = await self.get_entry(entry_id)
                if entry.is_posted:
                    raise ImmutableEntryError(entry.journal_number, "delete")
                await self.db.execute(
                    "DELETE FROM journal_entry WHERE entry_id = ?",
                    (entry_id,),
                )

        logger.info(f"분개 삭제: {entry.journal_number}", extra={"entry_id": entry_id})

    # =========================================================================
    # 조회
    # =========================================================================

    async def get_entry(self, entry_id: str) -> JournalEntry:
        """분개 단건 조회 (라인 포함)

        Raises:
            EntryNotFoundError: 분개가 없는 경우
        """
        row = await self.db.fetchone(
            "SELECT * FROM journal_entry WHERE entry_id = ?",
            (entry_id,),
        )
        if row is None:
            raise EntryNotFoundError(entry_id)

        line_rows = await self.db.fetchall(
            f"{_LINE_SELECT} WHERE jl.entry_id = ? ORDER BY jl.line_number",
            (entry_id,),
        )
        return JournalEntry.from_row(row, [JournalLine.from_row(r) for r in line_rows])

    async def list_entries(self, filters: EntryFilter | None = None) -> EntryPage:
        """분개 목록 (entry_date DESC, journal_number DESC)

        reference는 reference_number 부분 일치 (대소문자 무시).
        """
        filters = filters or EntryFilter()
        page = max(1, filters.page)
        limit = min(max(1, filters.limit), LedgerDefaults.MAX_PAGE_SIZE)

        conditions: list[str] = []
        params: list[object] = []
        if filters.start_date:
            conditions.append("entry_date >= ?")
            params.append(parse_date(filters.start_date).isoformat())
        if filters.end_date:
            conditions.append("entry_date <= ?")
            params.append(parse_date(filters.end_date).isoformat())
        if filters.reference:
            conditions.append("reference_number LIKE ?")
            params.append(f"%{filters.reference}%")
        if filters.status is not None:
            conditions.append("status = ?")
            params.append(JournalStatus(filters.status).value)

        where = f"WHERE {' AND '.join(conditions)}" if conditions else ""

        count_row = await self.db.fetchone(
            f"SELECT COUNT(*) AS total FROM journal_entry {where}",
            tuple(params),
        )
        total = count_row["total"] if count_row else 0

        rows = await self.db.fetchall(
            f"""
            SELECT * FROM journal_entry {where}
            ORDER BY entry_date DESC, CAST(journal_number AS INTEGER) DESC
            LIMIT ? OFFSET ?
            """,
            (*params, limit, (page - 1) * limit),
        )

        lines_by_entry: dict[str, list[JournalLine]] = {row["entry_id"]: [] for row in rows}
        if lines_by_entry:
            placeholders = ", ".join("?" for _ in lines_by_entry)
            line_rows = await self.db.fetchall(
                f"{_LINE_SELECT} WHERE jl.entry_id IN ({placeholders}) "
                "ORDER BY jl.entry_id, jl.line_number",
                tuple(lines_by_entry),
            )
            for line_row in line_rows:
                lines_by_entry[line_row["entry_id"]].append(JournalLine.from_row(line_row))

        entries = [
            JournalEntry.from_row(row, lines_by_entry[row["entry_id"]]) for row in rows
        ]
        return EntryPage(entries=entries, page=page, limit=limit, total=total)

    async def find_by_source(
        self,
        source_type: SourceDocumentType,
        source_id: str,
    ) -> list[JournalEntry]:
        """원천 문서로 분개 조회 (journal_number 순)"""
        rows = await self.db.fetchall(
            """
            SELECT entry_id FROM journal_entry
            WHERE source_document_type = ? AND source_document_id = ?
            ORDER BY CAST(journal_number AS INTEGER)
            """,
            (source_type.value, source_id),
        )
        return [await self.get_entry(row["entry_id"]) for row in rows]

    # =========================================================================
    # 내부 헬퍼
    # =========================================================================

    @contextmanager
    def _persistence_guard(self, action: str) -> Iterator[None]:
        """예상하지 못한 SQLite 오류를 PersistenceError로 변환"""
        try:
            yield
        except sqlite3.Error as e:
            logger.exception(f"분개 {action} 실패 (롤백됨): {e}")
            raise PersistenceError(f"Failed to {action} journal entry: {e}") from e

    @staticmethod
    def _parse_entry_date(value: date | str | None) -> date:
        if value is None or value == "":
            raise ValidationError("entry_date is required")
        try:
            return parse_date(value)
        except ValueError as e:
            raise ValidationError(str(e)) from e

    async def _check_lines(self, lines: list[LineInput]) -> list[_CheckedLine]:
        """라인 검증 (쓰기 전)

        순서: 라인 수 → 라인별 차변/대변 규칙 → 차대 균형 → 계정 존재/활성
        """
        if len(lines) < MIN_LINES:
            raise ValidationError(
                f"Journal entry must have at least {MIN_LINES} lines, got {len(lines)}"
            )

        amounts: list[tuple[Decimal, Decimal]] = []
        for number, line in enumerate(lines, start=1):
            if not line.account:
                raise InvalidLineError(number, "Account is required")
            try:
                debit = to_amount(line.debit_amount)
                credit = to_amount(line.credit_amount)
            except ValueError as e:
                raise InvalidLineError(number, str(e)) from e

            if debit > 0 and credit > 0:
                raise InvalidLineError(number, "Line cannot have both debit and credit amounts")
            if debit == 0 and credit == 0:
                raise InvalidLineError(number, "Line must have either debit or credit amount")
            amounts.append((debit, credit))

        total_debit = sum((debit for debit, _ in amounts), ZERO)
        total_credit = sum((credit for _, credit in amounts), ZERO)
        self._check_balance(total_debit, total_credit)

        checked = []
        for number, (line, (debit, credit)) in enumerate(zip(lines, amounts), start=1):
            account = await self.registry.get_account(line.account)
            if not account.is_active:
                raise InvalidLineError(number, f"Account {account.code} is inactive")
            checked.append(
                _CheckedLine(
                    line_number=number,
                    account=account,
                    debit_amount=debit,
                    credit_amount=credit,
                    description=line.description,
                    reference=line.reference,
                )
            )
        return checked

    def _check_balance(self, total_debit: Decimal, total_credit: Decimal) -> None:
        if abs(total_debit - total_credit) >= self.tolerance:
            raise UnbalancedEntryError(format_amount(total_debit), format_amount(total_credit))

    @staticmethod
    def _totals(checked: list[_CheckedLine]) -> tuple[Decimal, Decimal]:
        total_debit = sum((line.debit_amount for line in checked), ZERO)
        total_credit = sum((line.credit_amount for line in checked), ZERO)
        return total_debit, total_credit

    def _verify_stored_lines(self, entry: JournalEntry) -> tuple[Decimal, Decimal]:
        """전기 시점 재검증 (저장된 라인 기준)"""
        if len(entry.lines) < MIN_LINES:
            raise ValidationError(
                f"Journal entry {entry.journal_number} must have at least {MIN_LINES} lines"
            )
        for line in entry.lines:
            if (line.debit_amount > 0) == (line.credit_amount > 0):
                raise InvalidLineError(
                    line.line_number, "Line must have exactly one of debit or credit amount"
                )

        total_debit = sum((line.debit_amount for line in entry.lines), ZERO)
        total_credit = sum((line.credit_amount for line in entry.lines), ZERO)
        self._check_balance(total_debit, total_credit)
        return total_debit, total_credit

    async def _next_journal_number(self) -> str:
        """분개 번호 채번 (트랜잭션 안에서만 호출)"""
        await self.db.execute(
            "INSERT OR IGNORE INTO ledger_sequence (name, value) VALUES (?, 0)",
            (JOURNAL_NUMBER_SEQUENCE,),
        )
        await self.db.execute(
            "UPDATE ledger_sequence SET value = value + 1 WHERE name = ?",
            (JOURNAL_NUMBER_SEQUENCE,),
        )
        row = await self.db.fetchone(
            "SELECT value FROM ledger_sequence WHERE name = ?",
            (JOURNAL_NUMBER_SEQUENCE,),
        )
        assert row is not None
        return f"{row['value']:0{LedgerDefaults.JOURNAL_NUMBER_WIDTH}d}"

    async def _insert_lines(self, entry_id: str, checked: list[_CheckedLine]) -> None:
        await self.db.executemany(
            """
            INSERT INTO journal_line (
                line_id, entry_id, line_number, account_id,
                debit_amount, credit_amount, description, reference
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
            """,
            [
                (
                    str(uuid.uuid4()),
                    entry_id,
                    line.line_number,
                    line.account.account_id,
                    to_db(line.debit_amount),
                    to_db(line.credit_amount),
                    line.description,
                    line.reference,
                )
                for line in checked
            ],
        )

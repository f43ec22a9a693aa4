"""
SQLite 어댑터

WAL 모드로 SQLite 연결 관리.
Web 요청과 운영 스크립트가 동시에 접근 가능하도록 설정.

쓰기 트랜잭션은 BEGIN IMMEDIATE로 시작하여 쓰기 락을 먼저 확보한다.
분개 번호 채번과 잔액 read-modify-write가 프로세스 간에도 직렬화됨.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, AsyncIterator

import aiosqlite

logger = logging.getLogger(__name__)


async def create_connection(
    db_path: Path | str,
    readonly: bool = False,
) -> aiosqlite.Connection:
    """SQLite 연결 생성 (WAL 모드)

    isolation_level=None으로 열어 트랜잭션 경계를 직접 관리한다.

    Args:
        db_path: DB 파일 경로
        readonly: 읽기 전용 여부

    Returns:
        aiosqlite 연결 객체
    """
    db_path_str = str(db_path)

    # 디렉토리가 없으면 생성
    Path(db_path).parent.mkdir(parents=True, exist_ok=True)

    if readonly:
        conn = await aiosqlite.connect(
            f"file:{db_path_str}?mode=ro", uri=True, isolation_level=None
        )
    else:
        conn = await aiosqlite.connect(db_path_str, isolation_level=None)

    conn.row_factory = aiosqlite.Row

    if not readonly:
        await conn.execute("PRAGMA journal_mode=WAL")

    # 동시 접근 설정
    await conn.execute("PRAGMA busy_timeout=30000")  # 30초 대기

    # 외래 키 제약 활성화 (journal_line ON DELETE CASCADE)
    await conn.execute("PRAGMA foreign_keys=ON")

    logger.debug(
        "SQLite 연결 생성",
        extra={"db_path": db_path_str, "readonly": readonly},
    )

    return conn


class SQLiteAdapter:
    """SQLite 어댑터

    WAL 모드로 SQLite 연결 관리.
    트랜잭션 컨텍스트 매니저 제공.

    같은 Task 안에서 transaction()을 중첩 호출하면 바깥 트랜잭션에 합류한다.
    다른 Task는 바깥 트랜잭션이 끝날 때까지 대기한다.

    Args:
        db_path: DB 파일 경로
        readonly: 읽기 전용 여부 (조회용)

    사용 예시:
    ```python
    async with SQLiteAdapter(db_path) as db:
        async with db.transaction():
            await db.execute("INSERT INTO ...")
    ```
    """

    def __init__(self, db_path: Path | str, readonly: bool = False):
        self.db_path = Path(db_path)
        self.readonly = readonly
        self._conn: aiosqlite.Connection | None = None
        self._tx_lock = asyncio.Lock()
        self._tx_owner: asyncio.Task[Any] | None = None
        self._tx_depth = 0

    @property
    def is_connected(self) -> bool:
        """연결 상태 확인"""
        return self._conn is not None

    @property
    def in_transaction(self) -> bool:
        """현재 Task가 트랜잭션 안에 있는지 여부"""
        return self._tx_depth > 0 and self._tx_owner is asyncio.current_task()

    async def connect(self) -> None:
        """연결 생성"""
        if self._conn is not None:
            return

        self._conn = await create_connection(self.db_path, self.readonly)

    async def close(self) -> None:
        """연결 종료"""
        if self._conn is not None:
            await self._conn.close()
            self._conn = None
            logger.debug("SQLite 연결 종료")

    def _require_conn(self) -> aiosqlite.Connection:
        if self._conn is None:
            raise RuntimeError("Not connected to database")
        return self._conn

    async def execute(
        self,
        sql: str,
        parameters: tuple[Any, ...] | None = None,
    ) -> aiosqlite.Cursor:
        """SQL 실행"""
        conn = self._require_conn()

        if parameters:
            return await conn.execute(sql, parameters)
        return await conn.execute(sql)

    async def executemany(
        self,
        sql: str,
        parameters: list[tuple[Any, ...]],
    ) -> aiosqlite.Cursor:
        """SQL 다중 실행"""
        conn = self._require_conn()
        return await conn.executemany(sql, parameters)

    async def fetchone(
        self,
        sql: str,
        parameters: tuple[Any, ...] | None = None,
    ) -> aiosqlite.Row | None:
        """단일 행 조회"""
        cursor = await self.execute(sql, parameters)
        return await cursor.fetchone()

    async def fetchall(
        self,
        sql: str,
        parameters: tuple[Any, ...] | None = None,
    ) -> list[aiosqlite.Row]:
        """전체 행 조회"""
        cursor = await self.execute(sql, parameters)
        return list(await cursor.fetchall())

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[aiosqlite.Connection]:
        """트랜잭션 컨텍스트 매니저

        성공 시 자동 커밋, 예외 시 자동 롤백.
        중첩 호출은 가장 바깥 트랜잭션에서만 커밋/롤백한다.

        사용 예시:
        ```python
        async with adapter.transaction() as conn:
            await conn.execute("INSERT INTO ...")
            # 성공 시 자동 커밋
        ```
        """
        conn = self._require_conn()

        if self.in_transaction:
            self._tx_depth += 1
            try:
                yield conn
            finally:
                self._tx_depth -= 1
            return

        async with self._tx_lock:
            await conn.execute("BEGIN IMMEDIATE")
            self._tx_owner = asyncio.current_task()
            self._tx_depth = 1
            try:
                yield conn
            except BaseException:
                await conn.rollback()
                raise
            else:
                await conn.commit()
            finally:
                self._tx_depth = 0
                self._tx_owner = None

    # -------------------------------------------------------------------------
    # 컨텍스트 매니저
    # -------------------------------------------------------------------------

    async def __aenter__(self) -> "SQLiteAdapter":
        await self.connect()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()

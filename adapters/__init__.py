"""
어댑터 레이어

외부 저장소와의 연동을 담당.
현재는 SQLite (aiosqlite) 어댑터만 제공.
"""

from adapters.db import SQLiteAdapter, create_connection

__all__ = [
    "SQLiteAdapter",
    "create_connection",
]

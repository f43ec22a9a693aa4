"""
pytest 공통 fixture 정의

- 임시 디렉토리 / settings.yaml
- Ledger 스키마가 초기화된 임시 SQLite DB
"""

import tempfile
from pathlib import Path
from typing import AsyncIterator, Iterator

import pytest
import pytest_asyncio

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.config.loader import Settings
from core.ledger import Ledger, init_ledger_schema


@pytest.fixture
def temp_dir() -> Iterator[Path]:
    """OS 독립적인 임시 디렉토리 생성"""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def temp_settings_file(temp_dir: Path) -> Path:
    """테스트용 settings.yaml 파일 생성"""
    settings_content = f"""# 테스트용 settings.yaml
mode: development

database:
  path: {(temp_dir / "ledger_test.db").as_posix()}

ledger:
  balance_tolerance: "0.01"
  owner_equity_code: "3000"
  adjustment_account_code: "6990"
  default_page_size: 20

web:
  host: 127.0.0.1
  port: 8100
"""
    settings_path = temp_dir / "settings.yaml"
    settings_path.write_text(settings_content, encoding="utf-8")
    return settings_path


@pytest.fixture
def temp_settings_file_invalid_mode(temp_dir: Path) -> Path:
    """잘못된 모드의 settings.yaml 파일 생성"""
    settings_path = temp_dir / "settings_invalid.yaml"
    settings_path.write_text("mode: invalid_mode\n", encoding="utf-8")
    return settings_path


@pytest.fixture(autouse=True)
def reset_settings() -> Iterator[None]:
    """테스트 간 Settings 싱글턴 초기화"""
    Settings.reset()
    yield
    Settings.reset()


@pytest_asyncio.fixture
async def db(tmp_path: Path) -> AsyncIterator[SQLiteAdapter]:
    """Ledger 스키마가 준비된 임시 DB"""
    adapter = SQLiteAdapter(tmp_path / "ledger_test.db")
    await adapter.connect()
    await init_ledger_schema(adapter)
    yield adapter
    await adapter.close()


@pytest_asyncio.fixture
async def ledger(db: SQLiteAdapter) -> Ledger:
    """기본 설정 Ledger"""
    return Ledger(db)

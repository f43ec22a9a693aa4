"""
설정 로더

settings.yaml 로드 및 DB/Ledger/Web 설정 생성
"""

from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any

import yaml

from core.constants import Defaults, LedgerDefaults, Paths
from core.types import RunMode


@dataclass(frozen=True)
class LedgerConfig:
    """복식부기 엔진 설정

    Auto-Balancer 대상 계정 코드와 균형 허용 오차 등
    """

    balance_tolerance: Decimal = LedgerDefaults.BALANCE_TOLERANCE
    owner_equity_code: str = LedgerDefaults.OWNER_EQUITY_CODE
    adjustment_account_code: str = LedgerDefaults.ADJUSTMENT_ACCOUNT_CODE
    default_page_size: int = LedgerDefaults.DEFAULT_PAGE_SIZE


@dataclass(frozen=True)
class WebConfig:
    """Web 서버 설정"""

    host: str = Defaults.WEB_HOST
    port: int = Defaults.WEB_PORT


@dataclass(frozen=True)
class AppConfig:
    """애플리케이션 설정 (settings.yaml에서 로드)

    불변 데이터 구조로 설정 변경 방지
    """

    mode: RunMode
    db_path_override: Path | None = None
    ledger: LedgerConfig = field(default_factory=LedgerConfig)
    web: WebConfig = field(default_factory=WebConfig)


class SettingsLoadError(Exception):
    """Settings 로드 실패 예외"""

    pass


def _parse_ledger_section(data: dict[str, Any]) -> LedgerConfig:
    section = data.get("ledger") or {}
    if not isinstance(section, dict):
        raise SettingsLoadError("settings.yaml의 'ledger' 섹션은 매핑이어야 합니다")

    raw_tolerance = section.get("balance_tolerance", LedgerDefaults.BALANCE_TOLERANCE)
    try:
        tolerance = Decimal(str(raw_tolerance))
    except InvalidOperation as e:
        raise SettingsLoadError(
            f"유효하지 않은 balance_tolerance입니다: {raw_tolerance!r}"
        ) from e
    if tolerance <= 0:
        raise SettingsLoadError("balance_tolerance는 0보다 커야 합니다")

    page_size = int(section.get("default_page_size", LedgerDefaults.DEFAULT_PAGE_SIZE))
    if not 1 <= page_size <= LedgerDefaults.MAX_PAGE_SIZE:
        raise SettingsLoadError(
            f"default_page_size는 1~{LedgerDefaults.MAX_PAGE_SIZE} 범위여야 합니다"
        )

    return LedgerConfig(
        balance_tolerance=tolerance,
        owner_equity_code=str(section.get("owner_equity_code", LedgerDefaults.OWNER_EQUITY_CODE)),
        adjustment_account_code=str(
            section.get("adjustment_account_code", LedgerDefaults.ADJUSTMENT_ACCOUNT_CODE)
        ),
        default_page_size=page_size,
    )


def load_config(path: Path | None = None) -> AppConfig:
    """settings.yaml 파일 로드

    Args:
        path: settings.yaml 경로 (None이면 기본 경로 사용)

    Returns:
        AppConfig 인스턴스

    Raises:
        SettingsLoadError: 파일이 없거나 형식이 잘못된 경우
        ValueError: 유효하지 않은 mode인 경우
    """
    if path is None:
        path = Paths.SETTINGS_FILE

    if not path.exists():
        raise SettingsLoadError(f"settings.yaml 파일을 찾을 수 없습니다: {path}")

    try:
        content = path.read_text(encoding="utf-8")
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise SettingsLoadError(f"settings.yaml 파싱 실패: {e}") from e

    if data is None:
        raise SettingsLoadError("settings.yaml이 비어 있습니다")

    # mode 검증
    mode_str = data.get("mode")
    if mode_str is None:
        raise SettingsLoadError("settings.yaml에 'mode' 필드가 없습니다")

    try:
        mode = RunMode(mode_str)
    except ValueError as e:
        valid_modes = [m.value for m in RunMode]
        raise ValueError(
            f"유효하지 않은 mode입니다: '{mode_str}'. "
            f"유효한 값: {valid_modes}"
        ) from e

    database = data.get("database") or {}
    raw_db_path = database.get("path")
    db_path_override = None
    if raw_db_path:
        db_path_override = Path(raw_db_path)
        if not db_path_override.is_absolute():
            db_path_override = Paths.CONFIG_DIR.parent / db_path_override

    web = data.get("web") or {}

    return AppConfig(
        mode=mode,
        db_path_override=db_path_override,
        ledger=_parse_ledger_section(data),
        web=WebConfig(
            host=str(web.get("host", Defaults.WEB_HOST)),
            port=int(web.get("port", Defaults.WEB_PORT)),
        ),
    )


def get_db_path(config: AppConfig) -> Path:
    """모드에 따른 DB 경로 반환

    database.path가 지정되어 있으면 우선 사용.

    Args:
        config: AppConfig 인스턴스

    Returns:
        DB 파일 경로 (Path 타입)
    """
    if config.db_path_override is not None:
        return config.db_path_override
    if config.mode == RunMode.PRODUCTION:
        return Paths.PROD_DB
    return Paths.DEV_DB


class Settings:
    """애플리케이션 설정 (싱글턴 패턴)

    settings.yaml을 로드하고 관련 설정을 제공
    """

    _instance: "Settings | None" = None
    _config: AppConfig | None = None

    def __new__(cls, settings_path: Path | None = None) -> "Settings":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self, settings_path: Path | None = None) -> None:
        if self._config is None:
            self._config = load_config(settings_path)

    @property
    def mode(self) -> RunMode:
        """현재 실행 모드"""
        assert self._config is not None
        return self._config.mode

    @property
    def ledger(self) -> LedgerConfig:
        """복식부기 설정"""
        assert self._config is not None
        return self._config.ledger

    @property
    def web(self) -> WebConfig:
        """Web 서버 설정"""
        assert self._config is not None
        return self._config.web

    @property
    def db_path(self) -> Path:
        """현재 모드의 DB 경로"""
        assert self._config is not None
        return get_db_path(self._config)

    @classmethod
    def reset(cls) -> None:
        """싱글턴 인스턴스 초기화 (테스트용)"""
        cls._instance = None
        cls._config = None


def get_settings(settings_path: Path | None = None) -> Settings:
    """Settings 인스턴스 반환

    Args:
        settings_path: settings.yaml 경로 (None이면 기본 경로 사용)

    Returns:
        Settings 싱글턴 인스턴스
    """
    return Settings(settings_path)

"""
하드코딩 상수 - 변경될 일이 거의 없는 고정값

중요: 경로는 반드시 pathlib.Path 사용 (Windows/Linux 크로스 플랫폼)
"""

from decimal import Decimal
from pathlib import Path


# 프로젝트 루트 (이 파일 기준 2단계 상위: core/constants.py → ledgerengine/)
PROJECT_ROOT: Path = Path(__file__).resolve().parent.parent


class Defaults:
    """기본값 상수"""

    WEB_HOST: str = "127.0.0.1"
    WEB_PORT: int = 8000

    LOG_LEVEL: str = "INFO"


class LedgerDefaults:
    """복식부기 기본값

    settings.yaml의 ledger 섹션이 비어 있을 때 사용.
    """

    # 금액 정밀도 (통화 최소 단위 = 0.01)
    AMOUNT_QUANT: Decimal = Decimal("0.01")

    # 차대 균형 허용 오차 (레거시 호환)
    BALANCE_TOLERANCE: Decimal = Decimal("0.01")

    # 분개 번호 자리수 (000001)
    JOURNAL_NUMBER_WIDTH: int = 6

    # Auto-Balancer 대상 계정
    OWNER_EQUITY_CODE: str = "3000"
    ADJUSTMENT_ACCOUNT_CODE: str = "6990"

    # 목록 조회 페이지 크기
    DEFAULT_PAGE_SIZE: int = 20
    MAX_PAGE_SIZE: int = 100


class Paths:
    """프로젝트 경로 상수 (pathlib 사용 - OS 독립적)"""

    # 디렉토리
    CONFIG_DIR: Path = PROJECT_ROOT / "config"
    DATA_DIR: Path = PROJECT_ROOT / "data"
    LOGS_DIR: Path = PROJECT_ROOT / "logs"
    WEB_LOGS_DIR: Path = LOGS_DIR / "web"
    SCRIPT_LOGS_DIR: Path = LOGS_DIR / "scripts"

    # 설정 파일
    SETTINGS_FILE: Path = CONFIG_DIR / "settings.yaml"

    # DB 파일
    PROD_DB: Path = DATA_DIR / "ledger_prod.db"
    DEV_DB: Path = DATA_DIR / "ledger_dev.db"

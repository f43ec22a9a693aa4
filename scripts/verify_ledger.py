#!/usr/bin/env python3
"""장부 무결성 확인 스크립트

- 계정 잔액 불변식 (current = opening + 전기된 라인 합계)
- 재무상태표 항등식 (자산 = 부채 + 자본)

불일치가 있으면 종료 코드 1. 보정은 하지 않는다 (Auto-Balancer는 API에서 수동 실행).

실행 방법:
    python scripts/verify_ledger.py
"""

import asyncio
import logging
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.config.loader import get_settings
from core.ledger import Ledger, init_ledger_schema
from core.logging import setup_logging

logger = logging.getLogger("scripts.verify_ledger")


async def main() -> int:
    setup_logging("scripts")
    settings = get_settings()

    async with SQLiteAdapter(settings.db_path) as db:
        await init_ledger_schema(db)
        ledger = Ledger(db, settings.ledger)

        mismatches = await ledger.projector.verify()
        position = await ledger.balancer.position()

    print(f"DB Path: {settings.db_path}")
    print(f"Assets: {position.assets}")
    print(f"Liabilities: {position.liabilities}")
    print(f"Equity: {position.equity}")
    print(f"Variance: {position.variance}")

    if mismatches:
        print(f"\nBalance mismatches ({len(mismatches)}):")
        for mismatch in mismatches:
            print(
                f"  - {mismatch.code}: expected {mismatch.expected}, "
                f"actual {mismatch.actual} (diff {mismatch.difference})"
            )

    unbalanced = abs(position.variance) >= settings.ledger.balance_tolerance
    if mismatches or unbalanced:
        logger.warning(
            f"장부 검증 실패: 불일치 계정 {len(mismatches)}개, variance {position.variance}"
        )
        return 1

    logger.info("장부 검증 통과")
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))

"""
금액 유틸리티

금액은 항상 Decimal(소수점 2자리)로 다룬다.
JSON/폼에서 들어오는 숫자, 문자열 모두 여기서 정규화.
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

from core.constants import LedgerDefaults

ZERO = Decimal("0.00")


def to_amount(value: Any, allow_negative: bool = False) -> Decimal:
    """입력값을 금액(Decimal)으로 변환

    None, 빈 문자열은 0으로 간주한다.
    float는 str()을 거쳐 변환하여 이진 부동소수점 오차를 피한다.

    Args:
        value: 숫자, 문자열, Decimal 또는 None
        allow_negative: 음수 허용 여부

    Returns:
        소수점 2자리로 반올림된 Decimal

    Raises:
        ValueError: 숫자로 해석할 수 없거나 허용되지 않는 음수인 경우

    Example:
        >>> to_amount("1,250.5")
        Decimal('1250.50')
        >>> to_amount(0.1)
        Decimal('0.10')
    """
    if value is None or value == "":
        return ZERO

    if isinstance(value, bool):
        raise ValueError(f"Invalid amount: {value!r}")

    if isinstance(value, Decimal):
        amount = value
    else:
        text = str(value).strip().replace(",", "")
        try:
            amount = Decimal(text)
        except InvalidOperation as e:
            raise ValueError(f"Invalid amount: {value!r}") from e

    if not amount.is_finite():
        raise ValueError(f"Invalid amount: {value!r}")

    try:
        amount = amount.quantize(LedgerDefaults.AMOUNT_QUANT, rounding=ROUND_HALF_UP)
    except InvalidOperation as e:
        # 28자리 정밀도를 넘는 값
        raise ValueError(f"Invalid amount: {value!r}") from e

    if amount < 0 and not allow_negative:
        raise ValueError(f"Amount must not be negative: {value!r}")

    return amount


def from_db(value: str | None) -> Decimal:
    """DB TEXT 컬럼 값을 Decimal로 변환 (NULL은 0)"""
    if value is None:
        return ZERO
    return Decimal(value)


def to_db(amount: Decimal | None) -> str | None:
    """Decimal을 DB TEXT 컬럼 값으로 변환 (0/None은 NULL)"""
    if amount is None or amount == 0:
        return None
    return str(amount)


def format_amount(amount: Decimal) -> str:
    """메시지 표시용 금액 문자열 (소수점 2자리 고정)"""
    return f"{amount.quantize(LedgerDefaults.AMOUNT_QUANT, rounding=ROUND_HALF_UP):.2f}"

"""
금액 유틸리티

모든 금액/잔액은 Decimal (소수점 2자리 고정).
float 사용 금지. 반올림하지 않음: 입력 단계에서 자릿수를 검증.
"""

from decimal import Decimal, InvalidOperation

from core.constants import MoneyScale
from core.errors import ValidationError
from core.types import TransactionType

ZERO = Decimal("0.00")
CENT = Decimal("0.01")


def to_money(value: Decimal | str | int) -> Decimal:
    """입력값을 2자리 스케일 Decimal로 변환

    float은 허용하지 않음 (이진 부동소수점 오차).

    Args:
        value: Decimal, 문자열 또는 정수

    Returns:
        소수점 2자리 Decimal

    Raises:
        ValidationError: 숫자가 아니거나, 유한하지 않거나, 소수점 2자리 초과

    Example:
        >>> to_money("10.5")
        Decimal('10.50')
    """
    if isinstance(value, (float, bool)):
        raise ValidationError(f"Unsupported amount type: {type(value).__name__}")

    try:
        amount = Decimal(value)
    except (InvalidOperation, TypeError, ValueError) as e:
        raise ValidationError(f"Invalid amount: {value!r}") from e

    if not amount.is_finite():
        raise ValidationError(f"Invalid amount: {value!r}")

    exponent = amount.as_tuple().exponent
    if isinstance(exponent, int) and exponent < -MoneyScale.DECIMAL_PLACES:
        # 0.10 처럼 뒤쪽 0만 있는 경우는 허용
        normalized = amount.normalize()
        if normalized.as_tuple().exponent < -MoneyScale.DECIMAL_PLACES:
            raise ValidationError(
                f"Amount must have at most {MoneyScale.DECIMAL_PLACES} decimal places: {value!r}"
            )

    try:
        amount = amount.quantize(CENT)
    except InvalidOperation as e:
        raise ValidationError(f"Amount out of range: {value!r}") from e
    if len(amount.as_tuple().digits) > MoneyScale.MAX_DIGITS:
        raise ValidationError(f"Amount out of range: {value!r}")
    if amount.is_zero():
        # "-0" → 0.00
        return ZERO
    return amount


def to_positive_money(value: Decimal | str | int) -> Decimal:
    """0보다 큰 금액만 허용 (거래 금액용)"""
    amount = to_money(value)
    if amount <= ZERO:
        raise ValidationError("Amount must be greater than 0")
    return amount


def signed_amount(amount: Decimal, tx_type: TransactionType | str) -> Decimal:
    """거래 유형에 따른 부호 적용

    INCOME → +amount, EXPENSE → -amount
    """
    if TransactionType(tx_type) == TransactionType.INCOME:
        return amount
    return -amount


def money_equals(a: Decimal, b: Decimal) -> bool:
    """2자리 스케일 기준 비교"""
    return a.quantize(CENT) == b.quantize(CENT)


def format_money(amount: Decimal) -> str:
    """DB/API 직렬화용 문자열 (항상 소수점 2자리)"""
    amount = amount.quantize(CENT)
    return str(ZERO if amount.is_zero() else amount)

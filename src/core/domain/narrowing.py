"""
Narrowing — усекающие числовые приведения к кодировке тега

Правила (truncating cast, не округление):
- Целочисленные теги: усечение к нулю, затем wrap-around в дополнительном
  коде на ширину тега. NaN и ±inf → 0.
- BOOL из float: value > 0 (NaN → False).
- FLOAT32 / FLOAT16: ближайшее представимое значение; переполнение → ±inf.
- FLOAT64: без изменений.
- BIG_DOUBLE: BigDouble(value).
"""

import math
import struct
from typing import Union

from src.core.domain.numeric_tag import (
    NumericTag,
    integer_layout,
    is_integer_tag,
    require_supported,
)
from src.core.math.big_double import BigDouble
from src.core.math.numerical_safeguards import is_valid_float

# Полезная нагрузка TaggedValue в канонической форме
Payload = Union[bool, int, float, BigDouble]


# =============================================================================
# ЦЕЛЫЕ
# =============================================================================


def wrap_int(value: int, bits: int, signed: bool) -> int:
    """Wrap-around целого в заданную разрядность (дополнительный код)."""
    value &= (1 << bits) - 1
    if signed and value >> (bits - 1):
        value -= 1 << bits
    return value


def narrow_int(tag: NumericTag, value: int) -> int:
    """
    Wrap-around целого в ширину тега.

    Examples:
        >>> narrow_int(NumericTag.INT8, 200)
        -56
        >>> narrow_int(NumericTag.UINT16, -1)
        65535
        >>> narrow_int(NumericTag.INT32, 2**31)
        -2147483648
    """
    bits, signed = integer_layout(tag)
    return wrap_int(value, bits, signed)


def truncate_to_int(value: float) -> int:
    """Усечение к нулю; NaN и ±inf → 0."""
    if not is_valid_float(value):
        return 0
    return int(value)


# =============================================================================
# FLOAT
# =============================================================================


def _round_through(fmt: str, value: float) -> float:
    try:
        return struct.unpack(fmt, struct.pack(fmt, value))[0]
    except OverflowError:
        return math.copysign(math.inf, value)


def to_float32(value: float) -> float:
    """
    Округление до ближайшего float32.

    Examples:
        >>> to_float32(0.1)
        0.10000000149011612
        >>> to_float32(1e39)
        inf
    """
    return _round_through("=f", value)


def to_float16(value: float) -> float:
    """
    Округление до ближайшего float16 (half precision).

    Examples:
        >>> to_float16(1.0 / 3.0)
        0.333251953125
        >>> to_float16(70000.0)
        inf
    """
    return _round_through("=e", value)


# =============================================================================
# DISPATCH
# =============================================================================


def narrow_from_double(tag: NumericTag, value: float) -> Payload:
    """
    Приведение native double к кодировке тега.

    Args:
        tag: Целевой тег
        value: Исходное значение

    Returns:
        Каноническая полезная нагрузка для тега

    Raises:
        UnsupportedNumericTagError: Для NONE и неизвестных тегов
    """
    tag = require_supported(tag, "narrow_from_double")
    value = float(value)

    if tag is NumericTag.BOOL:
        return value > 0
    if is_integer_tag(tag):
        return narrow_int(tag, truncate_to_int(value))
    if tag is NumericTag.FLOAT16:
        return to_float16(value)
    if tag is NumericTag.FLOAT32:
        return to_float32(value)
    if tag is NumericTag.FLOAT64:
        return value
    return BigDouble(value)


def narrow_payload(tag: NumericTag, value: object) -> Payload:
    """
    Приведение типизированного значения к кодировке тега.

    Используется результатами калькуляторов и конструктором TaggedValue:
    - BOOL: bool(value) (для чисел — value != 0)
    - Целые теги: int → wrap-around, float → усечение и wrap-around
    - Float-теги: округление до точности тега
    - BIG_DOUBLE: BigDouble как есть, числа → BigDouble(value)

    Raises:
        UnsupportedNumericTagError: Для NONE и неизвестных тегов
        TypeError: Если значение не число
    """
    tag = require_supported(tag, "narrow_payload")

    if isinstance(value, BigDouble):
        if tag is NumericTag.BIG_DOUBLE:
            return value
        value = value.to_double()

    if not isinstance(value, (bool, int, float)):
        raise TypeError(f"Expected a number for tag {tag.value}, got {type(value).__name__}")

    if tag is NumericTag.BOOL:
        return value != 0
    if is_integer_tag(tag):
        if isinstance(value, float):
            value = truncate_to_int(value)
        return narrow_int(tag, int(value))
    if tag is NumericTag.BIG_DOUBLE:
        return BigDouble(value)
    return narrow_from_double(tag, float(value))

"""
Scaled Recompute — пересчёт значения как base × multiplier

new = base × multiplier считается в int, double или BigDouble и только затем
приводится к кодировке тега; текущее значение заменяется,
только если new отличается от него:
- целые теги и BOOL: точное равенство
- float-теги: is_close (относительная + абсолютная толерантность)
- BIG_DOUBLE: относительная толерантность через арифметику BigDouble

Целые теги получают wrap-around произведения (UINT32 — по модулю 2^32),
FLOAT16 и FLOAT32 — округление произведения до точности тега.
"""

import logging
from dataclasses import dataclass
from typing import Final

from src.core.domain.narrowing import Payload, narrow_payload
from src.core.domain.numeric_tag import NumericTag, is_float_tag
from src.core.domain.tagged_value import TaggedValue
from src.core.math.big_double import BigDouble
from src.core.math.numerical_safeguards import (
    EPS_FLOAT_COMPARE_ABS,
    EPS_FLOAT_COMPARE_REL,
    float_equals,
    is_close,
    is_valid_float,
)
from src.generic_math.dispatch import DispatchResult
from src.generic_math.storage import ValueSlot

logger = logging.getLogger(__name__)


# =============================================================================
# CONFIG
# =============================================================================


@dataclass(frozen=True)
class ScaledCompareConfig:
    """Толерантности сравнения для float-тегов и BIG_DOUBLE."""

    rel_tol: float = EPS_FLOAT_COMPARE_REL
    abs_tol: float = EPS_FLOAT_COMPARE_ABS


DEFAULT_SCALED_COMPARE: Final[ScaledCompareConfig] = ScaledCompareConfig()


# =============================================================================
# COMPARISON
# =============================================================================


def _big_double_close(a: BigDouble, b: BigDouble, config: ScaledCompareConfig) -> bool:
    if a == b:
        return True
    if a.is_nan or b.is_nan or a.is_infinity or b.is_infinity:
        return False
    diff = (a - b).abs()
    scale = a.abs().max(b.abs())
    return diff <= scale * config.rel_tol or diff <= BigDouble(config.abs_tol)


def scaled_equals(
    tag: NumericTag,
    a: Payload,
    b: Payload,
    config: ScaledCompareConfig = DEFAULT_SCALED_COMPARE,
) -> bool:
    """
    Сравнение пересчитанного значения с текущим.

    Examples:
        >>> scaled_equals(NumericTag.FLOAT64, 0.1 * 3, 0.3)
        True
        >>> scaled_equals(NumericTag.INT32, 3, 4)
        False
    """
    if tag is NumericTag.BIG_DOUBLE:
        return _big_double_close(a, b, config)
    if is_float_tag(tag):
        if float_equals(a, b):
            return True
        if not (is_valid_float(a) and is_valid_float(b)):
            return False
        return is_close(a, b, rel_tol=config.rel_tol, abs_tol=config.abs_tol)
    return a == b


# =============================================================================
# RECOMPUTE
# =============================================================================


def _scaled(base: TaggedValue, multiplier: int) -> Payload:
    """Точное произведение, затем приведение к кодировке тега."""
    if base.tag is NumericTag.BIG_DOUBLE:
        return base.value * multiplier
    if is_float_tag(base.tag):
        return narrow_payload(base.tag, float(base.value) * multiplier)
    return narrow_payload(base.tag, int(base.value) * multiplier)


def recompute_scaled(
    current: TaggedValue,
    base: TaggedValue,
    multiplier: int,
    config: ScaledCompareConfig = DEFAULT_SCALED_COMPARE,
) -> DispatchResult:
    """
    Пересчёт current = base × multiplier.

    Args:
        current: Текущее значение
        base: Базовое значение (тот же тег)
        multiplier: Целочисленный множитель
        config: Толерантности сравнения

    Returns:
        DispatchResult; при changed=False value — это current без изменений

    Raises:
        ValueError: Если current и base несут разные теги
    """
    if current.tag is not base.tag:
        raise ValueError(
            f"Operands carry different tags: {current.tag.value}, {base.tag.value}"
        )

    new = _scaled(base, multiplier)
    if scaled_equals(current.tag, new, current.value, config):
        return DispatchResult(value=current, changed=False)

    logger.debug(
        "scaled_value_recomputed",
        extra={"tag": current.tag.value, "multiplier": multiplier, "new_value": str(new)},
    )
    return DispatchResult(value=current.with_value(new), changed=True)


def recompute_scaled_slot(
    slot: ValueSlot,
    base: TaggedValue,
    multiplier: int,
    config: ScaledCompareConfig = DEFAULT_SCALED_COMPARE,
) -> bool:
    """
    Пересчёт значения в слоте; запись только при изменении.

    Returns:
        True если значение в буфере изменилось
    """
    result = recompute_scaled(slot.tagged(), base, multiplier, config)
    if result.changed:
        slot.write(result.value.value)
    return result.changed


__all__ = [
    "DEFAULT_SCALED_COMPARE",
    "ScaledCompareConfig",
    "recompute_scaled",
    "recompute_scaled_slot",
    "scaled_equals",
]

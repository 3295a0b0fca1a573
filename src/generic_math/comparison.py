"""
Comparison Dispatch — логические сравнения значений одного тега

Порядок определяется нативным порядком кодировки:
- целые и float-теги: операторы Python (NaN: все сравнения ложны, кроме NOT_EQUAL)
- BOOL: False < True
- BIG_DOUBLE: compare_to и точное равенство пар (mantissa, exponent)

HAS_FLAG: (A & B) == B для целых тегов и BOOL; для float-тегов и BIG_DOUBLE
всегда False.
"""

import operator
from typing import Callable, Final

from src.core.domain.numeric_tag import NumericTag, is_integer_tag, require_supported
from src.core.domain.narrowing import Payload
from src.core.domain.tagged_value import TaggedValue
from src.generic_math.operators import ComparisonOperator

_ORDERING: Final[dict[ComparisonOperator, Callable[[Payload, Payload], bool]]] = {
    ComparisonOperator.EQUAL: operator.eq,
    ComparisonOperator.NOT_EQUAL: operator.ne,
    ComparisonOperator.LESS: operator.lt,
    ComparisonOperator.LESS_OR_EQUAL: operator.le,
    ComparisonOperator.GREATER: operator.gt,
    ComparisonOperator.GREATER_OR_EQUAL: operator.ge,
}


def has_flag(tag: NumericTag, value: Payload, flag: Payload) -> bool:
    """
    Проверка битовой маски.

    Examples:
        >>> has_flag(NumericTag.INT32, 0b1011, 0b0011)
        True
        >>> has_flag(NumericTag.INT32, 0b1001, 0b0011)
        False
    """
    if tag is NumericTag.BOOL or is_integer_tag(tag):
        return (int(value) & int(flag)) == int(flag)
    return False


def logical_comparison(
    comparison: ComparisonOperator, left: TaggedValue, right: TaggedValue
) -> bool:
    """
    Результат left <comparison> right.

    Raises:
        UnsupportedNumericTagError: Для NONE и неизвестных тегов
        ValueError: Если операнды несут разные теги
    """
    tag = require_supported(left.tag, "logical_comparison")
    if right.tag is not tag:
        raise ValueError(f"Operands carry different tags: {tag.value}, {right.tag.value}")

    comparison = ComparisonOperator(comparison)
    if comparison is ComparisonOperator.HAS_FLAG:
        return has_flag(tag, left.value, right.value)

    return _ORDERING[comparison](left.value, right.value)


__all__ = ["has_flag", "logical_comparison"]

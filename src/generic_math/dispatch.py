"""
Operator Dispatch — применение операций к значениям по тегу

Все пути выбирают калькулятор по тегу и возвращают либо новое значение,
либо флаг "значение изменилось". Флаг вычисляется точным равенством
калькулятора (без epsilon), чтобы вызывающая сторона могла пропустить
побочные эффекты при no-op записи.

Ограниченная запись (process_with_min_max) применяет операцию, затем
min(result, max), затем max(result, min) — именно в этом порядке. При
инвертированных границах (min > max) результат равен min.

Ошибки:
- UnsupportedNumericTagError: тег NONE или неизвестен
- ValueError: операнды несут разные теги
- ZeroDivisionError: целочисленное деление на ноль
"""

import logging
from dataclasses import dataclass

from src.core.domain.narrowing import Payload
from src.core.domain.tagged_value import TaggedValue
from src.generic_math.calculators import ValueCalculator, get_calculator
from src.generic_math.operators import MathFunction, MathOperator
from src.generic_math.storage import ValueSlot

logger = logging.getLogger(__name__)


# =============================================================================
# RESULT
# =============================================================================


@dataclass(frozen=True)
class DispatchResult:
    """Результат операции с флагом изменения."""

    value: TaggedValue
    changed: bool


# =============================================================================
# HELPERS
# =============================================================================


def _require_same_tag(*values: TaggedValue) -> None:
    tags = {value.tag for value in values}
    if len(tags) > 1:
        names = ", ".join(sorted(tag.value for tag in tags))
        raise ValueError(f"Operands carry different tags: {names}")


def _clamp(
    calculator: ValueCalculator, value: Payload, min_value: Payload, max_value: Payload
) -> Payload:
    value = calculator.min(value, max_value)
    return calculator.max(value, min_value)


def _commit(
    calculator: ValueCalculator, operator: MathOperator, old: Payload, new: Payload
) -> bool:
    if calculator.equals(new, old):
        return False

    logger.debug(
        "value_changed",
        extra={
            "tag": calculator.tag.value,
            "operator": MathOperator(operator).value,
            "old_value": str(old),
            "new_value": str(new),
        },
    )
    return True


# =============================================================================
# PURE DISPATCH
# =============================================================================


def process(operator: MathOperator, left: TaggedValue, right: TaggedValue) -> TaggedValue:
    """
    Результат left op right.

    Args:
        operator: Операция
        left: Левый операнд (A)
        right: Правый операнд (B)

    Returns:
        Новое значение того же тега

    Examples:
        >>> a = TaggedValue.create(NumericTag.INT8, 100)
        >>> process(MathOperator.ADD, a, a).value
        -56
    """
    _require_same_tag(left, right)
    calculator = get_calculator(left.tag)
    return left.with_value(calculator.apply(operator, left.value, right.value))


def process_return_change(
    operator: MathOperator, left: TaggedValue, right: TaggedValue
) -> DispatchResult:
    """
    Результат left op right с флагом изменения.

    Если результат равен left, возвращается сам left и changed=False.
    """
    _require_same_tag(left, right)
    calculator = get_calculator(left.tag)
    new = calculator.apply(operator, left.value, right.value)

    if not _commit(calculator, operator, left.value, new):
        return DispatchResult(value=left, changed=False)
    return DispatchResult(value=left.with_value(new), changed=True)


def process_with_min_max(
    operator: MathOperator,
    left: TaggedValue,
    change: TaggedValue,
    min_value: TaggedValue,
    max_value: TaggedValue,
) -> DispatchResult:
    """
    Операция с ограничением результата диапазоном.

    Порядок: result = left op change; result = min(result, max_value);
    result = max(result, min_value).

    Examples:
        >>> v = lambda x: TaggedValue.create(NumericTag.INT32, x)
        >>> process_with_min_max(MathOperator.ADD, v(10), v(50), v(0), v(20)).value.value
        20
        >>> process_with_min_max(MathOperator.ADD, v(10), v(50), v(30), v(20)).value.value
        30
    """
    _require_same_tag(left, change, min_value, max_value)
    calculator = get_calculator(left.tag)
    new = calculator.apply(operator, left.value, change.value)
    new = _clamp(calculator, new, min_value.value, max_value.value)

    if not _commit(calculator, operator, left.value, new):
        return DispatchResult(value=left, changed=False)
    return DispatchResult(value=left.with_value(new), changed=True)


def process_math_function(function: MathFunction, value: TaggedValue) -> TaggedValue:
    """
    Унарная функция над значением.

    Для BIG_DOUBLE функция LOG вычисляет log2; для целых тегов результат
    логарифма усекается к нулю (log от 0 и отрицательных → 0).
    """
    calculator = get_calculator(value.tag)
    return value.with_value(calculator.apply_function(function, value.value))


# =============================================================================
# SLOT DISPATCH
# =============================================================================


def _require_slot_tag(slot: ValueSlot, *values: TaggedValue) -> None:
    for value in values:
        if value.tag is not slot.tag:
            raise ValueError(
                f"Tag mismatch: slot holds {slot.tag.value}, operand is {value.tag.value}"
            )


def process_slot_return_change(
    operator: MathOperator, slot: ValueSlot, right: TaggedValue
) -> bool:
    """
    slot = slot op right; запись только при изменении.

    Returns:
        True если значение в буфере изменилось
    """
    _require_slot_tag(slot, right)
    calculator = get_calculator(slot.tag)
    old = slot.read()
    new = calculator.apply(operator, old, right.value)

    if not _commit(calculator, operator, old, new):
        return False

    slot.write(new)
    return True


def process_slot_with_min_max(
    operator: MathOperator,
    slot: ValueSlot,
    change: TaggedValue,
    min_value: TaggedValue,
    max_value: TaggedValue,
) -> bool:
    """Ограниченная запись в слот (порядок min/max как в process_with_min_max)."""
    _require_slot_tag(slot, change, min_value, max_value)
    calculator = get_calculator(slot.tag)
    old = slot.read()
    new = calculator.apply(operator, old, change.value)
    new = _clamp(calculator, new, min_value.value, max_value.value)

    if not _commit(calculator, operator, old, new):
        return False

    slot.write(new)
    return True


def process_slots(operator: MathOperator, slot_a: ValueSlot, slot_b: ValueSlot) -> None:
    """
    A = A op B над двумя слотами.

    Слоты могут ссылаться на один и тот же буфер; B читается до записи A.
    """
    if slot_a.tag is not slot_b.tag:
        raise ValueError(
            f"Tag mismatch: slot A holds {slot_a.tag.value}, slot B holds {slot_b.tag.value}"
        )
    calculator = get_calculator(slot_a.tag)
    slot_a.write(calculator.apply(operator, slot_a.read(), slot_b.read()))


__all__ = [
    "DispatchResult",
    "process",
    "process_math_function",
    "process_return_change",
    "process_slot_return_change",
    "process_slot_with_min_max",
    "process_slots",
    "process_with_min_max",
]

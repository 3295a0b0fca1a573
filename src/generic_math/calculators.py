"""
Value Calculators — арифметика для каждой числовой кодировки

Один калькулятор на тег, зарегистрированный в единой таблице CALCULATORS.
Операнды и результаты — канонические полезные нагрузки тега (см.
src.core.domain.narrowing.narrow_payload).

Семантика по семействам:
- Целые теги: wrap-around в ширине тега; деление усекается к нулю;
  деление на ноль → ZeroDivisionError; степень через float pow с усечением.
- Float-теги: IEEE-754 арифметика в double с округлением до точности тега.
- BOOL: операции над байтом 0/1, результат хранится как (result != 0).
- BIG_DOUBLE: операции BigDouble; функция LOG — это log2.
"""

import math
from typing import Final

from src.core.domain.narrowing import Payload, narrow_payload, truncate_to_int, wrap_int
from src.core.domain.numeric_tag import (
    FLOAT_TAGS,
    INTEGER_TAGS,
    NumericTag,
    UnsupportedNumericTagError,
    integer_layout,
)
from src.core.math.big_double import BigDouble
from src.core.math.numerical_safeguards import (
    float_equals,
    ieee_divide,
    ieee_pow,
    safe_log,
    safe_log10,
)
from src.generic_math.operators import MathFunction, MathOperator


# =============================================================================
# BASE
# =============================================================================


class ValueCalculator:
    """
    Набор арифметических операций для одного тега.

    Подклассы реализуют бинарные операции, equals/compare и унарные функции;
    apply() и apply_function() маршрутизируют перечисления к методам.
    """

    tag: NumericTag

    def add(self, a: Payload, b: Payload) -> Payload:
        raise NotImplementedError

    def subtract(self, a: Payload, b: Payload) -> Payload:
        raise NotImplementedError

    def multiply(self, a: Payload, b: Payload) -> Payload:
        raise NotImplementedError

    def divide(self, a: Payload, b: Payload) -> Payload:
        raise NotImplementedError

    def power(self, base: Payload, exponent: Payload) -> Payload:
        raise NotImplementedError

    def min(self, a: Payload, b: Payload) -> Payload:
        raise NotImplementedError

    def max(self, a: Payload, b: Payload) -> Payload:
        raise NotImplementedError

    def equals(self, a: Payload, b: Payload) -> bool:
        """Точное равенство (без epsilon)."""
        return a == b

    def compare(self, a: Payload, b: Payload) -> int:
        """Трёхзначное сравнение: -1, 0 или 1."""
        return (a > b) - (a < b)

    def power_a_to_b(self, a: Payload, b: Payload) -> Payload:
        return self.power(a, b)

    def power_b_to_a(self, a: Payload, b: Payload) -> Payload:
        return self.power(b, a)

    # Унарные функции
    def abs(self, a: Payload) -> Payload:
        raise NotImplementedError

    def ceil(self, a: Payload) -> Payload:
        raise NotImplementedError

    def floor(self, a: Payload) -> Payload:
        raise NotImplementedError

    def round(self, a: Payload) -> Payload:
        raise NotImplementedError

    def log10(self, a: Payload) -> Payload:
        raise NotImplementedError

    def log(self, a: Payload) -> Payload:
        raise NotImplementedError

    # -------------------------------------------------------------------------
    # Маршрутизация
    # -------------------------------------------------------------------------

    def apply(self, operator: MathOperator, a: Payload, b: Payload) -> Payload:
        """
        Результат A op B.

        SET возвращает B в канонической форме тега.
        """
        operator = MathOperator(operator)
        if operator is MathOperator.SET:
            return narrow_payload(self.tag, b)
        return getattr(self, _BINARY_METHODS[operator])(a, b)

    def apply_function(self, function: MathFunction, a: Payload) -> Payload:
        """Результат унарной функции."""
        return getattr(self, _UNARY_METHODS[MathFunction(function)])(a)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(tag={self.tag.value!r})"


# =============================================================================
# INTEGER
# =============================================================================


class IntegerCalculator(ValueCalculator):
    """
    Целочисленная арифметика фиксированной разрядности.

    Переполнение — wrap-around (дополнительный код), как unchecked-арифметика.
    """

    def __init__(self, tag: NumericTag):
        self.tag = tag
        self.bits, self.signed = integer_layout(tag)

    def _load(self, a: Payload) -> int:
        return int(a)

    def _store(self, value: int) -> Payload:
        return wrap_int(value, self.bits, self.signed)

    def _store_float(self, value: float) -> Payload:
        return self._store(truncate_to_int(value))

    def add(self, a: Payload, b: Payload) -> Payload:
        return self._store(self._load(a) + self._load(b))

    def subtract(self, a: Payload, b: Payload) -> Payload:
        return self._store(self._load(a) - self._load(b))

    def multiply(self, a: Payload, b: Payload) -> Payload:
        return self._store(self._load(a) * self._load(b))

    def divide(self, a: Payload, b: Payload) -> Payload:
        """
        Деление с усечением к нулю.

        Raises:
            ZeroDivisionError: Если делитель равен нулю
        """
        x, y = self._load(a), self._load(b)
        if y == 0:
            raise ZeroDivisionError(f"Integer division by zero for tag {self.tag.value}")
        quotient = abs(x) // abs(y)
        if (x < 0) != (y < 0):
            quotient = -quotient
        return self._store(quotient)

    def power(self, base: Payload, exponent: Payload) -> Payload:
        return self._store_float(ieee_pow(float(self._load(base)), float(self._load(exponent))))

    def min(self, a: Payload, b: Payload) -> Payload:
        return self._store(min(self._load(a), self._load(b)))

    def max(self, a: Payload, b: Payload) -> Payload:
        return self._store(max(self._load(a), self._load(b)))

    def abs(self, a: Payload) -> Payload:
        return self._store(abs(self._load(a)))

    def ceil(self, a: Payload) -> Payload:
        return self._store(self._load(a))

    def floor(self, a: Payload) -> Payload:
        return self._store(self._load(a))

    def round(self, a: Payload) -> Payload:
        return self._store(self._load(a))

    def log10(self, a: Payload) -> Payload:
        return self._store_float(safe_log10(float(self._load(a))))

    def log(self, a: Payload) -> Payload:
        return self._store_float(safe_log(float(self._load(a))))


class BoolCalculator(IntegerCalculator):
    """Bool как байт 0/1: арифметика uint8, результат — (result != 0)."""

    def __init__(self) -> None:
        self.tag = NumericTag.BOOL
        self.bits, self.signed = 8, False

    def _store(self, value: int) -> Payload:
        return wrap_int(value, self.bits, self.signed) != 0


# =============================================================================
# FLOAT
# =============================================================================


class FloatCalculator(ValueCalculator):
    """IEEE-754 арифметика в double с округлением результата до точности тега."""

    def __init__(self, tag: NumericTag):
        if tag not in FLOAT_TAGS:
            raise UnsupportedNumericTagError(tag, "FloatCalculator")
        self.tag = tag

    def _store(self, value: float) -> Payload:
        return narrow_payload(self.tag, value)

    def add(self, a: Payload, b: Payload) -> Payload:
        return self._store(a + b)

    def subtract(self, a: Payload, b: Payload) -> Payload:
        return self._store(a - b)

    def multiply(self, a: Payload, b: Payload) -> Payload:
        return self._store(a * b)

    def divide(self, a: Payload, b: Payload) -> Payload:
        return self._store(ieee_divide(a, b))

    def power(self, base: Payload, exponent: Payload) -> Payload:
        return self._store(ieee_pow(base, exponent))

    def min(self, a: Payload, b: Payload) -> Payload:
        # NaN во втором операнде игнорируется
        return a if math.isnan(b) or a < b else b

    def max(self, a: Payload, b: Payload) -> Payload:
        return a if math.isnan(b) or a > b else b

    def equals(self, a: Payload, b: Payload) -> bool:
        """Точное равенство; NaN равен NaN."""
        return float_equals(a, b)

    def abs(self, a: Payload) -> Payload:
        return self._store(abs(a))

    def ceil(self, a: Payload) -> Payload:
        return self._store(float(math.ceil(a))) if math.isfinite(a) else a

    def floor(self, a: Payload) -> Payload:
        return self._store(float(math.floor(a))) if math.isfinite(a) else a

    def round(self, a: Payload) -> Payload:
        return self._store(float(round(a))) if math.isfinite(a) else a

    def log10(self, a: Payload) -> Payload:
        return self._store(safe_log10(a))

    def log(self, a: Payload) -> Payload:
        return self._store(safe_log(a))


# =============================================================================
# BIG DOUBLE
# =============================================================================


class BigDoubleCalculator(ValueCalculator):
    """Арифметика BigDouble; степень передаётся как double."""

    tag = NumericTag.BIG_DOUBLE

    def add(self, a: BigDouble, b: BigDouble) -> BigDouble:
        return a + b

    def subtract(self, a: BigDouble, b: BigDouble) -> BigDouble:
        return a - b

    def multiply(self, a: BigDouble, b: BigDouble) -> BigDouble:
        return a * b

    def divide(self, a: BigDouble, b: BigDouble) -> BigDouble:
        return a / b

    def power(self, base: BigDouble, exponent: BigDouble) -> BigDouble:
        return base.pow(exponent.to_double())

    def min(self, a: BigDouble, b: BigDouble) -> BigDouble:
        return a.min(b)

    def max(self, a: BigDouble, b: BigDouble) -> BigDouble:
        return a.max(b)

    def compare(self, a: BigDouble, b: BigDouble) -> int:
        return a.compare_to(b)

    def abs(self, a: BigDouble) -> BigDouble:
        return a.abs()

    def ceil(self, a: BigDouble) -> BigDouble:
        return a.ceil()

    def floor(self, a: BigDouble) -> BigDouble:
        return a.floor()

    def round(self, a: BigDouble) -> BigDouble:
        return a.round()

    def log10(self, a: BigDouble) -> BigDouble:
        return BigDouble(a.log10())

    def log(self, a: BigDouble) -> BigDouble:
        return BigDouble(a.log2())


# =============================================================================
# DISPATCH TABLE
# =============================================================================

# Имена методов калькулятора (разрешаются на экземпляре, с учётом переопределений)
_BINARY_METHODS: Final[dict[MathOperator, str]] = {
    MathOperator.ADD: "add",
    MathOperator.SUBTRACT: "subtract",
    MathOperator.MULTIPLY: "multiply",
    MathOperator.DIVIDE: "divide",
    MathOperator.POWER_A_TO_B: "power_a_to_b",
    MathOperator.POWER_B_TO_A: "power_b_to_a",
    MathOperator.MIN: "min",
    MathOperator.MAX: "max",
}

_UNARY_METHODS: Final[dict[MathFunction, str]] = {
    MathFunction.ABS: "abs",
    MathFunction.CEIL: "ceil",
    MathFunction.FLOOR: "floor",
    MathFunction.ROUND: "round",
    MathFunction.LOG10: "log10",
    MathFunction.LOG: "log",
}


def _build_calculators() -> dict[NumericTag, ValueCalculator]:
    table: dict[NumericTag, ValueCalculator] = {NumericTag.BOOL: BoolCalculator()}
    for tag in INTEGER_TAGS:
        table[tag] = IntegerCalculator(tag)
    for tag in FLOAT_TAGS:
        table[tag] = FloatCalculator(tag)
    table[NumericTag.BIG_DOUBLE] = BigDoubleCalculator()
    return table


CALCULATORS: Final[dict[NumericTag, ValueCalculator]] = _build_calculators()


def get_calculator(tag: NumericTag) -> ValueCalculator:
    """
    Калькулятор для тега.

    Raises:
        UnsupportedNumericTagError: Для NONE и неизвестных тегов
    """
    try:
        return CALCULATORS[NumericTag(tag)]
    except (KeyError, ValueError):
        raise UnsupportedNumericTagError(tag, "get_calculator") from None

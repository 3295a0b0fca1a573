"""
Numerical Safeguards — IEEE-754 Safe Math Primitives

Модуль обеспечивает IEEE-754 семантику для операций, где стандартная
библиотека Python выбрасывает исключения вместо inf/NaN:
- Деление на ноль → ±inf / NaN (вместо ZeroDivisionError)
- Переполнение pow/exp → ±inf (вместо OverflowError)
- log10/log от неположительных значений → NaN / -inf (вместо ValueError)
- Точное сравнение float, где NaN равен NaN (семантика Equals платформы)
- Epsilon-сравнения float с учётом машинной точности

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Ни одна функция модуля не выбрасывает ArithmeticError на конечных/особых входах
2. NaN и ±inf пропагируют по правилам IEEE-754, а не заменяются fallback-значениями
3. Все операции детерминированы и воспроизводимы
"""

import math
from typing import Final

# =============================================================================
# EPSILON-ПАРАМЕТРЫ
# =============================================================================

# Epsilon для сравнения float (относительная толерантность)
# Используется в is_close для пересчёта масштабированных значений
EPS_FLOAT_COMPARE_REL: Final[float] = 1e-9

# Epsilon для сравнения float (абсолютная толерантность)
EPS_FLOAT_COMPARE_ABS: Final[float] = 1e-12

# Порог "почти целого" результата при конверсии BigDouble → float
EPS_INTEGER_SNAP: Final[float] = 1e-10


# =============================================================================
# ПРОВЕРКИ
# =============================================================================


def is_valid_float(value: float) -> bool:
    """
    Проверка, является ли float валидным (не NaN, не Inf).

    Args:
        value: Проверяемое значение

    Returns:
        True если значение конечное, False если NaN или Inf
    """
    return math.isfinite(value)


# =============================================================================
# IEEE-754 АРИФМЕТИКА
# =============================================================================


def ieee_divide(numerator: float, denominator: float) -> float:
    """
    Деление с семантикой IEEE-754.

    В отличие от оператора `/` не выбрасывает ZeroDivisionError:
    - x / ±0 → ±inf (знак = знак x * знак нуля)
    - 0 / 0 и NaN / 0 → NaN

    Examples:
        >>> ieee_divide(1.0, 0.0)
        inf
        >>> ieee_divide(1.0, -0.0)
        -inf
        >>> ieee_divide(0.0, 0.0)
        nan
    """
    if denominator == 0.0:
        if numerator == 0.0 or math.isnan(numerator):
            return math.nan
        return math.copysign(math.inf, numerator) * math.copysign(1.0, denominator)
    return numerator / denominator


def ieee_pow(base: float, exponent: float) -> float:
    """
    Возведение в степень с семантикой IEEE-754 (как pow в C).

    - Переполнение → ±inf (отрицательное основание и нечётная целая степень → -inf)
    - 0 ** (отрицательная степень) → ±inf
    - Отрицательное основание и дробная степень → NaN

    Examples:
        >>> ieee_pow(10.0, 400.0)
        inf
        >>> ieee_pow(-2.0, 0.5)
        nan
    """
    try:
        return math.pow(base, exponent)
    except OverflowError:
        if base < 0 and _is_odd_integer(exponent):
            return -math.inf
        return math.inf
    except ValueError:
        if base == 0.0:
            if _is_odd_integer(exponent):
                return math.copysign(math.inf, base)
            return math.inf
        return math.nan


def ieee_exp(value: float) -> float:
    """exp(x) с переполнением в +inf вместо OverflowError."""
    try:
        return math.exp(value)
    except OverflowError:
        return math.inf


def safe_log10(value: float) -> float:
    """
    log10 с семантикой IEEE-754.

    Returns:
        - log10(value) для value > 0
        - -inf для value == 0
        - NaN для value < 0 или NaN
    """
    if math.isnan(value) or value < 0:
        return math.nan
    if value == 0.0:
        return -math.inf
    return math.log10(value)


def safe_log(value: float) -> float:
    """Натуральный логарифм с семантикой IEEE-754 (см. safe_log10)."""
    if math.isnan(value) or value < 0:
        return math.nan
    if value == 0.0:
        return -math.inf
    return math.log(value)


def _is_odd_integer(value: float) -> bool:
    if not math.isfinite(value) or not float(value).is_integer():
        return False
    return int(value) % 2 == 1


# =============================================================================
# СРАВНЕНИЯ FLOAT
# =============================================================================


def float_equals(a: float, b: float) -> bool:
    """
    Точное сравнение float, где NaN равен NaN.

    Используется для флага "значение изменилось": повторная запись NaN поверх
    NaN не считается изменением.

    Examples:
        >>> float_equals(1.0, 1.0)
        True
        >>> float_equals(math.nan, math.nan)
        True
        >>> float_equals(0.1 + 0.2, 0.3)
        False
    """
    if a == b:
        return True
    return math.isnan(a) and math.isnan(b)


def is_close(
    a: float,
    b: float,
    rel_tol: float = EPS_FLOAT_COMPARE_REL,
    abs_tol: float = EPS_FLOAT_COMPARE_ABS,
) -> bool:
    """
    Сравнение float с учётом машинной точности.

    Алгоритм:
        abs(a - b) <= max(rel_tol * max(abs(a), abs(b)), abs_tol)

    Args:
        a: Первое значение
        b: Второе значение
        rel_tol: Относительная толерантность (default: 1e-9)
        abs_tol: Абсолютная толерантность (default: 1e-12)

    Returns:
        True если значения близки с учётом толерантности

    Examples:
        >>> is_close(1.0, 1.0 + 1e-10)
        True
        >>> is_close(1.0, 1.1)
        False
    """
    return math.isclose(a, b, rel_tol=rel_tol, abs_tol=abs_tol)


def snap_to_integer(value: float, tol: float = EPS_INTEGER_SNAP) -> float:
    """
    Привязка к ближайшему целому, если значение отстоит от него меньше чем на tol.

    Маскирует ошибку округления при обратной конверсии mantissa * 10^exponent.

    Examples:
        >>> snap_to_integer(1499.9999999999998)
        1500.0
        >>> snap_to_integer(1.5)
        1.5
    """
    rounded = float(round(value))
    return rounded if abs(rounded - value) < tol else value

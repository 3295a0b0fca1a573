"""
Number Format — текстовая грамматика BigDouble

Грамматика:
    "0"                  — ноль
    "Inf" / "-Inf"       — бесконечности
    "NaN"                — не-число (единственный токен, дающий NaN при разборе)
    "150", "0.005"       — plain decimal для экспонент [0, 6) и (-4, 0)
    "1.23e45"            — scientific "<mantissa>e<exponent>" для остальных

Форматирование не зависит от локали: разделитель дробной части всегда ".",
разделители групп разрядов не используются.

Модуль работает с парами (mantissa, exponent) и не зависит от BigDouble.
"""

import math
from dataclasses import dataclass
from typing import Final

from src.core.math.powers_of_ten import pow10

# =============================================================================
# КОНСТАНТЫ
# =============================================================================

# Количество знаков дробной части мантиссы по умолчанию
DEFAULT_DECIMAL_PLACES: Final[int] = 2

# Разделитель мантиссы и экспоненты
EXPONENT_SEPARATOR: Final[str] = "e"

# Токены особых значений
ZERO_TOKEN: Final[str] = "0"
INFINITY_TOKEN: Final[str] = "Inf"
NAN_TOKEN: Final[str] = "NaN"


# =============================================================================
# EXCEPTIONS
# =============================================================================


class BigDoubleParseError(ValueError):
    """
    Текст не является числом в грамматике BigDouble.

    Также выбрасывается, если plain-decimal текст вычисляется в NaN, хотя
    явный токен "NaN" не был передан (например, "nan").
    """

    pass


# =============================================================================
# CONFIG
# =============================================================================


@dataclass(frozen=True)
class NumberFormat:
    """Конфигурация текстового представления.

    Экспоненты в [0, plain_exponent_max) и (plain_exponent_min, 0)
    печатаются как plain decimal, остальные — в scientific notation.
    """

    decimal_places: int = DEFAULT_DECIMAL_PLACES
    plain_exponent_min: int = -4
    plain_exponent_max: int = 6


DEFAULT_NUMBER_FORMAT: Final[NumberFormat] = NumberFormat()


# =============================================================================
# FORMATTING
# =============================================================================


def format_parts(
    mantissa: float,
    exponent: int,
    infinity_exponent: int,
    number_format: NumberFormat = DEFAULT_NUMBER_FORMAT,
) -> str:
    """
    Текстовое представление нормализованной пары (mantissa, exponent).

    Args:
        mantissa: Нормализованная мантисса
        exponent: Десятичная экспонента
        infinity_exponent: Зарезервированная экспонента бесконечности
        number_format: Конфигурация форматирования

    Returns:
        Строка в грамматике BigDouble

    Examples:
        >>> format_parts(1.5, 2, 2**63 - 1)
        '150'
        >>> format_parts(-2.5, 10, 2**63 - 1)
        '-2.5e10'
    """
    if math.isnan(mantissa):
        return NAN_TOKEN

    if mantissa == 0:
        return ZERO_TOKEN

    if exponent == infinity_exponent:
        return f"-{INFINITY_TOKEN}" if mantissa < 0 else INFINITY_TOKEN

    places = number_format.decimal_places

    if 0 <= exponent < number_format.plain_exponent_max:
        return format_decimal(mantissa * pow10(exponent), places)

    if number_format.plain_exponent_min < exponent < 0:
        return format_decimal(mantissa * pow10(exponent), -exponent + places)

    mantissa_text = format_decimal(mantissa, places)

    # Перенос при округлении (9.999 → "10"): мантисса остаётся в [1, 10)
    if mantissa_text.lstrip("-") == "10":
        mantissa_text = mantissa_text[:-1]
        exponent += 1

    return f"{mantissa_text}{EXPONENT_SEPARATOR}{exponent}"


def format_decimal(value: float, decimal_places: int) -> str:
    """
    Фиксированная запись float с обрезкой нулей в конце дробной части.

    Дробная часть округляется к ближайшему (half-to-even) на decimal_places
    знаках; перенос при округлении увеличивает целую часть.

    Examples:
        >>> format_decimal(1.23, 2)
        '1.23'
        >>> format_decimal(0.005, 5)
        '0.005'
        >>> format_decimal(9.999, 2)
        '10'
    """
    parts: list[str] = []
    if value < 0:
        parts.append("-")
        value = -value

    int_part = int(value)
    frac_int = 0

    if decimal_places > 0:
        frac = max(value - int_part, 0.0)
        multiplier = 10 ** decimal_places
        frac_int = round(frac * multiplier)

        if frac_int >= multiplier:
            int_part += 1
            frac_int = 0

        # Обрезка нулей в конце
        while frac_int > 0 and frac_int % 10 == 0:
            frac_int //= 10
            decimal_places -= 1

    parts.append(str(int_part))

    if frac_int > 0:
        parts.append(".")
        parts.append(str(frac_int).rjust(decimal_places, "0"))

    return "".join(parts)


# =============================================================================
# PARSING
# =============================================================================


def parse_parts(text: str) -> tuple[float, int]:
    """
    Разбор текста в пару (mantissa, exponent) без нормализации.

    Правила:
    1. Текст с "e" → десятичная мантисса и целая экспонента
    2. Токен "NaN" → (nan, 0)
    3. Остальное → float(text) с экспонентой 0; NaN результат → ошибка

    Args:
        text: Текст числа

    Returns:
        (mantissa, exponent)

    Raises:
        BigDoubleParseError: Если текст некорректен или вычисляется в NaN
    """
    if EXPONENT_SEPARATOR in text:
        mantissa_text, _, exponent_text = text.partition(EXPONENT_SEPARATOR)
        if EXPONENT_SEPARATOR in exponent_text:
            raise BigDoubleParseError(f"Multiple exponent separators in {text!r}")
        try:
            return float(mantissa_text), int(exponent_text)
        except ValueError as e:
            raise BigDoubleParseError(f"Invalid scientific notation {text!r}: {e}") from e

    if text == NAN_TOKEN:
        return math.nan, 0

    try:
        value = float(text)
    except ValueError as e:
        raise BigDoubleParseError(f"Invalid number {text!r}: {e}") from e

    if math.isnan(value):
        raise BigDoubleParseError(
            f"Value {text!r} is NaN; use the literal token {NAN_TOKEN!r} for NaN"
        )

    return value, 0

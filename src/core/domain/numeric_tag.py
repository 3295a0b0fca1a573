"""
NumericTag — Закрытый набор примитивных числовых кодировок

Тег — runtime-дискриминант, определяющий, какую кодировку содержит
нетипизированное хранилище (поле записи, срез байтового буфера).

Порядок объявления примитивных тегов фиксирован и совпадает с таблицей
ширин: 1, 1, 2, 2, 2, 4, 4, 4, 8, 8, 8 байт.

BIG_DOUBLE — двенадцатая, более широкая кодировка (float64 мантисса +
int64 экспонента = 16 байт). NONE — "тег отсутствует"; любая операция с ним
выбрасывает UnsupportedNumericTagError.

Байтовое представление — host-native порядок байт (struct "="), без
конверсии endianness: буферы не переносимы между платформами с разным
порядком байт.
"""

from enum import Enum
from typing import Final


# =============================================================================
# EXCEPTIONS
# =============================================================================


class UnsupportedNumericTagError(ValueError):
    """
    Тег отсутствует (NONE) или не поддерживается операцией.

    Единая политика для всех путей диспетчеризации: ошибка выбрасывается
    немедленно, тихий пропуск не допускается.
    """

    def __init__(self, tag: object, operation: str = ""):
        self.tag = tag
        self.operation = operation
        where = f" in {operation}" if operation else ""
        super().__init__(f"Unsupported numeric tag {tag!r}{where}")


# =============================================================================
# ENUMS
# =============================================================================


class NumericTag(str, Enum):
    """Примитивная числовая кодировка"""

    NONE = "none"
    BOOL = "bool"
    INT8 = "int8"
    INT16 = "int16"
    UINT16 = "uint16"
    FLOAT16 = "float16"
    FLOAT32 = "float32"
    INT32 = "int32"
    UINT32 = "uint32"
    FLOAT64 = "float64"
    INT64 = "int64"
    UINT64 = "uint64"
    BIG_DOUBLE = "big_double"


# Примитивные теги в порядке объявления
PRIMITIVE_TAGS: Final[tuple[NumericTag, ...]] = (
    NumericTag.BOOL,
    NumericTag.INT8,
    NumericTag.INT16,
    NumericTag.UINT16,
    NumericTag.FLOAT16,
    NumericTag.FLOAT32,
    NumericTag.INT32,
    NumericTag.UINT32,
    NumericTag.FLOAT64,
    NumericTag.INT64,
    NumericTag.UINT64,
)

# Все теги, для которых определены значения
SUPPORTED_TAGS: Final[tuple[NumericTag, ...]] = PRIMITIVE_TAGS + (NumericTag.BIG_DOUBLE,)

INTEGER_TAGS: Final[frozenset[NumericTag]] = frozenset(
    {
        NumericTag.INT8,
        NumericTag.INT16,
        NumericTag.UINT16,
        NumericTag.INT32,
        NumericTag.UINT32,
        NumericTag.INT64,
        NumericTag.UINT64,
    }
)

FLOAT_TAGS: Final[frozenset[NumericTag]] = frozenset(
    {NumericTag.FLOAT16, NumericTag.FLOAT32, NumericTag.FLOAT64}
)


# =============================================================================
# ТАБЛИЦЫ
# =============================================================================

_BYTE_SIZES: Final[dict[NumericTag, int]] = {
    NumericTag.BOOL: 1,
    NumericTag.INT8: 1,
    NumericTag.INT16: 2,
    NumericTag.UINT16: 2,
    NumericTag.FLOAT16: 2,
    NumericTag.FLOAT32: 4,
    NumericTag.INT32: 4,
    NumericTag.UINT32: 4,
    NumericTag.FLOAT64: 8,
    NumericTag.INT64: 8,
    NumericTag.UINT64: 8,
    NumericTag.BIG_DOUBLE: 16,
}

# struct-форматы, host-native порядок байт без выравнивания
_STRUCT_FORMATS: Final[dict[NumericTag, str]] = {
    NumericTag.BOOL: "=?",
    NumericTag.INT8: "=b",
    NumericTag.INT16: "=h",
    NumericTag.UINT16: "=H",
    NumericTag.FLOAT16: "=e",
    NumericTag.FLOAT32: "=f",
    NumericTag.INT32: "=i",
    NumericTag.UINT32: "=I",
    NumericTag.FLOAT64: "=d",
    NumericTag.INT64: "=q",
    NumericTag.UINT64: "=Q",
    NumericTag.BIG_DOUBLE: "=dq",
}

# (бит, знаковый) для целочисленных тегов
_INTEGER_LAYOUT: Final[dict[NumericTag, tuple[int, bool]]] = {
    NumericTag.INT8: (8, True),
    NumericTag.INT16: (16, True),
    NumericTag.UINT16: (16, False),
    NumericTag.INT32: (32, True),
    NumericTag.UINT32: (32, False),
    NumericTag.INT64: (64, True),
    NumericTag.UINT64: (64, False),
}


# =============================================================================
# LOOKUP
# =============================================================================


def require_supported(tag: object, operation: str = "") -> NumericTag:
    """
    Проверка, что тег поддерживается.

    Args:
        tag: Проверяемый тег (NumericTag или его строковое значение)
        operation: Имя операции (для сообщения об ошибке)

    Returns:
        Тег как NumericTag

    Raises:
        UnsupportedNumericTagError: Если тег NONE или неизвестен
    """
    try:
        resolved = NumericTag(tag)
    except ValueError:
        raise UnsupportedNumericTagError(tag, operation) from None

    if resolved is NumericTag.NONE:
        raise UnsupportedNumericTagError(resolved, operation)

    return resolved


def byte_size(tag: NumericTag) -> int:
    """
    Ширина кодировки в байтах.

    Examples:
        >>> [byte_size(t) for t in PRIMITIVE_TAGS]
        [1, 1, 2, 2, 2, 4, 4, 4, 8, 8, 8]
        >>> byte_size(NumericTag.BIG_DOUBLE)
        16

    Raises:
        UnsupportedNumericTagError: Для NONE и неизвестных тегов
    """
    return _BYTE_SIZES[require_supported(tag, "byte_size")]


def struct_format(tag: NumericTag) -> str:
    """struct-формат тега (host-native порядок байт)."""
    return _STRUCT_FORMATS[require_supported(tag, "struct_format")]


def is_integer_tag(tag: NumericTag) -> bool:
    return tag in INTEGER_TAGS


def is_float_tag(tag: NumericTag) -> bool:
    return tag in FLOAT_TAGS


def integer_layout(tag: NumericTag) -> tuple[int, bool]:
    """
    Разрядность и знаковость целочисленного тега.

    Raises:
        UnsupportedNumericTagError: Если тег не целочисленный
    """
    if tag not in _INTEGER_LAYOUT:
        raise UnsupportedNumericTagError(tag, "integer_layout")
    return _INTEGER_LAYOUT[tag]


def integer_bounds(tag: NumericTag) -> tuple[int, int]:
    """
    Диапазон [min, max] целочисленного тега.

    Examples:
        >>> integer_bounds(NumericTag.INT8)
        (-128, 127)
        >>> integer_bounds(NumericTag.UINT16)
        (0, 65535)
    """
    bits, signed = integer_layout(tag)
    if signed:
        return -(1 << (bits - 1)), (1 << (bits - 1)) - 1
    return 0, (1 << bits) - 1

"""
Storage — типизированные представления над байтовыми буферами

ValueSlot заменяет адрес + тег: срез буфера фиксированной ширины с
проверкой границ при создании и при каждом обращении.

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Любое чтение/запись проверяет, что [offset, offset + byte_size) внутри буфера
2. Запись в read-only буфер (bytes, readonly memoryview) → StorageError
3. Порядок байт host-native; буферы не переносимы между платформами
   с разным порядком байт
4. NONE → UnsupportedNumericTagError на любом пути (включая append)
"""

import logging
from dataclasses import dataclass
from typing import Iterable, Sequence, Union

from src.core.domain.codec import (
    StorageError,
    check_bounds,
    decode_payload,
    encode_payload,
    write_payload,
)
from src.core.domain.narrowing import Payload, narrow_from_double
from src.core.domain.numeric_tag import NumericTag, byte_size, require_supported
from src.core.domain.tagged_value import TaggedValue

logger = logging.getLogger(__name__)

Buffer = Union[bytes, bytearray, memoryview]


# =============================================================================
# VALUE SLOT
# =============================================================================


@dataclass(frozen=True, eq=False)
class ValueSlot:
    """
    Значение тега tag в buffer[offset : offset + byte_size(tag)].

    Вызывающая сторона гарантирует, что буфер не изменяется другим потоком
    во время операции над слотом.
    """

    buffer: Buffer
    offset: int
    tag: NumericTag

    def __post_init__(self) -> None:
        object.__setattr__(self, "tag", require_supported(self.tag, "ValueSlot"))
        check_bounds(self.buffer, self.offset, byte_size(self.tag))

    @property
    def size(self) -> int:
        return byte_size(self.tag)

    @property
    def end(self) -> int:
        """Смещение первого байта после слота."""
        return self.offset + self.size

    def read(self) -> Payload:
        return decode_payload(self.tag, self.buffer, self.offset)

    def write(self, value: Payload) -> None:
        """
        Запись значения с приведением к кодировке слота.

        Raises:
            StorageError: Если буфер read-only
        """
        write_payload(self.tag, self.buffer, self.offset, value)

    def tagged(self) -> TaggedValue:
        """Текущее значение как TaggedValue."""
        return TaggedValue(tag=self.tag, value=self.read())

    def write_tagged(self, value: TaggedValue) -> None:
        """
        Запись TaggedValue того же тега.

        Raises:
            ValueError: Если тег значения отличается от тега слота
        """
        if value.tag is not self.tag:
            raise ValueError(
                f"Tag mismatch: slot holds {self.tag.value}, value is {value.tag.value}"
            )
        self.write(value.value)


# =============================================================================
# BUFFER APPEND
# =============================================================================


def append_tagged_value(buffer: bytearray, value: TaggedValue) -> ValueSlot:
    """
    Дописать значение в конец растущего буфера.

    Returns:
        Слот, указывающий на дописанное значение
    """
    offset = len(buffer)
    buffer.extend(value.to_bytes())
    return ValueSlot(buffer, offset, value.tag)


def append_double(buffer: bytearray, tag: NumericTag, value: float) -> ValueSlot:
    """
    Дописать native double, приведённый к кодировке тега.

    Raises:
        UnsupportedNumericTagError: Для NONE и неизвестных тегов
    """
    tag = require_supported(tag, "append_double")
    offset = len(buffer)
    buffer.extend(encode_payload(tag, narrow_from_double(tag, value)))
    return ValueSlot(buffer, offset, tag)


def get_byte_array(tag: NumericTag, value: float) -> bytes:
    """
    Байты native double, приведённого к кодировке тега.

    BOOL кодируется как 1 при value != 0, иначе 0.

    Examples:
        >>> len(get_byte_array(NumericTag.UINT16, 513.0))
        2
        >>> get_byte_array(NumericTag.BOOL, -2.0)
        b'\\x01'
    """
    tag = require_supported(tag, "get_byte_array")
    if tag is NumericTag.BOOL:
        return encode_payload(tag, value != 0)
    return encode_payload(tag, narrow_from_double(tag, value))


# =============================================================================
# PACKING
# =============================================================================


def pack_values(values: Iterable[TaggedValue]) -> tuple[bytearray, list[ValueSlot]]:
    """
    Упаковка значений подряд, без выравнивания.

    Returns:
        (буфер, слоты в порядке упаковки)
    """
    buffer = bytearray()
    slots = [append_tagged_value(buffer, value) for value in values]
    logger.debug("values_packed", extra={"count": len(slots), "size": len(buffer)})
    return buffer, slots


def unpack_values(
    buffer: Buffer, tags: Sequence[NumericTag], offset: int = 0
) -> list[TaggedValue]:
    """
    Чтение подряд упакованных значений по последовательности тегов.

    Raises:
        StorageError: Если буфер короче суммарной ширины тегов
    """
    values = []
    for tag in tags:
        slot = ValueSlot(buffer, offset, tag)
        values.append(slot.tagged())
        offset = slot.end
    return values


__all__ = [
    "Buffer",
    "StorageError",
    "ValueSlot",
    "append_double",
    "append_tagged_value",
    "get_byte_array",
    "pack_values",
    "unpack_values",
]

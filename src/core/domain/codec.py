"""
Codec — байтовое представление полезной нагрузки тега

Формат: struct с host-native порядком байт ("="), без выравнивания.
BIG_DOUBLE кодируется как пара (float64 mantissa, int64 exponent).

Все чтения и записи проверяют границы буфера до обращения к памяти.
"""

import struct

from src.core.domain.narrowing import Payload, narrow_payload
from src.core.domain.numeric_tag import NumericTag, byte_size, struct_format
from src.core.math.big_double import BigDouble


class StorageError(ValueError):
    """Обращение за границы буфера или запись в read-only буфер."""

    pass


def byte_view(buffer: bytes | bytearray | memoryview) -> memoryview:
    """
    Побайтовое представление буфера (формат "B").

    memoryview с другим форматом (например, cast("d")) адресуется в байтах.

    Raises:
        StorageError: Если буфер не C-contiguous
    """
    view = memoryview(buffer)
    if not view.c_contiguous:
        raise StorageError("Buffer must be C-contiguous")
    if view.format == "B" and view.ndim == 1:
        return view
    return view.cast("B")


def check_bounds(buffer: bytes | bytearray | memoryview, offset: int, size: int) -> None:
    """
    Проверка, что байтовый диапазон [offset, offset + size) лежит внутри буфера.

    Raises:
        StorageError: Если диапазон выходит за границы
    """
    nbytes = memoryview(buffer).nbytes
    if offset < 0 or offset + size > nbytes:
        raise StorageError(
            f"Range [{offset}, {offset + size}) out of bounds for buffer of {nbytes} bytes"
        )


def encode_payload(tag: NumericTag, value: Payload) -> bytes:
    """
    Байты значения после приведения к кодировке тега.

    Raises:
        UnsupportedNumericTagError: Для NONE и неизвестных тегов
    """
    fmt = struct_format(tag)
    value = narrow_payload(tag, value)

    if isinstance(value, BigDouble):
        return struct.pack(fmt, value.mantissa, value.exponent)

    return struct.pack(fmt, value)


def decode_payload(
    tag: NumericTag, buffer: bytes | bytearray | memoryview, offset: int = 0
) -> Payload:
    """
    Чтение значения тега из буфера по смещению.

    Raises:
        UnsupportedNumericTagError: Для NONE и неизвестных тегов
        StorageError: Если значение не помещается в буфер
    """
    fmt = struct_format(tag)
    check_bounds(buffer, offset, byte_size(tag))
    buffer = byte_view(buffer)

    if tag is NumericTag.BIG_DOUBLE:
        mantissa, exponent = struct.unpack_from(fmt, buffer, offset)
        return BigDouble(mantissa, exponent)

    return struct.unpack_from(fmt, buffer, offset)[0]


def write_payload(
    tag: NumericTag, buffer: bytearray | memoryview, offset: int, value: Payload
) -> None:
    """
    Запись значения тега в буфер по смещению.

    Raises:
        StorageError: Если буфер read-only или значение не помещается
    """
    data = encode_payload(tag, value)
    check_bounds(buffer, offset, len(data))

    view = byte_view(buffer)
    if view.readonly:
        raise StorageError("Buffer is read-only")

    view[offset : offset + len(data)] = data

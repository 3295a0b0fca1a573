"""
Domain value objects.

Contains the numeric tag set, narrowing casts, the byte codec and TaggedValue.
"""

from src.core.domain.codec import StorageError, decode_payload, encode_payload, write_payload
from src.core.domain.narrowing import (
    Payload,
    narrow_from_double,
    narrow_int,
    narrow_payload,
    to_float16,
    to_float32,
    truncate_to_int,
)
from src.core.domain.numeric_tag import (
    FLOAT_TAGS,
    INTEGER_TAGS,
    PRIMITIVE_TAGS,
    SUPPORTED_TAGS,
    NumericTag,
    UnsupportedNumericTagError,
    byte_size,
    integer_bounds,
    is_float_tag,
    is_integer_tag,
    require_supported,
    struct_format,
)
from src.core.domain.tagged_value import TaggedValue

__all__ = [
    # Numeric tag
    "NumericTag",
    "UnsupportedNumericTagError",
    "PRIMITIVE_TAGS",
    "SUPPORTED_TAGS",
    "INTEGER_TAGS",
    "FLOAT_TAGS",
    "byte_size",
    "struct_format",
    "integer_bounds",
    "is_integer_tag",
    "is_float_tag",
    "require_supported",
    # Narrowing
    "Payload",
    "narrow_from_double",
    "narrow_int",
    "narrow_payload",
    "to_float16",
    "to_float32",
    "truncate_to_int",
    # Codec
    "StorageError",
    "decode_payload",
    "encode_payload",
    "write_payload",
    # Tagged value
    "TaggedValue",
]

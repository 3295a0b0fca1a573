"""
Contract Validation Module

JSON Schema контракты сериализованных BigDouble и TaggedValue.
"""

from .validators import (
    SCHEMA_DIR,
    BigDoubleValidator,
    ContractValidator,
    SchemaLoader,
    TaggedValueValidator,
    validate_big_double,
    validate_tagged_value,
)

__all__ = [
    "SCHEMA_DIR",
    # Classes
    "SchemaLoader",
    "ContractValidator",
    "BigDoubleValidator",
    "TaggedValueValidator",
    # Functions
    "validate_big_double",
    "validate_tagged_value",
]

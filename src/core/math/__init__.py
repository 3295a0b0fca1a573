"""
Core math modules

Численные примитивы: IEEE-754 safe-операции, таблица степеней десяти,
текстовая грамматика и десятичный тип BigDouble.
"""

# Numerical Safeguards
from src.core.math.numerical_safeguards import (
    # Epsilon constants
    EPS_FLOAT_COMPARE_ABS,
    EPS_FLOAT_COMPARE_REL,
    EPS_INTEGER_SNAP,
    # IEEE-754 arithmetic
    ieee_divide,
    ieee_exp,
    ieee_pow,
    safe_log,
    safe_log10,
    # Checks and comparisons
    float_equals,
    is_close,
    is_valid_float,
    snap_to_integer,
)

# Powers Of Ten
from src.core.math.powers_of_ten import (
    DOUBLE_EXP_MAX,
    DOUBLE_EXP_MIN,
    POWERS_OF_TEN,
    PowersOfTenCache,
    pow10,
)

# Number Format
from src.core.math.number_format import (
    DEFAULT_NUMBER_FORMAT,
    BigDoubleParseError,
    NumberFormat,
)

# BigDouble
from src.core.math.big_double import (
    INFINITY_EXPONENT,
    NAN,
    NEGATIVE_INFINITY,
    NEGATIVE_ONE,
    ONE,
    POSITIVE_INFINITY,
    TEN,
    ZERO,
    BigDouble,
)

__all__ = [
    # Numerical Safeguards — Epsilon constants
    "EPS_FLOAT_COMPARE_ABS",
    "EPS_FLOAT_COMPARE_REL",
    "EPS_INTEGER_SNAP",
    # Numerical Safeguards — IEEE-754 arithmetic
    "ieee_divide",
    "ieee_exp",
    "ieee_pow",
    "safe_log",
    "safe_log10",
    # Numerical Safeguards — Checks and comparisons
    "float_equals",
    "is_close",
    "is_valid_float",
    "snap_to_integer",
    # Powers Of Ten
    "DOUBLE_EXP_MAX",
    "DOUBLE_EXP_MIN",
    "POWERS_OF_TEN",
    "PowersOfTenCache",
    "pow10",
    # Number Format
    "DEFAULT_NUMBER_FORMAT",
    "BigDoubleParseError",
    "NumberFormat",
    # BigDouble
    "BigDouble",
    "INFINITY_EXPONENT",
    "ZERO",
    "ONE",
    "TEN",
    "NEGATIVE_ONE",
    "NAN",
    "POSITIVE_INFINITY",
    "NEGATIVE_INFINITY",
]

"""
Operators — перечисления операций движка

- MathOperator: бинарные операции записи (A = A op B)
- ComparisonOperator: логические сравнения двух значений одного тега
- MathFunction: унарные функции
"""

from enum import Enum


class MathOperator(str, Enum):
    """Бинарная операция над значениями одного тега"""

    SET = "set"
    ADD = "add"
    SUBTRACT = "subtract"
    MULTIPLY = "multiply"
    DIVIDE = "divide"
    POWER_A_TO_B = "power_a_to_b"  # A ** B
    POWER_B_TO_A = "power_b_to_a"  # B ** A
    MIN = "min"
    MAX = "max"


class ComparisonOperator(str, Enum):
    """Логическое сравнение"""

    EQUAL = "equal"
    NOT_EQUAL = "not_equal"
    LESS = "less"
    LESS_OR_EQUAL = "less_or_equal"
    GREATER = "greater"
    GREATER_OR_EQUAL = "greater_or_equal"
    HAS_FLAG = "has_flag"  # (A & B) == B, только целые теги


class MathFunction(str, Enum):
    """Унарная математическая функция"""

    ABS = "abs"
    CEIL = "ceil"
    FLOOR = "floor"
    ROUND = "round"
    LOG10 = "log10"
    LOG = "log"

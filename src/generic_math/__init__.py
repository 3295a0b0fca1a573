"""
Generic math engine.

Tag-dispatched arithmetic over TaggedValue operands and typed buffer slots:
per-tag calculators, operator and unary-function dispatch, comparisons and
scaled recompute.
"""

from src.generic_math.calculators import (
    CALCULATORS,
    BigDoubleCalculator,
    BoolCalculator,
    FloatCalculator,
    IntegerCalculator,
    ValueCalculator,
    get_calculator,
)
from src.generic_math.comparison import has_flag, logical_comparison
from src.generic_math.dispatch import (
    DispatchResult,
    process,
    process_math_function,
    process_return_change,
    process_slot_return_change,
    process_slot_with_min_max,
    process_slots,
    process_with_min_max,
)
from src.generic_math.operators import ComparisonOperator, MathFunction, MathOperator
from src.generic_math.scaling import (
    DEFAULT_SCALED_COMPARE,
    ScaledCompareConfig,
    recompute_scaled,
    recompute_scaled_slot,
    scaled_equals,
)
from src.generic_math.storage import (
    StorageError,
    ValueSlot,
    append_double,
    append_tagged_value,
    get_byte_array,
    pack_values,
    unpack_values,
)

__all__ = [
    # Operators
    "MathOperator",
    "ComparisonOperator",
    "MathFunction",
    # Calculators
    "ValueCalculator",
    "IntegerCalculator",
    "BoolCalculator",
    "FloatCalculator",
    "BigDoubleCalculator",
    "CALCULATORS",
    "get_calculator",
    # Storage
    "StorageError",
    "ValueSlot",
    "append_double",
    "append_tagged_value",
    "get_byte_array",
    "pack_values",
    "unpack_values",
    # Dispatch
    "DispatchResult",
    "process",
    "process_return_change",
    "process_with_min_max",
    "process_math_function",
    "process_slot_return_change",
    "process_slot_with_min_max",
    "process_slots",
    # Comparison
    "has_flag",
    "logical_comparison",
    # Scaled recompute
    "ScaledCompareConfig",
    "DEFAULT_SCALED_COMPARE",
    "recompute_scaled",
    "recompute_scaled_slot",
    "scaled_equals",
]

"""
BigDouble — десятичное число с плавающей точкой произвольной величины

Значение = mantissa × 10^exponent:
- mantissa: float (точность double, ~15–17 значащих десятичных цифр)
- exponent: int (домен int64)

Точность ограничена мантиссой double; величина — только диапазоном int64
экспоненты. Это НЕ arbitrary-precision арифметика.

КРИТИЧЕСКИЕ ИНВАРИАНТЫ (после нормализации):
1. Конечное ненулевое значение → 1.0 ≤ |mantissa| < 10.0
2. Ноль → mantissa = 0.0, exponent = 0 (ровно)
3. ±Inf → mantissa = ±1.0, exponent = INFINITY_EXPONENT
4. NaN → mantissa = NaN, exponent = NAN_EXPONENT (нормализация не выполняется)
5. Экземпляры immutable; нормализация выполняется один раз при создании

ОСОБЕННОСТИ (намеренные):
- Сложение возвращает больший операнд без изменений, если разница экспонент
  больше NEGLIGIBLE_EXPONENT_DIFF (меньший операнд не влияет на мантиссу)
- NaN участвует в compare_to по общим правилам (не "unordered"): результат
  определяется кодированием (NaN, 0); см. test_big_double.TestNaNOrdering
- factorial() — аппроксимация Стирлинга, не точное значение
"""

import math
from dataclasses import dataclass
from typing import Any, Final, Union

from src.core.math.number_format import (
    DEFAULT_NUMBER_FORMAT,
    BigDoubleParseError,
    NumberFormat,
    format_parts,
    parse_parts,
)
from src.core.math.numerical_safeguards import (
    ieee_divide,
    ieee_exp,
    ieee_pow,
    safe_log,
    safe_log10,
    snap_to_integer,
)
from src.core.math.powers_of_ten import DOUBLE_EXP_MAX, DOUBLE_EXP_MIN, pow10

# =============================================================================
# КОНСТАНТЫ
# =============================================================================

# Границы int64 (домен экспоненты)
INT64_MIN: Final[int] = -(2**63)
INT64_MAX: Final[int] = 2**63 - 1

# Экспонента-маркер бесконечности
INFINITY_EXPONENT: Final[int] = INT64_MAX

# Экспонента NaN (нормализация сбрасывает любую экспоненту NaN в это значение)
NAN_EXPONENT: Final[int] = 0

# Экспонента ниже этого порога схлопывается в ноль
EXPONENT_UNDERFLOW: Final[int] = INT64_MIN // 2

# Разница экспонент, при которой меньший слагаемый пренебрежимо мал
# (мантисса double несёт ~15–17 значащих десятичных цифр)
NEGLIGIBLE_EXPONENT_DIFF: Final[int] = 17

# Экспонента, начиная с которой значение уже целое в пределах точности мантиссы
MAX_SIGNIFICANT_EXPONENT: Final[int] = 17

# Порог прямого вычисления exp() через double
EXP_DIRECT_EXPONENT_LIMIT: Final[int] = 3

LOG2_10: Final[float] = 3.32192809488736234787
LOG10_E: Final[float] = 0.4342944819032518
LN_10: Final[float] = math.log(10.0)

# Наименьший субнормальный double и "1e-323" для нормализации нижней границы:
# log10 численно неустойчив у границы субнормалей, поэтому 10^-324 не
# получается из таблицы (там 10^-324 == 0.0)
SMALLEST_DOUBLE: Final[float] = 5e-324
SMALLEST_POWER_OF_TEN: Final[float] = 1e-323

# 10^k при k < DOUBLE_EXP_MIN_NORMAL — субнормальные и теряют точность;
# такие степени применяются в два шага через точный множитель 10^16
DOUBLE_EXP_MIN_NORMAL: Final[int] = -307
SUBNORMAL_SCALE_DIGITS: Final[int] = 16
SUBNORMAL_SCALE: Final[float] = 1e16

Number = Union["BigDouble", int, float]


# =============================================================================
# НОРМАЛИЗАЦИЯ
# =============================================================================


def _normalize(mantissa: float, exponent: int) -> tuple[float, int]:
    """
    Приведение пары к инвариантам BigDouble.

    Порядок шагов фиксирован:
    1. NaN → (NaN, NAN_EXPONENT)
    2. Ноль → (0.0, 0)
    3. ±Inf → (±1.0, INFINITY_EXPONENT)
    4. Сдвиг мантиссы в [1, 10) через floor(log10(|m|))
    5. Underflow экспоненты → ноль, переполнение → ±Inf
    """
    if math.isnan(mantissa):
        return mantissa, NAN_EXPONENT

    if mantissa == 0:
        return 0.0, 0

    if math.isinf(mantissa):
        return (1.0 if mantissa > 0 else -1.0), INFINITY_EXPONENT

    magnitude = abs(mantissa)
    if magnitude >= 10.0 or magnitude < 1.0:
        shift = math.floor(math.log10(magnitude))

        if shift == DOUBLE_EXP_MIN:
            mantissa = mantissa * 10.0 / SMALLEST_POWER_OF_TEN
        elif shift < DOUBLE_EXP_MIN_NORMAL:
            mantissa = mantissa * SUBNORMAL_SCALE / pow10(shift + SUBNORMAL_SCALE_DIGITS)
        else:
            mantissa /= pow10(shift)

        exponent += shift

        # log10 может попасть по другую сторону степени десяти
        magnitude = abs(mantissa)
        if magnitude >= 10.0:
            mantissa /= 10.0
            exponent += 1
        elif magnitude < 1.0:
            mantissa *= 10.0
            exponent -= 1

    if exponent < EXPONENT_UNDERFLOW:
        return 0.0, 0

    if exponent >= INFINITY_EXPONENT:
        return (1.0 if mantissa > 0 else -1.0), INFINITY_EXPONENT

    return mantissa, exponent


def _int_to_parts(value: int) -> tuple[float, int]:
    """Целое вне диапазона double → (mantissa, exponent) по десятичным цифрам."""
    digits = str(abs(value))
    mantissa = float(f"{digits[0]}.{digits[1:18] or '0'}")
    return (-mantissa if value < 0 else mantissa), len(digits) - 1


# =============================================================================
# BIGDOUBLE
# =============================================================================


@dataclass(frozen=True, eq=False)
class BigDouble:
    """
    Immutable десятичное число mantissa × 10^exponent.

    Создание:
        BigDouble(1234.0)        → (1.234, 3)
        BigDouble(50.0, 3)       → (5.0, 4)
        BigDouble(0.5, 10)       → (5.0, 9)
        BigDouble.parse("1.23e45")

    Арифметика (+, -, *, /, **, унарный -, abs) принимает BigDouble, int и float.
    Сравнения <, <=, >, >= принимают BigDouble, int и float; == сравнивает только
    BigDouble (точное совпадение нормализованных пар).
    """

    mantissa: float
    exponent: int = 0

    def __post_init__(self) -> None:
        mantissa = self.mantissa
        exponent = int(self.exponent)

        if isinstance(mantissa, int) and not isinstance(mantissa, bool):
            try:
                mantissa = float(mantissa)
            except OverflowError:
                mantissa, shift = _int_to_parts(mantissa)
                exponent += shift
        else:
            mantissa = float(mantissa)

        mantissa, exponent = _normalize(mantissa, exponent)
        object.__setattr__(self, "mantissa", mantissa)
        object.__setattr__(self, "exponent", exponent)

    @classmethod
    def raw(cls, mantissa: float, exponent: int) -> "BigDouble":
        """Создание без нормализации (пара уже удовлетворяет инвариантам)."""
        value = object.__new__(cls)
        object.__setattr__(value, "mantissa", mantissa)
        object.__setattr__(value, "exponent", exponent)
        return value

    # -------------------------------------------------------------------------
    # Свойства
    # -------------------------------------------------------------------------

    @property
    def is_zero(self) -> bool:
        return self.mantissa == 0

    @property
    def is_nan(self) -> bool:
        return math.isnan(self.mantissa)

    @property
    def is_infinity(self) -> bool:
        return self.exponent == INFINITY_EXPONENT and not math.isnan(self.mantissa)

    @property
    def is_finite(self) -> bool:
        return not self.is_nan and not self.is_infinity

    # -------------------------------------------------------------------------
    # Арифметика
    # -------------------------------------------------------------------------

    def __add__(self, other: Number) -> "BigDouble":
        other = _coerce(other)
        if other is None:
            return NotImplemented
        return _add(self, other)

    def __radd__(self, other: Number) -> "BigDouble":
        other = _coerce(other)
        if other is None:
            return NotImplemented
        return _add(other, self)

    def __sub__(self, other: Number) -> "BigDouble":
        other = _coerce(other)
        if other is None:
            return NotImplemented
        return _add(self, -other)

    def __rsub__(self, other: Number) -> "BigDouble":
        other = _coerce(other)
        if other is None:
            return NotImplemented
        return _add(other, -self)

    def __mul__(self, other: Number) -> "BigDouble":
        other = _coerce(other)
        if other is None:
            return NotImplemented
        return _multiply(self, other)

    def __rmul__(self, other: Number) -> "BigDouble":
        other = _coerce(other)
        if other is None:
            return NotImplemented
        return _multiply(other, self)

    def __truediv__(self, other: Number) -> "BigDouble":
        other = _coerce(other)
        if other is None:
            return NotImplemented
        return _divide(self, other)

    def __rtruediv__(self, other: Number) -> "BigDouble":
        other = _coerce(other)
        if other is None:
            return NotImplemented
        return _divide(other, self)

    def __pow__(self, power: Number) -> "BigDouble":
        if _coerce(power) is None:
            return NotImplemented
        return self.pow(power)

    def __rpow__(self, base: Number) -> "BigDouble":
        base = _coerce(base)
        if base is None:
            return NotImplemented
        return base.pow(self)

    def __neg__(self) -> "BigDouble":
        return BigDouble.raw(-self.mantissa, self.exponent) if self.mantissa else self

    def __pos__(self) -> "BigDouble":
        return self

    def __abs__(self) -> "BigDouble":
        return self.abs()

    def __bool__(self) -> bool:
        return not self.is_zero

    # -------------------------------------------------------------------------
    # Сравнение
    # -------------------------------------------------------------------------

    def compare_to(self, other: "BigDouble") -> int:
        """
        Трёхзначное сравнение: -1, 0 или 1.

        Порядок проверок:
        1. Нули: знак другого операнда
        2. Разные знаки
        3. Одинаковый знак: экспонента, затем мантисса

        NaN не исключается: сравнения с NaN (mantissa) ложны, поэтому NaN
        проходит по ветке "отрицательного" знака и сравнивается по экспоненте.
        """
        m, other_m = self.mantissa, other.mantissa

        if m == 0 and other_m == 0:
            return 0
        if m == 0:
            return -1 if other_m > 0 else 1
        if other_m == 0:
            return 1 if m > 0 else -1

        if m > 0 and other_m < 0:
            return 1
        if m < 0 and other_m > 0:
            return -1

        sign = 1 if m > 0 else -1

        if self.exponent > other.exponent:
            return sign
        if self.exponent < other.exponent:
            return -sign

        if m > other_m:
            return 1
        if m < other_m:
            return -1

        return 0

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BigDouble):
            return NotImplemented
        return self.mantissa == other.mantissa and self.exponent == other.exponent

    def __hash__(self) -> int:
        return hash((self.mantissa, self.exponent))

    def __lt__(self, other: Number) -> bool:
        other = _coerce(other)
        if other is None:
            return NotImplemented
        return self.compare_to(other) < 0

    def __le__(self, other: Number) -> bool:
        other = _coerce(other)
        if other is None:
            return NotImplemented
        return self.compare_to(other) <= 0

    def __gt__(self, other: Number) -> bool:
        other = _coerce(other)
        if other is None:
            return NotImplemented
        return self.compare_to(other) > 0

    def __ge__(self, other: Number) -> bool:
        other = _coerce(other)
        if other is None:
            return NotImplemented
        return self.compare_to(other) >= 0

    def min(self, other: "BigDouble") -> "BigDouble":
        return self if self.compare_to(other) <= 0 else other

    def max(self, other: "BigDouble") -> "BigDouble":
        return self if self.compare_to(other) >= 0 else other

    def clamp(self, low: "BigDouble", high: "BigDouble") -> "BigDouble":
        """Ограничение диапазоном [low, high] (сначала low, затем high)."""
        if self.compare_to(low) < 0:
            return low
        if self.compare_to(high) > 0:
            return high
        return self

    # -------------------------------------------------------------------------
    # Конверсии
    # -------------------------------------------------------------------------

    def to_double(self) -> float:
        """
        Конверсия в float.

        Returns:
            - ±inf если exponent > DOUBLE_EXP_MAX
            - 0.0 если exponent < DOUBLE_EXP_MIN
            - ±5e-324 если exponent == DOUBLE_EXP_MIN
            - mantissa × 10^exponent иначе; при exponent ≥ 0 результат,
              отстоящий от целого меньше чем на 1e-10, привязывается к целому
        """
        m, e = self.mantissa, self.exponent

        if m == 0:
            return 0.0
        if e > DOUBLE_EXP_MAX:
            return math.inf if m > 0 else -math.inf
        if e < DOUBLE_EXP_MIN:
            return 0.0
        if e == DOUBLE_EXP_MIN:
            return SMALLEST_DOUBLE if m > 0 else -SMALLEST_DOUBLE
        if e < DOUBLE_EXP_MIN_NORMAL:
            return m * pow10(e + SUBNORMAL_SCALE_DIGITS) / SUBNORMAL_SCALE

        result = m * pow10(e)
        if not math.isfinite(result) or e < 0:
            return result

        return snap_to_integer(result)

    def __float__(self) -> float:
        return self.to_double()

    def to_int_in_range(self, low: int, high: int) -> int:
        """
        Усечение к нулю, если значение в [low, high], иначе 0.

        Examples:
            >>> BigDouble(300.7).to_int_in_range(0, 255)
            0
            >>> BigDouble(-12.9).to_int_in_range(-128, 127)
            -12
        """
        d = self.to_double()
        if low <= d <= high:
            return int(d)
        return 0

    def __int__(self) -> int:
        return self.to_int_in_range(INT64_MIN, INT64_MAX)

    def to_dict(self) -> dict[str, Any]:
        """Сериализация без потерь: {"mantissa": float, "exponent": int}."""
        return {"mantissa": self.mantissa, "exponent": self.exponent}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "BigDouble":
        return cls(data["mantissa"], data["exponent"])

    # -------------------------------------------------------------------------
    # Текст
    # -------------------------------------------------------------------------

    @classmethod
    def parse(cls, text: str) -> "BigDouble":
        """
        Разбор текста в грамматике BigDouble.

        Args:
            text: "1.23e45", "150", "NaN", "Inf", ...

        Returns:
            Нормализованный BigDouble

        Raises:
            BigDoubleParseError: Некорректный текст или NaN без явного токена "NaN"
        """
        mantissa, exponent = parse_parts(text)
        return cls(mantissa, exponent)

    def to_string(self, number_format: NumberFormat = DEFAULT_NUMBER_FORMAT) -> str:
        return format_parts(self.mantissa, self.exponent, INFINITY_EXPONENT, number_format)

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return f"BigDouble(mantissa={self.mantissa!r}, exponent={self.exponent!r})"

    # -------------------------------------------------------------------------
    # Логарифмы и степени
    # -------------------------------------------------------------------------

    def log10(self) -> float:
        """exponent + log10(mantissa); NaN для отрицательных значений."""
        return self.exponent + safe_log10(self.mantissa)

    def abs_log10(self) -> float:
        return self.exponent + safe_log10(abs(self.mantissa))

    def ln(self) -> float:
        if self.mantissa <= 0:
            return math.nan
        return math.log(self.mantissa) + self.exponent * LN_10

    def log2(self) -> float:
        return LOG2_10 * self.log10()

    def log(self, base: Number) -> float:
        if isinstance(base, BigDouble):
            base = base.to_double()
        return ieee_divide(self.ln(), safe_log(float(base)))

    def pow(self, power: Number) -> "BigDouble":
        """
        Возведение в степень через log10-домен.

        10^(power × log10(|value|)) раскладывается на целую экспоненту floor(·)
        и остаток, из которого восстанавливается мантисса 10^остаток.
        Отрицательное основание допускается только с целой степенью.
        """
        if isinstance(power, BigDouble):
            power = power.to_double()
        power = float(power)

        if self.mantissa == 0:
            return ONE if power == 0 else ZERO
        if self.is_nan or math.isnan(power):
            return NAN

        negate = False
        base = self
        if self.mantissa < 0:
            if not power.is_integer():
                return NAN
            negate = int(power) % 2 == 1
            base = -self

        new_log = power * base.log10()
        if math.isnan(new_log):
            return NAN
        if math.isinf(new_log):
            result = POSITIVE_INFINITY if new_log > 0 else ZERO
        else:
            new_exponent = math.floor(new_log)
            residual = new_log - new_exponent
            result = BigDouble(ieee_pow(10.0, residual), new_exponent)

        return -result if negate else result

    def sqrt(self) -> "BigDouble":
        """
        Квадратный корень: чётная экспонента делится пополам, нечётная —
        сначала мантисса ×10. Отрицательные значения и ноль → ZERO.
        """
        if self.mantissa < 0 or self.mantissa == 0:
            return ZERO
        if self.is_infinity:
            return self

        if self.exponent % 2 == 0:
            return BigDouble(math.sqrt(self.mantissa), self.exponent // 2)

        return BigDouble(math.sqrt(self.mantissa * 10), (self.exponent - 1) // 2)

    def exp(self) -> "BigDouble":
        """e^value: напрямую через double для малых экспонент, иначе через log10-домен."""
        as_double = self.to_double()

        if self.exponent < EXP_DIRECT_EXPONENT_LIMIT:
            return BigDouble(ieee_exp(as_double))

        if math.isinf(as_double):
            return POSITIVE_INFINITY if as_double > 0 else ZERO

        new_log10 = as_double * LOG10_E
        new_exponent = math.floor(new_log10)
        residual = new_log10 - new_exponent
        return BigDouble(ieee_pow(10.0, residual), new_exponent)

    def factorial(self) -> "BigDouble":
        """
        Аппроксимация Стирлинга (вариант для калькуляторов):

            x! ≈ sqrt(2π/n) × (n/e × sqrt(n·sinh(1/n) + 1/(810·n^6)))^n,  n = x + 1

        Не точна для малых целых; для n ≤ 0 возвращает NaN.
        """
        n = self.to_double() + 1
        if math.isnan(n) or n <= 0:
            return NAN
        if math.isinf(n):
            return POSITIVE_INFINITY

        try:
            sinh_term = n * math.sinh(1 / n)
        except OverflowError:
            sinh_term = math.inf

        correction = ieee_divide(1.0, 810 * ieee_pow(n, 6))
        base = n / math.e * math.sqrt(sinh_term + correction)
        return BigDouble(base).pow(n) * math.sqrt(2 * math.pi / n)

    # -------------------------------------------------------------------------
    # Округление
    # -------------------------------------------------------------------------

    def abs(self) -> "BigDouble":
        return BigDouble(abs(self.mantissa), self.exponent)

    def floor(self) -> "BigDouble":
        if self.exponent < 0:
            return ZERO if self.mantissa >= 0 else NEGATIVE_ONE
        if self.exponent >= MAX_SIGNIFICANT_EXPONENT or self.is_nan:
            return self
        return BigDouble(math.floor(self.to_double()))

    def ceil(self) -> "BigDouble":
        if self.exponent < 0:
            return ONE if self.mantissa > 0 else ZERO
        if self.exponent >= MAX_SIGNIFICANT_EXPONENT or self.is_nan:
            return self
        return BigDouble(math.ceil(self.to_double()))

    def round(self) -> "BigDouble":
        """Округление к ближайшему целому (half-to-even)."""
        if self.exponent < 0:
            return BigDouble(round(self.mantissa * pow10(self.exponent)))
        if self.exponent >= MAX_SIGNIFICANT_EXPONENT or self.is_nan:
            return self
        return BigDouble(round(self.to_double()))


# =============================================================================
# ОПЕРАЦИИ
# =============================================================================


def _coerce(value: Any) -> "BigDouble | None":
    if isinstance(value, BigDouble):
        return value
    if isinstance(value, (int, float)):
        return BigDouble(value)
    return None


def _ieee_proxy(value: BigDouble) -> float:
    """±inf для бесконечностей, мантисса иначе (знак и нуль сохраняются)."""
    if value.is_infinity:
        return math.copysign(math.inf, value.mantissa)
    return value.mantissa


def _add(a: BigDouble, b: BigDouble) -> BigDouble:
    if a.mantissa == 0:
        return b
    if b.mantissa == 0:
        return a

    if a.is_infinity and b.is_infinity:
        return a if a.mantissa == b.mantissa else NAN

    exp_diff = a.exponent - b.exponent

    if exp_diff > NEGLIGIBLE_EXPONENT_DIFF:
        return a
    if exp_diff < -NEGLIGIBLE_EXPONENT_DIFF:
        return b

    # Выравнивание по большей экспоненте
    if exp_diff >= 0:
        exponent = a.exponent
        mantissa = a.mantissa + b.mantissa * pow10(-exp_diff)
    else:
        exponent = b.exponent
        mantissa = a.mantissa * pow10(exp_diff) + b.mantissa

    return BigDouble(mantissa, exponent)


def _multiply(a: BigDouble, b: BigDouble) -> BigDouble:
    if a.is_infinity or b.is_infinity:
        return BigDouble(_ieee_proxy(a) * _ieee_proxy(b))
    return BigDouble(a.mantissa * b.mantissa, a.exponent + b.exponent)


def _divide(a: BigDouble, b: BigDouble) -> BigDouble:
    if a.is_infinity or b.is_infinity:
        return BigDouble(ieee_divide(_ieee_proxy(a), _ieee_proxy(b)))
    return BigDouble(ieee_divide(a.mantissa, b.mantissa), a.exponent - b.exponent)


# =============================================================================
# КОНСТАНТЫ-ЗНАЧЕНИЯ
# =============================================================================

ZERO: Final[BigDouble] = BigDouble(0.0, 0)
ONE: Final[BigDouble] = BigDouble(1.0, 0)
TEN: Final[BigDouble] = BigDouble(1.0, 1)
NEGATIVE_ONE: Final[BigDouble] = BigDouble(-1.0, 0)
NAN: Final[BigDouble] = BigDouble(math.nan, INT64_MIN)
POSITIVE_INFINITY: Final[BigDouble] = BigDouble(math.inf)
NEGATIVE_INFINITY: Final[BigDouble] = BigDouble(-math.inf)

__all__ = [
    "BigDouble",
    "BigDoubleParseError",
    "Number",
    "DOUBLE_EXP_MAX",
    "DOUBLE_EXP_MIN",
    "EXPONENT_UNDERFLOW",
    "INFINITY_EXPONENT",
    "INT64_MAX",
    "INT64_MIN",
    "LOG2_10",
    "MAX_SIGNIFICANT_EXPONENT",
    "NAN_EXPONENT",
    "NEGLIGIBLE_EXPONENT_DIFF",
    "ZERO",
    "ONE",
    "TEN",
    "NEGATIVE_ONE",
    "NAN",
    "POSITIVE_INFINITY",
    "NEGATIVE_INFINITY",
]

"""
Тесты для BigDouble

Проверяет:
1. Нормализацию (1 ≤ |m| < 10, ноль, ±Inf, NaN, underflow/overflow экспоненты)
2. Арифметику, порог пренебрежимости, IEEE-семантику особых значений
3. Сравнение, включая фиксированный порядок NaN
4. Конверсии в float / int / dict
5. Разбор и форматирование текста
6. Функции: log, pow, sqrt, exp, factorial, floor/ceil/round
7. Свойства на детерминированной выборке значений
"""

import dataclasses
import math
import random

import pytest

from src.core.math.big_double import (
    DOUBLE_EXP_MIN,
    EXPONENT_UNDERFLOW,
    INFINITY_EXPONENT,
    INT64_MAX,
    NAN,
    NEGATIVE_INFINITY,
    NEGATIVE_ONE,
    NEGLIGIBLE_EXPONENT_DIFF,
    ONE,
    POSITIVE_INFINITY,
    TEN,
    ZERO,
    BigDouble,
)
from src.core.math.number_format import BigDoubleParseError, NumberFormat


def _sample_doubles(count: int, seed: int) -> list[float]:
    """Детерминированная выборка конечных ненулевых double разных порядков."""
    rng = random.Random(seed)
    values = []
    for _ in range(count):
        magnitude = rng.uniform(1.0, 10.0) * 10.0 ** rng.randint(-30, 30)
        values.append(magnitude if rng.random() < 0.5 else -magnitude)
    return values


SAMPLES = _sample_doubles(200, seed=42)
PAIRS = list(zip(_sample_doubles(200, seed=7), _sample_doubles(200, seed=11)))


# =============================================================================
# НОРМАЛИЗАЦИЯ
# =============================================================================


class TestNormalization:
    """Тесты нормализации при создании"""

    def test_thousands(self) -> None:
        value = BigDouble(1234.0)
        assert value.mantissa == pytest.approx(1.234)
        assert value.exponent == 3

    def test_small_fraction(self) -> None:
        value = BigDouble(0.005)
        assert value.mantissa == pytest.approx(5.0)
        assert value.exponent == -3

    def test_negative(self) -> None:
        value = BigDouble(-42)
        assert value.mantissa == pytest.approx(-4.2)
        assert value.exponent == 1

    def test_mantissa_above_ten_with_exponent(self) -> None:
        value = BigDouble(50.0, 3)
        assert value.mantissa == pytest.approx(5.0)
        assert value.exponent == 4

    def test_mantissa_below_one_with_exponent(self) -> None:
        value = BigDouble(0.5, 10)
        assert value.mantissa == pytest.approx(5.0)
        assert value.exponent == 9

    def test_already_normalized_unchanged(self) -> None:
        value = BigDouble(-2.5, 10)
        assert value.mantissa == -2.5
        assert value.exponent == 10

    def test_smallest_subnormal(self) -> None:
        value = BigDouble(5e-324)
        assert 1.0 <= value.mantissa < 10.0
        assert value.exponent == DOUBLE_EXP_MIN

    def test_zero_has_zero_exponent(self) -> None:
        value = BigDouble(0.0, 55)
        assert value.mantissa == 0.0
        assert value.exponent == 0
        assert value.is_zero

    def test_nan_exponent_reset(self) -> None:
        value = BigDouble(math.nan, 42)
        assert value.is_nan
        assert value.exponent == 0

    def test_infinity(self) -> None:
        value = BigDouble(math.inf)
        assert value.mantissa == 1.0
        assert value.exponent == INFINITY_EXPONENT
        assert value.is_infinity
        assert not value.is_finite

    def test_negative_infinity(self) -> None:
        assert BigDouble(-math.inf).mantissa == -1.0
        assert BigDouble(-math.inf) == NEGATIVE_INFINITY

    def test_exponent_underflow_collapses_to_zero(self) -> None:
        assert BigDouble(1.0, EXPONENT_UNDERFLOW - 1) == ZERO

    def test_exponent_overflow_becomes_infinity(self) -> None:
        assert BigDouble(5.0, INT64_MAX) == POSITIVE_INFINITY
        assert BigDouble(50.0, INT64_MAX - 1) == POSITIVE_INFINITY
        assert BigDouble(-50.0, INT64_MAX - 1) == NEGATIVE_INFINITY

    def test_integer_beyond_double_range(self) -> None:
        value = BigDouble(10**400)
        assert value.mantissa == 1.0
        assert value.exponent == 400

    def test_constants(self) -> None:
        assert (ONE.mantissa, ONE.exponent) == (1.0, 0)
        assert (TEN.mantissa, TEN.exponent) == (1.0, 1)
        assert (NEGATIVE_ONE.mantissa, NEGATIVE_ONE.exponent) == (-1.0, 0)
        assert NAN.is_nan and NAN.exponent == 0

    def test_immutable(self) -> None:
        with pytest.raises(dataclasses.FrozenInstanceError):
            ONE.mantissa = 2.0  # type: ignore[misc]

    @pytest.mark.parametrize("x", SAMPLES)
    def test_mantissa_range_property(self, x: float) -> None:
        value = BigDouble(x)
        assert 1.0 <= abs(value.mantissa) < 10.0


# =============================================================================
# АРИФМЕТИКА
# =============================================================================


class TestArithmetic:
    """Тесты арифметических операций"""

    def test_add_aligned_to_larger_exponent(self) -> None:
        result = BigDouble(1.5, 2) + BigDouble(2.5, 1)
        assert result.mantissa == pytest.approx(1.75)
        assert result.exponent == 2

    def test_add_carry_renormalizes(self) -> None:
        result = BigDouble(9.0) + BigDouble(2.0)
        assert result.mantissa == pytest.approx(1.1)
        assert result.exponent == 1

    def test_negligible_operand_ignored(self) -> None:
        big = BigDouble(1.0, 20)
        small = BigDouble(1.0, 0)
        assert 20 > NEGLIGIBLE_EXPONENT_DIFF
        assert (big + small) is big
        assert (small + big) is big

    def test_add_zero_identity(self) -> None:
        value = BigDouble(3.7, 5)
        assert value + ZERO is value
        assert ZERO + value is value

    def test_subtract_self_is_zero(self) -> None:
        value = BigDouble(3.7, 5)
        assert (value - value).is_zero

    def test_multiply(self) -> None:
        result = BigDouble(2.0, 3) * BigDouble(5.0, 4)
        assert result.mantissa == pytest.approx(1.0)
        assert result.exponent == 8

    def test_multiply_one_identity(self) -> None:
        value = BigDouble(-6.02, 23)
        assert value * ONE == value

    def test_divide(self) -> None:
        result = ONE / BigDouble(4.0)
        assert result.mantissa == pytest.approx(2.5)
        assert result.exponent == -1

    def test_divide_by_zero_is_infinity(self) -> None:
        assert ONE / ZERO == POSITIVE_INFINITY
        assert NEGATIVE_ONE / ZERO == NEGATIVE_INFINITY

    def test_zero_by_zero_is_nan(self) -> None:
        assert (ZERO / ZERO).is_nan

    def test_infinity_arithmetic(self) -> None:
        assert (POSITIVE_INFINITY + NEGATIVE_INFINITY).is_nan
        assert POSITIVE_INFINITY + POSITIVE_INFINITY == POSITIVE_INFINITY
        assert (POSITIVE_INFINITY * ZERO).is_nan
        assert POSITIVE_INFINITY * BigDouble(-2.0) == NEGATIVE_INFINITY
        assert (ONE / POSITIVE_INFINITY).is_zero

    def test_mixed_operands(self) -> None:
        assert BigDouble(2.0) + 3 == BigDouble(5.0)
        assert 3 - BigDouble(1.0) == BigDouble(2.0)
        assert 10 / BigDouble(4.0) == BigDouble(2.5)
        assert BigDouble(1.5) * 2.0 == BigDouble(3.0)

    def test_unary(self) -> None:
        value = BigDouble(2.0, 3)
        assert -value == BigDouble(-2.0, 3)
        assert +value is value
        assert abs(BigDouble(-2.0, 3)) == value
        assert -ZERO is ZERO

    def test_power_operator(self) -> None:
        result = BigDouble(10.0) ** 400
        assert result.mantissa == pytest.approx(1.0)
        assert result.exponent == 400

    def test_unsupported_operand(self) -> None:
        with pytest.raises(TypeError):
            BigDouble(1.0) + "1"  # type: ignore[operator]

    @pytest.mark.parametrize("x, y", PAIRS)
    def test_commutativity_property(self, x: float, y: float) -> None:
        a, b = BigDouble(x), BigDouble(y)
        assert a + b == b + a
        assert a * b == b * a

    @pytest.mark.parametrize("x", SAMPLES[:50])
    def test_identity_property(self, x: float) -> None:
        a = BigDouble(x)
        assert a * ONE == a
        assert a + ZERO == a
        assert (a - a).is_zero


# =============================================================================
# СРАВНЕНИЕ
# =============================================================================


class TestComparison:
    """Тесты сравнения"""

    def test_exponent_dominates(self) -> None:
        assert BigDouble(1.0, 3) > BigDouble(9.0, 2)
        assert BigDouble(-1.0, 3) < BigDouble(-9.0, 2)

    def test_zero_against_signs(self) -> None:
        assert ZERO < ONE
        assert NEGATIVE_ONE < ZERO
        assert ZERO.compare_to(ZERO) == 0

    def test_mantissa_breaks_tie(self) -> None:
        assert BigDouble(2.0, 5) < BigDouble(3.0, 5)
        assert BigDouble(-2.0, 5) > BigDouble(-3.0, 5)

    def test_equal_after_normalization(self) -> None:
        assert BigDouble(1.5, 2) == BigDouble(150.0)
        assert hash(BigDouble(1.5, 2)) == hash(BigDouble(150.0))

    def test_not_equal_to_native_numbers(self) -> None:
        """== сравнивает только BigDouble"""
        assert BigDouble(1.0) != 1.0
        assert BigDouble(1.0) != 1

    def test_ordering_against_native_numbers(self) -> None:
        assert BigDouble(2.0) < 3
        assert BigDouble(2.0) >= 2.0

    def test_min_max_clamp(self) -> None:
        assert ONE.min(TEN) is ONE
        assert ONE.max(TEN) is TEN
        assert BigDouble(50.0).clamp(ZERO, TEN) is TEN
        assert BigDouble(-5.0).clamp(ZERO, TEN) is ZERO
        assert BigDouble(5.0).clamp(ZERO, TEN) == BigDouble(5.0)

    @pytest.mark.parametrize("x, y", PAIRS)
    def test_ordering_consistent_with_double(self, x: float, y: float) -> None:
        a, b = BigDouble(x), BigDouble(y)
        assert (a < b) == (x < y)
        assert (a > b) == (x > y)


class TestNaNOrdering:
    """NaN участвует в compare_to по общим правилам (фиксированный порядок)"""

    def test_nan_compared_with_nan(self) -> None:
        assert NAN.compare_to(NAN) == 0

    def test_nan_never_equal(self) -> None:
        assert not (NAN == NAN)
        assert NAN != NAN

    def test_nan_above_positive_with_larger_exponent(self) -> None:
        assert NAN.compare_to(BigDouble(5.0, 3)) == 1

    def test_nan_against_zero(self) -> None:
        assert NAN.compare_to(ZERO) == -1
        assert ZERO.compare_to(NAN) == 1


# =============================================================================
# КОНВЕРСИИ
# =============================================================================


class TestConversion:
    """Тесты to_double / int / dict"""

    def test_to_double(self) -> None:
        assert BigDouble(1.5, 3).to_double() == 1500.0
        assert float(BigDouble(2.5, -1)) == 0.25

    def test_to_double_overflow(self) -> None:
        assert BigDouble(1.0, 309).to_double() == math.inf
        assert BigDouble(-1.0, 309).to_double() == -math.inf

    def test_to_double_underflow(self) -> None:
        assert BigDouble(1.0, -325).to_double() == 0.0

    def test_to_double_at_minimum_exponent(self) -> None:
        assert BigDouble(3.0, DOUBLE_EXP_MIN).to_double() == 5e-324
        assert BigDouble(-3.0, DOUBLE_EXP_MIN).to_double() == -5e-324

    @pytest.mark.parametrize("x", [1e-320, -7e-322, 2.5e-315, 1e-310])
    def test_to_double_subnormal(self, x: float) -> None:
        assert BigDouble(x).to_double() == x

    def test_to_double_near_normal_boundary(self) -> None:
        assert BigDouble(3e-308).to_double() == pytest.approx(3e-308, rel=1e-15)

    def test_subnormal_power_of_ten_mantissa(self) -> None:
        # Ближайший к 1e-320 double чуть меньше 10^-320
        value = BigDouble(1e-320)
        assert value.exponent == -321
        assert 9.9998 < value.mantissa < 10.0

    def test_to_double_special(self) -> None:
        assert ZERO.to_double() == 0.0
        assert POSITIVE_INFINITY.to_double() == math.inf
        assert math.isnan(NAN.to_double())

    def test_integer_snap(self) -> None:
        assert BigDouble(1.4999999999999998, 3).to_double() == 1500.0

    @pytest.mark.parametrize("x", SAMPLES)
    def test_double_round_trip_property(self, x: float) -> None:
        assert BigDouble(x).to_double() == pytest.approx(x, rel=1e-12)

    def test_int_truncates(self) -> None:
        assert int(BigDouble(-12.9)) == -12
        assert int(BigDouble(1.5, 3)) == 1500

    def test_int_out_of_range_is_zero(self) -> None:
        assert int(BigDouble(1.0, 30)) == 0

    def test_to_int_in_range(self) -> None:
        assert BigDouble(300.7).to_int_in_range(0, 255) == 0
        assert BigDouble(200.7).to_int_in_range(0, 255) == 200

    def test_dict_round_trip(self) -> None:
        value = BigDouble(-6.02, 230)
        assert value.to_dict() == {"mantissa": -6.02, "exponent": 230}
        assert BigDouble.from_dict(value.to_dict()) == value


# =============================================================================
# ТЕКСТ
# =============================================================================


class TestText:
    """Тесты parse / to_string"""

    def test_to_string(self) -> None:
        assert str(BigDouble(150.0)) == "150"
        assert str(BigDouble(1.23, 45)) == "1.23e45"
        assert str(BigDouble(-2.5, 10)) == "-2.5e10"
        assert str(BigDouble(9.999e10)) == "1e11"
        assert str(BigDouble(0.0009999)) == "1e-3"
        assert str(ONE) == "1"
        assert str(ZERO) == "0"
        assert str(BigDouble(0.005)) == "0.005"

    def test_special_values(self) -> None:
        assert str(POSITIVE_INFINITY) == "Inf"
        assert str(NEGATIVE_INFINITY) == "-Inf"
        assert str(NAN) == "NaN"

    def test_custom_format(self) -> None:
        assert BigDouble(1.23456, 20).to_string(NumberFormat(decimal_places=4)) == "1.2346e20"

    def test_repr(self) -> None:
        assert repr(BigDouble(1.5, 2)) == "BigDouble(mantissa=1.5, exponent=2)"

    def test_parse(self) -> None:
        assert BigDouble.parse("1.23e45") == BigDouble(1.23, 45)
        assert BigDouble.parse("150") == BigDouble(1.5, 2)
        assert BigDouble.parse("Inf") == POSITIVE_INFINITY

    def test_parse_nan_token(self) -> None:
        assert BigDouble.parse("NaN").is_nan

    @pytest.mark.parametrize("text", ["nan", "abc", "1e2e3", "1.5e"])
    def test_parse_errors(self, text: str) -> None:
        with pytest.raises(BigDoubleParseError):
            BigDouble.parse(text)

    @pytest.mark.parametrize(
        "value", [ZERO, ONE, BigDouble(-2.5, 10), BigDouble(1.23, 45)], ids=str
    )
    def test_format_round_trip_property(self, value: BigDouble) -> None:
        assert BigDouble.parse(str(value)) == value


# =============================================================================
# ФУНКЦИИ
# =============================================================================


class TestLogarithms:
    """Тесты логарифмов"""

    def test_log10(self) -> None:
        assert BigDouble(1.0, 500).log10() == 500.0
        assert BigDouble(1234.0).log10() == pytest.approx(math.log10(1234.0))

    def test_log10_of_negative_is_nan(self) -> None:
        assert math.isnan(BigDouble(-5.0).log10())

    def test_abs_log10(self) -> None:
        assert BigDouble(-1.0, 7).abs_log10() == 7.0

    def test_ln_and_log2(self) -> None:
        assert BigDouble(math.e).ln() == pytest.approx(1.0)
        assert BigDouble(8.0).log2() == pytest.approx(3.0)
        assert ONE.log2() == 0.0
        assert math.isnan(BigDouble(-1.0).ln())

    def test_log_base(self) -> None:
        assert BigDouble(81.0).log(3) == pytest.approx(4.0)
        assert BigDouble(1.0, 100).log(BigDouble(10.0)) == pytest.approx(100.0)


class TestPower:
    """Тесты pow / sqrt / exp / factorial"""

    def test_pow(self) -> None:
        result = BigDouble(3.0, 2).pow(2)
        assert result.mantissa == pytest.approx(9.0)
        assert result.exponent == 4

    def test_pow_zero_base(self) -> None:
        assert ZERO.pow(0) == ONE
        assert ZERO.pow(5) == ZERO

    def test_pow_negative_base_integer_power(self) -> None:
        assert BigDouble(-2.0).pow(3).to_double() == pytest.approx(-8.0)
        assert BigDouble(-2.0).pow(2).to_double() == pytest.approx(4.0)

    def test_pow_negative_base_fractional_power_is_nan(self) -> None:
        assert BigDouble(-2.0).pow(0.5).is_nan

    def test_pow_fractional(self) -> None:
        assert BigDouble(4.0).pow(0.5).to_double() == pytest.approx(2.0)

    def test_pow_nan(self) -> None:
        assert NAN.pow(2).is_nan
        assert ONE.pow(math.nan).is_nan

    def test_pow_beyond_double_range(self) -> None:
        result = BigDouble(1.0, 200).pow(5)
        assert result.exponent == 1000
        assert result.to_double() == math.inf

    def test_sqrt_odd_exponent(self) -> None:
        result = BigDouble(1e5).sqrt()
        assert result.mantissa == pytest.approx(3.16227766)
        assert result.exponent == 2

    def test_sqrt_even_exponent(self) -> None:
        result = BigDouble(4.0, 2).sqrt()
        assert result.mantissa == pytest.approx(2.0)
        assert result.exponent == 1

    def test_sqrt_non_positive_is_zero(self) -> None:
        assert BigDouble(-4.0).sqrt() == ZERO
        assert ZERO.sqrt() == ZERO

    def test_exp_small(self) -> None:
        assert ONE.exp().to_double() == pytest.approx(math.e)

    def test_exp_large(self) -> None:
        result = BigDouble(1000.0).exp()
        assert result.exponent == 434
        assert result.mantissa == pytest.approx(1.97007, rel=1e-5)

    def test_factorial(self) -> None:
        assert BigDouble(5.0).factorial().to_double() == pytest.approx(120.0, rel=1e-4)
        assert BigDouble(10.0).factorial().to_double() == pytest.approx(3628800.0, rel=1e-4)

    def test_factorial_large(self) -> None:
        result = BigDouble(1000.0).factorial()
        assert result.exponent == 2567
        assert result.mantissa == pytest.approx(4.0239, rel=1e-3)

    def test_factorial_negative_is_nan(self) -> None:
        assert BigDouble(-1.0).factorial().is_nan


class TestRounding:
    """Тесты floor / ceil / round"""

    def test_floor(self) -> None:
        assert BigDouble(2.7).floor() == BigDouble(2.0)
        assert BigDouble(-2.3).floor() == BigDouble(-3.0)
        assert BigDouble(0.5).floor() == ZERO
        assert BigDouble(-0.5).floor() == NEGATIVE_ONE

    def test_ceil(self) -> None:
        assert BigDouble(2.1).ceil() == BigDouble(3.0)
        assert BigDouble(0.5).ceil() == ONE
        assert BigDouble(-0.5).ceil() == ZERO

    def test_round_half_to_even(self) -> None:
        assert BigDouble(2.5).round() == BigDouble(2.0)
        assert BigDouble(3.5).round() == BigDouble(4.0)
        assert BigDouble(0.6).round() == ONE
        assert BigDouble(0.4).round() == ZERO

    def test_huge_values_already_integer(self) -> None:
        value = BigDouble(1.5, 10000)
        assert value.floor() is value
        assert value.ceil() is value
        assert value.round() is value

    def test_nan_unchanged(self) -> None:
        assert NAN.floor().is_nan
        assert NAN.round().is_nan

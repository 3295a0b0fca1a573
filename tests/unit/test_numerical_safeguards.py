"""
Тесты для модуля Numerical Safeguards

Проверяет:
1. IEEE-754 деление (±inf / NaN вместо ZeroDivisionError)
2. pow/exp с переполнением в inf
3. Логарифмы неположительных значений
4. Точное сравнение float с NaN == NaN
5. Epsilon-сравнения и привязку к целому
"""

import math

import pytest

from src.core.math.numerical_safeguards import (
    EPS_FLOAT_COMPARE_ABS,
    EPS_FLOAT_COMPARE_REL,
    EPS_INTEGER_SNAP,
    float_equals,
    ieee_divide,
    ieee_exp,
    ieee_pow,
    is_close,
    is_valid_float,
    safe_log,
    safe_log10,
    snap_to_integer,
)

# =============================================================================
# ТЕСТЫ IEEE-754 АРИФМЕТИКИ
# =============================================================================


class TestIeeeDivide:
    """Тесты для ieee_divide"""

    def test_regular_division(self) -> None:
        assert ieee_divide(10.0, 4.0) == 2.5

    def test_positive_by_zero_is_inf(self) -> None:
        assert ieee_divide(1.0, 0.0) == math.inf

    def test_negative_by_zero_is_minus_inf(self) -> None:
        assert ieee_divide(-1.0, 0.0) == -math.inf

    def test_sign_of_negative_zero_respected(self) -> None:
        """x / -0.0 меняет знак бесконечности"""
        assert ieee_divide(1.0, -0.0) == -math.inf
        assert ieee_divide(-1.0, -0.0) == math.inf

    def test_zero_by_zero_is_nan(self) -> None:
        assert math.isnan(ieee_divide(0.0, 0.0))

    def test_nan_by_zero_is_nan(self) -> None:
        assert math.isnan(ieee_divide(math.nan, 0.0))


class TestIeeePow:
    """Тесты для ieee_pow"""

    def test_regular_power(self) -> None:
        assert ieee_pow(2.0, 10.0) == 1024.0

    def test_overflow_is_inf(self) -> None:
        assert ieee_pow(10.0, 400.0) == math.inf

    def test_negative_base_odd_power_overflow_is_minus_inf(self) -> None:
        assert ieee_pow(-10.0, 401.0) == -math.inf

    def test_negative_base_even_power_overflow_is_inf(self) -> None:
        assert ieee_pow(-10.0, 400.0) == math.inf

    def test_zero_to_negative_power_is_inf(self) -> None:
        assert ieee_pow(0.0, -1.0) == math.inf
        assert ieee_pow(-0.0, -1.0) == -math.inf
        assert ieee_pow(-0.0, -2.0) == math.inf

    def test_negative_base_fractional_power_is_nan(self) -> None:
        assert math.isnan(ieee_pow(-2.0, 0.5))


class TestIeeeExp:
    """Тесты для ieee_exp"""

    def test_regular_exp(self) -> None:
        assert ieee_exp(0.0) == 1.0

    def test_overflow_is_inf(self) -> None:
        assert ieee_exp(1000.0) == math.inf

    def test_underflow_is_zero(self) -> None:
        assert ieee_exp(-1000.0) == 0.0


class TestSafeLog:
    """Тесты для safe_log10 / safe_log"""

    def test_log10_of_power_of_ten(self) -> None:
        assert safe_log10(100.0) == pytest.approx(2.0)

    def test_log10_of_zero_is_minus_inf(self) -> None:
        assert safe_log10(0.0) == -math.inf

    def test_log10_of_negative_is_nan(self) -> None:
        assert math.isnan(safe_log10(-5.0))

    def test_log10_of_nan_is_nan(self) -> None:
        assert math.isnan(safe_log10(math.nan))

    def test_ln_of_e(self) -> None:
        assert safe_log(math.e) == pytest.approx(1.0)

    def test_ln_of_zero_and_negative(self) -> None:
        assert safe_log(0.0) == -math.inf
        assert math.isnan(safe_log(-1.0))


# =============================================================================
# ТЕСТЫ ПРОВЕРОК И СРАВНЕНИЙ
# =============================================================================


class TestChecks:
    """Тесты для is_valid_float"""

    def test_is_valid_float(self) -> None:
        assert is_valid_float(1.0)
        assert not is_valid_float(math.nan)
        assert not is_valid_float(math.inf)
        assert not is_valid_float(-math.inf)


class TestFloatEquals:
    """Тесты для float_equals (семантика Equals: NaN равен NaN)"""

    def test_equal_values(self) -> None:
        assert float_equals(1.5, 1.5)

    def test_nan_equals_nan(self) -> None:
        assert float_equals(math.nan, math.nan)

    def test_nan_not_equal_to_number(self) -> None:
        assert not float_equals(math.nan, 0.0)
        assert not float_equals(0.0, math.nan)

    def test_no_tolerance(self) -> None:
        """Точное сравнение: 0.1 + 0.2 != 0.3"""
        assert not float_equals(0.1 + 0.2, 0.3)

    def test_signed_zeros_equal(self) -> None:
        assert float_equals(0.0, -0.0)


class TestIsClose:
    """Тесты для is_close"""

    def test_default_tolerances(self) -> None:
        assert EPS_FLOAT_COMPARE_REL == 1e-9
        assert EPS_FLOAT_COMPARE_ABS == 1e-12

    def test_close_values(self) -> None:
        assert is_close(1.0, 1.0 + 1e-10)
        assert is_close(0.1 + 0.2, 0.3)

    def test_distant_values(self) -> None:
        assert not is_close(1.0, 1.1)

    def test_absolute_tolerance_near_zero(self) -> None:
        assert is_close(0.0, 1e-13)
        assert not is_close(0.0, 1e-11)

    def test_custom_tolerance(self) -> None:
        assert is_close(100.0, 101.0, rel_tol=0.02)


class TestSnapToInteger:
    """Тесты для snap_to_integer"""

    def test_round_trip_error_snapped(self) -> None:
        assert snap_to_integer(1499.9999999999998) == 1500.0

    def test_fraction_preserved(self) -> None:
        assert snap_to_integer(1.5) == 1.5

    def test_threshold(self) -> None:
        assert EPS_INTEGER_SNAP == 1e-10
        assert snap_to_integer(7.0 + 1e-11) == 7.0
        assert snap_to_integer(7.0 + 1e-9) == 7.0 + 1e-9

    def test_negative_values(self) -> None:
        assert snap_to_integer(-41.99999999999999) == -42.0

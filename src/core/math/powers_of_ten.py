"""
Powers Of Ten — Process-wide lookup table 10^k

Таблица степеней десяти для всего десятичного диапазона экспонент double:
k ∈ [DOUBLE_EXP_MIN + 1, DOUBLE_EXP_MAX] = [-323, 308].

Значения получены разбором литералов "1e<k>" (корректно округлённые),
а не повторным умножением, поэтому ошибка не накапливается.

Жизненный цикл:
- init()    — заполняет таблицу один раз (повторные вызовы — no-op)
- lookup()  — O(1) чтение в диапазоне, медленный путь 10.0 ** k вне его
- dispose() — освобождает таблицу (безопасно без предварительного init)
- scope()   — context manager с подсчётом ссылок

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. После init() таблица только читается — конкурентные lookup() без блокировок
2. init() сериализован через lock — конкурентная первая инициализация безопасна
3. lookup() никогда не выбрасывает OverflowError (переполнение → inf)
"""

import logging
import threading
from contextlib import contextmanager
from typing import Final, Iterator

logger = logging.getLogger(__name__)

# =============================================================================
# ДИАПАЗОН ЭКСПОНЕНТ DOUBLE
# =============================================================================

# Десятичная экспонента наименьшего субнормального double (~4.94e-324)
DOUBLE_EXP_MIN: Final[int] = -324

# Десятичная экспонента наибольшего конечного double (~1.79e308)
DOUBLE_EXP_MAX: Final[int] = 308

# Индекс 10^0 в таблице
INDEX_OF_ZERO: Final[int] = -DOUBLE_EXP_MIN - 1

# Количество элементов таблицы: 10^-323 .. 10^308
TABLE_SIZE: Final[int] = DOUBLE_EXP_MAX - DOUBLE_EXP_MIN


# =============================================================================
# CACHE
# =============================================================================


class PowersOfTenCache:
    """
    Таблица 10^k с явным жизненным циклом init/dispose.

    Если lookup() вызывается до init(), таблица инициализируется лениво.
    """

    def __init__(self) -> None:
        self._powers: tuple[float, ...] | None = None
        self._lock = threading.Lock()
        self._scope_depth = 0

    @property
    def is_initialized(self) -> bool:
        """True если таблица заполнена."""
        return self._powers is not None

    def init(self) -> tuple[float, ...]:
        """
        Заполнение таблицы (идемпотентно).

        Повторный вызов при заполненной таблице ничего не делает.

        Returns:
            Заполненная таблица; остаётся валидной после конкурентного dispose()
        """
        powers = self._powers
        if powers is not None:
            return powers

        with self._lock:
            if self._powers is not None:
                return self._powers

            powers = tuple(float(f"1e{i - INDEX_OF_ZERO}") for i in range(TABLE_SIZE))
            self._powers = powers

        logger.debug(
            "powers_of_ten_initialized",
            extra={"size": TABLE_SIZE, "min_exp": DOUBLE_EXP_MIN + 1, "max_exp": DOUBLE_EXP_MAX},
        )
        return powers

    def dispose(self) -> None:
        """Освобождение таблицы. Безопасно, если init() не вызывался."""
        with self._lock:
            if self._powers is None:
                return
            self._powers = None

        logger.debug("powers_of_ten_disposed")

    def lookup(self, power: int) -> float:
        """
        Значение 10^power.

        Args:
            power: Десятичная экспонента (любое целое)

        Returns:
            - Значение из таблицы для power ∈ [-323, 308]
            - 10.0 ** power вне диапазона (0.0 при underflow, inf при overflow)
        """
        powers = self._powers
        if powers is None:
            powers = self.init()

        index = INDEX_OF_ZERO + power
        if index < 0 or index >= len(powers):
            return _slow_pow10(power)

        return powers[index]

    @contextmanager
    def scope(self) -> Iterator["PowersOfTenCache"]:
        """
        Владение таблицей в пределах блока.

        Вложенные scope() разделяют одну таблицу; она освобождается при выходе
        из самого внешнего блока.

        Examples:
            >>> with POWERS_OF_TEN.scope() as cache:
            ...     cache.lookup(3)
            1000.0
        """
        with self._lock:
            self._scope_depth += 1
        self.init()
        try:
            yield self
        finally:
            with self._lock:
                self._scope_depth -= 1
                release = self._scope_depth == 0
            if release:
                self.dispose()


def _slow_pow10(power: int) -> float:
    try:
        return 10.0 ** power
    except OverflowError:
        return float("inf")


# Глобальный экземпляр таблицы
POWERS_OF_TEN = PowersOfTenCache()


def pow10(power: int) -> float:
    """10^power через глобальную таблицу."""
    return POWERS_OF_TEN.lookup(power)

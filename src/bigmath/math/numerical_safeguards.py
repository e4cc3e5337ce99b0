"""
Numerical Safeguards — точность, ошибки и границы итераций

Модуль задаёт общую конфигурацию движка произвольной точности:
- Точность по умолчанию и guard-биты для промежуточных вычислений
- Разрешение precision=0/None в точность по умолчанию
- Таксономию ошибок (InvalidPrecision, DomainError, LengthMismatch)
- Верхние границы числа итераций рядов и метода Ньютона
- try_compute: адаптер "значение + индикатор ошибки"

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. precision=0 всегда означает DEFAULT_PRECISION (единая константа)
2. Отрицательная или нецелая точность никогда не принимается молча
3. Любой ряд/итерация ограничены сверху функцией от точности
4. Каждая ошибка домена несёт определённое fallback-значение
"""

import logging
from typing import Any, Callable, Final

logger = logging.getLogger(__name__)

# =============================================================================
# ПАРАМЕТРЫ ТОЧНОСТИ
# =============================================================================

# Точность по умолчанию (бит мантиссы), используется при precision=0
DEFAULT_PRECISION: Final[int] = 256

# Минимальная допустимая явная точность
MIN_PRECISION: Final[int] = 1

# Дополнительные биты для промежуточных вычислений перед финальным округлением
GUARD_BITS: Final[int] = 32

# Стартовая точность метода Ньютона (начальное приближение берётся из float)
NEWTON_START_PRECISION: Final[int] = 48

# Максимум повторов редукции аргумента при катастрофическом сокращении
MAX_REDUCTION_RETRIES: Final[int] = 3


# =============================================================================
# ОШИБКИ
# =============================================================================


class BigMathError(ValueError):
    """
    Базовая ошибка движка произвольной точности.

    Attributes:
        fallback: Определённое значение, которое вызывающий код может
            использовать вместо результата (например, NaN или inf)
    """

    def __init__(self, message: str, fallback: Any = None):
        super().__init__(message)
        self.fallback = fallback


class InvalidPrecision(BigMathError):
    """Явно заданная точность неположительна или не является целым числом."""


class DomainError(BigMathError):
    """Аргумент вне математической области определения функции."""


class LengthMismatch(BigMathError):
    """Последовательности в попарной операции имеют разную длину."""


# =============================================================================
# РАЗРЕШЕНИЕ ТОЧНОСТИ
# =============================================================================


def resolve_precision(prec: int | None) -> int:
    """
    Разрешить запрошенную точность.

    Args:
        prec: Точность в битах; 0 или None означают точность по умолчанию

    Returns:
        Положительная точность в битах

    Raises:
        InvalidPrecision: Если prec отрицательна или не является int

    Examples:
        >>> resolve_precision(0)
        256
        >>> resolve_precision(None)
        256
        >>> resolve_precision(64)
        64
    """
    if prec is None:
        return DEFAULT_PRECISION
    # bool является подклассом int, но не точностью
    if isinstance(prec, bool) or not isinstance(prec, int):
        raise InvalidPrecision(f"precision must be int, got {type(prec).__name__}")
    if prec == 0:
        return DEFAULT_PRECISION
    if prec < MIN_PRECISION:
        raise InvalidPrecision(f"precision must be non-negative, got {prec}")
    return prec


def validate_precision(prec: int) -> int:
    """
    Строгая валидация явной точности (0 не допускается).

    Используется там, где точность — это цель округления, а не пожелание
    вызывающего кода (round_to_precision).

    Raises:
        InvalidPrecision: Если prec <= 0 или не является int
    """
    if isinstance(prec, bool) or not isinstance(prec, int):
        raise InvalidPrecision(f"precision must be int, got {type(prec).__name__}")
    if prec < MIN_PRECISION:
        raise InvalidPrecision(f"precision must be positive, got {prec}")
    return prec


def working_precision(prec: int | None, extra: int = GUARD_BITS) -> int:
    """Рабочая точность промежуточных вычислений: resolve(prec) + extra."""
    return resolve_precision(prec) + max(0, extra)


# =============================================================================
# ГРАНИЦЫ ИТЕРАЦИЙ
# =============================================================================


def series_term_limit(prec: int) -> int:
    """
    Верхняя граница числа членов степенного ряда.

    Ряды вызываются для аргументов с |x| <= 1 (после редукции), поэтому
    каждый член даёт минимум один бит точности.
    """
    return 2 * prec + 64


def newton_iteration_limit(prec: int) -> int:
    """
    Верхняя граница итераций метода Ньютона.

    Квадратичная сходимость удваивает число верных бит за шаг; запас
    покрывает плохое начальное приближение.
    """
    return max(prec, 1).bit_length() + 16


# =============================================================================
# ЗНАЧЕНИЕ + ИНДИКАТОР ОШИБКИ
# =============================================================================


def try_compute(func: Callable[..., Any], *args: Any, **kwargs: Any) -> tuple[Any, BigMathError | None]:
    """
    Выполнить вычисление, вернув пару (результат, ошибка).

    Для вызывающего кода, который предпочитает проверять индикатор ошибки,
    а не ловить исключения. При BigMathError возвращается fallback ошибки.

    Args:
        func: Функция движка (например, sqrt, ln)
        *args: Позиционные аргументы func
        **kwargs: Именованные аргументы func

    Returns:
        (result, None) при успехе, (fallback, error) при ошибке

    Examples:
        >>> value, err = try_compute(sqrt, -1)
        >>> err is not None and value.is_nan()
        True
    """
    try:
        return func(*args, **kwargs), None
    except BigMathError as exc:
        logger.debug("%s failed: %s (fallback=%r)", getattr(func, "__name__", func), exc, exc.fallback)
        return exc.fallback, exc

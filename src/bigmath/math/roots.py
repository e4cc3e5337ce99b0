"""
Roots — квадратный, кубический и n-й корень методом Ньютона

Итерация y <- ((n-1)*y + x / y^(n-1)) / n стартует с приближения из
double и удваивает рабочую точность на каждом шаге: число шагов растёт
как log2(prec), а не фиксировано, поэтому высокая точность не обрезается.

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. sqrt(x < 0) — DomainError (fallback = NaN)
2. Чётный корень из отрицательного — DomainError
3. Нечётный корень сохраняет знак: cbrt(-8) = -2
4. Число итераций ограничено newton_iteration_limit(prec)
"""

import math

from bigmath.math.bigfloat import BigFloat, Number, add, div, mul, sub, to_bigfloat
from bigmath.math.numerical_safeguards import (
    DomainError,
    GUARD_BITS,
    NEWTON_START_PRECISION,
    newton_iteration_limit,
    resolve_precision,
)
from bigmath.math.scalar_utils import power_int

# Бит, извлекаемых из мантиссы для начального приближения через double
_SEED_BITS = 53


def _precision_ladder(work: int) -> list[int]:
    """Последовательность точностей ..., work/4, work/2, work для Ньютона."""
    ladder = []
    q = work
    while q > NEWTON_START_PRECISION:
        ladder.append(q)
        q = q // 2 + 1
    ladder.append(NEWTON_START_PRECISION)
    ladder.reverse()
    return ladder


def _seed(x: BigFloat, n: int) -> BigFloat:
    """Начальное приближение x^(1/n) через логарифм в double (без переполнения)."""
    man, exp = x.mant_exp()
    bits = man.bit_length()
    drop = max(0, bits - _SEED_BITS)
    log2_x = math.log2(man >> drop) + drop + exp
    g = log2_x / n
    whole = math.floor(g)
    frac_scaled = int(2.0 ** (g - whole) * (1 << 52))
    return BigFloat.from_man_exp(frac_scaled, whole - 52, NEWTON_START_PRECISION)


def _newton_step(y: BigFloat, x: BigFloat, n: int, prec: int) -> BigFloat:
    if n == 2:
        return div(add(y, div(x, y, prec), prec), 2, prec)
    quotient = div(x, power_int(y, n - 1, prec), prec)
    return div(add(mul(y, n - 1, prec), quotient, prec), n, prec)


def _newton_root(x: BigFloat, n: int, prec: int) -> BigFloat:
    """x^(1/n) для конечного x > 0 с точностью ~prec бит (на prec + GUARD_BITS)."""
    work = prec + GUARD_BITS
    y = _seed(x, n)
    for q in _precision_ladder(work):
        y = _newton_step(y, x, n, q)

    # Доводка на полной точности до стабилизации
    for _ in range(newton_iteration_limit(work)):
        nxt = _newton_step(y, x, n, work)
        delta = sub(nxt, y, work)
        y = nxt
        if delta.is_zero() or delta.exponent() <= y.exponent() - work + 2:
            break
    return y


# =============================================================================
# ПУБЛИЧНЫЕ ФУНКЦИИ
# =============================================================================


def sqrt(x: Number, prec: int | None = 0) -> BigFloat:
    """
    Квадратный корень на точности prec.

    Args:
        x: Неотрицательный аргумент
        prec: Точность результата (0 = по умолчанию)

    Returns:
        sqrt(x); sqrt(+inf) = +inf, sqrt(NaN) = NaN

    Raises:
        DomainError: Если x < 0 (fallback = NaN)

    Examples:
        >>> sqrt(4, 64)
        BigFloat('2.0', prec=64)
    """
    p = resolve_precision(prec)
    value = to_bigfloat(x, p)
    if value.is_nan():
        return BigFloat.nan(p)
    if value.sign() < 0:
        raise DomainError(f"sqrt of negative value {value}", fallback=BigFloat.nan(p))
    if value.is_zero() or value.is_inf():
        return BigFloat(value, p)
    return _newton_root(value, 2, p).with_precision(p)


def nth_root(x: Number, n: int, prec: int | None = 0) -> BigFloat:
    """
    Вещественный корень степени n (n >= 1).

    Для нечётного n корень из отрицательного числа отрицателен.

    Raises:
        DomainError: Если n < 1 или n чётное при x < 0 (fallback = NaN)
    """
    p = resolve_precision(prec)
    if n < 1:
        raise DomainError(f"root degree must be >= 1, got {n}", fallback=BigFloat.nan(p))
    value = to_bigfloat(x, p)
    if n == 1 or value.is_nan() or value.is_zero():
        return BigFloat(value, p)
    if value.sign() < 0:
        if n % 2 == 0:
            raise DomainError(f"even root of negative value {value}", fallback=BigFloat.nan(p))
        return -nth_root(-value, n, p)
    if value.is_inf():
        return BigFloat(value, p)
    if n == 2:
        return sqrt(value, p)
    return _newton_root(value, n, p).with_precision(p)


def cbrt(x: Number, prec: int | None = 0) -> BigFloat:
    """Кубический корень (знак сохраняется: cbrt(-8) = -2)."""
    return nth_root(x, 3, prec)

"""
Trigonometric — тригонометрия произвольной точности

Прямые функции (sin, cos, tan) редуцируют аргумент по π/2, вычисленному
с точностью, растущей с порядком аргумента: x = k*(π/2) + r, |r| <= π/4.
При сокращении (r много меньше x) редукция повторяется с дополнительными
битами. Затем ряд Тейлора для sin r / cos r выбирается по квадранту k mod 4.

Обратные функции (atan, atan2, asin, acos) сводятся к atan: симметрия,
инверсия для |x| > 1, понижение аргумента формулой половинного угла
x / (1 + √(1 + x²)) и ряд Тейлора.

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. sin² + cos² ≈ 1 для любых конечных аргументов, включая большие
2. sin/cos/tan(±inf) — DomainError (fallback = NaN)
3. tan у полюса — DomainError, а не деление на ноль
4. asin/acos(|x| > 1) — DomainError
"""

import logging
import math

from bigmath.math.bigfloat import BigFloat, Number, add, div, mul, sub, to_bigfloat
from bigmath.math.constants import half_pi, pi
from bigmath.math.numerical_safeguards import (
    DomainError,
    GUARD_BITS,
    MAX_REDUCTION_RETRIES,
    resolve_precision,
    series_term_limit,
)
from bigmath.math.roots import sqrt

logger = logging.getLogger(__name__)


# =============================================================================
# РЕДУКЦИЯ АРГУМЕНТА
# =============================================================================


def reduce_half_pi(x: BigFloat, prec: int) -> tuple[int, BigFloat]:
    """
    Редукция x = k*(π/2) + r с |r| <= π/4 и ~prec верными битами в r.

    Args:
        x: Конечный аргумент
        prec: Требуемая относительная точность r

    Returns:
        (k mod 4, r)
    """
    if abs(x) < 0.75:
        return 0, x
    mag = max(0, x.exponent())
    extra = 8
    for attempt in range(MAX_REDUCTION_RETRIES + 1):
        rp = prec + mag + extra + 2
        hp = half_pi(rp)
        k = div(x, hp, rp).nearest_int()
        r = sub(x, mul(k, hp, rp), rp)
        if r.is_zero():
            needed = rp + prec
        else:
            needed = prec + mag + 2 - r.exponent()
        if rp >= needed:
            return k % 4, r
        logger.debug("argument reduction lost bits: x=%s attempt=%d need=%d have=%d", x, attempt, needed, rp)
        extra = needed - prec - mag
    return k % 4, r


def _sin_taylor(r: BigFloat, prec: int) -> BigFloat:
    r2 = mul(r, r, prec)
    term = r
    total = r
    for n in range(1, series_term_limit(prec)):
        term = -div(mul(term, r2, prec), (2 * n) * (2 * n + 1), prec)
        total = add(total, term, prec)
        if term.is_zero() or term.exponent() < total.exponent() - prec - 1:
            break
    return total


def _cos_taylor(r: BigFloat, prec: int) -> BigFloat:
    r2 = mul(r, r, prec)
    term = BigFloat.one(prec)
    total = BigFloat.one(prec)
    for n in range(1, series_term_limit(prec)):
        term = -div(mul(term, r2, prec), (2 * n - 1) * (2 * n), prec)
        total = add(total, term, prec)
        if term.is_zero() or term.exponent() < total.exponent() - prec - 1:
            break
    return total


def _check_finite_angle(value: BigFloat, p: int, name: str) -> None:
    if value.is_inf():
        raise DomainError(f"{name} of infinite angle", fallback=BigFloat.nan(p))


# =============================================================================
# ПРЯМЫЕ ФУНКЦИИ
# =============================================================================


def sincos(x: Number, prec: int | None = 0) -> tuple[BigFloat, BigFloat]:
    """
    Одновременное вычисление (sin x, cos x) с общей редукцией аргумента.

    Raises:
        DomainError: Для бесконечного аргумента
    """
    p = resolve_precision(prec)
    value = to_bigfloat(x, p)
    if value.is_nan():
        return BigFloat.nan(p), BigFloat.nan(p)
    _check_finite_angle(value, p, "sincos")
    if value.is_zero():
        return BigFloat(value, p), BigFloat.one(p)

    work = p + GUARD_BITS
    quadrant, r = reduce_half_pi(value, work)
    s = _sin_taylor(r, work)
    c = _cos_taylor(r, work)
    if quadrant == 1:
        s, c = c, -s
    elif quadrant == 2:
        s, c = -s, -c
    elif quadrant == 3:
        s, c = -c, s
    return s.with_precision(p), c.with_precision(p)


def sin(x: Number, prec: int | None = 0) -> BigFloat:
    """
    Синус на точности prec.

    Examples:
        >>> sin(0, 64).is_zero()
        True
    """
    p = resolve_precision(prec)
    value = to_bigfloat(x, p)
    _check_finite_angle(value, p, "sin")
    return sincos(value, p)[0]


def cos(x: Number, prec: int | None = 0) -> BigFloat:
    """
    Косинус на точности prec.

    Examples:
        >>> cos(0, 64)
        BigFloat('1.0', prec=64)
    """
    p = resolve_precision(prec)
    value = to_bigfloat(x, p)
    _check_finite_angle(value, p, "cos")
    return sincos(value, p)[1]


def tan(x: Number, prec: int | None = 0) -> BigFloat:
    """
    Тангенс sin/cos на точности prec.

    Полюс: если |cos x| < 2^(max(E, 1) - prec + 1), где E — двоичный
    порядок x, косинус неотличим от нуля на разрешении аргумента.

    Raises:
        DomainError: У полюса или для бесконечного аргумента (fallback = NaN)
    """
    p = resolve_precision(prec)
    value = to_bigfloat(x, p)
    _check_finite_angle(value, p, "tan")
    if value.is_nan():
        return BigFloat.nan(p)
    if value.is_zero():
        return BigFloat(value, p)

    work = p + GUARD_BITS
    s, c = sincos(value, work)
    # Аргумент считается уже округлённым к prec: порог равен его ulp, даже
    # если x точен (при |x| ~ 2^40 и prec=64 полюс объявляется при |cos x| < 2^-23)
    pole_exponent = max(value.exponent(), 1) - p + 1
    if c.is_zero() or c.exponent() <= pole_exponent:
        raise DomainError(f"tan pole at {value}", fallback=BigFloat.nan(p))
    return div(s, c, p)


# =============================================================================
# ОБРАТНЫЕ ФУНКЦИИ
# =============================================================================


def _atan_series(a: BigFloat, prec: int) -> BigFloat:
    a2 = mul(a, a, prec)
    power = a
    total = a
    k = 1
    for n in range(1, series_term_limit(prec)):
        power = -mul(power, a2, prec)
        k += 2
        term = div(power, k, prec)
        total = add(total, term, prec)
        if term.is_zero() or term.exponent() < total.exponent() - prec - 1:
            break
    return total


def atan(x: Number, prec: int | None = 0) -> BigFloat:
    """
    Арктангенс на точности prec, результат в (-π/2, π/2).

    Examples:
        >>> atan(0, 64).is_zero()
        True
    """
    p = resolve_precision(prec)
    value = to_bigfloat(x, p)
    if value.is_nan():
        return BigFloat.nan(p)
    if value.is_inf():
        return half_pi(p) if value.sign() > 0 else -half_pi(p)
    if value.is_zero():
        return BigFloat(value, p)

    work = p + GUARD_BITS
    negative = value.sign() < 0
    a = abs(value)
    invert = a > 1
    if invert:
        a = div(1, a, work)

    # atan(a) = 2 * atan(a / (1 + sqrt(1 + a^2)))
    target = -(math.isqrt(work) // 2)
    halvings = 0
    while not a.is_zero() and a.exponent() > target and halvings <= -target + 2:
        a = div(a, add(1, sqrt(add(1, mul(a, a, work), work), work), work), work)
        halvings += 1

    result = _atan_series(a, work).ldexp(halvings)
    if invert:
        result = sub(half_pi(work), result, work)
    if negative:
        result = -result
    return result.with_precision(p)


def atan2(y: Number, x: Number, prec: int | None = 0) -> BigFloat:
    """
    Угол точки (x, y) с учётом квадранта, результат в [-π, π].

    atan2(0, 0) = 0.
    """
    p = resolve_precision(prec)
    yv = to_bigfloat(y, p)
    xv = to_bigfloat(x, p)
    if yv.is_nan() or xv.is_nan():
        return BigFloat.nan(p)

    work = p + GUARD_BITS
    if yv.is_inf() or xv.is_inf():
        if yv.is_inf() and xv.is_inf():
            angle = pi(work).ldexp(-2) if xv.sign() > 0 else mul(3, pi(work).ldexp(-2), work)
        elif yv.is_inf():
            angle = half_pi(work)
        else:
            angle = BigFloat.zero(work) if xv.sign() > 0 else pi(work)
        return (-angle if yv.sign() < 0 else angle).with_precision(p)

    if xv.is_zero():
        if yv.is_zero():
            return BigFloat.zero(p)
        return half_pi(p) if yv.sign() > 0 else -half_pi(p)

    base = atan(div(yv, xv, work), work)
    if xv.sign() > 0:
        return base.with_precision(p)
    if yv.sign() >= 0:
        return add(base, pi(work), p)
    return sub(base, pi(work), p)


def _check_unit_interval(value: BigFloat, p: int, name: str) -> None:
    if value.is_inf() or abs(value) > 1:
        raise DomainError(f"{name} argument outside [-1, 1]: {value}", fallback=BigFloat.nan(p))


def asin(x: Number, prec: int | None = 0) -> BigFloat:
    """
    Арксинус: atan(x / √((1-x)(1+x))).

    Raises:
        DomainError: Если |x| > 1
    """
    p = resolve_precision(prec)
    value = to_bigfloat(x, p)
    if value.is_nan():
        return BigFloat.nan(p)
    _check_unit_interval(value, p, "asin")
    if value.is_zero():
        return BigFloat(value, p)
    if abs(value) == 1:
        return half_pi(p) if value.sign() > 0 else -half_pi(p)

    work = p + GUARD_BITS
    exact = max(work, value.precision)
    denominator = sqrt(mul(sub(1, value, exact), add(1, value, exact), work), work)
    return atan(div(value, denominator, work), p)


def acos(x: Number, prec: int | None = 0) -> BigFloat:
    """
    Арккосинус: 2 * atan(√((1-x)/(1+x))), результат в [0, π].

    Raises:
        DomainError: Если |x| > 1
    """
    p = resolve_precision(prec)
    value = to_bigfloat(x, p)
    if value.is_nan():
        return BigFloat.nan(p)
    _check_unit_interval(value, p, "acos")
    if value == 1:
        return BigFloat.zero(p)
    if value == -1:
        return pi(p)

    work = p + GUARD_BITS
    exact = max(work, value.precision)
    ratio = div(sub(1, value, exact), add(1, value, exact), work)
    return atan(sqrt(ratio, work), work).ldexp(1).with_precision(p)

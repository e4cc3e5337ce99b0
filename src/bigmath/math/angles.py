"""
Angles — нормализация и перевод углов

- deg_norm: градусы в [0, 360)
- rad_norm: радианы в [-π, π]
- rad_norm_0_2pi: радианы в [0, 2π)
- deg_to_rad / rad_to_deg

Редукция по 2π выполняется с точностью prec + GUARD_BITS + порядок x,
так что большие углы не теряют точность.
"""

from bigmath.math.bigfloat import BigFloat, Number, add, div, mul, sub, to_bigfloat
from bigmath.math.constants import pi, two_pi
from bigmath.math.numerical_safeguards import DomainError, GUARD_BITS, resolve_precision

DEGREES_FULL_TURN = 360
DEGREES_HALF_TURN = 180


def _finite_angle(x: Number, p: int) -> BigFloat | None:
    """Аргумент или None для NaN; бесконечность — DomainError."""
    value = to_bigfloat(x, p)
    if value.is_nan():
        return None
    if value.is_inf():
        raise DomainError("cannot normalize infinite angle", fallback=BigFloat.nan(p))
    return value


def _reduction_precision(value: BigFloat, p: int) -> int:
    return max(p + GUARD_BITS + max(0, value.exponent()), value.precision + GUARD_BITS)


def deg_norm(x: Number, prec: int | None = 0) -> BigFloat:
    """
    Нормализовать угол в градусах к [0, 360).

    Examples:
        >>> deg_norm(-90, 64)
        BigFloat('270.0', prec=64)
    """
    p = resolve_precision(prec)
    value = _finite_angle(x, p)
    if value is None:
        return BigFloat.nan(p)
    work = _reduction_precision(value, p)
    turns = div(value, DEGREES_FULL_TURN, work).floor()
    r = sub(value, mul(turns, DEGREES_FULL_TURN, work), work)
    if r < 0:
        r = add(r, DEGREES_FULL_TURN, work)
    r = r.with_precision(p)
    if r >= DEGREES_FULL_TURN:
        return BigFloat.zero(p)
    return r


def rad_norm(x: Number, prec: int | None = 0) -> BigFloat:
    """Нормализовать угол в радианах к [-π, π]."""
    p = resolve_precision(prec)
    value = _finite_angle(x, p)
    if value is None:
        return BigFloat.nan(p)
    work = _reduction_precision(value, p)
    turn = two_pi(work)
    k = div(value, turn, work).nearest_int()
    if k == 0:
        return BigFloat(value, p)
    return sub(value, mul(k, turn, work), work).with_precision(p)


def rad_norm_0_2pi(x: Number, prec: int | None = 0) -> BigFloat:
    """Нормализовать угол в радианах к [0, 2π)."""
    p = resolve_precision(prec)
    value = _finite_angle(x, p)
    if value is None:
        return BigFloat.nan(p)
    work = _reduction_precision(value, p)
    turn = two_pi(work)
    k = div(value, turn, work).floor()
    r = sub(value, mul(k, turn, work), work)
    if r < 0:
        r = add(r, turn, work)
    elif r >= turn:
        r = sub(r, turn, work)
    r = r.with_precision(p)
    if r >= two_pi(p):
        return BigFloat.zero(p)
    return r


def deg_to_rad(x: Number, prec: int | None = 0) -> BigFloat:
    """Градусы -> радианы: x * π / 180."""
    p = resolve_precision(prec)
    work = p + GUARD_BITS
    return div(mul(x, pi(work), work), DEGREES_HALF_TURN, p)


def rad_to_deg(x: Number, prec: int | None = 0) -> BigFloat:
    """Радианы -> градусы: x * 180 / π."""
    p = resolve_precision(prec)
    work = p + GUARD_BITS
    return div(mul(x, DEGREES_HALF_TURN, work), pi(work), p)

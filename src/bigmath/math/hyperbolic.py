"""
Hyperbolic — гиперболические функции и их обратные

Все формулы выражены через expm1/log1p, чтобы избежать сокращения около нуля:
- sinh(x) = e*(e+2) / (2*(e+1)), e = expm1(|x|), знак по x
- tanh(x) = e / (e+2), e = expm1(2|x|)
- asinh(x) = log1p(|x| + x²/(1 + √(1+x²)))
- acosh(x) = log1p((x-1) + √((x-1)(x+1)))
- atanh(x) = ½ log1p(2x / (1-x))
"""

from bigmath.math.bigfloat import BigFloat, Number, add, div, mul, sub, to_bigfloat
from bigmath.math.exp_log import exp, expm1, log1p
from bigmath.math.numerical_safeguards import DomainError, GUARD_BITS, resolve_precision
from bigmath.math.roots import sqrt


def sinh(x: Number, prec: int | None = 0) -> BigFloat:
    """Гиперболический синус."""
    p = resolve_precision(prec)
    value = to_bigfloat(x, p)
    if value.is_nan() or value.is_inf() or value.is_zero():
        return BigFloat(value, p)
    work = p + GUARD_BITS
    e = expm1(abs(value), work)
    if e.is_inf():
        return BigFloat.inf(value.sign(), p)
    result = div(mul(e, add(e, 2, work), work), add(e, 1, work).ldexp(1), work)
    if value.sign() < 0:
        result = -result
    return result.with_precision(p)


def cosh(x: Number, prec: int | None = 0) -> BigFloat:
    """Гиперболический косинус: (e^|x| + e^-|x|) / 2."""
    p = resolve_precision(prec)
    value = to_bigfloat(x, p)
    if value.is_nan():
        return BigFloat.nan(p)
    if value.is_inf():
        return BigFloat.inf(1, p)
    work = p + GUARD_BITS
    grown = exp(abs(value), work)
    return add(grown, div(1, grown, work), work).ldexp(-1).with_precision(p)


def tanh(x: Number, prec: int | None = 0) -> BigFloat:
    """Гиперболический тангенс; при |x| > prec + GUARD_BITS результат ±1."""
    p = resolve_precision(prec)
    value = to_bigfloat(x, p)
    if value.is_nan() or value.is_zero():
        return BigFloat(value, p)
    work = p + GUARD_BITS
    sign = value.sign()
    if abs(value) > work:
        return BigFloat(sign, p)
    e = expm1(abs(value).ldexp(1), work)
    result = div(e, add(e, 2, work), work)
    return (result if sign > 0 else -result).with_precision(p)


def asinh(x: Number, prec: int | None = 0) -> BigFloat:
    """Обратный гиперболический синус."""
    p = resolve_precision(prec)
    value = to_bigfloat(x, p)
    if value.is_nan() or value.is_inf() or value.is_zero():
        return BigFloat(value, p)
    work = p + GUARD_BITS
    a = abs(value)
    a2 = mul(a, a, work)
    shifted = add(a, div(a2, add(1, sqrt(add(1, a2, work), work), work), work), work)
    result = log1p(shifted, work)
    return (result if value.sign() > 0 else -result).with_precision(p)


def acosh(x: Number, prec: int | None = 0) -> BigFloat:
    """
    Обратный гиперболический косинус.

    Raises:
        DomainError: Если x < 1 (fallback = NaN)
    """
    p = resolve_precision(prec)
    value = to_bigfloat(x, p)
    if value.is_nan():
        return BigFloat.nan(p)
    if value < 1:
        raise DomainError(f"acosh argument below 1: {value}", fallback=BigFloat.nan(p))
    if value.is_inf():
        return BigFloat.inf(1, p)
    if value == 1:
        return BigFloat.zero(p)
    work = p + GUARD_BITS
    below = sub(value, 1, max(work, value.precision))
    root = sqrt(mul(below, add(value, 1, work), work), work)
    return log1p(add(below, root, work), p)


def atanh(x: Number, prec: int | None = 0) -> BigFloat:
    """
    Обратный гиперболический тангенс.

    Raises:
        DomainError: Если |x| >= 1 (fallback: ±inf для x = ±1, иначе NaN)
    """
    p = resolve_precision(prec)
    value = to_bigfloat(x, p)
    if value.is_nan():
        return BigFloat.nan(p)
    if abs(value) == 1:
        raise DomainError(f"atanh pole at {value}", fallback=BigFloat.inf(value.sign(), p))
    if abs(value) > 1:
        raise DomainError(f"atanh argument outside (-1, 1): {value}", fallback=BigFloat.nan(p))
    if value.is_zero():
        return BigFloat(value, p)
    work = p + GUARD_BITS
    ratio = div(value.ldexp(1), sub(1, value, max(work, value.precision)), work)
    return log1p(ratio, work).ldexp(-1).with_precision(p)

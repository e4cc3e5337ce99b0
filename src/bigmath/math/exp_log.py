"""
Exp / Log / Pow — экспонента, логарифмы и степень произвольной точности

Алгоритмы:
- exp: x = k*ln2 + r, r / 2^s, ряд Тейлора, s возведений в квадрат, * 2^k
- ln: x = m * 2^E, m ∈ [√½, √2), ln m = 2*atanh((m-1)/(m+1)), + E*ln2
- log1p / expm1: прямые ряды около нуля (без катастрофического сокращения)
- pow: целые степени бинарным возведением, иначе exp(y * ln x)

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. ln(x <= 0) — DomainError (fallback: NaN для x < 0, -inf для x = 0)
2. ln(exp(x)) ≈ x в пределах округления
3. pow(отрицательное, целое) — вещественный результат со знаком по чётности
4. pow(0, y < 0) и pow(отрицательное, нецелое) — DomainError
5. Рабочая точность растёт с порядком аргумента
"""

import math

from bigmath.math.bigfloat import BigFloat, Number, add, div, mul, sub, to_bigfloat
from bigmath.math.constants import ln2, ln10
from bigmath.math.numerical_safeguards import DomainError, GUARD_BITS, resolve_precision, series_term_limit
from bigmath.math.scalar_utils import power_int

# |x| >= 2^EXP_OVERFLOW_EXPONENT: exp переполняется (или обращается в ноль)
EXP_OVERFLOW_EXPONENT = 64

# Граница переключения log1p/expm1 на прямые ряды
SMALL_ARGUMENT = 0.5

# √½: нижняя граница нормализованной мантиссы в ln
_SQRT_HALF = 0.7071067811865476


# =============================================================================
# РЯДЫ
# =============================================================================


def _converged(term: BigFloat, total: BigFloat, prec: int) -> bool:
    return term.is_zero() or total.is_zero() or term.exponent() < total.exponent() - prec - 1


def _exp_taylor(r: BigFloat, prec: int, skip_first: bool = False) -> BigFloat:
    """sum r^n/n! (с n=0 или с n=1 при skip_first) для малого |r|."""
    term = BigFloat.one(prec)
    total = BigFloat.zero(prec) if skip_first else BigFloat.one(prec)
    for n in range(1, series_term_limit(prec) + 1):
        term = div(mul(term, r, prec), n, prec)
        total = add(total, term, prec)
        if _converged(term, total, prec):
            break
    return total


def _atanh_series(u: BigFloat, prec: int) -> BigFloat:
    """atanh(u) = u + u^3/3 + u^5/5 + ... для |u| < 1/2."""
    u2 = mul(u, u, prec)
    power = u
    total = u
    k = 1
    for _ in range(series_term_limit(prec)):
        power = mul(power, u2, prec)
        k += 2
        term = div(power, k, prec)
        total = add(total, term, prec)
        if _converged(term, total, prec):
            break
    return total


# =============================================================================
# ЭКСПОНЕНТА
# =============================================================================


def exp(x: Number, prec: int | None = 0) -> BigFloat:
    """
    Экспонента e^x на точности prec.

    Args:
        x: Показатель
        prec: Точность результата (0 = по умолчанию)

    Returns:
        e^x; exp(+inf) = +inf, exp(-inf) = 0; при |x| >= 2^64 результат
        переполняется в +inf или обращается в 0

    Examples:
        >>> exp(0, 64)
        BigFloat('1.0', prec=64)
    """
    p = resolve_precision(prec)
    value = to_bigfloat(x, p)
    if value.is_nan():
        return BigFloat.nan(p)
    if value.is_inf():
        return BigFloat.inf(1, p) if value.sign() > 0 else BigFloat.zero(p)
    if value.is_zero():
        return BigFloat.one(p)

    mag = value.exponent()
    if mag > EXP_OVERFLOW_EXPONENT:
        return BigFloat.inf(1, p) if value.sign() > 0 else BigFloat.zero(p)

    work = p + GUARD_BITS + max(0, mag)
    log2 = ln2(work)
    k = div(value, log2, work).nearest_int()
    r = sub(value, mul(k, log2, work), work)

    # r / 2^s: каждая квадратура удваивает относительную ошибку
    s = math.isqrt(work)
    series_prec = work + s
    y = _exp_taylor(r.ldexp(-s), series_prec)
    for _ in range(s):
        y = mul(y, y, series_prec)
    return y.ldexp(k).with_precision(p)


def expm1(x: Number, prec: int | None = 0) -> BigFloat:
    """
    e^x - 1 без потери точности около нуля.

    Examples:
        >>> expm1(0, 64).is_zero()
        True
    """
    p = resolve_precision(prec)
    value = to_bigfloat(x, p)
    if value.is_nan():
        return BigFloat.nan(p)
    if value.is_inf():
        return BigFloat.inf(1, p) if value.sign() > 0 else BigFloat(-1, p)
    if value.is_zero():
        return BigFloat.zero(p)
    work = p + GUARD_BITS
    if abs(value) < SMALL_ARGUMENT:
        return _exp_taylor(value, work, skip_first=True).with_precision(p)
    return sub(exp(value, work), 1, p)


# =============================================================================
# ЛОГАРИФМЫ
# =============================================================================


def _check_log_domain(value: BigFloat, p: int) -> None:
    if value.is_zero():
        raise DomainError("logarithm of zero", fallback=BigFloat.inf(-1, p))
    if value.sign() < 0:
        raise DomainError(f"logarithm of negative value {value}", fallback=BigFloat.nan(p))


def ln(x: Number, prec: int | None = 0) -> BigFloat:
    """
    Натуральный логарифм на точности prec.

    Args:
        x: Положительный аргумент
        prec: Точность результата (0 = по умолчанию)

    Returns:
        ln(x); ln(+inf) = +inf, ln(NaN) = NaN

    Raises:
        DomainError: Если x <= 0

    Examples:
        >>> ln(1, 64).is_zero()
        True
    """
    p = resolve_precision(prec)
    value = to_bigfloat(x, p)
    if value.is_nan():
        return BigFloat.nan(p)
    _check_log_domain(value, p)
    if value.is_inf():
        return BigFloat.inf(1, p)
    if value == 1:
        return BigFloat.zero(p)

    big_e = value.exponent()
    m = value.ldexp(-big_e)
    if m < _SQRT_HALF:
        m = m.ldexp(1)
        big_e -= 1

    work = p + GUARD_BITS + abs(big_e).bit_length()
    u = div(sub(m, 1, work), add(m, 1, work), work)
    result = _atanh_series(u, work).ldexp(1)
    if big_e:
        result = add(result, mul(big_e, ln2(work), work), work)
    return result.with_precision(p)


def log1p(x: Number, prec: int | None = 0) -> BigFloat:
    """
    ln(1 + x) без потери точности около нуля.

    Raises:
        DomainError: Если x <= -1
    """
    p = resolve_precision(prec)
    value = to_bigfloat(x, p)
    if value.is_nan():
        return BigFloat.nan(p)
    if value == -1:
        raise DomainError("log1p(-1) is -inf", fallback=BigFloat.inf(-1, p))
    if value < -1:
        raise DomainError(f"log1p of value below -1: {value}", fallback=BigFloat.nan(p))
    if value.is_inf():
        return BigFloat.inf(1, p)
    if value.is_zero():
        return BigFloat.zero(p)

    work = p + GUARD_BITS
    if abs(value) < SMALL_ARGUMENT:
        # ln(1+x) = 2*atanh(x / (2 + x))
        u = div(value, add(2, value, work), work)
        return _atanh_series(u, work).ldexp(1).with_precision(p)
    # Для x ∈ (-1, -1/2] сумма 1 + x точна на точности x
    return ln(add(1, value, max(work, value.precision)), p)


def log2(x: Number, prec: int | None = 0) -> BigFloat:
    """Двоичный логарифм."""
    p = resolve_precision(prec)
    work = p + GUARD_BITS
    value = to_bigfloat(x, p)
    if value.is_nan():
        return BigFloat.nan(p)
    _check_log_domain(value, p)
    return div(ln(value, work), ln2(work), p)


def log10(x: Number, prec: int | None = 0) -> BigFloat:
    """Десятичный логарифм."""
    p = resolve_precision(prec)
    work = p + GUARD_BITS
    value = to_bigfloat(x, p)
    if value.is_nan():
        return BigFloat.nan(p)
    _check_log_domain(value, p)
    return div(ln(value, work), ln10(work), p)


def log_base(x: Number, base: Number, prec: int | None = 0) -> BigFloat:
    """
    Логарифм по произвольному основанию: ln(x) / ln(base).

    Raises:
        DomainError: Если base <= 0, base == 1 или x <= 0
    """
    p = resolve_precision(prec)
    work = p + GUARD_BITS
    b = to_bigfloat(base, p)
    if b.is_nan() or b.sign() <= 0 or b == 1:
        raise DomainError(f"invalid logarithm base {b}", fallback=BigFloat.nan(p))
    return div(ln(x, work), ln(b, work), p)


# =============================================================================
# СТЕПЕНЬ
# =============================================================================


def _is_odd_integer(y: BigFloat) -> bool:
    man, exp_ = y.mant_exp()
    return exp_ == 0 and bool(man & 1)


def pow(base: Number, exponent: Number, prec: int | None = 0) -> BigFloat:
    """
    Степень base^exponent на точности prec.

    Ветви:
    - x^0 = 1 и 1^y = 1 (в том числе для NaN)
    - целый показатель: бинарное возведение (знак по чётности)
    - x > 0: exp(y * ln x)

    Raises:
        DomainError: 0 в отрицательной степени (fallback = +inf),
            отрицательное основание с нецелым показателем (fallback = NaN)

    Examples:
        >>> pow(-2, 3, 64)
        BigFloat('-8.0', prec=64)
        >>> pow(2, -2, 64)
        BigFloat('0.25', prec=64)
    """
    p = resolve_precision(prec)
    x = to_bigfloat(base, p)
    y = to_bigfloat(exponent, p)

    if y.is_zero() or x == 1:
        return BigFloat.one(p)
    if x.is_nan() or y.is_nan():
        return BigFloat.nan(p)

    if y.is_integer():
        if y.exponent() <= EXP_OVERFLOW_EXPONENT:
            return power_int(x, y.to_int(), p)
        if x.sign() < 0:
            magnitude = pow(abs(x), y, p)
            return -magnitude if _is_odd_integer(y) else magnitude

    if x.is_zero():
        if y.sign() > 0:
            return BigFloat.zero(p)
        raise DomainError("zero raised to a negative power", fallback=BigFloat.inf(1, p))
    if x.sign() < 0:
        raise DomainError(
            f"negative base {x} with non-integer exponent {y}",
            fallback=BigFloat.nan(p),
        )
    if x.is_inf():
        return BigFloat.inf(1, p) if y.sign() > 0 else BigFloat.zero(p)
    if y.is_inf():
        grows = (x > 1) == (y.sign() > 0)
        return BigFloat.inf(1, p) if grows else BigFloat.zero(p)

    work = p + GUARD_BITS
    t = mul(y, ln(x, work), work)
    if not t.is_zero() and t.exponent() > 0:
        work += t.exponent()
        t = mul(y, ln(x, work), work)
    return exp(t, p)

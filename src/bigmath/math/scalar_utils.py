"""
Scalar Utilities — редукции над BigFloat с явной точностью

- max/min: точное сравнение, результат округляется к целевой точности
- fma: a*b + c с единственным округлением (произведение формируется точно)
- dot_product: скалярное произведение цепочкой FMA с guard-битами
- power_int: целая степень бинарным возведением
- ulp / is_close: сравнение с допуском в единицах последнего бита

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Сравнение в max/min точное, независимо от целевой точности
2. fma не округляет промежуточное произведение
3. dot_product([], [], p) = 0 на точности p; разная длина — LengthMismatch
4. NaN пропагирует (max/min/fma возвращают NaN)
"""

from typing import Sequence

from mpmath.libmp import fzero, mpf_add, mpf_mul, round_nearest

from bigmath.math.bigfloat import BigFloat, Number, div, to_bigfloat
from bigmath.math.numerical_safeguards import DomainError, GUARD_BITS, LengthMismatch, resolve_precision

# Допуск is_close по умолчанию (в ulp)
DEFAULT_ULP_TOLERANCE = 4


# =============================================================================
# MIN / MAX / ABS
# =============================================================================


def abs_value(x: Number, prec: int | None = 0) -> BigFloat:
    """|x| на точности prec."""
    return BigFloat(abs(to_bigfloat(x, prec)), prec)


def max_value(a: Number, b: Number, prec: int | None = 0) -> BigFloat:
    """
    Максимум двух значений.

    Сравнение выполняется точно; prec (0 = по умолчанию) определяет только
    точность результата. При равенстве возвращается любой из операндов.

    Examples:
        >>> max_value(1, 2, 64)
        BigFloat('2.0', prec=64)
    """
    x = to_bigfloat(a, prec)
    y = to_bigfloat(b, prec)
    if x.is_nan() or y.is_nan():
        return BigFloat.nan(prec)
    return BigFloat(x if x >= y else y, prec)


def min_value(a: Number, b: Number, prec: int | None = 0) -> BigFloat:
    """Минимум двух значений (точное сравнение, см. max_value)."""
    x = to_bigfloat(a, prec)
    y = to_bigfloat(b, prec)
    if x.is_nan() or y.is_nan():
        return BigFloat.nan(prec)
    return BigFloat(x if x <= y else y, prec)


# =============================================================================
# FMA И СКАЛЯРНОЕ ПРОИЗВЕДЕНИЕ
# =============================================================================


def fma(a: Number, b: Number, c: Number, prec: int | None = 0) -> BigFloat:
    """
    Fused multiply-add: a*b + c с единственным округлением.

    Произведение a*b формируется точно (без округления), затем складывается
    с c и округляется к ближайшему на точности prec.

    Args:
        a, b: Множители
        c: Слагаемое
        prec: Точность результата (0 = по умолчанию)

    Returns:
        round(a*b + c)

    Examples:
        >>> fma(2, 3, 4, 64)
        BigFloat('10.0', prec=64)
    """
    p = resolve_precision(prec)
    product = mpf_mul(to_bigfloat(a, p).mpf, to_bigfloat(b, p).mpf)
    return BigFloat._wrap(mpf_add(product, to_bigfloat(c, p).mpf, p, round_nearest), p)


def dot_product(seq_a: Sequence[Number], seq_b: Sequence[Number], prec: int | None = 0) -> BigFloat:
    """
    Скалярное произведение двух последовательностей.

    Накопление идёт цепочкой FMA (от последнего элемента к первому) на
    точности prec + GUARD_BITS, затем результат округляется к prec.

    Args:
        seq_a: Первая последовательность
        seq_b: Вторая последовательность (той же длины)
        prec: Точность результата (0 = по умолчанию)

    Returns:
        sum(a_i * b_i); для пустых последовательностей — ноль на точности prec

    Raises:
        LengthMismatch: Если длины последовательностей различаются
    """
    p = resolve_precision(prec)
    if len(seq_a) != len(seq_b):
        raise LengthMismatch(
            f"sequences differ in length: {len(seq_a)} != {len(seq_b)}",
            fallback=BigFloat.nan(p),
        )
    if not seq_a:
        return BigFloat.zero(p)

    work = p + GUARD_BITS
    acc = BigFloat._wrap(fzero, work)
    for a, b in zip(reversed(seq_a), reversed(seq_b)):
        acc = fma(a, b, acc, work)
    return acc.with_precision(p)


# =============================================================================
# ЦЕЛАЯ СТЕПЕНЬ
# =============================================================================


def power_int(x: Number, n: int, prec: int | None = 0) -> BigFloat:
    """
    x^n для целого n бинарным возведением в степень.

    Промежуточные произведения вычисляются с запасом бит, растущим с
    log2(|n|), так что накопленная ошибка не превышает ~1 ulp результата.
    Знак отрицательного основания определяется чётностью n.

    Raises:
        DomainError: 0 в отрицательной степени (fallback = +inf)
    """
    p = resolve_precision(prec)
    base = to_bigfloat(x, p)
    if n == 0:
        return BigFloat.one(p)
    if base.is_nan():
        return BigFloat.nan(p)
    if base.is_zero() and n < 0:
        raise DomainError("zero raised to a negative power", fallback=BigFloat.inf(1, p))

    work = p + GUARD_BITS + abs(n).bit_length()
    result = BigFloat.one(work)
    square = BigFloat(base, work)
    k = abs(n)
    while k:
        if k & 1:
            result = BigFloat._wrap(mpf_mul(result.mpf, square.mpf, work, round_nearest), work)
        k >>= 1
        if k:
            square = BigFloat._wrap(mpf_mul(square.mpf, square.mpf, work, round_nearest), work)
    if n < 0:
        result = div(1, result, work)
    return result.with_precision(p)


# =============================================================================
# ULP И СРАВНЕНИЕ С ДОПУСКОМ
# =============================================================================


def ulp(x: Number, prec: int | None = 0) -> BigFloat:
    """
    Единица последнего разряда: 2^(exponent(x) - prec).

    Для нуля возвращает 0.

    Examples:
        >>> ulp(1, 53).to_float() == 2.0 ** -52
        True
    """
    p = resolve_precision(prec)
    value = to_bigfloat(x, p)
    if value.is_zero():
        return BigFloat.zero(p)
    if not value.is_finite():
        return BigFloat.nan(p)
    return BigFloat.from_man_exp(1, value.exponent() - p, p)


def is_close(a: Number, b: Number, prec: int | None = 0, ulps: int = DEFAULT_ULP_TOLERANCE) -> bool:
    """
    Проверить |a - b| <= ulps * ulp(max(|a|, |b|), prec).

    Сравнение разности выполняется точно. Бесконечности равны только
    самим себе, NaN не близок ничему.
    """
    x = to_bigfloat(a, prec)
    y = to_bigfloat(b, prec)
    if x.is_nan() or y.is_nan():
        return False
    if x.is_inf() or y.is_inf():
        return x == y
    diff = abs(BigFloat._wrap(mpf_add(x.mpf, (-y).mpf), resolve_precision(prec)))
    bound = ulp(max(abs(x), abs(y)), prec)
    if bound.is_zero():
        return diff.is_zero()
    return diff <= bound * ulps

"""
Constant Generator — математические константы произвольной точности

Константы вычисляются сходящимися алгоритмами по запрошенной точности,
без таблиц цифр:
- π: ряд Чудновского с целочисленным binary splitting
- e: целочисленная сумма N!/k!
- ln 2, ln 10: ряды atanh(1/n) в фиксированной точке
- √2, √3, φ: метод Ньютона из bigmath.math.roots
- γ: алгоритм Брента–Макмиллана в фиксированной точке
- G (Каталан): ряд Рамануджана с центральными биномиальными коэффициентами

Результаты кешируются по точности (неизменяемые значения).

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Точность не ограничена никакой таблицей констант
2. two_pi(p) == 2 * pi(p) точно (сдвиг порядка)
3. Повторный вызов с той же точностью возвращает тот же результат
"""

import logging
from functools import lru_cache

from bigmath.math.bigfloat import BigFloat, add, div, mul
from bigmath.math.numerical_safeguards import GUARD_BITS, resolve_precision
from bigmath.math.roots import sqrt

logger = logging.getLogger(__name__)

# =============================================================================
# ПАРАМЕТРЫ РЯДА ЧУДНОВСКОГО
# =============================================================================

CHUDNOVSKY_C = 640320
CHUDNOVSKY_C3_OVER_24 = CHUDNOVSKY_C**3 // 24
CHUDNOVSKY_A = 13591409
CHUDNOVSKY_B = 545140134

# Каждый член ряда даёт ~47.11 бит
CHUDNOVSKY_BITS_PER_TERM = 47


def _chudnovsky_split(a: int, b: int) -> tuple[int, int, int]:
    """Binary splitting: (P, Q, T) для членов [a, b)."""
    if b - a == 1:
        if a == 0:
            p = q = 1
        else:
            p = (6 * a - 5) * (2 * a - 1) * (6 * a - 1)
            q = a * a * a * CHUDNOVSKY_C3_OVER_24
        t = p * (CHUDNOVSKY_A + CHUDNOVSKY_B * a)
        if a & 1:
            t = -t
        return p, q, t
    m = (a + b) // 2
    p_am, q_am, t_am = _chudnovsky_split(a, m)
    p_mb, q_mb, t_mb = _chudnovsky_split(m, b)
    return p_am * p_mb, q_am * q_mb, q_mb * t_am + p_am * t_mb


def _atanh_inv_fixed(n: int, bits: int) -> int:
    """atanh(1/n) * 2^bits в фиксированной точке (n >= 2)."""
    one = 1 << bits
    power = one // n
    n2 = n * n
    total = 0
    k = 1
    while power:
        total += power // k
        power //= n2
        k += 2
    return total


def _fixed_bits(work: int) -> int:
    # Запас на накопленную ошибку отбрасывания в ~work членах
    return work + work.bit_length() + 8


# =============================================================================
# π
# =============================================================================


@lru_cache(maxsize=64)
def _pi(prec: int) -> BigFloat:
    work = prec + GUARD_BITS
    terms = work // CHUDNOVSKY_BITS_PER_TERM + 2
    logger.debug("computing pi: prec=%d terms=%d", prec, terms)
    _, q, t = _chudnovsky_split(0, terms)
    scale = mul(426880, sqrt(10005, work), work)
    return div(mul(scale, q, work), t, work).with_precision(prec)


def pi(prec: int | None = 0) -> BigFloat:
    """
    π, корректно округлённое к prec бит.

    Examples:
        >>> str(pi(64))[:12]
        '3.1415926535'
    """
    return _pi(resolve_precision(prec))


def two_pi(prec: int | None = 0) -> BigFloat:
    """2π (точный сдвиг π на один двоичный разряд)."""
    return pi(prec).ldexp(1)


def half_pi(prec: int | None = 0) -> BigFloat:
    """π/2 (точный сдвиг π)."""
    return pi(prec).ldexp(-1)


# =============================================================================
# e
# =============================================================================


@lru_cache(maxsize=64)
def _e(prec: int) -> BigFloat:
    work = prec + GUARD_BITS
    # N такое, что N! > 2^work
    n = 1
    factorial = 1
    while factorial.bit_length() <= work + 2:
        n += 1
        factorial *= n
    logger.debug("computing e: prec=%d terms=%d", prec, n)
    term = 1
    total = 1
    for j in range(n, 0, -1):
        term *= j
        total += term
    # total = sum_{k=0..N} N!/k!, term = N!
    return div(total, term, work).with_precision(prec)


def e(prec: int | None = 0) -> BigFloat:
    """
    Число Эйлера e, корректно округлённое к prec бит.

    Examples:
        >>> str(e(64))[:12]
        '2.7182818284'
    """
    return _e(resolve_precision(prec))


# =============================================================================
# ЛОГАРИФМЫ
# =============================================================================


@lru_cache(maxsize=64)
def _ln2(prec: int) -> BigFloat:
    work = prec + GUARD_BITS
    bits = _fixed_bits(work)
    logger.debug("computing ln2: prec=%d", prec)
    # ln 2 = 2 * atanh(1/3)
    return BigFloat.from_man_exp(2 * _atanh_inv_fixed(3, bits), -bits, prec)


def ln2(prec: int | None = 0) -> BigFloat:
    """ln 2 на точности prec."""
    return _ln2(resolve_precision(prec))


@lru_cache(maxsize=64)
def _ln10(prec: int) -> BigFloat:
    work = prec + GUARD_BITS
    bits = _fixed_bits(work)
    logger.debug("computing ln10: prec=%d", prec)
    # ln 10 = 3 ln 2 + ln(5/4), ln(5/4) = 2 * atanh(1/9)
    fixed = 6 * _atanh_inv_fixed(3, bits) + 2 * _atanh_inv_fixed(9, bits)
    return BigFloat.from_man_exp(fixed, -bits, prec)


def ln10(prec: int | None = 0) -> BigFloat:
    """ln 10 на точности prec."""
    return _ln10(resolve_precision(prec))


# =============================================================================
# АЛГЕБРАИЧЕСКИЕ КОНСТАНТЫ
# =============================================================================


def sqrt2(prec: int | None = 0) -> BigFloat:
    """√2."""
    return sqrt(2, prec)


def sqrt3(prec: int | None = 0) -> BigFloat:
    """√3."""
    return sqrt(3, prec)


@lru_cache(maxsize=64)
def _phi(prec: int) -> BigFloat:
    work = prec + GUARD_BITS
    return add(1, sqrt(5, work), work).ldexp(-1).with_precision(prec)


def phi(prec: int | None = 0) -> BigFloat:
    """Золотое сечение φ = (1 + √5) / 2."""
    return _phi(resolve_precision(prec))


# =============================================================================
# ПОСТОЯННАЯ ЭЙЛЕРА–МАСКЕРОНИ
# =============================================================================


def _euler_fixed(bits: int) -> int:
    """
    γ * 2^bits алгоритмом Брента–Макмиллана.

    U/V = Σ (n^k/k!)² (H_k - ln n) / Σ (n^k/k!)² сходится к γ с ошибкой
    ~e^(-4n); n = 2^q > bits/5 даёт больше bits верных бит.
    """
    q = (bits // 5 + 1).bit_length()
    n2 = 1 << (2 * q)
    # A_0 = -ln n = -q ln 2
    a = u = -q * 2 * _atanh_inv_fixed(3, bits)
    b = v = 1 << bits
    k = 1
    while True:
        b = b * n2 // (k * k)
        a = (a * n2 // k + b) // k
        u += a
        v += b
        if abs(a) < 100 and b < 100:
            break
        k += 1
    return (u << bits) // v


@lru_cache(maxsize=64)
def _euler_gamma(prec: int) -> BigFloat:
    work = prec + GUARD_BITS
    bits = _fixed_bits(work)
    logger.debug("computing euler gamma: prec=%d", prec)
    return BigFloat.from_man_exp(_euler_fixed(bits), -bits, prec)


def euler_gamma(prec: int | None = 0) -> BigFloat:
    """
    Постоянная Эйлера–Маскерони γ.

    Examples:
        >>> str(euler_gamma(64))[:12]
        '0.5772156649'
    """
    return _euler_gamma(resolve_precision(prec))


# =============================================================================
# ПОСТОЯННАЯ КАТАЛАНА
# =============================================================================


@lru_cache(maxsize=64)
def _catalan(prec: int) -> BigFloat:
    work = prec + GUARD_BITS
    bits = _fixed_bits(work)
    logger.debug("computing catalan: prec=%d", prec)
    one = 1 << bits

    # G = π/8 ln(2 + √3) + 3/8 Σ (k!)² / ((2k)! (2k+1)²)
    central = 0
    term = one
    k = 0
    while term:
        central += term // ((2 * k + 1) ** 2)
        k += 1
        term = term * k // (2 * (2 * k - 1))

    # ln(2 + √3) = 2/√3 Σ 3^-j / (2j+1)
    odd = 0
    power = one
    j = 0
    while power:
        odd += power // (2 * j + 1)
        power //= 3
        j += 1

    log_part = mul(mul(pi(work), sqrt(3, work), work), BigFloat.from_man_exp(odd, -bits, work), work)
    series_part = BigFloat.from_man_exp(3 * central, -bits - 3, work)
    return add(div(log_part, 12, work), series_part, work).with_precision(prec)


def catalan(prec: int | None = 0) -> BigFloat:
    """
    Постоянная Каталана G = Σ (-1)^k / (2k+1)².

    Examples:
        >>> str(catalan(64))[:12]
        '0.9159655941'
    """
    return _catalan(resolve_precision(prec))

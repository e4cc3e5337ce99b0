"""
Special Functions — гамма-функция, функция ошибок и функции Бесселя

Алгоритмы:
- lnΓ: асимптотический ряд Стирлинга с числами Бернулли; аргумент
  сдвигается рекуррентностью Γ(x+1) = xΓ(x) до порога ~prec/4
- Γ: exp(lnΓ) для x > 0, формула отражения Γ(x)Γ(1-x) = π/sin(πx) для x < 0,
  точный факториал для небольших натуральных аргументов
- erf: ряд 2/√π e^(-x²) Σ 2^n x^(2n+1) / (2n+1)!! (все члены положительны)
- erfc: 1 - erf с запасом бит либо асимптотический ряд для больших x
- J_n, Y_n: степенные ряды для целого порядка n

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Γ(n) для натуральных n <= EXACT_FACTORIAL_LIMIT точна до округления
2. Γ в полюсах (0, -1, -2, ...) — DomainError (fallback = NaN)
3. lnΓ(1) = lnΓ(2) = 0 точно
4. erf(x) = ±1 и erfc(x) = 0 там, где остаток меньше ulp результата
5. Рабочая точность покрывает сокращение у нулей lnΓ и в знакопеременных рядах
"""

import logging
import math
from fractions import Fraction

from bigmath.math.bigfloat import BigFloat, Number, add, div, mul, sub, to_bigfloat
from bigmath.math.constants import euler_gamma, pi, two_pi
from bigmath.math.exp_log import EXP_OVERFLOW_EXPONENT, exp, ln
from bigmath.math.numerical_safeguards import DomainError, GUARD_BITS, resolve_precision, series_term_limit
from bigmath.math.roots import sqrt
from bigmath.math.scalar_utils import power_int
from bigmath.math.trigonometric import sin

logger = logging.getLogger(__name__)

# Натуральные аргументы до этой границы считаются через math.factorial
EXACT_FACTORIAL_LIMIT = 4096

_LN_2 = 0.6931471805599453

# B_0, B_1, B_2, ... (нечётные с индексом >= 3 равны нулю)
_BERNOULLI: list[Fraction] = [Fraction(1), Fraction(-1, 2)]


def _bernoulli(m: int) -> Fraction:
    """Число Бернулли B_m (рекуррентность по биномиальным коэффициентам, с кешем)."""
    while len(_BERNOULLI) <= m:
        n = len(_BERNOULLI)
        if n % 2:
            _BERNOULLI.append(Fraction(0))
            continue
        total = sum(math.comb(n + 1, j) * _BERNOULLI[j] for j in range(n) if _BERNOULLI[j])
        _BERNOULLI.append(-total / (n + 1))
    return _BERNOULLI[m]


# =============================================================================
# ЛОГАРИФМ ГАММА-ФУНКЦИИ
# =============================================================================


def _stirling_threshold(work: int) -> int:
    # Минимальный член ряда Стирлинга ~e^(-2πz) при z >= work/4 много меньше 2^-work
    return work // 4 + 8


def _stirling(z: BigFloat, work: int) -> BigFloat:
    """lnΓ(z) = (z - ½) ln z - z + ½ ln 2π + Σ B_2k / (2k(2k-1) z^(2k-1))."""
    total = sub(mul(sub(z, 0.5, work), ln(z, work), work), z, work)
    total = add(total, ln(two_pi(work), work).ldexp(-1), work)
    inverse = div(1, z, work)
    inverse_sq = mul(inverse, inverse, work)
    power = inverse
    for k in range(1, series_term_limit(work)):
        b = _bernoulli(2 * k)
        term = div(mul(power, b.numerator, work), b.denominator * (2 * k) * (2 * k - 1), work)
        total = add(total, term, work)
        if term.exponent() < total.exponent() - work - 1:
            break
        power = mul(power, inverse_sq, work)
    return total


def _log_gamma(x: BigFloat, work: int) -> BigFloat:
    """
    lnΓ(x) для конечного x > 0.

    Абсолютная ошибка порядка max(1, |lnΓ(x)|) * 2^-work: при сдвиге
    lnΓ(x) = lnΓ(x + N) - ln(x(x+1)...(x+N-1)) рабочая точность растёт на
    число бит в величине сокращающихся слагаемых.
    """
    threshold = _stirling_threshold(work)
    shift = max(0, threshold - x.floor())
    if shift:
        work += threshold.bit_length() + threshold.bit_length().bit_length() + 2
    result = _stirling(add(x, shift, work), work)
    if shift:
        product = BigFloat(x, work)
        for j in range(1, shift):
            product = mul(product, add(x, j, work), work)
        result = sub(result, ln(product, work), work)
    return result


def _log_magnitude_bits(x: BigFloat) -> int:
    # Число бит в целой части |lnΓ(x)| (x < 2^E => lnΓ(x) < 2^E * E)
    e = x.exponent()
    return max(e, 0) + abs(e).bit_length() + 1


def lgamma(x: Number, prec: int | None = 0) -> BigFloat:
    """
    Натуральный логарифм гамма-функции lnΓ(x) для x > 0.

    Args:
        x: Положительный аргумент
        prec: Точность результата (0 = по умолчанию)

    Returns:
        lnΓ(x); lgamma(+inf) = +inf, lgamma(1) = lgamma(2) = 0

    Raises:
        DomainError: Если x <= 0 (fallback = NaN)

    Examples:
        >>> lgamma(1, 64).is_zero()
        True
    """
    p = resolve_precision(prec)
    value = to_bigfloat(x, p)
    if value.is_nan():
        return BigFloat.nan(p)
    if value.sign() <= 0:
        raise DomainError(f"lgamma argument must be positive: {value}", fallback=BigFloat.nan(p))
    if value.is_inf():
        return BigFloat.inf(1, p)

    if value.is_integer():
        n = value.to_int()
        if n <= 2:
            return BigFloat.zero(p)
        if n <= EXACT_FACTORIAL_LIMIT:
            factorial = math.factorial(n - 1)
            return ln(BigFloat(factorial, max(p, factorial.bit_length())), p)

    work = p + GUARD_BITS
    if value > 0.5 and value < 3:
        # Нули lnΓ в 1 и 2: относительная точность требует бит по близости к ним
        exact = value.precision + 4
        distance = min(abs(sub(value, 1, exact)), abs(sub(value, 2, exact)))
        work += max(0, -distance.exponent()) + 4
    return _log_gamma(value, work).with_precision(p)


# =============================================================================
# ГАММА-ФУНКЦИЯ
# =============================================================================


def _gamma_reflected(value: BigFloat, p: int) -> BigFloat:
    """Γ(x) = π / (sin(πx) Γ(1-x)) для отрицательного нецелого x."""
    work = p + GUARD_BITS
    n = value.nearest_int()
    # x = n + f, |f| <= ½; разность точна
    frac = sub(value, n, max(work, value.precision))
    s = sin(mul(pi(work), frac, work), work)
    if n % 2:
        s = -s
    one_minus = sub(1, value, max(work, value.precision + 2))
    return div(pi(work), mul(s, gamma(one_minus, work), work), p)


def gamma(x: Number, prec: int | None = 0) -> BigFloat:
    """
    Гамма-функция Γ(x) на точности prec.

    Args:
        x: Аргумент (не целое <= 0)
        prec: Точность результата (0 = по умолчанию)

    Returns:
        Γ(x); Γ(+inf) = +inf; при lnΓ(x) >= 2^64 результат переполняется в +inf

    Raises:
        DomainError: В полюсах 0, -1, -2, ... и для -inf (fallback = NaN)

    Examples:
        >>> gamma(5, 64)
        BigFloat('24.0', prec=64)
    """
    p = resolve_precision(prec)
    value = to_bigfloat(x, p)
    if value.is_nan():
        return BigFloat.nan(p)
    if value.is_inf():
        if value.sign() > 0:
            return BigFloat.inf(1, p)
        raise DomainError("gamma undefined at -inf", fallback=BigFloat.nan(p))

    if value.is_integer():
        n = value.to_int()
        if n <= 0:
            raise DomainError(f"gamma pole at {n}", fallback=BigFloat.nan(p))
        if n <= EXACT_FACTORIAL_LIMIT:
            return BigFloat(math.factorial(n - 1), p)

    if value.sign() < 0:
        return _gamma_reflected(value, p)
    if value.exponent() > EXP_OVERFLOW_EXPONENT:
        return BigFloat.inf(1, p)

    # exp переносит абсолютную ошибку lnΓ в относительную ошибку Γ
    work = p + GUARD_BITS + _log_magnitude_bits(value)
    logger.debug("gamma via lgamma: x=%s work=%d", value, work)
    return exp(_log_gamma(value, work), p)


# =============================================================================
# ФУНКЦИЯ ОШИБОК
# =============================================================================


def _saturation_square(work: int) -> float:
    # x² выше этой границы: e^(-x²) < 2^-work * e^-2
    return work * _LN_2 + 2


def _erf_positive(x: BigFloat, x2: BigFloat, work: int) -> BigFloat:
    term = BigFloat(x, work)
    total = term
    for n in range(1, series_term_limit(work) + 2 * x2.to_int()):
        term = div(mul(term, x2, work), 2 * n + 1, work).ldexp(1)
        total = add(total, term, work)
        if term.exponent() < total.exponent() - work - 1:
            break
    scale = div(exp(-x2, work).ldexp(1), sqrt(pi(work), work), work)
    return mul(total, scale, work)


def erf(x: Number, prec: int | None = 0) -> BigFloat:
    """
    Функция ошибок erf(x) = 2/√π ∫₀ˣ e^(-t²) dt.

    Examples:
        >>> erf(0, 64).is_zero()
        True
        >>> erf(100, 64)
        BigFloat('1.0', prec=64)
    """
    p = resolve_precision(prec)
    value = to_bigfloat(x, p)
    if value.is_nan() or value.is_zero():
        return BigFloat(value, p)
    sign = value.sign()
    if value.is_inf() or value.exponent() > 32:
        return BigFloat(sign, p)

    work = p + GUARD_BITS
    magnitude = abs(value)
    x2 = mul(magnitude, magnitude, 2 * magnitude.precision)
    if x2 > _saturation_square(work):
        return BigFloat(sign, p)
    result = _erf_positive(magnitude, x2, work + 8)
    return (result if sign > 0 else -result).with_precision(p)


def erfc(x: Number, prec: int | None = 0) -> BigFloat:
    """
    Дополнительная функция ошибок erfc(x) = 1 - erf(x) без сокращения.

    Для x² < prec * ln 2 считается 1 - erf(x) на точности с запасом
    ~x² log₂ e бит, иначе асимптотический ряд
    e^(-x²) / (x√π) * Σ (-1)^n (2n-1)!! / (2x²)^n.

    Examples:
        >>> erfc(0, 64)
        BigFloat('1.0', prec=64)
    """
    p = resolve_precision(prec)
    value = to_bigfloat(x, p)
    if value.is_nan():
        return BigFloat.nan(p)
    if value.is_inf():
        return BigFloat.zero(p) if value.sign() > 0 else BigFloat(2, p)
    if value.is_zero():
        return BigFloat.one(p)

    work = p + GUARD_BITS
    if value.sign() < 0:
        return add(1, erf(-value, work), p)

    x2 = mul(value, value, 2 * value.precision)
    if x2 < _saturation_square(work):
        extra = x2.to_int() * 3 // 2 + 8
        return sub(1, erf(value, work + extra), p)

    inverse = div(1, x2.ldexp(1), work)
    term = BigFloat.one(work)
    total = term
    for n in range(1, series_term_limit(work)):
        next_term = -mul(mul(term, inverse, work), 2 * n - 1, work)
        if abs(next_term) >= abs(term):
            break
        term = next_term
        total = add(total, term, work)
        if term.exponent() < total.exponent() - work - 1:
            break
    scale = div(exp(-x2, work), mul(value, sqrt(pi(work), work), work), work)
    return mul(total, scale, p)


# =============================================================================
# ФУНКЦИИ БЕССЕЛЯ
# =============================================================================


def _check_order(n: int) -> None:
    if not isinstance(n, int):
        raise TypeError(f"Bessel order must be an integer, got {type(n).__name__}")


def _bessel_work(value: BigFloat, p: int) -> int:
    # Знакопеременный ряд: наибольший член ~e^|x|
    work = p + GUARD_BITS
    if value.exponent() > 0:
        work += abs(value).to_int() * 3 // 2 + 4
    return work


def _bessel_terms(half: BigFloat, n: int, work: int):
    """Члены t_k = (-1)^k (x/2)^(2k+n) / (k! (n+k)!) до сходимости ряда."""
    h2 = mul(half, half, work)
    term = div(power_int(half, n, work), math.factorial(n), work)
    peak = term.exponent()
    yield term
    for k in range(1, series_term_limit(work)):
        term = -div(mul(term, h2, work), k * (n + k), work)
        yield term
        peak = max(peak, term.exponent())
        if h2 < k * (n + k) and term.exponent() < peak - work:
            return


def bessel_j(n: int, x: Number, prec: int | None = 0) -> BigFloat:
    """
    Функция Бесселя первого рода J_n(x) целого порядка.

    J_{-n}(x) = (-1)^n J_n(x); J_n(±inf) = 0.

    Raises:
        TypeError: Если порядок не целый
    """
    _check_order(n)
    p = resolve_precision(prec)
    value = to_bigfloat(x, p)
    if value.is_nan():
        return BigFloat.nan(p)
    if value.is_inf():
        return BigFloat.zero(p)
    if value.is_zero():
        return BigFloat.one(p) if n == 0 else BigFloat.zero(p)

    order = abs(n)
    work = _bessel_work(value, p)
    total = BigFloat.zero(work)
    for term in _bessel_terms(value.ldexp(-1), order, work):
        total = add(total, term, work)
    if n < 0 and order % 2:
        total = -total
    return total.with_precision(p)


def bessel_y(n: int, x: Number, prec: int | None = 0) -> BigFloat:
    """
    Функция Бесселя второго рода Y_n(x) целого порядка для x > 0.

    πY_n = 2J_n (ln(x/2) + γ) - Σ_{k<n} (n-k-1)!/k! (x/2)^(2k-n)
           - Σ_k (H_k + H_{n+k}) t_k,
    где t_k — члены ряда J_n, H_k — гармонические числа.

    Raises:
        TypeError: Если порядок не целый
        DomainError: Если x <= 0 (fallback = -inf в нуле, NaN для x < 0)
    """
    _check_order(n)
    p = resolve_precision(prec)
    value = to_bigfloat(x, p)
    if value.is_nan():
        return BigFloat.nan(p)
    if value.is_zero():
        raise DomainError("bessel_y singular at zero", fallback=BigFloat.inf(-1, p))
    if value.sign() < 0:
        raise DomainError(f"bessel_y of negative argument {value}", fallback=BigFloat.nan(p))
    if value.is_inf():
        return BigFloat.zero(p)

    order = abs(n)
    work = _bessel_work(value, p)
    half = value.ldexp(-1)

    finite = BigFloat.zero(work)
    for k in range(order):
        power = power_int(half, 2 * k - order, work)
        finite = add(finite, div(mul(power, math.factorial(order - k - 1), work), math.factorial(k), work), work)

    h_k = BigFloat.zero(work)
    h_nk = BigFloat.zero(work)
    for j in range(1, order + 1):
        h_nk = add(h_nk, div(1, j, work), work)

    j_sum = BigFloat.zero(work)
    weighted = BigFloat.zero(work)
    for k, term in enumerate(_bessel_terms(half, order, work)):
        if k:
            h_k = add(h_k, div(1, k, work), work)
            h_nk = add(h_nk, div(1, order + k, work), work)
        j_sum = add(j_sum, term, work)
        weighted = add(weighted, mul(add(h_k, h_nk, work), term, work), work)

    log_part = mul(j_sum.ldexp(1), add(ln(half, work), euler_gamma(work), work), work)
    result = div(sub(sub(log_part, finite, work), weighted, work), pi(work), work)
    if n < 0 and order % 2:
        result = -result
    return result.with_precision(p)

"""
Combinatorics — факториал и биномиальные коэффициенты на точности prec

Небольшие аргументы считаются точно в целых числах и округляются один раз.
Большие сводятся к гамма-функции: n! = Γ(n+1),
C(n, k) = exp(lnΓ(n+1) - lnΓ(k+1) - lnΓ(n-k+1)).
"""

import math

from bigmath.math.bigfloat import BigFloat, add, sub
from bigmath.math.exp_log import exp
from bigmath.math.numerical_safeguards import DomainError, GUARD_BITS, resolve_precision
from bigmath.math.special import EXACT_FACTORIAL_LIMIT, gamma, lgamma

# math.comb считается точно, пока n не больше этой границы или k мало
EXACT_BINOMIAL_LIMIT = 65536


def _check_integer(name: str, value: int) -> None:
    if not isinstance(value, int):
        raise TypeError(f"{name} must be an integer, got {type(value).__name__}")


def factorial(n: int, prec: int | None = 0) -> BigFloat:
    """
    n! на точности prec.

    Raises:
        TypeError: Если n не целое
        DomainError: Если n < 0 (fallback = NaN)

    Examples:
        >>> factorial(5, 64)
        BigFloat('120.0', prec=64)
    """
    _check_integer("n", n)
    p = resolve_precision(prec)
    if n < 0:
        raise DomainError(f"factorial of negative integer {n}", fallback=BigFloat.nan(p))
    if n <= EXACT_FACTORIAL_LIMIT:
        return BigFloat(math.factorial(n), p)
    return gamma(n + 1, p)


def binomial(n: int, k: int, prec: int | None = 0) -> BigFloat:
    """
    Биномиальный коэффициент C(n, k) на точности prec.

    C(n, k) = 0 вне 0 <= k <= n.

    Raises:
        TypeError: Если n или k не целые
    """
    _check_integer("n", n)
    _check_integer("k", k)
    p = resolve_precision(prec)
    if k < 0 or k > n:
        return BigFloat.zero(p)
    k = min(k, n - k)
    if n <= EXACT_BINOMIAL_LIMIT or k <= EXACT_FACTORIAL_LIMIT:
        return BigFloat(math.comb(n, k), p)

    # Слагаемые lnΓ ~ n log n сокращаются до ln C(n, k)
    work = p + GUARD_BITS + 2 * n.bit_length() + 8
    log_value = sub(lgamma(n + 1, work), add(lgamma(k + 1, work), lgamma(n - k + 1, work), work), work)
    return exp(log_value, p)

"""
Rounding Engine — понижение точности с направленным округлением

Модуль сводит значение, вычисленное на рабочей точности, к заданному числу
бит мантиссы по одному из четырёх режимов:
- TO_NEAREST: к ближайшему, ничья — к чётной мантиссе (banker's rounding)
- TO_ZERO: отбрасывание лишних бит (к нулю)
- TO_POSITIVE_INF / TO_NEGATIVE_INF: всегда в указанную сторону

Также предоставляет "rounded"-варианты операций: вычисление на
prec + GUARD_BITS с единственным финальным округлением в заданном режиме.

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Целевая точность <= 0 — ошибка InvalidPrecision
2. Значение, уже помещающееся в точность, не изменяется (ternary = 0)
3. NaN и ±inf проходят без изменений и без ошибки
4. ternary = sign(result - value): индикатор направления ошибки
"""

from enum import Enum
from typing import Any, Callable

from mpmath.libmp import (
    fzero,
    from_man_exp,
    mpf_add,
    mpf_div,
    mpf_mul,
    mpf_sub,
    round_ceiling,
    round_down,
    round_floor,
    round_nearest,
)

from bigmath.math.bigfloat import BigFloat, Number, div, to_bigfloat
from bigmath.math.numerical_safeguards import GUARD_BITS, resolve_precision, validate_precision


class RoundingMode(str, Enum):
    """Режим округления при понижении точности."""

    TO_NEAREST = "TO_NEAREST"
    TO_ZERO = "TO_ZERO"
    TO_POSITIVE_INF = "TO_POSITIVE_INF"
    TO_NEGATIVE_INF = "TO_NEGATIVE_INF"


# Соответствие режимов кодам округления mpmath.libmp
_LIBMP_ROUNDING: dict[RoundingMode, str] = {
    RoundingMode.TO_NEAREST: round_nearest,
    RoundingMode.TO_ZERO: round_down,
    RoundingMode.TO_POSITIVE_INF: round_ceiling,
    RoundingMode.TO_NEGATIVE_INF: round_floor,
}


# =============================================================================
# ОКРУГЛЕНИЕ
# =============================================================================


def _round_up_magnitude(mode: RoundingMode, negative: bool, kept: int, rem: int, half: int) -> bool:
    if rem == 0:
        return False
    if mode is RoundingMode.TO_NEAREST:
        return rem > half or (rem == half and bool(kept & 1))
    if mode is RoundingMode.TO_ZERO:
        return False
    if mode is RoundingMode.TO_POSITIVE_INF:
        return not negative
    return negative


def round_to_precision(
    value: Number,
    target_precision: int,
    mode: RoundingMode = RoundingMode.TO_NEAREST,
) -> tuple[BigFloat, int]:
    """
    Округлить значение до target_precision бит мантиссы.

    Args:
        value: Исходное значение (на своей, возможно большей, точности)
        target_precision: Целевая точность в битах (> 0)
        mode: Режим округления

    Returns:
        (rounded, ternary), где ternary равен -1, 0 или 1 в зависимости от
        того, меньше, равен или больше результат исходного значения

    Raises:
        InvalidPrecision: Если target_precision <= 0

    Examples:
        >>> round_to_precision(BigFloat(1.5, 64), 1, RoundingMode.TO_NEAREST)[0]
        BigFloat('2.0', prec=1)
        >>> round_to_precision(BigFloat(1.5, 64), 1, RoundingMode.TO_ZERO)[1]
        -1
    """
    target = validate_precision(target_precision)
    mode = RoundingMode(mode)
    x = to_bigfloat(value, target)

    sign, man, exp, bc = x.mpf
    if not man or bc <= target:
        # Ноль, NaN/inf или значение уже помещается: меняется только точность
        return BigFloat._wrap(x.mpf, target), 0

    shift = bc - target
    kept = man >> shift
    rem = man & ((1 << shift) - 1)
    half = 1 << (shift - 1)
    negative = bool(sign)

    up = _round_up_magnitude(mode, negative, kept, rem, half)
    if up:
        kept += 1

    raw = from_man_exp(-kept if negative else kept, exp + shift)
    if rem == 0:
        ternary = 0
    elif up:
        ternary = -1 if negative else 1
    else:
        ternary = 1 if negative else -1
    return BigFloat._wrap(raw, target), ternary


def _ternary(result: BigFloat, exact_raw: tuple) -> int:
    diff = mpf_sub(result.mpf, exact_raw)
    if diff == fzero:
        return 0
    return 1 if diff[0] == 0 else -1


# =============================================================================
# ROUNDED-ОПЕРАЦИИ
# =============================================================================


def add_rounded(
    x: Number, y: Number, prec: int | None = 0, mode: RoundingMode = RoundingMode.TO_NEAREST
) -> tuple[BigFloat, int]:
    """x + y с единственным округлением в режиме mode."""
    p = resolve_precision(prec)
    exact = mpf_add(to_bigfloat(x, p).mpf, to_bigfloat(y, p).mpf)
    return round_to_precision(BigFloat._wrap(exact, p), p, mode)


def sub_rounded(
    x: Number, y: Number, prec: int | None = 0, mode: RoundingMode = RoundingMode.TO_NEAREST
) -> tuple[BigFloat, int]:
    """x - y с единственным округлением в режиме mode."""
    p = resolve_precision(prec)
    exact = mpf_sub(to_bigfloat(x, p).mpf, to_bigfloat(y, p).mpf)
    return round_to_precision(BigFloat._wrap(exact, p), p, mode)


def mul_rounded(
    x: Number, y: Number, prec: int | None = 0, mode: RoundingMode = RoundingMode.TO_NEAREST
) -> tuple[BigFloat, int]:
    """x * y с единственным округлением в режиме mode."""
    p = resolve_precision(prec)
    exact = mpf_mul(to_bigfloat(x, p).mpf, to_bigfloat(y, p).mpf)
    return round_to_precision(BigFloat._wrap(exact, p), p, mode)


def div_rounded(
    x: Number, y: Number, prec: int | None = 0, mode: RoundingMode = RoundingMode.TO_NEAREST
) -> tuple[BigFloat, int]:
    """
    x / y с корректным направленным округлением.

    Частное в общем случае не представимо точно, поэтому округление
    выполняется примитивом, а ternary восстанавливается проверкой q*y
    против x.
    """
    p = resolve_precision(prec)
    mode = RoundingMode(mode)
    a = to_bigfloat(x, p)
    b = to_bigfloat(y, p)
    if b.is_zero() or not (a.is_finite() and b.is_finite()):
        return div(a, b, p), 0
    q = BigFloat._wrap(mpf_div(a.mpf, b.mpf, p, _LIBMP_ROUNDING[mode]), p)
    # sign(q - x/y) = sign(q*y - x) * sign(y)
    back = _ternary(BigFloat._wrap(mpf_mul(q.mpf, b.mpf), p), a.mpf)
    return q, back * b.sign()


def evaluate_rounded(
    func: Callable[..., Any],
    *args: Any,
    prec: int | None = 0,
    mode: RoundingMode = RoundingMode.TO_NEAREST,
) -> tuple[BigFloat, int]:
    """
    Вычислить func(*args, prec=prec + GUARD_BITS) и округлить в режиме mode.

    Используется для трансцендентных функций: guard-биты поглощают ошибку
    ряда, после чего выполняется единственное направленное округление.

    Examples:
        >>> from bigmath.math.roots import sqrt
        >>> value, ternary = evaluate_rounded(sqrt, 2, prec=64, mode=RoundingMode.TO_ZERO)
    """
    p = resolve_precision(prec)
    result = func(*args, prec=p + GUARD_BITS)
    return round_to_precision(result, p, mode)

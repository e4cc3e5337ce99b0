"""
BigFloat — двоичное число с плавающей точкой произвольной точности

Тонкая неизменяемая обёртка над сырыми mpf-кортежами mpmath.libmp
(sign, mantissa, exponent, bitcount). Хранение и базовая арифметика
(add/sub/mul/div с корректным округлением) делегируются mpmath; все
трансцендентные функции, константы и правила округления реализованы
в остальных модулях bigmath.math поверх этой обёртки.

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Каждое значение несёт явную точность (бит мантиссы)
2. Мантисса значения всегда помещается в его точность
3. Результат операции с явной точностью имеет ровно эту точность
4. precision=0 означает DEFAULT_PRECISION
5. Значения неизменяемы: операции возвращают новые объекты
"""

import struct
from typing import Union

from mpmath.libmp import (
    finf,
    fnan,
    fninf,
    fone,
    from_float,
    from_int,
    from_man_exp,
    from_str,
    fzero,
    mpf_abs,
    mpf_add,
    mpf_div,
    mpf_eq,
    mpf_floor,
    mpf_ge,
    mpf_gt,
    mpf_hash,
    mpf_le,
    mpf_lt,
    mpf_mul,
    mpf_neg,
    mpf_pos,
    mpf_shift,
    mpf_sign,
    mpf_sub,
    prec_to_dps,
    repr_dps,
    round_down,
    round_floor,
    round_nearest,
    to_float,
    to_int,
    to_str,
)

from bigmath.math.numerical_safeguards import resolve_precision

# Битов в мантиссе IEEE-754 binary64 (с учётом скрытого бита)
DOUBLE_PRECISION_BITS = 53

Number = Union[int, float, str, "BigFloat"]


class BigFloat:
    """
    Неизменяемое двоичное число произвольной точности.

    Конструктор принимает int, float, десятичную строку или BigFloat и
    округляет значение к ближайшему на заданной точности.

    Арифметические операторы (+, -, *, /) вычисляют результат с точностью
    max(precision операндов); для явной точности используйте функции
    add/sub/mul/div этого модуля.

    Examples:
        >>> BigFloat(1.5, 64).precision
        64
        >>> float(BigFloat("0.1", 128) * 10)
        1.0
    """

    __slots__ = ("_mpf", "_prec")

    def __init__(self, value: Number = 0, prec: int | None = 0):
        p = resolve_precision(prec)
        if isinstance(value, BigFloat):
            raw = mpf_pos(value._mpf, p, round_nearest)
        elif isinstance(value, int):
            raw = from_int(value, p, round_nearest)
        elif isinstance(value, float):
            raw = from_float(value, p, round_nearest)
        elif isinstance(value, str):
            try:
                raw = from_str(value, p, round_nearest)
            except ValueError:
                raise ValueError(f"invalid numeric literal: {value!r}") from None
        else:
            raise TypeError(f"cannot build BigFloat from {type(value).__name__}")
        self._mpf = raw
        self._prec = p

    # =========================================================================
    # КОНСТРУКТОРЫ
    # =========================================================================

    @classmethod
    def _wrap(cls, raw: tuple, prec: int) -> "BigFloat":
        # raw уже помещается в prec бит
        obj = object.__new__(cls)
        obj._mpf = raw
        obj._prec = prec
        return obj

    @classmethod
    def from_raw(cls, raw: tuple, prec: int | None = 0) -> "BigFloat":
        """Создать значение из сырого mpf-кортежа с округлением к ближайшему."""
        p = resolve_precision(prec)
        return cls._wrap(mpf_pos(raw, p, round_nearest), p)

    @classmethod
    def from_man_exp(cls, man: int, exp: int, prec: int | None = 0) -> "BigFloat":
        """Создать значение man * 2^exp (man — знаковое целое)."""
        p = resolve_precision(prec)
        return cls._wrap(from_man_exp(man, exp, p, round_nearest), p)

    @classmethod
    def from_ieee_bits(cls, bits: int, prec: int | None = 0) -> "BigFloat":
        """
        Создать значение из 64-битного представления IEEE-754 binary64.

        Args:
            bits: Битовый образ double (0 <= bits < 2^64)
            prec: Точность результата (0 = по умолчанию)

        Raises:
            ValueError: Если bits вне диапазона 64-битного беззнакового целого
        """
        if not 0 <= bits < (1 << 64):
            raise ValueError(f"bit pattern out of range: {bits:#x}")
        (value,) = struct.unpack(">d", bits.to_bytes(8, "big"))
        return cls(value, prec)

    @classmethod
    def zero(cls, prec: int | None = 0) -> "BigFloat":
        return cls._wrap(fzero, resolve_precision(prec))

    @classmethod
    def one(cls, prec: int | None = 0) -> "BigFloat":
        return cls._wrap(fone, resolve_precision(prec))

    @classmethod
    def nan(cls, prec: int | None = 0) -> "BigFloat":
        return cls._wrap(fnan, resolve_precision(prec))

    @classmethod
    def inf(cls, sign: int = 1, prec: int | None = 0) -> "BigFloat":
        return cls._wrap(finf if sign >= 0 else fninf, resolve_precision(prec))

    # =========================================================================
    # СВОЙСТВА И ЗАПРОСЫ
    # =========================================================================

    @property
    def precision(self) -> int:
        """Точность значения в битах."""
        return self._prec

    @property
    def mpf(self) -> tuple:
        """Сырой mpf-кортеж (sign, man, exp, bc)."""
        return self._mpf

    def with_precision(self, prec: int | None) -> "BigFloat":
        """Вернуть значение, округлённое к ближайшему на точности prec."""
        p = resolve_precision(prec)
        if p == self._prec:
            return self
        return BigFloat._wrap(mpf_pos(self._mpf, p, round_nearest), p)

    def is_zero(self) -> bool:
        return self._mpf == fzero

    def is_nan(self) -> bool:
        return self._mpf == fnan

    def is_inf(self) -> bool:
        return self._mpf in (finf, fninf)

    def is_finite(self) -> bool:
        return not (self.is_nan() or self.is_inf())

    def is_integer(self) -> bool:
        sign, man, exp, bc = self._mpf
        if not man:
            return self._mpf == fzero
        return exp >= 0

    def sign(self) -> int:
        """Знак значения: -1, 0 или 1 (0 для нуля и NaN)."""
        return mpf_sign(self._mpf)

    def exponent(self) -> int:
        """
        Двоичный порядок e, такой что 2^(e-1) <= |x| < 2^e.

        Для нуля возвращает 0.

        Raises:
            ValueError: Для NaN и бесконечностей
        """
        sign, man, exp, bc = self._mpf
        if not man:
            if self._mpf == fzero:
                return 0
            raise ValueError(f"exponent undefined for {self}")
        return exp + bc

    def mant_exp(self) -> tuple[int, int]:
        """
        Точное разложение x = man * 2^exp (man — знаковое целое).

        Raises:
            ValueError: Для NaN и бесконечностей
        """
        sign, man, exp, bc = self._mpf
        if not man and self._mpf != fzero:
            raise ValueError(f"cannot decompose {self}")
        return (-man if sign else man), exp

    def ldexp(self, n: int) -> "BigFloat":
        """Точное умножение на 2^n (точность сохраняется)."""
        return BigFloat._wrap(mpf_shift(self._mpf, n), self._prec)

    def floor(self) -> int:
        """Наибольшее целое <= x."""
        return to_int(mpf_floor(self._mpf), round_floor)

    def nearest_int(self) -> int:
        """Ближайшее целое (ничьи — к чётному)."""
        return to_int(self._mpf, round_nearest)

    def to_int(self) -> int:
        """Целая часть с отбрасыванием дробной (к нулю)."""
        return to_int(self._mpf, round_down)

    def to_float(self) -> float:
        """Преобразование к double (с потерей точности)."""
        return to_float(self._mpf, rnd=round_nearest)

    # =========================================================================
    # ПРОТОКОЛЫ PYTHON
    # =========================================================================

    def __float__(self) -> float:
        return self.to_float()

    def __int__(self) -> int:
        return self.to_int()

    def __bool__(self) -> bool:
        return self._mpf != fzero

    def __hash__(self) -> int:
        return mpf_hash(self._mpf)

    def __repr__(self) -> str:
        return f"BigFloat('{to_str(self._mpf, repr_dps(self._prec))}', prec={self._prec})"

    def __str__(self) -> str:
        return to_str(self._mpf, prec_to_dps(self._prec))

    def to_decimal_string(self) -> str:
        """Десятичная строка, однозначно восстанавливающая значение на его точности."""
        return to_str(self._mpf, repr_dps(self._prec))

    def __neg__(self) -> "BigFloat":
        return BigFloat._wrap(mpf_neg(self._mpf), self._prec)

    def __pos__(self) -> "BigFloat":
        return self

    def __abs__(self) -> "BigFloat":
        return BigFloat._wrap(mpf_abs(self._mpf), self._prec)

    def _binary(self, other, op, reflected: bool = False):
        raw = _operand_raw(other)
        if raw is None:
            return NotImplemented
        prec = self._prec
        if isinstance(other, BigFloat):
            prec = max(prec, other._prec)
        if reflected:
            return op(BigFloat._wrap(raw, prec), self, prec)
        return op(self, BigFloat._wrap(raw, prec), prec)

    def __add__(self, other):
        return self._binary(other, add)

    def __radd__(self, other):
        return self._binary(other, add, reflected=True)

    def __sub__(self, other):
        return self._binary(other, sub)

    def __rsub__(self, other):
        return self._binary(other, sub, reflected=True)

    def __mul__(self, other):
        return self._binary(other, mul)

    def __rmul__(self, other):
        return self._binary(other, mul, reflected=True)

    def __truediv__(self, other):
        return self._binary(other, div)

    def __rtruediv__(self, other):
        return self._binary(other, div, reflected=True)

    def _compare(self, other, predicate):
        raw = _operand_raw(other)
        if raw is None:
            return NotImplemented
        return predicate(self._mpf, raw)

    def __eq__(self, other):
        return self._compare(other, mpf_eq)

    def __ne__(self, other):
        result = self._compare(other, mpf_eq)
        if result is NotImplemented:
            return result
        return not result

    def __lt__(self, other):
        return self._compare(other, mpf_lt)

    def __le__(self, other):
        return self._compare(other, mpf_le)

    def __gt__(self, other):
        return self._compare(other, mpf_gt)

    def __ge__(self, other):
        return self._compare(other, mpf_ge)


def _operand_raw(value) -> tuple | None:
    """Точное сырое представление операнда оператора (None — тип не поддерживается)."""
    if isinstance(value, BigFloat):
        return value._mpf
    if isinstance(value, int):
        return from_int(value)
    if isinstance(value, float):
        return from_float(value, DOUBLE_PRECISION_BITS)
    return None


# =============================================================================
# ПРИВЕДЕНИЕ ТИПОВ
# =============================================================================


def to_bigfloat(value: Number, prec: int | None = 0) -> BigFloat:
    """
    Привести аргумент к BigFloat без потери информации, где это возможно.

    - BigFloat возвращается как есть (операнды читаются точно)
    - int и float преобразуются точно (точность не ниже их разрядности)
    - строка разбирается на точности prec

    Args:
        value: Аргумент функции движка
        prec: Точность для строк и минимальная точность для чисел

    Raises:
        TypeError: Неподдерживаемый тип
        ValueError: Строка не является числом
    """
    if isinstance(value, BigFloat):
        return value
    p = resolve_precision(prec)
    if isinstance(value, int):
        return BigFloat(value, max(p, value.bit_length()))
    if isinstance(value, float):
        return BigFloat(value, max(p, DOUBLE_PRECISION_BITS))
    return BigFloat(value, p)


def coerce_bigfloat(value):
    """Before-валидатор pydantic: числа и строки -> BigFloat."""
    if isinstance(value, BigFloat):
        return value
    if isinstance(value, (int, float, str)):
        return to_bigfloat(value)
    return value


# =============================================================================
# АРИФМЕТИКА С ЯВНОЙ ТОЧНОСТЬЮ
# =============================================================================


def add(x: Number, y: Number, prec: int | None = 0) -> BigFloat:
    """x + y, округлённое к ближайшему на точности prec (0 = по умолчанию)."""
    p = resolve_precision(prec)
    return BigFloat._wrap(mpf_add(to_bigfloat(x, p)._mpf, to_bigfloat(y, p)._mpf, p, round_nearest), p)


def sub(x: Number, y: Number, prec: int | None = 0) -> BigFloat:
    """x - y на точности prec."""
    p = resolve_precision(prec)
    return BigFloat._wrap(mpf_sub(to_bigfloat(x, p)._mpf, to_bigfloat(y, p)._mpf, p, round_nearest), p)


def mul(x: Number, y: Number, prec: int | None = 0) -> BigFloat:
    """x * y на точности prec."""
    p = resolve_precision(prec)
    return BigFloat._wrap(mpf_mul(to_bigfloat(x, p)._mpf, to_bigfloat(y, p)._mpf, p, round_nearest), p)


def div(x: Number, y: Number, prec: int | None = 0) -> BigFloat:
    """
    x / y на точности prec.

    Деление на ноль не бросает исключение: x/0 = ±inf, 0/0 = NaN
    (семантика IEEE-754).
    """
    p = resolve_precision(prec)
    a = to_bigfloat(x, p)._mpf
    b = to_bigfloat(y, p)._mpf
    if b == fzero:
        if a == fzero or a == fnan:
            return BigFloat._wrap(fnan, p)
        return BigFloat._wrap(finf if mpf_sign(a) > 0 else fninf, p)
    return BigFloat._wrap(mpf_div(a, b, p, round_nearest), p)


def neg(x: Number, prec: int | None = 0) -> BigFloat:
    """-x на точности prec."""
    p = resolve_precision(prec)
    return BigFloat._wrap(mpf_neg(to_bigfloat(x, p)._mpf, p, round_nearest), p)


def absolute(x: Number, prec: int | None = 0) -> BigFloat:
    """|x| на точности prec."""
    p = resolve_precision(prec)
    return BigFloat._wrap(mpf_abs(to_bigfloat(x, p)._mpf, p, round_nearest), p)


def compare(x: Number, y: Number) -> int:
    """
    Точное сравнение: -1, 0 или 1.

    Raises:
        ValueError: Если один из аргументов NaN (значения не упорядочены)
    """
    a = to_bigfloat(x)
    b = to_bigfloat(y)
    if a.is_nan() or b.is_nan():
        raise ValueError("cannot order NaN")
    if a < b:
        return -1
    if a > b:
        return 1
    return 0

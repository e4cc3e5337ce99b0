"""
Vector — векторы Vec3 и Vec6 произвольной точности

Immutable Pydantic модели с компонентами BigFloat. Все операции принимают
точность prec (0 = по умолчанию), применяемую к каждой компоненте;
модуль вычисляется как сумма квадратов на prec + GUARD_BITS с финальным
sqrt на точности prec.

Vec6 делится на позиционную половину (x, y, z) и скоростную (vx, vy, vz).

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Модели неизменяемы (frozen=True): операции возвращают новые векторы
2. copy() создаёт новые объекты компонент, не разделяемые с исходным
3. Vec6.magnitude — норма позиционной половины
"""

from typing import Iterable

from pydantic import BaseModel, Field, field_validator

from bigmath.math.bigfloat import BigFloat, Number, add, coerce_bigfloat, div, mul, neg, sub
from bigmath.math.numerical_safeguards import DomainError, GUARD_BITS, resolve_precision
from bigmath.math.roots import sqrt
from bigmath.math.scalar_utils import dot_product, max_value, min_value
from bigmath.math.trigonometric import acos


# =============================================================================
# БАЗОВЫЙ ВЕКТОР
# =============================================================================


class _VectorBase(BaseModel):
    """Поэлементные операции над полями модели в порядке объявления."""

    model_config = {"frozen": True, "arbitrary_types_allowed": True}  # Immutable

    @classmethod
    def field_names(cls) -> tuple[str, ...]:
        return tuple(cls.model_fields)

    @classmethod
    def from_values(cls, values: Iterable[Number], prec: int | None = 0):
        """Собрать вектор из последовательности чисел, округлив к prec."""
        values = list(values)
        names = cls.field_names()
        if len(values) != len(names):
            raise ValueError(f"{cls.__name__} expects {len(names)} components, got {len(values)}")
        return cls(**{name: BigFloat(v, prec) for name, v in zip(names, values)})

    def components(self) -> tuple[BigFloat, ...]:
        return tuple(getattr(self, name) for name in self.field_names())

    def _check_same_kind(self, other) -> None:
        if type(other) is not type(self):
            raise TypeError(f"expected {type(self).__name__}, got {type(other).__name__}")

    def _map(self, func):
        return type(self)(**{name: func(getattr(self, name)) for name in self.field_names()})

    def _zip(self, other, func):
        self._check_same_kind(other)
        return type(self)(
            **{name: func(getattr(self, name), getattr(other, name)) for name in self.field_names()}
        )

    # -------------------------------------------------------------------------
    # Поэлементная арифметика
    # -------------------------------------------------------------------------

    def add(self, other, prec: int | None = 0):
        """Поэлементная сумма."""
        p = resolve_precision(prec)
        return self._zip(other, lambda a, b: add(a, b, p))

    def sub(self, other, prec: int | None = 0):
        """Поэлементная разность."""
        p = resolve_precision(prec)
        return self._zip(other, lambda a, b: sub(a, b, p))

    def mul(self, scalar: Number, prec: int | None = 0):
        """Умножение на скаляр."""
        p = resolve_precision(prec)
        return self._map(lambda a: mul(a, scalar, p))

    def negate(self, prec: int | None = 0):
        """Поэлементное отрицание."""
        p = resolve_precision(prec)
        return self._map(lambda a: neg(a, p))

    def elementwise_max(self, other, prec: int | None = 0):
        p = resolve_precision(prec)
        return self._zip(other, lambda a, b: max_value(a, b, p))

    def elementwise_min(self, other, prec: int | None = 0):
        p = resolve_precision(prec)
        return self._zip(other, lambda a, b: min_value(a, b, p))

    def with_precision(self, prec: int | None = 0):
        """Округлить все компоненты к prec."""
        p = resolve_precision(prec)
        return self._map(lambda a: a.with_precision(p))

    # -------------------------------------------------------------------------
    # Копирование
    # -------------------------------------------------------------------------

    def copy(self):
        """Глубокая копия: новые объекты компонент на их исходной точности."""
        return self._map(lambda a: BigFloat.from_raw(a.mpf, a.precision))

    def replace(self, **changes: Number):
        """
        Копия с изменёнными компонентами (исходный вектор не меняется).

        Examples:
            >>> v = Vec3.from_floats(1, 2, 3)
            >>> v.replace(x=10).x == 10, v.x == 1
            (True, True)
        """
        unknown = set(changes) - set(self.field_names())
        if unknown:
            raise ValueError(f"unknown components for {type(self).__name__}: {sorted(unknown)}")
        data = {name: getattr(self, name) for name in self.field_names()}
        data.update(changes)
        return type(self)(**data)

    def to_floats(self) -> tuple[float, ...]:
        """Компоненты как double (с потерей точности)."""
        return tuple(c.to_float() for c in self.components())


def _norm(components: tuple[BigFloat, ...], prec: int | None) -> BigFloat:
    p = resolve_precision(prec)
    squares = dot_product(components, components, p + GUARD_BITS)
    return sqrt(squares, p)


# =============================================================================
# VEC3
# =============================================================================


class Vec3(_VectorBase):
    """
    Трёхмерный вектор (точка, направление или скорость).

    Examples:
        >>> Vec3.from_floats(3, 4, 0).magnitude(64)
        BigFloat('5.0', prec=64)
    """

    x: BigFloat = Field(..., description="Компонента X")
    y: BigFloat = Field(..., description="Компонента Y")
    z: BigFloat = Field(..., description="Компонента Z")

    @field_validator("x", "y", "z", mode="before")
    @classmethod
    def coerce_component(cls, v):
        return coerce_bigfloat(v)

    @classmethod
    def from_floats(cls, x: Number, y: Number, z: Number, prec: int | None = 0) -> "Vec3":
        return cls.from_values((x, y, z), prec)

    @classmethod
    def zero(cls, prec: int | None = 0) -> "Vec3":
        return cls.from_values((0, 0, 0), prec)

    def dot(self, other: "Vec3", prec: int | None = 0) -> BigFloat:
        """Скалярное произведение."""
        self._check_same_kind(other)
        return dot_product(self.components(), other.components(), prec)

    def magnitude(self, prec: int | None = 0) -> BigFloat:
        """Евклидова норма √(x² + y² + z²)."""
        return _norm(self.components(), prec)

    def cross(self, other: "Vec3", prec: int | None = 0) -> "Vec3":
        """Векторное произведение (компоненты через dot_product)."""
        self._check_same_kind(other)
        p = resolve_precision(prec)
        return Vec3(
            x=dot_product((self.y, -self.z), (other.z, other.y), p),
            y=dot_product((self.z, -self.x), (other.x, other.z), p),
            z=dot_product((self.x, -self.y), (other.y, other.x), p),
        )

    def normalize(self, prec: int | None = 0) -> "Vec3":
        """Единичный вектор того же направления; нулевой вектор остаётся нулевым."""
        p = resolve_precision(prec)
        length = self.magnitude(p + GUARD_BITS)
        if length.is_zero():
            return Vec3.zero(p)
        return self._map(lambda a: div(a, length, p))

    def distance(self, other: "Vec3", prec: int | None = 0) -> BigFloat:
        """Евклидово расстояние между точками."""
        p = resolve_precision(prec)
        return self.sub(other, p + GUARD_BITS).magnitude(p)

    def angle(self, other: "Vec3", prec: int | None = 0) -> BigFloat:
        """
        Угол между векторами в радианах, [0, π].

        Raises:
            DomainError: Если один из векторов нулевой (fallback = NaN)
        """
        p = resolve_precision(prec)
        work = p + GUARD_BITS
        denominator = mul(self.magnitude(work), other.magnitude(work), work)
        if denominator.is_zero():
            raise DomainError("angle with a zero vector is undefined", fallback=BigFloat.nan(p))
        cosine = div(self.dot(other, work), denominator, work)
        # Ошибка округления может вывести косинус за [-1, 1]
        cosine = max_value(min_value(cosine, 1, work), -1, work)
        return acos(cosine, p)

    def project(self, onto: "Vec3", prec: int | None = 0) -> "Vec3":
        """
        Проекция на вектор onto: (self·onto / onto·onto) * onto.

        Raises:
            DomainError: Проекция на нулевой вектор (fallback = нулевой вектор)
        """
        p = resolve_precision(prec)
        work = p + GUARD_BITS
        denominator = onto.dot(onto, work)
        if denominator.is_zero():
            raise DomainError("projection onto a zero vector", fallback=Vec3.zero(p))
        factor = div(self.dot(onto, work), denominator, work)
        return onto.mul(factor, p)


# =============================================================================
# VEC6
# =============================================================================


class Vec6(_VectorBase):
    """
    Вектор состояния: позиция (x, y, z) и скорость (vx, vy, vz).

    Examples:
        >>> Vec6.from_floats(3, 4, 0, 0, 0, 0).magnitude(64)
        BigFloat('5.0', prec=64)
    """

    x: BigFloat = Field(..., description="Позиция X")
    y: BigFloat = Field(..., description="Позиция Y")
    z: BigFloat = Field(..., description="Позиция Z")
    vx: BigFloat = Field(..., description="Скорость X")
    vy: BigFloat = Field(..., description="Скорость Y")
    vz: BigFloat = Field(..., description="Скорость Z")

    @field_validator("x", "y", "z", "vx", "vy", "vz", mode="before")
    @classmethod
    def coerce_component(cls, v):
        return coerce_bigfloat(v)

    @classmethod
    def from_floats(
        cls, x: Number, y: Number, z: Number, vx: Number, vy: Number, vz: Number, prec: int | None = 0
    ) -> "Vec6":
        return cls.from_values((x, y, z, vx, vy, vz), prec)

    @classmethod
    def from_parts(cls, position: Vec3, velocity: Vec3) -> "Vec6":
        """Собрать состояние из позиционной и скоростной половин."""
        return cls(
            x=position.x, y=position.y, z=position.z, vx=velocity.x, vy=velocity.y, vz=velocity.z
        )

    @classmethod
    def zero(cls, prec: int | None = 0) -> "Vec6":
        return cls.from_values((0,) * 6, prec)

    @property
    def position(self) -> Vec3:
        return Vec3(x=self.x, y=self.y, z=self.z)

    @property
    def velocity(self) -> Vec3:
        return Vec3(x=self.vx, y=self.vy, z=self.vz)

    def magnitude(self, prec: int | None = 0) -> BigFloat:
        """Норма позиционной половины √(x² + y² + z²)."""
        return _norm((self.x, self.y, self.z), prec)

    def velocity_magnitude(self, prec: int | None = 0) -> BigFloat:
        """Норма скоростной половины (модуль скорости)."""
        return _norm((self.vx, self.vy, self.vz), prec)

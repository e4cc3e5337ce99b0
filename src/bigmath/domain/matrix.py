"""
Matrix3x3 — матрица 3×3 произвольной точности

Immutable Pydantic модель, строки хранятся как кортеж кортежей BigFloat
(row-major). Произведения строятся построчно через dot_product, так что
каждый элемент результата округляется к prec один раз после накопления
с guard-битами.
"""

from typing import Sequence

from pydantic import BaseModel, Field, field_validator

from bigmath.domain.vector import Vec3
from bigmath.math.bigfloat import BigFloat, Number, coerce_bigfloat, div
from bigmath.math.numerical_safeguards import DomainError, GUARD_BITS, resolve_precision
from bigmath.math.scalar_utils import dot_product

MATRIX_SIZE = 3

Row = tuple[BigFloat, BigFloat, BigFloat]


class Matrix3x3(BaseModel):
    """
    Матрица 3×3 (общее линейное отображение или матрица поворота).

    Examples:
        >>> Matrix3x3.identity(64).element(1, 1)
        BigFloat('1.0', prec=64)
    """

    rows: tuple[Row, Row, Row] = Field(..., description="Строки матрицы (row-major)")

    model_config = {"frozen": True, "arbitrary_types_allowed": True}  # Immutable

    @field_validator("rows", mode="before")
    @classmethod
    def coerce_rows(cls, v):
        """Проверка формы 3×3 и приведение элементов к BigFloat."""
        if isinstance(v, (str, bytes)) or not isinstance(v, Sequence):
            raise ValueError("rows must be a 3x3 sequence")
        if len(v) != MATRIX_SIZE or any(
            isinstance(row, (str, bytes)) or not isinstance(row, Sequence) or len(row) != MATRIX_SIZE
            for row in v
        ):
            raise ValueError("rows must be a 3x3 sequence")
        return tuple(tuple(coerce_bigfloat(item) for item in row) for row in v)

    # =========================================================================
    # КОНСТРУКТОРЫ
    # =========================================================================

    @classmethod
    def from_floats(cls, rows: Sequence[Sequence[Number]], prec: int | None = 0) -> "Matrix3x3":
        """Собрать матрицу из чисел, округлив каждый элемент к prec."""
        p = resolve_precision(prec)
        return cls(rows=[[BigFloat(item, p) for item in row] for row in rows])

    @classmethod
    def identity(cls, prec: int | None = 0) -> "Matrix3x3":
        """Единичная матрица на точности prec (0 = по умолчанию)."""
        return cls.from_floats([[1, 0, 0], [0, 1, 0], [0, 0, 1]], prec)

    @classmethod
    def zeros(cls, prec: int | None = 0) -> "Matrix3x3":
        return cls.from_floats([[0] * MATRIX_SIZE] * MATRIX_SIZE, prec)

    # =========================================================================
    # ДОСТУП
    # =========================================================================

    def element(self, i: int, j: int) -> BigFloat:
        return self.rows[i][j]

    def row(self, i: int) -> Row:
        return self.rows[i]

    def column(self, j: int) -> Row:
        return tuple(row[j] for row in self.rows)

    def to_floats(self) -> tuple[tuple[float, ...], ...]:
        return tuple(tuple(item.to_float() for item in row) for row in self.rows)

    def copy(self) -> "Matrix3x3":
        """Глубокая копия: новые объекты элементов."""
        return Matrix3x3(rows=[[BigFloat.from_raw(item.mpf, item.precision) for item in row] for row in self.rows])

    def replace(self, i: int, j: int, value: Number) -> "Matrix3x3":
        """Копия с заменённым элементом (i, j)."""
        rows = [list(row) for row in self.rows]
        rows[i][j] = value
        return Matrix3x3(rows=rows)

    # =========================================================================
    # ОПЕРАЦИИ
    # =========================================================================

    def mul_vec(self, vector: Vec3, prec: int | None = 0) -> Vec3:
        """Произведение матрица × вектор."""
        p = resolve_precision(prec)
        v = vector.components()
        x, y, z = (dot_product(row, v, p) for row in self.rows)
        return Vec3(x=x, y=y, z=z)

    def mul_mat(self, other: "Matrix3x3", prec: int | None = 0) -> "Matrix3x3":
        """Произведение матриц self × other."""
        p = resolve_precision(prec)
        columns = [other.column(j) for j in range(MATRIX_SIZE)]
        return Matrix3x3(rows=[[dot_product(row, col, p) for col in columns] for row in self.rows])

    def transpose(self) -> "Matrix3x3":
        return Matrix3x3(rows=[self.column(j) for j in range(MATRIX_SIZE)])

    def _cofactors(self, prec: int) -> list[list[BigFloat]]:
        """Матрица алгебраических дополнений C[i][j]."""
        m = self.rows
        cof = []
        for i in range(MATRIX_SIZE):
            r1, r2 = (i + 1) % MATRIX_SIZE, (i + 2) % MATRIX_SIZE
            row = []
            for j in range(MATRIX_SIZE):
                c1, c2 = (j + 1) % MATRIX_SIZE, (j + 2) % MATRIX_SIZE
                # Циклическая перестановка индексов даёт знак (-1)^(i+j) автоматически
                row.append(dot_product((m[r1][c1], -m[r1][c2]), (m[r2][c2], m[r2][c1]), prec))
            cof.append(row)
        return cof

    def determinant(self, prec: int | None = 0) -> BigFloat:
        """Определитель (разложение по первой строке)."""
        p = resolve_precision(prec)
        cof = self._cofactors(p + GUARD_BITS)
        return dot_product(self.rows[0], cof[0], p)

    def inverse(self, prec: int | None = 0) -> "Matrix3x3":
        """
        Обратная матрица adj(M) / det(M).

        Raises:
            DomainError: Если матрица вырождена (det = 0)
        """
        p = resolve_precision(prec)
        work = p + GUARD_BITS
        cof = self._cofactors(work)
        det = dot_product(self.rows[0], cof[0], work)
        if det.is_zero() or not det.is_finite():
            raise DomainError("matrix is singular", fallback=None)
        # adj(M) = C^T
        return Matrix3x3(rows=[[div(cof[j][i], det, p) for j in range(MATRIX_SIZE)] for i in range(MATRIX_SIZE)])


# =============================================================================
# ФУНКЦИИ МОДУЛЯ
# =============================================================================


def identity(prec: int | None = 0) -> Matrix3x3:
    """Единичная матрица 3×3 на точности prec."""
    return Matrix3x3.identity(prec)


def mat_mul(matrix: Matrix3x3, vector: Vec3, prec: int | None = 0) -> Vec3:
    """Произведение матрица × вектор: построчный dot_product."""
    return matrix.mul_vec(vector, prec)

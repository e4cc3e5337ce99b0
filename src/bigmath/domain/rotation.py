"""
Rotation — матрицы поворота из углов Эйлера

Элементарные повороты (активные, правая система координат):
    Rx(a) = [[1, 0, 0], [0, cos a, -sin a], [0, sin a, cos a]]
    Ry(b) = [[cos b, 0, sin b], [0, 1, 0], [-sin b, 0, cos b]]
    Rz(g) = [[cos g, -sin g, 0], [sin g, cos g, 0], [0, 0, 1]]

Порядок композиции фиксирован: R = Rz(g) · Ry(b) · Rx(a), т.е. к вектору
сначала применяется поворот вокруг X, затем Y, затем Z.

Поворот Vec6 применяется к обеим половинам: позиция и скорость
поворачиваются одной матрицей (скорость — сопутствующий вектор).
"""

from typing import Sequence

from bigmath.domain.matrix import Matrix3x3
from bigmath.domain.vector import Vec3, Vec6
from bigmath.math.bigfloat import BigFloat, Number
from bigmath.math.numerical_safeguards import GUARD_BITS, LengthMismatch, resolve_precision
from bigmath.math.trigonometric import sincos

EULER_ANGLE_COUNT = 3


def rotation_x(angle: Number, prec: int | None = 0) -> Matrix3x3:
    """Поворот вокруг оси X на угол angle (радианы)."""
    p = resolve_precision(prec)
    s, c = sincos(angle, p)
    one, zero = BigFloat.one(p), BigFloat.zero(p)
    return Matrix3x3(rows=[[one, zero, zero], [zero, c, -s], [zero, s, c]])


def rotation_y(angle: Number, prec: int | None = 0) -> Matrix3x3:
    """Поворот вокруг оси Y на угол angle (радианы)."""
    p = resolve_precision(prec)
    s, c = sincos(angle, p)
    one, zero = BigFloat.one(p), BigFloat.zero(p)
    return Matrix3x3(rows=[[c, zero, s], [zero, one, zero], [-s, zero, c]])


def rotation_z(angle: Number, prec: int | None = 0) -> Matrix3x3:
    """Поворот вокруг оси Z на угол angle (радианы)."""
    p = resolve_precision(prec)
    s, c = sincos(angle, p)
    one, zero = BigFloat.one(p), BigFloat.zero(p)
    return Matrix3x3(rows=[[c, -s, zero], [s, c, zero], [zero, zero, one]])


def create_rotation_matrix(angles: Sequence[Number], prec: int | None = 0) -> Matrix3x3:
    """
    Матрица поворота из углов Эйлера (a, b, g) вокруг X, Y, Z.

    R = Rz(g) · Ry(b) · Rx(a). Промежуточные произведения вычисляются на
    prec + GUARD_BITS, результат округляется к prec.

    Args:
        angles: Три угла в радианах (вокруг X, Y, Z)
        prec: Точность результата (0 = по умолчанию)

    Returns:
        Ортогональная матрица поворота

    Raises:
        LengthMismatch: Если углов не три

    Examples:
        >>> create_rotation_matrix([0, 0, 0], 64) == Matrix3x3.identity(64)
        True
    """
    p = resolve_precision(prec)
    if len(angles) != EULER_ANGLE_COUNT:
        raise LengthMismatch(
            f"expected {EULER_ANGLE_COUNT} Euler angles, got {len(angles)}",
            fallback=Matrix3x3.identity(p),
        )
    work = p + GUARD_BITS
    alpha, beta, gamma = angles
    rotation = rotation_z(gamma, work).mul_mat(rotation_y(beta, work), work)
    rotation = rotation.mul_mat(rotation_x(alpha, work), p)
    return rotation


def apply_rotation_to_vec3(matrix: Matrix3x3, vector: Vec3, prec: int | None = 0) -> Vec3:
    """Повернуть Vec3."""
    return matrix.mul_vec(vector, prec)


def apply_rotation_to_vec6(matrix: Matrix3x3, state: Vec6, prec: int | None = 0) -> Vec6:
    """
    Повернуть вектор состояния: позиция и скорость поворачиваются одной матрицей.

    Args:
        matrix: Матрица поворота
        state: Вектор состояния (позиция + скорость)
        prec: Точность результата (0 = по умолчанию)
    """
    p = resolve_precision(prec)
    return Vec6.from_parts(matrix.mul_vec(state.position, p), matrix.mul_vec(state.velocity, p))

"""
Domain value objects.

Vec3, Vec6 и Matrix3x3 поверх BigFloat, построение и применение поворотов.
"""

from bigmath.domain.matrix import Matrix3x3, identity, mat_mul
from bigmath.domain.rotation import (
    apply_rotation_to_vec3,
    apply_rotation_to_vec6,
    create_rotation_matrix,
    rotation_x,
    rotation_y,
    rotation_z,
)
from bigmath.domain.vector import Vec3, Vec6

__all__ = [
    # Vectors
    "Vec3",
    "Vec6",
    # Matrix
    "Matrix3x3",
    "identity",
    "mat_mul",
    # Rotation
    "rotation_x",
    "rotation_y",
    "rotation_z",
    "create_rotation_matrix",
    "apply_rotation_to_vec3",
    "apply_rotation_to_vec6",
]

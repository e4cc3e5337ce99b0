"""
bigmath — арифметика произвольной точности поверх mpmath.libmp

Трансцендентные функции, константы и направленное округление с явной
точностью в битах, а также векторная (Vec3, Vec6) и матричная (3×3)
алгебра с построением матриц поворота из углов Эйлера.

Подпакеты:
- bigmath.math       : BigFloat, округление, константы, функции
- bigmath.domain     : Vec3, Vec6, Matrix3x3, повороты
- bigmath.contracts  : JSON Schema контракты и сериализация
"""

import logging

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"

"""
Math modules для bigmath

Число BigFloat произвольной точности и численные алгоритмы поверх него.
"""

# Numerical Safeguards (точность, ошибки, границы итераций)
from bigmath.math.numerical_safeguards import (
    # Precision constants
    DEFAULT_PRECISION,
    GUARD_BITS,
    MAX_REDUCTION_RETRIES,
    MIN_PRECISION,
    NEWTON_START_PRECISION,
    # Errors
    BigMathError,
    DomainError,
    InvalidPrecision,
    LengthMismatch,
    # Precision helpers
    newton_iteration_limit,
    resolve_precision,
    series_term_limit,
    try_compute,
    validate_precision,
    working_precision,
)

# BigFloat (примитив точности)
from bigmath.math.bigfloat import (
    BigFloat,
    absolute,
    add,
    coerce_bigfloat,
    compare,
    div,
    mul,
    neg,
    sub,
    to_bigfloat,
)

# Rounding Engine
from bigmath.math.rounding import (
    RoundingMode,
    add_rounded,
    div_rounded,
    evaluate_rounded,
    mul_rounded,
    round_to_precision,
    sub_rounded,
)

# Scalar Utilities
from bigmath.math.scalar_utils import (
    abs_value,
    dot_product,
    fma,
    is_close,
    max_value,
    min_value,
    power_int,
    ulp,
)

# Roots
from bigmath.math.roots import cbrt, nth_root, sqrt

# Constants
from bigmath.math.constants import catalan, e, euler_gamma, half_pi, ln2, ln10, phi, pi, sqrt2, sqrt3, two_pi

# Exp / Log / Pow
from bigmath.math.exp_log import exp, expm1, ln, log1p, log2, log10, log_base, pow

# Trigonometric
from bigmath.math.trigonometric import acos, asin, atan, atan2, cos, reduce_half_pi, sin, sincos, tan

# Hyperbolic
from bigmath.math.hyperbolic import acosh, asinh, atanh, cosh, sinh, tanh

# Angles
from bigmath.math.angles import deg_norm, deg_to_rad, rad_norm, rad_norm_0_2pi, rad_to_deg

# Special Functions
from bigmath.math.special import bessel_j, bessel_y, erf, erfc, gamma, lgamma

# Combinatorics
from bigmath.math.combinatorics import binomial, factorial

__all__ = [
    # Numerical Safeguards
    "DEFAULT_PRECISION",
    "GUARD_BITS",
    "MAX_REDUCTION_RETRIES",
    "MIN_PRECISION",
    "NEWTON_START_PRECISION",
    "BigMathError",
    "DomainError",
    "InvalidPrecision",
    "LengthMismatch",
    "newton_iteration_limit",
    "resolve_precision",
    "series_term_limit",
    "try_compute",
    "validate_precision",
    "working_precision",
    # BigFloat
    "BigFloat",
    "absolute",
    "add",
    "coerce_bigfloat",
    "compare",
    "div",
    "mul",
    "neg",
    "sub",
    "to_bigfloat",
    # Rounding
    "RoundingMode",
    "add_rounded",
    "div_rounded",
    "evaluate_rounded",
    "mul_rounded",
    "round_to_precision",
    "sub_rounded",
    # Scalar Utilities
    "abs_value",
    "dot_product",
    "fma",
    "is_close",
    "max_value",
    "min_value",
    "power_int",
    "ulp",
    # Roots
    "cbrt",
    "nth_root",
    "sqrt",
    # Constants
    "catalan",
    "e",
    "euler_gamma",
    "half_pi",
    "ln2",
    "ln10",
    "phi",
    "pi",
    "sqrt2",
    "sqrt3",
    "two_pi",
    # Exp / Log / Pow
    "exp",
    "expm1",
    "ln",
    "log1p",
    "log2",
    "log10",
    "log_base",
    "pow",
    # Trigonometric
    "acos",
    "asin",
    "atan",
    "atan2",
    "cos",
    "reduce_half_pi",
    "sin",
    "sincos",
    "tan",
    # Hyperbolic
    "acosh",
    "asinh",
    "atanh",
    "cosh",
    "sinh",
    "tanh",
    # Angles
    "deg_norm",
    "deg_to_rad",
    "rad_norm",
    "rad_norm_0_2pi",
    "rad_to_deg",
    # Special Functions
    "bessel_j",
    "bessel_y",
    "erf",
    "erfc",
    "gamma",
    "lgamma",
    # Combinatorics
    "binomial",
    "factorial",
]

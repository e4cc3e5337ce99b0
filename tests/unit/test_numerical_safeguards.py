"""
Тесты для модуля Numerical Safeguards

Проверяет:
1. Разрешение точности (0/None -> DEFAULT_PRECISION)
2. Отказ от отрицательной и нецелой точности
3. Таксономию ошибок и fallback-значения
4. Границы итераций рядов и метода Ньютона
5. try_compute: пара (значение, ошибка)
"""

import pytest

from bigmath.math.numerical_safeguards import (
    DEFAULT_PRECISION,
    GUARD_BITS,
    BigMathError,
    DomainError,
    InvalidPrecision,
    LengthMismatch,
    newton_iteration_limit,
    resolve_precision,
    series_term_limit,
    try_compute,
    validate_precision,
    working_precision,
)
from bigmath.math.roots import sqrt
from bigmath.math.scalar_utils import dot_product

# =============================================================================
# ТЕСТЫ РАЗРЕШЕНИЯ ТОЧНОСТИ
# =============================================================================


class TestResolvePrecision:
    """Тесты для resolve_precision"""

    def test_zero_means_default(self) -> None:
        """0 означает точность по умолчанию"""
        assert resolve_precision(0) == DEFAULT_PRECISION

    def test_none_means_default(self) -> None:
        """None означает точность по умолчанию"""
        assert resolve_precision(None) == DEFAULT_PRECISION

    def test_default_is_positive(self) -> None:
        """Точность по умолчанию положительна"""
        assert DEFAULT_PRECISION > 0

    def test_explicit_precision_unchanged(self) -> None:
        """Явная точность возвращается как есть"""
        assert resolve_precision(1) == 1
        assert resolve_precision(64) == 64
        assert resolve_precision(10_000) == 10_000

    def test_negative_precision_rejected(self) -> None:
        """Отрицательная точность — InvalidPrecision"""
        with pytest.raises(InvalidPrecision, match="non-negative"):
            resolve_precision(-1)

    def test_float_precision_rejected(self) -> None:
        """Нецелая точность — InvalidPrecision"""
        with pytest.raises(InvalidPrecision, match="must be int"):
            resolve_precision(64.0)

    def test_bool_precision_rejected(self) -> None:
        """bool не принимается как точность"""
        with pytest.raises(InvalidPrecision, match="must be int"):
            resolve_precision(True)

    def test_string_precision_rejected(self) -> None:
        """Строка не принимается как точность"""
        with pytest.raises(InvalidPrecision):
            resolve_precision("64")


class TestValidatePrecision:
    """Тесты для validate_precision"""

    def test_positive_accepted(self) -> None:
        """Положительная точность принимается"""
        assert validate_precision(53) == 53

    def test_zero_rejected(self) -> None:
        """0 не допускается как цель округления"""
        with pytest.raises(InvalidPrecision, match="positive"):
            validate_precision(0)

    def test_negative_rejected(self) -> None:
        """Отрицательная точность отклоняется"""
        with pytest.raises(InvalidPrecision, match="positive"):
            validate_precision(-8)


class TestWorkingPrecision:
    """Тесты для working_precision"""

    def test_adds_guard_bits(self) -> None:
        """По умолчанию добавляются GUARD_BITS"""
        assert working_precision(64) == 64 + GUARD_BITS

    def test_default_base(self) -> None:
        """0 разрешается до добавления запаса"""
        assert working_precision(0) == DEFAULT_PRECISION + GUARD_BITS

    def test_negative_extra_ignored(self) -> None:
        """Отрицательный запас не уменьшает точность"""
        assert working_precision(64, extra=-10) == 64


# =============================================================================
# ТЕСТЫ ОШИБОК
# =============================================================================


class TestErrorTaxonomy:
    """Тесты иерархии ошибок"""

    def test_errors_are_value_errors(self) -> None:
        """Все ошибки движка — подклассы ValueError"""
        for error_cls in (InvalidPrecision, DomainError, LengthMismatch):
            assert issubclass(error_cls, BigMathError)
            assert issubclass(error_cls, ValueError)

    def test_fallback_attribute(self) -> None:
        """Ошибка несёт fallback-значение"""
        error = DomainError("bad argument", fallback=42)
        assert error.fallback == 42
        assert str(error) == "bad argument"

    def test_fallback_defaults_to_none(self) -> None:
        """fallback по умолчанию None"""
        assert InvalidPrecision("bad").fallback is None


# =============================================================================
# ТЕСТЫ ГРАНИЦ ИТЕРАЦИЙ
# =============================================================================


class TestIterationLimits:
    """Тесты для series_term_limit и newton_iteration_limit"""

    def test_series_limit_grows_with_precision(self) -> None:
        """Граница ряда растёт с точностью"""
        assert series_term_limit(64) < series_term_limit(256) < series_term_limit(4096)

    def test_series_limit_covers_one_bit_per_term(self) -> None:
        """Граница ряда не меньше числа бит"""
        for prec in (1, 53, 256, 10_000):
            assert series_term_limit(prec) >= prec

    def test_newton_limit_logarithmic(self) -> None:
        """Граница Ньютона растёт логарифмически"""
        assert newton_iteration_limit(256) == (256).bit_length() + 16
        assert newton_iteration_limit(1 << 20) - newton_iteration_limit(1 << 10) == 10

    def test_newton_limit_for_tiny_precision(self) -> None:
        """Граница Ньютона определена для малой точности"""
        assert newton_iteration_limit(0) == newton_iteration_limit(1)


# =============================================================================
# ТЕСТЫ TRY_COMPUTE
# =============================================================================


class TestTryCompute:
    """Тесты для try_compute"""

    def test_success_returns_no_error(self) -> None:
        """Успешное вычисление: (результат, None)"""
        value, error = try_compute(sqrt, 4, 64)
        assert error is None
        assert value == 2

    def test_domain_error_returns_fallback(self) -> None:
        """Ошибка домена: (fallback, ошибка)"""
        value, error = try_compute(sqrt, -1, 64)
        assert isinstance(error, DomainError)
        assert value.is_nan()
        assert value.precision == 64

    def test_length_mismatch_returns_fallback(self) -> None:
        """LengthMismatch: fallback NaN"""
        value, error = try_compute(dot_product, [1, 2], [3], 64)
        assert isinstance(error, LengthMismatch)
        assert value.is_nan()

    def test_keyword_arguments_forwarded(self) -> None:
        """Именованные аргументы передаются функции"""
        value, error = try_compute(sqrt, 9, prec=32)
        assert error is None
        assert value == 3
        assert value.precision == 32

    def test_foreign_errors_propagate(self) -> None:
        """Ошибки вне таксономии не перехватываются"""
        with pytest.raises(TypeError):
            try_compute(sqrt, [1, 2], 64)

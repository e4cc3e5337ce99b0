"""
Тесты для генерируемых констант

Проверяет:
1. pi, e, ln2, ln10, sqrt2, sqrt3, phi против эталона mpmath
2. two_pi и half_pi — точные степени двойки от pi
3. Точность растёт с запрошенной точностью
4. Кэширование и точность по умолчанию
5. Постоянные Эйлера–Маскерони и Каталана против эталона mpmath
"""

import pytest
from mpmath import mp

from bigmath.math.bigfloat import BigFloat, sub
from bigmath.math.constants import catalan, e, euler_gamma, half_pi, ln2, ln10, phi, pi, sqrt2, sqrt3, two_pi
from bigmath.math.numerical_safeguards import DEFAULT_PRECISION, InvalidPrecision
from bigmath.math.scalar_utils import is_close

PRECISIONS = [8, 53, 64, 113, 256, 1000]


def reference_constant(name, prec: int, scale: int = 0) -> BigFloat:
    """Константа mpmath (имя атрибута mp или функция) на prec + 64 битах, умноженная на 2^scale."""
    with mp.workprec(prec + 64):
        value = getattr(mp, name) if isinstance(name, str) else name()
        value = mp.ldexp(+value, scale)
    return BigFloat.from_raw(value._mpf_, prec)


# =============================================================================
# ТЕСТЫ PI
# =============================================================================


class TestPi:
    """Тесты для pi, two_pi, half_pi"""

    @pytest.mark.parametrize("prec", PRECISIONS)
    def test_matches_reference(self, prec: int) -> None:
        """pi совпадает с эталоном в пределах 1 ulp"""
        assert is_close(pi(prec), reference_constant("pi", prec), prec, ulps=1)

    def test_known_digits(self) -> None:
        """Первые знаки pi"""
        assert str(pi(64)).startswith("3.14159265358979")
        assert pi(53).to_float() == 3.141592653589793

    @pytest.mark.parametrize("prec", PRECISIONS)
    def test_two_pi(self, prec: int) -> None:
        """two_pi = 2 * pi точно"""
        assert two_pi(prec) == pi(prec).ldexp(1)
        assert is_close(two_pi(prec), reference_constant("pi", prec, scale=1), prec, ulps=1)

    def test_half_pi(self) -> None:
        """half_pi = pi / 2 точно"""
        assert half_pi(128) == pi(128).ldexp(-1)

    def test_result_precision(self) -> None:
        """Результат на запрошенной точности"""
        assert pi(77).precision == 77
        assert two_pi(77).precision == 77

    def test_default_precision(self) -> None:
        """prec=0 — точность по умолчанию"""
        assert pi().precision == DEFAULT_PRECISION
        assert pi(0) == pi(DEFAULT_PRECISION)

    def test_invalid_precision(self) -> None:
        """Отрицательная точность — InvalidPrecision"""
        with pytest.raises(InvalidPrecision):
            pi(-1)

    def test_cached_per_precision(self) -> None:
        """Повторный вызов возвращает кэшированное значение"""
        assert pi(128) is pi(128)

    def test_error_shrinks_with_precision(self) -> None:
        """Ошибка на 256 битах меньше ошибки на 64 битах"""
        exact = reference_constant("pi", 1000)
        error_64 = abs(sub(pi(64), exact, 1000))
        error_256 = abs(sub(pi(256), exact, 1000))
        assert error_256 < error_64


# =============================================================================
# ТЕСТЫ E И ЛОГАРИФМИЧЕСКИХ КОНСТАНТ
# =============================================================================


class TestE:
    """Тесты для e"""

    @pytest.mark.parametrize("prec", PRECISIONS)
    def test_matches_reference(self, prec: int) -> None:
        """e совпадает с эталоном в пределах 1 ulp"""
        assert is_close(e(prec), reference_constant("e", prec), prec, ulps=1)

    def test_known_digits(self) -> None:
        """Первые знаки e"""
        assert str(e(64)).startswith("2.71828182845904")


class TestLogConstants:
    """Тесты для ln2 и ln10"""

    @pytest.mark.parametrize("prec", PRECISIONS)
    def test_ln2(self, prec: int) -> None:
        """ln 2 против эталона"""
        assert is_close(ln2(prec), reference_constant("ln2", prec), prec, ulps=1)

    @pytest.mark.parametrize("prec", PRECISIONS)
    def test_ln10(self, prec: int) -> None:
        """ln 10 против эталона"""
        assert is_close(ln10(prec), reference_constant("ln10", prec), prec, ulps=1)


# =============================================================================
# ТЕСТЫ АЛГЕБРАИЧЕСКИХ КОНСТАНТ
# =============================================================================


class TestAlgebraicConstants:
    """Тесты для sqrt2, sqrt3, phi"""

    @pytest.mark.parametrize("prec", [53, 256])
    def test_sqrt2(self, prec: int) -> None:
        """sqrt(2) против эталона"""
        assert is_close(sqrt2(prec), reference_constant(lambda: mp.sqrt(2), prec), prec, ulps=1)

    @pytest.mark.parametrize("prec", [53, 256])
    def test_sqrt3(self, prec: int) -> None:
        """sqrt(3) против эталона"""
        assert is_close(sqrt3(prec), reference_constant(lambda: mp.sqrt(3), prec), prec, ulps=1)

    @pytest.mark.parametrize("prec", [53, 256])
    def test_phi(self, prec: int) -> None:
        """Золотое сечение против эталона"""
        assert is_close(phi(prec), reference_constant("phi", prec), prec, ulps=1)


# =============================================================================
# ТЕСТЫ ПОСТОЯННЫХ ЭЙЛЕРА И КАТАЛАНА
# =============================================================================


class TestEulerGamma:
    """Тесты для euler_gamma"""

    @pytest.mark.parametrize("prec", PRECISIONS)
    def test_matches_reference(self, prec: int) -> None:
        """γ совпадает с эталоном в пределах 1 ulp"""
        assert is_close(euler_gamma(prec), reference_constant("euler", prec), prec, ulps=1)

    def test_known_digits(self) -> None:
        """Первые знаки γ"""
        assert str(euler_gamma(64)).startswith("0.57721566490153")

    def test_cached(self) -> None:
        """Повторный вызов возвращает тот же объект"""
        assert euler_gamma(200) is euler_gamma(200)


class TestCatalan:
    """Тесты для catalan"""

    @pytest.mark.parametrize("prec", PRECISIONS)
    def test_matches_reference(self, prec: int) -> None:
        """G совпадает с эталоном в пределах 1 ulp"""
        assert is_close(catalan(prec), reference_constant("catalan", prec), prec, ulps=1)

    def test_known_digits(self) -> None:
        """Первые знаки G"""
        assert str(catalan(64)).startswith("0.91596559417721")

    def test_result_precision(self) -> None:
        """Результат на запрошенной точности"""
        assert catalan(99).precision == 99

"""
Тесты для гиперболических функций

Проверяет:
1. sinh, cosh, tanh, asinh, acosh, atanh против эталона mpmath
2. Отсутствие сокращения около нуля
3. Насыщение tanh и ошибки домена обратных функций
"""

import pytest
from mpmath import mp

from bigmath.math.bigfloat import BigFloat, to_bigfloat
from bigmath.math.hyperbolic import acosh, asinh, atanh, cosh, sinh, tanh
from bigmath.math.numerical_safeguards import DomainError
from bigmath.math.scalar_utils import is_close


def reference(func, *args, prec: int) -> BigFloat:
    """Эталон mpmath на prec + 64 битах, округлённый к prec."""
    with mp.workprec(prec + 64):
        value = func(*(mp.make_mpf(to_bigfloat(a, prec).mpf) for a in args))
    return BigFloat.from_raw(value._mpf_, prec)


ARGUMENTS = ["-3", "-1e-10", "1e-30", "0.5", "2", "20", "-150.25"]


class TestSinhCoshTanh:
    """Тесты для sinh, cosh, tanh"""

    @pytest.mark.parametrize("x", ARGUMENTS)
    def test_sinh_accuracy(self, x: str) -> None:
        """sinh в пределах 1 ulp"""
        assert is_close(sinh(x, 128), reference(mp.sinh, x, prec=128), 128, ulps=1)

    @pytest.mark.parametrize("x", ARGUMENTS)
    def test_cosh_accuracy(self, x: str) -> None:
        """cosh в пределах 1 ulp"""
        assert is_close(cosh(x, 128), reference(mp.cosh, x, prec=128), 128, ulps=1)

    @pytest.mark.parametrize("x", ARGUMENTS)
    def test_tanh_accuracy(self, x: str) -> None:
        """tanh в пределах 1 ulp"""
        assert is_close(tanh(x, 128), reference(mp.tanh, x, prec=128), 128, ulps=1)

    def test_zero(self) -> None:
        """sinh(0) = tanh(0) = 0, cosh(0) = 1"""
        assert sinh(0, 64).is_zero()
        assert tanh(0, 64).is_zero()
        assert cosh(0, 64) == 1

    def test_tanh_saturation(self) -> None:
        """tanh(±1000) = ±1"""
        assert tanh(1000, 64) == 1
        assert tanh(-1000, 64) == -1

    def test_infinities(self) -> None:
        """Бесконечные аргументы"""
        inf = BigFloat.inf(1, 64)
        assert sinh(inf, 64).is_inf()
        assert sinh(-inf, 64) < 0
        assert cosh(-inf, 64).is_inf()
        assert tanh(-inf, 64) == -1

    def test_odd_symmetry(self) -> None:
        """sinh(-x) = -sinh(x)"""
        assert sinh("-1.25", 128) == -sinh("1.25", 128)


class TestInverseHyperbolic:
    """Тесты для asinh, acosh, atanh"""

    @pytest.mark.parametrize("x", ["-1e6", "-0.5", "1e-25", "3"])
    def test_asinh_accuracy(self, x: str) -> None:
        """asinh в пределах 1 ulp"""
        assert is_close(asinh(x, 128), reference(mp.asinh, x, prec=128), 128, ulps=1)

    @pytest.mark.parametrize("x", ["1.0000001", "1.5", "10", "1e300"])
    def test_acosh_accuracy(self, x: str) -> None:
        """acosh в пределах 1 ulp"""
        assert is_close(acosh(x, 128), reference(mp.acosh, x, prec=128), 128, ulps=1)

    @pytest.mark.parametrize("x", ["-0.999", "-0.5", "1e-25", "0.5", "0.75"])
    def test_atanh_accuracy(self, x: str) -> None:
        """atanh в пределах 1 ulp"""
        assert is_close(atanh(x, 128), reference(mp.atanh, x, prec=128), 128, ulps=1)

    def test_asinh_inverts_sinh(self) -> None:
        """asinh(sinh(x)) ≈ x"""
        assert is_close(asinh(sinh("1.75", 128), 128), BigFloat("1.75", 128), 128, ulps=2)

    def test_acosh_one(self) -> None:
        """acosh(1) = 0"""
        assert acosh(1, 64).is_zero()

    def test_acosh_below_one(self) -> None:
        """acosh(x < 1) — DomainError с fallback NaN"""
        with pytest.raises(DomainError, match="below 1") as exc_info:
            acosh(0.5, 64)
        assert exc_info.value.fallback.is_nan()

    @pytest.mark.parametrize("x,sign", [(1, 1), (-1, -1)])
    def test_atanh_poles(self, x: int, sign: int) -> None:
        """atanh(±1) — DomainError с fallback ±inf"""
        with pytest.raises(DomainError, match="pole") as exc_info:
            atanh(x, 64)
        fallback = exc_info.value.fallback
        assert fallback.is_inf()
        assert fallback.sign() == sign

    def test_atanh_outside_interval(self) -> None:
        """atanh(|x| > 1) — DomainError с fallback NaN"""
        with pytest.raises(DomainError, match="outside") as exc_info:
            atanh(2, 64)
        assert exc_info.value.fallback.is_nan()

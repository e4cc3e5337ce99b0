"""
Тесты для exp / ln / pow

Проверяет:
1. exp, expm1, ln, log1p, log2, log10 против эталона mpmath
2. ln(exp(x)) ≈ x на [-50, 50]
3. Ошибки домена логарифма и fallback-значения
4. Ветви pow: x^0, 1^y, целые степени, отрицательное основание, 0^y
"""

import pytest
from mpmath import mp

from bigmath.math.bigfloat import BigFloat, sub, to_bigfloat
from bigmath.math.constants import e, ln2
from bigmath.math.exp_log import exp, expm1, ln, log1p, log2, log10, log_base, pow
from bigmath.math.numerical_safeguards import DomainError, try_compute
from bigmath.math.roots import sqrt
from bigmath.math.scalar_utils import is_close


def reference(func, *args, prec: int) -> BigFloat:
    """Эталон mpmath на prec + 64 битах, округлённый к prec."""
    with mp.workprec(prec + 64):
        value = func(*(mp.make_mpf(to_bigfloat(a, prec).mpf) for a in args))
    return BigFloat.from_raw(value._mpf_, prec)


# =============================================================================
# ТЕСТЫ EXP
# =============================================================================


class TestExp:
    """Тесты для exp и expm1"""

    def test_exp_zero(self) -> None:
        """exp(0) = 1"""
        assert exp(0, 64) == 1
        assert exp(0, 64).precision == 64

    @pytest.mark.parametrize("prec", [53, 64, 256])
    def test_exp_one_is_e(self, prec: int) -> None:
        """exp(1) = e"""
        assert is_close(exp(1, prec), e(prec), prec, ulps=1)

    @pytest.mark.parametrize("x", ["-50", "-1.5", "0.001", "1e-30", "1", "10", "50", "700", "-700"])
    @pytest.mark.parametrize("prec", [64, 256])
    def test_exp_accuracy(self, x: str, prec: int) -> None:
        """exp в пределах 1 ulp"""
        assert is_close(exp(x, prec), reference(mp.exp, x, prec=prec), prec, ulps=1)

    def test_exp_special_values(self) -> None:
        """exp(±inf), exp(NaN)"""
        assert exp(BigFloat.inf(1, 64), 64).is_inf()
        assert exp(BigFloat.inf(-1, 64), 64).is_zero()
        assert exp(BigFloat.nan(64), 64).is_nan()

    def test_exp_overflow_and_underflow(self) -> None:
        """Огромный аргумент: +inf и 0"""
        assert exp(2**70, 64).is_inf()
        assert exp(-(2**70), 64).is_zero()

    @pytest.mark.parametrize("x", ["1e-30", "-1e-10", "0.3", "-0.49", "2", "-5"])
    def test_expm1_accuracy(self, x: str) -> None:
        """expm1 сохраняет относительную точность около нуля"""
        assert is_close(expm1(x, 128), reference(mp.expm1, x, prec=128), 128, ulps=1)

    def test_expm1_special_values(self) -> None:
        """expm1(0) = 0, expm1(-inf) = -1"""
        assert expm1(0, 64).is_zero()
        assert expm1(BigFloat.inf(-1, 64), 64) == -1


# =============================================================================
# ТЕСТЫ ЛОГАРИФМОВ
# =============================================================================


class TestLn:
    """Тесты для ln"""

    def test_ln_one(self) -> None:
        """ln(1) = 0"""
        assert ln(1, 64).is_zero()

    def test_ln_e(self) -> None:
        """ln(e) ≈ 1"""
        assert is_close(ln(e(128), 128), 1, 128, ulps=2)

    def test_ln_two(self) -> None:
        """ln(2) совпадает с константой"""
        assert is_close(ln(2, 128), ln2(128), 128, ulps=1)

    def test_ln_half(self) -> None:
        """ln(1/2) = -ln 2"""
        assert is_close(ln(0.5, 128), -ln2(128), 128, ulps=1)

    @pytest.mark.parametrize("x", ["0.5", "0.999", "1.001", "3", "1e10", "1e-10", "1e300"])
    @pytest.mark.parametrize("prec", [64, 256])
    def test_ln_accuracy(self, x: str, prec: int) -> None:
        """ln в пределах 1 ulp"""
        assert is_close(ln(x, prec), reference(mp.log, x, prec=prec), prec, ulps=1)

    @pytest.mark.parametrize("x", [-50, -10, -1, 1, 2.5, 10, 50])
    def test_ln_exp_round_trip(self, x: float) -> None:
        """ln(exp(x)) ≈ x"""
        prec = 128
        assert is_close(ln(exp(x, prec), prec), x, prec, ulps=4)

    def test_ln_zero(self) -> None:
        """ln(0) — DomainError с fallback -inf"""
        with pytest.raises(DomainError, match="zero") as exc_info:
            ln(0, 64)
        fallback = exc_info.value.fallback
        assert fallback.is_inf() and fallback < 0

    def test_ln_negative(self) -> None:
        """ln(-1) — DomainError с fallback NaN"""
        with pytest.raises(DomainError, match="negative"):
            ln(-1, 64)
        value, error = try_compute(ln, -1, 64)
        assert value.is_nan()
        assert isinstance(error, DomainError)

    def test_ln_special_values(self) -> None:
        """ln(+inf) = +inf, ln(NaN) = NaN"""
        assert ln(BigFloat.inf(1, 64), 64).is_inf()
        assert ln(BigFloat.nan(64), 64).is_nan()


class TestLogVariants:
    """Тесты для log1p, log2, log10, log_base"""

    @pytest.mark.parametrize("x", ["1e-30", "-1e-10", "0.3", "-0.49", "-0.75", "5"])
    def test_log1p_accuracy(self, x: str) -> None:
        """log1p в пределах 1 ulp"""
        assert is_close(log1p(x, 128), reference(mp.log1p, x, prec=128), 128, ulps=1)

    def test_log1p_minus_one(self) -> None:
        """log1p(-1) — DomainError"""
        with pytest.raises(DomainError, match="-inf"):
            log1p(-1, 64)

    def test_log1p_below_minus_one(self) -> None:
        """log1p(x < -1) — DomainError"""
        with pytest.raises(DomainError, match="below -1"):
            log1p(-2, 64)

    def test_exact_logarithms(self) -> None:
        """Точные значения log2/log10/log_base"""
        assert log2(8, 64) == 3
        assert log10(1000, 64) == 3
        assert log_base(81, 3, 64) == 4

    def test_log2_accuracy(self) -> None:
        """log2(10) против эталона"""
        assert is_close(log2(10, 128), reference(lambda v: mp.log(v, 2), 10, prec=128), 128, ulps=1)

    def test_log10_domain(self) -> None:
        """log10(0) — DomainError"""
        with pytest.raises(DomainError):
            log10(0, 64)

    @pytest.mark.parametrize("base", [1, 0, -2])
    def test_invalid_base(self, base: int) -> None:
        """Некорректное основание — DomainError"""
        with pytest.raises(DomainError, match="invalid logarithm base"):
            log_base(10, base, 64)


# =============================================================================
# ТЕСТЫ POW
# =============================================================================


class TestPow:
    """Тесты для pow"""

    def test_zero_exponent(self) -> None:
        """x^0 = 1, в том числе для NaN"""
        assert pow(5, 0, 64) == 1
        assert pow(BigFloat.nan(64), 0, 64) == 1

    def test_base_one(self) -> None:
        """1^y = 1, в том числе для NaN"""
        assert pow(1, BigFloat.nan(64), 64) == 1
        assert pow(1, 12345.678, 64) == 1

    def test_nan_propagates(self) -> None:
        """NaN в остальных случаях"""
        assert pow(BigFloat.nan(64), 2, 64).is_nan()
        assert pow(2, BigFloat.nan(64), 64).is_nan()

    def test_integer_exponents(self) -> None:
        """Целые показатели вычисляются точно"""
        assert pow(2, 10, 64) == 1024
        assert pow(2, -2, 64) == 0.25
        assert pow(-2, 3, 64) == -8
        assert pow(-2, 2, 64) == 4

    def test_huge_integer_exponent_parity(self) -> None:
        """Знак по чётности для показателей за пределами быстрого пути"""
        assert pow(-1, 2**70, 64) == 1
        assert pow(-1, 2**70 + 1, 64) == -1

    def test_large_power_accuracy(self) -> None:
        """10^300 против эталона"""
        assert is_close(pow(10, 300, 128), reference(mp.power, 10, 300, prec=128), 128, ulps=1)

    def test_fractional_exponent(self) -> None:
        """2^0.5 = sqrt(2)"""
        assert is_close(pow(2, 0.5, 128), sqrt(2, 128), 128, ulps=1)

    @pytest.mark.parametrize("x,y", [("2.5", "-1.5"), ("0.3", "7.25"), ("1e10", "0.1"), ("1.0001", "123456.5")])
    def test_general_accuracy(self, x: str, y: str) -> None:
        """exp(y ln x) в пределах 1 ulp"""
        assert is_close(pow(x, y, 128), reference(mp.power, x, y, prec=128), 128, ulps=1)

    def test_zero_base(self) -> None:
        """0^y для y > 0"""
        assert pow(0, 2, 64).is_zero()
        assert pow(0, 0.5, 64).is_zero()

    @pytest.mark.parametrize("y", [-1, -0.5])
    def test_zero_to_negative_power(self, y: float) -> None:
        """0^(y < 0) — DomainError с fallback +inf"""
        with pytest.raises(DomainError, match="negative power") as exc_info:
            pow(0, y, 64)
        assert exc_info.value.fallback.is_inf()

    def test_negative_base_fractional_exponent(self) -> None:
        """Отрицательное основание с нецелым показателем — DomainError"""
        with pytest.raises(DomainError, match="non-integer exponent") as exc_info:
            pow(-8, 1 / 3, 64)
        assert exc_info.value.fallback.is_nan()

    def test_infinite_arguments(self) -> None:
        """Бесконечные основание и показатель"""
        inf = BigFloat.inf(1, 64)
        assert pow(inf, 0.5, 64).is_inf()
        assert pow(inf, -0.5, 64).is_zero()
        assert pow(2, inf, 64).is_inf()
        assert pow(0.5, inf, 64).is_zero()

    def test_error_shrinks_with_precision(self) -> None:
        """Ошибка на 256 битах меньше ошибки на 64 битах"""
        x = BigFloat("1.7", 1000)
        y = BigFloat("2.3", 1000)
        exact = reference(mp.power, x, y, prec=1000)
        error_64 = abs(sub(pow(x, y, 64), exact, 1000))
        error_256 = abs(sub(pow(x, y, 256), exact, 1000))
        assert error_256 < error_64

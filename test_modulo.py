"""
Tests for the modular arithmetic kernel.
"""
import math

import pytest

from modulo import (
    ModInt,
    ceil_div,
    extended_euclid,
    floor_div,
    is_square,
    jacobi,
    legendre,
    mod,
    mod_is_square,
    mod_mult_inv,
    mod_pow,
    mod_sqrt,
    odd_part,
)


class TestRoundedDivision:
    """floor_div, ceil_div and mod follow the mathematical definitions."""

    @pytest.mark.parametrize("a, b, expected", [
        (6, 2, 3), (6, -2, -3), (-6, 2, -3), (-6, -2, 3),
        (9, 4, 2), (9, -4, -3), (-9, 4, -3), (-9, -4, 2),
    ])
    def test_floor_div(self, a, b, expected):
        assert floor_div(a, b) == expected

    @pytest.mark.parametrize("a, b, expected", [
        (6, 2, 3), (6, -2, -3), (-6, 2, -3), (-6, -2, 3),
        (9, 4, 3), (9, -4, -2), (-9, 4, -2), (-9, -4, 3),
    ])
    def test_ceil_div(self, a, b, expected):
        assert ceil_div(a, b) == expected

    def test_division_by_zero(self):
        with pytest.raises(ZeroDivisionError):
            floor_div(1, 0)
        with pytest.raises(ZeroDivisionError):
            ceil_div(1, 0)
        with pytest.raises(ZeroDivisionError):
            mod(1, 0)

    @pytest.mark.parametrize("a, m, expected", [
        (5, 3, 2), (-5, 3, 1), (6, 3, 0), (-6, 3, 0), (6, 5, 1), (-6, 5, 4),
    ])
    def test_mod(self, a, m, expected):
        assert mod(a, m) == expected

    @pytest.mark.parametrize("a, m", [(5, -3), (-5, -3), (0, -1)])
    def test_mod_negative_modulus(self, a, m):
        with pytest.raises(ValueError, match="non-negative"):
            mod(a, m)

    def test_mod_positive_modulus_range(self):
        for a in range(-50, 50):
            for m in range(1, 12):
                assert 0 <= mod(a, m) < m


class TestModPow:

    def test_matches_builtin_pow(self):
        for p in (2, 3, 7, 13, 1000000007):
            for a in range(-5, 20):
                for b in range(0, 40, 3):
                    if a == 0 and b == 0:
                        continue
                    assert mod_pow(a, b, lambda x: x % p) == pow(a, b, p)

    def test_zero_exponent_returns_unit(self):
        assert mod_pow(2, 0, lambda x: x % 3) == 1
        assert mod_pow(2, 0, lambda x: x % 3, unit="unit") == "unit"

    def test_large_exponent(self):
        m = 2**61 - 1
        assert mod_pow(3, 10**18, lambda x: x % m) == pow(3, 10**18, m)

    def test_zero_to_the_zero_is_rejected(self):
        with pytest.raises(ValueError):
            mod_pow(0, 0, lambda x: x % 5)

    def test_negative_exponent_is_rejected(self):
        with pytest.raises(ValueError):
            mod_pow(2, -1, lambda x: x % 5)

    def test_reduction_count_is_logarithmic(self):
        calls = []

        def counting(x):
            calls.append(x)
            return x % 1000003

        mod_pow(7, 2**20 + 5, counting)
        assert len(calls) <= 2 * 22


class TestInverse:

    def test_extended_euclid(self):
        for a, b in [(240, 46), (46, 240), (17, 5), (0, 7), (-12, 18), (12, -18)]:
            g, x, y = extended_euclid(a, b)
            assert g == math.gcd(a, b)
            assert a * x + b * y == g

    def test_mod_mult_inv(self):
        assert mod_mult_inv(3, 11) == 4
        assert mod_mult_inv(10, 17) == 12
        assert mod_mult_inv(-3, 11) == 7
        for m in (2, 9, 100, 1000000007):
            for a in range(1, 60):
                if math.gcd(a, m) == 1:
                    inv = mod_mult_inv(a, m)
                    assert 0 <= inv < m
                    assert a * inv % m == 1 % m

    def test_not_invertible(self):
        with pytest.raises(ValueError, match="not invertible"):
            mod_mult_inv(6, 9)

    def test_non_positive_modulus(self):
        with pytest.raises(ValueError):
            mod_mult_inv(3, 0)
        with pytest.raises(ValueError):
            mod_mult_inv(3, -7)


class TestQuadraticResidues:

    @pytest.mark.parametrize("a, b, expected", [
        (1001, 9907, -1), (19, 45, 1), (8, 21, -1), (5, 21, 1), (3, 9, 0),
        (0, 1, 1), (30, 7, 1), (-1, 7, -1), (-1, 13, 1),
    ])
    def test_jacobi_known_values(self, a, b, expected):
        assert jacobi(a, b) == expected

    def test_jacobi_matches_legendre_for_primes(self):
        for p in (3, 5, 7, 11, 13, 101, 997):
            for a in range(-30, 30):
                assert jacobi(a, p) == legendre(a, p)

    def test_jacobi_is_multiplicative_in_denominator(self):
        for a in range(-20, 20):
            assert jacobi(a, 3 * 5 * 7) == jacobi(a, 3) * jacobi(a, 5) * jacobi(a, 7)

    @pytest.mark.parametrize("b", [0, -3, 4, 10])
    def test_jacobi_rejects_bad_denominator(self, b):
        with pytest.raises(ValueError):
            jacobi(3, b)

    def test_legendre_rejects_even_modulus(self):
        with pytest.raises(ValueError):
            legendre(3, 2)

    def test_mod_is_square(self):
        squares = {x * x % 13 for x in range(13)}
        for a in range(13):
            assert mod_is_square(a, 13) == (a in squares)

    def test_mod_sqrt_known_values(self):
        assert mod_sqrt(10, 13) == 6
        assert mod_sqrt(2, 7) == 3
        assert mod_sqrt(2, 17) == 6
        assert mod_sqrt(0, 17) == 0
        assert mod_sqrt(1, 2) == 1

    def test_mod_sqrt_all_residues(self):
        # 17, 41, 97, 113 are 1 (mod 8) and exercise the full Tonelli-Shanks loop.
        for p in (3, 7, 11, 17, 41, 97, 113, 65537):
            for a in range(1, min(p, 300)):
                if mod_is_square(a, p):
                    x = mod_sqrt(a, p)
                    assert x * x % p == a
                    assert x <= p - x

    def test_mod_sqrt_non_residue(self):
        with pytest.raises(ValueError, match="not a quadratic residue"):
            mod_sqrt(3, 7)


class TestHelpers:

    def test_odd_part(self):
        assert odd_part(40) == (3, 5)
        assert odd_part(7) == (0, 7)
        assert odd_part(1 << 70) == (70, 1)
        with pytest.raises(ValueError):
            odd_part(0)

    def test_is_square(self):
        for n in range(100000):
            assert is_square(n) == (math.isqrt(n) ** 2 == n)
        assert is_square((10**20 + 39) ** 2)
        assert not is_square((10**20 + 39) ** 2 + 1)
        assert not is_square(-4)


class TestModInt:

    def test_arithmetic(self):
        a = ModInt(3, 7)
        assert a * 5 == 1
        assert a + 5 == 1
        assert 5 - a == 2
        assert a - 5 == ModInt(5, 7)
        assert -a == 4
        assert a / 3 == 1
        assert int(a ** 6) == 1
        assert a ** -1 == 5
        assert 2 * a == 6

    def test_pow_matches_builtin(self):
        m = 1000000007
        x = ModInt(123456789, m)
        assert int(x ** 987654321) == pow(123456789, 987654321, m)
        assert x ** 0 == 1

    def test_modulus_mismatch(self):
        with pytest.raises(ValueError, match="mismatch"):
            ModInt(1, 5) + ModInt(1, 7)

    def test_non_invertible(self):
        with pytest.raises(ValueError):
            ModInt(3, 9).inverse()

    def test_equality_and_hash(self):
        assert ModInt(10, 7) == ModInt(3, 7)
        assert hash(ModInt(10, 7)) == hash(ModInt(3, 7))
        assert ModInt(3, 7) != ModInt(3, 11)
        assert repr(ModInt(10, 7)) == "ModInt(3, 7)"

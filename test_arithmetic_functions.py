"""
Tests for divisor functions and Euler's totient.
"""
import math

import numpy as np
import pytest

from arithmetic_functions import (
    count_divisors,
    divisor_sigma,
    divisors,
    euler_totient,
    euler_totient_sieve,
)
from factorization import prime_decomposition
from prime_sieve import primes_up_to


def _brute_divisors(n):
    return [d for d in range(1, n + 1) if n % d == 0]


class TestDivisors:

    def test_known_values(self):
        assert count_divisors(prime_decomposition(360)) == 24
        assert divisor_sigma(prime_decomposition(360)) == 1170
        assert divisor_sigma(prime_decomposition(6), 2) == 50
        assert divisor_sigma(prime_decomposition(6), 0) == 4
        assert divisors(12) == [1, 2, 3, 4, 6, 12]
        assert divisors(1) == [1]
        assert count_divisors([]) == 1
        assert divisor_sigma([]) == 1

    def test_against_brute_force(self):
        for n in range(1, 500):
            expected = _brute_divisors(n)
            factors = prime_decomposition(n)
            assert divisors(n) == expected
            assert count_divisors(factors) == len(expected)
            assert divisor_sigma(factors) == sum(expected)
            assert divisor_sigma(factors, 3) == sum(d**3 for d in expected)

    def test_large_number(self):
        n = 1000003**2 * 1000000007
        assert divisors(n) == [1, 1000003, 1000000007, 1000003**2,
                               1000003 * 1000000007, n]

    def test_negative_exponent(self):
        with pytest.raises(ValueError):
            divisor_sigma([(2, 1)], -1)


class TestTotient:

    @pytest.mark.parametrize("n, expected", [
        (1, 1), (2, 1), (9, 6), (36, 12), (97, 96), (100, 40), (2**20, 2**19),
    ])
    def test_known_values(self, n, expected):
        assert euler_totient(n) == expected

    def test_large_prime_power(self):
        p = 1000000007
        assert euler_totient(p**3) == p**2 * (p - 1)

    def test_sieve_matches_function(self):
        phi = euler_totient_sieve(2000)
        assert phi[0] == 0
        for n in range(1, 2001):
            assert phi[n] == euler_totient(n)

    def test_sieve_matches_gcd_count(self):
        phi = euler_totient_sieve(200)
        for n in range(1, 201):
            assert phi[n] == sum(1 for k in range(1, n + 1) if math.gcd(k, n) == 1)

    def test_sieve_tiny_and_negative(self):
        assert euler_totient_sieve(0).tolist() == [0]
        assert euler_totient_sieve(1).tolist() == [0, 1]
        with pytest.raises(ValueError):
            euler_totient_sieve(-1)

    def test_sieve_large_bound(self):
        n = 10**5
        phi = euler_totient_sieve(n)
        assert phi.dtype == np.int64
        for k in (99991, 65536, 3**10, 2 * 3 * 5 * 7 * 11 * 13, n):
            assert phi[k] == euler_totient(k)
        # phi(p) = p - 1 exactly for the primes
        primes = primes_up_to(n)
        assert (phi[primes] == np.array(primes) - 1).all()

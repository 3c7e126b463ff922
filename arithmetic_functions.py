"""
Multiplicative functions built on prime_decomposition: divisor counts, divisor
sums, divisor lists and Euler's totient.
"""
import math
from typing import Sequence

import numpy as np

from factorization import prime_decomposition
from prime_sieve import primes_up_to


def count_divisors(factors: Sequence[tuple[int, int]]) -> int:
    """Number of divisors of the number with the given factorization."""
    return math.prod(e + 1 for _, e in factors)


def divisor_sigma(factors: Sequence[tuple[int, int]], k: int = 1) -> int:
    """
    sigma_k: sum of d**k over all divisors d.

    Args:
        factors: Prime factorization
        k: Non-negative exponent; k == 0 counts divisors

    Returns:
        sigma_k(n)
    """
    if k < 0:
        raise ValueError(f"divisor_sigma needs k >= 0, got {k}")
    if k == 0:
        return count_divisors(factors)
    result = 1
    for p, e in factors:
        pk = p ** k
        result *= (pk ** (e + 1) - 1) // (pk - 1)
    return result


def divisors(n: int) -> list[int]:
    """All positive divisors of n >= 1 in ascending order."""
    divs = [1]
    for p, e in prime_decomposition(n):
        divs = [d * p ** i for d in divs for i in range(e + 1)]
    return sorted(divs)


def euler_totient(n: int) -> int:
    """Euler's phi: count of 1 <= k <= n coprime to n."""
    result = n
    for p, _ in prime_decomposition(n):
        result -= result // p
    return result


def euler_totient_sieve(n: int) -> np.ndarray:
    """
    phi(k) for every 0 <= k <= n.

    Returns:
        int64 array; entry 0 is 0
    """
    if n < 0:
        raise ValueError(f"sieve bound must be non-negative, got {n}")
    phi = np.arange(n + 1, dtype=np.int64)
    for p in primes_up_to(n):
        phi[p::p] -= phi[p::p] // p
    return phi

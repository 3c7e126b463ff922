"""
Integer factorization using trial division and Pollard's rho algorithm (Floyd's variant).

PIPELINE (prime_decomposition):
1. n < 2**32: trial division by the primes below 2**16, which is complete.
2. Otherwise trial division by the primes below 1000, then an explicit-stack
   loop on the remainder:
   - strip every prime already found from the popped part
   - a prime part (is_prime) is recorded
   - a composite part is split with Pollard's rho and both halves pushed
   The two halves of a split may share primes; stripping before testing and
   accumulating exponents per prime keeps the result free of duplicates.

POLLARD'S RHO:
- f(x) = (x^2 + c) mod n, starting at x0 = 2, c = 1
- Floyd cycle detection (x advances one step, y two)
- |x - y| accumulated over RHO_BATCH_SIZE steps, one gcd per batch
- a batch gcd equal to n is replayed step by step; if that is still n the
  attempt is degenerate and rho restarts from a random x0 and c
- at most MAX_RHO_ATTEMPTS restarts

Results are memoized; call clear_caches() between independent runs to free memory.
"""
import logging
import math
import operator
import random
from functools import lru_cache
from typing import Callable, Iterable, NamedTuple, Sequence

from primality import SMALL_PRIMES, is_prime
from prime_sieve import cached_primes

logger = logging.getLogger(__name__)

RHO_BATCH_SIZE = 128
MAX_RHO_ATTEMPTS = 64

# sqrt(2**32); trial division by these primes fully decomposes any 32-bit value.
_DECOMPOSITION_PRIMES_LIMIT = 1 << 16

_rng = random.Random()


class PrimePower(NamedTuple):
    """The prime power prime**exponent, exponent >= 1."""
    prime: int
    exponent: int


def seed(value=None) -> None:
    """Re-seed the generator used for Pollard's rho restarts."""
    _rng.seed(value)


def clear_caches():
    """Clear all memoization caches. Useful between independent factorization runs."""
    is_prime.cache_clear()
    _prime_decomposition_cached.cache_clear()
    cached_primes.cache_clear()


# trial division by an ascending prime list
def prime_decomposition_list_remainder(
        n: int, primes: Iterable[int]) -> tuple[list[PrimePower], int]:
    """
    Remove every listed prime from n.

    Stops as soon as p*p exceeds what is left of n; the remainder is then 1 or
    a prime.

    Args:
        n: Number to decompose, n >= 1
        primes: Ascending primes without gaps

    Returns:
        (prime powers found, remainder coprime to the scanned primes)
    """
    if n < 1:
        raise ValueError(f"cannot decompose {n}")
    factors: list[PrimePower] = []
    for p in primes:
        if p * p > n:
            break
        if n % p == 0:
            e = 0
            while n % p == 0:
                n //= p
                e += 1
            factors.append(PrimePower(p, e))
    return factors, n


def prime_decomposition_list(n: int, primes: Iterable[int]) -> list[PrimePower]:
    """
    Decompose n by trial division, appending the remainder as a prime.

    Correct whenever primes contains every prime up to isqrt(n).
    """
    factors, rem = prime_decomposition_list_remainder(n, primes)
    if rem != 1:
        factors.append(PrimePower(rem, 1))
    return factors


def find_factor_pollard_rho(n: int, f: Callable[[int], int], x0: int,
                            batch: int = RHO_BATCH_SIZE) -> int | None:
    """
    One Pollard's rho attempt with Floyd cycle detection and batched gcd.

    Args:
        n: Odd composite
        f: Pseudo-random polynomial modulo n
        x0: Starting value
        batch: Steps multiplied together between two gcd calls

    Returns:
        A non-trivial factor, or None if the attempt degenerated
    """
    x = y = x0
    g = 1
    while g == 1:
        xs, ys = x, y
        prod = 1
        for _ in range(batch):
            x = f(x)
            y = f(f(y))
            prod = prod * abs(x - y) % n
        g = math.gcd(prod, n)

    if g == n:
        # Some step in the batch shares a factor with n; find the first one.
        for _ in range(batch):
            xs = f(xs)
            ys = f(f(ys))
            g = math.gcd(abs(xs - ys), n)
            if g != 1:
                break

    if g == n or g == 1:
        return None
    return g


def find_factor(n: int) -> int:
    """
    Find a non-trivial (not necessarily prime) factor of a composite n.

    Args:
        n: Composite number >= 4

    Returns:
        d with 1 < d < n and n % d == 0
    """
    if n < 4:
        raise ValueError(f"{n} has no non-trivial factor")
    if n & 1 == 0:
        return 2

    x0, c = 2, 1
    for attempt in range(MAX_RHO_ATTEMPTS):
        d = find_factor_pollard_rho(n, lambda x, c=c: (x * x + c) % n, x0)
        if d is not None:
            return d
        logger.debug("rho attempt %d on %d degenerated (x0=%d, c=%d)", attempt, n, x0, c)
        x0 = _rng.randrange(2, n - 1)
        c = _rng.randrange(1, n - 1)

    logger.warning("rho gave up on %d after %d attempts", n, MAX_RHO_ATTEMPTS)
    raise ValueError(f"no factor of {n} found after {MAX_RHO_ATTEMPTS} attempts; is it prime?")


def _decompose_large(n: int) -> list[PrimePower]:
    """Decompose n with rho and the primality test, without trial division."""
    exponents: dict[int, int] = {}
    stack = [n]
    while stack:
        m = stack.pop()
        for p in exponents:
            while m % p == 0:
                m //= p
                exponents[p] += 1
        if m == 1:
            continue
        if is_prime(m):
            exponents[m] = exponents.get(m, 0) + 1
            continue
        d = find_factor(m)
        logger.debug("split %d = %d * %d", m, d, m // d)
        stack.append(m // d)
        stack.append(d)
    return [PrimePower(p, e) for p, e in sorted(exponents.items())]


@lru_cache(maxsize=256)
def _prime_decomposition_cached(n: int) -> tuple[PrimePower, ...]:
    if n <= 0xFFFFFFFF:
        return tuple(prime_decomposition_list(n, cached_primes(_DECOMPOSITION_PRIMES_LIMIT)))

    factors, rem = prime_decomposition_list_remainder(n, SMALL_PRIMES)
    if rem != 1:
        logger.debug("%d left after trial division of %d", rem, n)
        factors.extend(_decompose_large(rem))
    factors.sort()
    return tuple(factors)


def prime_decomposition(n: int) -> list[PrimePower]:
    """
    Prime factorization of n.

    Args:
        n: Integer >= 1

    Returns:
        Prime powers with strictly increasing primes; [] for n == 1
    """
    n = operator.index(n)
    if n < 1:
        raise ValueError(f"prime decomposition needs n >= 1, got {n}")
    return list(_prime_decomposition_cached(n))


def reconstruct(factors: Sequence[tuple[int, int]]) -> int:
    """Product of prime**exponent over a factorization."""
    return math.prod(p ** e for p, e in factors)


# flat factorization
def factor(n: int) -> list[int]:
    """
    Factorize n into prime factors.

    Args:
        n: Non-zero integer; the sign is ignored

    Returns:
        Prime factors with multiplicity in ascending order ([] for +-1)
    """
    n = abs(operator.index(n))
    return [p for p, e in prime_decomposition(n) for _ in range(e)]


# Example usage
if __name__ == "__main__":
    logging.basicConfig(level=logging.DEBUG)
    n = 123456789101112  # test number
    print("Factors of", n, ":", prime_decomposition(n))

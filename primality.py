"""
Deterministic and probabilistic primality tests.

DISPATCH (is_prime):
- n < 2**32: trial division by the primes below 1000, then a single
  Miller-Rabin round with a hashed witness (Forisek & Jancina). Exact.
- n < 2**64: trial division, then Miller-Rabin with seven fixed witnesses. Exact.
- otherwise: Baillie-PSW (base-2 Miller-Rabin + strong Lucas test). No
  composite is known to pass it.
"""
import logging
import math
import operator
from functools import lru_cache

from lucas_sequence import mod_lucas_nth_term
from modulo import is_square, jacobi, odd_part
from prime_sieve import cached_primes

logger = logging.getLogger(__name__)

SMALL_PRIMES_LIMIT = 1000
SMALL_PRIMES: tuple[int, ...] = cached_primes(SMALL_PRIMES_LIMIT)

# See https://miller-rabin.appspot.com/
_WITNESSES_64 = (2, 325, 9375, 28178, 450775, 9780504, 1795265022)

# Forisek & Jancina, "Fast Primality Testing for Integers That Fit into a
# Machine Word". One witness per 8-bit hash bucket.
_WITNESSES_32 = (
    15591, 2018, 166, 7429, 8064, 16045, 10503, 4399, 1949, 1295, 2776, 3620, 560, 3128,
    5212, 2657, 2300, 2021, 4652, 1471, 9336, 4018, 2398, 20462, 10277, 8028, 2213, 6219,
    620, 3763, 4852, 5012, 3185, 1333, 6227, 5298, 1074, 2391, 5113, 7061, 803, 1269,
    3875, 422, 751, 580, 4729, 10239, 746, 2951, 556, 2206, 3778, 481, 1522, 3476, 481,
    2487, 3266, 5633, 488, 3373, 6441, 3344, 17, 15105, 1490, 4154, 2036, 1882, 1813, 467,
    3307, 14042, 6371, 658, 1005, 903, 737, 1887, 7447, 1888, 2848, 1784, 7559, 3400, 951,
    13969, 4304, 177, 41, 19875, 3110, 13221, 8726, 571, 7043, 6943, 1199, 352, 6435, 165,
    1169, 3315, 978, 233, 3003, 2562, 2994, 10587, 10030, 2377, 1902, 5354, 4447, 1555,
    263, 27027, 2283, 305, 669, 1912, 601, 6186, 429, 1930, 14873, 1784, 1661, 524, 3577,
    236, 2360, 6146, 2850, 55637, 1753, 4178, 8466, 222, 2579, 2743, 2031, 2226, 2276,
    374, 2132, 813, 23788, 1610, 4422, 5159, 1725, 3597, 3366, 14336, 579, 165, 1375,
    10018, 12616, 9816, 1371, 536, 1867, 10864, 857, 2206, 5788, 434, 8085, 17618, 727,
    3639, 1595, 4944, 2129, 2029, 8195, 8344, 6232, 9183, 8126, 1870, 3296, 7455, 8947,
    25017, 541, 19115, 368, 566, 5674, 411, 522, 1027, 8215, 2050, 6544, 10049, 614, 774,
    2333, 3007, 35201, 4706, 1152, 1785, 1028, 1540, 3743, 493, 4474, 2521, 26845, 8354,
    864, 18915, 5465, 2447, 42, 4511, 1660, 166, 1249, 6259, 2553, 304, 272, 7286, 73,
    6554, 899, 2816, 5197, 13330, 7054, 2818, 3199, 811, 922, 350, 7514, 4452, 3449, 2663,
    4708, 418, 1621, 1171, 3471, 88, 11345, 412, 1559, 194,
)

_U64 = (1 << 64) - 1
_DISCRIMINANT_TRIES_BEFORE_SQUARE_TEST = 5


def is_prime_trial_division(n: int, primes) -> bool | None:
    """
    Decide primality by trial division against an ascending, gap-free prime list.

    If p is the largest listed prime, every n <= p*p is decided.

    Returns:
        True/False when decided, None otherwise
    """
    if n <= 1:
        return False
    for p in primes:
        if n == p:
            return True
        if n % p == 0:
            return False
        # No prime below p divides n, so a composite n would be > p*p.
        if n <= p * p:
            return True
    return None


def miller_rabin_test(n: int, a: int) -> bool:
    """
    Strong probable prime test of n to base a.

    Args:
        n: Odd number > 2
        a: Witness; a multiple of n counts as a pass

    Returns:
        False if a proves n composite, True otherwise
    """
    if n <= 2 or n % 2 == 0:
        raise ValueError(f"Miller-Rabin needs an odd n > 2, got {n}")
    a %= n
    if a == 0:
        return True

    n_minus_1 = n - 1
    e, o = odd_part(n_minus_1)
    x = pow(a, o, n)
    if x == 1 or x == n_minus_1:
        return True
    for _ in range(e - 1):
        x = x * x % n
        if x == n_minus_1:
            return True
        if x == 1:
            return False
    return False


def _forisek_jancina(n: int) -> bool:
    """Hashed single-witness round; n must have no factor below 1000."""
    h = n
    h = (((h >> 16) ^ h) * 0x45D9F3B) & _U64
    h = (((h >> 16) ^ h) * 0x45D9F3B) & _U64
    h = ((h >> 16) ^ h) & 0xFF
    return miller_rabin_test(n, _WITNESSES_32[h])


def is_prime_32(n: int) -> bool:
    """Exact primality for 0 <= n < 2**32."""
    if not 0 <= n <= 0xFFFFFFFF:
        raise ValueError(f"{n} does not fit into 32 bits")
    decided = is_prime_trial_division(n, SMALL_PRIMES)
    if decided is not None:
        return decided
    return _forisek_jancina(n)


def is_prime_64(n: int) -> bool:
    """Exact primality for 0 <= n < 2**64."""
    if not 0 <= n <= _U64:
        raise ValueError(f"{n} does not fit into 64 bits")
    decided = is_prime_trial_division(n, SMALL_PRIMES)
    if decided is not None:
        return decided
    return all(miller_rabin_test(n, a) for a in _WITNESSES_64)


def _next_discriminant(d: int) -> int:
    # 5, -7, 9, -11, 13, ...
    return -2 - d if d > 0 else 2 - d


def _selfridge_discriminant(n: int) -> int | None:
    """First D in 5, -7, 9, ... with jacobi(D, n) == -1; None if n is a square."""
    d = 5
    for _ in range(_DISCRIMINANT_TRIES_BEFORE_SQUARE_TEST):
        if jacobi(d, n) == -1:
            return d
        d = _next_discriminant(d)

    # Squares have no such D; any other n does.
    if is_square(n):
        return None
    while jacobi(d, n) != -1:
        d = _next_discriminant(d)
    return d


def is_strong_lucas_probable_prime(n: int) -> bool:
    """
    Strong Lucas probable prime test with Selfridge parameters.

    Args:
        n: Odd number > 2

    Returns:
        Whether n is a strong Lucas probable prime
    """
    if n <= 2 or n % 2 == 0:
        raise ValueError(f"strong Lucas test needs an odd n > 2, got {n}")

    d = _selfridge_discriminant(n)
    if d is None:
        return False
    p = 1
    q = (1 - d) // 4

    e, o = odd_part(n + 1)
    u, v = mod_lucas_nth_term(o, p, q, n)
    if u == 0 or v == 0:
        return True
    for _ in range(e - 1):
        # U_2k = U_k V_k, V_2k = (V_k^2 + D U_k^2) / 2
        u, v = u * v % n, v * v + d * u * u
        if v & 1:
            v += n
        v = (v // 2) % n
        if v == 0:
            return True
    return False


def is_prime_baillie_psw(n: int) -> bool:
    """Baillie-PSW test; exact below 2**64, no known counterexample above."""
    if n <= 1:
        return False
    decided = is_prime_trial_division(n, SMALL_PRIMES)
    if decided is not None:
        return decided
    if not miller_rabin_test(n, 2):
        return False
    return is_strong_lucas_probable_prime(n)


@lru_cache(maxsize=1024)
def is_prime(n: int) -> bool:
    """
    Primality test for integers of any size.

    Negative numbers are not prime. Values that fit into 32 or 64 bits use the
    exact bounded-width tests, everything wider uses Baillie-PSW.
    """
    n = operator.index(n)
    if n < 0:
        return False
    if n <= 0xFFFFFFFF:
        return is_prime_32(n)
    if n <= _U64:
        return is_prime_64(n)
    logger.debug("Baillie-PSW for %d-bit value", n.bit_length())
    return is_prime_baillie_psw(n)


def next_prime(n: int) -> int:
    """Smallest prime strictly greater than n."""
    if n < 2:
        return 2
    if n == 2:
        return 3
    candidate = n + 1 if n % 2 == 0 else n + 2
    while not is_prime(candidate):
        candidate += 2
    return candidate


def is_prime_naive(n: int) -> bool:
    """Slow reference test by trial division up to sqrt(n)."""
    if n < 2:
        return False
    if n < 4:
        return True
    if n % 2 == 0:
        return False
    for d in range(3, math.isqrt(n) + 1, 2):
        if n % d == 0:
            return False
    return True

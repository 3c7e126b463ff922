"""
Segmented Sieve of Eratosthenes with an optional 2-3-5 wheel.

Two storage layouts share one generator interface:

1. Sieve235: one uint8 per 30 consecutive integers. Only the eight residues
   coprime to 30 (1, 7, 11, 13, 17, 19, 23, 29) get a bit; strict multiples of
   2, 3 and 5 are implicitly composite and 2, 3, 5 themselves implicitly prime.
   30/8 times denser than a bit per integer.
2. Sieve: one numpy bool per integer.

GENERATION:
- The prefix up to isqrt(N) is sieved with a classic loop. Every prime found
  there keeps its next pending multiple (per wheel residue class for Sieve235).
- The rest is swept in SEGMENT_SIZE-byte segments so the working set stays in
  cache; each segment is cleared by every base prime before moving on.
- Clearing is a strided NumPy slice (buf[start:stop:p] &= mask). For Sieve235
  this works because the multiples p*(30k + r) of a fixed residue r all land on
  the same bit, p bytes apart.
"""
import logging
import math
import operator
from functools import lru_cache

import numpy as np

logger = logging.getLogger(__name__)

# Bytes (= bools for Sieve) per segment; 256 KiB fits a typical L2 cache.
SEGMENT_SIZE = 1 << 18

PER_BYTE = 30
RESIDUES = (1, 7, 11, 13, 17, 19, 23, 29)
_RESIDUES_ARR = np.array(RESIDUES, dtype=np.int64)

# Bit mask for every residue modulo 30, zero for residues sharing a factor with 30.
_MASK = tuple(
    (0x80 >> RESIDUES.index(r)) if r in RESIDUES else 0 for r in range(PER_BYTE)
)


class Sieve235:
    """
    Wheel-compressed prime sieve.

    Capacity is rounded up to a multiple of 30. After generation sieve[i] is
    True iff i is prime, for every 0 <= i < len(sieve).
    """

    def __init__(self, min_capacity: int):
        self._data: np.ndarray = np.zeros(
            (min_capacity + PER_BYTE - 1) // PER_BYTE, dtype=np.uint8)

    def init235(self) -> None:
        """Mark every residue coprime to 30 as a candidate."""
        self._data.fill(0xFF)

    @property
    def data(self) -> np.ndarray:
        return self._data

    def __len__(self) -> int:
        return self._data.size * PER_BYTE

    def __getitem__(self, idx: int) -> bool:
        idx = operator.index(idx)
        if not 0 <= idx < len(self):
            raise IndexError(f"sieve index {idx} out of range [0, {len(self)})")
        if idx == 2 or idx == 3 or idx == 5:
            return True
        return bool(self._data[idx // PER_BYTE] & _MASK[idx % PER_BYTE])

    def to_bool_array(self) -> np.ndarray:
        """Expand into one bool per integer."""
        out = np.zeros(len(self), dtype=bool)
        bits = np.unpackbits(self._data).reshape(-1, 8).astype(bool)
        positions = np.arange(self._data.size, dtype=np.int64)[:, None] * PER_BYTE
        out[positions + _RESIDUES_ARR] = bits
        out[[p for p in (2, 3, 5) if p < out.size]] = True
        return out


class Sieve:
    """Plain prime sieve, one bool per integer in [0, capacity)."""

    def __init__(self, min_capacity: int):
        self._data: np.ndarray = np.zeros(min_capacity, dtype=bool)

    def init(self) -> None:
        """Mark every integer >= 2 as a candidate."""
        self._data.fill(True)
        self._data[:2] = False

    @property
    def data(self) -> np.ndarray:
        return self._data

    def __len__(self) -> int:
        return self._data.size

    def __getitem__(self, idx: int) -> bool:
        idx = operator.index(idx)
        if not 0 <= idx < len(self):
            raise IndexError(f"sieve index {idx} out of range [0, {len(self)})")
        return bool(self._data[idx])

    def to_bool_array(self) -> np.ndarray:
        return self._data.copy()


# ============================================================================
# WHEEL SIEVE GENERATION
# ============================================================================

def _collect_235(buf: np.ndarray, lo: int, hi: int, n: int, out: list[int]) -> None:
    """Append the surviving candidates of bytes [lo, hi) that are <= n."""
    bits = np.unpackbits(buf[lo:hi]).reshape(-1, 8)
    rows, cols = np.nonzero(bits)
    values = (rows.astype(np.int64) + lo) * PER_BYTE + _RESIDUES_ARR[cols]
    out.extend(values[values <= n].tolist())


def _eratosthenes_235(n: int, collect: bool) -> tuple[Sieve235, list[int]]:
    nbytes = n // PER_BYTE + 1
    sieve = Sieve235(nbytes * PER_BYTE)
    sieve.init235()
    buf = sieve.data
    # 1 is not prime.
    buf[0] &= np.uint8(0xFF ^ _MASK[1])

    root = math.isqrt(nbytes * PER_BYTE - 1)
    root_bytes = root // PER_BYTE + 1
    logger.debug("sieve_235 up to %d: %d bytes, prefix %d bytes", n, nbytes, root_bytes)

    primes = [p for p in (2, 3, 5) if p <= n]
    base: list[int] = []
    next_pos: list[list[int]] = []
    clear_masks: list[list[np.uint8]] = []

    done = False
    for i in range(root_bytes):
        for r in RESIDUES:
            p = i * PER_BYTE + r
            if p > root:
                done = True
                break
            if not buf[i] & _MASK[r]:
                continue
            starts = []
            masks = []
            for rr in RESIDUES:
                # Smallest multiplier k*30 + rr that is >= p, so sieving starts at p*p or later.
                k = max(0, -(-(p - rr) // PER_BYTE))
                start = p * k + (p * rr) // PER_BYTE
                mask = np.uint8(0xFF ^ _MASK[(p * rr) % PER_BYTE])
                if start < root_bytes:
                    buf[start:root_bytes:p] &= mask
                    start += -(-(root_bytes - start) // p) * p
                starts.append(start)
                masks.append(mask)
            base.append(p)
            next_pos.append(starts)
            clear_masks.append(masks)
        if done:
            break

    if collect:
        _collect_235(buf, 0, min(root_bytes, nbytes), n, primes)

    for lo in range(root_bytes, nbytes, SEGMENT_SIZE):
        hi = min(lo + SEGMENT_SIZE, nbytes)
        for p, starts, masks in zip(base, next_pos, clear_masks):
            for j in range(8):
                start = starts[j]
                if start < hi:
                    buf[start:hi:p] &= masks[j]
                    starts[j] = start + -(-(hi - start) // p) * p
        if collect:
            _collect_235(buf, lo, hi, n, primes)

    return sieve, primes


# ============================================================================
# PLAIN SIEVE GENERATION
# ============================================================================

def _eratosthenes_plain(n: int, collect: bool) -> tuple[Sieve, list[int]]:
    sieve = Sieve(n + 1)
    sieve.init()
    buf = sieve.data

    root = math.isqrt(n)
    prefix = root + 1
    logger.debug("plain sieve up to %d: prefix %d", n, prefix)

    base: list[int] = []
    next_pos: list[int] = []
    for i in range(2, prefix):
        if buf[i]:
            buf[i * i:prefix:i] = False
            base.append(i)
            next_pos.append(max(i * i, -(-prefix // i) * i))

    primes: list[int] = []
    if collect:
        primes.extend((np.flatnonzero(buf[:prefix])).tolist())

    size = n + 1
    for lo in range(prefix, size, SEGMENT_SIZE):
        hi = min(lo + SEGMENT_SIZE, size)
        for idx, p in enumerate(base):
            start = next_pos[idx]
            if start < hi:
                buf[start:hi:p] = False
                next_pos[idx] = start + -(-(hi - start) // p) * p
        if collect:
            primes.extend((np.flatnonzero(buf[lo:hi]) + lo).tolist())

    return sieve, primes


# ============================================================================
# PUBLIC INTERFACE
# ============================================================================

def _generate(n: int, wheel: bool, collect: bool) -> tuple[Sieve235 | Sieve, list[int]]:
    n = operator.index(n)
    if n < 0:
        raise ValueError(f"sieve bound must be non-negative, got {n}")
    if wheel:
        return _eratosthenes_235(n, collect)
    return _eratosthenes_plain(n, collect)


def prime_sieve(n: int, wheel: bool = True) -> Sieve235 | Sieve:
    """
    Generate a sieve that answers primality for every integer in [0, n].

    Args:
        n: Largest number that must be accessible
        wheel: Use the 2-3-5 wheel layout (Sieve235) instead of one bool per integer

    Returns:
        The populated sieve
    """
    sieve, _ = _generate(n, wheel, collect=False)
    return sieve


def prime_sieve_list(n: int, wheel: bool = True) -> tuple[Sieve235 | Sieve, list[int]]:
    """
    Generate a sieve and the ascending list of all primes <= n in one pass.

    Args:
        n: Largest number that must be accessible
        wheel: Use the 2-3-5 wheel layout

    Returns:
        (sieve, primes)
    """
    return _generate(n, wheel, collect=True)


def primes_up_to(n: int) -> list[int]:
    """Ascending list of all primes <= n."""
    _, primes = prime_sieve_list(n)
    return primes


@lru_cache(maxsize=4)
def cached_primes(limit: int) -> tuple[int, ...]:
    """Memoized tuple of all primes <= limit, for trial division tables."""
    return tuple(primes_up_to(limit))

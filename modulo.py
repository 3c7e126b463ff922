"""
Modular arithmetic kernel used by the primality tests and the factorization engine.

CONTENTS:
1. Rounded division: floor_div, ceil_div and the mathematical mod
2. Binary exponentiation with a caller-supplied reduction (integers, matrices, ModInt)
3. Inverses via extended Euclid
4. Quadratic residues: Legendre/Jacobi symbols and Tonelli-Shanks square roots
5. ModInt: residue class value type with a runtime modulus
"""
import math
import random
from typing import Any, Callable

_rng = random.Random()


# ============================================================================
# PART 1: ROUNDED DIVISION
# ============================================================================

def floor_div(a: int, b: int) -> int:
    """Quotient of a / b rounded toward negative infinity (not toward zero)."""
    return a // b


def ceil_div(a: int, b: int) -> int:
    """Quotient of a / b rounded toward positive infinity."""
    return -(-a // b)


def mod(a: int, m: int) -> int:
    """
    Mathematical modulo.

    The result lies in [0, m) regardless of the sign of a. A negative modulus
    raises ValueError, m == 0 raises ZeroDivisionError.
    """
    if m < 0:
        raise ValueError(f"modulus must be non-negative, got {m}")
    return a % m


def odd_part(n: int) -> tuple[int, int]:
    """
    Split n into (e, o) with n == o * 2**e and o odd.

    Args:
        n: Non-zero integer

    Returns:
        (exponent of two, odd cofactor)
    """
    if n == 0:
        raise ValueError("odd_part(0) is undefined")
    e = (n & -n).bit_length() - 1
    return e, n >> e


def isqrt(n: int) -> int:
    """floor(sqrt(n)) for n >= 0."""
    return math.isqrt(n)


def is_square(n: int) -> bool:
    """Whether n is a perfect square."""
    if n < 0:
        return False
    # Squares end in 0, 1, 4, 5, 6 or 9 in base 10 ...
    last_digit = n % 10
    if last_digit in (2, 3, 7, 8):
        return False
    # ... and in 0, 1, 4, 9 modulo 16.
    if (n & 15) not in (0, 1, 4, 9):
        return False
    root = math.isqrt(n)
    return root * root == n


# ============================================================================
# PART 2: BINARY EXPONENTIATION
# ============================================================================

def mod_pow(a: Any, b: int, reduce: Callable[[Any], Any], unit: Any = 1) -> Any:
    """
    Compute reduce(a**b) by binary exponentiation.

    The reduction is applied after every multiplication, so the same routine
    serves plain integers (reduce = lambda x: x % m), 2x2 matrices reduced
    element-wise (Lucas sequences) and ModInt values.

    Args:
        a: Base; any value supporting '*'
        b: Exponent, must be non-negative
        reduce: Reduction applied to every intermediate product
        unit: Multiplicative identity of a's type

    Returns:
        reduce(a**b), or unit when b == 0
    """
    if b < 0:
        raise ValueError(f"negative exponent {b}")
    if b == 0:
        if isinstance(a, int) and a == 0:
            raise ValueError("0**0 has no unique value")
        return unit

    result = None
    base = reduce(a)
    while True:
        if b & 1:
            result = base if result is None else reduce(result * base)
        b >>= 1
        if b == 0:
            return result
        base = reduce(base * base)


# ============================================================================
# PART 3: INVERSES
# ============================================================================

def extended_euclid(a: int, b: int) -> tuple[int, int, int]:
    """
    Extended Euclidean algorithm.

    Returns:
        (g, x, y) with a*x + b*y == g == gcd(a, b) >= 0
    """
    old_r, r = a, b
    old_x, x = 1, 0
    old_y, y = 0, 1
    while r != 0:
        q = old_r // r
        old_r, r = r, old_r - q * r
        old_x, x = x, old_x - q * x
        old_y, y = y, old_y - q * y
    if old_r < 0:
        old_r, old_x, old_y = -old_r, -old_x, -old_y
    return old_r, old_x, old_y


def mod_mult_inv(a: int, m: int) -> int:
    """
    Multiplicative inverse of a modulo m.

    Args:
        a: Number to invert, must be coprime to m
        m: Positive modulus

    Returns:
        x in [0, m) with a*x == 1 (mod m)
    """
    if m <= 0:
        raise ValueError(f"modulus must be positive, got {m}")
    g, x, _ = extended_euclid(a, m)
    if g != 1:
        raise ValueError(f"{a} is not invertible modulo {m} (gcd is {g})")
    return mod(x, m)


# ============================================================================
# PART 4: QUADRATIC RESIDUES
# ============================================================================

def legendre(a: int, p: int) -> int:
    """Legendre symbol (a/p) for an odd prime p, via Euler's criterion."""
    if p < 3 or p % 2 == 0:
        raise ValueError(f"legendre symbol needs an odd prime, got {p}")
    rem = pow(a % p, (p - 1) // 2, p)
    return -1 if rem == p - 1 else rem


def jacobi(a: int, b: int) -> int:
    """
    Jacobi symbol (a/b) by quadratic reciprocity.

    Args:
        a: Any integer
        b: Odd positive integer

    Returns:
        -1, 0 or 1
    """
    if b <= 0 or b & 1 == 0:
        raise ValueError(f"jacobi symbol needs an odd positive modulus, got {b}")
    a = mod(a, b)
    t = 1
    while a != 0:
        s, a = odd_part(a)
        if s & 1 and b % 8 in (3, 5):
            t = -t
        a, b = b, a
        if a % 4 == 3 and b % 4 == 3:
            t = -t
        a %= b
    return t if b == 1 else 0


def mod_is_square(a: int, p: int) -> bool:
    """Whether a is a quadratic residue modulo the prime p."""
    a %= p
    if a == 0 or p == 2:
        return True
    return pow(a, (p - 1) // 2, p) == 1


def mod_sqrt(a: int, p: int) -> int:
    """
    Square root of a modulo an odd prime p (Tonelli-Shanks).

    Returns:
        The smaller of the two roots x, p - x
    """
    a %= p
    if a == 0 or p == 2:
        return a
    if not mod_is_square(a, p):
        raise ValueError(f"{a} is not a quadratic residue modulo {p}")

    s, q = odd_part(p - 1)
    if s == 1:
        x = pow(a, (p + 1) // 4, p)
        return min(x, p - x)

    # Half of 1..p-1 are non-residues, two draws on average.
    z = _rng.randrange(2, p)
    while mod_is_square(z, p):
        z = _rng.randrange(2, p)

    c = pow(z, q, p)
    x = pow(a, (q + 1) // 2, p)
    t = pow(a, q, p)
    m = s
    while t != 1:
        i = 0
        probe = t
        while probe != 1:
            probe = probe * probe % p
            i += 1
        b = pow(c, 1 << (m - i - 1), p)
        x = x * b % p
        c = b * b % p
        t = t * c % p
        m = i
    return min(x, p - x)


# ============================================================================
# PART 5: MODINT
# ============================================================================

class ModInt:
    """
    Residue class modulo a runtime modulus.

    Arithmetic with plain ints coerces them into the same class; mixing two
    different moduli is a caller error.
    """

    __slots__ = ("value", "modulus")

    def __init__(self, value: int, modulus: int):
        if modulus <= 0:
            raise ValueError(f"modulus must be positive, got {modulus}")
        self.modulus = modulus
        self.value = value % modulus

    def _coerce(self, other: Any) -> "ModInt":
        if isinstance(other, ModInt):
            if other.modulus != self.modulus:
                raise ValueError(
                    f"modulus mismatch: {self.modulus} vs {other.modulus}")
            return other
        if isinstance(other, int):
            return ModInt(other, self.modulus)
        return NotImplemented

    def __add__(self, other):
        other = self._coerce(other)
        if other is NotImplemented:
            return other
        return ModInt(self.value + other.value, self.modulus)

    __radd__ = __add__

    def __sub__(self, other):
        other = self._coerce(other)
        if other is NotImplemented:
            return other
        return ModInt(self.value - other.value, self.modulus)

    def __rsub__(self, other):
        other = self._coerce(other)
        if other is NotImplemented:
            return other
        return ModInt(other.value - self.value, self.modulus)

    def __mul__(self, other):
        other = self._coerce(other)
        if other is NotImplemented:
            return other
        return ModInt(self.value * other.value, self.modulus)

    __rmul__ = __mul__

    def __truediv__(self, other):
        other = self._coerce(other)
        if other is NotImplemented:
            return other
        return self * other.inverse()

    def __neg__(self):
        return ModInt(-self.value, self.modulus)

    def __pow__(self, exponent: int):
        if exponent < 0:
            return self.inverse() ** -exponent
        unit = ModInt(1, self.modulus)
        if exponent == 0:
            return unit
        return mod_pow(self, exponent, lambda x: x, unit)

    def inverse(self) -> "ModInt":
        return ModInt(mod_mult_inv(self.value, self.modulus), self.modulus)

    def __eq__(self, other):
        if isinstance(other, ModInt):
            return self.modulus == other.modulus and self.value == other.value
        if isinstance(other, int):
            return self.value == other % self.modulus
        return NotImplemented

    def __hash__(self):
        return hash((self.value, self.modulus))

    def __int__(self):
        return self.value

    def __index__(self):
        return self.value

    def __repr__(self):
        return f"ModInt({self.value}, {self.modulus})"

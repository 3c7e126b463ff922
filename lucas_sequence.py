"""
Terms of the Lucas sequences U_n(P, Q) and V_n(P, Q).

Both sequences follow x_{k+1} = P*x_k - Q*x_{k-1}, with U_0 = 0, U_1 = 1 and
V_0 = 2, V_1 = P. The n-th term is read off the (n-1)-th power of the
companion matrix [[P, -Q], [1, 0]], so a term costs O(log n) 2x2 products.
"""
from modulo import mod_pow


class _Matrix2:
    """Row-major 2x2 integer matrix, just enough for mod_pow."""

    __slots__ = ("a", "b", "c", "d")

    def __init__(self, a: int, b: int, c: int, d: int):
        self.a, self.b, self.c, self.d = a, b, c, d

    def __mul__(self, other: "_Matrix2") -> "_Matrix2":
        return _Matrix2(
            self.a * other.a + self.b * other.c,
            self.a * other.b + self.b * other.d,
            self.c * other.a + self.d * other.c,
            self.c * other.b + self.d * other.d,
        )

    def apply(self, x: int, y: int) -> tuple[int, int]:
        """Product with the column vector (x, y)."""
        return self.a * x + self.b * y, self.c * x + self.d * y


_IDENTITY = _Matrix2(1, 0, 0, 1)


def lucas_nth_term(n: int, P: int, Q: int) -> tuple[int, int]:
    """
    Exact n-th terms of the Lucas sequences.

    Args:
        n: Index, n >= 0
        P, Q: Sequence parameters

    Returns:
        (U_n, V_n)
    """
    if n < 0:
        raise ValueError(f"negative index {n}")
    if n == 0:
        return 0, 2
    if n == 1:
        return 1, P

    mat = mod_pow(_Matrix2(P, -Q, 1, 0), n - 1, lambda x: x, _IDENTITY)
    u, _ = mat.apply(1, 0)
    v, _ = mat.apply(P, 2)
    return u, v


def mod_lucas_nth_term(n: int, P: int, Q: int, m: int) -> tuple[int, int]:
    """
    n-th terms of the Lucas sequences modulo m.

    Every intermediate matrix is reduced element-wise, so the entries never
    grow beyond m**2.

    Args:
        n: Index, n >= 0
        P, Q: Sequence parameters (any sign)
        m: Positive modulus

    Returns:
        (U_n mod m, V_n mod m)
    """
    if m <= 0:
        raise ValueError(f"modulus must be positive, got {m}")
    if n < 0:
        raise ValueError(f"negative index {n}")
    if n == 0:
        return 0, 2 % m
    if n == 1:
        return 1 % m, P % m

    def reduce(x: _Matrix2) -> _Matrix2:
        return _Matrix2(x.a % m, x.b % m, x.c % m, x.d % m)

    mat = mod_pow(_Matrix2(P % m, -Q % m, 1, 0), n - 1, reduce, _IDENTITY)
    u, _ = mat.apply(1, 0)
    v, _ = mat.apply(P % m, 2 % m)
    return u % m, v % m

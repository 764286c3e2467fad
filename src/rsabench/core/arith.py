from __future__ import annotations

from typing import Tuple

from rsabench.core.errors import NotInvertibleError


def mod_pow(base: int, exponent: int, modulus: int) -> int:
    """Compute ``base ** exponent % modulus`` by binary square-and-multiply.

    Exponent bits are consumed least-significant first. Running time depends
    on the exponent bits, so this is not constant-time.
    """
    if modulus <= 0:
        raise ValueError("modulus must be positive")
    if exponent < 0:
        raise ValueError("exponent must be non-negative")
    if modulus == 1:
        return 0
    result = 1
    b = base % modulus
    exp = exponent
    while exp > 0:
        if exp & 1:
            result = (result * b) % modulus
        exp >>= 1
        b = (b * b) % modulus
    return result


def extended_gcd(a: int, b: int) -> Tuple[int, int, int]:
    """Return (g, x, y) with a*x + b*y == g == gcd(a, b)."""
    old_r, r = a, b
    old_x, x = 1, 0
    old_y, y = 0, 1
    while r != 0:
        q = old_r // r
        old_r, r = r, old_r - q * r
        old_x, x = x, old_x - q * x
        old_y, y = y, old_y - q * y
    return old_r, old_x, old_y


def mod_inverse(a: int, m: int) -> int:
    if m <= 1:
        raise ValueError("modulus must be greater than 1")
    g, x, _ = extended_gcd(a % m, m)
    if g != 1:
        raise NotInvertibleError(f"{a} has no inverse modulo {m} (gcd={g})")
    return x % m

from __future__ import annotations

import secrets
from typing import List, Optional, Protocol

from rsabench.core.errors import PrimeGenerationError


class RandomSource(Protocol):
    def getrandbits(self, k: int) -> int: ...

    def randrange(self, start: int, stop: int) -> int: ...


def _sieve(limit: int) -> List[int]:
    flags = [True] * (limit + 1)
    flags[0] = flags[1] = False
    for i in range(2, int(limit**0.5) + 1):
        if flags[i]:
            flags[i * i :: i] = [False] * len(flags[i * i :: i])
    return [i for i, is_p in enumerate(flags) if is_p]


SMALL_PRIMES = _sieve(1000)
_SMALL_PRIME_SET = frozenset(SMALL_PRIMES)


def miller_rabin_rounds(bits: int) -> int:
    # Rounds keeping the error for a random candidate at or below 2**-100.
    if bits >= 1536:
        return 3
    if bits >= 1024:
        return 4
    if bits >= 512:
        return 7
    if bits >= 256:
        return 16
    return 50


def is_probable_prime(
    n: int, rounds: Optional[int] = None, rng: Optional[RandomSource] = None
) -> bool:
    if n < 2:
        return False
    if n in _SMALL_PRIME_SET:
        return True
    for p in SMALL_PRIMES:
        if n % p == 0:
            return False
    rng = rng or secrets.SystemRandom()
    rounds = rounds if rounds is not None else miller_rabin_rounds(n.bit_length())

    # n - 1 = 2**s * d with d odd
    d = n - 1
    s = 0
    while d % 2 == 0:
        d //= 2
        s += 1

    for _ in range(rounds):
        a = rng.randrange(2, n - 1)
        x = pow(a, d, n)
        if x == 1 or x == n - 1:
            continue
        for _ in range(s - 1):
            x = pow(x, 2, n)
            if x == n - 1:
                break
        else:
            return False
    return True


def generate_prime(bits: int, rng: Optional[RandomSource] = None) -> int:
    """Return a random probable prime of exactly ``bits`` bits.

    ``rng`` defaults to the OS CSPRNG. Any failure of the random source aborts
    the call with PrimeGenerationError.
    """
    if bits < 2:
        raise ValueError("bits must be at least 2")
    rng = rng or secrets.SystemRandom()
    top = 1 << (bits - 1)
    try:
        while True:
            candidate = rng.getrandbits(bits) | top
            if bits > 2:
                candidate |= 1
            if is_probable_prime(candidate, rng=rng):
                return candidate
    except (OSError, NotImplementedError) as exc:
        raise PrimeGenerationError("secure random source failed") from exc

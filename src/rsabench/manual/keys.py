from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from rsabench.core.arith import mod_inverse
from rsabench.core.errors import KeyGenerationError, NotInvertibleError
from rsabench.manual.primes import RandomSource, generate_prime

PUBLIC_EXPONENT = 65537
MIN_KEY_BITS = 32
DEFAULT_MAX_ATTEMPTS = 8

_log = logging.getLogger("rsabench.manual.keys")


@dataclass(frozen=True)
class PublicKey:
    n: int
    e: int


@dataclass(frozen=True)
class KeyPair:
    n: int
    e: int
    d: int

    @property
    def bits(self) -> int:
        return self.n.bit_length()

    def public(self) -> PublicKey:
        return PublicKey(n=self.n, e=self.e)

    def __repr__(self) -> str:  # d stays out of logs and tracebacks
        return f"KeyPair(bits={self.bits}, e={self.e})"


def key_pair_from_primes(p: int, q: int, e: int = PUBLIC_EXPONENT) -> KeyPair:
    if p == q:
        raise KeyGenerationError("primes must be distinct")
    phi = (p - 1) * (q - 1)
    if not 1 < e < phi:
        raise KeyGenerationError(f"public exponent {e} out of range for phi={phi}")
    try:
        d = mod_inverse(e, phi)
    except NotInvertibleError as exc:
        raise KeyGenerationError("public exponent is not invertible modulo phi") from exc
    return KeyPair(n=p * q, e=e, d=d)


def build_key_pair(
    bits: int,
    *,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    rng: Optional[RandomSource] = None,
) -> KeyPair:
    """Build a textbook RSA key pair with a ``bits``-bit target modulus.

    Both primes are ``bits // 2`` bits long and e is fixed at 65537. When e is
    not invertible modulo phi the primes are discarded and drawn again, up to
    ``max_attempts`` times. PrimeGenerationError propagates unchanged.
    """
    if bits < MIN_KEY_BITS:
        raise ValueError(f"bits must be at least {MIN_KEY_BITS}")
    if max_attempts < 1:
        raise ValueError("max_attempts must be at least 1")
    half = bits // 2
    last_exc: Optional[KeyGenerationError] = None
    for attempt in range(1, max_attempts + 1):
        p = generate_prime(half, rng)
        q = generate_prime(half, rng)
        while q == p:
            q = generate_prime(half, rng)
        try:
            return key_pair_from_primes(p, q)
        except KeyGenerationError as exc:
            last_exc = exc
            if _log.isEnabledFor(logging.WARNING):
                _log.warning(
                    "key generation retry: bits=%d, attempt=%d/%d, error=%s",
                    bits,
                    attempt,
                    max_attempts,
                    exc,
                )
    raise KeyGenerationError(f"key generation failed after {max_attempts} attempts") from last_exc

from __future__ import annotations

from typing import Union

from rsabench.core.arith import mod_pow
from rsabench.core.errors import OutOfRangeInputError
from rsabench.manual.keys import KeyPair, PublicKey


def _check_range(value: int, n: int, what: str) -> None:
    if not 0 <= value < n:
        raise OutOfRangeInputError(f"{what} must be in [0, n)")


def encrypt(message: int, key: Union[KeyPair, PublicKey]) -> int:
    # textbook RSA: no padding, deterministic
    _check_range(message, key.n, "message")
    return mod_pow(message, key.e, key.n)


def decrypt(ciphertext: int, key: KeyPair) -> int:
    _check_range(ciphertext, key.n, "ciphertext")
    return mod_pow(ciphertext, key.d, key.n)

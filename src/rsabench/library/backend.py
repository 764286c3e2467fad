from __future__ import annotations

from cryptography.hazmat.primitives.asymmetric import padding, rsa

from rsabench.core.errors import LibraryOperationError

PUBLIC_EXPONENT = 65537
# OpenSSL-backed generation refuses smaller moduli
MIN_LIBRARY_KEY_BITS = 1024


def generate_key(bits: int = 2048) -> rsa.RSAPrivateKey:
    if bits < MIN_LIBRARY_KEY_BITS:
        raise ValueError(f"library keys must be at least {MIN_LIBRARY_KEY_BITS} bits")
    return rsa.generate_private_key(public_exponent=PUBLIC_EXPONENT, key_size=bits)


def encrypt(message: bytes, public_key: rsa.RSAPublicKey) -> bytes:
    # PKCS#1 v1.5 is randomized: equal inputs give different ciphertexts
    try:
        return public_key.encrypt(message, padding.PKCS1v15())
    except ValueError as exc:
        raise LibraryOperationError("library encryption failed") from exc


def decrypt(ciphertext: bytes, private_key: rsa.RSAPrivateKey) -> bytes:
    try:
        return private_key.decrypt(ciphertext, padding.PKCS1v15())
    except ValueError as exc:
        raise LibraryOperationError("library decryption failed") from exc

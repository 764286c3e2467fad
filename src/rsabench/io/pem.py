from __future__ import annotations

from typing import Union

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from rsabench.core.errors import InvalidKeyFormatError
from rsabench.manual.keys import KeyPair, PublicKey

PemInput = Union[str, bytes]


def _as_bytes(data: PemInput) -> bytes:
    return data.encode("ascii") if isinstance(data, str) else data


def public_pem(key: Union[rsa.RSAPublicKey, rsa.RSAPrivateKey]) -> str:
    if isinstance(key, rsa.RSAPrivateKey):
        key = key.public_key()
    return key.public_bytes(
        serialization.Encoding.PEM, serialization.PublicFormat.SubjectPublicKeyInfo
    ).decode("ascii")


def private_pem(key: rsa.RSAPrivateKey) -> str:
    return key.private_bytes(
        serialization.Encoding.PEM,
        serialization.PrivateFormat.PKCS8,
        serialization.NoEncryption(),
    ).decode("ascii")


def key_pair_to_public_pem(key: Union[KeyPair, PublicKey]) -> str:
    """Encode the public half as a PKCS#1 ``RSA PUBLIC KEY`` block."""
    pub = rsa.RSAPublicNumbers(key.e, key.n).public_key()
    return pub.public_bytes(
        serialization.Encoding.PEM, serialization.PublicFormat.PKCS1
    ).decode("ascii")


def key_pair_to_private_pem(key_pair: KeyPair) -> str:
    """Encode a textbook key pair as a PKCS#1 ``RSA PRIVATE KEY`` block.

    KeyPair keeps only (n, e, d); the primes and CRT values the format
    requires are recovered from them.
    """
    try:
        p, q = rsa.rsa_recover_prime_factors(key_pair.n, key_pair.e, key_pair.d)
        numbers = rsa.RSAPrivateNumbers(
            p=p,
            q=q,
            d=key_pair.d,
            dmp1=rsa.rsa_crt_dmp1(key_pair.d, p),
            dmq1=rsa.rsa_crt_dmq1(key_pair.d, q),
            iqmp=rsa.rsa_crt_iqmp(p, q),
            public_numbers=rsa.RSAPublicNumbers(key_pair.e, key_pair.n),
        )
        key = numbers.private_key()
    except ValueError as exc:
        raise InvalidKeyFormatError("key pair cannot be encoded as PKCS#1") from exc
    return key.private_bytes(
        serialization.Encoding.PEM,
        serialization.PrivateFormat.TraditionalOpenSSL,
        serialization.NoEncryption(),
    ).decode("ascii")


def key_pair_from_pem(data: PemInput) -> KeyPair:
    try:
        key = serialization.load_pem_private_key(_as_bytes(data), password=None)
    except (ValueError, TypeError) as exc:
        raise InvalidKeyFormatError("not a readable unencrypted PEM private key") from exc
    if not isinstance(key, rsa.RSAPrivateKey):
        raise InvalidKeyFormatError("PEM private key is not an RSA key")
    numbers = key.private_numbers()
    return KeyPair(n=numbers.public_numbers.n, e=numbers.public_numbers.e, d=numbers.d)


def public_key_from_pem(data: PemInput) -> PublicKey:
    try:
        key = serialization.load_pem_public_key(_as_bytes(data))
    except (ValueError, TypeError) as exc:
        raise InvalidKeyFormatError("not a readable PEM public key") from exc
    if not isinstance(key, rsa.RSAPublicKey):
        raise InvalidKeyFormatError("PEM public key is not an RSA key")
    numbers = key.public_numbers()
    return PublicKey(n=numbers.n, e=numbers.e)

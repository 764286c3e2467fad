import logging

import pytest

pytestmark = pytest.mark.unit

P31 = 2**31 - 1
P61 = 2**61 - 1


def test_key_pair_from_known_small_primes():
    from rsabench.manual.keys import key_pair_from_primes

    kp = key_pair_from_primes(251, 241, e=17)
    assert kp.n == 60491
    assert kp.e == 17
    assert kp.d == 42353
    assert (kp.e * kp.d) % 60000 == 1


def test_key_pair_invariants_default_exponent():
    from rsabench.manual.keys import PUBLIC_EXPONENT, key_pair_from_primes

    kp = key_pair_from_primes(P31, P61)
    phi = (P31 - 1) * (P61 - 1)
    assert kp.e == PUBLIC_EXPONENT == 65537
    assert kp.n == P31 * P61
    assert (kp.e * kp.d) % phi == 1
    assert 1 < kp.e < phi
    assert kp.d > 0


def test_key_pair_from_primes_rejects_degenerate_input():
    from rsabench.core.errors import KeyGenerationError
    from rsabench.manual.keys import key_pair_from_primes

    with pytest.raises(KeyGenerationError):
        key_pair_from_primes(251, 251, e=17)
    # phi = 24, e must be below it
    with pytest.raises(KeyGenerationError):
        key_pair_from_primes(5, 7)
    # gcd(3, 60000) != 1
    with pytest.raises(KeyGenerationError) as ei:
        key_pair_from_primes(251, 241, e=3)
    assert ei.value.__cause__ is not None


def test_build_key_pair_round_trips():
    from rsabench.manual.cipher import decrypt, encrypt
    from rsabench.manual.keys import build_key_pair

    kp = build_key_pair(64)
    assert kp.e == 65537
    assert kp.n.bit_length() in (63, 64)
    for m in (0, 1, 2, 12345, kp.n - 1):
        assert decrypt(encrypt(m, kp), kp) == m


def test_build_key_pair_rejects_small_sizes():
    from rsabench.manual.keys import build_key_pair

    with pytest.raises(ValueError):
        build_key_pair(16)
    with pytest.raises(ValueError):
        build_key_pair(64, max_attempts=0)


def test_build_key_pair_retries_when_exponent_not_invertible(
    monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
):
    import rsabench.manual.keys as keys
    from rsabench.core.arith import mod_inverse
    from rsabench.core.errors import NotInvertibleError

    calls = {"n": 0}

    def flaky_inverse(a: int, m: int) -> int:
        calls["n"] += 1
        if calls["n"] == 1:
            raise NotInvertibleError("forced")
        return mod_inverse(a, m)

    monkeypatch.setattr(keys, "mod_inverse", flaky_inverse)
    with caplog.at_level(logging.WARNING, logger="rsabench.manual.keys"):
        kp = keys.build_key_pair(64)
    assert calls["n"] == 2
    assert isinstance(kp, keys.KeyPair)
    assert any("retry" in r.getMessage() for r in caplog.records)


def test_build_key_pair_gives_up_after_max_attempts(monkeypatch: pytest.MonkeyPatch):
    import rsabench.manual.keys as keys
    from rsabench.core.errors import KeyGenerationError, NotInvertibleError

    calls = {"n": 0}

    def never(a: int, m: int) -> int:
        calls["n"] += 1
        raise NotInvertibleError("forced")

    monkeypatch.setattr(keys, "mod_inverse", never)
    with pytest.raises(KeyGenerationError):
        keys.build_key_pair(64, max_attempts=3)
    assert calls["n"] == 3


def test_build_key_pair_propagates_prime_generation_error():
    from rsabench.core.errors import PrimeGenerationError
    from rsabench.manual.keys import build_key_pair

    class _Broken:
        def getrandbits(self, k: int) -> int:
            raise OSError("no entropy")

        def randrange(self, start: int, stop: int) -> int:  # pragma: no cover
            raise OSError("no entropy")

    with pytest.raises(PrimeGenerationError):
        build_key_pair(64, rng=_Broken())


def test_key_pair_repr_hides_private_exponent():
    from rsabench.manual.keys import key_pair_from_primes

    kp = key_pair_from_primes(P31, P61)
    assert str(kp.d) not in repr(kp)
    assert kp.public().n == kp.n and kp.public().e == kp.e


def test_build_key_pair_redraws_q_when_equal_to_p():
    import secrets

    from rsabench.manual.keys import build_key_pair

    p = 2**32 - 5  # 4294967291
    q = 2**32 - 17  # 4294967279

    class _ScriptedRandom:
        """Yields p, then p again for q, then q; witnesses come from the OS."""

        def __init__(self) -> None:
            self._candidates = iter([p, p, q])
            self._witness = secrets.SystemRandom()
            self.draws = 0

        def getrandbits(self, k: int) -> int:
            self.draws += 1
            return next(self._candidates)

        def randrange(self, start: int, stop: int) -> int:
            return self._witness.randrange(start, stop)

    rng = _ScriptedRandom()
    kp = build_key_pair(64, rng=rng)
    assert rng.draws == 3
    assert kp.n == p * q
    assert (kp.e * kp.d) % ((p - 1) * (q - 1)) == 1

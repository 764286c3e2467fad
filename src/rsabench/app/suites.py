from __future__ import annotations

import logging
from dataclasses import dataclass, field
from functools import partial
from typing import Callable, List, Optional

from pydantic import BaseModel

from rsabench.bench.runner import run
from rsabench.bench.stats import StatSummary, summarize
from rsabench.library import backend
from rsabench.manual.cipher import decrypt, encrypt
from rsabench.manual.keys import KeyPair, build_key_pair
from rsabench.schema.models import BenchSettings

KEY_GENERATION = "key generation"
ENCRYPTION = "encryption"
DECRYPTION = "decryption"

_log = logging.getLogger("rsabench.app.suites")


@dataclass
class BenchmarkResult:
    name: str
    samples: List[int]
    summary: StatSummary


@dataclass
class SuiteReport:
    title: str
    results: List[BenchmarkResult] = field(default_factory=list)
    # round-trip check done after timing; None when the suite has no such check
    verified: Optional[bool] = None

    def get(self, name: str) -> BenchmarkResult:
        for r in self.results:
            if r.name == name:
                return r
        raise KeyError(name)


class Comparison(BaseModel):
    model_config = {"frozen": True}

    operation: str
    textbook: StatSummary
    library: StatSummary

    @property
    def ratio(self) -> float:
        """How many times slower the textbook mean is than the library mean."""
        if self.library.mean == 0:
            return float("inf")
        return self.textbook.mean / self.library.mean


def measure(name: str, operation: Callable[[], object], iterations: int) -> BenchmarkResult:
    samples = run(operation, iterations, name=name)
    return BenchmarkResult(name=name, samples=samples, summary=summarize(samples))


def textbook_suite(settings: BenchSettings, key_pair: Optional[KeyPair] = None) -> SuiteReport:
    report = SuiteReport(title=f"Textbook RSA ({settings.key_bits} bits)")
    report.results.append(
        measure(KEY_GENERATION, partial(build_key_pair, settings.key_bits), settings.iterations)
    )

    kp = key_pair or build_key_pair(settings.key_bits)
    message = settings.message
    report.results.append(measure(ENCRYPTION, partial(encrypt, message, kp), settings.iterations))

    ciphertext = encrypt(message, kp)
    report.results.append(
        measure(DECRYPTION, partial(decrypt, ciphertext, kp), settings.iterations)
    )
    report.verified = decrypt(ciphertext, kp) == message
    if not report.verified:
        _log.error("textbook round-trip failed for message=%d", message)
    return report


def key_size_sweep(settings: BenchSettings) -> SuiteReport:
    report = SuiteReport(title="Textbook key generation by key size")
    for bits in settings.key_sizes:
        report.results.append(
            measure(
                f"{KEY_GENERATION} {bits} bits",
                partial(build_key_pair, bits),
                settings.sweep_iterations,
            )
        )
    return report


def message_sweep(settings: BenchSettings, key_pair: Optional[KeyPair] = None) -> SuiteReport:
    kp = key_pair or build_key_pair(settings.key_bits)
    report = SuiteReport(title=f"Textbook encryption by message value ({kp.bits} bits)")
    for value in settings.message_values:
        report.results.append(
            measure(
                f"{ENCRYPTION} m={value}",
                partial(encrypt, value, kp),
                settings.sweep_iterations,
            )
        )
    return report


def library_suite(settings: BenchSettings) -> SuiteReport:
    bits = settings.key_bits
    report = SuiteReport(title=f"Library RSA, PKCS#1 v1.5 ({bits} bits)")
    report.results.append(
        measure(KEY_GENERATION, partial(backend.generate_key, bits), settings.iterations)
    )

    private_key = backend.generate_key(bits)
    public_key = private_key.public_key()
    message = settings.library_message.encode("utf-8")
    report.results.append(
        measure(ENCRYPTION, partial(backend.encrypt, message, public_key), settings.iterations)
    )

    ciphertext = backend.encrypt(message, public_key)
    report.results.append(
        measure(DECRYPTION, partial(backend.decrypt, ciphertext, private_key), settings.iterations)
    )
    report.verified = backend.decrypt(ciphertext, private_key) == message
    return report


def compare(
    settings: BenchSettings,
    textbook: Optional[SuiteReport] = None,
    library: Optional[SuiteReport] = None,
) -> List[Comparison]:
    textbook = textbook or textbook_suite(settings)
    library = library or library_suite(settings)
    out: List[Comparison] = []
    for op in (KEY_GENERATION, ENCRYPTION, DECRYPTION):
        out.append(
            Comparison(
                operation=op,
                textbook=textbook.get(op).summary,
                library=library.get(op).summary,
            )
        )
    return out

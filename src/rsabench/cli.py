from __future__ import annotations

import logging
import os
import stat
import sys
from pathlib import Path
from typing import Callable, List, Optional, Union

from rsabench.app.report import format_comparison, format_duration, format_suite
from rsabench.app.suites import compare, key_size_sweep, library_suite, message_sweep, textbook_suite
from rsabench.bench.runner import run
from rsabench.core.errors import (
    KeyGenerationError,
    LibraryOperationError,
    PrimeGenerationError,
)
from rsabench.io.fs import load_settings
from rsabench.io.pem import (
    key_pair_to_private_pem,
    key_pair_to_public_pem,
    private_pem,
    public_pem,
)
from rsabench.library import backend
from rsabench.manual.cipher import decrypt, encrypt
from rsabench.manual.keys import build_key_pair
from rsabench.schema.models import BenchSettings

DEFAULT_KEY_FILENAME = "rsabench-key.pem"

_log = logging.getLogger("rsabench.cli")

_HANDLED_ERRORS = (
    PrimeGenerationError,
    KeyGenerationError,
    LibraryOperationError,
    # also covers pydantic validation, out-of-range and key format errors
    ValueError,
    # missing, existing, unreadable or directory paths
    OSError,
)


def _time_once(operation: Callable[[], object]) -> int:
    return run(operation, 1)[0]


def key_gen(
    bits: int = 2048,
    out: Optional[Union[str, Path]] = None,
    *,
    force: bool = False,
) -> str:
    """Write a textbook key pair as PKCS#1 PEM; the public half goes to `<out>.pub`."""
    out_path = Path(out) if out is not None else Path.cwd() / DEFAULT_KEY_FILENAME
    pub_path = out_path.with_name(out_path.name + ".pub")
    if not force and (out_path.exists() or pub_path.exists()):
        raise FileExistsError(str(out_path))
    kp = build_key_pair(bits)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    # created owner-only; the creation mode does not apply to a file being overwritten
    fd = os.open(out_path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, stat.S_IRUSR | stat.S_IWUSR)
    with os.fdopen(fd, "w", encoding="ascii") as fh:
        fh.write(key_pair_to_private_pem(kp))
    try:
        os.chmod(out_path, stat.S_IRUSR | stat.S_IWUSR)  # 0o600
    except OSError as exc:
        # On non-POSIX, chmod may not apply as expected.
        _log.warning("could not restrict permissions on %s: %s", out_path, exc)
    pub_path.write_text(key_pair_to_public_pem(kp), encoding="ascii")
    return str(out_path)


def manual_demo(bits: int, message: int) -> bool:
    print("=== Textbook RSA ===")
    print("Generating key pair...")
    print(f"Key generation time: {format_duration(_time_once(lambda: build_key_pair(bits)))}")
    kp = build_key_pair(bits)
    print(f"Key: n={kp.n}, e={kp.e}, d={kp.d}")
    print(f"Original message: {message}")

    ciphertext = encrypt(message, kp)
    print(f"Ciphertext: {ciphertext}")
    print(f"Encryption time: {format_duration(_time_once(lambda: encrypt(message, kp)))}")

    plaintext = decrypt(ciphertext, kp)
    print(f"Decrypted message: {plaintext}")
    print(f"Decryption time: {format_duration(_time_once(lambda: decrypt(ciphertext, kp)))}")

    ok = plaintext == message
    print("Round-trip OK" if ok else "Round-trip FAILED")
    return ok


def library_demo(bits: int, message: str, show_pem: bool = True) -> bool:
    print("=== Library RSA (PKCS#1 v1.5) ===")
    print("Generating key pair...")
    print(
        f"Key generation time: {format_duration(_time_once(lambda: backend.generate_key(bits)))}"
    )
    private_key = backend.generate_key(bits)
    public_key = private_key.public_key()
    print("Key generated")
    data = message.encode("utf-8")
    print(f"Original message: {message}")

    ciphertext = backend.encrypt(data, public_key)
    print(f"Ciphertext: {ciphertext.hex()}")
    print(
        f"Encryption time: {format_duration(_time_once(lambda: backend.encrypt(data, public_key)))}"
    )

    plaintext = backend.decrypt(ciphertext, private_key)
    print(f"Decrypted message: {plaintext.decode('utf-8', errors='replace')}")
    print(
        "Decryption time: "
        f"{format_duration(_time_once(lambda: backend.decrypt(ciphertext, private_key)))}"
    )

    ok = plaintext == data
    print("Round-trip OK" if ok else "Round-trip FAILED")
    if show_pem:
        print("\n=== Key material ===")
        print("Public key:")
        print(public_pem(public_key))
        print("Private key:")
        print(private_pem(private_key))
    return ok


def _settings(args) -> BenchSettings:
    settings = load_settings(args.config)
    return settings.with_overrides(
        iterations=getattr(args, "iterations", None),
        key_bits=getattr(args, "bits", None),
    )


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entrypoint.

    Subcommands:
      - manual [--bits N] [--message M]
      - lib [--bits N] [--message TEXT] [--no-pem]
      - benchmark [--iterations N] [--bits N] [--no-sweeps]
      - compare [--iterations N] [--bits N]
      - key gen [--bits N] [--out PATH] [--force]
    Every subcommand accepts --config PATH (YAML settings).
    """
    import argparse

    parser = argparse.ArgumentParser(prog="rsabench")
    parser.add_argument("-v", "--verbose", action="store_true")
    sub = parser.add_subparsers(dest="cmd", required=True)

    p_manual = sub.add_parser("manual")
    p_manual.add_argument("--bits", type=int, default=None)
    p_manual.add_argument("--message", type=int, default=None)
    p_manual.add_argument("--config", default=None)

    p_lib = sub.add_parser("lib")
    p_lib.add_argument("--bits", type=int, default=None)
    p_lib.add_argument("--message", type=str, default=None)
    p_lib.add_argument("--no-pem", action="store_true")
    p_lib.add_argument("--config", default=None)

    p_bench = sub.add_parser("benchmark")
    p_bench.add_argument("--iterations", type=int, default=None)
    p_bench.add_argument("--bits", type=int, default=None)
    p_bench.add_argument("--no-sweeps", action="store_true")
    p_bench.add_argument("--config", default=None)

    p_cmp = sub.add_parser("compare")
    p_cmp.add_argument("--iterations", type=int, default=None)
    p_cmp.add_argument("--bits", type=int, default=None)
    p_cmp.add_argument("--config", default=None)

    # key group
    p_key = sub.add_parser("key")
    sub_key = p_key.add_subparsers(dest="key_cmd", required=True)
    p_key_gen = sub_key.add_parser("gen")
    p_key_gen.add_argument("--bits", type=int, default=None)
    p_key_gen.add_argument("--out", type=str, default=None)
    p_key_gen.add_argument("--force", action="store_true")
    p_key_gen.add_argument("--config", default=None)

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    try:
        settings = _settings(args)

        if args.cmd == "manual":
            message = args.message if args.message is not None else settings.message
            return 0 if manual_demo(settings.key_bits, message) else 1

        if args.cmd == "lib":
            message = args.message if args.message is not None else settings.library_message
            ok = library_demo(settings.key_bits, message, show_pem=not args.no_pem)
            return 0 if ok else 1

        if args.cmd == "benchmark":
            kp = build_key_pair(settings.key_bits)
            report = textbook_suite(settings, key_pair=kp)
            print(format_suite(report))
            if not args.no_sweeps:
                print()
                print(format_suite(key_size_sweep(settings)))
                print()
                print(format_suite(message_sweep(settings, key_pair=kp)))
            return 0 if report.verified else 1

        if args.cmd == "compare":
            textbook = textbook_suite(settings)
            library = library_suite(settings)
            print(format_suite(textbook))
            print()
            print(format_suite(library))
            print()
            print(format_comparison(compare(settings, textbook=textbook, library=library)))
            return 0 if textbook.verified and library.verified else 1

        if args.cmd == "key" and args.key_cmd == "gen":
            path = key_gen(settings.key_bits, args.out, force=args.force)
            print(path)
            return 0
    except _HANDLED_ERRORS as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    parser.print_help()
    return 2


if __name__ == "__main__":
    sys.exit(main())

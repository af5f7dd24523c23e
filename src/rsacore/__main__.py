"""The Command Line Interface for the utility, demonstrating the RSA core.

Generates a sample keypair, prints its public half, encrypts a message and decrypts it back. Two helper
subcommands expose prime generation and primality testing. Without a subcommand the demonstration runs.

Typical usage example:

    rsacore
    rsacore demo --message "T:Hi there!" --seed 7
    python -m rsacore check 561
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import argparse
import logging
import sys
import typing

import rsacore
from rsacore.entropy import bytes_to_integer
from rsacore.entropy import integer_to_bytes
from rsacore.entropy import RandomSource
from rsacore.entropy import SeededRandomSource
from rsacore.entropy import SystemRandomSource
from rsacore.keygen import DEFAULT_PRIME_BITS
from rsacore.keygen import MILLER_RABIN_ROUNDS

logger = logging.getLogger("rsacore")


class HelpData(typing.NamedTuple):
    description: str
    format: typing.Type = str
    default: typing.Any = None


help_dict: dict[str, HelpData] = {
    "demo":
        HelpData("Generate a keypair, then encrypt and decrypt a message."),
    "prime":
        HelpData("Generate a probable prime."),
    "check":
        HelpData("Miller-Rabin test a number."),
    "seed":
        HelpData(
            description="Seed a deterministic random source. Warning! Never for real keys.",
            format=int,
        ),
    "prime_bits":
        HelpData(
            description="Size of each of the two primes (in bits).",
            format=int,
            default=DEFAULT_PRIME_BITS,
        ),
    "message":
        HelpData(
            description="Integer message, or text to encode as UTF-8 if it starts with `T:`.",
            format=str,
            default="12345",
        ),
    "number":
        HelpData(
            description="The number to test.",
            format=int,
        ),
    "rounds":
        HelpData(
            description="Number of Miller-Rabin rounds.",
            format=int,
            default=MILLER_RABIN_ROUNDS,
        ),
}

seeded = argparse.ArgumentParser(add_help=False)
seeded.add_argument("--seed", "-s", type=help_dict["seed"].format, help=help_dict["seed"].description)
corep = argparse.ArgumentParser(prog="rsacore")
corep.add_argument("--version", "-v", action="version", version=f"%(prog)s {rsacore.__version__}")
corep.add_argument("--verbose", "-V", action="store_true", help="Log key generation progress")
corep.add_argument("--quiet", "-q", action="store_true", help="Print results only")
commands = corep.add_subparsers(dest="subcommand", title="Subcommands")

demo = commands.add_parser("demo", parents=[seeded], help=help_dict["demo"].description)
demo.add_argument("--prime-bits",
                  "-b",
                  type=help_dict["prime_bits"].format,
                  default=help_dict["prime_bits"].default,
                  help=help_dict["prime_bits"].description)
demo.add_argument("--message",
                  "-m",
                  type=help_dict["message"].format,
                  default=help_dict["message"].default,
                  help=help_dict["message"].description)

prime = commands.add_parser("prime", parents=[seeded], help=help_dict["prime"].description)
prime.add_argument("--bits",
                   "-b",
                   type=help_dict["prime_bits"].format,
                   default=help_dict["prime_bits"].default,
                   help="Size of the prime (in bits).")

check = commands.add_parser("check", help=help_dict["check"].description)
check.add_argument("number", type=help_dict["number"].format, help=help_dict["number"].description)
check.add_argument("--rounds",
                   "-r",
                   type=help_dict["rounds"].format,
                   default=help_dict["rounds"].default,
                   help=help_dict["rounds"].description)


def make_source(seed: int | None) -> RandomSource:
    """Pick the seeded source if a seed was given."""
    if seed is None:
        return SystemRandomSource()
    return SeededRandomSource(seed)


def parse_message(mess: str) -> tuple[int, int | None]:
    """Parse message for text-notice. Returns the representative and the encoded text length (None if integer)."""
    if mess.startswith("T:"):
        encoded = mess[2:].encode("utf-8")
        return bytes_to_integer(encoded), len(encoded)
    return int(mess), None


def main(argv: typing.Sequence[str] | None = None) -> int:
    """Core CLI. Returns the process exit status."""
    argv = sys.argv[1:] if argv is None else list(argv)
    args = corep.parse_args(argv)
    if args.subcommand is None:
        args = corep.parse_args(argv + ["demo"])
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="[%(asctime)s] %(levelname)s %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    def pspr(text: str):
        """Print only if not in quiet mode."""
        if not args.quiet:
            print(text)

    match args.subcommand:
        case "demo":
            try:
                message, text_len = parse_message(args.message)
            except ValueError:
                corep.error(f"Message {args.message!r} is neither an integer nor `T:` text.")
            logger.info("Generating keypair from two %d-bit primes", args.prime_bits)
            try:
                kp = rsacore.Keypair.generate(args.prime_bits, make_source(args.seed))
            except rsacore.KeyGenerationError as exc:
                print(f"Key generation failed: {exc}", file=sys.stderr)
                return 1
            pspr("Public key (n, e):")
            print(f"n: {kp.n}")
            print(f"e: {kp.e}")
            pspr(f"\nOriginal message: {message}")
            try:
                ciphertext = kp.public_key.encrypt(message)
            except rsacore.RangeError as exc:
                print(f"{exc}. Try a shorter message or larger primes.", file=sys.stderr)
                return 2
            print(f"Ciphertext: {ciphertext}")
            clear = kp.decrypt(ciphertext)
            print(f"Decrypted message: {clear}")
            if text_len is not None:
                print(f"Decrypted text: {integer_to_bytes(clear, text_len).decode('utf-8')}")
        case "prime":
            try:
                print(rsacore.generate_large_prime(args.bits, make_source(args.seed)))
            except ValueError as exc:
                corep.error(str(exc))
        case "check":
            try:
                verdict = rsacore.check_prime(args.number, args.rounds)
            except ValueError as exc:
                corep.error(str(exc))
            if verdict:
                print(f"{args.number} is probably prime.")
            else:
                print(f"{args.number} is not prime.")
                return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())

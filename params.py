"""
Command-line parameter handling for the argon2 tool.

Usage:
    argon2 salt [-i|-d|-id] [-t iterations] [-m log2(memory in KiB) | -k memory in KiB]
                [-p parallelism] [-l hash length] [-e|-r] [-v (10|13)]
"""

import argparse
import enum
import logging
from dataclasses import dataclass

from argon2 import Parameters

from errors import InvalidParameters, UsageError
from hasher import VERSION, Variant, build_parameters, encode_salt

logger = logging.getLogger("argon2cli")

DEFAULT_ITERATIONS = 3
DEFAULT_MEMORY_EXPONENT = 12
DEFAULT_PARALLELISM = 1
DEFAULT_HASH_LEN = 32
SUPPORTED_VERSION = 13
ACCEPTED_VERSIONS = (10, 13)


class OutputMode(enum.Enum):
    FULL = "full"
    ENCODED_ONLY = "encoded"
    RAW_ONLY = "raw"


@dataclass(frozen=True)
class HashConfig:
    salt: str
    salt_b64: str
    variant: Variant
    iterations: int
    memory_kib: int
    parallelism: int
    hash_len: int
    output_mode: OutputMode
    params: Parameters


def normalize_args(argv):
    """Rewrite ``-id`` to ``--id`` so argparse does not read it as ``-i -d``."""
    return ["--id" if arg == "-id" else arg for arg in argv]


class _Parser(argparse.ArgumentParser):
    def error(self, message):
        raise UsageError(message)


def _uint(value):
    # Plain ASCII digits with an optional "+"; int() would also take
    # whitespace, underscores and other Unicode digits.
    digits = value[1:] if value.startswith("+") else value
    if not (digits.isascii() and digits.isdigit()):
        raise argparse.ArgumentTypeError(f"invalid number: {value!r}")
    n = int(digits)
    if n > 0xFFFFFFFF:
        raise argparse.ArgumentTypeError(f"value out of range: {value!r}")
    return n


def build_parser():
    parser = _Parser(prog="argon2", description="Argon2 password hashing tool")
    parser.add_argument("salt", help="The salt to use, at least 8 characters")

    variant = parser.add_mutually_exclusive_group()
    variant.add_argument("-i", "--i", dest="i", action="store_true",
                         help="Use Argon2i (this is the default)")
    variant.add_argument("-d", "--d", dest="d", action="store_true",
                         help="Use Argon2d instead of Argon2i")
    variant.add_argument("--id", action="store_true",
                         help="Use Argon2id instead of Argon2i")

    parser.add_argument("-t", type=_uint, default=DEFAULT_ITERATIONS,
                        metavar="N",
                        help="Sets the number of iterations to N (default = 3)")

    # Defaults are resolved after parsing so argparse sees an explicit
    # "-m 12" as given when checking the group.
    memory = parser.add_mutually_exclusive_group()
    memory.add_argument("-m", type=_uint, metavar="N",
                        help="Sets the memory usage of 2^N KiB (default 12)")
    memory.add_argument("-k", type=_uint, metavar="N",
                        help="Sets the memory usage of N KiB (default 4096)")

    parser.add_argument("-p", type=_uint, default=DEFAULT_PARALLELISM,
                        metavar="N",
                        help="Sets parallelism to N threads (default 1)")
    parser.add_argument("-l", type=_uint, default=DEFAULT_HASH_LEN,
                        metavar="N",
                        help="Sets hash output length to N bytes (default 32)")

    output = parser.add_mutually_exclusive_group()
    output.add_argument("-e", action="store_true",
                        help="Output only encoded hash")
    output.add_argument("-r", action="store_true",
                        help="Output only the raw bytes of the hash")

    parser.add_argument("-v", type=_uint, choices=ACCEPTED_VERSIONS,
                        default=SUPPORTED_VERSION, metavar="N",
                        help="Argon2 version (only 13 is supported)")
    return parser


def memory_kib(args):
    """Effective memory in KiB: -k verbatim, otherwise 2 ** exponent."""
    if args.k is not None:
        return args.k
    exponent = DEFAULT_MEMORY_EXPONENT if args.m is None else args.m
    if exponent >= 32:
        raise InvalidParameters("Invalid parameters: memory cost is too large")
    return 1 << exponent


def parse_config(argv):
    """Turn raw arguments into a validated HashConfig.

    Raises UsageError, InvalidParameters or InvalidSalt; nothing is hashed here.
    """
    args = build_parser().parse_args(normalize_args(argv))

    if args.v != SUPPORTED_VERSION:
        raise UsageError(
            f"Argon2 version {args.v} is not supported, "
            f"only version {SUPPORTED_VERSION} (0x{VERSION:x}) is available"
        )

    if args.d:
        variant = Variant.ARGON2D
    elif args.id:
        variant = Variant.ARGON2ID
    else:
        variant = Variant.ARGON2I

    if args.e:
        mode = OutputMode.ENCODED_ONLY
    elif args.r:
        mode = OutputMode.RAW_ONLY
    else:
        mode = OutputMode.FULL

    memory = memory_kib(args)
    salt_b64 = encode_salt(args.salt)
    params = build_parameters(
        variant,
        time_cost=args.t,
        memory_kib=memory,
        parallelism=args.p,
        hash_len=args.l,
        salt_len=len(args.salt.encode("utf-8")),
    )
    logger.debug("Resolved %s t=%d m=%d KiB p=%d l=%d output=%s",
                 variant.display_name, args.t, memory, args.p, args.l,
                 mode.value)

    return HashConfig(
        salt=args.salt,
        salt_b64=salt_b64,
        variant=variant,
        iterations=args.t,
        memory_kib=memory,
        parallelism=args.p,
        hash_len=args.l,
        output_mode=mode,
        params=params,
    )

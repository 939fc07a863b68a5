"""
Argon2 password hashing tool.

Reads the password from the terminal (prompted) or from standard input
and prints the hash in the same format as the reference argon2 utility.

Usage:
    echo -n password | python hash_password.py somesalt
    echo -n password | python hash_password.py somesalt -id -t 2 -m 16 -p 4 -l 24
    python hash_password.py somesalt -e
"""

import logging
import os
import sys

from errors import Argon2CliError, UsageError
from hasher import Argon2Hasher
from params import OutputMode, build_parser, parse_config
from password_input import read_password
from report import write_result

logger = logging.getLogger("argon2cli")


def _configure_logging():
    level = os.environ.get("ARGON2_LOG_LEVEL", "WARNING").upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.WARNING),
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def run(argv, hasher=None):
    """Parse, read the password, hash and print. Raises Argon2CliError."""
    hasher = hasher or Argon2Hasher()
    config = parse_config(argv)
    password = read_password()
    result = hasher.hash(config.params, config.salt_b64, password)
    if config.output_mode is OutputMode.FULL:
        hasher.verify(config.params, result, password)
    write_result(config, result)


def main(argv=None):
    _configure_logging()
    if argv is None:
        argv = sys.argv[1:]
    try:
        run(argv)
    except UsageError as e:
        parser = build_parser()
        parser.print_usage(sys.stderr)
        print(f"{parser.prog}: error: {e}", file=sys.stderr)
        return e.exit_code
    except Argon2CliError as e:
        logger.debug("Aborting: %r", e)
        print(f"Error: {e}", file=sys.stderr)
        return e.exit_code
    return 0


if __name__ == "__main__":
    sys.exit(main())

"""
Argon2 hashing backend built on argon2-cffi.

The rest of the tool only talks to this module through ``build_parameters``,
``encode_salt`` and ``Argon2Hasher.hash``; swapping the backend means
replacing this file.
"""

import base64
import binascii
import enum
import logging
import time
from dataclasses import dataclass

from argon2 import Parameters, Type
from argon2.exceptions import HashingError as _Argon2HashingError
from argon2.exceptions import VerificationError
from argon2.low_level import ARGON2_VERSION, hash_secret, verify_secret

from errors import HashingError, InvalidParameters, InvalidSalt

logger = logging.getLogger("argon2cli")

# Argon2 version 0x13, the only one this tool hashes with
VERSION = ARGON2_VERSION

MIN_OUTPUT_LEN = 4
MAX_OUTPUT_LEN = 0xFFFFFFFF
MAX_MEMORY_KIB = 0xFFFFFFFF
MAX_PARALLELISM = 0xFFFFFF

# Bounds of the base64 salt field in a PHC string
MIN_SALT_B64_LEN = 4
MAX_SALT_B64_LEN = 64


class Variant(enum.Enum):
    ARGON2I = Type.I
    ARGON2D = Type.D
    ARGON2ID = Type.ID

    @property
    def display_name(self):
        """Name printed on the ``Type:`` line, e.g. ``Argon2id``."""
        return "Argon2" + self.value.name.lower()

    @property
    def ident(self):
        """Algorithm identifier used in encoded hashes, e.g. ``argon2id``."""
        return self.display_name.lower()


@dataclass(frozen=True)
class HashResult:
    raw_digest: bytes
    encoded: str
    elapsed: float


def build_parameters(variant, time_cost, memory_kib, parallelism, hash_len,
                     salt_len):
    """Validate cost parameters and return them as ``argon2.Parameters``.

    Raises InvalidParameters with the reason when a value is out of range
    for Argon2, so nothing reaches the hashing call that it would reject.
    """
    if time_cost < 1:
        reason = "time cost is too small"
    elif parallelism < 1:
        reason = "not enough threads"
    elif parallelism > MAX_PARALLELISM:
        reason = "too many threads"
    elif memory_kib < 8 * parallelism:
        reason = "memory cost is too small"
    elif memory_kib > MAX_MEMORY_KIB:
        reason = "memory cost is too large"
    elif hash_len < MIN_OUTPUT_LEN:
        reason = "output is too short"
    elif hash_len > MAX_OUTPUT_LEN:
        reason = "output is too long"
    else:
        reason = None
    if reason:
        raise InvalidParameters(f"Invalid parameters: {reason}")

    return Parameters(
        type=variant.value,
        version=VERSION,
        salt_len=salt_len,
        hash_len=hash_len,
        time_cost=time_cost,
        memory_cost=memory_kib,
        parallelism=parallelism,
    )


def b64_encode(data):
    """Unpadded standard-alphabet base64, as used inside PHC strings."""
    return base64.b64encode(data).decode("ascii").rstrip("=")


def b64_decode(text):
    padded = text + "=" * (-len(text) % 4)
    return base64.b64decode(padded, validate=True)


def encode_salt(salt):
    """Return the PHC base64 form of the salt given on the command line."""
    try:
        raw = salt.encode("utf-8")
    except UnicodeEncodeError as e:
        raise InvalidSalt(f"Invalid salt: {e}") from e
    encoded = b64_encode(raw)
    if len(encoded) < MIN_SALT_B64_LEN:
        raise InvalidSalt("Invalid salt: salt too short")
    if len(encoded) > MAX_SALT_B64_LEN:
        raise InvalidSalt("Invalid salt: salt too long")
    return encoded


class Argon2Hasher:
    """Computes Argon2 hashes for validated parameters."""

    def hash(self, params, salt_b64, password):
        salt = b64_decode(salt_b64)
        logger.debug(
            "Hashing with %s v=%d t=%d m=%d p=%d l=%d",
            Variant(params.type).display_name, params.version,
            params.time_cost, params.memory_cost, params.parallelism,
            params.hash_len,
        )
        start = time.perf_counter()
        try:
            encoded = hash_secret(
                password,
                salt,
                time_cost=params.time_cost,
                memory_cost=params.memory_cost,
                parallelism=params.parallelism,
                hash_len=params.hash_len,
                type=params.type,
                version=params.version,
            )
        except _Argon2HashingError as e:
            raise HashingError(f"Hashing failed: {e}") from e
        elapsed = time.perf_counter() - start
        logger.debug("Hash computed in %.3f seconds", elapsed)

        encoded = encoded.decode("ascii")
        try:
            raw_digest = b64_decode(encoded.rsplit("$", 1)[1])
        except (IndexError, binascii.Error) as e:
            raise HashingError(f"Hashing failed: malformed output {encoded!r}") from e
        return HashResult(raw_digest=raw_digest, encoded=encoded, elapsed=elapsed)

    def verify(self, params, result, password):
        """Check the encoded hash against the password it was made from."""
        try:
            verify_secret(result.encoded.encode("ascii"), password, params.type)
        except VerificationError as e:
            raise HashingError(f"Verification failed: {e}") from e

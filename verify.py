"""
Differential verification against a reference argon2 binary.

Runs the reference tool and this implementation with the same salt,
password and flags, then compares the reported fields.

Usage:
    python verify.py                     # 20 random trials against `argon2`
    python verify.py -n 50 --seed 1234   # More trials, reproducible
    python verify.py -c verify.json      # Load settings from a config file
"""

import argparse
import json
import logging
import math
import os
import random
import string
import subprocess
import sys

from errors import ExecutionError, MismatchError

logger = logging.getLogger("argon2cli")

_BASE_DIR = os.path.dirname(os.path.abspath(__file__))

_DEFAULT_CONFIG = {
    "reference": ["argon2"],
    "implementation": [sys.executable, os.path.join(_BASE_DIR, "hash_password.py")],
    "trials": 20,
    "seed": None,
    "timeout": None,
    "salt_length": 8,
    "password_length": 12,
}

COMPARED_FIELDS = ("Iterations", "Memory", "Parallelism", "Hash", "Encoded")
VARIANTS = ("i", "d", "id")
BASELINE = (3, 12, 1, "i")

ITERATION_RANGE = (1, 5)
PARALLELISM_RANGE = (1, 4)
MEMORY_EXPONENT_RANGE = (6, 12)

_ALPHABET = string.ascii_letters + string.digits


def load_config(config_path=None):
    """Load a JSON config file over the built-in defaults."""
    config = dict(_DEFAULT_CONFIG)
    if config_path:
        with open(config_path, "r", encoding="utf-8") as f:
            config.update(json.load(f))
    for key in ("reference", "implementation"):
        if isinstance(config[key], str):
            config[key] = [config[key]]
    return config


def random_string(length, rng):
    return "".join(rng.choice(_ALPHABET) for _ in range(length))


def build_args(iterations, memory_exponent, parallelism, variant):
    args = []
    if variant:
        args.append(f"-{variant}")
    args += ["-t", str(iterations), "-m", str(memory_exponent),
             "-p", str(parallelism)]
    return args


def random_trial(rng):
    """Draw (iterations, memory exponent, parallelism, variant).

    Only tuples with 2**m >= 8 * p are produced, so every trial is one the
    reference accepts.
    """
    iterations = rng.randint(*ITERATION_RANGE)
    parallelism = rng.randint(*PARALLELISM_RANGE)
    min_exp = max(MEMORY_EXPONENT_RANGE[0], math.ceil(math.log2(8 * parallelism)))
    memory_exponent = rng.randint(min_exp, MEMORY_EXPONENT_RANGE[1])
    variant = rng.choice(VARIANTS)
    return iterations, memory_exponent, parallelism, variant


def run_binary(command, salt, password, args, timeout=None):
    """Run one binary with the password piped on stdin and return its stdout."""
    cmd = list(command) + [salt] + list(args)
    try:
        r = subprocess.run(cmd, input=password.encode("utf-8"),
                           capture_output=True, timeout=timeout)
    except OSError as e:
        raise ExecutionError(f"Failed to spawn {command[0]}: {e}") from e
    except subprocess.TimeoutExpired as e:
        raise ExecutionError(f"{command[0]} timed out after {timeout} seconds") from e
    if r.returncode != 0:
        err = r.stderr.decode(errors="replace").strip()
        raise ExecutionError(
            f"{command[0]} exited with status {r.returncode}: {err}"
        )
    return r.stdout.decode(errors="replace")


def parse_report(output):
    """Map each ``Label: value`` line of a full report to its trimmed value."""
    data = {}
    for line in output.splitlines():
        if ":" in line:
            key, value = line.split(":", 1)
            data[key.strip()] = value.strip()
    return data


def compare_reports(reference, actual, fields=COMPARED_FIELDS):
    """Return (field, reference value, actual value) for every difference.

    Fields the reference did not print are not compared.
    """
    mismatches = []
    for key in fields:
        if key not in reference:
            continue
        if reference[key] != actual.get(key):
            mismatches.append((key, reference[key], actual.get(key)))
    return mismatches


def verify_trial(config, trial, rng):
    iterations, memory_exponent, parallelism, variant = trial
    salt = random_string(config["salt_length"], rng)
    password = random_string(config["password_length"], rng)
    args = build_args(iterations, memory_exponent, parallelism, variant)

    try:
        ref_out = run_binary(config["reference"], salt, password, args,
                             config["timeout"])
        impl_out = run_binary(config["implementation"], salt, password, args,
                              config["timeout"])
    except ExecutionError as e:
        raise ExecutionError(
            f"{e} (t={iterations}, m={memory_exponent}, p={parallelism}, "
            f"var={variant})"
        ) from e

    mismatches = compare_reports(parse_report(ref_out), parse_report(impl_out))
    if mismatches:
        details = "\n".join(
            f"  {key}:\n    reference:      {ref!r}\n    implementation: {act!r}"
            for key, ref, act in mismatches
        )
        raise MismatchError(
            f"Mismatch for t={iterations}, m={memory_exponent}, "
            f"p={parallelism}, var={variant} "
            f"(salt={salt!r}, password={password!r}):\n{details}",
            trial=trial,
            mismatches=mismatches,
        )
    logger.info("OK t=%d m=%d p=%d var=%s", iterations, memory_exponent,
                parallelism, variant)


def run_suite(config):
    """Run the baseline trial plus config["trials"] random ones.

    Stops at the first failure by raising ExecutionError or MismatchError.
    Returns the number of trials that matched.
    """
    rng = random.Random(config["seed"])
    verify_trial(config, BASELINE, rng)
    for _ in range(config["trials"]):
        verify_trial(config, random_trial(rng), rng)
    return config["trials"] + 1


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Compare this argon2 implementation with a reference binary"
    )
    parser.add_argument("-c", "--config", help="Path to JSON config file")
    parser.add_argument("-n", "--trials", type=int,
                        help="Number of random trials (default: 20)")
    parser.add_argument("--seed", type=int, help="Random seed")
    parser.add_argument("--reference", help="Reference argon2 binary")
    parser.add_argument("--timeout", type=float,
                        help="Seconds to wait for each binary")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    try:
        config = load_config(args.config)
    except (OSError, ValueError) as e:
        logger.error("Cannot load config %s: %s", args.config, e)
        return 2
    if args.trials is not None:
        config["trials"] = args.trials
    if args.seed is not None:
        config["seed"] = args.seed
    if args.reference:
        config["reference"] = [args.reference]
    if args.timeout is not None:
        config["timeout"] = args.timeout

    try:
        passed = run_suite(config)
    except ExecutionError as e:
        logger.error("Execution error: %s", e)
        return e.exit_code
    except MismatchError as e:
        logger.error("%s", e)
        return e.exit_code
    logger.info("All %d trials matched.", passed)
    return 0


if __name__ == "__main__":
    sys.exit(main())

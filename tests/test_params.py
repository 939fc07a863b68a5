"""Tests for argument normalization and parameter parsing."""

import pytest
from argon2 import Type

from errors import InvalidParameters, InvalidSalt, UsageError
from hasher import Variant
from params import OutputMode, build_parser, normalize_args, parse_config


class TestNormalizeArgs:
    def test_rewrites_id(self):
        assert normalize_args(["salt", "-id", "-t", "2"]) == ["salt", "--id", "-t", "2"]

    def test_other_tokens_unchanged(self):
        argv = ["salt", "-i", "-d", "--id", "-idx", "id", "-t", "-id5"]
        assert normalize_args(argv) == argv

    def test_empty(self):
        assert normalize_args([]) == []


class TestParseConfigDefaults:
    def test_defaults(self):
        config = parse_config(["somesalt"])
        assert config.variant is Variant.ARGON2I
        assert config.iterations == 3
        assert config.memory_kib == 4096
        assert config.parallelism == 1
        assert config.hash_len == 32
        assert config.output_mode is OutputMode.FULL
        assert config.salt == "somesalt"
        assert config.salt_b64 == "c29tZXNhbHQ"

    def test_params_match_config(self):
        config = parse_config(["somesalt", "-d", "-t", "4", "-m", "10", "-p", "2", "-l", "16"])
        assert config.params.type is Type.D
        assert config.params.time_cost == 4
        assert config.params.memory_cost == 1024
        assert config.params.parallelism == 2
        assert config.params.hash_len == 16
        assert config.params.salt_len == 8


class TestVariantSelection:
    @pytest.mark.parametrize("flag,variant", [
        ("-i", Variant.ARGON2I),
        ("-d", Variant.ARGON2D),
        ("--i", Variant.ARGON2I),
        ("--d", Variant.ARGON2D),
        ("--id", Variant.ARGON2ID),
        ("-id", Variant.ARGON2ID),
    ])
    def test_flags(self, flag, variant):
        assert parse_config(["somesalt", flag]).variant is variant

    def test_flag_before_salt(self):
        assert parse_config(["-id", "somesalt"]).variant is Variant.ARGON2ID

    @pytest.mark.parametrize("flags", [
        ["-i", "-d"],
        ["-d", "--id"],
        ["-i", "-id"],
        ["--d", "-i"],
        ["--i", "--id"],
    ])
    def test_conflicting_variants(self, flags):
        with pytest.raises(UsageError, match="not allowed with argument"):
            parse_config(["somesalt"] + flags)

    def test_unnormalized_cluster_is_conflict(self):
        with pytest.raises(UsageError):
            build_parser().parse_args(["somesalt", "-id"])


class TestMemorySelection:
    def test_exponent(self):
        assert parse_config(["somesalt", "-m", "16"]).memory_kib == 65536

    def test_kib(self):
        assert parse_config(["somesalt", "-k", "1000"]).memory_kib == 1000

    def test_both_rejected(self):
        with pytest.raises(UsageError, match="not allowed with argument"):
            parse_config(["somesalt", "-m", "12", "-k", "4096"])

    def test_explicit_default_exponent_still_conflicts(self):
        with pytest.raises(UsageError):
            parse_config(["somesalt", "-k", "64", "-m", "12"])

    def test_huge_exponent(self):
        with pytest.raises(InvalidParameters, match="too large"):
            parse_config(["somesalt", "-m", "40"])


class TestOutputMode:
    def test_encoded(self):
        assert parse_config(["somesalt", "-e"]).output_mode is OutputMode.ENCODED_ONLY

    def test_raw(self):
        assert parse_config(["somesalt", "-r"]).output_mode is OutputMode.RAW_ONLY

    def test_both_rejected(self):
        with pytest.raises(UsageError, match="not allowed with argument"):
            parse_config(["somesalt", "-e", "-r"])


class TestVersion:
    def test_default_and_explicit_13(self):
        assert parse_config(["somesalt", "-v", "13"]).params.version == 19

    def test_version_10_rejected(self):
        with pytest.raises(UsageError, match="version 10 is not supported"):
            parse_config(["somesalt", "-v", "10"])

    def test_unknown_version(self):
        with pytest.raises(UsageError, match="invalid choice"):
            parse_config(["somesalt", "-v", "12"])


class TestUsageErrors:
    def test_missing_salt(self):
        with pytest.raises(UsageError, match="salt"):
            parse_config([])

    def test_non_numeric(self):
        with pytest.raises(UsageError, match="invalid number"):
            parse_config(["somesalt", "-t", "three"])

    def test_negative(self):
        with pytest.raises(UsageError):
            parse_config(["somesalt", "-p", "-1"])

    @pytest.mark.parametrize("value", ["1_0", " 5", "5 ", "0x10", "\u0663", ""])
    def test_malformed_numbers(self, value):
        with pytest.raises(UsageError, match="invalid number"):
            parse_config(["somesalt", "-t", value])

    def test_plus_sign_accepted(self):
        assert parse_config(["somesalt", "-t", "+5"]).iterations == 5

    def test_value_out_of_range(self):
        with pytest.raises(UsageError, match="out of range"):
            parse_config(["somesalt", "-l", "4294967296"])

    def test_unknown_flag(self):
        with pytest.raises(UsageError):
            parse_config(["somesalt", "-x"])

    def test_usage_error_exit_code(self):
        assert UsageError("x").exit_code == 2


class TestValidation:
    def test_memory_too_low_for_parallelism(self):
        with pytest.raises(InvalidParameters, match="memory cost is too small"):
            parse_config(["somesalt", "-k", "16", "-p", "4"])

    def test_minimum_memory_accepted(self):
        assert parse_config(["somesalt", "-k", "32", "-p", "4"]).memory_kib == 32

    def test_zero_iterations(self):
        with pytest.raises(InvalidParameters):
            parse_config(["somesalt", "-t", "0"])

    def test_output_length_too_short(self):
        with pytest.raises(InvalidParameters, match="output is too short"):
            parse_config(["somesalt", "-l", "2"])

    def test_short_salt(self):
        with pytest.raises(InvalidSalt):
            parse_config(["ab"])

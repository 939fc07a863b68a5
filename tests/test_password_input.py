"""Tests for reading the password from a terminal or a pipe."""

import io

import pytest
from unittest.mock import patch

from errors import InputError
from password_input import PROMPT, join_lines, read_password


class _Tty(io.StringIO):
    def isatty(self):
        return True


class _Broken(io.StringIO):
    def read(self, *args):
        raise OSError("Input/output error")


class TestJoinLines:
    def test_single_line(self):
        assert join_lines("password") == "password"

    def test_trailing_newline_ignored(self):
        assert join_lines("password\n") == join_lines("password")

    def test_crlf(self):
        assert join_lines("pass\r\nword\r\n") == "pass\nword"

    def test_unterminated_carriage_return_kept(self):
        assert join_lines("password\r") == "password\r"
        assert join_lines("pass\r\nword\r") == "pass\nword\r"

    def test_multiline_kept_as_one_password(self):
        assert join_lines("a\nb\nc") == "a\nb\nc"

    def test_blank_lines_kept(self):
        assert join_lines("a\n\nb\n\n") == "a\n\nb\n"

    def test_empty(self):
        assert join_lines("") == ""

    def test_spaces_preserved(self):
        assert join_lines("  pw  \n") == "  pw  "


class TestReadPassword:
    def test_piped(self):
        assert read_password(io.StringIO("password\n")) == b"password"

    def test_piped_utf8(self):
        assert read_password(io.StringIO("pässword")) == "pässword".encode("utf-8")

    def test_defaults_to_stdin(self, monkeypatch):
        monkeypatch.setattr("sys.stdin", io.StringIO("from-stdin"))
        assert read_password() == b"from-stdin"

    def test_terminal_prompts_and_strips(self):
        with patch("password_input.getpass.getpass", return_value="  secret \n") as gp:
            assert read_password(_Tty()) == b"secret"
        gp.assert_called_once_with(PROMPT)

    def test_piped_bytes_keep_lone_carriage_return(self):
        stream = io.TextIOWrapper(io.BytesIO(b"password\r"), encoding="utf-8")
        assert read_password(stream) == b"password\r"

    def test_piped_bytes_crlf(self):
        stream = io.TextIOWrapper(io.BytesIO(b"pass\r\nword\r\n"), encoding="utf-8")
        assert read_password(stream) == b"pass\nword"

    def test_read_error(self):
        with pytest.raises(InputError, match="Error reading input"):
            read_password(_Broken())

    def test_decode_error(self):
        stream = io.TextIOWrapper(io.BytesIO(b"\xff\xfe\xfa"), encoding="utf-8")
        with pytest.raises(InputError):
            read_password(stream)

    def test_terminal_eof(self):
        with patch("password_input.getpass.getpass", side_effect=EOFError):
            with pytest.raises(InputError):
                read_password(_Tty())

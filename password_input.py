"""Password acquisition from a terminal prompt or piped standard input."""

import getpass
import sys

from errors import InputError

PROMPT = "Enter password: "


def join_lines(text):
    """Split text into lines and rejoin them with single newlines.

    A trailing newline does not produce an empty last line and a ``\\r``
    directly before a newline is dropped, so CRLF and LF input hash the same.
    A ``\\r`` at the very end of unterminated input is kept.
    """
    lines = text.split("\n")
    last = lines.pop()
    lines = [line[:-1] if line.endswith("\r") else line for line in lines]
    if last:
        lines.append(last)
    return "\n".join(lines)


def read_password(stream=None):
    """Read the password once and return it as bytes."""
    stream = stream if stream is not None else sys.stdin
    try:
        if stream.isatty():
            # getpass flushes the prompt and does not echo the input
            password = getpass.getpass(PROMPT).strip()
        else:
            # Raw bytes: universal-newline translation would turn a lone "\r"
            # into a line break.
            buffer = getattr(stream, "buffer", None)
            text = buffer.read().decode("utf-8") if buffer is not None else stream.read()
            password = join_lines(text)
    except (OSError, UnicodeDecodeError, EOFError) as e:
        raise InputError(f"Error reading input: {e}") from e
    return password.encode("utf-8", "surrogateescape")

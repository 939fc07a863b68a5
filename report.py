"""Rendering of hash results in full, encoded-only and raw form."""

import sys

from params import OutputMode

# Label column width shared with the reference tool's report
_LABEL_WIDTH = 16


def _line(label, value):
    return f"{label + ':':<{_LABEL_WIDTH}}{value}"


def full_report(config, result):
    """Return the full report as a list of lines, without newlines."""
    return [
        _line("Type", config.variant.display_name),
        _line("Iterations", config.iterations),
        _line("Memory", f"{config.memory_kib} KiB"),
        _line("Parallelism", config.parallelism),
        _line("Hash", result.raw_digest.hex()),
        _line("Encoded", result.encoded),
        f"{result.elapsed:.3f} seconds",
        "Verification ok",
    ]


def write_result(config, result, out=None):
    out = out if out is not None else sys.stdout
    if config.output_mode is OutputMode.ENCODED_ONLY:
        out.write(result.encoded + "\n")
    elif config.output_mode is OutputMode.RAW_ONLY:
        out.flush()
        out.buffer.write(result.raw_digest)
        out.buffer.flush()
        return
    else:
        for line in full_report(config, result):
            out.write(line + "\n")
    out.flush()

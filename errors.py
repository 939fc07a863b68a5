"""Error types for the argon2 command-line tool and its verification harness."""


class Argon2CliError(Exception):
    """Base class for every failure the tool reports to the user."""

    exit_code = 1


class UsageError(Argon2CliError):
    """Conflicting or malformed command-line flags."""

    exit_code = 2


class InvalidParameters(Argon2CliError):
    """Cost parameters rejected by the hashing backend."""


class InvalidSalt(Argon2CliError):
    """Salt cannot be turned into a PHC salt string."""


class InputError(Argon2CliError):
    """Password could not be read from standard input."""


class HashingError(Argon2CliError):
    """Hash computation or its verification failed."""


class ExecutionError(Argon2CliError):
    """A binary under comparison failed to run or exited non-zero."""

    exit_code = 2


class MismatchError(Argon2CliError):
    """Both binaries ran but reported different values."""

    def __init__(self, message, trial=None, mismatches=None):
        super().__init__(message)
        self.trial = trial
        self.mismatches = mismatches or []

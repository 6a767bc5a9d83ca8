"""ignotree — hierarchical .gitignore resolution for directory tree walkers."""

__version__ = "0.1.0"


class IgnotreeError(Exception):
    """User-facing CLI error.

    Raised for invalid arguments, missing directories, and other
    recoverable input errors. The message is printed to stderr
    and the process exits with code 1.
    """

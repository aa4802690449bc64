"""Exception hierarchy for secure-random.

All exceptions derive from SecureRandomError, enabling broad catch patterns
at the application boundary while allowing fine-grained handling internally.
"""


class SecureRandomError(Exception):
    """Base exception for all secure-random errors."""


class ResourceExhaustedError(SecureRandomError):
    """The OS entropy source could not be created or read.

    Raised when a thread's entropy source cannot be allocated (e.g. the
    device cannot be opened) or a read from it fails. Never retried and
    never replaced by a different source.
    """


class InvalidRangeError(SecureRandomError, ValueError):
    """A sampling request was outside the accepted domain.

    Raised for ``low > high``, negative operands, operands that do not fit
    the requested unsigned width, a jitter ratio outside ``0..255`` or a
    negative expiration.
    """


class ConfigValidationError(SecureRandomError):
    """Configuration field validation failed.

    Raised when overrides contain unknown keys, when ``log_level`` is not
    one of the known levels, or when ``entropy_source_type`` names no
    registered source.
    """

"""secure-random: per-thread, OS-backed secure random numbers.

Unbiased random bytes, bounded integers and jittered timer durations for
protocol and cryptographic code. Each thread draws from its own entropy
source, created on first use and closed when the thread exits.
"""

from __future__ import annotations

try:
    from importlib.metadata import PackageNotFoundError, version

    __version__ = version("secure-random")
except PackageNotFoundError:
    __version__ = "0.0.0"

from secure_random.config import SecureRandomConfig, resolve_config, validate_overrides
from secure_random.exceptions import (
    ConfigValidationError,
    InvalidRangeError,
    ResourceExhaustedError,
    SecureRandomError,
)
from secure_random.jitter import randomized_duration
from secure_random.manager import (
    EntropySourceManager,
    acquire_for_current_thread,
    get_default_manager,
)
from secure_random.sampler import (
    Sampler,
    fill_random_bytes,
    get_default_sampler,
    random_byte,
    random_bytes,
    random_in_range,
)

__all__ = [
    "ConfigValidationError",
    "EntropySourceManager",
    "InvalidRangeError",
    "ResourceExhaustedError",
    "Sampler",
    "SecureRandomConfig",
    "SecureRandomError",
    "__version__",
    "acquire_for_current_thread",
    "fill_random_bytes",
    "get_default_manager",
    "get_default_sampler",
    "random_byte",
    "random_bytes",
    "random_in_range",
    "randomized_duration",
    "resolve_config",
    "validate_overrides",
]

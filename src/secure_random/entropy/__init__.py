"""Entropy source subsystem for secure-random.

Re-exports the ABC, registry, and all built-in source implementations
for convenient access::

    from secure_random.entropy import EntropySource, EntropySourceRegistry
    from secure_random.entropy import SystemEntropySource, DeviceEntropySource
"""

from secure_random.entropy.base import EntropySource
from secure_random.entropy.device import DeviceEntropySource
from secure_random.entropy.registry import EntropySourceRegistry, register_entropy_source
from secure_random.entropy.system import SystemEntropySource

__all__ = [
    "DeviceEntropySource",
    "EntropySource",
    "EntropySourceRegistry",
    "SystemEntropySource",
    "register_entropy_source",
]

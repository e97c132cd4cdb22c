"""
Kernel - shared infrastructure for identifier-space enumeration

Errors, time handling, structured logging and metrics used by the generator
and the CLI.
"""

from oid_space.kernel.errors import (
    GenerationTooLarge,
    InvalidIdentifier,
    ItemCountTooLarge,
    MachineCountTooLarge,
    OidSpaceError,
    ValidationError,
)
from oid_space.kernel.time import RealTimeProvider, TestTimeProvider, TimeProvider

__all__ = [
    # Time
    "TimeProvider",
    "RealTimeProvider",
    "TestTimeProvider",
    # Errors
    "OidSpaceError",
    "ValidationError",
    "MachineCountTooLarge",
    "ItemCountTooLarge",
    "GenerationTooLarge",
    "InvalidIdentifier",
]

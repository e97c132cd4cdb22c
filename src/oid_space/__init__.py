"""
oid-space - deterministic enumeration of ObjectId identifier spaces

Produces every 12-byte identifier a fleet of machines, processes and
per-process counters could emit at one timestamp, for collision testing,
lookup-table seeding and auditing.

Fun fact: the 4-byte timestamp of an ObjectId counts seconds since 1970 and
wraps around in February 2106.
"""

from oid_space.generator import (
    GenerationConfig,
    decode,
    encode,
    generate,
    new_generator,
    stream,
)

__version__ = "0.1.0"
__all__ = [
    "GenerationConfig",
    "new_generator",
    "generate",
    "stream",
    "encode",
    "decode",
    "__version__",
]

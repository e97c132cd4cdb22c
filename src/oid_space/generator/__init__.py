"""
Generator - enumerate every ObjectId reachable from bounded parameters

A GenerationConfig fixes one timestamp and three ranges (machines, processes
per machine, counters per process); the generator produces their full
cross product encoded to the 12-byte ObjectId layout.
"""

from oid_space.generator.encoding import IdentifierFields, decode, encode
from oid_space.generator.enumeration import (
    END_OF_STREAM,
    IdentifierStream,
    drain,
    generate,
    iter_identifiers,
    send_to_queue,
    stream,
)
from oid_space.generator.models import GenerationConfig, new_generator, validate
from oid_space.generator.summary import SpaceSummary, summarize

__all__ = [
    # Config
    "GenerationConfig",
    "new_generator",
    "validate",
    # Encoding
    "IdentifierFields",
    "encode",
    "decode",
    # Enumeration
    "generate",
    "iter_identifiers",
    "stream",
    "send_to_queue",
    "drain",
    "IdentifierStream",
    "END_OF_STREAM",
    # Auditing
    "SpaceSummary",
    "summarize",
]

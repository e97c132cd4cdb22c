"""
ObjectId byte layout - packing and unpacking the four identifier fields

    bytes 0-3   timestamp   Unix seconds, big-endian, low 32 bits
    bytes 4-6   machine     low 24 bits
    bytes 7-8   process     low 16 bits
    bytes 9-11  counter     low 24 bits

This layout is the one bit-exact contract other tooling relies on: any
ObjectId-aware system parsing these 12 bytes sees exactly these fields.
"""

import struct
from datetime import datetime, timezone
from typing import NamedTuple

from bson import ObjectId

from oid_space.kernel.errors import InvalidIdentifier
from oid_space.kernel.time import to_unix_seconds

IDENTIFIER_SIZE = 12

TIMESTAMP_MASK = 0xFFFFFFFF
MACHINE_MASK = 0xFFFFFF
PROCESS_MASK = 0xFFFF
COUNTER_MASK = 0xFFFFFF

_LAYOUT = struct.Struct(">I3sH3s")


class IdentifierFields(NamedTuple):
    """Decoded fields of one identifier"""

    timestamp: int
    machine: int
    process: int
    counter: int

    @property
    def time(self) -> datetime:
        """Timestamp field as an aware UTC datetime"""
        return datetime.fromtimestamp(self.timestamp, tz=timezone.utc)


def pack(timestamp: int, machine: int, process: int, counter: int) -> bytes:
    """
    Pack already-integral field values into 12 raw bytes

    Higher bits than each field can hold are dropped.
    """
    return _LAYOUT.pack(
        timestamp & TIMESTAMP_MASK,
        (machine & MACHINE_MASK).to_bytes(3, "big"),
        process & PROCESS_MASK,
        (counter & COUNTER_MASK).to_bytes(3, "big"),
    )


def encode(
    timestamp: datetime | int, machine: int, process: int, counter: int
) -> ObjectId:
    """
    Build an identifier from the primitives that seed its state

    No validation is done here: out-of-range values are silently truncated
    to their field width, so encode(t, 1 << 24, 0, 0) == encode(t, 0, 0, 0).

    Args:
        timestamp: datetime (sub-seconds dropped) or Unix seconds
        machine: Machine index, low 24 bits kept
        process: Process index, low 16 bits kept
        counter: Counter value, low 24 bits kept

    Returns:
        ObjectId wrapping the 12 packed bytes
    """
    seconds = to_unix_seconds(timestamp) if isinstance(timestamp, datetime) else timestamp
    return ObjectId(pack(seconds, machine, process, counter))


def _raw_bytes(value: ObjectId | bytes | str) -> bytes:
    if isinstance(value, ObjectId):
        return value.binary
    if isinstance(value, (bytes, bytearray)):
        raw = bytes(value)
    elif isinstance(value, str):
        # fromhex skips whitespace
        if len(value) != 2 * IDENTIFIER_SIZE:
            raise InvalidIdentifier(value)
        try:
            raw = bytes.fromhex(value)
        except ValueError as e:
            raise InvalidIdentifier(value) from e
    else:
        raise InvalidIdentifier(value)
    if len(raw) != IDENTIFIER_SIZE:
        raise InvalidIdentifier(value)
    return raw


def decode(value: ObjectId | bytes | str) -> IdentifierFields:
    """
    Split an identifier back into its four fields

    Args:
        value: ObjectId, 12 raw bytes, or 24 hex characters

    Raises:
        InvalidIdentifier: value is not exactly 12 bytes
    """
    timestamp, machine, process, counter = _LAYOUT.unpack(_raw_bytes(value))
    return IdentifierFields(
        timestamp=timestamp,
        machine=int.from_bytes(machine, "big"),
        process=process,
        counter=int.from_bytes(counter, "big"),
    )

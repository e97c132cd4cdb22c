"""
Space summary - how many distinct values each field takes in a set of identifiers

Used to audit a produced space: a run of (m, p, n) over one timestamp should
show m machines, p processes, n counters and exactly one timestamp.
"""

from collections.abc import Iterable

from bson import ObjectId
from pydantic import BaseModel

from oid_space.generator.encoding import decode


class SpaceSummary(BaseModel):
    """Totals and distinct-value counts per identifier field"""

    total: int = 0
    timestamps: int = 0
    machines: int = 0
    processes: int = 0
    counters: int = 0

    model_config = {"frozen": True}


def summarize(identifiers: Iterable[ObjectId | bytes | str]) -> SpaceSummary:
    """Consume identifiers and count distinct values per field"""
    total = 0
    timestamps: set[int] = set()
    machines: set[int] = set()
    processes: set[int] = set()
    counters: set[int] = set()

    for oid in identifiers:
        fields = decode(oid)
        total += 1
        timestamps.add(fields.timestamp)
        machines.add(fields.machine)
        processes.add(fields.process)
        counters.add(fields.counter)

    return SpaceSummary(
        total=total,
        timestamps=len(timestamps),
        machines=len(machines),
        processes=len(processes),
        counters=len(counters),
    )

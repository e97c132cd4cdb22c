"""
Generator Invariants - bounds a config must respect before enumeration

Pure functions, no side effects. They run before the first identifier is
built, so an invalid config never yields a partial enumeration.

Fun fact: 2^24 machines x 2^16 processes x 2^24 counters is 2^64 identifiers,
exactly the number of values a 64-bit unsigned integer can hold.
"""

from oid_space.kernel.errors import (
    MAX_ITEMS_PER_PROCESS,
    MAX_MACHINES,
    ItemCountTooLarge,
    MachineCountTooLarge,
)


def validate_machine_count(machine_count: int) -> None:
    """
    Machine indexes 0..machine_count-1 must fit in 3 bytes

    Raises:
        MachineCountTooLarge: If machine_count exceeds 2^24
    """
    if machine_count > MAX_MACHINES:
        raise MachineCountTooLarge(machine_count)


def validate_item_count(item_count: int) -> None:
    """
    Counter values 0..item_count-1 must fit in 3 bytes

    Raises:
        ItemCountTooLarge: If item_count exceeds 2^24
    """
    if item_count > MAX_ITEMS_PER_PROCESS:
        raise ItemCountTooLarge(item_count)


def validate_bounds(machine_count: int, item_count: int) -> None:
    """Check every bound; machine count first, so it wins when both fail"""
    validate_machine_count(machine_count)
    validate_item_count(item_count)

"""
Custom exceptions for oid-space

Every failure in this package is a deterministic function of its input:
a configuration outside the identifier layout, a batch larger than the caller
allowed, or bytes that are not an identifier. Nothing here is transient, so
nothing is retried.

Fun fact: The 12-byte ObjectId layout leaves only 3 bytes for the counter,
so a single process can mint at most 16,777,216 ids per second before wrapping.
"""

MAX_MACHINES = 1 << 24
MAX_ITEMS_PER_PROCESS = 1 << 24


class OidSpaceError(Exception):
    """Base exception for all oid-space errors"""

    pass


class ValidationError(OidSpaceError):
    """
    Base class for generation configs that can never be enumerated

    Raised before any identifier is produced. The caller must build a new
    config with smaller bounds.
    """

    pass


class MachineCountTooLarge(ValidationError):
    """Raised when the machine range does not fit the 3-byte machine field"""

    def __init__(self, machine_count: int, limit: int = MAX_MACHINES) -> None:
        self.machine_count = machine_count
        self.limit = limit
        super().__init__(
            f"Can only manage up to {limit} unique machines (got {machine_count})"
        )


class ItemCountTooLarge(ValidationError):
    """Raised when the per-process counter range does not fit the 3-byte counter field"""

    def __init__(self, item_count: int, limit: int = MAX_ITEMS_PER_PROCESS) -> None:
        self.item_count = item_count
        self.limit = limit
        super().__init__(
            f"Can only manage up to {limit} items per process (got {item_count})"
        )


class GenerationTooLarge(OidSpaceError):
    """
    Raised when a batch request exceeds the caller-supplied size guard

    Only batch generation materializes the whole space; streaming callers
    never see this error.
    """

    def __init__(self, count: int, max_count: int) -> None:
        self.count = count
        self.max_count = max_count
        super().__init__(
            f"Config would materialize {count} identifiers, above the limit of {max_count}"
        )


class InvalidIdentifier(OidSpaceError):
    """Raised when a value cannot be decoded as a 12-byte identifier"""

    def __init__(self, value: object) -> None:
        self.value = value
        super().__init__(f"{value!r} is not a 12-byte identifier")

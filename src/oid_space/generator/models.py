"""
Generator Domain Models - the parameters of one enumeration run

A GenerationConfig fixes the timestamp shared by every identifier of a run
and the three ranges that are crossed to build the identifier space.
"""

from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from oid_space.generator.invariants import validate_bounds
from oid_space.kernel.errors import ValidationError
from oid_space.kernel.time import to_unix_seconds, truncate_to_seconds


class GenerationConfig(BaseModel):
    """
    Bounded parameters for enumerating an identifier space

    The model itself only enforces type widths (non-negative counts,
    process count within its 2-byte field). The layout bounds on machine
    and item counts are checked by validate_bounds(), so an out-of-range
    config can still be built and inspected.

    Attributes:
        timestamp: UTC time shared by all identifiers, truncated to seconds
        machine_count: Distinct machine indexes to enumerate
        process_count: Distinct process indexes per machine
        item_count: Distinct counter values per process
    """

    timestamp: datetime
    machine_count: int = Field(ge=0, description="Machine indexes; valid up to 2^24")
    process_count: int = Field(ge=0, lt=1 << 16, description="Process indexes per machine")
    item_count: int = Field(ge=0, description="Counter values per process; valid up to 2^24")

    model_config = {
        "frozen": True,
        "json_schema_extra": {
            "examples": [
                {
                    "timestamp": "2009-11-10T23:00:00Z",
                    "machine_count": 4,
                    "process_count": 4,
                    "item_count": 10,
                }
            ]
        },
    }

    @field_validator("timestamp")
    @classmethod
    def truncate_timestamp(cls, v: datetime) -> datetime:
        return truncate_to_seconds(v)

    @classmethod
    def create(
        cls,
        timestamp: datetime,
        machine_count: int,
        process_count: int,
        item_count: int,
    ) -> "GenerationConfig":
        """Build a config and raise ValidationError if it cannot be enumerated"""
        config = cls(
            timestamp=timestamp,
            machine_count=machine_count,
            process_count=process_count,
            item_count=item_count,
        )
        config.validate_bounds()
        return config

    def validate_bounds(self) -> None:
        """
        Raises:
            MachineCountTooLarge: machine_count > 2^24 (checked first)
            ItemCountTooLarge: item_count > 2^24
        """
        validate_bounds(self.machine_count, self.item_count)

    @property
    def is_valid(self) -> bool:
        try:
            self.validate_bounds()
        except ValidationError:
            return False
        return True

    def count(self) -> int:
        """Number of identifiers this config produces (exact, may reach ~2^64)"""
        return self.machine_count * self.process_count * self.item_count

    @property
    def unix_seconds(self) -> int:
        return to_unix_seconds(self.timestamp)


def new_generator(
    timestamp: datetime,
    machine_count: int,
    process_count: int,
    item_count: int,
) -> tuple[GenerationConfig, ValidationError | None]:
    """
    Build a config and validate it without raising

    The config is returned even when invalid so callers can inspect it;
    they must check the error before enumerating.

    Example:
        >>> config, err = new_generator(t, 4, 4, 10)
        >>> if err is None:
        ...     ids = generate(config)
    """
    config = GenerationConfig(
        timestamp=timestamp,
        machine_count=machine_count,
        process_count=process_count,
        item_count=item_count,
    )
    try:
        config.validate_bounds()
    except ValidationError as e:
        return config, e
    return config, None


def validate(config: GenerationConfig) -> None:
    """Module-level form of GenerationConfig.validate_bounds()"""
    config.validate_bounds()

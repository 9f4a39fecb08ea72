from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from edid.core.exceptions import ConfigError, EdidError
from edid.utils.base58 import BASE

# 7 base58 digits of milliseconds only reach December 2039.
MIN_TIME_LEN = 7


class CodecConfig(BaseModel):
    """Immutable field layout and limits of a codec.

    Args:
        time_len (int): Length of the time part in base58 digits.
        shard_len (int): Length of the shard part in base58 digits.
        counter_len (int): Length of the counter part in base58 digits.
        shard_count (int): Number of allowed shards. Values below 1 resolve to
            ``58 ** shard_len``.
        max_counter (int): Largest counter value. Values below 1 resolve to
            ``58 ** counter_len - 1``.
        epoch (int): Milliseconds subtracted from every encoded time.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    time_len: int = Field(8, description="Length of time part in base58 digits")
    shard_len: int = Field(3, description="Length of shard part in base58 digits")
    counter_len: int = Field(2, description="Length of counter part in base58 digits")
    shard_count: int = Field(4000, description="Total number of shards")
    max_counter: int = Field(999, description="Max value of the loopback counter")
    epoch: int = Field(0, description="Custom epoch in milliseconds")

    @field_validator("time_len")
    @classmethod
    def check_time_len(cls, value: int) -> int:
        if value < MIN_TIME_LEN:
            raise ConfigError(
                f"Invalid length: time_len must be at least {MIN_TIME_LEN}, got {value}"
            )
        return value

    @field_validator("shard_len", "counter_len")
    @classmethod
    def check_part_len(cls, value: int, info: ValidationInfo) -> int:
        if value < 1:
            raise ConfigError(
                f"Invalid length: {info.field_name} must be at least 1, got {value}"
            )
        return value

    @field_validator("shard_count")
    @classmethod
    def resolve_shard_count(cls, value: int, info: ValidationInfo) -> int:
        shard_len = info.data.get("shard_len")
        if shard_len is None:
            return value
        return _check_limit("shard_count", value, BASE**shard_len)

    @field_validator("max_counter")
    @classmethod
    def resolve_max_counter(cls, value: int, info: ValidationInfo) -> int:
        counter_len = info.data.get("counter_len")
        if counter_len is None:
            return value
        return _check_limit("max_counter", value, BASE**counter_len - 1)

    @property
    def length(self) -> int:
        return self.time_len + self.shard_len + self.counter_len


def _check_limit(name: str, value: int, max_value: int) -> int:
    if value > max_value:
        raise ConfigError(f"Too big {name}: {value} (max {max_value})")
    if value > 0:
        return value
    return max_value


class ParsedID(BaseModel):
    """Fields decoded from an id.

    Args:
        time (int): Absolute time in milliseconds, epoch added back.
        shard (int): Logical shard number.
        counter (int): Loopback counter value.
        source (str): The id the fields were decoded from.
    """

    model_config = ConfigDict(frozen=True)

    time: int
    shard: int
    counter: int
    source: str


class GenerateResult(BaseModel):
    """Outcome of generate and restore: either an id or the reported error."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    value: Optional[str] = None
    error: Optional[EdidError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> str:
        """Returns the generated id, raising the reported error if there is one."""
        if self.error is not None:
            raise self.error
        return self.value

"""
EDID Codec Module

Generator and parser of compact, sortable, distributed ids encoded with the
Bitcoin Base58 alphabet. Each id is made of three fixed-width parts:

    |   time_len digits    | shard_len digits | counter_len digits |
    |        time          |      shard       |      counter       |
    | ms since custom epoch| 0..shard_count-1 |  0..max_counter    |

    - Time: milliseconds since the configured epoch (8 digits reach Feb 6028,
      7 digits reach Dec 2039)
    - Shard: logical shard number, usually taken from a parent id (e.g. the blog
      post of a comment)
    - Counter: loopback counter that wraps to 0 after max_counter

Every part is left-padded with the zero symbol ``1``, so ids generated with the
same configuration sort lexicographically by time, then shard, then counter.

Compaction:
    An id can be packed into a single base10 integer

        (time * shard_count + shard) * (max_counter + 1) + counter

    which is a bijection with the (time, shard, counter) triple. Limiting
    shard_count and max_counter keeps that integer within 64 bits for several
    decades, so it can be stored in an 8-byte integer column instead of a string:

    - default configuration: 64 bits until Feb 2116
    - default configuration with a 2015 epoch: 64 bits until Feb 2161
    - shard_count=100, max_counter=9999: 62 bits in 2085
    - shard_count and max_counter at their maximum: 72 bits in 2100

    The width is not enforced. Use get_max_time() to know when the time part
    overflows its digits.

Throughput:
    Up to ``shard_count * (max_counter + 1) * 1000`` unique ids per second,
    10^8 with the default configuration.

Thread Safety:
    - The counter is the only mutable state and is updated under a
      threading.Lock(), so one instance may be shared between threads
    - Independent instances need to agree on shard_count, max_counter and
      epoch to keep their ids comparable and decodable
"""

from datetime import datetime, timedelta, timezone
import logging
import threading
import time as _time
from typing import Callable, Optional

from pydantic import ValidationError as PydanticValidationError

from edid.core.config import Settings
from edid.core.exceptions import (
    ConfigError,
    ConflictError,
    FormatError,
    ValidationError,
)
from edid.core.schema import CodecConfig, GenerateResult, ParsedID
from edid.utils import base58

logger = logging.getLogger(__name__)

UNIX_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def _current_timestamp() -> int:
    """Returns the current timestamp in milliseconds."""
    return int(_time.time() * 1000)


def _is_integer(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


class Codec:
    """Generator and parser of base58 ids made of time, shard and counter parts.

    Attributes:
        config: The resolved, immutable layout of the ids.
        lock: Guards the loopback counter.
    """

    def __init__(
        self,
        config: Optional[CodecConfig] = None,
        *,
        clock: Optional[Callable[[], int]] = None,
        **options,
    ):
        """Initializes a new codec.

        Args:
            config: A ready configuration. Mutually exclusive with ``options``.
            clock: Returns the current time in milliseconds. Defaults to the
                system clock.
            **options: Any of time_len, shard_len, counter_len, shard_count,
                max_counter and epoch, merged over the defaults.

        Raises:
            ConfigError: If a length is below its minimum, a limit exceeds what
                its width can represent, or an option is unknown or not an
                integer.
        """
        if config is None:
            try:
                config = CodecConfig(**options)
            except PydanticValidationError as e:
                logger.error("Invalid codec configuration: %s", e)
                raise ConfigError(f"Invalid codec configuration: {e}") from e
        elif options:
            raise ConfigError("Pass either a config or options, not both.")

        self.config = config
        self.clock = clock or _current_timestamp
        self._counter = -1
        self.lock = threading.Lock()
        logger.debug("Initialized %s", self)

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs) -> "Codec":
        """Builds a codec from environment settings."""
        return cls(
            time_len=settings.TIME_LEN,
            shard_len=settings.SHARD_LEN,
            counter_len=settings.COUNTER_LEN,
            shard_count=settings.SHARD_COUNT,
            max_counter=settings.MAX_COUNTER,
            epoch=settings.EPOCH,
            **kwargs,
        )

    @property
    def time_len(self) -> int:
        return self.config.time_len

    @property
    def shard_len(self) -> int:
        return self.config.shard_len

    @property
    def counter_len(self) -> int:
        return self.config.counter_len

    @property
    def shard_count(self) -> int:
        return self.config.shard_count

    @property
    def max_counter(self) -> int:
        return self.config.max_counter

    @property
    def epoch(self) -> int:
        return self.config.epoch

    @property
    def length(self) -> int:
        return self.config.length

    @property
    def counter(self) -> int:
        """The last value returned by next_counter(), -1 before the first call."""
        return self._counter

    def next_counter(self) -> int:
        """Advances the loopback counter.

        Returns:
            The next counter value, 0 after max_counter.
        """
        with self.lock:
            if self._counter < self.config.max_counter:
                self._counter += 1
            else:
                self._counter = 0
            return self._counter

    def validate(self, time, shard, counter) -> Optional[ValidationError]:
        """Checks the parts of an id, time first, then shard, then counter.

        Args:
            time: Epoch-relative time, as actually encoded.
            shard: Shard number.
            counter: Counter value.

        Returns:
            None if every part is valid, else the error for the first bad part.
        """
        if not _is_integer(time) or time < 0:
            return ValidationError("time", time)
        if not _is_integer(shard) or not 0 <= shard < self.config.shard_count:
            return ValidationError("shard", shard)
        if not _is_integer(counter) or not 0 <= counter <= self.config.max_counter:
            return ValidationError("counter", counter)
        return None

    def generate(
        self,
        time: Optional[int] = None,
        shard: Optional[int] = None,
        parent: Optional[str] = None,
        counter: Optional[int] = None,
    ) -> GenerateResult:
        """Generates a new id.

        Usually the shard is decoded from the id of a parent (like a blog post
        for a comment), but it can be provided manually. Without either, the
        shard is derived from the time, which spreads ids over shards but gives
        no guarantee of even distribution.

        Args:
            time: Absolute time in milliseconds. Defaults to the clock.
            shard: Shard number. Mutually exclusive with ``parent``.
            parent: An existing id to take the shard from.
            counter: Counter value. Defaults to next_counter().

        Returns:
            GenerateResult: The id, or a ConflictError or ValidationError.

        Raises:
            FormatError: If ``parent`` is malformed.
            ValidationError: If ``parent`` holds out of range parts.
        """
        if shard is not None and parent is not None:
            logger.warning("Both parent %s and shard %s are provided", parent, shard)
            return GenerateResult(error=ConflictError("Both parent and shard are provided."))

        if time is None:
            time = self.clock()
        if _is_integer(time):
            time -= self.config.epoch

        if shard is None:
            if parent is not None:
                shard = self.parse(parent).shard
            elif _is_integer(time):
                shard = time % self.config.shard_count

        if counter is None:
            counter = self.next_counter()

        error = self.validate(time, shard, counter)
        if error is not None:
            logger.warning("Refusing to generate id: %s", error)
            return GenerateResult(error=error)

        value = (
            base58.encode(time, self.config.time_len)
            + base58.encode(shard, self.config.shard_len)
            + base58.encode(counter, self.config.counter_len)
        )
        logger.debug(
            "Generated id %s (time=%d, shard=%d, counter=%d)", value, time, shard, counter
        )
        return GenerateResult(value=value)

    def parse(self, identifier: str) -> ParsedID:
        """Decodes the parts of an id.

        The counter and shard are sliced from the end, and the time is whatever
        is left in front of them. Ids must be parsed with the configuration they
        were generated with.

        Args:
            identifier: An id produced by generate().

        Returns:
            ParsedID: Absolute time, shard, counter and the source id.

        Raises:
            FormatError: If the id is not a string, is too short, or contains a
                character outside the alphabet.
            ValidationError: If a decoded part is out of range.
        """
        if not isinstance(identifier, str):
            logger.error("Id is not a string: %r", identifier)
            raise FormatError(f"Id is not a string: {identifier!r}")
        if len(identifier) < self.config.length:
            logger.error("Short id: %r", identifier)
            raise FormatError(f"Short id: {identifier!r}")

        tail = self.config.shard_len + self.config.counter_len
        try:
            time = base58.decode(identifier[:-tail])
            shard = base58.decode(identifier[-tail : -self.config.counter_len])
            counter = base58.decode(identifier[-self.config.counter_len :])
        except ValueError as e:
            logger.error("Malformed id %r: %s", identifier, e)
            raise FormatError(f"Malformed id {identifier!r}: {e}") from e

        error = self.validate(time, shard, counter)
        if error is not None:
            logger.error("Invalid id %r: %s", identifier, error)
            raise error

        return ParsedID(
            time=self.config.epoch + time, shard=shard, counter=counter, source=identifier
        )

    def compact(self, identifier: str) -> str:
        """Encodes an id as a base10 number.

        Formula: (time * shard_count + shard) * (max_counter + 1) + counter

        Args:
            identifier: An id produced by generate().

        Returns:
            str: The compacted id in base10.

        Raises:
            FormatError: If the id is malformed.
            ValidationError: If a decoded part is out of range.
        """
        parsed = self.parse(identifier)
        packed = (
            (parsed.time - self.config.epoch) * self.config.shard_count + parsed.shard
        ) * (self.config.max_counter + 1) + parsed.counter
        return str(packed)

    def restore(self, compacted: str) -> GenerateResult:
        """Restores the base58 id from its compacted base10 form.

        Args:
            compacted: A value produced by compact().

        Returns:
            GenerateResult: The original id, or the ValidationError reported
                while re-encoding it.

        Raises:
            FormatError: If ``compacted`` is not a string of decimal digits in
                canonical form (no leading zeros except "0"), or is too long to
                convert.
        """
        if (
            not isinstance(compacted, str)
            or not (compacted.isascii() and compacted.isdigit())
            or (len(compacted) > 1 and compacted.startswith("0"))
        ):
            logger.error("Malformed compacted id: %r", compacted)
            raise FormatError(f"Malformed compacted id: {compacted!r}")

        try:
            packed = int(compacted)
        except ValueError as e:
            logger.error("Compacted id too long: %d digits", len(compacted))
            raise FormatError(f"Compacted id too long: {len(compacted)} digits") from e

        rest, counter = divmod(packed, self.config.max_counter + 1)
        time, shard = divmod(rest, self.config.shard_count)
        return self.generate(time=self.config.epoch + time, shard=shard, counter=counter)

    def get_max_time(self) -> int:
        """Returns the first absolute time, in milliseconds, the time part can't hold."""
        return self.config.epoch + base58.BASE**self.config.time_len

    def get_max_datetime(self) -> datetime:
        """Same as get_max_time(), as an aware UTC datetime.

        Raises:
            OverflowError: If the time is past the year 9999.
        """
        return UNIX_EPOCH + timedelta(milliseconds=self.get_max_time())

    def __str__(self) -> str:
        return (
            f"EDID shardCount={self.config.shard_count}"
            f", maxCounter={self.config.max_counter}"
            f", timeLen={self.config.time_len}"
        )

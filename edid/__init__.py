import logging

from edid.core.exceptions import (
    ConfigError,
    ConflictError,
    EdidError,
    FormatError,
    ValidationError,
)
from edid.core.schema import CodecConfig, GenerateResult, ParsedID
from edid.utils.base58 import ALPHABET
from edid.utils.codec import Codec

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "ALPHABET",
    "Codec",
    "CodecConfig",
    "ConfigError",
    "ConflictError",
    "EdidError",
    "FormatError",
    "GenerateResult",
    "ParsedID",
    "ValidationError",
]

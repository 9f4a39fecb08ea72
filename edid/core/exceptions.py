class EdidError(Exception):
    """Base class for every error raised or reported by the codec."""

    pass


class ConfigError(EdidError):
    """Raised when a codec is constructed with invalid field widths or limits."""

    pass


class ConflictError(EdidError):
    """Raised when both a shard and a parent id are supplied to generate."""

    pass


class FormatError(EdidError):
    """Raised when an id or a compacted id is malformed."""

    pass


class ValidationError(EdidError):
    """Raised when a time, shard or counter value is out of range."""

    def __init__(self, field: str, value):
        self.field = field
        self.value = value
        super().__init__(f"Invalid {field}: {value!r}")

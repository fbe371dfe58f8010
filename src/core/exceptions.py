"""Exception types shared across apps."""


class ImmutableRecordError(Exception):
    """Raised when code tries to modify or delete an append-only record."""

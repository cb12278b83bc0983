"""
Graph Query Errors
"""


class InvalidBoundError(ValueError):
    """Raised when a caller passes an unusable bound (depth, count, top-N)."""

    def __init__(self, name: str, value: object, reason: str = "must be non-negative"):
        self.name = name
        self.value = value
        super().__init__(f"{name} {reason}, got {value!r}")


def check_non_negative(name: str, value: int) -> int:
    """Return value if it is a non-negative int, else raise InvalidBoundError."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidBoundError(name, value, "must be an integer")
    if value < 0:
        raise InvalidBoundError(name, value)
    return value


def check_positive(name: str, value: int) -> int:
    """Return value if it is an int >= 1, else raise InvalidBoundError."""
    check_non_negative(name, value)
    if value < 1:
        raise InvalidBoundError(name, value, "must be at least 1")
    return value

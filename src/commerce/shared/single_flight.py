"""One-at-a-time guard for user-triggered operations."""

from contextlib import contextmanager

from protean.exceptions import InvalidOperationError


class SingleFlight:
    """Lets one call through at a time; overlapping calls are rejected.

    ``active`` is set for the duration of the guarded block and always
    cleared on the way out, whether the block succeeds or fails.
    """

    def __init__(self, operation: str) -> None:
        self.operation = operation
        self.active = False

    @contextmanager
    def claim(self):
        if self.active:
            raise InvalidOperationError(f"{self.operation} is already in progress")
        self.active = True
        try:
            yield
        finally:
            self.active = False

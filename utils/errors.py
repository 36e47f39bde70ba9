"""
Domain error types for the availability engine.

Caller errors subclass ValueError so routes that already map ValueError to a
400 response keep working.
"""


class InvalidRangeError(ValueError):
    """A window or query horizon whose start is after its end."""

    def __init__(self, start, end) -> None:
        super().__init__(f"Start date {start} is after end date {end}")
        self.start = start
        self.end = end


class InvalidAccountingInputError(ValueError):
    """Payment input that cannot be reconciled with the booking total."""


class ResourceNotFoundError(LookupError):
    """Raised when a resource id does not exist."""

    def __init__(self, resource_id: int) -> None:
        super().__init__(f"Resource {resource_id} not found")
        self.resource_id = resource_id


class StoreUnavailableError(RuntimeError):
    """The resource store could not be read or written."""

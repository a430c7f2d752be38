"""Exceptions shared by aggregates and event stores."""


class ConcurrencyError(Exception):
    """Raised when an optimistic concurrency check fails.

    This exception indicates that another writer appended to the aggregate's
    stream between when it was loaded and when new events were appended.
    Callers recover by reloading the aggregate and retrying the operation.

    Attributes:
        aggregate_id: The stream's aggregate identifier.
        aggregate_type: The stream's aggregate type.
        expected_version: The version the caller observed when loading.
        current_version: The version actually found in the store.
    """

    def __init__(
        self,
        aggregate_id: str,
        aggregate_type: str,
        expected_version: int,
        current_version: int,
    ):
        super().__init__(
            f"Concurrency conflict for {aggregate_type}[{aggregate_id}]: "
            f"expected version {expected_version}, but current version is {current_version}"
        )
        self.aggregate_id = aggregate_id
        self.aggregate_type = aggregate_type
        self.expected_version = expected_version
        self.current_version = current_version


class InvalidArgumentError(ValueError):
    """Raised when an event store is called incorrectly.

    Examples are an empty batch or a batch mixing events from different
    aggregates. This signals a bug in the calling code and must not be
    retried.
    """


class UnknownEventTypeError(LookupError):
    """Raised when an event class or discriminator is not known to a codec."""


class DomainError(Exception):
    """Base class for business rule violations raised by aggregates and handlers."""

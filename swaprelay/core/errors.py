"""Error types shared by the store, the filter sync and the notifiers."""

from __future__ import annotations


class RelayError(Exception):
    """Base error for swap-relay operations.

    Attributes:
        message: Human-readable error description.
        code: Machine-readable error code string.
    """

    def __init__(self, message: str, *, code: str = "relay-error") -> None:
        super().__init__(message)
        self.message = message
        self.code = code


class StoreError(RelayError):
    """The subscription store could not complete a read or write."""

    def __init__(self, message: str) -> None:
        super().__init__(message, code="store-error")


class SyncError(RelayError):
    """The upstream filter rejected (or never received) a full replace."""

    def __init__(self, status_code: int | None, status_text: str) -> None:
        if status_code is None:
            message = f"Filter sync failed: {status_text}"
        else:
            message = f"Filter sync failed: {status_code} {status_text}".rstrip()
        super().__init__(message, code="sync-failed")
        self.status_code = status_code
        self.status_text = status_text


class NotFound(RelayError):
    def __init__(self, address: str, destination: str) -> None:
        super().__init__(
            f"Address {address} is not subscribed for {destination}",
            code="subscription-not-found",
        )
        self.address = address
        self.destination = destination


class DeliveryError(RelayError):
    def __init__(self, destination: str, message: str) -> None:
        super().__init__(f"Delivery to {destination} failed: {message}", code="delivery-failed")
        self.destination = destination

# agrimarket/errors.py

from typing import Iterable, List, Optional


class MarketplaceError(Exception):
    """Base class for every error raised by the marketplace data layer."""


class ValidationError(MarketplaceError, ValueError):
    """A create/order request is missing required fields or is out of range.

    Raised before anything is written, so a failed request never leaves a partial record.
    """

    def __init__(self, message: str, fields: Optional[Iterable[str]] = None):
        super().__init__(message)
        self.fields: List[str] = list(fields or [])

    @classmethod
    def missing(cls, fields: Iterable[str]) -> "ValidationError":
        fields = list(fields)
        return cls(f"Please fill in all required fields: {', '.join(fields)}", fields)


class NotFoundError(MarketplaceError, LookupError):
    """A referenced record does not exist in its collection."""

    def __init__(self, collection: str, record_id: str):
        super().__init__(f"No record '{record_id}' in '{collection}'")
        self.collection = collection
        self.record_id = record_id


class StorageCorruption(MarketplaceError):
    """A stored value could not be decoded into the expected JSON shape."""

    def __init__(self, key: str, reason: str):
        super().__init__(f"Stored value for '{key}' is unreadable: {reason}")
        self.key = key

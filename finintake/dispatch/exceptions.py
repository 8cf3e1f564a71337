class DispatchError(Exception):
    """Base exception for event dispatch errors."""


class UnknownEventError(DispatchError):
    """Raised when no job is registered for an event name."""


class InvalidEventError(DispatchError):
    """Raised when an event payload lacks documentId or filePath."""

class ProcessorError(Exception):
    """Base exception for all processing-job errors."""


class SourceNotFoundError(ProcessorError):
    """Raised when the uploaded file is missing at processing time."""


class SourceReadError(ProcessorError):
    """Raised when the uploaded file exists but cannot be read."""


class RecordNotFoundError(ProcessorError):
    """Raised when a document record cannot be found in the database."""


class PersistenceError(ProcessorError):
    """Raised when a write to the document record store fails."""

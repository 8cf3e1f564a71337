class ExtractionError(Exception):
    """Raised when the AI extraction call fails or returns unusable output."""


class ExtractionValidationError(ExtractionError):
    """Raised when the parsed AI response does not match the target shape."""


class ExtractionNetworkError(ExtractionError):
    """Raised when the AI provider call fails due to network/infrastructure issues."""


class MissingCredentialError(ExtractionError):
    """Raised at startup when the configured provider has no API key."""

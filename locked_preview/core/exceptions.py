# locked_preview/core/exceptions.py

"""Custom exception hierarchy for the locked preview system.

Engines raise these; the service layer catches them and falls back to a
safe result so that a locked preview never breaks the surrounding page.
"""


class LockedPreviewError(Exception):
    """Base exception for all application-specific errors."""

    pass


class ConfigurationError(LockedPreviewError):
    """Raised when the replacement table cannot be loaded or validated."""

    pass


class InitializationError(LockedPreviewError):
    """Raised when an engine fails to initialize."""

    pass


class PipelineError(LockedPreviewError):
    """Raised when a processing stage fails."""

    pass


class ValidationError(LockedPreviewError):
    """Raised when input validation fails (e.g., non-positive blur radius)."""

    pass


class ImageDecodeError(ValidationError):
    """Raised when the source image cannot be decoded."""

    pass

"""
SecretSift Exceptions
"""


class SecretSiftError(Exception):
    """Base exception for all SecretSift errors."""
    pass


class SecretConfigError(SecretSiftError):
    """Raised when the secret scanner configuration cannot be loaded."""
    pass


class AnalysisError(SecretSiftError):
    """Raised when a single file cannot be analyzed.

    Carries the offending path so callers can report it and move on to
    the next file.
    """

    def __init__(self, file_path: str, message: str) -> None:
        super().__init__(f"{message} {file_path}")
        self.file_path = file_path

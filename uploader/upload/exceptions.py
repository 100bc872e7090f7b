class UploadError(Exception):
    """Base exception for all upload pipeline errors."""


class DestinationExistsError(UploadError):
    """Raised when the destination file exists and overwriting is disabled."""


class UploadDirectoryError(UploadError):
    """Raised when the upload directory cannot be created."""


class InvalidDestinationError(UploadError):
    """Raised when a requested name would place the file outside the upload directory."""

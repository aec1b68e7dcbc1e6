"""
Defines custom exceptions for the application to allow for more specific error handling.
"""


class AudioCacheError(Exception):
    """Base exception for all application-specific errors."""


class UpstreamError(AudioCacheError):
    """Raised when the platform API answers with an error-coded response."""

    def __init__(self, code: str, endpoint: str | None = None):
        self.code = code
        self.endpoint = endpoint
        where = f" from {endpoint}" if endpoint else ""
        super().__init__(f"Upstream error{where}: {code}")

    @classmethod
    def from_response(cls, text: str, endpoint: str | None = None) -> "UpstreamError":
        """Builds an error from a raw response body, stripping the error prefix."""
        if text.startswith("error code: "):
            return cls(text[len("error code: ") :], endpoint)
        return cls(text, endpoint)


class MalformedRecordError(AudioCacheError):
    """
    Describes a record whose delimited text does not split into key/value pairs.
    Logged by the parser, never raised out of it.
    """


class DownloadFailure(AudioCacheError):
    """Raised when an asset could not be fetched from its download URL."""

    def __init__(self, url: str, status: int | None = None, detail: str = ""):
        self.url = url
        self.status = status
        self.detail = detail
        status_text = f"HTTP {status}" if status is not None else "no response"
        message = f"Download of '{url}' failed ({status_text})"
        if detail:
            message += f": {detail}"
        super().__init__(message)


class FilesystemError(AudioCacheError):
    """Raised for unexpected I/O failures in the cache directories."""


class ConfigurationError(AudioCacheError):
    """Raised for issues related to configuration loading or validation."""


class RefreshInProgressError(AudioCacheError):
    """Raised when a refresh is requested while another one is still running."""

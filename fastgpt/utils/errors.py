"""Exception hierarchy for the FastGPT client."""


class FastGPTError(Exception):
    """Base exception for all FastGPT client errors."""

    exit_code = 1

    def __init__(self, message: str, exit_code: int | None = None, hint: str | None = None):
        """
        Initialize exception with optional exit code and hint.

        Args:
            message: Error message
            exit_code: Override default exit code
            hint: Helpful hint for resolving the error (uses Python 3.11+ __notes__)
        """
        super().__init__(message)
        if exit_code:
            self.exit_code = exit_code
        if hint:
            if hasattr(self, "add_note"):
                self.add_note(hint)


class ResourceError(FastGPTError):
    """External resources unavailable (API, network, files)."""

    exit_code = 75


class ConfigError(FastGPTError):
    """Configuration-related errors (config.yaml, missing keys)."""

    exit_code = 78


class ConfigMissingError(ConfigError):
    """No API key could be resolved at startup."""

    def __init__(self, message: str = "No API key found"):
        super().__init__(message, hint="Set one with: fastgpt --set-api-key YOUR_KEY")


class FileAccessError(ResourceError):
    """File system access errors."""

    exit_code = 66


class PathNotFoundError(FileAccessError):
    """Path does not exist, or is not attached to the session."""

    def __init__(self, path: str, message: str | None = None):
        self.path = path
        super().__init__(message or f"Path not found: {path}")


class DuplicateFileError(FileAccessError):
    """File is already attached to the session."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"File already in context: {path}")


class FileReadError(FileAccessError):
    """File exists but could not be read as text."""

    def __init__(self, path: str, reason: str):
        self.path = path
        super().__init__(f"Failed to read file {path}: {reason}")


class NoSupportedFilesError(FileAccessError):
    """Directory expansion did not attach any file."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(
            f"No supported files found in directory: {path}",
            hint="Supported extensions: txt, md, rs, py, js, ts, html, css, json, "
            "xml, yml, yaml, toml, sh, bat",
        )


class ProviderError(ResourceError):
    """Answer API errors (network, auth, malformed payload)."""

    pass


class TransportError(ProviderError):
    """The API could not be reached."""

    pass


class HttpError(ProviderError):
    """The API answered with a non-2xx status.

    The message carries the body collapsed onto one line and truncated;
    ``body`` keeps the raw text.
    """

    max_body_chars = 200

    def __init__(self, status: int, body: str, hint: str | None = None):
        self.status = status
        self.body = body
        summary = " ".join(body.split())
        if len(summary) > self.max_body_chars:
            summary = summary[: self.max_body_chars] + "..."
        super().__init__(f"API request failed with status {status}: {summary}", hint=hint)


class AuthError(HttpError):
    """The API rejected the credential (401/403)."""

    def __init__(self, status: int, body: str):
        super().__init__(status, body, hint="Check your key with: fastgpt --show-api-key")


class DecodeError(ProviderError):
    """The API response body could not be parsed."""

    pass


class UsageError(FastGPTError):
    """Invalid CLI arguments or REPL command usage."""

    exit_code = 64

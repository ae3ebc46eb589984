"""
Exceptions for GitOps Secrets.

All errors derive from :class:`SecretsError` so callers can catch the whole
family at once, or match a single kind:

- ``ConfigurationError``: master key missing or too short, bad settings.
- ``FormatError``: the envelope string is malformed or foreign.
- ``DecryptionError``: authentication or deserialization failed.
- ``SecretsFileError``: reading or writing a secrets file failed.
- ``ProviderError``: a third-party secrets provider returned an error.
"""
from typing import Optional


class SecretsError(Exception):
    """Base class for every GitOps Secrets error.

    ``path`` is optional context attached by file collaborators while the
    error propagates; it is rendered as part of ``str(error)``.
    """

    def __init__(self, message: str, *, path: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.path = path

    def __str__(self) -> str:
        if self.path:
            return f"{self.message} (path: {self.path})"
        return self.message


class ConfigurationError(SecretsError):
    """Master key absent, empty, too short, or another invalid setting."""

    def __init__(self, reason: str, *, variable: Optional[str] = None):
        message = f"{variable}: {reason}" if variable else reason
        super().__init__(message)
        self.variable = variable
        self.reason = reason


class FormatError(SecretsError):
    """Envelope string is malformed: arity, tag, iterations or base64."""

    def __init__(self, reason: str, *, field: Optional[str] = None):
        message = f"Invalid envelope {field}: {reason}" if field else f"Invalid envelope: {reason}"
        super().__init__(message)
        self.field = field
        self.reason = reason


class DecryptionError(SecretsError):
    # never says which stage failed
    def __init__(self):
        super().__init__("Unable to decrypt secrets: wrong master key or corrupted cipher text")


class SecretsFileError(SecretsError):
    """Secrets file could not be read or written."""

    def __init__(self, reason: str, *, path: str):
        super().__init__(reason, path=path)
        self.reason = reason


class ProviderError(SecretsError):
    """A secrets provider request failed."""

    def __init__(self, provider: str, reason: str, *, status: Optional[int] = None):
        super().__init__(f"{provider} API Error: {reason}")
        self.provider = provider
        self.status = status
        self.reason = reason

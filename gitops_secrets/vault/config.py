"""
Vault Configuration — Master key loading and validated settings.

Reads the shared master key from the environment:
    GITOPS_SECRETS_MASTER_KEY = <any string of at least 16 characters>

The key is read again on every call and never cached, so a key changed
within a running process is picked up by the next operation.

Security Note:
    Never log key material. Only log variable names and lengths.
"""
import secrets
import logging
from collections.abc import Mapping
from typing import Optional, Union

from pydantic import BaseModel, Field, field_validator

from ..conf import MASTER_KEY_ENV, get_env
from ..exceptions import ConfigurationError

logger = logging.getLogger("gitops_secrets.vault")

MIN_MASTER_KEY_LENGTH = 16


def validate_master_key(value: Union[str, bytes, None]) -> bytes:
    """Validate an explicitly supplied master key.

    String keys are measured in characters, bytes keys in bytes.

    Args:
        value: Candidate master key.

    Returns:
        The key as UTF-8 encoded bytes.

    Raises:
        ConfigurationError: If the key is missing, empty or shorter than
            ``MIN_MASTER_KEY_LENGTH``.
    """
    if value is None or len(value) == 0:
        raise ConfigurationError("master key is not set", variable=MASTER_KEY_ENV)
    if len(value) < MIN_MASTER_KEY_LENGTH:
        raise ConfigurationError(
            f"master key must be at least {MIN_MASTER_KEY_LENGTH} characters, "
            f"got {len(value)}",
            variable=MASTER_KEY_ENV,
        )
    if isinstance(value, str):
        return value.encode("utf-8")
    return bytes(value)


def master_key(environ: Optional[Mapping[str, str]] = None) -> bytes:
    """Read and validate the master key from the environment.

    Args:
        environ: Mapping to read from; defaults to ``os.environ``.

    Returns:
        The master key as UTF-8 bytes.

    Raises:
        ConfigurationError: If the variable is absent or too short.
    """
    value = get_env(MASTER_KEY_ENV, environ)
    if value is None:
        logger.debug("%s is not set", MASTER_KEY_ENV)
    return validate_master_key(value)


def generate_master_key() -> str:
    """Generate a random master key suitable for GITOPS_SECRETS_MASTER_KEY.

    This is a utility for operators to generate new keys.

    Returns:
        URL-safe random string (43 characters, 256 bits of entropy).
    """
    return secrets.token_urlsafe(32)


class VaultConfig(BaseModel):
    """Validated vault configuration."""

    master_key: bytes = Field(repr=False)
    iterations: Optional[int] = Field(default=None, ge=1)

    model_config = {"frozen": True}

    @field_validator("master_key", mode="before")
    @classmethod
    def validate_key(cls, v: Union[str, bytes, None]) -> bytes:
        """Apply the master key length rule."""
        return validate_master_key(v)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "VaultConfig":
        """Create VaultConfig by loading the master key from environment.

        Returns:
            Populated VaultConfig instance.
        """
        return cls(master_key=get_env(MASTER_KEY_ENV, environ))

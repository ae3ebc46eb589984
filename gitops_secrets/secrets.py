"""
Secrets — the public encrypt/decrypt API bound to the ambient master key.

Each call reads GITOPS_SECRETS_MASTER_KEY again through
:class:`~gitops_secrets.vault.config.VaultConfig`, then hands the key to the
vault explicitly. Nothing is cached between calls.
"""
import os
import logging
from collections.abc import MutableMapping, Mapping
from typing import Any, Optional

import orjson

from .vault import crypto
from .vault.config import VaultConfig, master_key as read_master_key

logger = logging.getLogger("gitops_secrets")


class Secrets(dict):
    """Decrypted payload with a shortcut to export it to the environment."""

    def populate_env(self, environ: Optional[MutableMapping[str, str]] = None) -> "Secrets":
        populate_env(self, environ)
        return self


def master_key() -> bytes:
    """Fail fast when the master key is missing or too short."""
    return read_master_key()


def encrypt(payload: Mapping[str, Any]) -> str:
    """Encrypt ``payload`` with the master key from the environment."""
    config = VaultConfig.from_env()
    return crypto.encrypt(payload, config.master_key, iterations=config.iterations)


def decrypt(cipher_text: str) -> dict[str, Any]:
    """Decrypt ``cipher_text`` with the master key from the environment."""
    config = VaultConfig.from_env()
    return crypto.decrypt(cipher_text, config.master_key)


def load_secrets_from_cipher(cipher_text: str) -> Secrets:
    """Decrypt ``cipher_text`` into a :class:`Secrets` mapping."""
    return Secrets(decrypt(cipher_text))


def _env_value(value: Any) -> str:
    if isinstance(value, str):
        return value
    return orjson.dumps(value).decode("utf-8")


def populate_env(
    payload: Mapping[str, Any],
    environ: Optional[MutableMapping[str, str]] = None,
) -> Mapping[str, Any]:
    """Merge ``payload`` into the environment.

    String values are set as-is; any other value is stored as its JSON text.
    Existing variables with the same name are overwritten.

    Args:
        payload: Decrypted secrets.
        environ: Target mapping; defaults to ``os.environ``.

    Returns:
        The payload, unchanged.
    """
    target = os.environ if environ is None else environ
    for name, value in payload.items():
        target[name] = _env_value(value)
    logger.debug("Populated environment with %d secret(s)", len(payload))
    return payload

"""GitOps Secrets.

Encrypt secrets into a self-describing envelope string that can be
committed to a repository, and decrypt them at runtime with the shared
master key from GITOPS_SECRETS_MASTER_KEY.
"""
from .version import __version__
from .exceptions import (
    SecretsError,
    ConfigurationError,
    FormatError,
    DecryptionError,
    SecretsFileError,
    ProviderError,
)
from .secrets import (
    Secrets,
    master_key,
    encrypt,
    decrypt,
    load_secrets_from_cipher,
    populate_env,
)
from .files import (
    build,
    encrypt_to_file,
    decrypt_from_file,
    load_secrets,
)

__all__ = [
    "__version__",
    "SecretsError",
    "ConfigurationError",
    "FormatError",
    "DecryptionError",
    "SecretsFileError",
    "ProviderError",
    "Secrets",
    "master_key",
    "encrypt",
    "decrypt",
    "load_secrets_from_cipher",
    "populate_env",
    "build",
    "encrypt_to_file",
    "decrypt_from_file",
    "load_secrets",
]

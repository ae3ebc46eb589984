"""
GitOps Secrets configuration.

Environment variable names and defaults. Values are looked up when a
function here is called, never at import time, so a change to the
environment takes effect on the next operation.
"""
import os
from pathlib import Path
from collections.abc import Mapping
from typing import Optional

MASTER_KEY_ENV = "GITOPS_SECRETS_MASTER_KEY"
SECRETS_DIR_ENV = "GITOPS_SECRETS_DIR"
DOPPLER_TOKEN_ENV = "DOPPLER_TOKEN"

DEFAULT_SECRETS_DIR = ".secrets"
DEFAULT_FILE_NAME = ".secrets.enc"
DEFAULT_MODULE_NAME = "secrets_enc.py"

DOPPLER_API_URL = "https://api.doppler.com/v3/configs/config/secrets/download"
DOPPLER_TIMEOUT = 30


def get_env(name: str, environ: Optional[Mapping[str, str]] = None) -> Optional[str]:
    """Return the value of ``name`` from ``environ`` (default: os.environ)."""
    source = os.environ if environ is None else environ
    return source.get(name)


def secrets_dir() -> Path:
    """Directory holding the default secrets file and generated module."""
    return Path(os.environ.get(SECRETS_DIR_ENV) or DEFAULT_SECRETS_DIR)


def default_file_path() -> Path:
    return secrets_dir() / DEFAULT_FILE_NAME


def default_module_path() -> Path:
    return secrets_dir() / DEFAULT_MODULE_NAME

"""
Secret files — persist envelopes to disk and generate loadable modules.

Two outputs are supported:

- a plain text file holding only the envelope string
  (:func:`encrypt_to_file` / :func:`decrypt_from_file`);
- a generated Python module embedding the envelope (:func:`build`), either
  in *loader* format (``CIPHER_TEXT`` plus ``load_secrets()``) or in
  *cipher-only* format (``CIPHER_TEXT`` alone).

Errors raised by the vault keep their type; the file path is attached to
them before they propagate.
"""
import logging
import importlib.util
from pathlib import Path
from collections.abc import Mapping
from typing import Any, Optional, Union

from . import conf
from .exceptions import SecretsError, SecretsFileError
from .secrets import Secrets, encrypt, load_secrets_from_cipher

logger = logging.getLogger("gitops_secrets.files")

PathLike = Union[str, Path]

_HEADER = "# This file was auto-generated by gitops-secrets. Do not edit."

_LOADER_TEMPLATE = '''{header}
from gitops_secrets import load_secrets_from_cipher

CIPHER_TEXT = "{cipher_text}"


def load_secrets():
    return load_secrets_from_cipher(CIPHER_TEXT)
'''

_CIPHER_ONLY_TEMPLATE = '''{header}
CIPHER_TEXT = "{cipher_text}"
'''


def _write(path: Path, contents: str) -> None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(contents, encoding="utf-8")
    except OSError as err:
        raise SecretsFileError(f"Unable to write secrets: {err}", path=str(path)) from err
    logger.debug("Wrote secrets to %s", path)


def render_module(cipher_text: str, cipher_text_only: bool = False) -> str:
    """Return the source of a generated secrets module."""
    template = _CIPHER_ONLY_TEMPLATE if cipher_text_only else _LOADER_TEMPLATE
    return template.format(header=_HEADER, cipher_text=cipher_text)


def build(
    payload: Mapping[str, Any],
    path: Optional[PathLike] = None,
    cipher_text_only: bool = False,
) -> Path:
    """Encrypt ``payload`` into an importable Python module.

    Args:
        payload: Secrets to encrypt.
        path: Output file; defaults to ``<GITOPS_SECRETS_DIR>/secrets_enc.py``.
        cipher_text_only: Only export ``CIPHER_TEXT``, without a loader.

    Returns:
        Resolved path of the written module.
    """
    target = Path(path).resolve() if path else conf.default_module_path().resolve()
    cipher_text = encrypt(payload)
    _write(target, render_module(cipher_text, cipher_text_only))
    logger.info(
        "Built secrets module %s (%s)", target,
        "cipher-only" if cipher_text_only else "loader",
    )
    return target


def encrypt_to_file(payload: Mapping[str, Any], path: Optional[PathLike] = None) -> Path:
    """Encrypt ``payload`` and write the envelope string to ``path``.

    Returns:
        Resolved path of the written file.
    """
    target = Path(path).resolve() if path else conf.default_file_path().resolve()
    _write(target, encrypt(payload))
    return target


def decrypt_from_file(path: Optional[PathLike] = None) -> Secrets:
    """Read an envelope string from ``path`` and decrypt it.

    Raises:
        SecretsFileError: If the file cannot be read.
        SecretsError: Any vault error, with ``path`` attached.
    """
    source = Path(path).resolve() if path else conf.default_file_path().resolve()
    try:
        cipher_text = source.read_text(encoding="utf-8")
    except OSError as err:
        raise SecretsFileError(f"Unable to read secrets: {err}", path=str(source)) from err
    try:
        return load_secrets_from_cipher(cipher_text)
    except SecretsError as err:
        err.path = str(source)
        raise


def load_secrets(path: Optional[PathLike] = None) -> Secrets:
    """Import a module generated by :func:`build` and load its secrets.

    Cipher-only modules are decrypted through their ``CIPHER_TEXT``.
    """
    source = Path(path).resolve() if path else conf.default_module_path().resolve()
    if not source.is_file():
        raise SecretsFileError("Secrets module not found", path=str(source))

    spec = importlib.util.spec_from_file_location(f"_gitops_secrets_{source.stem}", source)
    if spec is None or spec.loader is None:
        raise SecretsFileError("Not an importable Python module", path=str(source))
    module = importlib.util.module_from_spec(spec)
    try:
        spec.loader.exec_module(module)
        loader = getattr(module, "load_secrets", None)
        if loader is not None:
            return Secrets(loader())
        if not hasattr(module, "CIPHER_TEXT"):
            raise SecretsFileError("Module defines no CIPHER_TEXT", path=str(source))
        return load_secrets_from_cipher(module.CIPHER_TEXT)
    except SecretsError as err:
        err.path = str(source)
        raise

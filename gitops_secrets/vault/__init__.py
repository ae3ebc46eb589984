"""Vault — the cryptographic envelope engine.

Security Note (Threat Model):
    Anyone holding the master key can decrypt every envelope written with
    it; anyone without it learns nothing beyond payload length. Decrypted
    payloads live in process memory, which is an accepted limitation.
"""

from .config import VaultConfig, master_key, validate_master_key, generate_master_key
from .envelope import Envelope, FormatTag, format_envelope, parse_envelope
from .crypto import encrypt, decrypt, derive_key, DEFAULT_ITERATIONS

__all__ = [
    "VaultConfig",
    "master_key",
    "validate_master_key",
    "generate_master_key",
    "Envelope",
    "FormatTag",
    "format_envelope",
    "parse_envelope",
    "encrypt",
    "decrypt",
    "derive_key",
    "DEFAULT_ITERATIONS",
]

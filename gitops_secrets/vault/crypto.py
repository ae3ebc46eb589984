"""
Vault Crypto Core — Key derivation, encryption/decryption, and serialization.

Every envelope is sealed with a key of its own:
    PBKDF2-HMAC-SHA256(master_key, salt, iterations) → AES-256-GCM → envelope

Salt and nonce are fresh random values for each call, and the iteration count
used is recorded in the envelope so decryption never depends on the
current default.

Security Note:
    Never log plaintext, ciphertext or key material.
    Derived keys live only in the frame of a single encrypt/decrypt call.
"""
import os
import logging
from collections.abc import Callable, Mapping
from typing import Any, NamedTuple, Optional, Union

import orjson
from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from ..exceptions import DecryptionError
from .config import validate_master_key
from .envelope import (
    MAX_ITERATIONS,
    FormatTag,
    NonCanonicalError,
    format_envelope,
    parse_envelope,
)

logger = logging.getLogger("gitops_secrets.vault")

DEFAULT_ITERATIONS = 1_000_000
SALT_SIZE = 16
NONCE_SIZE = 12  # 96-bit nonce
KEY_LENGTH = 32  # AES-256
TAG_SIZE = 16

RandomBytes = Callable[[int], bytes]


class CipherSuite(NamedTuple):
    """Algorithms bound to a format tag."""

    kdf_hash: type
    key_length: int
    cipher_cls: type


SUITES: dict[FormatTag, CipherSuite] = {
    FormatTag.BASE64: CipherSuite(hashes.SHA256, KEY_LENGTH, AESGCM),
}

CURRENT_TAG = FormatTag.BASE64


# ---------------------------------------------------------------------------
# Key derivation
# ---------------------------------------------------------------------------

def derive_key(
    master_key: bytes,
    salt: bytes,
    iterations: int,
    suite: CipherSuite = SUITES[CURRENT_TAG],
) -> bytes:
    """Derive an encryption key from the master key with PBKDF2-HMAC.

    Args:
        master_key: Validated master key bytes.
        salt: Per-envelope random salt.
        iterations: Work factor; always the full count, never shortened.
        suite: Algorithm suite of the envelope.

    Returns:
        ``suite.key_length`` bytes of key material.
    """
    kdf = PBKDF2HMAC(
        algorithm=suite.kdf_hash(),
        length=suite.key_length,
        salt=salt,
        iterations=iterations,
    )
    return kdf.derive(master_key)


# ---------------------------------------------------------------------------
# Payload serialization
# ---------------------------------------------------------------------------

def serialize_payload(payload: Mapping[str, Any]) -> bytes:
    """Serialize a payload mapping to compact UTF-8 JSON.

    Raises:
        TypeError: If the payload is not a mapping or holds values that
            cannot be represented as JSON.
    """
    if not isinstance(payload, Mapping):
        raise TypeError(f"payload must be a mapping, got {type(payload).__name__}")
    return orjson.dumps(dict(payload))


def deserialize_payload(data: bytes) -> dict[str, Any]:
    """Deserialize decrypted bytes back to a payload mapping.

    Raises:
        DecryptionError: If the bytes are not a JSON object.
    """
    try:
        parsed = orjson.loads(data)
    except orjson.JSONDecodeError:
        raise DecryptionError() from None
    if not isinstance(parsed, dict):
        raise DecryptionError()
    return parsed


# ---------------------------------------------------------------------------
# Envelope encryption
# ---------------------------------------------------------------------------

def encrypt(
    payload: Mapping[str, Any],
    master_key: Union[str, bytes],
    *,
    iterations: Optional[int] = None,
    random_bytes: RandomBytes = os.urandom,
) -> str:
    """Encrypt a payload into an envelope string.

    Args:
        payload: JSON-serializable mapping with string keys.
        master_key: Shared master key.
        iterations: Work factor override; defaults to DEFAULT_ITERATIONS
            read at call time.
        random_bytes: CSPRNG used for salt and nonce.

    Returns:
        Envelope string.

    Raises:
        ConfigurationError: If the master key is missing or too short.
        TypeError: If the payload cannot be serialized.
    """
    key_bytes = validate_master_key(master_key)
    rounds = DEFAULT_ITERATIONS if iterations is None else iterations
    if not 1 <= rounds <= MAX_ITERATIONS:
        raise ValueError(f"iterations must be between 1 and {MAX_ITERATIONS}, got {rounds}")
    suite = SUITES[CURRENT_TAG]

    plaintext = serialize_payload(payload)
    salt = random_bytes(SALT_SIZE)
    nonce = random_bytes(NONCE_SIZE)
    cipher = suite.cipher_cls(derive_key(key_bytes, salt, rounds, suite))
    ct = cipher.encrypt(nonce, plaintext, None)

    logger.debug(
        "Encrypted payload with %d key(s) (iterations=%d)", len(payload), rounds,
    )
    return format_envelope(CURRENT_TAG, rounds, salt, nonce, ct)


def decrypt(cipher_text: str, master_key: Union[str, bytes]) -> dict[str, Any]:
    """Decrypt an envelope string back to its payload.

    The key is derived with the envelope's own salt and iteration count,
    so envelopes written under an older default still decrypt.

    Args:
        cipher_text: Envelope string.
        master_key: Shared master key.

    Returns:
        Verified, deserialized payload.

    Raises:
        ConfigurationError: If the master key is missing or too short.
        FormatError: If the envelope is malformed.
        DecryptionError: If authentication or deserialization fails.
    """
    key_bytes = validate_master_key(master_key)
    try:
        envelope = parse_envelope(cipher_text)
    except NonCanonicalError as err:
        # altered trailing bits of the sealed bytes count as tampering
        if err.field == "ciphertext":
            raise DecryptionError() from None
        raise
    suite = SUITES[envelope.tag]

    cipher = suite.cipher_cls(
        derive_key(key_bytes, envelope.salt, envelope.iterations, suite)
    )
    try:
        plaintext = cipher.decrypt(envelope.iv, envelope.ciphertext, None)
    except (InvalidTag, ValueError):
        # ValueError: nonce length unsupported by the cipher
        raise DecryptionError() from None

    payload = deserialize_payload(plaintext)
    logger.debug(
        "Decrypted payload with %d key(s) (iterations=%d)",
        len(payload), envelope.iterations,
    )
    return payload

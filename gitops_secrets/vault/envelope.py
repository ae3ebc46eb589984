"""
Vault Envelope — serialization of the versioned cipher text string.

Format (fields joined by ``:``, standard padded base64):

    <tag>:<iterations>:<b64 salt>:<b64 iv>:<b64 ciphertext||gcm_tag>

The iteration count travels with every envelope, so envelopes written
with an older work factor keep decrypting after the default is raised.
The tag names the whole algorithm suite; a new suite gets a new tag.
"""
import re
import base64
import binascii
from enum import Enum

from pydantic import BaseModel, Field

from ..exceptions import FormatError

DELIMITER = ":"
FIELD_COUNT = 5
MAX_ITERATIONS = 100_000_000

_DIGITS = re.compile(r"[0-9]+")


class NonCanonicalError(FormatError):
    """Segment decodes, but is not the canonical encoding of its bytes."""


class FormatTag(str, Enum):
    """Known envelope formats."""

    # PBKDF2-HMAC-SHA256 + AES-256-GCM, tag appended to ciphertext
    BASE64 = "base64"


class Envelope(BaseModel):
    """Parsed, immutable envelope."""

    tag: FormatTag
    iterations: int = Field(gt=0, le=MAX_ITERATIONS)
    salt: bytes = Field(repr=False)
    iv: bytes = Field(repr=False)
    ciphertext: bytes = Field(repr=False)

    model_config = {"frozen": True}

    def to_string(self) -> str:
        return format_envelope(self.tag, self.iterations, self.salt, self.iv, self.ciphertext)

    @classmethod
    def from_string(cls, text: str) -> "Envelope":
        return parse_envelope(text)


def _b64encode(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


def _b64decode(value: str, field: str) -> bytes:
    if not value:
        raise FormatError("segment is empty", field=field)
    try:
        data = base64.b64decode(value, validate=True)
    except (binascii.Error, ValueError) as err:
        raise FormatError(f"not valid base64 ({err})", field=field) from err
    # one string per byte sequence: unused trailing bits must be zero
    if _b64encode(data) != value:
        raise NonCanonicalError("non-canonical base64", field=field)
    return data


def format_envelope(
    tag: FormatTag,
    iterations: int,
    salt: bytes,
    iv: bytes,
    ciphertext: bytes,
) -> str:
    """Build the envelope string.

    Pure and deterministic: the same inputs always give the same string.

    Args:
        tag: Format tag identifying the algorithm suite.
        iterations: Key-derivation work factor used for this envelope.
        salt: Key-derivation salt.
        iv: AEAD nonce.
        ciphertext: Encrypted payload followed by the authentication tag.

    Returns:
        ``<tag>:<iterations>:<salt>:<iv>:<ciphertext>`` string.
    """
    return DELIMITER.join([
        FormatTag(tag).value,
        str(int(iterations)),
        _b64encode(salt),
        _b64encode(iv),
        _b64encode(ciphertext),
    ])


def parse_envelope(text: str) -> Envelope:
    """Parse an envelope string.

    Args:
        text: Envelope string as produced by :func:`format_envelope`.

    Returns:
        Envelope with decoded salt, iv and ciphertext.

    Raises:
        FormatError: On wrong field count, unknown tag, invalid iteration
            count or invalid base64. Never on a wrong key.
    """
    if not isinstance(text, str):
        raise FormatError(f"expected str, got {type(text).__name__}")
    parts = text.strip().split(DELIMITER)
    if len(parts) != FIELD_COUNT:
        raise FormatError(f"expected {FIELD_COUNT} fields, got {len(parts)}")
    raw_tag, raw_iterations, raw_salt, raw_iv, raw_ciphertext = parts

    try:
        tag = FormatTag(raw_tag)
    except ValueError as err:
        raise FormatError(f"unknown format {raw_tag!r}", field="tag") from err

    if not _DIGITS.fullmatch(raw_iterations):
        raise FormatError(f"{raw_iterations!r} is not a positive integer", field="iterations")
    iterations = int(raw_iterations)
    if iterations < 1 or iterations > MAX_ITERATIONS:
        raise FormatError(
            f"{iterations} is outside 1..{MAX_ITERATIONS}", field="iterations"
        )

    return Envelope(
        tag=tag,
        iterations=iterations,
        salt=_b64decode(raw_salt, "salt"),
        iv=_b64decode(raw_iv, "iv"),
        ciphertext=_b64decode(raw_ciphertext, "ciphertext"),
    )

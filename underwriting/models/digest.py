"""
Evidence digest helpers: 32-byte opaque digests travel as hex over the API.
"""

from typing import Union

from underwriting.engine.constants import EVIDENCE_DIGEST_SIZE
from underwriting.models.errors import InvalidEvidenceError

DIGEST_HEX_PATTERN = r"^(0x)?[0-9a-fA-F]{%d}$" % (EVIDENCE_DIGEST_SIZE * 2)


def decode_digest(value: Union[str, bytes]) -> bytes:
    """Normalize a hex string (optionally 0x-prefixed) or raw bytes into a digest."""
    if isinstance(value, str):
        text = value[2:] if value.lower().startswith("0x") else value
        try:
            value = bytes.fromhex(text)
        except ValueError:
            raise InvalidEvidenceError("Evidence digest is not valid hex.")
    if len(value) != EVIDENCE_DIGEST_SIZE:
        raise InvalidEvidenceError(
            f"Evidence digest must be exactly {EVIDENCE_DIGEST_SIZE} bytes.",
            {"received_bytes": len(value)},
        )
    return bytes(value)


def encode_digest(value: bytes) -> str:
    return "0x" + value.hex()

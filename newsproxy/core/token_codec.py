"""
Image Token Codec

Turns an origin image URL into an opaque token and back. A token is
``hex(nonce) + ":" + base64(ciphertext)`` where the ciphertext is produced by
an AEAD cipher, so any tampering, truncation or key mismatch is detected on
decode instead of yielding a garbled URL.

Every call to :meth:`TokenCodec.encode` draws a fresh nonce from the OS CSPRNG,
so the same URL never produces the same token twice.
"""

import base64
import binascii
import os
from typing import Callable
from urllib.parse import quote

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM, ChaCha20Poly1305

from newsproxy.core.errors import DecodeError

NONCE_LENGTH = 12
KEY_LENGTH = 32
TOKEN_SEPARATOR = ":"
IMAGE_RELAY_PATH = "/image-urls"

# Cipher identifiers accepted in the ALGORITHM setting
SUPPORTED_ALGORITHMS: dict[str, Callable[[bytes], object]] = {
    "aes-256-gcm": AESGCM,
    "chacha20-poly1305": ChaCha20Poly1305,
}
DEFAULT_ALGORITHM = "aes-256-gcm"


def parse_key_material(raw: str) -> bytes:
    """Accept either 64 hex characters or a 32-byte UTF-8 secret.

    Raises:
        ValueError: If the material does not yield exactly 32 bytes.
    """
    value = raw.strip()
    if len(value) == KEY_LENGTH * 2:
        try:
            return bytes.fromhex(value)
        except ValueError:
            pass

    key = value.encode("utf-8")
    if len(key) != KEY_LENGTH:
        raise ValueError(
            f"ENCRYPTION_KEY must be {KEY_LENGTH} bytes or {KEY_LENGTH * 2} hex characters"
        )
    return key


class TokenCodec:
    """Reversible, non-deterministic URL tokenization."""

    def __init__(
        self,
        key: bytes,
        algorithm: str = DEFAULT_ALGORITHM,
        public_base_url: str = "",
    ) -> None:
        algorithm = algorithm.lower()
        if algorithm not in SUPPORTED_ALGORITHMS:
            valid = ", ".join(sorted(SUPPORTED_ALGORITHMS))
            raise ValueError(f"Unsupported cipher algorithm '{algorithm}'. Valid options: {valid}")
        if len(key) != KEY_LENGTH:
            raise ValueError(f"Cipher key must be exactly {KEY_LENGTH} bytes")

        self.algorithm = algorithm
        self.public_base_url = public_base_url.rstrip("/")
        self._cipher = SUPPORTED_ALGORITHMS[algorithm](key)

    def encode(self, url: str) -> str:
        """Encrypt *url* under a fresh nonce and return the token string."""
        nonce = os.urandom(NONCE_LENGTH)
        ciphertext = self._cipher.encrypt(nonce, url.encode("utf-8"), None)
        return f"{nonce.hex()}{TOKEN_SEPARATOR}{base64.b64encode(ciphertext).decode('ascii')}"

    def decode(self, token: str) -> str:
        """Recover the exact URL behind *token*.

        Raises:
            DecodeError: If the token is malformed or fails authentication.
        """
        if not isinstance(token, str):
            raise DecodeError("Token must be a string")

        parts = token.split(TOKEN_SEPARATOR)
        if len(parts) != 2:
            raise DecodeError("Token must have the form nonce:ciphertext")
        nonce_hex, ciphertext_b64 = parts

        try:
            nonce = bytes.fromhex(nonce_hex)
        except ValueError as e:
            raise DecodeError("Token nonce is not valid hex") from e
        if len(nonce) != NONCE_LENGTH:
            raise DecodeError("Token nonce has the wrong length")

        try:
            ciphertext = base64.b64decode(ciphertext_b64, validate=True)
        except (binascii.Error, ValueError) as e:
            raise DecodeError("Token ciphertext is not valid base64") from e
        if not ciphertext:
            raise DecodeError("Token ciphertext is empty")

        try:
            plaintext = self._cipher.decrypt(nonce, ciphertext, None)
        except InvalidTag as e:
            raise DecodeError("Token failed authentication") from e

        try:
            return plaintext.decode("utf-8")
        except UnicodeDecodeError as e:
            raise DecodeError("Token plaintext is not UTF-8") from e

    def public_url(self, url: str) -> str:
        """Encode *url* and wrap the token behind the public relay endpoint."""
        token = self.encode(url)
        return f"{self.public_base_url}{IMAGE_RELAY_PATH}?url={quote(token, safe='')}"

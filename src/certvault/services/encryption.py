"""
At-rest encryption transforms.

Payloads pass through a transform on their way to and from the object store:
- CleartextTransform: identity, objects are stored as given
- AESGCMTransform: AES-256-GCM, objects are stored as nonce || ciphertext || tag

The encrypted format carries its own nonce, so unwrap needs only the key.
There is no cleartext fallback: an AESGCMTransform refuses anything it did
not produce.
"""

import io
import os
from abc import ABC, abstractmethod
from typing import BinaryIO

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from loguru import logger

from certvault.models.errors import AuthenticationFailedError, InvalidKeyLengthError

KEY_SIZE = 32
NONCE_SIZE = 12
TAG_SIZE = 16


class EncryptionTransform(ABC):
    """Converts plaintext to its stored representation and back."""

    active: bool = False

    @abstractmethod
    def wrap(self, plaintext: bytes) -> bytes:
        """Return the bytes to store for plaintext."""

    @abstractmethod
    def unwrap(self, stored: BinaryIO) -> BinaryIO:
        """Return a reader over the plaintext of a stored object."""


class CleartextTransform(EncryptionTransform):
    """Identity transform."""

    def wrap(self, plaintext: bytes) -> bytes:
        return bytes(plaintext)

    def unwrap(self, stored: BinaryIO) -> BinaryIO:
        return stored


class AESGCMTransform(EncryptionTransform):
    """
    Authenticated encryption with AES-256-GCM.

    Every wrap call draws a fresh random nonce. Reusing a nonce under the
    same key breaks GCM, so never derive it from the payload.
    """

    active = True

    def __init__(self, key: bytes):
        """
        Args:
            key: 32-byte symmetric key

        Raises:
            InvalidKeyLengthError: If key is not exactly 32 bytes
        """
        if len(key) != KEY_SIZE:
            raise InvalidKeyLengthError(len(key), KEY_SIZE)
        self._aead = AESGCM(bytes(key))

    def wrap(self, plaintext: bytes) -> bytes:
        nonce = os.urandom(NONCE_SIZE)
        return nonce + self._aead.encrypt(nonce, bytes(plaintext), None)

    def unwrap(self, stored: BinaryIO) -> BinaryIO:
        payload = stored.read()
        if len(payload) < NONCE_SIZE + TAG_SIZE:
            raise AuthenticationFailedError(
                f"encrypted payload too short ({len(payload)} bytes)"
            )

        nonce, ciphertext = payload[:NONCE_SIZE], payload[NONCE_SIZE:]
        try:
            plaintext = self._aead.decrypt(nonce, ciphertext, None)
        except InvalidTag as e:
            raise AuthenticationFailedError("decryption integrity check failed") from e

        return io.BytesIO(plaintext)


def build_transform(key: bytes | None) -> EncryptionTransform:
    """
    Select the transform for an optional key.

    An empty or missing key selects cleartext storage.

    Raises:
        InvalidKeyLengthError: If a key is given but is not 32 bytes
    """
    if not key:
        logger.info("Clear text certificate storage active")
        return CleartextTransform()

    transform = AESGCMTransform(key)
    logger.info("Encrypted certificate storage active")
    return transform

"""
Capabilities the envelope codec is built on.

Both are passed in explicitly so tests can substitute a deterministic random
source, and so nothing depends on a process-wide crypto provider.
"""

import logging
import os
import typing

import attr
from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from .utils import AuthenticationFailed

log = logging.getLogger(__name__)

NONCE_SIZE = 12
TAG_SIZE = 16


class RandomSource(typing.Protocol):
    def bytes(self, size: int) -> bytes:
        ...


class Aead(typing.Protocol):
    def encrypt(self, key: bytes, nonce: bytes, plaintext: bytes) -> bytes:
        ...

    def decrypt(self, key: bytes, nonce: bytes, ciphertext: bytes) -> bytes:
        ...


@attr.s(frozen=True)
class SystemRandom:
    """Cryptographically secure bytes from the operating system."""

    def bytes(self, size: int) -> bytes:
        return os.urandom(size)


@attr.s(frozen=True)
class AESGCMCipher:
    """
    AES-GCM with a 96-bit nonce and a 128-bit tag, without associated data.

    The key length picks the profile: 16 bytes for AES-128-GCM and 32 bytes for
    AES-256-GCM.
    """

    def encrypt(self, key: bytes, nonce: bytes, plaintext: bytes) -> bytes:
        return AESGCM(key).encrypt(nonce, plaintext, None)

    def decrypt(self, key: bytes, nonce: bytes, ciphertext: bytes) -> bytes:
        if len(nonce) != NONCE_SIZE:
            raise AuthenticationFailed(
                f"Expected a {NONCE_SIZE} byte nonce, got {len(nonce)} bytes")

        try:
            return AESGCM(key).decrypt(nonce, ciphertext, None)
        except InvalidTag:
            log.debug(f"Tag check failed for {len(ciphertext)} bytes of ciphertext")
            raise AuthenticationFailed(
                "Decryption failed: wrong key or corrupted data") from None
        except ValueError as error:
            raise AuthenticationFailed(f"Decryption failed: {error}") from error

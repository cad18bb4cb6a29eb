"""
Encrypted containers for text secrets and files.

Text secrets are sealed into a single base-64 string:

    VERSION(1) || NONCE(12) || CIPHERTEXT+TAG

VERSION is 1 for 16 byte keys and 2 for 32 byte keys. Older clients wrote the
same layout without a version byte, and those envelopes are still accepted.

Files keep the nonce and ciphertext in separate base-64 fields next to the
original filename and content type, and carry no version byte.
"""

import base64
import binascii
import enum
import logging
import typing

import attr

from . import keys
from .primitives import NONCE_SIZE, Aead, AESGCMCipher, RandomSource, SystemRandom
from .utils import MalformedEnvelope

log = logging.getLogger(__name__)

Plaintext = typing.Union[str, bytes]


class Format(enum.Enum):
    LEGACY = 0
    V1 = 1
    V2 = 2

    @property
    def header_size(self) -> int:
        return 0 if self is Format.LEGACY else 1


VERSION_FOR_KEY_SIZE = {
    keys.LEGACY_KEY_SIZE: Format.V1,
    keys.KEY_SIZE: Format.V2,
}


def detect_format(data: bytes) -> Format:
    """
    Guess the layout of a decoded envelope from its first byte.

    A first byte of 1 or 2 is read as a version marker and anything else as the
    first byte of a legacy nonce. Legacy envelopes whose random nonce happens
    to start with 0x01 or 0x02 are therefore misread as versioned and will not
    open.
    """
    if data[:1] == b'\x01':
        return Format.V1
    if data[:1] == b'\x02':
        return Format.V2
    return Format.LEGACY


def b64decode(text: str, what: str = "envelope") -> bytes:
    try:
        return base64.b64decode(text, validate=True)
    except (binascii.Error, ValueError) as error:
        raise MalformedEnvelope(f"The {what} is not valid base64: {error}") from error


def b64encode(data: bytes) -> str:
    return base64.b64encode(data).decode('ascii')


@attr.s(frozen=True, kw_only=True)
class FileMetadata:
    original_filename: str = attr.ib()
    content_type: str = attr.ib()
    iv: str = attr.ib()

    def to_json(self) -> typing.Dict[str, str]:
        return {
            'originalFilename': self.original_filename,
            'contentType': self.content_type,
            'iv': self.iv,
        }

    @classmethod
    def from_json(cls, document: typing.Mapping[str, typing.Any]) -> 'FileMetadata':
        try:
            return cls(
                original_filename=document['originalFilename'],
                content_type=document['contentType'],
                iv=document['iv'])
        except (KeyError, TypeError) as error:
            raise MalformedEnvelope(f"File metadata is incomplete: {error}") from error


@attr.s(frozen=True, kw_only=True)
class FileEnvelope:
    metadata: FileMetadata = attr.ib()
    encrypted_data: str = attr.ib()


@attr.s(frozen=True)
class Envelope:
    random: RandomSource = attr.ib(factory=SystemRandom)
    aead: Aead = attr.ib(factory=AESGCMCipher)

    def encrypt(self, plaintext: bytes, key: bytes) -> typing.Tuple[bytes, bytes]:
        nonce = self.random.bytes(NONCE_SIZE)
        return nonce, self.aead.encrypt(key, nonce, plaintext)

    def seal(self, plaintext: Plaintext, key_text: str) -> str:
        """Encrypt a text secret into a versioned base-64 envelope."""
        key = keys.parse(key_text)
        if isinstance(plaintext, str):
            plaintext = plaintext.encode('utf-8')

        nonce, ciphertext = self.encrypt(plaintext, key)
        version = VERSION_FOR_KEY_SIZE[len(key)]
        log.debug(f"Sealed {len(plaintext)} bytes as envelope version {version.value}")
        return b64encode(bytes([version.value]) + nonce + ciphertext)

    def open(self, envelope: str, key_text: str) -> bytes:
        """
        Decrypt a base-64 envelope in either the versioned or legacy layout.

        The cipher profile follows the key length. The version byte is not
        checked against it; a mismatch fails authentication instead.
        """
        key = keys.parse(key_text)
        data = b64decode(envelope)

        if len(data) < NONCE_SIZE:
            raise MalformedEnvelope(
                f"Envelope is {len(data)} bytes, shorter than a {NONCE_SIZE} byte nonce")

        layout = detect_format(data)
        start = layout.header_size
        nonce = data[start:start + NONCE_SIZE]
        ciphertext = data[start + NONCE_SIZE:]
        log.debug(f"Opening {layout.name} envelope of {len(data)} bytes")
        return self.aead.decrypt(key, nonce, ciphertext)

    def open_text(self, envelope: str, key_text: str) -> str:
        # Invalid UTF-8 becomes U+FFFD, as browsers' TextDecoder does.
        return self.open(envelope, key_text).decode('utf-8', errors='replace')

    def seal_file(
            self,
            data: bytes,
            key_text: str,
            filename: str,
            content_type: str) -> FileEnvelope:
        """Encrypt file contents, keeping the nonce beside the ciphertext."""
        key = keys.parse(key_text)
        nonce, ciphertext = self.encrypt(data, key)
        log.debug(f"Sealed {len(data)} bytes of {filename}")
        return FileEnvelope(
            metadata=FileMetadata(
                original_filename=filename,
                content_type=content_type,
                iv=b64encode(nonce)),
            encrypted_data=b64encode(ciphertext))

    def open_file(
            self,
            metadata: typing.Union[FileMetadata, str],
            encrypted_data: str,
            key_text: str) -> bytes:
        """Decrypt file contents given its metadata (or just its base-64 IV)."""
        key = keys.parse(key_text)
        iv = metadata.iv if isinstance(metadata, FileMetadata) else metadata
        nonce = b64decode(iv, what="file IV")
        ciphertext = b64decode(encrypted_data, what="file data")
        return self.aead.decrypt(key, nonce, ciphertext)


def seal(plaintext: Plaintext, key_text: str) -> str:
    return Envelope().seal(plaintext, key_text)


def open(envelope: str, key_text: str) -> bytes:
    return Envelope().open(envelope, key_text)

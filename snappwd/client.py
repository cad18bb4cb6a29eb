import logging
import mimetypes
import pathlib
import typing

import attr

from . import keys, links
from .api import FilePayload, SecretMetadata, SecretPayload, SnapPwdApi
from .envelope import Envelope, FileMetadata
from .utils import InvalidLink, SnapPwdException

log = logging.getLogger(__name__)

DEFAULT_CONTENT_TYPE = 'application/octet-stream'


@attr.s(frozen=True, kw_only=True)
class RetrievedText:
    text: str = attr.ib()


@attr.s(frozen=True, kw_only=True)
class RetrievedFile:
    metadata: FileMetadata = attr.ib()
    data: bytes = attr.ib()


Retrieved = typing.Union[RetrievedText, RetrievedFile]


def content_type(path: pathlib.Path) -> str:
    guessed, _ = mimetypes.guess_type(path.name)
    return guessed or DEFAULT_CONTENT_TYPE


@attr.s(frozen=True)
class SnapPwd:
    """Seals secrets locally and moves only ciphertext through the API."""

    api: SnapPwdApi = attr.ib(factory=SnapPwdApi)
    envelope: Envelope = attr.ib(factory=Envelope)

    @property
    def web_url(self) -> str:
        return links.web_url(self.api.base_url)

    def generate_key(self) -> str:
        return keys.generate(self.envelope.random)

    def put_text(self, text: str, expiration: int = 3600) -> str:
        """Share a text secret and return its URL."""
        key = self.generate_key()
        secret_id = self.api.create_secret(self.envelope.seal(text, key), expiration)
        log.info(f"Created secret {secret_id}")
        return links.share_url(self.web_url, secret_id, key)

    def put_file(self, path: pathlib.Path, expiration: int = 86400) -> str:
        """Share a file and return its URL."""
        if not path.is_file():
            raise SnapPwdException(f"File not found: {path}")

        key = self.generate_key()
        sealed = self.envelope.seal_file(
            data=path.read_bytes(),
            key_text=key,
            filename=path.name,
            content_type=content_type(path))
        file_id = self.api.upload_file(sealed.metadata, sealed.encrypted_data, expiration)
        log.info(f"Uploaded {path.name} as {file_id}")
        return links.share_url(self.web_url, file_id, key)

    def get(self, url: str) -> Retrieved:
        """Fetch and decrypt the secret behind a share URL."""
        link = links.parse(url)
        if not link.key:
            raise InvalidLink("No encryption key found in URL fragment")

        if link.is_file:
            response = self.api.get_file(link.secret_id)
        else:
            response = self.api.get_secret(link.secret_id)

        if isinstance(response, SecretPayload):
            return RetrievedText(text=self.envelope.open_text(response.encrypted_secret, link.key))

        if isinstance(response, FilePayload):
            return RetrievedFile(
                metadata=response.metadata,
                data=self.envelope.open_file(response.metadata, response.encrypted_data, link.key))

        raise SnapPwdException("Unexpected response: Received metadata instead of secret.")

    def peek(self, url: str) -> typing.Tuple[str, SecretMetadata]:
        """Fetch creation time and TTL without burning the secret."""
        link = links.parse(url, require_key=False)

        if link.is_file:
            response = self.api.get_file(link.secret_id, peek=True)
        else:
            response = self.api.get_secret(link.secret_id, peek=True)

        if not isinstance(response, SecretMetadata):
            raise SnapPwdException(
                "API returned the secret instead of metadata. It might have been burned.")

        return link.secret_id, response

"""
Client for the SnapPwd blob store.

The store only ever sees base-64 ciphertext; keys stay in the URL fragment.
"""

import logging
import typing

import attr
import requests

from .envelope import FileMetadata
from .utils import SnapPwdException

log = logging.getLogger(__name__)

DEFAULT_API_URL = 'https://api.snappwd.io/v1'


class ApiError(SnapPwdException):
    def __init__(self, message: str, status: typing.Optional[int] = None):
        super().__init__(message)
        self.status = status


@attr.s(frozen=True, kw_only=True)
class SecretMetadata:
    """Returned instead of the secret when peeking."""

    created_at: int = attr.ib()
    ttl_seconds: int = attr.ib()
    metadata: typing.Optional[typing.Dict[str, typing.Any]] = attr.ib(default=None)


@attr.s(frozen=True, kw_only=True)
class SecretPayload:
    encrypted_secret: str = attr.ib()


@attr.s(frozen=True, kw_only=True)
class FilePayload:
    metadata: FileMetadata = attr.ib()
    encrypted_data: str = attr.ib()


Response = typing.Union[SecretMetadata, SecretPayload, FilePayload]


def parse_response(document: typing.Any) -> Response:
    """Turn a JSON document from the store into one of the response types."""
    if not isinstance(document, dict):
        raise ApiError(f"Unexpected response from the server: {document!r}")

    if 'encryptedSecret' in document:
        return SecretPayload(encrypted_secret=document['encryptedSecret'])

    if 'encryptedData' in document:
        return FilePayload(
            metadata=FileMetadata.from_json(document.get('metadata') or {}),
            encrypted_data=document['encryptedData'])

    if 'ttlSeconds' in document:
        return SecretMetadata(
            created_at=document.get('createdAt') or 0,
            ttl_seconds=document['ttlSeconds'],
            metadata=document.get('metadata'))

    raise ApiError(f"Unexpected response from the server: {sorted(document)}")


@attr.s(frozen=True)
class SnapPwdApi:
    base_url: str = attr.ib(
        default=DEFAULT_API_URL,
        converter=lambda url: url.rstrip('/'))
    session: requests.Session = attr.ib(factory=requests.Session)
    timeout: float = attr.ib(default=10)

    def request(self, method: str, endpoint: str, **kwargs) -> typing.Any:
        url = f"{self.base_url}{endpoint}"
        log.debug(f"{method} {url}")

        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.exceptions.RequestException as error:
            raise ApiError(f"Could not reach {self.base_url}: {error}") from error

        if not response.ok:
            try:
                body = response.json()
            except ValueError:
                body = None
            message = (body.get('error') if isinstance(body, dict) else None) or response.reason
            raise ApiError(
                f"API Error ({response.status_code}): {message}",
                status=response.status_code)

        try:
            return response.json()
        except ValueError as error:
            raise ApiError(f"Server returned invalid JSON: {error}") from error

    def create_secret(self, encrypted_secret: str, expiration: int = 3600) -> str:
        document = self.request('POST', '/secrets', json={
            'encryptedSecret': encrypted_secret,
            'expiration': expiration,
        })
        return self.identifier(document, 'secretId')

    def get_secret(self, secret_id: str, peek: bool = False) -> Response:
        params = {'peek': 'true'} if peek else None
        return parse_response(self.request('GET', f'/secrets/{secret_id}', params=params))

    def upload_file(
            self,
            metadata: FileMetadata,
            encrypted_data: str,
            expiration: int = 86400) -> str:
        document = self.request('POST', '/files', json={
            'metadata': metadata.to_json(),
            'encryptedData': encrypted_data,
            'expiration': expiration,
        })
        return self.identifier(document, 'fileId')

    def get_file(self, file_id: str, peek: bool = False) -> Response:
        params = {'peek': 'true'} if peek else None
        return parse_response(self.request('GET', f'/files/{file_id}', params=params))

    @staticmethod
    def identifier(document: typing.Any, field: str) -> str:
        if not isinstance(document, dict) or not document.get(field):
            raise ApiError(f"Server response is missing {field}")
        return document[field]

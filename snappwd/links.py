import logging
import typing
import urllib.parse

import attr

from .utils import InvalidLink

log = logging.getLogger(__name__)

HOSTED_API = 'api.snappwd.io'
HOSTED_WEB_URL = 'https://snappwd.io'
API_PATH = '/api/v1'

SECRET_PREFIX = 'sp-'
FILE_PREFIX = 'spf-'


@attr.s(frozen=True)
class ShareLink:
    secret_id: str = attr.ib()
    key: typing.Optional[str] = attr.ib(default=None)

    @property
    def is_file(self) -> bool:
        """Legacy file uploads have their own id prefix and endpoint."""
        return self.secret_id.startswith(FILE_PREFIX)


def web_url(api_url: str) -> str:
    """Find the site that serves share links for an API URL."""
    if HOSTED_API in api_url:
        return HOSTED_WEB_URL
    url = api_url.rstrip('/')
    if url.endswith(API_PATH):
        url = url[:-len(API_PATH)]
    return url


def share_url(web: str, secret_id: str, key_text: str) -> str:
    # Text secrets and files share the /g/ route.
    return f"{web.rstrip('/')}/g/{secret_id}#{key_text}"


def parse(url: str, require_key: bool = True) -> ShareLink:
    """
    Extract the secret id and key from a share URL.

    Ids are read from the segment after '/g/' or, for older file links, after
    '/file/'. Failing that, a final segment that looks like an id is used.
    """
    parts = urllib.parse.urlsplit(url)
    segments = parts.path.split('/')
    key = parts.fragment or None

    secret_id = None
    for marker in ('g', 'file'):
        if marker in segments:
            index = segments.index(marker)
            if index + 1 < len(segments) and segments[index + 1]:
                secret_id = segments[index + 1]
                break

    if secret_id is None and segments[-1].startswith((SECRET_PREFIX, FILE_PREFIX)):
        secret_id = segments[-1]

    if require_key and not key:
        raise InvalidLink("No encryption key found in URL fragment")

    if not secret_id:
        raise InvalidLink("Could not parse secret ID from URL")

    log.debug(f"Parsed share link for {secret_id}")
    return ShareLink(secret_id, key)

import datetime
import json
import logging
import pathlib
import typing

import click

from . import __doc__, __version__
from .api import DEFAULT_API_URL, SnapPwdApi
from .client import RetrievedFile, RetrievedText, SnapPwd
from .utils import format_ttl

log = logging.getLogger(__name__)


class PathType(click.Path):
    def convert(self, value, param, ctx):
        return pathlib.Path(super().convert(value, param, ctx))


def expiration_option(default: int):
    return click.option(
        '-e', '--expiration',
        metavar='SECONDS',
        type=click.IntRange(min=1),
        default=default,
        show_default=True,
        help="Time before the secret expires.")


@click.group(help=__doc__)
@click.option(
    '--api-url',
    metavar='URL',
    envvar='SNAPPWD_API_URL',
    default=DEFAULT_API_URL,
    show_default=True,
    help="Override the default API URL.")
@click.option(
    '-d', '--debug', 'debug',
    default=False,
    is_flag=True,
    help="Enable debug logging.")
@click.pass_context
def main(ctx, api_url: str, debug: bool):
    logging.basicConfig(level=(logging.DEBUG if debug else logging.WARNING))
    ctx.obj = SnapPwd(api=SnapPwdApi(api_url))


@main.command()
def version():
    """Show the application version."""
    click.echo(f"snappwd {__version__}")


@main.command()
@click.pass_obj
def keygen(snap: SnapPwd):
    """Print a new random encryption key."""
    click.echo(snap.generate_key())


@main.command()
@click.argument('text', type=click.STRING)
@expiration_option(default=3600)
@click.pass_obj
def put(snap: SnapPwd, text: str, expiration: int):
    """Encrypt and share a text secret."""
    url = snap.put_text(text, expiration)
    click.echo("Secret created successfully!")
    click.echo(f"URL: {url}")


@main.command(name='put-file')
@click.argument('path', type=PathType(exists=True, dir_okay=False))
@expiration_option(default=86400)
@click.pass_obj
def put_file(snap: SnapPwd, path: pathlib.Path, expiration: int):
    """Encrypt and share a file."""
    url = snap.put_file(path, expiration)
    click.echo("File uploaded successfully!")
    click.echo(f"URL: {url}")


@main.command()
@click.argument('url')
@click.option(
    '-o', '--output',
    type=PathType(dir_okay=False),
    default=None,
    help="Where to write a file secret (defaults to its original filename).")
@click.pass_obj
def get(snap: SnapPwd, url: str, output: typing.Optional[pathlib.Path]):
    """
    Retrieve and decrypt a secret from a URL.

    Secrets are deleted by the server once retrieved.
    """
    retrieved = snap.get(url)

    if isinstance(retrieved, RetrievedText):
        click.echo(retrieved.text)
    elif isinstance(retrieved, RetrievedFile):
        # Only the basename of the remote filename is trusted.
        path = output or pathlib.Path(pathlib.PurePath(retrieved.metadata.original_filename).name)
        path.write_bytes(retrieved.data)
        click.echo(f"File saved to: {path}")


@main.command()
@click.argument('url')
@click.option(
    '-j', '--json', 'as_json',
    default=False,
    is_flag=True,
    help="Output valid JSON.")
@click.pass_obj
def peek(snap: SnapPwd, url: str, as_json: bool):
    """View secret metadata (TTL, creation time) without burning it."""
    secret_id, meta = snap.peek(url)

    if as_json:
        click.echo(json.dumps({
            'id': secret_id,
            'createdAt': meta.created_at,
            'ttlSeconds': meta.ttl_seconds,
            'metadata': meta.metadata or None,
        }, indent=2))
        return

    click.echo(f"ID: {secret_id}")

    if meta.created_at > 0:
        created = datetime.datetime.fromtimestamp(meta.created_at)
        click.echo(f"Created: {created:%Y-%m-%d %H:%M:%S}")

    if meta.ttl_seconds == -2:
        click.echo(f"Status: {format_ttl(meta.ttl_seconds)}")
    elif meta.ttl_seconds == -1:
        click.echo(f"Expires: {format_ttl(meta.ttl_seconds)}")
    else:
        click.echo(f"Expires in: {format_ttl(meta.ttl_seconds)}")

    if meta.metadata:
        click.echo(f"Custom Metadata: {json.dumps(meta.metadata, indent=2)}")

import typing

import attr
import click.testing
import pytest

import snappwd.cli
from snappwd import base58
from snappwd.envelope import Envelope

API_URL = 'https://api.snappwd.invalid/api/v1'


@attr.s
class FakeRandom:
    """
    Deterministic stand-in for the system random source.

    Hands out queued chunks first, then a repeating fill byte.
    """

    chunks: typing.List[bytes] = attr.ib(factory=list)
    fill: int = attr.ib(default=0x42)

    def bytes(self, size: int) -> bytes:
        if self.chunks:
            chunk = self.chunks.pop(0)
            assert len(chunk) == size, f"Queued {len(chunk)} bytes, asked for {size}"
            return chunk
        return bytes([self.fill]) * size


@pytest.fixture()
def fake_random() -> FakeRandom:
    return FakeRandom()


@pytest.fixture()
def envelope(fake_random) -> Envelope:
    return Envelope(random=fake_random)


@pytest.fixture(params=[16, 32], ids=lambda size: f'{size * 8}-bit')
def key(request) -> str:
    return base58.encode(bytes(range(1, request.param + 1)))


@pytest.fixture()
def invoke():
    def invoke_func(arguments: typing.Sequence[str], exit_code: int = 0):
        assert all(isinstance(arg, str) for arg in arguments)
        runner = click.testing.CliRunner()
        result = runner.invoke(snappwd.cli.main, ['--api-url', API_URL, *arguments])
        if result.exit_code != exit_code:
            message = f"Command snappwd {' '.join(arguments)} exited with {result.exit_code}"
            raise Exception(message) from result.exception
        return result

    return invoke_func

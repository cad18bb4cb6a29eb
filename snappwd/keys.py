import logging
import typing

from . import base58
from .primitives import RandomSource, SystemRandom
from .utils import InvalidEncoding, InvalidKey

log = logging.getLogger(__name__)

KEY_SIZE = 32
LEGACY_KEY_SIZE = 16
KEY_SIZES = (LEGACY_KEY_SIZE, KEY_SIZE)


def generate(random: typing.Optional[RandomSource] = None) -> str:
    """Create a new key and return its base-58 text."""
    random = random or SystemRandom()
    return base58.encode(random.bytes(KEY_SIZE))


def parse(key_text: str) -> bytes:
    """
    Decode key text to raw key bytes.

    The key strength is implied by the decoded length: 16 bytes for keys made
    by older clients and 32 bytes for current ones.
    """
    try:
        key = base58.decode(key_text)
    except InvalidEncoding as error:
        raise InvalidKey(f"Key is not valid base58: {error.message}") from error

    if len(key) not in KEY_SIZES:
        raise InvalidKey(
            f"Key must decode to {LEGACY_KEY_SIZE} or {KEY_SIZE} bytes, "
            f"not {len(key)}")

    log.debug(f"Parsed a {len(key) * 8}-bit key")
    return key

"""
Base-58 text encoding for binary keys.

Uses the Bitcoin alphabet, which leaves out '0', 'O', 'I' and 'l' so keys
survive being read aloud or copied by hand. Leading zero bytes are kept as
leading '1' characters.
"""

import typing

from .utils import InvalidEncoding

ALPHABET = '123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz'
BASE = len(ALPHABET)

_INDEX: typing.Dict[str, int] = {char: i for i, char in enumerate(ALPHABET)}


def encode(data: bytes) -> str:
    # Little-endian base-58 digits of the value read so far.
    digits: typing.List[int] = [0]
    for byte in data:
        carry = byte
        for i in range(len(digits)):
            carry += digits[i] << 8
            digits[i] = carry % BASE
            carry //= BASE
        while carry > 0:
            digits.append(carry % BASE)
            carry //= BASE

    zeros = len(data) - len(data.lstrip(b'\x00'))
    if zeros == len(data):
        # The accumulator holds a single 0 digit that the markers already cover.
        return ALPHABET[0] * zeros

    return ALPHABET[0] * zeros + ''.join(ALPHABET[d] for d in reversed(digits))


def decode(text: str) -> bytes:
    # Little-endian base-256 digits of the value read so far.
    digits: typing.List[int] = []
    for char in text:
        try:
            carry = _INDEX[char]
        except KeyError:
            raise InvalidEncoding(f"Invalid base58 character {char!r}") from None
        for i in range(len(digits)):
            carry += digits[i] * BASE
            digits[i] = carry & 0xff
            carry >>= 8
        while carry > 0:
            digits.append(carry & 0xff)
            carry >>= 8

    zeros = len(text) - len(text.lstrip(ALPHABET[0]))
    return bytes(zeros) + bytes(reversed(digits))

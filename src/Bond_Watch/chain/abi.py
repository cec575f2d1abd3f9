"""Minimal Solidity ABI codec for read-only ``eth_call`` requests.

Only covers what the Bond Depository and Uniswap V2 pair views need: calls
whose arguments are all ``uint256`` and return data made of static 32-byte
words, plus a single dynamic ``uint256[]``.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Final

from Crypto.Hash import keccak

WORD_SIZE: Final[int] = 32
SELECTOR_SIZE: Final[int] = 4
ADDRESS_SIZE: Final[int] = 20
MAX_UINT256: Final[int] = 2**256 - 1


class AbiDecodeError(ValueError):
    """Raised when return data does not match the expected layout."""


@lru_cache(maxsize=64)
def function_selector(signature: str) -> str:
    """First four bytes of ``keccak256(signature)`` as a ``0x`` hex string.

    ``function_selector("totalSupply()") == "0x18160ddd"``
    """
    digest = keccak.new(digest_bits=256, data=signature.encode("ascii")).digest()
    return "0x" + digest[:SELECTOR_SIZE].hex()


def encode_uint256(value: int) -> str:
    """Encode a uint256 as a 64-character hex word (no ``0x`` prefix)."""
    if not 0 <= value <= MAX_UINT256:
        msg = f"Value out of uint256 range: {value}"
        raise ValueError(msg)
    return value.to_bytes(WORD_SIZE, "big").hex()


def encode_call(signature: str, *args: int) -> str:
    """Build ``eth_call`` data for a function taking only uint256 arguments."""
    return function_selector(signature) + "".join(encode_uint256(arg) for arg in args)


def _to_bytes(data: str) -> bytes:
    hex_body = data[2:] if data.startswith(("0x", "0X")) else data
    try:
        raw = bytes.fromhex(hex_body)
    except ValueError as exc:
        raise AbiDecodeError(f"Return data is not hex: {data[:20]}...") from exc
    if len(raw) % WORD_SIZE:
        msg = f"Return data length {len(raw)} is not a multiple of {WORD_SIZE}"
        raise AbiDecodeError(msg)
    return raw


def decode_words(data: str, expected: int | None = None) -> list[int]:
    """Split return data into unsigned 32-byte words.

    Args:
        data: ``0x``-prefixed hex returned by ``eth_call``.
        expected: Minimum number of words required, if known.

    Raises:
        AbiDecodeError: If the data is malformed or too short.
    """
    raw = _to_bytes(data)
    words = [
        int.from_bytes(raw[offset : offset + WORD_SIZE], "big")
        for offset in range(0, len(raw), WORD_SIZE)
    ]
    if expected is not None and len(words) < expected:
        msg = f"Expected {expected} words of return data, got {len(words)}"
        raise AbiDecodeError(msg)
    return words


def decode_address(word: int) -> str:
    """Interpret a word as a lowercase ``0x`` address."""
    if word >> (ADDRESS_SIZE * 8):
        msg = f"Word has dirty high bits for an address: {word:#x}"
        raise AbiDecodeError(msg)
    return "0x" + word.to_bytes(ADDRESS_SIZE, "big").hex()


def decode_bool(word: int) -> bool:
    """Interpret a word as a Solidity bool."""
    if word not in (0, 1):
        msg = f"Word is not a valid bool: {word:#x}"
        raise AbiDecodeError(msg)
    return word == 1


def decode_uint256_array(data: str) -> list[int]:
    """Decode return data holding a single dynamic ``uint256[]``."""
    words = decode_words(data, expected=2)
    offset = words[0]
    if offset % WORD_SIZE:
        msg = f"Array offset {offset} is not word aligned"
        raise AbiDecodeError(msg)
    head = offset // WORD_SIZE
    if head >= len(words):
        msg = f"Array offset {offset} points past the return data"
        raise AbiDecodeError(msg)
    length = words[head]
    items = words[head + 1 : head + 1 + length]
    if len(items) != length:
        msg = f"Array declares {length} items but only {len(items)} are present"
        raise AbiDecodeError(msg)
    return items

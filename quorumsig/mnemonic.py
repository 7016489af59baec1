# quorumsig/mnemonic.py
"""
25-word mnemonic codec for 32-byte seeds.

- Words come from the BIP-39 English list shipped with the `mnemonic` package.
- The seed's 256 bits are packed little-endian into 11-bit word indices
  (24 words, last one zero-padded).
- Word 25 is a checksum: the first 11-bit group of SHA-512/256(seed).
"""

from functools import lru_cache
from typing import Dict, List, Sequence

from mnemonic import Mnemonic

from .encoding import KEY_LEN, sha512_256
from .errors import (
    InvalidChecksum,
    InvalidKeyLength,
    InvalidMnemonicLength,
    InvalidWordsInMnemonic,
)

BITS_PER_WORD = 11
KEY_WORDS = 24
MNEMONIC_LEN = KEY_WORDS + 1


@lru_cache(maxsize=1)
def wordlist() -> List[str]:
    words = list(Mnemonic("english").wordlist)
    if len(words) != 1 << BITS_PER_WORD:
        raise RuntimeError(f"expected 2048 words, got {len(words)}")
    return words


@lru_cache(maxsize=1)
def _word_index() -> Dict[str, int]:
    return {w: i for i, w in enumerate(wordlist())}


# ---------- bit packing ----------

def to_11_bit(data: bytes) -> List[int]:
    buffer = 0
    num_bits = 0
    out: List[int] = []
    for b in data:
        buffer |= b << num_bits
        num_bits += 8
        if num_bits >= BITS_PER_WORD:
            out.append(buffer & 0x7FF)
            buffer >>= BITS_PER_WORD
            num_bits -= BITS_PER_WORD
    if num_bits:
        out.append(buffer & 0x7FF)
    return out


def from_11_bit(nums: Sequence[int]) -> bytes:
    buffer = 0
    num_bits = 0
    out = bytearray()
    for n in nums:
        buffer |= n << num_bits
        num_bits += BITS_PER_WORD
        while num_bits >= 8:
            out.append(buffer & 0xFF)
            buffer >>= 8
            num_bits -= 8
    if num_bits:
        out.append(buffer & 0xFF)
    return bytes(out)


def checksum_word(key: bytes) -> str:
    return wordlist()[to_11_bit(sha512_256(key)[:2])[0]]


# ---------- public API ----------

def from_key(key: bytes) -> str:
    """Encode a 32-byte seed as a 25-word phrase."""
    if len(key) != KEY_LEN:
        raise InvalidKeyLength()
    words = wordlist()
    return " ".join([words[i] for i in to_11_bit(key)] + [checksum_word(key)])


def to_key(phrase: str) -> bytes:
    """Decode a 25-word phrase back to its 32-byte seed."""
    words = phrase.lower().split()
    if len(words) != MNEMONIC_LEN:
        raise InvalidMnemonicLength()

    index = _word_index()
    try:
        nums = [index[w] for w in words]
    except KeyError as exc:
        raise InvalidWordsInMnemonic(f"Mnemonic contains invalid word: {exc.args[0]!r}") from None

    # 24 * 11 bits = 33 bytes, the last of which must be padding
    raw = from_11_bit(nums[:KEY_WORDS])
    if raw[KEY_LEN:] != b"\x00":
        raise InvalidChecksum()
    key = raw[:KEY_LEN]
    if checksum_word(key) != words[-1]:
        raise InvalidChecksum()
    return key

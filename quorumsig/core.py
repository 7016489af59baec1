# quorumsig/core.py

import logging
import os
from typing import Callable, Optional

from nacl import signing

from . import mnemonic
from .encoding import KEY_LEN, Address
from .errors import InvalidKeyLength

log = logging.getLogger(__name__)

# Takes a byte count, returns that many secure random bytes.
RandomSource = Callable[[int], bytes]


class Account:
    """
    One Ed25519 signing identity, derived from a 32-byte seed.

    The address is fixed at construction. `close()` (or leaving a `with`
    block) zeroes the seed buffer and drops the signing key; a closed
    account can no longer sign.
    """

    __slots__ = ("_seed", "_signing_key", "_address")

    def __init__(self, seed: bytes) -> None:
        if len(seed) != KEY_LEN:
            raise InvalidKeyLength(f"Key length is invalid: expected {KEY_LEN} bytes, got {len(seed)}")
        self._seed: Optional[bytearray] = bytearray(seed)
        self._signing_key: Optional[signing.SigningKey] = signing.SigningKey(bytes(seed))
        self._address = Address(self._signing_key.verify_key.encode())

    @property
    def address(self) -> Address:
        return self._address

    @property
    def public_key(self) -> bytes:
        return self._address.public_key

    @property
    def closed(self) -> bool:
        return self._signing_key is None

    @property
    def seed(self) -> bytes:
        return bytes(self._live_seed())

    @property
    def signing_key(self) -> signing.SigningKey:
        if self._signing_key is None:
            raise ValueError("account is closed")
        return self._signing_key

    def _live_seed(self) -> bytearray:
        if self._seed is None:
            raise ValueError("account is closed")
        return self._seed

    def close(self) -> None:
        if self._seed is not None:
            for i in range(len(self._seed)):
                self._seed[i] = 0
        self._seed = None
        self._signing_key = None

    def __enter__(self) -> "Account":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def __repr__(self) -> str:
        # never show the seed
        return f"Account(address={self._address.encode()})"


# ---------- key manager ----------

def generate(rng: RandomSource = os.urandom) -> Account:
    """
    Create a new account from 32 fresh random bytes.

    Tests can pass a fixed `rng`; otherwise the OS secure source is used.
    """
    account = from_seed(rng(KEY_LEN))
    log.debug("generated account %s", account.address)
    return account


def from_seed(seed: bytes) -> Account:
    return Account(seed)


def from_mnemonic(phrase: str) -> Account:
    return Account(mnemonic.to_key(phrase))


def to_mnemonic(account: Account) -> str:
    return mnemonic.from_key(account.seed)

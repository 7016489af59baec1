# quorumsig/encoding.py
"""
Canonical byte encodings shared by signing and transaction ids.

Canonical form is MessagePack with map keys sorted and empty fields omitted,
so the same logical value always produces identical bytes. Encoding is done
with msgspec.
"""

import base64
import hashlib
from dataclasses import dataclass
from typing import Annotated, Any, Dict, Optional, Protocol, Type, TypeVar

import msgspec

from .errors import EncodingError

KEY_LEN = 32
SIGNATURE_LEN = 64
ADDRESS_CHECKSUM_LEN = 4

TX_PREFIX = b"TX"
BID_PREFIX = b"aB"
PROGRAM_PREFIX = b"Program"

_encoder = msgspec.msgpack.Encoder(order="sorted")


# ---------- hashing / base32 ----------

def sha512_256(data: bytes) -> bytes:
    """SHA-512/256: the 256-bit truncated member of the SHA-512 family."""
    return hashlib.new("sha512_256", data).digest()


def b32encode_nopad(data: bytes) -> str:
    return base64.b32encode(data).decode("ascii").rstrip("=")


def b32decode_nopad(text: str) -> bytes:
    pad = (-len(text)) % 8
    return base64.b32decode(text + "=" * pad)


# ---------- canonical msgpack ----------

def canonical_encode(obj: Any) -> bytes:
    try:
        return _encoder.encode(obj)
    except (msgspec.EncodeError, TypeError, OverflowError) as exc:
        raise EncodingError(f"cannot encode {type(obj).__name__}: {exc}") from exc


def canonical_decode(data: bytes) -> Any:
    try:
        return msgspec.msgpack.decode(data)
    except msgspec.DecodeError as exc:
        raise EncodingError(f"cannot decode msgpack: {exc}") from exc


def omit_empty(fields: Dict[str, Any]) -> Dict[str, Any]:
    """Drop zero values: None, 0, False, empty bytes/str/containers."""
    return {k: v for k, v in fields.items() if v}


# ---------- typed wire schemas ----------

# Incoming msgpack is untrusted: it is validated against these msgspec
# schemas before any value type is built from it.

Uint64 = Annotated[int, msgspec.Meta(ge=0, le=2**64 - 1)]
Uint8 = Annotated[int, msgspec.Meta(ge=0, le=255)]
KeyBytes = Annotated[bytes, msgspec.Meta(min_length=KEY_LEN, max_length=KEY_LEN)]
SigBytes = Annotated[bytes, msgspec.Meta(min_length=SIGNATURE_LEN, max_length=SIGNATURE_LEN)]

W = TypeVar("W")


def decode_as(data: bytes, schema: Type[W]) -> W:
    try:
        return msgspec.msgpack.decode(data, type=schema)
    except msgspec.DecodeError as exc:
        raise EncodingError(f"malformed {schema.__name__}: {exc}") from exc


def convert_as(obj: Any, schema: Type[W]) -> W:
    try:
        return msgspec.convert(obj, type=schema)
    except msgspec.ValidationError as exc:
        raise EncodingError(f"malformed {schema.__name__}: {exc}") from exc


class TransactionWire(msgspec.Struct):
    snd: KeyBytes
    fv: Uint64 = 0
    lv: Uint64 = 0
    gh: bytes = b""
    fee: Uint64 = 0
    rcv: Optional[KeyBytes] = None
    amt: Uint64 = 0
    gen: str = ""
    note: bytes = b""
    type: str = "pay"


class CanonicalEncodable(Protocol):
    """
    Anything that can hand the signer its canonical bytes.

    to_dict() is the msgpack map carried under "txn" when the signed value
    is put on the wire.
    """

    def bytes_to_sign(self) -> bytes:
        ...

    def to_dict(self) -> Dict[str, Any]:
        ...


# ---------- address ----------

@dataclass(frozen=True)
class Address:
    """An account's 32-byte Ed25519 public key."""

    public_key: bytes

    def __post_init__(self) -> None:
        if len(self.public_key) != KEY_LEN:
            raise ValueError(f"address must be {KEY_LEN} bytes, got {len(self.public_key)}")

    def encode(self) -> str:
        """Human-readable form: base32 of key + last 4 bytes of its SHA-512/256."""
        checksum = sha512_256(self.public_key)[-ADDRESS_CHECKSUM_LEN:]
        return b32encode_nopad(self.public_key + checksum)

    @classmethod
    def decode(cls, text: str) -> "Address":
        try:
            raw = b32decode_nopad(text.strip())
        except (ValueError, TypeError) as exc:
            raise ValueError(f"not a base32 address: {text!r}") from exc
        if len(raw) != KEY_LEN + ADDRESS_CHECKSUM_LEN:
            raise ValueError(f"address has wrong length: {text!r}")
        key, checksum = raw[:KEY_LEN], raw[KEY_LEN:]
        if sha512_256(key)[-ADDRESS_CHECKSUM_LEN:] != checksum:
            raise ValueError(f"address checksum mismatch: {text!r}")
        return cls(key)

    def __str__(self) -> str:
        return self.encode()


# ---------- transaction ----------

@dataclass(frozen=True)
class Transaction:
    """
    Minimal payment transaction.

    Field names on the wire follow the ledger's short keys
    (snd, rcv, amt, fee, fv, lv, gh, gen, note, type).
    """

    sender: Address
    first_valid: int
    last_valid: int
    genesis_hash: bytes
    fee: int = 0
    receiver: Optional[Address] = None
    amount: int = 0
    genesis_id: str = ""
    note: bytes = b""
    type: str = "pay"

    def to_dict(self) -> Dict[str, Any]:
        return omit_empty({
            "amt": self.amount,
            "fee": self.fee,
            "fv": self.first_valid,
            "gen": self.genesis_id,
            "gh": self.genesis_hash,
            "lv": self.last_valid,
            "note": self.note,
            "rcv": self.receiver.public_key if self.receiver else None,
            "snd": self.sender.public_key,
            "type": self.type,
        })

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "Transaction":
        return cls.from_wire(convert_as(d, TransactionWire))

    @classmethod
    def from_wire(cls, w: TransactionWire) -> "Transaction":
        return cls(
            sender=Address(w.snd),
            first_valid=w.fv,
            last_valid=w.lv,
            genesis_hash=w.gh,
            fee=w.fee,
            receiver=Address(w.rcv) if w.rcv else None,
            amount=w.amt,
            genesis_id=w.gen,
            note=w.note,
            type=w.type,
        )

    def encode(self) -> bytes:
        return canonical_encode(self.to_dict())

    def bytes_to_sign(self) -> bytes:
        return TX_PREFIX + self.encode()


def transaction_id(transaction: CanonicalEncodable) -> str:
    return b32encode_nopad(sha512_256(transaction.bytes_to_sign()))


# ---------- auction bids ----------

@dataclass(frozen=True)
class Bid:
    bidder: Address
    bid_currency: int
    max_price: int
    bid_id: int
    auction_key: Address
    auction_id: int

    def to_dict(self) -> Dict[str, Any]:
        return omit_empty({
            "aid": self.auction_id,
            "auc": self.auction_key.public_key,
            "bidder": self.bidder.public_key,
            "cur": self.bid_currency,
            "id": self.bid_id,
            "price": self.max_price,
        })

    def encode(self) -> bytes:
        return canonical_encode(self.to_dict())

    def bytes_to_sign(self) -> bytes:
        return BID_PREFIX + self.encode()


@dataclass(frozen=True)
class SignedBid:
    bid: Bid
    sig: bytes

    def to_dict(self) -> Dict[str, Any]:
        return {"bid": self.bid.to_dict(), "sig": self.sig}

    def encode(self) -> bytes:
        return canonical_encode(self.to_dict())

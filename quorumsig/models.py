# quorumsig/models.py
"""
Immutable value types for signed payloads.

A SignedTransaction carries exactly one authorization form:

    Unsigned()              nothing yet
    SingleSig(sig)          one Ed25519 signature by the sender
    LogicSig(lsig)          a signed (or multisigned) program
    MultiSig(msig)          an M-of-N multisig, possibly partial

Every type here has to_dict()/from_dict() for its canonical msgpack map.
Decoding goes through a msgspec wire schema first, so malformed input
always surfaces as EncodingError.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple, Union

import msgspec

from .encoding import (
    SIGNATURE_LEN,
    Address,
    CanonicalEncodable,
    KeyBytes,
    SigBytes,
    Transaction,
    TransactionWire,
    Uint8,
    canonical_encode,
    convert_as,
    decode_as,
    omit_empty,
    sha512_256,
    transaction_id,
)
from .errors import EncodingError

MULTISIG_ADDR_PREFIX = b"MultisigAddr"


def _check_sig(sig: Optional[bytes]) -> None:
    if sig is None:
        return
    if not isinstance(sig, bytes):
        raise ValueError(f"signature must be bytes, got {type(sig).__name__}")
    if len(sig) != SIGNATURE_LEN:
        raise ValueError(f"signature must be {SIGNATURE_LEN} bytes, got {len(sig)}")


# ---------- wire schemas ----------

class SubsigWire(msgspec.Struct):
    pk: KeyBytes
    s: Optional[SigBytes] = None


class MultisigWire(msgspec.Struct):
    subsig: List[SubsigWire] = []
    thr: Uint8 = 0
    v: Uint8 = 0


class LogicSigWire(msgspec.Struct):
    l: bytes = b""
    arg: List[bytes] = []
    sig: Optional[SigBytes] = None
    msig: Optional[MultisigWire] = None


class SignedTransactionWire(msgspec.Struct):
    txn: TransactionWire
    sig: Optional[SigBytes] = None
    lsig: Optional[LogicSigWire] = None
    msig: Optional[MultisigWire] = None


# ---------- multisig ----------

@dataclass(frozen=True)
class MultisigAddress:
    """Group policy: ordered member keys plus version and threshold."""

    version: int
    threshold: int
    public_keys: Tuple[Address, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "public_keys", tuple(self.public_keys))
        if not 1 <= self.version <= 255:
            raise ValueError(f"multisig version must fit in one byte, got {self.version}")
        if not 1 <= self.threshold <= len(self.public_keys):
            raise ValueError(
                f"threshold {self.threshold} out of range for {len(self.public_keys)} members"
            )
        if self.threshold > 255:
            raise ValueError("multisig threshold must fit in one byte")

    def address(self) -> Address:
        """The policy's own account address."""
        data = MULTISIG_ADDR_PREFIX + bytes([self.version, self.threshold])
        data += b"".join(k.public_key for k in self.public_keys)
        return Address(sha512_256(data))

    def __contains__(self, key: object) -> bool:
        return key in self.public_keys


@dataclass(frozen=True)
class MultisigSubsig:
    """One member slot; sig is None until that member signs."""

    key: Address
    sig: Optional[bytes] = None

    def __post_init__(self) -> None:
        _check_sig(self.sig)

    def to_dict(self) -> Dict[str, Any]:
        return omit_empty({"pk": self.key.public_key, "s": self.sig})

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "MultisigSubsig":
        return cls.from_wire(convert_as(d, SubsigWire))

    @classmethod
    def from_wire(cls, w: SubsigWire) -> "MultisigSubsig":
        return cls(Address(w.pk), w.s)


@dataclass(frozen=True)
class MultisigSignature:
    version: int
    threshold: int
    subsigs: Tuple[MultisigSubsig, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "subsigs", tuple(self.subsigs))

    def signed_count(self) -> int:
        return sum(1 for s in self.subsigs if s.sig is not None)

    def is_complete(self) -> bool:
        return self.signed_count() >= self.threshold

    def policy(self) -> MultisigAddress:
        return MultisigAddress(self.version, self.threshold, tuple(s.key for s in self.subsigs))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "subsig": [s.to_dict() for s in self.subsigs],
            "thr": self.threshold,
            "v": self.version,
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "MultisigSignature":
        return cls.from_wire(convert_as(d, MultisigWire))

    @classmethod
    def from_wire(cls, w: MultisigWire) -> "MultisigSignature":
        return cls(
            version=w.v,
            threshold=w.thr,
            subsigs=tuple(MultisigSubsig.from_wire(s) for s in w.subsig),
        )

    def encode(self) -> bytes:
        return canonical_encode(self.to_dict())


# ---------- logic signatures ----------

@dataclass(frozen=True)
class LogicSignature:
    """A program plus its authorization: a single sig, a multisig, or neither."""

    logic: bytes
    args: Tuple[bytes, ...] = ()
    sig: Optional[bytes] = None
    msig: Optional[MultisigSignature] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "args", tuple(self.args))
        _check_sig(self.sig)
        if self.sig is not None and self.msig is not None:
            raise ValueError("logic signature cannot carry both sig and msig")

    def to_dict(self) -> Dict[str, Any]:
        return omit_empty({
            "arg": list(self.args),
            "l": self.logic,
            "msig": self.msig.to_dict() if self.msig else None,
            "sig": self.sig,
        })

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "LogicSignature":
        return cls.from_wire(convert_as(d, LogicSigWire))

    @classmethod
    def from_wire(cls, w: LogicSigWire) -> "LogicSignature":
        try:
            return cls(
                logic=w.l,
                args=tuple(w.arg),
                sig=w.sig,
                msig=MultisigSignature.from_wire(w.msig) if w.msig is not None else None,
            )
        except ValueError as exc:
            raise EncodingError(f"malformed logic signature: {exc}") from exc

    def encode(self) -> bytes:
        return canonical_encode(self.to_dict())


# ---------- authorization variants ----------

@dataclass(frozen=True)
class Unsigned:
    pass


@dataclass(frozen=True)
class SingleSig:
    sig: bytes

    def __post_init__(self) -> None:
        _check_sig(self.sig)


@dataclass(frozen=True)
class LogicSig:
    lsig: LogicSignature


@dataclass(frozen=True)
class MultiSig:
    msig: MultisigSignature


Authorization = Union[Unsigned, SingleSig, LogicSig, MultiSig]


@dataclass(frozen=True)
class SignedTransaction:
    """
    A transaction plus proof of authorization.

    transaction_id is derived from the transaction's canonical bytes when
    not supplied. Anything with bytes_to_sign() and to_dict() can be
    carried; decoding always yields a Transaction.
    """

    transaction: CanonicalEncodable
    authorization: Authorization = field(default_factory=Unsigned)
    transaction_id: str = ""

    def __post_init__(self) -> None:
        if not self.transaction_id:
            object.__setattr__(self, "transaction_id", transaction_id(self.transaction))

    @property
    def sig(self) -> Optional[bytes]:
        auth = self.authorization
        return auth.sig if isinstance(auth, SingleSig) else None

    @property
    def logicsig(self) -> Optional[LogicSignature]:
        auth = self.authorization
        return auth.lsig if isinstance(auth, LogicSig) else None

    @property
    def multisig(self) -> Optional[MultisigSignature]:
        auth = self.authorization
        return auth.msig if isinstance(auth, MultiSig) else None

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {"txn": self.transaction.to_dict()}
        auth = self.authorization
        if isinstance(auth, SingleSig):
            d["sig"] = auth.sig
        elif isinstance(auth, LogicSig):
            d["lsig"] = auth.lsig.to_dict()
        elif isinstance(auth, MultiSig):
            d["msig"] = auth.msig.to_dict()
        return d

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "SignedTransaction":
        return cls.from_wire(convert_as(d, SignedTransactionWire))

    @classmethod
    def from_wire(cls, w: SignedTransactionWire) -> "SignedTransaction":
        present = [k for k in ("sig", "lsig", "msig") if getattr(w, k) is not None]
        if len(present) > 1:
            raise EncodingError(f"signed transaction has more than one authorization: {present}")

        auth: Authorization = Unsigned()
        if w.sig is not None:
            auth = SingleSig(w.sig)
        elif w.lsig is not None:
            auth = LogicSig(LogicSignature.from_wire(w.lsig))
        elif w.msig is not None:
            auth = MultiSig(MultisigSignature.from_wire(w.msig))
        return cls(Transaction.from_wire(w.txn), auth)

    def encode(self) -> bytes:
        return canonical_encode(self.to_dict())

    @classmethod
    def decode(cls, data: bytes) -> "SignedTransaction":
        return cls.from_wire(decode_as(data, SignedTransactionWire))

import pytest
from nacl import signing

from quorumsig.core import from_seed
from quorumsig.encoding import Address, Bid, Transaction, b32encode_nopad, canonical_decode, sha512_256
from quorumsig.errors import EncodingError
from quorumsig.models import LogicSig, LogicSignature, SingleSig
from quorumsig.signing import (
    sign,
    sign_bid,
    sign_logic,
    sign_logic_transaction,
    sign_program,
    sign_transaction,
    verify_program,
    verify_signature,
)


def _account(fill: int = 0):
    return from_seed(bytes([fill]) * 32)


def _tx(sender: Address, note: bytes = b"") -> Transaction:
    return Transaction(
        sender=sender,
        fee=1000,
        first_valid=1,
        last_valid=1001,
        genesis_hash=bytes(32),
        note=note,
    )


def test_sign_matches_nacl_and_is_64_bytes():
    account = _account()
    sig = sign(account, b"hello")
    assert len(sig) == 64
    assert sig == signing.SigningKey(bytes(32)).sign(b"hello").signature
    assert verify_signature(account.address, b"hello", sig)


def test_sign_is_deterministic():
    assert sign(_account(), b"hello") == sign(_account(), b"hello")


def test_program_signature_is_domain_separated():
    account = _account()
    program = b"\x01\x20\x01\x01\x22"
    assert sign_program(account, program) == sign(account, b"Program" + program)
    assert sign_program(account, program) != sign(account, program)
    assert verify_program(account.public_key, program, sign_program(account, program))


def test_changing_one_program_byte_changes_signature():
    account = _account()
    assert sign_program(account, b"\x01\x02") != sign_program(account, b"\x01\x03")


def test_sign_bid_prefixes_ab():
    account = _account()
    bid = Bid(
        bidder=account.address,
        bid_currency=1000,
        max_price=5,
        bid_id=1,
        auction_key=Address(bytes(32)),
        auction_id=3,
    )
    signed = sign_bid(account, bid)
    assert signed.bid == bid
    assert signed.sig == sign(account, b"aB" + bid.encode())
    assert verify_signature(account.address, b"aB" + bid.encode(), signed.sig)


def test_sign_transaction_signature_and_id_share_bytes():
    account = _account()
    tx = _tx(account.address)
    data = tx.bytes_to_sign()

    signed = sign_transaction(account, tx)

    assert isinstance(signed.authorization, SingleSig)
    assert signed.sig == sign(account, data)
    assert signed.transaction_id == b32encode_nopad(sha512_256(data))
    assert signed.multisig is None and signed.logicsig is None
    assert signed.transaction == tx


def test_sign_transaction_accepts_any_canonical_encodable():
    class Raw:
        def __init__(self, data):
            self.data = data

        def bytes_to_sign(self):
            return self.data

        def to_dict(self):
            return {"raw": self.data}

    account = _account()
    signed = sign_transaction(account, Raw(b"TX\x80"))
    assert signed.sig == sign(account, b"TX\x80")

    wire = canonical_decode(signed.encode())
    assert wire == {"sig": signed.sig, "txn": {"raw": b"TX\x80"}}
    assert signed.transaction_id == b32encode_nopad(sha512_256(b"TX\x80"))


def test_encoding_errors_propagate():
    class Broken:
        def bytes_to_sign(self):
            raise EncodingError("cannot encode")

    with pytest.raises(EncodingError):
        sign_transaction(_account(), Broken())


def test_sign_logic_and_logic_transaction():
    account = _account()
    lsig = sign_logic(account, LogicSignature(b"\x01\x20\x01\x01\x22"))
    assert lsig.sig == sign_program(account, lsig.logic)
    assert lsig.msig is None

    signed = sign_logic_transaction(lsig, _tx(account.address))
    assert isinstance(signed.authorization, LogicSig)
    assert signed.logicsig == lsig
    assert signed.sig is None


def test_verify_rejects_tampering():
    account = _account()
    sig = sign(account, b"hello")
    assert not verify_signature(account.address, b"hellp", sig)
    assert not verify_signature(_account(1).address, b"hello", sig)
    assert not verify_signature(account.address, b"hello", sig[:10])

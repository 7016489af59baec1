# quorumsig/signing.py
"""
Domain-separated Ed25519 signing.

    sign              raw bytes, no prefix
    sign_program      b"Program" || program
    sign_bid          b"aB" || canonical bid
    sign_transaction  b"TX" || canonical transaction (prefix added by the
                      transaction's bytes_to_sign())

Signatures are deterministic: same account + same payload -> same 64 bytes.
"""

from dataclasses import replace
from typing import Union

from nacl import signing
from nacl.exceptions import BadSignatureError

from .core import Account
from .encoding import (
    PROGRAM_PREFIX,
    Address,
    Bid,
    CanonicalEncodable,
    SignedBid,
    b32encode_nopad,
    sha512_256,
)
from .models import LogicSig, LogicSignature, SignedTransaction, SingleSig


def sign(account: Account, payload: bytes) -> bytes:
    return account.signing_key.sign(payload).signature


def sign_program(account: Account, program: bytes) -> bytes:
    return sign(account, PROGRAM_PREFIX + program)


def sign_bid(account: Account, bid: Bid) -> SignedBid:
    return SignedBid(bid=bid, sig=sign(account, bid.bytes_to_sign()))


def sign_transaction(account: Account, transaction: CanonicalEncodable) -> SignedTransaction:
    """
    Sign a transaction as its single signer.

    The signature and the transaction id are computed over the same
    canonical bytes, encoded once.
    """
    data = transaction.bytes_to_sign()
    sig = sign(account, data)
    txid = b32encode_nopad(sha512_256(data))
    return SignedTransaction(
        transaction=transaction,
        authorization=SingleSig(sig),
        transaction_id=txid,
    )


def sign_logic(account: Account, lsig: LogicSignature) -> LogicSignature:
    """Delegate a program to this account with a single signature."""
    return replace(lsig, sig=sign_program(account, lsig.logic), msig=None)


def sign_logic_transaction(lsig: LogicSignature, transaction: CanonicalEncodable) -> SignedTransaction:
    return SignedTransaction(
        transaction=transaction,
        authorization=LogicSig(lsig),
    )


def verify_signature(public_key: Union[Address, bytes], payload: bytes, signature: bytes) -> bool:
    """
    Check an Ed25519 signature.

    Returns:
        True if valid, False otherwise.
    """
    if isinstance(public_key, Address):
        public_key = public_key.public_key
    try:
        signing.VerifyKey(public_key).verify(payload, signature)
    except (BadSignatureError, ValueError):
        return False
    return True


def verify_program(public_key: Union[Address, bytes], program: bytes, signature: bytes) -> bool:
    return verify_signature(public_key, PROGRAM_PREFIX + program, signature)

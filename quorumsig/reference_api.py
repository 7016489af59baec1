"""
Stable reference API for quorumsig test vectors.

This wraps the internal core + signing + multisig implementation into a
minimal, stable surface that the vector generator and tests can depend on.
Everything goes in and out as hex or plain strings so the vectors can be
checked from other languages.
"""

from typing import Any, Dict, List, cast

from quorumsig.core import from_seed as _from_seed
from quorumsig.core import to_mnemonic as _to_mnemonic
from quorumsig.encoding import Address, Transaction
from quorumsig.models import MultisigAddress, SingleSig
from quorumsig.signing import sign_program as _sign_program
from quorumsig.signing import sign_transaction as _sign_transaction


def account_vector(seed: bytes) -> Dict[str, str]:
    """
    Public data for the account derived from a 32-byte seed.
    """
    with _from_seed(seed) as account:
        return {
            "pk_hex": account.public_key.hex(),
            "address": account.address.encode(),
            "mnemonic": _to_mnemonic(account),
        }


def program_signature_hex(seed: bytes, program: bytes) -> str:
    with _from_seed(seed) as account:
        return _sign_program(account, program).hex()


def transaction_from_vector(tx: Dict[str, Any]) -> Transaction:
    """
    Build a Transaction from its vector description:
    {"sender_hex", "receiver_hex", "amount", "fee", "first_valid",
     "last_valid", "genesis_hash_hex", "genesis_id", "note_hex"}
    """
    receiver = tx.get("receiver_hex")
    return Transaction(
        sender=Address(bytes.fromhex(tx["sender_hex"])),
        receiver=Address(bytes.fromhex(receiver)) if receiver else None,
        amount=tx.get("amount", 0),
        fee=tx.get("fee", 0),
        first_valid=tx["first_valid"],
        last_valid=tx["last_valid"],
        genesis_hash=bytes.fromhex(tx["genesis_hash_hex"]),
        genesis_id=tx.get("genesis_id", ""),
        note=bytes.fromhex(tx.get("note_hex", "")),
    )


def signed_transaction_vector(seed: bytes, tx: Transaction) -> Dict[str, str]:
    with _from_seed(seed) as account:
        signed = _sign_transaction(account, tx)
    sig = cast(SingleSig, signed.authorization).sig
    return {
        "bytes_to_sign_hex": tx.bytes_to_sign().hex(),
        "sig_hex": sig.hex(),
        "txid": signed.transaction_id,
    }


def multisig_address(version: int, threshold: int, pk_hexes: List[str]) -> str:
    keys = tuple(Address(bytes.fromhex(h)) for h in pk_hexes)
    return MultisigAddress(version, threshold, keys).address().encode()

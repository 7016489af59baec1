# quorumsig/multisig.py
"""
M-of-N multisig: sign, append, and merge partial signatures.

A multisig moves from unsigned to partially signed to complete, where
"complete" just means signed_count() >= threshold. Nothing here waits for
more signatures; each call returns a new value with one slot changed, or
the union of several partial values.

Slot order is the policy's member order and must be identical on every
participant. Merging never reorders slots.
"""

import logging
from dataclasses import replace
from typing import List, Optional, Sequence, Tuple, cast

from .config import get_settings
from .core import Account
from .encoding import Address, Transaction
from .errors import (
    InsufficientTransactions,
    InvalidNumberOfSubsignatures,
    InvalidPublicKeyInMultisig,
    InvalidSecretKeyInMultisig,
    InvalidSenderInMultisig,
    InvalidSubsignature,
    MismatchingSignatures,
)
from .models import (
    LogicSignature,
    MultiSig,
    MultisigAddress,
    MultisigSignature,
    MultisigSubsig,
    SignedTransaction,
    SingleSig,
)
from .signing import sign_program, sign_transaction, verify_signature

log = logging.getLogger(__name__)


def _slots_for(policy: MultisigAddress, key: Address, sig: bytes) -> Tuple[MultisigSubsig, ...]:
    return tuple(MultisigSubsig(k, sig if k == key else None) for k in policy.public_keys)


# ---------- logic signatures ----------

def sign_logic_msig(
    account: Account,
    lsig: LogicSignature,
    policy: MultisigAddress,
) -> LogicSignature:
    """
    Start a multisig over lsig's program with this account's slot filled.

    Raises:
        InvalidSecretKeyInMultisig: account is not a member of policy.
    """
    if account.address not in policy:
        raise InvalidSecretKeyInMultisig()
    sig = sign_program(account, lsig.logic)
    msig = MultisigSignature(policy.version, policy.threshold, _slots_for(policy, account.address, sig))
    return replace(lsig, sig=None, msig=msig)


def append_to_logic_msig(account: Account, lsig: LogicSignature) -> LogicSignature:
    """
    Fill (or overwrite) this account's slot in an existing logic multisig.

    Raises:
        InvalidSecretKeyInMultisig: lsig has no multisig, or no slot for this account.
    """
    msig = lsig.msig
    if msig is None:
        raise InvalidSecretKeyInMultisig("Logic signature carries no multisig to append to.")
    me = account.address
    if all(s.key != me for s in msig.subsigs):
        raise InvalidSecretKeyInMultisig()

    sig = sign_program(account, lsig.logic)
    subsigs = tuple(MultisigSubsig(s.key, sig) if s.key == me else s for s in msig.subsigs)
    return replace(lsig, msig=replace(msig, subsigs=subsigs))


# ---------- transactions ----------

def sign_multisig_transaction(
    account: Account,
    policy: MultisigAddress,
    transaction: Transaction,
) -> SignedTransaction:
    """
    Sign a transaction sent from `policy`'s address, as one of its members.

    Raises:
        InvalidSenderInMultisig: policy address is not the transaction sender.
        InvalidSecretKeyInMultisig: account is not a member of policy.
    """
    if policy.address() != transaction.sender:
        raise InvalidSenderInMultisig()
    if account.address not in policy:
        raise InvalidSecretKeyInMultisig()

    single = sign_transaction(account, transaction)
    sig = cast(SingleSig, single.authorization).sig
    msig = MultisigSignature(
        policy.version, policy.threshold, _slots_for(policy, account.address, sig)
    )
    return SignedTransaction(
        transaction=transaction,
        authorization=MultiSig(msig),
        transaction_id=single.transaction_id,
    )


def append_multisig_transaction(
    account: Account,
    policy: MultisigAddress,
    signed: SignedTransaction,
) -> SignedTransaction:
    """Sign signed.transaction fresh and merge it with `signed`."""
    fresh = sign_multisig_transaction(account, policy, signed.transaction)
    return merge_multisig_transactions([fresh, signed])


def _require_msig(tx: SignedTransaction, index: int, expected: int) -> MultisigSignature:
    msig = tx.multisig
    if msig is None:
        raise InvalidNumberOfSubsignatures(f"Transaction {index} carries no multisig.")
    if len(msig.subsigs) != expected:
        raise InvalidNumberOfSubsignatures(
            f"Transaction {index} has {len(msig.subsigs)} subsignatures, expected {expected}."
        )
    return msig


def merge_multisig_transactions(
    transactions: Sequence[SignedTransaction],
    verify: Optional[bool] = None,
) -> SignedTransaction:
    """
    Merge partially signed multisig transactions into one.

    The first transaction is the accumulator. Each later one must have the
    same member keys in the same order; its signed slots are copied into
    empty accumulator slots, and must equal any slot already filled.
    Everything other than the subsignatures comes from the first transaction.

    With verify=True (default: Settings.verify_on_merge) every signature is
    also checked against its slot key before it is accepted.

    Raises:
        InsufficientTransactions: fewer than two inputs.
        InvalidNumberOfSubsignatures: an input's slot count differs, or it has no multisig.
        InvalidPublicKeyInMultisig: inputs disagree on a slot's member key.
        MismatchingSignatures: two different signatures for the same slot.
        InvalidSubsignature: verification is on and a signature does not check out.
    """
    if len(transactions) < 2:
        raise InsufficientTransactions()
    if verify is None:
        verify = get_settings().verify_on_merge

    merged = transactions[0]
    first = merged.multisig
    if first is None:
        raise InvalidNumberOfSubsignatures("Transaction 0 carries no multisig.")
    slots: List[MultisigSubsig] = list(first.subsigs)

    message = merged.transaction.bytes_to_sign() if verify else b""

    def check(sub: MultisigSubsig, index: int, slot: int) -> None:
        if verify and sub.sig is not None and not verify_signature(sub.key, message, sub.sig):
            raise InvalidSubsignature(
                f"Subsignature in slot {slot} of transaction {index} does not verify."
            )

    for slot, sub in enumerate(slots):
        check(sub, 0, slot)

    for index, tx in enumerate(transactions[1:], start=1):
        msig = _require_msig(tx, index, len(slots))
        for slot, (mine, theirs) in enumerate(zip(slots, msig.subsigs)):
            if mine.key != theirs.key:
                raise InvalidPublicKeyInMultisig(
                    f"Transaction {index} has a different public key in slot {slot}."
                )
            if theirs.sig is None:
                continue
            if mine.sig is None:
                check(theirs, index, slot)
                slots[slot] = theirs
            elif mine.sig != theirs.sig:
                raise MismatchingSignatures(
                    f"Transaction {index} has a different signature in slot {slot}."
                )

    result = replace(first, subsigs=tuple(slots))
    log.debug(
        "merged %d transactions for %s: %d/%d slots signed (threshold %d)",
        len(transactions),
        merged.transaction_id,
        result.signed_count(),
        len(slots),
        result.threshold,
    )
    return replace(merged, authorization=MultiSig(result))

# quorumsig/errors.py
"""
Typed error classes for quorumsig.

Every fallible operation raises one of these so callers can catch a specific
failure mode, or the base `QuorumSigError`. Nothing here is retried: each
error means caller misuse or corrupted data.
"""

from typing import Optional

__all__ = [
    "QuorumSigError",
    "CryptoError",
    "InvalidKeyLength",
    "InvalidMnemonicLength",
    "InvalidWordsInMnemonic",
    "InvalidChecksum",
    "MultisigError",
    "InvalidSecretKeyInMultisig",
    "InvalidSenderInMultisig",
    "InsufficientTransactions",
    "InvalidNumberOfSubsignatures",
    "InvalidPublicKeyInMultisig",
    "MismatchingSignatures",
    "InvalidSubsignature",
    "EncodingError",
]


class QuorumSigError(Exception):
    """Base class for all quorumsig errors."""

    default_message = "quorumsig error"

    def __init__(self, message: Optional[str] = None) -> None:
        super().__init__(message or self.default_message)


# ---------- key material / mnemonic ----------

class CryptoError(QuorumSigError, ValueError):
    """Seed or mnemonic could not be turned into key material."""


class InvalidKeyLength(CryptoError):
    default_message = "Key length is invalid."


class InvalidMnemonicLength(CryptoError):
    default_message = "Mnemonic length is invalid."


class InvalidWordsInMnemonic(CryptoError):
    default_message = "Mnemonic contains invalid words."


class InvalidChecksum(CryptoError):
    default_message = "Invalid checksum."


# ---------- multisig ----------

class MultisigError(QuorumSigError):
    """A multisig sign, append or merge request is inconsistent."""


class InvalidSecretKeyInMultisig(MultisigError):
    default_message = "Account is not a member of the multisig."


class InvalidSenderInMultisig(MultisigError):
    default_message = "Multisig address does not match the transaction sender."


class InsufficientTransactions(MultisigError):
    default_message = "At least two transactions are required to merge."


class InvalidNumberOfSubsignatures(MultisigError):
    default_message = "Multisig transactions have different numbers of subsignatures."


class InvalidPublicKeyInMultisig(MultisigError):
    default_message = "Multisig transactions disagree on a member public key."


class MismatchingSignatures(MultisigError):
    default_message = "Multisig transactions hold different signatures for the same member."


class InvalidSubsignature(MultisigError):
    """Only raised when merge-time verification is switched on."""

    default_message = "Subsignature does not verify against its member key."


# ---------- encoding ----------

class EncodingError(QuorumSigError, ValueError):
    default_message = "Canonical encoding failed."

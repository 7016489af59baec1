# quorumsig/__init__.py

from .core import (
    Account,
    generate,
    from_seed,
    from_mnemonic,
    to_mnemonic,
)
from .encoding import (
    Address,
    Bid,
    SignedBid,
    Transaction,
)
from .models import (
    LogicSig,
    LogicSignature,
    MultiSig,
    MultisigAddress,
    MultisigSignature,
    MultisigSubsig,
    SignedTransaction,
    SingleSig,
    Unsigned,
)
from .signing import (
    sign,
    sign_program,
    sign_bid,
    sign_transaction,
    sign_logic,
    sign_logic_transaction,
    verify_signature,
)
from .multisig import (
    sign_logic_msig,
    append_to_logic_msig,
    sign_multisig_transaction,
    append_multisig_transaction,
    merge_multisig_transactions,
)

__all__ = [
    "Account",
    "generate",
    "from_seed",
    "from_mnemonic",
    "to_mnemonic",
    "Address",
    "Bid",
    "SignedBid",
    "Transaction",
    "LogicSig",
    "LogicSignature",
    "MultiSig",
    "MultisigAddress",
    "MultisigSignature",
    "MultisigSubsig",
    "SignedTransaction",
    "SingleSig",
    "Unsigned",
    "sign",
    "sign_program",
    "sign_bid",
    "sign_transaction",
    "sign_logic",
    "sign_logic_transaction",
    "verify_signature",
    "sign_logic_msig",
    "append_to_logic_msig",
    "sign_multisig_transaction",
    "append_multisig_transaction",
    "merge_multisig_transactions",
]

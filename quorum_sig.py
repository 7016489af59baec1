#!/usr/bin/env python3
"""

quorumsig CLI

Thin wrapper around the quorumsig library:
- Account generation and mnemonic recovery
- Multisig policy addresses
- Program signing
- Merging partially signed multisig transactions

Keep mnemonics offline. Anything printed by `generate` is a secret.


"""

from quorumsig.cli import main


if __name__ == "__main__":
    main()

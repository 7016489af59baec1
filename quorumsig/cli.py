#!/usr/bin/env python3
import argparse
import base64
import logging
import sys
from pathlib import Path

from .config import get_settings
from .core import from_mnemonic, generate, to_mnemonic
from .encoding import Address
from .errors import QuorumSigError
from .models import MultisigAddress, SignedTransaction
from .multisig import merge_multisig_transactions
from .signing import sign_program


def cmd_generate(args):
    """
    quorumsig generate
    """
    with generate() as account:
        print("=== New account (STORE THE MNEMONIC OFFLINE) ===")
        print(f"Address:  {account.address}")
        print(f"Mnemonic: {to_mnemonic(account)}")


def cmd_address(args):
    """
    quorumsig address --mnemonic "<25 words>"
    """
    with from_mnemonic(args.mnemonic) as account:
        print(account.address)


def cmd_multisig_address(args):
    """
    quorumsig multisig-address --threshold 2 ADDR ADDR ADDR
    """
    try:
        keys = tuple(Address.decode(a) for a in args.addresses)
        policy = MultisigAddress(args.version, args.threshold, keys)
    except ValueError as exc:
        print(f"error: {exc}", file=sys.stderr)
        sys.exit(1)
    print(policy.address())


def cmd_sign_program(args):
    """
    quorumsig sign-program --mnemonic "<25 words>" program.teal.tok
    """
    program = _read_file(args.file)
    with from_mnemonic(args.mnemonic) as account:
        sig = sign_program(account, program)
    print(base64.b64encode(sig).decode("ascii"))


def cmd_merge(args):
    """
    quorumsig merge part1.msig part2.msig --out merged.msig
    """
    parts = [SignedTransaction.decode(_read_file(f)) for f in args.files]
    merged = merge_multisig_transactions(parts, verify=args.verify or None)
    Path(args.out).write_bytes(merged.encode())

    msig = merged.multisig
    print(f"Transaction id: {merged.transaction_id}")
    print(f"Signed: {msig.signed_count()}/{len(msig.subsigs)} (threshold {msig.threshold})")
    if msig.is_complete():
        print("complete")


def _read_file(name):
    path = Path(name)
    if not path.exists():
        print(f"error: file not found: {path}", file=sys.stderr)
        sys.exit(1)
    return path.read_bytes()


def build_parser():
    p = argparse.ArgumentParser(prog="quorumsig", description="Ed25519 account and multisig CLI")
    sub = p.add_subparsers(dest="cmd")

    # generate
    g = sub.add_parser("generate", help="generate a new account")
    g.set_defaults(func=cmd_generate)

    # address
    a = sub.add_parser("address", help="print the address for a mnemonic")
    a.add_argument("--mnemonic", required=True, help="25-word mnemonic")
    a.set_defaults(func=cmd_address)

    # multisig-address
    m = sub.add_parser("multisig-address", help="derive a multisig policy address")
    m.add_argument("--threshold", type=int, required=True, help="signatures required")
    m.add_argument("--version", type=int, default=1, help="multisig version (default: 1)")
    m.add_argument("addresses", nargs="+", help="member addresses, in order")
    m.set_defaults(func=cmd_multisig_address)

    # sign-program
    s = sub.add_parser("sign-program", help="sign a compiled program")
    s.add_argument("--mnemonic", required=True, help="25-word mnemonic")
    s.add_argument("file", help="path to program bytes")
    s.set_defaults(func=cmd_sign_program)

    # merge
    r = sub.add_parser("merge", help="merge partially signed multisig transactions")
    r.add_argument("files", nargs="+", help="encoded signed transactions")
    r.add_argument("--out", required=True, help="where to write the merged transaction")
    r.add_argument("--verify", action="store_true", help="verify every subsignature")
    r.set_defaults(func=cmd_merge)

    return p


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(level=get_settings().log_level)

    if not hasattr(args, "func"):
        parser.print_help()
        sys.exit(1)

    try:
        args.func(args)
    except QuorumSigError as exc:
        print(f"error: {exc}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()

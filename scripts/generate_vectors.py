#!/usr/bin/env python3
import json
from pathlib import Path
from typing import Any, Dict

# Project imports: use the stable reference API
from quorumsig.reference_api import (
    account_vector,
    program_signature_hex,
    signed_transaction_vector,
    transaction_from_vector,
)

ROOT = Path(__file__).resolve().parents[1]
VECTORS_PATH = ROOT / "tests" / "vectors" / "quorumsig.v1.json"


def load_vectors() -> Dict[str, Any]:
    with VECTORS_PATH.open("r", encoding="utf-8") as f:
        return json.load(f)


def save_vectors(data: Dict[str, Any]) -> None:
    # Pretty-print and keep key order stable
    with VECTORS_PATH.open("w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, sort_keys=False)
        f.write("\n")


def seeds_by_id(data: Dict[str, Any]) -> Dict[str, bytes]:
    return {a["id"]: bytes.fromhex(a["seed_hex"]) for a in data["accounts"]}


def populate_accounts(data: Dict[str, Any]) -> None:
    for account in data["accounts"]:
        account.update(account_vector(bytes.fromhex(account["seed_hex"])))


def populate_programs(data: Dict[str, Any]) -> None:
    seeds = seeds_by_id(data)
    for prog in data.get("programs", []):
        seed = seeds[prog["account"]]
        prog["sig_hex"] = program_signature_hex(seed, bytes.fromhex(prog["program_hex"]))


def populate_transactions(data: Dict[str, Any]) -> None:
    seeds = seeds_by_id(data)
    for entry in data.get("transactions", []):
        seed = seeds[entry["account"]]
        tx = transaction_from_vector(entry["tx"])
        entry.update(signed_transaction_vector(seed, tx))


def main() -> None:
    if not VECTORS_PATH.exists():
        raise SystemExit(f"Vector file not found: {VECTORS_PATH}")

    data = load_vectors()

    populate_accounts(data)
    populate_programs(data)
    populate_transactions(data)

    save_vectors(data)
    print(f"Updated vectors written to {VECTORS_PATH}")


if __name__ == "__main__":
    main()

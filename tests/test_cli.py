import base64

import pytest

from quorumsig.cli import main
from quorumsig.config import reset_settings
from quorumsig.core import from_seed, to_mnemonic
from quorumsig.encoding import Transaction, canonical_decode, canonical_encode
from quorumsig.models import MultisigAddress, SignedTransaction
from quorumsig.multisig import sign_multisig_transaction
from quorumsig.signing import sign_program


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    monkeypatch.delenv("QUORUMSIG_VERIFY_ON_MERGE", raising=False)
    monkeypatch.delenv("QUORUMSIG_LOG_LEVEL", raising=False)
    reset_settings()
    yield
    reset_settings()


def _accounts(n: int = 3):
    return [from_seed(bytes([i + 40]) * 32) for i in range(n)]


def test_generate(capsys):
    main(["generate"])
    out = capsys.readouterr().out
    assert "Address:" in out
    mnemonic_line = next(line for line in out.splitlines() if line.startswith("Mnemonic:"))
    assert len(mnemonic_line.split()) == 26


def test_address_from_mnemonic(capsys):
    account, = _accounts(1)
    main(["address", "--mnemonic", to_mnemonic(account)])
    assert capsys.readouterr().out.strip() == account.address.encode()


def test_bad_mnemonic_exits_with_error(capsys):
    with pytest.raises(SystemExit) as exc:
        main(["address", "--mnemonic", "abandon abandon"])
    assert exc.value.code == 1
    assert "Mnemonic length is invalid." in capsys.readouterr().err


def test_multisig_address(capsys):
    k1, k2, k3 = _accounts()
    policy = MultisigAddress(1, 2, (k1.address, k2.address, k3.address))
    main(["multisig-address", "--threshold", "2", *(str(k.address) for k in (k1, k2, k3))])
    assert capsys.readouterr().out.strip() == policy.address().encode()


def test_multisig_address_rejects_bad_threshold(capsys):
    k1, = _accounts(1)
    with pytest.raises(SystemExit):
        main(["multisig-address", "--threshold", "2", str(k1.address)])
    assert "error:" in capsys.readouterr().err


def test_sign_program(tmp_path, capsys):
    account, = _accounts(1)
    program = tmp_path / "prog.bin"
    program.write_bytes(b"\x01\x20\x01\x01\x22")

    main(["sign-program", "--mnemonic", to_mnemonic(account), str(program)])

    sig = base64.b64decode(capsys.readouterr().out.strip())
    assert sig == sign_program(account, b"\x01\x20\x01\x01\x22")


def test_merge(tmp_path, capsys):
    k1, k2, k3 = _accounts()
    policy = MultisigAddress(1, 2, (k1.address, k2.address, k3.address))
    tx = Transaction(sender=policy.address(), fee=1000, first_valid=1, last_valid=100, genesis_hash=bytes(32))
    parts = []
    for i, k in enumerate((k1, k3)):
        path = tmp_path / f"part{i}.msig"
        path.write_bytes(sign_multisig_transaction(k, policy, tx).encode())
        parts.append(str(path))
    out_path = tmp_path / "merged.msig"

    main(["merge", *parts, "--out", str(out_path), "--verify"])

    out = capsys.readouterr().out
    merged = SignedTransaction.decode(out_path.read_bytes())
    assert merged.multisig.signed_count() == 2
    assert merged.transaction_id in out
    assert "Signed: 2/3 (threshold 2)" in out
    assert "complete" in out


def test_merge_single_file_is_rejected(tmp_path, capsys):
    k1, k2, _ = _accounts()
    policy = MultisigAddress(1, 1, (k1.address, k2.address))
    tx = Transaction(sender=policy.address(), fee=1000, first_valid=1, last_valid=100, genesis_hash=bytes(32))
    path = tmp_path / "only.msig"
    path.write_bytes(sign_multisig_transaction(k1, policy, tx).encode())

    with pytest.raises(SystemExit):
        main(["merge", str(path), "--out", str(tmp_path / "out.msig")])
    assert "At least two transactions" in capsys.readouterr().err


def test_missing_file(tmp_path, capsys):
    with pytest.raises(SystemExit):
        main(["merge", str(tmp_path / "nope"), str(tmp_path / "nope2"), "--out", str(tmp_path / "o")])
    assert "file not found" in capsys.readouterr().err


def test_no_command_prints_help(capsys):
    with pytest.raises(SystemExit):
        main([])
    assert "usage" in capsys.readouterr().out


def test_merge_malformed_file_reports_error(tmp_path, capsys):
    k1, k2, k3 = _accounts()
    policy = MultisigAddress(1, 2, (k1.address, k2.address, k3.address))
    tx = Transaction(sender=policy.address(), fee=1000, first_valid=1, last_valid=100, genesis_hash=bytes(32))
    good = tmp_path / "good.msig"
    good.write_bytes(sign_multisig_transaction(k1, policy, tx).encode())

    wire = canonical_decode(good.read_bytes())
    wire["msig"]["subsig"][0]["s"] = 5
    bad = tmp_path / "bad.msig"
    bad.write_bytes(canonical_encode(wire))

    with pytest.raises(SystemExit) as exc:
        main(["merge", str(good), str(bad), "--out", str(tmp_path / "out.msig")])
    assert exc.value.code == 1
    err = capsys.readouterr().err
    assert err.startswith("error:")
    assert "Traceback" not in err

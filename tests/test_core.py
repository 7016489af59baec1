import pytest
from nacl import signing

from quorumsig.core import Account, from_seed, generate
from quorumsig.encoding import Address
from quorumsig.errors import InvalidKeyLength
from quorumsig.signing import sign


def _seed(n: int = 32) -> bytes:
    return bytes(range(n))


def test_from_seed_is_deterministic():
    a = from_seed(_seed())
    b = from_seed(_seed())
    assert a.address == b.address
    assert a.public_key == signing.SigningKey(_seed()).verify_key.encode()
    assert sign(a, b"payload") == sign(b, b"payload")


@pytest.mark.parametrize("n", [0, 16, 31, 33, 64])
def test_from_seed_rejects_wrong_length(n):
    with pytest.raises(InvalidKeyLength):
        from_seed(b"\x01" * n)


def test_generate_uses_injected_rng():
    calls = []

    def rng(n):
        calls.append(n)
        return _seed(n)

    account = generate(rng=rng)
    assert calls == [32]
    assert account.address == from_seed(_seed()).address


def test_generate_default_source_gives_distinct_accounts():
    assert generate().address != generate().address


def test_generate_rejects_short_rng_output():
    with pytest.raises(InvalidKeyLength):
        generate(rng=lambda n: b"\x00" * (n - 1))


def test_close_wipes_seed_and_blocks_signing():
    account = from_seed(_seed())
    buf = account._seed
    address = account.address

    account.close()

    assert account.closed
    assert bytes(buf) == bytes(32)
    assert account.address == address
    with pytest.raises(ValueError):
        account.seed
    with pytest.raises(ValueError):
        sign(account, b"x")
    # closing twice is harmless
    account.close()


def test_context_manager_closes_on_error():
    with pytest.raises(RuntimeError):
        with from_seed(_seed()) as account:
            raise RuntimeError("boom")
    assert account.closed


def test_repr_hides_seed():
    account = from_seed(_seed())
    text = repr(account)
    assert _seed().hex() not in text
    assert account.address.encode() in text


def test_address_is_raw_public_key():
    account = Account(_seed())
    assert isinstance(account.address, Address)
    assert len(account.address.public_key) == 32
    assert Address.decode(account.address.encode()) == account.address

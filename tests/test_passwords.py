from weightlog.auth.passwords import hash_password, verify_password

import pytest


def test_hash_then_verify():
    h = hash_password("s3cret")
    assert h.startswith("$argon2")
    assert verify_password(h, "s3cret")
    assert not verify_password(h, "s3cret ")
    assert not verify_password(h, "other")


def test_fresh_salt_per_hash():
    assert hash_password("same") != hash_password("same")


def test_empty_inputs_fail_closed():
    h = hash_password("x")
    assert not verify_password(h, "")
    assert not verify_password("", "x")
    with pytest.raises(ValueError):
        hash_password("")


def test_malformed_hash_is_not_an_error():
    assert not verify_password("not-a-hash", "x")

import time

import pytest
from itsdangerous import URLSafeTimedSerializer

from weightlog.auth.session import CLAIMS_VERSION, SessionSigner
from weightlog.errors import InvalidToken, WrongCredentials


def _signer(secret="k1", issuer="weightlog", max_age=3600, clock=time.time):
    return SessionSigner(secret, issuer=issuer, max_age=max_age, clock=clock)


def test_issue_then_verify_round_trips():
    s = _signer()
    assert s.verify(s.issue("alice")).username == "alice"


def test_other_secret_is_rejected():
    token = _signer(secret="k1").issue("alice")
    with pytest.raises(InvalidToken):
        _signer(secret="k2").verify(token)


def test_tampered_payload_is_rejected():
    s = _signer()
    token = s.issue("alice")
    payload, _, rest = token.partition(".")
    forged = _signer().issue("mallory").partition(".")[0]
    assert forged != payload
    with pytest.raises(InvalidToken):
        s.verify(forged + "." + rest)


@pytest.mark.parametrize("token", ["", None, "garbage", "a.b.c", "ééé"])
def test_malformed_tokens(token):
    with pytest.raises(InvalidToken):
        _signer().verify(token)


def test_issuer_mismatch_is_wrong_credentials():
    token = _signer(issuer="someone-else").issue("alice")
    with pytest.raises(WrongCredentials):
        _signer(issuer="weightlog").verify(token)


def test_expired_token_is_invalid():
    now = [1_000_000.0]
    s = _signer(max_age=60, clock=lambda: now[0])
    token = s.issue("alice")
    assert s.verify(token).username == "alice"

    now[0] += 61
    with pytest.raises(InvalidToken):
        s.verify(token)


def test_unknown_claim_schema_is_invalid():
    raw = URLSafeTimedSerializer("k1", salt="weightlog.session.v1")
    token = raw.dumps({"v": CLAIMS_VERSION + 1, "sub": "alice", "iss": "weightlog", "exp": 2_000_000_000})
    with pytest.raises(InvalidToken):
        _signer().verify(token)


def test_empty_subject_is_invalid():
    raw = URLSafeTimedSerializer("k1", salt="weightlog.session.v1")
    token = raw.dumps({"v": CLAIMS_VERSION, "sub": " ", "iss": "weightlog", "exp": int(time.time()) + 60})
    with pytest.raises(InvalidToken):
        _signer().verify(token)


def test_constructor_guards():
    with pytest.raises(ValueError):
        SessionSigner("", issuer="x", max_age=10)
    with pytest.raises(ValueError):
        SessionSigner("k", issuer="x", max_age=0)

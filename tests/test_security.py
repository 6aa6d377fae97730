import pytest
from jose import jwt

from app.errors import ConfigurationError, InvalidTokenError, ValidationError
from app.security import TokenIssuer, hash_password, verify_password


class FakeClock:
    def __init__(self, now):
        self.now = now

    def __call__(self):
        return self.now


def test_hash_password_is_salted_and_verifies():
    first = hash_password("s3cret")
    second = hash_password("s3cret")

    assert first != second
    assert "s3cret" not in first
    assert verify_password("s3cret", first)
    assert verify_password("s3cret", second)
    assert not verify_password("wrong", first)


def test_hash_password_rejects_overlong_password():
    with pytest.raises(ValidationError):
        hash_password("x" * 73)
    assert not verify_password("x" * 73, hash_password("x" * 72))


def test_token_validates_until_expiry_instant():
    clock = FakeClock(1_700_000_000)
    tokens = TokenIssuer("secret", ttl_seconds=3600, clock=clock)
    token = tokens.issue("user-1")

    assert tokens.validate(token) == "user-1"
    clock.now += 3599
    assert tokens.validate(token) == "user-1"

    clock.now += 1
    with pytest.raises(InvalidTokenError):
        tokens.validate(token)

    clock.now += 10
    with pytest.raises(InvalidTokenError):
        tokens.validate(token)


def test_token_claims_carry_id_and_one_hour_expiry():
    tokens = TokenIssuer("secret", clock=FakeClock(1_000))
    claims = jwt.get_unverified_claims(tokens.issue("user-1"))
    assert claims == {"id": "user-1", "iat": 1_000, "exp": 4_600}


def test_token_signed_with_other_secret_is_rejected():
    token = TokenIssuer("other-secret").issue("user-1")
    with pytest.raises(InvalidTokenError):
        TokenIssuer("secret").validate(token)


@pytest.mark.parametrize("token", ["", "not-a-token", "a.b.c"])
def test_malformed_token_is_rejected(token):
    with pytest.raises(InvalidTokenError):
        TokenIssuer("secret").validate(token)


def test_token_without_id_claim_is_rejected():
    token = jwt.encode({"exp": 9_999_999_999}, "secret", algorithm="HS256")
    with pytest.raises(InvalidTokenError):
        TokenIssuer("secret").validate(token)


def test_missing_secret_fails_every_token_operation():
    tokens = TokenIssuer(None)
    with pytest.raises(ConfigurationError):
        tokens.issue("user-1")
    with pytest.raises(ConfigurationError):
        tokens.validate("anything")

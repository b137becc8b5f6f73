import pytest

from errors import InternalError
from passwords import LOG_ROUNDS, hash_password, verify_password


def test_digest_is_salted_and_verifies(ctx):
    first = hash_password("s3cret")
    second = hash_password("s3cret")

    assert first != second
    assert "s3cret" not in first
    assert verify_password("s3cret", first)
    assert verify_password("s3cret", second)


def test_wrong_password_does_not_verify(ctx):
    assert not verify_password("wrong", hash_password("s3cret"))


def test_malformed_digest_never_matches(ctx):
    assert not verify_password("s3cret", "not-a-bcrypt-digest")


def test_long_passwords_are_not_truncated(ctx):
    base = "x" * 80
    digest = hash_password(base + "a")

    assert verify_password(base + "a", digest)
    assert not verify_password(base + "b", digest)


def test_production_work_factor_is_ten(app):
    assert LOG_ROUNDS == 10
    assert app.config["BCRYPT_LOG_ROUNDS"] == 4  # lowered for the test suite only


def test_hashing_failure_is_internal_error(ctx, monkeypatch):
    from extensions import bcrypt

    def explode(*args, **kwargs):
        raise ValueError("boom")

    monkeypatch.setattr(bcrypt, "generate_password_hash", explode)

    with pytest.raises(InternalError):
        hash_password("s3cret")

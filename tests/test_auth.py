import pytest

from auth import COOKIE_NAME, identity_from_request
from errors import AuthenticationRequired, ExpiredToken, InvalidToken


def make_request(app, token=None):
    headers = {"Cookie": f"{COOKIE_NAME}={token}"} if token else {}
    with app.test_request_context("/tasks", headers=headers) as rc:
        return rc.request


def test_verified_cookie_becomes_current_user(app, services, ctx):
    user = services.users.create("alice@example.com", "hash")
    request = make_request(app, services.codec.issue(user))

    caller = identity_from_request(request, services.codec)

    assert caller.id == user.id
    assert caller.get_id() == user.id
    assert caller.email == "alice@example.com"
    assert caller.is_authenticated


def test_no_cookie(app, services):
    with pytest.raises(AuthenticationRequired):
        identity_from_request(make_request(app), services.codec)


def test_bad_cookie(app, services):
    with pytest.raises(InvalidToken):
        identity_from_request(make_request(app, "x.y.z"), services.codec)


def test_expired_cookie(app, services, ctx):
    from datetime import datetime, timedelta, timezone

    user = services.users.create("alice@example.com", "hash")
    token = services.codec.issue(user, now=datetime.now(timezone.utc) - timedelta(days=10))

    with pytest.raises(ExpiredToken):
        identity_from_request(make_request(app, token), services.codec)


def test_gate_does_not_consult_the_store(app, services):
    """A token for a user id that has no row still verifies (no revocation)."""
    from types import SimpleNamespace

    ghost = SimpleNamespace(id="deadbeef" * 4, email="ghost@example.com")
    caller = identity_from_request(make_request(app, services.codec.issue(ghost)), services.codec)

    assert caller.id == ghost.id

"""Authorization gate.

Every protected route is wrapped in ``flask_login.login_required``. Instead of
a server-side session, Flask-Login's request loader reads the session token
cookie, verifies it and hands back a ``SessionUser`` built purely from the
token's claims. Routes then read the caller's id from ``current_user`` and
nowhere else.
"""

import logging

from flask import current_app, g, jsonify
from flask_login import UserMixin

from errors import AuthenticationRequired, AuthError
from extensions import login_manager
from tokens import TOKEN_LIFETIME

logger = logging.getLogger(__name__)

COOKIE_NAME = "token"
UNUSED_REMEMBER_COOKIE = "taskflow_remember_disabled"


class SessionUser(UserMixin):
    def __init__(self, user_id, email):
        self.id = user_id
        self.email = email

    def get_id(self):
        return self.id


def identity_from_request(request, codec):
    """Verify the request's session cookie and return the caller as a SessionUser.

    Raises AuthenticationRequired when there is no token, and InvalidToken or
    ExpiredToken when verification fails.
    """
    token = request.cookies.get(COOKIE_NAME)
    if not token:
        raise AuthenticationRequired("no session token")
    verified = codec.verify(token)
    return SessionUser(verified.user_id, verified.email)


@login_manager.request_loader
def load_identity(request):
    codec = current_app.extensions["taskflow"].codec
    try:
        return identity_from_request(request, codec)
    except AuthError as exc:
        g.auth_failure = exc
        return None


@login_manager.unauthorized_handler
def unauthorized():
    failure = g.pop("auth_failure", None) or AuthenticationRequired()
    logger.info("Rejected request: %s (%s)", type(failure).__name__, failure.detail)
    return jsonify(success=False, message=failure.public_message), failure.status_code


def init_gate(app):
    # Flask-Login skips the request loader whenever its remember-me cookie is
    # present; that cookie must have a name this app never issues.
    app.config["REMEMBER_COOKIE_NAME"] = UNUSED_REMEMBER_COOKIE
    login_manager.init_app(app)
    # Identity comes from the token cookie only; never fall back to a Flask session.
    login_manager.session_protection = None


def set_token_cookie(response, token, secure):
    response.set_cookie(
        COOKIE_NAME,
        token,
        max_age=int(TOKEN_LIFETIME.total_seconds()),
        httponly=True,
        secure=secure,
        samesite="Lax",
    )
    return response


def clear_token_cookie(response, secure):
    response.delete_cookie(COOKIE_NAME, httponly=True, secure=secure, samesite="Lax")
    return response

"""Session token codec.

Tokens are HS256-signed JWTs carrying the user id (``sub``) and email. They
are tamper-evident, not encrypted: the claims are not secret, only their
authenticity matters.
"""

import binascii
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import jwt
from jwt.utils import base64url_decode, base64url_encode

from errors import ExpiredToken, InvalidToken

TOKEN_LIFETIME = timedelta(days=7)
REQUIRED_CLAIMS = ["sub", "email", "iat", "exp"]


def _is_canonical(token):
    # base64 decoding ignores the spare low bits of a segment's last character,
    # so a token differing only there would otherwise still verify.
    segments = token.split(".")
    if len(segments) != 3:
        return False
    for segment in segments:
        try:
            if base64url_encode(base64url_decode(segment)).decode("ascii") != segment:
                return False
        except (binascii.Error, ValueError, UnicodeError):
            return False
    return True


@dataclass(frozen=True)
class Identity:
    """Who a verified token says the caller is."""

    user_id: str
    email: str


class TokenCodec:
    def __init__(self, secret, lifetime=TOKEN_LIFETIME, algorithm="HS256"):
        if not secret:
            raise ValueError("token signing secret must not be empty")
        self.secret = secret
        self.lifetime = lifetime
        self.algorithm = algorithm

    def issue(self, user, now=None):
        now = now or datetime.now(timezone.utc)
        payload = {
            "sub": user.id,
            "email": user.email,
            "iat": now,
            "exp": now + self.lifetime,
        }
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def verify(self, token):
        """Return the token's Identity.

        Raises:
            ExpiredToken: signature is good but ``exp`` has passed.
            InvalidToken: anything else wrong with the token.
        """
        if not isinstance(token, str) or not token:
            raise InvalidToken("empty token")
        if not _is_canonical(token):
            raise InvalidToken("non-canonical encoding")
        try:
            claims = jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                options={"require": REQUIRED_CLAIMS},
            )
        except jwt.ExpiredSignatureError:
            raise ExpiredToken("token expired") from None
        except jwt.InvalidTokenError as exc:
            raise InvalidToken(f"{type(exc).__name__}: {exc}") from None

        user_id, email = claims["sub"], claims["email"]
        if not isinstance(user_id, str) or not user_id or not isinstance(email, str):
            raise InvalidToken("malformed identity claims")
        return Identity(user_id=user_id, email=email)

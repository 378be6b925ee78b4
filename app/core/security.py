"""Security related functions."""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import jwt
from passlib.context import CryptContext

from app.exceptions.user import InvalidTokenError

logger = logging.getLogger(__name__)


class PasswordHasher:
    """
    One-way salted password hashing backed by bcrypt.

    :ivar rounds: bcrypt work factor applied to every new digest.
    :type rounds: int
    """

    def __init__(self, rounds: int = 10):
        self.rounds = rounds
        self._context = CryptContext(
            schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds
        )

    def hash(self, plaintext: str) -> str:
        return self._context.hash(plaintext)

    def verify(self, plaintext: str, digest: str | None) -> bool:
        """Check ``plaintext`` against ``digest``; malformed digests never match."""
        if not digest:
            return False
        try:
            return self._context.verify(plaintext, digest)
        except (ValueError, TypeError):
            logger.warning("Stored password digest could not be parsed")
            return False

    def dummy_verify(self) -> None:
        """Spend the cost of one verification so unknown users take as long as wrong passwords."""
        self._context.dummy_verify()


@dataclass(frozen=True)
class TokenClaims:
    """Identity carried by a verified session token."""

    user_id: int
    username: str


class TokenManager:
    """
    Issues and verifies signed, time-limited session tokens.

    The payload is ``{userId, username, iat, exp}`` signed with a server-held
    secret. Tokens are not stored anywhere on the server, so there is no
    revocation: a token stays valid until it expires.

    :ivar secret_key: Secret used to sign and verify tokens.
    :type secret_key: str
    :ivar algorithm: JWT signing algorithm.
    :type algorithm: str
    :ivar expires_in: Lifetime of an issued token.
    :type expires_in: timedelta
    """

    def __init__(self, secret_key: str, algorithm: str = "HS256", expires_in: timedelta = timedelta(hours=24)):
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.expires_in = expires_in

    def issue(self, user_id: int, username: str, now: datetime | None = None) -> str:
        issued_at = now or datetime.now(timezone.utc)
        payload = {
            "userId": user_id,
            "username": username,
            "iat": issued_at,
            "exp": issued_at + self.expires_in,
        }
        return jwt.encode(payload, self.secret_key, algorithm=self.algorithm)

    def verify(self, token: str) -> TokenClaims:
        """
        Decode ``token`` and return its claims.

        A bad signature, a malformed token, missing claims and an expired
        token all raise the same ``InvalidTokenError`` so callers cannot tell
        them apart.
        """
        try:
            payload = jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.algorithm],
                options={"require": ["exp", "iat"]},
            )
        except jwt.PyJWTError as e:
            logger.debug("Token rejected: %s", type(e).__name__)
            raise InvalidTokenError() from e

        user_id = payload.get("userId")
        username = payload.get("username")
        if not isinstance(user_id, int) or isinstance(user_id, bool) or not isinstance(username, str):
            raise InvalidTokenError()

        return TokenClaims(user_id=user_id, username=username)

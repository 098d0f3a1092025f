# orange_market/core/tokens.py
from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING, Callable, Protocol

import jwt
from jwt import InvalidSignatureError, InvalidTokenError

from orange_market.core.config import Settings

if TYPE_CHECKING:
    from orange_market.db.models import User

LOGGER = logging.getLogger(__name__)


class AuthFailureKind(str, enum.Enum):
    MISSING = "missing"
    MALFORMED = "malformed"
    BAD_SIGNATURE = "bad-signature"
    EXPIRED = "expired"
    UNKNOWN_SUBJECT = "unknown-subject"


@dataclass(frozen=True)
class AuthFailure:
    kind: AuthFailureKind
    detail: str = ""


class UserLookup(Protocol):
    async def find_by_idx(self, idx: int) -> User | None: ...


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class TokenCodec:
    """
    Issues and checks the bearer credentials of the marketplace.

    The key is fixed at construction; build one codec at startup and share it
    between requests.
    """

    secret: str = field(repr=False)
    algorithm: str = "HS256"
    ttl: timedelta = timedelta(hours=1)
    clock: Callable[[], datetime] = field(default=_utcnow, repr=False, compare=False)

    @classmethod
    def from_settings(cls, settings: Settings) -> "TokenCodec":
        return cls(
            secret=settings.jwt_secret,
            algorithm=settings.jwt_alg,
            ttl=timedelta(seconds=settings.jwt_ttl_seconds),
        )

    def issue(self, subject: int) -> str:
        now = self.clock()
        payload = {
            "sub": str(subject),
            "iat": int(now.timestamp()),
            "exp": int((now + self.ttl).timestamp()),
        }
        return jwt.encode(payload, self.secret, algorithm=self.algorithm, headers={"typ": "JWT"})

    def decode(self, token: str) -> int | AuthFailure:
        """Return the subject idx of a valid token, or why it is not valid."""
        # Timestamps are checked against self.clock, the same clock issue() uses.
        try:
            claims = jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                options={"require": ["sub", "exp"], "verify_exp": False, "verify_iat": False},
            )
        except InvalidSignatureError as e:
            LOGGER.debug("token signature rejected: %s", e)
            return AuthFailure(AuthFailureKind.BAD_SIGNATURE, str(e))
        except InvalidTokenError as e:
            LOGGER.debug("token could not be decoded: %s", e)
            return AuthFailure(AuthFailureKind.MALFORMED, str(e))

        exp = claims["exp"]
        if isinstance(exp, bool) or not isinstance(exp, (int, float)):
            return AuthFailure(AuthFailureKind.MALFORMED, f"non-numeric expiry {exp!r}")
        if self.clock().timestamp() >= exp:
            return AuthFailure(AuthFailureKind.EXPIRED, "Signature has expired")

        try:
            return int(claims["sub"])
        except (TypeError, ValueError):
            return AuthFailure(AuthFailureKind.MALFORMED, f"non-numeric subject {claims['sub']!r}")

    async def verify(self, token: str, users: UserLookup) -> User | AuthFailure:
        subject = self.decode(token)
        if isinstance(subject, AuthFailure):
            return subject

        user = await users.find_by_idx(subject)
        if user is None:
            return AuthFailure(AuthFailureKind.UNKNOWN_SUBJECT, f"no user with idx {subject}")
        return user

"""Failures surfaced by the auth gate and the product pipeline.

Each error carries the HTTP status the boundary layer answers with; the
translation itself lives in ``orange_market.main``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from orange_market.core.tokens import AuthFailure


class MarketError(Exception):
    status_code = 500
    default_message = "internal error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class AuthenticationFailed(MarketError):
    status_code = 401
    default_message = "authentication failed"

    def __init__(self, failure: AuthFailure):
        # The cause is kept for logging only; clients get the generic message.
        self.failure = failure
        super().__init__()


class NotFound(MarketError):
    status_code = 404
    default_message = "not found"


class UnprocessableEntity(MarketError):
    status_code = 422
    default_message = "could not be saved"

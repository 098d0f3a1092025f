# orange_market/core/auth.py
import logging

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from orange_market.core.errors import AuthenticationFailed
from orange_market.core.tokens import AuthFailure, AuthFailureKind, TokenCodec
from orange_market.db.models import User
from orange_market.db.stores import UserStore

LOGGER = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def get_token_codec(request: Request) -> TokenCodec:
    return request.app.state.token_codec


async def current_user(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    codec: TokenCodec = Depends(get_token_codec),
) -> User:
    """Admit the request only if it carries a valid bearer token of a known user."""
    if credentials is None:
        result = AuthFailure(AuthFailureKind.MISSING, "no bearer credential")
    else:
        async with request.app.state.sessions() as s:
            result = await codec.verify(credentials.credentials, UserStore(s))

    if isinstance(result, AuthFailure):
        LOGGER.warning(
            "rejected %s %s: %s (%s)",
            request.method, request.url.path, result.kind.value, result.detail,
        )
        raise AuthenticationFailed(result)

    request.state.user = result
    return result

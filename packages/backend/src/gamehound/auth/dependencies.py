"""FastAPI auth dependencies.

Learn: These are used as Depends() in route handlers to extract
and validate the current identity from the request.

The two failure modes are deliberately distinct:
- no "Authorization: Bearer ..." header → 401 (unauthenticated)
- a token that fails verification → 403 (forbidden)
Both messages are generic; the real reason only goes to the log.
"""

from typing import Optional

import structlog
from fastapi import Depends, Header, Request

from gamehound.auth.jwt import Identity, TokenCodec, TokenError
from gamehound.errors import AuthError

logger = structlog.get_logger()

BEARER_PREFIX = "Bearer "


def get_token_codec(request: Request) -> TokenCodec:
    """The app's TokenCodec (built in create_app from Settings)."""
    return request.app.state.token_codec


def extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
    """Return the token from an Authorization header, or None."""
    if not authorization or not authorization.startswith(BEARER_PREFIX):
        return None
    token = authorization[len(BEARER_PREFIX):].strip()
    return token or None


async def get_current_user(
    request: Request,
    authorization: Optional[str] = Header(None),
    codec: TokenCodec = Depends(get_token_codec),
) -> Identity:
    """Resolve the bearer token to an Identity (required).

    Learn: The identity is also stored on request.state so middleware
    and error handlers can see who made the request.
    """
    token = extract_bearer_token(authorization)
    if token is None:
        raise AuthError("Missing token", status_code=401)

    try:
        identity = codec.verify(token)
    except TokenError as e:
        logger.info("auth.token_rejected", reason=str(e))
        raise AuthError("Invalid token", status_code=403)

    request.state.identity = identity
    structlog.contextvars.bind_contextvars(user_id=identity.user_id)
    return identity

"""FastAPI dependencies."""
import logging
from uuid import UUID

import jwt
from fastapi import Header, Request
from jwt import ExpiredSignatureError, InvalidTokenError

from promptlib.config import get_settings
from promptlib.utils.exceptions import AuthenticationError

logger = logging.getLogger(__name__)

settings = get_settings()


def _mask_identifier(identifier: str) -> str:
    """Mask a sensitive identifier for logging (e.g., user id, token)."""
    if not identifier:
        return "<missing>"
    if len(identifier) <= 8:
        return f"{identifier[:2]}...{identifier[-2:]}"
    return f"{identifier[:4]}...{identifier[-4:]}"


def decode_access_token(token: str) -> UUID:
    """Verify an identity provider access token and return its subject as a UUID."""
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            audience=settings.jwt_audience,
        )
    except ExpiredSignatureError as exc:
        raise AuthenticationError("token_expired") from exc
    except InvalidTokenError as exc:
        raise AuthenticationError("invalid_token") from exc

    subject = payload.get("sub")
    if not subject:
        raise AuthenticationError("invalid_token")
    try:
        return UUID(str(subject))
    except ValueError as exc:
        raise AuthenticationError("invalid_token") from exc


def _extract_token(request: Request, authorization: str | None) -> tuple[str | None, str]:
    token = request.cookies.get(settings.access_token_cookie_name)
    if token:
        return token, "cookie"

    if authorization:
        scheme, _, token = authorization.partition(" ")
        if scheme.lower() != "bearer" or not token:
            raise AuthenticationError("invalid_authorization_header")
        return token, "header"

    return None, "none"


async def get_current_user_id(
        request: Request,
        authorization: str | None = Header(default=None, alias="Authorization"),
) -> UUID:
    """Resolve the authenticated identity from the access token.

    Checks for the token in the following order:
    1. HTTP-only cookie set by the identity provider integration
    2. Authorization header (API clients)
    """
    token, token_source = _extract_token(request, authorization)
    if not token:
        raise AuthenticationError("missing_credentials")

    user_id = decode_access_token(token)
    logger.debug(f"Authenticated identity via {token_source}: {_mask_identifier(str(user_id))}")
    return user_id


async def get_optional_user_id(
        request: Request,
        authorization: str | None = Header(default=None, alias="Authorization"),
) -> UUID | None:
    """Return the current identity if available, otherwise None for auth failures."""
    try:
        return await get_current_user_id(request, authorization)
    except AuthenticationError:
        return None

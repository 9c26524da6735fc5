"""Authentication utilities.

Tokens are HS256 JWTs carrying ``{"user": {"id": <user id>}}``. New tokens
are signed with JWT_SECRET; JWT_PREVIOUS_SECRETS are still accepted when
verifying so the secret can be rotated without logging everybody out.
"""
from datetime import datetime, timedelta, timezone
from typing import Iterable, Optional
from fastapi import Header
import jwt
import logging

from config import JWT_SECRET, JWT_PREVIOUS_SECRETS, JWT_ALGORITHM, TOKEN_EXPIRE_MINUTES
from errors import Unauthenticated
from monitoring import auth_failures_counter, auth_attempts_counter

logger = logging.getLogger(__name__)


def issue_token(
    user_id: str,
    secret: str = JWT_SECRET,
    expire_minutes: int = TOKEN_EXPIRE_MINUTES
) -> str:
    """
    Sign a token for a user.

    Args:
        user_id: User identifier embedded in the token
        secret: Signing secret
        expire_minutes: Token lifetime, 0 for a token without expiry

    Returns:
        Encoded JWT
    """
    payload = {"user": {"id": user_id}}
    if expire_minutes > 0:
        payload["exp"] = datetime.now(timezone.utc) + timedelta(minutes=expire_minutes)
    return jwt.encode(payload, secret, algorithm=JWT_ALGORITHM)


def decode_token(
    token: Optional[str],
    secrets: Iterable[str] = None
) -> str:
    """
    Verify a token and return the user id it carries.

    Args:
        token: Encoded JWT
        secrets: Accepted secrets, current one first

    Returns:
        User ID

    Raises:
        Unauthenticated: If the token is missing, expired, malformed or
            signed with an unknown secret
    """
    if not token:
        raise Unauthenticated()

    if secrets is None:
        secrets = [JWT_SECRET, *JWT_PREVIOUS_SECRETS]

    for secret in secrets:
        try:
            data = jwt.decode(token, secret, algorithms=[JWT_ALGORITHM])
        except jwt.InvalidSignatureError:
            continue
        except jwt.InvalidTokenError:
            break

        user = data.get("user")
        if isinstance(user, dict) and user.get("id"):
            return str(user["id"])
        break

    raise Unauthenticated()


def verify_token(auth_token: Optional[str] = Header(None, alias="auth-token")) -> str:
    """
    Resolve the caller's identity from the ``auth-token`` header.

    Returns:
        User ID

    Raises:
        Unauthenticated: If the header is missing or the token is invalid
    """
    auth_attempts_counter.add(1, {"type": "auth_token"})

    if auth_token is None:
        auth_failures_counter.add(1, {"reason": "missing_header"})
        logger.warning("Authentication failed: Missing auth-token header")
        raise Unauthenticated()

    try:
        user_id = decode_token(auth_token)
    except Unauthenticated:
        auth_failures_counter.add(1, {"reason": "invalid_token"})
        logger.warning("Authentication failed: Invalid token", extra={
            "token_prefix": auth_token[:8] + "..." if len(auth_token) > 8 else auth_token
        })
        raise

    logger.debug("Authentication successful", extra={"user_id": user_id})
    return user_id

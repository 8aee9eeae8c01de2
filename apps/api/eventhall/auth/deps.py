from __future__ import annotations

from typing import Annotated

import structlog
from fastapi import Depends, HTTPException, Request
from sqlalchemy.orm import Session

from eventhall.auth.jwt import verify_access_token
from eventhall.auth.principal import Principal, principal_for
from eventhall.db import get_db
from eventhall.models import User

logger = structlog.get_logger()

DBSession = Annotated[Session, Depends(get_db)]


def _unauthorized(detail: str = "unauthorized") -> HTTPException:
    return HTTPException(
        status_code=401,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def _bearer_token(request: Request) -> str | None:
    auth = request.headers.get("Authorization", "")
    if not auth.startswith("Bearer "):
        return None
    return auth.removeprefix("Bearer ").strip() or None


def get_current_user_optional(request: Request, db: DBSession) -> User | None:
    token = _bearer_token(request)
    if token is None:
        return None

    try:
        claims = verify_access_token(token)
        user_id = int(claims["sub"])
    except (ValueError, KeyError, TypeError):
        logger.info("access_token_rejected", path=request.url.path)
        return None

    return db.get(User, user_id)


def get_principal(user: Annotated[User | None, Depends(get_current_user_optional)]) -> Principal:
    """Resolve the caller. Bad or missing credentials fall back to anonymous;
    the policy engine decides what anonymous may do."""
    if user is None:
        return Principal.anonymous()
    return principal_for(user)


def get_current_user(user: Annotated[User | None, Depends(get_current_user_optional)]) -> User:
    if user is None:
        raise _unauthorized("missing or invalid bearer token")
    return user


CurrentPrincipal = Annotated[Principal, Depends(get_principal)]
CurrentUser = Annotated[User, Depends(get_current_user)]

from __future__ import annotations

import structlog
from fastapi import APIRouter, HTTPException
from sqlalchemy import func, select

from eventhall.api.v1.schemas import LoginIn, MeOut, TokenOut
from eventhall.auth.deps import CurrentUser, DBSession
from eventhall.auth.jwt import create_access_token
from eventhall.auth.password import verify_password
from eventhall.core.config import settings
from eventhall.models import User

logger = structlog.get_logger()

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login", response_model=TokenOut)
def login(payload: LoginIn, db: DBSession):
    email = payload.email.strip().lower()
    user = db.scalar(select(User).where(func.lower(User.email) == email))
    if not user or not verify_password(payload.password, user.password_hash):
        logger.info("login_failed", email=email)
        raise HTTPException(
            status_code=401,
            detail="invalid credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    logger.info("login_succeeded", user_id=user.id)
    return TokenOut(
        access_token=create_access_token(user.id),
        expires_in=settings.access_token_ttl_seconds,
    )


@router.get("/me", response_model=MeOut)
def me(user: CurrentUser):
    return MeOut(
        user_id=user.id,
        name=user.name,
        email=user.email,
        roles=sorted(user.role_names),
        vendor_id=user.vendor_id,
    )

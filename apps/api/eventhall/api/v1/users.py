from __future__ import annotations

from fastapi import APIRouter, Query, Response, status

from eventhall.api.v1.schemas import PageOut, PasswordResetIn, UserCreate, UserOut, UserUpdate
from eventhall.auth.deps import CurrentPrincipal, DBSession
from eventhall.models import Role
from eventhall.services import users_service

router = APIRouter(prefix="/users", tags=["users"])


@router.get("", response_model=PageOut[UserOut])
def list_users(
    db: DBSession,
    principal: CurrentPrincipal,
    role: Role | None = None,
    search: str | None = Query(default=None, min_length=1),
    page: int = Query(default=1, ge=1),
    page_size: int = Query(default=25, ge=1, le=100),
):
    return users_service.list_users(
        db, principal, role=role, search=search, page=page, page_size=page_size
    )


@router.post("", response_model=UserOut, status_code=status.HTTP_201_CREATED)
def create_user(payload: UserCreate, db: DBSession, principal: CurrentPrincipal):
    return users_service.create_user(db, principal, payload)


@router.get("/{user_id}", response_model=UserOut)
def get_user(user_id: int, db: DBSession, principal: CurrentPrincipal):
    return users_service.get_user(db, principal, user_id)


@router.patch("/{user_id}", response_model=UserOut)
def update_user(user_id: int, payload: UserUpdate, db: DBSession, principal: CurrentPrincipal):
    return users_service.update_user(db, principal, user_id, payload)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(user_id: int, db: DBSession, principal: CurrentPrincipal):
    users_service.delete_user(db, principal, user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{user_id}/reset-password", response_model=UserOut)
def reset_password(
    user_id: int, payload: PasswordResetIn, db: DBSession, principal: CurrentPrincipal
):
    return users_service.reset_password(
        db, principal, user_id, password=payload.password, send=payload.send_credentials
    )

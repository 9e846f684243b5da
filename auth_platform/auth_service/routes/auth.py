"""
Registration, login and user record endpoints.

`/auth/register` and `/auth/login` are open; everything else goes through
the bearer-token gate.
"""
import logging
from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ...core.claims import Claims
from ...core.errors import AuthenticationError, NotFoundError, PermissionDeniedError, StoreError
from ..auth import authenticate_user, create_access_token, register_user
from ..db import get_db
from ..models import User
from ..schemas import (
    ClaimsOut,
    LoginRequest,
    LoginResponse,
    RegisterRequest,
    RegisterResponse,
    UserDeletedResponse,
    UserListResponse,
    UserOut,
)
from ..security import gate
from ..utils.event_logger import log_auth_event

router = APIRouter(prefix="/auth", tags=["auth"])
logger = logging.getLogger(__name__)


@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
def register(payload: RegisterRequest, request: Request, db: Session = Depends(get_db)):
    user = register_user(payload.username, payload.login, payload.password, db)
    log_auth_event("register", request, user_id=user.id, login=payload.login)
    return RegisterResponse(user_id=user.id, username=user.username)


@router.post("/login", response_model=LoginResponse)
def login(credentials: LoginRequest, request: Request, db: Session = Depends(get_db)):
    try:
        user, groups = authenticate_user(credentials.login, credentials.password, db)
    except AuthenticationError:
        log_auth_event("login_failure", request, login=credentials.login)
        raise

    token = create_access_token(user.id, user.username, groups)
    log_auth_event("login_success", request, user_id=user.id, login=credentials.login)
    return LoginResponse(user_id=user.id, username=user.username, groups=groups, token=token)


@router.get("/me", response_model=ClaimsOut)
def me(claims: Claims = Depends(gate)):
    """Claims of the presented token, as the gate verified them."""
    return ClaimsOut(
        user_id=claims.user_id,
        username=claims.username,
        groups=claims.groups,
        exp=claims.exp,
    )


@router.get("/users", response_model=UserListResponse, dependencies=[Depends(gate)])
def list_users(
    limit: int = Query(50, ge=1, le=100),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
):
    try:
        users = db.execute(
            select(User).order_by(User.created_at.desc()).limit(limit).offset(offset)
        ).scalars().all()
    except SQLAlchemyError as e:
        raise StoreError("Failed to list users") from e

    items = [UserOut(**user.to_dict()) for user in users]
    return UserListResponse(users=items, count=len(items))


@router.get("/user/{user_id}", response_model=UserOut, dependencies=[Depends(gate)])
def get_user(user_id: str, db: Session = Depends(get_db)):
    user = _load_user(user_id, db)
    return UserOut(**user.to_dict())


@router.delete("/user/{user_id}", response_model=UserDeletedResponse)
def delete_user(
    user_id: str,
    request: Request,
    claims: Claims = Depends(gate),
    db: Session = Depends(get_db),
):
    """Delete an account. Credential and group memberships go with it."""
    if claims.user_id != user_id:
        raise PermissionDeniedError("Users may only delete their own account")

    user = _load_user(user_id, db)
    try:
        db.delete(user)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        raise StoreError("Failed to delete user") from e

    log_auth_event("user_deleted", request, user_id=user_id)
    return UserDeletedResponse(user_id=user_id)


def _load_user(user_id: str, db: Session) -> User:
    try:
        user = db.get(User, user_id)
    except SQLAlchemyError as e:
        raise StoreError("Failed to load user") from e
    if user is None:
        raise NotFoundError("User not found")
    return user

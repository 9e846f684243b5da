from passlib.context import CryptContext
from datetime import timedelta
from typing import List, Tuple
import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.claims import DEFAULT_GROUP_ID, Claims
from ..core.database import insert_ignore
from ..core.errors import AuthenticationError, ConflictError, StoreError
from ..core.tokens import issue_token
from .config import get_settings
from .models import Credential, User, user_group

logger = logging.getLogger(__name__)

# Use pbkdf2_sha256 to avoid external bcrypt backend issues in some environments
pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(user_id: str, username: str, groups: List[str]) -> str:
    settings = get_settings()
    claims = Claims.for_user(
        user_id=user_id,
        username=username,
        groups=groups,
        ttl=timedelta(hours=settings.ACCESS_TOKEN_EXPIRE_HOURS),
    )
    return issue_token(claims, settings.jwt_secret)


def enroll_in_group(user_id: str, group_id: str, db: Session) -> None:
    """Add a user to a group; enrolling twice is a no-op. Does not commit."""
    insert_ignore(db, user_group, [{"user_id": user_id, "group_id": group_id}])


def get_user_groups(user_id: str, db: Session) -> List[str]:
    rows = db.execute(select(user_group.c.group_id).where(user_group.c.user_id == user_id))
    return [row.group_id for row in rows]


def login_exists(login: str, db: Session) -> bool:
    return db.execute(select(Credential.user_id).where(Credential.login == login)).first() is not None


def register_user(username: str, login: str, password: str, db: Session) -> User:
    """
    Create a user, its credential and its default group membership.

    All three rows are written in one transaction. A login taken by a
    concurrent registration between the pre-check and the commit is caught by
    the unique constraint on `auth.login` and reported the same way as the
    pre-check.

    Raises:
        ConflictError: if the login is already registered
        StoreError: on any other store failure; nothing is persisted
    """
    try:
        if login_exists(login, db):
            raise ConflictError("Login already taken")
    except SQLAlchemyError as e:
        raise StoreError("Failed to register user") from e

    password_hash = hash_password(password)

    try:
        user = User(username=username)
        db.add(user)
        db.flush()
        db.add(Credential(user_id=user.id, login=login, password_hash=password_hash))
        db.flush()
        enroll_in_group(user.id, DEFAULT_GROUP_ID, db)
        db.commit()
    except IntegrityError as e:
        db.rollback()
        if _login_taken_after_rollback(login, db):
            logger.info("Registration lost race for login=%s", login)
            raise ConflictError("Login already taken") from e
        logger.error("Registration failed with integrity error: %s", e)
        raise StoreError("Failed to register user") from e
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("Registration failed: %s", e)
        raise StoreError("Failed to register user") from e

    db.refresh(user)
    return user


def _login_taken_after_rollback(login: str, db: Session) -> bool:
    try:
        return login_exists(login, db)
    except SQLAlchemyError:
        db.rollback()
        return False


def authenticate_user(login: str, password: str, db: Session) -> Tuple[User, List[str]]:
    """
    Check a login/password pair and return the user with its current groups.

    Unknown login and wrong password fail identically; the unknown-login path
    still runs a hash verification so both take comparable time.

    Raises:
        AuthenticationError: unknown login or wrong password
        StoreError: the lookup itself failed
    """
    try:
        row = db.execute(
            select(Credential, User)
            .join(User, Credential.user_id == User.id)
            .where(Credential.login == login)
        ).first()
    except SQLAlchemyError as e:
        raise StoreError("Failed to look up credentials") from e

    if row is None:
        pwd_context.dummy_verify()
        raise AuthenticationError()

    credential, user = row
    if not verify_password(password, credential.password_hash):
        raise AuthenticationError()

    try:
        groups = get_user_groups(user.id, db)
    except SQLAlchemyError as e:
        raise StoreError("Failed to load group memberships") from e

    return user, groups

"""Tests for database initialization and store-level constraints."""
from unittest.mock import Mock

import pytest
from sqlalchemy import func, inspect, select
from sqlalchemy.exc import IntegrityError

from auth_platform.auth_service import db as auth_db
from auth_platform.auth_service.auth import enroll_in_group, get_user_groups, hash_password
from auth_platform.auth_service.models import Credential, Group, User, user_group
from auth_platform.chat_service import db as chat_db
from auth_platform.core.claims import DEFAULT_GROUP_ID
from auth_platform.core.database import insert_ignore


def test_init_db_creates_auth_tables():
    tables = set(inspect(auth_db.engine).get_table_names())
    assert {"users", "auth", "groups", "user_group"} <= tables


def test_init_db_creates_chat_tables():
    tables = set(inspect(chat_db.engine).get_table_names())
    assert {"chats", "user_chat", "messages"} <= tables


def test_credential_login_is_unique_at_store_level():
    inspector = inspect(auth_db.engine)
    unique_columns = [idx["column_names"] for idx in inspector.get_indexes("auth") if idx["unique"]]
    unique_columns += [c["column_names"] for c in inspector.get_unique_constraints("auth")]
    assert ["login"] in unique_columns


def test_default_group_is_seeded_once(auth_session):
    auth_db.init_db()
    auth_db.init_db()

    groups = auth_session.execute(select(Group).where(Group.id == DEFAULT_GROUP_ID)).scalars().all()
    assert len(groups) == 1
    assert groups[0].name == "All users"


def _make_user(session, login="erin1"):
    user = User(username="erin")
    session.add(user)
    session.flush()
    session.add(Credential(user_id=user.id, login=login, password_hash=hash_password("pw")))
    session.commit()
    return user


def test_enrollment_is_idempotent(auth_session):
    user = _make_user(auth_session)

    enroll_in_group(user.id, DEFAULT_GROUP_ID, auth_session)
    enroll_in_group(user.id, DEFAULT_GROUP_ID, auth_session)
    auth_session.commit()

    assert get_user_groups(user.id, auth_session) == [DEFAULT_GROUP_ID]


def test_duplicate_login_violates_constraint(auth_session):
    _make_user(auth_session, login="dup")

    other = User(username="other")
    auth_session.add(other)
    auth_session.flush()
    auth_session.add(Credential(user_id=other.id, login="dup", password_hash="x"))
    with pytest.raises(IntegrityError):
        auth_session.commit()
    auth_session.rollback()


def test_deleting_user_cascades_to_credential_and_memberships(auth_session):
    user = _make_user(auth_session)
    enroll_in_group(user.id, DEFAULT_GROUP_ID, auth_session)
    auth_session.commit()
    user_id = user.id

    auth_session.execute(User.__table__.delete().where(User.id == user_id))
    auth_session.commit()

    assert auth_session.scalar(select(func.count()).select_from(Credential)) == 0
    assert auth_session.scalar(
        select(func.count()).select_from(user_group).where(user_group.c.user_id == user_id)
    ) == 0


def test_insert_ignore_counts_only_new_rows(auth_session):
    user = _make_user(auth_session)
    row = {"user_id": user.id, "group_id": DEFAULT_GROUP_ID}

    assert insert_ignore(auth_session, user_group, [row]) == 1
    assert insert_ignore(auth_session, user_group, [row]) == 0
    assert insert_ignore(auth_session, user_group, []) == 0
    auth_session.rollback()


def test_insert_ignore_refuses_unsupported_database():
    session = Mock()
    session.get_bind.return_value.dialect.name = "mysql"

    with pytest.raises(NotImplementedError):
        insert_ignore(session, user_group, [{"user_id": "u", "group_id": "g"}])
    session.execute.assert_not_called()

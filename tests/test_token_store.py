"""Tests for the database-backed token store."""

from __future__ import annotations

import re
from datetime import datetime, timedelta

import pytest

from models import db
from models.user import User
from models.user_token import UserToken
from storage.token_store import DatabaseTokenStore

ISSUED_AT = datetime(2025, 3, 1, 8, 0, 0)


class FakeClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock(ISSUED_AT)


@pytest.fixture()
def store(app, clock):
    with app.app_context():
        yield DatabaseTokenStore(db.session, ttl=timedelta(hours=24), clock=clock)


def test_issue_then_resolve_returns_owner(store, make_user):
    user_id = make_user("ana@x.com")

    issued = store.issue(user_id)

    assert re.fullmatch(r"[0-9a-f]{64}", issued.token)
    assert issued.expires_at == ISSUED_AT + timedelta(hours=24)
    assert store.resolve(issued.token).id == user_id


def test_each_issue_creates_a_distinct_valid_token(store, make_user):
    user_id = make_user("ana@x.com")

    first = store.issue(user_id)
    second = store.issue(user_id)

    assert first.token != second.token
    assert store.resolve(first.token).id == user_id
    assert store.resolve(second.token).id == user_id
    assert UserToken.query.filter_by(user_id=user_id).count() == 2


def test_expiry_boundary(store, clock, make_user):
    user_id = make_user("ana@x.com")
    issued = store.issue(user_id)

    clock.now = issued.expires_at - timedelta(seconds=1)
    assert store.resolve(issued.token).id == user_id

    clock.now = issued.expires_at
    assert store.resolve(issued.token) is None

    clock.now = issued.expires_at + timedelta(seconds=1)
    assert store.resolve(issued.token) is None


def test_deactivating_owner_invalidates_token(store, make_user):
    user_id = make_user("ana@x.com")
    issued = store.issue(user_id)
    assert store.resolve(issued.token) is not None

    user = db.session.get(User, user_id)
    user.deactivate()
    db.session.commit()

    assert store.resolve(issued.token) is None


@pytest.mark.parametrize("token", ["", None, "garbage", "0" * 64])
def test_unknown_tokens_resolve_to_none(store, token):
    assert store.resolve(token) is None


def test_revoke_removes_token(store, make_user):
    user_id = make_user("ana@x.com")
    issued = store.issue(user_id)

    assert store.revoke(issued.token) is True
    assert store.resolve(issued.token) is None
    assert store.revoke(issued.token) is False


def test_purge_expired_keeps_live_tokens(store, clock, make_user):
    user_id = make_user("ana@x.com")
    stale = store.issue(user_id)
    clock.now = ISSUED_AT + timedelta(hours=12)
    live = store.issue(user_id)

    clock.now = ISSUED_AT + timedelta(hours=25)
    removed = store.purge_expired()

    assert removed == 1
    assert UserToken.query.filter_by(token=stale.token).first() is None
    assert store.resolve(live.token).id == user_id


def test_issue_without_commit_is_undone_by_rollback(store, make_user):
    user_id = make_user("ana@x.com")

    issued = store.issue(user_id, commit=False)
    assert store.resolve(issued.token).id == user_id

    db.session.rollback()

    assert UserToken.query.filter_by(token=issued.token).first() is None

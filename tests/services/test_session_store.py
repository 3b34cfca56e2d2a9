"""Tests for SessionStore and its storage backends."""

from __future__ import annotations

import json
from unittest.mock import MagicMock

import pytest

from taskflow_cli.errors import SessionPersistenceError
from taskflow_cli.models import Identity
from taskflow_cli.services.session_store import (
    TOKEN_KEY,
    USER_KEY,
    FileStorage,
    MemoryStorage,
    SessionStore,
)

JOHN = Identity(email="john@example.com", display_name="John Doe")


def test_empty_store_is_not_authenticated(session_store):
    assert session_store.restore() is None
    assert not session_store.is_authenticated()
    assert session_store.credential is None
    assert session_store.identity is None


def test_establish_persists_both_entries(session_store):
    session_store.establish("tok-1", JOHN)

    assert session_store.is_authenticated()
    assert session_store.storage.get(TOKEN_KEY) == "tok-1"
    assert json.loads(session_store.storage.get(USER_KEY)) == {
        "email": "john@example.com",
        "name": "John Doe",
    }


def test_restore_reads_what_establish_wrote(tmp_path):
    SessionStore(FileStorage(tmp_path)).establish("tok-1", JOHN)

    fresh = SessionStore(FileStorage(tmp_path))
    session = fresh.restore()

    assert session is not None
    assert session.credential == "tok-1"
    assert session.identity.display_name == "John Doe"
    assert fresh.is_authenticated()


def test_restore_clear_restore_yields_empty_session(tmp_path):
    SessionStore(FileStorage(tmp_path)).establish("tok-1", JOHN)

    store = SessionStore(FileStorage(tmp_path))
    store.restore()
    store.clear()

    again = SessionStore(FileStorage(tmp_path))
    assert again.restore() is None
    assert not again.is_authenticated()
    assert store.restore() is None


@pytest.mark.parametrize(
    "entries",
    [
        {TOKEN_KEY: "tok"},
        {USER_KEY: json.dumps({"email": "john@example.com", "name": "John"})},
        {TOKEN_KEY: "tok", USER_KEY: "{not json"},
        {TOKEN_KEY: "tok", USER_KEY: json.dumps({"email": "not-an-email", "name": "x"})},
        {TOKEN_KEY: "tok", USER_KEY: json.dumps(["john@example.com"])},
        {TOKEN_KEY: "", USER_KEY: json.dumps({"email": "john@example.com", "name": "John"})},
    ],
)
def test_restore_treats_partial_or_malformed_state_as_absent(entries):
    store = SessionStore(MemoryStorage(entries))
    assert store.restore() is None
    assert not store.is_authenticated()


def test_restore_ignores_entry_that_is_not_utf8(tmp_path):
    storage = FileStorage(tmp_path)
    storage.set(USER_KEY, json.dumps({"email": "john@example.com", "name": "John Doe"}))
    (tmp_path / TOKEN_KEY).write_bytes(b"\xff\xfe\x00bad")

    store = SessionStore(storage)

    assert store.restore() is None
    assert not store.is_authenticated()


def test_restore_never_raises_on_decode_errors():
    storage = MagicMock()
    storage.get.side_effect = UnicodeDecodeError("utf-8", b"\xff", 0, 1, "invalid start byte")
    assert SessionStore(storage).restore() is None


def test_establish_replaces_undecodable_entries(tmp_path):
    (tmp_path / TOKEN_KEY).write_bytes(b"\xff\xfe")
    store = SessionStore(FileStorage(tmp_path))

    store.establish("tok-1", JOHN)

    assert SessionStore(FileStorage(tmp_path)).restore().credential == "tok-1"


def test_restore_never_raises_on_storage_errors():
    storage = MagicMock()
    storage.get.side_effect = OSError("disk gone")
    store = SessionStore(storage)

    assert store.restore() is None
    assert not store.is_authenticated()


def test_clear_is_idempotent(session_store):
    session_store.clear()
    session_store.clear()
    assert not session_store.is_authenticated()


def test_clear_notifies_listeners_synchronously(session_store):
    seen = []
    session_store.add_clear_listener(lambda: seen.append(session_store.is_authenticated()))
    session_store.establish("tok", JOHN)

    session_store.clear()

    assert seen == [False]


def test_clear_on_empty_session_does_not_notify(session_store):
    listener = MagicMock()
    session_store.add_clear_listener(listener)
    session_store.clear()
    listener.assert_not_called()


class _FailingSecondWrite(MemoryStorage):
    """Storage whose write of the identity entry fails."""

    def set(self, key, value):
        if key == USER_KEY:
            raise OSError("read-only filesystem")
        super().set(key, value)


def test_establish_failure_keeps_previous_session_and_storage():
    storage = _FailingSecondWrite(
        {TOKEN_KEY: "old-token", USER_KEY: json.dumps({"email": "jane@example.com", "name": "Jane"})}
    )
    store = SessionStore(storage)
    store.restore()

    with pytest.raises(SessionPersistenceError):
        store.establish("new-token", JOHN)

    assert store.credential == "old-token"
    assert store.identity.email == "jane@example.com"
    assert storage.get(TOKEN_KEY) == "old-token"


def test_establish_failure_from_empty_leaves_nothing_behind():
    storage = _FailingSecondWrite()
    store = SessionStore(storage)

    with pytest.raises(SessionPersistenceError):
        store.establish("new-token", JOHN)

    assert not store.is_authenticated()
    assert storage.get(TOKEN_KEY) is None


def test_file_storage_uses_owner_only_permissions(tmp_path):
    storage = FileStorage(tmp_path / "s")
    storage.set(TOKEN_KEY, "secret")
    assert (tmp_path / "s" / TOKEN_KEY).stat().st_mode & 0o777 == 0o600
    storage.remove(TOKEN_KEY)
    storage.remove(TOKEN_KEY)
    assert storage.get(TOKEN_KEY) is None

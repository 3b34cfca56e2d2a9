"""Session store: the authenticated credential and identity.

A single ``SessionStore`` instance is constructed by the caller and passed by
reference to everything that needs the credential (most importantly the
API client). Reads always go through the instance, so a ``clear()`` is
observed immediately by every holder.
"""

from __future__ import annotations

import json
import os
from collections.abc import Callable
from pathlib import Path
from typing import Protocol

from pydantic import ValidationError

from taskflow_cli.errors import SessionPersistenceError
from taskflow_cli.models import Identity, Session
from taskflow_cli.utils.logger import get_logger

TOKEN_KEY = "taskflow_token"
USER_KEY = "taskflow_user"

logger = get_logger("session")


class KeyValueStorage(Protocol):
    """Persistent string storage keyed by fixed names."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def remove(self, key: str) -> None: ...


class FileStorage:
    """Stores each entry as a separate owner-only file inside *directory*."""

    def __init__(self, directory: Path | str):
        self.directory = Path(directory)

    def _path(self, key: str) -> Path:
        return self.directory / key

    def get(self, key: str) -> str | None:
        path = self._path(key)
        if not path.exists():
            return None
        try:
            return path.read_text(encoding="utf-8")
        except UnicodeDecodeError:
            logger.warning("session entry %s is not valid UTF-8; ignoring it", key)
            return None

    def set(self, key: str, value: str) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self._path(key)
        tmp = path.with_suffix(".tmp")
        tmp.write_text(value, encoding="utf-8")
        tmp.chmod(0o600)
        os.replace(tmp, path)

    def remove(self, key: str) -> None:
        self._path(key).unlink(missing_ok=True)


class MemoryStorage:
    """Non-persistent storage, for one-shot sessions."""

    def __init__(self, initial: dict[str, str] | None = None):
        self.entries: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self.entries.get(key)

    def set(self, key: str, value: str) -> None:
        self.entries[key] = value

    def remove(self, key: str) -> None:
        self.entries.pop(key, None)


class SessionStore:
    """Holds the current session and mirrors it to persistent storage."""

    def __init__(self, storage: KeyValueStorage):
        self.storage = storage
        self._session: Session | None = None
        self._listeners: list[Callable[[], None]] = []

    @property
    def session(self) -> Session | None:
        return self._session

    @property
    def credential(self) -> str | None:
        return self._session.credential if self._session else None

    @property
    def identity(self) -> Identity | None:
        return self._session.identity if self._session else None

    def is_authenticated(self) -> bool:
        """True iff both credential and identity are present."""
        return self._session is not None

    def add_clear_listener(self, callback: Callable[[], None]) -> None:
        """Register *callback* to run synchronously whenever the session is cleared."""
        self._listeners.append(callback)

    def restore(self) -> Session | None:
        """Load the persisted session, if both entries are present and well-formed.

        Never raises: unreadable or malformed state is treated as absent.
        """
        try:
            token = self.storage.get(TOKEN_KEY)
            raw_user = self.storage.get(USER_KEY)
        except (OSError, ValueError) as e:
            logger.warning("could not read persisted session: %s", e)
            self._session = None
            return None

        if not token or not raw_user:
            self._session = None
            return None

        try:
            identity = Identity.model_validate(json.loads(raw_user))
            self._session = Session(credential=token, identity=identity)
        except (ValueError, ValidationError):
            logger.info("ignoring malformed persisted session")
            self._session = None
            return None

        logger.info("session restored for %s", identity.email)
        return self._session

    def establish(self, credential: str, identity: Identity) -> Session:
        """Persist both halves of a new session, then make it current.

        If either write fails the previously persisted entries are put back,
        the in-memory session is left untouched and SessionPersistenceError
        is raised.
        """
        session = Session(credential=credential, identity=identity)
        raw_user = json.dumps(identity.model_dump(mode="json", by_alias=True))

        try:
            previous = {
                TOKEN_KEY: self.storage.get(TOKEN_KEY),
                USER_KEY: self.storage.get(USER_KEY),
            }
        except (OSError, ValueError) as e:
            raise SessionPersistenceError(f"Failed to read session storage: {e}") from e

        try:
            self.storage.set(TOKEN_KEY, credential)
            self.storage.set(USER_KEY, raw_user)
        except OSError as e:
            self._rollback(previous)
            raise SessionPersistenceError(f"Failed to save session: {e}") from e

        self._session = session
        logger.info("session established for %s", identity.email)
        return session

    def clear(self) -> None:
        """Forget the session in memory and in storage. Idempotent."""
        was_active = self._session is not None
        self._session = None

        try:
            self.storage.remove(TOKEN_KEY)
            self.storage.remove(USER_KEY)
        except OSError as e:
            raise SessionPersistenceError(f"Failed to remove session: {e}") from e
        finally:
            if was_active:
                logger.info("session cleared")
                for callback in list(self._listeners):
                    callback()

    def _rollback(self, previous: dict[str, str | None]) -> None:
        for key, value in previous.items():
            try:
                if value is None:
                    self.storage.remove(key)
                else:
                    self.storage.set(key, value)
            except OSError as e:
                logger.error("could not restore session entry %s: %s", key, e)

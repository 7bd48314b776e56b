"""
Session identity for the storefront.

A session id is an opaque token created once per client and kept in durable
client-side storage. It is the only thing that scopes cart ownership, so it is
passed around as a ``SessionId`` capability instead of a bare string.
"""
from __future__ import annotations

import json
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional, Protocol

from storefront.utils.logger import get_logger

logger = get_logger("core.session")

SESSION_KEY = "session_id"


@dataclass(frozen=True)
class SessionId:
    """Opaque capability token for one browsing session."""
    token: str

    def __post_init__(self) -> None:
        if not isinstance(self.token, str) or not self.token.strip():
            raise ValueError("SessionId token must be a non-empty string")

    @classmethod
    def new(cls) -> "SessionId":
        # uuid4 is drawn from os.urandom
        return cls(str(uuid.uuid4()))

    def __str__(self) -> str:
        return self.token

    def __repr__(self) -> str:
        return f"SessionId({self.token[:8]}...)"


def require_session(session: SessionId) -> SessionId:
    """Reject anything that is not a SessionId at store boundaries."""
    if not isinstance(session, SessionId):
        raise TypeError(f"expected SessionId, got {type(session).__name__}")
    return session


class SessionStorage(Protocol):
    """Durable client-side key-value storage."""

    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...


class MemorySessionStorage:
    """In-process storage; lives as long as the object does."""

    def __init__(self) -> None:
        self._data: Dict[str, str] = {}

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value


class FileSessionStorage:
    """JSON file storage used by the command-line client."""

    def __init__(self, path) -> None:
        self.path = Path(path)

    def _read(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        with open(self.path, "r", encoding="utf-8") as f:
            try:
                data = json.load(f)
            except ValueError:
                # Covers both malformed JSON and bytes that are not UTF-8
                logger.warning("Session file %s is corrupt, starting over", self.path)
                return {}
        return data if isinstance(data, dict) else {}

    def get(self, key: str) -> Optional[str]:
        value = self._read().get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(data, f)


def get_or_create_session_id(storage: SessionStorage) -> SessionId:
    """
    Return the persisted session id, creating and persisting one on first use.

    When the storage cannot be read or written the id is ephemeral: a fresh one
    is returned for this call and nothing is persisted.
    """
    try:
        stored = storage.get(SESSION_KEY)
    except OSError as e:
        logger.warning("Session storage unavailable, using ephemeral session: %s", e)
        return SessionId.new()

    if stored and stored.strip():
        return SessionId(stored)

    session = SessionId.new()
    try:
        storage.set(SESSION_KEY, session.token)
    except OSError as e:
        logger.warning("Could not persist session id, session is ephemeral: %s", e)
    else:
        logger.info("Created new session %r", session)
    return session

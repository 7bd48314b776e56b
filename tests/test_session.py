"""
Session identity tests.
"""

import json

import pytest

from storefront.core.session import (
    SESSION_KEY,
    FileSessionStorage,
    MemorySessionStorage,
    SessionId,
    get_or_create_session_id,
)


class UnavailableStorage:
    def get(self, key):
        raise OSError("storage disabled")

    def set(self, key, value):
        raise OSError("storage disabled")


class ReadOnlyStorage:
    def get(self, key):
        return None

    def set(self, key, value):
        raise PermissionError("read-only")


class TestSessionId:
    def test_new_ids_are_unique(self):
        assert SessionId.new() != SessionId.new()

    def test_blank_token_rejected(self):
        with pytest.raises(ValueError):
            SessionId("  ")

    def test_repr_does_not_leak_full_token(self):
        session = SessionId("0123456789abcdef")
        assert "0123456789abcdef" not in repr(session)
        assert str(session) == "0123456789abcdef"


class TestGetOrCreate:
    def test_stable_across_calls(self):
        storage = MemorySessionStorage()
        first = get_or_create_session_id(storage)
        assert get_or_create_session_id(storage) == first
        assert storage.get(SESSION_KEY) == first.token

    def test_existing_value_returned_unchanged(self):
        storage = MemorySessionStorage()
        storage.set(SESSION_KEY, "persisted-token")
        assert get_or_create_session_id(storage) == SessionId("persisted-token")

    def test_distinct_storages_get_distinct_sessions(self):
        assert get_or_create_session_id(MemorySessionStorage()) != get_or_create_session_id(MemorySessionStorage())

    def test_unavailable_storage_gives_ephemeral_sessions(self):
        storage = UnavailableStorage()
        first = get_or_create_session_id(storage)
        second = get_or_create_session_id(storage)
        assert isinstance(first, SessionId)
        assert first != second

    def test_unwritable_storage_still_returns_a_session(self):
        storage = ReadOnlyStorage()
        assert isinstance(get_or_create_session_id(storage), SessionId)


class TestFileSessionStorage:
    def test_persists_across_instances(self, tmp_path):
        path = tmp_path / "nested" / "session.json"
        first = get_or_create_session_id(FileSessionStorage(path))
        second = get_or_create_session_id(FileSessionStorage(path))
        assert first == second
        assert json.loads(path.read_text())[SESSION_KEY] == first.token

    def test_corrupt_file_starts_over(self, tmp_path):
        path = tmp_path / "session.json"
        path.write_text("{not json")
        session = get_or_create_session_id(FileSessionStorage(path))
        assert get_or_create_session_id(FileSessionStorage(path)) == session

    def test_undecodable_file_starts_over(self, tmp_path):
        path = tmp_path / "session.json"
        path.write_bytes(b"\xff\xfe\x00garbage")
        session = get_or_create_session_id(FileSessionStorage(path))
        assert isinstance(session, SessionId)
        assert get_or_create_session_id(FileSessionStorage(path)) == session

    def test_keeps_other_keys(self, tmp_path):
        path = tmp_path / "session.json"
        path.write_text(json.dumps({"theme": "dark"}))
        get_or_create_session_id(FileSessionStorage(path))
        assert json.loads(path.read_text())["theme"] == "dark"

    def test_directory_in_the_way_is_ephemeral(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("")
        storage = FileSessionStorage(blocker / "session.json")
        assert get_or_create_session_id(storage) != get_or_create_session_id(storage)

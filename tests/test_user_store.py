"""Unit tests for auth/store.py -- UserStore persistence and error translation.

Covers:
- create() assigns id and timestamps and round-trips through find_by_username()
- UNIQUE(username) violation raises DuplicateUsernameError
- Non-duplicate failures raise StorageError, never DuplicateUsernameError
- update_password_hash() replaces the digest and bumps updated_at
- get_by_id() / ping() helpers
"""

import time

import pytest
from sqlalchemy import text

from auth.exceptions import DuplicateUsernameError, StorageError
from auth.store import UserStore


class TestCreate:
    def test_create_assigns_id_and_timestamps(self, store: UserStore) -> None:
        user = store.create("alice", "$argon2id$fake")
        assert user.id is not None
        assert user.username == "alice"
        assert user.created_at
        assert user.updated_at == user.created_at

    def test_created_user_is_findable(self, store: UserStore) -> None:
        created = store.create("alice", "$argon2id$fake")
        found = store.find_by_username("alice")
        assert found is not None
        assert found.id == created.id
        assert found.password_hash == "$argon2id$fake"

    def test_ids_are_unique(self, store: UserStore) -> None:
        a = store.create("alice", "h1")
        b = store.create("bob", "h2")
        assert a.id != b.id

    def test_duplicate_username_raises(self, store: UserStore) -> None:
        store.create("alice", "h1")
        with pytest.raises(DuplicateUsernameError) as exc_info:
            store.create("alice", "h2")
        assert exc_info.value.username == "alice"

    def test_duplicate_is_a_storage_error(self) -> None:
        assert issubclass(DuplicateUsernameError, StorageError)

    def test_username_is_case_sensitive(self, store: UserStore) -> None:
        store.create("alice", "h1")
        store.create("Alice", "h2")
        assert store.find_by_username("ALICE") is None

    def test_not_null_violation_is_not_a_duplicate(self, store: UserStore) -> None:
        """An IntegrityError that is not a uniqueness clash must not be reported as one."""
        with pytest.raises(StorageError) as exc_info:
            store.create("alice", None)  # type: ignore[arg-type]
        assert not isinstance(exc_info.value, DuplicateUsernameError)

    def test_missing_table_raises_storage_error(self, store: UserStore) -> None:
        with store.engine.connect() as conn:
            conn.execute(text("DROP TABLE users"))
            conn.commit()
        with pytest.raises(StorageError) as exc_info:
            store.create("alice", "h1")
        assert not isinstance(exc_info.value, DuplicateUsernameError)


class TestReads:
    def test_find_unknown_returns_none(self, store: UserStore) -> None:
        assert store.find_by_username("nobody") is None

    def test_get_by_id(self, store: UserStore) -> None:
        created = store.create("alice", "h1")
        assert store.get_by_id(created.id).username == "alice"
        assert store.get_by_id(created.id + 100) is None

    def test_ping(self, store: UserStore) -> None:
        assert store.ping() is True

    def test_repr_hides_password_hash(self, store: UserStore) -> None:
        user = store.create("alice", "$argon2id$secret-digest")
        assert "secret-digest" not in repr(user)


class TestUpdatePasswordHash:
    def test_replaces_digest_and_bumps_updated_at(self, store: UserStore) -> None:
        created = store.create("alice", "old")
        time.sleep(0.002)  # timestamps have microsecond resolution
        assert store.update_password_hash(created.id, "new") is True
        updated = store.get_by_id(created.id)
        assert updated.password_hash == "new"
        assert updated.created_at == created.created_at
        assert updated.updated_at > created.updated_at

    def test_unknown_id_returns_false(self, store: UserStore) -> None:
        assert store.update_password_hash(999, "new") is False

"""
auth/store.py -- SQLAlchemy Core persistence layer for users.

Pattern: Repository + Data Mapper. UserStore is the repository; _row_to_user
is the mapper. The service and route code never touch SQL directly.

Security:
  All queries use bound parameters. No f-strings in SQL.

  UNIQUE(username) is enforced by the database, not by a read-then-write
  check in code. Two concurrent inserts of the same username race on the
  constraint; the loser gets DuplicateUsernameError.

Error translation:
  SQLAlchemy exceptions never leave this module. An IntegrityError on insert
  becomes DuplicateUsernameError when the username is in fact present, and
  StorageError otherwise; every other SQLAlchemyError becomes StorageError.
  Callers branch on exception type, never on driver codes or message text.

Layer rule: no imports from api/.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from sqlalchemy import Column, Integer, MetaData, String, Table, Text, create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from auth.exceptions import DuplicateUsernameError, StorageError
from auth.models import User
from core.config import DEFAULT_DATABASE_URL

logger = logging.getLogger("forumauth.store")

# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

_metadata = MetaData()

_users = Table(
    "users",
    _metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("username", String(255), nullable=False, unique=True),
    Column("password_hash", Text, nullable=False),  # argon2 PHC string
    Column("created_at", String(32), nullable=False),
    Column("updated_at", String(32), nullable=False),
)


# ---------------------------------------------------------------------------
# WAL mode
# ---------------------------------------------------------------------------


def _set_wal_mode(dbapi_conn, connection_record) -> None:
    """Enable WAL journal mode so readers do not block during writes.

    Set per-connection because SQLite PRAGMAs are not inherited by new
    connections from the pool.
    """
    dbapi_conn.execute("PRAGMA journal_mode=WAL")


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class UserStore:
    """Repository for User entities.

    Usage:
        store = UserStore("sqlite:///:memory:")
        user = store.create("alice", hasher.hash("secret"))
        store.find_by_username("alice")
        store.close()
    """

    def __init__(self, db_url: str = DEFAULT_DATABASE_URL) -> None:
        connect_args: dict = {}
        if db_url.startswith("sqlite"):
            connect_args["check_same_thread"] = False
        self.engine: Engine = create_engine(db_url, connect_args=connect_args)
        if db_url.startswith("sqlite"):
            event.listen(self.engine, "connect", _set_wal_mode)
        try:
            _metadata.create_all(self.engine)
        except SQLAlchemyError as exc:
            raise StorageError("Could not initialize the users table") from exc

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def create(self, username: str, password_hash: str) -> User:
        """Insert a new user and return it with id and timestamps filled in.

        Raises DuplicateUsernameError if the username is taken, StorageError
        on any other failure.
        """
        now = _now_iso()
        try:
            with self.engine.connect() as conn:
                result = conn.execute(
                    _users.insert().values(
                        username=username,
                        password_hash=password_hash,
                        created_at=now,
                        updated_at=now,
                    )
                )
                conn.commit()
                user_id = result.inserted_primary_key[0]
        except IntegrityError as exc:
            # IntegrityError also covers NOT NULL violations. Only report a
            # duplicate when the row that blocked us actually exists.
            if self.find_by_username(username) is not None:
                raise DuplicateUsernameError(username) from exc
            raise StorageError("Insert into users violated a constraint") from exc
        except SQLAlchemyError as exc:
            raise StorageError("Could not insert user") from exc

        logger.info("Created user id=%s username=%s", user_id, username)
        return User(
            id=user_id,
            username=username,
            password_hash=password_hash,
            created_at=now,
            updated_at=now,
        )

    def update_password_hash(self, user_id: int, password_hash: str) -> bool:
        """Replace a user's stored digest and bump updated_at.

        Returns True if a row was updated, False if user_id was not found.
        """
        try:
            with self.engine.connect() as conn:
                result = conn.execute(
                    _users.update()
                    .where(_users.c.id == user_id)
                    .values(password_hash=password_hash, updated_at=_now_iso())
                )
                conn.commit()
        except SQLAlchemyError as exc:
            raise StorageError("Could not update password hash") from exc
        return result.rowcount > 0

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def find_by_username(self, username: str) -> User | None:
        """Look up a user by exact username (case-sensitive). Returns None if not found."""
        try:
            with self.engine.connect() as conn:
                row = conn.execute(_users.select().where(_users.c.username == username)).fetchone()
        except SQLAlchemyError as exc:
            raise StorageError("Could not query users") from exc
        return _row_to_user(row) if row is not None else None

    def get_by_id(self, user_id: int) -> User | None:
        """Look up a user by primary key. Returns None if not found."""
        try:
            with self.engine.connect() as conn:
                row = conn.execute(_users.select().where(_users.c.id == user_id)).fetchone()
        except SQLAlchemyError as exc:
            raise StorageError("Could not query users") from exc
        return _row_to_user(row) if row is not None else None

    def ping(self) -> bool:
        """Return True if the database answers a trivial query. Used by the health endpoint."""
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
        except SQLAlchemyError:
            logger.exception("Database ping failed")
            return False
        return True

    def close(self) -> None:
        self.engine.dispose()


# ---------------------------------------------------------------------------
# Row mapper (Data Mapper pattern)
# ---------------------------------------------------------------------------


def _row_to_user(row) -> User:
    return User(
        id=row.id,
        username=row.username,
        password_hash=row.password_hash,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )

"""Tests for main.py -- the register/login command line front-end.

Covers:
- register then login round trip against a temporary SQLite file
- Field errors go to stderr with exit status 1
- Public user JSON on stdout never contains the password hash
- Storage failures exit with status 2 and a generic message
"""

from __future__ import annotations

import io
import json
import sys

import pytest

from auth.exceptions import StorageError
from auth.store import UserStore

import main


@pytest.fixture
def run_cli(monkeypatch, capsys, tmp_path):
    """Return a runner: run_cli(command, username, password) -> (exit_code, stdout, stderr)."""
    db_url = f"sqlite:///{tmp_path / 'cli.db'}"

    def _run(command: str, username: str, password: str) -> tuple[int, str, str]:
        argv = ["forum-auth", command, username, "--password-stdin", "--db-url", db_url]
        monkeypatch.setattr(sys, "argv", argv)
        monkeypatch.setattr(sys, "stdin", io.StringIO(password + "\n"))
        with pytest.raises(SystemExit) as exc_info:
            main.main()
        captured = capsys.readouterr()
        return exc_info.value.code, captured.out, captured.err

    return _run


def test_register_then_login(run_cli) -> None:
    code, out, _err = run_cli("register", "alice", "hunter22")
    assert code == 0
    registered = json.loads(out)
    assert registered["username"] == "alice"
    assert "password_hash" not in registered

    code, out, _err = run_cli("login", "alice", "hunter22")
    assert code == 0
    assert json.loads(out)["id"] == registered["id"]


def test_wrong_password_exits_1(run_cli) -> None:
    run_cli("register", "alice", "hunter22")
    code, out, err = run_cli("login", "alice", "nope")
    assert code == 1
    assert out == ""
    assert "password: Incorrect password" in err


def test_duplicate_register_exits_1(run_cli) -> None:
    run_cli("register", "alice", "hunter22")
    code, _out, err = run_cli("register", "alice", "hunter23")
    assert code == 1
    assert "username: Username already taken" in err


def test_short_username_exits_1(run_cli) -> None:
    code, _out, err = run_cli("register", "ab", "hunter22")
    assert code == 1
    assert "username: Username must be longer than 2 chars" in err


def test_storage_failure_exits_2(run_cli, monkeypatch) -> None:
    def broken_create(self, username, password_hash):
        raise StorageError("database is locked")

    monkeypatch.setattr(UserStore, "create", broken_create)
    code, out, err = run_cli("register", "alice", "hunter22")
    assert code == 2
    assert out == ""
    assert "[!] The user database is unavailable." in err
    assert "locked" not in err


def test_unopenable_database_exits_2(monkeypatch, capsys, tmp_path) -> None:
    db_url = f"sqlite:///{tmp_path / 'missing-dir' / 'cli.db'}"
    monkeypatch.setattr(sys, "argv", ["forum-auth", "login", "alice", "--password-stdin", "--db-url", db_url])
    monkeypatch.setattr(sys, "stdin", io.StringIO("hunter22\n"))
    with pytest.raises(SystemExit) as exc_info:
        main.main()
    assert exc_info.value.code == 2
    assert "[!] The user database is unavailable." in capsys.readouterr().err

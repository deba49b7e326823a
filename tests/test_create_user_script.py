"""Tests for the account creation script."""

import pytest

from app.infrastructure.database import SessionLocal
from app.infrastructure.repositories import UserRepository
from app.infrastructure.security import verify_password
from scripts.create_user import main


def test_creates_user_with_hashed_password(database, capsys):
    main(["dave", "--email", "dave@example.com", "--role", "teacher", "--password", "pw123456"])

    assert "Username: dave" in capsys.readouterr().out
    with SessionLocal() as session:
        user = UserRepository(session).get_by_username("dave")
    assert user.role == "teacher"
    assert verify_password("pw123456", user.password)


def test_duplicate_username_exits_with_message(database):
    main(["dave", "--email", "dave@example.com", "--password", "pw123456"])

    with pytest.raises(SystemExit, match="Username already exists"):
        main(["dave", "--email", "other@example.com", "--password", "pw123456"])

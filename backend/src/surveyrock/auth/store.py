"""User persistence."""

from typing import Any

from surveyrock.auth.types import User
from surveyrock.persistence.store import SqlStore, new_id, utc_now


class DuplicateEmailError(Exception):
    """Raised when registering an email that is already taken."""

    pass


class UserStore(SqlStore):
    """Users table access."""

    DDL = (
        """
        CREATE TABLE IF NOT EXISTS users (
            id              TEXT PRIMARY KEY,
            email           TEXT NOT NULL UNIQUE,
            name            TEXT NOT NULL,
            password_hash   TEXT NOT NULL,
            role            TEXT NOT NULL DEFAULT 'user',
            active          INTEGER NOT NULL DEFAULT 1,
            created_at      TEXT,
            updated_at      TEXT
        )
        """,
    )

    def _row_to_user(self, row: Any) -> User:
        return User(
            id=row["id"],
            email=row["email"],
            name=row["name"],
            password_hash=row["password_hash"],
            role=row["role"],
            active=bool(row["active"]),
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )

    def create(self, email: str, name: str, password_hash: str, role: str = "user") -> User:
        email = email.strip().lower()
        if self.get_by_email(email):
            raise DuplicateEmailError(f"A user with email '{email}' already exists")

        now = utc_now()
        user_id = new_id()
        self._execute(
            """
            INSERT INTO users
                (id, email, name, password_hash, role, active, created_at, updated_at)
            VALUES
                (:id, :email, :name, :password_hash, :role, 1, :created_at, :updated_at)
            """,
            {
                "id": user_id,
                "email": email,
                "name": name,
                "password_hash": password_hash,
                "role": role,
                "created_at": now,
                "updated_at": now,
            },
        )
        return self.get(user_id)  # type: ignore[return-value]

    def get(self, user_id: str) -> User | None:
        row = self._fetch_one("SELECT * FROM users WHERE id = :id", {"id": user_id})
        return self._row_to_user(row) if row else None

    def get_by_email(self, email: str) -> User | None:
        row = self._fetch_one(
            "SELECT * FROM users WHERE email = :email",
            {"email": email.strip().lower()},
        )
        return self._row_to_user(row) if row else None

    def set_active(self, user_id: str, active: bool) -> bool:
        return self._update_columns("users", user_id, {"active": int(active)}, {"active"})

    def set_password_hash(self, user_id: str, password_hash: str) -> bool:
        return self._update_columns("users", user_id, {"password_hash": password_hash}, {"password_hash"})

    def count(self) -> int:
        row = self._fetch_one("SELECT COUNT(*) AS n FROM users", {})
        return int(row["n"]) if row else 0

"""Database repository for account data."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from psycopg import errors
from psycopg.rows import tuple_row
from psycopg_pool import ConnectionPool

from .domain.account import Account
from .domain.contracts import NewAccount
from .domain.errors import AccountConflictError

SCHEMA_DDL = """
CREATE TABLE IF NOT EXISTS accounts (
    account_id    UUID PRIMARY KEY,
    username      TEXT NOT NULL,
    name          TEXT NOT NULL,
    email         TEXT NOT NULL,
    email_lower   TEXT NOT NULL,
    password_hash TEXT NOT NULL,
    created_at    TIMESTAMPTZ NOT NULL,
    updated_at    TIMESTAMPTZ NOT NULL,
    CONSTRAINT accounts_username_key UNIQUE (username),
    CONSTRAINT accounts_email_lower_key UNIQUE (email_lower)
)
"""

_COLUMNS = "account_id, username, name, email, password_hash, created_at"

_CONSTRAINT_FIELDS = {
    "accounts_username_key": "username",
    "accounts_email_lower_key": "email",
}


class AccountRepository:
    """Postgres-backed account persistence keyed by username."""

    def __init__(self, pool: ConnectionPool) -> None:
        """Store the connection pool used for all database interactions."""
        self._pool = pool

    def ensure_schema(self) -> None:
        """Create the accounts table when it does not exist yet."""
        with self._pool.connection() as conn:
            conn.execute(SCHEMA_DDL)
            conn.commit()

    def find_by_username(self, username: str) -> Account | None:
        """Return the account registered under ``username`` or ``None``."""
        with self._pool.connection() as conn:
            with conn.cursor(row_factory=tuple_row) as cur:
                cur.execute(
                    f"SELECT {_COLUMNS} FROM accounts WHERE username = %s",
                    (username,),
                )
                row = cur.fetchone()
        if not row:
            return None
        return self._map_record(row)

    def find_by_id(self, account_id: str) -> Account | None:
        """Return the account with the given identifier or ``None``."""
        try:
            key = uuid.UUID(account_id)
        except ValueError:
            return None
        with self._pool.connection() as conn:
            with conn.cursor(row_factory=tuple_row) as cur:
                cur.execute(
                    f"SELECT {_COLUMNS} FROM accounts WHERE account_id = %s",
                    (key,),
                )
                row = cur.fetchone()
        if not row:
            return None
        return self._map_record(row)

    def create(self, payload: NewAccount) -> Account:
        """Insert a new account row; raises :class:`AccountConflictError` on duplicates."""
        now = datetime.now(timezone.utc)
        try:
            with self._pool.connection() as conn:
                with conn.cursor(row_factory=tuple_row) as cur:
                    cur.execute(
                        f"""
                        INSERT INTO accounts
                            (account_id, username, name, email, email_lower, password_hash, created_at, updated_at)
                        VALUES (%s, %s, %s, %s, %s, %s, %s, %s)
                        RETURNING {_COLUMNS}
                        """,
                        (
                            uuid.uuid4(),
                            payload.username,
                            payload.name,
                            payload.email,
                            payload.email.lower(),
                            payload.password_hash,
                            now,
                            now,
                        ),
                    )
                    record = cur.fetchone()
                conn.commit()
        except errors.UniqueViolation as exc:
            raise self._conflict(exc) from exc
        return self._map_record(record)

    def update(
        self,
        username: str,
        *,
        name: str | None = None,
        email: str | None = None,
        password_hash: str | None = None,
    ) -> Account | None:
        """Apply the non-``None`` changes to an account and return the updated row."""
        assignments = ["updated_at = %s"]
        params: list[object] = [datetime.now(timezone.utc)]
        if name is not None:
            assignments.append("name = %s")
            params.append(name)
        if email is not None:
            assignments.extend(["email = %s", "email_lower = %s"])
            params.extend([email, email.lower()])
        if password_hash is not None:
            assignments.append("password_hash = %s")
            params.append(password_hash)
        params.append(username)

        try:
            with self._pool.connection() as conn:
                with conn.cursor(row_factory=tuple_row) as cur:
                    cur.execute(
                        f"""
                        UPDATE accounts
                        SET {", ".join(assignments)}
                        WHERE username = %s
                        RETURNING {_COLUMNS}
                        """,
                        params,
                    )
                    row = cur.fetchone()
                conn.commit()
        except errors.UniqueViolation as exc:
            raise self._conflict(exc) from exc
        if not row:
            return None
        return self._map_record(row)

    def delete(self, username: str) -> bool:
        """Remove the account; return ``True`` when a row was deleted."""
        with self._pool.connection() as conn:
            with conn.cursor() as cur:
                cur.execute("DELETE FROM accounts WHERE username = %s", (username,))
                deleted = cur.rowcount > 0
            conn.commit()
        return deleted

    def _conflict(self, exc: errors.UniqueViolation) -> AccountConflictError:
        constraint = exc.diag.constraint_name or ""
        return AccountConflictError(_CONSTRAINT_FIELDS.get(constraint, "username"))

    def _map_record(self, row: tuple) -> Account:
        """Convert a raw database tuple into the domain ``Account`` dataclass."""
        return Account(
            account_id=str(row[0]),
            username=row[1],
            name=row[2],
            email=row[3],
            password_hash=row[4],
            created_at=row[5],
        )

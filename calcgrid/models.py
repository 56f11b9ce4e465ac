"""Records stored by the orchestrator and the queries on them."""

from __future__ import annotations

import sqlite3
from dataclasses import dataclass


class NotFoundError(LookupError):
    """No row matched the query."""


@dataclass
class User:
    id: int
    login: str
    password_hash: str


@dataclass
class Expression:
    id: int
    user_id: int
    expression: str
    status: str
    result: float | None = None


@dataclass
class Task:
    id: int
    expression_id: int
    arg1: float
    arg2: float
    operation: str
    operation_time: int
    status: str


_EXPRESSION_COLUMNS = "SELECT id, user_id, expression, status, result FROM expressions "


def _insert(conn: sqlite3.Connection, sql: str, params: tuple) -> int:
    with conn:
        return conn.execute(sql, params).lastrowid


def create_user(conn: sqlite3.Connection, login: str, password_hash: str) -> int:
    """Insert a user and return its id; a taken login raises ``IntegrityError``."""
    return _insert(
        conn, "INSERT INTO users (login, password_hash) VALUES (?, ?)", (login, password_hash)
    )


def get_user_by_login(conn: sqlite3.Connection, login: str) -> User:
    row = conn.execute(
        "SELECT id, login, password_hash FROM users WHERE login = ?", (login,)
    ).fetchone()
    if row is None:
        raise NotFoundError(f"no user with login {login!r}")
    return User(*row)


def add_expression(conn: sqlite3.Connection, user_id: int, expression: str) -> int:
    """Store an expression for a user and return its id."""
    return _insert(
        conn, "INSERT INTO expressions (user_id, expression) VALUES (?, ?)", (user_id, expression)
    )


def get_expressions(conn: sqlite3.Connection, user_id: int) -> list[Expression]:
    rows = conn.execute(
        _EXPRESSION_COLUMNS + "WHERE user_id = ? ORDER BY id", (user_id,)
    ).fetchall()
    return [Expression(*row) for row in rows]


def get_expression_by_id(
    conn: sqlite3.Connection, user_id: int, expression_id: int
) -> Expression:
    row = conn.execute(
        _EXPRESSION_COLUMNS + "WHERE id = ? AND user_id = ?", (expression_id, user_id)
    ).fetchone()
    if row is None:
        raise NotFoundError(f"no expression {expression_id} for user {user_id}")
    return Expression(*row)
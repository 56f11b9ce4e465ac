import sqlite3

import pytest

from calcgrid.database import init_db
from calcgrid.models import (
    Expression,
    NotFoundError,
    User,
    add_expression,
    create_user,
    get_expression_by_id,
    get_expressions,
    get_user_by_login,
)


@pytest.fixture
def conn():
    connection = init_db(":memory:")
    yield connection
    connection.close()


def test_create_and_fetch_user(conn):
    user_id = create_user(conn, "alice", "placeholder")
    user = get_user_by_login(conn, "alice")
    assert user == User(id=user_id, login="alice", password_hash="placeholder")


def test_missing_user_raises(conn):
    with pytest.raises(NotFoundError):
        get_user_by_login(conn, "nobody")


def test_duplicate_login_rejected(conn):
    create_user(conn, "alice", "placeholder")
    with pytest.raises(sqlite3.IntegrityError):
        create_user(conn, "alice", "placeholder")


def test_add_expression_returns_distinct_ids(conn):
    user_id = create_user(conn, "alice", "placeholder")
    first = add_expression(conn, user_id, "1+2")
    second = add_expression(conn, user_id, "3*4")
    assert first != second
    assert first > 0 and second > 0


def test_new_expression_is_pending(conn):
    user_id = create_user(conn, "alice", "placeholder")
    expr_id = add_expression(conn, user_id, "2-1")
    expr = get_expression_by_id(conn, user_id, expr_id)
    assert expr == Expression(
        id=expr_id, user_id=user_id, expression="2-1", status="pending", result=None
    )


def test_get_expressions_only_for_owner(conn):
    alice = create_user(conn, "alice", "placeholder")
    bob = create_user(conn, "bob", "placeholder")
    a1 = add_expression(conn, alice, "1+1")
    add_expression(conn, bob, "2+2")
    a2 = add_expression(conn, alice, "3+3")
    result = get_expressions(conn, alice)
    assert [e.id for e in result] == [a1, a2]
    assert [e.expression for e in result] == ["1+1", "3+3"]
    assert all(e.user_id == alice for e in result)


def test_get_expressions_empty(conn):
    user_id = create_user(conn, "carol", "placeholder")
    assert get_expressions(conn, user_id) == []


def test_expression_of_other_user_not_found(conn):
    alice = create_user(conn, "alice", "placeholder")
    bob = create_user(conn, "bob", "placeholder")
    expr_id = add_expression(conn, alice, "5/5")
    with pytest.raises(NotFoundError):
        get_expression_by_id(conn, bob, expr_id)


def test_unknown_expression_id_not_found(conn):
    alice = create_user(conn, "alice", "placeholder")
    with pytest.raises(NotFoundError):
        get_expression_by_id(conn, alice, 12345)


def test_stored_result_is_read_back(conn):
    alice = create_user(conn, "alice", "placeholder")
    expr_id = add_expression(conn, alice, "1.5*2")
    with conn:
        conn.execute(
            "UPDATE expressions SET status = ?, result = ? WHERE id = ?",
            ("completed", 3.0, expr_id),
        )
    expr = get_expression_by_id(conn, alice, expr_id)
    assert expr.status == "completed"
    assert expr.result == 3.0
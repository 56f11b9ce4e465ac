"""HTTP API of the orchestrator: accounts, login and expressions."""

from __future__ import annotations

import argparse
import functools
import json
import logging
import re
import sqlite3
import threading

import bcrypt
from flask import Flask, Response, g, jsonify, request

from calcgrid.auth import AuthError, generate_jwt, parse_authorization
from calcgrid.config import Config, load_config
from calcgrid.database import init_db
from calcgrid.models import (
    Expression,
    NotFoundError,
    add_expression,
    create_user,
    get_expression_by_id,
    get_expressions,
    get_user_by_login,
)
from calcgrid.scheduler import Scheduler
from calcgrid.taskservice import DEFAULT_PORT as TASK_SERVICE_PORT
from calcgrid.taskservice import TaskService, serve

log = logging.getLogger(__name__)

DEFAULT_PORT = 8080
BCRYPT_COST = 10
BCRYPT_MAX_PASSWORD_BYTES = 72

_LOGIN_FIELD = "login"
_PASSWORD_FIELD = "password"

_ID_PATTERN = re.compile(r"[+-]?[0-9]+")
_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1


def _error(message: str, status: int) -> Response:
    return Response(message + "\n", status=status, mimetype="text/plain")


def _decode_fields(raw: bytes, *names: str) -> dict[str, str]:
    """Decode the first JSON value of a body into string fields; raise ``ValueError``."""
    text = raw.decode("utf-8", errors="replace").lstrip(" \t\r\n")
    value, _ = json.JSONDecoder().raw_decode(text)
    if value is None:
        return {name: "" for name in names}
    if not isinstance(value, dict):
        raise ValueError("request body must be a JSON object")
    fields = {}
    for name in names:
        item = value.get(name)
        if item is None:
            fields[name] = ""
        elif isinstance(item, str):
            fields[name] = item
        else:
            raise ValueError(f"field {name!r} must be a string")
    return fields


def _parse_id(text: str) -> int | None:
    if not _ID_PATTERN.fullmatch(text):
        return None
    value = int(text)
    return value if _INT64_MIN <= value <= _INT64_MAX else None


def _expression_json(expression: Expression) -> dict:
    return {
        "ID": expression.id,
        "UserID": expression.user_id,
        "Expression": expression.expression,
        "Status": expression.status,
        "Result": expression.result,
    }


def _password_matches(password: bytes, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password, password_hash.encode())
    except ValueError:
        return False


def create_app(config: Config, conn: sqlite3.Connection, scheduler: Scheduler) -> Flask:
    """Build the orchestrator's web application."""
    app = Flask(__name__)
    db_lock = threading.Lock()

    def protected(view):
        @functools.wraps(view)
        def wrapper(*args, **kwargs):
            try:
                g.user_id = parse_authorization(
                    request.headers.get("Authorization"), config.jwt_secret
                )
            except AuthError as exc:
                return _error(str(exc), exc.status_code)
            return view(*args, **kwargs)

        return wrapper

    @app.post("/api/v1/register")
    def register():
        try:
            fields = _decode_fields(request.get_data(), _LOGIN_FIELD, _PASSWORD_FIELD)
        except ValueError:
            return _error("Invalid request", 400)

        password = fields[_PASSWORD_FIELD].encode()
        if len(password) > BCRYPT_MAX_PASSWORD_BYTES:
            return _error("Failed to hash password", 500)
        password_hash = bcrypt.hashpw(password, bcrypt.gensalt(rounds=BCRYPT_COST))

        try:
            with db_lock:
                create_user(conn, fields[_LOGIN_FIELD], password_hash.decode())
        except sqlite3.Error:
            return _error("Failed to register user", 500)
        return Response("OK", status=200, mimetype="text/plain")

    @app.post("/api/v1/login")
    def login():
        try:
            fields = _decode_fields(request.get_data(), _LOGIN_FIELD, _PASSWORD_FIELD)
        except ValueError:
            return _error("Invalid request", 400)

        try:
            with db_lock:
                user = get_user_by_login(conn, fields[_LOGIN_FIELD])
        except (NotFoundError, sqlite3.Error):
            return _error("Invalid login or password", 401)

        if not _password_matches(fields[_PASSWORD_FIELD].encode(), user.password_hash):
            return _error("Invalid login or password", 401)

        return jsonify({"token": generate_jwt(user.id, config.jwt_secret)}), 200

    @app.post("/api/v1/calculate")
    @protected
    def calculate():
        try:
            fields = _decode_fields(request.get_data(), "expression")
        except ValueError:
            return _error("Invalid request", 422)

        try:
            with db_lock:
                expression_id = add_expression(conn, g.user_id, fields["expression"])
        except sqlite3.Error:
            return _error("Failed to add expression", 500)

        scheduler.register_expression(
            Expression(
                id=expression_id,
                user_id=g.user_id,
                expression=fields["expression"],
                status="pending",
            )
        )
        return jsonify({"id": expression_id}), 201

    @app.get("/api/v1/expressions")
    @protected
    def list_expressions():
        try:
            with db_lock:
                expressions = get_expressions(conn, g.user_id)
        except sqlite3.Error:
            return _error("Failed to fetch expressions", 500)
        return jsonify({"expressions": [_expression_json(e) for e in expressions]})

    @app.get("/api/v1/expressions/<id_text>")
    @protected
    def show_expression(id_text: str):
        expression_id = _parse_id(id_text)
        if expression_id is None:
            return _error("Invalid ID", 400)
        try:
            with db_lock:
                expression = get_expression_by_id(conn, g.user_id, expression_id)
        except (NotFoundError, sqlite3.Error):
            return _error("Expression not found", 404)
        return jsonify({"expression": _expression_json(expression)})

    return app


def main(argv: list[str] | None = None) -> int:
    """Run the orchestrator: the task service in the background and the web API."""
    parser = argparse.ArgumentParser(prog="calcgrid-orchestrator")
    parser.add_argument("--port", type=int, default=DEFAULT_PORT)
    parser.add_argument("--task-port", type=int, default=TASK_SERVICE_PORT)
    args = parser.parse_args(argv)

    config = load_config()
    conn = init_db(config.database_url)
    scheduler = Scheduler()

    threading.Thread(
        target=serve, args=(TaskService(scheduler), "", args.task_port), daemon=True
    ).start()

    app = create_app(config, conn, scheduler)
    log.info("Orchestrator is running on port %d", args.port)
    app.run(host="0.0.0.0", port=args.port)
    return 0
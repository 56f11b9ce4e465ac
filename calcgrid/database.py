"""Opening the SQLite database and creating its tables."""

import logging
import sqlite3

log = logging.getLogger(__name__)

SCHEMA = """
CREATE TABLE IF NOT EXISTS users (id INTEGER PRIMARY KEY AUTOINCREMENT,
    login TEXT NOT NULL UNIQUE, password_hash TEXT NOT NULL);
CREATE TABLE IF NOT EXISTS expressions (id INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id INTEGER NOT NULL REFERENCES users(id), expression TEXT NOT NULL,
    status TEXT NOT NULL DEFAULT 'pending', result REAL);
CREATE TABLE IF NOT EXISTS tasks (id INTEGER PRIMARY KEY AUTOINCREMENT,
    expression_id INTEGER NOT NULL REFERENCES expressions(id),
    arg1 REAL NOT NULL, arg2 REAL NOT NULL, operation TEXT NOT NULL,
    operation_time INTEGER NOT NULL DEFAULT 0, status TEXT NOT NULL DEFAULT 'pending');
"""


def create_schema(conn):
    """Create the tables if they do not exist yet."""
    conn.executescript(SCHEMA)


def init_db(data_source_name):
    """Open the database named by a path or ``sqlite:///`` URL and prepare it."""
    scheme, sep, rest = data_source_name.partition("://")
    if sep and (scheme != "sqlite" or (rest and not rest.startswith("/"))):
        raise ValueError(f"unsupported database URL: {data_source_name!r}")
    conn = sqlite3.connect((rest[1:] or ":memory:") if sep else data_source_name,
                           check_same_thread=False)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    create_schema(conn)
    log.info("Connected to the database")
    return conn
"""Settings read from the environment and an optional ``.env`` file."""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

log = logging.getLogger(__name__)

DEFAULT_DATABASE_URL = "sqlite:///calc_proj.db"
DEFAULT_JWT_SECRET = "secret"
_SIGNING_ENV = "JWT_SECRET"

_INT_PATTERN = re.compile(r"[+-]?[0-9]+")


@dataclass(frozen=True)
class Config:
    """Runtime settings of the orchestrator and the agents."""

    database_url: str = DEFAULT_DATABASE_URL
    jwt_secret: str = DEFAULT_JWT_SECRET
    time_addition_ms: int = 100
    time_subtraction_ms: int = 100
    time_multiplication_ms: int = 200
    time_division_ms: int = 200
    computing_power: int = 4


def get_env(key: str, default: str) -> str:
    """Return the variable ``key`` if it is set, even to an empty string."""
    return os.environ.get(key, default)


def get_env_as_int(key: str, default: int) -> int:
    """Return ``key`` as a 64-bit integer, or ``default`` if unset or invalid."""
    text = os.environ.get(key)
    if text is None or not _INT_PATTERN.fullmatch(text):
        return default
    value = int(text)
    return value if -(2**63) <= value < 2**63 else default


def load_config() -> Config:
    """Load ``.env`` from the working directory, then build the settings."""
    if Path(".env").is_file():
        load_dotenv(".env")
    else:
        log.info("No .env file found, using environment variables")
    return Config(
        database_url=get_env("DATABASE_URL", DEFAULT_DATABASE_URL),
        jwt_secret=get_env(_SIGNING_ENV, DEFAULT_JWT_SECRET),
        time_addition_ms=get_env_as_int("TIME_ADDITION_MS", 100),
        time_subtraction_ms=get_env_as_int("TIME_SUBTRACTION_MS", 100),
        time_multiplication_ms=get_env_as_int("TIME_MULTIPLICATIONS_MS", 200),
        time_division_ms=get_env_as_int("TIME_DIVISIONS_MS", 200),
        computing_power=get_env_as_int("COMPUTING_POWER", 4),
    )
"""Shared fixtures for the test modules: in-memory storage, config and sample payloads."""
from datetime import timedelta

from models.db_storage import DBStorage
from models.enums import Role

TEST_CONFIG = {
    "JWT_SECRET": "unit-test-secret-key-that-is-long-enough",
    "JWT_ALGORITHM": "HS256",
    "JWT_ISSUER": "pos-warehouse-api",
    "JWT_AUDIENCE": "pos-warehouse-client",
    "JWT_ACCESS_TOKEN_EXPIRES": timedelta(hours=24),
    "JWT_REFRESH_TOKEN_EXPIRES": timedelta(days=7),
    "REFRESH_TOKEN_RETENTION": timedelta(days=7),
    "PAGINATION_MAX_LIMIT": 100,
}

STRONG_PASSWORD = "Str0ng!Pass"


def make_storage() -> DBStorage:
    """Fresh in-memory SQLite database with every table created."""
    storage = DBStorage("sqlite://")
    storage.reload()
    return storage


def dispose_storage(storage: DBStorage) -> None:
    storage.close()
    storage.engine.dispose()


def user_data(n: int = 1, **overrides):
    data = {
        "email": f"user{n}@example.com",
        "password": STRONG_PASSWORD,
        "name": f"User {n}",
        "username": f"user{n}",
        "phone": f"08123456{n:03d}",
        "role": Role.ANGGOTA,
        "address": None,
        "code": f"U{n:03d}",
    }
    data.update(overrides)
    return data

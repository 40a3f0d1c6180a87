from __future__ import annotations

import logging
from typing import List, Tuple

from pymongo import ASCENDING, DESCENDING
from pymongo.database import Database
from werkzeug.security import generate_password_hash

from ..common.datetime_utils import now_utc
from ..core.enums import Role
from .connection import DatabaseConnection

logger = logging.getLogger(__name__)

# (collection, keys, unique, extra options)
INDEXES: List[Tuple[str, list, bool, dict]] = [
    ("users", [("username", ASCENDING)], True, {}),
    ("users", [("email", ASCENDING)], True, {}),
    (
        "labourers",
        [("user_id", ASCENDING)],
        True,
        {"partialFilterExpression": {"user_id": {"$type": "objectId"}}},
    ),
    ("labourers", [("assigned_project_id", ASCENDING)], False, {}),
    ("projects", [("manager_id", ASCENDING)], False, {}),
    (
        "attendance",
        [("labourer_id", ASCENDING), ("project_id", ASCENDING), ("date", ASCENDING), ("shift", ASCENDING)],
        True,
        {},
    ),
    ("attendance", [("date", DESCENDING), ("status", ASCENDING)], False, {}),
    ("leaves", [("labourer_id", ASCENDING), ("from_date", DESCENDING)], False, {}),
    (
        "performance",
        [("labourer_id", ASCENDING), ("project_id", ASCENDING), ("date", ASCENDING)],
        True,
        {},
    ),
    (
        "salaries",
        [("labourer_id", ASCENDING), ("start_period", ASCENDING), ("end_period", ASCENDING)],
        True,
        {},
    ),
    ("notifications", [("user_id", ASCENDING), ("created_at", DESCENDING)], False, {}),
]

DEMO_USERS = [
    # name, username, email, password, role
    ("Administrator", "admin", "admin@example.com", "admin123", Role.ADMIN),
    ("Site Manager", "manager", "manager@example.com", "manager123", Role.MANAGER),
]


def ensure_indexes(db: Database) -> int:
    """Create the unique and lookup indexes. Idempotent."""
    for collection, keys, unique, options in INDEXES:
        db[collection].create_index(keys, unique=unique, **options)
    logger.info("indexes ready (%d)", len(INDEXES))
    return len(INDEXES)


def ensure_demo_users(db: Database) -> None:
    """Upsert the demo admin/manager accounts with werkzeug password hashes."""
    users = db["users"]
    for name, username, email, password, role in DEMO_USERS:
        now = now_utc()
        users.update_one(
            {"username": username},
            {
                "$set": {
                    "name": name,
                    "email": email,
                    "password_hash": generate_password_hash(password),
                    "phone": "0000000000",
                    "role": role.value,
                    "updated_at": now,
                },
                "$setOnInsert": {"created_at": now, "refresh_token": None},
            },
            upsert=True,
        )
    logger.info("demo users ready (%s)", ", ".join(u[1] for u in DEMO_USERS))


def bootstrap(conn: DatabaseConnection, *, init_db: bool, seed_db: bool) -> None:
    if init_db:
        ensure_indexes(conn.database)
    if seed_db:
        ensure_demo_users(conn.database)

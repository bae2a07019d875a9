"""
auth.py
Dashboard authentication (bcrypt hashing, verify, login, change password)
backed by a flat users store: username;password_hash;role;force_change
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

import bcrypt
from loguru import logger

import store

DEFAULT_USERNAME = "admin"
DEFAULT_PASSWORD = "admin123"
MIN_PASSWORD_LENGTH = 6


class Role(str, Enum):
    CHAIRMAN = "CHAIRMAN"
    TREASURER = "TREASURER"
    COACH = "COACH"
    ADMIN = "ADMIN"


@dataclass
class User:
    username: str
    password_hash: str
    role: Role
    force_password_change: bool = False

    def to_record(self) -> str:
        return store.join_record(
            [self.username, self.password_hash, self.role.name, int(self.force_password_change)]
        )


def _to_bcrypt_secret(password: str) -> bytes:
    """
    bcrypt only uses the first 72 BYTES of the password.
    We truncate to 72 bytes to avoid ValueError and to make behavior explicit.
    """
    pw = password.encode("utf-8")
    if len(pw) > 72:
        pw = pw[:72]
    return pw


def hash_password(password: str) -> str:
    secret = _to_bcrypt_secret(password)
    salt = bcrypt.gensalt(rounds=12)
    hashed = bcrypt.hashpw(secret, salt)
    return hashed.decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    secret = _to_bcrypt_secret(password)
    stored = password_hash.encode("utf-8")
    return bcrypt.checkpw(secret, stored)


def load_users(path: str | Path) -> dict[str, User]:
    users = {}
    for line in store.read_lines(path):
        parts = store.split_record(line)
        if len(parts) != 4:
            logger.error(f"Skipping invalid user record in {path}")
            continue
        try:
            role = Role(parts[2].upper())
        except ValueError:
            logger.error(f"Unknown role '{parts[2]}' for user {parts[0]}")
            continue
        users[parts[0]] = User(parts[0], parts[1], role, parts[3] == "1")
    return users


def save_users(path: str | Path, users: dict[str, User]) -> bool:
    return store.write_lines(path, [u.to_record() for u in users.values()])


def ensure_default_user(path: str | Path) -> None:
    """
    Create the default admin (admin/admin123) if the store has no users.
    The default password must be changed on first login.
    """
    users = load_users(path)
    if users:
        return
    users[DEFAULT_USERNAME] = User(
        DEFAULT_USERNAME, hash_password(DEFAULT_PASSWORD), Role.ADMIN, force_password_change=True
    )
    save_users(path, users)
    logger.info(f"Default user '{DEFAULT_USERNAME}' created in {path}")


def login(path: str | Path, username: str, password: str) -> User | None:
    user = load_users(path).get(username)
    if user is None or not verify_password(password, user.password_hash):
        logger.warning(f"Failed login for '{username}'")
        return None
    return user


def is_force_password_change(path: str | Path, username: str) -> bool:
    user = load_users(path).get(username)
    return bool(user and user.force_password_change)


def change_password(path: str | Path, username: str, new_password: str) -> bool:
    if len(new_password) < MIN_PASSWORD_LENGTH:
        return False
    users = load_users(path)
    user = users.get(username)
    if user is None:
        return False
    user.password_hash = hash_password(new_password)
    user.force_password_change = False
    return save_users(path, users)

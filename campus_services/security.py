"""Password rules and hashing for self-registered accounts."""

import re

import bcrypt

from .config import BCRYPT_ROUNDS

MIN_PASSWORD_LENGTH = 6

# (rule name, check) pairs, reported back to the user in this order
PASSWORD_RULES = [
    ("length", lambda p: len(p) >= MIN_PASSWORD_LENGTH),
    ("lowercase", lambda p: re.search(r"[a-z]", p) is not None),
    ("uppercase", lambda p: re.search(r"[A-Z]", p) is not None),
    ("symbol", lambda p: re.search(r"[^A-Za-z0-9]", p) is not None),
]


def check_password_strength(password: str) -> dict[str, bool]:
    return {name: check(password) for name, check in PASSWORD_RULES}


def unmet_password_rules(password: str) -> list[str]:
    return [name for name, met in check_password_strength(password).items() if not met]


def get_password_hash(password: str) -> str:
    # bcrypt only looks at the first 72 bytes
    password_bytes = password.encode("utf-8")[:72]
    hashed = bcrypt.hashpw(password_bytes, bcrypt.gensalt(rounds=BCRYPT_ROUNDS))
    return hashed.decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    password_bytes = plain_password.encode("utf-8")[:72]
    return bcrypt.checkpw(password_bytes, hashed_password.encode("utf-8"))

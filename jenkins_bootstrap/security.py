"""Controller security model: user store and authorization strategy."""

import hashlib
import hmac
import os
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional

_HASH_ITERATIONS = 200_000


class AuthorizationStrategy(str, Enum):
    """Process-wide authorization policy."""
    UNSECURED = "unsecured"  # anyone, including anonymous, may do anything
    FULL_CONTROL_ONCE_LOGGED_IN = "full-control-once-logged-in"


def hash_password(password: str, salt: Optional[bytes] = None) -> str:
    """Return a ``pbkdf2_sha256$iterations$salt$digest`` string for a password."""
    salt = salt if salt is not None else os.urandom(16)
    digest = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, _HASH_ITERATIONS)
    return f"pbkdf2_sha256${_HASH_ITERATIONS}${salt.hex()}${digest.hex()}"


def verify_password(password: str, encoded: str) -> bool:
    """Check a password against a string produced by hash_password."""
    try:
        algorithm, iterations, salt, digest = encoded.split("$")
        if algorithm != "pbkdf2_sha256":
            return False
        candidate = hashlib.pbkdf2_hmac(
            "sha256", password.encode("utf-8"), bytes.fromhex(salt), int(iterations)
        )
    except ValueError:
        return False
    return hmac.compare_digest(candidate.hex(), digest)


@dataclass
class User:
    """An account in the controller's internal user database."""
    username: str
    password_hash: str

    def to_dict(self) -> dict:
        return {"username": self.username, "password_hash": self.password_hash}

    @classmethod
    def from_dict(cls, data: dict) -> "User":
        return cls(username=data["username"], password_hash=data["password_hash"])


class UserStore:
    """Internal user database, keyed by username."""

    def __init__(self, users: Optional[List[User]] = None):
        self._users: Dict[str, User] = {}
        for user in users or []:
            self._users[user.username] = user

    def __len__(self) -> int:
        return len(self._users)

    def __contains__(self, username: str) -> bool:
        return username in self._users

    def get(self, username: str) -> Optional[User]:
        return self._users.get(username)

    def usernames(self) -> List[str]:
        return sorted(self._users)

    def upsert(self, username: str, password: str) -> bool:
        """
        Create the account, or reset its password if it already exists.

        An existing account whose password already matches is left
        untouched, so repeated calls with the same values are no-ops.

        Returns:
            True if the store changed, False otherwise
        """
        existing = self._users.get(username)
        if existing is not None and verify_password(password, existing.password_hash):
            return False
        self._users[username] = User(username, hash_password(password))
        return True

    def remove(self, username: str) -> bool:
        return self._users.pop(username, None) is not None

    def authenticate(self, username: str, password: str) -> bool:
        user = self._users.get(username)
        if user is None:
            return False
        return verify_password(password, user.password_hash)

    def to_list(self) -> List[dict]:
        return [self._users[name].to_dict() for name in self.usernames()]

    @classmethod
    def from_list(cls, data: List[dict]) -> "UserStore":
        return cls([User.from_dict(item) for item in data])

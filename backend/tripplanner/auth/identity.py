from __future__ import annotations

import hashlib
import hmac
import logging
import secrets
from dataclasses import dataclass, field
from typing import Dict, List, Optional
from uuid import uuid4

from tripplanner.core.errors import AuthError, ValidationError
from tripplanner.models.domain import AuthSessionInfo, User

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6
_HASH_ITERATIONS = 100_000


def _hash_password(password: str, salt: str) -> str:
    digest = hashlib.pbkdf2_hmac(
        "sha256", password.encode("utf-8"), salt.encode("utf-8"), _HASH_ITERATIONS
    )
    return digest.hex()


@dataclass
class _Account:
    user: User
    salt: str
    password_hash: str
    tokens: List[str] = field(default_factory=list)


class LocalIdentityProvider:
    """
    Email/password accounts with opaque bearer tokens, kept in memory.
    A token resolves to exactly one user until it is signed out.
    """

    def __init__(self) -> None:
        self.accounts: Dict[str, _Account] = {}
        self.sessions: Dict[str, str] = {}

    def sign_up(self, email: str, password: str) -> AuthSessionInfo:
        email = self._normalize(email)
        if len(password or "") < MIN_PASSWORD_LENGTH:
            raise ValidationError(
                f"Password should be at least {MIN_PASSWORD_LENGTH} characters."
            )
        if email in self.accounts:
            raise ValidationError("Email already registered.")
        salt = secrets.token_hex(16)
        account = _Account(
            user=User(user_id=uuid4().hex, email=email),
            salt=salt,
            password_hash=_hash_password(password, salt),
        )
        self.accounts[email] = account
        logger.info("Registered user %s", account.user.user_id)
        return self._issue(account)

    def sign_in(self, email: str, password: str) -> AuthSessionInfo:
        account = self.accounts.get(self._normalize(email))
        if account is None:
            raise AuthError("Invalid credentials.")
        expected = _hash_password(password or "", account.salt)
        if not hmac.compare_digest(expected, account.password_hash):
            raise AuthError("Invalid credentials.")
        return self._issue(account)

    def sign_out(self, token: str) -> None:
        email = self.sessions.pop(token, None)
        if email and token in self.accounts[email].tokens:
            self.accounts[email].tokens.remove(token)

    def resolve(self, token: str | None) -> Optional[User]:
        if not token:
            return None
        email = self.sessions.get(token)
        if email is None:
            return None
        return self.accounts[email].user

    def _issue(self, account: _Account) -> AuthSessionInfo:
        token = secrets.token_hex(24)
        account.tokens.append(token)
        self.sessions[token] = account.user.email
        return AuthSessionInfo(token=token, user=account.user)

    @staticmethod
    def _normalize(email: str) -> str:
        return (email or "").strip().lower()

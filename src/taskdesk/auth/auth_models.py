# src/taskdesk/auth/auth_models.py

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any


class Provider(StrEnum):
    CREDENTIALS = "credentials"
    GOOGLE = "google"
    GITHUB = "github"


class AuthError(StrEnum):
    USERNAME_TAKEN = "username_taken"
    INVALID_CREDENTIALS = "invalid_credentials"
    UNKNOWN_PROVIDER = "unknown_provider"


@dataclass(frozen=True, slots=True)
class User:
    """Public user view. Never carries the credential secret."""

    id: str
    name: str
    email: str
    provider: Provider
    avatar: str | None = None

    def to_record(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "avatar": self.avatar,
            "provider": self.provider.value,
        }

    @classmethod
    def from_record(cls, rec: dict[str, Any]) -> User:
        avatar = rec.get("avatar")
        return cls(
            id=str(rec["id"]),
            name=str(rec.get("name") or ""),
            email=str(rec.get("email") or ""),
            provider=Provider(rec.get("provider") or Provider.CREDENTIALS),
            avatar=str(avatar) if avatar else None,
        )


@dataclass(frozen=True, slots=True)
class AuthSuccess:
    user: User

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True, slots=True)
class AuthFailure:
    error: AuthError
    message: str

    @property
    def ok(self) -> bool:
        return False


AuthResult = AuthSuccess | AuthFailure


# Federated providers are simulated: each always yields the same identity.
FEDERATED_USERS: dict[Provider, User] = {
    Provider.GOOGLE: User(
        id="user_google_123",
        name="Alex Google",
        email="alex@gmail.com",
        avatar="https://picsum.photos/seed/google/200",
        provider=Provider.GOOGLE,
    ),
    Provider.GITHUB: User(
        id="user_github_456",
        name="Dev Github",
        email="dev@github.com",
        avatar="https://picsum.photos/seed/github/200",
        provider=Provider.GITHUB,
    ),
}

"""Caller capability passed explicitly to operations that need a role."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from .errors import Forbidden


class Role(StrEnum):
    ANONYMOUS = "anonymous"
    MEMBER = "member"
    ADMIN = "admin"

    @classmethod
    def parse(cls, value: str | None) -> Role:
        try:
            return cls((value or "").strip().lower())
        except ValueError:
            return cls.ANONYMOUS


@dataclass(frozen=True)
class Session:
    role: Role = Role.ANONYMOUS
    token: str | None = None

    @classmethod
    def anonymous(cls) -> Session:
        return cls()

    @property
    def is_admin(self) -> bool:
        return self.role is Role.ADMIN

    @property
    def is_member(self) -> bool:
        return self.role in (Role.MEMBER, Role.ADMIN)


def require_admin(session: Session) -> None:
    if not session.is_admin:
        raise Forbidden("Access denied. Admin privileges required.")

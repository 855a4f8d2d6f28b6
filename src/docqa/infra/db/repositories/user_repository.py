"""Repository for User records. No business logic; caller owns the transaction."""
from __future__ import annotations
from sqlalchemy import func
from sqlmodel import Session, select
from docqa.domain.statuses import UserRole
from docqa.models.core import User, utcnow


class UserRepository:
    def __init__(self, session: Session) -> None:
        self._s = session

    def get_active(self, user_id: str) -> User | None:
        return self._s.exec(
            select(User).where(User.id == user_id, User.is_deleted == False)  # noqa: E712
        ).first()

    def get_by_email(self, email: str) -> User | None:
        return self._s.exec(
            select(User).where(User.email == email, User.is_deleted == False)  # noqa: E712
        ).first()

    def list_all(self, limit: int = 100, offset: int = 0) -> list[User]:
        stmt = (
            select(User)
            .where(User.is_deleted == False)  # noqa: E712
            .order_by(User.created_at)
            .offset(offset)
            .limit(limit)
        )
        return list(self._s.exec(stmt).all())

    def count(self) -> int:
        return self._s.exec(
            select(func.count()).select_from(User).where(User.is_deleted == False)  # noqa: E712
        ).one()

    def create(self, *, name: str, email: str, role: UserRole) -> User:
        user = User(name=name, email=email, role=role)
        self._s.add(user)
        self._s.flush()
        return user

    def touch(self, user: User) -> None:
        user.updated_at = utcnow()
        self._s.add(user)

"""Users use-case service."""
from __future__ import annotations
from docqa.api.schemas.documents import MessageResponse
from docqa.api.schemas.users import UserList, UserRead, UserRegister, UserUpdate
from docqa.domain.access import Requester
from docqa.domain.exceptions import ConflictError, NotFoundError, UnauthorizedError
from docqa.infra.db.repositories.user_repository import UserRepository
from docqa.infra.db.uow import UnitOfWork
from docqa.models.core import User


class UsersService:
    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def _get(self, user_id: str) -> User:
        user = UserRepository(self._uow.session).get_active(user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    def register(self, payload: UserRegister) -> UserRead:
        repo = UserRepository(self._uow.session)
        if repo.get_by_email(payload.email) is not None:
            raise ConflictError("A user with this email already exists")
        user = repo.create(name=payload.name, email=payload.email, role=payload.role)
        self._uow.commit()
        return UserRead.model_validate(user)

    def resolve_requester(self, user_id: str) -> Requester:
        """Map a claimed user id onto an active requester identity."""
        user = UserRepository(self._uow.session).get_active(user_id)
        if user is None or not user.is_active:
            raise UnauthorizedError("Unknown or inactive user")
        return Requester(id=user.id, role=user.role)

    def get_user(self, user_id: str) -> UserRead:
        return UserRead.model_validate(self._get(user_id))

    def list_users(self, limit: int = 100, offset: int = 0) -> UserList:
        repo = UserRepository(self._uow.session)
        users = repo.list_all(limit=limit, offset=offset)
        return UserList(items=[UserRead.model_validate(u) for u in users], total=repo.count())

    def update_user(self, user_id: str, payload: UserUpdate) -> UserRead:
        user = self._get(user_id)
        changes = payload.model_dump(exclude_unset=True, exclude_none=True)
        for field, value in changes.items():
            setattr(user, field, value)
        if changes:
            UserRepository(self._uow.session).touch(user)
            self._uow.commit()
        return UserRead.model_validate(user)

    def remove_user(self, user_id: str) -> MessageResponse:
        user = self._get(user_id)
        user.is_deleted = True
        UserRepository(self._uow.session).touch(user)
        self._uow.commit()
        return MessageResponse(message="User deleted successfully")

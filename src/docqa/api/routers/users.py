"""Users router."""
from fastapi import APIRouter, Depends
from docqa.api.deps import get_requester, get_uow, require_admin
from docqa.api.schemas.documents import MessageResponse
from docqa.api.schemas.users import UserList, UserRead, UserRegister, UserUpdate
from docqa.domain.access import Requester
from docqa.infra.db.uow import UnitOfWork
from docqa.services.users_service import UsersService

router = APIRouter(prefix="/users", tags=["users"])


@router.post("/register", response_model=UserRead, status_code=201)
def register(payload: UserRegister, uow: UnitOfWork = Depends(get_uow)) -> UserRead:
    return UsersService(uow).register(payload)


@router.get("/me", response_model=UserRead)
def me(
    requester: Requester = Depends(get_requester),
    uow: UnitOfWork = Depends(get_uow),
) -> UserRead:
    return UsersService(uow).get_user(requester.id)


@router.get("", response_model=UserList, dependencies=[Depends(require_admin)])
def list_users(
    limit: int = 100,
    offset: int = 0,
    uow: UnitOfWork = Depends(get_uow),
) -> UserList:
    return UsersService(uow).list_users(limit=limit, offset=offset)


@router.get("/{user_id}", response_model=UserRead, dependencies=[Depends(require_admin)])
def get_user(user_id: str, uow: UnitOfWork = Depends(get_uow)) -> UserRead:
    return UsersService(uow).get_user(user_id)


@router.patch("/{user_id}", response_model=UserRead, dependencies=[Depends(require_admin)])
def update_user(
    user_id: str, payload: UserUpdate, uow: UnitOfWork = Depends(get_uow),
) -> UserRead:
    return UsersService(uow).update_user(user_id, payload)


@router.delete("/{user_id}", response_model=MessageResponse, dependencies=[Depends(require_admin)])
def remove_user(user_id: str, uow: UnitOfWork = Depends(get_uow)) -> MessageResponse:
    return UsersService(uow).remove_user(user_id)

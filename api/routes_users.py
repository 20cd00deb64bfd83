# api/routes_users.py
import re
from typing import Any, List

from fastapi import APIRouter, Body, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from core.db import get_db_session
from core.errors import InvalidRequestError
from core.response import message
from models.schemas import (
    ErrorResponse,
    MessageResponse,
    UserCreate,
    UserCreatedResponse,
    UserListResponse,
    UserOut,
    UserResponse,
)
from services.user_db_service import UserDBService

router = APIRouter()

NOT_FOUND = {404: {"model": MessageResponse, "description": "User not found"}}
BAD_REQUEST = {400: {"model": MessageResponse, "description": "Invalid request"}}
SERVER_ERROR = {500: {"model": ErrorResponse, "description": "Internal server error"}}


# signed INT, the range of user.id
USER_ID_MIN = -(2 ** 31)
USER_ID_MAX = 2 ** 31 - 1

_USER_ID_RE = re.compile(r"-?[0-9]+")


def parse_user_id(id: str) -> int:
    """Convert the raw {id} path segment; anything but a plain in-range integer is a 400."""
    if not _USER_ID_RE.fullmatch(id):
        raise InvalidRequestError("Invalid user id")
    user_id = int(id)
    if not USER_ID_MIN <= user_id <= USER_ID_MAX:
        raise InvalidRequestError("Invalid user id")
    return user_id


def get_user_service(session: AsyncSession = Depends(get_db_session)) -> UserDBService:
    return UserDBService(session)


@router.get("/users", response_model=List[UserOut], responses=SERVER_ERROR)
async def list_users(service: UserDBService = Depends(get_user_service)):
    """Retrieve all users"""
    return await service.list_users()


# declared before /users/{id} so "search" is never read as an id
@router.get("/users/search/{name}", response_model=UserListResponse, responses={**BAD_REQUEST, **SERVER_ERROR})
async def search_users(name: str, service: UserDBService = Depends(get_user_service)):
    """
    Search users by name (substring match). No matches is 200 with an empty list.

    `%` and `_` in the query are matched literally, not as LIKE wildcards.
    """
    users = await service.search_users(name)
    return message("Users retrieved successfully", users)


@router.get("/users/{id}", response_model=UserResponse, responses={**BAD_REQUEST, **NOT_FOUND, **SERVER_ERROR})
async def get_user(user_id: int = Depends(parse_user_id), service: UserDBService = Depends(get_user_service)):
    """Retrieve a user by ID"""
    user = await service.get_user(user_id)
    return message("User retrieved successfully", [user])


@router.post("/users", status_code=201, response_model=UserCreatedResponse, responses=SERVER_ERROR)
async def create_user(req: UserCreate, service: UserDBService = Depends(get_user_service)):
    """Add a new user to the database"""
    result = await service.create_user(req.name, req.email)
    return message("User created successfully", result)


@router.patch("/users/{id}", response_model=MessageResponse, responses={**BAD_REQUEST, **NOT_FOUND, **SERVER_ERROR})
async def update_user(
    user_id: int = Depends(parse_user_id),
    fields: Any = Body(..., examples=[{"name": "Ada"}]),
    service: UserDBService = Depends(get_user_service),
):
    """Partially update user by ID. Only name and email may be changed."""
    await service.update_user(user_id, fields)
    return message("User updated successfully")


@router.delete("/users/{id}", response_model=MessageResponse, responses={**BAD_REQUEST, **NOT_FOUND, **SERVER_ERROR})
async def delete_user(user_id: int = Depends(parse_user_id), service: UserDBService = Depends(get_user_service)):
    """Delete user by ID"""
    await service.delete_user(user_id)
    return message("User deleted successfully")

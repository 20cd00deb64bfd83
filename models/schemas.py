from pydantic import BaseModel, Field
from typing import Optional, List


class UserCreate(BaseModel):
    # presence is enforced by the NOT NULL columns, not here
    name: Optional[str] = Field(None, description="The name of the user")
    email: Optional[str] = Field(None, description="The email address of the user")


class UserOut(BaseModel):
    id: int
    name: str
    email: str


class MessageResponse(BaseModel):
    message: str


class UserResponse(MessageResponse):
    data: List[UserOut]


class UserListResponse(MessageResponse):
    data: List[UserOut]


class InsertResult(BaseModel):
    insertId: int
    affectedRows: int


class UserCreatedResponse(MessageResponse):
    data: InsertResult


class ErrorDetail(BaseModel):
    code: str
    trace_id: Optional[str] = None


class ErrorResponse(MessageResponse):
    error: Optional[ErrorDetail] = None

from pydantic import BaseModel, Field, field_validator

from typing import List, Optional

USERNAME_MAX_LENGTH = 50
LOGIN_MAX_LENGTH = 255
PASSWORD_MAX_LENGTH = 255


class RegisterRequest(BaseModel):
    username: str = Field(..., min_length=1, max_length=USERNAME_MAX_LENGTH)
    login: str = Field(..., min_length=1, max_length=LOGIN_MAX_LENGTH)
    password: str = Field(..., min_length=1, max_length=PASSWORD_MAX_LENGTH)

    @field_validator("username", "login", "password")
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be blank")
        return v


class RegisterResponse(BaseModel):
    message: str = "Registration successful"
    user_id: str
    username: str


class LoginRequest(BaseModel):
    login: str = Field(..., min_length=1, max_length=LOGIN_MAX_LENGTH)
    password: str = Field(..., min_length=1, max_length=PASSWORD_MAX_LENGTH)


class LoginResponse(BaseModel):
    message: str = "Login successful"
    user_id: str
    username: str
    groups: List[str]
    token: str
    token_type: str = "bearer"


class UserOut(BaseModel):
    id: str
    username: str
    created_at: Optional[str] = None


class UserListResponse(BaseModel):
    users: List[UserOut]
    count: int


class UserDeletedResponse(BaseModel):
    message: str = "User deleted"
    user_id: str


class ClaimsOut(BaseModel):
    user_id: str
    username: str
    groups: List[str]
    exp: int

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator
from pydantic_core import PydanticCustomError

from authcore.application.use_cases.users.register_user import (
    NAME_MAX_LENGTH, PASSWORD_MAX_LENGTH, USERNAME_MAX_LENGTH)


class SignupRequestDTO(BaseModel):
    username: str = Field(min_length=1, max_length=USERNAME_MAX_LENGTH)
    name: str | None = Field(None, max_length=NAME_MAX_LENGTH)
    password: str = Field(min_length=1, max_length=PASSWORD_MAX_LENGTH)

    @field_validator("username")
    @classmethod
    def validate_username(cls, value: str) -> str:
        if not value.strip():
            raise PydanticCustomError("missing", "Username cannot be blank", {})
        if value != value.strip():
            raise PydanticCustomError(
                "username_whitespace",
                "Username must not start or end with whitespace",
                {},
            )
        return value


class LoginRequestDTO(BaseModel):
    # Missing or oversized fields are a credentials failure (401), not a validation failure
    username: str | None = Field(None, max_length=USERNAME_MAX_LENGTH)
    password: str | None = Field(None, max_length=PASSWORD_MAX_LENGTH)


class UpdateProfileRequestDTO(BaseModel):
    name: str | None = Field(None, max_length=NAME_MAX_LENGTH)


class ChangePasswordRequestDTO(BaseModel):
    current_password: str = Field(min_length=1, max_length=PASSWORD_MAX_LENGTH)
    new_password: str = Field(min_length=1, max_length=PASSWORD_MAX_LENGTH)


class SuccessDTO(BaseModel):
    success: bool = True


class TokenDTO(BaseModel):
    token: str

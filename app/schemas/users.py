"""Pydantic schemas for the users and authentication resources."""

from __future__ import annotations

from typing import Any, Mapping

from pydantic import BaseModel, Field, model_validator


class UserPublic(BaseModel):
    """Public projection of a user document (never includes the password)."""

    id: str = Field(..., description="User identifier.")
    name: str = Field(..., description="Display name.")
    email: str = Field(..., description="Login email address.")

    @classmethod
    def from_document(cls, document: Mapping[str, Any]) -> "UserPublic":
        return cls(
            id=str(document["id"]),
            name=document["name"],
            email=document["email"],
        )


class UserCreateRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    email: str = Field(..., min_length=3, max_length=254, pattern=r"^[^@\s]+@[^@\s]+$")
    password: str = Field(..., min_length=6, max_length=32)
    password_confirm: str = Field(..., min_length=6, max_length=32)

    @model_validator(mode="after")
    def _passwords_match(self) -> "UserCreateRequest":
        if self.password != self.password_confirm:
            raise ValueError("Password confirmation mismatched")
        return self


class UserUpdateRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    email: str = Field(..., min_length=3, max_length=254, pattern=r"^[^@\s]+@[^@\s]+$")


class ChangePasswordRequest(BaseModel):
    old_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=6, max_length=32)
    password_confirm: str = Field(..., min_length=6, max_length=32)

    @model_validator(mode="after")
    def _passwords_match(self) -> "ChangePasswordRequest":
        if self.new_password != self.password_confirm:
            raise ValueError("Password confirmation mismatched")
        return self


class LoginRequest(BaseModel):
    email: str = Field(..., min_length=1, description="Login email address.")
    password: str = Field(..., min_length=1, description="Account password.")


class ResourceId(BaseModel):
    """Acknowledgement returned by write endpoints."""

    id: str

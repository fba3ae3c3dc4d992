"""User Schemas: registration, login and profile payloads.

Invariants:
    - name 2-50 chars, street_address 2-100 chars, password 3-60 chars
    - Only name and street_address are patchable; email is fixed at registration
"""

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class UserCreate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str = Field(min_length=2, max_length=50)
    email: EmailStr = Field(max_length=256)
    password: str = Field(min_length=3, max_length=60)
    street_address: str = Field(min_length=2, max_length=100)


class LoginRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    email: EmailStr
    password: str = Field(min_length=3, max_length=60)


class UserUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(None, min_length=2, max_length=50)
    street_address: str | None = Field(None, min_length=2, max_length=100)


class PasswordUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    password: str = Field(min_length=3, max_length=60)


class TokenResponse(BaseModel):
    token: str


class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    street_address: str

from enum import Enum
from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator


class Role(str, Enum):
    ADMIN = "ADMIN"
    STAFF = "STAFF"
    CONNECTOR = "CONNECTOR"
    CUSTOMER = "CUSTOMER"


class AuthUser(BaseModel):
    # Keep whatever else the backend sends about the user.
    model_config = ConfigDict(extra="allow")

    id: int | str
    phone: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None
    role: Role

    @property
    def full_name(self) -> str:
        return " ".join(p for p in (self.first_name, self.last_name) if p)


class TokenPair(BaseModel):
    access: str
    refresh: str


class Session(BaseModel):
    user: AuthUser
    tokens: TokenPair


class LoginPayload(BaseModel):
    phone: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)

    @field_validator("phone", "password")
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be blank")
        return v


class LoginResponse(BaseModel):
    model_config = ConfigDict(extra="allow")

    access: str
    refresh: str
    user: AuthUser


class RegisterPayload(BaseModel):
    phone: str
    first_name: str
    last_name: str
    email: EmailStr
    role: Role = Role.STAFF
    password: str
    password2: str


class SessionStatus(BaseModel):
    state: str
    user: AuthUser | None = None
    is_loading: bool = False
    last_error: str | None = None

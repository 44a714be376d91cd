from typing import Literal, Optional

from pydantic import BaseModel, EmailStr, Field

from schemas.users import UserOut


class RegisterRequest(BaseModel):
    username: str = Field(min_length=3, max_length=100)
    email: EmailStr
    password: str = Field(min_length=6, max_length=128)
    full_name: str = Field(min_length=1, max_length=200)
    phone: Optional[str] = None
    country: Optional[str] = None
    city: Optional[str] = None
    # Admin accounts are only created from the admin panel
    role: Literal["customer", "merchant"] = "customer"
    store_name: Optional[str] = Field(None, min_length=1, max_length=150)


class LoginRequest(BaseModel):
    username: str
    password: str


class TokenPair(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"


class LoginResponse(TokenPair):
    user: UserOut


class RegisterResponse(BaseModel):
    user: UserOut


class RefreshTokenRequest(BaseModel):
    refresh_token: str

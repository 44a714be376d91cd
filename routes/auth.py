import jwt
from fastapi import APIRouter, Depends, HTTPException, status

from core.access import get_current_user, get_storage
from schemas.auth import (
    LoginRequest,
    LoginResponse,
    RefreshTokenRequest,
    RegisterRequest,
    RegisterResponse,
    TokenPair,
)
from schemas.users import UserOut, UserRecord
from security import jwt as jwt_utils
from services.accounts import authenticate, register_user
from storage import Storage

router = APIRouter(prefix="/auth", tags=["auth"])


def _public(user: UserRecord) -> UserOut:
    return UserOut.model_validate(user, from_attributes=True)


def _token_pair(user: UserRecord) -> TokenPair:
    return TokenPair(
        access_token=jwt_utils.create_access_token(user.id, user.role),
        refresh_token=jwt_utils.create_refresh_token(user.id),
    )


@router.post("/register", response_model=RegisterResponse, status_code=201)
def register(data: RegisterRequest, storage: Storage = Depends(get_storage)):
    user, _ = register_user(storage, data)
    return RegisterResponse(user=_public(user))


@router.post("/login", response_model=LoginResponse)
def login(data: LoginRequest, storage: Storage = Depends(get_storage)):
    user = authenticate(storage, data.username, data.password)
    if not user:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid username or password")
    if not user.is_active:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Account is disabled")
    tokens = _token_pair(user)
    return LoginResponse(**tokens.model_dump(), user=_public(user))


@router.post("/refresh-token", response_model=TokenPair)
def refresh_token(data: RefreshTokenRequest, storage: Storage = Depends(get_storage)):
    try:
        payload = jwt_utils.decode_refresh(data.refresh_token)
    except jwt.PyJWTError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid refresh token")
    user = storage.get_user(payload["sub"])
    if not user or not user.is_active:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid refresh token")
    return _token_pair(user)


@router.get("/me", response_model=UserOut)
def me(current_user: UserRecord = Depends(get_current_user)):
    return _public(current_user)

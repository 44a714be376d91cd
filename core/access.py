from typing import Optional

import jwt
from fastapi import Depends, Header, HTTPException, Request, status

from core.logging import get_logger
from schemas.store import StoreOut
from schemas.users import UserRecord
from security import jwt as jwt_utils
from storage import Storage

logger = get_logger(__name__)


def get_storage(request: Request) -> Storage:
    """FastAPI dependency returning the storage built at startup."""
    return request.app.state.storage


def get_current_user(
    storage: Storage = Depends(get_storage),
    authorization: Optional[str] = Header(default=None, alias="Authorization"),
) -> UserRecord:
    if not authorization or not authorization.lower().startswith("bearer "):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
    token = authorization.split(" ", 1)[1]
    try:
        payload = jwt_utils.decode_access(token)
    except jwt.PyJWTError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")
    user = storage.get_user(payload["sub"])
    if not user:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="User not found")
    if not user.is_active:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Account is disabled")
    return user


def get_optional_user(
    storage: Storage = Depends(get_storage),
    authorization: Optional[str] = Header(default=None, alias="Authorization"),
) -> Optional[UserRecord]:
    """The caller when a bearer token is sent, ``None`` for anonymous requests."""
    if not authorization:
        return None
    return get_current_user(storage, authorization)


def require_admin(user: UserRecord = Depends(get_current_user)) -> UserRecord:
    if user.role != "admin":
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin access required")
    return user


def require_self_or_admin(user_id: str, user: UserRecord) -> None:
    if user.role != "admin" and user.id != user_id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not allowed to access this account")


def check_store_access(user: UserRecord, store: StoreOut) -> bool:
    """Store owners and platform admins may manage a store."""
    return user.role == "admin" or store.owner_id == user.id


def get_owned_store(storage: Storage, store_id: str, user: UserRecord) -> StoreOut:
    store = storage.get_store(store_id)
    if not store:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Store not found")
    if not check_store_access(user, store):
        logger.warning("User %s denied access to store %s", user.id, store.id)
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="You do not manage this store")
    return store


def require_owner(user: UserRecord, owner_id: str, what: str) -> None:
    if user.role != "admin" and user.id != owner_id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=f"You do not own this {what}")

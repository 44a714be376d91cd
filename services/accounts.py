from typing import Optional, Tuple

from pydantic import ValidationError

from core.logging import get_logger
from schemas.auth import RegisterRequest
from schemas.store import STORE_NAME_MAX_LENGTH, StoreCreate, StoreOut, default_store_settings
from schemas.users import AdminUserCreate, UserCreate, UserRecord
from security.password import hash_password, verify_password
from storage import Storage, StorageError

logger = get_logger(__name__)


def _new_user(data: RegisterRequest | AdminUserCreate) -> UserCreate:
    return UserCreate(
        username=data.username.strip(),
        email=data.email.lower(),
        password_hash=hash_password(data.password),
        full_name=data.full_name.strip(),
        phone=data.phone,
        country=data.country,
        city=data.city,
        role=data.role,
        is_active=getattr(data, "is_active", True),
    )


def default_store_name(user: UserRecord) -> str:
    suffix = " Store"
    return user.full_name[: STORE_NAME_MAX_LENGTH - len(suffix)].rstrip() + suffix


def create_default_store(storage: Storage, user: UserRecord, name: Optional[str] = None) -> StoreOut:
    return storage.create_store(
        StoreCreate(
            name=name or default_store_name(user),
            owner_id=user.id,
            settings=default_store_settings(),
        )
    )


def register_user(storage: Storage, data: RegisterRequest) -> Tuple[UserRecord, Optional[StoreOut]]:
    """Create the account and, for merchants, their first store.

    The two writes are not atomic: if the store cannot be created the
    account is kept and the failure is logged.
    """
    user = storage.create_user(_new_user(data))
    logger.info("Registered %s account %s", user.role, user.username)
    if user.role != "merchant":
        return user, None
    try:
        store = create_default_store(storage, user, data.store_name)
    except (StorageError, ValidationError):
        logger.exception("Default store creation failed for merchant %s", user.id)
        return user, None
    return user, store


def create_user_as_admin(storage: Storage, data: AdminUserCreate) -> UserRecord:
    user = storage.create_user(_new_user(data))
    logger.info("Admin created %s account %s", user.role, user.username)
    return user


def authenticate(storage: Storage, username: str, password: str) -> Optional[UserRecord]:
    user = storage.get_user_by_username(username)
    if user is None or not verify_password(password, user.password_hash):
        return None
    return user

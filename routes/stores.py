from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status

from core.access import get_current_user, get_owned_store, get_storage
from schemas.store import StoreCreate, StoreIn, StoreOut, StoreUpdate, StoreWithOwner
from schemas.users import UserOut, UserRecord
from storage import Storage

router = APIRouter(prefix="/stores", tags=["stores"])


def with_owner(storage: Storage, store: StoreOut) -> StoreWithOwner:
    owner = storage.get_user(store.owner_id)
    return StoreWithOwner(
        **store.model_dump(),
        owner=UserOut.model_validate(owner, from_attributes=True) if owner else None,
    )


def store_updates(store: StoreOut, data: StoreUpdate) -> dict:
    """Partial update; a settings patch is merged into the stored settings."""
    updates = data.model_dump(exclude_unset=True)
    if updates.get("settings") is not None:
        updates["settings"] = {**(store.settings or {}), **updates["settings"]}
    elif "settings" in updates:
        del updates["settings"]
    return updates


@router.get("", response_model=List[StoreWithOwner])
def list_stores(
    category: Optional[str] = None,
    search: Optional[str] = None,
    city: Optional[str] = None,
    storage: Storage = Depends(get_storage),
):
    return [with_owner(storage, store) for store in storage.get_all_stores(category, search, city)]


@router.get("/owner/{owner_id}", response_model=List[StoreOut])
def list_owner_stores(owner_id: str, storage: Storage = Depends(get_storage)):
    return storage.get_stores_by_owner(owner_id)


@router.get("/{store_id}", response_model=StoreWithOwner)
def get_store(store_id: str, storage: Storage = Depends(get_storage)):
    store = storage.get_store(store_id)
    if not store:
        raise HTTPException(status_code=404, detail="Store not found")
    return with_owner(storage, store)


@router.post("", response_model=StoreOut, status_code=201)
def create_store(
    data: StoreIn,
    current_user: UserRecord = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
):
    if current_user.role not in ("merchant", "admin"):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Only merchants can open stores")
    return storage.create_store(StoreCreate(**data.model_dump(), owner_id=current_user.id))


@router.patch("/{store_id}", response_model=StoreOut)
def update_store(
    store_id: str,
    data: StoreUpdate,
    current_user: UserRecord = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
):
    store = get_owned_store(storage, store_id, current_user)
    updated = storage.update_store(store.id, store_updates(store, data))
    if not updated:
        raise HTTPException(status_code=404, detail="Store not found")
    return updated

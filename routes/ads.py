from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException

from core.access import get_current_user, get_storage, require_owner
from schemas.ad import AdCreate, AdIn, AdOut, AdType, AdUpdate
from schemas.users import UserRecord
from storage import Storage

router = APIRouter(prefix="/ads", tags=["ads"])


def _get_ad(storage: Storage, ad_id: str) -> AdOut:
    ad = storage.get_ad(ad_id)
    if not ad:
        raise HTTPException(status_code=404, detail="Ad not found")
    return ad


@router.get("", response_model=List[AdOut])
def list_ads(
    search: Optional[str] = None,
    category: Optional[str] = None,
    type: Optional[AdType] = None,
    storage: Storage = Depends(get_storage),
):
    """Active ads, premium first."""
    return storage.list_ads(search=search, category=category, ad_type=type)


@router.get("/poster/{poster_id}", response_model=List[AdOut])
def list_poster_ads(poster_id: str, storage: Storage = Depends(get_storage)):
    return storage.get_ads_by_poster(poster_id)


@router.post("", response_model=AdOut, status_code=201)
def create_ad(
    data: AdIn,
    current_user: UserRecord = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
):
    return storage.create_ad(AdCreate(**data.model_dump(), poster_id=current_user.id))


@router.get("/{ad_id}", response_model=AdOut)
def get_ad(ad_id: str, storage: Storage = Depends(get_storage)):
    return _get_ad(storage, ad_id)


@router.patch("/{ad_id}", response_model=AdOut)
def update_ad(
    ad_id: str,
    data: AdUpdate,
    current_user: UserRecord = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
):
    ad = _get_ad(storage, ad_id)
    require_owner(current_user, ad.poster_id, "ad")
    updated = storage.update_ad(ad.id, data.model_dump(exclude_unset=True))
    if not updated:
        raise HTTPException(status_code=404, detail="Ad not found")
    return updated


@router.delete("/{ad_id}", status_code=204)
def delete_ad(
    ad_id: str,
    current_user: UserRecord = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
):
    ad = _get_ad(storage, ad_id)
    require_owner(current_user, ad.poster_id, "ad")
    if not storage.delete_ad(ad.id):
        raise HTTPException(status_code=404, detail="Ad not found")
    return None

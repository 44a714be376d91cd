from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException

from core.access import get_current_user, get_storage, require_owner
from schemas.restaurant import RestaurantCreate, RestaurantIn, RestaurantOut, RestaurantUpdate
from schemas.users import UserRecord
from storage import Storage

router = APIRouter(prefix="/restaurants", tags=["restaurants"])


def _get_restaurant(storage: Storage, restaurant_id: str) -> RestaurantOut:
    restaurant = storage.get_restaurant(restaurant_id)
    if not restaurant:
        raise HTTPException(status_code=404, detail="Restaurant not found")
    return restaurant


@router.get("", response_model=List[RestaurantOut])
def list_restaurants(
    search: Optional[str] = None,
    cuisine: Optional[str] = None,
    storage: Storage = Depends(get_storage),
):
    return storage.list_restaurants(search=search, cuisine=cuisine)


@router.get("/owner/{owner_id}", response_model=List[RestaurantOut])
def list_owner_restaurants(owner_id: str, storage: Storage = Depends(get_storage)):
    return storage.get_restaurants_by_owner(owner_id)


@router.post("", response_model=RestaurantOut, status_code=201)
def create_restaurant(
    data: RestaurantIn,
    current_user: UserRecord = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
):
    return storage.create_restaurant(RestaurantCreate(**data.model_dump(), owner_id=current_user.id))


@router.get("/{restaurant_id}", response_model=RestaurantOut)
def get_restaurant(restaurant_id: str, storage: Storage = Depends(get_storage)):
    return _get_restaurant(storage, restaurant_id)


@router.patch("/{restaurant_id}", response_model=RestaurantOut)
def update_restaurant(
    restaurant_id: str,
    data: RestaurantUpdate,
    current_user: UserRecord = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
):
    restaurant = _get_restaurant(storage, restaurant_id)
    require_owner(current_user, restaurant.owner_id, "restaurant")
    updated = storage.update_restaurant(restaurant.id, data.model_dump(exclude_unset=True))
    if not updated:
        raise HTTPException(status_code=404, detail="Restaurant not found")
    return updated


@router.delete("/{restaurant_id}", status_code=204)
def delete_restaurant(
    restaurant_id: str,
    current_user: UserRecord = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
):
    restaurant = _get_restaurant(storage, restaurant_id)
    require_owner(current_user, restaurant.owner_id, "restaurant")
    if not storage.delete_restaurant(restaurant.id):
        raise HTTPException(status_code=404, detail="Restaurant not found")
    return None

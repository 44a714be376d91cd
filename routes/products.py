from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status

from core.access import check_store_access, get_current_user, get_optional_user, get_owned_store, get_storage
from schemas.product import ProductCreate, ProductOut, ProductUpdate
from schemas.users import UserRecord
from storage import Storage

router = APIRouter(prefix="/products", tags=["products"])


def _get_product(storage: Storage, product_id: str) -> ProductOut:
    product = storage.get_product(product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return product


def _manages_store(storage: Storage, user: Optional[UserRecord], store_id: str) -> bool:
    if user is None:
        return False
    store = storage.get_store(store_id)
    return store is not None and check_store_access(user, store)


@router.get("/store/{store_id}", response_model=List[ProductOut])
def list_store_products(
    store_id: str,
    current_user: Optional[UserRecord] = Depends(get_optional_user),
    storage: Storage = Depends(get_storage),
):
    """Active products; the store's owner and admins also see inactive ones."""
    products = storage.get_products_by_store(store_id)
    if _manages_store(storage, current_user, store_id):
        return products
    return [product for product in products if product.is_active]


@router.get("/user/{user_id}", response_model=List[ProductOut])
def list_user_products(
    user_id: str,
    current_user: Optional[UserRecord] = Depends(get_optional_user),
    storage: Storage = Depends(get_storage),
):
    products = storage.get_products_by_user(user_id)
    if current_user is not None and (current_user.id == user_id or current_user.role == "admin"):
        return products
    return [product for product in products if product.is_active]


@router.get("/{product_id}", response_model=ProductOut)
def get_product(
    product_id: str,
    current_user: Optional[UserRecord] = Depends(get_optional_user),
    storage: Storage = Depends(get_storage),
):
    product = _get_product(storage, product_id)
    if not product.is_active and not _manages_store(storage, current_user, product.store_id):
        raise HTTPException(status_code=404, detail="Product not found")
    return product


@router.post("", response_model=ProductOut, status_code=201)
def create_product(
    data: ProductCreate,
    current_user: UserRecord = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
):
    if current_user.role not in ("merchant", "admin"):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Only merchants can add products")
    get_owned_store(storage, data.store_id, current_user)
    return storage.create_product(data)


@router.patch("/{product_id}", response_model=ProductOut)
def update_product(
    product_id: str,
    data: ProductUpdate,
    current_user: UserRecord = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
):
    product = _get_product(storage, product_id)
    get_owned_store(storage, product.store_id, current_user)
    updated = storage.update_product(product.id, data.model_dump(exclude_unset=True))
    if not updated:
        raise HTTPException(status_code=404, detail="Product not found")
    return updated


@router.delete("/{product_id}", status_code=204)
def delete_product(
    product_id: str,
    current_user: UserRecord = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
):
    product = _get_product(storage, product_id)
    get_owned_store(storage, product.store_id, current_user)
    if not storage.delete_product(product.id):
        raise HTTPException(status_code=404, detail="Product not found")
    return None

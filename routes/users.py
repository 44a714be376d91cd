from fastapi import APIRouter, Depends, HTTPException

from core.access import get_current_user, get_storage
from schemas.users import UserOut, UserRecord, UserUpdate
from storage import Storage

router = APIRouter(prefix="/users", tags=["users"])


@router.patch("/me", response_model=UserOut)
def update_me(
    data: UserUpdate,
    current_user: UserRecord = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
):
    updates = data.model_dump(exclude_unset=True)
    if updates.get("email"):
        updates["email"] = updates["email"].lower()
    user = storage.update_user(current_user.id, updates)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return UserOut.model_validate(user, from_attributes=True)

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from ...core.db import get_db
from ..deps import get_current_user
from ...models import User
from ..schemas import ProfileOut, ProfilePatch
from ..views import profile_out

router = APIRouter(prefix="/users", tags=["users"])

# request field -> User column
PROFILE_FIELDS = {
    "name": "name",
    "role": "role",
    "workingHours": "working_hours",
    "freeTimeFrom": "free_time_from",
    "freeTimeTo": "free_time_to",
    "trustedContactName": "trusted_contact_name",
    "trustedContactPhone": "trusted_contact_phone",
}

def apply_profile(user: User, values: dict) -> None:
    start = values.get("freeTimeFrom", user.free_time_from)
    end = values.get("freeTimeTo", user.free_time_to)
    if start and end and start >= end:
        raise HTTPException(status_code=422, detail="Start time must be before end time")
    for field, column in PROFILE_FIELDS.items():
        if field in values and values[field] is not None:
            value = values[field]
            setattr(user, column, value.strip() if isinstance(value, str) else value)

@router.get("/me", response_model=ProfileOut)
def me(user: User = Depends(get_current_user)):
    return profile_out(user)

@router.patch("/me", response_model=ProfileOut)
def patch_me(payload: ProfilePatch, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    apply_profile(user, payload.model_dump(exclude_unset=True))
    db.commit()
    db.refresh(user)
    return profile_out(user)

# aet_portal/routers/users.py
"""User registration (called by the auth gateway) and current-user lookup."""

from fastapi import APIRouter, Depends, status

from aet_portal.dependencies import get_current_user, get_store
from aet_portal.models.user import User
from aet_portal.schemas.user import UserCreate, UserOut
from aet_portal.services.store import Store
from aet_portal.services.user_service import register_user

router = APIRouter()


@router.post("/users", response_model=UserOut, status_code=status.HTTP_201_CREATED, summary="Register a user")
def create_user(body: UserCreate, store: Store = Depends(get_store)):
    return register_user(store, body)


@router.get("/users/me", response_model=UserOut, summary="Current user")
def get_me(user: User = Depends(get_current_user)):
    return user

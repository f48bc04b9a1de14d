# aet_portal/dependencies.py
"""
FastAPI dependencies shared by the routers.

The auth gateway in front of the API authenticates the caller and forwards
the user id in the X-User-Id header; it is trusted as already verified.
"""

from typing import Optional

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.orm import Session

from aet_portal.database import get_db
from aet_portal.exceptions import Forbidden
from aet_portal.models.user import User
from aet_portal.services.store import Store


def get_store(db: Session = Depends(get_db)) -> Store:
    return Store(db)


def get_current_user(
    x_user_id: Optional[int] = Header(default=None),
    store: Store = Depends(get_store),
) -> User:
    user = store.users.get(x_user_id) if x_user_id is not None else None
    if user is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Não autenticado")
    return user


def require_admin(user: User = Depends(get_current_user)) -> User:
    if not user.is_admin:
        raise Forbidden("Acesso restrito a administradores")
    return user

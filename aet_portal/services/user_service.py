# aet_portal/services/user_service.py
"""
User registration and administrator bootstrap.
Credentials are stored as handed over by the auth gateway; this service
never inspects or transforms them.
"""

from sqlalchemy.exc import IntegrityError

from aet_portal.config import settings
from aet_portal.exceptions import Forbidden, InvalidInput, InvalidState
from aet_portal.models.user import User
from aet_portal.schemas.user import AdminSetup, UserCreate
from aet_portal.services.store import Store
from aet_portal.utils.logger import get_logger

logger = get_logger(__name__)


def register_user(store: Store, data: UserCreate, is_admin: bool = False) -> User:
    if store.users.get_by_email(data.email):
        raise InvalidInput("Email já cadastrado")
    try:
        with store.atomic():
            user = store.users.create(is_admin=is_admin, **data.model_dump())
    except IntegrityError:
        logger.warning(f"[USER] Duplicate email rejected by the database: {data.email}")
        raise InvalidInput("Email já cadastrado")
    logger.info(f"[USER] Registered {user.email} id={user.id} admin={user.is_admin}")
    return user


def setup_admin(store: Store, data: AdminSetup) -> User:
    """One-shot creation of the first administrator, guarded by SETUP_PASSWORD."""
    if data.setup_password != settings.SETUP_PASSWORD:
        logger.warning("[USER] Admin setup attempted with a wrong setup password")
        raise Forbidden("Senha de instalação inválida")
    if store.users.list_admins():
        raise InvalidState("Conta de administrador já configurada")
    return register_user(store, UserCreate(
        email=data.email,
        password=data.password,
        full_name="Administrador",
        phone=data.phone or "0000000000",
    ), is_admin=True)


def ensure_bootstrap_admin(store: Store):
    """Seed an admin from ADMIN_EMAIL / ADMIN_PASSWORD if none exists. Returns it, or None."""
    if not (settings.ADMIN_EMAIL and settings.ADMIN_PASSWORD):
        return None
    admins = store.users.list_admins()
    if admins:
        return admins[0]
    return register_user(store, UserCreate(
        email=settings.ADMIN_EMAIL,
        password=settings.ADMIN_PASSWORD,
        full_name="Administrador",
        phone="0000000000",
    ), is_admin=True)


def list_users(store: Store) -> list:
    return store.users.list_all()

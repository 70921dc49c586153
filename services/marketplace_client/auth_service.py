from typing import Literal, Optional
import logging

from .client import ApiError
from .data_service import DataService
from .stores import AuthStore

logger = logging.getLogger(__name__)


def register_with_email(
    service: DataService,
    store: AuthStore,
    email: str,
    password: str,
    name: str,
    user_type: Literal["client", "manager"],
    agency_name: Optional[str] = None
) -> dict:
    user = service.register({
        "email": email,
        "password": password,
        "name": name,
        "userType": user_type,
        "agencyName": agency_name,
    })
    store.set_user(user)
    return user


def login_with_email(service: DataService, store: AuthStore, email: str, password: str) -> dict:
    try:
        user = service.login(email, password)
    except ApiError as e:
        logger.info(f"Login failed for {email}: {e.code or e.message}")
        raise
    store.set_user(user)
    return user


def logout_user(store: AuthStore):
    # no server session to end, the user object is the identity
    store.logout()

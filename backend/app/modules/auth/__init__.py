# Authentication module

from app.modules.auth.dependencies import (
    get_current_user,
    get_current_admin,
)
from app.modules.auth.permissions import Action, can, ensure_can

__all__ = [
    "get_current_user",
    "get_current_admin",
    "Action",
    "can",
    "ensure_can",
]

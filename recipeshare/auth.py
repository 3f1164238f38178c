from __future__ import annotations

from typing import Optional

from flask_login import current_user

from .extensions import db, login_manager
from .models import User


@login_manager.user_loader
def load_user(user_id: str) -> Optional[User]:
    try:
        return db.session.get(User, int(user_id))
    except (TypeError, ValueError):
        return None


def acting_user() -> Optional[User]:
    """Return the signed-in user for this request, or ``None`` for guests."""

    if current_user.is_authenticated:
        return current_user._get_current_object()
    return None


__all__ = ["acting_user", "load_user"]

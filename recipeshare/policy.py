"""Authorization rules for recipes.

Every rule is a pure function of the acting user (``None`` for guests) and
the recipe. Callers pass the user explicitly.
"""

from __future__ import annotations

from typing import Callable, Dict, Optional

from .exceptions import AuthorizationError
from .models import Recipe, User


def can_view_any(user: Optional[User]) -> bool:
    return True


def can_view(user: Optional[User], recipe: Recipe) -> bool:
    return True


def can_create(user: Optional[User]) -> bool:
    return user is not None


def can_update(user: Optional[User], recipe: Recipe) -> bool:
    if user is None:
        return False
    return user.is_admin() or user.id == recipe.user_id


def can_delete(user: Optional[User], recipe: Recipe) -> bool:
    return can_update(user, recipe)


def can_restore(user: Optional[User], recipe: Recipe) -> bool:
    return user is not None and user.is_admin()


def can_force_delete(user: Optional[User], recipe: Recipe) -> bool:
    return user is not None and user.is_admin()


_RECIPE_ABILITIES: Dict[str, Callable[[Optional[User], Recipe], bool]] = {
    "view": can_view,
    "update": can_update,
    "delete": can_delete,
    "restore": can_restore,
    "force_delete": can_force_delete,
}

_CLASS_ABILITIES: Dict[str, Callable[[Optional[User]], bool]] = {
    "view_any": can_view_any,
    "create": can_create,
}


def allows(ability: str, user: Optional[User], recipe: Optional[Recipe] = None) -> bool:
    if ability in _CLASS_ABILITIES:
        return _CLASS_ABILITIES[ability](user)
    if ability not in _RECIPE_ABILITIES:
        raise ValueError(f"Unknown recipe ability '{ability}'.")
    if recipe is None:
        raise ValueError(f"Ability '{ability}' needs a recipe.")
    return _RECIPE_ABILITIES[ability](user, recipe)


def authorize(ability: str, user: Optional[User], recipe: Optional[Recipe] = None) -> None:
    """Raise :class:`AuthorizationError` unless ``user`` may perform ``ability``."""

    if not allows(ability, user, recipe):
        raise AuthorizationError()


__all__ = [
    "allows",
    "authorize",
    "can_create",
    "can_delete",
    "can_force_delete",
    "can_restore",
    "can_update",
    "can_view",
    "can_view_any",
]

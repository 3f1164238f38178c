from __future__ import annotations

import logging
from typing import Any, List, Mapping, Optional

from werkzeug.datastructures import FileStorage

from . import policy
from .exceptions import NotFoundError, StorageError
from .models import Recipe, User
from .repository import Page, RecipeRepository
from .storage import PICTURE_DIRECTORY, ImageStorage

logger = logging.getLogger(__name__)

DEFAULT_PER_PAGE = 12
EDITABLE_FIELDS = ("name", "cuisine_type", "ingredients", "steps")


class RecipeService:
    """Coordinates recipe rows and their stored pictures."""

    def __init__(
        self,
        repository: RecipeRepository,
        images: ImageStorage,
        *,
        per_page: int = DEFAULT_PER_PAGE,
    ) -> None:
        self._repository = repository
        self._images = images
        self._per_page = per_page

    @property
    def images(self) -> ImageStorage:
        return self._images

    def list_paginated(
        self,
        search: Optional[str] = None,
        cuisine_type: Optional[str] = None,
        per_page: Optional[int] = None,
        page: int = 1,
    ) -> Page:
        """Return recipes newest first.

        ``search`` matches any part of the name, ignoring case. ``cuisine_type``
        must match exactly. Blank filters are ignored.
        """

        return self._repository.paginate(
            search=(search or "").strip() or None,
            cuisine_type=(cuisine_type or "").strip() or None,
            page=max(page, 1),
            per_page=per_page or self._per_page,
        )

    def list_distinct_cuisine_types(self) -> List[str]:
        return self._repository.cuisine_types()

    def get(self, recipe_id: int) -> Recipe:
        try:
            return self._repository.get(recipe_id)
        except KeyError:
            raise NotFoundError() from None

    def create(self, data: Mapping[str, Any], acting_user: User) -> Recipe:
        values = {field: data[field] for field in EDITABLE_FIELDS}
        values["user_id"] = acting_user.id
        values["picture"] = None

        picture: FileStorage | None = data.get("picture")
        if picture is not None:
            values["picture"] = self._images.store(picture, PICTURE_DIRECTORY)

        try:
            recipe = self._repository.add(**values)
        except Exception:
            if values["picture"]:
                self._discard_picture(values["picture"])
            raise

        logger.info("User %s created recipe %s", acting_user.id, recipe.id)
        return recipe

    def update(self, recipe: Recipe, data: Mapping[str, Any]) -> Recipe:
        """Apply new field values; a new picture replaces the stored one.

        The new picture is stored before the row is written and the old one is
        removed only after the row points at its replacement.
        """

        values = {field: data[field] for field in EDITABLE_FIELDS if field in data}
        old_picture = recipe.picture
        new_picture: Optional[str] = None

        picture: FileStorage | None = data.get("picture")
        if picture is not None:
            new_picture = self._images.store(picture, PICTURE_DIRECTORY)
            values["picture"] = new_picture

        try:
            recipe = self._repository.update(recipe, **values)
        except Exception:
            if new_picture:
                self._discard_picture(new_picture)
            raise

        if new_picture and old_picture:
            self._discard_picture(old_picture)

        logger.info("Updated recipe %s", recipe.id)
        return recipe

    def delete(self, recipe: Recipe) -> bool:
        recipe_id = recipe.id
        if recipe.picture:
            self._discard_picture(recipe.picture)

        self._repository.delete(recipe)
        logger.info("Deleted recipe %s", recipe_id)
        return True

    def can_modify(self, user: Optional[User], recipe: Recipe) -> bool:
        return policy.can_update(user, recipe)

    def _discard_picture(self, path: str) -> None:
        try:
            self._images.delete(path)
        except (StorageError, OSError) as exc:
            logger.warning("Could not remove picture %s: %s", path, exc)


__all__ = ["DEFAULT_PER_PAGE", "RecipeService"]

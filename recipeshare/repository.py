from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, List, Optional, Protocol

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from .extensions import db
from .models import Recipe


@dataclass
class Page:
    """One page of recipes plus the totals needed to render pagination."""

    items: List[Recipe]
    total: int
    page: int
    per_page: int
    pages: int = field(init=False)

    def __post_init__(self) -> None:
        self.pages = max(1, math.ceil(self.total / self.per_page)) if self.per_page else 1


class RecipeRepository(Protocol):
    """Protocol describing the persistence behaviour the service relies on."""

    def paginate(
        self,
        *,
        search: Optional[str],
        cuisine_type: Optional[str],
        page: int,
        per_page: int,
    ) -> Page:
        """Return one page of recipes ordered newest first."""

    def cuisine_types(self) -> List[str]:
        """Return each distinct cuisine type currently stored."""

    def get(self, recipe_id: int) -> Recipe:
        """Return a single recipe or raise :class:`KeyError` if missing."""

    def add(self, **values: Any) -> Recipe:
        """Persist a new recipe and return the stored instance."""

    def update(self, recipe: Recipe, **values: Any) -> Recipe:
        """Apply ``values`` to ``recipe`` and return the refreshed row."""

    def delete(self, recipe: Recipe) -> None:
        """Remove the recipe row."""


def _like_pattern(term: str) -> str:
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


class SQLRecipeRepository(RecipeRepository):
    """Recipe persistence backed by Flask-SQLAlchemy."""

    def paginate(
        self,
        *,
        search: Optional[str] = None,
        cuisine_type: Optional[str] = None,
        page: int = 1,
        per_page: int = 12,
    ) -> Page:
        stmt = select(Recipe)

        if search:
            # Substring match, case-insensitive on every backend.
            stmt = stmt.where(Recipe.name.ilike(_like_pattern(search), escape="\\"))
        if cuisine_type:
            stmt = stmt.where(Recipe.cuisine_type == cuisine_type)

        stmt = stmt.order_by(Recipe.created_at.desc(), Recipe.id.desc())
        pagination = db.paginate(stmt, page=page, per_page=per_page, error_out=False)
        return Page(
            items=list(pagination.items),
            total=pagination.total or 0,
            page=pagination.page,
            per_page=pagination.per_page,
        )

    def cuisine_types(self) -> List[str]:
        stmt = select(Recipe.cuisine_type).distinct().order_by(Recipe.cuisine_type)
        return list(db.session.scalars(stmt))

    def get(self, recipe_id: int) -> Recipe:
        recipe = db.session.get(Recipe, recipe_id)
        if recipe is None:
            raise KeyError(f"Recipe '{recipe_id}' does not exist.")
        return recipe

    def add(self, **values: Any) -> Recipe:
        recipe = Recipe(**values)
        db.session.add(recipe)
        self._commit()
        db.session.refresh(recipe)
        return recipe

    def update(self, recipe: Recipe, **values: Any) -> Recipe:
        for key, value in values.items():
            setattr(recipe, key, value)
        db.session.add(recipe)
        self._commit()
        db.session.refresh(recipe)
        return recipe

    def delete(self, recipe: Recipe) -> None:
        db.session.delete(recipe)
        self._commit()

    def _commit(self) -> None:
        try:
            db.session.commit()
        except SQLAlchemyError:
            db.session.rollback()
            raise


__all__ = ["Page", "RecipeRepository", "SQLRecipeRepository"]

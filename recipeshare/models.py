from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List

from flask_login import UserMixin

from .extensions import db

ROLE_ADMIN = "admin"
ROLE_USER = "user"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _split_lines(text: str | None) -> List[str]:
    return [line.strip() for line in (text or "").splitlines() if line.strip()]


class User(UserMixin, db.Model):
    """Minimal account record; authentication itself lives elsewhere."""

    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False)
    email = db.Column(db.String(255), unique=True, nullable=False)
    role = db.Column(db.String(20), nullable=False, default=ROLE_USER)

    recipes = db.relationship("Recipe", back_populates="user")

    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "name": self.name}


class Recipe(db.Model):
    """A recipe shared by one owning user."""

    __tablename__ = "recipes"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(
        db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name = db.Column(db.String(255), nullable=False, index=True)
    cuisine_type = db.Column(db.String(255), nullable=False, index=True)
    ingredients = db.Column(db.Text, nullable=False)
    steps = db.Column(db.Text, nullable=False)
    picture = db.Column(db.String(255), nullable=True)
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = db.Column(
        db.DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow
    )

    user = db.relationship("User", back_populates="recipes")

    @property
    def ingredient_list(self) -> List[str]:
        return _split_lines(self.ingredients)

    @property
    def step_list(self) -> List[str]:
        return _split_lines(self.steps)

    def to_dict(self, include_user: bool = False) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "id": self.id,
            "user_id": self.user_id,
            "name": self.name,
            "cuisine_type": self.cuisine_type,
            "ingredients": self.ingredients,
            "steps": self.steps,
            "picture": self.picture,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
        if include_user:
            data["user"] = self.user.to_dict() if self.user else None
        return data

    def __repr__(self) -> str:
        return f"<Recipe {self.id} {self.name!r}>"


__all__ = ["ROLE_ADMIN", "ROLE_USER", "Recipe", "User"]

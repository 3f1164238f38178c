from __future__ import annotations

from typing import Any, Dict

from flask import (
    Blueprint,
    current_app,
    flash,
    get_flashed_messages,
    jsonify,
    redirect,
    request,
    url_for,
)
from flask_login import login_required

from .auth import acting_user
from .models import Recipe
from .policy import authorize
from .services import RecipeService
from .validation import validate_recipe

bp = Blueprint("recipes", __name__, url_prefix="/recipes")


def _service() -> RecipeService:
    return current_app.config["RECIPE_SERVICE"]


def _serialize(recipe: Recipe, include_user: bool = False) -> Dict[str, Any]:
    data = recipe.to_dict(include_user=include_user)
    data["picture_url"] = _service().images.url(recipe.picture) if recipe.picture else None
    return data


def _validated_input() -> Dict[str, Any]:
    return validate_recipe(
        request.form,
        request.files,
        max_picture_kb=current_app.config["MAX_PICTURE_KB"],
    )


def _messages() -> list:
    return [
        {"category": category, "message": message}
        for category, message in get_flashed_messages(with_categories=True)
    ]


@bp.get("")
def index():
    service = _service()
    user = acting_user()
    authorize("view_any", user)

    search = request.args.get("search")
    cuisine_type = request.args.get("cuisine_type")
    page = request.args.get("page", 1, type=int)

    recipes = service.list_paginated(search, cuisine_type, page=page)

    return jsonify(
        recipes={
            "data": [_serialize(recipe) for recipe in recipes.items],
            "total": recipes.total,
            "per_page": recipes.per_page,
            "current_page": recipes.page,
            "last_page": recipes.pages,
        },
        cuisine_types=service.list_distinct_cuisine_types(),
        filters={key: request.args[key] for key in ("search", "cuisine_type") if key in request.args},
        messages=_messages(),
    )


@bp.get("/create")
@login_required
def create():
    authorize("create", acting_user())
    return jsonify(recipe=None, cuisine_types=_service().list_distinct_cuisine_types())


@bp.post("")
@login_required
def store():
    user = acting_user()
    authorize("create", user)

    data = _validated_input()
    _service().create(data, user)

    flash("Recipe created successfully!", "success")
    return redirect(url_for("recipes.index"))


@bp.get("/<int:recipe_id>")
def show(recipe_id: int):
    recipe = _service().get(recipe_id)
    authorize("view", acting_user(), recipe)
    return jsonify(recipe=_serialize(recipe, include_user=True))


@bp.get("/<int:recipe_id>/edit")
@login_required
def edit(recipe_id: int):
    service = _service()
    recipe = service.get(recipe_id)
    authorize("update", acting_user(), recipe)
    return jsonify(recipe=_serialize(recipe), cuisine_types=service.list_distinct_cuisine_types())


@bp.put("/<int:recipe_id>")
@login_required
def update(recipe_id: int):
    service = _service()
    recipe = service.get(recipe_id)
    authorize("update", acting_user(), recipe)

    data = _validated_input()
    service.update(recipe, data)

    flash("Recipe updated successfully!", "success")
    return redirect(url_for("recipes.index"))


@bp.delete("/<int:recipe_id>")
@login_required
def destroy(recipe_id: int):
    service = _service()
    recipe = service.get(recipe_id)
    authorize("delete", acting_user(), recipe)

    service.delete(recipe)

    flash("Recipe deleted successfully!", "success")
    return redirect(url_for("recipes.index"))


__all__ = ["bp"]

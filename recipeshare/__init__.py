import logging
import os
from typing import Any, Dict, Optional

from flask import Flask, jsonify, redirect, request, send_from_directory, url_for

from .cli import register_commands
from .config import Config
from .exceptions import RecipeShareError, ValidationError
from .extensions import db, login_manager
from .middleware import MethodOverrideMiddleware
from .models import Recipe, User
from .repository import RecipeRepository, SQLRecipeRepository
from .services import RecipeService
from .storage import ImageStorage, LocalImageStorage

logger = logging.getLogger(__name__)


def create_app(
    config_override: Optional[Dict[str, Any]] = None,
    *,
    repository: Optional[RecipeRepository] = None,
    images: Optional[ImageStorage] = None,
) -> Flask:
    """Create and configure the Flask application.

    Parameters
    ----------
    config_override:
        Settings applied on top of the environment. Keys may name
        :class:`Config` fields or raw upper-case Flask config keys.
    repository:
        Optional recipe repository. Defaults to :class:`SQLRecipeRepository`.
    images:
        Optional picture storage. When ``None`` the ``IMAGE_BACKEND`` setting
        selects the local public folder or Google Cloud Storage.
    """

    app = Flask(__name__)

    cfg = Config.from_env()
    if config_override:
        cfg.override(config_override)
    app.config.update(cfg.to_flask_dict())
    for key, value in (config_override or {}).items():
        if key.isupper():
            app.config[key] = value

    # Handlers belong to the host process; only the package level is set here.
    logger.setLevel(app.config["LOG_LEVEL"])

    db.init_app(app)
    login_manager.init_app(app)
    login_manager.login_view = app.config["LOGIN_URL"]
    # Registers the user loader.
    from . import auth  # noqa: F401

    if images is None:
        images = _build_image_storage(app)
    if repository is None:
        repository = SQLRecipeRepository()

    app.config["RECIPE_SERVICE"] = RecipeService(
        repository,
        images,
        per_page=int(app.config["RECIPES_PER_PAGE"]),
    )

    app.wsgi_app = MethodOverrideMiddleware(app.wsgi_app)

    from .views import bp as recipes_bp

    app.register_blueprint(recipes_bp)
    register_commands(app)
    _register_error_handlers(app)

    @app.get("/")
    def home():
        return redirect(url_for("recipes.index"))

    if isinstance(images, LocalImageStorage):
        picture_root = str(images.root)

        @app.get("/storage/<path:filename>")
        def stored_picture(filename: str):
            return send_from_directory(picture_root, filename)

    logger.debug("Application configured with %s image storage", type(images).__name__)
    return app


def _build_image_storage(app: Flask) -> ImageStorage:
    backend = app.config["IMAGE_BACKEND"]
    if backend == "gcs":
        from .gcp_storage import GCSImageStorage

        return GCSImageStorage.from_config(app.config)
    if backend != "local":
        raise RuntimeError(f"Unknown IMAGE_BACKEND '{backend}'.")
    return LocalImageStorage(os.path.abspath(app.config["UPLOAD_FOLDER"]))


def _register_error_handlers(app: Flask) -> None:
    @app.errorhandler(ValidationError)
    def handle_validation_error(exc: ValidationError):
        old = {key: value for key, value in request.form.items() if key != "_method"}
        return jsonify(message=exc.message, errors=exc.errors, old=old), exc.status_code

    @app.errorhandler(RecipeShareError)
    def handle_recipe_error(exc: RecipeShareError):
        if exc.status_code >= 500:
            logger.error("Request to %s failed: %s", request.path, exc)
        return jsonify(message=exc.message), exc.status_code


__all__ = ["create_app", "Recipe", "User"]

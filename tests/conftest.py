from __future__ import annotations

import io
import struct
import zlib
from typing import Optional

import pytest
from flask_login import FlaskLoginClient
from PIL import Image
from werkzeug.datastructures import FileStorage

from recipeshare import create_app
from recipeshare.extensions import db
from recipeshare.models import ROLE_ADMIN, ROLE_USER, Recipe, User


def image_bytes(fmt: str = "PNG", size=(8, 8)) -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", size, "orange").save(buffer, fmt)
    return buffer.getvalue()


def _png_chunk(kind: bytes, payload: bytes) -> bytes:
    crc = zlib.crc32(kind + payload) & 0xFFFFFFFF
    return struct.pack(">I", len(payload)) + kind + payload + struct.pack(">I", crc)


def oversized_png_header(width: int = 40000, height: int = 40000) -> bytes:
    """A tiny PNG whose header claims far more pixels than Pillow will open."""

    header = struct.pack(">IIBBBBB", width, height, 8, 2, 0, 0, 0)
    return (
        b"\x89PNG\r\n\x1a\n"
        + _png_chunk(b"IHDR", header)
        + _png_chunk(b"IDAT", zlib.compress(b""))
        + _png_chunk(b"IEND", b"")
    )


def image_upload(filename: str = "dish.png", fmt: str = "PNG", size=(8, 8)) -> FileStorage:
    return FileStorage(
        stream=io.BytesIO(image_bytes(fmt, size)),
        filename=filename,
        content_type=f"image/{fmt.lower()}",
    )


@pytest.fixture
def app(tmp_path):
    app = create_app(
        {
            "DATABASE_URL": "sqlite://",
            "UPLOAD_FOLDER": str(tmp_path / "storage"),
            "IMAGE_BACKEND": "local",
            "SECRET_KEY": "testing",
            "LOGIN_URL": None,
            "TESTING": True,
        }
    )
    app.test_client_class = FlaskLoginClient

    with app.app_context():
        db.create_all()

    yield app

    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def ctx(app):
    """Push an application context for tests that talk to the service directly."""

    with app.app_context():
        yield app


@pytest.fixture
def service(ctx):
    return ctx.config["RECIPE_SERVICE"]


def make_user(app, name: str = "Cook", role: str = ROLE_USER, email: Optional[str] = None) -> int:
    with app.app_context():
        user = User(name=name, email=email or f"{name.lower().replace(' ', '.')}@example.com", role=role)
        db.session.add(user)
        db.session.commit()
        return user.id


def make_admin(app, name: str = "Admin") -> int:
    return make_user(app, name=name, role=ROLE_ADMIN)


def make_recipe(app, user_id: int, **values) -> int:
    fields = {
        "name": "Test Recipe",
        "cuisine_type": "Italian",
        "ingredients": "Ingredient 1\nIngredient 2",
        "steps": "Step 1\nStep 2",
        "picture": None,
    }
    fields.update(values)
    with app.app_context():
        recipe = Recipe(user_id=user_id, **fields)
        db.session.add(recipe)
        db.session.commit()
        return recipe.id


def client_for(app, user_id: Optional[int] = None):
    if user_id is None:
        return app.test_client()
    with app.app_context():
        user = db.session.get(User, user_id)
        return app.test_client(user=user)


def fetch_recipe(app, recipe_id: int) -> Optional[dict]:
    with app.app_context():
        recipe = db.session.get(Recipe, recipe_id)
        return recipe.to_dict() if recipe else None

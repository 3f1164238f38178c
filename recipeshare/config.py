from __future__ import annotations

import os
from dataclasses import dataclass, fields
from typing import Any, Dict, Optional

from dotenv import load_dotenv

DEFAULT_SECRET_KEY = "development-secret-change-me"


@dataclass
class Config:
    """Application settings resolved from the environment."""

    secret_key: str = DEFAULT_SECRET_KEY
    database_url: str = "sqlite:///recipeshare.db"
    upload_folder: str = "storage"
    image_backend: str = "local"
    gcs_bucket: Optional[str] = None
    gcp_project: Optional[str] = None
    recipes_per_page: int = 12
    max_picture_kb: int = 2048
    login_url: Optional[str] = None
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Config":
        load_dotenv()
        return cls(
            secret_key=os.environ.get("SECRET_KEY", DEFAULT_SECRET_KEY),
            database_url=os.environ.get("DATABASE_URL", "sqlite:///recipeshare.db"),
            upload_folder=os.environ.get("UPLOAD_FOLDER", "storage"),
            image_backend=os.environ.get("IMAGE_BACKEND", "local").lower(),
            gcs_bucket=os.environ.get("GCS_BUCKET"),
            gcp_project=os.environ.get("GCP_PROJECT"),
            recipes_per_page=int(os.environ.get("RECIPES_PER_PAGE", "12")),
            max_picture_kb=int(os.environ.get("MAX_PICTURE_KB", "2048")),
            login_url=os.environ.get("LOGIN_URL"),
            log_level=os.environ.get("LOG_LEVEL", "INFO").upper(),
        )

    def override(self, values: Dict[str, Any]) -> None:
        known = {f.name for f in fields(self)}
        for key, value in values.items():
            if key.lower() in known:
                setattr(self, key.lower(), value)

    def to_flask_dict(self) -> Dict[str, Any]:
        return {
            "SECRET_KEY": self.secret_key,
            "SQLALCHEMY_DATABASE_URI": self.database_url,
            "SQLALCHEMY_TRACK_MODIFICATIONS": False,
            "UPLOAD_FOLDER": self.upload_folder,
            "IMAGE_BACKEND": self.image_backend,
            "GCS_BUCKET": self.gcs_bucket,
            "GCP_PROJECT": self.gcp_project,
            "RECIPES_PER_PAGE": self.recipes_per_page,
            "MAX_PICTURE_KB": self.max_picture_kb,
            "MAX_CONTENT_LENGTH": 16 * 1024 * 1024,
            "LOGIN_URL": self.login_url,
            "LOG_LEVEL": self.log_level,
        }


__all__ = ["Config"]

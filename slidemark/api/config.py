"""
config.py — Environment configuration for the API.

Settings are plain attributes read from os.environ, optionally seeded from a
.env file at the project root.
"""

import os
from functools import lru_cache
from pathlib import Path
from typing import Optional

from slidemark.engine.policy import DEFAULT_DECK_CLASS, RenderPolicy
from slidemark.samples.store import default_library_path

# Load .env file if it exists
def _load_dotenv():
    env_path = Path(__file__).parent.parent.parent / ".env"
    if env_path.exists():
        with open(env_path) as f:
            for line in f:
                line = line.strip()
                if line and not line.startswith("#") and "=" in line:
                    key, value = line.split("=", 1)
                    key = key.strip()
                    value = value.strip()
                    if key and value and key not in os.environ:
                        os.environ[key] = value

_load_dotenv()


def _env_flag(name: str) -> Optional[bool]:
    """Tri-state boolean: unset or blank is None."""
    raw = os.environ.get(name, "").strip().lower()
    if not raw:
        return None
    return raw in ("1", "true", "yes", "on")


class Settings:
    """Application settings loaded from environment variables."""

    def __init__(self):
        self.app_name: str = os.environ.get("SLIDEMARK_APP_NAME", "Slidemark")
        self.app_version: str = "1.0.0"

        # Server settings
        self.host: str = os.environ.get("HOST", "0.0.0.0")
        self.port: int = int(os.environ.get("PORT", "8000"))
        self.debug: bool = os.environ.get("SLIDEMARK_DEBUG", "false").lower() == "true"
        self.log_level: str = os.environ.get("LOG_LEVEL", "INFO").upper()

        # CORS settings
        self.cors_origins: list = [
            origin.strip()
            for origin in os.environ.get(
                "CORS_ORIGINS",
                "http://localhost:3000,http://localhost:5173,http://127.0.0.1:3000,http://127.0.0.1:5173"
            ).split(",")
            if origin.strip()
        ]

        self.api_prefix: str = os.environ.get("SLIDEMARK_API_PREFIX", "/api/v1")

        # Sample library
        self.samples_dir: Path = Path(
            os.environ.get("SLIDEMARK_SAMPLES_DIR", "") or default_library_path()
        )

        # Render defaults
        self.layout_lookup: str = os.environ.get("SLIDEMARK_LAYOUT_LOOKUP", "map")
        self.token_resolution: Optional[bool] = _env_flag("SLIDEMARK_TOKEN_RESOLUTION")
        self.deck_class: str = os.environ.get("SLIDEMARK_DECK_CLASS", DEFAULT_DECK_CLASS)

    def render_policy(self, layout_lookup: Optional[str] = None) -> RenderPolicy:
        """Default render policy for API calls.

        Args:
            layout_lookup: Overrides the configured lookup convention.

        Returns:
            The matching preset with the configured deck class and, when
            set, token resolution.
        """
        overrides = {"deck_class": self.deck_class}
        if self.token_resolution is not None:
            overrides["token_resolution"] = self.token_resolution

        if (layout_lookup or self.layout_lookup) == "master_list":
            return RenderPolicy.mastered(**overrides)
        return RenderPolicy.keyed(**overrides)


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()

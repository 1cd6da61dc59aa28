"""Application configuration.

Single source of truth for all configuration values.
Loads from environment variables with .env file support.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

# =============================================================================
# VERSION - Read from pyproject.toml (single source of truth)
# =============================================================================


def _get_version() -> str:
    """Read version - prefer pyproject.toml, fall back to installed metadata."""
    try:
        import tomllib

        pyproject_path = Path(__file__).parent.parent.parent / "pyproject.toml"
        if pyproject_path.exists():
            with open(pyproject_path, "rb") as f:
                data = tomllib.load(f)
                return data.get("project", {}).get("version", "0.0.0")
    except (OSError, KeyError, ValueError):
        pass

    try:
        from importlib.metadata import PackageNotFoundError, version

        return version("golinks")
    except (ImportError, PackageNotFoundError):
        pass

    return "0.0.0"


VERSION = _get_version()

# Load .env file from project root
_PROJECT_ROOT = Path(__file__).parent.parent.parent
_ENV_FILE = _PROJECT_ROOT / ".env"
load_dotenv(_ENV_FILE)

DEFAULT_DATABASE_URL = f"sqlite://{_PROJECT_ROOT / 'data' / 'golinks.db'}"


class Config:
    """Application configuration singleton.

    All configuration values should be accessed through this class.
    Values are loaded from environment variables with sensible defaults.
    """

    # Storage backend: memory://, file://<path> or sqlite://<path>
    DATABASE_URL: str = os.getenv("DATABASE_URL", DEFAULT_DATABASE_URL)

    # API
    API_HOST: str = os.getenv("API_HOST", "0.0.0.0")
    API_PORT: int = int(os.getenv("API_PORT", "8080"))

    # Static UI bundle served under /_gadget/ui
    UI_PATH: str = os.getenv("UI_PATH", "./public")

    # Server the CLI talks to
    API_SERVER: str = os.getenv("GOLINKS_API_SERVER", "http://localhost:8080")

    @classmethod
    def reload(cls) -> None:
        """Reload configuration from environment.

        Useful for testing or runtime config changes.
        """
        load_dotenv(_ENV_FILE, override=True)
        cls.DATABASE_URL = os.getenv("DATABASE_URL", DEFAULT_DATABASE_URL)
        cls.API_HOST = os.getenv("API_HOST", "0.0.0.0")
        cls.API_PORT = int(os.getenv("API_PORT", "8080"))
        cls.UI_PATH = os.getenv("UI_PATH", "./public")
        cls.API_SERVER = os.getenv("GOLINKS_API_SERVER", "http://localhost:8080")


def get_database_url() -> str:
    """Get the configured storage backend URL."""
    return Config.DATABASE_URL


def get_ui_path() -> Path:
    """Get the directory holding the static UI bundle."""
    return Path(Config.UI_PATH)

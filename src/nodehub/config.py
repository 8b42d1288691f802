"""
Configuration for nodehub.

Values are read from the environment (and a `.env` file in the project
directory) when the module is imported; call `CONFIG.reload()` to pick up
changes made afterwards.
"""

import os
from pathlib import Path

from dotenv import load_dotenv


def find_project_dir(package_dir: Path) -> Path:
    """
    Locate the project directory.

    A source checkout keeps pyproject.toml two levels above the package;
    an installed package does not, and the working directory is used instead.
    """
    root = package_dir.parent.parent
    if (root / "pyproject.toml").exists():
        return root
    return Path.cwd()


PROJECT_DIR = find_project_dir(Path(__file__).resolve().parent)

load_dotenv(PROJECT_DIR / ".env")

DATA_DIR = Path(os.getenv("NODEHUB_DATA_DIR", str(PROJECT_DIR / ".nodehub")))


def _split_csv(value: str | None) -> list[str]:
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]


class Config:
    # Application Configuration
    DEFAULT_HOST = "0.0.0.0"
    DEFAULT_PORT = 8000
    PUBLIC_PATHS = ["/health", "/ready"]

    def __init__(self):
        self.reload()

    def reload(self) -> None:
        """Re-read settings from the environment."""
        self.host = os.getenv("NODEHUB_HOST", self.DEFAULT_HOST)
        self.port = int(os.getenv("NODEHUB_PORT", str(self.DEFAULT_PORT)))
        self.database_url = os.getenv(
            "NODEHUB_DATABASE_URL", f"sqlite:///{DATA_DIR / 'nodehub.db'}"
        )
        self.api_keys = _split_csv(os.getenv("NODEHUB_API_KEYS"))
        self.cors_origins = _split_csv(os.getenv("NODEHUB_CORS_ORIGINS")) or ["*"]
        self.log_level = os.getenv("LOG_LEVEL", "INFO")
        self.log_file = os.getenv("LOG_FILE")


CONFIG = Config()

"""
Configuration management for the panel grid search.
"""

import os
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables from .env file if it exists
load_dotenv()


class Config:
    """Application configuration settings."""

    # Base paths
    PROJECT_ROOT: Path = Path(__file__).parent.parent
    RUNS_DIR: Path = Path(os.getenv("GRIDSEARCH_RUNS_DIR", str(PROJECT_ROOT / "runs")))

    # Logging settings
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    LOG_FORMAT: str = os.getenv(
        "LOG_FORMAT",
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    # Search settings
    DEFAULT_RANDOM_SEED: int = int(os.getenv("RANDOM_SEED", "11235"))
    DEFAULT_WORKERS: int = int(os.getenv("GRIDSEARCH_WORKERS", "1"))

    @classmethod
    def ensure_directories(cls) -> None:
        """Ensure all required directories exist."""
        cls.RUNS_DIR.mkdir(parents=True, exist_ok=True)

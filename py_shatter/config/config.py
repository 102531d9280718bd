from pathlib import Path
from typing import Literal, Optional

from dotenv import dotenv_values
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

import os

# Load a local .env only for values missing from the environment
BASE_DIR = Path(__file__).resolve().parent.parent.parent
env_file = BASE_DIR / ".env"

if env_file.exists():
    file_env = dotenv_values(env_file)
    missing_keys = {k: v for k, v in file_env.items() if k not in os.environ and v is not None}
    for k, v in missing_keys.items():
        os.environ[k] = v


class Settings(BaseSettings):
    """Shattering settings pulled from SHATTER_* environment variables."""

    model_config = SettingsConfigDict(env_prefix="SHATTER_", extra="ignore")

    # Geometry Configuration
    epsilon: float = Field(default=0.001, gt=0, description="Minimum margin between a seed and its grid cell edge")
    default_thickness: float = Field(default=0.1, gt=0, description="Thickness used by spawn_panel when none is given")
    max_cells: int = Field(default=100_000, ge=1, description="Largest nx*ny grid accepted for one shatter")
    collider_min_volume: float = Field(default=1e-12, ge=0, description="Smallest convex collider volume accepted")

    # Shatter Policy
    source_policy: Literal["hide", "remove"] = Field(
        default="hide", description="What callers should do with a shattered panel"
    )
    seed: Optional[str] = Field(default=None, description="Seed for the default random generator")

    # Logging Configuration
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: Literal["plain", "json"] = Field(default="plain", description="Logging format (plain or json)")


# Instantiate singleton settings object
settings = Settings()

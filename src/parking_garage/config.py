"""Configuration models and loading utilities."""

import os
from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator


class SpotCounts(BaseModel):
    """Number of spots of each type on a level."""

    handicap: int = Field(default=0, ge=0)
    motorcycle: int = Field(default=0, ge=0)
    compact: int = Field(default=0, ge=0)
    large: int = Field(default=0, ge=0)


class LevelConfig(SpotCounts):
    """A single level and its spot inventory."""

    id: str

    @field_validator("id")
    @classmethod
    def strip_id(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Level id cannot be empty")
        return v


class FeeConfig(BaseModel):
    """Hourly rates per vehicle class."""

    handicap: float = Field(default=1.0, ge=0)
    bike: float = Field(default=2.5, ge=0)
    car: float = Field(default=5.0, ge=0)
    bus: float = Field(default=10.0, ge=0)

    @field_validator("handicap", "bike", "car", "bus", mode="before")
    @classmethod
    def resolve_env_var(cls, v):
        """Resolve environment variable references like ${VAR_NAME}."""
        if isinstance(v, str) and v.startswith("${") and v.endswith("}"):
            env_var = v[2:-1]
            return os.environ.get(env_var, "")
        return v


class LotConfig(BaseModel):
    """Main application configuration."""

    levels: list[LevelConfig] = Field(min_length=1)
    fees: FeeConfig = FeeConfig()
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"

    @field_validator("log_level", mode="before")
    @classmethod
    def upper_log_level(cls, v):
        return v.upper() if isinstance(v, str) else v

    @model_validator(mode="after")
    def check_unique_levels(self) -> "LotConfig":
        seen = set()
        for level in self.levels:
            if level.id in seen:
                raise ValueError(f"Duplicate level id: {level.id}")
            seen.add(level.id)
        return self

    @classmethod
    def uniform(
        cls,
        level_ids: list[str],
        counts: SpotCounts,
        fees: FeeConfig | None = None,
    ) -> "LotConfig":
        """Build a configuration that applies the same spot counts to every level."""
        return cls(
            levels=[LevelConfig(id=level_id, **counts.model_dump()) for level_id in level_ids],
            fees=fees or FeeConfig(),
        )


def load_config(path: str | Path) -> LotConfig:
    """
    Load configuration from a YAML file.

    Args:
        path: Path to the configuration file

    Returns:
        Validated LotConfig instance

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If config is invalid
    """
    config_path = Path(path)

    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path) as f:
        data = yaml.safe_load(f) or {}

    return LotConfig(**data)


def get_config_path() -> Path:
    """Get the default configuration file path."""
    local_config = Path("config/config.yaml")
    if local_config.exists():
        return local_config

    # Installed deployments keep it under /etc
    system_config = Path("/etc/parking-garage/config.yaml")
    if system_config.exists():
        return system_config

    return local_config  # Return default even if doesn't exist

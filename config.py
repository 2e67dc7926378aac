"""
Application configuration.

Settings are read from environment variables (prefix MESHWARP_, nested
sections separated by '__') and an optional .env file, e.g.

    MESHWARP_SYSTEM__LOG_LEVEL=DEBUG
    MESHWARP_WARP__DEGENERATE_POLICY=skip
    MESHWARP_API__PORT=8080
"""

from functools import lru_cache
from typing import Any, Dict, List

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from core.constants import APIConstants, SystemConstants, WarpDefaults
from core.enums import DegeneratePolicy, Interpolation


class SystemSettings(BaseModel):
    """Logging and runtime flags"""

    log_level: str = SystemConstants.LOG_LEVEL_DEFAULT
    debug: bool = False

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Invalid log level: {v}")
        return level


class WarpSettings(BaseModel):
    """Defaults for warp runs"""

    degenerate_policy: DegeneratePolicy = DegeneratePolicy(WarpDefaults.DEGENERATE_POLICY)
    interpolation: Interpolation = Interpolation(WarpDefaults.INTERPOLATION)
    workers: int = Field(default=WarpDefaults.WORKERS, ge=1, le=WarpDefaults.MAX_WORKERS)
    determinant_epsilon: float = Field(default=WarpDefaults.DETERMINANT_EPSILON, gt=0)
    background: str = WarpDefaults.BACKGROUND


class APISettings(BaseModel):
    """HTTP server settings"""

    host: str = APIConstants.DEFAULT_HOST
    port: int = Field(default=APIConstants.DEFAULT_PORT, ge=1, le=65535)
    cors_enabled: bool = True
    cors_origins: List[str] = ["*"]
    max_image_mb: int = Field(default=APIConstants.MAX_UPLOAD_SIZE_MB, ge=1)


class Settings(BaseSettings):
    """Top level settings"""

    model_config = SettingsConfigDict(
        env_prefix=SystemConstants.ENV_PREFIX,
        env_nested_delimiter="__",
        env_file=".env",
        extra="ignore",
    )

    environment: str = "development"
    system: SystemSettings = SystemSettings()
    warp: WarpSettings = WarpSettings()
    api: APISettings = APISettings()

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(mode="json")


@lru_cache()
def get_settings() -> Settings:
    """Cached settings instance"""
    return Settings()

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal, Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

LogFormat = Literal["json", "console"]

DEFAULT_TARGET = "aarch64-roblabla-switch"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="CARGO_NRO_",
        env_file=".env",
        extra="ignore",
    )

    driver: str = Field(default="xargo")
    target: str = Field(default=DEFAULT_TARGET)
    linkle: str = Field(default="linkle")

    manifest_name: str = Field(default="Cargo.toml")
    resource_dir_name: str = Field(default="res")
    container_suffix: str = Field(default=".nro")

    # Read verbatim from the unprefixed variable the driver itself understands.
    rust_target_path: Optional[Path] = Field(
        default=None, validation_alias=AliasChoices("RUST_TARGET_PATH")
    )

    log_level: str = Field(default="INFO")
    log_format: LogFormat = Field(default="console")


@lru_cache(maxsize=1)
def load_settings() -> Settings:
    return Settings()

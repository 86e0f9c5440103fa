"""
Settings for drawio-layout.

Values are read from environment variables prefixed with DRAWIO_LAYOUT_
(e.g. DRAWIO_LAYOUT_DIAGRAMS_DIR, DRAWIO_LAYOUT_DEFAULT_SPACING).
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime settings, validated by pydantic."""
    model_config = SettingsConfigDict(env_prefix="DRAWIO_LAYOUT_")

    # === Files ===
    diagrams_dir: Path = Field(
        default_factory=lambda: Path.home() / "Desktop",
        description="Where relative diagram paths are saved",
    )
    diagrams_dir_aliases: list[str] = Field(
        default_factory=lambda: ["/home/claude"],
        description="Sandbox home directories an MCP client may suggest; "
                    "paths under them are saved by file name into diagrams_dir",
    )
    blocked_prefixes: list[str] = Field(
        default_factory=lambda: ["/usr", "/bin", "/sbin", "/etc", "/var", "/root"],
        description="Absolute directories diagrams may never be written to",
    )

    # === Layout defaults ===
    default_spacing: float = Field(default=50, gt=0, allow_inf_nan=False, description="Gap between cells")
    default_start_x: float = Field(default=50, allow_inf_nan=False, description="Left edge of a layout")
    default_start_y: float = Field(default=50, allow_inf_nan=False, description="Top edge of a layout")

    # === Logging ===
    log_level: str = Field(default="WARNING", description="Logging level")

    @field_validator("diagrams_dir")
    @classmethod
    def expand_diagrams_dir(cls, value: Path) -> Path:
        return value.expanduser()

    @field_validator("log_level")
    @classmethod
    def upper_log_level(cls, value: str) -> str:
        return value.upper()


@lru_cache()
def get_settings() -> Settings:
    """Get the cached settings instance."""
    return Settings()


def reset_settings() -> None:
    """Drop the cached settings so the environment is read again."""
    get_settings.cache_clear()

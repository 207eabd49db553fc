"""Configuration management for the typed routes watcher."""

import logging
from pathlib import Path

from pydantic import AliasChoices, BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DeclarationOptions(BaseModel):
    """Options passed to the declaration generator."""

    partial_typed_groups: bool = Field(
        default=False,
        description="Also emit hrefs that keep their (group) segments",
    )


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="TYPED_ROUTES_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # Project settings
    app_root: Path | None = Field(
        default=None,
        validation_alias=AliasChoices("TYPED_ROUTES_APP_ROOT", "EXPO_ROUTER_APP_ROOT"),
        description="Directory containing the route files (unset disables the watcher)",
    )
    output_dir: Path = Field(
        default_factory=lambda: Path.cwd() / ".expo" / "types",
        description="Directory the router.d.ts declaration is written to",
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )

    # Watcher settings
    debounce_seconds: float = Field(
        default=1.0,
        gt=0,
        description="Quiet period before the declaration is regenerated, in seconds",
    )

    # Generator settings
    partial_typed_groups: bool = Field(
        default=False,
        description="Emit group-qualified hrefs alongside the plain ones",
    )

    @field_validator("app_root", mode="before")
    @classmethod
    def validate_app_root(cls, v: str | Path | None) -> Path | None:
        """Convert string to Path and validate it exists."""
        if v is None or (isinstance(v, str) and not v.strip()):
            return None
        path = Path(v) if isinstance(v, str) else v
        if not path.exists():
            raise ValueError(f"App root does not exist: {path}")
        if not path.is_dir():
            raise ValueError(f"App root is not a directory: {path}")
        return path.resolve()

    @field_validator("output_dir", mode="before")
    @classmethod
    def validate_output_dir(cls, v: str | Path) -> Path:
        """Convert string to an absolute Path."""
        path = Path(v) if isinstance(v, str) else v
        return path.resolve()

    @field_validator("log_level", mode="before")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is valid."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper_v = v.upper()
        if upper_v not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of {valid_levels}")
        return upper_v

    @property
    def declaration_options(self) -> DeclarationOptions:
        """Get the generator options."""
        return DeclarationOptions(partial_typed_groups=self.partial_typed_groups)


def setup_logging(level: str) -> None:
    """Configure logging for the application."""
    logging.basicConfig(
        level=getattr(logging, level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

"""Configuration management for dirwalk."""

from pathlib import Path
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from dirwalk.models.walk import WalkOptions


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_prefix="DIRWALK_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Paths
    root: str = Field(
        default=".",
        description="Directory to walk, used verbatim as the prefix of every path",
    )

    # Traversal
    recursive: bool = Field(
        default=False,
        description="Descend into subdirectories",
    )
    follow_symlinks: bool = Field(
        default=False,
        description="Traverse symlinked directories instead of skipping symlinks",
    )
    include_dotfiles: bool = Field(
        default=False,
        description="Include entries whose name starts with '.'",
    )
    match_directories: bool = Field(
        default=False,
        description="Report directories themselves, not only files",
    )
    max_path_length: int = Field(
        default=4096,
        ge=256,
        le=65536,
        description="Maximum path length in bytes",
    )
    filesystem: str = Field(
        default="local",
        pattern="^local$",
        description="Filesystem implementation",
    )

    # Logging
    log_level: str = Field(
        default="WARNING",
        pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
        description="Logging level",
    )
    log_format: str = Field(
        default="console",
        pattern="^(console|json)$",
        description="Log format: console or json",
    )
    log_file: Path | None = Field(
        default=None,
        description="Optional JSON log file path",
    )

    def walk_options(self) -> WalkOptions:
        """Build the traversal options."""
        return WalkOptions(
            recursive=self.recursive,
            follow_symlinks=self.follow_symlinks,
            include_dotfiles=self.include_dotfiles,
            match_directories=self.match_directories,
        )


# Global settings instance
settings = Settings()

"""Application settings."""

import os
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings

from ..markup import NestingStyle


def default_data_dir() -> Path:
    """Per-user data directory, following the XDG convention."""
    data_home = os.environ.get("XDG_DATA_HOME")
    if data_home:
        return Path(data_home) / "norgdo"
    return Path.home() / ".local" / "share" / "norgdo"


class Settings(BaseSettings):
    """Application settings."""

    data_dir: Path = Field(
        default_factory=default_data_dir,
        description="Directory holding the .norg task files",
    )

    nesting_style: NestingStyle = Field(
        default=NestingStyle.INDENT,
        description="How nested to-dos are written (indent or prefix)",
    )

    verbose: int = Field(
        default=0,
        description="Verbosity level (0=off, 1=INFO, 2+=DEBUG)",
    )

    log_file: Path | None = Field(
        default=None,
        description="Optional path to write logs to file",
    )

    model_config = {
        "env_prefix": "NORGDO_",
    }

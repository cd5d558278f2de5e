"""
Configuration module for the Merge Review server.

Handles:
- Environment variable loading (.env files)
- Runtime settings (subprocess allowlist and timeout, payload caps, logging)
"""

import os
import sys
from pathlib import Path
from typing import Optional, Set

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from rich.console import Console

console = Console(stderr=True)


# =============================================================================
# Settings
# =============================================================================


class Settings(BaseSettings):
    """Runtime settings, overridable through MERGE_REVIEW_* environment variables."""

    model_config = SettingsConfigDict(env_prefix="MERGE_REVIEW_")

    command_allowlist: Set[str] = Field(default_factory=lambda: {"git"})
    git_timeout: Optional[float] = 60.0

    # Payload caps
    file_diff_max_lines: int = Field(50, ge=0)
    compact_diff_max_lines: int = Field(20, ge=0)
    raw_diff_max_lines: int = Field(100, ge=0)

    # Logging
    log_file: Optional[str] = "merge_review.log"
    log_level: str = "INFO"
    quiet: bool = False


settings = Settings()


# =============================================================================
# Environment Loading
# =============================================================================


def load_configuration(env_file: str | None = None) -> Settings:
    """Load .env files in priority order and rebuild the global settings."""
    global settings

    sources = []

    # 1. Explicitly provided file
    if env_file and os.path.exists(env_file):
        sources.append(env_file)
    elif env_file:
        console.print(f"[bold red]Error:[/bold red] Env file '{env_file}' not found.")
        sys.exit(1)

    # 2. CWD .env
    cwd_env = Path(os.getcwd()) / ".env"
    if cwd_env.exists() and str(cwd_env) not in sources:
        sources.append(str(cwd_env))

    if sources:
        load_dotenv(dotenv_path=sources[0], override=True)
        for path in sources[1:]:
            load_dotenv(dotenv_path=path, override=False)

    settings = Settings()
    return settings

"""
Import Settings

Environment-driven configuration for the import pipeline.
"""

import os
from dataclasses import dataclass
from pathlib import Path

DEFAULT_MAX_UPLOAD_SIZE = 10 * 1024 * 1024  # 10MB


@dataclass
class ImportSettings:
    """Runtime configuration read from environment variables."""

    ai_provider: str = "anthropic"
    anthropic_api_key: str | None = None
    anthropic_model: str = "claude-3-haiku-20240307"
    openai_api_key: str | None = None
    openai_model: str = "gpt-4o-mini"
    ai_timeout: float | None = None
    database_url: str = "sqlite:///statement_import.db"
    max_upload_size: int = DEFAULT_MAX_UPLOAD_SIZE
    config_dir: Path | None = None

    @classmethod
    def from_env(cls) -> "ImportSettings":
        """Build settings from the process environment."""
        timeout = os.getenv("AI_TIMEOUT")
        config_dir = os.getenv("CONFIG_DIR")

        return cls(
            ai_provider=os.getenv("AI_PROVIDER", "anthropic").lower(),
            anthropic_api_key=os.getenv("ANTHROPIC_API_KEY") or None,
            anthropic_model=os.getenv("ANTHROPIC_MODEL", "claude-3-haiku-20240307"),
            openai_api_key=os.getenv("OPENAI_API_KEY") or None,
            openai_model=os.getenv("OPENAI_MODEL", "gpt-4o-mini"),
            ai_timeout=float(timeout) if timeout else None,
            database_url=os.getenv("DATABASE_URL", "sqlite:///statement_import.db"),
            max_upload_size=int(os.getenv("MAX_UPLOAD_SIZE", str(DEFAULT_MAX_UPLOAD_SIZE))),
            config_dir=Path(config_dir) if config_dir else None,
        )

"""
Environment configuration loader for s3-spa-upload.

Loads runtime settings (concurrency, logging, metrics, S3 endpoint) from a
.env file in the working directory or from environment variables. Per-deploy
options such as the prefix or the mapping files are command-line arguments,
not environment settings.
"""

import os
from pathlib import Path
from typing import Optional
from dataclasses import dataclass

from dotenv import load_dotenv

DEFAULT_MAX_WORKERS = 16


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _env_str(*names: str) -> Optional[str]:
    for name in names:
        value = (os.getenv(name) or "").strip()
        if value:
            return value
    return None


@dataclass
class UploadSettings:
    """Runtime settings shared by every deploy in this process."""

    # Concurrency cap for uploads and deletions
    max_workers: int = DEFAULT_MAX_WORKERS

    # Logging
    log_level: str = "INFO"

    # Metrics
    metrics_enabled: bool = True
    metrics_file: Optional[str] = None

    # S3 client
    region: Optional[str] = None
    endpoint_url: Optional[str] = None

    @classmethod
    def from_env(cls) -> "UploadSettings":
        """
        Load settings from environment variables.

        Loads ./.env first if present, then reads from os.environ. Variables
        already set in the environment win over the .env file.

        Returns:
            UploadSettings instance with loaded values

        Raises:
            ValueError: If S3_SPA_UPLOAD_MAX_WORKERS is not a positive integer
        """
        env_path = Path.cwd() / ".env"
        if env_path.exists():
            load_dotenv(env_path)

        raw_workers = os.getenv("S3_SPA_UPLOAD_MAX_WORKERS", str(DEFAULT_MAX_WORKERS))
        try:
            max_workers = int(raw_workers)
        except ValueError:
            raise ValueError(
                f"S3_SPA_UPLOAD_MAX_WORKERS must be an integer, got {raw_workers!r}"
            ) from None
        if max_workers < 1:
            raise ValueError(
                f"S3_SPA_UPLOAD_MAX_WORKERS must be at least 1, got {max_workers}"
            )

        return cls(
            max_workers=max_workers,
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            metrics_enabled=_env_flag("METRICS_ENABLED", True),
            metrics_file=_env_str("S3_SPA_UPLOAD_METRICS_FILE"),
            region=_env_str("AWS_REGION", "AWS_DEFAULT_REGION"),
            endpoint_url=_env_str("S3_ENDPOINT_URL"),
        )


# Global settings instance (lazy-loaded)
_config: Optional[UploadSettings] = None


def get_config() -> UploadSettings:
    """
    Get or create the process-wide settings.

    Returns:
        UploadSettings instance loaded from environment

    Example:
        >>> config = get_config()
        >>> print(config.max_workers)
        16
    """
    global _config
    if _config is None:
        _config = UploadSettings.from_env()
    return _config

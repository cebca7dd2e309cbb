"""
s3-spa-upload

Uploads a built single-page application (React, Angular, Vue, ...) to an S3
bucket with per-file Cache-Control and Content-Type headers, and optionally
deletes objects under the deploy prefix that are no longer part of the build.

This package provides one component per stage:
- uploader: Directory walk and per-file PutObject
- cleaner: Stale object listing and deletion
- deploy: Orchestration of both stages
- cli: Command-line entry point
- utils: Logging, settings, mapping files, matching, metrics and S3 clients
"""

__version__ = "0.1.0"

from s3_spa_upload.deploy import DeployOptions, DeployResult, deploy_spa, normalize_prefix
from s3_spa_upload.utils.logging import setup_logging
from s3_spa_upload.utils.matching import (
    CACHE_FOREVER,
    CACHE_ONE_DAY,
    DEFAULT_CACHE_CONTROL_MAPPING,
    NO_CACHE,
)
from s3_spa_upload.utils.storage import AwsCredentials

__all__ = [
    "AwsCredentials",
    "CACHE_FOREVER",
    "CACHE_ONE_DAY",
    "DEFAULT_CACHE_CONTROL_MAPPING",
    "DeployOptions",
    "DeployResult",
    "NO_CACHE",
    "deploy_spa",
    "normalize_prefix",
    "setup_logging",
]

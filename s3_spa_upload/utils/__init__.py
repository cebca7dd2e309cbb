"""
Utility modules for s3-spa-upload.

This package provides shared utilities used by the upload and cleanup stages:
- logging: Console/JSON logging with run IDs and entry/exit decorators
- config: Environment settings
- config_loader: Pattern mapping file loading and validation
- matching: Glob lookup for cache-control and content-type
- walker: Iterative directory walk
- pool: Bounded, fail-fast worker pool
- storage: S3 client construction
- metrics: Prometheus collectors
"""

from s3_spa_upload.utils.logging import get_logger, log_function_call

__all__ = ["get_logger", "log_function_call"]

"""
S3 object uploader implementation.

Uploads every file of a build directory to an S3 bucket. Each object gets a
Cache-Control and Content-Type header resolved from ordered glob mappings
against the file's path relative to the build directory, and is stored under
that relative path (slash-separated) behind the configured prefix.

Example usage:
    >>> from s3_spa_upload.uploader import upload_directory, UploadConfig
    >>> config = UploadConfig(bucket_name="my-site", prefix="app/")
    >>> keys = upload_directory(client, "./dist", config, max_workers=16)
    >>> print(f"Uploaded {len(keys)} files")
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, List, Optional

from botocore.exceptions import BotoCoreError, ClientError

from s3_spa_upload.utils.logging import get_logger, log_function_call
from s3_spa_upload.utils.matching import (
    DEFAULT_CACHE_CONTROL_MAPPING,
    PatternMapping,
    get_cache_control,
    get_content_type,
)
from s3_spa_upload.utils.metrics import DeployMetrics, get_metrics
from s3_spa_upload.utils.pool import run_bounded
from s3_spa_upload.utils.walker import iter_files

# Module logger
logger = get_logger(__name__)


@dataclass(frozen=True)
class UploadConfig:
    """
    Configuration shared by every upload of one deploy.

    Attributes:
        bucket_name: S3 bucket name
        prefix: Key prefix, either empty or ending in "/"
        cache_control_mapping: Ordered glob -> Cache-Control mapping
        mime_type_mapping: Ordered glob (or extension) -> Content-Type mapping
        verbose: Log one INFO line per uploaded object
    """

    bucket_name: str
    prefix: str = ""
    cache_control_mapping: PatternMapping = DEFAULT_CACHE_CONTROL_MAPPING
    mime_type_mapping: PatternMapping = ()
    verbose: bool = False


def to_posix_path(path: str, sep: str = os.sep) -> str:
    """
    Convert a native relative path to a slash-separated one.

    Args:
        path: Relative path using ``sep`` as separator
        sep: Native path separator (defaults to the running OS)

    Returns:
        Path with every ``sep`` replaced by "/"

    Example:
        >>> to_posix_path("sub\\\\dir\\\\file.css", sep="\\\\")
        'sub/dir/file.css'
    """
    if not path or sep == "/":
        return path
    return path.replace(sep, "/")


def make_object_key(relative_path: str, prefix: str) -> str:
    """Compose the object key: prefix (verbatim) + slash-separated relative path."""
    return f"{prefix}{relative_path}"


def upload_object(
    client: Any,
    key: str,
    file_path: str,
    relative_path: str,
    config: UploadConfig,
    metrics: Optional[DeployMetrics] = None,
) -> str:
    """
    Upload one file with a single PutObject call.

    The file is read fully into memory. Cache-Control and Content-Type are
    resolved against ``relative_path``; a header with no resolved value is
    not sent.

    Args:
        client: boto3 S3 client
        key: Destination object key
        file_path: Local path of the file
        relative_path: Slash-separated path relative to the build directory
        config: Upload settings for this deploy
        metrics: Metrics sink (process-wide instance if None)

    Returns:
        The destination key

    Raises:
        OSError: If the file cannot be read
        ClientError, BotoCoreError: If the PutObject call fails
    """
    metrics = metrics if metrics is not None else get_metrics()

    body = Path(file_path).read_bytes()
    cache_control = get_cache_control(relative_path, config.cache_control_mapping)
    content_type = get_content_type(relative_path, config.mime_type_mapping)

    params = {"Bucket": config.bucket_name, "Key": key, "Body": body}
    if cache_control is not None:
        params["CacheControl"] = cache_control
    if content_type is not None:
        params["ContentType"] = content_type

    try:
        with metrics.track_storage_call("put_object"):
            client.put_object(**params)
    except (ClientError, BotoCoreError) as e:
        metrics.record_storage_error("put_object", e)
        raise

    metrics.record_upload(bytes_uploaded=len(body))

    message = (
        f"Uploaded s3://{config.bucket_name}/{key} | "
        f"cache-control={cache_control} | content-type={content_type}"
    )
    if config.verbose:
        logger.info(message)
    else:
        logger.debug(message)

    return key


@log_function_call
def upload_directory(
    client: Any,
    directory: str,
    config: UploadConfig,
    max_workers: int,
    metrics: Optional[DeployMetrics] = None,
) -> List[str]:
    """
    Upload every regular file below ``directory``.

    The walk feeds a bounded worker pool, so uploads start while the tree is
    still being enumerated. The first failure cancels queued uploads and is
    re-raised.

    Args:
        client: boto3 S3 client
        directory: Build directory to upload
        config: Upload settings for this deploy
        max_workers: Maximum concurrent uploads
        metrics: Metrics sink (process-wide instance if None)

    Returns:
        Destination keys in discovery order
    """
    root = os.path.normpath(directory)

    def _upload(file_path: str) -> str:
        relative_path = to_posix_path(os.path.relpath(file_path, root))
        key = make_object_key(relative_path, config.prefix)
        return upload_object(client, key, file_path, relative_path, config, metrics)

    return run_bounded(_upload, iter_files(root), max_workers=max_workers)

"""
Deploy orchestration: upload a build directory, then optionally prune.

Example usage:
    >>> from s3_spa_upload import deploy_spa, DeployOptions
    >>> result = deploy_spa("./dist", "my-site", DeployOptions(prefix="app", delete=True))
    >>> print(result.uploaded_count, result.deleted_count)
"""

import uuid
from dataclasses import dataclass, field
from typing import Any, Iterable, List, Mapping, Optional, Tuple, Union

from s3_spa_upload.cleaner import remove_stale_objects
from s3_spa_upload.uploader import UploadConfig, upload_directory
from s3_spa_upload.utils.config import get_config
from s3_spa_upload.utils.logging import get_logger, set_run_id
from s3_spa_upload.utils.matching import (
    DEFAULT_CACHE_CONTROL_MAPPING,
    as_pattern_mapping,
)
from s3_spa_upload.utils.metrics import DeployMetrics, get_metrics
from s3_spa_upload.utils.storage import (
    AwsCredentials,
    create_s3_client,
    describe_credential_source,
)

logger = get_logger(__name__)

MappingLike = Union[Mapping[str, str], Iterable[Tuple[str, str]]]


@dataclass
class DeployOptions:
    """
    Options for one deploy.

    Attributes:
        delete: Delete objects under the prefix that were not just uploaded
        verbose: Log one line per uploaded/deleted object
        cache_control_mapping: Glob -> Cache-Control (built-in default if None)
        mime_type_mapping: Glob/extension -> Content-Type (empty if None)
        prefix: Key prefix; "/" is appended unless empty
        credentials: Explicit AWS credentials (win over profile)
        profile: Named AWS credential profile
        max_workers: Concurrency cap (environment setting if None)
        region: AWS region (environment setting if None)
        endpoint_url: S3-compatible endpoint (environment setting if None)
    """

    delete: bool = False
    verbose: bool = False
    cache_control_mapping: Optional[MappingLike] = None
    mime_type_mapping: Optional[MappingLike] = None
    prefix: Optional[str] = None
    credentials: Optional[AwsCredentials] = None
    profile: Optional[str] = None
    max_workers: Optional[int] = None
    region: Optional[str] = None
    endpoint_url: Optional[str] = None


@dataclass(frozen=True)
class DeployResult:
    """
    Outcome of a deploy.

    Attributes:
        bucket_name: Target bucket
        prefix: Normalized key prefix
        uploaded: Uploaded keys in discovery order
        deleted: Deleted stale keys, sorted (empty unless delete was set)
    """

    bucket_name: str
    prefix: str
    uploaded: List[str] = field(default_factory=list)
    deleted: List[str] = field(default_factory=list)

    @property
    def uploaded_count(self) -> int:
        return len(self.uploaded)

    @property
    def deleted_count(self) -> int:
        return len(self.deleted)


def normalize_prefix(prefix: Optional[str]) -> str:
    """
    Normalize a key prefix: empty stays empty, otherwise it ends with "/".

    Example:
        >>> normalize_prefix("app")
        'app/'
        >>> normalize_prefix("")
        ''
    """
    if not prefix:
        return ""
    return prefix if prefix.endswith("/") else f"{prefix}/"


def deploy_spa(
    directory: str,
    bucket_name: str,
    options: Optional[DeployOptions] = None,
    client: Optional[Any] = None,
    metrics: Optional[DeployMetrics] = None,
) -> DeployResult:
    """
    Upload ``directory`` to ``bucket_name`` and optionally delete stale objects.

    One S3 client is built per call (unless ``client`` is given) and passed to
    every operation. Any error aborts the deploy and propagates; the upload
    count is only logged once every upload succeeded.

    Args:
        directory: Build directory to upload
        bucket_name: Target bucket
        options: Deploy options (defaults if None)
        client: Pre-built S3 client, e.g. for S3-compatible stores or tests
        metrics: Metrics sink (process-wide instance if None)

    Returns:
        DeployResult with uploaded and deleted keys
    """
    options = options if options is not None else DeployOptions()
    metrics = metrics if metrics is not None else get_metrics()
    settings = get_config()

    set_run_id(uuid.uuid4().hex[:12])

    prefix = normalize_prefix(options.prefix)
    cache_control_mapping = (
        DEFAULT_CACHE_CONTROL_MAPPING
        if options.cache_control_mapping is None
        else as_pattern_mapping(options.cache_control_mapping)
    )
    mime_type_mapping = as_pattern_mapping(options.mime_type_mapping)
    max_workers = options.max_workers or settings.max_workers

    if client is None:
        logger.info(
            f"Connecting to S3 using "
            f"{describe_credential_source(options.credentials, options.profile)}"
        )
        client = create_s3_client(
            credentials=options.credentials,
            profile=options.profile,
            region=options.region or settings.region,
            endpoint_url=options.endpoint_url or settings.endpoint_url,
            max_pool_connections=max_workers,
        )

    config = UploadConfig(
        bucket_name=bucket_name,
        prefix=prefix,
        cache_control_mapping=cache_control_mapping,
        mime_type_mapping=mime_type_mapping,
        verbose=options.verbose,
    )

    deleted: List[str] = []
    with metrics.track_deploy():
        uploaded = upload_directory(
            client, directory, config, max_workers=max_workers, metrics=metrics
        )
        logger.info(f"Uploaded {len(uploaded)} files")

        if options.delete:
            deleted = remove_stale_objects(
                client,
                bucket_name,
                set(uploaded),
                prefix,
                max_workers=max_workers,
                verbose=options.verbose,
                metrics=metrics,
            )
            logger.info(f"Deleted {len(deleted)} old files")

    return DeployResult(
        bucket_name=bucket_name, prefix=prefix, uploaded=uploaded, deleted=deleted
    )

"""
Stale object removal.

After an upload pass, deletes every object under the deploy prefix that the
pass did not just write. The whole bucket is listed (no server-side prefix
filter) and filtered locally.

An empty prefix makes every object in the bucket a candidate: with deletion
enabled, anything not uploaded by the current run is removed.
"""

from typing import AbstractSet, Any, Iterable, List, Optional

from botocore.exceptions import BotoCoreError, ClientError

from s3_spa_upload.utils.logging import get_logger, log_function_call
from s3_spa_upload.utils.metrics import DeployMetrics, get_metrics
from s3_spa_upload.utils.pool import run_bounded

logger = get_logger(__name__)


def list_object_keys(
    client: Any, bucket_name: str, metrics: Optional[DeployMetrics] = None
) -> List[str]:
    """
    List every key in the bucket.

    Pages are fetched one after another; a failure on any page aborts the
    listing and propagates.

    Args:
        client: boto3 S3 client
        bucket_name: Bucket to list
        metrics: Metrics sink (process-wide instance if None)

    Returns:
        All object keys in listing order
    """
    metrics = metrics if metrics is not None else get_metrics()
    keys: List[str] = []
    page_count = 0

    paginator = client.get_paginator("list_objects_v2")
    try:
        with metrics.track_storage_call("list_objects_v2"):
            for page in paginator.paginate(Bucket=bucket_name):
                page_count += 1
                keys.extend(obj["Key"] for obj in page.get("Contents", []))
    except (ClientError, BotoCoreError) as e:
        metrics.record_storage_error("list_objects_v2", e)
        raise

    logger.debug(f"Listed {len(keys)} objects in {page_count} page(s) of {bucket_name}")
    return keys


def select_stale_keys(
    existing_keys: Iterable[str], uploaded_keys: AbstractSet[str], prefix: str
) -> List[str]:
    """
    Return keys under ``prefix`` that were not just uploaded, sorted.

    Example:
        >>> select_stale_keys({"p/a.js", "p/b.js", "q/c.js"}, {"p/a.js"}, "p/")
        ['p/b.js']
    """
    return sorted(
        {key for key in existing_keys if key.startswith(prefix)} - set(uploaded_keys)
    )


def delete_object(
    client: Any,
    bucket_name: str,
    key: str,
    verbose: bool = False,
    metrics: Optional[DeployMetrics] = None,
) -> str:
    """Delete one object and return its key."""
    metrics = metrics if metrics is not None else get_metrics()
    try:
        with metrics.track_storage_call("delete_object"):
            client.delete_object(Bucket=bucket_name, Key=key)
    except (ClientError, BotoCoreError) as e:
        metrics.record_storage_error("delete_object", e)
        raise

    metrics.record_deletion()
    if verbose:
        logger.info(f"Deleted old file: {key}")
    else:
        logger.debug(f"Deleted old file: {key}")
    return key


@log_function_call
def remove_stale_objects(
    client: Any,
    bucket_name: str,
    uploaded_keys: AbstractSet[str],
    prefix: str,
    max_workers: int,
    verbose: bool = False,
    metrics: Optional[DeployMetrics] = None,
) -> List[str]:
    """
    Delete objects under ``prefix`` that are not in ``uploaded_keys``.

    Deletions run on a bounded worker pool. The first failed deletion cancels
    the queued ones and is re-raised; deletions already in flight complete.

    Args:
        client: boto3 S3 client
        bucket_name: Bucket to clean
        uploaded_keys: Keys written by the current upload pass
        prefix: Deploy prefix ("" means the whole bucket)
        max_workers: Maximum concurrent deletions
        verbose: Log one INFO line per deleted object
        metrics: Metrics sink (process-wide instance if None)

    Returns:
        Deleted keys, sorted
    """
    existing_keys = list_object_keys(client, bucket_name, metrics=metrics)
    stale_keys = select_stale_keys(existing_keys, uploaded_keys, prefix)

    if not stale_keys:
        logger.debug("No stale objects to delete")
        return []

    if not prefix:
        logger.warning(
            f"Deleting {len(stale_keys)} object(s) from the bucket root of "
            f"{bucket_name} (no prefix set)"
        )

    return run_bounded(
        lambda key: delete_object(client, bucket_name, key, verbose, metrics),
        stale_keys,
        max_workers=max_workers,
    )

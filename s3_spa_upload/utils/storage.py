"""
S3 client construction.

Builds one fully configured boto3 S3 client per deploy from a single credential
source. Precedence: explicit access key triple, then a named profile from the
shared credentials file, then boto3's default chain (environment, config
files, instance/container role).
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import boto3
from botocore.config import Config

from s3_spa_upload.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class AwsCredentials:
    """
    Explicit AWS credentials.

    Attributes:
        access_key_id: AWS access key ID
        secret_access_key: AWS secret access key (excluded from repr)
        session_token: Optional STS session token (excluded from repr)
    """

    access_key_id: str
    secret_access_key: str = field(repr=False)
    session_token: Optional[str] = field(default=None, repr=False)


def describe_credential_source(
    credentials: Optional[AwsCredentials] = None,
    profile: Optional[str] = None,
) -> str:
    """Return a log-safe description of the credential source in use."""
    if credentials is not None:
        return f"explicit credentials ({credentials.access_key_id})"
    if profile:
        return f"profile {profile!r}"
    return "default credential chain"


def create_session(
    credentials: Optional[AwsCredentials] = None,
    profile: Optional[str] = None,
    region: Optional[str] = None,
) -> boto3.session.Session:
    """
    Create a boto3 session for the chosen credential source.

    Args:
        credentials: Explicit credentials (take precedence over profile)
        profile: Named profile from ~/.aws/credentials or ~/.aws/config
        region: Optional region name

    Returns:
        Configured boto3 Session

    Raises:
        botocore.exceptions.ProfileNotFound: If the named profile does not exist
    """
    session_kwargs: Dict[str, Any] = {}
    if region:
        session_kwargs["region_name"] = region

    if credentials is not None:
        if profile:
            logger.warning(
                f"Both explicit credentials and profile {profile!r} given; "
                "using explicit credentials"
            )
        session_kwargs["aws_access_key_id"] = credentials.access_key_id
        session_kwargs["aws_secret_access_key"] = credentials.secret_access_key
        if credentials.session_token:
            session_kwargs["aws_session_token"] = credentials.session_token
    elif profile:
        session_kwargs["profile_name"] = profile

    return boto3.session.Session(**session_kwargs)


def create_s3_client(
    credentials: Optional[AwsCredentials] = None,
    profile: Optional[str] = None,
    region: Optional[str] = None,
    endpoint_url: Optional[str] = None,
    max_pool_connections: int = 10,
) -> Any:
    """
    Create the S3 client used for a whole deploy.

    The connection pool is sized to the worker count so concurrent uploads do
    not queue on connections.

    Args:
        credentials: Explicit credentials
        profile: Named credential profile
        region: Optional region name
        endpoint_url: Optional endpoint for S3-compatible storage
        max_pool_connections: HTTP connection pool size

    Returns:
        boto3 S3 client
    """
    logger.debug(
        f"Creating S3 client using {describe_credential_source(credentials, profile)}"
    )
    session = create_session(credentials=credentials, profile=profile, region=region)
    client_kwargs: Dict[str, Any] = {
        "config": Config(max_pool_connections=max(10, max_pool_connections)),
    }
    if endpoint_url:
        client_kwargs["endpoint_url"] = endpoint_url
    return session.client("s3", **client_kwargs)

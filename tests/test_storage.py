"""Tests for S3 client construction and credential precedence."""

from unittest.mock import MagicMock, patch

from s3_spa_upload.utils.storage import (
    AwsCredentials,
    create_s3_client,
    create_session,
    describe_credential_source,
)

CREDENTIALS = AwsCredentials(
    access_key_id="AKIAEXAMPLE",
    secret_access_key="super-secret",
    session_token="session-token",
)


class TestAwsCredentials:
    """Test AwsCredentials dataclass."""

    def test_repr_hides_secrets(self):
        """Test the secret key and session token never show in repr."""
        text = repr(CREDENTIALS)

        assert "AKIAEXAMPLE" in text
        assert "super-secret" not in text
        assert "session-token" not in text

    def test_session_token_optional(self):
        """Test the session token defaults to None."""
        creds = AwsCredentials(access_key_id="a", secret_access_key="b")
        assert creds.session_token is None


class TestCreateSession:
    """Test credential source precedence."""

    @patch("boto3.session.Session")
    def test_explicit_credentials(self, mock_session):
        """Test explicit credentials are passed through."""
        create_session(credentials=CREDENTIALS)

        mock_session.assert_called_once_with(
            aws_access_key_id="AKIAEXAMPLE",
            aws_secret_access_key="super-secret",
            aws_session_token="session-token",
        )

    @patch("boto3.session.Session")
    def test_explicit_credentials_win_over_profile(self, mock_session):
        """Test the profile is ignored when explicit credentials exist."""
        create_session(credentials=CREDENTIALS, profile="staging")

        kwargs = mock_session.call_args.kwargs
        assert "profile_name" not in kwargs
        assert kwargs["aws_access_key_id"] == "AKIAEXAMPLE"

    @patch("boto3.session.Session")
    def test_profile(self, mock_session):
        """Test a named profile is used when no explicit credentials exist."""
        create_session(profile="staging", region="eu-west-1")

        mock_session.assert_called_once_with(profile_name="staging", region_name="eu-west-1")

    @patch("boto3.session.Session")
    def test_default_chain(self, mock_session):
        """Test nothing is forced when no source is given."""
        create_session()

        mock_session.assert_called_once_with()

    @patch("boto3.session.Session")
    def test_no_session_token(self, mock_session):
        """Test a missing session token is not sent."""
        create_session(credentials=AwsCredentials("a", "b"))

        assert "aws_session_token" not in mock_session.call_args.kwargs


class TestCreateS3Client:
    """Test create_s3_client function."""

    @patch("boto3.session.Session")
    def test_endpoint_and_pool_size(self, mock_session):
        """Test the endpoint URL and connection pool reach the client."""
        session = MagicMock()
        mock_session.return_value = session

        client = create_s3_client(
            profile="minio", endpoint_url="http://localhost:9000", max_pool_connections=32
        )

        assert client is session.client.return_value
        args, kwargs = session.client.call_args
        assert args == ("s3",)
        assert kwargs["endpoint_url"] == "http://localhost:9000"
        assert kwargs["config"].max_pool_connections == 32

    @patch("boto3.session.Session")
    def test_no_endpoint_by_default(self, mock_session):
        """Test the default AWS endpoint is used when none is given."""
        session = MagicMock()
        mock_session.return_value = session

        create_s3_client()

        assert "endpoint_url" not in session.client.call_args.kwargs


def test_describe_credential_source():
    """Test log-safe descriptions."""
    assert "AKIAEXAMPLE" in describe_credential_source(CREDENTIALS, "ignored")
    assert "super-secret" not in describe_credential_source(CREDENTIALS)
    assert describe_credential_source(profile="staging") == "profile 'staging'"
    assert describe_credential_source() == "default credential chain"

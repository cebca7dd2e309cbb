"""Shared fixtures: an in-memory S3 client and fresh settings/metrics per test."""

import threading
from pathlib import Path
from typing import Dict, Iterator, List, Optional

import pytest

import s3_spa_upload.utils.config as config_module
import s3_spa_upload.utils.metrics as metrics_module
from s3_spa_upload.utils.metrics import DeployMetrics


class FakePaginator:
    """Mimics the list_objects_v2 paginator over a FakeS3Client."""

    def __init__(self, client: "FakeS3Client") -> None:
        self.client = client

    def paginate(self, Bucket: str) -> Iterator[dict]:
        self.client.list_calls.append(Bucket)
        keys = sorted(self.client.objects)
        if not keys:
            # S3 omits "Contents" for an empty bucket
            yield {"KeyCount": 0}
            return
        size = self.client.page_size
        for start in range(0, len(keys), size):
            chunk = keys[start:start + size]
            yield {"KeyCount": len(chunk), "Contents": [{"Key": key} for key in chunk]}


class FakeS3Client:
    """Thread-safe stand-in for the subset of the boto3 S3 client we use."""

    def __init__(self, keys: Optional[List[str]] = None, page_size: int = 2) -> None:
        self.objects: Dict[str, dict] = {key: {"Key": key} for key in keys or []}
        self.page_size = page_size
        self.put_calls: List[dict] = []
        self.delete_calls: List[str] = []
        self.list_calls: List[str] = []
        self._lock = threading.Lock()

    def put_object(self, **params) -> dict:
        with self._lock:
            self.objects[params["Key"]] = params
            self.put_calls.append(params)
        return {}

    def delete_object(self, Bucket: str, Key: str) -> dict:
        with self._lock:
            self.objects.pop(Key, None)
            self.delete_calls.append(Key)
        return {}

    def get_paginator(self, operation_name: str) -> FakePaginator:
        assert operation_name == "list_objects_v2"
        return FakePaginator(self)


@pytest.fixture(autouse=True)
def reset_singletons():
    """Drop cached settings and metrics so env changes take effect."""
    config_module._config = None
    metrics_module._metrics_instance = None
    yield
    config_module._config = None
    metrics_module._metrics_instance = None


@pytest.fixture
def fake_s3() -> FakeS3Client:
    """Empty in-memory bucket."""
    return FakeS3Client()


@pytest.fixture
def make_s3():
    """Factory for in-memory buckets pre-filled with keys."""
    return FakeS3Client


@pytest.fixture
def metrics() -> DeployMetrics:
    """Enabled metrics on a private registry."""
    return DeployMetrics(enabled=True)


@pytest.fixture
def spa_build(tmp_path: Path) -> Path:
    """A small SPA build directory."""
    dist = tmp_path / "dist"
    (dist / "static" / "js").mkdir(parents=True)
    (dist / "static" / "css").mkdir(parents=True)
    (dist / "index.html").write_text("<html></html>")
    (dist / "favicon.ico").write_bytes(b"\x00\x01")
    (dist / "robots.txt").write_text("User-agent: *")
    (dist / "static" / "js" / "main.abc123.js").write_text("console.log(1)")
    (dist / "static" / "css" / "main.def456.css").write_text("body{}")
    return dist

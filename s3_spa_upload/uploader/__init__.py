"""
S3 uploader module.

Uploads a build directory to an S3 bucket, one PutObject per file, with
Cache-Control and Content-Type headers resolved from glob mappings.
"""

from .uploader import (
    UploadConfig,
    make_object_key,
    to_posix_path,
    upload_directory,
    upload_object,
)

__all__ = [
    "UploadConfig",
    "make_object_key",
    "to_posix_path",
    "upload_directory",
    "upload_object",
]

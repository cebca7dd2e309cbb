"""
Upload a dist/build directory containing a SPA to AWS S3.

Usage:
    s3-spa-upload dist my-bucket
    s3-spa-upload dist my-bucket --delete --prefix app
    s3-spa-upload dist my-bucket --profile staging --verbose
    s3-spa-upload dist my-bucket --cache-control-mapping cache.json
"""

import argparse
import sys
from typing import List, Optional

from s3_spa_upload.deploy import DeployOptions, deploy_spa
from s3_spa_upload.utils.config import get_config
from s3_spa_upload.utils.config_loader import load_pattern_mapping
from s3_spa_upload.utils.logging import get_logger, setup_logging
from s3_spa_upload.utils.metrics import get_metrics

logger = get_logger(__name__)


def _positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {number}")
    return number


def build_parser() -> argparse.ArgumentParser:
    """Build the command-line parser."""
    parser = argparse.ArgumentParser(
        prog="s3-spa-upload",
        description=(
            "Upload a dist/build directory containing a SPA "
            "(React, Angular, Vue, ...) to AWS S3"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Upload and remove files left over from the previous build
  %(prog)s dist my-bucket --delete

  # Deploy under a key prefix with a named AWS profile
  %(prog)s dist my-bucket --prefix app --profile staging

  # Custom cache-control rules (JSON object of glob -> header value)
  %(prog)s dist my-bucket --cache-control-mapping cache-control.json
        """,
    )

    parser.add_argument("directory", help="Build directory to upload")
    parser.add_argument("bucketname", help="Target S3 bucket")

    parser.add_argument(
        "-d",
        "--delete",
        action="store_true",
        help="Delete old files from the S3 bucket",
    )

    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Give verbose output",
    )

    parser.add_argument(
        "-p",
        "--prefix",
        default="",
        help="Path prefix to prepend to every S3 object key of uploaded files",
    )

    parser.add_argument(
        "--profile",
        help="AWS profile to use",
    )

    parser.add_argument(
        "--cache-control-mapping",
        metavar="PATH",
        help="Path to custom JSON file that maps glob patterns to cache-control headers",
    )

    parser.add_argument(
        "--mime-type-mapping",
        metavar="PATH",
        help="Path to custom JSON file that maps glob patterns to mime-types",
    )

    parser.add_argument(
        "--max-workers",
        type=_positive_int,
        help="Maximum concurrent uploads/deletions (default: from environment, 16)",
    )

    parser.add_argument(
        "--region",
        help="AWS region (default: AWS_REGION / AWS_DEFAULT_REGION)",
    )

    parser.add_argument(
        "--endpoint-url",
        help="Endpoint of an S3-compatible store (default: S3_ENDPOINT_URL)",
    )

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the upload CLI."""
    args = build_parser().parse_args(argv)

    try:
        settings = get_config()
        setup_logging(level=settings.log_level)

        cache_control_mapping = None
        if args.cache_control_mapping:
            cache_control_mapping = load_pattern_mapping(args.cache_control_mapping)

        mime_type_mapping = None
        if args.mime_type_mapping:
            mime_type_mapping = load_pattern_mapping(args.mime_type_mapping)

        options = DeployOptions(
            delete=args.delete,
            verbose=args.verbose,
            cache_control_mapping=cache_control_mapping,
            mime_type_mapping=mime_type_mapping,
            prefix=args.prefix,
            profile=args.profile,
            max_workers=args.max_workers,
            region=args.region,
            endpoint_url=args.endpoint_url,
        )

        deploy_spa(args.directory, args.bucketname, options)

        if settings.metrics_file:
            get_metrics().write_textfile(settings.metrics_file)

    except KeyboardInterrupt:
        print("Upload cancelled by user", file=sys.stderr)
        return 130

    except Exception as e:
        logger.debug("Deploy failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())

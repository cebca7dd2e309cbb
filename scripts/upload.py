#!/usr/bin/env python3
"""
Upload a SPA build directory to AWS S3 from a source checkout.

CLI wrapper for s3_spa_upload.cli that works without installing the package.

Usage:
    python scripts/upload.py dist my-bucket
    python scripts/upload.py dist my-bucket --delete --prefix app
    python scripts/upload.py dist my-bucket --profile staging --verbose
"""

import sys
from pathlib import Path

# Add project root to path for imports (before other imports)
_project_root = Path(__file__).parent.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))

from s3_spa_upload.cli import main  # noqa: E402

if __name__ == "__main__":
    sys.exit(main())

"""
Directory tree walker.

Enumerates every regular file below a root directory using an explicit stack
instead of recursion, so arbitrarily deep trees cannot exhaust the interpreter
stack. Symbolic links are followed; entries that are neither regular files nor
directories (sockets, FIFOs, dangling links) are skipped. Any error reading a
directory propagates to the caller and ends the walk.
"""

import os
from typing import Iterator, List

from s3_spa_upload.utils.logging import get_logger

logger = get_logger(__name__)


def iter_files(root: str) -> Iterator[str]:
    """
    Yield the full path of every regular file below ``root``.

    Entries of one directory are yielded in name order; subdirectories are
    visited after the files of their parent.

    Args:
        root: Directory to walk

    Yields:
        File paths joined onto ``root``

    Raises:
        OSError: If ``root`` or any subdirectory cannot be read
    """
    pending: List[str] = [root]
    while pending:
        directory = pending.pop()
        with os.scandir(directory) as entries:
            sorted_entries = sorted(entries, key=lambda entry: entry.name)

        subdirectories = []
        for entry in sorted_entries:
            if entry.is_file():
                yield entry.path
            elif entry.is_dir():
                subdirectories.append(entry.path)
            else:
                logger.debug(f"Skipping non-regular entry: {entry.path}")

        # Reversed so the stack pops subdirectories in name order
        pending.extend(reversed(subdirectories))

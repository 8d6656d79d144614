"""
Eligibility filter for secret scanning.

Decides from path and size alone whether a file is worth reading.
Matching is exact and case-sensitive; there is no globbing.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Callable

logger = logging.getLogger(__name__)

# Secrets shorter than this are not plausible credentials
MIN_FILE_SIZE = 10

SKIP_FILES = frozenset({
    "go.mod",
    "go.sum",
    "package-lock.json",
    "yarn.lock",
    "pnpm-lock.yaml",
    "Pipfile.lock",
    "Gemfile.lock",
})

SKIP_DIRS = frozenset({".git", "node_modules"})

SKIP_EXTS = frozenset({
    ".jpg", ".png", ".gif", ".doc", ".pdf", ".bin", ".svg", ".socket", ".deb", ".rpm",
    ".zip", ".gz", ".gzip", ".tar", ".pyc",
})


@dataclass(frozen=True)
class DenyLists:
    """Read-only deny-lists consulted by :func:`required`."""

    skip_files: frozenset[str] = SKIP_FILES
    skip_dirs: frozenset[str] = SKIP_DIRS
    skip_exts: frozenset[str] = SKIP_EXTS


DEFAULT_DENY_LISTS = DenyLists()


def file_extension(file_name: str) -> str:
    """Return the suffix from the last dot onward, or "" if there is none."""
    idx = file_name.rfind(".")
    if idx == -1:
        return ""
    return file_name[idx:]


def required(
    file_path: str,
    size: int,
    config_path: str,
    allow_path: Callable[[str], bool],
    deny_lists: DenyLists = DEFAULT_DENY_LISTS,
) -> bool:
    """
    Decide whether a file should be handed to the secret scanner.

    Args:
        file_path: Path of the file as seen by the host (relative or absolute).
        size: File size in bytes.
        config_path: Configured secret scanner config path ("" for none).
        allow_path: Predicate from the scanner; True means the path is allowed
            (i.e. never reported) and need not be scanned.
        deny_lists: Deny-lists to apply.

    Returns:
        True if the file is eligible for scanning.
    """
    if size < MIN_FILE_SIZE:
        return False

    dir_part, file_name = os.path.split(file_path)
    dirs = dir_part.replace(os.sep, "/").split("/")

    if any(d in deny_lists.skip_dirs for d in dirs):
        logger.debug("Skipping %s: excluded directory", file_path)
        return False

    if file_name in deny_lists.skip_files:
        logger.debug("Skipping %s: excluded file name", file_path)
        return False

    # Compares the config basename with the full path, so a config
    # outside the working directory is never excluded here.
    if config_path and os.path.basename(config_path) == file_path:
        logger.debug("Skipping %s: secret scanner config", file_path)
        return False

    if file_extension(file_name) in deny_lists.skip_exts:
        logger.debug("Skipping %s: excluded extension", file_path)
        return False

    if allow_path(file_path):
        logger.debug("Skipping %s: allowed by config", file_path)
        return False

    return True

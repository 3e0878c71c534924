from __future__ import annotations

"""
FileSystem Infrastructure Layer.

Provides path normalization, scan-root resolution and deterministic directory
listing. Acts as the single abstraction over 'os' so the walker sees the same
ordering on every platform.
"""

import os
import posixpath
from typing import List, Optional, Sequence

# -----------------------------------------------------------------------------
# PATH RESOLUTION API
# -----------------------------------------------------------------------------

def normalize_path(path: Optional[str], fallback: str) -> str:
    """
    Normalize a directory path string into an absolute filesystem path.

    Handles environment variable expansion ($VAR/%VAR%) and user home
    shortcuts (~/). Reverts to fallback if the input is empty.

    Args:
        path: Raw input path string.
        fallback: Default path to use if the input is empty.

    Returns:
        str: Normalized absolute path.
    """
    p = (path or "").strip()
    if not p:
        p = fallback
    p = os.path.expandvars(os.path.expanduser(p))
    return os.path.abspath(p)


def resolve_scan_root(src_path: str, base_dir: Optional[str] = None) -> str:
    """
    Compute the directory the walker starts from.

    Args:
        src_path: Source tree handed to the builder.
        base_dir: Optional sub-path of src_path to offset the scan by.

    Returns:
        str: Absolute scan root.
    """
    root = normalize_path(src_path, os.getcwd())
    offset = (base_dir or "").strip().strip("/\\")
    if offset:
        root = os.path.join(root, offset)
    return root


def to_module_path(rel_dir: Sequence[str], stem: str) -> str:
    """Join directory segments and a file stem into a POSIX module path."""
    return posixpath.join(*rel_dir, stem) if rel_dir else stem

# -----------------------------------------------------------------------------
# DIRECTORY LISTING API
# -----------------------------------------------------------------------------

def list_directory(path: str) -> List[os.DirEntry]:
    """
    List a directory sorted by entry name.

    Args:
        path: Directory to list.

    Returns:
        List[os.DirEntry]: Entries ordered by name.

    Raises:
        OSError: If the directory cannot be read.
    """
    with os.scandir(path) as it:
        return sorted(it, key=lambda e: e.name)

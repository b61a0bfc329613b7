"""Rename executables shipped as ``*-disguised-exe`` to ``lib*.so``.

APK packaging only extracts files named like shared libraries, so executables
travel through it disguised and are run from the extracted ``lib*.so`` path.
"""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import List, Optional, Tuple

from . import fs
from .logging import get_logger

DISGUISED_EXE_SUFFIX = "-disguised-exe"

_DISGUISED_NAME = re.compile(r"^([^/]+)" + re.escape(DISGUISED_EXE_SUFFIX) + r"$")

_LOGGER = get_logger("disguise")


def disguised_name(path: Path) -> Optional[Path]:
    """Return the ``lib<base>.so`` sibling for a disguised executable path."""
    match = _DISGUISED_NAME.match(path.name)
    if match is None:
        return None
    return path.with_name(f"lib{match.group(1)}.so")


def find_disguised_executables(root: Path) -> List[Path]:
    """Collect disguised executables under ``root`` without touching the tree."""
    found: List[Path] = []
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames.sort()
        for filename in sorted(filenames):
            if filename.endswith(DISGUISED_EXE_SUFFIX):
                found.append(Path(dirpath) / filename)
    return found


def rename_disguised_executables(
    root: Path,
    *,
    copied_from: Optional[Path] = None,
    strict: bool = False,
) -> List[Tuple[Path, Path]]:
    """Rename every disguised executable under ``root`` and return the moves made.

    ``copied_from`` is the library tree whose contents were just merged into
    ``root``. A ``lib<base>.so`` already at the target only counts as a
    collision when that same tree also ships it; otherwise it was left by a
    lower-priority source and is replaced silently. A collision replaces the
    file and logs a warning, or raises ``FileExistsError`` with ``strict``.
    Without ``copied_from`` every existing target is a collision.
    """
    renamed: List[Tuple[Path, Path]] = []
    for source in find_disguised_executables(root):
        target = disguised_name(source)
        if target is None:
            continue
        if _is_collision(root, target, copied_from):
            if strict:
                raise FileExistsError(f"Renaming {source} would replace existing {target}")
            _LOGGER.warning("Replacing %s with disguised executable %s", target, source)
        fs.move(source, target)
        _LOGGER.debug("Renamed %s -> %s", source, target.name)
        renamed.append((source, target))
    return renamed


def _is_collision(root: Path, target: Path, copied_from: Optional[Path]) -> bool:
    if not (target.exists() or target.is_symlink()):
        return False
    if copied_from is None:
        return True
    return (copied_from / target.relative_to(root)).exists()


__all__ = [
    "DISGUISED_EXE_SUFFIX",
    "disguised_name",
    "find_disguised_executables",
    "rename_disguised_executables",
]

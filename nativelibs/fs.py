"""Filesystem primitives the pipeline steps are built from."""

from __future__ import annotations

import os
import shutil
from pathlib import Path

from .logging import get_logger

_LOGGER = get_logger("fs")


def make_clean_directory(path: Path) -> None:
    """Ensure ``path`` exists as an empty directory."""
    if path.is_symlink() or path.is_file():
        path.unlink()
    elif path.exists():
        shutil.rmtree(path)
    path.mkdir(parents=True, exist_ok=True)


def mkdir(path: Path) -> None:
    path.mkdir(parents=True, exist_ok=True)


def copy_file(source: Path | str, destination: Path | str) -> None:
    """Copy one file, replacing whatever is already at ``destination``."""
    target = Path(destination)
    if target.is_symlink():
        target.unlink()
    shutil.copy(source, target)


def copy_directory_contents(source: Path, destination: Path) -> None:
    """Merge the contents of ``source`` into ``destination``.

    Files already present in ``destination`` are overwritten. Symlinks in the
    source are followed so that the destination only holds regular files.
    """
    if not source.exists():
        _LOGGER.debug("Skipping copy from missing directory %s", source)
        return
    shutil.copytree(source, destination, dirs_exist_ok=True, copy_function=copy_file)


def move(source: Path, destination: Path) -> None:
    os.replace(source, destination)


def symlink_file(root: Path, existing_file: Path, desired_link: Path) -> Path:
    """Point ``desired_link`` at ``existing_file``, replacing any previous entry.

    Both paths are resolved against ``root`` when relative. Returns the link path.
    """
    existing = existing_file if existing_file.is_absolute() else root / existing_file
    link = desired_link if desired_link.is_absolute() else root / desired_link
    if link.is_symlink() or link.exists():
        link.unlink()
    link.symlink_to(existing)
    return link


def describe_symlink(root: Path, existing_file: Path, desired_link: Path) -> str:
    existing = existing_file if existing_file.is_absolute() else root / existing_file
    link = desired_link if desired_link.is_absolute() else root / desired_link
    return " ".join(("ln", "-f", "-s", str(existing), str(link)))


__all__ = [
    "copy_directory_contents",
    "copy_file",
    "describe_symlink",
    "make_clean_directory",
    "mkdir",
    "move",
    "symlink_file",
]

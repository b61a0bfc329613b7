"""Content manifest (``metadata.txt``) generation for assembled library trees."""

from __future__ import annotations

import hashlib
import os
from pathlib import Path
from typing import Iterator, List

from .models import ManifestEntry

_CHUNK_SIZE = 1024 * 1024


def hash_file(path: Path) -> str:
    digest = hashlib.sha1()
    with path.open("rb") as handle:
        for chunk in iter(lambda: handle.read(_CHUNK_SIZE), b""):
            digest.update(chunk)
    return digest.hexdigest()


def iter_files(root: Path) -> Iterator[Path]:
    """Yield regular files under ``root``, depth first in name order."""
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames.sort()
        current_dir = Path(dirpath)
        for filename in sorted(filenames):
            path = current_dir / filename
            if path.is_file():
                yield path


def build_manifest(root: Path) -> List[ManifestEntry]:
    entries: List[ManifestEntry] = []
    for path in iter_files(root):
        rel_path = path.relative_to(root).as_posix()
        entries.append(ManifestEntry(path=rel_path, sha1=hash_file(path)))
    return entries


def write_metadata(root: Path, metadata_path: Path) -> List[ManifestEntry]:
    """Hash every file under ``root`` and write one line per file to ``metadata_path``.

    The manifest file itself is excluded when it lives under ``root``.
    """
    manifest_file = metadata_path.resolve()
    entries = [
        entry
        for entry in build_manifest(root)
        if (root / entry.path).resolve() != manifest_file
    ]
    text = "".join(f"{entry.to_line()}\n" for entry in entries)
    metadata_path.parent.mkdir(parents=True, exist_ok=True)
    metadata_path.write_text(text, encoding="utf-8")
    return entries


def read_metadata(metadata_path: Path) -> List[ManifestEntry]:
    entries: List[ManifestEntry] = []
    for line in metadata_path.read_text(encoding="utf-8").splitlines():
        if not line.strip():
            continue
        path, _, sha1 = line.rpartition(" ")
        if not path or len(sha1) != 40:
            raise ValueError(f"Malformed metadata line: {line!r}")
        entries.append(ManifestEntry(path=path, sha1=sha1))
    return entries


__all__ = ["build_manifest", "hash_file", "iter_files", "read_metadata", "write_metadata"]

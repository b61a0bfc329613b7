"""Plan the copies that merge native library trees into one destination.

Library directories are applied in reverse declaration order so that, for any
relative path present in several sources, the earliest-declared source is
written last and wins. Stripped single objects are planned separately and are
expected to run after every directory copy for the same destination.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, Sequence

from .abi import TargetCpuType, require_abi_directory
from .models import StrippedObjectDescription
from .steps import (
    CopyAbiDirectory,
    CopyDirectoryContents,
    CopyFile,
    Mkdir,
    RenameDisguisedExecutables,
    Step,
)


def copy_native_library(
    source_dir: Path,
    destination_dir: Path,
    cpu_filters: Sequence[TargetCpuType],
    *,
    strict_disguise: bool = False,
) -> List[Step]:
    """Return the steps copying one library tree into ``destination_dir``."""
    steps: List[Step] = []
    if not cpu_filters:
        steps.append(CopyDirectoryContents(source=source_dir, destination=destination_dir))
    else:
        for cpu_type in cpu_filters:
            abi = require_abi_directory(cpu_type)
            steps.append(
                CopyAbiDirectory(source=source_dir / abi, destination=destination_dir / abi)
            )
    steps.append(
        RenameDisguisedExecutables(
            root=destination_dir, copied_from=source_dir, strict=strict_disguise
        )
    )
    return steps


def plan_library_copies(
    source_dirs: Sequence[Path],
    destination_dir: Path,
    cpu_filters: Sequence[TargetCpuType],
    *,
    strict_disguise: bool = False,
) -> List[Step]:
    steps: List[Step] = []
    for source_dir in reversed(list(source_dirs)):
        steps.extend(
            copy_native_library(
                source_dir,
                destination_dir,
                cpu_filters,
                strict_disguise=strict_disguise,
            )
        )
    return steps


def plan_stripped_object_copies(
    descriptions: Iterable[StrippedObjectDescription],
    destination_dir: Path,
) -> List[Step]:
    """Return mkdir + copy steps placing each object at ``<abi>/<name>``."""
    steps: List[Step] = []
    for description in descriptions:
        abi = require_abi_directory(description.target_cpu_type)
        destination = destination_dir / abi / description.stripped_object_name
        steps.append(Mkdir(path=destination.parent))
        steps.append(CopyFile(source=description.source_path, destination=destination))
    return steps


__all__ = ["copy_native_library", "plan_library_copies", "plan_stripped_object_copies"]

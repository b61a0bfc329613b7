"""Pipeline steps and the interpreter that executes them."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional, Union

from . import fs
from .disguise import rename_disguised_executables
from .logging import PipelineLogger, get_logger
from .metadata import write_metadata

_LOGGER = get_logger("steps")


@dataclass(frozen=True)
class MakeCleanDirectory:
    path: Path

    short_name = "make_clean_dir"

    def describe(self) -> str:
        return f"rm -rf {self.path} && mkdir -p {self.path}"


@dataclass(frozen=True)
class Mkdir:
    path: Path

    short_name = "mkdir"

    def describe(self) -> str:
        return f"mkdir -p {self.path}"


@dataclass(frozen=True)
class CopyDirectoryContents:
    source: Path
    destination: Path

    short_name = "cp"

    def describe(self) -> str:
        return f"cp -R {self.source}/* {self.destination}"


@dataclass(frozen=True)
class CopyAbiDirectory:
    """Copy one ABI subdirectory of a library tree, if the tree provides it."""

    source: Path
    destination: Path

    short_name = "copy_native_libraries"

    def describe(self) -> str:
        return " && ".join(
            (
                f"[ -d {self.source} ]",
                f"mkdir -p {self.destination}",
                f"cp -R {self.source}/* {self.destination}",
            )
        )


@dataclass(frozen=True)
class CopyFile:
    source: Path
    destination: Path

    short_name = "cp"

    def describe(self) -> str:
        return f"cp {self.source} {self.destination}"


@dataclass(frozen=True)
class RenameDisguisedExecutables:
    root: Path
    # Library tree merged into root by the preceding copy.
    copied_from: Optional[Path] = None
    strict: bool = False

    short_name = "rename_native_executables"

    def describe(self) -> str:
        return f"rename */<name>-disguised-exe to */lib<name>.so under {self.root}"


@dataclass(frozen=True)
class WriteMetadata:
    root: Path
    metadata_path: Path

    short_name = "hash_native_libs"

    def describe(self) -> str:
        return f"sha1sum $(find {self.root} -type f) > {self.metadata_path}"


@dataclass(frozen=True)
class SymlinkFile:
    root: Path
    existing_file: Path
    desired_link: Path

    short_name = "symlink_file"

    def describe(self) -> str:
        return fs.describe_symlink(self.root, self.existing_file, self.desired_link)


Step = Union[
    MakeCleanDirectory,
    Mkdir,
    CopyDirectoryContents,
    CopyAbiDirectory,
    CopyFile,
    RenameDisguisedExecutables,
    WriteMetadata,
    SymlinkFile,
]


def execute_step(step: Step, logger: PipelineLogger | None = None) -> None:
    """Perform a single step. Filesystem errors propagate to the caller."""
    (logger or _LOGGER).debug("%s: %s", step.short_name, step.describe())
    if isinstance(step, MakeCleanDirectory):
        fs.make_clean_directory(step.path)
    elif isinstance(step, Mkdir):
        fs.mkdir(step.path)
    elif isinstance(step, CopyDirectoryContents):
        fs.copy_directory_contents(step.source, step.destination)
    elif isinstance(step, CopyAbiDirectory):
        # A library may only ship a subset of the requested ABIs.
        if not step.source.exists():
            return
        fs.mkdir(step.destination)
        fs.copy_directory_contents(step.source, step.destination)
    elif isinstance(step, CopyFile):
        fs.copy_file(step.source, step.destination)
    elif isinstance(step, RenameDisguisedExecutables):
        rename_disguised_executables(
            step.root, copied_from=step.copied_from, strict=step.strict
        )
    elif isinstance(step, WriteMetadata):
        write_metadata(step.root, step.metadata_path)
    elif isinstance(step, SymlinkFile):
        fs.symlink_file(step.root, step.existing_file, step.desired_link)
    else:  # pragma: no cover - the Step union is closed
        raise TypeError(f"Unsupported step: {step!r}")


def run_steps(steps: Iterable[Step], logger: PipelineLogger | None = None) -> int:
    """Execute ``steps`` in order, stopping at the first failure."""
    count = 0
    for step in steps:
        execute_step(step, logger)
        count += 1
    return count


def describe_steps(steps: Iterable[Step]) -> List[str]:
    return [step.describe() for step in steps]


__all__ = [
    "CopyAbiDirectory",
    "CopyDirectoryContents",
    "CopyFile",
    "MakeCleanDirectory",
    "Mkdir",
    "RenameDisguisedExecutables",
    "Step",
    "SymlinkFile",
    "WriteMetadata",
    "describe_steps",
    "execute_step",
    "run_steps",
]

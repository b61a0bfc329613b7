"""Core data models shared across nativelibs components."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Tuple

from .abi import TargetCpuType


@dataclass(frozen=True)
class StrippedObjectDescription:
    """A single already-stripped shared object and where it should land."""

    source_path: Path
    stripped_object_name: str
    target_cpu_type: TargetCpuType
    # Owning APK module; carried along but not used when copying.
    apk_module: str = "dex"


@dataclass(frozen=True)
class BuildTarget:
    """Identity of the build unit that owns an output tree."""

    base_path: str
    short_name: str
    flavors: Tuple[str, ...] = ()

    @classmethod
    def parse(cls, text: str) -> "BuildTarget":
        """Parse ``//base/path:name#flavor,...`` into a target."""
        raw = text.strip()
        if not raw.startswith("//") or ":" not in raw:
            raise ValueError(f"Build target must look like //path:name, got '{text}'")
        base_path, _, remainder = raw[2:].partition(":")
        short_name, _, flavor_part = remainder.partition("#")
        if not short_name:
            raise ValueError(f"Build target is missing a name: '{text}'")
        flavors = tuple(sorted(part for part in flavor_part.split(",") if part))
        return cls(base_path=base_path.strip("/"), short_name=short_name, flavors=flavors)

    @property
    def scratch_token(self) -> str:
        if not self.flavors:
            return self.short_name
        return f"{self.short_name}#{','.join(self.flavors)}"

    def scratch_path(self, output_root: Path, prefix: str, suffix: str = "__") -> Path:
        """Return ``<output_root>/bin/<base_path>/<prefix><token><suffix>``."""
        directory = output_root / "bin"
        if self.base_path:
            directory = directory.joinpath(*self.base_path.split("/"))
        return directory / f"{prefix}{self.scratch_token}{suffix}"

    def __str__(self) -> str:
        suffix = f"#{','.join(self.flavors)}" if self.flavors else ""
        return f"//{self.base_path}:{self.short_name}{suffix}"


@dataclass(frozen=True)
class ManifestEntry:
    """One ``metadata.txt`` line: a file relative to the output root and its SHA-1."""

    path: str
    sha1: str

    def to_line(self) -> str:
        return f"{self.path} {self.sha1}"


@dataclass
class NativeLibsOutputs:
    """Artifacts produced by a pipeline run."""

    root: Path
    libs_dir: Path
    asset_libs_dir: Path
    metadata_path: Path
    entries: List[ManifestEntry] = field(default_factory=list)

    def artifacts(self) -> List[Path]:
        return [self.libs_dir, self.asset_libs_dir, self.metadata_path]


__all__ = ["BuildTarget", "ManifestEntry", "NativeLibsOutputs", "StrippedObjectDescription"]

"""Pipeline orchestration for assembling native library output trees."""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Iterable, List, Sequence, Tuple, TypeVar

from .abi import TargetCpuType
from .assembler import plan_library_copies, plan_stripped_object_copies
from .config import BuildConfig
from .errors import ConfigurationError
from .logging import get_logger, stage_logger
from .metadata import read_metadata
from .models import BuildTarget, NativeLibsOutputs, StrippedObjectDescription
from .steps import MakeCleanDirectory, Step, WriteMetadata, run_steps

LIBS_DIRNAME = "libs"
ASSET_LIBS_DIRNAME = "assetLibs"
METADATA_FILENAME = "metadata.txt"

_T = TypeVar("_T")


class PipelineStage(str, Enum):
    """Stages of a pipeline run, in execution order."""

    CLEAN_ROOT = "clean_root"
    CLEAN_LIBS_DIR = "clean_libs_dir"
    CLEAN_ASSETS_DIR = "clean_assets_dir"
    ASSEMBLE_LIBS = "assemble_libs"
    ASSEMBLE_ASSETS = "assemble_assets"
    COPY_STRIPPED_LIBS = "copy_stripped_libs"
    COPY_STRIPPED_ASSETS = "copy_stripped_assets"
    GENERATE_MANIFEST = "generate_manifest"


class CopyNativeLibraries:
    """Gathers native libraries into ``libs/`` and ``assetLibs/`` and hashes them."""

    def __init__(
        self,
        build_target: BuildTarget,
        output_root: Path,
        module_name: str,
        *,
        native_lib_dirs: Sequence[Path] = (),
        native_lib_asset_dirs: Sequence[Path] = (),
        stripped_libs: Iterable[StrippedObjectDescription] = (),
        stripped_lib_assets: Iterable[StrippedObjectDescription] = (),
        cpu_filters: Iterable[TargetCpuType] = (),
        strict_disguise: bool = False,
    ) -> None:
        self.build_target = build_target
        self.output_root = Path(output_root)
        self.module_name = module_name
        self.native_lib_dirs = _unique(Path(path) for path in native_lib_dirs)
        self.native_lib_asset_dirs = _unique(Path(path) for path in native_lib_asset_dirs)
        self.stripped_libs = _unique(stripped_libs)
        self.stripped_lib_assets = _unique(stripped_lib_assets)
        self.cpu_filters = _unique(cpu_filters)
        self.strict_disguise = strict_disguise
        self.logger = get_logger("orchestrator")

        if not (
            self.native_lib_dirs
            or self.native_lib_asset_dirs
            or self.stripped_libs
            or self.stripped_lib_assets
        ):
            raise ConfigurationError("There should be at least one native library to copy.")

    @classmethod
    def from_config(cls, config: BuildConfig) -> "CopyNativeLibraries":
        return cls(
            config.target,
            config.resolved_output_root(),
            config.module,
            native_lib_dirs=config.native_lib_dirs,
            native_lib_asset_dirs=config.native_lib_asset_dirs,
            stripped_libs=config.stripped_libs,
            stripped_lib_assets=config.stripped_lib_assets,
            cpu_filters=config.cpu_filters,
            strict_disguise=config.strict_disguise,
        )

    @property
    def bin_path(self) -> Path:
        """Scratch directory holding ``libs/``, ``assetLibs/`` and ``metadata.txt``."""
        return self.build_target.scratch_path(
            self.output_root, f"__native_{self.module_name}_"
        )

    @property
    def libs_dir(self) -> Path:
        return self.bin_path / LIBS_DIRNAME

    @property
    def asset_libs_dir(self) -> Path:
        return self.bin_path / ASSET_LIBS_DIRNAME

    @property
    def metadata_path(self) -> Path:
        return self.bin_path / METADATA_FILENAME

    def stripped_object_descriptions(self) -> List[StrippedObjectDescription]:
        return _unique([*self.stripped_libs, *self.stripped_lib_assets])

    def build_steps(self) -> List[Tuple[PipelineStage, List[Step]]]:
        """Return the ordered plan of stages and the steps each one performs."""
        return [
            (PipelineStage.CLEAN_ROOT, [MakeCleanDirectory(self.bin_path)]),
            (PipelineStage.CLEAN_LIBS_DIR, [MakeCleanDirectory(self.libs_dir)]),
            (PipelineStage.CLEAN_ASSETS_DIR, [MakeCleanDirectory(self.asset_libs_dir)]),
            (
                PipelineStage.ASSEMBLE_LIBS,
                plan_library_copies(
                    self.native_lib_dirs,
                    self.libs_dir,
                    self.cpu_filters,
                    strict_disguise=self.strict_disguise,
                ),
            ),
            (
                PipelineStage.ASSEMBLE_ASSETS,
                plan_library_copies(
                    self.native_lib_asset_dirs,
                    self.asset_libs_dir,
                    self.cpu_filters,
                    strict_disguise=self.strict_disguise,
                ),
            ),
            (
                PipelineStage.COPY_STRIPPED_LIBS,
                plan_stripped_object_copies(self.stripped_libs, self.libs_dir),
            ),
            (
                PipelineStage.COPY_STRIPPED_ASSETS,
                plan_stripped_object_copies(self.stripped_lib_assets, self.asset_libs_dir),
            ),
            (
                PipelineStage.GENERATE_MANIFEST,
                [WriteMetadata(root=self.bin_path, metadata_path=self.metadata_path)],
            ),
        ]

    def run(self) -> NativeLibsOutputs:
        """Execute every stage in order and return the recorded artifacts."""
        self.logger.info(
            "Assembling native libraries for %s into %s", self.build_target, self.bin_path
        )
        for stage, steps in self.build_steps():
            stage_log = stage_logger(self.logger, stage.value)
            stage_log.info("Starting stage (%d steps)", len(steps))
            run_steps(steps, stage_log)

        entries = read_metadata(self.metadata_path)
        self.logger.info("Hashed %d native files into %s", len(entries), self.metadata_path)
        return NativeLibsOutputs(
            root=self.bin_path,
            libs_dir=self.libs_dir,
            asset_libs_dir=self.asset_libs_dir,
            metadata_path=self.metadata_path,
            entries=entries,
        )


def _unique(items: Iterable[_T]) -> List[_T]:
    return list(dict.fromkeys(items))


__all__ = [
    "ASSET_LIBS_DIRNAME",
    "CopyNativeLibraries",
    "LIBS_DIRNAME",
    "METADATA_FILENAME",
    "PipelineStage",
]

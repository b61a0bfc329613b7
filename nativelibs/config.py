"""Build definition loading for nativelibs (.nativelibs.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

from .abi import TargetCpuType
from .errors import ConfigurationError
from .models import BuildTarget, StrippedObjectDescription

CONFIG_FILENAME = ".nativelibs.yml"
DEFAULT_MODULE = "dex"
DEFAULT_OUTPUT_ROOT = "buck-out"


class ConfigError(ConfigurationError):
    """Raised when the build definition cannot be parsed."""


@dataclass
class BuildConfig:
    """Inputs for one native library pipeline run, as declared in .nativelibs.yml."""

    root: Path
    target: BuildTarget
    module: str = DEFAULT_MODULE
    output_root: Optional[Path] = None
    cpu_filters: List[TargetCpuType] = field(default_factory=list)
    native_lib_dirs: List[Path] = field(default_factory=list)
    native_lib_asset_dirs: List[Path] = field(default_factory=list)
    stripped_libs: List[StrippedObjectDescription] = field(default_factory=list)
    stripped_lib_assets: List[StrippedObjectDescription] = field(default_factory=list)
    strict_disguise: bool = False

    def resolved_output_root(self) -> Path:
        return self.output_root or (self.root / DEFAULT_OUTPUT_ROOT)


def load_config(config_path: Path) -> BuildConfig:
    """Load a build definition from disk."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        raise FileNotFoundError(f"Build definition not found: {config_file}")

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    target_text = _as_str(data.get("target"))
    if not target_text:
        raise ConfigError(f"{CONFIG_FILENAME} must declare a build target")
    try:
        target = BuildTarget.parse(target_text)
    except ValueError as exc:
        raise ConfigError(str(exc)) from exc

    module = _as_str(data.get("module")) or DEFAULT_MODULE
    output_root_str = _as_str(data.get("output_root"))
    output_root = _resolve_path(root, output_root_str) if output_root_str else None

    return BuildConfig(
        root=root,
        target=target,
        module=module,
        output_root=output_root,
        cpu_filters=_as_cpu_filters(data.get("cpu_filters")),
        native_lib_dirs=[_resolve_path(root, item) for item in _as_str_list(data.get("native_lib_dirs"))],
        native_lib_asset_dirs=[
            _resolve_path(root, item) for item in _as_str_list(data.get("native_lib_asset_dirs"))
        ],
        stripped_libs=_as_stripped_objects(root, data.get("stripped_libs"), module),
        stripped_lib_assets=_as_stripped_objects(root, data.get("stripped_lib_assets"), module),
        strict_disguise=_as_bool(data.get("strict_disguise")) or False,
    )


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded or {}


def _resolve_path(root: Path, value: str) -> Path:
    path = Path(value).expanduser()
    return path if path.is_absolute() else root / path


def _as_cpu_filters(value: Any) -> List[TargetCpuType]:
    filters: List[TargetCpuType] = []
    for item in _as_str_list(value):
        try:
            cpu_type = TargetCpuType.parse(item)
        except ValueError as exc:
            raise ConfigError(str(exc)) from exc
        if cpu_type not in filters:
            filters.append(cpu_type)
    return filters


def _as_stripped_objects(root: Path, value: Any, default_module: str) -> List[StrippedObjectDescription]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise ConfigError("Stripped object lists must be sequences of mappings")
    descriptions: List[StrippedObjectDescription] = []
    for item in value:
        entry = _as_dict(item)
        source = _as_str(entry.get("source"))
        cpu = _as_str(entry.get("cpu"))
        if not source or not cpu:
            raise ConfigError("Stripped objects need both 'source' and 'cpu'")
        try:
            cpu_type = TargetCpuType.parse(cpu)
        except ValueError as exc:
            raise ConfigError(str(exc)) from exc
        source_path = _resolve_path(root, source)
        descriptions.append(
            StrippedObjectDescription(
                source_path=source_path,
                stripped_object_name=_as_str(entry.get("name")) or source_path.name,
                target_cpu_type=cpu_type,
                apk_module=_as_str(entry.get("module")) or default_module,
            )
        )
    return descriptions


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float, bool)) else None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float, bool))]
    return []


__all__ = ["BuildConfig", "CONFIG_FILENAME", "ConfigError", "load_config"]

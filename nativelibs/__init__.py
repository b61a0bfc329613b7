"""Assemble per-ABI native library trees and their content manifests."""

from .abi import TargetCpuType, abi_directory_component
from .errors import ConfigurationError, InternalConsistencyError, NativeLibsError
from .models import BuildTarget, ManifestEntry, NativeLibsOutputs, StrippedObjectDescription
from .orchestrator import CopyNativeLibraries, PipelineStage

__all__ = [
    "BuildTarget",
    "ConfigurationError",
    "CopyNativeLibraries",
    "InternalConsistencyError",
    "ManifestEntry",
    "NativeLibsError",
    "NativeLibsOutputs",
    "PipelineStage",
    "StrippedObjectDescription",
    "TargetCpuType",
    "abi_directory_component",
]

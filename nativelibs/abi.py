"""CPU types and the ABI directories native libraries are grouped under."""

from __future__ import annotations

from enum import Enum
from typing import Optional

from .errors import InternalConsistencyError


class TargetCpuType(str, Enum):
    """CPU types a native library can be built for."""

    ARM = "arm"
    ARMV7 = "armv7"
    ARM64 = "arm64"
    X86 = "x86"
    X86_64 = "x86_64"
    MIPS = "mips"

    @classmethod
    def parse(cls, value: str) -> "TargetCpuType":
        normalised = value.strip().lower()
        for member in cls:
            if member.value == normalised:
                return member
        choices = ", ".join(member.value for member in cls)
        raise ValueError(f"Unknown CPU type '{value}' (expected one of: {choices})")


_ABI_BY_CPU = {
    TargetCpuType.ARM: "armeabi",
    TargetCpuType.ARMV7: "armeabi-v7a",
    TargetCpuType.ARM64: "arm64-v8a",
    TargetCpuType.X86: "x86",
    TargetCpuType.X86_64: "x86_64",
    TargetCpuType.MIPS: "mips",
}


def abi_directory_component(cpu_type: object) -> Optional[str]:
    """Return the ABI subdirectory for ``cpu_type``, or None when it has none."""
    if not isinstance(cpu_type, TargetCpuType):
        return None
    return _ABI_BY_CPU.get(cpu_type)


def require_abi_directory(cpu_type: object) -> str:
    abi = abi_directory_component(cpu_type)
    if abi is None:
        raise InternalConsistencyError(f"No ABI directory is known for CPU type {cpu_type!r}")
    return abi


__all__ = ["TargetCpuType", "abi_directory_component", "require_abi_directory"]

"""Tests for nativelibs.abi."""

from __future__ import annotations

import pytest

from nativelibs.abi import TargetCpuType, abi_directory_component, require_abi_directory
from nativelibs.errors import InternalConsistencyError


@pytest.mark.parametrize(
    ("cpu_type", "expected"),
    [
        (TargetCpuType.ARM, "armeabi"),
        (TargetCpuType.ARMV7, "armeabi-v7a"),
        (TargetCpuType.ARM64, "arm64-v8a"),
        (TargetCpuType.X86, "x86"),
        (TargetCpuType.X86_64, "x86_64"),
        (TargetCpuType.MIPS, "mips"),
    ],
)
def test_every_cpu_type_has_an_abi_directory(cpu_type: TargetCpuType, expected: str) -> None:
    assert abi_directory_component(cpu_type) == expected


def test_unknown_values_have_no_abi_directory() -> None:
    assert abi_directory_component("riscv64") is None
    assert abi_directory_component(None) is None


def test_require_abi_directory_raises_for_unknown_values() -> None:
    with pytest.raises(InternalConsistencyError):
        require_abi_directory("sparc")


def test_internal_consistency_error_is_an_assertion() -> None:
    assert issubclass(InternalConsistencyError, AssertionError)


def test_parse_is_case_insensitive() -> None:
    assert TargetCpuType.parse(" ARM64 ") is TargetCpuType.ARM64
    assert TargetCpuType.parse("x86_64") is TargetCpuType.X86_64


def test_parse_rejects_unknown_names() -> None:
    with pytest.raises(ValueError) as excinfo:
        TargetCpuType.parse("riscv")
    assert "armv7" in str(excinfo.value)

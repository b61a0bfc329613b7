"""Tests for nativelibs.assembler."""

from __future__ import annotations

from pathlib import Path

import pytest

from nativelibs.abi import TargetCpuType
from nativelibs.assembler import (
    copy_native_library,
    plan_library_copies,
    plan_stripped_object_copies,
)
from nativelibs.errors import InternalConsistencyError
from nativelibs.models import StrippedObjectDescription
from nativelibs.steps import (
    CopyAbiDirectory,
    CopyDirectoryContents,
    CopyFile,
    Mkdir,
    RenameDisguisedExecutables,
    run_steps,
)
from tests._fixtures.lib_tree import LibTreeBuilder, snapshot


def test_unfiltered_copy_plans_whole_directory(tmp_path: Path) -> None:
    steps = copy_native_library(tmp_path / "src", tmp_path / "dest", [])

    assert steps == [
        CopyDirectoryContents(source=tmp_path / "src", destination=tmp_path / "dest"),
        RenameDisguisedExecutables(root=tmp_path / "dest", copied_from=tmp_path / "src"),
    ]


def test_filtered_copy_plans_one_step_per_abi(tmp_path: Path) -> None:
    steps = copy_native_library(
        tmp_path / "src",
        tmp_path / "dest",
        [TargetCpuType.ARMV7, TargetCpuType.X86],
    )

    assert steps[:2] == [
        CopyAbiDirectory(
            source=tmp_path / "src" / "armeabi-v7a",
            destination=tmp_path / "dest" / "armeabi-v7a",
        ),
        CopyAbiDirectory(source=tmp_path / "src" / "x86", destination=tmp_path / "dest" / "x86"),
    ]
    assert isinstance(steps[-1], RenameDisguisedExecutables)


def test_filtered_copy_with_unknown_cpu_is_fatal(tmp_path: Path) -> None:
    with pytest.raises(InternalConsistencyError):
        copy_native_library(tmp_path / "src", tmp_path / "dest", ["sparc"])  # type: ignore[list-item]


def test_earliest_declared_source_wins(lib_tree: LibTreeBuilder, tmp_path: Path) -> None:
    first = lib_tree.tree("a", {"armeabi-v7a/lib.so": "from a", "armeabi-v7a/liba.so": "a"})
    second = lib_tree.tree("b", {"armeabi-v7a/lib.so": "from b", "armeabi-v7a/libb.so": "b"})
    destination = tmp_path / "libs"
    destination.mkdir()

    run_steps(plan_library_copies([first, second], destination, []))

    assert snapshot(destination) == {
        "armeabi-v7a/lib.so": "from a",
        "armeabi-v7a/liba.so": "a",
        "armeabi-v7a/libb.so": "b",
    }


def test_filter_skips_missing_abi_directories(lib_tree: LibTreeBuilder, tmp_path: Path) -> None:
    source = lib_tree.tree("a", {"armeabi/foo.so": "foo"})
    destination = tmp_path / "libs"
    destination.mkdir()

    run_steps(plan_library_copies([source], destination, [TargetCpuType.ARM64]))

    assert not (destination / "arm64-v8a").exists()
    assert snapshot(destination) == {}


def test_filter_keeps_only_requested_abis(lib_tree: LibTreeBuilder, tmp_path: Path) -> None:
    source = lib_tree.tree(
        "a",
        {"armeabi/foo.so": "arm", "x86/foo.so": "x86", "x86/nested/bar.so": "bar"},
    )
    destination = tmp_path / "libs"
    destination.mkdir()

    run_steps(plan_library_copies([source], destination, [TargetCpuType.X86]))

    assert snapshot(destination) == {"x86/foo.so": "x86", "x86/nested/bar.so": "bar"}


def test_disguised_executables_are_renamed_after_merge(lib_tree: LibTreeBuilder, tmp_path: Path) -> None:
    source = lib_tree.tree("a", {"x86/helper-disguised-exe": "exe"})
    destination = tmp_path / "libs"
    destination.mkdir()

    run_steps(plan_library_copies([source], destination, []))

    assert snapshot(destination) == {"x86/libhelper.so": "exe"}


def test_stripped_objects_land_in_abi_directory(lib_tree: LibTreeBuilder, tmp_path: Path) -> None:
    stripped = lib_tree.file("stripped/obj.so", "stripped")
    description = StrippedObjectDescription(
        source_path=stripped,
        stripped_object_name="libfoo.so",
        target_cpu_type=TargetCpuType.X86,
    )
    destination = tmp_path / "libs"

    steps = plan_stripped_object_copies([description], destination)

    assert steps == [
        Mkdir(path=destination / "x86"),
        CopyFile(source=stripped, destination=destination / "x86" / "libfoo.so"),
    ]
    run_steps(steps)
    assert snapshot(destination) == {"x86/libfoo.so": "stripped"}


def test_earliest_declared_source_wins_with_abi_filter(lib_tree: LibTreeBuilder, tmp_path: Path) -> None:
    first = lib_tree.tree("a", {"x86/lib.so": "from a", "armeabi/lib.so": "arm a"})
    second = lib_tree.tree("b", {"x86/lib.so": "from b", "x86/libb.so": "b"})
    destination = tmp_path / "libs"
    destination.mkdir()

    steps = plan_library_copies([first, second], destination, [TargetCpuType.X86])

    copies = [step for step in steps if isinstance(step, CopyAbiDirectory)]
    assert [step.source for step in copies] == [second / "x86", first / "x86"]
    run_steps(steps)
    assert snapshot(destination) == {"x86/lib.so": "from a", "x86/libb.so": "b"}


def test_shared_disguised_executable_is_not_a_collision(lib_tree: LibTreeBuilder, tmp_path: Path) -> None:
    first = lib_tree.tree("a", {"x86/tool-disguised-exe": "from a"})
    second = lib_tree.tree("b", {"x86/tool-disguised-exe": "from b"})
    destination = tmp_path / "libs"
    destination.mkdir()

    run_steps(plan_library_copies([first, second], destination, [], strict_disguise=True))

    assert snapshot(destination) == {"x86/libtool.so": "from a"}


def test_earlier_library_beats_later_disguised_executable(lib_tree: LibTreeBuilder, tmp_path: Path) -> None:
    first = lib_tree.tree("a", {"x86/libfoo.so": "library from a"})
    second = lib_tree.tree("b", {"x86/foo-disguised-exe": "exe from b"})
    destination = tmp_path / "libs"
    destination.mkdir()

    run_steps(plan_library_copies([first, second], destination, [], strict_disguise=True))

    assert snapshot(destination) == {"x86/libfoo.so": "library from a"}


def test_earlier_disguised_executable_beats_later_library(lib_tree: LibTreeBuilder, tmp_path: Path) -> None:
    first = lib_tree.tree("a", {"x86/foo-disguised-exe": "exe from a"})
    second = lib_tree.tree("b", {"x86/libfoo.so": "library from b"})
    destination = tmp_path / "libs"
    destination.mkdir()

    run_steps(plan_library_copies([first, second], destination, [], strict_disguise=True))

    assert snapshot(destination) == {"x86/libfoo.so": "exe from a"}


def test_collision_within_one_source_is_still_fatal_in_strict_mode(
    lib_tree: LibTreeBuilder, tmp_path: Path
) -> None:
    source = lib_tree.tree("a", {"x86/foo-disguised-exe": "exe", "x86/libfoo.so": "library"})
    destination = tmp_path / "libs"
    destination.mkdir()

    with pytest.raises(FileExistsError):
        run_steps(plan_library_copies([source], destination, [], strict_disguise=True))

"""Error taxonomy for the native library pipeline."""

from __future__ import annotations


class NativeLibsError(RuntimeError):
    """Base class for failures raised by nativelibs itself.

    Filesystem failures are not wrapped; they surface as ``OSError``.
    """


class ConfigurationError(NativeLibsError):
    """Raised when a build definition cannot produce a native library tree."""


class InternalConsistencyError(NativeLibsError, AssertionError):
    """Raised when a CPU type has no ABI directory where one is required."""


__all__ = ["ConfigurationError", "InternalConsistencyError", "NativeLibsError"]

from __future__ import annotations

import ctypes
import importlib.util
import os
import platform


_LOADER_NAMES = {
    "Darwin": "libvulkan.1.dylib",
    "Windows": "vulkan-1.dll",
}
_DEFAULT_LOADER_NAME = "libvulkan.so.1"


def vulkan_loader_candidates(system: str | None = None) -> list[str]:
    system = system or platform.system()
    name = _LOADER_NAMES.get(system, _DEFAULT_LOADER_NAME)
    candidates: list[str] = []
    sdk = os.getenv("VULKAN_SDK", "").strip()
    if sdk:
        subdir = "Bin" if system == "Windows" else "lib"
        candidates.append(os.path.join(sdk, subdir, name))
    candidates.append(name)
    return candidates


def detect_vulkan_preflight_issue() -> str | None:
    if importlib.util.find_spec("vulkan") is None:
        return (
            "Python Vulkan bindings are missing. Install with:\n"
            "  pip install vulkan"
        )
    if importlib.util.find_spec("glfw") is None:
        return (
            "pyGLFW is missing. Install with:\n"
            "  pip install glfw\n"
            "On Linux the system library is also required (for example `apt install libglfw3`)."
        )

    for candidate in vulkan_loader_candidates():
        try:
            ctypes.CDLL(candidate)
            return None
        except OSError:
            continue

    return (
        "Vulkan loader was not found.\n"
        "Install the Vulkan runtime for your GPU driver (or the LunarG Vulkan SDK),\n"
        "then restart your shell. Export VULKAN_SDK if your setup requires it."
    )

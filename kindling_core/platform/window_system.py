from __future__ import annotations

import ctypes
from dataclasses import dataclass
from typing import Any, Protocol

from ..errors import SurfaceCreationError


@dataclass
class WindowHandle:
    window: object
    width: int
    height: int
    title: str


class WindowSystem(Protocol):
    def required_instance_extensions(self) -> list[str]:
        ...

    def create_window(self, width: int, height: int, title: str) -> WindowHandle:
        ...

    def create_surface(self, vk: Any, instance: Any, handle: WindowHandle) -> Any:
        ...

    def pump_events(self) -> None:
        ...

    def should_close(self, handle: WindowHandle) -> bool:
        ...

    def destroy_window(self, handle: WindowHandle) -> None:
        ...


class GLFWWindowSystem:
    """GLFW window bootstrap without a client API (Vulkan draws into it)."""

    def __init__(self) -> None:
        self._glfw_module = None

    def _glfw(self):
        if self._glfw_module is not None:
            return self._glfw_module
        try:
            import glfw  # type: ignore
        except Exception as exc:  # noqa: BLE001
            raise RuntimeError(
                "GLFW window bootstrap unavailable. Install pyGLFW (`pip install glfw`) "
                "and the native GLFW library."
            ) from exc
        if not glfw.init():
            raise RuntimeError("glfwInit failed")
        self._glfw_module = glfw
        return glfw

    def required_instance_extensions(self) -> list[str]:
        glfw = self._glfw()
        return [str(name) for name in (glfw.get_required_instance_extensions() or [])]

    def create_window(self, width: int, height: int, title: str) -> WindowHandle:
        glfw = self._glfw()
        glfw.window_hint(glfw.CLIENT_API, glfw.NO_API)
        glfw.window_hint(glfw.RESIZABLE, glfw.FALSE)
        window = glfw.create_window(width, height, title, None, None)
        if not window:
            raise RuntimeError(f"glfwCreateWindow failed for {width}x{height} window")
        return WindowHandle(window=window, width=width, height=height, title=title)

    def create_surface(self, vk: Any, instance: Any, handle: WindowHandle) -> Any:
        glfw = self._glfw()
        ffi = vk.ffi
        surface = ctypes.c_void_p(0)
        instance_ptr = ctypes.cast(int(ffi.cast("uintptr_t", instance)), ctypes.c_void_p)
        result = glfw.create_window_surface(instance_ptr, handle.window, None, ctypes.byref(surface))
        if result != 0 or not surface.value:
            raise SurfaceCreationError(f"failed to create window surface (VkResult={result})")
        return ffi.cast("VkSurfaceKHR", surface.value)

    def pump_events(self) -> None:
        if self._glfw_module is None:
            return
        self._glfw_module.poll_events()

    def should_close(self, handle: WindowHandle) -> bool:
        if self._glfw_module is None:
            return True
        return bool(self._glfw_module.window_should_close(handle.window))

    def destroy_window(self, handle: WindowHandle) -> None:
        if self._glfw_module is None:
            return
        self._glfw_module.destroy_window(handle.window)
        self._glfw_module.terminate()
        self._glfw_module = None

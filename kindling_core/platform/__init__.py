"""Platform integrations: Vulkan bindings, loader preflight and windowing."""

from .vulkan_compat import VulkanKHRCompatMixin, decode_vk_string, load_vulkan
from .vulkan_setup import detect_vulkan_preflight_issue
from .window_system import GLFWWindowSystem, WindowHandle, WindowSystem

__all__ = [
    "GLFWWindowSystem",
    "VulkanKHRCompatMixin",
    "WindowHandle",
    "WindowSystem",
    "decode_vk_string",
    "detect_vulkan_preflight_issue",
    "load_vulkan",
]

from __future__ import annotations

from typing import Any

from ..errors import VulkanUnavailableError


def decode_vk_string(value: Any) -> str:
    if isinstance(value, bytes):
        return value.split(b"\x00", 1)[0].decode("utf-8", errors="ignore")
    return str(value)


def load_vulkan():
    """Import the python Vulkan bindings; the import itself loads the system loader."""
    try:
        import vulkan as _vk  # type: ignore
    except Exception as exc:  # noqa: BLE001
        raise VulkanUnavailableError(
            "Python Vulkan bindings could not be loaded. Install with `pip install vulkan` "
            "and make sure a Vulkan loader/ICD is installed."
        ) from exc
    return _vk


class VulkanKHRCompatMixin:
    """Resolves KHR/EXT procedures through the loader for python Vulkan bindings.

    Extension entry points are not guaranteed to be exported at module level, so
    they are looked up with vkGetInstanceProcAddr / vkGetDeviceProcAddr first and
    the module attribute is only used when the loader lookup is unavailable.
    Subclasses provide ``_vk``, ``_instance`` and ``_vk_proc_cache``.
    """

    _vk: Any = None
    _instance: Any = None

    def _require_vk(self):
        if self._vk is None:
            raise RuntimeError("Vulkan python bindings are not loaded")
        return self._vk

    def _get_instance_proc(self, name: str):
        cached = self._vk_proc_cache.get(name)
        if cached is not None:
            return cached
        vk = self._require_vk()
        fn = None
        if self._instance is not None and hasattr(vk, "vkGetInstanceProcAddr"):
            try:
                fn = vk.vkGetInstanceProcAddr(self._instance, name)
            except Exception:  # noqa: BLE001
                fn = None
        if fn is None:
            fn = getattr(vk, name, None)
        if fn is None:
            raise RuntimeError(f"Vulkan procedure not found: {name}")
        self._vk_proc_cache[name] = fn
        return fn

    def _get_device_proc(self, logical_device, name: str):
        key = f"device:{name}"
        cached = self._vk_proc_cache.get(key)
        if cached is not None:
            return cached
        vk = self._require_vk()
        fn = None
        if hasattr(vk, "vkGetDeviceProcAddr"):
            try:
                fn = vk.vkGetDeviceProcAddr(logical_device, name)
            except Exception:  # noqa: BLE001
                fn = None
        if fn is None:
            fn = self._get_instance_proc(name)
        self._vk_proc_cache[key] = fn
        return fn

    def _vk_get_physical_device_surface_support(self, device, queue_family_index: int, surface) -> bool:
        fn = self._get_instance_proc("vkGetPhysicalDeviceSurfaceSupportKHR")
        return bool(fn(device, queue_family_index, surface))

    def _vk_get_surface_capabilities(self, physical_device, surface):
        fn = self._get_instance_proc("vkGetPhysicalDeviceSurfaceCapabilitiesKHR")
        return fn(physical_device, surface)

    def _vk_get_surface_formats(self, physical_device, surface) -> list[Any]:
        fn = self._get_instance_proc("vkGetPhysicalDeviceSurfaceFormatsKHR")
        return list(fn(physical_device, surface) or [])

    def _vk_get_surface_present_modes(self, physical_device, surface) -> list[int]:
        fn = self._get_instance_proc("vkGetPhysicalDeviceSurfacePresentModesKHR")
        return [int(mode) for mode in (fn(physical_device, surface) or [])]

    def _vk_destroy_surface(self, instance, surface) -> None:
        fn = self._get_instance_proc("vkDestroySurfaceKHR")
        fn(instance, surface, None)

    def _vk_create_debug_messenger(self, instance, create_info):
        fn = self._get_instance_proc("vkCreateDebugUtilsMessengerEXT")
        return fn(instance, create_info, None)

    def _vk_destroy_debug_messenger(self, instance, messenger) -> None:
        fn = self._get_instance_proc("vkDestroyDebugUtilsMessengerEXT")
        fn(instance, messenger, None)

    def _vk_create_swapchain(self, logical_device, swapchain_ci):
        fn = self._get_device_proc(logical_device, "vkCreateSwapchainKHR")
        return fn(logical_device, swapchain_ci, None)

    def _vk_get_swapchain_images(self, logical_device, swapchain) -> list[Any]:
        fn = self._get_device_proc(logical_device, "vkGetSwapchainImagesKHR")
        return list(fn(logical_device, swapchain))

    def _vk_destroy_swapchain(self, logical_device, swapchain) -> None:
        fn = self._get_device_proc(logical_device, "vkDestroySwapchainKHR")
        fn(logical_device, swapchain, None)

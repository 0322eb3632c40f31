from __future__ import annotations

import logging
from typing import Any, Sequence

from ..errors import (
    DiagnosticsSetupError,
    InstanceCreationError,
    SurfaceCreationError,
    ValidationLayersUnavailableError,
)
from ..platform.vulkan_compat import VulkanKHRCompatMixin
from ..platform.window_system import WindowHandle, WindowSystem
from .diagnostics import (
    DEBUG_UTILS_EXTENSION_NAME,
    DiagnosticsConfig,
    build_messenger_create_info,
    enumerate_instance_layers,
    missing_layers,
)
from .lifecycle import ResourceLedger

LOGGER = logging.getLogger(__name__)


class ConnectionManager(VulkanKHRCompatMixin):
    """Owns the Vulkan instance, the optional debug messenger and the window surface.

    Each object is recorded in the ledger as soon as it exists, so the ledger
    destroys them after every device-level object and in reverse order.
    """

    def __init__(
        self,
        vk: Any,
        ledger: ResourceLedger,
        app_name: str = "kindling",
        diagnostics: DiagnosticsConfig | None = None,
    ) -> None:
        self._vk = vk
        self._ledger = ledger
        self._app_name = app_name
        self._diagnostics = diagnostics
        self._instance = None
        self._messenger = None
        self._surface = None
        self._messenger_ci = None
        self._vk_proc_cache: dict[str, Any] = {}

    @property
    def instance(self):
        return self._instance

    @property
    def surface(self):
        return self._surface

    @property
    def messenger(self):
        return self._messenger

    @property
    def diagnostics_enabled(self) -> bool:
        return self._diagnostics is not None

    @property
    def enabled_layers(self) -> tuple[str, ...]:
        if self._diagnostics is None:
            return ()
        return tuple(self._diagnostics.layer_names)

    def required_extensions(self, window_extensions: Sequence[str]) -> list[str]:
        extensions = [str(name) for name in window_extensions]
        if self.diagnostics_enabled and DEBUG_UTILS_EXTENSION_NAME not in extensions:
            extensions.append(DEBUG_UTILS_EXTENSION_NAME)
        return extensions

    def create_instance(self, window_extensions: Sequence[str]):
        if self._instance is not None:
            raise RuntimeError("Vulkan instance already created")
        vk = self._require_vk()
        layers = list(self.enabled_layers)
        if layers:
            missing = missing_layers(layers, enumerate_instance_layers(vk))
            if missing:
                raise ValidationLayersUnavailableError(
                    f"validation layers requested, but not available: {', '.join(missing)}"
                )
        extensions = self.required_extensions(window_extensions)
        app_info = vk.VkApplicationInfo(
            sType=vk.VK_STRUCTURE_TYPE_APPLICATION_INFO,
            pApplicationName=self._app_name,
            applicationVersion=vk.VK_MAKE_VERSION(1, 0, 0),
            pEngineName="No Engine",
            engineVersion=vk.VK_MAKE_VERSION(1, 0, 0),
            apiVersion=vk.VK_API_VERSION_1_0,
        )
        next_chain = None
        if self._diagnostics is not None:
            # Chaining the messenger info covers instance create/destroy as well.
            self._messenger_ci = build_messenger_create_info(vk, self._diagnostics)
            next_chain = self._messenger_ci
        ci = vk.VkInstanceCreateInfo(
            sType=vk.VK_STRUCTURE_TYPE_INSTANCE_CREATE_INFO,
            pNext=next_chain,
            pApplicationInfo=app_info,
            enabledExtensionCount=len(extensions),
            ppEnabledExtensionNames=extensions,
            enabledLayerCount=len(layers),
            ppEnabledLayerNames=layers,
        )
        try:
            instance = vk.vkCreateInstance(ci, None)
        except Exception as exc:  # noqa: BLE001
            raise InstanceCreationError("failed to create Vulkan instance") from exc
        if instance is None:
            raise InstanceCreationError("failed to create Vulkan instance")
        self._instance = self._ledger.record("instance", instance, self._destroy_instance)
        LOGGER.info("Vulkan instance created (extensions=%s, layers=%s)", extensions, layers)
        return instance

    def install_diagnostics(self):
        if self._diagnostics is None:
            return None
        if self._instance is None:
            raise RuntimeError("Vulkan instance is required before installing diagnostics")
        vk = self._require_vk()
        if self._messenger_ci is None:
            self._messenger_ci = build_messenger_create_info(vk, self._diagnostics)
        try:
            messenger = self._vk_create_debug_messenger(self._instance, self._messenger_ci)
        except Exception as exc:  # noqa: BLE001
            raise DiagnosticsSetupError("failed to set up debug messenger") from exc
        self._messenger = self._ledger.record("debug_messenger", messenger, self._destroy_messenger)
        return messenger

    def bind_surface(self, window_system: WindowSystem, handle: WindowHandle):
        if self._instance is None:
            raise RuntimeError("Vulkan instance is required before creating a surface")
        if self._surface is not None:
            raise RuntimeError("surface already bound; only one surface is supported")
        try:
            surface = window_system.create_surface(self._require_vk(), self._instance, handle)
        except SurfaceCreationError:
            raise
        except Exception as exc:  # noqa: BLE001
            raise SurfaceCreationError("failed to create window surface") from exc
        if surface is None:
            raise SurfaceCreationError("failed to create window surface")
        self._surface = self._ledger.record("surface", surface, self._destroy_surface)
        return surface

    def enumerate_physical_devices(self) -> list[Any]:
        if self._instance is None:
            raise RuntimeError("Vulkan instance is not initialized")
        return list(self._require_vk().vkEnumeratePhysicalDevices(self._instance) or [])

    def _destroy_surface(self) -> None:
        if self._surface is None:
            return
        self._vk_destroy_surface(self._instance, self._surface)
        self._surface = None

    def _destroy_messenger(self) -> None:
        if self._messenger is None:
            return
        self._vk_destroy_debug_messenger(self._instance, self._messenger)
        self._messenger = None

    def _destroy_instance(self) -> None:
        if self._instance is None:
            return
        self._require_vk().vkDestroyInstance(self._instance, None)
        self._instance = None
        self._vk_proc_cache.clear()

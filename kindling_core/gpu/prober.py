from __future__ import annotations

import logging
from typing import Any, Iterable

from ..platform.vulkan_compat import VulkanKHRCompatMixin, decode_vk_string
from .types import ProbeResult, QueueFamilyIndices, SurfaceCapabilityLimits, SurfaceCapabilitySet, SurfaceFormat

LOGGER = logging.getLogger(__name__)

QUEUE_GRAPHICS_BIT = 0x00000001


class CapabilityProber(VulkanKHRCompatMixin):
    """Read-only queries of one physical device against one surface."""

    def __init__(self, vk: Any, instance: Any, required_extensions: Iterable[str]) -> None:
        self._vk = vk
        self._instance = instance
        self._required_extensions = tuple(required_extensions)
        self._vk_proc_cache: dict[str, Any] = {}

    @property
    def required_extensions(self) -> tuple[str, ...]:
        return self._required_extensions

    def probe(self, device, surface) -> ProbeResult:
        indices = self.find_queue_families(device, surface)
        missing = self.missing_extensions(device)
        capabilities = self.query_surface_capabilities(device, surface)
        result = ProbeResult(
            indices=indices,
            extensions_satisfied=not missing,
            capabilities=capabilities,
            missing_extensions=tuple(missing),
        )
        LOGGER.debug(
            "probed %s: indices=%s missing_extensions=%s formats=%d present_modes=%d",
            self.device_name(device),
            indices,
            missing,
            len(capabilities.formats),
            len(capabilities.present_modes),
        )
        return result

    def find_queue_families(self, device, surface) -> QueueFamilyIndices:
        vk = self._require_vk()
        graphics_bit = int(getattr(vk, "VK_QUEUE_GRAPHICS_BIT", QUEUE_GRAPHICS_BIT))
        graphics: int | None = None
        presentation: int | None = None
        for idx, props in enumerate(vk.vkGetPhysicalDeviceQueueFamilyProperties(device)):
            if graphics is None and int(props.queueCount) > 0 and int(props.queueFlags) & graphics_bit:
                graphics = idx
            # Checked independently: the graphics family may also be the present family.
            if presentation is None:
                if self._vk_get_physical_device_surface_support(device, idx, surface):
                    presentation = idx
            if graphics is not None and presentation is not None:
                break
        return QueueFamilyIndices(graphics=graphics, presentation=presentation)

    def missing_extensions(self, device) -> list[str]:
        vk = self._require_vk()
        available = {
            decode_vk_string(props.extensionName)
            for props in vk.vkEnumerateDeviceExtensionProperties(device, None)
        }
        return sorted(set(self._required_extensions) - available)

    def query_surface_capabilities(self, device, surface) -> SurfaceCapabilitySet:
        caps = self._vk_get_surface_capabilities(device, surface)
        formats = self._vk_get_surface_formats(device, surface)
        present_modes = self._vk_get_surface_present_modes(device, surface)
        return SurfaceCapabilitySet(
            limits=SurfaceCapabilityLimits.from_vk(caps),
            formats=tuple(SurfaceFormat.from_vk(f) for f in formats),
            present_modes=tuple(present_modes),
        )

    def device_name(self, device) -> str:
        vk = self._require_vk()
        try:
            props = vk.vkGetPhysicalDeviceProperties(device)
        except Exception:  # noqa: BLE001
            return repr(device)
        return decode_vk_string(getattr(props, "deviceName", repr(device)))

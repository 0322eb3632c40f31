from __future__ import annotations

import logging
from typing import Any, Iterable

from ..errors import DeviceCreationError
from .lifecycle import ResourceLedger
from .types import DeviceQueues, LogicalDevice, QueueCreateRequest, QueueFamilyIndices

LOGGER = logging.getLogger(__name__)


def unique_queue_families(indices: QueueFamilyIndices) -> list[int]:
    families: list[int] = []
    for family in (indices.graphics, indices.presentation):
        if family is not None and family not in families:
            families.append(family)
    return families


class QueueDeviceProvisioner:
    def __init__(self, vk: Any, ledger: ResourceLedger | None = None) -> None:
        self._vk = vk
        self._ledger = ledger

    def provision(
        self,
        physical_device,
        indices: QueueFamilyIndices,
        required_extensions: Iterable[str],
        validation_layers: Iterable[str] | None = None,
    ) -> tuple[LogicalDevice, DeviceQueues]:
        if not indices.is_complete():
            raise DeviceCreationError(f"queue family indices are incomplete: {indices}")
        vk = self._vk
        requests = tuple(QueueCreateRequest(family_index=family) for family in unique_queue_families(indices))
        queue_cis = [
            vk.VkDeviceQueueCreateInfo(
                sType=vk.VK_STRUCTURE_TYPE_DEVICE_QUEUE_CREATE_INFO,
                queueFamilyIndex=request.family_index,
                queueCount=request.queue_count,
                pQueuePriorities=list(request.priorities),
            )
            for request in requests
        ]
        extensions = list(required_extensions)
        # Layers reach the device only when diagnostics are on for the whole process.
        layers = list(validation_layers or [])
        device_ci = vk.VkDeviceCreateInfo(
            sType=vk.VK_STRUCTURE_TYPE_DEVICE_CREATE_INFO,
            queueCreateInfoCount=len(queue_cis),
            pQueueCreateInfos=queue_cis,
            pEnabledFeatures=vk.VkPhysicalDeviceFeatures(),
            enabledExtensionCount=len(extensions),
            ppEnabledExtensionNames=extensions,
            enabledLayerCount=len(layers),
            ppEnabledLayerNames=layers,
        )
        try:
            handle = vk.vkCreateDevice(physical_device, device_ci, None)
        except Exception as exc:  # noqa: BLE001
            raise DeviceCreationError("failed to create logical device") from exc
        if handle is None:
            raise DeviceCreationError("failed to create logical device")

        logical_device = LogicalDevice(
            handle=handle,
            physical_device=physical_device,
            queue_requests=requests,
            enabled_extensions=tuple(extensions),
            enabled_layers=tuple(layers),
        )
        if self._ledger is not None:
            self._ledger.record("logical_device", handle, lambda: self.destroy(logical_device))
        queues = DeviceQueues(
            graphics=vk.vkGetDeviceQueue(handle, indices.graphics, 0),
            presentation=vk.vkGetDeviceQueue(handle, indices.presentation, 0),
        )
        LOGGER.info(
            "logical device created with %d queue request(s) for families %s",
            len(requests),
            [r.family_index for r in requests],
        )
        return logical_device, queues

    def destroy(self, logical_device: LogicalDevice) -> None:
        self._vk.vkDestroyDevice(logical_device.handle, None)

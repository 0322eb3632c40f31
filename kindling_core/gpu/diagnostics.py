from __future__ import annotations

from dataclasses import dataclass, field
import logging
from typing import Any, Callable, Iterable

from ..platform.vulkan_compat import decode_vk_string

LOGGER = logging.getLogger(__name__)

SEVERITY_VERBOSE = 0x00000001
SEVERITY_INFO = 0x00000010
SEVERITY_WARNING = 0x00000100
SEVERITY_ERROR = 0x00001000

CATEGORY_GENERAL = 0x00000001
CATEGORY_VALIDATION = 0x00000002
CATEGORY_PERFORMANCE = 0x00000004

DEFAULT_VALIDATION_LAYERS = ("VK_LAYER_KHRONOS_validation",)
DEBUG_UTILS_EXTENSION_NAME = "VK_EXT_debug_utils"

# (severity, category, message) -> True to let the triggering call continue.
MessageSink = Callable[[int, int, str], bool]


def severity_to_log_level(severity: int) -> int:
    if severity & SEVERITY_ERROR:
        return logging.ERROR
    if severity & SEVERITY_WARNING:
        return logging.WARNING
    if severity & SEVERITY_INFO:
        return logging.INFO
    return logging.DEBUG


def log_validation_message(severity: int, category: int, message: str) -> bool:
    LOGGER.log(severity_to_log_level(severity), "validation layer: %s", message)
    return True


@dataclass(frozen=True)
class DiagnosticsConfig:
    layer_names: tuple[str, ...] = DEFAULT_VALIDATION_LAYERS
    severity_mask: int = SEVERITY_VERBOSE | SEVERITY_WARNING | SEVERITY_ERROR
    category_mask: int = CATEGORY_GENERAL | CATEGORY_VALIDATION | CATEGORY_PERFORMANCE
    sink: MessageSink = field(default=log_validation_message, compare=False)


def missing_layers(requested: Iterable[str], available: Iterable[str]) -> list[str]:
    available_set = {decode_vk_string(name) for name in available}
    return [name for name in requested if name not in available_set]


def enumerate_instance_layers(vk: Any) -> list[str]:
    return [decode_vk_string(props.layerName) for props in vk.vkEnumerateInstanceLayerProperties()]


def _callback_message(vk: Any, callback_data: Any) -> str:
    message = getattr(callback_data, "pMessage", callback_data)
    if isinstance(message, (bytes, str)):
        return decode_vk_string(message)
    ffi = getattr(vk, "ffi", None)
    if ffi is not None:
        return decode_vk_string(ffi.string(message))
    return str(message)


def build_messenger_create_info(vk: Any, config: DiagnosticsConfig):
    """Create-info for VK_EXT_debug_utils; also chained into instance creation."""

    def _on_message(severity, message_type, callback_data, user_data):
        message = _callback_message(vk, callback_data)
        keep_going = config.sink(int(severity), int(message_type), message)
        return vk.VK_FALSE if keep_going else vk.VK_TRUE

    return vk.VkDebugUtilsMessengerCreateInfoEXT(
        sType=vk.VK_STRUCTURE_TYPE_DEBUG_UTILS_MESSENGER_CREATE_INFO_EXT,
        messageSeverity=config.severity_mask,
        messageType=config.category_mask,
        pfnUserCallback=_on_message,
    )

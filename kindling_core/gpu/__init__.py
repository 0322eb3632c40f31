"""Vulkan device negotiation and provisioning."""

from .bootstrap import BootstrapState, GraphicsBootstrap, ProvisionedGraphics
from .config import BootstrapConfig, DEFAULT_DEVICE_EXTENSIONS
from .connection import ConnectionManager
from .diagnostics import DiagnosticsConfig, log_validation_message
from .lifecycle import ResourceLedger
from .prober import CapabilityProber
from .provisioner import QueueDeviceProvisioner, unique_queue_families
from .selector import DeviceScorer, DeviceSelection, DeviceSelector
from .swapchain import (
    PresentationChainBuilder,
    choose_extent,
    choose_image_count,
    choose_present_mode,
    choose_sharing,
    choose_surface_format,
    negotiate_swapchain,
)
from .types import (
    DeviceQueues,
    Extent2D,
    LogicalDevice,
    PresentationChain,
    ProbeResult,
    QueueCreateRequest,
    QueueFamilyIndices,
    SurfaceCapabilityLimits,
    SurfaceCapabilitySet,
    SurfaceFormat,
    SwapchainConfig,
)

__all__ = [
    "BootstrapConfig",
    "BootstrapState",
    "CapabilityProber",
    "ConnectionManager",
    "DEFAULT_DEVICE_EXTENSIONS",
    "DeviceQueues",
    "DeviceScorer",
    "DeviceSelection",
    "DeviceSelector",
    "DiagnosticsConfig",
    "Extent2D",
    "GraphicsBootstrap",
    "LogicalDevice",
    "PresentationChain",
    "PresentationChainBuilder",
    "ProbeResult",
    "ProvisionedGraphics",
    "QueueCreateRequest",
    "QueueDeviceProvisioner",
    "QueueFamilyIndices",
    "ResourceLedger",
    "SurfaceCapabilityLimits",
    "SurfaceCapabilitySet",
    "SurfaceFormat",
    "SwapchainConfig",
    "choose_extent",
    "choose_image_count",
    "choose_present_mode",
    "choose_sharing",
    "choose_surface_format",
    "log_validation_message",
    "negotiate_swapchain",
    "unique_queue_families",
]

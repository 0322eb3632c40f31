from __future__ import annotations


class ProvisioningError(RuntimeError):
    """Base class for failures that abort the graphics provisioning sequence."""


class VulkanUnavailableError(ProvisioningError):
    """Python Vulkan bindings or the platform loader could not be loaded."""


class InstanceCreationError(ProvisioningError):
    pass


class ValidationLayersUnavailableError(ProvisioningError):
    """Diagnostics were requested but a required validation layer is not installed."""


class DiagnosticsSetupError(ProvisioningError):
    pass


class SurfaceCreationError(ProvisioningError):
    pass


class NoDeviceAvailableError(ProvisioningError):
    """The driver enumerated zero physical devices."""


class NoSuitableDeviceError(ProvisioningError):
    """Devices exist, but none satisfies the queue/extension/surface requirements."""


class DeviceCreationError(ProvisioningError):
    pass


class SwapchainCreationError(ProvisioningError):
    pass


class ImageViewCreationError(ProvisioningError):
    pass

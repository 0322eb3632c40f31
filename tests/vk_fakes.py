from __future__ import annotations

from dataclasses import dataclass, field
from types import SimpleNamespace

from kindling_core.platform.window_system import WindowHandle


UNDEFINED = 0xFFFFFFFF
SRGB = (50, 0)
UNORM = (44, 0)


def extent(width: int, height: int) -> SimpleNamespace:
    return SimpleNamespace(width=width, height=height)


def caps(
    min_count: int = 2,
    max_count: int = 8,
    current: tuple[int, int] = (UNDEFINED, UNDEFINED),
    min_extent: tuple[int, int] = (1, 1),
    max_extent: tuple[int, int] = (4096, 4096),
) -> SimpleNamespace:
    return SimpleNamespace(
        minImageCount=min_count,
        maxImageCount=max_count,
        currentExtent=extent(*current),
        minImageExtent=extent(*min_extent),
        maxImageExtent=extent(*max_extent),
        currentTransform=0x2,
    )


@dataclass
class FakeGpu:
    name: str
    # (queueFlags, queueCount) per family
    families: list[tuple[int, int]] = field(default_factory=lambda: [(0x1, 1)])
    present_families: set[int] = field(default_factory=lambda: {0})
    extensions: list[str] = field(default_factory=lambda: ["VK_KHR_swapchain"])
    capabilities: SimpleNamespace = field(default_factory=caps)
    formats: list[tuple[int, int]] = field(default_factory=lambda: [SRGB])
    present_modes: list[int] = field(default_factory=lambda: [2])

    def __hash__(self) -> int:
        return id(self)


class FakeVk:
    VK_STRUCTURE_TYPE_APPLICATION_INFO = 0
    VK_STRUCTURE_TYPE_INSTANCE_CREATE_INFO = 1
    VK_STRUCTURE_TYPE_DEVICE_QUEUE_CREATE_INFO = 2
    VK_STRUCTURE_TYPE_DEVICE_CREATE_INFO = 3
    VK_STRUCTURE_TYPE_SWAPCHAIN_CREATE_INFO_KHR = 1000001000
    VK_STRUCTURE_TYPE_IMAGE_VIEW_CREATE_INFO = 15
    VK_STRUCTURE_TYPE_DEBUG_UTILS_MESSENGER_CREATE_INFO_EXT = 1000128004
    VK_API_VERSION_1_0 = 1 << 22
    VK_TRUE = 1
    VK_FALSE = 0
    VK_NULL_HANDLE = None
    VK_QUEUE_GRAPHICS_BIT = 0x1

    def __init__(self, gpus: list[FakeGpu] | None = None, layers: list[str] | None = None) -> None:
        self.gpus = list(gpus) if gpus is not None else [FakeGpu(name="gpu0")]
        self.layers = list(layers) if layers is not None else ["VK_LAYER_KHRONOS_validation"]
        self.events: list[str] = []
        self.last_instance_ci = None
        self.last_device_ci = None
        self.last_swapchain_ci = None
        self.fail_instance = False
        self.fail_messenger = False
        self.fail_device = False
        self.fail_swapchain = False
        self.fail_wait_idle = False
        self.fail_view_at: int | None = None
        # None: hand back exactly what was requested.
        self.swapchain_image_count: int | None = None
        self._views_created = 0

    @staticmethod
    def VK_MAKE_VERSION(major: int, minor: int, patch: int) -> int:
        return (major << 22) | (minor << 12) | patch

    @staticmethod
    def VkApplicationInfo(**kwargs):
        return kwargs

    @staticmethod
    def VkInstanceCreateInfo(**kwargs):
        return kwargs

    @staticmethod
    def VkDebugUtilsMessengerCreateInfoEXT(**kwargs):
        return kwargs

    @staticmethod
    def VkDeviceQueueCreateInfo(**kwargs):
        return kwargs

    @staticmethod
    def VkDeviceCreateInfo(**kwargs):
        return kwargs

    @staticmethod
    def VkPhysicalDeviceFeatures(**kwargs):
        return kwargs

    @staticmethod
    def VkSwapchainCreateInfoKHR(**kwargs):
        return kwargs

    @staticmethod
    def VkExtent2D(**kwargs):
        return kwargs

    @staticmethod
    def VkComponentMapping(**kwargs):
        return kwargs

    @staticmethod
    def VkImageSubresourceRange(**kwargs):
        return kwargs

    @staticmethod
    def VkImageViewCreateInfo(**kwargs):
        return kwargs

    def vkGetInstanceProcAddr(self, instance, name):
        return getattr(self, name, None)

    def vkGetDeviceProcAddr(self, device, name):
        return getattr(self, name, None)

    def vkEnumerateInstanceLayerProperties(self):
        return [SimpleNamespace(layerName=name) for name in self.layers]

    def vkCreateInstance(self, ci, allocator):
        if self.fail_instance:
            raise RuntimeError("VK_ERROR_INCOMPATIBLE_DRIVER")
        self.last_instance_ci = ci
        self.events.append("create:instance")
        return "instance"

    def vkDestroyInstance(self, instance, allocator):
        self.events.append("destroy:instance")

    def vkCreateDebugUtilsMessengerEXT(self, instance, ci, allocator):
        if self.fail_messenger:
            raise RuntimeError("VK_ERROR_EXTENSION_NOT_PRESENT")
        self.events.append("create:debug_messenger")
        return "messenger"

    def vkDestroyDebugUtilsMessengerEXT(self, instance, messenger, allocator):
        self.events.append("destroy:debug_messenger")

    def vkDestroySurfaceKHR(self, instance, surface, allocator):
        self.events.append("destroy:surface")

    def vkEnumeratePhysicalDevices(self, instance):
        return list(self.gpus)

    @staticmethod
    def vkGetPhysicalDeviceProperties(device):
        return SimpleNamespace(deviceName=device.name)

    @staticmethod
    def vkGetPhysicalDeviceQueueFamilyProperties(device):
        return [SimpleNamespace(queueFlags=flags, queueCount=count) for flags, count in device.families]

    @staticmethod
    def vkGetPhysicalDeviceSurfaceSupportKHR(device, queue_family_index, surface):
        return queue_family_index in device.present_families

    @staticmethod
    def vkEnumerateDeviceExtensionProperties(device, layer_name):
        return [SimpleNamespace(extensionName=name) for name in device.extensions]

    @staticmethod
    def vkGetPhysicalDeviceSurfaceCapabilitiesKHR(device, surface):
        return device.capabilities

    @staticmethod
    def vkGetPhysicalDeviceSurfaceFormatsKHR(device, surface):
        return [SimpleNamespace(format=fmt, colorSpace=cs) for fmt, cs in device.formats]

    @staticmethod
    def vkGetPhysicalDeviceSurfacePresentModesKHR(device, surface):
        return list(device.present_modes)

    def vkCreateDevice(self, physical_device, ci, allocator):
        if self.fail_device:
            raise RuntimeError("VK_ERROR_FEATURE_NOT_PRESENT")
        self.last_device_ci = ci
        self.events.append("create:logical_device")
        return "device"

    @staticmethod
    def vkGetDeviceQueue(device, family_index, queue_index):
        return f"queue{family_index}"

    def vkDeviceWaitIdle(self, device):
        if self.fail_wait_idle:
            raise RuntimeError("VK_ERROR_DEVICE_LOST")
        self.events.append("wait_idle")

    def vkDestroyDevice(self, device, allocator):
        self.events.append("destroy:logical_device")

    def vkCreateSwapchainKHR(self, device, ci, allocator):
        if self.fail_swapchain:
            raise RuntimeError("VK_ERROR_OUT_OF_DEVICE_MEMORY")
        self.last_swapchain_ci = ci
        self.events.append("create:swapchain")
        return "swapchain"

    def vkGetSwapchainImagesKHR(self, device, swapchain):
        count = self.swapchain_image_count
        if count is None:
            count = self.last_swapchain_ci["minImageCount"]
        return [f"image{i}" for i in range(count)]

    def vkDestroySwapchainKHR(self, device, swapchain, allocator):
        self.events.append("destroy:swapchain")

    def vkCreateImageView(self, device, ci, allocator):
        index = self._views_created
        if self.fail_view_at is not None and index == self.fail_view_at:
            raise RuntimeError("VK_ERROR_OUT_OF_HOST_MEMORY")
        self._views_created += 1
        self.events.append(f"create:view:{ci['image']}")
        return f"view:{ci['image']}"

    def vkDestroyImageView(self, device, view, allocator):
        self.events.append(f"destroy:{view}")


class FakeWindowSystem:
    def __init__(self, vk: FakeVk, open_frames: int = 3) -> None:
        self._vk = vk
        self.open_frames = open_frames
        self.pumped = 0
        self.fail_surface = False
        self.last_title: str | None = None

    def required_instance_extensions(self) -> list[str]:
        return ["VK_KHR_surface", "VK_KHR_xcb_surface"]

    def create_window(self, width: int, height: int, title: str) -> WindowHandle:
        self.last_title = title
        self._vk.events.append("create:window")
        return WindowHandle(window=object(), width=width, height=height, title=title)

    def create_surface(self, vk, instance, handle: WindowHandle):
        if self.fail_surface:
            raise RuntimeError("VK_ERROR_INITIALIZATION_FAILED")
        self._vk.events.append("create:surface")
        return "surface"

    def pump_events(self) -> None:
        self.pumped += 1

    def should_close(self, handle: WindowHandle) -> bool:
        return self.pumped >= self.open_frames

    def destroy_window(self, handle: WindowHandle) -> None:
        self._vk.events.append("destroy:window")


def destroy_events(vk: FakeVk) -> list[str]:
    return [event for event in vk.events if event.startswith("destroy:")]

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


UNDEFINED_EXTENT = 0xFFFFFFFF


@dataclass(frozen=True)
class QueueFamilyIndices:
    # None means "no family found"; 0 is a real family index.
    graphics: int | None = None
    presentation: int | None = None

    def is_complete(self) -> bool:
        return self.graphics is not None and self.presentation is not None

    def shares_family(self) -> bool:
        return self.is_complete() and self.graphics == self.presentation


@dataclass(frozen=True)
class Extent2D:
    width: int
    height: int

    @classmethod
    def from_vk(cls, extent: Any) -> "Extent2D":
        return cls(width=int(extent.width), height=int(extent.height))


@dataclass(frozen=True)
class SurfaceFormat:
    format: int
    color_space: int

    @classmethod
    def from_vk(cls, surface_format: Any) -> "SurfaceFormat":
        return cls(format=int(surface_format.format), color_space=int(surface_format.colorSpace))


@dataclass(frozen=True)
class SurfaceCapabilityLimits:
    min_image_count: int
    max_image_count: int
    current_extent: Extent2D
    min_image_extent: Extent2D
    max_image_extent: Extent2D
    current_transform: int = 0x1

    @classmethod
    def from_vk(cls, caps: Any) -> "SurfaceCapabilityLimits":
        return cls(
            min_image_count=int(caps.minImageCount),
            max_image_count=int(caps.maxImageCount),
            current_extent=Extent2D.from_vk(caps.currentExtent),
            min_image_extent=Extent2D.from_vk(caps.minImageExtent),
            max_image_extent=Extent2D.from_vk(caps.maxImageExtent),
            current_transform=int(getattr(caps, "currentTransform", 0x1)),
        )

    @property
    def has_defined_extent(self) -> bool:
        return self.current_extent.width != UNDEFINED_EXTENT


@dataclass(frozen=True)
class SurfaceCapabilitySet:
    """Snapshot for one (device, surface) pair. Re-query it, never share it across devices."""

    limits: SurfaceCapabilityLimits
    formats: tuple[SurfaceFormat, ...]
    present_modes: tuple[int, ...]

    def is_presentable(self) -> bool:
        return bool(self.formats) and bool(self.present_modes)


@dataclass(frozen=True)
class ProbeResult:
    indices: QueueFamilyIndices
    extensions_satisfied: bool
    capabilities: SurfaceCapabilitySet
    missing_extensions: tuple[str, ...] = ()

    def is_suitable(self) -> bool:
        return (
            self.indices.is_complete()
            and self.extensions_satisfied
            and self.capabilities.is_presentable()
        )

    def rejection_reasons(self) -> list[str]:
        reasons: list[str] = []
        if self.indices.graphics is None:
            reasons.append("no graphics queue family")
        if self.indices.presentation is None:
            reasons.append("no queue family can present to the surface")
        if not self.extensions_satisfied:
            reasons.append(f"missing device extensions: {', '.join(self.missing_extensions)}")
        if not self.capabilities.formats:
            reasons.append("no surface formats")
        if not self.capabilities.present_modes:
            reasons.append("no present modes")
        return reasons


@dataclass(frozen=True)
class QueueCreateRequest:
    family_index: int
    queue_count: int = 1
    priorities: tuple[float, ...] = (1.0,)


@dataclass
class LogicalDevice:
    handle: Any
    physical_device: Any
    queue_requests: tuple[QueueCreateRequest, ...]
    enabled_extensions: tuple[str, ...]
    enabled_layers: tuple[str, ...] = ()


@dataclass(frozen=True)
class DeviceQueues:
    # Both roles may resolve to the same queue handle when they share a family.
    graphics: Any
    presentation: Any


@dataclass(frozen=True)
class SwapchainConfig:
    surface_format: SurfaceFormat
    present_mode: int
    extent: Extent2D
    image_count: int
    sharing_mode: int
    queue_family_indices: tuple[int, ...]


@dataclass
class PresentationChain:
    handle: Any
    config: SwapchainConfig
    # Driver-owned; released with the chain, never destroyed one by one.
    images: tuple[Any, ...] = ()
    image_views: list[Any] = field(default_factory=list)

    @property
    def format(self) -> int:
        return self.config.surface_format.format

    @property
    def color_space(self) -> int:
        return self.config.surface_format.color_space

    @property
    def extent(self) -> Extent2D:
        return self.config.extent

    @property
    def present_mode(self) -> int:
        return self.config.present_mode

    @property
    def image_count(self) -> int:
        return len(self.images)

from __future__ import annotations

import logging
from typing import Any, Sequence

from ..errors import ImageViewCreationError, SwapchainCreationError
from ..platform.vulkan_compat import VulkanKHRCompatMixin
from .lifecycle import ResourceLedger
from .types import (
    Extent2D,
    PresentationChain,
    QueueFamilyIndices,
    SurfaceCapabilityLimits,
    SurfaceCapabilitySet,
    SurfaceFormat,
    SwapchainConfig,
)

LOGGER = logging.getLogger(__name__)

FORMAT_B8G8R8A8_SRGB = 50
COLOR_SPACE_SRGB_NONLINEAR = 0
PRESENT_MODE_MAILBOX = 1
PRESENT_MODE_FIFO = 2
SHARING_MODE_EXCLUSIVE = 0
SHARING_MODE_CONCURRENT = 1
SURFACE_TRANSFORM_IDENTITY = 0x00000001
COMPOSITE_ALPHA_OPAQUE = 0x00000001
IMAGE_USAGE_COLOR_ATTACHMENT = 0x00000010
IMAGE_VIEW_TYPE_2D = 1
IMAGE_ASPECT_COLOR = 0x00000001
COMPONENT_SWIZZLE_IDENTITY = 0

PREFERRED_SURFACE_FORMAT = SurfaceFormat(format=FORMAT_B8G8R8A8_SRGB, color_space=COLOR_SPACE_SRGB_NONLINEAR)


def choose_surface_format(available: Sequence[SurfaceFormat]) -> SurfaceFormat:
    if not available:
        raise SwapchainCreationError("surface reports no formats")
    for candidate in available:
        if candidate == PREFERRED_SURFACE_FORMAT:
            return candidate
    return available[0]


def choose_present_mode(available: Sequence[int]) -> int:
    if PRESENT_MODE_MAILBOX in available:
        return PRESENT_MODE_MAILBOX
    # FIFO support is mandatory for every surface.
    return PRESENT_MODE_FIFO


def choose_extent(limits: SurfaceCapabilityLimits, preferred: Extent2D) -> Extent2D:
    if limits.has_defined_extent:
        return limits.current_extent
    return Extent2D(
        width=max(limits.min_image_extent.width, min(limits.max_image_extent.width, preferred.width)),
        height=max(limits.min_image_extent.height, min(limits.max_image_extent.height, preferred.height)),
    )


def choose_image_count(limits: SurfaceCapabilityLimits) -> int:
    # max_image_count == 0 means no upper bound.
    image_count = limits.min_image_count + 1
    if limits.max_image_count > 0 and image_count > limits.max_image_count:
        image_count = limits.max_image_count
    return image_count


def choose_sharing(indices: QueueFamilyIndices) -> tuple[int, tuple[int, ...]]:
    if not indices.is_complete():
        raise SwapchainCreationError(f"queue family indices are incomplete: {indices}")
    if indices.graphics != indices.presentation:
        return SHARING_MODE_CONCURRENT, (int(indices.graphics), int(indices.presentation))
    return SHARING_MODE_EXCLUSIVE, ()


def negotiate_swapchain(
    capabilities: SurfaceCapabilitySet,
    indices: QueueFamilyIndices,
    preferred_extent: Extent2D,
) -> SwapchainConfig:
    sharing_mode, family_indices = choose_sharing(indices)
    surface_format = choose_surface_format(capabilities.formats)
    if surface_format != PREFERRED_SURFACE_FORMAT:
        LOGGER.warning("preferred sRGB BGRA8 surface format unavailable; using %s", surface_format)
    return SwapchainConfig(
        surface_format=surface_format,
        present_mode=choose_present_mode(capabilities.present_modes),
        extent=choose_extent(capabilities.limits, preferred_extent),
        image_count=choose_image_count(capabilities.limits),
        sharing_mode=sharing_mode,
        queue_family_indices=family_indices,
    )


class PresentationChainBuilder(VulkanKHRCompatMixin):
    """Creates the swapchain and one image view per swapchain image.

    Objects are tracked in a private ledger while building; if anything fails,
    the views created so far and the swapchain are destroyed before the error
    propagates. On success they move into the caller's ledger, if one is given.
    """

    def __init__(self, vk: Any, instance: Any = None) -> None:
        self._vk = vk
        self._instance = instance
        self._vk_proc_cache: dict[str, Any] = {}

    def build(
        self,
        device,
        surface,
        capabilities: SurfaceCapabilitySet,
        indices: QueueFamilyIndices,
        preferred_extent: Extent2D,
        ledger: ResourceLedger | None = None,
    ) -> PresentationChain:
        config = negotiate_swapchain(capabilities, indices, preferred_extent)
        owned = ResourceLedger()
        try:
            chain = self._create_chain(device, surface, config, owned)
            self._create_image_views(device, chain, owned)
        except Exception:
            _teardown_partial(owned)
            raise
        if ledger is not None:
            ledger.adopt(owned)
        LOGGER.info(
            "swapchain created: format=%d color_space=%d extent=%dx%d present_mode=%d images=%d (requested %d)",
            chain.format,
            chain.color_space,
            chain.extent.width,
            chain.extent.height,
            chain.present_mode,
            chain.image_count,
            config.image_count,
        )
        return chain

    def destroy(self, device, chain: PresentationChain) -> None:
        vk = self._require_vk()
        while chain.image_views:
            vk.vkDestroyImageView(device, chain.image_views.pop(), None)
        self._release_chain(device, chain)

    def _release_chain(self, device, chain: PresentationChain) -> None:
        if chain.handle is None:
            return
        self._vk_destroy_swapchain(device, chain.handle)
        chain.handle = None
        chain.images = ()

    def _create_chain(self, device, surface, config: SwapchainConfig, owned: ResourceLedger) -> PresentationChain:
        vk = self._require_vk()
        ci = vk.VkSwapchainCreateInfoKHR(
            sType=vk.VK_STRUCTURE_TYPE_SWAPCHAIN_CREATE_INFO_KHR,
            surface=surface,
            minImageCount=config.image_count,
            imageFormat=config.surface_format.format,
            imageColorSpace=config.surface_format.color_space,
            imageExtent=vk.VkExtent2D(width=config.extent.width, height=config.extent.height),
            imageArrayLayers=1,
            imageUsage=getattr(vk, "VK_IMAGE_USAGE_COLOR_ATTACHMENT_BIT", IMAGE_USAGE_COLOR_ATTACHMENT),
            imageSharingMode=config.sharing_mode,
            queueFamilyIndexCount=len(config.queue_family_indices),
            pQueueFamilyIndices=list(config.queue_family_indices) or None,
            preTransform=getattr(vk, "VK_SURFACE_TRANSFORM_IDENTITY_BIT_KHR", SURFACE_TRANSFORM_IDENTITY),
            compositeAlpha=getattr(vk, "VK_COMPOSITE_ALPHA_OPAQUE_BIT_KHR", COMPOSITE_ALPHA_OPAQUE),
            presentMode=config.present_mode,
            clipped=vk.VK_TRUE,
            oldSwapchain=getattr(vk, "VK_NULL_HANDLE", None),
        )
        try:
            handle = self._vk_create_swapchain(device, ci)
        except Exception as exc:  # noqa: BLE001
            raise SwapchainCreationError("failed to create swap chain") from exc
        if handle is None:
            raise SwapchainCreationError("failed to create swap chain")
        chain = PresentationChain(handle=handle, config=config)
        owned.record("swapchain", handle, lambda: self._release_chain(device, chain))
        try:
            # The driver may hand back more images than requested.
            chain.images = tuple(self._vk_get_swapchain_images(device, handle))
        except Exception as exc:  # noqa: BLE001
            raise SwapchainCreationError("failed to retrieve swap chain images") from exc
        return chain

    def _create_image_views(self, device, chain: PresentationChain, owned: ResourceLedger) -> None:
        vk = self._require_vk()
        identity = getattr(vk, "VK_COMPONENT_SWIZZLE_IDENTITY", COMPONENT_SWIZZLE_IDENTITY)
        components = vk.VkComponentMapping(r=identity, g=identity, b=identity, a=identity)
        subresource_range = vk.VkImageSubresourceRange(
            aspectMask=getattr(vk, "VK_IMAGE_ASPECT_COLOR_BIT", IMAGE_ASPECT_COLOR),
            baseMipLevel=0,
            levelCount=1,
            baseArrayLayer=0,
            layerCount=1,
        )
        for i, image in enumerate(chain.images):
            ci = vk.VkImageViewCreateInfo(
                sType=vk.VK_STRUCTURE_TYPE_IMAGE_VIEW_CREATE_INFO,
                image=image,
                viewType=getattr(vk, "VK_IMAGE_VIEW_TYPE_2D", IMAGE_VIEW_TYPE_2D),
                format=chain.format,
                components=components,
                subresourceRange=subresource_range,
            )
            try:
                view = vk.vkCreateImageView(device, ci, None)
            except Exception as exc:  # noqa: BLE001
                raise ImageViewCreationError(f"failed to create image view {i}") from exc
            if view is None:
                raise ImageViewCreationError(f"failed to create image view {i}")
            chain.image_views.append(view)
            owned.record(f"image_view[{i}]", view, self._view_destroyer(device, chain, view))

    def _view_destroyer(self, device, chain: PresentationChain, view):
        def _destroy() -> None:
            self._require_vk().vkDestroyImageView(device, view, None)
            if view in chain.image_views:
                chain.image_views.remove(view)

        return _destroy


def _teardown_partial(owned: ResourceLedger) -> None:
    try:
        owned.teardown()
    except RuntimeError as exc:
        LOGGER.error("partial swapchain cleanup incomplete: %s", exc)

from __future__ import annotations

import logging

from kindling_core.gpu import BootstrapConfig, GraphicsBootstrap
from kindling_core.platform import GLFWWindowSystem, detect_vulkan_preflight_issue

LOGGER = logging.getLogger("kindling")


def main() -> int:
    config = BootstrapConfig.from_env()
    logging.basicConfig(
        level=getattr(logging, config.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    issue = detect_vulkan_preflight_issue()
    if issue is not None:
        LOGGER.error("%s", issue)
        return 1

    bootstrap = GraphicsBootstrap(config=config, window_system=GLFWWindowSystem())
    try:
        provisioned = bootstrap.initialize()
    except RuntimeError as exc:
        LOGGER.error("%s", exc)
        return 1
    chain = provisioned.chain
    LOGGER.info(
        "ready on %s: %d swapchain image(s) at %dx%d",
        provisioned.selection.name,
        chain.image_count,
        chain.extent.width,
        chain.extent.height,
    )
    try:
        bootstrap.run()
    finally:
        bootstrap.shutdown()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

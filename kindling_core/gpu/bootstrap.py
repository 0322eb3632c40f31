from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import logging
from typing import Any

from ..platform.vulkan_compat import load_vulkan
from ..platform.window_system import GLFWWindowSystem, WindowHandle, WindowSystem
from .config import BootstrapConfig
from .connection import ConnectionManager
from .lifecycle import ResourceLedger
from .prober import CapabilityProber
from .provisioner import QueueDeviceProvisioner
from .selector import DeviceScorer, DeviceSelection, DeviceSelector
from .swapchain import PresentationChainBuilder
from .types import DeviceQueues, Extent2D, LogicalDevice, PresentationChain

LOGGER = logging.getLogger(__name__)


class BootstrapState(str, Enum):
    UNINITIALIZED = "uninitialized"
    READY = "ready"
    STOPPED = "stopped"
    FAILED = "failed"


@dataclass
class ProvisionedGraphics:
    instance: Any
    surface: Any
    selection: DeviceSelection
    device: LogicalDevice
    queues: DeviceQueues
    chain: PresentationChain

    @property
    def physical_device(self) -> Any:
        return self.selection.device


@dataclass
class GraphicsBootstrap:
    """Runs the provisioning sequence: window, instance, diagnostics, surface,
    device selection, logical device, presentation chain.

    Every created object goes into one ledger, so a failure at any step (and a
    normal shutdown) destroys exactly what exists, newest first.
    """

    config: BootstrapConfig
    window_system: WindowSystem | None = None
    vk: Any | None = None
    scorer: DeviceScorer | None = None

    def __post_init__(self) -> None:
        self._state = BootstrapState.UNINITIALIZED
        self._ledger = ResourceLedger()
        self._last_error: Exception | None = None
        self._window: WindowHandle | None = None
        self._connection: ConnectionManager | None = None
        self._selection: DeviceSelection | None = None
        self._provisioned: ProvisionedGraphics | None = None
        if self.window_system is None:
            self.window_system = GLFWWindowSystem()

    @property
    def state(self) -> BootstrapState:
        return self._state

    @property
    def last_error(self) -> Exception | None:
        return self._last_error

    @property
    def ledger(self) -> ResourceLedger:
        return self._ledger

    @property
    def provisioned(self) -> ProvisionedGraphics | None:
        return self._provisioned

    def initialize(self) -> ProvisionedGraphics:
        if self._state == BootstrapState.READY:
            assert self._provisioned is not None
            return self._provisioned
        if self._state != BootstrapState.UNINITIALIZED:
            raise RuntimeError(f"bootstrap cannot initialize from state {self._state.value}")
        try:
            if self.vk is None:
                self.vk = load_vulkan()
            self._create_window()
            self._open_connection()
            self._select_physical_device()
            device, queues = self._create_logical_device()
            chain = self._create_presentation_chain(device)
        except Exception as exc:
            self._state = BootstrapState.FAILED
            self._last_error = exc
            LOGGER.error("graphics provisioning failed: %s", exc)
            self._teardown_after_failure()
            raise
        assert self._connection is not None and self._selection is not None
        self._provisioned = ProvisionedGraphics(
            instance=self._connection.instance,
            surface=self._connection.surface,
            selection=self._selection,
            device=device,
            queues=queues,
            chain=chain,
        )
        self._state = BootstrapState.READY
        return self._provisioned

    def pump_events(self) -> None:
        if self._state != BootstrapState.READY:
            return
        self.window_system.pump_events()

    def should_close(self) -> bool:
        if self._state != BootstrapState.READY or self._window is None:
            return True
        return bool(self.window_system.should_close(self._window))

    def run(self, max_iterations: int | None = None) -> int:
        """Pumps window events until the window asks to close. Returns iterations run."""
        iterations = 0
        while not self.should_close():
            if max_iterations is not None and iterations >= max_iterations:
                break
            self.pump_events()
            iterations += 1
        return iterations

    def shutdown(self) -> None:
        if self._state in (BootstrapState.UNINITIALIZED, BootstrapState.STOPPED):
            self._state = BootstrapState.STOPPED
            return
        try:
            if self.vk is not None and self._provisioned is not None:
                try:
                    self.vk.vkDeviceWaitIdle(self._provisioned.device.handle)
                except Exception as exc:  # noqa: BLE001
                    LOGGER.error("device wait idle failed before teardown: %s", exc)
            self._ledger.teardown()
        finally:
            self._provisioned = None
            self._window = None
            self._state = BootstrapState.STOPPED

    def _create_window(self) -> None:
        handle = self.window_system.create_window(self.config.width, self.config.height, self.config.title)
        self._window = self._ledger.record("window", handle, lambda: self.window_system.destroy_window(handle))

    def _open_connection(self) -> None:
        assert self._window is not None
        self._connection = ConnectionManager(
            self.vk,
            self._ledger,
            app_name=self.config.app_name,
            diagnostics=self.config.diagnostics(),
        )
        self._connection.create_instance(self.window_system.required_instance_extensions())
        self._connection.install_diagnostics()
        self._connection.bind_surface(self.window_system, self._window)

    def _select_physical_device(self) -> None:
        assert self._connection is not None
        prober = CapabilityProber(self.vk, self._connection.instance, self.config.device_extensions)
        selector = DeviceSelector(prober, scorer=self.scorer)
        self._selection = selector.evaluate(
            self._connection.enumerate_physical_devices(),
            self._connection.surface,
        )

    def _create_logical_device(self) -> tuple[LogicalDevice, DeviceQueues]:
        assert self._connection is not None and self._selection is not None
        provisioner = QueueDeviceProvisioner(self.vk, ledger=self._ledger)
        return provisioner.provision(
            self._selection.device,
            self._selection.probe.indices,
            self.config.device_extensions,
            validation_layers=self._connection.enabled_layers,
        )

    def _create_presentation_chain(self, device: LogicalDevice) -> PresentationChain:
        assert self._connection is not None and self._selection is not None
        builder = PresentationChainBuilder(self.vk, self._connection.instance)
        # Capabilities come from the probe of the winning device, taken against this surface.
        return builder.build(
            device.handle,
            self._connection.surface,
            self._selection.probe.capabilities,
            self._selection.probe.indices,
            Extent2D(width=self.config.width, height=self.config.height),
            ledger=self._ledger,
        )

    def _teardown_after_failure(self) -> None:
        try:
            destroyed = self._ledger.teardown()
        except RuntimeError as exc:
            LOGGER.error("cleanup after failed provisioning was incomplete: %s", exc)
            return
        if destroyed:
            LOGGER.info("cleaned up after failed provisioning: %s", ", ".join(destroyed))

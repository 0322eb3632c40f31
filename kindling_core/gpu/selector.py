from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Any, Callable, Sequence

from ..errors import NoDeviceAvailableError, NoSuitableDeviceError
from .prober import CapabilityProber
from .types import ProbeResult

LOGGER = logging.getLogger(__name__)

DeviceScorer = Callable[[Any, ProbeResult], float]


@dataclass(frozen=True)
class DeviceSelection:
    device: Any
    probe: ProbeResult
    position: int
    name: str


class DeviceSelector:
    """Picks the first suitable device in enumeration order.

    With a ``scorer`` the highest score wins instead; equal scores still go to
    the device that was enumerated first.
    """

    def __init__(self, prober: CapabilityProber, scorer: DeviceScorer | None = None) -> None:
        self._prober = prober
        self._scorer = scorer

    def select(self, candidates: Sequence[Any], surface) -> Any:
        return self.evaluate(candidates, surface).device

    def evaluate(self, candidates: Sequence[Any], surface) -> DeviceSelection:
        if not candidates:
            raise NoDeviceAvailableError("failed to find GPUs with Vulkan support")
        best: DeviceSelection | None = None
        best_score: float | None = None
        for position, device in enumerate(candidates):
            name = self._prober.device_name(device)
            # A fresh snapshot per candidate; capabilities are never reused across devices.
            probe = self._prober.probe(device, surface)
            if not probe.is_suitable():
                LOGGER.info("rejecting device %s: %s", name, "; ".join(probe.rejection_reasons()))
                continue
            selection = DeviceSelection(device=device, probe=probe, position=position, name=name)
            if self._scorer is None:
                best = selection
                break
            score = float(self._scorer(device, probe))
            if best_score is None or score > best_score:
                best, best_score = selection, score
        if best is None:
            raise NoSuitableDeviceError(
                f"failed to find a suitable GPU among {len(candidates)} candidate(s)"
            )
        LOGGER.info("selected device %s (position %d)", best.name, best.position)
        return best

from __future__ import annotations

import unittest

from kindling_core.errors import NoDeviceAvailableError, NoSuitableDeviceError
from kindling_core.gpu.prober import CapabilityProber
from kindling_core.gpu.selector import DeviceSelector

from vk_fakes import FakeGpu, FakeVk


def _selector(gpus: list[FakeGpu], scorer=None) -> DeviceSelector:
    prober = CapabilityProber(FakeVk(gpus), "instance", ["VK_KHR_swapchain"])
    return DeviceSelector(prober, scorer=scorer)


class DeviceSelectorTests(unittest.TestCase):
    def test_empty_candidate_list_raises_no_device_available(self) -> None:
        with self.assertRaises(NoDeviceAvailableError):
            _selector([]).select([], "surface")

    def test_no_suitable_candidate_raises(self) -> None:
        gpus = [
            FakeGpu(name="no-swapchain", extensions=[]),
            FakeGpu(name="no-present", present_families=set()),
        ]
        with self.assertRaises(NoSuitableDeviceError):
            _selector(gpus).select(gpus, "surface")

    def test_first_suitable_device_wins(self) -> None:
        gpus = [
            FakeGpu(name="no-graphics", families=[(0x2, 1)]),
            FakeGpu(name="first"),
            FakeGpu(name="second"),
        ]
        selection = _selector(gpus).evaluate(gpus, "surface")
        self.assertIs(selection.device, gpus[1])
        self.assertEqual(selection.position, 1)
        self.assertEqual(selection.name, "first")
        self.assertTrue(selection.probe.is_suitable())

    def test_select_returns_the_device_itself(self) -> None:
        gpus = [FakeGpu(name="only")]
        self.assertIs(_selector(gpus).select(gpus, "surface"), gpus[0])

    def test_scorer_picks_highest_score(self) -> None:
        gpus = [FakeGpu(name="low"), FakeGpu(name="high"), FakeGpu(name="mid")]
        scores = {"low": 1.0, "high": 10.0, "mid": 5.0}
        selection = _selector(gpus, scorer=lambda device, probe: scores[device.name]).evaluate(gpus, "surface")
        self.assertEqual(selection.name, "high")

    def test_scorer_ties_go_to_enumeration_order(self) -> None:
        gpus = [FakeGpu(name="a"), FakeGpu(name="b")]
        selection = _selector(gpus, scorer=lambda device, probe: 1.0).evaluate(gpus, "surface")
        self.assertIs(selection.device, gpus[0])

    def test_scorer_never_sees_unsuitable_devices(self) -> None:
        gpus = [FakeGpu(name="broken", extensions=[]), FakeGpu(name="ok")]
        seen: list[str] = []

        def _score(device, probe) -> float:
            seen.append(device.name)
            return 1.0

        _selector(gpus, scorer=_score).evaluate(gpus, "surface")
        self.assertEqual(seen, ["ok"])

    def test_each_candidate_gets_its_own_capability_snapshot(self) -> None:
        gpus = [
            FakeGpu(name="no-formats", formats=[]),
            FakeGpu(name="ok"),
        ]
        selection = _selector(gpus).evaluate(gpus, "surface")
        self.assertEqual(selection.name, "ok")
        self.assertTrue(selection.probe.capabilities.formats)


if __name__ == "__main__":
    unittest.main()

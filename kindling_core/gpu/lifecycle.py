from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Any, Callable

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class LedgerEntry:
    label: str
    handle: Any
    destroy: Callable[[], None]


class ResourceLedger:
    """Records owned Vulkan objects in creation order and destroys them in reverse.

    Field order on the owning objects is never consulted; teardown order comes
    only from the order in which ``record`` was called.
    """

    def __init__(self) -> None:
        self._entries: list[LedgerEntry] = []
        self._creation_log: list[str] = []
        self._destruction_log: list[str] = []

    def record(self, label: str, handle: Any, destroy: Callable[[], None]) -> Any:
        self._entries.append(LedgerEntry(label=label, handle=handle, destroy=destroy))
        self._creation_log.append(label)
        LOGGER.debug("created %s", label)
        return handle

    def adopt(self, other: "ResourceLedger") -> None:
        """Take ownership of everything ``other`` recorded, keeping its order."""
        for entry in other._entries:
            self._entries.append(entry)
            self._creation_log.append(entry.label)
        other._entries = []

    def teardown(self) -> list[str]:
        destroyed: list[str] = []
        first_error: Exception | None = None
        while self._entries:
            entry = self._entries.pop()
            try:
                entry.destroy()
            except Exception as exc:  # noqa: BLE001
                LOGGER.error("failed to destroy %s: %s", entry.label, exc)
                if first_error is None:
                    first_error = exc
            self._destruction_log.append(entry.label)
            destroyed.append(entry.label)
            LOGGER.debug("destroyed %s", entry.label)
        if first_error is not None:
            raise RuntimeError("teardown finished with errors") from first_error
        return destroyed

    @property
    def live_labels(self) -> list[str]:
        return [entry.label for entry in self._entries]

    @property
    def creation_log(self) -> list[str]:
        return list(self._creation_log)

    @property
    def destruction_log(self) -> list[str]:
        return list(self._destruction_log)

    def __len__(self) -> int:
        return len(self._entries)

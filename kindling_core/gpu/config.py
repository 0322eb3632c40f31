from __future__ import annotations

from dataclasses import dataclass
import os

from .diagnostics import DEFAULT_VALIDATION_LAYERS, DiagnosticsConfig

SWAPCHAIN_EXTENSION_NAME = "VK_KHR_swapchain"
DEFAULT_DEVICE_EXTENSIONS = (SWAPCHAIN_EXTENSION_NAME,)


@dataclass(frozen=True)
class BootstrapConfig:
    width: int = 800
    height: int = 600
    title: str = "Vulkan"
    app_name: str = "Hello Triangle"
    enable_validation: bool = True
    validation_layers: tuple[str, ...] = DEFAULT_VALIDATION_LAYERS
    device_extensions: tuple[str, ...] = DEFAULT_DEVICE_EXTENSIONS
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError("width and height must be > 0")

    @classmethod
    def from_env(cls, prefix: str = "KINDLING_") -> "BootstrapConfig":
        layers_raw = os.getenv(f"{prefix}VALIDATION_LAYERS", "").strip()
        layers = tuple(x.strip() for x in layers_raw.split(",") if x.strip()) or DEFAULT_VALIDATION_LAYERS
        return cls(
            width=_parse_int(os.getenv(f"{prefix}WINDOW_WIDTH"), cls.width),
            height=_parse_int(os.getenv(f"{prefix}WINDOW_HEIGHT"), cls.height),
            title=os.getenv(f"{prefix}WINDOW_TITLE", cls.title),
            app_name=os.getenv(f"{prefix}APP_NAME", cls.app_name),
            enable_validation=os.getenv(f"{prefix}ENABLE_VALIDATION", "1").strip() == "1",
            validation_layers=layers,
            log_level=os.getenv(f"{prefix}LOG_LEVEL", cls.log_level).strip().upper() or cls.log_level,
        )

    def diagnostics(self) -> DiagnosticsConfig | None:
        if not self.enable_validation:
            return None
        return DiagnosticsConfig(layer_names=self.validation_layers)


def _parse_int(raw: str | None, default: int) -> int:
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default

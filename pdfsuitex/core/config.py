"""Engine configuration loaded from defaults or ``PDFSUITEX_*`` variables."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Mapping

ENV_PREFIX = "PDFSUITEX_"

_TIERS = ("low", "medium", "high")


@dataclass(frozen=True, slots=True)
class EngineConfig:
    """Tunable defaults applied by the orchestrator and overlay helpers."""

    default_font: str = "Helvetica"
    default_font_size: float = 12.0
    signature_scale: float = 0.5
    signature_margin: float = 50.0
    ocr_font: str = "Helvetica"
    default_tier: str = "medium"
    log_level: str = "WARNING"

    def __post_init__(self) -> None:
        if self.default_tier not in _TIERS:
            raise ValueError(f"Unknown compression tier: {self.default_tier}")
        if self.signature_scale <= 0:
            raise ValueError("signature_scale must be positive")
        if self.signature_margin < 0:
            raise ValueError("signature_margin must not be negative")

    @property
    def logging_level(self) -> int:
        level = logging.getLevelName(self.log_level.upper())
        return level if isinstance(level, int) else logging.WARNING

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "EngineConfig":
        """Build a configuration from ``PDFSUITEX_*`` environment variables."""

        env = os.environ if environ is None else environ
        values: dict[str, object] = {}

        def _number(key: str) -> float | None:
            raw = env.get(ENV_PREFIX + key)
            if raw is None or not raw.strip():
                return None
            try:
                return float(raw)
            except ValueError as exc:
                raise ValueError(f"{ENV_PREFIX}{key} must be a number, got {raw!r}") from exc

        margin = _number("SIGNATURE_MARGIN")
        if margin is not None:
            values["signature_margin"] = margin
        scale = _number("SIGNATURE_SCALE")
        if scale is not None:
            values["signature_scale"] = scale

        for key, field_name in (
            ("LOG_LEVEL", "log_level"),
            ("DEFAULT_TIER", "default_tier"),
            ("DEFAULT_FONT", "default_font"),
        ):
            raw = env.get(ENV_PREFIX + key)
            if raw and raw.strip():
                values[field_name] = raw.strip() if key != "DEFAULT_TIER" else raw.strip().lower()

        return cls(**values)


DEFAULT_CONFIG = EngineConfig()

__all__ = ["EngineConfig", "DEFAULT_CONFIG", "ENV_PREFIX"]

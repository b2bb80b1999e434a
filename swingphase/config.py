from math import ceil
from typing import Dict, Literal

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


MIN_SMOOTHING_WINDOW = 3
MAX_SMOOTHING_WINDOW = 10
MIN_HYSTERESIS_THRESHOLD = 0.05
MAX_HYSTERESIS_THRESHOLD = 0.5
MIN_PHASE_CHANGE_COOLDOWN_MS = 50.0
MAX_PHASE_CHANGE_COOLDOWN_MS = 500.0

# Share of the window the winning label must hold in a majority vote
CONSENSUS_RATIO = 0.6


def consensus_count(window: int) -> int:
    """Minimum number of matching labels needed to win the majority vote."""
    return ceil(window * CONSENSUS_RATIO)


class SmoothingConfig(BaseModel):
    """
    Tuning options for the anti-jitter layer.

    Each option has a "disabled" value (window 1, threshold 0, cooldown 0) that
    passes raw classifications through; any other value is clamped into the
    supported range.
    """
    model_config = ConfigDict(frozen=True)

    smoothing_window: int = 5
    hysteresis_threshold: float = 0.15
    phase_change_cooldown_ms: float = 100.0

    @field_validator("smoothing_window")
    @classmethod
    def _clamp_window(cls, value: int) -> int:
        if value < 1:
            raise ValueError("smoothing_window must be at least 1")
        if value == 1:
            return 1
        return max(MIN_SMOOTHING_WINDOW, min(MAX_SMOOTHING_WINDOW, value))

    @field_validator("hysteresis_threshold")
    @classmethod
    def _clamp_threshold(cls, value: float) -> float:
        if value < 0:
            raise ValueError("hysteresis_threshold must not be negative")
        if value == 0:
            return 0.0
        return max(MIN_HYSTERESIS_THRESHOLD, min(MAX_HYSTERESIS_THRESHOLD, value))

    @field_validator("phase_change_cooldown_ms")
    @classmethod
    def _clamp_cooldown(cls, value: float) -> float:
        if value < 0:
            raise ValueError("phase_change_cooldown_ms must not be negative")
        if value == 0:
            return 0.0
        return max(MIN_PHASE_CHANGE_COOLDOWN_MS, min(MAX_PHASE_CHANGE_COOLDOWN_MS, value))

    @property
    def smoothing_enabled(self) -> bool:
        return self.smoothing_window > 1

    @classmethod
    def preset(cls, name: str) -> "SmoothingConfig":
        """Look up one of the named tuning presets (none, light, medium, heavy)."""
        try:
            return SMOOTHING_PRESETS[name]
        except KeyError:
            raise ValueError(
                f"Unknown smoothing preset '{name}', expected one of {sorted(SMOOTHING_PRESETS)}"
            ) from None


SMOOTHING_PRESETS: Dict[str, SmoothingConfig] = {
    "none": SmoothingConfig(smoothing_window=1, hysteresis_threshold=0.0, phase_change_cooldown_ms=0),
    "light": SmoothingConfig(smoothing_window=3, hysteresis_threshold=0.1, phase_change_cooldown_ms=50),
    "medium": SmoothingConfig(smoothing_window=5, hysteresis_threshold=0.15, phase_change_cooldown_ms=100),
    "heavy": SmoothingConfig(smoothing_window=7, hysteresis_threshold=0.2, phase_change_cooldown_ms=150),
}


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="SWINGPHASE_", env_file=".env", extra="ignore")

    smoothing_window: int = 5
    hysteresis_threshold: float = 0.15
    phase_change_cooldown_ms: float = 100.0

    # Project the club head along the forearm when elbows are visible
    use_elbow_projection: bool = False

    # Landmarks reported below this visibility are treated as missing
    min_landmark_visibility: float = 0.0

    # Used to derive frame timestamps when the pose estimator supplies none
    default_fps: float = 30.0

    log_level: str = "INFO"
    log_format: Literal["json", "console"] = "json"

    def smoothing_config(self) -> SmoothingConfig:
        return SmoothingConfig(
            smoothing_window=self.smoothing_window,
            hysteresis_threshold=self.hysteresis_threshold,
            phase_change_cooldown_ms=self.phase_change_cooldown_ms,
        )


settings = Settings()

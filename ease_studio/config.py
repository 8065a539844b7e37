"""Application configuration."""

import logging

from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Editor and preview settings loaded from environment variables.

    Priority: environment variables > .env file > defaults
    """

    model_config = SettingsConfigDict(
        env_prefix="EASE_STUDIO_",
        env_file=(".env",),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Grid (editor pixel space)
    grid_size: float = 500.0
    overshoot: float = 200.0  # vertical room for back/elastic style eases

    # Editing
    handle_size: float = 10.0  # full width of a drawn handle in grid units
    snap_radius_sq: float = 256.0  # squared distance for endpoint corner snapping
    anchor_epsilon: float = 0.5  # minimum time gap between neighbouring anchors

    # Normalization
    samples_per_segment: int = 500
    precision: int = 3  # decimals in the canonical curve string

    # Preview animation
    preview_duration: float = 2.5  # seconds per cycle
    preview_fps: int = 60
    display_range: float = 500.0  # value reported at progress 1.0

    # Presets and storage
    default_preset: str = "power2.out"
    store_path: str = "data/curves.json"
    autosave: bool = False  # persist every valid curve while editing

    # Logging
    debug: bool = False
    log_level: str = "INFO"
    log_json: bool = False
    log_file: str | None = None  # e.g. "logs/ease_studio.log"
    log_error_file: str | None = None  # ERROR and above only


def get_log_level(config: Settings | None = None) -> str:
    """Resolve the effective log level name.

    Debug mode always wins over the configured level.
    """
    config = config or settings
    if config.debug:
        return "DEBUG"
    return config.log_level.upper() or "INFO"


settings = Settings()

"""
Configuration service for reading settings from the environment.
"""

import logging
import os
from datetime import datetime, timezone
from typing import Any, Optional

logger = logging.getLogger("app.config")

DEFAULTS = {
    "RISK_SCORING_MODE": "combined",
    "RISK_HISTORY_WINDOW": "5",
    "RISK_BULK_MAX_WORKERS": "4",
    "APP_NOW_MODE": "real",
}


class ConfigService:
    """Service for managing application configuration."""

    def __init__(self):
        self._cache: dict[str, Any] = {}

    def get_setting(self, key: str, default: Any = None) -> Any:
        """
        Get setting value from environment.

        Priority: Override > Environment > Default
        """
        if key in self._cache:
            return self._cache[key]

        if default is None:
            default = DEFAULTS.get(key)
        value = os.getenv(key, default)

        self._cache[key] = value

        logger.debug(f"Retrieved setting {key}={value}")
        return value

    def get_int(self, key: str, default: int) -> int:
        """Get an integer setting, falling back to default on bad values."""
        value = self.get_setting(key, str(default))
        try:
            return int(value)
        except (TypeError, ValueError):
            logger.warning(f"Invalid integer for {key}: {value!r}, using {default}")
            return default

    def set_setting(self, key: str, value: str) -> None:
        """Override a setting for this process."""
        self._cache[key] = value
        logger.info(f"Set setting {key}={value}")

    def clear_cache(self) -> None:
        self._cache.clear()

    @property
    def scoring_mode(self) -> str:
        return str(self.get_setting("RISK_SCORING_MODE")).lower()

    @property
    def history_window(self) -> int:
        return max(1, self.get_int("RISK_HISTORY_WINDOW", 5))

    @property
    def bulk_max_workers(self) -> int:
        return max(1, self.get_int("RISK_BULK_MAX_WORKERS", 4))

    def now(self) -> datetime:
        """
        Get current time (real or fake based on APP_NOW_MODE).

        Returns:
            Current datetime (real or fake)
        """
        fake_now = self.get_fake_time()
        if fake_now is not None:
            logger.debug(f"Using fake time: {fake_now}")
            return fake_now

        return datetime.now(timezone.utc)

    def is_fake_time_enabled(self) -> bool:
        """Check if fake time mode is enabled."""
        return self.get_setting("APP_NOW_MODE") == "fake"

    def get_fake_time(self) -> Optional[datetime]:
        """Get fake time if enabled, None otherwise."""
        if not self.is_fake_time_enabled():
            return None

        fake_now_str = self.get_setting("APP_FAKE_NOW")
        if fake_now_str:
            try:
                # Parse YYYY-MM-DD format
                return datetime.strptime(fake_now_str, "%Y-%m-%d").replace(tzinfo=timezone.utc)
            except ValueError:
                logger.warning(f"Invalid APP_FAKE_NOW format: {fake_now_str}, using real time")

        return None


# Global instance
config_service = ConfigService()

"""Settings and logging setup."""

from breast_cancer_navigator.config.config import Settings, get_settings

__all__ = ["Settings", "get_settings"]

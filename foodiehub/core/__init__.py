"""
Core module initialization.
Exports configuration, logging utilities and the error taxonomy.
"""

from foodiehub.core.config import get_settings, Settings, EnvironmentMode
from foodiehub.core.exceptions import FoodieHubError

__all__ = ["get_settings", "Settings", "EnvironmentMode", "FoodieHubError"]

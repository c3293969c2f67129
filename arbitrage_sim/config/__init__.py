from .loader import find_config_path, load_settings
from .models import Settings

__all__ = ["Settings", "load_settings", "find_config_path"]

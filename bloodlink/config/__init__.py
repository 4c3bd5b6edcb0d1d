from .config import Settings, get_settings, init_settings

__all__ = ["Settings", "get_settings", "init_settings"]

from .settings import RelayApiSettings, RelaySettings, get_api_settings, get_settings

__all__ = ["RelayApiSettings", "RelaySettings", "get_api_settings", "get_settings"]

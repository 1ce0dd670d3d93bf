from smartops.configs.settings import (
    CONFIG_MAP,
    Argon2Config,
    Settings,
    get_settings,
)

__all__ = [
    "Argon2Config",
    "CONFIG_MAP",
    "Settings",
    "get_settings",
]

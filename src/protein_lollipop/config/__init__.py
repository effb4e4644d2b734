from .loader import apply_overrides, load_config, load_config_with_overrides
from .schema import LollipopConfig, APIConfig, PlotConfig, FilterConfig

__all__ = [
    "apply_overrides",
    "load_config",
    "load_config_with_overrides",
    "LollipopConfig",
    "APIConfig",
    "PlotConfig",
    "FilterConfig",
]

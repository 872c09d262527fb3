"""Settings and the text-generation provider."""

from .config import NewsdeskSettings, ProviderConfig, load_provider_config
from .text import TextGenerator, TextProvider

__all__ = [
    "NewsdeskSettings",
    "TextGenerator",
    "TextProvider",
    "ProviderConfig",
    "load_provider_config",
]

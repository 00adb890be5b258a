"""UMKM GenAI Studio - holiday and promo poster generator for Indonesian MSMEs."""

__version__ = "0.1.0"

from umkm_studio.core.config import StudioConfig, config
from umkm_studio.core.controller import GenerationController

__all__ = [
    "GenerationController",
    "StudioConfig",
    "config",
]

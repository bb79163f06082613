"""REST routers and HTTP error helpers."""

from .routes_devices import router as devices_router
from .routes_hue import router as hue_router

__all__ = ["devices_router", "hue_router"]

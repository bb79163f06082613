"""Vendor clients for Philips Hue, Google Nest, Ring and TP-Link Kasa.

These work with vendor identifiers and caller-supplied credentials rather
than registry devices.
"""

from .base import VendorClient
from .hue import HueBridge, HueClient, rgb_to_xy
from .kasa import KasaClient, KasaDevice
from .nest import NestClient
from .ring import RingClient

__all__ = [
    "HueBridge",
    "HueClient",
    "KasaClient",
    "KasaDevice",
    "NestClient",
    "RingClient",
    "VendorClient",
    "rgb_to_xy",
]

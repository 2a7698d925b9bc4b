"""Shared utilities for the Reddit bridge Azure Function.

Currently exposes:
    forward_to_bridge - validate, authenticate and relay a search request to the bridge.
    BridgeConfig - immutable snapshot of the app settings.
    BridgePayload - normalized request body sent upstream.
"""

from .bridge_proxy import forward_to_bridge  # re-export for convenience
from .config import BridgeConfig
from .payload import BridgePayload, PayloadError

__all__ = ["forward_to_bridge", "BridgeConfig", "BridgePayload", "PayloadError"]

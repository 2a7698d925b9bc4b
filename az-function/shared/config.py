import os
from dataclasses import dataclass
from typing import Mapping, Optional

KEY_VAULT_PREFIX = "@Microsoft.KeyVault("


def _env(environ: Mapping[str, str], name: str) -> Optional[str]:
    value = environ.get(name)
    return value or None


def is_unresolved_reference(value: Optional[str]) -> bool:
    return bool(value) and value.startswith(KEY_VAULT_PREFIX)


@dataclass(frozen=True)
class BridgeConfig:
    """Snapshot of the app settings used by the bridge forwarder.

    Built per invocation so that app-setting changes apply without a redeploy.
    """

    bridge_url: Optional[str] = None
    bypass_secret: Optional[str] = None
    wrapper_key: Optional[str] = None
    debug_request_log: bool = False

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "BridgeConfig":
        environ = os.environ if environ is None else environ
        return cls(
            bridge_url=_env(environ, "REDDIT_BRIDGE_URL"),
            bypass_secret=_env(environ, "REDDIT_BRIDGE_BYPASS_SECRET"),
            wrapper_key=_env(environ, "MCP_WRAPPER_KEY"),
            debug_request_log=environ.get("DEBUG_REQUEST_LOG", "false").lower() == "true",
        )

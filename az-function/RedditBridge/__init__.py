import azure.functions as func

from shared.bridge_proxy import forward_to_bridge
from shared.config import BridgeConfig


async def main(req: func.HttpRequest) -> func.HttpResponse:
    """Forward a subreddit search to the Reddit bridge.

    App settings are read on every call so rotated secrets apply immediately.
    """
    return await forward_to_bridge(req, BridgeConfig.from_env())

"""Constants and helpers shared by the Reddit bridge tests."""

from __future__ import annotations

import json
from typing import Any

import azure.functions as func

BRIDGE_URL = "https://reddit-bridge.example.com/api/search_reddit_comments"


def response_json(resp: func.HttpResponse) -> Any:
    return json.loads(resp.get_body())

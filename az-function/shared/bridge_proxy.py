import hmac
import json
import logging
import time
import uuid
from typing import Any, Dict, Optional

import azure.functions as func
import httpx

from .config import BridgeConfig, is_unresolved_reference
from .payload import BridgePayload, PayloadError

logger = logging.getLogger("reddit_bridge")

WRAPPER_KEY_HEADER = "x-mcp-key"
BYPASS_HEADER = "x-vercel-protection-bypass"
MASKED_HEADERS = ("authorization", "cookie", WRAPPER_KEY_HEADER, BYPASS_HEADER)


def json_response(data: Any, status_code: int = 200, headers: Optional[Dict[str, str]] = None) -> func.HttpResponse:
    return func.HttpResponse(
        body=json.dumps(data, indent=2, allow_nan=False),
        status_code=status_code,
        mimetype="application/json",
        headers=headers,
    )


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")


def loads_strict(data: Any) -> Any:
    """Parse JSON, rejecting the NaN and Infinity literals Python accepts by default."""
    return json.loads(data, parse_constant=_reject_constant)


def _sanitize_headers(h: Dict[str, str]) -> Dict[str, str]:
    return {k: ("***" if k.lower() in MASKED_HEADERS else v) for k, v in h.items()}


def _log_request_debug(req: func.HttpRequest, trace_id: str) -> None:
    try:
        debug_payload = {
            "method": req.method,
            "url": req.url.split("?", 1)[0],
            "headers": _sanitize_headers(dict(req.headers) if req.headers else {}),
            "trace_id": trace_id,
        }
        logger.info("http_request_debug: " + json.dumps(debug_payload))
    except Exception:
        # Never fail the request due to debug logging
        logger.debug("http_request_debug unavailable", exc_info=True)


def _wrapper_key_matches(req: func.HttpRequest, expected_key: str) -> bool:
    provided_key = req.headers.get(WRAPPER_KEY_HEADER)
    if not provided_key:
        return False
    return hmac.compare_digest(provided_key.encode("utf-8"), expected_key.encode("utf-8"))


def _parse_upstream_body(text: str) -> Any:
    try:
        return loads_strict(text)
    except ValueError:
        return text


async def _post_to_bridge(config: BridgeConfig, payload: BridgePayload) -> httpx.Response:
    headers = {"content-type": "application/json"}
    # Lets the forwarder reach a bridge deployment behind Vercel protection.
    if config.bypass_secret:
        headers[BYPASS_HEADER] = config.bypass_secret
    async with httpx.AsyncClient(follow_redirects=True) as client:
        body = json.dumps(payload.to_dict(), allow_nan=False)
        return await client.post(config.bridge_url, headers=headers, content=body)


async def forward_to_bridge(req: func.HttpRequest, config: BridgeConfig) -> func.HttpResponse:
    """Validate an inbound search request and relay it to the Reddit bridge.

    Every outcome, including unexpected failures, is returned as a JSON
    response carrying an ``X-Trace-Id`` header; nothing is raised to the host.
    """
    trace_id = str(uuid.uuid4())
    hdrs = {"X-Trace-Id": trace_id}

    try:
        if config.debug_request_log:
            _log_request_debug(req, trace_id)

        if req.method.upper() != "POST":
            logger.info("rejected", extra={"reason": "method_not_allowed", "method": req.method, "trace_id": trace_id})
            return json_response({"error": "Method not allowed. Use POST."}, 405, {**hdrs, "Allow": "POST"})

        if config.wrapper_key and not _wrapper_key_matches(req, config.wrapper_key):
            logger.info("rejected", extra={"reason": "wrapper_key_mismatch", "trace_id": trace_id})
            return json_response({"error": "Unauthorised."}, 401, hdrs)

        unresolved_url = is_unresolved_reference(config.bridge_url)
        if unresolved_url:
            logger.warning("secrets_unresolved", extra={"which": "REDDIT_BRIDGE_URL", "trace_id": trace_id})
        if not config.bridge_url or unresolved_url:
            logger.error("REDDIT_BRIDGE_URL is not configured", extra={"trace_id": trace_id})
            return json_response({"error": "Server misconfigured: REDDIT_BRIDGE_URL not set."}, 500, hdrs)

        try:
            body = loads_strict(req.get_body())
        except ValueError:
            logger.info("rejected", extra={"reason": "invalid_json", "trace_id": trace_id})
            return json_response({"error": "Request body must be valid JSON."}, 400, hdrs)

        try:
            payload = BridgePayload.from_body(body)
        except PayloadError as e:
            logger.info("rejected", extra={"reason": "invalid_body", "detail": str(e), "trace_id": trace_id})
            return json_response({"error": "Body must include string fields 'subreddit' and 'query'."}, 400, hdrs)

        started = time.perf_counter()
        upstream = await _post_to_bridge(config, payload)
        elapsed_ms = (time.perf_counter() - started) * 1000
        data = _parse_upstream_body(upstream.text)

        telemetry = {
            "event": "reddit_bridge_call",
            "status": upstream.status_code,
            "elapsed_ms": round(elapsed_ms, 2),
            "subreddit": payload.subreddit,
            "trace_id": trace_id,
        }
        logger.info("reddit_bridge: " + json.dumps(telemetry))

        if not upstream.is_success:
            return json_response(
                {"error": "Upstream bridge error.", "status": upstream.status_code, "detail": data},
                502,
                hdrs,
            )

        return json_response(
            {"ok": True, "bridge_status": upstream.status_code, "bridge_url": config.bridge_url, "data": data},
            200,
            hdrs,
        )
    except Exception as e:
        logger.exception("Unexpected error forwarding to Reddit bridge", extra={"trace_id": trace_id})
        return json_response({"error": "Unexpected server error.", "detail": str(e) or "Unknown error"}, 500, hdrs)

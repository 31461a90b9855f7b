import json
import logging
import re

import requests

from checklist import CHECK_NAMES, SYSTEM_PROMPT, USER_INSTRUCTION
from errors import InvalidAnalysisRequest, UnreadableVerdict, UpstreamUnreachable

logger = logging.getLogger("cannapliant-proxy")

IMAGE_TYPES = ("image/png", "image/jpeg", "image/webp", "image/gif")
DOCUMENT_TYPES = ("application/pdf",)

_FENCE_RE = re.compile(r"```(?:json)?\s*([\s\S]+?)\s*```")
_OBJECT_RE = re.compile(r"\{[\s\S]+\}")


def build_inference_request(image_b64, media_type, model, max_tokens):
    """Wrap an uploaded label in a messages request carrying the checklist prompt."""
    if not image_b64 or not media_type:
        raise InvalidAnalysisRequest()
    media_type = media_type.lower()
    if media_type == "image/jpg":
        media_type = "image/jpeg"

    if media_type in IMAGE_TYPES:
        block_type = "image"
    elif media_type in DOCUMENT_TYPES:
        block_type = "document"
    else:
        raise InvalidAnalysisRequest(f"Unsupported media type: {media_type}")

    return {
        "model": model,
        "max_tokens": max_tokens,
        "system": SYSTEM_PROMPT,
        "messages": [{
            "role": "user",
            "content": [
                {
                    "type": block_type,
                    "source": {
                        "type": "base64",
                        "media_type": media_type,
                        "data": image_b64,
                    },
                },
                {"type": "text", "text": USER_INSTRUCTION},
            ],
        }],
    }


def extract_verdict(message):
    """Pull the JSON verdict out of a model message, tolerating code fences and chatter."""
    blocks = (message.get("content") or []) if isinstance(message, dict) else []
    raw_text = "".join(
        block.get("text") or "" for block in blocks if isinstance(block, dict)
    ).strip()

    json_str = raw_text
    fence = _FENCE_RE.search(json_str)
    if fence:
        json_str = fence.group(1)
    obj = _OBJECT_RE.search(json_str)
    if obj:
        json_str = obj.group(0)

    try:
        result = json.loads(json_str)
    except ValueError:
        raise UnreadableVerdict() from None
    if not isinstance(result, dict):
        raise UnreadableVerdict()

    # The model sometimes omits display names; fill them from the checklist.
    for check in result.get("checks") or []:
        if isinstance(check, dict) and not check.get("name"):
            check["name"] = CHECK_NAMES.get(check.get("id"), check.get("id"))
    return result


def _upstream_error_message(upstream):
    try:
        payload = upstream.json()
    except ValueError:
        return "API error"
    error = payload.get("error") if isinstance(payload, dict) else None
    if isinstance(error, dict) and error.get("message"):
        return error["message"]
    return "API error"


def analyze_label(relay, data, model, max_tokens):
    """Run one label through the model.

    Returns ``(body, status)`` where ``body`` is either the parsed verdict or an
    ``{"error": ...}`` envelope mirroring an upstream failure status.
    """
    data = data or {}
    request_body = build_inference_request(
        data.get("imageBase64"), data.get("mediaType"), model, max_tokens
    )
    upstream = relay.open(json.dumps(request_body).encode("utf-8"), "application/json")
    try:
        if not 200 <= upstream.status_code < 300:
            logger.warning("Analysis upstream returned %s", upstream.status_code)
            return {"error": _upstream_error_message(upstream)}, upstream.status_code
        try:
            message = upstream.json()
        except ValueError:
            raise UnreadableVerdict() from None
    except requests.RequestException as e:
        logger.exception("Failed reading analysis response: %s", e)
        raise UpstreamUnreachable() from e
    finally:
        upstream.close()

    return extract_verdict(message), 200

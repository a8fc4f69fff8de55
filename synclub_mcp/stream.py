"""Collapse a server-sent-event stream into one string."""

import json
import logging
from typing import Any, Dict, Optional

import httpx

from synclub_mcp.client import TRACE_ID_HEADER, classify_envelope
from synclub_mcp.envelope import Envelope
from synclub_mcp.errors import StreamError

logger = logging.getLogger(__name__)

DATA_PREFIX = "data: "


def parse_event_line(line: str) -> Optional[str]:
    """Return the ``data.content`` text carried by one SSE line, if any.

    Lines without the ``data: `` prefix, malformed JSON and events without
    content all yield None.
    """
    if not line.startswith(DATA_PREFIX):
        return None
    try:
        event = json.loads(line[len(DATA_PREFIX):])
    except ValueError:
        logger.debug("Skipping malformed event line: %r", line)
        return None
    if not isinstance(event, dict):
        return None
    data = event.get("data")
    if not isinstance(data, dict):
        return None
    content = data.get("content")
    if not content or not isinstance(content, str):
        return None
    return content


def raise_for_envelope(text: str, trace_id: Optional[str]) -> None:
    """Raise the classified API error if text is a non-success JSON envelope."""
    try:
        body = json.loads(text)
    except ValueError:
        return
    envelope = Envelope.from_body(body)
    if envelope.has_status and not envelope.is_success:
        logger.info(
            "Stream answered with status %s (trace %s)", envelope.status_code, trace_id
        )
        raise classify_envelope(envelope, trace_id)


class StreamAggregator:
    """Reads a streamed POST response and concatenates its content fragments."""

    def __init__(self, client):
        self.client = client

    async def aggregate(self, endpoint: str, payload: Dict[str, Any]) -> str:
        """POST payload to endpoint and return all content fragments joined.

        A reply with no ``data: `` lines at all is read as a plain JSON
        envelope, so an upstream error code is raised instead of returning
        an empty result.

        Raises:
            AuthError, VerificationRequiredError, RequestError: the body is
                an error envelope rather than an event stream
            StreamError: on transport failure or a non-2xx status
        """
        parts = []
        unframed = []
        saw_event = False
        trace_id = None
        try:
            async with self.client.stream(endpoint, json=payload) as response:
                trace_id = response.headers.get(TRACE_ID_HEADER)
                if response.is_error:
                    await response.aread()
                    raise_for_envelope(response.text, trace_id)
                    response.raise_for_status()
                async for line in response.aiter_lines():
                    if not line.startswith(DATA_PREFIX):
                        unframed.append(line)
                        continue
                    saw_event = True
                    content = parse_event_line(line)
                    if content:
                        parts.append(content)
        except httpx.HTTPError as e:
            raise StreamError(f"Stream from {endpoint} failed: {e}", cause=e) from e

        if not saw_event:
            raise_for_envelope("\n".join(unframed), trace_id)

        logger.debug("Aggregated %d fragments from %s", len(parts), endpoint)
        return "".join(parts)

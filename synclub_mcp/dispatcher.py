"""Tool dispatch: validate, build payload, complete, normalize.

Every tool maps to a ToolRoute describing how its payload is built and
which completion strategy turns the backend's answer into text:

- STREAM: aggregate the endpoint's event stream.
- IMMEDIATE: one POST; poll the task handle for text content if needed.
- IMAGE: one POST; poll for image data if needed, then flatten to URLs.
"""

import json
import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Optional

from mcp.types import CallToolResult, TextContent, Tool

from synclub_mcp import payloads
from synclub_mcp.catalog import ENDPOINT_MAP, TOOLS_BY_NAME, ToolDefinition
from synclub_mcp.envelope import Envelope
from synclub_mcp.errors import ConfigurationError, SynclubError, UnknownToolError
from synclub_mcp.images import img_data_to_text
from synclub_mcp.poller import Extractor, TaskPoller, extract_content, extract_images
from synclub_mcp.stream import StreamAggregator

logger = logging.getLogger(__name__)

ERROR_PREFIX = "invocation failed: "

DEFAULT_POLL = "default"
IMAGE_EDIT_POLL = "image_edit"


class Strategy(Enum):
    """How a tool call is completed."""

    STREAM = "stream"
    IMMEDIATE = "immediate"
    IMAGE = "image"


@dataclass(frozen=True)
class ToolRoute:
    """Per-tool dispatch descriptor."""

    build_payload: Callable[[Dict[str, Any]], Dict[str, Any]]
    strategy: Strategy
    extractor: Optional[Extractor] = None
    poll_policy: str = DEFAULT_POLL


ROUTES: Dict[str, ToolRoute] = {
    "gbu_generate_comic_story": ToolRoute(payloads.build_story, Strategy.STREAM),
    "gbu_generate_comic_chapters": ToolRoute(payloads.build_chapters, Strategy.STREAM),
    "gbu_generate_comic_image_prompts": ToolRoute(
        payloads.build_image_prompts, Strategy.STREAM
    ),
    "gbu_edit_comic_story": ToolRoute(
        payloads.build_edit_story, Strategy.STREAM, extract_content
    ),
    "gbu_edit_comic_chapters": ToolRoute(
        payloads.build_edit_chapters, Strategy.STREAM, extract_content
    ),
    "gbu_ugc_tti": ToolRoute(payloads.build_character, Strategy.IMAGE, extract_images),
    "gbu_anime_pose_align": ToolRoute(
        payloads.build_pose_align, Strategy.IMAGE, extract_images
    ),
    "gbu_anime_comic_image": ToolRoute(
        payloads.build_comic_image, Strategy.IMAGE, extract_images
    ),
    "gbu_flux_edit_image": ToolRoute(
        payloads.build_image_edit, Strategy.IMAGE, extract_images, IMAGE_EDIT_POLL
    ),
}

EDIT_TOOLS = ("gbu_edit_comic_story", "gbu_edit_comic_chapters")


def build_routes(edit_streaming: bool = True) -> Dict[str, ToolRoute]:
    """Dispatch table; edit tools fall back to POST + polling when not streaming."""
    routes = dict(ROUTES)
    if not edit_streaming:
        for name in EDIT_TOOLS:
            routes[name] = replace(routes[name], strategy=Strategy.IMMEDIATE)
    return routes


def text_result(text: str) -> CallToolResult:
    return CallToolResult(content=[TextContent(type="text", text=text)], isError=False)


def error_result(message: str) -> CallToolResult:
    return CallToolResult(
        content=[TextContent(type="text", text=f"{ERROR_PREFIX}{message}")],
        isError=True,
    )


def _as_text(value: Any) -> str:
    if isinstance(value, str):
        return value
    return json.dumps(value, ensure_ascii=False)


class ToolDispatcher:
    """Runs one tool invocation to completion and never raises."""

    def __init__(
        self,
        client,
        aggregator: StreamAggregator,
        pollers: Mapping[str, TaskPoller],
        routes: Optional[Mapping[str, ToolRoute]] = None,
        tools: Mapping[str, ToolDefinition] = TOOLS_BY_NAME,
        endpoints: Mapping[str, str] = ENDPOINT_MAP,
    ):
        self.client = client
        self.aggregator = aggregator
        self.pollers = pollers
        self.routes = routes if routes is not None else ROUTES
        self.tools = tools
        self.endpoints = endpoints

    @classmethod
    def from_settings(cls, settings, client) -> "ToolDispatcher":
        return cls(
            client=client,
            aggregator=StreamAggregator(client),
            pollers={
                DEFAULT_POLL: TaskPoller(client, settings.default_poll_policy),
                IMAGE_EDIT_POLL: TaskPoller(client, settings.image_edit_poll_policy),
            },
            routes=build_routes(settings.edit_streaming),
        )

    def list_tools(self) -> List[Tool]:
        return [tool.to_tool() for tool in self.tools.values()]

    async def dispatch(
        self, name: str, arguments: Optional[Dict[str, Any]] = None
    ) -> CallToolResult:
        """Invoke a tool; failures come back as error results."""
        try:
            text = await self._invoke(name, arguments or {})
        except SynclubError as e:
            logger.warning("Tool %s failed: %s", name, e.message)
            return error_result(e.message)
        except Exception as e:
            logger.exception("Tool %s crashed", name)
            return error_result(str(e))
        return text_result(text)

    async def _invoke(self, name: str, arguments: Dict[str, Any]) -> str:
        if name not in self.tools:
            raise UnknownToolError(name)
        endpoint = self.endpoints.get(name)
        if not endpoint:
            raise ConfigurationError(f"No endpoint mapping for tool {name}", field=name)
        route = self.routes.get(name)
        if route is None:
            raise ConfigurationError(f"No dispatch route for tool {name}", field=name)

        payload = route.build_payload(arguments)
        logger.info("Calling %s via %s (%s)", name, endpoint, route.strategy.value)

        if route.strategy is Strategy.STREAM:
            return await self.aggregator.aggregate(endpoint, payload)
        return await self._complete(route, endpoint, payload)

    async def _complete(
        self, route: ToolRoute, endpoint: str, payload: Dict[str, Any]
    ) -> str:
        body = await self.client.post(endpoint, json=payload)
        envelope = Envelope.from_body(body)

        if route.strategy is Strategy.IMAGE:
            img_data = envelope.img_data
            if not img_data and envelope.task_id:
                img_data = await self._poll(route, envelope.task_id)
            text = img_data_to_text(img_data)
            if text:
                return text
        else:
            content = envelope.content
            if not content and envelope.task_id:
                content = await self._poll(route, envelope.task_id)
            if content:
                return _as_text(content)

        return _as_text(body)

    async def _poll(self, route: ToolRoute, task_id: str) -> Any:
        poller = self.pollers.get(route.poll_policy)
        if poller is None:
            raise ConfigurationError(
                f"No poll policy named {route.poll_policy}", field=route.poll_policy
            )
        extractor = route.extractor or extract_content
        logger.info("Polling task %s", task_id)
        return await poller.poll_until_done(task_id, extractor)

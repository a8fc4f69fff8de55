"""Bounded polling of asynchronous backend tasks."""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Optional

from synclub_mcp.catalog import QUERY_TASK_ENDPOINT
from synclub_mcp.config import PollPolicy
from synclub_mcp.envelope import Envelope
from synclub_mcp.errors import PollTimeoutError, TaskFailedError

logger = logging.getLogger(__name__)

Extractor = Callable[[Envelope], Any]


def extract_content(envelope: Envelope) -> Optional[str]:
    """Success once the task reports non-empty text content."""
    return envelope.content


def extract_images(envelope: Envelope) -> Optional[list]:
    """Success once the task reports a non-empty image list."""
    return envelope.img_data or None


class TaskPoller:
    """Queries the task status endpoint until the task settles.

    Each attempt sleeps ``policy.interval`` seconds, then posts
    ``{"task_id": ...}``. The pending code (2200) keeps the loop going; any
    other nonzero code ends it with TaskFailedError.
    """

    def __init__(
        self,
        client,
        policy: PollPolicy,
        endpoint: str = QUERY_TASK_ENDPOINT,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        self.client = client
        self.policy = policy
        self.endpoint = endpoint
        self._sleep = sleep

    async def poll_until_done(self, task_id: str, extract_success: Extractor) -> Any:
        """Poll task_id until extract_success returns something truthy.

        Args:
            task_id: Backend task handle
            extract_success: Called with each status Envelope; a non-empty
                return value ends polling and becomes the result

        Raises:
            TaskFailedError: backend reported a terminal failure
            PollTimeoutError: attempts exhausted
        """
        for attempt in range(1, self.policy.max_attempts + 1):
            await self._sleep(self.policy.interval)
            body = await self.client.post(
                self.endpoint, json={"task_id": task_id}, check_status=False
            )
            envelope = Envelope.from_body(body)

            if envelope.is_failure:
                logger.warning(
                    "Task %s failed on attempt %d: %s %s",
                    task_id,
                    attempt,
                    envelope.status_code,
                    envelope.message,
                )
                raise TaskFailedError(
                    envelope.message or "Task failed",
                    task_id=task_id,
                    status_code=envelope.status_code,
                )

            result = extract_success(envelope)
            if result:
                logger.info("Task %s completed after %d attempts", task_id, attempt)
                return result

            logger.debug("Task %s pending (attempt %d)", task_id, attempt)

        raise PollTimeoutError(task_id, self.policy.max_attempts)

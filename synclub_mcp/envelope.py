"""Normalized view of upstream response bodies.

The comic API is inconsistent about where it puts its status: the gateway
wraps most answers in ``base_resp.status_code``, some endpoints put
``status_code`` at the top level, and the task endpoints use ``errno`` /
``err_msg``. Image lists show up either under ``data.img_data`` or at the
top level. ``Envelope.from_body`` reconciles all of these once, so the rest
of the code only ever asks an Envelope.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

SUCCESS_STATUS = 0
PENDING_STATUS = 2200

_CODE_KEYS = ("status_code", "errno")
_MESSAGE_KEYS = ("status_msg", "err_msg", "msg")


def _first_present(source: Dict[str, Any], keys) -> Any:
    for key in keys:
        if source.get(key) is not None:
            return source[key]
    return None


def _as_code(value: Any) -> Optional[int]:
    if value is None:
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


@dataclass
class Envelope:
    """Backend response with status, message and payload pulled out."""

    body: Any
    status_code: Optional[int] = None
    message: Optional[str] = None
    data: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_body(cls, body: Any) -> "Envelope":
        if not isinstance(body, dict):
            return cls(body=body)

        base_resp = body.get("base_resp")
        if not isinstance(base_resp, dict):
            base_resp = {}

        status_code = _first_present(base_resp, ("status_code",))
        if status_code is None:
            status_code = _first_present(body, _CODE_KEYS)

        message = _first_present(base_resp, ("status_msg",))
        if message is None:
            message = _first_present(body, _MESSAGE_KEYS)

        data = body.get("data")
        return cls(
            body=body,
            status_code=_as_code(status_code),
            message=message,
            data=data if isinstance(data, dict) else {},
        )

    @property
    def has_status(self) -> bool:
        return self.status_code is not None

    @property
    def is_success(self) -> bool:
        return self.status_code == SUCCESS_STATUS

    @property
    def is_pending(self) -> bool:
        return self.status_code == PENDING_STATUS

    @property
    def is_failure(self) -> bool:
        """Status present, nonzero and not the pending sentinel."""
        return self.has_status and not self.is_success and not self.is_pending

    @property
    def task_id(self) -> Optional[str]:
        task_id = self.data.get("task_id")
        if task_id is None and isinstance(self.body, dict):
            task_id = self.body.get("task_id")
        return str(task_id) if task_id not in (None, "") else None

    @property
    def content(self) -> Optional[str]:
        content = self.data.get("content")
        return content or None

    @property
    def img_data(self) -> List[Any]:
        img_data = self.data.get("img_data")
        if img_data is None and isinstance(self.body, dict):
            img_data = self.body.get("img_data")
        if not img_data:
            return []
        return img_data if isinstance(img_data, list) else [img_data]

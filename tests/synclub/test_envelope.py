"""Tests for envelope normalization."""

from synclub_mcp.envelope import PENDING_STATUS, Envelope


class TestStatusReconciliation:
    """status_code / errno / base_resp all land in one place."""

    def test_base_resp_status(self):
        env = Envelope.from_body({"base_resp": {"status_code": 0, "status_msg": "ok"}})
        assert env.status_code == 0
        assert env.message == "ok"
        assert env.is_success

    def test_base_resp_wins_over_top_level(self):
        env = Envelope.from_body(
            {"base_resp": {"status_code": 1004, "status_msg": "auth"}, "errno": 0}
        )
        assert env.status_code == 1004
        assert env.message == "auth"

    def test_errno_and_err_msg(self):
        env = Envelope.from_body({"errno": 500, "err_msg": "render failed"})
        assert env.status_code == 500
        assert env.message == "render failed"
        assert env.is_failure

    def test_top_level_status_code(self):
        env = Envelope.from_body({"status_code": 7, "status_msg": "x"})
        assert env.status_code == 7

    def test_msg_fallback(self):
        env = Envelope.from_body({"errno": 3, "msg": "fallback"})
        assert env.message == "fallback"

    def test_string_code_coerced(self):
        env = Envelope.from_body({"errno": "2200"})
        assert env.status_code == PENDING_STATUS

    def test_pending_is_not_failure(self):
        env = Envelope.from_body({"errno": PENDING_STATUS})
        assert env.is_pending
        assert not env.is_failure
        assert not env.is_success

    def test_missing_status(self):
        """No status anywhere: neither success nor failure."""
        env = Envelope.from_body({"data": {"content": "hi"}})
        assert not env.has_status
        assert not env.is_failure

    def test_non_mapping_body(self):
        env = Envelope.from_body("plain text")
        assert env.body == "plain text"
        assert env.status_code is None
        assert env.data == {}


class TestPayloadAccessors:
    """task_id, content and img_data lookups."""

    def test_task_id_under_data(self):
        env = Envelope.from_body({"errno": 0, "data": {"task_id": 99}})
        assert env.task_id == "99"

    def test_task_id_top_level(self):
        env = Envelope.from_body({"task_id": "abc"})
        assert env.task_id == "abc"

    def test_empty_task_id(self):
        env = Envelope.from_body({"data": {"task_id": ""}})
        assert env.task_id is None

    def test_content(self):
        env = Envelope.from_body({"data": {"content": "story"}})
        assert env.content == "story"

    def test_empty_content_is_none(self):
        env = Envelope.from_body({"data": {"content": ""}})
        assert env.content is None

    def test_img_data_nested(self):
        groups = [{"images": [{"url": "a"}]}]
        env = Envelope.from_body({"data": {"img_data": groups}})
        assert env.img_data == groups

    def test_img_data_top_level(self):
        groups = [{"images": [{"url": "a"}]}]
        env = Envelope.from_body({"img_data": groups})
        assert env.img_data == groups

    def test_img_data_missing(self):
        assert Envelope.from_body({"data": {}}).img_data == []

    def test_non_dict_data_ignored(self):
        env = Envelope.from_body({"data": ["x"]})
        assert env.data == {}

"""Tests for the static tool catalog."""

from mcp.types import Tool

from synclub_mcp.catalog import (
    API_PREFIX,
    ENDPOINT_MAP,
    QUERY_TASK_ENDPOINT,
    TOOLS,
    TOOLS_BY_NAME,
    ToolDefinition,
    ToolField,
)
from synclub_mcp.dispatcher import ROUTES


class TestCatalogIntegrity:
    """Every tool is fully wired."""

    def test_names_unique(self):
        assert len(TOOLS_BY_NAME) == len(TOOLS) == 9

    def test_every_tool_has_endpoint(self):
        assert set(ENDPOINT_MAP) == set(TOOLS_BY_NAME)

    def test_every_tool_has_route(self):
        assert set(ROUTES) == set(TOOLS_BY_NAME)

    def test_endpoints_under_prefix(self):
        for path in ENDPOINT_MAP.values():
            assert path.startswith(API_PREFIX + "/")
        assert QUERY_TASK_ENDPOINT == f"{API_PREFIX}/query_task"

    def test_backend_paths(self):
        tails = {name: path.rsplit("/", 1)[1] for name, path in ENDPOINT_MAP.items()}
        assert tails == {
            "gbu_generate_comic_story": "generate_script",
            "gbu_generate_comic_chapters": "generate_storyboards",
            "gbu_generate_comic_image_prompts": "prompt_format",
            "gbu_edit_comic_story": "edit_script",
            "gbu_edit_comic_chapters": "edit_storyboards",
            "gbu_ugc_tti": "generate_role",
            "gbu_anime_pose_align": "pose_straighten",
            "gbu_anime_comic_image": "generate_comic",
            "gbu_flux_edit_image": "edit",
        }


class TestToolDefinition:
    """Schema rendering."""

    def test_input_schema(self):
        tool = ToolDefinition(
            name="t",
            description="d",
            fields=(
                ToolField("a", "string", "first", required=True),
                ToolField("b", "number", default=4),
            ),
        )
        assert tool.input_schema == {
            "type": "object",
            "properties": {
                "a": {"type": "string", "description": "first"},
                "b": {"type": "number", "default": 4},
            },
            "required": ["a"],
        }

    def test_field_order_preserved(self):
        tool = TOOLS_BY_NAME["gbu_anime_comic_image"]
        assert list(tool.input_schema["properties"])[:3] == [
            "prompt",
            "scene_type",
            "char1_image",
        ]

    def test_chapter_default(self):
        field = TOOLS_BY_NAME["gbu_generate_comic_chapters"].field("chapter_num")
        assert field.has_default
        assert field.default == 4
        assert TOOLS_BY_NAME["gbu_generate_comic_chapters"].field("missing") is None

    def test_structured_json_fields_accept_objects(self):
        schema = TOOLS_BY_NAME["gbu_generate_comic_chapters"].input_schema
        assert schema["properties"]["chars_info"]["type"] == ["string", "object", "array"]
        assert schema["properties"]["input_novel"]["type"] == "string"

    def test_required_edit_prompt(self):
        assert "edit_prompt" in TOOLS_BY_NAME["gbu_edit_comic_story"].required

    def test_to_tool(self):
        tool = TOOLS_BY_NAME["gbu_flux_edit_image"].to_tool()
        assert isinstance(tool, Tool)
        assert tool.name == "gbu_flux_edit_image"
        assert tool.inputSchema["required"] == ["image_url", "image_prompt"]

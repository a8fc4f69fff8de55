"""Static tool catalog: names, descriptions, argument schemas and backend paths."""

from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple, Union

from mcp.types import Tool

API_PREFIX = "/pulsar/mcp/inner/comic"

_NO_DEFAULT = object()

# String arguments that also accept structured JSON
JSON_TYPES = ("string", "object", "array")


@dataclass(frozen=True)
class ToolField:
    """One named tool argument."""

    name: str
    type: Union[str, Tuple[str, ...]]
    description: str = ""
    required: bool = False
    default: Any = _NO_DEFAULT

    @property
    def has_default(self) -> bool:
        return self.default is not _NO_DEFAULT

    def to_schema(self) -> Dict[str, Any]:
        schema: Dict[str, Any] = {
            "type": list(self.type) if isinstance(self.type, tuple) else self.type
        }
        if self.description:
            schema["description"] = self.description
        if self.has_default:
            schema["default"] = self.default
        return schema


@dataclass(frozen=True)
class ToolDefinition:
    """An externally invocable tool and its ordered argument fields."""

    name: str
    description: str
    fields: Tuple[ToolField, ...] = ()

    @property
    def required(self) -> Tuple[str, ...]:
        return tuple(f.name for f in self.fields if f.required)

    def field(self, name: str) -> Optional[ToolField]:
        return next((f for f in self.fields if f.name == name), None)

    @property
    def input_schema(self) -> Dict[str, Any]:
        return {
            "type": "object",
            "properties": {f.name: f.to_schema() for f in self.fields},
            "required": list(self.required),
        }

    def to_tool(self) -> Tool:
        return Tool(
            name=self.name,
            description=self.description,
            inputSchema=self.input_schema,
        )


CHARS_INFO_DESC = (
    "Character definitions as JSON (string or structured): names, genders and "
    "appearance of the story's characters"
)
MODEL_STYLE_DESC = "Rendering style name understood by the image model"
GENDER_DESC = "Character gender"


TOOLS: Tuple[ToolDefinition, ...] = (
    ToolDefinition(
        name="gbu_generate_comic_story",
        description="Generate a comic story script from a story theme",
        fields=(
            ToolField("topic_input", "string", "Story theme or topic", required=True),
        ),
    ),
    ToolDefinition(
        name="gbu_generate_comic_chapters",
        description="Split a comic story into chapters (storyboards)",
        fields=(
            ToolField("input_novel", "string", "Story script to split", required=True),
            ToolField("chars_info", JSON_TYPES, CHARS_INFO_DESC, required=True),
            ToolField("chapter_num", "number", "Number of chapters", default=4),
        ),
    ),
    ToolDefinition(
        name="gbu_generate_comic_image_prompts",
        description="Generate image prompts for the panels of a comic chapter",
        fields=(
            ToolField("input_chapters", JSON_TYPES, "Chapter JSON", required=True),
            ToolField("chars_info", JSON_TYPES, CHARS_INFO_DESC, required=True),
        ),
    ),
    ToolDefinition(
        name="gbu_edit_comic_story",
        description="Rewrite a comic story script following an edit instruction",
        fields=(
            ToolField("edit_prompt", "string", "What to change", required=True),
            ToolField("input_story", JSON_TYPES, "Story JSON", required=True),
        ),
    ),
    ToolDefinition(
        name="gbu_edit_comic_chapters",
        description="Rewrite comic chapters following an edit instruction",
        fields=(
            ToolField("edit_prompt", "string", "What to change", required=True),
            ToolField("input_chapters", JSON_TYPES, "Chapters JSON", required=True),
        ),
    ),
    ToolDefinition(
        name="gbu_ugc_tti",
        description="Generate an anime character image from a text prompt",
        fields=(
            ToolField("prompt", "string", "Character description", required=True),
            ToolField("gender", "number", GENDER_DESC, required=True),
            ToolField("model_style", "string", MODEL_STYLE_DESC, required=True),
        ),
    ),
    ToolDefinition(
        name="gbu_anime_pose_align",
        description="Straighten a character image into a standard pose",
        fields=(
            ToolField("image_url", "string", "Character image URL", required=True),
        ),
    ),
    ToolDefinition(
        name="gbu_anime_comic_image",
        description="Render a comic panel image with one or two characters",
        fields=(
            ToolField("prompt", "string", "Panel description", required=True),
            ToolField("scene_type", "string", "Scene type of the panel", required=True),
            ToolField("char1_image", "string", "First character image URL", required=True),
            ToolField("char2_image", "string", "Second character image URL"),
            ToolField("char1_gender", "string", GENDER_DESC, required=True),
            ToolField("char2_gender", "string", GENDER_DESC),
            ToolField("model_style", "string", MODEL_STYLE_DESC, required=True),
        ),
    ),
    ToolDefinition(
        name="gbu_flux_edit_image",
        description="Edit an image following a text prompt",
        fields=(
            ToolField("image_url", "string", "Image to edit", required=True),
            ToolField("image_prompt", "string", "Edit instruction", required=True),
        ),
    ),
)

TOOLS_BY_NAME: Dict[str, ToolDefinition] = {tool.name: tool for tool in TOOLS}

ENDPOINT_MAP: Dict[str, str] = {
    "gbu_generate_comic_story": f"{API_PREFIX}/generate_script",
    "gbu_generate_comic_chapters": f"{API_PREFIX}/generate_storyboards",
    "gbu_generate_comic_image_prompts": f"{API_PREFIX}/prompt_format",
    "gbu_edit_comic_story": f"{API_PREFIX}/edit_script",
    "gbu_edit_comic_chapters": f"{API_PREFIX}/edit_storyboards",
    "gbu_ugc_tti": f"{API_PREFIX}/generate_role",
    "gbu_anime_pose_align": f"{API_PREFIX}/pose_straighten",
    "gbu_anime_comic_image": f"{API_PREFIX}/generate_comic",
    "gbu_flux_edit_image": f"{API_PREFIX}/edit",
}

# Shared status endpoint for every asynchronous tool
QUERY_TASK_ENDPOINT = f"{API_PREFIX}/query_task"

"""Per-tool request payload builders.

Each builder takes the raw tool arguments and returns the JSON body the
backend endpoint expects, raising ValidationError for missing arguments.
"""

import json
from typing import Any, Dict

from synclub_mcp.catalog import TOOLS_BY_NAME
from synclub_mcp.errors import ValidationError

Args = Dict[str, Any]

DEFAULT_CHAPTER_NUM = TOOLS_BY_NAME["gbu_generate_comic_chapters"].field("chapter_num").default


def is_missing(value: Any) -> bool:
    return value is None or value == ""


def require(args: Args, *names: str) -> None:
    """Raise ValidationError naming the first missing argument."""
    for name in names:
        if is_missing(args.get(name)):
            raise ValidationError(name)


def as_json_string(value: Any) -> str:
    """Strings pass through; structured values are serialized."""
    if isinstance(value, str):
        return value
    return json.dumps(value, ensure_ascii=False)


def build_story(args: Args) -> Args:
    topic_input = args.get("topic_input")
    if is_missing(topic_input):
        topic_input = args.get("theme")
    if is_missing(topic_input):
        raise ValidationError("topic_input")
    return {"topic_input": topic_input}


def build_chapters(args: Args) -> Args:
    require(args, "input_novel", "chars_info")
    chapter_num = args.get("chapter_num")
    if is_missing(chapter_num):
        chapter_num = args.get("chapters_num")
    return {
        "input_novel": args["input_novel"],
        "chars_info": as_json_string(args["chars_info"]),
        "chapter_num": DEFAULT_CHAPTER_NUM if is_missing(chapter_num) else chapter_num,
    }


def build_image_prompts(args: Args) -> Args:
    require(args, "input_chapters", "chars_info")
    return {
        "input_chapter": as_json_string(args["input_chapters"]),
        "chars_info": as_json_string(args["chars_info"]),
    }


def build_edit_story(args: Args) -> Args:
    require(args, "edit_prompt", "input_story")
    return {
        "edit_prompt": args["edit_prompt"],
        "input_script": as_json_string(args["input_story"]),
    }


def build_edit_chapters(args: Args) -> Args:
    require(args, "edit_prompt", "input_chapters")
    return {
        "edit_prompt": args["edit_prompt"],
        "input_storyboards": as_json_string(args["input_chapters"]),
    }


def build_character(args: Args) -> Args:
    require(args, "prompt", "gender", "model_style")
    return {
        "prompt": args["prompt"],
        "gender": args["gender"],
        "model_style": args["model_style"],
    }


def build_pose_align(args: Args) -> Args:
    require(args, "image_url")
    return {"image_url": args["image_url"]}


def build_comic_image(args: Args) -> Args:
    require(args, "prompt", "scene_type", "char1_image", "char1_gender", "model_style")
    payload = {
        key: args[key]
        for key in ("prompt", "scene_type", "char1_image", "char1_gender", "model_style")
    }
    for key in ("char2_image", "char2_gender"):
        if not is_missing(args.get(key)):
            payload[key] = args[key]
    return payload


def build_image_edit(args: Args) -> Args:
    require(args, "image_url", "image_prompt")
    return {"image_url": args["image_url"], "edit_prompt": args["image_prompt"]}

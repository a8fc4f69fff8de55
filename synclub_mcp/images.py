"""Turn backend image payloads into plain URL text."""

from typing import Any, Iterable, List, Optional


def image_url(image: Any) -> Optional[str]:
    """Preferred URL of one image entry: webp, then url, then the entry itself."""
    if isinstance(image, dict):
        return image.get("webp") or image.get("url") or None
    if isinstance(image, str) and image:
        return image
    return None


def flatten_images(images: Iterable[Any]) -> str:
    """Newline-join the preferred URL of every image entry."""
    urls = [url for url in (image_url(image) for image in images) if url]
    return "\n".join(urls)


def collect_images(img_data: Iterable[Any]) -> List[Any]:
    """Pull image entries out of ``img_data`` groups.

    Each group normally carries an ``images`` list; a group without one is
    treated as an image entry in its own right.
    """
    images: List[Any] = []
    for group in img_data or []:
        if isinstance(group, dict) and "images" in group:
            images.extend(group.get("images") or [])
        else:
            images.append(group)
    return images


def img_data_to_text(img_data: Iterable[Any]) -> str:
    return flatten_images(collect_images(img_data))

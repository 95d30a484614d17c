import re
from typing import Any, List

_NON_SLUG_RE = re.compile(r"[^a-z0-9]+")
MAX_SLUG_LENGTH = 200


def generate_slug(title: str) -> str:
    slug = _NON_SLUG_RE.sub("-", (title or "").lower()).strip("-")
    return slug[:MAX_SLUG_LENGTH]


def normalize_tags(value: Any) -> List[str]:
    """Accept a list or a comma separated string of tags."""
    if value is None:
        return []
    if isinstance(value, str):
        items = value.split(",")
    elif isinstance(value, (list, tuple)):
        items = value
    else:
        raise ValueError("tags must be a list or a comma separated string")
    return [str(item).strip() for item in items if str(item).strip()]

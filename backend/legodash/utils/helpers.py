"""Utility helper functions."""
from typing import Dict, Any, List, Optional, Sequence, Tuple

from ..models.level import BrickColor, Stand, Task


def validate_level_json(level_json: Dict[str, Any]) -> Tuple[bool, Optional[str]]:
    """
    Validate exported level definition structure.

    Args:
        level_json: Level data to validate.

    Returns:
        Tuple of (is_valid, error_message).
    """
    for key in ("stands", "tasks"):
        if key not in level_json:
            return False, f"Missing '{key}' field"
        if not isinstance(level_json[key], list):
            return False, f"'{key}' must be an array"

    for i, stand in enumerate(level_json["stands"]):
        if not isinstance(stand, dict):
            return False, f"Stand {i} must be an object"
        bricks = stand.get("bricks")
        if not isinstance(bricks, list):
            return False, f"Stand {i} missing 'bricks' array"
        for brick in bricks:
            try:
                BrickColor.parse(brick)
            except ValueError as e:
                return False, f"Stand {i}: {e}"

    for i, task in enumerate(level_json["tasks"]):
        if not isinstance(task, dict):
            return False, f"Task {i} must be an object"
        if "color" not in task:
            return False, f"Task {i} missing 'color' field"
        try:
            BrickColor.parse(task["color"])
        except ValueError as e:
            return False, f"Task {i}: {e}"
        count = task.get("required_count", 1)
        if not isinstance(count, int) or count < 1:
            return False, f"Task {i} 'required_count' must be a positive integer"

    return True, None


def parse_stands(raw: Sequence[Sequence[Any]]) -> List[Stand]:
    """Convert color names (bottom to top) into stands."""
    return [[BrickColor.parse(brick) for brick in stand] for stand in raw]


def parse_tasks(raw: Sequence[Any]) -> List[Task]:
    """Convert task dicts or (color, count) pairs into tasks."""
    tasks = []
    for item in raw:
        if isinstance(item, dict):
            color, count = item["color"], item.get("required_count", 1)
        elif hasattr(item, "color"):
            color, count = item.color, item.required_count
        else:
            color, count = item
        tasks.append(Task(color=BrickColor.parse(color), required_count=int(count)))
    return tasks


def level_from_json(level_json: Dict[str, Any]) -> Tuple[List[Stand], List[Task]]:
    """
    Read stands and tasks back from an exported level definition.

    Raises:
        ValueError: If the structure is invalid.
    """
    ok, error = validate_level_json(level_json)
    if not ok:
        raise ValueError(error)
    stands = parse_stands([stand["bricks"] for stand in level_json["stands"]])
    return stands, parse_tasks(level_json["tasks"])


def format_stand(stand: Stand) -> str:
    """Short bottom-to-top rendering, e.g. 'B B R Y'."""
    return " ".join(color.value[0] for color in stand)

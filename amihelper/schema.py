from typing import Any, Dict, List

REQUIRED_STR_FIELDS = ["Name", "Value"]


def _is_non_empty_str(v: Any) -> bool:
    return isinstance(v, str) and v.strip() != ""


def validate_parameter(data: Dict[str, Any]) -> List[str]:
    """
    Returns a list of validation error messages for one parameter record.
    Empty list means valid.
    """
    if not isinstance(data, dict):
        return ["Parameter record must be an object"]

    errors: List[str] = []
    for f in REQUIRED_STR_FIELDS:
        if f not in data:
            errors.append(f"Missing required field: {f}")
        elif not _is_non_empty_str(data[f]):
            errors.append(f"Field '{f}' must be a non-empty string")

    if _is_non_empty_str(data.get("Name")) and not data["Name"].startswith("/"):
        errors.append("Field 'Name' must be an absolute parameter path")

    return errors

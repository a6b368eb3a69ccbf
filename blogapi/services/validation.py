"""
Blog API — Request Payload Validation
=======================================

What:  Pure functions that check create/update payloads and shape them into
       storage fields.
How:   `find_*_violations` return a list of human-readable messages in the
       order the checks run. Callers reject the request on the first entry
       and only reach storage when the list is empty.

Presence rules:
    title, content:  must be strings with at least one character
    author:          must be an object whose lastName is a non-empty string;
                     firstName is optional (string or null) and defaults to ""
"""

from typing import Any, Dict, List, Mapping

REQUIRED_FIELDS = ("title", "author", "content")
UPDATEABLE_FIELDS = ("title", "author", "content")

MISSING_LAST_NAME_ON_CREATE = (
    "The author fields must include lastName. Please add. "
    "(If the author has but one name, put it in the lastName field "
    "and leave out the firstName field.)"
)
MISSING_LAST_NAME_ON_UPDATE = (
    "To update 'author,' you must include 'lastName.' Record not updated."
)
INVALID_FIRST_NAME_ON_CREATE = (
    "The author field 'firstName' must be text when given. Please fix."
)
INVALID_FIRST_NAME_ON_UPDATE = (
    "The author field 'firstName' must be text when given. Record not updated."
)


def _is_filled_string(value: Any) -> bool:
    return isinstance(value, str) and len(value) > 0


def _has_last_name(author: Any) -> bool:
    return isinstance(author, Mapping) and _is_filled_string(author.get("lastName"))


def _has_valid_first_name(author: Mapping[str, Any]) -> bool:
    first_name = author.get("firstName")
    return first_name is None or isinstance(first_name, str)


def find_create_violations(payload: Mapping[str, Any]) -> List[str]:
    """
    Check a POST /blogs body.

    Returns an empty list when the payload can be persisted.
    """
    violations: List[str] = []
    for field in REQUIRED_FIELDS:
        value = payload.get(field)
        if field == "author":
            if not isinstance(value, Mapping):
                violations.append(
                    f"The field '{field}' is required and cannot be blank. Please add."
                )
            elif not _has_last_name(value):
                violations.append(MISSING_LAST_NAME_ON_CREATE)
            elif not _has_valid_first_name(value):
                violations.append(INVALID_FIRST_NAME_ON_CREATE)
        elif not _is_filled_string(value):
            violations.append(
                f"The field '{field}' is required and cannot be blank. Please add."
            )
    return violations


def find_update_violations(path_id: str, payload: Mapping[str, Any]) -> List[str]:
    """
    Check a PUT /blogs/{id} body against the path id.

    The id check comes first; field checks only cover fields that are present.
    """
    violations: List[str] = []
    body_id = payload.get("id")
    if not (path_id and _is_filled_string(body_id) and path_id == body_id):
        violations.append(
            f"Error: Request path ID ({path_id}) and request body ID ({body_id}) "
            "must match (and not be missing)"
        )

    for field in UPDATEABLE_FIELDS:
        if field not in payload:
            continue
        if field == "author":
            if not _has_last_name(payload[field]):
                violations.append(MISSING_LAST_NAME_ON_UPDATE)
            elif not _has_valid_first_name(payload[field]):
                violations.append(INVALID_FIRST_NAME_ON_UPDATE)
        elif not _is_filled_string(payload[field]):
            violations.append(f"The field '{field}' cannot be blank. Record not updated.")
    return violations


def build_new_post(payload: Mapping[str, Any]) -> Dict[str, Any]:
    """Storage fields for a validated create payload."""
    author = payload["author"]
    return {
        "title": payload["title"],
        "author": {
            "firstName": author.get("firstName") or "",
            "lastName": author["lastName"],
        },
        "content": payload["content"],
    }


def build_update(payload: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Storage fields for a validated update payload.

    Only updateable fields present in the payload are returned. The author
    entry keeps just the name keys the client sent, so the service can merge
    it into the stored author.
    """
    changes: Dict[str, Any] = {}
    for field in UPDATEABLE_FIELDS:
        if field not in payload:
            continue
        if field == "author":
            author = payload[field]
            changes[field] = {
                key: author[key] for key in ("firstName", "lastName") if key in author
            }
        else:
            changes[field] = payload[field]
    return changes

"""Helpers for digging values out of hh.ru payloads."""

from typing import Any


def safe_get(data: Any, *keys: str, default: Any = None) -> Any:
    """Safely get nested values from a dictionary."""
    result = data
    for key in keys:
        if isinstance(result, dict):
            result = result.get(key)
        else:
            return default
    return result if result is not None else default


def find_named(items: Any, name: str) -> dict | None:
    """Return the first dict in ``items`` whose ``name`` equals ``name``."""
    if not isinstance(items, list):
        return None
    return next(
        (item for item in items if isinstance(item, dict) and item.get("name") == name),
        None,
    )


def find_refusal_url(
    negotiation: dict, action_name: str, template_name: str
) -> str | None:
    """Return the quick-refusal template URL offered for a negotiation.

    Looks for the action called ``action_name`` and, inside it, the template
    called ``template_name``. Returns None if either is missing.
    """
    action = find_named(negotiation.get("actions"), action_name)
    if action is None:
        return None

    template = find_named(action.get("templates"), template_name)
    if template is None:
        return None

    return template.get("url") or None


def first_contact(resume: dict, contact_type: str) -> str | None:
    """Return the first contact value of the given type id from a resume."""
    return next(
        (
            c.get("value")
            for c in resume.get("contact") or []
            if isinstance(c, dict) and safe_get(c, "type", "id") == contact_type
        ),
        None,
    )

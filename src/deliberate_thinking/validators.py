"""
Validators - Turn the raw MCP argument bag into a typed ThoughtRecord.

Checks run in a fixed order and stop at the first bad field, so the caller
always gets exactly one field name back. Nothing here touches the ledger.
"""
from typing import Any, Mapping, Optional

from .thought_types import ThoughtRecord


class ThoughtValidationError(ValueError):
    """A required argument is missing or an argument has the wrong type/range."""

    def __init__(self, field: str, message: str):
        self.field = field
        self.message = message
        super().__init__(f"Invalid or missing field '{field}': {message}")


_MISSING = object()


def _is_int(value: Any) -> bool:
    # bool is a subclass of int, but JSON true/false are not thought numbers
    return isinstance(value, int) and not isinstance(value, bool)


def _require_text(raw: Mapping, name: str) -> str:
    value = raw.get(name, _MISSING)
    if value is _MISSING or value is None:
        raise ThoughtValidationError(name, "is required")
    if not isinstance(value, str):
        raise ThoughtValidationError(name, "must be a string")
    if not value:
        raise ThoughtValidationError(name, "must not be empty")
    return value


def _require_bool(raw: Mapping, name: str) -> bool:
    value = raw.get(name, _MISSING)
    if value is _MISSING or value is None:
        raise ThoughtValidationError(name, "is required")
    if not isinstance(value, bool):
        raise ThoughtValidationError(name, "must be a boolean")
    return value


def _require_positive_int(raw: Mapping, name: str) -> int:
    value = raw.get(name, _MISSING)
    if value is _MISSING or value is None:
        raise ThoughtValidationError(name, "is required")
    if not _is_int(value):
        raise ThoughtValidationError(name, "must be an integer")
    if value < 1:
        raise ThoughtValidationError(name, "must be at least 1")
    return value


def _optional(raw: Mapping, name: str, check) -> Optional[Any]:
    """Run a required-field check only when the key carries a value."""
    if raw.get(name) is None:
        return None
    return check(raw, name)


def validate_thought_arguments(raw: Optional[Mapping[str, Any]]) -> ThoughtRecord:
    """
    Validate a tool-call argument bag.

    Args:
        raw: Arguments as decoded by the MCP framework (camelCase keys).
             None is treated as an empty mapping. Unknown keys are ignored.

    Returns:
        A fully typed ThoughtRecord

    Raises:
        ThoughtValidationError: naming the first offending field
    """
    if raw is None:
        raw = {}
    if not isinstance(raw, Mapping):
        raise ThoughtValidationError("thought", "arguments must be an object")

    content = _require_text(raw, "thought")
    next_thought_needed = _require_bool(raw, "nextThoughtNeeded")
    thought_number = _require_positive_int(raw, "thoughtNumber")
    total_thoughts = _require_positive_int(raw, "totalThoughts")

    # No cross-field rules: isRevision without revisesThought is accepted
    return ThoughtRecord(
        content=content,
        thought_number=thought_number,
        total_thoughts=total_thoughts,
        next_thought_needed=next_thought_needed,
        is_revision=_optional(raw, "isRevision", _require_bool),
        revises_thought=_optional(raw, "revisesThought", _require_positive_int),
        branch_from_thought=_optional(raw, "branchFromThought", _require_positive_int),
        branch_id=_optional(raw, "branchId", _require_text),
        needs_more_thoughts=_optional(raw, "needsMoreThoughts", _require_bool),
    )

import json
from textwrap import dedent
from typing import Any, TypeVar

from pydantic import BaseModel, TypeAdapter

T = TypeVar("T", bound=BaseModel)


def object_in_text_instructions(object_type: type[BaseModel]) -> str:
    """Return instructions for responding with a single JSON object of the given type."""

    json_schema: dict[str, Any] = object_type.model_json_schema(by_alias=True)

    return dedent(
        f"""
The only valid response to this request is a structured object of type {object_type.__name__}.

The schema for the object is:
```json
{json.dumps(obj=json_schema, indent=1)}
```

Respond with the JSON object only. Close every string, array and object and do not leave trailing commas.

Any response other than the JSON object for {object_type.__name__} will be considered invalid."""
    ).strip()


def extract_json_blocks_from_text(text: str) -> list[str]:
    """Extract all Markdown fenced blocks from a text string."""

    lines = text.strip().split("\n")

    start_index: int | None = None

    matches: list[str] = []

    for i, line in enumerate(lines):
        if not line.startswith("```"):
            continue

        if start_index is None:
            start_index = i + 1
            continue

        matches.append("\n".join(lines[start_index:i]))
        start_index = None

    return matches


def extract_single_object_from_text(text: str, object_type: type[T]) -> T:
    """Extract an object from a text string.

    The text is either the JSON object itself, or contains it in exactly one Markdown JSON block.

    Raises:
        ValueError: If no object can be found in the text.
        pydantic.ValidationError: If the object does not match the type.
    """

    type_adapter: TypeAdapter[T] = TypeAdapter[T](object_type)

    stripped: str = text.strip()

    if stripped.startswith("{"):
        return type_adapter.validate_json(stripped)

    matches: list[str] = extract_json_blocks_from_text(stripped)

    if len(matches) != 1:
        msg = f"Text must be a JSON object or contain exactly one Markdown JSON block. Received {text!r}."
        raise ValueError(msg)

    return type_adapter.validate_json(matches[0])

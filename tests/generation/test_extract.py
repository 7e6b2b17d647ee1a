from textwrap import dedent

import pytest
from pydantic import BaseModel, Field, ValidationError

from readme_ai_builder.generation.extract import extract_json_blocks_from_text, extract_single_object_from_text, object_in_text_instructions
from readme_ai_builder.models.readme import GenerationResult


class StructuredObject(BaseModel):
    """A structured object docstring."""

    name: str = Field(description="The name of the object.")
    age: int = Field(description="The age of the object.")


def test_object_in_text_instructions():
    instructions = object_in_text_instructions(StructuredObject)

    assert instructions.startswith("The only valid response to this request is a structured object of type StructuredObject.")
    assert '"description": "A structured object docstring."' in instructions
    assert instructions.endswith("Any response other than the JSON object for StructuredObject will be considered invalid.")


def test_object_in_text_instructions_uses_aliases():
    instructions = object_in_text_instructions(GenerationResult)

    assert '"readmeContent"' in instructions
    assert '"readme_content"' not in instructions


def test_extract_json_blocks_from_text():
    text = dedent(
        """
        Here are two blocks:
        ```json
        {"name": "one", "age": 1}
        ```
        and
        ```
        {"name": "two", "age": 2}
        ```
        """
    )

    assert extract_json_blocks_from_text(text) == ['{"name": "one", "age": 1}', '{"name": "two", "age": 2}']


class TestExtractSingleObject:
    def test_bare_object(self):
        assert extract_single_object_from_text('  {"name": "one", "age": 1}\n', StructuredObject) == StructuredObject(name="one", age=1)

    def test_fenced_object(self):
        text = 'Sure! Here is the object:\n```json\n{"name": "one", "age": 1}\n```\n'

        assert extract_single_object_from_text(text, StructuredObject) == StructuredObject(name="one", age=1)

    def test_aliased_object(self):
        result = extract_single_object_from_text('{"readmeContent": "# hello"}', GenerationResult)

        assert result.readme_content == "# hello"

    def test_no_object(self):
        with pytest.raises(ValueError, match="exactly one Markdown JSON block"):
            extract_single_object_from_text("I could not do that.", StructuredObject)

    def test_two_objects(self):
        text = '```json\n{"name": "one", "age": 1}\n```\n```json\n{"name": "two", "age": 2}\n```'

        with pytest.raises(ValueError, match="exactly one Markdown JSON block"):
            extract_single_object_from_text(text, StructuredObject)

    def test_wrong_shape(self):
        with pytest.raises(ValidationError):
            extract_single_object_from_text('{"name": "one"}', StructuredObject)

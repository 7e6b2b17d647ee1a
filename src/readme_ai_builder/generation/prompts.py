from textwrap import dedent
from typing import Self

import yaml
from pydantic import BaseModel, Field


class PromptSection(BaseModel):
    title: str = Field(description="The title of the section.")
    level: int = Field(default=1, description="The level of the section.")
    section: str = Field(description="The section of the prompt.")

    def render_text(self) -> str:
        return f"{'#' * self.level} {self.title}\n{self.section}"


WHO_YOU_ARE = PromptSection(
    title="Who you are",
    level=1,
    section="""
You are an expert technical writer who writes README files for GitHub repositories. You are able to read a short
analysis of a repository (its name, description, languages, dependencies, license and file structure) and turn it into
a clear, well organized README that helps a newcomer understand, install and use the project.
""",
)

DEEPLY_ROOTED = PromptSection(
    title="Deeply Rooted",
    level=1,
    section="""
Your README should be rooted in the provided repository analysis. Do not invent features, commands or dependencies
that the analysis gives no evidence for. When a detail is unknown, write a short, clearly generic placeholder that the
user can fill in instead of guessing.
""",
)

REQUIRED_SECTIONS = PromptSection(
    title="Required Sections",
    level=1,
    section="""
The README must include the following sections, in this order:
1. Title and badges (license, main language)
2. Description
3. Features
4. Tech Stack
5. Installation
6. Usage
7. Contributing
8. License
""",
)

RESPONSE_FORMAT = PromptSection(
    title="Response Format",
    level=1,
    section="""
The README itself must be GitHub flavored markdown. Your response is parsed by a program, not read by a person: it must
be a single JSON object matching the schema you are given, with the whole README as one markdown string.
""",
)

SYSTEM_PROMPT_SECTIONS = [WHO_YOU_ARE, DEEPLY_ROOTED, REQUIRED_SECTIONS, RESPONSE_FORMAT]


class PromptBuilder(BaseModel):
    sections: list[PromptSection] = Field(default_factory=list, description="The sections of the prompt.")

    def add_text_section(self, title: str, text: str | list[str], level: int = 1) -> Self:
        if not isinstance(text, list):
            text = [text]

        text_block = "\n".join([dedent(text) for text in text])

        self.sections.append(PromptSection(title=title, level=level, section=text_block))

        return self

    def add_code_section(self, title: str, code: str, language: str, level: int = 1) -> Self:
        code_block = f"```{language}\n{code}\n```"

        self.sections.append(PromptSection(title=title, level=level, section=code_block))

        return self

    def add_yaml_section(self, title: str, obj: dict | BaseModel, preamble: str | None = None, level: int = 1) -> Self:  # pyright: ignore[reportMissingTypeArgument]
        yaml_text: str

        if isinstance(obj, BaseModel):
            yaml_text = yaml.safe_dump(obj.model_dump(mode="json"), sort_keys=False)
        else:
            yaml_text = yaml.safe_dump(obj, sort_keys=False)

        yaml_block: str = preamble or ""

        yaml_block += f"""
```yaml
{yaml_text}```"""

        self.sections.append(PromptSection(title=title, level=level, section=yaml_block))

        return self

    def render_text(self) -> str:
        return "\n\n".join(section.render_text() for section in self.sections)


class SystemPromptBuilder(PromptBuilder):
    sections: list[PromptSection] = Field(default_factory=lambda: SYSTEM_PROMPT_SECTIONS.copy(), description="The sections of the prompt.")


class UserPromptBuilder(PromptBuilder):
    sections: list[PromptSection] = Field(default_factory=list, description="The sections of the prompt.")

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

NO_MANIFEST_FOUND = "No manifest found"
NO_LICENSE_FOUND = "No license found"
LANGUAGE_NOT_SPECIFIED = "Not specified"

INITIAL_README_CONTENT = """Click "Generate README" to create your file.

The AI will generate the following sections based on its analysis of your repository:
- Title
- Description
- Features
- Tech Stack
- Setup
- Usage
- Contributing
- License"""


class RepositorySnapshot(BaseModel):
    """A point-in-time view of a repository, used to build a README prompt."""

    model_config = ConfigDict(frozen=True)

    id: int = Field(description="The ID of the repository.")
    name: str = Field(description="The name of the repository.")
    owner: str = Field(description="The login of the repository owner.")
    description: str | None = Field(default=None, description="The description of the repository.")
    language: str | None = Field(default=None, description="The primary language of the repository.")
    stars: int = Field(default=0, description="The number of stars the repository has.")
    forks: int = Field(default=0, description="The number of forks the repository has.")
    updated_at: datetime | None = Field(default=None, description="The date and time the repository was updated.")
    default_branch: str = Field(default="main", description="The default branch of the repository.")
    file_structure: tuple[str, ...] = Field(default=(), description="A bounded listing of file paths in the repository.")
    dependencies: str = Field(default=NO_MANIFEST_FOUND, description="The comma-joined package names from the dependency manifest.")
    license: str = Field(default=NO_LICENSE_FOUND, description="The name of the repository license.")


class GenerationModel(BaseModel):
    """A model exchanged with the generation backend. Field names are camelCase on the wire."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)


class GenerationRequest(GenerationModel):
    """The input of a README generation."""

    repo_name: str = Field(description="The name of the repository to analyze.")
    repo_description: str = Field(description="The description of the repository.")
    file_structure: str = Field(description="The file structure of the repository.")
    programming_languages: str = Field(description="The programming languages used in the repository.")
    dependencies: str = Field(description="The dependencies of the repository.")
    license_info: str = Field(description="The license information of the repository.")
    custom_prompt: str | None = Field(default=None, description="Custom prompt to guide the AI in generating README content.")


class GenerationResult(GenerationModel):
    """The generated README content based on the repository analysis."""

    readme_content: str = Field(description="The generated README content, as a single markdown string.")

    @field_validator("readme_content")
    @classmethod
    def validate_readme_content(cls, v: str) -> str:
        if not v.strip():
            msg = "The README content must not be empty."
            raise ValueError(msg)
        return v


class SectionSuggestions(GenerationModel):
    """The sections suggested for a README."""

    sections: list[str] = Field(description="The suggested section titles for the README.", min_length=1)


class FileRevision(BaseModel):
    """Identifies the exact version of a remote file. Required to replace it safely."""

    model_config = ConfigDict(frozen=True)

    path: str = Field(description="The path of the file.")
    sha: str = Field(description="The blob SHA of the file.")


class CommitRequest(BaseModel):
    """A README write, carrying the revision it is meant to replace."""

    model_config = ConfigDict(frozen=True)

    owner: str
    repo: str
    content: str
    prior_revision: FileRevision | None = None


class CommitResult(BaseModel):
    """The outcome of a successful README commit."""

    model_config = ConfigDict(frozen=True)

    committed_url: str | None = Field(description="The URL of the commit on GitHub.")
    commit_sha: str | None = Field(description="The SHA of the commit.")
    path: str = Field(description="The path of the committed file.")
    created: bool = Field(description="Whether the file was created rather than updated.")


class ReadmeDraft(BaseModel):
    """A generated README awaiting review."""

    model_config = ConfigDict(frozen=True)

    owner: str
    repo: str
    readme_content: str = Field(description="The generated README content.")
    request: GenerationRequest = Field(description="The request the draft was generated from.")

"""Compile a repository snapshot into the request sent to the generation backend."""

from readme_ai_builder.generation.prompts import UserPromptBuilder
from readme_ai_builder.models.readme import LANGUAGE_NOT_SPECIFIED, GenerationRequest, RepositorySnapshot

PROMPT_NAME = "analyze_repository_for_readme"


def default_instruction(snapshot: RepositorySnapshot) -> str:
    instruction = f"Generate a README for a {snapshot.language or LANGUAGE_NOT_SPECIFIED} project."

    if snapshot.description:
        instruction += f" The project is a {snapshot.description}."

    return instruction


def compile_prompt(snapshot: RepositorySnapshot, custom_instruction: str | None = None) -> GenerationRequest:
    """Compile a snapshot and an optional instruction into a generation request.

    The result depends only on the arguments. A missing or blank instruction is replaced by one derived from the
    language and description of the repository.
    """

    if custom_instruction is None or not custom_instruction.strip():
        custom_instruction = default_instruction(snapshot=snapshot)

    return GenerationRequest(
        repo_name=snapshot.name,
        repo_description=snapshot.description or "",
        file_structure="\n".join(snapshot.file_structure),
        programming_languages=snapshot.language or LANGUAGE_NOT_SPECIFIED,
        dependencies=snapshot.dependencies,
        license_info=snapshot.license,
        custom_prompt=custom_instruction,
    )


def render_prompt(request: GenerationRequest) -> str:
    """Render the user prompt for a generation request."""

    builder = UserPromptBuilder()

    builder.add_text_section(
        title="Repository Analysis",
        text=[
            f"Repository Name: {request.repo_name}",
            f"Repository Description: {request.repo_description}",
            f"Programming Languages: {request.programming_languages}",
            f"Dependencies: {request.dependencies}",
            f"License Information: {request.license_info}",
        ],
    )

    builder.add_code_section(title="File Structure", code=request.file_structure, language="text", level=2)

    if request.custom_prompt:
        builder.add_text_section(title="Custom Prompt", text=request.custom_prompt)

    builder.add_text_section(
        title="Task",
        text="Based on the above information, generate a comprehensive README.md content.",
    )

    return builder.render_text()

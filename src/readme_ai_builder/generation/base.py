import asyncio
from abc import ABC, abstractmethod
from logging import Logger
from typing import TypeVar

from fastmcp.utilities.logging import get_logger

from readme_ai_builder.errors import GenerationError
from readme_ai_builder.generation.extract import extract_single_object_from_text, object_in_text_instructions
from readme_ai_builder.generation.prompts import SystemPromptBuilder, UserPromptBuilder
from readme_ai_builder.models.readme import GenerationRequest, GenerationResult, RepositorySnapshot, SectionSuggestions
from readme_ai_builder.pipeline.prompt import PROMPT_NAME, render_prompt
from readme_ai_builder.utilities.settings import get_request_timeout

SUGGEST_SECTIONS_PROMPT_NAME = "suggest_readme_sections"

ResponseT = TypeVar("ResponseT", GenerationResult, SectionSuggestions)


class ReadmeGenerator(ABC):
    """Turns a generation request into README content using a language model backend.

    Subclasses implement `_complete`, a single round trip to the backend. The response is validated against the
    schema of the expected model before anything is returned.
    """

    name: str

    # The exceptions raised by the backend SDK for a failed call.
    transport_errors: tuple[type[Exception], ...] = ()

    model: str
    timeout: float
    logger: Logger

    def __init__(self, model: str, timeout: float | None = None, logger: Logger | None = None):
        self.model = model
        self.timeout = timeout or get_request_timeout()
        self.logger = logger or get_logger(name=__name__)

    @abstractmethod
    async def _complete(self, system_prompt: str, user_prompt: str) -> str:
        """Send one request to the backend and return the text of its response."""

    async def generate(self, request: GenerationRequest) -> GenerationResult:
        """Generate the README content for a request.

        Raises:
            GenerationError: If the backend fails, times out or returns a response without README content.
        """

        return await self._generate_structured(
            prompt_name=PROMPT_NAME,
            system_prompt=SystemPromptBuilder().render_text(),
            user_prompt=render_prompt(request=request),
            response_type=GenerationResult,
        )

    async def suggest_sections(self, snapshot: RepositorySnapshot) -> SectionSuggestions:
        """Suggest the sections relevant to a README for the repository.

        Raises:
            GenerationError: If the backend fails, times out or returns no sections.
        """

        user_prompt = UserPromptBuilder()

        user_prompt.add_yaml_section(title="Repository Analysis", obj=snapshot)

        user_prompt.add_text_section(
            title="Task",
            text=(
                "Based on the repository analysis, suggest relevant sections for a README file. Each entry is a section "
                'title, for example "Features", "Installation", "Usage", "Contributing" or "License". Only suggest '
                "sections relevant to the repository."
            ),
        )

        return await self._generate_structured(
            prompt_name=SUGGEST_SECTIONS_PROMPT_NAME,
            system_prompt=SystemPromptBuilder().render_text(),
            user_prompt=user_prompt.render_text(),
            response_type=SectionSuggestions,
        )

    async def _generate_structured(
        self, prompt_name: str, system_prompt: str, user_prompt: str, response_type: type[ResponseT]
    ) -> ResponseT:
        full_system_prompt: str = system_prompt + "\n\n" + object_in_text_instructions(object_type=response_type)

        self.logger.info(f"Running prompt {prompt_name} with {self.name} model {self.model}")

        try:
            async with asyncio.timeout(self.timeout):
                text: str = await self._complete(system_prompt=full_system_prompt, user_prompt=user_prompt)
        except TimeoutError as e:
            raise GenerationError(
                message="The generation backend did not respond in time.", extra_info={"backend": self.name, "timeout": str(self.timeout)}
            ) from e
        except self.transport_errors as e:
            raise GenerationError(message="The generation backend failed.", extra_info={"backend": self.name, "error": str(e)}) from e

        try:
            return extract_single_object_from_text(text=text, object_type=response_type)
        except ValueError as e:
            self.logger.warning(f"Prompt {prompt_name} returned a response that does not match {response_type.__name__}: {e}")
            raise GenerationError(
                message=f"The generation backend returned an invalid {response_type.__name__}.",
                extra_info={"backend": self.name, "error": str(e)},
            ) from e

import os
from logging import Logger

from openai import APIError as OpenAIAPIError
from openai import AsyncOpenAI
from typing_extensions import override

from readme_ai_builder.errors import GenerationError
from readme_ai_builder.generation.base import ReadmeGenerator

DEFAULT_OPENAI_MODEL = "gpt-4o"


def get_openai_api_key() -> str | None:
    return os.getenv("OPENAI_API_KEY")


def get_openai_model() -> str:
    return os.getenv("OPENAI_MODEL") or DEFAULT_OPENAI_MODEL


def get_openai_base_url() -> str | None:
    return os.getenv("OPENAI_BASE_URL")


class OpenAIReadmeGenerator(ReadmeGenerator):
    """Generates READMEs with the OpenAI chat completions API in JSON mode."""

    name = "openai"
    transport_errors = (OpenAIAPIError,)

    def __init__(
        self,
        model: str | None = None,
        client: AsyncOpenAI | None = None,
        api_key: str | None = None,
        timeout: float | None = None,
        logger: Logger | None = None,
    ):
        super().__init__(model=model or get_openai_model(), timeout=timeout, logger=logger)
        self._client: AsyncOpenAI | None = client
        self._api_key: str | None = api_key

    @property
    def client(self) -> AsyncOpenAI:
        if self._client is None:
            if not (api_key := self._api_key or get_openai_api_key()):
                raise GenerationError(message="No API key is configured for the generation backend.", extra_info={"backend": self.name})

            # Retries are not done at this layer.
            self._client = AsyncOpenAI(api_key=api_key, base_url=get_openai_base_url(), max_retries=0)

        return self._client

    @override
    async def _complete(self, system_prompt: str, user_prompt: str) -> str:
        completion = await self.client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            response_format={"type": "json_object"},
        )

        if not completion.choices or not (text := completion.choices[0].message.content):
            raise GenerationError(message="No content in the response from the generation backend.", extra_info={"backend": self.name})

        return text

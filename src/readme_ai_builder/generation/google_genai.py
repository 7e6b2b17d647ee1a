import os
from logging import Logger

import httpx
from google.genai import Client as GoogleGenaiClient
from google.genai.errors import APIError as GoogleGenaiAPIError
from google.genai.types import Candidate, GenerateContentConfig, GenerateContentResponse, Part, UserContent
from typing_extensions import override

from readme_ai_builder.errors import GenerationError
from readme_ai_builder.generation.base import ReadmeGenerator

DEFAULT_GOOGLE_MODEL = "gemini-2.5-flash"


def get_google_api_key() -> str | None:
    return os.getenv("GOOGLE_API_KEY") or os.getenv("GEMINI_API_KEY")


def get_google_model() -> str:
    return os.getenv("GOOGLE_MODEL") or DEFAULT_GOOGLE_MODEL


def get_candidate_from_response(response: GenerateContentResponse) -> Candidate | None:
    if response.candidates and response.candidates[0]:
        return response.candidates[0]

    return None


class GoogleGenaiReadmeGenerator(ReadmeGenerator):
    """Generates READMEs with Gemini, asking for a JSON response."""

    name = "google-genai"
    transport_errors = (GoogleGenaiAPIError, httpx.HTTPError)

    def __init__(
        self,
        model: str | None = None,
        client: GoogleGenaiClient | None = None,
        api_key: str | None = None,
        timeout: float | None = None,
        logger: Logger | None = None,
    ):
        super().__init__(model=model or get_google_model(), timeout=timeout, logger=logger)
        self._client: GoogleGenaiClient | None = client
        self._api_key: str | None = api_key

    @property
    def client(self) -> GoogleGenaiClient:
        if self._client is None:
            if not (api_key := self._api_key or get_google_api_key()):
                raise GenerationError(message="No API key is configured for the generation backend.", extra_info={"backend": self.name})

            self._client = GoogleGenaiClient(api_key=api_key)

        return self._client

    @override
    async def _complete(self, system_prompt: str, user_prompt: str) -> str:
        response: GenerateContentResponse = await self.client.aio.models.generate_content(
            model=self.model,
            contents=[UserContent(parts=[Part(text=user_prompt)])],
            config=GenerateContentConfig(
                system_instruction=system_prompt,
                response_mime_type="application/json",
            ),
        )

        if not (text := response.text):
            candidate = get_candidate_from_response(response)

            finish_reason = str(candidate.finish_reason) if candidate else None

            raise GenerationError(
                message="No content in the response from the generation backend.",
                extra_info={"backend": self.name, "finish_reason": finish_reason},
            )

        return text

from fastmcp.utilities.logging import get_logger

from readme_ai_builder.generation.base import ReadmeGenerator
from readme_ai_builder.generation.google_genai import GoogleGenaiReadmeGenerator, get_google_api_key
from readme_ai_builder.generation.openai import OpenAIReadmeGenerator, get_openai_api_key

logger = get_logger(__name__)


def get_readme_generator() -> ReadmeGenerator:
    """Select the generation backend for this process from the environment. Gemini wins when both are configured."""

    if get_google_api_key():
        return GoogleGenaiReadmeGenerator()

    if get_openai_api_key():
        return OpenAIReadmeGenerator()

    logger.warning(
        msg=(
            "No generation backend API key found, README generation requests will fail. "
            "Set GOOGLE_API_KEY, GEMINI_API_KEY or OPENAI_API_KEY to configure one."
        )
    )

    # Fails with a GenerationError on first use.
    return GoogleGenaiReadmeGenerator()

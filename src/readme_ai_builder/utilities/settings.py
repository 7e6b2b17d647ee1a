import math
import os

from fastmcp.utilities.logging import get_logger

logger = get_logger(name=__name__)

DEFAULT_REQUEST_TIMEOUT_SECONDS = 30.0
DEFAULT_COMMIT_MESSAGE = "docs: Generate README.md via ReadmeAI Builder"


def get_request_timeout() -> float:
    """The timeout, in seconds, applied to each call to GitHub or to the generation backend.

    A value that is not a positive number falls back to the default.
    """
    if not (value := os.getenv("README_REQUEST_TIMEOUT")):
        return DEFAULT_REQUEST_TIMEOUT_SECONDS

    try:
        timeout = float(value)
    except ValueError:
        timeout = 0.0

    if not 0 < timeout < math.inf:
        logger.warning(f"Ignoring README_REQUEST_TIMEOUT={value!r}, using {DEFAULT_REQUEST_TIMEOUT_SECONDS} seconds")
        return DEFAULT_REQUEST_TIMEOUT_SECONDS

    return timeout


def get_commit_message() -> str:
    return os.getenv("README_COMMIT_MESSAGE") or DEFAULT_COMMIT_MESSAGE


def get_github_token() -> str | None:
    for env_var in ("GITHUB_TOKEN", "GITHUB_PERSONAL_ACCESS_TOKEN"):
        if token := os.getenv(env_var):
            return token
    return None

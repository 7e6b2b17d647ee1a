from collections.abc import Iterator
from contextlib import contextmanager

from fastmcp.exceptions import ToolError

from readme_ai_builder.errors import (
    AuthError,
    CommitError,
    ConflictError,
    GenerationError,
    NotFoundError,
    ReadmeBuilderError,
    UnmodifiedDraftError,
)

# Most specific first, UnmodifiedDraftError is a CommitError.
ERROR_MESSAGES: list[tuple[type[ReadmeBuilderError], str]] = [
    (AuthError, "GitHub authentication failed. Check that your GitHub token is set and still valid."),
    (NotFoundError, "The repository could not be found, or your GitHub token does not have access to it."),
    (GenerationError, "The README could not be generated. Please try again."),
    (ConflictError, "README.md was changed on GitHub after it was read. Reload it and commit your draft again."),
    (UnmodifiedDraftError, "The README draft is empty or unchanged. Edit the draft before committing it."),
    (CommitError, "The README could not be committed to GitHub."),
]


def get_error_message(error: ReadmeBuilderError) -> str:
    for error_type, message in ERROR_MESSAGES:
        if isinstance(error, error_type):
            return message

    return "The request failed."


@contextmanager
def readme_errors_as_tool_errors() -> Iterator[None]:
    """Convert README Builder errors raised in the block into tool errors with a human readable message."""

    try:
        yield
    except ReadmeBuilderError as e:
        raise ToolError(f"{get_error_message(error=e)} {e}") from e

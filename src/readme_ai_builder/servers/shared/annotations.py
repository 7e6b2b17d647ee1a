from typing import Annotated

from pydantic import Field

OWNER_DESCRIPTION = "The owner of the repository."
OWNER = Annotated[str, Field(description=OWNER_DESCRIPTION)]

REPO_DESCRIPTION = "The name of the repository."
REPO = Annotated[str, Field(description=REPO_DESCRIPTION)]

CUSTOM_PROMPT_DESCRIPTION = (
    "Instructions to guide the README content, for example the audience or the tone. "
    "If not provided, the README is generated from the language and description of the repository."
)
CUSTOM_PROMPT = Annotated[str | None, Field(description=CUSTOM_PROMPT_DESCRIPTION, min_length=1)]

README_CONTENT = Annotated[str, Field(description="The reviewed README content, in markdown, to commit to README.md.")]

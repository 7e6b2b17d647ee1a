"""Errors raised across the boundary of every pipeline component.

Collaborator failures (PyGithub, requests, the generation SDKs) are caught where they happen and
re-raised as one of the kinds below.
"""

ExtraInfoType = dict[str, str | None]


class ReadmeBuilderError(Exception):
    """Base class for README Builder pipeline errors."""

    def __init__(self, message: str, extra_info: ExtraInfoType | None = None):
        self.message: str = message
        self.extra_info: ExtraInfoType = extra_info or {}

        msg = message
        if extra_info:
            msg += " (" + ", ".join([f"{key}: {value}" for key, value in extra_info.items() if value is not None]) + ")"
        super().__init__(msg)


class AuthError(ReadmeBuilderError):
    """The access credential is missing, blank, or was rejected."""


class NotFoundError(ReadmeBuilderError):
    """A repository or file that had to exist could not be found."""


class GenerationError(ReadmeBuilderError):
    """The generation backend was unreachable, unconfigured, or returned a malformed response."""


class CommitError(ReadmeBuilderError):
    """A README write was rejected for a reason other than a stale revision."""


class UnmodifiedDraftError(CommitError):
    """The draft is blank or still holds the initial placeholder text."""

    def __init__(self, owner: str, repo: str):
        super().__init__(
            message="Refusing to commit an empty or unmodified README draft.",
            extra_info={"repository": f"{owner}/{repo}"},
        )


class ConflictError(ReadmeBuilderError):
    """The file changed after its revision was read. Re-read the revision before writing again."""

    def __init__(self, owner: str, repo: str, path: str, revision: str | None):
        super().__init__(
            message="The file was modified after its revision was read.",
            extra_info={"repository": f"{owner}/{repo}", "path": path, "revision": revision},
        )

from datetime import datetime
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field

if TYPE_CHECKING:
    from github.AuthenticatedUser import AuthenticatedUser as PyGithubAuthenticatedUser
    from github.ContentFile import ContentFile as PyGithubContentFile
    from github.Repository import Repository as PyGithubRepository

# PyGithub objects load their attributes lazily, so these conversions may perform requests. Run them where
# blocking is allowed.


class Repository(BaseModel):
    """A repository."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    id: int = Field(description="The ID of the repository.")
    name: str = Field(description="The name of the repository.")
    owner: str = Field(description="The login of the repository owner.")
    description: str | None = Field(description="The description of the repository.")
    language: str | None = Field(description="The primary language of the repository.")
    stars: int = Field(description="The number of stars the repository has.")
    forks: int = Field(description="The number of forks the repository has.")
    updated_at: datetime | None = Field(description="The date and time the repository was updated.")
    default_branch: str = Field(description="The default branch of the repository.")
    license: str | None = Field(description="The name of the repository license.")
    html_url: str = Field(description="The URL of the repository on GitHub.")
    private: bool = Field(description="Whether the repository is private.")

    @classmethod
    def from_pygithub(cls, repository: "PyGithubRepository") -> "Repository":
        return cls(
            id=repository.id,
            name=repository.name,
            owner=repository.owner.login,
            description=repository.description,
            language=repository.language,
            stars=repository.stargazers_count,
            forks=repository.forks_count,
            updated_at=repository.updated_at,
            default_branch=repository.default_branch,
            license=repository.license.name if repository.license else None,
            html_url=repository.html_url,
            private=repository.private,
        )


class RepositorySummary(BaseModel):
    """A repository as listed for the signed-in user."""

    model_config = ConfigDict(frozen=True)

    id: int = Field(description="The ID of the repository.")
    name: str = Field(description="The name of the repository.")
    owner: str = Field(description="The login of the repository owner.")
    description: str | None = Field(description="The description of the repository.")
    language: str | None = Field(description="The primary language of the repository.")
    stars: int = Field(description="The number of stars the repository has.")
    forks: int = Field(description="The number of forks the repository has.")
    updated_at: datetime | None = Field(description="The date and time the repository was updated.")
    owner_avatar_url: str | None = Field(default=None, description="The avatar URL of the repository owner.")

    @classmethod
    def from_pygithub(cls, repository: "PyGithubRepository") -> "RepositorySummary":
        return cls(
            id=repository.id,
            name=repository.name,
            owner=repository.owner.login,
            description=repository.description,
            language=repository.language,
            stars=repository.stargazers_count,
            forks=repository.forks_count,
            updated_at=repository.updated_at,
            owner_avatar_url=repository.owner.avatar_url,
        )


class RepositoryFile(BaseModel):
    """A file with its path, decoded content and the blob SHA identifying its current version."""

    model_config = ConfigDict(frozen=True)

    path: str = Field(description="The path of the file.")
    sha: str = Field(description="The blob SHA of the file.")
    content: str | None = Field(description="The decoded content of the file, or None if it is not UTF-8 text.")

    @classmethod
    def from_pygithub(cls, content_file: "PyGithubContentFile") -> "RepositoryFile":
        content: str | None = None

        # Files over 1MB come without an encoding, and binary files are not text.
        if content_file.encoding == "base64":
            try:
                content = content_file.decoded_content.decode("utf-8")
            except ValueError:
                content = None

        return cls(path=content_file.path, sha=content_file.sha, content=content)


class FileCommitResult(BaseModel):
    """The result of creating or updating a file."""

    model_config = ConfigDict(frozen=True)

    path: str = Field(description="The path of the written file.")
    sha: str | None = Field(description="The blob SHA of the written file.")
    commit_sha: str | None = Field(description="The SHA of the commit.")
    commit_url: str | None = Field(description="The URL of the commit on GitHub.")

    @classmethod
    def from_pygithub(cls, path: str, file_commit: dict[str, Any]) -> "FileCommitResult":
        """Convert the `{"content": ContentFile, "commit": Commit}` mapping returned by a file write."""

        content_file = file_commit.get("content")
        commit = file_commit.get("commit")

        return cls(
            path=path,
            sha=content_file.sha if content_file else None,
            commit_sha=commit.sha if commit else None,
            commit_url=commit.html_url if commit else None,
        )


class AuthenticatedUser(BaseModel):
    """The user a credential belongs to."""

    model_config = ConfigDict(frozen=True)

    id: int = Field(description="The ID of the user.")
    login: str = Field(description="The login of the user.")

    @classmethod
    def from_pygithub(cls, user: "PyGithubAuthenticatedUser") -> "AuthenticatedUser":
        return cls(id=user.id, login=user.login)

import hashlib
import json
from collections.abc import Callable
from datetime import datetime
from types import SimpleNamespace
from typing import Any, overload

import pytest
from github import BadCredentialsException, GithubException, UnknownObjectException
from pydantic import BaseModel, Field
from typing_extensions import override

from readme_ai_builder.clients.github import GitHubClientFactory, ReadmeGitHubClient
from readme_ai_builder.generation.base import ReadmeGenerator
from readme_ai_builder.models.credential import AccessCredential
from tests.constants import MOCK_HELLO_WORLD_FILES, MOCK_README_CONTENT, MOCK_UPDATED_AT

MOCK_TOKEN = "ghp_mock_token"


def git_blob_sha(content: str) -> str:
    data = content.encode("utf-8")
    return hashlib.sha1(b"blob " + str(len(data)).encode() + b"\0" + data).hexdigest()  # noqa: S324


# In-memory stand-ins for the PyGithub objects the client touches. Errors are raised as real PyGithub exceptions.


class MockRepositoryData(BaseModel):
    id: int
    owner: str
    name: str
    description: str | None = None
    language: str | None = None
    stars: int = 0
    forks: int = 0
    default_branch: str = "main"
    license: str | None = None
    private: bool = False
    updated_at: datetime = MOCK_UPDATED_AT
    files: dict[str, str] = Field(default_factory=dict)

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"


class MockPyGithubRepository:
    def __init__(self, github: "MockPyGithub", full_name: str):
        self._github = github
        self._full_name = full_name

    @property
    def _data(self) -> MockRepositoryData:
        if (data := self._github.repositories.get(self._full_name)) is None:
            raise UnknownObjectException(404, {"message": "Not Found"})
        return data

    @property
    def id(self) -> int:
        return self._data.id

    @property
    def name(self) -> str:
        return self._data.name

    @property
    def owner(self) -> SimpleNamespace:
        return SimpleNamespace(login=self._data.owner, avatar_url=f"https://avatars.githubusercontent.com/{self._data.owner}")

    @property
    def description(self) -> str | None:
        return self._data.description

    @property
    def language(self) -> str | None:
        return self._data.language

    @property
    def stargazers_count(self) -> int:
        return self._data.stars

    @property
    def forks_count(self) -> int:
        return self._data.forks

    @property
    def updated_at(self) -> datetime:
        return self._data.updated_at

    @property
    def default_branch(self) -> str:
        return self._data.default_branch

    @property
    def license(self) -> SimpleNamespace | None:
        return SimpleNamespace(name=self._data.license) if self._data.license else None

    @property
    def html_url(self) -> str:
        return f"https://github.com/{self._full_name}"

    @property
    def private(self) -> bool:
        return self._data.private

    def get_git_tree(self, sha: str, recursive: bool = False) -> SimpleNamespace:
        self._github.record("get_git_tree", sha)

        if not self._data.files:
            raise GithubException(409, {"message": "Git Repository is empty."})

        directories: set[str] = set()
        for path in self._data.files:
            parts = path.split("/")[:-1]
            directories.update("/".join(parts[: i + 1]) for i in range(len(parts)))

        tree = [SimpleNamespace(path=directory, type="tree") for directory in sorted(directories)]
        tree.extend(SimpleNamespace(path=path, type="blob") for path in self._data.files)

        return SimpleNamespace(tree=tree, truncated=False)

    def get_contents(self, path: str, ref: str | None = None) -> SimpleNamespace | list[SimpleNamespace]:
        self._github.record("get_contents", path)

        files = self._data.files

        if path not in files:
            entries = [self._content_file(file_path) for file_path in files if file_path.startswith(f"{path}/")]
            if entries:
                return entries
            raise UnknownObjectException(404, {"message": "Not Found"})

        return self._content_file(path)

    def _content_file(self, path: str) -> SimpleNamespace:
        content = self._data.files[path]
        return SimpleNamespace(path=path, sha=git_blob_sha(content), encoding="base64", decoded_content=content.encode("utf-8"))

    def create_file(self, path: str, message: str, content: str) -> dict[str, Any]:
        self._github.record("create_file", path)
        self._before_write(path)

        if path in self._data.files:
            raise GithubException(422, {"message": 'Invalid request.\n\n"sha" wasn\'t supplied.'})

        return self._write(path=path, message=message, content=content)

    def update_file(self, path: str, message: str, content: str, sha: str) -> dict[str, Any]:
        self._github.record("update_file", path)
        self._before_write(path)

        current = self._data.files.get(path)

        if current is None or git_blob_sha(current) != sha:
            raise GithubException(409, {"message": f"{path} does not match {sha}"})

        return self._write(path=path, message=message, content=content)

    def _before_write(self, path: str) -> None:
        if self._github.before_write is not None:
            self._github.before_write(self._data, path)

    def _write(self, path: str, message: str, content: str) -> dict[str, Any]:
        self._data.files[path] = content
        self._github.commits.append((self._full_name, path, message))

        commit_sha = hashlib.sha1(f"commit {len(self._github.commits)}".encode()).hexdigest()  # noqa: S324

        return {
            "content": SimpleNamespace(path=path, sha=git_blob_sha(content)),
            "commit": SimpleNamespace(sha=commit_sha, html_url=f"https://github.com/{self._full_name}/commit/{commit_sha}"),
        }


class MockPyGithubUser:
    def __init__(self, github: "MockPyGithub", login: str):
        self._github = github
        self.login = login
        self.id = 583231

    def get_repos(self, sort: str, direction: str) -> list[MockPyGithubRepository]:
        self._github.record("get_repos", f"{sort} {direction}")

        repositories = sorted(self._github.repositories.values(), key=lambda data: data.updated_at, reverse=direction == "desc")

        return [MockPyGithubRepository(github=self._github, full_name=data.full_name) for data in repositories]


class MockPyGithub:
    """Stands in for `github.Github`. `failures` maps an operation, or `operation:detail`, to the exception it raises."""

    def __init__(self, repositories: list[MockRepositoryData], login: str | None = "octocat"):
        self.repositories: dict[str, MockRepositoryData] = {repository.full_name: repository for repository in repositories}
        self.login: str | None = login
        self.failures: dict[str, Exception] = {}
        self.calls: list[tuple[str, str | None]] = []
        self.commits: list[tuple[str, str, str]] = []
        self.before_write: Callable[[MockRepositoryData, str], None] | None = None

    def record(self, operation: str, detail: str | None = None) -> None:
        self.calls.append((operation, detail))

        if (failure := self.failures.get(f"{operation}:{detail}") or self.failures.get(operation)) is not None:
            raise failure

    def get_repo(self, full_name: str, lazy: bool = False) -> MockPyGithubRepository:
        repository = MockPyGithubRepository(github=self, full_name=full_name)

        if not lazy:
            self.record("get_repo", full_name)
            _ = repository.id

        return repository

    def get_user(self) -> MockPyGithubUser:
        self.record("get_user")

        if self.login is None:
            raise BadCredentialsException(401, {"message": "Bad credentials"})

        return MockPyGithubUser(github=self, login=self.login)


class MockReadmeGenerator(ReadmeGenerator):
    """Returns canned responses and keeps the prompts it was sent."""

    name = "mock"

    def __init__(self, responses: list[str] | None = None, timeout: float | None = None):
        super().__init__(model="mock-model", timeout=timeout)
        self.responses: list[str] = responses or ['{"readmeContent": ' + json.dumps(MOCK_README_CONTENT) + "}"]
        self.prompts: list[tuple[str, str]] = []

    @override
    async def _complete(self, system_prompt: str, user_prompt: str) -> str:
        self.prompts.append((system_prompt, user_prompt))
        return self.responses[min(len(self.prompts), len(self.responses)) - 1]


@pytest.fixture
def hello_world_repository() -> MockRepositoryData:
    return MockRepositoryData(
        id=1296269,
        owner="octocat",
        name="hello-world",
        description="tiny express server",
        language="JavaScript",
        stars=42,
        forks=7,
        license="MIT License",
        files=dict(MOCK_HELLO_WORLD_FILES),
    )


@pytest.fixture
def empty_repository() -> MockRepositoryData:
    return MockRepositoryData(id=1296270, owner="octocat", name="empty")


@pytest.fixture
def mock_github(hello_world_repository: MockRepositoryData, empty_repository: MockRepositoryData) -> MockPyGithub:
    return MockPyGithub(repositories=[hello_world_repository, empty_repository])


@pytest.fixture
def client_factory(mock_github: MockPyGithub) -> GitHubClientFactory:
    def factory(credential: AccessCredential) -> ReadmeGitHubClient:
        assert credential.get_token() == MOCK_TOKEN
        return ReadmeGitHubClient(pygithub_client=mock_github)  # pyright: ignore[reportArgumentType]

    return factory


@pytest.fixture
def github_client(client_factory: GitHubClientFactory) -> ReadmeGitHubClient:
    return client_factory(AccessCredential.from_token(token=MOCK_TOKEN))


@pytest.fixture
def credential() -> AccessCredential:
    return AccessCredential.from_token(token=MOCK_TOKEN)


@pytest.fixture
def mock_generator() -> MockReadmeGenerator:
    return MockReadmeGenerator()


def handle_exclude_keys(dictionary: dict[str, Any], exclude_keys: list[str] | None = None) -> dict[str, Any]:
    if exclude_keys is None:
        return dictionary
    return {key: value for key, value in dictionary.items() if key not in exclude_keys}


@overload
def dump_for_snapshot(
    basemodel: None,
    /,
    exclude_keys: list[str] | None = None,
    exclude_none: bool = True,
    **dump_kwargs: Any,
) -> None: ...


@overload
def dump_for_snapshot(
    basemodel: BaseModel,
    /,
    exclude_keys: list[str] | None = None,
    exclude_none: bool = True,
    **dump_kwargs: Any,
) -> dict[str, Any]: ...


def dump_for_snapshot(
    basemodel: None | BaseModel,
    /,
    exclude_keys: list[str] | None = None,
    exclude_none: bool = True,
    **dump_kwargs: Any,
) -> dict[str, Any] | None:
    if basemodel is None:
        return None

    return handle_exclude_keys(basemodel.model_dump(exclude_none=exclude_none, **dump_kwargs), exclude_keys)


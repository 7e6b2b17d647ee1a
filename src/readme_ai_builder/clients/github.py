import asyncio
from collections.abc import Callable
from itertools import islice
from logging import Logger, getLogger
from typing import TYPE_CHECKING, Any, Literal, TypeVar, overload

from github import Auth, Github, GithubException, GithubRetry, RateLimitExceededException
from github.ContentFile import ContentFile as PyGithubContentFile
from requests import RequestException

from readme_ai_builder.clients.errors.github import (
    AuthenticationFailedError,
    RequestError,
    ResourceConflictError,
    ResourceNotFoundError,
    ResourceTypeMismatchError,
)
from readme_ai_builder.clients.models.github import (
    AuthenticatedUser,
    FileCommitResult,
    Repository,
    RepositoryFile,
    RepositorySummary,
)
from readme_ai_builder.models.repository.tree import DEFAULT_EXCLUDE_PATTERNS, RepositoryTree
from readme_ai_builder.utilities.settings import get_request_timeout

if TYPE_CHECKING:
    from github.Repository import Repository as PyGithubRepository

    from readme_ai_builder.models.credential import AccessCredential

NOT_FOUND_ERROR = 404
CONFLICT_ERROR = 409
AUTHENTICATION_ERRORS = {401, 403}

DEFAULT_LIST_REPOSITORIES_LIMIT = 30

# Longest wait between retries, including waits for a rate limit reset.
MAX_RETRY_BACKOFF_SECONDS = 10.0

# Request arguments too large or too sensitive to log.
UNLOGGED_REQUEST_ARGS = {"content"}

T = TypeVar("T")


def get_pygithub_client(credential: "AccessCredential", timeout: float | None = None) -> Github:
    # Retry server errors and rate limit errors up to 3 times. A rate limit that resets later than
    # MAX_RETRY_BACKOFF_SECONDS fails instead of waiting.
    retry = GithubRetry(total=3, backoff_max=MAX_RETRY_BACKOFF_SECONDS, max_rate_limit_wait=MAX_RETRY_BACKOFF_SECONDS)

    return Github(
        auth=Auth.Token(credential.get_token()),
        timeout=timeout or get_request_timeout(),  # pyright: ignore[reportArgumentType]
        retry=retry,
    )


class ReadmeGitHubClient:
    """Async access to the GitHub REST endpoints used to build and commit READMEs.

    PyGithub is blocking, every request runs in a worker thread.
    """

    pygithub_client: Github
    logger: Logger

    log_requests: bool
    log_responses: bool
    log_on_error: bool

    def __init__(
        self,
        pygithub_client: Github,
        logger: Logger | None = None,
        log_requests: bool = True,
        log_responses: bool = False,
        log_on_error: bool = True,
    ):
        self.pygithub_client = pygithub_client
        self.logger = logger or getLogger(__name__)
        self.log_requests = log_requests
        self.log_responses = log_responses
        self.log_on_error = log_on_error

    @classmethod
    def from_credential(cls, credential: "AccessCredential", logger: Logger | None = None) -> "ReadmeGitHubClient":
        return cls(pygithub_client=get_pygithub_client(credential=credential), logger=logger)

    def _get_loggers(
        self, log_request: bool | None = None, log_response: bool | None = None, log_on_error: bool | None = None
    ) -> tuple[Callable[[str], Any], Callable[[str], Any], Callable[[str], Any]]:
        request_logger = self.logger.info if log_request or self.log_requests else self.logger.debug
        response_logger = self.logger.info if log_response or self.log_responses else self.logger.debug
        error_logger = self.logger.exception if log_on_error or self.log_on_error else self.logger.debug
        return request_logger, response_logger, error_logger

    def _get_repository_handle(self, owner: str, repo: str) -> "PyGithubRepository":
        # Lazy, so no request is made until an endpoint under the repository is called.
        return self.pygithub_client.get_repo(f"{owner}/{repo}", lazy=True)

    @overload
    async def _perform_request(
        self,
        action: str,
        log_request: bool | None = None,
        log_response: bool | None = None,
        log_on_error: bool | None = None,
        error_on_not_found: Literal[False] = False,
        *,
        method: Callable[..., T],
        **request_args: Any,  # pyright: ignore[reportAny]
    ) -> T | None: ...

    @overload
    async def _perform_request(
        self,
        action: str,
        log_request: bool | None = None,
        log_response: bool | None = None,
        log_on_error: bool | None = None,
        error_on_not_found: Literal[True] = True,
        *,
        method: Callable[..., T],
        **request_args: Any,  # pyright: ignore[reportAny]
    ) -> T: ...

    async def _perform_request(
        self,
        action: str,
        log_request: bool | None = None,
        log_response: bool | None = None,
        log_on_error: bool | None = None,
        error_on_not_found: bool | None = None,
        *,
        method: Callable[..., T],
        **request_args: Any,  # pyright: ignore[reportAny]
    ) -> T | None:
        """Perform a request in a worker thread and return its result.

        Args:
            action: The action being performed.
            log_request: Whether to log the request.
            log_response: Whether to log the response.
            log_on_error: Whether to log on error.
            error_on_not_found: Whether to raise an error if the resource is not found.
            method: The blocking function performing the request.

        Raises:
            ResourceNotFoundError: If the resource is not found and error_on_not_found is True.
            AuthenticationFailedError: If GitHub rejects the credential.
            ResourceConflictError: If GitHub rejects a write as conflicting.
            RequestError: If the request fails for any other reason.
        """

        request_logger, response_logger, error_logger = self._get_loggers(
            log_request=log_request, log_response=log_response, log_on_error=log_on_error
        )

        logged_args = {key: value for key, value in request_args.items() if key not in UNLOGGED_REQUEST_ARGS}  # pyright: ignore[reportAny]

        request_logger(f"Performing {action} using {method.__name__} with kwargs {logged_args}")

        try:
            response: T = await asyncio.to_thread(method, **request_args)
        except GithubException as e:
            status_code: int = e.status

            if status_code == NOT_FOUND_ERROR:
                if error_on_not_found:
                    raise ResourceNotFoundError(action=action, resource=str(logged_args)) from e

                return None

            error_logger(f"GithubException performing {action} using {method.__name__} with kwargs {logged_args}: {e}")

            # Rate limits are reported as 403 but say nothing about the credential.
            if isinstance(e, RateLimitExceededException):
                raise RequestError(action=action, message=str(e), status_code=status_code) from e

            if status_code in AUTHENTICATION_ERRORS:
                raise AuthenticationFailedError(action=action, status_code=status_code, message=str(e)) from e

            if status_code == CONFLICT_ERROR:
                raise ResourceConflictError(action=action, resource=str(logged_args), message=str(e)) from e

            raise RequestError(action=action, message=str(e), status_code=status_code) from e
        except RequestException as e:
            error_logger(f"Error performing {action} using {method.__name__} with kwargs {logged_args}: {e}")

            raise RequestError(action=action, message=str(e)) from e

        response_logger(f"Response for {action} using {method.__name__} with kwargs {logged_args}: {response}")

        return response

    @overload
    async def get_repository(self, owner: str, repo: str, error_on_not_found: Literal[True] = True) -> Repository: ...

    @overload
    async def get_repository(self, owner: str, repo: str, error_on_not_found: Literal[False] = False) -> Repository | None: ...

    async def get_repository(
        self,
        owner: str,
        repo: str,
        error_on_not_found: bool = False,
    ) -> Repository | None:
        """Get a repository."""

        def get_repository(owner: str, repo: str) -> Repository:
            return Repository.from_pygithub(repository=self.pygithub_client.get_repo(f"{owner}/{repo}"))

        return await self._perform_request(
            action="Get repository",
            log_request=True,
            error_on_not_found=error_on_not_found,
            method=get_repository,
            owner=owner,
            repo=repo,
        )

    async def list_repositories(self, limit_results: int = DEFAULT_LIST_REPOSITORIES_LIMIT) -> list[RepositorySummary]:
        """List the repositories of the authenticated user, most recently updated first."""

        def list_repositories(sort: str, direction: str, limit_results: int) -> list[RepositorySummary]:
            repositories = self.pygithub_client.get_user().get_repos(sort=sort, direction=direction)

            return [RepositorySummary.from_pygithub(repository=repository) for repository in islice(repositories, limit_results)]

        return await self._perform_request(
            action="List repositories",
            log_request=True,
            error_on_not_found=True,
            method=list_repositories,
            sort="updated",
            direction="desc",
            limit_results=limit_results,
        )

    async def get_authenticated_user(self) -> AuthenticatedUser:
        """Get the user the credential belongs to."""

        def get_authenticated_user() -> AuthenticatedUser:
            return AuthenticatedUser.from_pygithub(user=self.pygithub_client.get_user())

        return await self._perform_request(
            action="Get authenticated user",
            log_request=True,
            error_on_not_found=True,
            method=get_authenticated_user,
        )

    async def get_repository_tree(
        self,
        owner: str,
        repo: str,
        ref: str,
        exclude_patterns: list[str] | None = None,
    ) -> RepositoryTree:
        """Get the recursive tree of a repository.

        Args:
            owner: The owner of the repository.
            repo: The name of the repository.
            ref: The ref of the branch or tag to get the tree from.
            exclude_patterns: fnmatch patterns for paths to leave out. Defaults to common noise like lock files
                              and vendored dependencies.
        """

        patterns: list[str] = DEFAULT_EXCLUDE_PATTERNS if exclude_patterns is None else exclude_patterns

        def get_repository_tree(owner: str, repo: str, ref: str) -> RepositoryTree:
            git_tree = self._get_repository_handle(owner=owner, repo=repo).get_git_tree(sha=ref, recursive=True)

            return RepositoryTree.from_git_tree(git_tree=git_tree, exclude_patterns=patterns)

        return await self._perform_request(
            action="Get repository tree",
            log_request=True,
            error_on_not_found=True,
            method=get_repository_tree,
            owner=owner,
            repo=repo,
            ref=ref,
        )

    @overload
    async def get_file(
        self, owner: str, repo: str, path: str, ref: str | None = None, error_on_not_found: Literal[False] = False
    ) -> RepositoryFile | None: ...

    @overload
    async def get_file(
        self, owner: str, repo: str, path: str, ref: str | None = None, error_on_not_found: Literal[True] = True
    ) -> RepositoryFile: ...

    async def get_file(
        self,
        owner: str,
        repo: str,
        path: str,
        ref: str | None = None,
        error_on_not_found: bool = False,
    ) -> RepositoryFile | None:
        """Get a file from a repository.

        Args:
            owner: The owner of the repository.
            repo: The name of the repository.
            path: The path of the file.
            ref: The ref of the branch or tag to get the file from. If not provided, the default branch will be used.
            error_on_not_found: Whether to raise an error if the file is not found.
        """

        def get_file(owner: str, repo: str, path: str, **ref_args: str) -> RepositoryFile:
            content = self._get_repository_handle(owner=owner, repo=repo).get_contents(path, **ref_args)

            # A directory is returned as a listing of its entries.
            if isinstance(content, list):
                raise ResourceTypeMismatchError(action="Get file", resource=path, expected_type=PyGithubContentFile, actual_type=list)

            return RepositoryFile.from_pygithub(content_file=content)

        ref_args: dict[str, str] = {"ref": ref} if ref else {}

        return await self._perform_request(
            action="Get file",
            log_request=True,
            error_on_not_found=error_on_not_found,
            method=get_file,
            owner=owner,
            repo=repo,
            path=path,
            **ref_args,
        )

    async def create_or_update_file(
        self,
        owner: str,
        repo: str,
        path: str,
        content: str,
        message: str,
        sha: str | None = None,
    ) -> FileCommitResult:
        """Create or update a file in a single commit.

        Args:
            owner: The owner of the repository.
            repo: The name of the repository.
            path: The path of the file.
            content: The new text content of the file.
            message: The commit message.
            sha: The blob SHA of the file being replaced. Must be omitted when creating the file. GitHub rejects
                 the write with a conflict if it no longer matches the current file.
        """

        def create_or_update_file(owner: str, repo: str, path: str, content: str, message: str, sha: str | None) -> FileCommitResult:
            repository = self._get_repository_handle(owner=owner, repo=repo)

            if sha:
                file_commit = repository.update_file(path=path, message=message, content=content, sha=sha)
            else:
                file_commit = repository.create_file(path=path, message=message, content=content)

            return FileCommitResult.from_pygithub(path=path, file_commit=file_commit)

        return await self._perform_request(
            action="Create or update file",
            log_request=True,
            error_on_not_found=True,
            method=create_or_update_file,
            owner=owner,
            repo=repo,
            path=path,
            content=content,
            message=message,
            sha=sha,
        )


GitHubClientFactory = Callable[["AccessCredential"], ReadmeGitHubClient]


def new_github_client(credential: "AccessCredential") -> ReadmeGitHubClient:
    return ReadmeGitHubClient.from_credential(credential=credential)

from logging import Logger

from fastmcp.utilities.logging import get_logger

from readme_ai_builder.clients.errors.github import AuthenticationFailedError, ClientError, RequestError, ResourceConflictError
from readme_ai_builder.clients.github import GitHubClientFactory, ReadmeGitHubClient, new_github_client
from readme_ai_builder.clients.models.github import FileCommitResult, RepositoryFile
from readme_ai_builder.errors import AuthError, CommitError, ConflictError, UnmodifiedDraftError
from readme_ai_builder.models.credential import AccessCredential
from readme_ai_builder.models.readme import INITIAL_README_CONTENT, CommitRequest, CommitResult, FileRevision
from readme_ai_builder.utilities.settings import get_commit_message

README_PATH = "README.md"

# GitHub answers a create without a sha with 422 when the file already exists.
FILE_EXISTS_ERROR = 422


def is_unmodified_draft(content: str) -> bool:
    return not content.strip() or content.strip() == INITIAL_README_CONTENT.strip()


class CommitWriter:
    """Writes README.md back to a repository.

    A write replaces exactly the revision that was read before it. GitHub rejects the write with a conflict when the
    file changed in between, and the conflict is surfaced to the caller instead of being retried.
    """

    def __init__(
        self,
        client_factory: GitHubClientFactory | None = None,
        commit_message: str | None = None,
        logger: Logger | None = None,
    ):
        self.client_factory: GitHubClientFactory = client_factory or new_github_client
        self.commit_message: str = commit_message or get_commit_message()
        self.logger: Logger = logger or get_logger(name=__name__)

    async def read_revision(self, credential: AccessCredential, owner: str, repo: str) -> FileRevision | None:
        """Read the revision of the current README.md, or None when the repository has none.

        Raises:
            AuthError: If the credential is rejected.
            CommitError: If the revision cannot be read.
        """

        client: ReadmeGitHubClient = self.client_factory(credential)

        try:
            readme: RepositoryFile | None = await client.get_file(owner=owner, repo=repo, path=README_PATH, error_on_not_found=False)
        except AuthenticationFailedError as e:
            raise AuthError(message="GitHub rejected the access credential.", extra_info={"repository": f"{owner}/{repo}"}) from e
        except ClientError as e:
            raise CommitError(
                message="Could not read the current README revision.", extra_info={"repository": f"{owner}/{repo}", "error": str(e)}
            ) from e

        if readme is None:
            return None

        return FileRevision(path=readme.path, sha=readme.sha)

    async def write(self, credential: AccessCredential, request: CommitRequest) -> CommitResult:
        """Write README.md, replacing the prior revision of the request if it has one.

        Raises:
            UnmodifiedDraftError: If the content is blank or still the initial placeholder.
            ConflictError: If README.md changed after the prior revision was read, or was created after it was read
                as absent.
            AuthError: If the credential is rejected.
            CommitError: If GitHub rejects the write for any other reason.
        """

        owner, repo = request.owner, request.repo

        if is_unmodified_draft(content=request.content):
            raise UnmodifiedDraftError(owner=owner, repo=repo)

        client: ReadmeGitHubClient = self.client_factory(credential)

        sha: str | None = request.prior_revision.sha if request.prior_revision else None

        try:
            file_commit: FileCommitResult = await client.create_or_update_file(
                owner=owner, repo=repo, path=README_PATH, content=request.content, message=self.commit_message, sha=sha
            )
        except ResourceConflictError as e:
            raise ConflictError(owner=owner, repo=repo, path=README_PATH, revision=sha) from e
        except AuthenticationFailedError as e:
            raise AuthError(message="GitHub rejected the access credential.", extra_info={"repository": f"{owner}/{repo}"}) from e
        except ClientError as e:
            # README.md was absent when read and has been created since.
            if sha is None and isinstance(e, RequestError) and e.status_code == FILE_EXISTS_ERROR:
                raise ConflictError(owner=owner, repo=repo, path=README_PATH, revision=None) from e

            raise CommitError(message="GitHub rejected the README write.", extra_info={"repository": f"{owner}/{repo}", "error": str(e)}) from e

        self.logger.info(f"Committed {README_PATH} to {owner}/{repo} in {file_commit.commit_sha}")

        return CommitResult(
            committed_url=file_commit.commit_url,
            commit_sha=file_commit.commit_sha,
            path=file_commit.path,
            created=request.prior_revision is None,
        )

    async def commit(self, credential: AccessCredential, owner: str, repo: str, content: str) -> CommitResult:
        """Read the current revision of README.md and write the content over it."""

        if is_unmodified_draft(content=content):
            raise UnmodifiedDraftError(owner=owner, repo=repo)

        prior_revision: FileRevision | None = await self.read_revision(credential=credential, owner=owner, repo=repo)

        return await self.write(
            credential=credential,
            request=CommitRequest(owner=owner, repo=repo, content=content, prior_revision=prior_revision),
        )

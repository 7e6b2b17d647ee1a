from logging import Logger

from fastmcp.utilities.logging import get_logger

from readme_ai_builder.clients.errors.github import AuthenticationFailedError, ClientError
from readme_ai_builder.clients.github import GitHubClientFactory, ReadmeGitHubClient, new_github_client
from readme_ai_builder.clients.models.github import Repository, RepositoryFile
from readme_ai_builder.errors import AuthError, NotFoundError
from readme_ai_builder.models.credential import AccessCredential
from readme_ai_builder.models.readme import NO_LICENSE_FOUND, NO_MANIFEST_FOUND, RepositorySnapshot
from readme_ai_builder.models.repository.tree import RepositoryTree
from readme_ai_builder.pipeline.manifests import MANIFEST_PARSERS, ManifestParseError, parse_manifest

# Bounds the size of the prompt.
MAX_FILE_STRUCTURE_ENTRIES = 20


class SnapshotBuilder:
    """Builds a RepositorySnapshot from the GitHub API.

    Only the repository metadata is required. The file tree and the dependency manifest are
    secondary signals: when they cannot be fetched the snapshot falls back to an empty listing
    and to a sentinel value.
    """

    def __init__(self, client_factory: GitHubClientFactory | None = None, logger: Logger | None = None):
        self.client_factory: GitHubClientFactory = client_factory or new_github_client
        self.logger: Logger = logger or get_logger(name=__name__)

    async def build_snapshot(self, credential: AccessCredential, owner: str, repo: str) -> RepositorySnapshot:
        """Build a snapshot of a repository.

        Raises:
            AuthError: If the credential is rejected.
            NotFoundError: If the repository does not exist or cannot be read.
        """

        client: ReadmeGitHubClient = self.client_factory(credential)

        repository: Repository = await self._get_repository(client=client, owner=owner, repo=repo)

        repository_tree: RepositoryTree | None = await self._get_repository_tree(client=client, repository=repository)

        file_structure: tuple[str, ...] = ()
        if repository_tree is not None:
            file_structure = tuple(repository_tree.truncate(limit_results=MAX_FILE_STRUCTURE_ENTRIES).file_paths())

        dependencies: str = await self._get_dependencies(client=client, repository=repository, repository_tree=repository_tree)

        self.logger.info(f"Built snapshot of {owner}/{repo} with {len(file_structure)} files and dependencies: {dependencies}")

        return RepositorySnapshot(
            id=repository.id,
            name=repository.name,
            owner=repository.owner,
            description=repository.description,
            language=repository.language,
            stars=repository.stars,
            forks=repository.forks,
            updated_at=repository.updated_at,
            default_branch=repository.default_branch,
            file_structure=file_structure,
            dependencies=dependencies,
            license=repository.license or NO_LICENSE_FOUND,
        )

    async def _get_repository(self, client: ReadmeGitHubClient, owner: str, repo: str) -> Repository:
        try:
            repository: Repository | None = await client.get_repository(owner=owner, repo=repo, error_on_not_found=False)
        except AuthenticationFailedError as e:
            raise AuthError(message="GitHub rejected the access credential.", extra_info={"repository": f"{owner}/{repo}"}) from e
        except ClientError as e:
            raise NotFoundError(
                message="The repository could not be read.", extra_info={"repository": f"{owner}/{repo}", "error": str(e)}
            ) from e

        if repository is None:
            raise NotFoundError(message="The repository does not exist or is not accessible.", extra_info={"repository": f"{owner}/{repo}"})

        return repository

    async def _get_repository_tree(self, client: ReadmeGitHubClient, repository: Repository) -> RepositoryTree | None:
        try:
            return await client.get_repository_tree(owner=repository.owner, repo=repository.name, ref=repository.default_branch)
        except ClientError as e:
            self.logger.warning(f"Could not fetch the tree of {repository.owner}/{repository.name}, continuing without it: {e}")
            return None

    async def _get_dependencies(self, client: ReadmeGitHubClient, repository: Repository, repository_tree: RepositoryTree | None) -> str:
        candidates: list[str] = list(MANIFEST_PARSERS)

        if repository_tree is not None:
            candidates = [candidate for candidate in candidates if repository_tree.has_root_file(candidate)]

        for candidate in candidates:
            try:
                manifest: RepositoryFile | None = await client.get_file(
                    owner=repository.owner, repo=repository.name, path=candidate, ref=repository.default_branch
                )
            except ClientError as e:
                self.logger.warning(f"Could not fetch {candidate} from {repository.owner}/{repository.name}: {e}")
                continue

            if manifest is None or manifest.content is None:
                continue

            try:
                names: list[str] = parse_manifest(path=candidate, text=manifest.content)
            except ManifestParseError as e:
                self.logger.warning(f"Could not parse {candidate} from {repository.owner}/{repository.name}: {e}")
                return NO_MANIFEST_FOUND

            return ", ".join(names) if names else NO_MANIFEST_FOUND

        return NO_MANIFEST_FOUND

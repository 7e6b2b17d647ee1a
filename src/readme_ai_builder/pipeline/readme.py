from logging import Logger

from fastmcp.utilities.logging import get_logger

from readme_ai_builder.clients.errors.github import AuthenticationFailedError, ClientError
from readme_ai_builder.clients.github import GitHubClientFactory, new_github_client
from readme_ai_builder.clients.models.github import RepositorySummary
from readme_ai_builder.errors import AuthError, NotFoundError
from readme_ai_builder.generation.base import ReadmeGenerator
from readme_ai_builder.generation.handler import get_readme_generator
from readme_ai_builder.models.credential import AccessCredential
from readme_ai_builder.models.readme import (
    CommitResult,
    GenerationRequest,
    GenerationResult,
    ReadmeDraft,
    RepositorySnapshot,
    SectionSuggestions,
)
from readme_ai_builder.pipeline.commit import CommitWriter
from readme_ai_builder.pipeline.prompt import compile_prompt
from readme_ai_builder.pipeline.snapshot import SnapshotBuilder


class ReadmePipeline:
    """Snapshot a repository, compile a prompt, generate a draft and commit the reviewed draft.

    Every call receives the credential it runs with. Nothing is shared between calls.
    """

    def __init__(
        self,
        snapshot_builder: SnapshotBuilder | None = None,
        generator: ReadmeGenerator | None = None,
        commit_writer: CommitWriter | None = None,
        client_factory: GitHubClientFactory | None = None,
        logger: Logger | None = None,
    ):
        self.client_factory: GitHubClientFactory = client_factory or new_github_client
        self.snapshot_builder: SnapshotBuilder = snapshot_builder or SnapshotBuilder(client_factory=self.client_factory)
        self.commit_writer: CommitWriter = commit_writer or CommitWriter(client_factory=self.client_factory)
        self._generator: ReadmeGenerator | None = generator
        self.logger: Logger = logger or get_logger(name=__name__)

    @property
    def generator(self) -> ReadmeGenerator:
        if self._generator is None:
            self._generator = get_readme_generator()

        return self._generator

    async def list_repositories(self, credential: AccessCredential) -> list[RepositorySummary]:
        """List the repositories of the signed-in user, most recently updated first."""

        client = self.client_factory(credential)

        try:
            return await client.list_repositories()
        except AuthenticationFailedError as e:
            raise AuthError(message="GitHub rejected the access credential.") from e
        except ClientError as e:
            raise NotFoundError(message="The repositories of the user could not be listed.", extra_info={"error": str(e)}) from e

    async def analyze_repository(self, credential: AccessCredential, owner: str, repo: str) -> RepositorySnapshot:
        return await self.snapshot_builder.build_snapshot(credential=credential, owner=owner, repo=repo)

    async def suggest_sections(self, credential: AccessCredential, owner: str, repo: str) -> SectionSuggestions:
        snapshot: RepositorySnapshot = await self.snapshot_builder.build_snapshot(credential=credential, owner=owner, repo=repo)

        return await self.generator.suggest_sections(snapshot=snapshot)

    async def draft_readme(self, credential: AccessCredential, owner: str, repo: str, custom_instruction: str | None = None) -> ReadmeDraft:
        """Generate a README draft for a repository.

        Raises:
            AuthError: If the credential is rejected.
            NotFoundError: If the repository cannot be read.
            GenerationError: If the generation backend fails. No partial content is returned.
        """

        snapshot: RepositorySnapshot = await self.snapshot_builder.build_snapshot(credential=credential, owner=owner, repo=repo)

        request: GenerationRequest = compile_prompt(snapshot=snapshot, custom_instruction=custom_instruction)

        result: GenerationResult = await self.generator.generate(request=request)

        self.logger.info(f"Generated a README draft of {len(result.readme_content)} characters for {owner}/{repo}")

        return ReadmeDraft(owner=owner, repo=repo, readme_content=result.readme_content, request=request)

    async def commit_readme(self, credential: AccessCredential, owner: str, repo: str, content: str) -> CommitResult:
        """Commit the reviewed draft to README.md."""

        return await self.commit_writer.commit(credential=credential, owner=owner, repo=repo, content=content)
